from datetime import date

import pytest

from vto_analytics.core.models import DateRange
from vto_analytics.core.validator import DateRangeError, validate_date_range

TODAY = date(2025, 12, 20)


def test_empty_bounds_give_all_time():
    assert validate_date_range(None, None, today=TODAY) == DateRange()
    assert validate_date_range("", "", today=TODAY) == DateRange()


def test_valid_range_passes_through():
    result = validate_date_range("2025-12-01", "2025-12-14", today=TODAY)
    assert result == DateRange("2025-12-01", "2025-12-14")


def test_single_bound_allowed():
    assert validate_date_range(end_date="2025-12-14", today=TODAY) == DateRange(end_date="2025-12-14")


def test_equal_bounds_allowed():
    assert validate_date_range("2025-12-10", "2025-12-10", today=TODAY).is_bounded


@pytest.mark.parametrize("value", ["12/01/2025", "2025-1-01", "2025-12-01T00:00:00Z", "yesterday"])
def test_bad_format(value):
    with pytest.raises(DateRangeError) as err:
        validate_date_range(start_date=value, today=TODAY)

    assert err.value.error == "Invalid startDate format"
    assert err.value.message == "startDate must be in YYYY-MM-DD format"


def test_impossible_calendar_date():
    with pytest.raises(DateRangeError) as err:
        validate_date_range(end_date="2025-02-30", today=TODAY)

    assert err.value.to_dict() == {
        "error": "Invalid endDate",
        "message": "endDate is not a valid date",
    }


def test_future_date_rejected():
    with pytest.raises(DateRangeError) as err:
        validate_date_range(end_date="2025-12-21", today=TODAY)

    assert err.value.message == "endDate cannot be in the future"


def test_start_after_end_rejected():
    with pytest.raises(DateRangeError) as err:
        validate_date_range("2025-12-14", "2025-12-01", today=TODAY)

    assert err.value.error == "Invalid date range"
    assert err.value.message == "startDate must be before or equal to endDate"


def test_error_message_does_not_echo_input():
    with pytest.raises(DateRangeError) as err:
        validate_date_range(start_date="<script>", today=TODAY)

    assert "<script>" not in str(err.value)


def test_range_error_is_value_error():
    assert issubclass(DateRangeError, ValueError)
