import re
from datetime import date, datetime
from typing import Optional

from dateutil import tz
from dateutil.parser import isoparse

from vto_analytics.core.models import DateRange

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DateRangeError(ValueError):
    """
    Rejected date range.

    ``error`` is a short classification, ``message`` the user-facing
    explanation. Neither repeats the rejected input.
    """

    def __init__(self, error: str, message: str):
        super().__init__(f"{error}: {message}")
        self.error = error
        self.message = message

    def to_dict(self):
        return {"error": self.error, "message": self.message}


def _check_date(name: str, value: str, today: date) -> date:
    if not DATE_PATTERN.match(value):
        raise DateRangeError(
            f"Invalid {name} format", f"{name} must be in YYYY-MM-DD format"
        )

    try:
        parsed = isoparse(value).date()
    except ValueError:
        raise DateRangeError(f"Invalid {name}", f"{name} is not a valid date") from None

    if parsed > today:
        raise DateRangeError(f"Invalid {name}", f"{name} cannot be in the future")

    return parsed


def validate_date_range(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    today: Optional[date] = None,
) -> DateRange:
    """
    Validate raw range bounds before they reach the metrics service.

    Checks, in order: format, calendar validity and not-in-future for
    each bound, then that start is not after end.
    """
    if not start_date and not end_date:
        return DateRange()

    today = today or datetime.now(tz.UTC).date()

    start = _check_date("startDate", start_date, today) if start_date else None
    end = _check_date("endDate", end_date, today) if end_date else None

    if start and end and start > end:
        raise DateRangeError(
            "Invalid date range", "startDate must be before or equal to endDate"
        )

    return DateRange(start_date=start_date or None, end_date=end_date or None)
