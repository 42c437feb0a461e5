from vto_analytics.core.models import DateRange
from vto_analytics.reporting.comparison import get_comparison_metrics


def test_comparison_week_over_week(service):
    result = get_comparison_metrics(service, DateRange("2025-12-08", "2025-12-14"))

    assert result.current.period == "Dec 8 - Dec 14"
    assert result.previous.period == "Dec 1 - Dec 7"

    assert (result.current.avatars, result.previous.avatars) == (1, 2)
    assert (result.current.tryons, result.previous.tryons) == (3, 4)
    assert (result.current.completion_rate, result.previous.completion_rate) == (100, 67)
    assert (result.current.conversion_rate, result.previous.conversion_rate) == (100, 100)
    assert (result.current.avg_latency_ms, result.previous.avg_latency_ms) == (2667, 2500)
    assert (result.current.error_rate, result.previous.error_rate) == (0, 20)


def test_comparison_changes(service):
    changes = get_comparison_metrics(service, DateRange("2025-12-08", "2025-12-14")).changes

    assert changes.to_dict() == {
        "avatars": -50,
        "tryons": -25,
        "completion_rate": 49,
        "conversion_rate": 0,
        "avg_latency_ms": 7,
        "error_rate": -100,
    }


def test_comparison_all_time_shows_no_change(service):
    result = get_comparison_metrics(service, DateRange())

    assert result.current.period == "All Time"
    assert result.previous.period == "All Time"
    assert result.current == result.previous
    assert all(v == 0 for v in result.changes.to_dict().values())


def test_comparison_previous_zero_reports_full_increase(service):
    # nothing happened in the week before Dec 1
    result = get_comparison_metrics(service, DateRange("2025-12-01", "2025-12-07"))

    assert result.previous.avatars == 0
    assert result.changes.avatars == 100
    assert result.changes.error_rate == 100
