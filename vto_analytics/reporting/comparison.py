"""
Period-over-period comparison of the headline KPIs.
"""

from vto_analytics.core.dates import calculate_trend, format_period, get_previous_period_range
from vto_analytics.core.models import DateRange
from vto_analytics.reporting.contracts import (
    ComparisonMetrics,
    PerformanceMetrics,
    PeriodChanges,
    PeriodSnapshot,
    SummaryMetrics,
)
from vto_analytics.reporting.metrics import MetricsService


def _snapshot(
    date_range: DateRange,
    summary: SummaryMetrics,
    performance: PerformanceMetrics,
) -> PeriodSnapshot:
    return PeriodSnapshot(
        period=format_period(date_range),
        avatars=summary.total_avatars,
        tryons=summary.total_tryons,
        completion_rate=summary.avatar_completion_rate,
        conversion_rate=summary.tryon_conversion_rate,
        avg_latency_ms=performance.avg_tryon_latency_ms,
        error_rate=summary.error_rate,
    )


def get_comparison_metrics(service: MetricsService, date_range: DateRange) -> ComparisonMetrics:
    """
    Compare ``date_range`` with the equal-length period before it.

    A range missing either bound has no previous period; the previous
    side then covers the full dataset ("All Time").
    """
    previous_range = get_previous_period_range(date_range)

    current = _snapshot(
        date_range,
        service.get_summary_metrics(date_range),
        service.get_performance_metrics(date_range),
    )
    previous = _snapshot(
        previous_range,
        service.get_summary_metrics(previous_range),
        service.get_performance_metrics(previous_range),
    )

    changes = PeriodChanges(
        avatars=calculate_trend(current.avatars, previous.avatars),
        tryons=calculate_trend(current.tryons, previous.tryons),
        completion_rate=calculate_trend(current.completion_rate, previous.completion_rate),
        conversion_rate=calculate_trend(current.conversion_rate, previous.conversion_rate),
        avg_latency_ms=calculate_trend(current.avg_latency_ms, previous.avg_latency_ms),
        error_rate=calculate_trend(current.error_rate, previous.error_rate),
    )

    return ComparisonMetrics(current=current, previous=previous, changes=changes)


__all__ = ["get_comparison_metrics"]
