"""
Date handling for the aggregation core.

All timestamps are ISO-8601 strings stored in UTC. Date-only bounds
(``YYYY-MM-DD``) are read as UTC midnight, so an end bound keeps records
up to and including ``00:00:00`` of that day and nothing later.
"""

import math
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence, TypeVar

from dateutil import tz
from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from vto_analytics.core.kpi_utils import round_half_up
from vto_analytics.core.models import DateRange

T = TypeVar("T")

ALL_TIME_LABEL = "All Time"

# English abbreviations regardless of process locale
MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_instant(value: str) -> datetime:
    """
    Parse an ISO date or timestamp into an aware UTC datetime.

    Raises ValueError for anything the ISO parser rejects.
    """
    parsed = isoparse(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz.UTC)
    return parsed.astimezone(tz.UTC)


# -------------------------------------------------
# FILTERING & GROUPING
# -------------------------------------------------
def filter_by_date_range(records: Sequence[T], date_range: DateRange) -> List[T]:
    start = parse_instant(date_range.start_date) if date_range.start_date else None
    end = parse_instant(date_range.end_date) if date_range.end_date else None

    if start is None and end is None:
        return list(records)

    kept: List[T] = []
    for record in records:
        instant = parse_instant(record.created_at)
        if start is not None and start > instant:
            continue
        if end is not None and end < instant:
            continue
        kept.append(record)

    return kept


def group_by_date(records: Sequence[T]) -> Dict[str, List[T]]:
    """Bucket records by the date part of their stored timestamp."""
    grouped: Dict[str, List[T]] = OrderedDict()

    for record in records:
        day = record.created_at.split("T")[0]
        grouped.setdefault(day, []).append(record)

    return grouped


# -------------------------------------------------
# PERIOD ARITHMETIC
# -------------------------------------------------
def get_previous_period_range(date_range: DateRange) -> DateRange:
    """
    Equal-length window ending the day before ``date_range`` starts.

    Open-ended ranges have no previous period and yield an empty range.
    """
    if not date_range.is_bounded:
        return DateRange()

    start = parse_instant(date_range.start_date)
    end = parse_instant(date_range.end_date)

    period_days = math.ceil((end - start) / timedelta(days=1))
    previous_end = start - relativedelta(days=1)
    previous_start = previous_end - relativedelta(days=period_days)

    return DateRange(
        start_date=previous_start.date().isoformat(),
        end_date=previous_end.date().isoformat(),
    )


def calculate_trend(current: float, previous: float) -> int:
    """Percent change from ``previous`` to ``current``."""
    if previous == 0:
        return 100 if current > 0 else 0
    return round_half_up((current - previous) / previous * 100)


def format_period(date_range: DateRange) -> str:
    if not date_range.is_bounded:
        return ALL_TIME_LABEL

    start = parse_instant(date_range.start_date)
    end = parse_instant(date_range.end_date)
    return (
        f"{MONTH_ABBR[start.month - 1]} {start.day} - "
        f"{MONTH_ABBR[end.month - 1]} {end.day}"
    )


# -------------------------------------------------
# RANGE CONSTRUCTION
# -------------------------------------------------
def parse_date_range(query: Mapping[str, Optional[str]]) -> DateRange:
    return DateRange(
        start_date=query.get("startDate") or None,
        end_date=query.get("endDate") or None,
    )


def get_date_range(days: int, today: Optional[date] = None) -> DateRange:
    """Range covering the last ``days`` days up to ``today``."""
    end = today or datetime.now(tz.UTC).date()
    start = end - timedelta(days=days)
    return DateRange(start_date=start.isoformat(), end_date=end.isoformat())


__all__ = [
    "parse_instant",
    "filter_by_date_range",
    "group_by_date",
    "get_previous_period_range",
    "calculate_trend",
    "format_period",
    "parse_date_range",
    "get_date_range",
]
