from .models import DateRange
from .dates import (
    filter_by_date_range,
    group_by_date,
    get_previous_period_range,
    calculate_trend,
)

__all__ = [
    "DateRange",
    "filter_by_date_range",
    "group_by_date",
    "get_previous_period_range",
    "calculate_trend",
]
