"""
vto-analytics

Aggregate metrics and rule-based recommendations for a
virtual try-on product, computed over a static dataset.
"""

from .__version__ import __version__

from .core.dataset import Dataset, DatasetError, load_dataset
from .core.models import DateRange
from .reporting.metrics import MetricsService
from .reporting.comparison import get_comparison_metrics
from .policy.engine import RecommendationEngine, get_recommendations

__all__ = [
    "__version__",
    "Dataset",
    "DatasetError",
    "load_dataset",
    "DateRange",
    "MetricsService",
    "get_comparison_metrics",
    "RecommendationEngine",
    "get_recommendations",
]
