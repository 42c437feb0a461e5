from .engine import RecommendationEngine, get_recommendations
from .schema import Recommendation, RecommendationThresholds

__all__ = [
    "RecommendationEngine",
    "get_recommendations",
    "Recommendation",
    "RecommendationThresholds",
]
