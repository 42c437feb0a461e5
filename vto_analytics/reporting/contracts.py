"""
Reporting Contracts
-------------------
Fixed-shape output structures produced by the metrics service.

Rules:
- Counts are ints, rates are integer percentages (0-100)
- Time series are sorted ascending by ``YYYY-MM-DD`` day
- ``to_dict()`` gives the plain structure for JSON / CSV consumers
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


class _Report:
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =====================================================
# SERIES / DISTRIBUTION POINTS
# =====================================================

@dataclass
class DailyCount:
    date: str
    count: int


@dataclass
class CategoryCount:
    category: str
    count: int


@dataclass
class CategoryCoverage:
    category: str
    total: int
    enabled: int


@dataclass
class TopProduct:
    id: str
    name: str
    tryons: int


@dataclass
class RangeBucket:
    range: str
    count: int


@dataclass
class GenderCount:
    gender: str
    count: int


@dataclass
class CountryCount:
    country: str
    count: int


@dataclass
class SizeCount:
    size: str
    count: int


@dataclass
class LatencyPoint:
    date: str
    avatar: int
    tryon: int


@dataclass
class ErrorPoint:
    date: str
    avatar_errors: int
    tryon_errors: int


# =====================================================
# REPORTS
# =====================================================

@dataclass
class SummaryTrends(_Report):
    avatars: int = 0
    tryons: int = 0
    completion_rate: int = 0


@dataclass
class SummaryMetrics(_Report):
    total_avatars: int
    total_tryons: int
    avatar_completion_rate: int
    tryon_conversion_rate: int
    sku_coverage: int
    avg_latency_ms: int
    error_rate: int
    trends: SummaryTrends = field(default_factory=SummaryTrends)


@dataclass
class AvatarMetrics(_Report):
    total: int
    successful: int
    failed: int
    completion_rate: int
    avg_generation_time_ms: int
    timeline: List[DailyCount]


@dataclass
class TryonMetrics(_Report):
    total: int
    successful: int
    failed: int
    avg_generation_time_ms: int
    by_category: List[CategoryCount]
    timeline: List[DailyCount]
    avg_per_user: float


@dataclass
class ProductMetrics(_Report):
    total_products: int
    enabled_products: int
    sku_coverage: int
    by_category: List[CategoryCoverage]
    top_products: List[TopProduct]


@dataclass
class ShopperMetrics(_Report):
    total: int
    completed_onboarding: int
    height_distribution: List[RangeBucket]
    age_distribution: List[RangeBucket]
    gender_distribution: List[GenderCount]
    country_distribution: List[CountryCount]
    size_recommendations: List[SizeCount]


@dataclass
class PerformanceMetrics(_Report):
    avg_avatar_latency_ms: int
    avg_tryon_latency_ms: int
    avatar_error_rate: int
    tryon_error_rate: int
    latency_timeline: List[LatencyPoint]
    error_timeline: List[ErrorPoint]


@dataclass
class FunnelStage(_Report):
    stage: str
    count: int
    percentage: int


# =====================================================
# COMPARISON
# =====================================================

@dataclass
class PeriodSnapshot(_Report):
    period: str
    avatars: int
    tryons: int
    completion_rate: int
    conversion_rate: int
    avg_latency_ms: int
    error_rate: int


@dataclass
class PeriodChanges(_Report):
    avatars: int
    tryons: int
    completion_rate: int
    conversion_rate: int
    avg_latency_ms: int
    error_rate: int


@dataclass
class ComparisonMetrics(_Report):
    current: PeriodSnapshot
    previous: PeriodSnapshot
    changes: PeriodChanges
