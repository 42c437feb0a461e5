"""
Metrics Service

Aggregates the injected dataset into fixed-shape reports for a date
range. Every call is pure: it only reads the dataset and returns fresh
report objects, so identical inputs always give identical reports.
"""

import logging
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from vto_analytics.core.dataset import Dataset
from vto_analytics.core.dates import (
    calculate_trend,
    filter_by_date_range,
    get_previous_period_range,
    group_by_date,
)
from vto_analytics.core.kpi_utils import round_half_up, safe_mean, safe_rate, to_frame
from vto_analytics.core.models import (
    CATEGORY_LABELS,
    Avatar,
    DateRange,
    EventType,
    Event,
    Product,
    ProductCategory,
    Shopper,
    SizeRecommendation,
    TryOn,
)
from vto_analytics.reporting.contracts import (
    AvatarMetrics,
    CategoryCount,
    CategoryCoverage,
    CountryCount,
    DailyCount,
    ErrorPoint,
    FunnelStage,
    GenderCount,
    LatencyPoint,
    PerformanceMetrics,
    ProductMetrics,
    RangeBucket,
    ShopperMetrics,
    SizeCount,
    SummaryMetrics,
    SummaryTrends,
    TopProduct,
    TryonMetrics,
)

logger = logging.getLogger(__name__)


# =====================================================
# FIXED BUCKETS
# =====================================================

HEIGHT_RANGES: List[Tuple[str, int, int]] = [
    ("150-159cm", 150, 159),
    ("160-169cm", 160, 169),
    ("170-179cm", 170, 179),
    ("180-189cm", 180, 189),
    ("190+cm", 190, 999),
]

AGE_RANGES: List[Tuple[str, int, int]] = [
    ("18-24", 18, 24),
    ("25-34", 25, 34),
    ("35-44", 35, 44),
    ("45+", 45, 999),
]

SIZE_ORDER: List[str] = [
    "XS", "S", "M", "L", "XL", "XXL",
    "28", "30", "32", "34", "36", "38",
]

FUNNEL_STAGES: List[Tuple[str, EventType]] = [
    ("Started Onboarding", EventType.ONBOARDING_STARTED),
    ("Photo Uploaded", EventType.PHOTO_UPLOADED),
    ("Avatar Created", EventType.AVATAR_CREATED),
    ("Try-on Completed", EventType.TRYON_COMPLETED),
    ("Purchase", EventType.PURCHASE),
]

TOP_PRODUCTS_LIMIT = 10
UNKNOWN_PRODUCT = "Unknown"


# =====================================================
# HELPERS
# =====================================================

def _label(value: str) -> str:
    return value[:1].upper() + value[1:]


def _size_rank(size: str) -> int:
    # Sizes outside the canonical order go last
    try:
        return SIZE_ORDER.index(size)
    except ValueError:
        return len(SIZE_ORDER)


def _mean_ms(records: Sequence) -> int:
    if not records:
        return 0
    return round_half_up(sum(r.generation_time_ms for r in records) / len(records))


def _success_timeline(records: Sequence) -> List[DailyCount]:
    grouped = group_by_date(records)
    return [
        DailyCount(date=day, count=sum(1 for r in items if r.success))
        for day, items in sorted(grouped.items())
    ]


def _counts_in_order(series: pd.Series) -> pd.Series:
    """Value counts keyed in order of first appearance."""
    return series.groupby(series, sort=False).size()


# =====================================================
# SERVICE
# =====================================================

class MetricsService:
    """
    Read-only aggregation over a ``Dataset``.

    The catalog has no timestamps, so product totals and coverage
    always use the full catalog regardless of the requested range.
    """

    def __init__(self, dataset: Dataset):
        self.dataset = dataset
        self._products_by_id: Dict[str, Product] = {p.id: p for p in dataset.products}

    # ---------------- FILTERED VIEWS ----------------

    def _avatars(self, date_range: DateRange) -> List[Avatar]:
        return filter_by_date_range(self.dataset.avatars, date_range)

    def _tryons(self, date_range: DateRange) -> List[TryOn]:
        return filter_by_date_range(self.dataset.tryons, date_range)

    def _shoppers(self, date_range: DateRange) -> List[Shopper]:
        return filter_by_date_range(self.dataset.shoppers, date_range)

    def _completion_rate(self, shoppers: pd.DataFrame) -> int:
        completed = int(shoppers["completed_onboarding"].astype(bool).sum())
        return safe_rate(completed, len(shoppers))

    def _sku_coverage(self) -> Tuple[int, int, int]:
        total = len(self.dataset.products)
        enabled = sum(1 for p in self.dataset.products if p.enabled)
        return total, enabled, safe_rate(enabled, total)

    # ---------------- SUMMARY ----------------

    def _summary(self, date_range: DateRange) -> SummaryMetrics:
        avatars = to_frame(self._avatars(date_range), Avatar)
        tryons = to_frame(self._tryons(date_range), TryOn)
        shoppers = to_frame(self._shoppers(date_range), Shopper)

        successful_avatars = int(avatars["success"].sum())
        successful_tryons = tryons[tryons["success"]]
        _, _, sku_coverage = self._sku_coverage()

        logger.debug(
            "Summary %s: %s avatars, %s tryons, %s shoppers",
            date_range, len(avatars), len(tryons), len(shoppers),
        )

        return SummaryMetrics(
            total_avatars=successful_avatars,
            total_tryons=len(successful_tryons),
            avatar_completion_rate=self._completion_rate(shoppers),
            tryon_conversion_rate=safe_rate(
                tryons["avatar_id"].nunique(), successful_avatars
            ),
            sku_coverage=sku_coverage,
            avg_latency_ms=safe_mean(successful_tryons, "generation_time_ms"),
            error_rate=safe_rate(len(tryons) - len(successful_tryons), len(tryons)),
        )

    def get_summary_metrics(self, date_range: DateRange) -> SummaryMetrics:
        summary = self._summary(date_range)
        previous = self._summary(get_previous_period_range(date_range))

        summary.trends = SummaryTrends(
            avatars=calculate_trend(summary.total_avatars, previous.total_avatars),
            tryons=calculate_trend(summary.total_tryons, previous.total_tryons),
            completion_rate=calculate_trend(
                summary.avatar_completion_rate, previous.avatar_completion_rate
            ),
        )
        return summary

    # ---------------- AVATARS ----------------

    def get_avatar_metrics(self, date_range: DateRange) -> AvatarMetrics:
        filtered = self._avatars(date_range)
        avatars = to_frame(filtered, Avatar)
        shoppers = to_frame(self._shoppers(date_range), Shopper)
        successful = avatars[avatars["success"]]

        return AvatarMetrics(
            total=len(avatars),
            successful=len(successful),
            failed=len(avatars) - len(successful),
            completion_rate=self._completion_rate(shoppers),
            avg_generation_time_ms=safe_mean(successful, "generation_time_ms"),
            timeline=_success_timeline(filtered),
        )

    # ---------------- TRY-ONS ----------------

    def get_tryon_metrics(self, date_range: DateRange) -> TryonMetrics:
        filtered = self._tryons(date_range)
        tryons = to_frame(filtered, TryOn)
        successful = tryons[tryons["success"]]

        category_counts = {category: 0 for category in ProductCategory}
        for product_id in successful["product_id"]:
            product = self._products_by_id.get(product_id)
            if product is not None:
                category_counts[product.category] += 1

        unique_avatars = successful["avatar_id"].nunique()
        avg_per_user = (
            round_half_up(len(successful) / unique_avatars, 1)
            if unique_avatars > 0
            else 0.0
        )

        return TryonMetrics(
            total=len(tryons),
            successful=len(successful),
            failed=len(tryons) - len(successful),
            avg_generation_time_ms=safe_mean(successful, "generation_time_ms"),
            by_category=[
                CategoryCount(category=CATEGORY_LABELS[category], count=count)
                for category, count in category_counts.items()
            ],
            timeline=_success_timeline(filtered),
            avg_per_user=avg_per_user,
        )

    # ---------------- PRODUCTS ----------------

    def get_product_metrics(self, date_range: DateRange) -> ProductMetrics:
        tryons = to_frame(self._tryons(date_range), TryOn)
        successful = tryons[tryons["success"]]
        catalog = to_frame(self.dataset.products, Product)
        total, enabled, sku_coverage = self._sku_coverage()

        by_category = []
        for category in ProductCategory:
            in_category = catalog[catalog["category"] == category.value]
            by_category.append(CategoryCoverage(
                category=CATEGORY_LABELS[category],
                total=len(in_category),
                enabled=int(in_category["enabled"].astype(bool).sum()),
            ))

        counts = (
            _counts_in_order(successful["product_id"])
            .sort_values(ascending=False, kind="stable")
            .head(TOP_PRODUCTS_LIMIT)
        )
        top_products = []
        for product_id, count in counts.items():
            product = self._products_by_id.get(product_id)
            top_products.append(TopProduct(
                id=str(product_id),
                name=product.name if product is not None else UNKNOWN_PRODUCT,
                tryons=int(count),
            ))

        return ProductMetrics(
            total_products=total,
            enabled_products=enabled,
            sku_coverage=sku_coverage,
            by_category=by_category,
            top_products=top_products,
        )

    # ---------------- SHOPPERS ----------------

    def get_shopper_metrics(self, date_range: DateRange) -> ShopperMetrics:
        shoppers = to_frame(self._shoppers(date_range), Shopper)
        size_recs = to_frame(
            filter_by_date_range(self.dataset.size_recommendations, date_range),
            SizeRecommendation,
        )

        heights = pd.to_numeric(shoppers["height_cm"])
        ages = pd.to_numeric(shoppers["age"])

        height_distribution = [
            RangeBucket(range=label, count=int(heights.between(lo, hi).sum()))
            for label, lo, hi in HEIGHT_RANGES
        ]
        age_distribution = [
            RangeBucket(range=label, count=int(ages.between(lo, hi).sum()))
            for label, lo, hi in AGE_RANGES
        ]

        gender_distribution = [
            GenderCount(gender=_label(str(gender)), count=int(count))
            for gender, count in _counts_in_order(shoppers["gender"]).items()
        ]

        countries = _counts_in_order(shoppers["country"]).sort_values(
            ascending=False, kind="stable"
        )
        country_distribution = [
            CountryCount(country=str(country), count=int(count))
            for country, count in countries.items()
        ]

        sizes = sorted(
            _counts_in_order(size_recs["recommended_size"]).items(),
            key=lambda item: _size_rank(item[0]),
        )
        size_recommendations = [
            SizeCount(size=str(size), count=int(count)) for size, count in sizes
        ]

        return ShopperMetrics(
            total=len(shoppers),
            completed_onboarding=int(shoppers["completed_onboarding"].astype(bool).sum()),
            height_distribution=height_distribution,
            age_distribution=age_distribution,
            gender_distribution=gender_distribution,
            country_distribution=country_distribution,
            size_recommendations=size_recommendations,
        )

    # ---------------- PERFORMANCE ----------------

    def get_performance_metrics(self, date_range: DateRange) -> PerformanceMetrics:
        avatars = self._avatars(date_range)
        tryons = self._tryons(date_range)

        successful_avatars = [a for a in avatars if a.success]
        successful_tryons = [t for t in tryons if t.success]

        avatars_by_date = group_by_date(avatars)
        tryons_by_date = group_by_date(tryons)
        days = sorted(set(avatars_by_date) | set(tryons_by_date))

        latency_timeline = []
        error_timeline = []
        for day in days:
            day_avatars = avatars_by_date.get(day, [])
            day_tryons = tryons_by_date.get(day, [])

            latency_timeline.append(LatencyPoint(
                date=day,
                avatar=_mean_ms([a for a in day_avatars if a.success]),
                tryon=_mean_ms([t for t in day_tryons if t.success]),
            ))
            error_timeline.append(ErrorPoint(
                date=day,
                avatar_errors=sum(1 for a in day_avatars if not a.success),
                tryon_errors=sum(1 for t in day_tryons if not t.success),
            ))

        return PerformanceMetrics(
            avg_avatar_latency_ms=_mean_ms(successful_avatars),
            avg_tryon_latency_ms=_mean_ms(successful_tryons),
            avatar_error_rate=safe_rate(
                len(avatars) - len(successful_avatars), len(avatars)
            ),
            tryon_error_rate=safe_rate(
                len(tryons) - len(successful_tryons), len(tryons)
            ),
            latency_timeline=latency_timeline,
            error_timeline=error_timeline,
        )

    # ---------------- FUNNEL ----------------

    def get_dropoff_funnel(self, date_range: DateRange) -> List[FunnelStage]:
        events = to_frame(filter_by_date_range(self.dataset.events, date_range), Event)

        counts = [
            (stage, int(events.loc[events["type"] == event_type.value, "shopper_id"].nunique()))
            for stage, event_type in FUNNEL_STAGES
        ]

        # Floor keeps the first stage at 100% without dividing by zero
        started = counts[0][1] or 1

        return [
            FunnelStage(
                stage=stage,
                count=count,
                percentage=round_half_up(count / started * 100),
            )
            for stage, count in counts
        ]


__all__ = [
    "MetricsService",
    "HEIGHT_RANGES",
    "AGE_RANGES",
    "SIZE_ORDER",
    "FUNNEL_STAGES",
]
