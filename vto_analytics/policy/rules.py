"""
Recommendation rules.

Each rule inspects one metric of the ``RuleContext`` and returns a
``Recommendation`` or None. Rule ids are fixed, one per rule.
"""

from dataclasses import dataclass
from functools import reduce
from typing import Callable, List, Optional

from vto_analytics.core.kpi_utils import round_half_up
from vto_analytics.policy.schema import Recommendation, RecommendationThresholds
from vto_analytics.reporting.contracts import (
    FunnelStage,
    PerformanceMetrics,
    ProductMetrics,
    ShopperMetrics,
    SummaryMetrics,
    TryonMetrics,
)


@dataclass
class RuleContext:
    summary: SummaryMetrics
    tryons: TryonMetrics
    products: ProductMetrics
    shoppers: ShopperMetrics
    performance: PerformanceMetrics
    funnel: List[FunnelStage]


Rule = Callable[[RuleContext, RecommendationThresholds], Optional[Recommendation]]


def _seconds(ms: float) -> str:
    return f"{round_half_up(ms / 1000, 1):.1f}s"


# -------------------------------------------------
# ENGAGEMENT
# -------------------------------------------------
def check_completion_rate(ctx, t):
    rate = ctx.summary.avatar_completion_rate
    if rate >= t.completion_rate_warning:
        return None

    return Recommendation(
        id="rec_completion",
        severity="high" if rate < t.completion_rate_critical else "medium",
        category="engagement",
        title="Low Avatar Completion Rate",
        description=(
            "Many users are dropping off before completing their avatar. "
            "Consider simplifying the onboarding flow or adding progress indicators."
        ),
        metric="Avatar Completion Rate",
        value=f"{rate}%",
        action="Review onboarding UX and identify friction points in photo upload step",
    )


def check_tryon_conversion(ctx, t):
    rate = ctx.summary.tryon_conversion_rate
    if rate >= t.tryon_conversion_warning:
        return None

    return Recommendation(
        id="rec_tryon_conversion",
        severity="high" if rate < t.tryon_conversion_critical else "medium",
        category="engagement",
        title="Users Not Trying On Products",
        description=(
            f"Only {rate}% of users with avatars have tried on a product. "
            "Consider prompting users to try products immediately after avatar creation."
        ),
        metric="Avatar to Try-on Rate",
        value=f"{rate}%",
        action='Add product suggestions after avatar creation, highlight "Try it on" buttons',
    )


def check_engagement_depth(ctx, t):
    per_user = ctx.tryons.avg_per_user
    if per_user >= t.min_tryons_per_user:
        return None

    return Recommendation(
        id="rec_engagement",
        severity="low",
        category="engagement",
        title="Low Engagement Depth",
        description=(
            f"Users average only {per_user:g} try-ons each. "
            "Encouraging more try-ons correlates with higher purchase rates."
        ),
        metric="Avg Try-ons per User",
        value=f"{per_user:g}",
        action='Implement "You might also like" recommendations after each try-on',
    )


def check_purchase_rate(ctx, t):
    rate = next((s.percentage for s in ctx.funnel if s.stage == "Purchase"), 0)
    if rate >= t.purchase_rate_warning:
        return None

    return Recommendation(
        id="rec_purchase",
        severity="high" if rate < t.purchase_rate_critical else "medium",
        category="engagement",
        title="Low Purchase Conversion",
        description=(
            f"Only {rate}% of users who started onboarding made a purchase. "
            "The virtual try-on experience may need optimization."
        ),
        metric="Purchase Rate",
        value=f"{rate}%",
        action='Add "Buy Now" CTAs on try-on results, offer first-purchase discounts',
    )


# -------------------------------------------------
# CATALOG
# -------------------------------------------------
def check_category_balance(ctx, t):
    categories = ctx.tryons.by_category
    if not categories:
        return None

    # Ties resolve to the later category
    best = reduce(lambda a, b: a if a.count > b.count else b, categories)
    worst = reduce(lambda a, b: a if a.count < b.count else b, categories)

    if not (best.count > worst.count * t.category_imbalance_ratio and worst.count > 0):
        return None

    return Recommendation(
        id="rec_category",
        severity="medium",
        category="catalog",
        title=f"{worst.category} Category Underperforming",
        description=(
            f"{worst.category} has significantly fewer try-ons compared to {best.category}. "
            f"Consider featuring more {worst.category.lower()} products or improving their visibility."
        ),
        metric="Category Try-ons",
        value=f"{worst.count} vs {best.count}",
        action=(
            f"Promote {worst.category.lower()} in homepage carousel "
            "or add category-specific campaigns"
        ),
    )


def check_sku_coverage(ctx, t):
    coverage = ctx.products.sku_coverage
    if coverage >= t.sku_coverage_warning:
        return None

    return Recommendation(
        id="rec_sku",
        severity="high" if coverage < t.sku_coverage_critical else "low",
        category="catalog",
        title="SKU Coverage Gap",
        description=(
            f"Only {coverage}% of products are enabled for virtual try-on. "
            "Enabling more SKUs could increase engagement."
        ),
        metric="SKU Coverage",
        value=f"{ctx.products.enabled_products}/{ctx.products.total_products} products",
        action="Prioritize enabling top-selling products that are currently disabled",
    )


# -------------------------------------------------
# TECHNICAL
# -------------------------------------------------
def check_tryon_errors(ctx, t):
    rate = ctx.performance.tryon_error_rate
    if rate <= t.tryon_error_rate_warning:
        return None

    return Recommendation(
        id="rec_errors",
        severity="high" if rate > t.tryon_error_rate_critical else "medium",
        category="technical",
        title="Elevated Try-on Error Rate",
        description=(
            f"{rate}% of try-ons are failing. "
            "This directly impacts user experience and conversion."
        ),
        metric="Try-on Error Rate",
        value=f"{rate}%",
        action="Investigate recent error logs and prioritize fixing garment overlay issues",
    )


def check_tryon_latency(ctx, t):
    latency = ctx.performance.avg_tryon_latency_ms
    if latency <= t.tryon_latency_warning_ms:
        return None

    return Recommendation(
        id="rec_latency",
        severity="high" if latency > t.tryon_latency_critical_ms else "medium",
        category="technical",
        title="High Try-on Latency",
        description=(
            f"Average try-on generation takes {_seconds(latency)}. "
            f"Users expect results in under {t.tryon_latency_warning_ms / 1000:g} seconds."
        ),
        metric="Avg Try-on Latency",
        value=_seconds(latency),
        action="Consider image optimization, caching, or infrastructure scaling",
    )


# -------------------------------------------------
# SIZING
# -------------------------------------------------
def check_xs_availability(ctx, t):
    sizes = ctx.shoppers.size_recommendations
    xs = next((s for s in sizes if s.size == "XS"), None)
    total = sum(s.count for s in sizes)

    if xs is None or total == 0 or xs.count / total <= t.xs_share_warning:
        return None

    return Recommendation(
        id="rec_sizing",
        severity="medium",
        category="sizing",
        title="Size Availability Gap for Petite Shoppers",
        description=(
            f"{round_half_up(xs.count / total * 100)}% of size recommendations are XS, "
            "but some products don't offer this size."
        ),
        metric="XS Size Requests",
        value=f"{xs.count} recommendations",
        action="Ensure XS availability across all product categories, especially tops",
    )


# Evaluation order; ties in severity keep this order
RULES: List[Rule] = [
    check_completion_rate,
    check_category_balance,
    check_sku_coverage,
    check_tryon_errors,
    check_tryon_latency,
    check_tryon_conversion,
    check_engagement_depth,
    check_xs_availability,
    check_purchase_rate,
]
