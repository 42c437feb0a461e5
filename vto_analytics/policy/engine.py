import logging
from typing import List, Optional

from vto_analytics.core.models import DateRange
from vto_analytics.policy.rules import RULES, RuleContext
from vto_analytics.policy.schema import SEVERITY_RANK, Recommendation, RecommendationThresholds
from vto_analytics.reporting.metrics import MetricsService

logger = logging.getLogger(__name__)


class RecommendationEngine:
    def __init__(
        self,
        service: MetricsService,
        thresholds: Optional[RecommendationThresholds] = None,
    ):
        self.service = service
        self.thresholds = thresholds or RecommendationThresholds.from_config()

    def build_context(self, date_range: DateRange) -> RuleContext:
        return RuleContext(
            summary=self.service.get_summary_metrics(date_range),
            tryons=self.service.get_tryon_metrics(date_range),
            products=self.service.get_product_metrics(date_range),
            shoppers=self.service.get_shopper_metrics(date_range),
            performance=self.service.get_performance_metrics(date_range),
            funnel=self.service.get_dropoff_funnel(date_range),
        )

    def evaluate(self, date_range: DateRange) -> List[Recommendation]:
        ctx = self.build_context(date_range)
        recommendations = []

        for rule in RULES:
            rec = rule(ctx, self.thresholds)
            if rec is not None:
                recommendations.append(rec)

        logger.info(
            "%s of %s recommendation rules triggered for %s",
            len(recommendations), len(RULES), date_range,
        )

        # sorted() is stable, so rule order survives within a severity
        return sorted(recommendations, key=lambda r: SEVERITY_RANK[r.severity])


def get_recommendations(
    service: MetricsService,
    date_range: DateRange,
    thresholds: Optional[RecommendationThresholds] = None,
) -> List[Recommendation]:
    return RecommendationEngine(service, thresholds).evaluate(date_range)
