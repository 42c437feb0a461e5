from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List

from vto_analytics.config.defaults import DEFAULT_CONFIG

SEVERITIES = ("high", "medium", "low")
CATEGORIES = ("engagement", "catalog", "technical", "sizing")

SEVERITY_RANK: Dict[str, int] = {s: i for i, s in enumerate(SEVERITIES)}


@dataclass
class Recommendation:
    id: str
    severity: str      # high | medium | low
    category: str      # engagement | catalog | technical | sizing
    title: str
    description: str
    metric: str
    value: str
    action: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RecommendationThresholds:
    """
    Trigger levels for the recommendation rules.

    Defaults come from the ``thresholds`` section of the default config.
    """
    completion_rate_warning: float
    completion_rate_critical: float
    category_imbalance_ratio: float
    sku_coverage_warning: float
    sku_coverage_critical: float
    tryon_error_rate_warning: float
    tryon_error_rate_critical: float
    tryon_latency_warning_ms: float
    tryon_latency_critical_ms: float
    tryon_conversion_warning: float
    tryon_conversion_critical: float
    min_tryons_per_user: float
    xs_share_warning: float
    purchase_rate_warning: float
    purchase_rate_critical: float

    @classmethod
    def from_config(cls, config: Dict[str, Any] = None) -> "RecommendationThresholds":
        values = dict(DEFAULT_CONFIG["thresholds"])
        if config:
            values.update(config.get("thresholds") or {})

        known = {f.name for f in fields(cls)}
        unknown: List[str] = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown threshold keys: {', '.join(unknown)}")

        return cls(**values)
