"""
vto-analytics CLI

Loads a dataset directory, validates the requested date range and
prints the selected report as JSON.
"""

import argparse
import json
import logging
import sys
from typing import Any, Callable, Dict, List, Optional

import yaml

from vto_analytics.__version__ import __version__
from vto_analytics.config.loader import load_config
from vto_analytics.core.dataset import DatasetError, load_dataset
from vto_analytics.core.dates import get_date_range
from vto_analytics.core.models import DateRange
from vto_analytics.core.validator import DateRangeError, validate_date_range
from vto_analytics.monitoring.metrics import MetricsCollector
from vto_analytics.policy.engine import get_recommendations
from vto_analytics.policy.schema import RecommendationThresholds
from vto_analytics.reporting.comparison import get_comparison_metrics
from vto_analytics.reporting.export import export_metrics_report
from vto_analytics.reporting.metrics import MetricsService
from vto_analytics.utils.logger import DATE_FORMAT, LOG_FORMAT

logger = logging.getLogger(__name__)


# -------------------------------------------------
# REPORT REGISTRY
# -------------------------------------------------
def _recommendations(service, date_range, config):
    thresholds = RecommendationThresholds.from_config(config)
    return [r.to_dict() for r in get_recommendations(service, date_range, thresholds)]


REPORTS: Dict[str, Callable[[MetricsService, DateRange, Dict[str, Any]], Any]] = {
    "summary": lambda s, r, c: s.get_summary_metrics(r).to_dict(),
    "avatars": lambda s, r, c: s.get_avatar_metrics(r).to_dict(),
    "tryons": lambda s, r, c: s.get_tryon_metrics(r).to_dict(),
    "products": lambda s, r, c: s.get_product_metrics(r).to_dict(),
    "shoppers": lambda s, r, c: s.get_shopper_metrics(r).to_dict(),
    "performance": lambda s, r, c: s.get_performance_metrics(r).to_dict(),
    "funnel": lambda s, r, c: [stage.to_dict() for stage in s.get_dropoff_funnel(r)],
    "comparison": lambda s, r, c: get_comparison_metrics(s, r).to_dict(),
    "recommendations": _recommendations,
}


# -------------------------------------------------
# PROGRAMMATIC ENTRY
# -------------------------------------------------
def run_report(
    service: MetricsService,
    date_range: DateRange,
    report: str = "summary",
    config: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Compute one named report, or every report for ``"all"``.
    """
    config = config or load_config(None)

    if report == "all":
        return {name: build(service, date_range, config) for name, build in REPORTS.items()}

    if report not in REPORTS:
        raise KeyError(f"Unknown report: {report}")

    return REPORTS[report](service, date_range, config)


def _resolve_range(args, parser) -> DateRange:
    if args.last is not None:
        if args.start or args.end:
            parser.error("--last cannot be combined with --start/--end")
        if args.last < 0:
            parser.error("--last must be zero or positive")
        return get_date_range(args.last)

    return validate_date_range(args.start, args.end)


# -------------------------------------------------
# CLI ENTRY
# -------------------------------------------------
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description=f"Virtual try-on analytics v{__version__}"
    )

    parser.add_argument("--data", help="Directory holding the JSON collections")
    parser.add_argument("--config", required=False, help="Path to config YAML")

    parser.add_argument("--start", help="Range start (YYYY-MM-DD)")
    parser.add_argument("--end", help="Range end (YYYY-MM-DD)")
    parser.add_argument("--last", type=int, help="Report on the last N days")

    parser.add_argument(
        "--report",
        default="summary",
        choices=sorted(REPORTS) + ["all"],
        help="Report to print",
    )
    parser.add_argument("--export", action="store_true", help="Export CSV report")
    parser.add_argument("--version", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)

    # ---- VERSION ----
    if args.version:
        print(f"vto-analytics v{__version__}")
        return 0

    # ---- LOGGING ----
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    collector = MetricsCollector()

    try:
        config = load_config(args.config)
        RecommendationThresholds.from_config(config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        logger.error("Config load failed: %s", exc)
        return 2

    data_dir = args.data or config["dataset"]["data_dir"]

    try:
        date_range = _resolve_range(args, parser)
        dataset = load_dataset(data_dir, config["dataset"].get("files"))
    except DateRangeError as exc:
        logger.error("%s", exc)
        return 2
    except DatasetError as exc:
        logger.error("Dataset load failed: %s", exc)
        return 2

    service = MetricsService(dataset)
    result = run_report(service, date_range, args.report, config)
    print(json.dumps(result, indent=2))

    # ---- EXPORT ----
    if args.export:
        export_cfg = config.get("export", {})
        path = export_metrics_report(
            export_cfg.get("output_dir", "exports"),
            summary=service.get_summary_metrics(date_range),
            shoppers=service.get_shopper_metrics(date_range),
            products=service.get_product_metrics(date_range),
            prefix=export_cfg.get("filename_prefix", "brand_report"),
        )
        if path:
            logger.info("CSV report: %s", path)

    logger.debug("Run metrics: %s", collector.collect())
    return 0


if __name__ == "__main__":
    sys.exit(main())
