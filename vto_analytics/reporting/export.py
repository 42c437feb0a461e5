"""
CSV export of headline reports.

Flattens selected report fields into ``section, metric, value`` rows.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd
from dateutil import tz

from vto_analytics.reporting.contracts import ProductMetrics, ShopperMetrics, SummaryMetrics
from vto_analytics.utils.logger import get_logger

log = get_logger("report-export")

REPORT_COLUMNS = ["section", "metric", "value"]


def build_metrics_report(
    summary: Optional[SummaryMetrics] = None,
    shoppers: Optional[ShopperMetrics] = None,
    products: Optional[ProductMetrics] = None,
) -> pd.DataFrame:
    rows = []

    if summary is not None:
        section = "Summary Metrics"
        rows += [
            (section, "Total Avatars", summary.total_avatars),
            (section, "Total Try-ons", summary.total_tryons),
            (section, "Completion Rate", f"{summary.avatar_completion_rate}%"),
            (section, "Try-on Conversion", f"{summary.tryon_conversion_rate}%"),
            (section, "SKU Coverage", f"{summary.sku_coverage}%"),
            (section, "Avg Latency", f"{summary.avg_latency_ms}ms"),
            (section, "Error Rate", f"{summary.error_rate}%"),
        ]

    if shoppers is not None:
        rows += [
            ("Height Distribution", bucket.range, bucket.count)
            for bucket in shoppers.height_distribution
        ]
        rows += [
            ("Size Recommendations", f"Size {item.size}", item.count)
            for item in shoppers.size_recommendations
        ]

    if products is not None:
        rows += [
            ("Top Products", f"#{rank} {item.name}", item.tryons)
            for rank, item in enumerate(products.top_products, start=1)
        ]

    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def export_metrics_report(
    output_dir: str,
    summary: Optional[SummaryMetrics] = None,
    shoppers: Optional[ShopperMetrics] = None,
    products: Optional[ProductMetrics] = None,
    prefix: str = "brand_report",
) -> Optional[Path]:
    """
    Write the flattened report to ``<prefix>_<YYYY-MM-DD>.csv``.

    Returns the written path, or None when there is nothing to export.
    """
    report = build_metrics_report(summary, shoppers, products)
    if report.empty:
        log.info("No report rows to export")
        return None

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now(tz.UTC).strftime("%Y-%m-%d")
    path = out_dir / f"{prefix}_{stamp}.csv"
    report.to_csv(path, index=False)

    log.info("Exported %s rows to %s", len(report), path)
    return path
