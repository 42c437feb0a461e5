import re

import pandas as pd

from vto_analytics.core.models import DateRange
from vto_analytics.reporting.export import build_metrics_report, export_metrics_report

ALL_TIME = DateRange()


def test_build_report_rows(service):
    report = build_metrics_report(
        summary=service.get_summary_metrics(ALL_TIME),
        shoppers=service.get_shopper_metrics(ALL_TIME),
        products=service.get_product_metrics(ALL_TIME),
    )

    assert list(report.columns) == ["section", "metric", "value"]
    assert list(report["section"].unique()) == [
        "Summary Metrics",
        "Height Distribution",
        "Size Recommendations",
        "Top Products",
    ]

    rows = {(r.section, r.metric): r.value for r in report.itertuples()}
    assert rows[("Summary Metrics", "Error Rate")] == "13%"
    assert rows[("Summary Metrics", "Avg Latency")] == "2571ms"
    assert rows[("Size Recommendations", "Size M")] == 2
    assert rows[("Top Products", "#1 Linen Shirt")] == 3


def test_build_report_sections_are_optional(service):
    report = build_metrics_report(summary=service.get_summary_metrics(ALL_TIME))
    assert len(report) == 7


def test_export_writes_dated_csv(service, tmp_path):
    path = export_metrics_report(
        str(tmp_path / "exports"),
        summary=service.get_summary_metrics(ALL_TIME),
        prefix="weekly",
    )

    assert path is not None and path.exists()
    assert re.fullmatch(r"weekly_\d{4}-\d{2}-\d{2}\.csv", path.name)

    written = pd.read_csv(path)
    assert list(written.columns) == ["section", "metric", "value"]
    assert written.iloc[0]["metric"] == "Total Avatars"


def test_export_nothing_returns_none(tmp_path):
    assert export_metrics_report(str(tmp_path / "exports")) is None
    assert not (tmp_path / "exports").exists()
