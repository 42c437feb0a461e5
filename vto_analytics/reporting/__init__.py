# Reporting module
from .metrics import MetricsService
from .comparison import get_comparison_metrics
from .export import build_metrics_report, export_metrics_report

__all__ = [
    'MetricsService',
    'get_comparison_metrics',
    'build_metrics_report',
    'export_metrics_report',
]
