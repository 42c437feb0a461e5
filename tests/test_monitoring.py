from vto_analytics.monitoring.metrics import MetricsCollector


def test_collector_reports_duration_and_memory():
    stats = MetricsCollector().collect()

    assert set(stats) == {"duration_sec", "memory_mb"}
    assert stats["duration_sec"] >= 0
    assert stats["memory_mb"] > 0
