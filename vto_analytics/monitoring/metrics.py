import os
import time

import psutil


class MetricsCollector:
    """Wall-clock and memory footprint of a single CLI run."""

    def __init__(self):
        self.start_time = time.time()

    def collect(self):
        process = psutil.Process(os.getpid())
        return {
            "duration_sec": round(time.time() - self.start_time, 2),
            "memory_mb": round(process.memory_info().rss / 1024 / 1024, 2),
        }
