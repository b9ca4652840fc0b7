"""
Process-wide trace recorder.

Append-only log of timestamped numeric measurements. There is no
automatic eviction; readers bound what they take with recent(n).
"""

import threading
from typing import List

from nexus.shared.contracts.evaluation import Metric


class TraceRecorder:
    """Thread-safe, append-only metric log."""

    def __init__(self):
        self._metrics: List[Metric] = []
        self._lock = threading.Lock()

    def record(self, name: str, value: float, unit: str) -> Metric:
        metric = Metric(name=name, value=value, unit=unit)
        with self._lock:
            self._metrics.append(metric)
        return metric

    def recent(self, count: int = 5) -> List[Metric]:
        """Return the last `count` metrics in insertion order."""
        if count <= 0:
            return []
        with self._lock:
            return self._metrics[-count:]

    def clear(self) -> None:
        with self._lock:
            self._metrics = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)


# Process-scoped default instance
trace_recorder = TraceRecorder()
