"""
Service metrics: counters, gauges, histograms for cache and upstream traffic.

Exportable as a JSON summary from the server's metrics endpoint.
"""

from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

HISTOGRAM_WINDOW = 1000


@dataclass
class CounterMetric:
    name: str
    description: str
    value: int = 0
    labels: dict[tuple, int] = field(default_factory=dict)

    def inc(self, labels: dict[str, str] | None = None, value: int = 1):
        self.value += value
        if labels:
            key = tuple(sorted(labels.items()))
            self.labels[key] = self.labels.get(key, 0) + value

    def by_label(self, label: str) -> dict[str, int]:
        out: dict[str, int] = {}
        for key, count in self.labels.items():
            for k, v in key:
                if k == label:
                    out[v] = out.get(v, 0) + count
        return out


@dataclass
class GaugeMetric:
    name: str
    description: str
    value: float = 0.0

    def set(self, value: float):
        self.value = value


@dataclass
class HistogramMetric:
    """Recent observations, bounded to a sliding window; reported as percentiles."""
    name: str
    description: str
    window: deque[float] = field(default_factory=lambda: deque(maxlen=HISTOGRAM_WINDOW))

    def observe(self, value: float):
        self.window.append(value)

    def percentile(self, p: float) -> float:
        if not self.window:
            return 0.0
        s = sorted(self.window)
        return s[min(int(len(s) * p), len(s) - 1)]


class ServiceMetrics:
    """Thread-safe metrics collector."""

    def __init__(self):
        self._lock = Lock()
        self.cache_hits = CounterMetric("hecomlink_cache_hits_total", "Cache hits by cache")
        self.cache_misses = CounterMetric("hecomlink_cache_misses_total", "Cache misses by cache")
        self.upstream_calls = CounterMetric("hecomlink_upstream_calls_total", "Platform calls by operation")
        self.upstream_errors = CounterMetric("hecomlink_upstream_errors_total", "Platform errors by operation and type")
        self.tool_invocations = CounterMetric("hecomlink_tool_invocations_total", "Capability invocations by tool and outcome")
        self.focused_objects = GaugeMetric("hecomlink_focused_objects", "Objects currently in focus")
        self.upstream_latency = HistogramMetric("hecomlink_upstream_latency_seconds", "Platform call latency")

    def record_cache(self, cache: str, hit: bool):
        with self._lock:
            (self.cache_hits if hit else self.cache_misses).inc({"cache": cache})

    def record_upstream(self, operation: str, seconds: float):
        with self._lock:
            self.upstream_calls.inc({"operation": operation})
            self.upstream_latency.observe(seconds)

    def record_upstream_error(self, operation: str, error_type: str):
        with self._lock:
            self.upstream_errors.inc({"operation": operation, "error_type": error_type})

    def record_tool(self, tool: str, success: bool):
        with self._lock:
            self.tool_invocations.inc({"tool": tool, "outcome": "success" if success else "failure"})

    def set_focused(self, count: int):
        with self._lock:
            self.focused_objects.set(count)

    def get_summary(self) -> dict[str, Any]:
        with self._lock:
            return {
                "cache_hits": self.cache_hits.value,
                "cache_misses": self.cache_misses.value,
                "upstream_calls": self.upstream_calls.value,
                "upstream_errors": self.upstream_errors.value,
                "tool_invocations": self.tool_invocations.by_label("tool"),
                "focused_objects": self.focused_objects.value,
                "upstream_latency_p95": self.upstream_latency.percentile(0.95),
            }
