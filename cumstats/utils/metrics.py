# SPDX-License-Identifier: MIT
"""Prometheus metrics collection for cumstats.

Instrumentation lives at the feature and CLI layers; the numeric kernels
themselves stay free of metric calls.
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    start_http_server,
)

_LENGTH_BUCKETS = (1, 10, 100, 1_000, 10_000, 100_000, 1_000_000, 10_000_000)


class MetricsCollector:
    """Centralized metrics collection for cumulative statistics."""

    def __init__(self, registry: Optional[Any] = None, *, enabled: bool = True):
        """Initialize metrics collector.

        Args:
            registry: Prometheus registry (uses the default registry if None)
            enabled: When False every recording method is a no-op
        """
        self._enabled = enabled
        self.registry = registry if registry is not None else REGISTRY

        self.transform_duration = Histogram(
            "cumstats_transform_duration_seconds",
            "Time spent computing cumulative statistics",
            ["statistic"],
            registry=self.registry,
        )

        self.transform_total = Counter(
            "cumstats_transform_total",
            "Total number of cumulative statistic computations",
            ["statistic", "status"],
            registry=self.registry,
        )

        self.input_length = Histogram(
            "cumstats_input_length",
            "Length of input series passed to cumulative statistics",
            ["statistic"],
            buckets=_LENGTH_BUCKETS,
            registry=self.registry,
        )

        self.last_value = Gauge(
            "cumstats_last_value",
            "Final element of the most recent cumulative statistic output",
            ["statistic"],
            registry=self.registry,
        )

    @property
    def enabled(self) -> bool:
        """Check if metrics collection is enabled."""
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    @staticmethod
    def _resolve_status(ctx: Dict[str, Any], status: str) -> str:
        """Resolve the final status label.

        Failures are always recorded as ``"error"``. On success a caller may
        override the label through ``ctx["status"]``; blank overrides fall
        back to the default.
        """
        if status == "error":
            return "error"

        override = ctx.get("status")
        if override is None:
            return status

        final_status = str(override).strip()
        return final_status or status

    @contextmanager
    def measure_transform(self, statistic: str) -> Iterator[Dict[str, Any]]:
        """Measure one cumulative statistic computation.

        Args:
            statistic: Name of the statistic being computed

        Yields:
            Dictionary the caller may fill with ``status``

        Example:
            >>> collector = MetricsCollector()
            >>> with collector.measure_transform("sum"):
            ...     result = cumulative_sum_init(returns)
        """
        ctx: Dict[str, Any] = {}
        if not self._enabled:
            yield ctx
            return

        start_time = time.perf_counter()
        status = "success"

        try:
            yield ctx
        except Exception:
            status = "error"
            raise
        finally:
            duration = time.perf_counter() - start_time
            self.transform_duration.labels(statistic=statistic).observe(duration)
            self.transform_total.labels(
                statistic=statistic, status=self._resolve_status(ctx, status)
            ).inc()

    def observe_input_length(self, statistic: str, length: int) -> None:
        if not self._enabled:
            return
        self.input_length.labels(statistic=statistic).observe(length)

    def record_last_value(self, statistic: str, value: float) -> None:
        """Record the final output element of a computation."""
        if not self._enabled:
            return
        self.last_value.labels(statistic=statistic).set(value)

    def render_prometheus(self) -> str:
        """Return the text exposition of every metric in the registry."""
        return generate_latest(self.registry).decode("utf-8")


# Global metrics collector instance
_collector: Optional[MetricsCollector] = None


def get_metrics_collector(registry: Optional[Any] = None) -> MetricsCollector:
    """Get the process-wide metrics collector, creating it on first use."""
    global _collector
    if _collector is None:
        _collector = MetricsCollector(registry)
    return _collector


def start_metrics_server(port: int = 8000, addr: str = "") -> None:
    """Start the Prometheus metrics HTTP server.

    Args:
        port: Port to listen on
        addr: Address to bind to (empty string for all interfaces)
    """
    start_http_server(port, addr)


__all__ = [
    "MetricsCollector",
    "get_metrics_collector",
    "start_metrics_server",
]
