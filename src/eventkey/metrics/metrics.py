"""
Async-first metrics collection for eventkey.

Minimal Prometheus-compatible counters and a latency histogram for id
generation and plugin execution.

- No global state; each collector owns an isolated registry
- Safe no-op exporters when disabled, with in-memory counters kept for tests
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator

from prometheus_client import CollectorRegistry, Counter, Histogram


@dataclass
class PipelineMetrics:
    """Captured runtime metrics for quick assertions in tests."""

    ids_generated: int = 0
    plugin_errors: int = 0


class MetricsCollector:
    """Container-scoped async metrics collector."""

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = bool(enabled)
        self._lock = asyncio.Lock()
        self._state = PipelineMetrics()

        self._c_ids: Any | None = None
        self._c_plugin_errors: Any | None = None
        self._h_generate_latency: Any | None = None
        self._h_plugin_latency: Any | None = None
        self._registry: CollectorRegistry | None = None

        if self._enabled:
            self._registry = CollectorRegistry()
            self._c_ids = Counter(
                "eventkey_ids_generated_total",
                "Total number of hash ids generated",
                registry=self._registry,
            )
            self._c_plugin_errors = Counter(
                "eventkey_plugin_errors_total",
                "Total number of plugin execution errors",
                ["plugin"],
                registry=self._registry,
            )
            self._h_generate_latency = Histogram(
                "eventkey_generate_seconds",
                "Latency for generating a single id",
                buckets=(
                    0.00001,
                    0.00005,
                    0.0001,
                    0.0005,
                    0.001,
                    0.005,
                    0.01,
                    0.05,
                ),
                registry=self._registry,
            )
            self._h_plugin_latency = Histogram(
                "eventkey_plugin_seconds",
                "Latency of a single plugin call",
                ["plugin"],
                registry=self._registry,
            )

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def registry(self) -> CollectorRegistry | None:
        """Expose the isolated Prometheus registry when enabled."""
        return self._registry

    async def record_id_generated(
        self, *, duration_seconds: float | None = None
    ) -> None:
        async with self._lock:
            self._state.ids_generated += 1
        if not self._enabled:
            return
        if self._c_ids is not None:
            self._c_ids.inc()
        if duration_seconds is not None and self._h_generate_latency is not None:
            self._h_generate_latency.observe(duration_seconds)

    async def record_plugin_error(self, *, plugin_name: str | None = None) -> None:
        async with self._lock:
            self._state.plugin_errors += 1
        if not self._enabled:
            return
        if self._c_plugin_errors is not None:
            label = plugin_name or "unknown"
            self._c_plugin_errors.labels(plugin=label).inc()

    async def record_plugin_latency(
        self, *, plugin_name: str, duration_seconds: float
    ) -> None:
        if not self._enabled or self._h_plugin_latency is None:
            return
        self._h_plugin_latency.labels(plugin=plugin_name).observe(duration_seconds)

    async def snapshot(self) -> PipelineMetrics:
        async with self._lock:
            return PipelineMetrics(
                ids_generated=self._state.ids_generated,
                plugin_errors=self._state.plugin_errors,
            )


@asynccontextmanager
async def plugin_timer(
    metrics: MetricsCollector | None, plugin_name: str
) -> AsyncIterator[None]:
    """Time a plugin call; count an error for ``plugin_name`` if it raises."""
    start = time.perf_counter()
    try:
        yield
    except Exception:
        if metrics is not None:
            await metrics.record_plugin_error(plugin_name=plugin_name)
        raise
    if metrics is not None:
        await metrics.record_plugin_latency(
            plugin_name=plugin_name, duration_seconds=time.perf_counter() - start
        )


__all__ = ["MetricsCollector", "PipelineMetrics", "plugin_timer"]
