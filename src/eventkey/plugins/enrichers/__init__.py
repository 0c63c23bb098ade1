from __future__ import annotations

from typing import Iterable

from ...core import diagnostics
from ...core.processing import process_in_parallel
from ...metrics.metrics import MetricsCollector, plugin_timer
from ..loader import ENRICHERS_GROUP, register_builtin
from ..utils import get_plugin_name
from .hashid import HashIdEnricher


class BaseEnricher:
    """Base interface for enrichers with async API."""

    name = "base"

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    async def enrich(self, event: dict) -> dict:
        return event


async def enrich_parallel(
    event: dict,
    enrichers: Iterable[BaseEnricher | HashIdEnricher],
    *,
    concurrency: int = 5,
    metrics: MetricsCollector | None = None,
) -> dict:
    """
    Run multiple enrichers in parallel on the same event with controlled
    concurrency.

    Each enricher receives a shallow copy and returns a mapping. Results are
    merged shallowly in order; a failing enricher is skipped.
    """
    enricher_list = list(enrichers)

    async def run_enricher(e: BaseEnricher | HashIdEnricher) -> dict:
        async with plugin_timer(metrics, get_plugin_name(e)):
            return await e.enrich(dict(event))

    results = await process_in_parallel(
        enricher_list, run_enricher, limit=concurrency, return_exceptions=True
    )
    merged: dict = dict(event)
    for enricher, res in zip(enricher_list, results):
        if isinstance(res, BaseException):
            diagnostics.warn(
                "enricher",
                "enrichment error",
                enricher=get_plugin_name(enricher),
                reason=str(res),
            )
            continue
        if isinstance(res, dict):
            merged.update(res)
    return merged


register_builtin(ENRICHERS_GROUP, "hashid", HashIdEnricher, aliases=["hash-id"])

__all__ = ["BaseEnricher", "HashIdEnricher", "enrich_parallel"]
