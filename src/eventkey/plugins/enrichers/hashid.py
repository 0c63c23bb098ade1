from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ...core.errors import ConfigurationError
from ...core.hashid import HashIdGenerator
from ...core.settings import HashIdSettings
from ...metrics.metrics import MetricsCollector
from ..utils import parse_plugin_config


class HashIdEnricher:
    """Set a deterministic, sortable id on every event.

    Configuration is `HashIdSettings`; it is validated once here, so an
    unsupported ``method`` raises `ConfigurationError` at construction.
    """

    name = "hashid"

    def __init__(
        self,
        *,
        config: HashIdSettings | dict | None = None,
        metrics: MetricsCollector | None = None,
        **kwargs: Any,
    ) -> None:
        try:
            cfg = parse_plugin_config(HashIdSettings, config, **kwargs)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid hashid configuration: {exc.error_count()} error(s)",
                cause=exc,
                context={"errors": [e["msg"] for e in exc.errors()]},
            ) from exc
        self._config = cfg
        self._metrics = metrics
        self._generator = HashIdGenerator(cfg)

    @property
    def config(self) -> HashIdSettings:
        return self._config

    @property
    def generator(self) -> HashIdGenerator:
        return self._generator

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    async def enrich(self, event: dict[str, Any]) -> dict[str, Any]:
        out = self._generator.enrich(event)
        if self._metrics is not None:
            await self._metrics.record_id_generated()
        return out

    async def health_check(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"HashIdEnricher({self._generator!r})"


PLUGIN_METADATA = {
    "name": "hashid",
    "version": "1.0.0",
    "plugin_type": "enricher",
    "entry_point": "eventkey.plugins.enrichers.hashid:HashIdEnricher",
    "description": "Adds a keyed-hash, timestamp-sortable id to each event.",
    "author": "eventkey",
    "config_schema": {
        "type": "object",
        "properties": {
            "source": {"type": "array"},
            "target": {"type": "string"},
            "key": {"type": "string"},
            "method": {
                "type": "string",
                "enum": ["MD5", "SHA1", "SHA256", "SHA384", "SHA512"],
            },
            "hash_bytes_used": {"type": "integer"},
            "timestamp_field": {"type": "string"},
            "add_timestamp_prefix": {"type": "boolean"},
        },
    },
    "default_config": {
        "source": ["message"],
        "target": "hashid",
        "method": "MD5",
        "timestamp_field": "@timestamp",
        "add_timestamp_prefix": True,
    },
}
