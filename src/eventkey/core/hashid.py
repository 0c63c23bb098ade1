"""
Hash id generation for a single record.

`HashIdGenerator` is built once from `HashIdSettings` and then applied to
any number of records. It holds only immutable state, so one instance can be
shared across threads and tasks.

Per record:

1. resolve every ``source`` field (sorted by name) to its text form
2. HMAC the ``"|name|value"`` concatenation, keep the last N bytes if asked
3. prepend the 4-byte timestamp prefix when enabled
4. encode with the sortable alphabet and store in ``target``
"""

from __future__ import annotations

import time
from typing import Any, Iterable

from ..metrics.metrics import MetricsCollector
from .digest import DigestConfig, compute_digest
from .encoding import decode_sortable, encode_sortable, encoded_length
from .processing import process_in_parallel
from .record import EventRecord, Record, field_text, with_field
from .settings import HashIdSettings
from .timestamp import (
    parse_iso_timestamp,
    prefix_to_epoch,
    timestamp_prefix,
    to_epoch_seconds,
)


class HashIdGenerator:
    """Compute and assign hash ids according to `HashIdSettings`."""

    def __init__(
        self,
        settings: HashIdSettings | None = None,
        *,
        metrics: MetricsCollector | None = None,
    ) -> None:
        cfg = settings or HashIdSettings()
        # Resolved here so an unknown method fails before any record is seen
        self._digest: DigestConfig = cfg.digest_config()
        self._sources: tuple[str, ...] = tuple(sorted(set(cfg.source)))
        self._target = cfg.target
        self._timestamp_field = cfg.timestamp_field
        self._add_prefix = cfg.add_timestamp_prefix
        self._normalize_timestamp = cfg.normalize_timestamp
        self._metrics = metrics

    @property
    def digest(self) -> DigestConfig:
        return self._digest

    @property
    def sources(self) -> tuple[str, ...]:
        return self._sources

    @property
    def target(self) -> str:
        return self._target

    @property
    def id_length(self) -> int:
        """Length of every id this generator produces."""
        size = self._digest.output_size + (4 if self._add_prefix else 0)
        return encoded_length(size)

    def __repr__(self) -> str:
        return (
            f"HashIdGenerator(sources={list(self._sources)!r}, "
            f"target={self._target!r}, digest={self._digest!r}, "
            f"add_timestamp_prefix={self._add_prefix})"
        )

    def _source_value(self, record: Record, name: str) -> Any:
        value = record.get(name)
        if (
            self._normalize_timestamp
            and name == self._timestamp_field
            and isinstance(value, str)
        ):
            # Hashed like a datetime value; other strings pass through
            parsed = parse_iso_timestamp(value)
            if parsed is not None:
                return parsed
        return value

    def compute_bytes(self, record: Record) -> bytes:
        """Prefix and digest bytes for ``record``, before encoding."""
        pairs = [
            (name, field_text(self._source_value(record, name)))
            for name in self._sources
        ]
        digest = compute_digest(pairs, self._digest)
        if not self._add_prefix:
            return digest
        epoch = to_epoch_seconds(record.get(self._timestamp_field))
        return timestamp_prefix(epoch) + digest

    def generate(self, record: Record | dict[str, Any]) -> str:
        """Return the id for ``record`` without modifying it."""
        if isinstance(record, dict):
            record = EventRecord(record)
        return encode_sortable(self.compute_bytes(record))

    def apply(self, record: Record | dict[str, Any]) -> str:
        """Store the id in the target field, overwriting it, and return it."""
        if isinstance(record, dict):
            record = EventRecord(record)
        hashid = self.generate(record)
        record.set(self._target, hashid)
        return hashid

    def enrich(self, event: dict[str, Any]) -> dict[str, Any]:
        """Copy of ``event`` with the id set; ``event`` itself is not changed."""
        return with_field(event, self._target, self.generate(event))

    async def generate_many(
        self,
        events: Iterable[dict[str, Any]],
        *,
        concurrency: int = 5,
    ) -> list[dict[str, Any]]:
        """Apply to copies of ``events``; results keep the input order."""

        async def _one(event: dict[str, Any]) -> dict[str, Any]:
            start = time.perf_counter()
            out = self.enrich(event)
            if self._metrics is not None:
                await self._metrics.record_id_generated(
                    duration_seconds=time.perf_counter() - start
                )
            return out

        results = await process_in_parallel(list(events), _one, limit=concurrency)
        return list(results)


def extract_timestamp(hashid: str) -> int:
    """Epoch seconds stored in the prefix of an id built with one.

    Returns the unsigned 32-bit value; ids of records without a timestamp
    give 0.

    Raises:
        ValueError: if ``hashid`` is not a valid id or is too short to carry
            a prefix.
    """
    return prefix_to_epoch(decode_sortable(hashid))


__all__ = ["HashIdGenerator", "extract_timestamp"]
