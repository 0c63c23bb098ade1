"""
Epoch conversion and the 4-byte timestamp prefix.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from typing import Any

from . import diagnostics

PREFIX_LENGTH = 4


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_iso_timestamp(text: str) -> datetime | None:
    """Parse an ISO-8601 datetime string as UTC; None when it is not one."""
    try:
        return _as_utc(datetime.fromisoformat(text.strip()))
    except ValueError:
        return None


def _parse_text(value: str) -> int:
    text = value.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        pass
    else:
        return int(number) if math.isfinite(number) else 0
    parsed = parse_iso_timestamp(text)
    if parsed is None:
        diagnostics.warn(
            "timestamp",
            "unparseable timestamp, using epoch 0",
            value=text[:64],
            _rate_limit_key="timestamp-unparseable",
        )
        return 0
    return math.floor(parsed.timestamp())


def to_epoch_seconds(value: Any) -> int:
    """Convert a timestamp field value to integer epoch seconds.

    Absent values map to 0. Naive datetimes are taken as UTC. Floats are
    truncated toward zero, datetimes are floored.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        diagnostics.warn(
            "timestamp",
            "unsupported timestamp type, using epoch 0",
            type="bool",
            _rate_limit_key="timestamp-type",
        )
        return 0
    if isinstance(value, datetime):
        return math.floor(_as_utc(value).timestamp())
    if isinstance(value, date):
        return math.floor(
            datetime.combine(value, time.min, tzinfo=timezone.utc).timestamp()
        )
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return int(value)
    if isinstance(value, str):
        return _parse_text(value)
    diagnostics.warn(
        "timestamp",
        "unsupported timestamp type, using epoch 0",
        type=type(value).__name__,
        _rate_limit_key="timestamp-type",
    )
    return 0


def timestamp_prefix(epoch: int) -> bytes:
    """Big-endian prefix from the low 32 bits of ``epoch``.

    Built with arithmetic shifts and modulo 256, so a negative epoch wraps
    around as its two's complement (``-1`` gives ``ff ff ff ff``). Only the
    low 8 bits of the top entry survive the 24-bit packing of the encoder,
    which is what the final ``% 256`` reproduces here.
    """
    return bytes(
        [
            (epoch >> 24) % 256,
            (epoch >> 16) % 256,
            (epoch >> 8) % 256,
            epoch % 256,
        ]
    )


def prefix_to_epoch(prefix: bytes) -> int:
    """Read back the unsigned 32-bit value stored by `timestamp_prefix`."""
    if len(prefix) < PREFIX_LENGTH:
        raise ValueError(f"prefix needs {PREFIX_LENGTH} bytes, got {len(prefix)}")
    return int.from_bytes(prefix[:PREFIX_LENGTH], "big")


__all__ = [
    "PREFIX_LENGTH",
    "parse_iso_timestamp",
    "to_epoch_seconds",
    "timestamp_prefix",
    "prefix_to_epoch",
]
