"""
Record abstraction and field resolution.

A record only needs ``get(field)`` and ``set(field, value)``. `EventRecord`
adapts a plain ``dict`` event. Field names are either plain keys
(``"message"``, ``"@timestamp"``, ``"host.name"``) or bracketed references
(``"[client][ip]"``) that walk nested mappings.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Protocol, runtime_checkable

import orjson


@runtime_checkable
class Record(Protocol):
    def get(self, field: str) -> Any: ...

    def set(self, field: str, value: Any) -> None: ...


def parse_field_reference(field: str) -> tuple[str, ...]:
    """Split a field name into its path segments.

    >>> parse_field_reference("[a][b]")
    ('a', 'b')
    >>> parse_field_reference("message")
    ('message',)
    """
    if not (field.startswith("[") and field.endswith("]")):
        return (field,)
    segments = field[1:-1].split("][")
    if any(not seg or "[" in seg or "]" in seg for seg in segments):
        # Not a well-formed reference; treat the whole name as a key
        return (field,)
    return tuple(segments)


class EventRecord:
    """`Record` over a mutable mapping, writing through to it."""

    __slots__ = ("_event",)

    def __init__(self, event: dict[str, Any]) -> None:
        self._event = event

    @property
    def event(self) -> dict[str, Any]:
        return self._event

    def get(self, field: str) -> Any:
        current: Any = self._event
        for seg in parse_field_reference(field):
            if isinstance(current, dict):
                if seg not in current:
                    return None
                current = current[seg]
            elif isinstance(current, list) and _is_index(seg):
                idx = int(seg)
                if not -len(current) <= idx < len(current):
                    return None
                current = current[idx]
            else:
                return None
        return current

    def set(self, field: str, value: Any) -> None:
        path = parse_field_reference(field)
        container = self._event
        for seg in path[:-1]:
            nxt = container.get(seg)
            if not isinstance(nxt, dict):
                # Overwrite scalars on the way; the target always wins
                nxt = {}
                container[seg] = nxt
            container = nxt
        container[path[-1]] = value


def with_field(event: dict[str, Any], field: str, value: Any) -> dict[str, Any]:
    """Copy of ``event`` with ``field`` set; ``event`` is left untouched.

    Only the mappings along the field's path are copied.
    """
    path = parse_field_reference(field)
    root = dict(event)
    container = root
    for seg in path[:-1]:
        nxt = container.get(seg)
        nxt = dict(nxt) if isinstance(nxt, dict) else {}
        container[seg] = nxt
        container = nxt
    container[path[-1]] = value
    return root


def _is_index(seg: str) -> bool:
    return seg.lstrip("-").isdigit()


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def field_text(value: Any) -> str:
    """Text form of a field value as fed into the digest.

    Absent fields (``None``) become the empty string.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (dict, list, tuple)):
        return orjson.dumps(
            value,
            option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS,
            default=str,
        ).decode("utf-8")
    return str(value)


__all__ = ["Record", "EventRecord", "parse_field_reference", "with_field", "field_text"]
