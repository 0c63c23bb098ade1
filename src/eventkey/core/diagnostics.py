"""
Internal diagnostics for non-fatal conditions.

Diagnostics are structured, one JSON object per line on stderr, and are off
unless ``core.internal_logging_enabled`` is set (for example through
``EVENTKEY_CORE__INTERNAL_LOGGING_ENABLED=true``). They never raise into the
caller.

Payload fields whose name looks like a secret are replaced with the fixed
redaction marker, so configuration values such as the HMAC key cannot leak
through a diagnostic.
"""

from __future__ import annotations

import sys
import threading
import time
from typing import Any, Callable

import orjson

REDACTION_MARKER = "<password>"

_SENSITIVE_NAMES = frozenset(
    {"key", "secret", "password", "passwd", "token", "api_key", "hmac_key"}
)

# Cached at first use; tests reset it to None between runs
_internal_logging_enabled: bool | None = None

_Writer = Callable[[dict[str, Any]], None]
_writer: _Writer | None = None

_RATE_LIMIT_WINDOW_SECONDS = 5.0
_rate_lock = threading.Lock()
_last_emitted: dict[str, float] = {}


def _default_writer(payload: dict[str, Any]) -> None:
    sys.stderr.write(orjson.dumps(payload, default=str).decode("utf-8") + "\n")


def set_writer_for_tests(writer: _Writer | None) -> None:
    """Route diagnostics to ``writer`` instead of stderr."""
    global _writer
    _writer = writer


def _reset_for_tests() -> None:
    global _internal_logging_enabled, _writer
    _internal_logging_enabled = None
    _writer = None
    with _rate_lock:
        _last_emitted.clear()


def is_enabled() -> bool:
    global _internal_logging_enabled
    if _internal_logging_enabled is None:
        try:
            from .settings import Settings

            _internal_logging_enabled = bool(Settings().core.internal_logging_enabled)
        except Exception:
            _internal_logging_enabled = False
    return _internal_logging_enabled


def redact_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``fields`` with secret-looking entries masked."""
    out: dict[str, Any] = {}
    for name, value in fields.items():
        if name.lower() in _SENSITIVE_NAMES:
            out[name] = REDACTION_MARKER
        else:
            out[name] = value
    return out


def _should_emit(rate_limit_key: str | None) -> bool:
    if rate_limit_key is None:
        return True
    now = time.monotonic()
    with _rate_lock:
        last = _last_emitted.get(rate_limit_key)
        if last is not None and now - last < _RATE_LIMIT_WINDOW_SECONDS:
            return False
        _last_emitted[rate_limit_key] = now
    return True


def _emit(level: str, component: str, message: str, fields: dict[str, Any]) -> None:
    if not is_enabled():
        return
    rate_limit_key = fields.pop("_rate_limit_key", None)
    if not _should_emit(rate_limit_key):
        return
    payload: dict[str, Any] = {
        "timestamp": time.time(),
        "level": level,
        "origin": "diagnostic",
        "component": component,
        "message": message,
    }
    payload.update(redact_fields(fields))
    try:
        (_writer or _default_writer)(payload)
    except Exception:
        # Diagnostics must never break the caller
        return


def debug(component: str, message: str, **fields: Any) -> None:
    _emit("DEBUG", component, message, fields)


def warn(component: str, message: str, **fields: Any) -> None:
    _emit("WARN", component, message, fields)


def exception(component: str, message: str, exc: BaseException, **fields: Any) -> None:
    fields.setdefault("error_type", type(exc).__name__)
    fields.setdefault("error", str(exc))
    _emit("ERROR", component, message, fields)


__all__ = [
    "REDACTION_MARKER",
    "debug",
    "warn",
    "exception",
    "is_enabled",
    "redact_fields",
    "set_writer_for_tests",
]
