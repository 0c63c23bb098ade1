"""
Error hierarchy for eventkey.

All errors raised deliberately by the package derive from `EventKeyError`
and carry a category, a severity and an optional context mapping so callers
can route them without string matching.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    CONFIG = "config"
    PLUGIN = "plugin"
    INPUT = "input"


class ErrorSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def create_error_context(**fields: Any) -> dict[str, Any]:
    """Build an error context mapping, dropping ``None`` values."""
    return {k: v for k, v in fields.items() if v is not None}


class EventKeyError(Exception):
    """Base class for eventkey errors."""

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.INPUT,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.cause = cause
        self.context: dict[str, Any] = dict(context or {})

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "error": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
        }
        if self.context:
            data["context"] = dict(self.context)
        if self.cause is not None:
            data["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return data


class ConfigurationError(EventKeyError):
    """Invalid configuration detected at startup. Never retried."""

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIG,
            severity=ErrorSeverity.CRITICAL,
            cause=cause,
            context=context,
        )


class PluginError(EventKeyError):
    """A plugin failed to load or run."""

    def __init__(
        self,
        message: str,
        *,
        plugin_name: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.PLUGIN,
            severity=ErrorSeverity.HIGH,
            cause=cause,
            context=create_error_context(plugin=plugin_name),
        )


__all__ = [
    "ErrorCategory",
    "ErrorSeverity",
    "EventKeyError",
    "ConfigurationError",
    "PluginError",
    "create_error_context",
]
