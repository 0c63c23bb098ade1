"""
Protocol validators for eventkey plugins.

Used by the plugin loader in ``warn``/``strict`` validation modes and by
plugin authors in their own tests.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationResult:
    """Result of protocol validation."""

    valid: bool
    plugin_type: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ProtocolViolationError(
                f"Plugin violates {self.plugin_type} protocol: "
                + "; ".join(self.errors)
            )


class ProtocolViolationError(Exception):
    """Raised when a plugin violates its protocol."""


def validate_enricher(enricher: Any) -> ValidationResult:
    """Validate that an enricher implements the BaseEnricher protocol.

    Checks:
    - Required 'name' attribute exists and is a string
    - start/stop/enrich exist and are async
    - enrich accepts the event argument
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not hasattr(enricher, "name"):
        errors.append("Missing required 'name' attribute")
    elif not isinstance(getattr(enricher, "name", None), str):
        errors.append("'name' attribute must be a string")

    for method_name in ("start", "stop", "enrich"):
        if not hasattr(enricher, method_name):
            errors.append(f"Missing required method: {method_name}")
            continue
        if not inspect.iscoroutinefunction(getattr(enricher, method_name)):
            errors.append(f"{method_name} must be async")

    if hasattr(enricher, "enrich"):
        params = list(inspect.signature(enricher.enrich).parameters)
        if not params:
            errors.append("enrich must accept an event parameter")

    if hasattr(enricher, "health_check"):
        if not inspect.iscoroutinefunction(enricher.health_check):
            warnings.append("health_check should be async")

    return ValidationResult(
        valid=len(errors) == 0,
        plugin_type="BaseEnricher",
        errors=errors,
        warnings=warnings,
    )


__all__ = ["ValidationResult", "ProtocolViolationError", "validate_enricher"]
