"""
Simple plugin loader using built-in registries plus Python entry points.

Supports name normalization (hyphens/underscores) and alias mapping so plugin
authors can choose either style. Built-ins are preferred over entry points
when names collide.
"""

from __future__ import annotations

import importlib
import importlib.metadata
from enum import Enum
from typing import Any, Callable, Iterable, TypeVar

from ..core import diagnostics
from ..core.errors import ConfigurationError, PluginError
from .utils import get_plugin_name, normalize_plugin_name

T = TypeVar("T")

ENRICHERS_GROUP = "eventkey.enrichers"

BUILTIN_ENRICHERS: dict[str, type] = {}

# Optional alias mapping per group (alias -> canonical name)
BUILTIN_ALIASES: dict[str, dict[str, str]] = {
    ENRICHERS_GROUP: {},
}


class PluginNotFoundError(PluginError):
    """Plugin not found in built-ins or entry points."""


class PluginLoadError(PluginError):
    """Plugin found but failed to load/instantiate."""


class ValidationMode(Enum):
    DISABLED = "disabled"
    WARN = "warn"
    STRICT = "strict"


_validation_mode: ValidationMode = ValidationMode.DISABLED


def set_validation_mode(mode: ValidationMode) -> None:
    """Set the default plugin validation mode for subsequent loads."""
    global _validation_mode
    _validation_mode = mode


def register_builtin(
    group: str, name: str, cls: type, *, aliases: Iterable[str] | None = None
) -> None:
    """Register a built-in plugin class and optional aliases."""
    registry = _registry_for_group(group)
    if registry is None:
        return
    canonical = normalize_plugin_name(name)
    registry[canonical] = cls

    if aliases:
        alias_map = BUILTIN_ALIASES.setdefault(group, {})
        for alias in aliases:
            alias_map[normalize_plugin_name(alias)] = canonical


def _validate_plugin(instance: Any, group: str, mode: ValidationMode) -> bool:
    """Validate a plugin against its protocol."""
    from ..testing.validators import validate_enricher

    validator_map = {ENRICHERS_GROUP: validate_enricher}
    validator = validator_map.get(group)
    if validator is None:
        return True

    result = validator(instance)
    plugin_name = get_plugin_name(instance)

    if not result.valid:
        if mode == ValidationMode.STRICT:
            raise PluginLoadError(
                f"Plugin '{plugin_name}' failed validation: "
                + "; ".join(result.errors),
                plugin_name=plugin_name,
            )
        diagnostics.warn(
            "plugins",
            "plugin validation failed",
            plugin=plugin_name,
            group=group,
            errors=result.errors,
            warnings=result.warnings,
        )
        return False

    if result.warnings and mode != ValidationMode.DISABLED:
        diagnostics.warn(
            "plugins",
            "plugin validation warnings",
            plugin=plugin_name,
            warnings=result.warnings,
        )
    return True


def load_plugin(
    group: str,
    name: str,
    config: dict[str, Any] | None = None,
    *,
    validation_mode: ValidationMode | None = None,
) -> Any:
    """Load a plugin by group and name from built-ins or entry points."""
    config = config or {}
    canonical = normalize_plugin_name(name)
    registry = _registry_for_group(group) or {}
    alias_map = BUILTIN_ALIASES.get(group, {})
    mode = validation_mode if validation_mode is not None else _validation_mode

    target_name = alias_map.get(canonical, canonical)
    if target_name in registry:
        return _instantiate(
            registry[target_name], config, group=group, validation_mode=mode
        )

    try:
        candidates = _select_entry_points(importlib.metadata.entry_points(), group)
        for ep in candidates:
            if normalize_plugin_name(ep.name) == canonical:
                cls = ep.load()
                return _instantiate(cls, config, group=group, validation_mode=mode)
    except (ImportError, AttributeError) as exc:
        raise PluginLoadError(
            f"Failed to load plugin '{name}' from {group}: {exc}",
            plugin_name=name,
            cause=exc,
        ) from exc

    raise PluginNotFoundError(
        f"Plugin '{name}' not found in group '{group}'", plugin_name=name
    )


def list_available_plugins(group: str) -> list[str]:
    """List available plugin names (built-in + entry points + aliases)."""
    names: set[str] = set()
    registry = _registry_for_group(group) or {}
    names.update(registry.keys())
    names.update(BUILTIN_ALIASES.get(group, {}).keys())

    for ep in _select_entry_points(importlib.metadata.entry_points(), group):
        names.add(normalize_plugin_name(ep.name))
    return sorted(names)


def _registry_for_group(group: str) -> dict[str, type] | None:
    return {ENRICHERS_GROUP: BUILTIN_ENRICHERS}.get(group)


def _select_entry_points(eps: Any, group: str) -> list[Any]:
    return list(eps.select(group=group))


def _instantiate(
    cls: Callable[..., T] | type,
    config: dict[str, Any],
    *,
    group: str,
    validation_mode: ValidationMode,
) -> T:
    try:
        instance = cls(**config) if config else cls()
    except ConfigurationError:
        # Bad settings are fatal at startup and keep their own type
        raise
    except Exception as exc:
        label = get_plugin_name(cls) if isinstance(cls, type) else str(cls)
        diagnostics.warn(
            "plugins",
            "plugin instantiation failed",
            plugin=label,
            error=str(exc),
        )
        raise PluginLoadError(str(exc), plugin_name=label, cause=exc) from exc
    if validation_mode != ValidationMode.DISABLED:
        _validate_plugin(instance, group, validation_mode)
    return instance


__all__ = [
    "ENRICHERS_GROUP",
    "register_builtin",
    "load_plugin",
    "list_available_plugins",
    "PluginNotFoundError",
    "PluginLoadError",
    "ValidationMode",
    "set_validation_mode",
]
