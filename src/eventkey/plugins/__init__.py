"""
eventkey plugin system.

Importing this package registers the built-in enrichers with the loader.
"""

from .enrichers import BaseEnricher, HashIdEnricher, enrich_parallel
from .loader import (
    ENRICHERS_GROUP,
    PluginLoadError,
    PluginNotFoundError,
    ValidationMode,
    list_available_plugins,
    load_plugin,
    register_builtin,
    set_validation_mode,
)

__all__ = [
    "BaseEnricher",
    "HashIdEnricher",
    "enrich_parallel",
    "ENRICHERS_GROUP",
    "PluginLoadError",
    "PluginNotFoundError",
    "ValidationMode",
    "list_available_plugins",
    "load_plugin",
    "register_builtin",
    "set_validation_mode",
]
