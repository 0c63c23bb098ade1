"""
Plugin utilities for name resolution and configuration parsing.
"""

from __future__ import annotations

import importlib
from typing import Any, TypeVar

from pydantic import BaseModel

ConfigT = TypeVar("ConfigT", bound=BaseModel)


def get_plugin_name(plugin: Any) -> str:
    """Get the canonical name of a plugin.

    Resolution order:
    1. plugin.name attribute (if non-empty string)
    2. PLUGIN_METADATA["name"] (if module has metadata)
    3. Class name (fallback)
    """
    name = getattr(plugin, "name", None)
    if name and isinstance(name, str) and name.strip():
        result: str = name.strip()
        return result

    cls = plugin if isinstance(plugin, type) else plugin.__class__
    module_name = getattr(cls, "__module__", None)
    if module_name:
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            module = None
        metadata = getattr(module, "PLUGIN_METADATA", None)
        if metadata and isinstance(metadata, dict):
            meta_name = metadata.get("name")
            if meta_name and isinstance(meta_name, str):
                meta_result: str = meta_name
                return meta_result

    class_name: str = cls.__name__
    return class_name


def normalize_plugin_name(name: str) -> str:
    """Normalize a plugin name: hyphens to underscores, lowercase."""
    return name.replace("-", "_").lower()


def parse_plugin_config(
    config_cls: type[ConfigT],
    config: ConfigT | dict[str, Any] | None,
    **kwargs: Any,
) -> ConfigT:
    """Build a plugin config model from an instance, a mapping or kwargs.

    Keyword arguments override mapping entries so loaders can pass flat
    options (``load_plugin(..., {"method": "SHA1"})``).
    """
    if isinstance(config, config_cls):
        if kwargs:
            # dict() keeps raw field values; model_dump would serialize secrets
            return config_cls.model_validate({**dict(config), **kwargs})
        return config
    data: dict[str, Any] = dict(config or {})
    data.update(kwargs)
    return config_cls.model_validate(data)


__all__ = ["get_plugin_name", "normalize_plugin_name", "parse_plugin_config"]
