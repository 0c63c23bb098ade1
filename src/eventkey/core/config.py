"""
Configuration loading for eventkey.

Settings come from, in increasing priority: field defaults, ``EVENTKEY_*``
environment variables, an optional JSON or TOML file, and keyword overrides.
Every failure surfaces as `ConfigurationError`.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import orjson
from pydantic import ValidationError
from pydantic_settings import SettingsError

from .errors import ConfigurationError
from .settings import Settings


def _read_config_file(config_file: str | Path) -> dict[str, Any]:
    path = Path(config_file)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read configuration file {path}: {exc}",
            cause=exc,
            context={"path": str(path)},
        ) from exc

    try:
        if path.suffix.lower() == ".toml":
            data: Any = tomllib.loads(raw.decode("utf-8"))
        else:
            data = orjson.loads(raw)
    except (tomllib.TOMLDecodeError, orjson.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(
            f"Invalid configuration file {path}: {exc}",
            cause=exc,
            context={"path": str(path)},
        ) from exc

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {path} must contain a mapping",
            context={"path": str(path)},
        )
    return data


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for name, value in overrides.items():
        current = merged.get(name)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[name] = _merge(current, value)
        else:
            merged[name] = value
    return merged


def load_settings(
    config_file: str | Path | None = None, **config_overrides: Any
) -> Settings:
    """Load and validate settings.

    Args:
        config_file: Optional JSON (``.json``) or TOML (``.toml``) file whose
            top-level tables mirror `Settings` (``core``, ``hashid``).
        **config_overrides: Top-level groups to merge over file values, e.g.
            ``hashid={"method": "SHA256"}``.

    Raises:
        ConfigurationError: on unreadable files or invalid values, including
            an unsupported hash method.
    """
    data: dict[str, Any] = {}
    if config_file is not None:
        data = _read_config_file(config_file)
    if config_overrides:
        data = _merge(data, config_overrides)

    try:
        settings = Settings(**data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid configuration: {exc.error_count()} error(s)",
            cause=exc,
            context={"errors": [e["msg"] for e in exc.errors()]},
        ) from exc
    except SettingsError as exc:
        raise ConfigurationError(
            f"Invalid configuration from environment: {exc}",
            cause=exc,
        ) from exc

    # Resolve the digest once so a bad method fails at load time
    settings.hashid.digest_config()
    return settings


__all__ = ["load_settings"]
