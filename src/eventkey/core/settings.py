"""
Configuration models for eventkey using Pydantic v2 Settings.

`HashIdSettings` carries the options of the hash id transform; `CoreSettings`
carries runtime toggles. `Settings` groups both and reads environment
variables with the ``EVENTKEY_`` prefix and ``__`` as nested delimiter, e.g.
``EVENTKEY_HASHID__METHOD=SHA256``.
"""

from __future__ import annotations

import json
from typing import Annotated, Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_serializer,
    field_validator,
)
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .diagnostics import REDACTION_MARKER
from .digest import DigestConfig, HashMethod


class RedactedSecret(SecretStr):
    """`SecretStr` rendered with the fixed redaction marker."""

    def _display(self) -> str:
        return REDACTION_MARKER


class CoreSettings(BaseModel):
    """Runtime toggles shared by every entry point."""

    internal_logging_enabled: bool = Field(
        default=False,
        description="Emit structured diagnostics for non-fatal conditions",
    )
    enable_metrics: bool = Field(
        default=False,
        description="Enable Prometheus-compatible metrics",
    )
    max_concurrency: int = Field(
        default=5,
        ge=1,
        description="Upper bound on concurrently processed events in batch mode",
    )


class HashIdSettings(BaseModel):
    """Options of the hash id transform."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    # Env values reach _coerce_source as raw text, JSON array or CSV
    source: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["message"],
        description="Fields the hash is computed over; order does not matter",
    )
    target: str = Field(default="hashid", description="Field receiving the id")
    key: RedactedSecret = Field(
        default=RedactedSecret("hashid"),
        description="HMAC secret key",
    )
    method: str = Field(
        default=HashMethod.MD5.value,
        description="One of MD5, SHA1, SHA256, SHA384, SHA512",
    )
    hash_bytes_used: int | None = Field(
        default=None,
        description="Keep only the last N digest bytes; unset or <= 0 keeps all",
    )
    timestamp_field: str = Field(
        default="@timestamp",
        description="Field supplying the epoch for the id prefix",
    )
    add_timestamp_prefix: bool = Field(
        default=True,
        validation_alias=AliasChoices("add_timestamp_prefix", "timestamp_prefix"),
        description="Prefix the id with a 4-byte big-endian epoch",
    )
    normalize_timestamp: bool = Field(
        default=False,
        description=(
            "Hash an ISO-8601 string in timestamp_field as "
            "YYYY-MM-DDTHH:MM:SS.mmmZ when it is also a source field"
        ),
    )

    @field_validator("source", mode="before")
    @classmethod
    def _coerce_source(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip()
            if text.startswith("["):
                try:
                    value = json.loads(text)
                except json.JSONDecodeError as exc:
                    raise ValueError(f"Invalid source list: {exc}") from exc
            else:
                value = [part.strip() for part in text.split(",")]
        if isinstance(value, (list, tuple, set, frozenset)):
            return [str(v) for v in value if str(v).strip()]
        return value

    @field_validator("source")
    @classmethod
    def _source_non_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("source must name at least one field")
        return sorted(set(value))

    @field_validator("target", "timestamp_field")
    @classmethod
    def _field_name_non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("field name must not be empty")
        return value

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value: Any) -> Any:
        if isinstance(value, HashMethod):
            return value.value
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_serializer("key", when_used="always")
    def _serialize_key(self, value: SecretStr) -> str:
        return REDACTION_MARKER

    def digest_config(self) -> DigestConfig:
        """Resolve into a `DigestConfig`.

        Raises:
            ConfigurationError: if ``method`` is not supported.
        """
        return DigestConfig(
            method=HashMethod.parse(self.method),
            key=self.key.get_secret_value().encode("utf-8"),
            hash_bytes_used=self.hash_bytes_used,
        )


class Settings(BaseSettings):
    """Top-level configuration model."""

    core: CoreSettings = Field(default_factory=CoreSettings)
    hashid: HashIdSettings = Field(default_factory=HashIdSettings)

    model_config = SettingsConfigDict(
        env_prefix="EVENTKEY_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    def to_json(self) -> str:
        return json.dumps(self.model_dump(by_alias=True, exclude_none=True))


__all__ = [
    "CoreSettings",
    "HashIdSettings",
    "RedactedSecret",
    "Settings",
]
