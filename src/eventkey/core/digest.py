"""
Keyed digest over selected record fields.

The message fed to the HMAC is ``"|name|value"`` repeated for every selected
field in ascending name order. When a truncation length is configured the
**last** N bytes of the digest are kept.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable

from .diagnostics import REDACTION_MARKER
from .errors import ConfigurationError


class HashMethod(str, Enum):
    MD5 = "MD5"
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"

    @classmethod
    def parse(cls, value: HashMethod | str) -> HashMethod:
        """Resolve a method name, case-insensitively.

        Raises:
            ConfigurationError: for anything outside the five supported names.
        """
        if isinstance(value, HashMethod):
            return value
        name = str(value).strip().upper()
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(
                f"Unknown digest for method={value}",
                context={"allowed": [m.value for m in cls]},
            ) from None


_CONSTRUCTORS: dict[HashMethod, Callable[..., Any]] = {
    HashMethod.MD5: hashlib.md5,
    HashMethod.SHA1: hashlib.sha1,
    HashMethod.SHA256: hashlib.sha256,
    HashMethod.SHA384: hashlib.sha384,
    HashMethod.SHA512: hashlib.sha512,
}

DIGEST_SIZES: dict[HashMethod, int] = {
    HashMethod.MD5: 16,
    HashMethod.SHA1: 20,
    HashMethod.SHA256: 32,
    HashMethod.SHA384: 48,
    HashMethod.SHA512: 64,
}


@dataclass(frozen=True)
class DigestConfig:
    """Immutable digest settings, validated once at construction.

    ``key`` is excluded from ``repr``; diagnostics and debugging output only
    ever show the redaction marker in its place.
    """

    method: HashMethod = HashMethod.MD5
    key: bytes = field(default=b"hashid", repr=False)
    hash_bytes_used: int | None = None
    _digestmod: Callable[..., Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        method = HashMethod.parse(self.method)
        object.__setattr__(self, "method", method)
        if isinstance(self.key, str):
            object.__setattr__(self, "key", self.key.encode("utf-8"))
        used = self.hash_bytes_used
        if used is not None and (isinstance(used, bool) or not isinstance(used, int)):
            raise ConfigurationError(
                f"hash_bytes_used must be an integer, got {type(used).__name__}"
            )
        if used is not None and used <= 0:
            # Non-positive means "use the whole digest"
            object.__setattr__(self, "hash_bytes_used", None)
        object.__setattr__(self, "_digestmod", _CONSTRUCTORS[method])

    @property
    def digest_size(self) -> int:
        """Native digest length of the configured method."""
        return DIGEST_SIZES[self.method]

    @property
    def output_size(self) -> int:
        """Digest length after truncation."""
        if self.hash_bytes_used is None:
            return self.digest_size
        return min(self.hash_bytes_used, self.digest_size)

    def __repr__(self) -> str:
        return (
            f"DigestConfig(method={self.method.value}, key='{REDACTION_MARKER}', "
            f"hash_bytes_used={self.hash_bytes_used})"
        )

    __str__ = __repr__


def compute_digest(pairs: Iterable[tuple[str, str]], config: DigestConfig) -> bytes:
    """HMAC over ``pairs`` (already sorted by name), truncated per ``config``."""
    mac = hmac.new(config.key, digestmod=config._digestmod)
    for name, value in pairs:
        mac.update(f"|{name}|{value}".encode("utf-8"))
    digest = mac.digest()
    used = config.hash_bytes_used
    if used is not None and len(digest) > used:
        digest = digest[-used:]
    return digest


__all__ = ["HashMethod", "DigestConfig", "DIGEST_SIZES", "compute_digest"]
