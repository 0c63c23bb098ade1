"""
eventkey - deterministic, sortable deduplication keys for event pipelines.

An id is an HMAC over selected event fields, optionally prefixed with the
event's epoch seconds, encoded with an order-preserving 64-symbol alphabet.

Example:
    from eventkey import HashIdGenerator, HashIdSettings

    gen = HashIdGenerator(HashIdSettings(source=["message"]))
    event = {"message": "testmessage", "@timestamp": "2016-01-01T02:00:00Z"}
    gen.apply(event)  # event["hashid"] now holds the id
"""

from ._version import __version__
from .core.config import load_settings
from .core.digest import DigestConfig, HashMethod, compute_digest
from .core.encoding import ALPHABET, decode_sortable, encode_sortable
from .core.errors import ConfigurationError, EventKeyError
from .core.hashid import HashIdGenerator, extract_timestamp
from .core.record import EventRecord, Record
from .core.settings import CoreSettings, HashIdSettings, Settings
from .core.timestamp import timestamp_prefix, to_epoch_seconds
from .plugins.enrichers import HashIdEnricher, enrich_parallel

__all__ = [
    "__version__",
    # Core transform
    "HashIdGenerator",
    "extract_timestamp",
    "DigestConfig",
    "HashMethod",
    "compute_digest",
    "ALPHABET",
    "encode_sortable",
    "decode_sortable",
    "timestamp_prefix",
    "to_epoch_seconds",
    # Records
    "Record",
    "EventRecord",
    # Configuration
    "Settings",
    "CoreSettings",
    "HashIdSettings",
    "load_settings",
    # Errors
    "EventKeyError",
    "ConfigurationError",
    # Plugins
    "HashIdEnricher",
    "enrich_parallel",
]
