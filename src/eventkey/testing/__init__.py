"""
Testing utilities for eventkey plugins.

Example:
    from eventkey.testing import validate_enricher

    def test_my_enricher():
        result = validate_enricher(MyEnricher())
        assert result.valid
"""

from .validators import ProtocolViolationError, ValidationResult, validate_enricher

__all__ = ["ProtocolViolationError", "ValidationResult", "validate_enricher"]
