"""
Root pytest configuration.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "critical: Tests that must never fail - core functionality",
    )
    config.addinivalue_line(
        "markers",
        "security: Security-critical tests (redaction, secrets)",
    )
    config.addinivalue_line(
        "markers",
        "standard: Default risk category for typical unit tests",
    )
    config.addinivalue_line(
        "markers",
        "property: Property-based tests (may be slow)",
    )


@pytest.fixture(autouse=True)
def reset_diagnostics() -> Generator[None, None, None]:
    """Reset the diagnostics module before and after each test.

    Diagnostics cache ``internal_logging_enabled`` at first use, so each test
    starts from a clean cache and the default stderr writer.
    """
    from eventkey.core import diagnostics

    diagnostics._reset_for_tests()
    yield
    diagnostics._reset_for_tests()


@pytest.fixture
def captured_diagnostics(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[list[dict], None, None]:
    """Enable diagnostics and collect every payload into a list."""
    from eventkey.core import diagnostics

    monkeypatch.setenv("EVENTKEY_CORE__INTERNAL_LOGGING_ENABLED", "true")
    captured: list[dict] = []
    diagnostics.set_writer_for_tests(captured.append)
    yield captured
