"""
Pytest fixtures for the invoice engine test suite.

Provides:
- Structured logging configured for the session
- Log context isolation between tests
- Captured JSON log records
- A deterministic clock
"""

import json
import logging
from io import StringIO

import pytest

from invoice_kernel.domain.clock import DeterministicClock
from invoice_kernel.logging_config import (
    StructuredFormatter,
    clear_log_context,
    configure_logging,
    reset_logging,
)
from tests.factories import dt


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Drop bound log context fields between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def captured_logs():
    """
    Capture invoice_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_invoice_financials(invoice)
            logs = captured_logs()
            assert any(r["message"] == "invoice_financials_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("invoice_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Time
# =============================================================================


@pytest.fixture
def clock():
    """Deterministic clock fixed at 2024-02-01 00:00 UTC."""
    return DeterministicClock(dt(2024, 2, 1))
