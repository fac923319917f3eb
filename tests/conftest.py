"""
Pytest fixtures for the ACH kernel test suite.

Provides:
- Structured logging configured for every test, with a capture fixture
- A deterministic clock
- Build parameters and an entry factory with valid routing numbers

Routing numbers used throughout (all pass the ABA check digit):
    111000025, 121042882, 011401533
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest

from ach_kernel.domain.ach_file import BuildParams
from ach_kernel.domain.clock import DeterministicClock
from ach_kernel.domain.entry import Entry
from ach_kernel.domain.records import CHECKING_CREDIT
from ach_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

ROUTING_A = "111000025"
ROUTING_B = "121042882"
ROUTING_C = "011401533"


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
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ach_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, build_params):
            build([...], build_params)
            logs = captured_logs()
            assert any(r["message"] == "file_build_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ach_kernel")
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
# Clock fixtures
# =============================================================================


FIXED_NOW = datetime(2024, 3, 15, 9, 30, 45, tzinfo=timezone.utc)


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock fixed at 2024-03-15 09:30:45 UTC."""
    return DeterministicClock(FIXED_NOW)


# =============================================================================
# Build fixtures
# =============================================================================


@pytest.fixture
def build_params() -> BuildParams:
    """Minimal valid build parameters; dates come from the clock."""
    return BuildParams(
        immediate_destination=ROUTING_A,
        immediate_origin="1234567890",
        immediate_destination_name="FIRST NATIONAL BANK",
        immediate_origin_name="ACME CORPORATION",
        company_id="1234567890",
    )


def make_entry(
    routing_number: str = ROUTING_B,
    amount: int = 1000,
    transaction_code: int = CHECKING_CREDIT,
    standard_entry_class: str = "PPD",
    individual_name: str = "JANE DOE",
    account_number: str = "123456789",
    addenda: tuple[str, ...] = (),
) -> Entry:
    return Entry.create(
        transaction_code=transaction_code,
        routing_number=routing_number,
        account_number=account_number,
        amount=amount,
        individual_name=individual_name,
        standard_entry_class=standard_entry_class,
        addenda=addenda,
    )


@pytest.fixture
def entry_factory():
    """Factory for valid entries; override any field by keyword."""
    return make_entry
