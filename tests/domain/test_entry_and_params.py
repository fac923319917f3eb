"""
Tests for Entry, BatchOffset, BuildParams and the clock.

Covers:
- Entry.create splitting routing numbers and wrapping addenda
- BatchOffset account type check
- BuildParams defaults from an injected clock
- DeterministicClock behaviour
"""

from datetime import date, datetime, time, timedelta, timezone

import pytest

from ach_kernel.domain.ach_file import AchFile, BuildParams, FileBuildResult
from ach_kernel.domain.batch import BatchOffset
from ach_kernel.domain.clock import DeterministicClock, SystemClock
from ach_kernel.domain.dtos import ValidationError, ValidationResult, dedupe_errors
from ach_kernel.domain.entry import Entry
from ach_kernel.domain.records import CHECKING_DEBIT, Addendum, FileHeader


class TestEntryCreate:
    """Entry.create factory."""

    def test_routing_number_split(self):
        entry = Entry.create(CHECKING_DEBIT, "011401533", "987654321", 2500, "JOHN ROE")

        assert entry.record.rdfi_id == "01140153"
        assert entry.record.check_digit == "3"
        assert entry.rdfi_id == "01140153"
        assert entry.record.routing_number == "011401533"

    def test_defaults(self):
        entry = Entry.create(CHECKING_DEBIT, "011401533", "987654321", 2500, "JOHN ROE")

        assert entry.standard_entry_class == "PPD"
        assert entry.addenda == ()
        assert entry.amount == 2500
        assert entry.line_count == 1

    def test_addenda_wrapped(self):
        entry = Entry.create(
            CHECKING_DEBIT, "011401533", "987654321", 2500, "JOHN ROE",
            standard_entry_class="CCD",
            addenda=["INV 1", "INV 2"],
        )

        assert entry.standard_entry_class == "CCD"
        assert entry.addenda == (
            Addendum(payment_related_information="INV 1"),
            Addendum(payment_related_information="INV 2"),
        )
        assert entry.line_count == 3

    def test_entries_are_immutable(self):
        entry = Entry.create(CHECKING_DEBIT, "011401533", "987654321", 2500, "JOHN ROE")
        with pytest.raises(AttributeError):
            entry.standard_entry_class = "WEB"


class TestBatchOffset:
    def test_accepts_savings(self):
        assert BatchOffset("111000025", "555", account_type="savings").account_type == "savings"

    def test_rejects_unknown_account_type(self):
        with pytest.raises(ValueError, match="account_type"):
            BatchOffset("111000025", "555", account_type="brokerage")


class TestBuildParamsDefaults:
    """Time-dependent defaults come from the injected clock."""

    def test_defaults_from_clock(self, build_params, deterministic_clock):
        params = build_params.with_defaults(deterministic_clock)

        assert params.creation_date == date(2024, 3, 15)
        assert params.creation_time == time(9, 30)
        assert params.effective_date == date(2024, 3, 15)

    def test_creation_time_truncated_to_minute(self, build_params, deterministic_clock):
        params = build_params.with_defaults(deterministic_clock)
        assert params.creation_time.second == 0
        assert params.creation_time.microsecond == 0

    def test_explicit_values_kept(self, build_params, deterministic_clock):
        params = BuildParams(
            immediate_destination="111000025",
            immediate_origin="1234567890",
            immediate_destination_name="BANK",
            immediate_origin_name="ACME",
            company_id="1234567890",
            creation_date=date(2023, 12, 31),
            creation_time=time(23, 59),
            effective_date=date(2024, 1, 2),
        ).with_defaults(deterministic_clock)

        assert params.creation_date == date(2023, 12, 31)
        assert params.creation_time == time(23, 59)
        assert params.effective_date == date(2024, 1, 2)

    def test_static_defaults(self, build_params):
        assert build_params.file_id_modifier == "A"
        assert build_params.entry_description == "PAYMENT"
        assert build_params.descriptive_date == ""
        assert build_params.reference_code == ""

    def test_odfi_id_is_destination_without_check_digit(self, build_params):
        assert build_params.odfi_id == "11100002"


class TestClock:
    def test_deterministic_clock_is_stable(self):
        clock = DeterministicClock()
        assert clock.now() == clock.now()
        assert clock.now() == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_advance(self):
        clock = DeterministicClock()
        start = clock.now()
        clock.advance(90)
        assert clock.now() - start == timedelta(seconds=90)

    def test_set_time_resets_advance(self):
        clock = DeterministicClock()
        clock.advance(5)
        target = datetime(2025, 6, 1, tzinfo=timezone.utc)
        clock.set_time(target)
        assert clock.now() == target

    def test_system_clock_is_timezone_aware(self):
        assert SystemClock().now().tzinfo is not None


class TestValidationDTOs:
    def test_result_from_errors(self):
        assert ValidationResult.from_errors([]).is_valid
        failed = ValidationResult.from_errors([ValidationError("X", "x")])
        assert not failed
        assert failed.errors[0].code == "X"

    def test_dedupe_keeps_first_seen_order(self):
        a = ValidationError("A", "a", "f")
        b = ValidationError("B", "b")
        assert dedupe_errors([a, b, a, b]) == (a, b)

    def test_file_build_result_truthiness(self):
        file = AchFile(header=FileHeader("111000025", "1234567890"))
        assert FileBuildResult.ok(file)
        assert not FileBuildResult.rejected(file)
        assert FileBuildResult.rejected(file).errors == ()
