"""
Tests for the control totals engine.

Covers:
- Entry hash: sum of routing ids, last ten digits, order independence
- Line and block counts
- build_file_control over several batches
- ACH_ENGINE_TRACE emission
"""

from datetime import date

import pytest

from ach_engines.control_totals import (
    ENTRY_HASH_MODULUS,
    addenda_count,
    block_count,
    build_file_control,
    entry_count,
    entry_hash,
    line_count,
)
from ach_kernel.domain.batch import Batch
from ach_kernel.domain.entry import Entry
from ach_kernel.domain.records import (
    CHECKING_CREDIT,
    CHECKING_DEBIT,
    MIXED_DEBITS_CREDITS,
    BatchControl,
    BatchHeader,
    FileControl,
)


def _entry(routing: str, amount: int, code: int = CHECKING_CREDIT, addenda=()) -> Entry:
    return Entry.create(code, routing, "123456789", amount, "JANE DOE", addenda=addenda)


def _batch(entries: list[Entry], batch_number: int = 1) -> Batch:
    """A batch whose control agrees with its entries."""
    return Batch(
        header=BatchHeader(
            service_class_code=MIXED_DEBITS_CREDITS,
            company_name="ACME",
            company_id="1234567890",
            standard_entry_class="PPD",
            company_entry_description="PAYMENT",
            effective_entry_date=date(2024, 3, 15),
            odfi_id="11100002",
            batch_number=batch_number,
        ),
        entries=tuple(entries),
        control=BatchControl(
            service_class_code=MIXED_DEBITS_CREDITS,
            entry_count=len(entries),
            entry_hash=entry_hash(e.rdfi_id for e in entries),
            total_debits=sum(e.amount for e in entries if e.record.is_debit),
            total_credits=sum(e.amount for e in entries if e.record.is_credit),
            company_id="1234567890",
            odfi_id="11100002",
            batch_number=batch_number,
        ),
    )


class TestEntryHash:
    """Entry hash: last ten digits of the routing id sum."""

    def test_known_routing_numbers(self):
        assert entry_hash(["111000025", "121042882", "011401533"]) == 243444440

    def test_rdfi_ids(self):
        assert entry_hash(["11100002", "12104288", "01140153"]) == 24344443

    def test_order_independent(self):
        ids = ["111000025", "121042882", "011401533"]
        assert entry_hash(ids) == entry_hash(reversed(ids))

    def test_wraps_to_last_ten_digits(self):
        assert entry_hash(["9999999999", "2"]) == 1

    def test_short_sum_is_unchanged(self):
        assert entry_hash(["00000001", "00000002"]) == 3

    def test_empty_is_zero(self):
        assert entry_hash([]) == 0

    def test_accepts_integers(self):
        assert entry_hash([ENTRY_HASH_MODULUS + 5]) == 5


class TestLineAndBlockCounts:
    """line = entries + addenda + 2*batches + 2; blocks = ceil(line / 10)."""

    def test_twelve_entries_one_batch(self):
        batch = _batch([_entry("121042882", 100) for _ in range(12)])
        lines = line_count([batch], entry_count=12, batch_count=1)

        assert lines == 16
        assert block_count(lines) == 2

    def test_addenda_counted(self):
        batch = _batch([_entry("121042882", 100, addenda=("A", "B")), _entry("121042882", 100)])

        assert addenda_count([batch]) == 2
        assert addenda_count([batch, batch]) == 2 * batch.addenda_count
        assert line_count([batch], entry_count=2, batch_count=1) == 8

    @pytest.mark.parametrize(
        "lines, blocks",
        [(0, 0), (1, 1), (9, 1), (10, 1), (11, 2), (20, 2), (21, 3)],
    )
    def test_block_count(self, lines, blocks):
        assert block_count(lines) == blocks

    def test_no_batches(self):
        assert line_count([], entry_count=0, batch_count=0) == 2


class TestBuildFileControl:
    """File control derived from finished batches."""

    def test_totals_across_batches(self):
        first = _batch([_entry("121042882", 1000), _entry("011401533", 2000)], batch_number=1)
        second = _batch(
            [_entry("111000025", 500, code=CHECKING_DEBIT, addenda=("INV 9",))],
            batch_number=2,
        )

        control = build_file_control(batches=[first, second])

        assert control == FileControl(
            batch_count=2,
            block_count=1,
            entry_count=3,
            entry_hash=24344443,
            total_debits=500,
            total_credits=3000,
        )

    def test_entry_count_sums_batch_controls(self):
        batches = [_batch([_entry("121042882", 1)] * n, batch_number=i) for i, n in enumerate((1, 4, 2), 1)]
        assert entry_count(batches) == 7
        assert build_file_control(batches=batches).entry_count == 7

    def test_batch_order_does_not_matter(self):
        a = _batch([_entry("121042882", 1000)], batch_number=1)
        b = _batch([_entry("011401533", 7, code=CHECKING_DEBIT)], batch_number=2)

        assert build_file_control(batches=[a, b]) == build_file_control(batches=[b, a])

    def test_empty_file(self):
        control = build_file_control(batches=[])

        assert control.batch_count == 0
        assert control.entry_count == 0
        assert control.entry_hash == 0
        assert control.block_count == 1

    def test_emits_engine_trace(self, captured_logs):
        build_file_control(batches=[_batch([_entry("121042882", 1000)])])

        traces = [r for r in captured_logs() if r["message"] == "ACH_ENGINE_TRACE"]
        assert len(traces) == 1
        assert traces[0]["engine_name"] == "control_totals"
        assert len(traces[0]["input_fingerprint"]) == 16
