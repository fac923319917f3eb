"""
Module: ach_engines.control_totals
Responsibility:
    Compute the derived file-level totals of an ACH file from its built
    batches: entry and addenda counts, line and block counts, the entry
    hash, and debit/credit totals.  ``build_file_control`` is the only
    producer of a new ``FileControl``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ach_kernel.domain.

Invariants enforced:
    - Purity: no clock access, no I/O.  Functions are total over
      well-typed batches.
    - Commutativity: every total is a sum, so batch and entry order never
      change a result.
    - ``entry_hash`` keeps only the last ten decimal digits of the sum
      (fixed-width wraparound, not an error).

Failure modes:
    - ValueError from ``int()`` if an RDFI id is not numeric.  Built
      batches never contain one.

Usage:
    from ach_engines.control_totals import build_file_control

    control = build_file_control(batches=file.batches)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ach_engines.tracer import traced_engine
from ach_kernel.domain.batch import Batch
from ach_kernel.domain.fields import BLOCKING_FACTOR
from ach_kernel.domain.records import FileControl
from ach_kernel.logging_config import get_logger

logger = get_logger("engines.control_totals")

ENTRY_HASH_MODULUS = 10 ** 10

# File header + file control
FILE_OVERHEAD_LINES = 2
# Batch header + batch control
BATCH_OVERHEAD_LINES = 2


def entry_hash(rdfi_ids: Iterable[str | int]) -> int:
    """Sum of the routing ids, truncated to the last ten digits."""
    return sum(int(i) for i in rdfi_ids) % ENTRY_HASH_MODULUS


def entry_count(batches: Sequence[Batch]) -> int:
    return sum(b.control.entry_count for b in batches)


def addenda_count(batches: Sequence[Batch]) -> int:
    return sum(b.addenda_count for b in batches)


def line_count(batches: Sequence[Batch], *, entry_count: int, batch_count: int) -> int:
    """Records in the file before padding."""
    return (
        entry_count
        + addenda_count(batches)
        + BATCH_OVERHEAD_LINES * batch_count
        + FILE_OVERHEAD_LINES
    )


def block_count(lines: int) -> int:
    """Number of ten-record blocks needed to hold ``lines`` records."""
    return -(-lines // BLOCKING_FACTOR)


def file_entry_hash(batches: Sequence[Batch]) -> int:
    return entry_hash(e.rdfi_id for b in batches for e in b.entries)


def total_debits(batches: Sequence[Batch]) -> int:
    return sum(b.control.total_debits for b in batches)


def total_credits(batches: Sequence[Batch]) -> int:
    return sum(b.control.total_credits for b in batches)


@traced_engine("control_totals", "1.0", fingerprint_fields=("batches",))
def build_file_control(*, batches: Sequence[Batch]) -> FileControl:
    """
    Derive the file control record from the finished batches.

    Preconditions:
        - Every batch in ``batches`` was built successfully.
    Postconditions:
        - ``batch_count == len(batches)``.
        - ``block_count == ceil(line_count / 10)``.
    """
    batch_count = len(batches)
    entries = entry_count(batches)
    lines = line_count(batches, entry_count=entries, batch_count=batch_count)

    control = FileControl(
        batch_count=batch_count,
        block_count=block_count(lines),
        entry_count=entries,
        entry_hash=file_entry_hash(batches),
        total_debits=total_debits(batches),
        total_credits=total_credits(batches),
    )

    logger.debug("file_control_computed", extra={
        "batch_count": control.batch_count,
        "entry_count": control.entry_count,
        "line_count": lines,
        "block_count": control.block_count,
        "entry_hash": control.entry_hash,
    })
    return control
