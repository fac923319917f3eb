"""
Module: ach_engines.padding
Responsibility:
    Work out how many filler records round a file up to a whole number of
    ten-record blocks, and produce them.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``filler_count`` is always in [0, 9].
    - line_count + filler_count == 10 * block_count.
"""

from __future__ import annotations

from ach_engines.control_totals import line_count
from ach_kernel.domain.ach_file import AchFile
from ach_kernel.domain.fields import BLOCKING_FACTOR, FILLER_RECORD


def filler_count(lines: int) -> int:
    remainder = lines % BLOCKING_FACTOR
    if remainder == 0:
        return 0
    return BLOCKING_FACTOR - remainder


def file_line_count(file: AchFile) -> int:
    """Records in a built file before padding, from its batches and control."""
    if file.control is None:
        raise ValueError("file has no control record; build it first")
    return line_count(
        file.batches,
        entry_count=file.control.entry_count,
        batch_count=file.control.batch_count,
    )


def filler_lines(file: AchFile) -> tuple[str, ...]:
    """The filler records that pad ``file`` to a block boundary."""
    return (FILLER_RECORD,) * filler_count(file_line_count(file))
