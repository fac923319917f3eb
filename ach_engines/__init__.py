"""
Module: ach_engines
Responsibility:
    Pure calculation engines over built ACH structures: batch grouping,
    control totals, and block padding.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ach_kernel.  MUST NOT import ach_services.

Invariants enforced:
    - Engines never read the clock; dates arrive in their inputs.
    - Identical inputs always produce identical outputs.
    - Amounts are integer cents.
"""

from ach_engines.batch_grouper import (
    BatchBuilder,
    BatchGrouping,
    build_batches,
    group_by_entry_class,
)
from ach_engines.control_totals import (
    ENTRY_HASH_MODULUS,
    block_count,
    build_file_control,
    entry_hash,
    line_count,
)
from ach_engines.padding import file_line_count, filler_count, filler_lines

__all__ = [
    "BatchBuilder",
    "BatchGrouping",
    "ENTRY_HASH_MODULUS",
    "block_count",
    "build_batches",
    "build_file_control",
    "entry_hash",
    "file_line_count",
    "filler_count",
    "filler_lines",
    "group_by_entry_class",
    "line_count",
]
