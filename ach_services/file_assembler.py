"""
ach_services.file_assembler -- Build a complete ACH file from entries.

Responsibility:
    Orchestrates file assembly:

        params --defaults(clock)--> header
        entries --grouper/builder--> batches, failed
        batches --control totals--> control
        file --validator--> FileBuildResult

Architecture position:
    Services -- the only layer that reads the clock (through an injected
    ``Clock``; ``SystemClock`` when none is given).

Invariants enforced:
    - Control totals are computed strictly after all batches are known and
      only from successfully built batches.
    - Batch numbers follow the order in which each standard entry class
      first appears in ``entries``.
    - The returned ``AchFile`` is never mutated afterwards.

Failure modes:
    - Never raises for invalid input.  A header/control validation failure
      yields ``FileBuildResult.rejected`` with the partial file and its
      deduplicated errors.
    - Rejected entry groups land in ``file.failed`` and are logged at
      WARNING, but do NOT make the result unsuccessful.

Usage:
    from ach_services.file_assembler import build

    result = build(entries, params, with_offset=offset)
    if result:
        text = to_text(result.file)
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import replace

from ach_engines.batch_grouper import BatchBuilder, build_batches
from ach_engines.control_totals import build_file_control
from ach_kernel.domain.ach_file import AchFile, BuildParams, FileBuildResult
from ach_kernel.domain.batch import BatchOffset
from ach_kernel.domain.clock import Clock, SystemClock
from ach_kernel.domain.entry import Entry
from ach_kernel.domain.records import FileHeader
from ach_kernel.logging_config import LogContext, get_logger
from ach_services.batch_builder import build_batch
from ach_services.file_validator import validate_file

logger = get_logger("services.file_assembler")


def build(
    entries: Sequence[Entry],
    params: BuildParams,
    *,
    with_offset: BatchOffset | None = None,
    clock: Clock | None = None,
    batch_builder: BatchBuilder | None = None,
) -> FileBuildResult:
    """
    Build and validate a file.

    Args:
        entries: Entries in any order; grouped by standard entry class.
        params: File build parameters; missing dates/times default to
            the clock's "now".
        with_offset: Balancing account applied to every batch.
        clock: Time source for defaults.  Inject a DeterministicClock for
            reproducible output.
        batch_builder: Replaces ``build_batch`` (mainly for tests).

    Returns:
        FileBuildResult -- ``success`` iff header and control are valid.
    """
    t0 = time.monotonic()
    clock = clock or SystemClock()
    builder = batch_builder or build_batch

    with LogContext.bind(company_id=params.company_id):
        logger.info("file_build_started", extra={
            "entry_count": len(entries),
            "with_offset": with_offset is not None,
        })

        params = params.with_defaults(clock)
        file = AchFile(header=build_header(params))

        grouping = build_batches(
            entries=entries,
            params=params,
            builder=builder,
            offset=with_offset,
        )
        file = replace(file, batches=grouping.batches, failed=grouping.failed)
        file = replace(file, control=build_file_control(batches=file.batches))

        result = validate_file(file)

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("file_build_completed", extra={
            "success": result.success,
            "batch_count": len(result.file.batches),
            "failed_batch_count": len(result.file.failed),
            "error_count": len(result.file.errors),
            "duration_ms": duration_ms,
        })
        if result.file.failed:
            logger.warning("file_built_with_rejected_batches", extra={
                "failed_batch_numbers": [f.batch_number for f in result.file.failed],
                "dropped_entry_count": sum(len(f.entries) for f in result.file.failed),
            })
        return result


def build_header(params: BuildParams) -> FileHeader:
    """File header from parameters, trailing blanks dropped (not yet validated)."""
    return FileHeader(
        immediate_destination=params.immediate_destination,
        immediate_origin=params.immediate_origin,
        creation_date=params.creation_date,
        creation_time=params.creation_time,
        file_id_modifier=params.file_id_modifier,
        immediate_destination_name=params.immediate_destination_name,
        immediate_origin_name=params.immediate_origin_name,
        reference_code=params.reference_code,
    ).normalized()
