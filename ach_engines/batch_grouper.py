"""
Module: ach_engines.batch_grouper
Responsibility:
    Partition a flat sequence of entries into one group per standard entry
    class and hand each group to a batch builder with a sequential batch
    number.

Architecture position:
    Engines -- pure calculation layer.  The batch builder is injected as a
    callable so this module never imports ach_services.

Invariants enforced:
    - Groups appear in the order their class was first seen in the input;
      batch numbers run 1..n in that order.
    - Entries keep their input order within a group.
    - ``batches`` and ``failed`` are both in encounter order.  A rejected
      group still consumes its batch number.

Failure modes:
    - None raised here; builder rejections are collected in ``failed``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ach_engines.tracer import traced_engine
from ach_kernel.domain.ach_file import BuildParams
from ach_kernel.domain.batch import (
    Batch,
    BatchBuildFailure,
    BatchBuildResult,
    BatchOffset,
    BatchParams,
)
from ach_kernel.domain.entry import Entry
from ach_kernel.logging_config import LogContext, get_logger

logger = get_logger("engines.batch_grouper")

BatchBuilder = Callable[[Sequence[Entry], BatchParams, BatchOffset | None], BatchBuildResult]


@dataclass(frozen=True)
class BatchGrouping:
    """Built batches and rejected groups, both in encounter order."""

    batches: tuple[Batch, ...] = ()
    failed: tuple[BatchBuildFailure, ...] = ()


def group_by_entry_class(entries: Sequence[Entry]) -> dict[str, list[Entry]]:
    """Group entries by standard entry class; dict order is first-seen order."""
    groups: dict[str, list[Entry]] = {}
    for entry in entries:
        groups.setdefault(entry.standard_entry_class, []).append(entry)
    return groups


def batch_params_for(
    params: BuildParams,
    standard_entry_class: str,
    batch_number: int,
) -> BatchParams:
    """The batch request for one group, derived from file build parameters."""
    if params.effective_date is None:
        raise ValueError("effective_date must be set; apply defaults first")
    return BatchParams(
        batch_number=batch_number,
        company_id=params.company_id,
        company_name=params.immediate_origin_name,
        effective_date=params.effective_date,
        odfi_id=params.odfi_id,
        standard_entry_class=standard_entry_class,
        entry_description=params.entry_description,
        descriptive_date=params.descriptive_date,
    )


@traced_engine("batch_grouper", "1.0", fingerprint_fields=("entries", "offset"))
def build_batches(
    *,
    entries: Sequence[Entry],
    params: BuildParams,
    builder: BatchBuilder,
    offset: BatchOffset | None = None,
) -> BatchGrouping:
    """
    Group ``entries`` and build one batch per standard entry class.

    Args:
        entries: Entries in caller order.
        params: File build parameters with defaults already applied.
        builder: Called once per group as ``builder(group, batch_params, offset)``.
        offset: Optional balancing account passed through to the builder.

    Returns:
        BatchGrouping; empty when ``entries`` is empty.
    """
    batches: list[Batch] = []
    failed: list[BatchBuildFailure] = []

    groups = group_by_entry_class(entries)
    for batch_number, (sec, group) in enumerate(groups.items(), start=1):
        with LogContext.bind(batch_number=str(batch_number)):
            result = builder(group, batch_params_for(params, sec, batch_number), offset)
            if result.success:
                batches.append(result.batch)
            else:
                failed.append(result.failure)
                logger.warning("batch_rejected", extra={
                    "standard_entry_class": sec,
                    "entry_count": len(group),
                    "error_codes": [e.code for e in result.failure.errors],
                })

    logger.info("batches_grouped", extra={
        "group_count": len(groups),
        "built_count": len(batches),
        "failed_count": len(failed),
    })
    return BatchGrouping(batches=tuple(batches), failed=tuple(failed))
