"""
ach_services.batch_builder -- Turn one group of entries into a batch.

Responsibility:
    Given the entries of one standard entry class and the batch request,
    optionally add a balancing offset entry, assign trace numbers and
    addenda sequence numbers, derive the service class code, and compute
    the batch control totals.

Architecture position:
    Services -- composes kernel records with the control-total engine.
    Signature matches ``ach_engines.batch_grouper.BatchBuilder`` so it can
    be passed straight to the grouper.

Invariants enforced:
    - Trace number = ODFI id + 7-digit entry sequence (1-based).
    - ``addenda_record_indicator`` is 1 exactly when an entry has addenda.
    - Addenda are numbered 1..n and point back to their entry's sequence.
    - Batch control entry count counts entry detail records; addenda are
      counted separately by the file-level line count.

Failure modes:
    - Never raises for bad input.  Rejections come back as
      ``BatchBuildResult.rejected`` carrying the offending entries and the
      ``ValidationError``s that explain why.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import replace

from ach_engines.control_totals import entry_hash
from ach_kernel.domain.batch import (
    Batch,
    BatchBuildFailure,
    BatchBuildResult,
    BatchOffset,
    BatchParams,
)
from ach_kernel.domain.dtos import ValidationError
from ach_kernel.domain.entry import Entry
from ach_kernel.domain.records import (
    CHECKING_CREDIT,
    CHECKING_DEBIT,
    CREDITS_ONLY,
    DEBITS_ONLY,
    MIXED_DEBITS_CREDITS,
    SAVINGS_CREDIT,
    SAVINGS_DEBIT,
    BatchControl,
    BatchHeader,
)
from ach_kernel.logging_config import get_logger

logger = get_logger("services.batch_builder")

_COMPANY_NAME_WIDTH = 16


def build_batch(
    entries: Sequence[Entry],
    params: BatchParams,
    offset: BatchOffset | None = None,
) -> BatchBuildResult:
    """
    Build one batch.

    Preconditions:
        - All ``entries`` share ``params.standard_entry_class``.
    Postconditions:
        - On success the batch's control totals agree with its entries.
        - On rejection ``failure.errors`` is non-empty.
    """
    entries = tuple(_normalized(e) for e in entries)

    errors = _entry_errors(entries, params)
    if errors:
        return _reject(entries, params, errors)

    if offset is not None:
        balancing = offset_entry(entries, offset, params.standard_entry_class)
        if balancing is not None:
            entries = entries + (_normalized(balancing),)
            errors = _entry_errors(entries[-1:], params, start=len(entries) - 1)
            if errors:
                return _reject(entries, params, errors)

    sequenced = tuple(sequence_entries(entries, params.odfi_id))
    service_class = service_class_code(sequenced)

    header = BatchHeader(
        service_class_code=service_class,
        company_name=params.company_name[:_COMPANY_NAME_WIDTH],
        company_id=params.company_id,
        standard_entry_class=params.standard_entry_class,
        company_entry_description=params.entry_description,
        company_descriptive_date=params.descriptive_date,
        effective_entry_date=params.effective_date,
        odfi_id=params.odfi_id,
        batch_number=params.batch_number,
    ).normalized().validated()
    control = BatchControl(
        service_class_code=service_class,
        entry_count=len(sequenced),
        entry_hash=entry_hash(e.rdfi_id for e in sequenced),
        total_debits=sum(e.amount for e in sequenced if e.record.is_debit),
        total_credits=sum(e.amount for e in sequenced if e.record.is_credit),
        company_id=params.company_id,
        odfi_id=params.odfi_id,
        batch_number=params.batch_number,
    ).validated()

    errors = list(header.errors) + list(control.errors)
    if errors:
        return _reject(sequenced, params, errors)

    logger.debug("batch_built", extra={
        "batch_number": params.batch_number,
        "standard_entry_class": params.standard_entry_class,
        "service_class_code": service_class,
        "entry_count": control.entry_count,
        "total_debits": control.total_debits,
        "total_credits": control.total_credits,
    })
    return BatchBuildResult.ok(Batch(header=header, entries=sequenced, control=control))


def offset_entry(
    entries: Sequence[Entry],
    offset: BatchOffset,
    standard_entry_class: str,
) -> Entry | None:
    """
    The entry that balances ``entries`` against the offset account.

    A debit surplus is balanced by a credit to the offset account and vice
    versa.  Returns None when the entries already balance.
    """
    debits = sum(e.amount for e in entries if e.record.is_debit)
    credits = sum(e.amount for e in entries if e.record.is_credit)
    difference = debits - credits
    if difference == 0:
        return None

    savings = offset.account_type == "savings"
    if difference > 0:
        code = SAVINGS_CREDIT if savings else CHECKING_CREDIT
    else:
        code = SAVINGS_DEBIT if savings else CHECKING_DEBIT

    return Entry.create(
        transaction_code=code,
        routing_number=offset.routing_number,
        account_number=offset.account_number,
        amount=abs(difference),
        individual_name=offset.individual_name,
        standard_entry_class=standard_entry_class,
    )


def sequence_entries(entries: Sequence[Entry], odfi_id: str) -> Iterator[Entry]:
    """Assign trace numbers, addenda indicators and addenda sequence numbers."""
    for seq, entry in enumerate(entries, start=1):
        record = replace(
            entry.record,
            trace_number=f"{odfi_id}{seq:07d}",
            addenda_record_indicator=1 if entry.addenda else 0,
        )
        addenda = tuple(
            replace(a, addenda_sequence_number=i, entry_detail_sequence_number=seq)
            for i, a in enumerate(entry.addenda, start=1)
        )
        yield replace(entry, record=record, addenda=addenda)


def service_class_code(entries: Sequence[Entry]) -> int:
    has_debits = any(e.record.is_debit for e in entries)
    has_credits = any(e.record.is_credit for e in entries)
    if has_credits and not has_debits:
        return CREDITS_ONLY
    if has_debits and not has_credits:
        return DEBITS_ONLY
    return MIXED_DEBITS_CREDITS


def _normalized(entry: Entry) -> Entry:
    return replace(
        entry,
        record=entry.record.normalized(),
        addenda=tuple(a.normalized() for a in entry.addenda),
    )


def _entry_errors(
    entries: Sequence[Entry],
    params: BatchParams,
    start: int = 0,
) -> list[ValidationError]:
    if not entries:
        return [ValidationError(
            code="EMPTY_BATCH",
            message="a batch needs at least one entry",
        )]

    errors: list[ValidationError] = []
    for i, entry in enumerate(entries, start=start):
        if entry.standard_entry_class != params.standard_entry_class:
            errors.append(ValidationError(
                code="ENTRY_CLASS_MISMATCH",
                message=(
                    f"entry class {entry.standard_entry_class!r} does not match "
                    f"batch class {params.standard_entry_class!r}"
                ),
                field=f"entries[{i}].standard_entry_class",
            ))
        for err in entry.record.validate().errors:
            errors.append(replace(err, field=f"entries[{i}].{err.field}"))
        for j, addendum in enumerate(entry.addenda):
            for err in addendum.validate().errors:
                errors.append(replace(err, field=f"entries[{i}].addenda[{j}].{err.field}"))
    return errors


def _reject(
    entries: Sequence[Entry],
    params: BatchParams,
    errors: Sequence[ValidationError],
) -> BatchBuildResult:
    return BatchBuildResult.rejected(BatchBuildFailure(
        batch_number=params.batch_number,
        standard_entry_class=params.standard_entry_class,
        entries=tuple(entries),
        errors=tuple(errors),
    ))
