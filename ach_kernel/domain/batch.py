"""
Batch DTOs -- Pure frozen dataclasses for batch construction.

Responsibility:
    The request (``BatchParams``, optional ``BatchOffset``), the product
    (``Batch``) and the failure descriptor (``BatchBuildFailure``) of the
    batch builder, plus ``BatchBuildResult`` wrapping either outcome.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Shared by
    ach_engines (grouping, control totals) and ach_services (building).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ach_kernel.domain.dtos import ValidationError
from ach_kernel.domain.entry import Entry
from ach_kernel.domain.records import BatchControl, BatchHeader

ACCOUNT_TYPES = ("checking", "savings")


@dataclass(frozen=True)
class BatchOffset:
    """
    The originator's own account, used to balance a batch.

    Contract:
        When supplied to the builder, one extra entry is added so that the
        batch's debits equal its credits.
    """

    routing_number: str
    account_number: str
    account_type: str = "checking"
    individual_name: str = "OFFSET"

    def __post_init__(self) -> None:
        if self.account_type not in ACCOUNT_TYPES:
            raise ValueError(
                f"account_type must be one of {ACCOUNT_TYPES}: {self.account_type!r}"
            )


@dataclass(frozen=True)
class BatchParams:
    """Everything the batch builder needs besides the entries themselves."""

    batch_number: int
    company_id: str
    company_name: str
    effective_date: date
    odfi_id: str
    standard_entry_class: str
    entry_description: str = "PAYMENT"
    descriptive_date: str = ""


@dataclass(frozen=True)
class Batch:
    """A built batch: header, sequenced entries, control."""

    header: BatchHeader
    entries: tuple[Entry, ...]
    control: BatchControl

    @property
    def batch_number(self) -> int:
        return self.header.batch_number

    @property
    def standard_entry_class(self) -> str:
        return self.header.standard_entry_class

    @property
    def addenda_count(self) -> int:
        return sum(len(e.addenda) for e in self.entries)


@dataclass(frozen=True)
class BatchBuildFailure:
    """An entry group the builder rejected, paired with the reasons."""

    batch_number: int
    standard_entry_class: str
    entries: tuple[Entry, ...]
    errors: tuple[ValidationError, ...]


@dataclass(frozen=True)
class BatchBuildResult:
    """Either a built batch or the failure describing why it was rejected."""

    success: bool
    batch: Batch | None = None
    failure: BatchBuildFailure | None = None

    @classmethod
    def ok(cls, batch: Batch) -> BatchBuildResult:
        return cls(success=True, batch=batch)

    @classmethod
    def rejected(cls, failure: BatchBuildFailure) -> BatchBuildResult:
        return cls(success=False, failure=failure)

    def __bool__(self) -> bool:
        return self.success
