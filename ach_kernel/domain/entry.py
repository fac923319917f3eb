"""
Entry -- one payment instruction with its addenda.

An ``Entry`` pairs an ``EntryDetail`` record with the standard entry class
it must be batched under (the grouping key) and zero or more addenda.
Trace numbers and addenda sequence numbers are assigned later by the batch
builder; callers leave them blank.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ach_kernel.domain.records import Addendum, EntryDetail


@dataclass(frozen=True)
class Entry:
    """
    An entry detail record plus addenda, tagged with its standard entry class.

    Guarantees:
        - Immutable (frozen dataclass); ``addenda`` is a tuple.
        - ``rdfi_id`` is the 8-digit receiving DFI id summed into entry hashes.
    """

    record: EntryDetail
    standard_entry_class: str = "PPD"
    addenda: tuple[Addendum, ...] = ()

    @property
    def rdfi_id(self) -> str:
        return self.record.rdfi_id

    @property
    def amount(self) -> int:
        return self.record.amount

    @property
    def line_count(self) -> int:
        return 1 + len(self.addenda)

    @classmethod
    def create(
        cls,
        transaction_code: int,
        routing_number: str,
        account_number: str,
        amount: int,
        individual_name: str,
        standard_entry_class: str = "PPD",
        individual_id: str = "",
        addenda: Iterable[str] = (),
    ) -> Entry:
        """
        Factory taking a 9-digit routing number and free-text addenda.

        ``amount`` is in cents.  The routing number is split into the
        8-digit RDFI id and its check digit.
        """
        record = EntryDetail(
            transaction_code=transaction_code,
            rdfi_id=routing_number[:8],
            check_digit=routing_number[8:9],
            account_number=account_number,
            amount=amount,
            individual_name=individual_name,
            individual_id=individual_id,
        )
        return cls(
            record=record,
            standard_entry_class=standard_entry_class,
            addenda=tuple(
                Addendum(payment_related_information=text) for text in addenda
            ),
        )
