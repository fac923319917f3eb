"""
NACHA record types.

Responsibility:
    Frozen dataclasses for the six NACHA record types, each declaring its
    fixed-width layout (``FIELDS``) and its own validation rules.  Every
    record supports ``encode()``, ``decode()``, ``validate()`` and
    ``validated()`` (a copy carrying its errors).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - ``encode()`` output is exactly ``RECORD_SIZE`` characters.
    - ``errors`` is an annotation only: it is excluded from equality so a
      validated record equals its unvalidated twin.

Failure modes:
    - ``RecordLengthError`` / ``MalformedFieldError`` from ``decode()``.
    - Validation never raises; problems come back as ``ValidationError``.

Record layout summary (positions are 1-based):

    1 File Header     5 Batch Header    6 Entry Detail
    7 Addenda         8 Batch Control   9 File Control
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, time
from typing import Any, ClassVar

from ach_kernel.domain.dtos import ValidationError, ValidationResult
from ach_kernel.domain.fields import (
    RECORD_SIZE,
    FieldKind,
    FieldSpec,
    constant,
    decode_field,
    encode_field,
    field_errors,
    reserved,
)
from ach_kernel.exceptions import RecordLengthError

N = FieldKind.NUMERIC
D = FieldKind.DIGITS
A = FieldKind.ALPHANUMERIC
R = FieldKind.ROUTING

# Service class codes
MIXED_DEBITS_CREDITS = 200
CREDITS_ONLY = 220
DEBITS_ONLY = 225
SERVICE_CLASS_CODES = frozenset({MIXED_DEBITS_CREDITS, CREDITS_ONLY, DEBITS_ONLY})

STANDARD_ENTRY_CLASSES = frozenset({
    "ACK", "ADV", "ARC", "ATX", "BOC", "CCD", "CIE", "COR", "CTX", "DNE",
    "ENR", "IAT", "MTE", "POP", "POS", "PPD", "RCK", "SHR", "TEL", "TRC",
    "TRX", "WEB", "XCK",
})

# Transaction codes: the last digit 0-4 is a credit, 5-9 a debit;
# 3 and 8 are prenotes, 1 and 6 returns.
CHECKING_CREDIT = 22
CHECKING_DEBIT = 27
SAVINGS_CREDIT = 32
SAVINGS_DEBIT = 37
TRANSACTION_CODES = frozenset({
    21, 22, 23, 24, 26, 27, 28, 29,
    31, 32, 33, 34, 36, 37, 38, 39,
    41, 42, 43, 46, 47, 48,
    51, 52, 53, 55, 56,
})


def routing_check_digit(first_eight: str) -> int:
    """ABA check digit for the first eight digits of a routing number."""
    weights = (3, 7, 1, 3, 7, 1, 3, 7)
    total = sum(int(d) * w for d, w in zip(first_eight, weights))
    return (10 - total % 10) % 10


def is_routing_number(value: str) -> bool:
    """True for nine digits whose last digit is the ABA check digit."""
    return (
        len(value) == 9
        and value.isdigit()
        and routing_check_digit(value[:8]) == int(value[8])
    )


class FixedWidthRecord:
    """Codec and validation behaviour shared by all record dataclasses."""

    FIELDS: ClassVar[tuple[FieldSpec, ...]] = ()
    RECORD_TYPE: ClassVar[str] = ""

    errors: tuple[ValidationError, ...]

    def encode(self) -> str:
        line = "".join(
            encode_field(spec, getattr(self, spec.name) if spec.stored else None)
            for spec in self.FIELDS
        )
        assert len(line) == RECORD_SIZE, f"{type(self).__name__} encoded to {len(line)} chars"
        return line

    @classmethod
    def decode(cls, line: str, line_number: int | None = None) -> Any:
        if len(line) != RECORD_SIZE:
            raise RecordLengthError(len(line), RECORD_SIZE, line_number)
        values: dict[str, Any] = {}
        for spec in cls.FIELDS:
            value = decode_field(spec, spec.slice(line), line_number)
            if spec.stored:
                values[spec.name] = value
        return cls(**values)

    def validate(self) -> ValidationResult:
        errors: list[ValidationError] = []
        for spec in self.FIELDS:
            if spec.stored:
                errors.extend(field_errors(spec, getattr(self, spec.name)))
        errors.extend(self._rule_errors())
        return ValidationResult.from_errors(errors)

    def validated(self) -> Any:
        """Copy of this record carrying the errors found by ``validate()``."""
        return replace(self, errors=self.validate().errors)

    def normalized(self) -> Any:
        """Copy without the blanks that encoding turns into fill.

        Alphanumeric fields lose trailing blanks, routing fields lose blanks
        on both sides.  ``decode(encode(r)) == r`` only holds for normalized
        records.
        """
        changes: dict[str, str] = {}
        for spec in self.FIELDS:
            if spec.kind not in (A, R):
                continue
            value = getattr(self, spec.name)
            if not isinstance(value, str):
                continue
            trimmed = value.rstrip() if spec.kind is A else value.strip()
            if trimmed != value:
                changes[spec.name] = trimmed
        return replace(self, **changes) if changes else self

    @property
    def is_valid(self) -> bool:
        return self.validate().is_valid

    def _rule_errors(self) -> list[ValidationError]:
        return []


def _errors_field() -> Any:
    return field(default=(), compare=False, repr=False)


# =============================================================================
# File header / control
# =============================================================================


@dataclass(frozen=True)
class FileHeader(FixedWidthRecord):
    """Record type 1: identifies the sending and receiving institutions."""

    RECORD_TYPE = "1"
    FIELDS = (
        constant("record_type_code", 1, "1"),
        FieldSpec("priority_code", 2, 2, N),
        FieldSpec("immediate_destination", 4, 10, R, required=True),
        FieldSpec("immediate_origin", 14, 10, R, required=True),
        FieldSpec("creation_date", 24, 6, FieldKind.DATE, required=True),
        FieldSpec("creation_time", 30, 4, FieldKind.TIME, required=True),
        FieldSpec("file_id_modifier", 34, 1, A, required=True),
        constant("record_size", 35, "094"),
        constant("blocking_factor", 38, "10"),
        constant("format_code", 40, "1"),
        FieldSpec("immediate_destination_name", 41, 23, A),
        FieldSpec("immediate_origin_name", 64, 23, A),
        FieldSpec("reference_code", 87, 8, A),
    )

    immediate_destination: str
    immediate_origin: str
    creation_date: date | None = None
    creation_time: time | None = None
    file_id_modifier: str = "A"
    immediate_destination_name: str = ""
    immediate_origin_name: str = ""
    reference_code: str = ""
    priority_code: int = 1
    errors: tuple[ValidationError, ...] = _errors_field()

    def _rule_errors(self) -> list[ValidationError]:
        errors: list[ValidationError] = []
        dest = self.immediate_destination or ""
        if dest and not is_routing_number(dest):
            errors.append(ValidationError(
                code="INVALID_ROUTING_NUMBER",
                message=f"immediate_destination must be a 9-digit routing number: {dest!r}",
                field="immediate_destination",
            ))
        mod = self.file_id_modifier or ""
        if mod and not (len(mod) == 1 and (mod.isdigit() or (mod.isalpha() and mod.isupper()))):
            errors.append(ValidationError(
                code="INVALID_FILE_ID_MODIFIER",
                message=f"file_id_modifier must be A-Z or 0-9: {mod!r}",
                field="file_id_modifier",
            ))
        return errors


@dataclass(frozen=True)
class FileControl(FixedWidthRecord):
    """
    Record type 9: file totals.

    Contract:
        Derived, never caller-specified.  Built by
        ``ach_engines.control_totals.build_file_control`` from finished
        batches, or decoded from an existing file.
    """

    RECORD_TYPE = "9"
    FIELDS = (
        constant("record_type_code", 1, "9"),
        FieldSpec("batch_count", 2, 6, N),
        FieldSpec("block_count", 8, 6, N),
        FieldSpec("entry_count", 14, 8, N),
        FieldSpec("entry_hash", 22, 10, N),
        FieldSpec("total_debits", 32, 12, N),
        FieldSpec("total_credits", 44, 12, N),
        reserved("reserved", 56, 39),
    )

    batch_count: int
    block_count: int
    entry_count: int
    entry_hash: int
    total_debits: int
    total_credits: int
    errors: tuple[ValidationError, ...] = _errors_field()


# =============================================================================
# Batch header / control
# =============================================================================


@dataclass(frozen=True)
class BatchHeader(FixedWidthRecord):
    """Record type 5: originator and standard entry class of one batch."""

    RECORD_TYPE = "5"
    FIELDS = (
        constant("record_type_code", 1, "5"),
        FieldSpec("service_class_code", 2, 3, N, required=True),
        FieldSpec("company_name", 5, 16, A, required=True),
        FieldSpec("company_discretionary_data", 21, 20, A),
        FieldSpec("company_id", 41, 10, A, required=True),
        FieldSpec("standard_entry_class", 51, 3, A, required=True),
        FieldSpec("company_entry_description", 54, 10, A, required=True),
        FieldSpec("company_descriptive_date", 64, 6, A),
        FieldSpec("effective_entry_date", 70, 6, FieldKind.DATE, required=True),
        reserved("settlement_date", 76, 3),
        constant("originator_status_code", 79, "1"),
        FieldSpec("odfi_id", 80, 8, D, required=True),
        FieldSpec("batch_number", 88, 7, N, required=True),
    )

    service_class_code: int
    company_name: str
    company_id: str
    standard_entry_class: str
    company_entry_description: str
    effective_entry_date: date | None
    odfi_id: str
    batch_number: int
    company_discretionary_data: str = ""
    company_descriptive_date: str = ""
    errors: tuple[ValidationError, ...] = _errors_field()

    def _rule_errors(self) -> list[ValidationError]:
        errors: list[ValidationError] = []
        if self.service_class_code not in SERVICE_CLASS_CODES:
            errors.append(ValidationError(
                code="INVALID_SERVICE_CLASS",
                message=f"unknown service class code {self.service_class_code}",
                field="service_class_code",
            ))
        if self.standard_entry_class not in STANDARD_ENTRY_CLASSES:
            errors.append(ValidationError(
                code="INVALID_STANDARD_ENTRY_CLASS",
                message=f"unknown standard entry class {self.standard_entry_class!r}",
                field="standard_entry_class",
            ))
        if self.odfi_id and len(self.odfi_id) != 8:
            errors.append(ValidationError(
                code="INVALID_ODFI_ID",
                message=f"odfi_id must be 8 digits: {self.odfi_id!r}",
                field="odfi_id",
            ))
        if isinstance(self.batch_number, int) and self.batch_number < 1:
            errors.append(ValidationError(
                code="INVALID_BATCH_NUMBER",
                message="batch_number must be 1 or greater",
                field="batch_number",
            ))
        return errors


@dataclass(frozen=True)
class BatchControl(FixedWidthRecord):
    """Record type 8: totals for one batch."""

    RECORD_TYPE = "8"
    FIELDS = (
        constant("record_type_code", 1, "8"),
        FieldSpec("service_class_code", 2, 3, N, required=True),
        FieldSpec("entry_count", 5, 6, N),
        FieldSpec("entry_hash", 11, 10, N),
        FieldSpec("total_debits", 21, 12, N),
        FieldSpec("total_credits", 33, 12, N),
        FieldSpec("company_id", 45, 10, A, required=True),
        FieldSpec("message_authentication_code", 55, 19, A),
        reserved("reserved", 74, 6),
        FieldSpec("odfi_id", 80, 8, D, required=True),
        FieldSpec("batch_number", 88, 7, N, required=True),
    )

    service_class_code: int
    entry_count: int
    entry_hash: int
    total_debits: int
    total_credits: int
    company_id: str
    odfi_id: str
    batch_number: int
    message_authentication_code: str = ""
    errors: tuple[ValidationError, ...] = _errors_field()


# =============================================================================
# Entry detail / addenda
# =============================================================================


@dataclass(frozen=True)
class EntryDetail(FixedWidthRecord):
    """Record type 6: one debit or credit to a receiver's account."""

    RECORD_TYPE = "6"
    FIELDS = (
        constant("record_type_code", 1, "6"),
        FieldSpec("transaction_code", 2, 2, N, required=True),
        FieldSpec("rdfi_id", 4, 8, D, required=True),
        FieldSpec("check_digit", 12, 1, D, required=True),
        FieldSpec("account_number", 13, 17, A, required=True),
        FieldSpec("amount", 30, 10, N),
        FieldSpec("individual_id", 40, 15, A),
        FieldSpec("individual_name", 55, 22, A, required=True),
        FieldSpec("discretionary_data", 77, 2, A),
        FieldSpec("addenda_record_indicator", 79, 1, N),
        FieldSpec("trace_number", 80, 15, D),
    )

    transaction_code: int
    rdfi_id: str
    check_digit: str
    account_number: str
    amount: int
    individual_name: str
    individual_id: str = ""
    discretionary_data: str = ""
    addenda_record_indicator: int = 0
    trace_number: str = ""
    errors: tuple[ValidationError, ...] = _errors_field()

    @property
    def routing_number(self) -> str:
        return f"{self.rdfi_id}{self.check_digit}"

    @property
    def is_debit(self) -> bool:
        return self.transaction_code % 10 >= 5

    @property
    def is_credit(self) -> bool:
        return not self.is_debit

    @property
    def is_prenote(self) -> bool:
        return self.transaction_code % 10 in (3, 8)

    def _rule_errors(self) -> list[ValidationError]:
        errors: list[ValidationError] = []
        if self.transaction_code not in TRANSACTION_CODES:
            errors.append(ValidationError(
                code="INVALID_TRANSACTION_CODE",
                message=f"unknown transaction code {self.transaction_code}",
                field="transaction_code",
            ))
        if self.rdfi_id and self.check_digit and not is_routing_number(self.routing_number):
            errors.append(ValidationError(
                code="INVALID_ROUTING_NUMBER",
                message=f"{self.routing_number!r} is not a valid routing number",
                field="rdfi_id",
            ))
        if isinstance(self.transaction_code, int) and self.is_prenote and self.amount != 0:
            errors.append(ValidationError(
                code="PRENOTE_AMOUNT",
                message="prenote entries must carry a zero amount",
                field="amount",
            ))
        return errors


@dataclass(frozen=True)
class Addendum(FixedWidthRecord):
    """Record type 7: free-form payment information attached to an entry."""

    RECORD_TYPE = "7"
    FIELDS = (
        constant("record_type_code", 1, "7"),
        FieldSpec("addenda_type_code", 2, 2, D, required=True),
        FieldSpec("payment_related_information", 4, 80, A),
        FieldSpec("addenda_sequence_number", 84, 4, N),
        FieldSpec("entry_detail_sequence_number", 88, 7, N),
    )

    payment_related_information: str = ""
    addenda_type_code: str = "05"
    addenda_sequence_number: int = 1
    entry_detail_sequence_number: int = 0
    errors: tuple[ValidationError, ...] = _errors_field()


RECORD_TYPES: dict[str, type[FixedWidthRecord]] = {
    cls.RECORD_TYPE: cls
    for cls in (FileHeader, BatchHeader, EntryDetail, Addendum, BatchControl, FileControl)
}
