"""
Fixed-width field layouts for NACHA records.

Responsibility:
    Declarative description of one field (``FieldSpec``) and the pure
    functions that render a value into its fixed-width slot, read it back,
    and check it against the slot's constraints.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - ``encode_field`` always returns exactly ``spec.length`` characters.
      Values wider than the slot are cut to fit; ``field_errors`` reports
      them, so a validated record never loses data.
    - Field positions are 1-based and inclusive, as in the NACHA rules.

Failure modes:
    - ``MalformedFieldError`` from ``decode_field`` when numeric, digit,
      date or time text cannot be read, or a constant does not match.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from ach_kernel.domain.dtos import ValidationError
from ach_kernel.exceptions import MalformedFieldError

RECORD_SIZE = 94
BLOCKING_FACTOR = 10
FILLER_RECORD = "9" * RECORD_SIZE


class FieldKind(str, Enum):
    """How a field is justified, filled and typed."""

    NUMERIC = "numeric"  # int, right-justified, zero-filled
    DIGITS = "digits"  # str of digits where leading zeros matter (ids)
    ALPHANUMERIC = "alphanumeric"  # str, left-justified, blank-filled
    ROUTING = "routing"  # str, right-justified, blank-filled
    DATE = "date"  # YYMMDD
    TIME = "time"  # HHMM
    CONSTANT = "constant"  # fixed text, not stored on the record
    RESERVED = "reserved"  # blanks, not stored on the record


@dataclass(frozen=True)
class FieldSpec:
    """One fixed-width slot in a record."""

    name: str
    start: int  # 1-based
    length: int
    kind: FieldKind
    value: str | None = None  # CONSTANT text
    required: bool = False

    @property
    def end(self) -> int:
        return self.start + self.length - 1

    @property
    def stored(self) -> bool:
        """True if the record carries this field as an attribute."""
        return self.kind not in (FieldKind.CONSTANT, FieldKind.RESERVED)

    def slice(self, line: str) -> str:
        return line[self.start - 1:self.end]


def constant(name: str, start: int, value: str) -> FieldSpec:
    return FieldSpec(name, start, len(value), FieldKind.CONSTANT, value=value)


def reserved(name: str, start: int, length: int) -> FieldSpec:
    return FieldSpec(name, start, length, FieldKind.RESERVED)


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------


def encode_field(spec: FieldSpec, value: Any) -> str:
    """Render ``value`` into exactly ``spec.length`` characters."""
    n = spec.length
    if spec.kind is FieldKind.CONSTANT:
        return spec.value or ""
    if spec.kind is FieldKind.RESERVED:
        return " " * n
    if spec.kind is FieldKind.NUMERIC:
        return str(int(value or 0)).rjust(n, "0")[-n:]
    if spec.kind is FieldKind.DIGITS:
        return str(value or "").rjust(n, "0")[-n:]
    if spec.kind is FieldKind.ROUTING:
        return str(value or "").rjust(n)[-n:]
    if spec.kind is FieldKind.DATE:
        return value.strftime("%y%m%d") if value is not None else " " * n
    if spec.kind is FieldKind.TIME:
        return value.strftime("%H%M") if value is not None else " " * n
    return str(value or "").ljust(n)[:n]


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


def decode_field(spec: FieldSpec, raw: str, line_number: int | None = None) -> Any:
    """Read one slot's raw text back into a Python value."""
    if spec.kind is FieldKind.RESERVED:
        return None
    if spec.kind is FieldKind.CONSTANT:
        if raw != spec.value:
            raise MalformedFieldError(spec.name, raw, line_number)
        return raw
    if spec.kind is FieldKind.NUMERIC:
        if not raw.isdigit():
            raise MalformedFieldError(spec.name, raw, line_number)
        return int(raw)
    if spec.kind is FieldKind.DIGITS:
        if raw.strip() and not raw.isdigit():
            raise MalformedFieldError(spec.name, raw, line_number)
        return raw.strip()
    if spec.kind is FieldKind.ROUTING:
        return raw.strip()
    if spec.kind in (FieldKind.DATE, FieldKind.TIME):
        if not raw.strip():
            return None
        fmt = "%y%m%d" if spec.kind is FieldKind.DATE else "%H%M"
        try:
            parsed = datetime.strptime(raw, fmt)
        except ValueError:
            raise MalformedFieldError(spec.name, raw, line_number) from None
        return parsed.date() if spec.kind is FieldKind.DATE else parsed.time()
    return raw.rstrip()


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def field_errors(spec: FieldSpec, value: Any) -> list[ValidationError]:
    """Check ``value`` against its slot: presence, type, width."""
    if not spec.stored:
        return []
    if _is_blank(value):
        if spec.required:
            return [ValidationError(
                code="MISSING_REQUIRED_FIELD",
                message=f"{spec.name} is required",
                field=spec.name,
            )]
        return []

    if spec.kind is FieldKind.NUMERIC:
        if not isinstance(value, int) or isinstance(value, bool):
            return [ValidationError(
                code="INVALID_TYPE",
                message=f"{spec.name} must be an integer, got {type(value).__name__}",
                field=spec.name,
            )]
        if value < 0 or value >= 10 ** spec.length:
            return [ValidationError(
                code="FIELD_OUT_OF_RANGE",
                message=f"{spec.name} must fit in {spec.length} digits: {value}",
                field=spec.name,
            )]
        return []

    if spec.kind is FieldKind.DATE:
        if not isinstance(value, date):
            return [ValidationError(
                code="INVALID_TYPE",
                message=f"{spec.name} must be a date",
                field=spec.name,
            )]
        return []

    if spec.kind is FieldKind.TIME:
        if not isinstance(value, time):
            return [ValidationError(
                code="INVALID_TYPE",
                message=f"{spec.name} must be a time",
                field=spec.name,
            )]
        return []

    text = str(value)
    if spec.kind is FieldKind.DIGITS and not text.isdigit():
        return [ValidationError(
            code="INVALID_DIGITS",
            message=f"{spec.name} must contain only digits: {text!r}",
            field=spec.name,
        )]
    if len(text) > spec.length:
        return [ValidationError(
            code="FIELD_TOO_LONG",
            message=f"{spec.name} exceeds {spec.length} characters",
            field=spec.name,
        )]
    if not text.isascii():
        return [ValidationError(
            code="INVALID_CHARACTERS",
            message=f"{spec.name} must be ASCII",
            field=spec.name,
        )]
    return []
