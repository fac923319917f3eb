"""
DTOs -- Validation value objects shared across the kernel.

Responsibility:
    ``ValidationError`` is the non-exceptional representation of one failed
    format constraint; ``ValidationResult`` aggregates zero or more of them.
    Records, batches and files carry these instead of raising.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation error.

    Contract:
        Carries a machine-readable code, human-readable message and optional
        field name.  Hashable, so error lists can be deduplicated.

    Non-goals:
        - Does NOT raise exceptions -- it IS the error representation.
    """

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of validation.

    Guarantees:
        - errors is always a tuple (never None)
        - bool(result) == result.is_valid for convenience
    """

    is_valid: bool
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> ValidationResult:
        """Create a successful validation result."""
        return cls(is_valid=True, errors=())

    @classmethod
    def failure(cls, *errors: ValidationError) -> ValidationResult:
        """Create a failed validation result."""
        return cls(is_valid=False, errors=tuple(errors))

    @classmethod
    def from_errors(cls, errors: Iterable[ValidationError]) -> ValidationResult:
        """Success when ``errors`` is empty, failure otherwise."""
        errors = tuple(errors)
        if errors:
            return cls.failure(*errors)
        return cls.success()

    def __bool__(self) -> bool:
        return self.is_valid


def dedupe_errors(errors: Iterable[ValidationError]) -> tuple[ValidationError, ...]:
    """Drop repeated errors, keeping first-seen order."""
    return tuple(dict.fromkeys(errors))
