"""
ACH file DTOs -- build parameters, the file aggregate and the build result.

Responsibility:
    ``BuildParams`` is the caller-facing configuration for ``build``;
    ``AchFile`` is the assembled file; ``FileBuildResult`` tells the caller
    whether the header and control records passed validation.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Time defaults are
    read from an injected ``Clock``, never from the system directly.

Invariants enforced:
    - ``AchFile`` is frozen; the assembler builds new instances with
      ``dataclasses.replace`` at each pipeline step.
    - ``AchFile.failed`` lists rejected entry groups.  They are excluded
      from control totals and from the validity verdict, so callers that
      must not drop entries have to inspect it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, time

from ach_kernel.domain.batch import Batch, BatchBuildFailure
from ach_kernel.domain.clock import Clock
from ach_kernel.domain.dtos import ValidationError
from ach_kernel.domain.records import FileControl, FileHeader


@dataclass(frozen=True)
class BuildParams:
    """
    Parameters for building a file.

    Required: the immediate destination (9-digit routing number of the
    receiving point), immediate origin, both names, and the company id.

    Defaults when omitted:
        creation_date     -- clock's current date
        creation_time     -- clock's current time, to the minute
        effective_date    -- clock's current date
        descriptive_date  -- blank
        file_id_modifier  -- "A"
        entry_description -- "PAYMENT"
        reference_code    -- blank
    """

    immediate_destination: str
    immediate_origin: str
    immediate_destination_name: str
    immediate_origin_name: str
    company_id: str
    creation_date: date | None = None
    creation_time: time | None = None
    effective_date: date | None = None
    descriptive_date: str = ""
    file_id_modifier: str = "A"
    entry_description: str = "PAYMENT"
    reference_code: str = ""

    @property
    def odfi_id(self) -> str:
        """First 8 digits of the immediate destination (check digit excluded)."""
        return self.immediate_destination[:8]

    def with_defaults(self, clock: Clock) -> BuildParams:
        """Fill the time-dependent defaults from ``clock``."""
        now = clock.now()
        return replace(
            self,
            creation_date=self.creation_date if self.creation_date is not None else now.date(),
            creation_time=(
                self.creation_time
                if self.creation_time is not None
                else now.time().replace(second=0, microsecond=0)
            ),
            effective_date=self.effective_date if self.effective_date is not None else now.date(),
        )


@dataclass(frozen=True)
class AchFile:
    """A file header, its batches, a file control, and build diagnostics."""

    header: FileHeader
    control: FileControl | None = None
    batches: tuple[Batch, ...] = ()
    failed: tuple[BatchBuildFailure, ...] = ()
    errors: tuple[ValidationError, ...] = ()


@dataclass(frozen=True)
class FileBuildResult:
    """
    Outcome of ``build``: the file, valid or not.

    A rejected result still carries the partially built file so the caller
    can inspect ``file.errors`` and ``file.failed``.
    """

    success: bool
    file: AchFile

    @classmethod
    def ok(cls, file: AchFile) -> FileBuildResult:
        return cls(success=True, file=file)

    @classmethod
    def rejected(cls, file: AchFile) -> FileBuildResult:
        return cls(success=False, file=file)

    @property
    def errors(self) -> tuple[ValidationError, ...]:
        return self.file.errors

    def __bool__(self) -> bool:
        return self.success
