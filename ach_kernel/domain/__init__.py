"""
Pure domain layer.

Records, entries, batches and files for the NACHA format, with NO
dependencies on I/O or the wall clock (time is injected via ``Clock``).
All domain objects are immutable.
"""

from ach_kernel.domain.ach_file import AchFile, BuildParams, FileBuildResult
from ach_kernel.domain.batch import (
    Batch,
    BatchBuildFailure,
    BatchBuildResult,
    BatchOffset,
    BatchParams,
)
from ach_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ach_kernel.domain.dtos import ValidationError, ValidationResult
from ach_kernel.domain.entry import Entry
from ach_kernel.domain.fields import FILLER_RECORD, RECORD_SIZE
from ach_kernel.domain.records import (
    Addendum,
    BatchControl,
    BatchHeader,
    EntryDetail,
    FileControl,
    FileHeader,
)

__all__ = [
    "AchFile",
    "Addendum",
    "Batch",
    "BatchBuildFailure",
    "BatchBuildResult",
    "BatchControl",
    "BatchHeader",
    "BatchOffset",
    "BatchParams",
    "BuildParams",
    "Clock",
    "DeterministicClock",
    "Entry",
    "EntryDetail",
    "FILLER_RECORD",
    "FileBuildResult",
    "FileControl",
    "FileHeader",
    "RECORD_SIZE",
    "SystemClock",
    "ValidationError",
    "ValidationResult",
]
