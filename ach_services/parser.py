"""
ach_services.parser -- Read NACHA text back into an AchFile.

Responsibility:
    Decode each line with its record class and rebuild the file structure
    (header, batches with entries and addenda, control).  Filler records
    and blank lines are skipped.

Architecture position:
    Services -- ``parse`` performs the single file read; ``decode`` is
    pure and works on text already in memory.

Invariants enforced:
    - Record order follows the file grammar:
          1 (5 (6 7*)+ 8)* 9
      anything else raises ``UnexpectedRecordError``.
    - Entries take the standard entry class of the batch header they
      follow.
    - Decoded records are taken as-is: control totals are NOT recomputed,
      so a tampered file can be detected by comparing against
      ``build_file_control``.

Failure modes:
    - ``OSError`` from ``parse`` if the file cannot be read (propagated).
    - ``DecodeError`` subclasses with the 1-based line number of the
      offending record.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from ach_kernel.domain.ach_file import AchFile
from ach_kernel.domain.batch import Batch
from ach_kernel.domain.entry import Entry
from ach_kernel.domain.fields import FILLER_RECORD, RECORD_SIZE
from ach_kernel.domain.records import (
    RECORD_TYPES,
    Addendum,
    BatchControl,
    BatchHeader,
    EntryDetail,
    FileControl,
    FileHeader,
)
from ach_kernel.exceptions import (
    MissingRecordError,
    RecordLengthError,
    UnexpectedRecordError,
    UnknownRecordTypeError,
)
from ach_kernel.logging_config import get_logger

logger = get_logger("services.parser")

# Record types allowed after each record type (None = start of content).
_FOLLOWS: dict[str | None, tuple[str, ...]] = {
    None: ("1",),
    "1": ("5", "9"),
    "5": ("6",),
    "6": ("6", "7", "8"),
    "7": ("6", "7", "8"),
    "8": ("5", "9"),
    "9": (),
}

_NAMES = {
    "1": "file header",
    "5": "batch header",
    "6": "entry detail",
    "7": "addenda",
    "8": "batch control",
    "9": "file control",
}


class _BatchAccumulator:
    """Collects one batch's records until its control record arrives."""

    def __init__(self, header: BatchHeader):
        self.header = header
        self.entries: list[Entry] = []

    def add_entry(self, record: EntryDetail) -> None:
        self.entries.append(
            Entry(record=record, standard_entry_class=self.header.standard_entry_class)
        )

    def add_addendum(self, addendum: Addendum) -> None:
        last = self.entries[-1]
        self.entries[-1] = replace(last, addenda=last.addenda + (addendum,))

    def close(self, control: BatchControl) -> Batch:
        return Batch(header=self.header, entries=tuple(self.entries), control=control)


def _expected(previous: str | None) -> str:
    allowed = _FOLLOWS[previous]
    if not allowed:
        return "end of file"
    return " or ".join(_NAMES[t] for t in allowed)


def decode(content: str) -> AchFile:
    """Decode NACHA text into an ``AchFile``."""
    header: FileHeader | None = None
    control: FileControl | None = None
    batches: list[Batch] = []
    current: _BatchAccumulator | None = None
    previous: str | None = None

    for line_number, line in enumerate(content.splitlines(), start=1):
        if not line.strip() or line == FILLER_RECORD:
            continue
        if len(line) != RECORD_SIZE:
            raise RecordLengthError(len(line), RECORD_SIZE, line_number)

        record_type = line[0]
        record_class = RECORD_TYPES.get(record_type)
        if record_class is None:
            raise UnknownRecordTypeError(record_type, line_number)
        if record_type not in _FOLLOWS[previous]:
            raise UnexpectedRecordError(record_type, _expected(previous), line_number)

        record = record_class.decode(line, line_number)
        if record_type == "1":
            header = record
        elif record_type == "5":
            current = _BatchAccumulator(record)
        elif record_type == "6":
            current.add_entry(record)
        elif record_type == "7":
            current.add_addendum(record)
        elif record_type == "8":
            batches.append(current.close(record))
            current = None
        else:
            control = record
        previous = record_type

    if header is None:
        raise MissingRecordError(_NAMES["1"])
    if control is None:
        raise MissingRecordError(_NAMES["8"] if current is not None else _NAMES["9"])

    logger.debug("file_decoded", extra={
        "batch_count": len(batches),
        "entry_count": sum(len(b.entries) for b in batches),
    })
    return AchFile(header=header, control=control, batches=tuple(batches))


def parse(path: str | Path) -> AchFile:
    """Read and decode the file at ``path``."""
    path = Path(path)
    content = path.read_text(encoding="ascii", errors="replace")
    logger.info("file_read", extra={"path": str(path), "size": len(content)})
    return decode(content)
