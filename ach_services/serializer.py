"""
ach_services.serializer -- Render an AchFile as NACHA text.

Line order:
    file header
    for each batch: batch header, (entry, its addenda)*, batch control
    file control
    filler records up to the next block boundary

Lines are joined with ``\\n``; there is no trailing newline.  Rendering is
a pure function of the file, so repeated calls return identical text.
"""

from __future__ import annotations

from collections.abc import Iterator

from ach_engines.padding import filler_lines
from ach_kernel.domain.ach_file import AchFile
from ach_kernel.domain.batch import Batch

LINE_SEPARATOR = "\n"


def _batch_lines(batch: Batch) -> Iterator[str]:
    yield batch.header.encode()
    for entry in batch.entries:
        yield entry.record.encode()
        for addendum in entry.addenda:
            yield addendum.encode()
    yield batch.control.encode()


def _lines(file: AchFile) -> Iterator[str]:
    if file.control is None:
        raise ValueError("file has no control record; build it first")
    yield file.header.encode()
    for batch in file.batches:
        yield from _batch_lines(batch)
    yield file.control.encode()
    yield from filler_lines(file)


def to_chunks(file: AchFile) -> Iterator[str]:
    """Yield the file text piece by piece; ``"".join`` of the chunks is ``to_text``."""
    for i, line in enumerate(_lines(file)):
        if i:
            yield LINE_SEPARATOR
        yield line


def to_text(file: AchFile) -> str:
    return "".join(to_chunks(file))
