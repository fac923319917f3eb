"""
ach_services -- Package init and public API.

Responsibility:
    Orchestration over the pure engines and kernel: building batches and
    files, validating, rendering to text, and reading files back.  This is
    the only layer that reads the clock (through an injected ``Clock``) or
    touches the filesystem (``parse``).

Architecture position:
    Services -- composes engines + kernel.

        ach_services/ -> ach_engines/  (allowed)
        ach_services/ -> ach_kernel/   (allowed)
        ach_engines/  -> ach_services/ (FORBIDDEN)
        ach_kernel/   -> ach_services/ (FORBIDDEN)
"""

from ach_kernel.logging_config import get_logger

logger = get_logger("services")

from ach_services.batch_builder import build_batch
from ach_services.file_assembler import build
from ach_services.file_validator import is_valid, validate_file
from ach_services.parser import decode, parse
from ach_services.serializer import to_chunks, to_text

__all__ = [
    "build",
    "build_batch",
    "decode",
    "is_valid",
    "parse",
    "to_chunks",
    "to_text",
    "validate_file",
]
