"""
ach_services.file_validator -- File-level validity verdict.

Responsibility:
    Combine the header's and control's own validation into one pass/fail
    result with a deduplicated error list.

Invariants enforced:
    - A file is valid iff its header AND its control record are valid.
    - Rejected entry groups (``file.failed``) do not affect the verdict.
    - The returned file carries the validated (error-annotated) records.
"""

from __future__ import annotations

from dataclasses import replace

from ach_kernel.domain.ach_file import AchFile, FileBuildResult
from ach_kernel.domain.dtos import ValidationError, dedupe_errors
from ach_kernel.logging_config import get_logger

logger = get_logger("services.file_validator")


def validate_file(file: AchFile) -> FileBuildResult:
    """Validate header and control; return ok or rejected with the annotated file."""
    header = file.header.validated()
    errors: list[ValidationError] = list(header.errors)

    control = file.control
    if control is None:
        errors.append(ValidationError(
            code="MISSING_CONTROL_RECORD",
            message="file has no control record",
        ))
    else:
        control = control.validated()
        errors.extend(control.errors)

    if not errors:
        return FileBuildResult.ok(replace(file, header=header, control=control, errors=()))

    unique = dedupe_errors(errors)
    logger.warning("file_validation_failed", extra={
        "error_count": len(unique),
        "error_codes": [e.code for e in unique],
    })
    return FileBuildResult.rejected(
        replace(file, header=header, control=control, errors=unique)
    )


def is_valid(file: AchFile) -> bool:
    return validate_file(file).success
