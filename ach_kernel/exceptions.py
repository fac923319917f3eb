"""
Typed exception hierarchy for the ACH kernel.

Every exception carries a machine-readable ``code`` class attribute and
stores its context as attributes, so callers catch by type and read
structured data instead of parsing messages.

    AchKernelError (base)
    |
    +-- DecodeError
    |   +-- RecordLengthError
    |   +-- UnknownRecordTypeError
    |   +-- UnexpectedRecordError
    |   +-- MalformedFieldError
    |   +-- MissingRecordError
    |
    +-- ConfigError
        +-- ProfileNotFoundError

Code            | When raised
----------------|----------------------------------------------------------
RECORD_LENGTH   | A line is not exactly 94 characters
UNKNOWN_RECORD  | A line starts with a record type code outside 1/5/6/7/8/9
UNEXPECTED_RECORD | A record appears where the file structure forbids it
MALFORMED_FIELD | A numeric/date/time field cannot be decoded
MISSING_RECORD  | Content ends before a required record was seen
PROFILE_NOT_FOUND | No originator profile with the requested name

Validation problems on built records are NOT exceptions: they are carried
as ``ValidationError`` values (see ``ach_kernel.domain.dtos``) on the
returned file.
"""


class AchKernelError(Exception):
    """
    Base exception for all ACH kernel errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "ACH_KERNEL_ERROR"


# Decoding


class DecodeError(AchKernelError):
    """Base exception for content that does not match the NACHA layout."""

    code: str = "DECODE_ERROR"

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class RecordLengthError(DecodeError):
    """A record line is not exactly the record width."""

    code: str = "RECORD_LENGTH"

    def __init__(self, length: int, expected: int, line_number: int | None = None):
        self.length = length
        self.expected = expected
        super().__init__(
            f"record is {length} characters, expected {expected}", line_number
        )


class UnknownRecordTypeError(DecodeError):
    """The record type code is not one of the NACHA record types."""

    code: str = "UNKNOWN_RECORD"

    def __init__(self, record_type: str, line_number: int | None = None):
        self.record_type = record_type
        super().__init__(f"unknown record type {record_type!r}", line_number)


class UnexpectedRecordError(DecodeError):
    """A known record type appeared out of sequence."""

    code: str = "UNEXPECTED_RECORD"

    def __init__(self, record_type: str, expected: str, line_number: int | None = None):
        self.record_type = record_type
        self.expected = expected
        super().__init__(
            f"unexpected record type {record_type!r}, expected {expected}",
            line_number,
        )


class MalformedFieldError(DecodeError):
    """A field's raw text cannot be converted to its declared kind."""

    code: str = "MALFORMED_FIELD"

    def __init__(self, field_name: str, raw: str, line_number: int | None = None):
        self.field_name = field_name
        self.raw = raw
        super().__init__(f"malformed {field_name}: {raw!r}", line_number)


class MissingRecordError(DecodeError):
    """Content ended before a required record was read."""

    code: str = "MISSING_RECORD"

    def __init__(self, expected: str):
        self.expected = expected
        super().__init__(f"missing {expected} record")


# Configuration


class ConfigError(AchKernelError):
    """Base exception for originator profile configuration errors."""

    code: str = "CONFIG_ERROR"


class ProfileNotFoundError(ConfigError):
    """No originator profile with the given name exists."""

    code: str = "PROFILE_NOT_FOUND"

    def __init__(self, name: str, searched: str):
        self.name = name
        self.searched = searched
        super().__init__(f"Originator profile {name!r} not found in {searched}")
