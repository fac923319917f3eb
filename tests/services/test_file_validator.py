"""Tests for the file-level validity verdict."""

from dataclasses import replace
from datetime import date, time

import pytest

from ach_kernel.domain.ach_file import AchFile
from ach_kernel.domain.batch import BatchBuildFailure
from ach_kernel.domain.dtos import ValidationError
from ach_kernel.domain.records import FileControl, FileHeader
from ach_services import is_valid, validate_file


@pytest.fixture
def valid_file() -> AchFile:
    return AchFile(
        header=FileHeader(
            immediate_destination="111000025",
            immediate_origin="1234567890",
            creation_date=date(2024, 3, 15),
            creation_time=time(9, 30),
        ),
        control=FileControl(0, 1, 0, 0, 0, 0),
    )


class TestValidateFile:
    def test_valid(self, valid_file):
        result = validate_file(valid_file)

        assert result.success
        assert result.file.errors == ()
        assert is_valid(valid_file)

    def test_header_errors(self, valid_file):
        file = replace(valid_file, header=replace(valid_file.header, creation_time=None))

        result = validate_file(file)

        assert not result.success
        assert [(e.code, e.field) for e in result.errors] == [
            ("MISSING_REQUIRED_FIELD", "creation_time"),
        ]
        assert result.file.header.errors == result.errors

    def test_header_and_control_errors_combined_in_order(self, valid_file):
        file = replace(
            valid_file,
            header=replace(valid_file.header, file_id_modifier="*"),
            control=replace(valid_file.control, entry_hash=10 ** 10),
        )

        result = validate_file(file)

        assert [e.code for e in result.errors] == [
            "INVALID_FILE_ID_MODIFIER",
            "FIELD_OUT_OF_RANGE",
        ]
        assert result.file.control.errors[0].field == "entry_hash"

    def test_missing_control(self, valid_file):
        result = validate_file(replace(valid_file, control=None))

        assert not is_valid(replace(valid_file, control=None))
        assert result.errors[0].code == "MISSING_CONTROL_RECORD"

    def test_failed_batches_do_not_affect_validity(self, valid_file):
        failure = BatchBuildFailure(
            batch_number=1,
            standard_entry_class="PPD",
            entries=(),
            errors=(ValidationError("EMPTY_BATCH", "empty"),),
        )
        assert is_valid(replace(valid_file, failed=(failure,)))

    def test_stale_errors_replaced(self, valid_file):
        stale = replace(valid_file, errors=(ValidationError("OLD", "old"),))
        assert validate_file(stale).file.errors == ()

    def test_validation_failure_logged(self, valid_file, captured_logs):
        validate_file(replace(valid_file, header=replace(valid_file.header, immediate_origin="")))

        (record,) = [r for r in captured_logs() if r["message"] == "file_validation_failed"]
        assert record["level"] == "WARNING"
        assert record["error_codes"] == ["MISSING_REQUIRED_FIELD"]
