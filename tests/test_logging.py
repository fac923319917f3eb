"""Tests for JSON log output and context propagation (ach_kernel.logging_config)."""

import json
import logging
from datetime import date
from io import StringIO

import pytest

from ach_kernel.exceptions import RecordLengthError
from ach_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _isolated_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


@pytest.fixture
def stream():
    """A configured ach_kernel handler writing JSON lines into a buffer."""
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setFormatter(StructuredFormatter())
    configure_logging(level=logging.DEBUG, handler=handler)
    return buffer


def _records(buffer: StringIO) -> list[dict]:
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line]


class TestStructuredFormatter:
    def test_core_keys(self, stream):
        get_logger("test").info("hello")

        (record,) = _records(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "ach_kernel.test"
        assert "ts" in record

    def test_extras_flattened(self, stream):
        get_logger("test").info("batch_built", extra={"entry_count": 12, "service_class_code": 220})

        (record,) = _records(stream)
        assert record["entry_count"] == 12
        assert record["service_class_code"] == 220

    def test_dates_rendered_iso(self, stream):
        get_logger("test").info("dated", extra={"effective_date": date(2024, 3, 15)})

        assert _records(stream)[0]["effective_date"] == "2024-03-15"

    def test_context_fields(self, stream):
        LogContext.set(correlation_id="abc-123", company_id="1234567890")
        get_logger("test").info("with_context")

        record = _records(stream)[0]
        assert record["correlation_id"] == "abc-123"
        assert record["company_id"] == "1234567890"

    def test_plain_exception(self, stream):
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        record = _records(stream)[0]
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "exc_code" not in record
        assert "traceback" in record

    def test_kernel_exception_attributes(self, stream):
        try:
            raise RecordLengthError(80, 94, line_number=3)
        except RecordLengthError:
            get_logger("test").error("decode_error", exc_info=True)

        record = _records(stream)[0]
        assert record["exc_code"] == "RECORD_LENGTH"
        assert record["exc_type"] == "RecordLengthError"
        assert (record["exc_length"], record["exc_expected"], record["exc_line_number"]) == (80, 94, 3)


class TestLogContext:
    def test_set_then_get_all(self):
        LogContext.set(company_id="C1", batch_number="2")
        assert LogContext.get_all() == {"company_id": "C1", "batch_number": "2"}

    def test_later_set_keeps_earlier_fields(self):
        LogContext.set(company_id="C1")
        LogContext.set(trace_id="T1", company_id=None)
        assert LogContext.get_all() == {"company_id": "C1", "trace_id": "T1"}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError, match="account"):
            LogContext.set(account="123")

    def test_clear(self):
        LogContext.set(correlation_id="x", company_id="y")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_restores_previous_value(self):
        LogContext.set(batch_number="1")
        with LogContext.bind(batch_number="2"):
            assert LogContext.get_all()["batch_number"] == "2"
        assert LogContext.get_all()["batch_number"] == "1"

    def test_bind_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(company_id="C9"):
                raise RuntimeError("abort")
        assert "company_id" not in LogContext.get_all()

    def test_bind_skips_none(self):
        with LogContext.bind(company_id=None):
            assert "company_id" not in LogContext.get_all()


class TestConfigureLogging:
    def test_second_call_is_ignored(self, stream):
        ignored = logging.NullHandler()
        configure_logging(handler=ignored)
        get_logger("test").info("once")

        handlers = logging.getLogger("ach_kernel").handlers
        assert len(_records(stream)) == 1
        assert ignored not in handlers
        assert sum(isinstance(h.formatter, StructuredFormatter) for h in handlers) == 1

    def test_level_filters(self):
        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        configure_logging(level=logging.WARNING, handler=handler)

        get_logger("test").info("hidden")
        get_logger("test").warning("shown")

        assert [r["message"] for r in _records(buffer)] == ["shown"]

    def test_no_propagation_to_root(self):
        configure_logging(handler=logging.NullHandler())
        assert logging.getLogger("ach_kernel").propagate is False

    def test_reset_removes_handlers(self):
        configure_logging(handler=logging.NullHandler())
        reset_logging()
        assert logging.getLogger("ach_kernel").handlers == []
