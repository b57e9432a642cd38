"""Tests for the structured logging utilities."""

import logging
import time
from unittest.mock import MagicMock, patch

import pytest

from workbook_extraction.utils.logging import (
    LogContext,
    PerformanceMetrics,
    ProgressTracker,
    StructuredLogFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_extra_context,
    get_logger,
    get_request_id,
    set_request_id,
    timed_operation,
)


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)


class TestContextVariables:
    """Tests for context variable management."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_request_id_default_none(self) -> None:
        assert get_request_id() is None

    def test_set_and_get_request_id(self) -> None:
        set_request_id("req-123")
        assert get_request_id() == "req-123"

    def test_extra_context_default_empty(self) -> None:
        assert get_extra_context() == {}

    def test_extra_context_is_a_copy(self) -> None:
        with LogContext(sheet="Data"):
            get_extra_context()["sheet"] = "Other"
            assert get_extra_context() == {"sheet": "Data"}

    def test_clear_context(self) -> None:
        set_request_id("req-123")

        clear_context()

        assert get_request_id() is None
        assert get_extra_context() == {}


class TestPerformanceMetrics:
    """Tests for PerformanceMetrics dataclass."""

    def test_initialization(self) -> None:
        metrics = PerformanceMetrics(operation="workbook_read")

        assert metrics.operation == "workbook_read"
        assert metrics.duration_seconds == 0.0
        assert metrics.sheets_processed == 0
        assert metrics.rows_emitted == 0
        assert metrics.cells_emitted == 0

    def test_finish_calculates_duration(self) -> None:
        metrics = PerformanceMetrics(operation="workbook_read")
        time.sleep(0.01)
        metrics.finish()

        assert metrics.duration_seconds > 0
        assert metrics.end_time is not None

    def test_to_dict_excludes_zero_counters(self) -> None:
        metrics = PerformanceMetrics(operation="workbook_read", rows_emitted=4)

        assert metrics.to_dict() == {
            "operation": "workbook_read",
            "duration_seconds": 0.0,
            "rows_emitted": 4,
        }


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def setup_method(self) -> None:
        self.logger = get_logger("test_logger")

    def test_get_logger_returns_structured_logger(self) -> None:
        assert isinstance(self.logger, StructuredLogger)

    def test_build_message_without_kwargs(self) -> None:
        assert self.logger._build_message("Test message") == "Test message"

    def test_build_message_with_kwargs(self) -> None:
        msg = self.logger._build_message("Sheet read", sheet="Data", rows=3)
        assert msg == "Sheet read | sheet=Data, rows=3"

    @patch.object(logging.Logger, "info")
    def test_info_logging(self, mock_info: MagicMock) -> None:
        self.logger.info("Test info", status="ok")

        mock_info.assert_called_once()
        call_args = mock_info.call_args[0][0]
        assert "Test info" in call_args
        assert "status=ok" in call_args

    @patch.object(logging.Logger, "warning")
    def test_warning_logging(self, mock_warning: MagicMock) -> None:
        self.logger.warning("Test warning")
        mock_warning.assert_called_once()

    @patch.object(logging.Logger, "error")
    def test_error_logging_forwards_exc_info(self, mock_error: MagicMock) -> None:
        self.logger.error("Test error", exc_info=True)
        assert mock_error.call_args.kwargs["exc_info"] is True

    @patch.object(logging.Logger, "info")
    def test_log_performance(self, mock_info: MagicMock) -> None:
        metrics = PerformanceMetrics(operation="workbook_read", sheets_processed=2)
        self.logger.log_performance(metrics)

        call_args = mock_info.call_args[0][0]
        assert "Performance: workbook_read" in call_args
        assert "sheets_processed=2" in call_args

    @patch.object(logging.Logger, "debug")
    def test_log_progress(self, mock_debug: MagicMock) -> None:
        self.logger.log_progress("Normalizing sheets", 1, 4, details="Data")

        call_args = mock_debug.call_args[0][0]
        assert "Progress: Normalizing sheets" in call_args
        assert "current=1" in call_args
        assert "total=4" in call_args
        assert "25.0%" in call_args
        assert "details=Data" in call_args


class TestLogContext:
    """Tests for the LogContext context manager."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_sets_and_restores_context(self) -> None:
        set_request_id("outer")

        with LogContext(request_id="inner", sheet="Data"):
            assert get_request_id() == "inner"
            assert get_extra_context() == {"sheet": "Data"}

        assert get_request_id() == "outer"
        assert get_extra_context() == {}

    def test_nested_contexts_merge(self) -> None:
        with LogContext(sheet="Data"):
            with LogContext(row=3):
                assert get_extra_context() == {"sheet": "Data", "row": 3}
            assert get_extra_context() == {"sheet": "Data"}

    def test_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError), LogContext(sheet="Data"):
            raise RuntimeError("boom")

        assert get_extra_context() == {}


class TestStructuredLogFormatter:
    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_prefixes_bound_context(self) -> None:
        formatter = StructuredLogFormatter("%(message)s")
        record = _record()
        set_request_id("req-1")

        with LogContext(sheet="Data"):
            assert formatter.format(record) == "[request_id=req-1 sheet=Data] hello"
        assert record.msg == "hello"

    def test_no_prefix_without_context(self) -> None:
        formatter = StructuredLogFormatter("%(message)s")
        assert formatter.format(_record()) == "hello"


class TestTimedOperation:
    @patch.object(StructuredLogger, "log_performance")
    def test_logs_metrics_on_exit(self, mock_log: MagicMock) -> None:
        logger = get_logger("timed")

        with timed_operation(logger, "workbook_read") as metrics:
            metrics.rows_emitted = 7

        mock_log.assert_called_once_with(metrics)
        assert metrics.end_time is not None

    @patch.object(StructuredLogger, "log_performance")
    def test_logs_metrics_on_error(self, mock_log: MagicMock) -> None:
        logger = get_logger("timed")

        with pytest.raises(RuntimeError), timed_operation(logger, "workbook_read"):
            raise RuntimeError("boom")

        mock_log.assert_called_once()


class TestProgressTracker:
    @patch.object(StructuredLogger, "log_progress")
    def test_logs_every_update(self, mock_progress: MagicMock) -> None:
        tracker = ProgressTracker(get_logger("progress"), "Sheets", 3)

        for name in ("A", "B", "C"):
            tracker.update(details=name)

        assert tracker.current == 3
        assert mock_progress.call_count == 3
        mock_progress.assert_called_with("Sheets", 3, 3, "C")

    def test_complete_returns_duration(self) -> None:
        tracker = ProgressTracker(get_logger("progress"), "Sheets", 1)
        assert tracker.complete() >= 0


class TestConfigureLogging:
    def teardown_method(self) -> None:
        logging.getLogger().setLevel(logging.WARNING)

    def test_installs_structured_formatter(self) -> None:
        configure_logging(level="debug")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredLogFormatter)

    def test_plain_formatter(self) -> None:
        configure_logging(level=logging.INFO, use_structured_formatter=False)

        formatter = logging.getLogger().handlers[0].formatter
        assert not isinstance(formatter, StructuredLogFormatter)
