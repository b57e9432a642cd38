"""Structured logging for workbook extraction.

Log lines carry the current request ID and any fields bound with
``LogContext`` (the reader binds ``sheet`` while normalizing), followed by
the ``key=value`` pairs given to the logger call:

    [request_id=abc sheet=Data] Sheet normalized | rows=2, headers=2

Usage:
    logger = get_logger(__name__)

    with timed_operation(logger, "workbook_read") as metrics:
        with LogContext(sheet="Data"):
            logger.debug("Sheet normalized", rows=2)
        metrics.sheets_processed += 1
"""

import logging
import time
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_extra_context_var: ContextVar[dict[str, Any] | None] = ContextVar(
    "extra_context", default=None
)


def get_request_id() -> str | None:
    return _request_id_var.get()


def set_request_id(request_id: str | None) -> None:
    """Bind the ID that correlates the log lines of one HTTP request."""
    _request_id_var.set(request_id)


def get_extra_context() -> dict[str, Any]:
    """Fields bound by the enclosing ``LogContext`` blocks."""
    return dict(_extra_context_var.get() or {})


def clear_context() -> None:
    _request_id_var.set(None)
    _extra_context_var.set(None)


@dataclass
class PerformanceMetrics:
    """Timing and output counters for one workbook read."""

    operation: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    duration_seconds: float = 0.0
    sheets_processed: int = 0
    rows_emitted: int = 0
    cells_emitted: int = 0

    def finish(self) -> None:
        self.end_time = datetime.now(UTC)
        self.duration_seconds = (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Operation name, duration and the counters that are non-zero."""
        result: dict[str, Any] = {
            "operation": self.operation,
            "duration_seconds": self.duration_seconds,
        }
        for counter in ("sheets_processed", "rows_emitted", "cells_emitted"):
            value = getattr(self, counter)
            if value:
                result[counter] = value
        return result


class StructuredLogFormatter(logging.Formatter):
    """Prefix each record with the bound request ID and context fields."""

    def format(self, record: logging.LogRecord) -> str:
        bound = {"request_id": get_request_id(), **get_extra_context()}
        prefix = " ".join(f"{k}={v}" for k, v in bound.items() if v is not None)
        if not prefix:
            return super().format(record)

        original_msg = record.msg
        record.msg = f"[{prefix}] {original_msg}"
        try:
            return super().format(record)
        finally:
            record.msg = original_msg


class StructuredLogger:
    """Stdlib logger wrapper; keyword arguments become ``key=value`` pairs."""

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    def _build_message(self, message: str, **kwargs: Any) -> str:
        if not kwargs:
            return message
        pairs = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        return f"{message} | {pairs}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._build_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._build_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._build_message(message, **kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._logger.error(self._build_message(message, **kwargs), exc_info=exc_info)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at error level with the active traceback."""
        self._logger.exception(self._build_message(message, **kwargs))

    def log_performance(self, metrics: PerformanceMetrics) -> None:
        self.info(f"Performance: {metrics.operation}", **metrics.to_dict())

    def log_progress(
        self,
        stage: str,
        current: int,
        total: int,
        details: str | None = None,
    ) -> None:
        """Log ``current`` of ``total`` items done at debug level."""
        percentage = (current / total * 100) if total > 0 else 0
        kwargs: dict[str, Any] = {
            "current": current,
            "total": total,
            "percentage": f"{percentage:.1f}%",
        }
        if details:
            kwargs["details"] = details
        self.debug(f"Progress: {stage}", **kwargs)


class LogContext:
    """Bind fields to every log line emitted inside the block.

    Nested blocks merge their fields. A ``request_id`` field rebinds the
    request ID instead of becoming a plain field.
    """

    def __init__(self, **fields: Any) -> None:
        self._request_id: str | None = fields.pop("request_id", None)
        self._fields = fields
        self._context_token: Token[dict[str, Any] | None] | None = None
        self._request_token: Token[str | None] | None = None

    def __enter__(self) -> "LogContext":
        self._context_token = _extra_context_var.set(
            {**get_extra_context(), **self._fields}
        )
        if self._request_id is not None:
            self._request_token = _request_id_var.set(self._request_id)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._request_token is not None:
            _request_id_var.reset(self._request_token)
            self._request_token = None
        if self._context_token is not None:
            _extra_context_var.reset(self._context_token)
            self._context_token = None


@contextmanager
def timed_operation(
    logger: StructuredLogger,
    operation: str,
) -> Generator[PerformanceMetrics, None, None]:
    """Yield metrics for the block and log them when it exits, even on error."""
    metrics = PerformanceMetrics(operation=operation)
    try:
        yield metrics
    finally:
        metrics.finish()
        logger.log_performance(metrics)


def configure_logging(
    level: int | str = logging.INFO,
    use_structured_formatter: bool = True,
) -> None:
    """Replace the root handlers with a single stream handler.

    Args:
        level: Log level as an int or a name such as ``"INFO"``.
        use_structured_formatter: Prefix lines with the bound context.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter: logging.Formatter
    if use_structured_formatter:
        formatter = StructuredLogFormatter(format_string)
    else:
        formatter = logging.Formatter(format_string)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)


class ProgressTracker:
    """Log progress through a known number of items, one line per item."""

    def __init__(self, logger: StructuredLogger, stage: str, total: int) -> None:
        self._logger = logger
        self._stage = stage
        self._total = total
        self._current = 0
        self._started = time.monotonic()

    @property
    def current(self) -> int:
        return self._current

    def update(self, details: str | None = None) -> None:
        self._current += 1
        self._logger.log_progress(self._stage, self._current, self._total, details)

    def complete(self) -> float:
        """Log completion and return the elapsed seconds."""
        elapsed = time.monotonic() - self._started
        self._logger.debug(
            f"Completed: {self._stage}",
            total_items=self._total,
            duration_seconds=f"{elapsed:.2f}",
        )
        return elapsed
