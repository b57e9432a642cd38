"""Utilities package for workbook extraction.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from workbook_extraction.utils.exceptions import (
    ErrorCode,
    FileError,
    FileTooLargeError,
    HTTPStatusMixin,
    OptionsValidationError,
    SheetNotFoundError,
    WBXError,
    WorkbookDecodeError,
    WorkbookError,
    WorkbookFileNotFoundError,
)
from workbook_extraction.utils.logging import (
    LogContext,
    StructuredLogger,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Exceptions
    "ErrorCode",
    "FileError",
    "FileTooLargeError",
    "HTTPStatusMixin",
    "OptionsValidationError",
    "SheetNotFoundError",
    "WBXError",
    "WorkbookDecodeError",
    "WorkbookError",
    "WorkbookFileNotFoundError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
