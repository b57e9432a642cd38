"""Centralized exception classes for workbook extraction.

This module provides a hierarchy of custom exceptions with error codes,
HTTP status code mapping, and structured error details for consistent
error handling from the decoder up to the HTTP boundary.

Exception Hierarchy:
    WBXError (base)
    ├── FileError
    │   ├── WorkbookFileNotFoundError
    │   ├── FileTooLargeError
    │   └── WorkbookDecodeError
    ├── OptionsValidationError
    └── WorkbookError
        └── SheetNotFoundError

Error Codes:
    All errors have a unique error code (e.g., "E1003") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the application.

    Error codes are grouped by category:
    - E1xxx: File/byte buffer errors
    - E2xxx: Read option errors
    - E3xxx: Workbook and sheet selection errors
    - E9xxx: Internal/unexpected errors
    """

    # File errors (E1xxx)
    FILE_NOT_FOUND = "E1001"
    FILE_TOO_LARGE = "E1002"
    WORKBOOK_DECODE_FAILED = "E1003"
    FILE_READ_ERROR = "E1004"

    # Option errors (E2xxx)
    INVALID_OPTIONS = "E2001"

    # Workbook errors (E3xxx)
    SHEET_NOT_FOUND = "E3001"
    WORKBOOK_READ_FAILED = "E3002"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"


class HTTPStatusMixin:
    """Mixin that provides HTTP status code for exceptions.

    Subclasses set the `http_status` class attribute so the HTTP layer can
    translate failures without inspecting their type.
    """

    http_status: int = 500

    def get_http_status(self) -> int:
        """Get the HTTP status code for this exception.

        Returns:
            HTTP status code appropriate for this error.
        """
        return self.http_status


class WBXError(Exception, HTTPStatusMixin):
    """Base exception for all workbook extraction errors.

    It provides:
    - Unique error codes for programmatic handling
    - HTTP status code mapping for API responses
    - Structured error details for logging and debugging

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
        http_status: HTTP status code for API responses (default 500).
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for API responses.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# File Errors (E1xxx)
# =============================================================================


class FileError(WBXError):
    """Base class for errors about the workbook file or byte buffer."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILE_READ_ERROR,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path to the problematic file, if any.
            details: Additional details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class WorkbookFileNotFoundError(FileError):
    """Raised when a workbook path does not exist.

    Named to avoid shadowing the built-in FileNotFoundError.
    """

    http_status: int = 404

    def __init__(
        self,
        file_path: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = message or f"Workbook file not found: {file_path}"
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_NOT_FOUND,
            file_path=file_path,
            details=details,
        )


class FileTooLargeError(FileError):
    """Raised when a workbook exceeds the maximum allowed size."""

    http_status: int = 413

    def __init__(
        self,
        file_size: int,
        max_size: int,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with size information.

        Args:
            file_size: Actual size in bytes.
            max_size: Maximum allowed size in bytes.
            file_path: Optional file path.
            details: Additional details.
        """
        details = details or {}
        details["file_size_bytes"] = file_size
        details["max_size_bytes"] = max_size
        message = (
            f"File size ({file_size} bytes) exceeds maximum "
            f"allowed size ({max_size} bytes)"
        )
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_TOO_LARGE,
            file_path=file_path,
            details=details,
        )
        self.file_size = file_size
        self.max_size = max_size


class WorkbookDecodeError(FileError):
    """Raised when the bytes do not form an openable workbook container."""

    http_status: int = 422

    def __init__(
        self,
        message: str,
        byte_length: int | None = None,
        reason: str | None = None,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with information about the unreadable buffer.

        Args:
            message: Error message.
            byte_length: Size of the buffer that failed to decode.
            reason: Name of the underlying decoder failure.
            file_path: Optional file path the bytes came from.
            details: Additional details.
        """
        details = details or {}
        if byte_length is not None:
            details["byte_length"] = byte_length
        if reason:
            details["reason"] = reason
        super().__init__(
            message=message,
            error_code=ErrorCode.WORKBOOK_DECODE_FAILED,
            file_path=file_path,
            details=details,
        )
        self.byte_length = byte_length
        self.reason = reason


# =============================================================================
# Option Errors (E2xxx)
# =============================================================================


class OptionsValidationError(WBXError):
    """Raised when read options are malformed."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with validation details.

        Args:
            message: Main error message.
            field: Option that failed validation.
            errors: List of validation errors.
            details: Additional details.
        """
        details = details or {}
        if field:
            details["field"] = field
        if errors:
            details["validation_errors"] = errors
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_OPTIONS,
            details=details,
        )
        self.field = field
        self.errors = errors or []


# =============================================================================
# Workbook Errors (E3xxx)
# =============================================================================


class WorkbookError(WBXError):
    """Base class for errors raised while reading a decoded workbook."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.WORKBOOK_READ_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class SheetNotFoundError(WorkbookError):
    """Raised when a sheet selector does not resolve to a readable sheet."""

    http_status: int = 404

    def __init__(
        self,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
        available_sheets: list[str] | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the selector that failed.

        Args:
            sheet_name: Requested sheet name, if selected by name.
            sheet_index: Requested zero-based index, if selected by index.
            available_sheets: Sheet directory of the workbook.
            message: Optional custom message.
            details: Additional details.
        """
        details = details or {}
        if sheet_name is not None:
            details["sheet_name"] = sheet_name
        if sheet_index is not None:
            details["sheet_index"] = sheet_index
        if available_sheets is not None:
            details["available_sheets"] = available_sheets
        if message is None:
            if sheet_index is not None:
                count = len(available_sheets or [])
                message = (
                    f"Sheet index {sheet_index} is out of range "
                    f"(workbook has {count} sheets)"
                )
            else:
                message = f"Sheet not found: {sheet_name!r}"
        super().__init__(
            message=message,
            error_code=ErrorCode.SHEET_NOT_FOUND,
            details=details,
        )
        self.sheet_name = sheet_name
        self.sheet_index = sheet_index
        self.available_sheets = available_sheets or []
