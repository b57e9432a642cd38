"""Tests for the centralized exception classes."""

from workbook_extraction.utils.exceptions import (
    ErrorCode,
    FileError,
    FileTooLargeError,
    OptionsValidationError,
    SheetNotFoundError,
    WBXError,
    WorkbookDecodeError,
    WorkbookError,
    WorkbookFileNotFoundError,
)


class TestErrorCode:
    """Tests for ErrorCode enumeration."""

    def test_error_codes_are_unique(self) -> None:
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))

    def test_error_code_format(self) -> None:
        """Error codes should follow Exxxx format."""
        for code in ErrorCode:
            assert code.value.startswith("E")
            assert len(code.value) == 5
            assert code.value[1:].isdigit()

    def test_every_code_is_raised_somewhere(self) -> None:
        """Only codes carried by an exception class are defined."""
        assert {code.value for code in ErrorCode} == {
            "E1001",
            "E1002",
            "E1003",
            "E1004",
            "E2001",
            "E3001",
            "E3002",
            "E9001",
        }

    def test_file_errors_start_with_e1(self) -> None:
        file_codes = [
            ErrorCode.FILE_NOT_FOUND,
            ErrorCode.FILE_TOO_LARGE,
            ErrorCode.WORKBOOK_DECODE_FAILED,
            ErrorCode.FILE_READ_ERROR,
        ]
        for code in file_codes:
            assert code.value.startswith("E1")

    def test_workbook_errors_start_with_e3(self) -> None:
        for code in (ErrorCode.SHEET_NOT_FOUND, ErrorCode.WORKBOOK_READ_FAILED):
            assert code.value.startswith("E3")


class TestWBXError:
    """Tests for the base exception."""

    def test_defaults(self) -> None:
        error = WBXError("Something broke")

        assert error.message == "Something broke"
        assert error.error_code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}
        assert error.http_status == 500
        assert error.get_http_status() == 500

    def test_str_includes_error_code(self) -> None:
        error = WBXError("Something broke")
        assert str(error) == "[E9001] Something broke"

    def test_to_dict_omits_empty_details(self) -> None:
        assert WBXError("x").to_dict() == {"error_code": "E9001", "message": "x"}

    def test_to_dict_with_details(self) -> None:
        error = WBXError("x", details={"key": "value"})
        assert error.to_dict()["details"] == {"key": "value"}


class TestFileErrors:
    def test_file_not_found(self) -> None:
        error = WorkbookFileNotFoundError("/tmp/missing.xlsx")

        assert isinstance(error, FileError)
        assert error.http_status == 404
        assert error.error_code == ErrorCode.FILE_NOT_FOUND
        assert "/tmp/missing.xlsx" in error.message
        assert error.details["file_path"] == "/tmp/missing.xlsx"

    def test_file_not_found_does_not_shadow_builtin(self) -> None:
        assert not issubclass(WorkbookFileNotFoundError, FileNotFoundError)

    def test_file_too_large(self) -> None:
        error = FileTooLargeError(file_size=2048, max_size=1024, file_path="a.xlsx")

        assert error.http_status == 413
        assert error.file_size == 2048
        assert error.max_size == 1024
        assert error.details == {
            "file_size_bytes": 2048,
            "max_size_bytes": 1024,
            "file_path": "a.xlsx",
        }

    def test_decode_error(self) -> None:
        error = WorkbookDecodeError(
            "Not a workbook", byte_length=12, reason="BadZipFile"
        )

        assert error.http_status == 422
        assert error.error_code == ErrorCode.WORKBOOK_DECODE_FAILED
        assert error.byte_length == 12
        assert error.reason == "BadZipFile"
        assert error.details == {"byte_length": 12, "reason": "BadZipFile"}


class TestOptionsValidationError:
    def test_field_and_errors_in_details(self) -> None:
        error = OptionsValidationError(
            "Invalid read options", field="options", errors=["sheet: bad"]
        )

        assert error.http_status == 400
        assert error.error_code == ErrorCode.INVALID_OPTIONS
        assert error.field == "options"
        assert error.errors == ["sheet: bad"]
        assert error.details == {
            "field": "options",
            "validation_errors": ["sheet: bad"],
        }

    def test_errors_default_to_empty_list(self) -> None:
        assert OptionsValidationError("bad").errors == []


class TestSheetNotFoundError:
    def test_by_name(self) -> None:
        error = SheetNotFoundError(sheet_name="Missing", available_sheets=["Data"])

        assert isinstance(error, WorkbookError)
        assert error.http_status == 404
        assert error.error_code == ErrorCode.SHEET_NOT_FOUND
        assert error.message == "Sheet not found: 'Missing'"
        assert error.details == {
            "sheet_name": "Missing",
            "available_sheets": ["Data"],
        }

    def test_by_index(self) -> None:
        error = SheetNotFoundError(sheet_index=5, available_sheets=["A", "B"])

        assert error.sheet_index == 5
        assert error.message == (
            "Sheet index 5 is out of range (workbook has 2 sheets)"
        )
        assert "sheet_name" not in error.details

    def test_custom_message(self) -> None:
        error = SheetNotFoundError(sheet_name="Chart", message="sheet has no grid")
        assert error.message == "sheet has no grid"
        assert error.available_sheets == []
