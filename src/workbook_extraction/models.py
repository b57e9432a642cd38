"""Pydantic models for API requests and responses."""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    model_validator,
)
from pydantic.alias_generators import to_camel

from workbook_extraction.services.workbook_reader import (
    ReadOptions,
    SheetByIndex,
    SheetByName,
    SheetSelector,
)
from workbook_extraction.utils.exceptions import ErrorCode


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: str
    version: str


class SheetOptionPayload(BaseModel):
    """Sheet selector as sent by clients: exactly one of name or index."""

    model_config = ConfigDict(extra="forbid")

    name: StrictStr | None = Field(default=None, description="Exact sheet name")
    index: StrictInt | None = Field(
        default=None, ge=0, description="Zero-based sheet position"
    )

    @model_validator(mode="after")
    def validate_exactly_one(self) -> "SheetOptionPayload":
        """Require exactly one selection mode."""
        if (self.name is None) == (self.index is None):
            raise ValueError("sheet must specify exactly one of 'name' or 'index'")
        return self

    def to_selector(self) -> SheetSelector:
        if self.name is not None:
            return SheetByName(self.name)
        assert self.index is not None
        return SheetByIndex(self.index)


class ReadOptionsPayload(BaseModel):
    """Read options in the host's camelCase form.

    Example:
        {"headerRow": 0, "sheet": {"name": "Data"}, "includeEmptyCells": true}
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    header_row: StrictInt | None = Field(
        default=None, ge=0, description="Zero-based header row"
    )
    sheet: SheetOptionPayload | None = Field(
        default=None, description="Sheet selector; omit to read all sheets"
    )
    include_empty_cells: StrictBool | None = Field(
        default=None, description="Emit empty cells as null values"
    )

    def to_read_options(
        self, default_header_row: int = 0, default_include_empty_cells: bool = False
    ) -> ReadOptions:
        """Build core read options, filling omitted fields from defaults."""
        return ReadOptions(
            header_row=(
                self.header_row if self.header_row is not None else default_header_row
            ),
            sheet=self.sheet.to_selector() if self.sheet is not None else None,
            include_empty_cells=(
                self.include_empty_cells
                if self.include_empty_cells is not None
                else default_include_empty_cells
            ),
        )


class ColumnPayload(BaseModel):
    """A header-tagged value; empty cells are null."""

    header: str
    value: bool | int | float | str | None = None


class RowPayload(BaseModel):
    columns: list[ColumnPayload] = Field(default_factory=list)


class SheetPayload(BaseModel):
    sheet: str = Field(..., description="Sheet name")
    rows: list[RowPayload] = Field(
        default_factory=list, description="Data rows, header row excluded"
    )


class ReadResponse(BaseModel):
    """Response model for the read endpoint."""

    sheets: list[SheetPayload] = Field(default_factory=list)


class SheetNamesResponse(BaseModel):
    """Response model for the sheet directory endpoint."""

    sheets: list[str] = Field(..., description="Sheet names in workbook order")


class ErrorDetail(BaseModel):
    """Error detail model for API error responses.

    This model provides structured error responses with:
    - Human-readable error message
    - Machine-readable error code
    - Optional additional details for debugging
    - Optional request ID for correlation
    """

    detail: str = Field(..., description="Human-readable error message")
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code (e.g., 'E3001')",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details for debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Request ID for error correlation",
    )

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        detail: str,
        details: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> "ErrorDetail":
        """Create an ErrorDetail from an ErrorCode enum value."""
        return cls(
            detail=detail,
            error_code=error_code.value,
            details=details,
            request_id=request_id,
        )
