"""openpyxl-backed workbook decoder producing grids of primitive cells."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from io import BytesIO
from typing import Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.cell import Cell
from openpyxl.utils.datetime import to_excel
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from workbook_extraction.utils.exceptions import WorkbookDecodeError
from workbook_extraction.utils.logging import get_logger

logger = get_logger(__name__)


class RawKind(str, Enum):
    """Primitive cell kinds as exposed by the decoder."""

    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    TEXT = "text"
    DATE_TIME = "date_time"
    DATE_SERIAL = "date_serial"
    DURATION = "duration"
    ERROR = "error"
    EMPTY = "empty"


@dataclass(frozen=True)
class RawCell:
    """A decoded cell before normalization.

    DATE_SERIAL carries a float serial, DATE_TIME and DURATION carry ISO text
    and ERROR carries the spreadsheet error literal (e.g. ``#DIV/0!``).
    """

    kind: RawKind
    value: Any = None

    @property
    def is_empty(self) -> bool:
        return self.kind is RawKind.EMPTY

    def display(self) -> str:
        """Render the cell the way it appears when used as a header."""
        if self.kind is RawKind.EMPTY:
            return ""
        if self.kind is RawKind.BOOL:
            return "true" if self.value else "false"
        if self.kind in (RawKind.FLOAT, RawKind.DATE_SERIAL):
            return format_float(self.value)
        return str(self.value)


EMPTY_CELL = RawCell(RawKind.EMPTY)


@dataclass
class SheetGrid:
    """Rows of one sheet starting at the designated header row.

    ``rows[0]`` is the header row. ``headers`` is ``None`` when the sheet
    has no row at the header position.
    """

    name: str
    rows: list[list[RawCell]] = field(default_factory=list)
    headers: list[str] | None = None


class SheetGridUnavailableError(LookupError):
    """Raised when a sheet is missing or has no cell grid (e.g. a chartsheet)."""

    def __init__(self, sheet_name: str, reason: str) -> None:
        super().__init__(f"Sheet {sheet_name!r} is unavailable: {reason}")
        self.sheet_name = sheet_name
        self.reason = reason


def format_float(value: float) -> str:
    """Format a float without a trailing ``.0`` for integral values."""
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


class WorkbookDecoder:
    """Decode workbook bytes into per-sheet grids of ``RawCell``.

    The whole workbook is loaded in memory with cached formula results
    (``data_only=True``); formulas are never evaluated.
    """

    def __init__(self, workbook: Workbook) -> None:
        self._workbook = workbook
        self._header_row = 0

    @classmethod
    def open(cls, data: bytes) -> WorkbookDecoder:
        """Open a workbook from raw bytes.

        Raises:
            WorkbookDecodeError: If the bytes are not a readable workbook.
        """
        try:
            workbook = load_workbook(
                filename=BytesIO(data), data_only=True, read_only=False
            )
        except (
            BadZipFile,
            InvalidFileException,
            KeyError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            logger.warning(
                "Workbook decode failed",
                byte_length=len(data),
                reason=type(e).__name__,
            )
            raise WorkbookDecodeError(
                f"Unable to open workbook: {e}",
                byte_length=len(data),
                reason=type(e).__name__,
            ) from e
        logger.debug(
            "Workbook opened",
            byte_length=len(data),
            sheets=len(workbook.sheetnames),
        )
        return cls(workbook)

    @property
    def header_row(self) -> int:
        return self._header_row

    def set_header_row(self, index: int) -> None:
        """Designate the zero-based physical row holding the headers."""
        if index < 0:
            raise ValueError(f"header row must be >= 0, got {index}")
        self._header_row = index

    def sheet_names(self) -> list[str]:
        """List sheet names in workbook order."""
        return list(self._workbook.sheetnames)

    def sheet_grid(self, name: str) -> SheetGrid:
        """Decode one sheet into a grid starting at the header row.

        Raises:
            SheetGridUnavailableError: If the sheet does not exist or is not
                a worksheet.
        """
        if name not in self._workbook.sheetnames:
            raise SheetGridUnavailableError(name, "no sheet with that name")
        sheet = self._workbook[name]
        if not isinstance(sheet, Worksheet):
            raise SheetGridUnavailableError(name, "sheet has no cell grid")

        epoch = self._workbook.epoch
        rows = [
            [self._decode_cell(cell, epoch) for cell in row]
            for row in sheet.iter_rows(
                min_row=self._header_row + 1, min_col=sheet.min_column
            )
        ]
        headers = [cell.display() for cell in rows[0]] if rows else None
        return SheetGrid(name=name, rows=rows, headers=headers)

    @staticmethod
    def _decode_cell(cell: Cell, epoch: datetime) -> RawCell:
        """Map an openpyxl cell to its primitive kind."""
        value = cell.value
        if value is None:
            return EMPTY_CELL
        if cell.data_type == "e":
            return RawCell(RawKind.ERROR, str(value))
        if isinstance(value, bool):
            return RawCell(RawKind.BOOL, value)
        if isinstance(value, int):
            return RawCell(RawKind.INT, value)
        if isinstance(value, float):
            return RawCell(RawKind.FLOAT, value)
        if isinstance(value, timedelta):
            return RawCell(RawKind.DATE_SERIAL, float(to_excel(value)))
        if isinstance(value, (datetime, date, time)):
            try:
                return RawCell(RawKind.DATE_SERIAL, float(to_excel(value, epoch)))
            except (OverflowError, TypeError, ValueError):
                return RawCell(RawKind.DATE_TIME, value.isoformat())
        return RawCell(RawKind.TEXT, str(value))
