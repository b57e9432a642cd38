"""Normalize decoded sheet grids into header-tagged rows."""

from __future__ import annotations

from workbook_extraction.services.workbook_decoder import RawCell, RawKind, SheetGrid
from workbook_extraction.sheet_document import (
    CellValue,
    ColumnValue,
    DataRow,
    SheetResult,
)
from workbook_extraction.utils.logging import get_logger

logger = get_logger(__name__)

_TEXT_KINDS = frozenset(
    {RawKind.TEXT, RawKind.DATE_TIME, RawKind.DURATION, RawKind.ERROR}
)
_FLOAT_KINDS = frozenset({RawKind.FLOAT, RawKind.DATE_SERIAL})


class SheetNormalizer:
    """Turn a ``SheetGrid`` into a ``SheetResult``.

    Row 0 of the grid is the header row and is never emitted as data. Every
    other row becomes a ``DataRow`` whose columns keep sheet order; empty
    cells are dropped unless ``include_empty`` is set.
    """

    def normalize(
        self, sheet_name: str, grid: SheetGrid, include_empty: bool = False
    ) -> SheetResult:
        """Normalize one sheet.

        Args:
            sheet_name: Name recorded on the result.
            grid: Decoded grid whose first row is the header row.
            include_empty: Emit ``Empty`` values instead of skipping them.

        Returns:
            The sheet's data rows in physical order.
        """
        headers = grid.headers or []
        rows: list[DataRow] = []

        for index, row in enumerate(grid.rows):
            if index == 0:
                continue

            columns: list[ColumnValue] = []
            for position, cell in enumerate(row):
                if cell.is_empty and not include_empty:
                    continue
                columns.append(
                    ColumnValue(
                        header=self._header_for(headers, position),
                        value=self.fold_cell(cell),
                    )
                )
            rows.append(DataRow(columns=tuple(columns)))

        logger.debug(
            "Sheet normalized",
            rows=len(rows),
            headers=len(headers),
            include_empty=include_empty,
        )
        return SheetResult(sheet=sheet_name, rows=tuple(rows))

    @staticmethod
    def fold_cell(cell: RawCell) -> CellValue:
        """Fold a decoder primitive into the closed ``CellValue`` set.

        Text, ISO date-times, ISO durations and errors become Text; floats
        and numeric date serials become Float.
        """
        if cell.kind in _TEXT_KINDS:
            return CellValue.from_text(str(cell.value))
        if cell.kind in _FLOAT_KINDS:
            return CellValue.from_float(float(cell.value))
        if cell.kind is RawKind.INT:
            return CellValue.from_int(int(cell.value))
        if cell.kind is RawKind.BOOL:
            return CellValue.from_bool(bool(cell.value))
        return CellValue.empty()

    @staticmethod
    def _header_for(headers: list[str], position: int) -> str:
        if position < len(headers):
            return headers[position]
        return ""
