"""Dataclasses representing normalized sheet data."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

JsonScalar = int | float | str | bool | None


class CellKind(str, Enum):
    """Closed set of value kinds a normalized cell can hold."""

    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    BOOLEAN = "boolean"
    EMPTY = "empty"


_VALUE_TYPES: dict[CellKind, tuple[type, ...]] = {
    CellKind.INTEGER: (int,),
    CellKind.FLOAT: (float,),
    CellKind.TEXT: (str,),
    CellKind.BOOLEAN: (bool,),
    CellKind.EMPTY: (type(None),),
}


@dataclass(frozen=True)
class CellValue:
    """A single typed cell value.

    ``kind`` is the active variant and ``value`` its payload. Use the
    constructors (``CellValue.from_int(3)``, ``CellValue.empty()``...) rather
    than building instances by hand.
    """

    kind: CellKind
    value: JsonScalar = None

    def __post_init__(self) -> None:
        expected = _VALUE_TYPES[self.kind]
        # bool is an int subclass; only BOOLEAN may carry one
        is_bool = isinstance(self.value, bool)
        if not isinstance(self.value, expected) or (
            is_bool and self.kind is not CellKind.BOOLEAN
        ):
            raise TypeError(
                f"{self.kind.value} cell cannot hold {type(self.value).__name__}"
            )

    @classmethod
    def from_int(cls, value: int) -> CellValue:
        return cls(CellKind.INTEGER, value)

    @classmethod
    def from_float(cls, value: float) -> CellValue:
        return cls(CellKind.FLOAT, value)

    @classmethod
    def from_text(cls, value: str) -> CellValue:
        return cls(CellKind.TEXT, value)

    @classmethod
    def from_bool(cls, value: bool) -> CellValue:
        return cls(CellKind.BOOLEAN, value)

    @classmethod
    def empty(cls) -> CellValue:
        return cls(CellKind.EMPTY, None)

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    def to_json(self) -> JsonScalar:
        """Return the untagged payload; Empty becomes ``None``."""
        return self.value


@dataclass(frozen=True)
class ColumnValue:
    """A header-tagged cell within a data row."""

    header: str
    value: CellValue

    def to_dict(self) -> dict[str, Any]:
        return {"header": self.header, "value": self.value.to_json()}


@dataclass(frozen=True)
class DataRow:
    """One data row; columns appear in sheet column order."""

    columns: tuple[ColumnValue, ...] = ()

    def __len__(self) -> int:
        return len(self.columns)

    def as_pairs(self) -> list[tuple[str, JsonScalar]]:
        """Return ``(header, value)`` pairs with untagged values."""
        return [(column.header, column.value.to_json()) for column in self.columns]

    def to_dict(self) -> dict[str, Any]:
        return {"columns": [column.to_dict() for column in self.columns]}


@dataclass(frozen=True)
class SheetResult:
    """Normalized rows of a single worksheet, header row excluded."""

    sheet: str
    rows: tuple[DataRow, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"sheet": self.sheet, "rows": [row.to_dict() for row in self.rows]}


@dataclass(frozen=True)
class ExtractionResult:
    """All sheets produced by one read, in selection order."""

    sheets: tuple[SheetResult, ...] = ()

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.sheet for sheet in self.sheets]

    def get_sheet(self, name: str) -> SheetResult:
        """Return the first sheet result with the given name.

        Raises:
            KeyError: If no sheet result carries that name.
        """
        for sheet in self.sheets:
            if sheet.sheet == name:
                return sheet
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        return {"sheets": [sheet.to_dict() for sheet in self.sheets]}
