"""Services for workbook extraction."""

from workbook_extraction.services.sheet_normalizer import SheetNormalizer
from workbook_extraction.services.workbook_decoder import WorkbookDecoder
from workbook_extraction.services.workbook_reader import (
    ReadOptions,
    SheetByIndex,
    SheetByName,
    WorkbookReader,
    extract,
)

__all__ = [
    "ReadOptions",
    "SheetByIndex",
    "SheetByName",
    "SheetNormalizer",
    "WorkbookDecoder",
    "WorkbookReader",
    "extract",
]
