"""Workbook Extraction - spreadsheet sheets as header-tagged rows."""

from workbook_extraction.services.workbook_reader import (
    ReadOptions,
    SheetByIndex,
    SheetByName,
    WorkbookReader,
    extract,
)
from workbook_extraction.sheet_document import (
    CellKind,
    CellValue,
    ColumnValue,
    DataRow,
    ExtractionResult,
    SheetResult,
)

__all__ = [
    "CellKind",
    "CellValue",
    "ColumnValue",
    "DataRow",
    "ExtractionResult",
    "ReadOptions",
    "SheetByIndex",
    "SheetByName",
    "SheetResult",
    "WorkbookReader",
    "extract",
]
__version__ = "0.1.0"


def main() -> None:
    """Run the FastAPI server using uvicorn."""
    import uvicorn

    from workbook_extraction.config import settings

    uvicorn.run(
        "workbook_extraction.api:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )
