"""Read normalized sheets out of workbook bytes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from workbook_extraction.services.sheet_normalizer import SheetNormalizer
from workbook_extraction.services.workbook_decoder import (
    SheetGridUnavailableError,
    WorkbookDecoder,
)
from workbook_extraction.sheet_document import ExtractionResult, SheetResult
from workbook_extraction.utils.exceptions import (
    OptionsValidationError,
    SheetNotFoundError,
    WorkbookFileNotFoundError,
)
from workbook_extraction.utils.logging import (
    LogContext,
    ProgressTracker,
    get_logger,
    timed_operation,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class SheetByName:
    """Select the sheet with this exact name."""

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise OptionsValidationError(
                "Sheet name must be a string", field="sheet.name"
            )


@dataclass(frozen=True)
class SheetByIndex:
    """Select the sheet at this zero-based position in the workbook."""

    index: int

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise OptionsValidationError(
                "Sheet index must be an integer", field="sheet.index"
            )
        if self.index < 0:
            raise OptionsValidationError(
                f"Sheet index must be >= 0, got {self.index}", field="sheet.index"
            )


SheetSelector = SheetByName | SheetByIndex


@dataclass(frozen=True)
class ReadOptions:
    """Options controlling a single read.

    ``sheet=None`` reads every sheet in workbook order.
    """

    header_row: int = 0
    sheet: SheetSelector | None = None
    include_empty_cells: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.header_row, bool) or not isinstance(self.header_row, int):
            raise OptionsValidationError(
                "Header row must be an integer", field="header_row"
            )
        if self.header_row < 0:
            raise OptionsValidationError(
                f"Header row must be >= 0, got {self.header_row}",
                field="header_row",
            )
        if self.sheet is not None and not isinstance(
            self.sheet, (SheetByName, SheetByIndex)
        ):
            raise OptionsValidationError(
                "Sheet selector must be SheetByName or SheetByIndex",
                field="sheet",
            )


DecoderFactory = Callable[[bytes], WorkbookDecoder]


class WorkbookReader:
    """Holds workbook bytes and extracts normalized sheets on demand.

    Every ``read`` decodes the held bytes afresh, so reads with different
    options never share state.
    """

    def __init__(
        self,
        data: bytes,
        *,
        decoder_factory: DecoderFactory | None = None,
        normalizer: SheetNormalizer | None = None,
    ) -> None:
        self._data = bytes(data)
        self._decoder_factory = decoder_factory or WorkbookDecoder.open
        self._normalizer = normalizer or SheetNormalizer()

    @classmethod
    def from_path(cls, file_path: Path) -> WorkbookReader:
        """Load a workbook file into memory."""
        if not file_path.exists():
            raise WorkbookFileNotFoundError(str(file_path))
        return cls(file_path.read_bytes())

    @property
    def byte_length(self) -> int:
        return len(self._data)

    def sheet_names(self) -> list[str]:
        """List sheet names in workbook order."""
        return self._decoder_factory(self._data).sheet_names()

    def read(self, options: ReadOptions | None = None) -> ExtractionResult:
        """Extract normalized rows for the selected sheet(s).

        Raises:
            WorkbookDecodeError: If the held bytes are not a workbook.
            SheetNotFoundError: If the selector does not resolve or a selected
                sheet has no readable grid.
        """
        opts = options or ReadOptions()

        with timed_operation(logger, "workbook_read") as metrics:
            decoder = self._decoder_factory(self._data)
            decoder.set_header_row(opts.header_row)
            available = decoder.sheet_names()

            if opts.sheet is None:
                targets = available
            else:
                targets = [self._resolve_sheet(opts.sheet, available)]

            logger.info(
                "Reading workbook",
                byte_length=self.byte_length,
                sheets=len(targets),
                header_row=opts.header_row,
                include_empty_cells=opts.include_empty_cells,
            )

            tracker = ProgressTracker(logger, "Normalizing sheets", total=len(targets))
            sheets: list[SheetResult] = []
            for name in targets:
                with LogContext(sheet=name):
                    try:
                        grid = decoder.sheet_grid(name)
                    except SheetGridUnavailableError as e:
                        raise SheetNotFoundError(
                            sheet_name=name,
                            available_sheets=available,
                            message=str(e),
                        ) from e

                    sheet = self._normalizer.normalize(
                        name, grid, opts.include_empty_cells
                    )
                sheets.append(sheet)
                metrics.sheets_processed += 1
                metrics.rows_emitted += len(sheet.rows)
                metrics.cells_emitted += sum(len(row) for row in sheet.rows)
                tracker.update(details=name)
            tracker.complete()

        return ExtractionResult(sheets=tuple(sheets))

    @staticmethod
    def _resolve_sheet(selector: SheetSelector, available: list[str]) -> str:
        if isinstance(selector, SheetByName):
            if selector.name not in available:
                raise SheetNotFoundError(
                    sheet_name=selector.name, available_sheets=available
                )
            return selector.name

        if selector.index >= len(available):
            raise SheetNotFoundError(
                sheet_index=selector.index, available_sheets=available
            )
        return available[selector.index]


def extract(data: bytes, options: ReadOptions | None = None) -> ExtractionResult:
    """Extract normalized sheets from workbook bytes in one call."""
    return WorkbookReader(data).read(options)
