from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import pytest
from openpyxl import Workbook

from tests.fixtures import save_workbook


def _fill_data_sheet(ws) -> None:
    ws["A1"] = "Name"
    ws["B1"] = "Age"
    ws["A2"] = "Ann"
    ws["B2"] = 30
    ws["A3"] = "Bo"


@pytest.fixture
def make_workbook() -> Callable[..., bytes]:
    """Build workbook bytes from ``{sheet_name: [[cell, ...], ...]}``."""

    def _make(sheets: dict[str, list[list[object]]]) -> bytes:
        wb = Workbook()
        wb.remove(wb.active)
        for name, rows in sheets.items():
            ws = wb.create_sheet(name)
            for row in rows:
                ws.append(row)
        return save_workbook(wb)

    return _make


@pytest.fixture
def data_workbook() -> bytes:
    """One sheet named "Data" with headers Name/Age and an empty Age cell."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Data"
    _fill_data_sheet(ws)
    return save_workbook(wb)


@pytest.fixture
def multi_sheet_workbook() -> bytes:
    """Three sheets in a fixed order with differing shapes and types."""
    wb = Workbook()
    data = wb.active
    data.title = "Data"
    _fill_data_sheet(data)

    summary = wb.create_sheet("Summary")
    summary.append(["Metric", "Value", "Flag", "When"])
    summary.append(["ratio", 0.25, True, datetime(2024, 1, 15)])
    summary.append(["errors", "#DIV/0!", False, None])

    notes = wb.create_sheet("Notes")
    notes.append(["Note"])
    notes.append(["first"])
    notes.append(["second"])
    return save_workbook(wb)
