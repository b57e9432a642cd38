"""Helpers for building workbook bytes in tests.

Example usage:
    from tests.fixtures import save_workbook

    wb = Workbook()
    wb.active.append(["Name", "Age"])
    data = save_workbook(wb)
"""

from io import BytesIO

from openpyxl import Workbook

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def save_workbook(wb: Workbook) -> bytes:
    """Serialize an openpyxl workbook to xlsx bytes."""
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
