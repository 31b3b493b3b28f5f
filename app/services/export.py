"""Spreadsheet export of the admin entry listing."""

from __future__ import annotations

import logging
from datetime import date
from io import BytesIO
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.styles.colors import Color

from .reporting import EnrichedEntry
from .timecalc import format_day

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class EntriesSheet:
    """One header row followed by one row per entry."""

    _title = "Entries"
    _header = {
        "A1": "Date",
        "B1": "Project",
        "C1": "User",
        "D1": "Description",
        "E1": "Hours",
    }
    _columns_width = {
        "A": 12,
        "B": 25,
        "C": 20,
        "D": 40,
        "E": 8,
    }
    _header_font = Font(color="FF000000", bold=True)
    _header_fill = PatternFill("solid", fgColor=Color(indexed=22))

    def __init__(self, sheet) -> None:
        self._sheet = sheet
        sheet.title = self._title
        for cell, value in self._header.items():
            sheet[cell] = value
            sheet[cell].font = self._header_font
            sheet[cell].fill = self._header_fill
        for column, width in self._columns_width.items():
            sheet.column_dimensions[column].width = width
        sheet.freeze_panes = "A2"

    @property
    def sheet(self):
        return self._sheet

    def add_rows(self, rows: Iterable[EnrichedEntry]) -> int:
        count = 0
        for count, row in enumerate(rows, start=1):
            line = count + 1
            self._sheet[f"A{line}"] = row.display_date
            self._sheet[f"B{line}"] = row.project_name
            self._sheet[f"C{line}"] = row.user_name
            self._sheet[f"D{line}"] = row.description
            self._sheet[f"D{line}"].alignment = Alignment(wrap_text=True)
            self._sheet[f"E{line}"] = float(row.hours)
            self._sheet[f"E{line}"].number_format = "0.00"
        return count


def export_filename(today: date) -> str:
    return f"report_entries_{format_day(today)}.xlsx"


def build_entries_workbook(rows: Iterable[EnrichedEntry]) -> bytes:
    workbook = Workbook()
    sheet = EntriesSheet(workbook.active)
    count = sheet.add_rows(rows)
    buffer = BytesIO()
    workbook.save(buffer)
    logger.info("export.generated", extra={"extra_data": {"rows": count}})
    return buffer.getvalue()
