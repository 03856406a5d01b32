"""
ExcelWriter — builder for styled summary workbooks.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from chartprep.excel.formatters import (
    add_kpi_card,
    auto_column_width,
    format_data_cell,
    format_header_row,
)
from chartprep.excel.styles import (
    DATA_FONT, LEGEND_BOLD_FONT, SECTION_FONT, SUBTITLE_FONT, THIN_BORDER, TITLE_FONT, WRAP,
)


ColSpec = tuple[str, str, str]  # (key, kind, label)


def column_specs(df: pd.DataFrame) -> list[ColSpec]:
    """Infer (key, kind, label) for every column of a summary table."""
    specs = []
    for col in df.columns:
        if pd.api.types.is_integer_dtype(df[col]):
            kind = "count"
        elif pd.api.types.is_numeric_dtype(df[col]):
            kind = "decimal"
        else:
            kind = "text"
        specs.append((col, kind, str(col).replace("_", " ").title()))
    return specs


def _put(ws: Worksheet, row: int, col: int, value, font, border=None, alignment=None):
    cell = ws.cell(row=row, column=col, value=value)
    cell.font = font
    if border is not None:
        cell.border = border
    if alignment is not None:
        cell.alignment = alignment
    return cell


class ExcelWriter:
    """Fluent builder around an openpyxl Workbook."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._fresh = True

    def add_sheet(self, title: str) -> Worksheet:
        """New worksheet; the workbook's default sheet is reused for the first call."""
        # Excel caps sheet titles at 31 chars
        if self._fresh:
            self._fresh = False
            ws = self.wb.active
            ws.title = title[:31]
            return ws
        return self.wb.create_sheet(title=title[:31])

    def write_title(self, ws: Worksheet, title: str, subtitle: str, merge_cols: int = 6) -> int:
        """Title + subtitle rows. Returns next free row."""
        for row, text, font in ((1, title, TITLE_FONT), (2, subtitle, SUBTITLE_FONT)):
            _put(ws, row, 1, text, font)
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=merge_cols)
        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        _put(ws, row, 1, title, SECTION_FONT)
        return row + 2

    def write_kpi_row(self, ws: Worksheet, row: int, kpis: list[tuple], col_spacing: int = 2) -> int:
        """kpis: [(value, label, kind), ...]. Returns next free row."""
        col = 1
        for value, label, kind in kpis:
            add_kpi_card(ws, row, col, value, label, kind)
            col += col_spacing
        return row + 3

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: list[ColSpec],
        data: list[dict] | pd.DataFrame,
        flag_fn=None,
        show_total: bool = False,
        total_label: str = "TOTAL",
    ) -> int:
        """Header + rows (+ optional total of count columns).

        flag_fn(row_data) -> bool marks rows to highlight.
        Returns the row after the last one written.
        """
        for col_num, (_, _, label) in enumerate(columns, 1):
            ws.cell(row=start_row, column=col_num).value = label
        format_header_row(ws, start_row, len(columns))

        rows = data.to_dict("records") if isinstance(data, pd.DataFrame) else data

        row = start_row + 1
        for row_data in rows:
            flagged = bool(flag_fn(row_data)) if flag_fn else False
            for col_num, (key, kind, _) in enumerate(columns, 1):
                val = row_data.get(key)
                if val is not None and pd.isna(val):
                    val = None
                format_data_cell(ws, row, col_num, val, kind, flagged=flagged)
            row += 1

        if show_total and rows:
            format_data_cell(ws, row, 1, total_label, "text", is_total=True)
            for col_num, (key, kind, _) in enumerate(columns[1:], 2):
                total = sum(r.get(key) or 0 for r in rows) if kind == "count" else None
                format_data_cell(ws, row, col_num, total, kind if total is not None else "text", is_total=True)
            row += 1

        auto_column_width(ws)
        ws.freeze_panes = f"A{start_row + 1}"
        return row

    def write_legend(self, ws: Worksheet, start_row: int, items: list[tuple[str, str]]) -> int:
        """Canonical label → raw variants table. Returns next free row."""
        ws.cell(row=start_row, column=1, value="Canonical label")
        ws.cell(row=start_row, column=2, value="Raw variants")
        format_header_row(ws, start_row, 2)

        for offset, (label, variants) in enumerate(items, 1):
            _put(ws, start_row + offset, 1, label, LEGEND_BOLD_FONT, THIN_BORDER)
            _put(ws, start_row + offset, 2, variants, DATA_FONT, THIN_BORDER, WRAP)

        ws.column_dimensions["A"].width = 24
        ws.column_dimensions["B"].width = 70
        return start_row + len(items) + 2

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path
