"""
Cell and row formatting helpers.
"""
from __future__ import annotations

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from chartprep.excel.styles import (
    CENTER, DATA_FONT, DEFAULT_LABEL_FILL, HEADER_BORDER, HEADER_FILL, HEADER_FONT,
    KPI_LABEL_FONT, KPI_VALUE_FONT, LEFT, NUMBER_FORMATS, RIGHT, THIN_BORDER,
    TOTAL_BORDER, TOTAL_FILL, TOTAL_FONT, ZEBRA_FILL,
)


def format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    """Apply header styling across the first num_cols cells of a row."""
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = HEADER_BORDER


def format_data_cell(
    ws: Worksheet,
    row_num: int,
    col_num: int,
    value,
    kind: str = "text",
    is_total: bool = False,
    flagged: bool = False,
) -> None:
    """Write one value. `kind` is text, count, decimal or percent."""
    cell = ws.cell(row=row_num, column=col_num)
    cell.value = value
    cell.font = TOTAL_FONT if is_total else DATA_FONT
    cell.border = TOTAL_BORDER if is_total else THIN_BORDER
    cell.alignment = RIGHT if kind in NUMBER_FORMATS else LEFT
    if kind in NUMBER_FORMATS:
        cell.number_format = NUMBER_FORMATS[kind]

    if is_total:
        cell.fill = TOTAL_FILL
    elif flagged:
        cell.fill = DEFAULT_LABEL_FILL
    elif row_num % 2 == 0:
        cell.fill = ZEBRA_FILL


def auto_column_width(ws: Worksheet, min_width: int = 10, max_width: int = 50) -> None:
    """Fit column widths to the longest rendered value."""
    for column in ws.columns:
        longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(max(longest + 2, min_width), max_width)


def add_kpi_card(ws: Worksheet, row: int, col: int, value, label: str, kind: str = "count") -> None:
    """Large value with a small caption underneath."""
    value_cell = ws.cell(row=row, column=col)
    value_cell.value = value
    value_cell.font = KPI_VALUE_FONT
    value_cell.alignment = CENTER
    if kind in NUMBER_FORMATS:
        value_cell.number_format = NUMBER_FORMATS[kind]

    label_cell = ws.cell(row=row + 1, column=col)
    label_cell.value = label
    label_cell.font = KPI_LABEL_FONT
    label_cell.alignment = CENTER
