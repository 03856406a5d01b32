"""
Workbook palette: fonts, fills, borders and alignments for summary exports.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------
SLATE = "263238"
STEEL = "455A64"
MIST = "ECEFF1"
ZEBRA = "F7F9FA"
WHITE = "FFFFFF"
INK = "212121"
MUTED = "757575"
AMBER_LIGHT = "FFF8E1"
GRID = "CFD8DC"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=20, bold=True, color=SLATE)
SUBTITLE_FONT = Font(name="Calibri", size=11, italic=True, color=MUTED)
SECTION_FONT = Font(name="Calibri", size=13, bold=True, color=STEEL)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
DATA_FONT = Font(name="Calibri", size=10, color=INK)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True, color=INK)
KPI_VALUE_FONT = Font(name="Calibri", size=22, bold=True, color=SLATE)
KPI_LABEL_FONT = Font(name="Calibri", size=9, color=MUTED)
LEGEND_BOLD_FONT = Font(name="Calibri", size=10, bold=True)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = PatternFill(start_color=STEEL, end_color=STEEL, fill_type="solid")
ZEBRA_FILL = PatternFill(start_color=ZEBRA, end_color=ZEBRA, fill_type="solid")
TOTAL_FILL = PatternFill(start_color=MIST, end_color=MIST, fill_type="solid")
DEFAULT_LABEL_FILL = PatternFill(start_color=AMBER_LIGHT, end_color=AMBER_LIGHT, fill_type="solid")

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
_thin = Side(style="thin", color=GRID)
THIN_BORDER = Border(left=_thin, right=_thin, top=_thin, bottom=_thin)
HEADER_BORDER = Border(left=_thin, right=_thin, top=_thin, bottom=Side(style="medium", color=SLATE))
TOTAL_BORDER = Border(left=_thin, right=_thin, top=Side(style="medium", color=STEEL), bottom=_thin)

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")
WRAP = Alignment(horizontal="left", vertical="center", wrap_text=True)

# ---------------------------------------------------------------------------
# Number formats by column kind
# ---------------------------------------------------------------------------
NUMBER_FORMATS = {
    "count": "#,##0",
    "decimal": "#,##0.00",
    "percent": '0.0"%"',
}
