"""
chartprep — Configuration: paths, defaults, built-in category rules.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with CHARTPREP_DATA_DIR env var for deployment
# ---------------------------------------------------------------------------
_base_dir = Path(os.environ.get("CHARTPREP_DATA_DIR", str(Path.home() / "chartprep")))
DATA_FOLDER = _base_dir / "data"
CHARTS_FOLDER = _base_dir / "charts"
RULES_FOLDER = _base_dir / "rules"

# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------
DEFAULT_SEPARATOR = os.environ.get("CHARTPREP_SEPARATOR", ",")

# Stripped from measurement cells before numeric parsing ("$1,200" → 1200)
NUMERIC_JUNK_PATTERN = r"[\$€£,\s]"

# Only blank cells are missing in label columns; measurement columns also accept these
MISSING_TOKENS = frozenset({"NA", "N/A", "n/a", "na", "NaN", "nan", "null", "NULL", "None", "-"})

# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------
DEFAULT_LABEL = "Unknown"
CLEAN_SUFFIX = "_clean"

# Growth-form labels seen in plant survey exports (order matters: first match wins)
GROWTH_FORM_RULES = {
    "Shrub": ["shrub", "Shrub", "SHRUB", "shrubs", "Shrub; Subshrub"],
    "Tree": ["tree", "Tree", "TREE", "Tree; Shrub", "Tree/Shrub"],
    "Herb": ["herb", "Herb", "Forb/herb", "forb", "Forb"],
    "Graminoid": ["graminoid", "Graminoid", "grass", "Grass"],
    "Vine": ["vine", "Vine", "Vine; Shrub", "liana"],
}

BUILTIN_RULESETS = {
    "growth_form": GROWTH_FORM_RULES,
}

# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------
CHART_WIDTH = 8.0   # inches
CHART_HEIGHT = 5.0
CHART_DPI = int(os.environ.get("CHARTPREP_CHART_DPI", "150"))
CHART_FORMATS = {"png", "svg", "pdf"}
