"""
Hand a shaped table to plotnine — build the ggplot object, optionally save it.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd
from plotnine import (
    aes, facet_wrap, geom_bar, geom_boxplot, geom_col, geom_line, geom_point,
    geom_text, ggplot, labs, scale_x_log10, scale_y_log10, theme_minimal,
)

from chartprep.config import CHART_DPI, CHART_FORMATS, CHART_HEIGHT, CHART_WIDTH
from chartprep.data.errors import ChartError, require_columns


# geom name → (factory, needs y, colour aesthetic)
GEOMS = {
    "point": (geom_point, True, "color"),
    "line": (geom_line, True, "color"),
    "col": (geom_col, True, "fill"),
    "bar": (geom_bar, False, "fill"),
    "boxplot": (geom_boxplot, True, "fill"),
}


def build_chart(
    table: pd.DataFrame,
    x: str,
    y: str | None = None,
    geom: str = "point",
    color: str | None = None,
    facet: str | None = None,
    label: str | None = None,
    title: str | None = None,
    log_x: bool = False,
    log_y: bool = False,
) -> ggplot:
    """Bind table columns to aesthetics and return the plot (not yet drawn)."""
    if geom not in GEOMS:
        raise ChartError(f"Unknown geom '{geom}' (valid: {', '.join(GEOMS)})")
    factory, needs_y, colour_aes = GEOMS[geom]
    if needs_y and y is None:
        raise ChartError(f"geom '{geom}' needs a y column")
    if not needs_y and y is not None:
        raise ChartError(f"geom '{geom}' counts records itself; drop the y column or use 'col'")

    require_columns(table, [c for c in (x, y, color, facet, label) if c is not None])

    mapping = {"x": x}
    if y is not None:
        mapping["y"] = y
    if color is not None:
        mapping[colour_aes] = color

    plot = ggplot(table, aes(**mapping)) + factory() + theme_minimal()
    if label is not None:
        plot = plot + geom_text(aes(label=label), size=8, va="bottom")
    if facet is not None:
        plot = plot + facet_wrap(facet)
    if log_x:
        plot = plot + scale_x_log10()
    if log_y:
        plot = plot + scale_y_log10()
    plot = plot + labs(title=title or "", x=x, y=y or "count")
    return plot


def save_chart(
    plot: ggplot,
    path: str | Path,
    width: float = CHART_WIDTH,
    height: float = CHART_HEIGHT,
    dpi: int = CHART_DPI,
) -> Path:
    """Render the plot to an image file; format follows the suffix."""
    path = Path(path)
    fmt = path.suffix.lstrip(".").lower()
    if fmt not in CHART_FORMATS:
        raise ChartError(f"Unsupported chart format '{path.suffix}' (valid: {', '.join(sorted(CHART_FORMATS))})")
    path.parent.mkdir(parents=True, exist_ok=True)
    plot.save(path, width=width, height=height, dpi=dpi, verbose=False)
    return path
