"""Renderer hand-off (plotnine)."""
from .plot import GEOMS, build_chart, save_chart
