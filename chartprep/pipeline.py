"""
Single-shot load → normalize → aggregate pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from chartprep.config import DEFAULT_LABEL, DEFAULT_SEPARATOR
from chartprep.analytics.aggregate import aggregate
from chartprep.data.loader import infer_measurements, load_table
from chartprep.data.normalize import normalize_column
from chartprep.data.schemas import CategoryRule, StatSpec


@dataclass
class PreparedTable:
    table: pd.DataFrame
    summary: Optional[pd.DataFrame] = None

    @property
    def output(self) -> pd.DataFrame:
        """What the renderer should receive: the summary when one was built."""
        return self.summary if self.summary is not None else self.table


def prepare(
    path: str | Path,
    measurements: list[str] | None = None,
    column: str | None = None,
    rules: Iterable[CategoryRule] | None = None,
    by: list[str] | None = None,
    stats: list[str | StatSpec] | None = None,
    target: str | None = None,
    default: str = DEFAULT_LABEL,
    sep: str = DEFAULT_SEPARATOR,
) -> PreparedTable:
    """Load `path`, normalize `column` when rules are given, aggregate when `by` is given.

    Without `measurements`, every all-numeric column except `column` is
    treated as one; rules always see the labels as written.
    """
    df = load_table(path, measurements, sep)
    if measurements is None:
        df = infer_measurements(df, keep=[column] if column is not None else [])
    if column is not None and rules is not None:
        df = normalize_column(df, column, rules, target, default)

    summary = None
    if by:
        summary = aggregate(df, by, stats or ["count"])
    return PreparedTable(table=df, summary=summary)
