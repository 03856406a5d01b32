"""
Rule, statistic and summary schemas shared by the pipeline stages.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import pandas as pd

from chartprep.data.errors import AggregationError


@dataclass(frozen=True)
class CategoryRule:
    """Maps a set of raw label variants (and optionally a regex) to one canonical label.

    The canonical label always matches its own rule, so re-normalizing an
    already-clean column leaves it unchanged.
    """
    label: str
    variants: frozenset = field(default_factory=frozenset)
    pattern: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept any iterable of variants; a bare string is one variant, not many
        variants = self.variants
        if isinstance(variants, str):
            variants = [variants]
        object.__setattr__(self, "variants", frozenset(variants))

    def matches(self, values: pd.Series) -> pd.Series:
        """Boolean mask of values this rule claims."""
        mask = values.isin(self.variants | {self.label})
        if self.pattern:
            text = values.astype("string")
            mask = mask | text.str.contains(self.pattern, regex=True, na=False).astype(bool)
        return mask


class Statistic(str, Enum):
    MEAN = "mean"
    COUNT = "count"
    SUM = "sum"


@dataclass(frozen=True)
class StatSpec:
    """One requested statistic over one measurement column.

    `column` may be None for a bare record count.
    """
    column: Optional[str]
    statistic: Statistic

    @property
    def output_name(self) -> str:
        if self.column is None:
            return self.statistic.value
        return f"{self.column}_{self.statistic.value}"

    @classmethod
    def parse(cls, text: str) -> "StatSpec":
        """Parse "col:mean", "col:sum", "col:count" or a bare "count"."""
        raw = text.strip()
        if ":" in raw:
            column, _, stat = raw.rpartition(":")
            column = column.strip() or None
        else:
            column, stat = None, raw
        try:
            statistic = Statistic(stat.strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in Statistic)
            raise AggregationError(f"Unknown statistic '{stat}' in '{text}' (valid: {valid})")
        if column is None and statistic != Statistic.COUNT:
            raise AggregationError(f"Statistic '{statistic.value}' needs a column: '<column>:{statistic.value}'")
        return cls(column, statistic)


@dataclass(frozen=True)
class GroupSummary:
    """Statistics for the records sharing one grouping key."""
    key: tuple
    stats: dict[str, Any]

    def as_dict(self, by: list[str]) -> dict[str, Any]:
        row = dict(zip(by, self.key))
        row.update(self.stats)
        return row
