"""
Grouped summary statistics — mean, count, sum per distinct key.
"""
from __future__ import annotations

from typing import Iterable

import pandas as pd

from chartprep.analytics.common import to_native
from chartprep.data.errors import AggregationError, require_columns
from chartprep.data.schemas import GroupSummary, StatSpec, Statistic


def parse_stat_specs(items: Iterable[str | StatSpec]) -> list[StatSpec]:
    """Accept StatSpec objects or "col:stat" strings."""
    return [s if isinstance(s, StatSpec) else StatSpec.parse(s) for s in items]


def _as_list(by: str | Iterable[str]) -> list[str]:
    return [by] if isinstance(by, str) else list(by)


def aggregate(
    df: pd.DataFrame,
    by: str | Iterable[str],
    stats: Iterable[str | StatSpec],
) -> pd.DataFrame:
    """One row per distinct key in `by`, one column per requested statistic.

    count is the number of records in the group (so counts always add up to
    len(df)); mean and sum skip missing measurements. Rows with a missing key
    form their own group.
    """
    by = _as_list(by)
    specs = parse_stat_specs(stats)
    if not by:
        raise AggregationError("At least one grouping column is required")
    if not specs:
        raise AggregationError("At least one statistic is required")

    names = [s.output_name for s in specs]
    clashes = sorted({n for n in names if n in by or names.count(n) > 1})
    if clashes:
        raise AggregationError(
            f"Statistic output name(s) {', '.join(clashes)} repeat a grouping column or another statistic"
        )

    require_columns(df, by + [s.column for s in specs if s.column is not None])
    for s in specs:
        if s.statistic is not Statistic.COUNT and not pd.api.types.is_numeric_dtype(df[s.column]):
            raise AggregationError(
                f"Cannot compute {s.statistic.value} of non-numeric column '{s.column}' "
                f"(dtype {df[s.column].dtype}); load it as a measurement"
            )

    grouped = df.groupby(by, dropna=False, observed=True, sort=True)
    sizes = grouped.size()
    result = pd.DataFrame(index=sizes.index)
    for s in specs:
        if s.statistic is Statistic.COUNT:
            values = sizes
        elif s.statistic is Statistic.MEAN:
            values = grouped[s.column].mean()
        else:
            values = grouped[s.column].sum()
        # same grouper → same group order
        result[s.output_name] = values.to_numpy()

    return result.reset_index()


def summarize(
    df: pd.DataFrame,
    by: str | Iterable[str],
    stats: Iterable[str | StatSpec],
) -> list[GroupSummary]:
    """Same computation as aggregate(), as GroupSummary entries."""
    by = _as_list(by)
    table = aggregate(df, by, stats)
    stat_cols = [c for c in table.columns if c not in by]
    return [
        GroupSummary(
            key=tuple(to_native(row[c]) for c in by),
            stats={c: to_native(row[c]) for c in stat_cols},
        )
        for row in table.to_dict("records")
    ]


def summary_lookup(summaries: list[GroupSummary], stat: str) -> dict:
    """{key: value} for one statistic; single-column keys are unwrapped."""
    out = {}
    for s in summaries:
        key = s.key[0] if len(s.key) == 1 else s.key
        out[key] = s.stats[stat]
    return out
