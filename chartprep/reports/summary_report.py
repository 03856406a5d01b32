"""
Summary report — grouped statistics for one dataset, as JSON or a styled workbook.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from chartprep.config import CLEAN_SUFFIX, DEFAULT_LABEL
from chartprep.analytics.aggregate import aggregate, parse_stat_specs
from chartprep.analytics.common import sanitize_for_json
from chartprep.data.normalize import unmatched_values
from chartprep.data.schemas import CategoryRule, StatSpec
from chartprep.data.store import DataStore
from chartprep.excel.writer import ExcelWriter, column_specs


def generate_json(
    store: DataStore,
    name: str,
    by: list[str],
    stats: list[str | StatSpec],
    column: str | None = None,
    rules: Iterable[CategoryRule] | None = None,
    default: str = DEFAULT_LABEL,
) -> dict:
    specs = parse_stat_specs(stats)
    df = store.get(name)
    rules = list(rules) if rules is not None else None

    normalization = None
    if column is not None and rules is not None:
        df = store.normalized(name, column, rules, default=default)
        target = f"{column}{CLEAN_SUFFIX}"
        normalization = {
            "column": column,
            "target": target,
            "default": default,
            "rules": [{"label": r.label, "variants": sorted(r.variants), "pattern": r.pattern} for r in rules],
            "unmatched": unmatched_values(df, column, rules),
            "default_count": int((df[target] == default).sum()),
        }

    summary = aggregate(df, by, specs)
    return sanitize_for_json({
        "dataset": name,
        "by": by,
        "stats": [s.output_name for s in specs],
        "total_records": len(df),
        "groups": len(summary),
        "normalization": normalization,
        "rows": summary.to_dict("records"),
    })


def generate_excel(
    store: DataStore,
    name: str,
    by: list[str],
    stats: list[str | StatSpec],
    output_path: str | Path,
    column: str | None = None,
    rules: Iterable[CategoryRule] | None = None,
    default: str = DEFAULT_LABEL,
) -> Path:
    data = generate_json(store, name, by, stats, column, rules, default)
    rows = pd.DataFrame(data["rows"])
    norm = data["normalization"]
    ew = ExcelWriter()

    ws = ew.add_sheet("Overview")
    ew.write_title(ws, name.upper(),
                   f"Grouped by {', '.join(by)}  |  Generated {pd.Timestamp.now():%B %d, %Y}")
    row = ew.write_section(ws, 5, "DATASET")
    kpis = [
        (data["total_records"], "RECORDS", "count"),
        (data["groups"], "GROUPS", "count"),
    ]
    if norm is not None:
        kpis.append((norm["default_count"], f"LABELLED {norm['default'].upper()}", "count"))
    row = ew.write_kpi_row(ws, row, kpis)

    if norm is not None:
        row = ew.write_section(ws, row, f"CATEGORY RULES: {norm['column']} → {norm['target']}")
        legend = [(r["label"], ", ".join(r["variants"]) + (f"  /{r['pattern']}/" if r["pattern"] else ""))
                  for r in norm["rules"]]
        if norm["unmatched"]:
            legend.append((norm["default"], ", ".join(norm["unmatched"])))
        ew.write_legend(ws, row, legend)

    ws_s = ew.add_sheet("Summary")
    default_label = norm["default"] if norm is not None else None
    target = norm["target"] if norm is not None else None
    ew.write_table(
        ws_s, 1, column_specs(rows), rows,
        flag_fn=(lambda r: r.get(target) == default_label) if target in by else None,
        show_total=True,
    )

    return ew.save(output_path)
