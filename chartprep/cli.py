#!/usr/bin/env python3
"""
chartprep CLI — load, normalize, summarize and plot delimited datasets.

USAGE:
  python -m chartprep.cli list                                   # Datasets in the data folder
  python -m chartprep.cli list --categories plants.csv --column growth_form

  python -m chartprep.cli normalize plants.csv --column growth_form --rules growth_form
  python -m chartprep.cli normalize plants.csv --column growth_form --rules my_rules.json -o clean.csv

  python -m chartprep.cli summarize plants.csv --by site --stat height:mean --stat count
  python -m chartprep.cli summarize plants.csv --by growth_form_clean --stat height:mean \\
      --column growth_form --rules growth_form --excel summary.xlsx

  python -m chartprep.cli plot plants.csv --x height --y width --color growth_form -o scatter.png
  python -m chartprep.cli plot plants.csv --by site --stat height:mean --x site --y height_mean --geom col

  python -m chartprep.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime
from pathlib import Path

from chartprep.config import (
    CHART_HEIGHT, CHART_WIDTH, CHARTS_FOLDER, CLEAN_SUFFIX, DATA_FOLDER, DEFAULT_LABEL, DEFAULT_SEPARATOR,
)
from chartprep.data.errors import ChartPrepError
from chartprep.data.normalize import canonical_labels, get_ruleset, unmatched_values
from chartprep.data.store import DataStore
from chartprep.pipeline import prepare


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  CHARTPREP — {title}")
    print("=" * 70)


def _load_rules(args):
    if getattr(args, "rules", None) is None:
        return None
    if getattr(args, "column", None) is None:
        raise SystemExit("--rules needs --column")
    return get_ruleset(args.rules)


def _prepare(args, rules=None):
    """Run the pipeline for a file-based sub-command."""
    return prepare(
        args.path,
        measurements=args.measure or None,
        column=args.column,
        rules=rules if rules is not None else _load_rules(args),
        by=getattr(args, "by", None),
        stats=getattr(args, "stat", None),
        target=getattr(args, "target", None),
        default=args.default,
        sep=args.sep,
    )


def cmd_list(args):
    """List datasets, or the raw labels of one column."""
    if args.categories:
        if not args.column:
            raise SystemExit("--categories needs --column")
        name = Path(args.categories).stem
        store = DataStore()
        store.add(name, prepare(args.categories, column=args.column, sep=args.sep).table)
        cats = store.categories(name, args.column)
        print(f"\n{args.column} ({len(cats)} distinct):\n")
        for c in cats:
            print(f"  {str(c['value']):<40}{c['count']:>8,}")
        return

    store = DataStore(Path(args.folder), args.sep).load()
    print(f"\nDATASETS ({len(store.tables)}):\n")
    for name in store.names():
        df = store.get(name)
        print(f"  {name:<40}{len(df):>10,} rows  {len(df.columns):>3} cols")
    for name, err in store.errors.items():
        print(f"  {name:<40}FAILED: {err}")


def cmd_normalize(args):
    """Derive a canonical-label column and report label counts."""
    _banner("NORMALIZE")
    if not args.column or not args.rules:
        raise SystemExit("normalize needs --column and --rules")
    rules = _load_rules(args)
    df = _prepare(args, rules).table
    target = args.target or f"{args.column}{CLEAN_SUFFIX}"

    counts = df[target].value_counts()
    print(f"\n  {args.column} → {target}  ({len(df):,} rows)\n")
    for label in sorted(canonical_labels(rules, args.default)):
        print(f"    {label:<30}{int(counts.get(label, 0)):>8,}")

    unmatched = unmatched_values(df, args.column, rules)
    if unmatched:
        print(f"\n  Unmatched raw values → '{args.default}': {', '.join(unmatched[:20])}"
              + (" ..." if len(unmatched) > 20 else ""))

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        print(f"\n  Saved: {out}")


def cmd_summarize(args):
    """Group and summarize, print, optionally save CSV/JSON/XLSX."""
    _banner("SUMMARY")
    result = _prepare(args)
    summary = result.summary
    print(f"\n  {len(result.table):,} records → {len(summary):,} groups\n")
    print(summary.to_string(index=False))

    if args.csv:
        summary.to_csv(args.csv, index=False)
        print(f"\n  Saved: {args.csv}")
    if args.json:
        from chartprep.analytics.common import sanitize_for_json
        Path(args.json).write_text(json.dumps(sanitize_for_json(summary), indent=2))
        print(f"  Saved: {args.json}")
    if args.excel:
        from chartprep.reports.summary_report import generate_excel
        store = DataStore()
        name = Path(args.path).stem
        store.add(name, result.table)
        # result.table is already normalized; no second pass
        generate_excel(store, name, args.by, args.stat or ["count"], args.excel)
        print(f"  Saved: {args.excel}")


def cmd_plot(args):
    """Shape the data then hand it to plotnine."""
    from chartprep.charts import build_chart, save_chart

    _banner("PLOT")
    result = _prepare(args)
    plot = build_chart(
        result.output, x=args.x, y=args.y, geom=args.geom, color=args.color,
        facet=args.facet, label=args.label, title=args.title,
        log_x=args.log_x, log_y=args.log_y,
    )
    out = Path(args.output) if args.output else CHARTS_FOLDER / f"{Path(args.path).stem}_{datetime.now():%Y%m%d_%H%M%S}.png"
    save_chart(plot, out, width=args.width, height=args.height)
    print(f"\n  Chart saved to: {out}\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting chartprep API on port {args.port}...")
    uvicorn.run("chartprep.main:app", host="0.0.0.0", port=args.port, reload=args.reload)


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("path", help="Delimited text file with a header row")
    p.add_argument("--measure", action="append", help="Numeric column (repeatable; default: infer)")
    p.add_argument("--sep", default=DEFAULT_SEPARATOR, help="Field separator")
    p.add_argument("--column", help="Category column to normalize")
    p.add_argument("--rules", help="Ruleset name or JSON rule file")
    p.add_argument("--default", default=DEFAULT_LABEL, help=f"Label for unmatched values (default {DEFAULT_LABEL})")


def _add_group_args(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--by", action="append", required=required, help="Grouping column (repeatable)")
    p.add_argument("--stat", action="append", help="col:mean | col:sum | col:count | count (repeatable)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="chartprep — shape tabular data for grammar-of-graphics charts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    list_parser = subparsers.add_parser("list", help="List datasets or column labels")
    list_parser.add_argument("--folder", default=str(DATA_FOLDER), help="Data folder")
    list_parser.add_argument("--categories", metavar="PATH", help="Show distinct labels of --column in PATH")
    list_parser.add_argument("--column", help="Column for --categories")
    list_parser.add_argument("--sep", default=DEFAULT_SEPARATOR, help="Field separator")
    list_parser.set_defaults(func=cmd_list)

    norm_parser = subparsers.add_parser("normalize", help="Add a canonical-label column")
    _add_source_args(norm_parser)
    norm_parser.add_argument("--target", help="Derived column name (default <column>_clean)")
    norm_parser.add_argument("-o", "--output", help="Write the normalized table as CSV")
    norm_parser.set_defaults(func=cmd_normalize)

    sum_parser = subparsers.add_parser("summarize", help="Grouped mean/count/sum")
    _add_source_args(sum_parser)
    _add_group_args(sum_parser, required=True)
    sum_parser.add_argument("--csv", help="Write summary CSV")
    sum_parser.add_argument("--json", help="Write summary JSON")
    sum_parser.add_argument("--excel", help="Write styled summary workbook")
    sum_parser.set_defaults(func=cmd_summarize)

    plot_parser = subparsers.add_parser("plot", help="Render a chart with plotnine")
    _add_source_args(plot_parser)
    _add_group_args(plot_parser, required=False)
    plot_parser.add_argument("--x", required=True, help="x column")
    plot_parser.add_argument("--y", help="y column")
    plot_parser.add_argument("--geom", default="point", help="point | line | col | bar | boxplot")
    plot_parser.add_argument("--color", help="Colour/fill column")
    plot_parser.add_argument("--facet", help="Facet column")
    plot_parser.add_argument("--label", help="Text label column")
    plot_parser.add_argument("--title", help="Chart title")
    plot_parser.add_argument("--log-x", action="store_true", help="log10 x axis")
    plot_parser.add_argument("--log-y", action="store_true", help="log10 y axis")
    plot_parser.add_argument("--width", type=float, default=CHART_WIDTH, help="Inches")
    plot_parser.add_argument("--height", type=float, default=CHART_HEIGHT, help="Inches")
    plot_parser.add_argument("-o", "--output", help="Image path (.png/.svg/.pdf)")
    plot_parser.set_defaults(func=cmd_plot)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        args.func(args)
    except ChartPrepError as exc:
        print(f"  Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
