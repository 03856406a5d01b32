"""
DataStore — In-memory registry of loaded tables, keyed by dataset name.

Loaded once at startup (or on reload), queried on every request.
Each dataset is a CSV under DATA_FOLDER; its name is the file stem.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from chartprep.config import DATA_FOLDER, DEFAULT_LABEL, DEFAULT_SEPARATOR
from chartprep.data.errors import DataSourceError, DatasetNotFoundError, require_columns
from chartprep.data.loader import discover_csvs, infer_measurements, load_table
from chartprep.data.normalize import normalize_column
from chartprep.data.schemas import CategoryRule, StatSpec


class DataStore:
    """Loaded tables plus the files that failed to load."""

    def __init__(self, folder: Path = DATA_FOLDER, sep: str = DEFAULT_SEPARATOR) -> None:
        self.folder = Path(folder)
        self.sep = sep
        self.tables: dict[str, pd.DataFrame] = {}
        # text as loaded, before measurement inference
        self.raw: dict[str, pd.DataFrame] = {}
        self.sources: dict[str, Path] = {}
        self.errors: dict[str, str] = {}
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, measurements: Optional[dict[str, list[str]]] = None) -> "DataStore":
        """Load every CSV in the data folder.

        `measurements` maps dataset name → numeric columns. Columns not listed
        are inferred: a column whose every non-blank cell parses as a number is
        treated as a measurement.
        """
        measurements = measurements or {}
        print(f"Loading datasets from {self.folder} ...")
        tables: dict[str, pd.DataFrame] = {}
        raw: dict[str, pd.DataFrame] = {}
        sources: dict[str, Path] = {}
        errors: dict[str, str] = {}

        files = discover_csvs(self.folder)
        for i, f in enumerate(files, 1):
            name = self._unique_name(f.stem, tables)
            try:
                loaded = load_table(f, measurements.get(name), self.sep)
                df = loaded if name in measurements else infer_measurements(loaded)
                tables[name] = df
                raw[name] = loaded
                sources[name] = f
                print(f"  [{i}/{len(files)}] {f.name}: {len(df):,} rows, {len(df.columns)} columns")
            except DataSourceError as exc:
                errors[name] = str(exc)
                print(f"  Warning: skipping {f.name}: {exc}")

        if not files:
            print("  No CSVs found — starting with no datasets")

        # swap wholesale so readers never see a half-loaded store
        self.tables, self.raw, self.sources, self.errors = tables, raw, sources, errors
        self._loaded = True
        return self

    def add(
        self,
        name: str,
        df: pd.DataFrame,
        source: Path | None = None,
        raw: pd.DataFrame | None = None,
    ) -> None:
        """Register an already-loaded table; `raw` is its text before inference."""
        self.tables[name] = df
        self.raw[name] = raw if raw is not None else df
        if source is not None:
            self.sources[name] = source
        self.errors.pop(name, None)
        self._loaded = True

    @staticmethod
    def _unique_name(stem: str, taken: dict) -> str:
        if stem not in taken:
            return stem
        i = 2
        while f"{stem}-{i}" in taken:
            i += 1
        return f"{stem}-{i}"

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def names(self) -> list[str]:
        return sorted(self.tables)

    def get(self, name: str) -> pd.DataFrame:
        """The loaded table. Callers must not mutate it; stages return copies."""
        try:
            return self.tables[name]
        except KeyError:
            raise DatasetNotFoundError(f"Dataset not found: '{name}'")

    def row_count(self, name: str | None = None) -> int:
        if name is not None:
            return len(self.get(name))
        return sum(len(df) for df in self.tables.values())

    def columns(self, name: str) -> list[dict]:
        """Column names with their role (category or measurement)."""
        df = self.get(name)
        return [
            {
                "name": col,
                "kind": "measurement" if pd.api.types.is_numeric_dtype(df[col]) else "category",
                "missing": int(df[col].isna().sum()),
            }
            for col in df.columns
        ]

    def labelled(self, name: str, column: str) -> pd.DataFrame:
        """The table with `column` holding its labels as written in the file.

        Inference may have turned a code-like label column ("1", "2") into
        floats; rules and category counts must see the original text.
        """
        df = self.get(name)
        require_columns(df, [column])
        raw = self.raw.get(name)
        if raw is None or raw is df or column not in raw.columns:
            return df
        return df.assign(**{column: raw[column]})

    def categories(self, name: str, column: str) -> list[dict]:
        """Distinct raw labels in a column with their record counts."""
        counts = self.labelled(name, column)[column].value_counts(dropna=False)
        return [
            {"value": None if pd.isna(v) else v, "count": int(n)}
            for v, n in counts.items()
        ]

    # ------------------------------------------------------------------
    # Shaping
    # ------------------------------------------------------------------

    def normalized(
        self,
        name: str,
        column: str,
        rules: Iterable[CategoryRule],
        target: str | None = None,
        default: str = DEFAULT_LABEL,
    ) -> pd.DataFrame:
        return normalize_column(self.labelled(name, column), column, rules, target, default)

    def summarize(
        self,
        name: str,
        by: list[str],
        stats: list[str | StatSpec],
        column: str | None = None,
        rules: Iterable[CategoryRule] | None = None,
        default: str = DEFAULT_LABEL,
    ) -> pd.DataFrame:
        """Optionally normalize `column` first, then aggregate."""
        from chartprep.analytics.aggregate import aggregate

        df = self.get(name)
        if column is not None and rules is not None:
            df = self.normalized(name, column, rules, default=default)
        return aggregate(df, by, stats)
