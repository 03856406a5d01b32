"""
Delimited-text discovery and loading.
"""
from __future__ import annotations

import csv
import re
from pathlib import Path
from typing import Iterable

import numpy as np
import pandas as pd

from chartprep.config import DATA_FOLDER, DEFAULT_SEPARATOR, MISSING_TOKENS, NUMERIC_JUNK_PATTERN
from chartprep.data.errors import DataSourceError


# ---------------------------------------------------------------------------
# CSV discovery
# ---------------------------------------------------------------------------

def discover_csvs(folder: Path = DATA_FOLDER) -> list[Path]:
    """Recursively find CSVs in folder (including subdirs), sorted by path."""
    folder = Path(folder)
    if not folder.exists():
        return []
    return sorted(p for p in folder.rglob("*.csv") if p.is_file())


# ---------------------------------------------------------------------------
# Numeric parsing
# ---------------------------------------------------------------------------

def _parse_measurement(series: pd.Series, column: str, path: Path) -> pd.Series:
    """Parse a measurement column to float, failing on the first bad cell."""
    if pd.api.types.is_numeric_dtype(series):
        return series.astype(float)

    values = []
    for row_num, raw in enumerate(series, 1):
        if pd.isna(raw) or str(raw).strip() in MISSING_TOKENS:
            values.append(np.nan)
            continue
        cleaned = re.sub(NUMERIC_JUNK_PATTERN, "", str(raw))
        if not cleaned:
            values.append(np.nan)
            continue
        try:
            values.append(float(cleaned))
        except ValueError:
            raise DataSourceError(
                f"{path.name}: unparseable value {raw!r} in measurement column "
                f"'{column}' (data row {row_num})",
                path,
            )
    return pd.Series(values, index=series.index, dtype=float, name=series.name)


def _check_row_widths(path: Path, sep: str, width: int) -> None:
    if len(sep) != 1:
        return  # regex separators: trust the pandas parser
    with open(path, newline="", encoding="utf-8") as fh:
        for lineno, row in enumerate(csv.reader(fh, delimiter=sep), 1):
            if row and len(row) != width:
                raise DataSourceError(
                    f"{path.name}: line {lineno} has {len(row)} fields, expected {width}", path
                )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_table(
    path: str | Path,
    measurements: list[str] | None = None,
    sep: str = DEFAULT_SEPARATOR,
) -> pd.DataFrame:
    """Load one delimited text file with a header row.

    Every column is read as text so category labels keep their exact spelling
    ("NA" stays "NA"; only blank cells are missing);
    columns named in `measurements` are then parsed to float.
    """
    path = Path(path)
    if not path.exists():
        raise DataSourceError(f"Data source not found: {path}", path)
    if not path.is_file():
        raise DataSourceError(f"Data source is not a file: {path}", path)

    try:
        df = pd.read_csv(
            path, sep=sep, dtype=str, keep_default_na=False, na_values=[""], skipinitialspace=False,
        )
    except pd.errors.EmptyDataError:
        raise DataSourceError(f"{path.name}: file is empty", path)
    except pd.errors.ParserError as exc:
        raise DataSourceError(f"{path.name}: malformed rows ({exc})", path)
    except (OSError, UnicodeDecodeError) as exc:
        raise DataSourceError(f"{path.name}: unreadable ({exc})", path)

    unnamed = [c for c in df.columns if str(c).startswith("Unnamed:")]
    if unnamed:
        raise DataSourceError(f"{path.name}: header row has blank column names", path)

    # pandas pads short rows with NaN silently; long rows already raised above
    _check_row_widths(path, sep, len(df.columns))

    for col in measurements or []:
        if col not in df.columns:
            raise DataSourceError(f"{path.name}: measurement column '{col}' not in header", path)
        df[col] = _parse_measurement(df[col], col, path)

    return df


def infer_measurements(df: pd.DataFrame, keep: Iterable[str] = ()) -> pd.DataFrame:
    """Copy of df with every all-numeric text column converted to float.

    Missing-value markers (NA, n/a, ...) do not stop a column from counting as
    numeric. Columns named in `keep` stay text whatever they hold.
    """
    keep = set(keep)
    out = df.copy()
    for col in out.columns:
        if col in keep or pd.api.types.is_numeric_dtype(out[col]):
            continue
        values = out[col].dropna()
        values = values[~values.astype(str).str.strip().isin(MISSING_TOKENS)]
        if values.empty:
            continue
        parsed = pd.to_numeric(values, errors="coerce")
        if parsed.notna().all():
            out[col] = pd.to_numeric(out[col], errors="coerce").astype(float)
    return out


def load_tables(
    paths: list[str | Path],
    measurements: list[str] | None = None,
    sep: str = DEFAULT_SEPARATOR,
) -> pd.DataFrame:
    """Load several files sharing one header and stack them in order."""
    if not paths:
        raise DataSourceError("No data sources given")

    frames: list[pd.DataFrame] = []
    header: list[str] | None = None
    for p in paths:
        df = load_table(p, measurements, sep)
        if header is None:
            header = list(df.columns)
        elif list(df.columns) != header:
            raise DataSourceError(
                f"{Path(p).name}: header {list(df.columns)} does not match {header}", Path(p)
            )
        frames.append(df)

    return pd.concat(frames, ignore_index=True)
