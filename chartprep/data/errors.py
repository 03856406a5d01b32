"""
Error types raised by the loading, normalization, aggregation and chart stages.
"""
from __future__ import annotations


class ChartPrepError(Exception):
    """Base class for every error this package raises on purpose."""


class DataSourceError(ChartPrepError):
    """Source file is missing, unreadable, or malformed."""

    def __init__(self, message: str, path=None) -> None:
        super().__init__(message)
        self.path = path


class ColumnNotFoundError(ChartPrepError, KeyError):
    """A requested column is absent from the table."""

    def __init__(self, column: str, available=None) -> None:
        self.column = column
        self.available = list(available) if available is not None else []
        msg = f"Column not found: '{column}'"
        if self.available:
            msg += f" (available: {', '.join(map(str, self.available))})"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class DatasetNotFoundError(ChartPrepError, KeyError):
    """No dataset is registered under the requested name."""

    def __str__(self) -> str:
        return self.args[0]


class AggregationError(ChartPrepError, ValueError):
    """Grouping or statistic request cannot be computed."""


class NormalizationError(ChartPrepError, ValueError):
    """Normalization request would clobber the column it reads from."""


class ChartError(ChartPrepError, ValueError):
    """Chart request cannot be handed to the renderer."""


def require_columns(df, columns) -> None:
    """Raise ColumnNotFoundError for the first column missing from df."""
    for col in columns:
        if col not in df.columns:
            raise ColumnNotFoundError(col, df.columns)
