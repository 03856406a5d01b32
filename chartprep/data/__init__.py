"""Data loading, category normalization, and the in-memory dataset store."""
from .errors import (
    ChartPrepError, DataSourceError, ColumnNotFoundError, DatasetNotFoundError,
    AggregationError, ChartError, NormalizationError,
)
from .schemas import CategoryRule, Statistic, StatSpec, GroupSummary
from .loader import discover_csvs, load_table, load_tables
from .normalize import normalize_column, map_labels, rules_from_mapping, load_rules, canonical_labels
from .store import DataStore
