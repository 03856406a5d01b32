"""
FastAPI dependencies — DataStore singleton, summary query parsing, error mapping.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Query

from chartprep.config import DEFAULT_LABEL
from chartprep.data.errors import (
    AggregationError, ChartPrepError, ColumnNotFoundError, DataSourceError, DatasetNotFoundError,
)
from chartprep.data.normalize import get_ruleset
from chartprep.data.schemas import CategoryRule
from chartprep.data.store import DataStore

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None


def set_store(store: DataStore) -> None:
    global _store
    _store = store


def get_store() -> DataStore:
    if _store is None or not _store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    return _store


def get_store_or_empty() -> DataStore:
    """Return the store even before the first load (for upload/reload endpoints)."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    return _store


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

def to_http(exc: ChartPrepError) -> HTTPException:
    """Translate a pipeline error into the matching HTTP status."""
    if isinstance(exc, (DatasetNotFoundError, ColumnNotFoundError)):
        return HTTPException(404, str(exc))
    if isinstance(exc, AggregationError):
        return HTTPException(400, str(exc))
    if isinstance(exc, DataSourceError):
        return HTTPException(422, str(exc))
    return HTTPException(400, str(exc))


# ---------------------------------------------------------------------------
# Summary query parsing
# ---------------------------------------------------------------------------

@dataclass
class SummaryQuery:
    by: list[str]
    stats: list[str]
    column: Optional[str] = None
    rules: Optional[list[CategoryRule]] = None
    default: str = DEFAULT_LABEL


def parse_summary_query(
    by: list[str] = Query(..., description="Grouping column(s); repeat for several"),
    stat: list[str] = Query(["count"], description="col:mean | col:sum | col:count | count"),
    normalize: Optional[str] = Query(None, description="Column to normalize before grouping"),
    rules: Optional[str] = Query(None, description="Ruleset name (built-in or rules/<name>.json)"),
    default: str = Query(DEFAULT_LABEL, description="Label for values no rule matches"),
) -> SummaryQuery:
    if (normalize is None) != (rules is None):
        raise HTTPException(400, "normalize and rules must be given together")

    ruleset = None
    if rules is not None:
        try:
            ruleset = get_ruleset(rules)
        except DataSourceError:
            raise HTTPException(404, f"Ruleset not found or invalid: {rules}")

    return SummaryQuery(by=by, stats=stat, column=normalize, rules=ruleset, default=default)
