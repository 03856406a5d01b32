"""
Dataset endpoints — columns, raw category counts, normalized preview, grouped summaries.
"""
from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from chartprep.analytics.common import sanitize_for_json
from chartprep.data.errors import ChartPrepError, DataSourceError
from chartprep.data.normalize import get_ruleset
from chartprep.data.store import DataStore
from chartprep.api.dependencies import SummaryQuery, get_store, parse_summary_query, to_http
from chartprep.api.response_models import (
    CategoriesResponse, ColumnsResponse, SummaryResponse,
)
from chartprep.reports import summary_report

router = APIRouter(prefix="/api/datasets", tags=["datasets"])


@router.get("/{name}/columns", response_model=ColumnsResponse)
def dataset_columns(name: str, store: DataStore = Depends(get_store)):
    try:
        return ColumnsResponse(dataset=name, columns=store.columns(name))
    except ChartPrepError as exc:
        raise to_http(exc)


@router.get("/{name}/categories", response_model=CategoriesResponse)
def dataset_categories(
    name: str,
    column: str = Query(..., description="Category column"),
    store: DataStore = Depends(get_store),
):
    """Distinct raw labels with counts — useful when writing rules."""
    try:
        cats = store.categories(name, column)
    except ChartPrepError as exc:
        raise to_http(exc)
    return CategoriesResponse(dataset=name, column=column, categories=sanitize_for_json(cats))


@router.get("/{name}/normalized")
def dataset_normalized(
    name: str,
    column: str = Query(...),
    rules: str = Query(..., description="Ruleset name"),
    limit: int = Query(100, ge=1, le=10_000),
    store: DataStore = Depends(get_store),
):
    """First `limit` rows with the derived canonical-label column."""
    try:
        ruleset = get_ruleset(rules)
    except DataSourceError:
        raise HTTPException(404, f"Ruleset not found or invalid: {rules}")
    try:
        df = store.normalized(name, column, ruleset)
    except ChartPrepError as exc:
        raise to_http(exc)
    return {"dataset": name, "rows": sanitize_for_json(df.head(limit).to_dict("records")), "total": len(df)}


@router.get("/{name}/summary", response_model=SummaryResponse)
def dataset_summary(
    name: str,
    q: SummaryQuery = Depends(parse_summary_query),
    store: DataStore = Depends(get_store),
):
    """Grouped statistics, optionally after normalizing one category column."""
    try:
        data = summary_report.generate_json(store, name, q.by, q.stats, q.column, q.rules, q.default)
    except ChartPrepError as exc:
        raise to_http(exc)
    return SummaryResponse(**data)


@router.get("/{name}/summary/excel")
def dataset_summary_excel(
    name: str,
    q: SummaryQuery = Depends(parse_summary_query),
    store: DataStore = Depends(get_store),
):
    workdir = Path(tempfile.mkdtemp(prefix="chartprep-"))
    out = workdir / f"{name}_summary.xlsx"
    try:
        summary_report.generate_excel(store, name, q.by, q.stats, out, q.column, q.rules, q.default)
    except ChartPrepError as exc:
        shutil.rmtree(workdir, ignore_errors=True)
        raise to_http(exc)
    return FileResponse(
        path=str(out),
        filename=out.name,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        background=BackgroundTask(shutil.rmtree, workdir, ignore_errors=True),
    )
