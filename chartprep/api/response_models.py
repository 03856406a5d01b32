"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    datasets: int
    rows: int
    failed: int


class DatasetInfo(BaseModel):
    name: str
    rows: int
    columns: int
    source: Optional[str] = None


class DatasetsResponse(BaseModel):
    datasets: list[DatasetInfo]
    errors: dict[str, str]


class ColumnInfo(BaseModel):
    name: str
    kind: str  # "category" | "measurement"
    missing: int


class ColumnsResponse(BaseModel):
    dataset: str
    columns: list[ColumnInfo]


class CategoryCount(BaseModel):
    value: Optional[Any] = None
    count: int


class CategoriesResponse(BaseModel):
    dataset: str
    column: str
    categories: list[CategoryCount]


class SummaryResponse(BaseModel):
    """Grouped statistics for one dataset."""
    dataset: str
    by: list[str]
    stats: list[str]
    total_records: int
    groups: int
    normalization: Optional[dict[str, Any]] = None
    rows: list[dict[str, Any]]
