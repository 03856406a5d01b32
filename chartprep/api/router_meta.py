"""
Meta endpoints: health, dataset listing, reload.
"""
from __future__ import annotations

import threading

from fastapi import APIRouter, Depends

from chartprep.data.store import DataStore
from chartprep.api.dependencies import get_store_or_empty
from chartprep.api.response_models import DatasetInfo, DatasetsResponse, HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store_or_empty)):
    return HealthResponse(
        status="ok" if store.is_loaded else "loading",
        datasets=len(store.tables),
        rows=store.row_count(),
        failed=len(store.errors),
    )


@router.get("/datasets", response_model=DatasetsResponse)
def list_datasets(store: DataStore = Depends(get_store_or_empty)):
    infos = []
    for name in store.names():
        df = store.get(name)
        src = store.sources.get(name)
        infos.append(DatasetInfo(name=name, rows=len(df), columns=len(df.columns), source=src.name if src else None))
    return DatasetsResponse(datasets=infos, errors=dict(store.errors))


@router.post("/reload")
def reload_data(store: DataStore = Depends(get_store_or_empty)):
    """Re-scan the data folder and reload every dataset.

    Returns immediately, reload happens in background.
    """
    def _do_reload():
        store.load()
        print(f"  Reload complete — {len(store.tables)} datasets, {store.row_count():,} rows")

    threading.Thread(target=_do_reload, daemon=True).start()
    return {
        "status": "reloading",
        "message": "Reload started in background. Check /api/health for updated counts.",
    }
