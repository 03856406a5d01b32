"""
chartprep — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chartprep import __version__
from chartprep.data.store import DataStore
from chartprep.api.dependencies import set_store
from chartprep.api.router_meta import router as meta_router
from chartprep.api.router_datasets import router as datasets_router
from chartprep.api.router_upload import router as upload_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load every dataset at startup."""
    from chartprep.config import DATA_FOLDER, RULES_FOLDER
    for d in [DATA_FOLDER, RULES_FOLDER]:
        d.mkdir(parents=True, exist_ok=True)

    store = DataStore(DATA_FOLDER)
    store.load()
    set_store(store)

    if store.tables:
        print(f"\nchartprep ready — {len(store.tables)} datasets, {store.row_count():,} rows\n")
    else:
        print(f"\nchartprep ready — no data yet. Drop CSVs into {DATA_FOLDER} or POST /api/upload.\n")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="chartprep API",
        description="Load, normalize and summarize tabular data for charts",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(datasets_router)
    app.include_router(upload_router)
    return app


app = create_app()
