"""
Upload endpoints: add CSVs to the data folder, list them.
"""
from __future__ import annotations

import gzip
import uuid
from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from chartprep.data.errors import DataSourceError
from chartprep.data.loader import infer_measurements, load_table
from chartprep.data.store import DataStore
from chartprep.api.dependencies import get_store_or_empty

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload")
async def upload_csvs(
    files: list[UploadFile] = File(...),
    store: DataStore = Depends(get_store_or_empty),
):
    """Save one or more CSVs into the data folder and register them."""
    saved = []
    for f in files:
        if not f.filename:
            raise HTTPException(400, "Missing filename")

        # Strip .gz suffix if present (browser gzip-compressed upload)
        filename = Path(f.filename).name
        is_gzipped = filename.lower().endswith(".csv.gz")
        if is_gzipped:
            filename = filename[:-3]
        if not filename.lower().endswith(".csv"):
            raise HTTPException(400, f"Only .csv files are accepted (got '{f.filename}')")

        content = await f.read()
        if is_gzipped:
            try:
                content = gzip.decompress(content)
            except (OSError, EOFError) as exc:
                raise HTTPException(400, f"'{f.filename}' is not valid gzip data ({exc})")

        # staged next to dest; moved into place only once it loads
        store.folder.mkdir(parents=True, exist_ok=True)
        dest = store.folder / filename
        staging = dest.with_name(f"{filename}.{uuid.uuid4().hex[:8]}.part")
        staging.write_bytes(content)
        try:
            raw = load_table(staging, sep=store.sep)
        except DataSourceError as exc:
            staging.unlink()
            raise HTTPException(422, str(exc).replace(staging.name, filename))
        staging.replace(dest)

        name = dest.stem
        store.add(name, infer_measurements(raw), dest, raw=raw)
        saved.append({"name": name, "file": filename, "rows": len(raw), "size": len(content)})

    return {"status": "uploaded", "count": len(saved), "datasets": saved}


@router.get("/upload/files")
def list_files(store: DataStore = Depends(get_store_or_empty)):
    """List CSV files in the data folder with sizes."""
    folder = store.folder
    files = []
    if folder.exists():
        for csv_file in sorted(folder.rglob("*.csv")):
            stat = csv_file.stat()
            files.append({
                "name": csv_file.name,
                "path": str(csv_file.relative_to(folder)),
                "size": stat.st_size,
                "modified": datetime.fromtimestamp(stat.st_mtime).isoformat(),
            })
    return {"files": files, "count": len(files), "data_path": str(folder)}
