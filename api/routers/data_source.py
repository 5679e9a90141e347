"""
Data source endpoints: file upload, JSON rows, current dataset, export, reset.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from api.dependencies import get_session_data, get_store, require_data
from api.models.requests import RowsUploadRequest
from api.models.responses import CurrentDatasetResponse, DataLoadResponse
from api.session_store import SessionData
from config.settings import AnalysisConfig
from core.ingestion import IngestionError, preview_column_types, rows_from_csv
from core.profiling import DatasetProfile, EmptyDatasetError, profile_dataset
from core.recommendations import CATEGORICAL_TYPES, NUMERIC_TYPES
from core.state import WorkspaceStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/data", tags=["data"])

EXPORT_MEDIA_TYPES = {"csv": "text/csv", "json": "application/json"}


def _load(
    rows: Sequence[Dict[str, Any]],
    filename: str,
    config: AnalysisConfig,
) -> Dict[str, Any]:
    profile = profile_dataset(rows, filename, config)
    return {"profile": profile, "preview_types": preview_column_types(rows)}


def _persist(store: WorkspaceStore, profile: DatasetProfile, preview_types: Dict[str, str]) -> DataLoadResponse:
    """Store the profile in the session workspace."""
    store.set_dataset(profile)
    return DataLoadResponse(
        dataset_name=profile.filename,
        rows=profile.summary.total_rows,
        columns=profile.summary.total_columns,
        column_names=profile.column_names,
        column_types={col.name: col.type for col in profile.columns},
        preview_types=preview_types,
        overall_quality=profile.quality_assessment.overall_quality.value,
    )


async def _analyze(session: SessionData, rows: List[Dict[str, Any]], filename: str) -> DataLoadResponse:
    store = session.store
    store.set_loading(True)
    try:
        # Keep the event loop free while a large dataset is profiled
        result = await run_in_threadpool(_load, rows, filename, session.config.analysis)
    except EmptyDatasetError as exc:
        store.set_error(str(exc))
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("Analysis of %s failed", filename)
        store.set_error(f"Analysis failed: {exc}")
        raise
    store.set_loading(False)
    return _persist(store, result["profile"], result["preview_types"])


@router.post("/upload", response_model=DataLoadResponse)
async def upload_file(
    file: UploadFile = File(...),
    session: SessionData = Depends(get_session_data),
):
    """Upload a delimited text file (CSV, TSV, pipe or semicolon separated)."""
    content = await file.read()
    filename = file.filename or "upload"

    if len(content) > session.config.app.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File is too large")

    try:
        rows = await run_in_threadpool(rows_from_csv, content)
    except IngestionError as exc:
        logger.warning("Rejected upload %s: %s", filename, exc)
        session.store.set_error(str(exc))
        raise HTTPException(status_code=400, detail=str(exc))

    name = filename.rsplit(".", 1)[0] if "." in filename else filename
    return await _analyze(session, rows, name)


@router.post("/rows", response_model=DataLoadResponse)
async def upload_rows(
    body: RowsUploadRequest,
    session: SessionData = Depends(get_session_data),
):
    """Analyze records that were parsed client side."""
    return await _analyze(session, body.rows, body.filename)


@router.get("/current", response_model=CurrentDatasetResponse)
def current_dataset(store: WorkspaceStore = Depends(get_store)):
    """Return metadata about the currently loaded dataset."""
    profile = store.state.dataset
    if profile is None:
        return CurrentDatasetResponse(loaded=False)

    return CurrentDatasetResponse(
        loaded=True,
        dataset_name=profile.filename,
        rows=profile.summary.total_rows,
        filtered_rows=len(store.filtered_rows()),
        columns=profile.summary.total_columns,
        column_names=profile.column_names,
        numeric_columns=[c.name for c in profile.columns if c.type in NUMERIC_TYPES],
        categorical_columns=[c.name for c in profile.columns if c.type in CATEGORICAL_TYPES],
        filters_active=store.has_filters,
        active_filters=dict(store.state.filters) or None,
    )


@router.get("/export")
def export_data(
    format: str = Query("csv", pattern="^(csv|json)$"),
    store: WorkspaceStore = Depends(require_data),
):
    """Download the filtered rows."""
    content: Optional[str] = store.export_data(format)
    if content is None:
        raise HTTPException(status_code=404, detail="No rows to export")

    filename = f"{store.state.dataset.filename}.{format}"
    return Response(
        content=content,
        media_type=EXPORT_MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/history")
def history(store: WorkspaceStore = Depends(get_store)):
    """Action history of the workspace."""
    return {"history": list(store.state.history)}


@router.post("/reset")
def reset(store: WorkspaceStore = Depends(get_store)):
    """Forget the dataset, charts and filters."""
    store.reset()
    return {"loaded": False}
