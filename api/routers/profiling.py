"""
Profiling endpoints: dataset profile, per-column profiles, correlations,
chart suggestions and quality assessment.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_session_data, require_data
from api.session_store import SessionData
from core.profiling import EmptyDatasetError
from core.state import WorkspaceStore

router = APIRouter(prefix="/api/profile", tags=["profiling"])


@router.get("")
def full_profile(store: WorkspaceStore = Depends(require_data)):
    """Return the complete profile of the loaded dataset."""
    return store.state.dataset.to_dict()


@router.get("/columns")
def all_columns(store: WorkspaceStore = Depends(require_data)):
    """Return profiles for all columns."""
    return [col.to_dict() for col in store.state.dataset.columns]


@router.get("/columns/{name}")
def single_column(name: str, store: WorkspaceStore = Depends(require_data)):
    """Return profile for a single column."""
    col = store.state.dataset.column(name)
    if col is None:
        raise HTTPException(status_code=404, detail=f"Column '{name}' not found")
    return col.to_dict()


@router.get("/correlations")
def correlations(store: WorkspaceStore = Depends(require_data)):
    return store.state.dataset.correlations


@router.get("/charts")
def chart_suggestions(store: WorkspaceStore = Depends(require_data)):
    return [s.to_dict() for s in store.state.dataset.chart_suggestions]


@router.get("/quality")
def quality(store: WorkspaceStore = Depends(require_data)):
    return store.state.dataset.quality_assessment.to_dict()


@router.post("/filtered")
async def filtered_profile(session: SessionData = Depends(get_session_data)):
    """Run a fresh analysis over the rows that pass the active filters."""
    store = session.store
    if not store.has_data:
        raise HTTPException(status_code=400, detail="No dataset loaded")
    try:
        profile = await run_in_threadpool(store.analyze_filtered, session.config.analysis)
    except EmptyDatasetError:
        raise HTTPException(status_code=400, detail="No rows match the active filters")
    return profile.to_dict()
