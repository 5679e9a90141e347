"""
Filter endpoints: set, clear and reset per-column filters.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_session_data, require_data
from api.models.requests import FilterRequest
from api.models.responses import FilterApplicationResponse
from api.session_store import SessionData
from core.state import WorkspaceStore
from core.values import json_safe

router = APIRouter(prefix="/api/filters", tags=["filters"])


def _preview_rows(rows: List[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
    return [{k: json_safe(v) for k, v in row.items()} for row in rows[:limit]]


def _filter_response(store: WorkspaceStore, session: SessionData) -> FilterApplicationResponse:
    rows = store.filtered_rows()
    return FilterApplicationResponse(
        row_count=len(rows),
        column_count=store.state.dataset.summary.total_columns,
        preview=_preview_rows(rows, session.config.app.preview_rows),
        active_filters=dict(store.state.filters),
    )


@router.put("/{column}", response_model=FilterApplicationResponse)
def set_filter(
    column: str,
    body: FilterRequest,
    store: WorkspaceStore = Depends(require_data),
    session: SessionData = Depends(get_session_data),
):
    """Apply (or replace) the filter on one column."""
    if store.state.dataset.column(column) is None:
        raise HTTPException(status_code=404, detail=f"Column '{column}' not found")
    try:
        store.set_filter(column, body.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _filter_response(store, session)


@router.delete("/{column}", response_model=FilterApplicationResponse)
def clear_filter(
    column: str,
    store: WorkspaceStore = Depends(require_data),
    session: SessionData = Depends(get_session_data),
):
    store.clear_filter(column)
    return _filter_response(store, session)


@router.delete("", response_model=FilterApplicationResponse)
def clear_all_filters(
    store: WorkspaceStore = Depends(require_data),
    session: SessionData = Depends(get_session_data),
):
    """Clear every filter and restore the full dataset view."""
    store.clear_all_filters()
    return _filter_response(store, session)
