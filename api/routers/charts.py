"""
Chart endpoints: the user's dashboard charts and the active selection.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_store, require_data
from api.models.requests import ChartCreateRequest, ChartUpdateRequest
from api.models.responses import ChartListResponse
from core.state import ChartNotFoundError, WorkspaceStore

router = APIRouter(prefix="/api/charts", tags=["charts"])


def _list(store: WorkspaceStore) -> ChartListResponse:
    return ChartListResponse(
        charts=[c.to_dict() for c in store.state.charts],
        active_chart_id=store.state.active_chart_id,
    )


def _check_columns(store: WorkspaceStore, *columns):
    dataset = store.state.dataset
    for name in columns:
        if name is not None and dataset.column(name) is None:
            raise HTTPException(status_code=400, detail=f"Column '{name}' not found")


@router.get("", response_model=ChartListResponse)
def list_charts(store: WorkspaceStore = Depends(get_store)):
    return _list(store)


@router.post("")
def add_chart(body: ChartCreateRequest, store: WorkspaceStore = Depends(require_data)):
    """Add a chart and make it active."""
    fields = body.model_dump(exclude={"type"})
    _check_columns(store, body.x_column, body.y_column, body.color_column, body.size_column)
    chart = store.add_chart(body.type, **fields)
    return chart.to_dict()


@router.patch("/{chart_id}")
def update_chart(chart_id: str, body: ChartUpdateRequest, store: WorkspaceStore = Depends(require_data)):
    updates = body.model_dump(exclude_unset=True)
    _check_columns(store, *(updates.get(k) for k in ("x_column", "y_column", "color_column", "size_column")))
    try:
        chart = store.update_chart(chart_id, updates)
    except ChartNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return chart.to_dict()


@router.delete("/{chart_id}", response_model=ChartListResponse)
def remove_chart(chart_id: str, store: WorkspaceStore = Depends(get_store)):
    try:
        store.remove_chart(chart_id)
    except ChartNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return _list(store)


@router.post("/{chart_id}/activate", response_model=ChartListResponse)
def activate_chart(chart_id: str, store: WorkspaceStore = Depends(get_store)):
    try:
        store.set_active_chart(chart_id)
    except ChartNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return _list(store)
