"""Pydantic response schemas."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class DataLoadResponse(BaseModel):
    dataset_name: str
    rows: int
    columns: int
    column_names: List[str]
    column_types: Dict[str, str]
    preview_types: Dict[str, str]
    overall_quality: str


class CurrentDatasetResponse(BaseModel):
    loaded: bool
    dataset_name: Optional[str] = None
    rows: Optional[int] = None
    columns: Optional[int] = None
    column_names: Optional[List[str]] = None
    numeric_columns: Optional[List[str]] = None
    categorical_columns: Optional[List[str]] = None
    filtered_rows: Optional[int] = None
    filters_active: bool = False
    active_filters: Optional[Dict[str, Dict[str, Any]]] = None


class FilterApplicationResponse(BaseModel):
    row_count: int
    column_count: int
    preview: List[Dict[str, Any]]
    active_filters: Dict[str, Dict[str, Any]]


class ChartListResponse(BaseModel):
    charts: List[Dict[str, Any]]
    active_chart_id: Optional[str] = None
