"""Pydantic request schemas."""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class RowsUploadRequest(BaseModel):
    filename: str = "dataset"
    rows: List[Dict[str, Any]]


class FilterRequest(BaseModel):
    operator: Literal[
        "equals", "not_equals", "contains", "not_contains",
        "greater_than", "less_than", "greater_equal", "less_equal",
        "between", "in", "not_in", "is_null", "is_not_null",
        "date_after", "date_before", "date_between",
    ]
    value: Optional[Any] = None
    values: Optional[List[Any]] = None
    range: Optional[List[Any]] = Field(default=None, min_length=2, max_length=2)


ChartType = Literal["histogram", "boxplot", "scatter", "bar", "pie", "line", "heatmap", "violin"]


class ChartCreateRequest(BaseModel):
    type: ChartType
    title: str = ""
    x_column: Optional[str] = None
    y_column: Optional[str] = None
    color_column: Optional[str] = None
    size_column: Optional[str] = None
    options: Dict[str, Any] = Field(default_factory=dict)


class ChartUpdateRequest(BaseModel):
    type: Optional[ChartType] = None
    title: Optional[str] = None
    x_column: Optional[str] = None
    y_column: Optional[str] = None
    color_column: Optional[str] = None
    size_column: Optional[str] = None
    options: Optional[Dict[str, Any]] = None
