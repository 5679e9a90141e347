"""
Workspace state for an interactive analysis session.

A WorkspaceStore owns one immutable WorkspaceState snapshot at a time. Each
action handler builds the next snapshot from the current one (the loaded
profile, charts, filters and an action history) and swaps it in, so readers
holding an older snapshot never see a half-applied change.
"""

import json
import threading
import time
import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from config.settings import AnalysisConfig
from core.filtering import FilterDict, apply_filters, validate_filter
from core.profiling import DatasetProfile, profile_dataset
from core.values import is_missing, json_safe, stringify, value_key


CHART_TYPES = frozenset({
    "histogram", "boxplot", "scatter", "bar", "pie", "line", "heatmap", "violin",
})


class ChartNotFoundError(ValueError):
    def __init__(self, chart_id: str):
        super().__init__(f"Chart '{chart_id}' not found")
        self.chart_id = chart_id


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ChartConfig:
    """A chart the user placed on the dashboard."""

    id: str
    type: str
    title: str = ""
    x_column: Optional[str] = None
    y_column: Optional[str] = None
    color_column: Optional[str] = None
    size_column: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    created_at: str = field(default_factory=_now)
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "xColumn": self.x_column,
            "yColumn": self.y_column,
            "colorColumn": self.color_column,
            "sizeColumn": self.size_column,
            "options": dict(self.options),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


EDITABLE_CHART_FIELDS = frozenset(
    f.name for f in fields(ChartConfig) if f.name not in {"id", "created_at", "updated_at"}
)


@dataclass(frozen=True)
class WorkspaceState:
    dataset: Optional[DatasetProfile] = None
    charts: Tuple[ChartConfig, ...] = ()
    active_chart_id: Optional[str] = None
    filters: Dict[str, FilterDict] = field(default_factory=dict)
    filtered_rows: Optional[List[Dict[str, Any]]] = None
    is_loading: bool = False
    error: Optional[str] = None
    history: Tuple[Dict[str, Any], ...] = ()


def _new_chart_id() -> str:
    return f"chart_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class WorkspaceStore:
    """Action handlers and selectors over a WorkspaceState."""

    def __init__(self, state: Optional[WorkspaceState] = None):
        self._state = state or WorkspaceState()
        self._lock = threading.RLock()

    @property
    def state(self) -> WorkspaceState:
        return self._state

    def _commit(self, state: WorkspaceState, action: Optional[str] = None, **details: Any) -> WorkspaceState:
        if action is not None:
            entry = {"action": action, "timestamp": _now(), **details}
            state = replace(state, history=state.history + (entry,))
        self._state = state
        return state

    # Dataset

    def set_dataset(self, dataset: DatasetProfile) -> WorkspaceState:
        """Load a profile; clears charts, filters and errors."""
        with self._lock:
            state = replace(
                self._state,
                dataset=dataset,
                filtered_rows=list(dataset.data),
                charts=(),
                active_chart_id=None,
                filters={},
                error=None,
            )
            return self._commit(state, "dataset_loaded", filename=dataset.filename)

    def reset(self) -> WorkspaceState:
        with self._lock:
            state = WorkspaceState(history=self._state.history)
            return self._commit(state, "state_reset")

    # Charts

    def set_active_chart(self, chart_id: Optional[str]) -> WorkspaceState:
        with self._lock:
            if chart_id is not None:
                self._require_chart(chart_id)
            return self._commit(replace(self._state, active_chart_id=chart_id))

    def add_chart(self, chart_type: str, **config: Any) -> ChartConfig:
        """Add a chart and make it the active one."""
        if chart_type not in CHART_TYPES:
            raise ValueError(f"Unknown chart type '{chart_type}'")
        unknown = set(config) - EDITABLE_CHART_FIELDS
        if unknown:
            raise ValueError(f"Unknown chart fields: {', '.join(sorted(unknown))}")

        with self._lock:
            chart = ChartConfig(id=_new_chart_id(), type=chart_type, **config)
            state = replace(
                self._state,
                charts=self._state.charts + (chart,),
                active_chart_id=chart.id,
            )
            self._commit(state, "chart_added", chartType=chart.type, chartId=chart.id)
            return chart

    def update_chart(self, chart_id: str, updates: Mapping[str, Any]) -> ChartConfig:
        unknown = set(updates) - EDITABLE_CHART_FIELDS
        if unknown:
            raise ValueError(f"Unknown chart fields: {', '.join(sorted(unknown))}")
        if "type" in updates and updates["type"] not in CHART_TYPES:
            raise ValueError(f"Unknown chart type '{updates['type']}'")

        with self._lock:
            current = self._require_chart(chart_id)
            updated = replace(current, **updates, updated_at=_now())
            charts = tuple(updated if c.id == chart_id else c for c in self._state.charts)
            self._commit(replace(self._state, charts=charts), "chart_updated", chartId=chart_id)
            return updated

    def remove_chart(self, chart_id: str) -> WorkspaceState:
        """Remove a chart; removing the active one activates the first remaining chart."""
        with self._lock:
            self._require_chart(chart_id)
            charts = tuple(c for c in self._state.charts if c.id != chart_id)
            active = self._state.active_chart_id
            if active == chart_id:
                active = charts[0].id if charts else None
            state = replace(self._state, charts=charts, active_chart_id=active)
            return self._commit(state, "chart_removed", chartId=chart_id)

    def _require_chart(self, chart_id: str) -> ChartConfig:
        chart = self.get_chart(chart_id)
        if chart is None:
            raise ChartNotFoundError(chart_id)
        return chart

    # Filters

    def set_filter(self, column: str, filter_def: FilterDict) -> WorkspaceState:
        with self._lock:
            dataset = self._require_dataset()
            if dataset.column(column) is None:
                raise ValueError(f"Column '{column}' not found for filtering")
            validate_filter(filter_def)

            filters = {**self._state.filters, column: dict(filter_def)}
            state = replace(
                self._state,
                filters=filters,
                filtered_rows=apply_filters(dataset.data, filters),
            )
            return self._commit(state, "filter_applied", column=column, filter=dict(filter_def))

    def clear_filter(self, column: str) -> WorkspaceState:
        with self._lock:
            filters = {k: v for k, v in self._state.filters.items() if k != column}
            rows = self._state.dataset.data if self._state.dataset is not None else None
            state = replace(
                self._state,
                filters=filters,
                filtered_rows=apply_filters(rows, filters) if rows is not None else None,
            )
            return self._commit(state, "filter_cleared", column=column)

    def clear_all_filters(self) -> WorkspaceState:
        with self._lock:
            for column in list(self._state.filters):
                self.clear_filter(column)
            return self._state

    # Status

    def set_loading(self, is_loading: bool) -> WorkspaceState:
        with self._lock:
            return self._commit(replace(self._state, is_loading=is_loading))

    def set_error(self, error: str) -> WorkspaceState:
        with self._lock:
            return self._commit(replace(self._state, error=error, is_loading=False))

    def clear_error(self) -> WorkspaceState:
        with self._lock:
            return self._commit(replace(self._state, error=None))

    # Selectors

    @property
    def has_data(self) -> bool:
        return self._state.dataset is not None

    @property
    def has_filters(self) -> bool:
        return bool(self._state.filters)

    @property
    def has_charts(self) -> bool:
        return bool(self._state.charts)

    @property
    def active_chart(self) -> Optional[ChartConfig]:
        chart_id = self._state.active_chart_id
        return self.get_chart(chart_id) if chart_id is not None else None

    def get_chart(self, chart_id: str) -> Optional[ChartConfig]:
        for chart in self._state.charts:
            if chart.id == chart_id:
                return chart
        return None

    def filtered_rows(self) -> List[Dict[str, Any]]:
        state = self._state
        if state.filtered_rows is not None:
            return state.filtered_rows
        return state.dataset.data if state.dataset is not None else []

    def column_data(self, column: str) -> List[Any]:
        """Present values of a column in the filtered rows."""
        return [row.get(column) for row in self.filtered_rows() if not is_missing(row.get(column))]

    def unique_values(self, column: str) -> List[Any]:
        seen = {}
        for value in self.column_data(column):
            seen.setdefault(value_key(value), value)
        return sorted(seen.values(), key=stringify)

    def column_stats(self, column: str):
        dataset = self._state.dataset
        col = dataset.column(column) if dataset is not None else None
        return col.stats if col is not None else None

    def export_data(self, fmt: str = "csv") -> Optional[str]:
        """Serialize the filtered rows; None when there is nothing to export."""
        rows = self.filtered_rows()
        if not rows:
            return None

        if fmt == "csv":
            columns = self._state.dataset.column_names if self._state.dataset else list(rows[0])
            frame = pd.DataFrame(list(rows), columns=columns, dtype=object)
            return frame.to_csv(index=False, lineterminator="\n")
        if fmt == "json":
            safe = [{k: json_safe(v) for k, v in row.items()} for row in rows]
            return json.dumps(safe, indent=2)

        raise ValueError(f"Unsupported export format '{fmt}'")

    def analyze_filtered(self, config: Optional[AnalysisConfig] = None) -> DatasetProfile:
        """Fresh profile of the rows that pass the active filters."""
        dataset = self._require_dataset()
        name = dataset.filename
        if self.has_filters:
            name = f"{name} (filtered)"
        return profile_dataset(self.filtered_rows(), name, config)

    def _require_dataset(self) -> DatasetProfile:
        if self._state.dataset is None:
            raise ValueError("No dataset loaded")
        return self._state.dataset
