"""Utility helpers for applying per-column filters to record lists."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from core.values import is_missing, stringify, to_datetime, to_number, value_key


FilterDict = Dict[str, Any]

NUMERIC_OPERATORS = {
    "greater_than": lambda s, v: s > v,
    "less_than": lambda s, v: s < v,
    "greater_equal": lambda s, v: s >= v,
    "less_equal": lambda s, v: s <= v,
}

SUPPORTED_OPERATORS = frozenset({
    "equals", "not_equals", "contains", "not_contains",
    *NUMERIC_OPERATORS,
    "between", "in", "not_in", "is_null", "is_not_null",
    "date_after", "date_before", "date_between",
})


def validate_filter(raw_filter: Mapping[str, Any]) -> None:
    """Raise ValueError when a filter definition cannot be applied."""
    operator = (raw_filter.get("operator") or "").lower()
    if operator not in SUPPORTED_OPERATORS:
        raise ValueError(f"Unsupported filter operator '{operator}'")

    if operator in {"in", "not_in"} and not isinstance(raw_filter.get("values"), (list, tuple)):
        raise ValueError(f"Operator '{operator}' requires a list of values")
    if operator in {"between", "date_between"}:
        low, high = _range_bounds(raw_filter)
        if low is None or high is None:
            raise ValueError(f"Operator '{operator}' requires a two-element range")
    if operator in {"equals", "not_equals", "contains", "not_contains",
                    "date_after", "date_before", *NUMERIC_OPERATORS}:
        if "value" not in raw_filter:
            raise ValueError(f"Operator '{operator}' requires a value")


def apply_filters(
    rows: Sequence[Mapping[str, Any]],
    filters: Mapping[str, FilterDict],
) -> List[Mapping[str, Any]]:
    """
    Keep the rows that satisfy every filter.

    Args:
        rows: Records keyed by column name
        filters: Column name -> filter definition ({"operator", "value",
            "values", "range"})

    Returns:
        The matching rows themselves, in their original order
    """
    if not rows or not filters:
        return list(rows or [])

    frame = pd.DataFrame(list(rows), dtype=object)
    mask = pd.Series(True, index=frame.index)

    for column, raw_filter in filters.items():
        if column not in frame.columns:
            raise ValueError(f"Column '{column}' not found for filtering")
        validate_filter(raw_filter)
        mask &= _column_mask(frame[column], raw_filter).astype(bool)

    return [row for row, keep in zip(rows, mask.tolist()) if keep]


def _column_mask(series: pd.Series, raw_filter: FilterDict) -> pd.Series:
    operator = raw_filter["operator"].lower()
    value = raw_filter.get("value")

    if operator in {"equals", "not_equals"}:
        target = value_key(value)
        mask = series.map(lambda v: value_key(v) == target)
        return mask if operator == "equals" else ~mask.astype(bool)

    if operator in {"contains", "not_contains"}:
        mask = series.map(stringify).str.contains(str(value), case=False, regex=False)
        return mask if operator == "contains" else ~mask.astype(bool)

    if operator in NUMERIC_OPERATORS or operator == "between":
        return _apply_numeric_filter(series, operator, raw_filter)

    if operator in {"in", "not_in"}:
        targets = {value_key(v) for v in raw_filter["values"]}
        mask = series.map(lambda v: value_key(v) in targets)
        return mask if operator == "in" else ~mask.astype(bool)

    if operator in {"is_null", "is_not_null"}:
        mask = series.map(is_missing)
        return mask if operator == "is_null" else ~mask.astype(bool)

    return _apply_datetime_filter(series, operator, raw_filter)


def _apply_numeric_filter(series: pd.Series, operator: str, raw_filter: FilterDict) -> pd.Series:
    numeric_series = series.map(to_number).astype(float)

    if operator == "between":
        low, high = _range_bounds(raw_filter)
        return (numeric_series >= _as_number(low)) & (numeric_series <= _as_number(high))

    return NUMERIC_OPERATORS[operator](numeric_series, _as_number(raw_filter["value"]))


def _apply_datetime_filter(series: pd.Series, operator: str, raw_filter: FilterDict) -> pd.Series:
    if operator == "date_between":
        low, high = (_as_date(b) for b in _range_bounds(raw_filter))
        predicate: Callable[[pd.Timestamp], bool] = lambda d: low <= d <= high
    elif operator == "date_after":
        bound = _as_date(raw_filter["value"])
        predicate = lambda d: d > bound
    else:
        bound = _as_date(raw_filter["value"])
        predicate = lambda d: d < bound

    def _matches(cell: Any) -> bool:
        parsed = to_datetime(cell)
        return parsed is not None and predicate(_naive(parsed))

    return series.map(_matches)


def _as_number(value: Any) -> float:
    number = to_number(value)
    if number is None:
        raise ValueError(f"Filter value '{value}' is not a number")
    return number


def _as_date(value: Any) -> pd.Timestamp:
    parsed = to_datetime(value)
    if parsed is None:
        raise ValueError(f"Filter value '{value}' is not a date")
    return _naive(parsed)


def _naive(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.tz_convert(None) if ts.tzinfo is not None else ts


def _range_bounds(raw_filter: FilterDict) -> Tuple[Optional[Any], Optional[Any]]:
    range_values = raw_filter.get("range")
    if isinstance(range_values, (list, tuple)) and len(range_values) == 2:
        return range_values[0], range_values[1]
    return None, None
