"""
Raw cell values and their explicit conversions.

Cells arrive from ingestion as untyped scalars (str, int, float, bool, None,
occasionally a date object). Every runtime type check the engine needs lives
here so the analysis code only ever asks "what kind is this" or "give me the
number/boolean/date this represents".
"""

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Hashable, Optional, Tuple

import numpy as np
import pandas as pd


BOOLEAN_TRUE = frozenset({"true", "yes", "1"})
BOOLEAN_FALSE = frozenset({"false", "no", "0"})


class ScalarKind(str, Enum):
    """Tag describing the runtime shape of a raw cell."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"
    STRING = "string"


def _is_bool(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def _is_real(value: Any) -> bool:
    return not _is_bool(value) and isinstance(value, (int, float, np.integer, np.floating))


def _real_to_float(value: Any) -> Optional[float]:
    # Python ints can exceed the float range
    try:
        return float(value)
    except OverflowError:
        return None


def classify_scalar(value: Any) -> ScalarKind:
    """Tag a raw cell with its scalar kind."""
    if is_missing(value):
        return ScalarKind.NULL
    if _is_bool(value):
        return ScalarKind.BOOLEAN
    if isinstance(value, (int, np.integer)):
        return ScalarKind.INTEGER
    if isinstance(value, (float, np.floating)):
        return ScalarKind.FLOAT
    if isinstance(value, (datetime, date, pd.Timestamp, np.datetime64)):
        return ScalarKind.DATE
    return ScalarKind.STRING


def is_missing(value: Any) -> bool:
    """
    True for None, NaN and blank strings.

    Infinities are present values: they are simply not usable as numbers.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    if value is pd.NaT:
        return True
    return False


def to_number(value: Any) -> Optional[float]:
    """Return the finite float a cell represents, or None."""
    if value is None or _is_bool(value):
        return None

    if _is_real(value):
        number = _real_to_float(value)
        if number is None:
            return None
    elif isinstance(value, str):
        text = value.strip()
        # float() accepts digit separators that delimited text never means
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    return number if math.isfinite(number) else None


def to_boolean(value: Any) -> Optional[bool]:
    """Return the boolean a cell represents (native or yes/no style text), or None."""
    if _is_bool(value):
        return bool(value)
    if isinstance(value, str):
        lowered = value.lower()
        if lowered in BOOLEAN_TRUE:
            return True
        if lowered in BOOLEAN_FALSE:
            return False
    return None


def to_datetime(value: Any) -> Optional[pd.Timestamp]:
    """
    Return the timestamp a cell represents, or None.

    Numbers are read as epoch milliseconds; booleans are never dates.
    """
    if is_missing(value) or _is_bool(value):
        return None

    try:
        if _is_real(value):
            parsed = pd.to_datetime(float(value), unit="ms", errors="coerce")
        elif isinstance(value, (datetime, date, pd.Timestamp, np.datetime64)):
            parsed = pd.Timestamp(value)
        elif isinstance(value, str):
            parsed = pd.to_datetime(value.strip(), errors="coerce")
        else:
            return None
    except (ValueError, TypeError, OverflowError):
        return None

    if parsed is None or pd.isna(parsed):
        return None
    return parsed


def stringify(value: Any) -> str:
    """Render a cell the way it is shown in frequency tables."""
    if value is None:
        return "null"
    if _is_bool(value):
        return "true" if value else "false"
    if _is_real(value):
        number = _real_to_float(value)
        if number is None:
            return str(value)
        if math.isfinite(number) and number.is_integer():
            return str(int(number))
        return str(number)
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return value.isoformat()
    return str(value)


def value_key(value: Any) -> Tuple[str, Hashable]:
    """
    Hashable identity for a cell.

    Keeps True apart from 1 and "1" apart from 1, while 1 and 1.0 share a key.
    NaN collapses onto None.
    """
    if value is None:
        return ("null", None)
    if _is_bool(value):
        return ("boolean", bool(value))
    if _is_real(value):
        number = _real_to_float(value)
        if number is None:
            return ("number", int(value))
        if math.isnan(number):
            return ("null", None)
        return ("number", number)
    if isinstance(value, str):
        return ("string", value)
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return ("date", value.isoformat())
    try:
        hash(value)
    except TypeError:
        return ("other", repr(value))
    return ("other", value)


def json_safe(value: Any) -> Any:
    """Convert a cell into something json.dumps accepts without NaN/Infinity."""
    if value is None or isinstance(value, str):
        return value
    if _is_bool(value):
        return bool(value)
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        number = float(value)
        return number if math.isfinite(number) else None
    if value is pd.NaT:
        return None
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return value.isoformat()
    return str(value)
