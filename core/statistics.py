"""
Statistical summaries for profiled columns.

Numeric descriptive statistics (moments, nearest-rank quartiles), categorical
frequency tables and Pearson correlation. Every helper here is total: values
that cannot be used are dropped and undefined results come back as None or 0,
never NaN and never an exception.
"""

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from core.values import is_missing, stringify, to_number


@dataclass
class NumericStats:
    """Descriptive statistics for a numeric column."""

    count: int
    mean: Optional[float] = None
    median: Optional[float] = None
    std: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    q1: Optional[float] = None
    q3: Optional[float] = None
    variance: Optional[float] = None
    skewness: Optional[float] = None
    kurtosis: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "std": self.std,
            "min": self.min,
            "max": self.max,
            "q1": self.q1,
            "q3": self.q3,
            "variance": self.variance,
            "skewness": self.skewness,
            "kurtosis": self.kurtosis,
        }


@dataclass
class TopValue:
    value: str
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "count": self.count, "percentage": self.percentage}


@dataclass
class CategoricalStats:
    """Frequency summary for a non-numeric column."""

    count: int
    unique_count: int
    mode: Optional[str]
    mode_frequency: int
    value_counts: Dict[str, int] = field(default_factory=dict)
    top_values: List[TopValue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "uniqueCount": self.unique_count,
            "mode": self.mode,
            "modeFrequency": self.mode_frequency,
            "valueCounts": dict(self.value_counts),
            "topValues": [tv.to_dict() for tv in self.top_values],
        }


def round_or_none(value: Optional[float], digits: int = 4) -> Optional[float]:
    """Round a float, mapping None/NaN/Infinity to None."""
    if value is None:
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return round(value, digits)


def finite_numbers(values: Iterable[Any]) -> List[float]:
    """Convert raw cells to floats, dropping anything that is not a finite number."""
    numbers = []
    for value in values:
        number = to_number(value)
        if number is not None:
            numbers.append(number)
    return numbers


def nearest_rank_quartiles(sorted_values: Sequence[float]):
    """
    Q1 and Q3 by indexing the sorted sample at floor(p * n), no interpolation.

    Args:
        sorted_values: Ascending, non-empty sample

    Returns:
        Tuple (q1, q3)
    """
    count = len(sorted_values)
    q1 = sorted_values[int(math.floor(count * 0.25))]
    q3 = sorted_values[int(math.floor(count * 0.75))]
    return float(q1), float(q3)


def _standardized_moment(values: np.ndarray, mean: float, std: Optional[float], power: int) -> Optional[float]:
    # A constant float column leaves rounding noise in std, not an exact zero
    if not round_or_none(std):
        return None
    return float(np.mean(((values - mean) / std) ** power))


def calculate_numeric_stats(values: Iterable[Any]) -> NumericStats:
    """
    Calculate descriptive statistics for a numeric column.

    Args:
        values: Raw cells; non-numeric and non-finite cells are ignored

    Returns:
        NumericStats. Fields that are undefined for the sample size are None.
    """
    numbers = np.sort(np.asarray(finite_numbers(values), dtype=float))
    count = int(numbers.size)

    if count == 0:
        return NumericStats(count=0)

    mean = float(numbers.mean())
    middle = count // 2
    if count % 2 == 0:
        median = (numbers[middle - 1] + numbers[middle]) / 2
    else:
        median = numbers[middle]

    # Sample variance (Bessel's correction) needs two values
    variance = float(numbers.var(ddof=1)) if count > 1 else None
    std = math.sqrt(variance) if variance is not None else None

    q1, q3 = nearest_rank_quartiles(numbers)

    skewness = _standardized_moment(numbers, mean, std, 3) if count > 2 else None
    kurtosis = _standardized_moment(numbers, mean, std, 4) if count > 3 else None
    if kurtosis is not None:
        kurtosis -= 3

    return NumericStats(
        count=count,
        mean=round_or_none(mean),
        median=round_or_none(median),
        std=round_or_none(std),
        min=float(numbers[0]),
        max=float(numbers[-1]),
        q1=q1,
        q3=q3,
        variance=round_or_none(variance),
        skewness=round_or_none(skewness),
        kurtosis=round_or_none(kurtosis),
    )


def calculate_categorical_stats(values: Iterable[Any], top_n: int = 10) -> CategoricalStats:
    """
    Build a frequency table for a non-numeric column.

    Args:
        values: Raw cells; missing cells are ignored
        top_n: Number of entries kept in top_values

    Returns:
        CategoricalStats ranked by descending frequency, ties in first-seen order
    """
    present = [stringify(v) for v in values if not is_missing(v)]
    value_counts = Counter(present)
    total = len(present)

    # most_common sorts stably, so equal counts keep insertion order
    ranked = value_counts.most_common()
    mode, mode_frequency = ranked[0] if ranked else (None, 0)

    top_values = [
        TopValue(value=value, count=count, percentage=round(count / total * 100, 2))
        for value, count in ranked[:top_n]
    ]

    return CategoricalStats(
        count=total,
        unique_count=len(value_counts),
        mode=mode,
        mode_frequency=mode_frequency,
        value_counts=dict(value_counts),
        top_values=top_values,
    )


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson's r from running sums, rounded to 4 decimals.

    Returns 0 for mismatched or empty samples and for a zero denominator
    (constant input).
    """
    n = len(x)
    if n == 0 or n != len(y):
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)

    sum_x = xs.sum()
    sum_y = ys.sum()
    sum_xy = (xs * ys).sum()
    sum_x2 = (xs * xs).sum()
    sum_y2 = (ys * ys).sum()

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    # Rounding noise can push a constant column's spread just below zero
    if spread <= 0:
        return 0.0

    r = numerator / math.sqrt(spread)
    return round_or_none(r) or 0.0


def correlation_matrix(
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str],
    pairwise: bool = False,
) -> Dict[str, Dict[str, float]]:
    """
    Calculate the Pearson correlation matrix for numeric columns.

    Args:
        rows: Records keyed by column name
        columns: Numeric column names, in output order
        pairwise: Keep only rows where both columns hold a finite number.
            When False each column is filtered on its own, so columns missing
            values in different rows are compared out of alignment (and score 0
            when their counts differ).

    Returns:
        Nested mapping column -> column -> r
    """
    matrix: Dict[str, Dict[str, float]] = {}

    if pairwise:
        converted = {col: [to_number(row.get(col)) for row in rows] for col in columns}
        for col1 in columns:
            matrix[col1] = {}
            for col2 in columns:
                pairs = [
                    (a, b) for a, b in zip(converted[col1], converted[col2])
                    if a is not None and b is not None
                ]
                if len(pairs) < 2:
                    matrix[col1][col2] = 0.0
                    continue
                xs, ys = zip(*pairs)
                matrix[col1][col2] = pearson_correlation(xs, ys)
        return matrix

    samples = {col: finite_numbers(row.get(col) for row in rows) for col in columns}
    for col1 in columns:
        matrix[col1] = {}
        for col2 in columns:
            values1, values2 = samples[col1], samples[col2]
            if len(values1) == len(values2) and len(values1) > 1:
                matrix[col1][col2] = pearson_correlation(values1, values2)
            else:
                matrix[col1][col2] = 0.0
    return matrix
