"""
Data profiling engine for automated exploratory data analysis.

Takes raw records, infers column types, computes per-column statistics,
missingness and outliers, correlates numeric columns, proposes charts and
grades data quality. The engine is stateless: every call builds a fresh
DatasetProfile from its arguments and never mutates the input rows.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from config.settings import AnalysisConfig
from core.quality import QualityAssessment, assess_data_quality, count_duplicate_rows
from core.recommendations import (
    CATEGORICAL_TYPES,
    DATE_TYPES,
    NUMERIC_TYPES,
    ChartSuggestion,
    suggest_chart_types,
)
from core.statistics import (
    CategoricalStats,
    NumericStats,
    calculate_categorical_stats,
    calculate_numeric_stats,
    correlation_matrix,
    finite_numbers,
    nearest_rank_quartiles,
)
from core.values import is_missing, json_safe, to_boolean, to_datetime, to_number, value_key

logger = logging.getLogger(__name__)


ColumnType = Literal["integer", "float", "boolean", "date", "string", "unknown"]
Row = Mapping[str, Any]


class EmptyDatasetError(ValueError):
    """Raised when there is nothing to analyze."""

    def __init__(self, message: str = "Dataset is empty or invalid"):
        super().__init__(message)


@dataclass
class MissingData:
    """Missing/present counts for one column."""

    total: int
    missing: int
    present: int
    missing_percentage: float
    present_percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "missing": self.missing,
            "present": self.present,
            "missingPercentage": self.missing_percentage,
            "presentPercentage": self.present_percentage,
        }


@dataclass
class ColumnProfile:
    """Statistical profile for a single column."""

    name: str
    type: ColumnType
    missing_data: MissingData
    stats: Union[NumericStats, CategoricalStats]
    outliers: List[float] = field(default_factory=list)
    sample_values: List[Any] = field(default_factory=list)

    @property
    def is_numeric(self) -> bool:
        return self.type in NUMERIC_TYPES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "missingData": self.missing_data.to_dict(),
            "stats": self.stats.to_dict(),
            "outliers": list(self.outliers),
            "sampleValues": [json_safe(v) for v in self.sample_values],
        }


@dataclass
class DatasetSummary:
    total_rows: int
    total_columns: int
    numeric_columns: int
    categorical_columns: int
    date_columns: int
    missing_data_percentage: float
    duplicate_rows: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRows": self.total_rows,
            "totalColumns": self.total_columns,
            "numericColumns": self.numeric_columns,
            "categoricalColumns": self.categorical_columns,
            "dateColumns": self.date_columns,
            "missingDataPercentage": self.missing_data_percentage,
            "duplicateRows": self.duplicate_rows,
        }


@dataclass(frozen=True)
class DatasetProfile:
    """Comprehensive profile for an entire dataset."""

    filename: str
    data: List[Dict[str, Any]]
    columns: List[ColumnProfile]
    summary: DatasetSummary
    correlations: Dict[str, Dict[str, float]]
    chart_suggestions: List[ChartSuggestion]
    quality_assessment: QualityAssessment
    analyzed_at: datetime
    data_types: Dict[str, int]

    def column(self, name: str) -> Optional[ColumnProfile]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    @property
    def metadata(self) -> Dict[str, Any]:
        return {
            "analyzedAt": self.analyzed_at.isoformat(),
            "dataTypes": dict(self.data_types),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-safe structure for the rendering layer."""
        return {
            "filename": self.filename,
            "data": [{k: json_safe(v) for k, v in row.items()} for row in self.data],
            "columns": [col.to_dict() for col in self.columns],
            "summary": self.summary.to_dict(),
            "correlations": {k: dict(v) for k, v in self.correlations.items()},
            "chartSuggestions": [s.to_dict() for s in self.chart_suggestions],
            "qualityAssessment": self.quality_assessment.to_dict(),
            "metadata": self.metadata,
        }


def detect_column_type(values: Iterable[Any]) -> ColumnType:
    """
    Classify a column from its raw cells.

    Checks run numeric -> boolean -> date and the first rule every present
    value satisfies wins; a column with no present values is "unknown".

    Args:
        values: Raw cells of one column

    Returns:
        Detected column type
    """
    present = [v for v in values if not is_missing(v)]
    if not present:
        return "unknown"

    numbers = [to_number(v) for v in present]
    if all(n is not None for n in numbers):
        return "integer" if all(n.is_integer() for n in numbers) else "float"

    if all(to_boolean(v) is not None for v in present):
        return "boolean"

    if all(to_datetime(v) is not None for v in present):
        return "date"

    return "string"


def calculate_missing_data(values: Sequence[Any]) -> MissingData:
    """Count missing cells (None, NaN, blank strings) in a column."""
    total = len(values)
    missing = sum(1 for v in values if is_missing(v))
    present = total - missing

    missing_pct = round(missing / total * 100, 2) if total > 0 else 0.0
    present_pct = round(present / total * 100, 2) if total > 0 else 0.0

    return MissingData(
        total=total,
        missing=missing,
        present=present,
        missing_percentage=missing_pct,
        present_percentage=present_pct,
    )


def detect_outliers_iqr(values: Iterable[Any], multiplier: float = 1.5) -> List[float]:
    """
    Detect outliers using the IQR (Interquartile Range) method.

    Args:
        values: Raw cells; non-numeric cells are ignored
        multiplier: IQR multiplier (default 1.5)

    Returns:
        Every out-of-fence value in ascending order, duplicates kept. Empty
        when fewer than 4 numbers are available.
    """
    numbers = sorted(finite_numbers(values))
    if len(numbers) < 4:
        return []

    q1, q3 = nearest_rank_quartiles(numbers)
    iqr = q3 - q1
    lower_bound = q1 - multiplier * iqr
    upper_bound = q3 + multiplier * iqr

    return [v for v in numbers if v < lower_bound or v > upper_bound]


def normalize_column_name(name: Any) -> str:
    """Trim, turn whitespace runs into underscores and lower-case."""
    return re.sub(r"\s+", "_", str(name).strip()).lower()


def normalize_columns(rows: Sequence[Row]) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    Re-key rows under normalized column names.

    Column order is the order labels first appear. Labels that normalize to
    the same name get a numeric suffix so names stay unique.

    Returns:
        Tuple (column names, cleaned copies of the rows)
    """
    labels: List[Any] = []
    seen_labels = set()
    for row in rows:
        for label in row.keys():
            if label not in seen_labels:
                seen_labels.add(label)
                labels.append(label)

    mapping: List[Tuple[Any, str]] = []
    used = set()
    for index, label in enumerate(labels):
        base = normalize_column_name(label) or f"column_{index + 1}"
        name, suffix = base, 2
        while name in used:
            name = f"{base}_{suffix}"
            suffix += 1
        used.add(name)
        mapping.append((label, name))

    cleaned = [{name: row.get(label) for label, name in mapping} for row in rows]
    return [name for _, name in mapping], cleaned


def _sample_values(values: Sequence[Any], limit: int) -> List[Any]:
    samples = []
    seen = set()
    for value in values:
        if is_missing(value):
            continue
        key = value_key(value)
        if key in seen:
            continue
        seen.add(key)
        samples.append(value)
        if len(samples) >= limit:
            break
    return samples


def profile_column(
    name: str,
    values: Sequence[Any],
    config: Optional[AnalysisConfig] = None,
) -> ColumnProfile:
    """
    Generate the profile for a single column.

    Args:
        name: Normalized column name
        values: Raw cells, one per row
        config: Analysis thresholds (defaults when omitted)

    Returns:
        ColumnProfile with numeric stats and outliers for integer/float
        columns, a frequency table otherwise
    """
    config = config or AnalysisConfig()
    column_type = detect_column_type(values)
    missing_data = calculate_missing_data(values)

    outliers: List[float] = []
    if column_type in NUMERIC_TYPES:
        stats: Union[NumericStats, CategoricalStats] = calculate_numeric_stats(values)
        outliers = detect_outliers_iqr(values, config.outlier_iqr_multiplier)
        outliers = outliers[:config.outlier_display_limit]
    else:
        stats = calculate_categorical_stats(values, top_n=config.top_values_limit)

    logger.debug("Column %r classified as %s", name, column_type)

    return ColumnProfile(
        name=name,
        type=column_type,
        missing_data=missing_data,
        stats=stats,
        outliers=outliers,
        sample_values=_sample_values(values, config.sample_value_limit),
    )


def profile_dataset(
    rows: Optional[Sequence[Row]],
    filename: str = "dataset",
    config: Optional[AnalysisConfig] = None,
) -> DatasetProfile:
    """
    Generate the complete profile for a dataset.

    Args:
        rows: Records mapping column label to raw cell
        filename: Dataset label carried into the profile
        config: Analysis thresholds (defaults when omitted)

    Returns:
        DatasetProfile

    Raises:
        EmptyDatasetError: No rows, or rows without any columns
    """
    if not rows:
        raise EmptyDatasetError()

    config = config or AnalysisConfig()
    rows = list(rows)
    column_names, data = normalize_columns(rows)
    if not column_names:
        raise EmptyDatasetError()

    columns = [
        profile_column(name, [row[name] for row in data], config)
        for name in column_names
    ]

    numeric_names = [col.name for col in columns if col.type in NUMERIC_TYPES]
    correlations: Dict[str, Dict[str, float]] = {}
    if len(numeric_names) >= 2:
        correlations = correlation_matrix(data, numeric_names, pairwise=config.pairwise_correlation)

    chart_suggestions = suggest_chart_types(columns)

    duplicate_rows = count_duplicate_rows(data)
    quality = assess_data_quality(
        data,
        columns,
        high_missing_percentage=config.high_missing_percentage,
        low_variance_std=config.low_variance_std,
        high_cardinality_ratio=config.high_cardinality_ratio,
        duplicate_rows=duplicate_rows,
    )

    missing_avg = sum(col.missing_data.missing_percentage for col in columns) / len(columns)
    summary = DatasetSummary(
        total_rows=len(data),
        total_columns=len(columns),
        numeric_columns=len(numeric_names),
        categorical_columns=sum(1 for col in columns if col.type in CATEGORICAL_TYPES),
        date_columns=sum(1 for col in columns if col.type in DATE_TYPES),
        missing_data_percentage=round(missing_avg, 2),
        duplicate_rows=duplicate_rows,
    )

    logger.info(
        "Analyzed %s: %d rows, %d columns, quality %s",
        filename, summary.total_rows, summary.total_columns,
        quality.overall_quality.value,
    )

    return DatasetProfile(
        filename=filename,
        data=data,
        columns=columns,
        summary=summary,
        correlations=correlations,
        chart_suggestions=chart_suggestions,
        quality_assessment=quality,
        analyzed_at=datetime.now(timezone.utc),
        data_types=dict(Counter(col.type for col in columns)),
    )


# Name used by the ingestion front-end
analyze_dataset = profile_dataset
