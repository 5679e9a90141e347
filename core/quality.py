"""
Dataset-level data quality assessment.

Turns column profiles into blocking issues and advisory warnings and grades
the dataset as excellent, good or poor.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from core.recommendations import NUMERIC_TYPES
from core.values import value_key


class QualityVerdict(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    POOR = "poor"


@dataclass
class QualityAssessment:
    """Issues block analysis of a column; warnings are advisory."""

    issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def overall_quality(self) -> QualityVerdict:
        if self.issues:
            return QualityVerdict.POOR
        if self.warnings:
            return QualityVerdict.GOOD
        return QualityVerdict.EXCELLENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issues": list(self.issues),
            "warnings": list(self.warnings),
            "overallQuality": self.overall_quality.value,
        }


def row_key(row: Mapping[str, Any]) -> frozenset:
    """Order-independent, hashable identity of a row's contents."""
    return frozenset((column, value_key(value)) for column, value in row.items())


def count_duplicate_rows(rows: Sequence[Mapping[str, Any]]) -> int:
    """Number of rows whose contents repeat an earlier row."""
    seen = set()
    duplicates = 0
    for row in rows:
        key = row_key(row)
        if key in seen:
            duplicates += 1
        else:
            seen.add(key)
    return duplicates


def _format_number(value: float) -> str:
    return f"{value:g}"


def assess_data_quality(
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[Any],
    high_missing_percentage: float = 50.0,
    low_variance_std: float = 0.001,
    high_cardinality_ratio: float = 0.8,
    duplicate_rows: Optional[int] = None,
) -> QualityAssessment:
    """
    Scan a profiled dataset for common data quality problems.

    Args:
        rows: Cleaned records
        columns: ColumnProfile objects for the same records
        high_missing_percentage: Warn above this share of missing cells
        low_variance_std: Warn for numeric columns with a smaller std
        high_cardinality_ratio: Warn for string columns with more distinct
            values than this share of the row count
        duplicate_rows: Precomputed duplicate count; counted from rows when None

    Returns:
        QualityAssessment
    """
    assessment = QualityAssessment()

    for col in columns:
        missing = col.missing_data
        if missing.missing == missing.total:
            assessment.issues.append(f"Column '{col.name}' is completely empty")
        elif missing.missing_percentage > high_missing_percentage:
            assessment.warnings.append(
                f"Column '{col.name}' has {_format_number(missing.missing_percentage)}% missing data"
            )

    duplicates = count_duplicate_rows(rows) if duplicate_rows is None else duplicate_rows
    if duplicates > 0:
        assessment.warnings.append(f"Found {duplicates} duplicate rows")

    for col in columns:
        if col.type not in NUMERIC_TYPES:
            continue
        std = getattr(col.stats, "std", None)
        if std is not None and std < low_variance_std:
            assessment.warnings.append(
                f"Column '{col.name}' has very low variance (std: {_format_number(std)})"
            )

    for col in columns:
        if col.type != "string":
            continue
        unique_count = getattr(col.stats, "unique_count", None)
        if unique_count is not None and unique_count > len(rows) * high_cardinality_ratio:
            assessment.warnings.append(
                f"Column '{col.name}' has high cardinality ({unique_count} unique values)"
            )

    return assessment
