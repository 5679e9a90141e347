"""
Rule-based chart recommendations.

Looks at how many numeric, categorical and date columns a profile has and
proposes the charts that make sense for that mix.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Sequence

NUMERIC_TYPES = ("integer", "float")
CATEGORICAL_TYPES = ("string", "boolean")
DATE_TYPES = ("date",)


class ChartPriority(IntEnum):
    """Ordinal priority; higher sorts first."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass
class ChartSuggestion:
    """A proposed visualization and the columns it should use."""

    type: str
    title: str
    description: str
    priority: ChartPriority
    required_columns: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "requiredColumns": dict(self.required_columns),
            "priority": self.priority.label,
        }


def _names_of(columns: Sequence[Any], types: Sequence[str]) -> List[str]:
    return [col.name for col in columns if col.type in types]


def suggest_chart_types(columns: Sequence[Any]) -> List[ChartSuggestion]:
    """
    Suggest chart types for a set of profiled columns.

    Args:
        columns: Objects exposing `name` and `type` (ColumnProfile)

    Returns:
        Suggestions sorted by priority, highest first; equal priorities keep
        rule order
    """
    numeric = _names_of(columns, NUMERIC_TYPES)
    categorical = _names_of(columns, CATEGORICAL_TYPES)
    dates = _names_of(columns, DATE_TYPES)

    suggestions: List[ChartSuggestion] = []

    if numeric:
        suggestions.append(ChartSuggestion(
            type="histogram",
            title="Distribution Analysis",
            description="Shows the distribution of numeric values",
            priority=ChartPriority.HIGH,
            required_columns={"x": numeric[0]},
        ))
        suggestions.append(ChartSuggestion(
            type="boxplot",
            title="Box Plot Analysis",
            description="Shows quartiles and outliers",
            priority=ChartPriority.MEDIUM,
            required_columns={"x": numeric[0]},
        ))

    if len(numeric) >= 2:
        suggestions.append(ChartSuggestion(
            type="scatter",
            title="Correlation Analysis",
            description="Shows relationship between two numeric variables",
            priority=ChartPriority.HIGH,
            required_columns={"x": numeric[0], "y": numeric[1]},
        ))

    if len(numeric) >= 3:
        suggestions.append(ChartSuggestion(
            type="heatmap",
            title="Correlation Matrix",
            description="Shows correlations between all numeric variables",
            priority=ChartPriority.MEDIUM,
        ))

    if categorical and numeric:
        suggestions.append(ChartSuggestion(
            type="bar",
            title="Category Comparison",
            description="Compare numeric values across categories",
            priority=ChartPriority.HIGH,
            required_columns={"x": categorical[0], "y": numeric[0]},
        ))

    if categorical:
        suggestions.append(ChartSuggestion(
            type="pie",
            title="Category Distribution",
            description="Shows proportion of each category",
            priority=ChartPriority.MEDIUM,
            required_columns={"x": categorical[0]},
        ))

    if dates and numeric:
        suggestions.append(ChartSuggestion(
            type="line",
            title="Time Series Analysis",
            description="Shows trends over time",
            priority=ChartPriority.HIGH,
            required_columns={"x": dates[0], "y": numeric[0]},
        ))

    # sorted() is stable
    return sorted(suggestions, key=lambda s: s.priority, reverse=True)
