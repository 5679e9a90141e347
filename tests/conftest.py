"""Test fixtures and configuration for pytest."""

import pytest
import numpy as np


@pytest.fixture
def scenario_rows():
    """Small mixed dataset: integer column and string column."""
    return [
        {"a": "1", "b": "x"},
        {"a": "2", "b": "y"},
        {"a": "3", "b": "x"},
    ]


@pytest.fixture
def sample_numeric_rows():
    """Three numeric columns, one of them an exact multiple of another."""
    np.random.seed(42)
    var1 = np.random.normal(100, 15, 100)
    var3 = np.random.exponential(2, 100)
    return [
        {"var1": float(v1), "var2": float(v1 * 2), "var3": float(v3)}
        for v1, v3 in zip(var1, var3)
    ]


@pytest.fixture
def sample_mixed_rows():
    """Numeric, categorical, boolean, text and date columns."""
    np.random.seed(42)
    numeric = np.random.normal(100, 15, 50)
    categories = np.random.choice(["A", "B", "C"], 50)
    flags = np.random.choice([True, False], 50)
    return [
        {
            "Revenue": float(numeric[i]),
            "Region Name": str(categories[i]),
            "active": bool(flags[i]),
            "order date": f"2023-01-{(i % 28) + 1:02d}",
            "notes": f"text_{i}",
        }
        for i in range(50)
    ]


@pytest.fixture
def rows_with_missing():
    """Columns with no, some and mostly missing values."""
    return [
        {"complete": i, "partial": (i if i % 4 else None), "sparse": (i if i < 3 else "")}
        for i in range(10)
    ]
