"""Tests for data profiling module."""

import copy
import json

import pytest

from config.settings import AnalysisConfig
from core.profiling import (
    EmptyDatasetError,
    analyze_dataset,
    calculate_missing_data,
    detect_column_type,
    detect_outliers_iqr,
    normalize_column_name,
    normalize_columns,
    profile_column,
    profile_dataset,
)
from core.statistics import CategoricalStats, NumericStats


class TestDetectColumnType:
    """Tests for column type detection."""

    def test_detect_integer(self):
        assert detect_column_type(["1", "2", "3"]) == "integer"

    def test_detect_float(self):
        assert detect_column_type(["1.5", "2", 3]) == "float"

    def test_numeric_wins_over_boolean(self):
        assert detect_column_type(["1", "0", "1"]) == "integer"

    def test_detect_boolean_words(self):
        assert detect_column_type(["true", "No", "YES"]) == "boolean"

    def test_detect_native_boolean(self):
        assert detect_column_type([True, False, True]) == "boolean"

    def test_detect_date(self):
        assert detect_column_type(["2023-01-01", "2023-02-15", "2024-12-31"]) == "date"

    def test_detect_string(self):
        assert detect_column_type(["apple", "banana"]) == "string"

    def test_one_bad_value_falls_back_to_string(self):
        assert detect_column_type(["1", "2", "apple"]) == "string"

    def test_missing_values_are_ignored(self):
        assert detect_column_type([1, None, "", "2"]) == "integer"

    def test_detect_unknown(self):
        assert detect_column_type([None, "", None]) == "unknown"


class TestMissingData:
    """Tests for missingness analysis."""

    def test_counts_every_missing_form(self):
        missing = calculate_missing_data([1, None, "", "  ", float("nan")])

        assert missing.total == 5
        assert missing.missing == 4
        assert missing.present == 1
        assert missing.missing_percentage == 80.0
        assert missing.present_percentage == 20.0

    def test_percentages_sum_to_100(self):
        missing = calculate_missing_data([None, 1, 2])

        assert missing.missing + missing.present == missing.total
        assert missing.missing_percentage + missing.present_percentage == pytest.approx(100, abs=0.01)

    def test_empty_column_is_zero_percent(self):
        missing = calculate_missing_data([])

        assert missing.total == 0
        assert missing.missing_percentage == 0
        assert missing.present_percentage == 0


class TestDetectOutliers:
    """Tests for outlier detection."""

    def test_detect_outliers_iqr(self):
        outliers = detect_outliers_iqr(["1", "2", "3", "4", "100"])
        assert outliers == [100]

    def test_four_values_fence_uses_nearest_rank_q3(self):
        # With four values floor(4 * 0.75) selects the maximum as Q3
        assert detect_outliers_iqr(["1", "2", "3", "100"]) == []

    def test_fewer_than_four_values(self):
        assert detect_outliers_iqr([1, 2, 1000]) == []

    def test_duplicates_are_kept(self):
        values = [0] * 20 + [50, 50]
        assert detect_outliers_iqr(values) == [50, 50]

    def test_low_outliers(self):
        assert detect_outliers_iqr([-500, 10, 11, 12, 13, 14]) == [-500]

    def test_custom_multiplier(self):
        values = [1, 2, 3, 4, 5, 6, 7, 8, 20]
        assert detect_outliers_iqr(values) == [20]
        assert detect_outliers_iqr(values, multiplier=4.0) == []


class TestNormalizeColumns:
    """Tests for header normalization."""

    def test_normalize_column_name(self):
        assert normalize_column_name("  First Name ") == "first_name"
        assert normalize_column_name("Order\t Date") == "order_date"

    def test_colliding_names_get_suffix(self):
        names, rows = normalize_columns([{"A b": 1, "a_b": 2}])

        assert names == ["a_b", "a_b_2"]
        assert rows == [{"a_b": 1, "a_b_2": 2}]

    def test_blank_header_gets_positional_name(self):
        names, _ = normalize_columns([{"": 1, "x": 2}])
        assert names == ["column_1", "x"]

    def test_missing_keys_become_none(self):
        names, rows = normalize_columns([{"a": 1, "b": 2}, {"a": 3}])

        assert names == ["a", "b"]
        assert rows[1] == {"a": 3, "b": None}


class TestProfileColumn:
    """Tests for column profiling."""

    def test_numeric_column(self):
        profile = profile_column("v", ["1", "2", "3", "4", "100", None])

        assert profile.type == "integer"
        assert profile.is_numeric
        assert isinstance(profile.stats, NumericStats)
        assert profile.outliers == [100]
        assert profile.missing_data.missing == 1

    def test_boolean_column_gets_frequency_table(self):
        profile = profile_column("flag", ["yes", "no", "yes"])

        assert profile.type == "boolean"
        assert isinstance(profile.stats, CategoricalStats)
        assert profile.stats.mode == "yes"
        assert profile.outliers == []

    def test_outliers_capped_for_display(self):
        values = [0] * 100 + [5] * 15
        profile = profile_column("v", values)

        assert len(profile.outliers) == 10

    def test_display_limit_is_configurable(self):
        values = [0] * 100 + [5] * 15
        profile = profile_column("v", values, AnalysisConfig(outlier_display_limit=3))

        assert profile.outliers == [5, 5, 5]

    def test_sample_values_are_distinct_and_limited(self):
        profile = profile_column("c", ["a", "a", None, "b", "c", "d", "e", "f"])
        assert profile.sample_values == ["a", "b", "c", "d", "e"]


class TestProfileDataset:
    """Tests for dataset profiling."""

    def test_integer_and_string_columns(self, scenario_rows):
        profile = profile_dataset(scenario_rows)
        a, b = profile.columns

        assert a.type == "integer"
        assert a.stats.mean == 2
        assert a.stats.median == 2
        assert b.type == "string"
        assert b.stats.mode == "x"
        assert b.stats.mode_frequency == 2

    def test_default_filename(self, scenario_rows):
        assert profile_dataset(scenario_rows).filename == "dataset"
        assert analyze_dataset(scenario_rows, "sales.csv").filename == "sales.csv"

    def test_iqr_outlier_flagged(self):
        rows = [{"v": v} for v in ("1", "2", "3", "4", "100")]
        profile = profile_dataset(rows)

        assert profile.column("v").outliers == [100]

    def test_completely_empty_column(self):
        rows = [{"a": "1", "e": ""}, {"a": "2", "e": ""}, {"a": "5", "e": ""}]
        profile = profile_dataset(rows)
        empty = profile.column("e")

        assert empty.type == "unknown"
        assert empty.missing_data.missing == empty.missing_data.total
        assert "Column 'e' is completely empty" in profile.quality_assessment.issues
        assert profile.quality_assessment.overall_quality.value == "poor"

    @pytest.mark.parametrize("rows", [[], None, [{}]])
    def test_empty_dataset_raises(self, rows):
        with pytest.raises(EmptyDatasetError, match="empty"):
            profile_dataset(rows)

    def test_perfect_correlation(self):
        rows = [{"x": x, "y": y} for x, y in zip([1, 2, 3, 4], [2, 4, 6, 8])]
        profile = profile_dataset(rows)

        assert profile.correlations["x"]["y"] == 1.0
        assert profile.correlations["y"]["x"] == 1.0

    def test_no_correlations_with_single_numeric_column(self, scenario_rows):
        assert profile_dataset(scenario_rows).correlations == {}

    def test_column_names_normalized_and_input_untouched(self, sample_mixed_rows):
        original = copy.deepcopy(sample_mixed_rows)
        profile = profile_dataset(sample_mixed_rows)

        assert profile.column_names == ["revenue", "region_name", "active", "order_date", "notes"]
        assert sample_mixed_rows == original
        assert "Revenue" not in profile.data[0]

    def test_mixed_types_and_summary(self, sample_mixed_rows):
        profile = profile_dataset(sample_mixed_rows)
        types = {col.name: col.type for col in profile.columns}

        assert types == {
            "revenue": "float",
            "region_name": "string",
            "active": "boolean",
            "order_date": "date",
            "notes": "string",
        }
        assert profile.summary.total_rows == 50
        assert profile.summary.total_columns == 5
        assert profile.summary.numeric_columns == 1
        assert profile.summary.categorical_columns == 3
        assert profile.summary.date_columns == 1
        assert profile.data_types == {"float": 1, "string": 2, "boolean": 1, "date": 1}

    def test_summary_missing_average(self, rows_with_missing):
        profile = profile_dataset(rows_with_missing)
        # complete 0%, partial 30%, sparse 70%
        assert profile.summary.missing_data_percentage == pytest.approx(33.33)

    def test_duplicate_rows_counted(self, scenario_rows):
        profile = profile_dataset(scenario_rows + [dict(scenario_rows[0])])

        assert profile.summary.duplicate_rows == 1
        assert "Found 1 duplicate rows" in profile.quality_assessment.warnings

    def test_int_beyond_float_range_does_not_abort(self):
        profile = profile_dataset([{"v": 10**400}, {"v": 1}])
        column = profile.column("v")

        assert column.type == "string"
        assert column.stats.count == 2
        json.dumps(profile.to_dict(), allow_nan=False)

    def test_each_call_returns_independent_profile(self, scenario_rows):
        first = profile_dataset(scenario_rows)
        second = profile_dataset(scenario_rows)

        assert first is not second
        assert first.data is not second.data
        first.data[0]["a"] = "changed"
        assert second.data[0]["a"] == "1"

    def test_to_dict_is_json_safe(self):
        rows = [
            {"v": 1.5, "w": float("nan"), "t": "a"},
            {"v": float("inf"), "w": 2.5, "t": "b"},
            {"v": 3.0, "w": 3, "t": "a"},
        ]
        data = profile_dataset(rows, "odd.csv").to_dict()
        text = json.dumps(data, allow_nan=False)

        assert set(data) == {
            "filename", "data", "columns", "summary", "correlations",
            "chartSuggestions", "qualityAssessment", "metadata",
        }
        assert json.loads(text)["data"][0]["w"] is None
        assert data["metadata"]["dataTypes"]["float"] == 1
        assert "analyzedAt" in data["metadata"]

    def test_column_invariants(self, sample_mixed_rows, rows_with_missing):
        for rows in (sample_mixed_rows, rows_with_missing):
            for col in profile_dataset(rows).columns:
                missing = col.missing_data
                assert missing.missing + missing.present == missing.total
                assert missing.missing_percentage + missing.present_percentage == pytest.approx(100, abs=0.01)
                if col.is_numeric and col.stats.count:
                    stats = col.stats
                    assert stats.min <= stats.q1 <= stats.median <= stats.q3 <= stats.max
