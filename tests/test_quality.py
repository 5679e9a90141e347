"""Tests for data quality assessment."""

import pytest

from core.profiling import profile_dataset
from core.quality import QualityAssessment, QualityVerdict, assess_data_quality, count_duplicate_rows


class TestDuplicateRows:
    """Tests for duplicate detection."""

    def test_identical_rows(self):
        rows = [{"a": 1, "b": "x"}, {"a": 1, "b": "x"}, {"a": 2, "b": "x"}]
        assert count_duplicate_rows(rows) == 1

    def test_key_order_does_not_matter(self):
        assert count_duplicate_rows([{"a": 1, "b": 2}, {"b": 2, "a": 1}]) == 1

    def test_types_are_distinguished(self):
        assert count_duplicate_rows([{"a": 1}, {"a": True}, {"a": "1"}]) == 0

    def test_nan_matches_none(self):
        assert count_duplicate_rows([{"a": float("nan")}, {"a": None}]) == 1


class TestVerdict:
    """Tests for the overall grade."""

    def test_excellent(self):
        assert QualityAssessment().overall_quality == QualityVerdict.EXCELLENT

    def test_good(self):
        assert QualityAssessment(warnings=["w"]).overall_quality == QualityVerdict.GOOD

    def test_poor_regardless_of_warnings(self):
        assessment = QualityAssessment(issues=["i"], warnings=["w1", "w2"])
        assert assessment.overall_quality == QualityVerdict.POOR
        assert assessment.to_dict()["overallQuality"] == "poor"


class TestAssessDataQuality:
    """Tests for issue and warning detection on profiled data."""

    def test_clean_dataset_is_excellent(self, scenario_rows):
        assessment = profile_dataset(scenario_rows).quality_assessment

        assert assessment.issues == []
        assert assessment.warnings == []
        assert assessment.overall_quality == QualityVerdict.EXCELLENT

    def test_high_missing_warning(self):
        rows = [{"a": 1, "b": None}, {"a": 2, "b": None}, {"a": 3, "b": 4}]
        assessment = profile_dataset(rows).quality_assessment

        assert "Column 'b' has 66.67% missing data" in assessment.warnings
        assert assessment.overall_quality == QualityVerdict.GOOD

    def test_empty_column_is_not_also_a_missing_warning(self):
        rows = [{"a": 1, "b": None}, {"a": 2, "b": ""}]
        assessment = profile_dataset(rows).quality_assessment

        assert assessment.issues == ["Column 'b' is completely empty"]
        assert not any("missing data" in w for w in assessment.warnings)

    def test_low_variance_warning(self):
        rows = [{"c": 7, "k": i} for i in range(5)]
        assessment = profile_dataset(rows).quality_assessment

        assert "Column 'c' has very low variance (std: 0)" in assessment.warnings

    def test_high_cardinality_warning(self):
        rows = [{"id": f"user_{i}", "n": i % 2} for i in range(10)]
        assessment = profile_dataset(rows).quality_assessment

        assert "Column 'id' has high cardinality (10 unique values)" in assessment.warnings

    def test_thresholds_are_configurable(self):
        from config.settings import AnalysisConfig

        rows = [{"id": f"user_{i}", "n": i % 3} for i in range(10)]
        assessment = profile_dataset(rows, config=AnalysisConfig(high_cardinality_ratio=1.0)).quality_assessment

        assert assessment.warnings == []

    @pytest.mark.parametrize("extra", [{}, {"dup": True}])
    def test_any_empty_column_is_poor(self, extra):
        rows = [{"a": i, "e": None, **extra} for i in range(4)]
        assert profile_dataset(rows).quality_assessment.overall_quality == QualityVerdict.POOR

    def test_precomputed_duplicate_count_is_used(self, scenario_rows):
        rows = scenario_rows + [dict(scenario_rows[0])]
        columns = profile_dataset(rows).columns

        counted = assess_data_quality(rows, columns)
        supplied = assess_data_quality(rows, columns, duplicate_rows=0)

        assert "Found 1 duplicate rows" in counted.warnings
        assert supplied.warnings == []
