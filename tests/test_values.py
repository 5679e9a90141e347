"""Tests for raw cell conversions."""

import math

import pandas as pd
import pytest

from core.values import (
    ScalarKind,
    classify_scalar,
    is_missing,
    json_safe,
    stringify,
    to_boolean,
    to_datetime,
    to_number,
    value_key,
)


class TestIsMissing:
    """Tests for missing-value detection."""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t", float("nan")])
    def test_missing_values(self, value):
        assert is_missing(value)

    @pytest.mark.parametrize("value", [0, 0.0, False, "0", "x", float("inf")])
    def test_present_values(self, value):
        assert not is_missing(value)


class TestToNumber:
    """Tests for numeric conversion."""

    def test_numeric_strings(self):
        assert to_number("42") == 42.0
        assert to_number(" 3.5 ") == 3.5
        assert to_number("1e3") == 1000.0
        assert to_number("-7") == -7.0

    def test_native_numbers(self):
        assert to_number(5) == 5.0
        assert to_number(2.25) == 2.25

    def test_rejects_non_finite(self):
        assert to_number(float("inf")) is None
        assert to_number("Infinity") is None
        assert to_number("NaN") is None
        assert to_number(float("nan")) is None

    def test_rejects_text_and_booleans(self):
        assert to_number("abc") is None
        assert to_number("1_000") is None
        assert to_number("") is None
        assert to_number(True) is None
        assert to_number(None) is None

    def test_int_beyond_float_range(self):
        assert to_number(10**400) is None


class TestToBoolean:
    """Tests for boolean conversion."""

    def test_boolean_words(self):
        assert to_boolean("TRUE") is True
        assert to_boolean("yes") is True
        assert to_boolean("No") is False
        assert to_boolean("0") is False

    def test_native_booleans(self):
        assert to_boolean(True) is True
        assert to_boolean(False) is False

    def test_other_values(self):
        assert to_boolean("maybe") is None
        assert to_boolean(1) is None


class TestToDatetime:
    """Tests for date conversion."""

    def test_iso_string(self):
        assert to_datetime("2023-01-15") == pd.Timestamp("2023-01-15")

    def test_unparseable_string(self):
        assert to_datetime("hello world") is None

    def test_booleans_are_not_dates(self):
        assert to_datetime(True) is None

    def test_missing(self):
        assert to_datetime("") is None
        assert to_datetime(None) is None


class TestClassifyScalar:
    """Tests for scalar kind tagging."""

    def test_kinds(self):
        assert classify_scalar(None) == ScalarKind.NULL
        assert classify_scalar("") == ScalarKind.NULL
        assert classify_scalar(True) == ScalarKind.BOOLEAN
        assert classify_scalar(3) == ScalarKind.INTEGER
        assert classify_scalar(3.5) == ScalarKind.FLOAT
        assert classify_scalar(pd.Timestamp("2023-01-01")) == ScalarKind.DATE
        assert classify_scalar("hello") == ScalarKind.STRING


class TestStringifyAndKeys:
    """Tests for display strings and identity keys."""

    def test_stringify(self):
        assert stringify(True) == "true"
        assert stringify(2.0) == "2"
        assert stringify(2.5) == "2.5"
        assert stringify("x") == "x"
        assert stringify(None) == "null"

    def test_value_key_separates_types(self):
        assert value_key(True) != value_key(1)
        assert value_key("1") != value_key(1)
        assert value_key(1) == value_key(1.0)
        assert value_key(float("nan")) == value_key(None)

    def test_huge_ints_keep_their_digits(self):
        huge = 10**400

        assert stringify(huge) == str(huge)
        assert value_key(huge) == value_key(10**400)
        assert value_key(huge) != value_key(huge + 1)

    def test_json_safe(self):
        assert json_safe(float("nan")) is None
        assert json_safe(float("inf")) is None
        assert json_safe(1.5) == 1.5
        assert json_safe(pd.Timestamp("2023-01-01")) == "2023-01-01T00:00:00"
        assert not isinstance(json_safe(1), bool)
        assert math.isclose(json_safe(0.1), 0.1)
