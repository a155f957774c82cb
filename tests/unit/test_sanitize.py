"""
Unit tests for missing-value sanitization (pipette.sanitize).
"""

import numpy as np
import pandas as pd
import pytest

import pipette
from pipette.sanitize import is_na_string, sanitize_na


class TestStrings:
    @pytest.mark.parametrize("value", ["", " ", "\t ", "NA", "NULL", "none available"])
    def test_missing(self, value):
        assert is_na_string(value)
        assert sanitize_na(value) is None

    @pytest.mark.parametrize("value", ["x", "na", "N/A", "NAs", " NA", "none"])
    def test_kept(self, value):
        assert sanitize_na(value) == value


class TestSeries:
    def test_strings_replaced_index_kept(self):
        s = pd.Series(["1", "x", "", "NA", "NULL"], index=list("abcde"))
        out = sanitize_na(s)
        assert list(out.index) == list("abcde")
        assert out.iloc[:2].tolist() == ["1", "x"]
        assert out.iloc[2:].isna().all()

    def test_input_not_modified(self):
        s = pd.Series(["NA", "y"])
        sanitize_na(s)
        assert s.tolist() == ["NA", "y"]

    def test_numeric_untouched(self):
        s = pd.Series([1.0, 2.0])
        assert sanitize_na(s).tolist() == [1.0, 2.0]

    def test_categorical_drops_na_levels(self):
        s = pd.Series(pd.Categorical(["a", "NA", "b", " "]))
        out = sanitize_na(s)
        assert list(out.cat.categories) == ["a", "b"]
        assert out.isna().tolist() == [False, True, False, True]


class TestDataFrame:
    def test_string_columns_only(self):
        df = pd.DataFrame(
            {"a": ["foo", ""], "b": [np.nan, "bar"], "n": [1, 2]},
            index=["c", "d"],
        )
        out = sanitize_na(df)
        assert list(out.index) == ["c", "d"]
        assert list(out.columns) == ["a", "b", "n"]
        assert out.loc["c", "a"] == "foo"
        assert pd.isna(out.loc["d", "a"])
        assert out.loc["d", "b"] == "bar"
        assert out["n"].tolist() == [1, 2]

    def test_whitespace_and_none_available(self):
        df = pd.DataFrame({"a": ["   ", "none available", "ok"]})
        assert sanitize_na(df)["a"].isna().tolist() == [True, True, False]


class TestOtherObjects:
    def test_returned_unchanged(self):
        obj = [1, "NA"]
        assert sanitize_na(obj) is obj
        assert sanitize_na(3) == 3

    def test_exported(self):
        assert pipette.sanitize_na is sanitize_na
