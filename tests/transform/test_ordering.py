"""Tests for level ordering by statistic."""

import numpy as np
import pandas as pd
import pytest

pytestmark = pytest.mark.unit

from statcan_trends.contracts import SchemaError
from statcan_trends.transform import LevelOrder, as_ordered, reorder_levels


@pytest.fixture
def flowers():
    return pd.DataFrame(
        [
            ("Canada", "Sales", "Rose", 2007, 100),
            ("Canada", "Sales", "Rose", 2008, 300),
            ("Canada", "Sales", "Tulip", 2007, 200),
        ],
        columns=["geo", "output", "type", "year", "value"],
    )


def test_rose_tulip_example(flowers):
    result = reorder_levels(flowers, "type", "value")
    assert isinstance(result, LevelOrder)
    assert result.levels == ["Rose", "Tulip"]


def test_table_is_returned_unchanged(flowers):
    before = flowers.copy()
    result = reorder_levels(flowers, "type", "value")

    pd.testing.assert_frame_equal(result.table, before)
    assert "type" in result.table.columns
    assert result.table["type"].dtype == before["type"].dtype
    assert sorted(zip(result.table["type"], result.table["value"])) == \
        sorted(zip(before["type"], before["value"]))


def test_deterministic(flowers):
    assert reorder_levels(flowers, "type", "value").levels == \
        reorder_levels(flowers, "type", "value").levels


@pytest.mark.parametrize("statistic,descending,expected", [
    (max, True, ["Rose", "Tulip"]),
    (min, True, ["Tulip", "Rose"]),
    (min, False, ["Rose", "Tulip"]),
    (sum, True, ["Rose", "Tulip"]),
    ("mean", True, ["Rose", "Tulip"]),
    ("median", False, ["Rose", "Tulip"]),
])
def test_statistics(flowers, statistic, descending, expected):
    assert reorder_levels(flowers, "type", "value", statistic, descending).levels == expected


def test_callable_statistic(flowers):
    spread = lambda s: s.max() - s.min()
    assert reorder_levels(flowers, "type", "value", spread).levels == ["Rose", "Tulip"]


def test_ties_keep_first_appearance():
    df = pd.DataFrame({"k": ["B", "A", "C", "A"], "v": [5, 5, 7, 1]})
    assert reorder_levels(df, "k", "v").levels == ["C", "B", "A"]
    assert reorder_levels(df, "k", "v", descending=False).levels == ["B", "A", "C"]


def test_all_missing_level_goes_last():
    df = pd.DataFrame({"k": ["x", "y", "z"], "v": [np.nan, 1.0, 2.0]})
    assert reorder_levels(df, "k", "v").levels == ["z", "y", "x"]
    assert reorder_levels(df, "k", "v", descending=False).levels == ["y", "z", "x"]


def test_levels_are_native_python_values():
    df = pd.DataFrame({"year": [2007, 2008], "v": [1, 2]})
    levels = reorder_levels(df, "year", "v").levels
    assert levels == [2008, 2007]
    assert all(type(lvl) is int for lvl in levels)


def test_missing_column_raises(flowers):
    with pytest.raises(SchemaError):
        reorder_levels(flowers, "flower", "value")


def test_as_ordered(flowers):
    levels = reorder_levels(flowers, "type", "value").levels
    ordered = as_ordered(flowers["type"], levels)

    assert ordered.cat.ordered
    assert list(ordered.cat.categories) == ["Rose", "Tulip"]
    assert ordered.tolist() == flowers["type"].tolist()
    assert not isinstance(flowers["type"].dtype, pd.CategoricalDtype)
