"""Tests for the summary/detail partition."""

import numpy as np
import pandas as pd
import pytest

pytestmark = pytest.mark.unit

from statcan_trends.contracts import SchemaError
from statcan_trends.transform import contains_ci, partition, split_rows


@pytest.fixture
def exports():
    return pd.DataFrame({
        "destination": [
            "Total exports, all destinations", "Germany", "TOTAL EU", None,
            "United States", "Japan", "Subtotal", "China",
        ],
        "commodity": ["Wheat", "Wheat", "Wheat", "Wheat", "Wheat", "Barley", "Barley", None],
        "value": [5.0, 3.0, 2.0, 1.0, np.nan, 4.0, 6.0, 7.0],
    })


def test_total_exports_example():
    df = pd.DataFrame({
        "destination": ["Total exports, all destinations", "Germany"],
        "value": [5, 3],
    })
    matched, unmatched = partition(df, "destination", contains_ci("total"))

    assert matched.to_dict("records") == [
        {"destination": "Total exports, all destinations", "value": 5}
    ]
    assert unmatched.to_dict("records") == [{"destination": "Germany", "value": 3}]


def test_predicate_is_case_insensitive(exports):
    matched, _ = split_rows(exports, "destination", contains_ci("total"))
    assert set(matched["destination"]) == {
        "Total exports, all destinations", "TOTAL EU", "Subtotal",
    }


def test_string_predicate_matches_like_contains_ci(exports):
    by_str = split_rows(exports, "destination", "Total")
    by_fn = split_rows(exports, "destination", contains_ci("total"))
    pd.testing.assert_frame_equal(by_str[0], by_fn[0])
    pd.testing.assert_frame_equal(by_str[1], by_fn[1])


def test_substring_is_literal_not_regex():
    df = pd.DataFrame({"c": ["a.b", "axb"], "v": [1, 2]})
    matched, unmatched = partition(df, "c", "a.b")
    assert matched["c"].tolist() == ["a.b"]
    assert unmatched["c"].tolist() == ["axb"]


def test_split_is_disjoint_and_covers_keyed_rows(exports):
    matched, unmatched = split_rows(exports, "destination", "total")

    keyed = exports[exports["destination"].notna()]
    assert matched.index.intersection(unmatched.index).empty
    assert sorted(matched.index.tolist() + unmatched.index.tolist()) == keyed.index.tolist()


def test_missing_category_rows_excluded_from_both(exports):
    matched, unmatched = split_rows(exports, "destination", "total")
    assert matched["destination"].notna().all()
    assert unmatched["destination"].notna().all()
    assert len(matched) + len(unmatched) == len(exports) - 1


def test_completeness_filter_applies_to_each_partition(exports):
    matched, unmatched = partition(exports, "destination", "total")

    # "United States" has no value and "China" has no commodity
    assert unmatched["destination"].tolist() == ["Germany", "Japan"]
    assert matched["destination"].tolist() == [
        "Total exports, all destinations", "TOTAL EU", "Subtotal",
    ]
    assert not matched.isna().any().any()
    assert not unmatched.isna().any().any()
    assert matched.index.tolist() == list(range(len(matched)))


def test_no_match_gives_empty_matched(exports):
    matched, unmatched = partition(exports, "destination", "nothing like this")

    assert matched.empty
    assert list(matched.columns) == list(exports.columns)
    assert len(unmatched) == 5


def test_callable_predicate(exports):
    matched, _ = partition(exports, "commodity", lambda s: s == "Barley")
    assert set(matched["commodity"]) == {"Barley"}


def test_duplicate_index_labels_are_handled():
    df = pd.DataFrame({"c": ["Total", "x", "y"], "v": [1, 2, 3]}, index=[0, 0, 0])
    matched, unmatched = split_rows(df, "c", "total")
    assert len(matched) == 1
    assert len(unmatched) == 2


def test_input_not_modified(exports):
    before = exports.copy()
    partition(exports, "destination", "total")
    pd.testing.assert_frame_equal(exports, before)


def test_missing_category_column_raises(exports):
    with pytest.raises(SchemaError, match="destinations"):
        partition(exports, "destinations", "total")
