"""Separate summary/total rows from detail rows.

StatCan tables mix aggregate rows ("Total exports, all destinations",
"Total cut flowers") with the detail rows they summarise. Charting or
summing both double counts, so every table is split on its category column
before aggregation.
"""

import logging
from typing import Callable, Tuple, Union

import pandas as pd

from statcan_trends.contracts import assert_columns, assert_partitioned

__all__ = ['contains_ci', 'split_rows', 'partition']

logger = logging.getLogger(__name__)

Predicate = Callable[[pd.Series], pd.Series]


def contains_ci(substring: str) -> Predicate:
    """Build a case-insensitive, literal substring predicate.

    Examples
    --------
    >>> is_total = contains_ci("total")
    >>> is_total(pd.Series(["Total exports, all destinations", "Germany"])).tolist()
    [True, False]
    """
    def _predicate(values: pd.Series) -> pd.Series:
        return values.astype(str).str.contains(substring, case=False, regex=False)

    _predicate.__name__ = f"contains_ci({substring!r})"
    return _predicate


def _as_predicate(predicate: Union[str, Predicate]) -> Predicate:
    if isinstance(predicate, str):
        return contains_ci(predicate)
    return predicate


def split_rows(table: pd.DataFrame, category_column: str,
               predicate: Union[str, Predicate]) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split rows on the predicate without the completeness filter.

    Rows whose category value is missing are left out of both outputs.
    The outputs keep the index labels of the input table, unless those
    labels repeat, in which case a positional index is used.

    Parameters
    ----------
    table : pd.DataFrame
        Normalized table.
    category_column : str
        Column the predicate is evaluated on.
    predicate : str or callable
        Substring matched case-insensitively, or a callable mapping the
        category Series to a boolean mask.

    Returns
    -------
    (matched, unmatched) : tuple of pd.DataFrame

    Raises
    ------
    SchemaError
        If category_column is absent.
    """
    assert_columns(table, [category_column], stage="Partition")
    test = _as_predicate(predicate)

    # Row identity is tracked by index label.
    if not table.index.is_unique:
        table = table.reset_index(drop=True)

    keyed = table[table[category_column].notna()]
    mask = test(keyed[category_column]).fillna(False).astype(bool)

    matched = keyed[mask].copy()
    unmatched = keyed[~mask].copy()
    assert_partitioned(keyed, matched, unmatched)

    dropped = len(table) - len(keyed)
    if dropped:
        logger.debug("Partition: %d row(s) without '%s' excluded", dropped, category_column)
    return matched, unmatched


def partition(table: pd.DataFrame, category_column: str,
              predicate: Union[str, Predicate]) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split a table into summary (matched) and detail (unmatched) rows.

    After splitting, each partition independently drops every row that has
    a missing value in any column.

    Returns
    -------
    (matched, unmatched) : tuple of pd.DataFrame
        Fresh frames with a reset index. ``matched`` is empty, not an
        error, when nothing matches.

    Examples
    --------
    >>> df = pd.DataFrame({"destination": ["Total exports, all destinations", "Germany"],
    ...                    "value": [5, 3]})
    >>> totals, detail = partition(df, "destination", "total")
    >>> totals["value"].tolist(), detail["value"].tolist()
    ([5], [3])
    """
    matched, unmatched = split_rows(table, category_column, predicate)

    matched_complete = matched.dropna().reset_index(drop=True)
    unmatched_complete = unmatched.dropna().reset_index(drop=True)

    logger.info(
        "Partition on '%s': %d matched (%d incomplete dropped), %d unmatched (%d incomplete dropped)",
        category_column,
        len(matched_complete), len(matched) - len(matched_complete),
        len(unmatched_complete), len(unmatched) - len(unmatched_complete),
    )
    return matched_complete, unmatched_complete
