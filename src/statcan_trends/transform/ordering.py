"""Display order for categorical levels.

Chart legends and facets read better when categories are ordered by a
summary statistic (largest exporter first, best-selling flower first).
The order is returned as an explicit list next to the unchanged table; no
categorical dtype is set on the table itself.
"""

import builtins
import logging
import math
from typing import Callable, List, NamedTuple, Sequence, Union

import numpy as np
import pandas as pd

from statcan_trends.contracts import assert_columns

__all__ = ['LevelOrder', 'reorder_levels', 'as_ordered']

logger = logging.getLogger(__name__)

Statistic = Union[str, Callable]

_BUILTIN_STATS = {
    builtins.max: "max",
    builtins.min: "min",
    builtins.sum: "sum",
}


class LevelOrder(NamedTuple):
    """Unmodified table plus the ordered distinct levels of one column."""
    table: pd.DataFrame
    levels: List


def _level_stats(table: pd.DataFrame, category_column: str, value_column: str,
                 statistic: Statistic) -> pd.Series:
    """Statistic per level, indexed in first-appearance order."""
    how = statistic if isinstance(statistic, str) else _BUILTIN_STATS.get(statistic, statistic)
    grouped = table.groupby(category_column, sort=False, observed=True, dropna=True)[value_column]
    if isinstance(how, str):
        return grouped.agg(how)
    return grouped.apply(how)


def reorder_levels(table: pd.DataFrame, category_column: str, value_column: str,
                   statistic: Statistic = max, descending: bool = True) -> LevelOrder:
    """Rank the distinct values of a category column by a statistic.

    Parameters
    ----------
    table : pd.DataFrame
        Any table; not modified.
    category_column : str
        Column whose distinct values are ranked.
    value_column : str
        Column the statistic is computed over, per level.
    statistic : str or callable, default max
        ``max``/``min``/``sum`` builtins, a pandas aggregation name
        ("mean", "median", "last", ...), or a callable taking a Series
        and returning a scalar.
    descending : bool, default True
        Largest statistic first.

    Returns
    -------
    LevelOrder
        ``(table, levels)``. Ties keep first-appearance order; levels whose
        statistic is NaN go last.

    Raises
    ------
    SchemaError
        If either column is absent.

    Examples
    --------
    >>> df = pd.DataFrame({"type": ["Rose", "Rose", "Tulip"],
    ...                    "value": [100, 300, 200]})
    >>> reorder_levels(df, "type", "value").levels
    ['Rose', 'Tulip']
    """
    assert_columns(table, [category_column, value_column], stage="Reorder")

    stats = _level_stats(table, category_column, value_column, statistic)

    def _rank_key(item):
        position, value = item
        value = float(value)
        if math.isnan(value):
            return (1, 0.0, position)
        return (0, -value if descending else value, position)

    ranked = sorted(enumerate(stats.to_numpy()), key=_rank_key)
    levels = [stats.index[pos] for pos, _ in ranked]
    levels = [lvl.item() if isinstance(lvl, np.generic) else lvl for lvl in levels]

    logger.debug("Level order for '%s' by %s(%s): %s", category_column,
                 getattr(statistic, "__name__", statistic), value_column, levels)
    return LevelOrder(table, levels)


def as_ordered(values: pd.Series, levels: Sequence) -> pd.Series:
    """Return a copy of values as an ordered Categorical with the given levels.

    Values not listed in levels become NaN in the result, so pass the levels
    computed from the same table.
    """
    return pd.Series(
        pd.Categorical(values, categories=list(levels), ordered=True),
        index=values.index,
        name=values.name,
    )
