"""Annual and quarterly rollups of long-format tables.

A rollup sums a measure over every (category key..., period) combination
present in the input. Periods with no rows stay absent: gaps are never
filled with zeros, and rows whose measure is missing are dropped before
summing rather than counted as zero.
"""

import logging
from typing import Literal, Optional, Sequence

import pandas as pd

from statcan_trends.contracts import (
    ParseError,
    assert_columns,
    assert_keys_present,
    assert_numeric,
    assert_rolled_up,
)
from statcan_trends.transform.periods import to_period, to_year

__all__ = ['rollup', 'period_keys']

logger = logging.getLogger(__name__)

Freq = Literal["year", "quarter"]


def period_keys(freq: Freq) -> list:
    """Output column names that identify a period at this frequency."""
    if freq == "year":
        return ["year"]
    if freq == "quarter":
        return ["year", "quarter"]
    raise ValueError(f"Unknown rollup frequency: {freq}")


def _derive_periods(values: pd.Series, freq: Freq) -> pd.DataFrame:
    """Turn a date-like column into year (and quarter) key columns."""
    if pd.api.types.is_datetime64_any_dtype(values):
        if values.isna().any():
            raise ParseError(f"Missing date in '{values.name}'")
        out = pd.DataFrame({"year": values.dt.year.astype("int64")}, index=values.index)
        if freq == "quarter":
            out["quarter"] = values.dt.quarter.astype("int64")
        return out

    if pd.api.types.is_integer_dtype(values):
        if values.isna().any():
            raise ParseError(f"Missing year in '{values.name}'")
        if freq == "quarter":
            raise ParseError(f"'{values.name}' holds plain years; cannot derive quarters")
        return pd.DataFrame({"year": values.astype("int64")}, index=values.index)

    uniques = pd.unique(values)
    if freq == "year":
        years = {v: to_year(v) for v in uniques}
        return pd.DataFrame({"year": values.map(years).astype("int64")}, index=values.index)

    parsed = {v: to_period(v) for v in uniques}
    return pd.DataFrame(
        {
            "year": values.map(lambda v: parsed[v].year).astype("int64"),
            "quarter": values.map(lambda v: parsed[v].quarter).astype("int64"),
        },
        index=values.index,
    )


def rollup(table: pd.DataFrame, group_columns: Sequence[str],
           period_column: Optional[str], measure_column: str,
           freq: Freq = "year") -> pd.DataFrame:
    """Sum a measure per (group_columns..., period).

    Parameters
    ----------
    table : pd.DataFrame
        Detail rows (usually the unmatched output of partition()).

    group_columns : sequence of str
        Category key columns. They remain keys in the output.

    period_column : str or None
        Column holding ``"YYYY-MM"``/``"YYYY"`` strings, integer years, or
        timestamps. None groups by the category key only, producing one
        grand total per key.

    measure_column : str
        Numeric column to sum.

    freq : {"year", "quarter"}, default "year"
        Period granularity. "year" adds a ``year`` key column; "quarter"
        adds ``year`` and ``quarter``.

    Returns
    -------
    pd.DataFrame
        Columns ``[*group_columns, *period keys, measure_column]``, one row
        per distinct key combination, sorted by group key then period.

    Raises
    ------
    SchemaError
        If a column is missing or the measure is not numeric,
        or a group column has a missing value.
    ParseError
        If a period value is malformed.

    Examples
    --------
    >>> rollup(detail, ["destination", "commodity"], "date", "value")
    >>> rollup(detail, ["destination"], None, "value")  # grand totals
    """
    group_columns = list(group_columns)
    needed = group_columns + [measure_column]
    if period_column is not None:
        needed.append(period_column)
    assert_columns(table, needed, stage="Rollup")
    assert_numeric(table, measure_column, stage="Rollup")
    assert_keys_present(table, group_columns, stage="Rollup")

    work = table[group_columns + [measure_column]].copy()
    keys = list(group_columns)
    if period_column is not None:
        periods = _derive_periods(table[period_column], freq)
        for col in periods.columns:
            work[col] = periods[col]
            if col not in keys:
                keys.append(col)

    missing = int(work[measure_column].isna().sum())
    if missing:
        logger.debug("Rollup: dropping %d row(s) with missing '%s'", missing, measure_column)
        work = work[work[measure_column].notna()]

    if not keys:
        totals = [work[measure_column].sum()] if len(work) else []
        out = pd.DataFrame({measure_column: totals})
    else:
        out = (
            work.groupby(keys, sort=True, observed=True)[measure_column]
            .sum()
            .reset_index()
        )

    assert_rolled_up(out, keys, measure_column)
    logger.info("Rollup by %s: %d input rows -> %d groups", keys, len(work), len(out))
    return out
