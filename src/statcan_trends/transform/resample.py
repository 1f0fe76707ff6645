"""Monthly to quarterly conversion and splicing of overlapping series.

Some StatCan series were discontinued and continued under a new table at a
different frequency (soft-drink production: quarterly 1950-1977, monthly
1976-1995). The monthly series is summed to quarters, then only the
quarters after the end of the older series are appended to it.
"""

import logging
from typing import Literal

import pandas as pd

from statcan_trends.contracts import assert_columns, assert_numeric, assert_no_overlap
from statcan_trends.transform.periods import as_timestamps

__all__ = ['upsample_to_quarter', 'append_after']

logger = logging.getLogger(__name__)

CutoffPolicy = Literal["after_base_max", "fill_gaps"]


def upsample_to_quarter(table: pd.DataFrame, date_column: str,
                        measure_column: str) -> pd.DataFrame:
    """Sum a monthly measure into calendar quarters.

    Parameters
    ----------
    table : pd.DataFrame
        Rows dated by ``"YYYY-MM"`` strings or timestamps.
    date_column : str
        Date column; in the output it holds the first day of each quarter.
    measure_column : str
        Numeric column to sum. Rows with a missing measure are dropped.

    Returns
    -------
    pd.DataFrame
        Columns ``[date_column, measure_column]``, one row per quarter
        present in the input, ascending by date.

    Raises
    ------
    SchemaError
        If a column is missing or the measure is not numeric.
    ParseError
        If a date is malformed.
    """
    assert_columns(table, [date_column, measure_column], stage="Upsample")
    assert_numeric(table, measure_column, stage="Upsample")

    dates = as_timestamps(table[date_column])
    work = pd.DataFrame({
        "year": dates.dt.year,
        "quarter": dates.dt.quarter,
        measure_column: table[measure_column],
    })
    work = work[work[measure_column].notna()]

    summed = work.groupby(["year", "quarter"], sort=True)[measure_column].sum().reset_index()
    quarter_starts = pd.Series(
        [pd.Timestamp(int(y), 3 * (int(q) - 1) + 1, 1)
         for y, q in zip(summed["year"], summed["quarter"])],
        dtype="datetime64[ns]",
    )

    out = pd.DataFrame({
        date_column: quarter_starts,
        measure_column: summed[measure_column].to_numpy(),
    })
    logger.info("Upsample: %d monthly rows -> %d quarters", len(work), len(out))
    return out


def append_after(base_table: pd.DataFrame, new_table: pd.DataFrame,
                 date_column: str,
                 cutoff_policy: CutoffPolicy = "after_base_max") -> pd.DataFrame:
    """Append rows of a newer series that extend an older one.

    Parameters
    ----------
    base_table : pd.DataFrame
        Older series; all of its rows are kept.
    new_table : pd.DataFrame
        Newer series, possibly overlapping the base in time.
    date_column : str
        Date column present in both tables (``"YYYY-MM"`` or timestamps).
        The output column holds timestamps.
    cutoff_policy : {"after_base_max", "fill_gaps"}
        ``after_base_max`` keeps new rows dated strictly after the latest
        base date. ``fill_gaps`` keeps new rows whose date is absent from
        the base.

    Returns
    -------
    pd.DataFrame
        Base rows followed by the kept new rows, ascending by date.

    Raises
    ------
    OverlapError
        If a kept new row shares a date with the base.
    """
    assert_columns(base_table, [date_column], stage="Merge")
    assert_columns(new_table, [date_column], stage="Merge")

    base = base_table.copy()
    new = new_table.copy()
    base[date_column] = as_timestamps(base[date_column])
    new[date_column] = as_timestamps(new[date_column])

    if cutoff_policy == "after_base_max":
        if len(base):
            cutoff = base[date_column].max()
            kept = new[new[date_column] > cutoff]
            logger.debug("Merge cutoff: %s", cutoff.date())
        else:
            kept = new
    elif cutoff_policy == "fill_gaps":
        kept = new[~new[date_column].isin(base[date_column])]
    else:
        raise ValueError(f"Unknown cutoff policy: {cutoff_policy}")

    assert_no_overlap(base[date_column], kept[date_column])

    merged = pd.concat([base, kept], ignore_index=True, sort=False)
    merged = merged.sort_values(date_column, kind="mergesort").reset_index(drop=True)

    logger.info("Merge: %d base rows + %d of %d new rows -> %d rows",
                len(base), len(kept), len(new), len(merged))
    return merged
