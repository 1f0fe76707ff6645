"""Reference-date parsing for StatCan tables.

StatCan full-table downloads carry the observation date in ``REF_DATE`` as
``"YYYY-MM"`` for monthly and quarterly series and ``"YYYY"`` for annual
ones. Parsing is strict: a value that does not match raises ParseError
instead of becoming NaT and flowing silently into aggregation.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date

import numpy as np
import pandas as pd

from statcan_trends.contracts import ParseError, assert_columns

__all__ = ['Period', 'to_period', 'to_year', 'add_period_columns', 'as_timestamps']

logger = logging.getLogger(__name__)

_MONTHLY_RE = re.compile(r"([0-9]{4})-([0-9]{2})")
_ANNUAL_RE = re.compile(r"[0-9]{4}")


@dataclass(frozen=True, order=True)
class Period:
    """A calendar month, with the coarser periods derived from it."""

    year: int
    month: int

    @property
    def quarter(self) -> int:
        """ceil(month / 3)."""
        return (self.month + 2) // 3

    @property
    def quarter_start(self) -> date:
        """First day of the quarter containing this month."""
        return date(self.year, 3 * (self.quarter - 1) + 1, 1)

    def to_timestamp(self) -> pd.Timestamp:
        return pd.Timestamp(self.year, self.month, 1)


def to_period(date_string: str) -> Period:
    """Parse a ``"YYYY-MM"`` reference date.

    Parameters
    ----------
    date_string : str
        Four-digit year, hyphen, two-digit month (01-12). Surrounding
        whitespace is not accepted.

    Returns
    -------
    Period

    Raises
    ------
    ParseError
        If the value is not a string of that exact shape or the month is
        out of range.

    Examples
    --------
    >>> to_period("1976-11").quarter
    4
    """
    if not isinstance(date_string, str):
        raise ParseError(f"Reference date must be a 'YYYY-MM' string, got {date_string!r}")

    m = _MONTHLY_RE.fullmatch(date_string)
    if m is None:
        raise ParseError(f"Malformed reference date {date_string!r}, expected 'YYYY-MM'")

    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ParseError(f"Month out of range in reference date {date_string!r}")
    return Period(year, month)


def to_year(value) -> int:
    """Extract the calendar year from an annual or monthly reference date.

    Accepts an integer year, ``"YYYY"`` or ``"YYYY-MM"``.
    """
    if isinstance(value, (bool, np.bool_)):
        raise ParseError(f"Cannot read a year from {value!r}")
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, str):
        if _ANNUAL_RE.fullmatch(value):
            return int(value)
        return to_period(value).year
    raise ParseError(f"Cannot read a year from {value!r}")


def _parse_ref_date(value):
    """Return (year, month) with month None for annual values."""
    if isinstance(value, str) and _MONTHLY_RE.fullmatch(value):
        p = to_period(value)
        return p.year, p.month
    return to_year(value), None


def add_period_columns(table: pd.DataFrame, date_column: str) -> pd.DataFrame:
    """Derive ``year`` (and ``month``/``quarter`` for monthly dates) columns.

    Each distinct reference date is parsed once. Annual tables get only a
    ``year`` column; tables with ``"YYYY-MM"`` dates also get ``month`` and
    ``quarter``. A table mixing both shapes is rejected.

    Raises
    ------
    SchemaError
        If date_column is absent.
    ParseError
        On the first malformed or missing reference date.
    """
    assert_columns(table, [date_column], stage="Period")

    values = table[date_column]
    if values.isna().any():
        first = values[values.isna()].index[0]
        raise ParseError(f"Missing reference date in '{date_column}' at row {first}")

    parsed = {v: _parse_ref_date(v) for v in pd.unique(values)}
    months = {ym[1] is None for ym in parsed.values()}
    if len(months) > 1:
        raise ParseError(f"'{date_column}' mixes annual and monthly reference dates")

    out = table.copy()
    out["year"] = values.map(lambda v: parsed[v][0]).astype("int64")
    if months == {False}:
        out["month"] = values.map(lambda v: parsed[v][1]).astype("int64")
        out["quarter"] = (out["month"] + 2) // 3

    logger.debug("Parsed %d distinct reference dates from '%s'", len(parsed), date_column)
    return out


def as_timestamps(values: pd.Series) -> pd.Series:
    """Convert reference dates to month-start timestamps.

    Datetime columns pass through unchanged; string columns must be
    ``"YYYY-MM"``. A missing date raises ParseError.
    """
    if pd.api.types.is_datetime64_any_dtype(values):
        if values.isna().any():
            first = values[values.isna()].index[0]
            raise ParseError(f"Missing date in '{values.name}' at row {first}")
        return values
    parsed = {v: to_period(v).to_timestamp() for v in pd.unique(values)}
    return values.map(parsed).astype("datetime64[ns]")
