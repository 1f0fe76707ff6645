"""Column selection and renaming into a canonical schema."""

import logging
from typing import Iterable, Mapping

import pandas as pd

from statcan_trends.contracts import ParseError, assert_columns

__all__ = ['normalize_columns']

logger = logging.getLogger(__name__)


def normalize_columns(df: pd.DataFrame, column_map: Mapping[str, str],
                      numeric_columns: Iterable[str] = ("value",)) -> pd.DataFrame:
    """Keep the mapped raw columns, renamed, in column_map order.

    Parameters
    ----------
    df : pd.DataFrame
        Raw table from the loader.
    column_map : mapping
        Raw header name -> canonical name, e.g. ``{"REF_DATE": "date"}``.
    numeric_columns : iterable of str
        Canonical names that must hold numbers. Blank cells are NaN;
        any other non-numeric text raises ParseError.

    Raises
    ------
    SchemaError
        If a mapped raw column is absent.
    ParseError
        If a numeric column holds non-numeric text.
    """
    assert_columns(df, list(column_map), stage="Normalize")

    out = df[list(column_map)].rename(columns=dict(column_map))

    for col in numeric_columns:
        if col not in out.columns or pd.api.types.is_numeric_dtype(out[col]):
            continue
        try:
            out[col] = pd.to_numeric(out[col], errors="raise")
        except (ValueError, TypeError) as e:
            raise ParseError(f"Non-numeric value in '{col}': {e}") from e

    logger.debug("Normalized columns: %s", list(out.columns))
    return out
