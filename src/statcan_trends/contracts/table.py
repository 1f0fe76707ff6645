"""Table schema contracts.

Checks that a stage received the columns (and dtypes) it operates on.
"""

from typing import Iterable

import pandas as pd

from statcan_trends.contracts.base import require
from statcan_trends.contracts.failure import SchemaError


def assert_columns(df: pd.DataFrame, columns: Iterable[str], stage: str) -> None:
    """Enforce that every named column exists in the table.

    Parameters
    ----------
    df : pd.DataFrame
        Table handed to the stage.

    columns : iterable of str
        Column names the stage needs.

    stage : str
        Stage name used in the error message.

    Raises
    ------
    SchemaError
        If df is not a DataFrame or a column is absent.
    """
    require(
        isinstance(df, pd.DataFrame),
        f"{stage} contract violated: input is {type(df).__name__}, expected DataFrame",
        SchemaError,
    )
    missing = [c for c in columns if c not in df.columns]
    require(
        not missing,
        f"{stage} contract violated: missing column(s) {missing}; "
        f"available: {list(df.columns)}",
        SchemaError,
    )


def assert_numeric(df: pd.DataFrame, column: str, stage: str) -> None:
    """Enforce that a measure column holds numbers."""
    require(
        pd.api.types.is_numeric_dtype(df[column]) and not pd.api.types.is_bool_dtype(df[column]),
        f"{stage} contract violated: '{column}' dtype is {df[column].dtype}, expected numeric",
        SchemaError,
    )


def assert_keys_present(df: pd.DataFrame, columns: Iterable[str], stage: str) -> None:
    """Enforce that key columns have no missing values.

    A grouping on a key with a missing value would silently drop that row
    and its measure.

    Raises
    ------
    SchemaError
        If any row has a missing value in one of the columns.
    """
    for column in columns:
        n_missing = int(df[column].isna().sum())
        require(
            n_missing == 0,
            f"{stage} contract violated: {n_missing} row(s) with missing key '{column}'",
            SchemaError,
        )
