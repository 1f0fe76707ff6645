"""Rollup stage contract.

Enforces one output row per (category key..., period) combination.
"""

from typing import Sequence

import pandas as pd

from statcan_trends.contracts.base import require


def assert_rolled_up(df: pd.DataFrame, key_columns: Sequence[str],
                     measure_column: str) -> None:
    """Enforce rollup stage contract.

    Parameters
    ----------
    df : pd.DataFrame
        Output of rollup().

    key_columns : sequence of str
        Group columns followed by the period columns.

    measure_column : str
        Summed measure.

    Raises
    ------
    ContractViolation
        If a key column is missing or a key combination repeats.
    """
    for col in list(key_columns) + [measure_column]:
        require(
            col in df.columns,
            f"Rollup contract violated: missing output column '{col}'"
        )

    if len(df) > 0 and key_columns:
        dupes = int(df.duplicated(subset=list(key_columns)).sum())
        require(
            dupes == 0,
            f"Rollup contract violated: {dupes} duplicated key row(s) for {list(key_columns)}"
        )
