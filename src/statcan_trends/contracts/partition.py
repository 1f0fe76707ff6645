"""Partition stage contract.

Enforces that matched and unmatched rows are disjoint and together cover
every input row that has a category value.
"""

import pandas as pd

from statcan_trends.contracts.base import require


def assert_partitioned(keyed: pd.DataFrame, matched: pd.DataFrame,
                       unmatched: pd.DataFrame) -> None:
    """Enforce partition stage contract.

    Called on the partitions before the completeness filter, while they
    still carry the index labels of the input table.

    Parameters
    ----------
    keyed : pd.DataFrame
        Input rows with a non-missing category value.

    matched, unmatched : pd.DataFrame
        The two partitions.

    Raises
    ------
    ContractViolation
        If the partitions overlap or do not cover the keyed rows.
    """
    overlap = matched.index.intersection(unmatched.index)
    require(
        len(overlap) == 0,
        f"Partition contract violated: {len(overlap)} row(s) in both partitions"
    )
    require(
        len(matched) + len(unmatched) == len(keyed),
        f"Partition contract violated: {len(matched)} + {len(unmatched)} rows "
        f"!= {len(keyed)} keyed input rows"
    )
