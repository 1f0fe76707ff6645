"""Merge stage contract.

Enforces that rows appended from a second source never repeat a period
already present in the base table.
"""

import pandas as pd

from statcan_trends.contracts.base import require
from statcan_trends.contracts.failure import OverlapError


def assert_no_overlap(base_dates: pd.Series, new_dates: pd.Series) -> None:
    """Enforce merge contract.

    Parameters
    ----------
    base_dates : pd.Series
        Dates of the base table (timestamps).

    new_dates : pd.Series
        Dates of the filtered rows about to be appended (timestamps).

    Raises
    ------
    OverlapError
        If any appended date equals a base date.
    """
    shared = pd.Index(new_dates).intersection(pd.Index(base_dates))
    require(
        len(shared) == 0,
        f"Merge contract violated: {len(shared)} appended period(s) already in base "
        f"(first: {shared[0] if len(shared) else None})",
        OverlapError,
    )
