"""Table transforms.

- periods: reference-date parsing
- partition: summary/detail row split
- rollup: grouped summation per period
- resample: monthly to quarterly, series splicing
- ordering: level order by statistic
"""

from statcan_trends.transform.periods import (
    Period,
    to_period,
    to_year,
    add_period_columns,
    as_timestamps,
)
from statcan_trends.transform.partition import contains_ci, split_rows, partition
from statcan_trends.transform.rollup import rollup, period_keys
from statcan_trends.transform.resample import upsample_to_quarter, append_after
from statcan_trends.transform.ordering import LevelOrder, reorder_levels, as_ordered

__all__ = [
    "Period",
    "to_period",
    "to_year",
    "add_period_columns",
    "as_timestamps",
    "contains_ci",
    "split_rows",
    "partition",
    "rollup",
    "period_keys",
    "upsample_to_quarter",
    "append_after",
    "LevelOrder",
    "reorder_levels",
    "as_ordered",
]
