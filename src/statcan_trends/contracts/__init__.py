"""Pipeline contracts: fail-fast enforcement of stage invariants.

Contracts fail immediately and loudly when a stage does not produce its
promised invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate table shape and stage output
- Parsers reject malformed fields with ParseError
"""

from statcan_trends.contracts.failure import (
    ContractViolation,
    SchemaError,
    OverlapError,
    ParseError,
)
from statcan_trends.contracts.base import require
from statcan_trends.contracts.table import assert_columns, assert_numeric, assert_keys_present
from statcan_trends.contracts.partition import assert_partitioned
from statcan_trends.contracts.rollup import assert_rolled_up
from statcan_trends.contracts.merge import assert_no_overlap

__all__ = [
    "ContractViolation",
    "SchemaError",
    "OverlapError",
    "ParseError",
    "require",
    "assert_columns",
    "assert_numeric",
    "assert_keys_present",
    "assert_partitioned",
    "assert_rolled_up",
    "assert_no_overlap",
]
