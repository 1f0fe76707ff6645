"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts.
Stage contract helpers call it with the error type that fits the violation.
"""

from typing import Type

from statcan_trends.contracts.failure import ContractViolation


def require(condition: bool, message: str,
            error: Type[Exception] = ContractViolation) -> None:
    """Enforce a pipeline contract.

    Called at stage boundaries to verify the preceding stage produced the
    guaranteed invariants. It is fail-fast: no recovery, no fallback.

    Parameters
    ----------
    condition : bool
        The invariant that must be true.

    message : str
        Error message explaining the violation.

    error : type of Exception, optional
        Exception class raised when condition is False. Defaults to
        ContractViolation; stage helpers pass SchemaError or OverlapError.

    Raises
    ------
    ContractViolation
        Or the requested subclass, if condition is False.

    Examples
    --------
    >>> require("value" in df.columns, "Rollup contract: missing 'value'", SchemaError)
    >>> require(len(keys) == len(set(keys)), "Rollup contract: duplicate keys")
    """
    if not condition:
        raise error(message)
