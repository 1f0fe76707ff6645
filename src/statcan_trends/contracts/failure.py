"""Error taxonomy for table pipeline failures.

Every failure is fatal to the current run. Stages raise one of the types
below and never substitute a default value for bad input.
"""


class ContractViolation(RuntimeError):
    """Raised when a pipeline stage does not deliver the invariants it promised.

    Key distinction:
    - ValidationError: config error (handled by Pydantic)
    - ParseError: malformed field in the input data
    - ContractViolation: table shape or stage output is wrong
    """
    pass


class SchemaError(ContractViolation):
    """An expected column is absent or has the wrong dtype."""
    pass


class OverlapError(ContractViolation):
    """A merged table still contains a period present in both sources."""
    pass


class ParseError(ValueError):
    """A date, numeric field or file header could not be parsed.

    Raised instead of coercing the value to null, so a malformed record
    never reaches aggregation.
    """
    pass
