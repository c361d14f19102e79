"""
Error taxonomy for finplan.

Every error raised by the package derives from LedgerError so a front end
can catch one type, report the message and carry on. None of these errors
is meant to end the process.
"""

from typing import Any, Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ValidationError(LedgerError, ValueError):
    """
    A record violates an invariant (blank text, non-positive amount,
    unknown category, malformed date).

    Attributes:
        entity: Name of the record type being built (e.g. 'Income')
        issues: List of {"field": ..., "message": ...} dicts
    """

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        issues: Optional[list[dict[str, str]]] = None,
    ):
        super().__init__(message)
        self.entity = entity
        self.issues = issues or []

    @classmethod
    def from_pydantic(cls, entity: str, exc: Any) -> "ValidationError":
        """Build from a pydantic ValidationError raised while building `entity`."""
        issues = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ())) or entity
            message = error.get("msg", "invalid value")
            # Strip pydantic's "Value error, " prefix from custom validators
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            issues.append({"field": field, "message": message})
        summary = "; ".join(f"{i['field']}: {i['message']}" for i in issues)
        return cls(f"Invalid {entity}: {summary}", entity=entity, issues=issues)


class ImportValidationError(ValidationError):
    """One or more records of an import document failed validation."""

    def __init__(self, message: str, issues: list):
        super().__init__(message, entity="import")
        # ValidationIssue models, one per failed field of a failed record
        self.issues = issues


class ParseError(LedgerError, ValueError):
    """Input text cannot be interpreted as the expected form."""
    pass


class InputRangeError(LedgerError, ValueError):
    """A month, category or position is outside its valid domain."""
    pass


class NotFoundError(LedgerError, LookupError):
    """The referenced record is not held by the store."""
    pass
