"""
Two-Stage Import Validation

STAGE 1 - STRUCTURE:
- Root is a JSON object
- At least one known collection is present
- Each collection is an array of objects
Failures here mean the document cannot be read at all (ParseError).

STAGE 2 - RECORDS:
- Every candidate record is built with the same rules as a direct add
- Subscriptions must state isActive explicitly
- Field names are matched case-insensitively, unknown fields ignored
- All failures are collected, not just the first
Failures here mean the document was read but holds invalid data
(ImportValidationError).

Stage 2 only runs if stage 1 passes. Nothing in this module touches the
live store; the output is a StagedLedger.
"""

from typing import Any, Type

from finplan.errors import ImportValidationError, ParseError, ValidationError
from finplan.models.records import Expense, Income, LedgerRecord, Subscription
from finplan.models.transfer import COLLECTIONS, StagedLedger, ValidationIssue


RECORD_TYPES: dict[str, Type[LedgerRecord]] = {
    "incomes": Income,
    "expenses": Expense,
    "subscriptions": Subscription,
}

# Defaulted on direct construction, but an import document must spell them out
REQUIRED_ON_IMPORT: dict[str, tuple[str, ...]] = {
    "subscriptions": ("isActive",),
}


def _field_lookup(model: Type[LedgerRecord]) -> dict[str, str]:
    """Lower-cased field name and alias -> alias accepted by the model."""
    lookup = {}
    for name, info in model.model_fields.items():
        alias = info.alias or name
        lookup[name.lower()] = alias
        lookup[alias.lower()] = alias
    return lookup


class ImportValidator:
    """
    Validates a decoded import document through a two-stage pipeline.

    Stage 1: Structure (ParseError on failure)
    Stage 2: Records (ImportValidationError on failure)
    """

    def __init__(self):
        self._lookups = {
            collection: _field_lookup(model)
            for collection, model in RECORD_TYPES.items()
        }

    def _validate_structure(self, payload: Any) -> dict[str, list[dict]]:
        """
        Stage 1: locate the three collections.

        Root keys are matched case-insensitively; absent collections are
        treated as empty.

        Raises:
            ParseError: If the document shape is not usable
        """
        if not isinstance(payload, dict):
            raise ParseError(
                f"Import document must be a JSON object, got {type(payload).__name__}"
            )

        found: dict[str, Any] = {}
        for key, value in payload.items():
            if isinstance(key, str) and key.lower() in COLLECTIONS:
                found[key.lower()] = value

        if not found:
            raise ParseError(
                "Import document has none of the collections: " + ", ".join(COLLECTIONS)
            )

        collections: dict[str, list[dict]] = {}
        for name in COLLECTIONS:
            items = found.get(name, [])
            if not isinstance(items, list):
                raise ParseError(f"'{name}' must be an array, got {type(items).__name__}")
            for index, item in enumerate(items):
                if not isinstance(item, dict):
                    raise ParseError(
                        f"{name}[{index}] must be an object, got {type(item).__name__}"
                    )
            collections[name] = items

        return collections

    def _normalize_keys(self, collection: str, raw: dict) -> dict[str, Any]:
        lookup = self._lookups[collection]
        normalized = {}
        for key, value in raw.items():
            if not isinstance(key, str):
                continue
            canonical = lookup.get(key.lower())
            if canonical is not None:
                normalized[canonical] = value
        return normalized

    def _validate_records(
        self,
        collections: dict[str, list[dict]],
    ) -> tuple[StagedLedger, list[ValidationIssue]]:
        """
        Stage 2: build every record, collecting every failure.

        Returns: (staged_records, list_of_issues)
        """
        staged: dict[str, list[LedgerRecord]] = {name: [] for name in COLLECTIONS}
        issues: list[ValidationIssue] = []

        for collection, items in collections.items():
            model = RECORD_TYPES[collection]
            for index, raw in enumerate(items):
                fields = self._normalize_keys(collection, raw)
                problems = [
                    {"field": name, "message": "Field required"}
                    for name in REQUIRED_ON_IMPORT.get(collection, ())
                    if name not in fields
                ]
                try:
                    record = model(**fields)
                except ValidationError as e:
                    problems.extend(e.issues)

                if problems:
                    for problem in problems:
                        issues.append(ValidationIssue(
                            collection=collection,
                            index=index,
                            field=problem["field"],
                            message=problem["message"],
                        ))
                    continue
                staged[collection].append(record)

        return StagedLedger(**staged), issues

    def validate(self, payload: Any) -> StagedLedger:
        """
        Run the full two-stage pipeline.

        Returns:
            StagedLedger holding only valid records

        Raises:
            ParseError: If stage 1 fails
            ImportValidationError: If any record fails stage 2
        """
        collections = self._validate_structure(payload)
        staged, issues = self._validate_records(collections)

        if issues:
            failed = len({(i.collection, i.index) for i in issues})
            raise ImportValidationError(
                f"{failed} record(s) failed validation: "
                + "; ".join(issue.describe() for issue in issues),
                issues=issues,
            )

        return staged
