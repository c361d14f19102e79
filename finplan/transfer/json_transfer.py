"""
JSON Import/Export

Export writes the whole store as one JSON document with three arrays:

    {"incomes": [...], "expenses": [...], "subscriptions": [...]}

using the camelCase field names (date, source, category, amount, note,
name, monthlyPrice, startDate, isActive), ISO 8601 dates and JSON
numbers for money, written with every digit the Decimal holds.

Import is two-phase and all-or-nothing: the document is decoded and every
record validated into a StagedLedger first; only then is the live store
replaced in a single step. Any failure leaves the store exactly as it was.
"""

from typing import Any, Optional, Union

import simplejson

from finplan.config import TransferSettings, get_settings
from finplan.errors import ImportValidationError, ParseError
from finplan.models.records import LedgerRecord
from finplan.models.transfer import ImportResult, StagedLedger, ValidationIssue
from finplan.storage.interface import LedgerStorageInterface
from finplan.validation import ImportValidator


def decode_document(text: Union[str, bytes, None]) -> Any:
    """
    Decode import text into Python values.

    Numbers with a fraction are decoded as Decimal so amounts keep the
    digits written. Bytes must be UTF-8.

    Raises:
        ParseError: If the text is blank, not UTF-8 or not valid JSON
    """
    if text is None or not text.strip():
        raise ParseError("No JSON text supplied")
    try:
        return simplejson.loads(text, use_decimal=True)
    except simplejson.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        ) from e
    except UnicodeDecodeError as e:
        raise ParseError(f"Import text is not valid UTF-8: {e.reason}") from e
    except RecursionError as e:
        raise ParseError("Invalid JSON: document is nested too deeply") from e


class LedgerTransfer:
    """
    Moves the whole ledger to and from JSON text.

    GUARANTEES:
    - Export-then-import reproduces an equivalent store
    - A failed import never mutates the store
    - import_json reports failures in its result instead of raising
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        validator: Optional[ImportValidator] = None,
        settings: Optional[TransferSettings] = None,
    ):
        self._storage = storage
        self._validator = validator or ImportValidator()
        self._settings = settings or get_settings().transfer

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_document(self) -> dict[str, list[dict]]:
        """The store as JSON-ready dicts, collections in insertion order."""
        return {
            "incomes": [self._dump(r) for r in self._storage.incomes],
            "expenses": [self._dump(r) for r in self._storage.expenses],
            "subscriptions": [self._dump(r) for r in self._storage.subscriptions],
        }

    def export_json(self, indent: Optional[int] = None) -> str:
        """The store as JSON text; `indent` defaults to the configured one."""
        if indent is None:
            indent = self._settings.export_indent
        return simplejson.dumps(
            self.export_document(),
            indent=indent or None,
            use_decimal=True,
            ensure_ascii=False,
        )

    @staticmethod
    def _dump(record: LedgerRecord) -> dict:
        return record.to_wire()

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def stage(self, text: Union[str, bytes, None]) -> StagedLedger:
        """
        Phase 1: decode and validate without touching the store.

        Raises:
            ParseError: If the text or its structure cannot be read
            ImportValidationError: If any record is invalid
        """
        return self._validator.validate(decode_document(text))

    def commit(self, staged: StagedLedger) -> None:
        """Phase 2: replace the live store with already validated records."""
        self._storage.replace_all(
            staged.incomes,
            staged.expenses,
            staged.subscriptions,
        )

    def import_json(self, text: Union[str, bytes, None]) -> ImportResult:
        """
        Replace the store with the records in `text`, or change nothing.

        Returns:
            ImportResult; on failure error_kind is 'parse' or 'validation'
        """
        try:
            staged = self.stage(text)
        except ParseError as e:
            return ImportResult(
                success=False,
                error_kind="parse",
                error_message=str(e),
                issues=[ValidationIssue(field="document", message=str(e))],
            )
        except ImportValidationError as e:
            return ImportResult(
                success=False,
                error_kind="validation",
                error_message=str(e),
                issues=e.issues,
            )

        self.commit(staged)
        counts = staged.counts()
        return ImportResult(
            success=True,
            incomes_imported=counts["incomes"],
            expenses_imported=counts["expenses"],
            subscriptions_imported=counts["subscriptions"],
        )
