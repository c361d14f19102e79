"""Import validation package."""

from finplan.validation.validator import RECORD_TYPES, ImportValidator

__all__ = ["RECORD_TYPES", "ImportValidator"]
