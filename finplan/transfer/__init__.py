"""JSON import/export package."""

from finplan.transfer.json_transfer import LedgerTransfer, decode_document

__all__ = ["LedgerTransfer", "decode_document"]
