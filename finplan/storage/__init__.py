"""
Storage Package

Provides the abstract storage interfaces and their in-memory
implementations. The ledger has no on-disk format of its own; bulk
save/load goes through finplan.transfer.
"""

from finplan.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
)
from finplan.storage.memory import (
    InMemoryAuditTrail,
    InMemoryLedgerStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # In-memory implementation
    "InMemoryAuditTrail",
    "InMemoryLedgerStore",
]
