"""Repository layer - data access abstractions and implementations."""

from trade_journal.repositories.protocols import LedgerRepository
from trade_journal.repositories.memory import InMemoryLedgerRepository

__all__ = [
    "LedgerRepository",
    "InMemoryLedgerRepository",
]
