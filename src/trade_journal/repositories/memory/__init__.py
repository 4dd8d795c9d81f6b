"""In-memory repository implementations."""

from trade_journal.repositories.memory.ledger_repo import InMemoryLedgerRepository

__all__ = [
    "InMemoryLedgerRepository",
]
