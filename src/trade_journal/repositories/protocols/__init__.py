"""Repository protocol definitions (interfaces)."""

from trade_journal.repositories.protocols.ledger_repo import LedgerRepository

__all__ = [
    "LedgerRepository",
]
