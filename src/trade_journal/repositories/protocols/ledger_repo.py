"""Ledger repository protocol."""

from typing import Protocol

from trade_journal.domain.models import JournalState


class LedgerRepository(Protocol):
    """Interface for persisted journal state (ledger + fetch checkpoint)."""

    def load(self, account_id: str) -> JournalState:
        """Return the stored state, or an empty JournalState when none exists."""
        ...

    def save(self, account_id: str, state: JournalState) -> None:
        """Replace the stored state for an account."""
        ...
