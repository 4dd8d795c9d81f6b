"""Dict-backed LedgerRepository for offline use and tests."""

from datetime import datetime
from typing import Optional

from trade_journal.domain.models import JournalState
from trade_journal.repositories.ledger_codec import decode_ledger, encode_ledger


class InMemoryLedgerRepository:
    """
    Keeps each account's state as encoded JSON.

    Storing the serialized form (not the objects) means callers never share
    references with the stored snapshot.
    """

    def __init__(self) -> None:
        self._rows: dict[str, tuple[Optional[str], Optional[datetime]]] = {}
        self.save_count = 0

    def load(self, account_id: str) -> JournalState:
        row = self._rows.get(account_id)
        if row is None:
            return JournalState()
        ledger_json, last_fetched_at = row
        return JournalState(
            ledger=decode_ledger(ledger_json) if ledger_json else None,
            last_fetched_at=last_fetched_at,
        )

    def save(self, account_id: str, state: JournalState) -> None:
        ledger_json = encode_ledger(state.ledger) if state.ledger is not None else None
        self._rows[account_id] = (ledger_json, state.last_fetched_at)
        self.save_count += 1
