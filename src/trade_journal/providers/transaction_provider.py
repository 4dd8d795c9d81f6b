"""Transaction history provider protocol."""

from datetime import datetime
from typing import Protocol

from trade_journal.domain.models import Transaction


class TransactionProvider(Protocol):
    """
    Protocol for paginated brokerage transaction history.

    A page shorter than `limit` signals the end of the history.
    """

    def fetch_transactions(
        self,
        start: datetime,
        end: datetime,
        limit: int,
        offset: int,
    ) -> list[Transaction]:
        """Return up to `limit` transactions in [start, end], skipping `offset`."""
        ...
