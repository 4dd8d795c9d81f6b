"""Offline providers for local use and testing."""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional
import random

from trade_journal.core.timezone import now_eastern, to_eastern
from trade_journal.domain.models import Transaction
from trade_journal.domain.views import Quote


# Deterministic fake prices for common symbols
_STUB_PRICES: dict[str, Decimal] = {
    "AAPL": Decimal("185.50"),
    "GOOGL": Decimal("142.75"),
    "MSFT": Decimal("378.25"),
    "AMZN": Decimal("178.50"),
    "TSLA": Decimal("248.75"),
    "NVDA": Decimal("485.25"),
    "META": Decimal("505.50"),
    "SPY": Decimal("485.25"),
    "QQQ": Decimal("418.75"),
    "VTI": Decimal("252.30"),
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake prices for offline operation.

    Uses predefined prices for common symbols; generates seeded random prices
    for unknown symbols.
    """

    def __init__(self, seed: int = 42):
        self._rng = random.Random(seed)

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Return stub quotes for requested symbols."""
        as_of = now_eastern()
        result: dict[str, Quote] = {}

        for symbol in symbols:
            upper_symbol = symbol.upper()
            last_price = _STUB_PRICES.get(upper_symbol)
            if last_price is None:
                last_price = Decimal(str(50 + self._rng.random() * 200)).quantize(Decimal("0.01"))
            result[upper_symbol] = Quote(symbol=upper_symbol, last_price=last_price, as_of=as_of)

        return result


class InMemoryTransactionProvider:
    """Serves a fixed transaction list page by page, newest first."""

    def __init__(self, transactions: Optional[Iterable[Transaction]] = None):
        self._transactions = list(transactions or [])

    def add(self, *transactions: Transaction) -> None:
        self._transactions.extend(transactions)

    def fetch_transactions(
        self,
        start: datetime,
        end: datetime,
        limit: int,
        offset: int,
    ) -> list[Transaction]:
        start, end = to_eastern(start), to_eastern(end)
        window = [
            t for t in self._transactions
            if start <= to_eastern(t.occurred_at) <= end
        ]
        window.sort(key=lambda t: t.occurred_at, reverse=True)
        return window[offset:offset + limit]
