"""External data providers: transaction history and live prices."""

from trade_journal.providers.market_data_provider import MarketDataProvider
from trade_journal.providers.transaction_provider import TransactionProvider
from trade_journal.providers.stub_provider import (
    StubMarketDataProvider,
    InMemoryTransactionProvider,
)

__all__ = [
    "MarketDataProvider",
    "TransactionProvider",
    "StubMarketDataProvider",
    "InMemoryTransactionProvider",
]
