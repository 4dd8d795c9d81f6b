"""Market data provider protocol."""

from typing import Protocol

from trade_journal.domain.views import Quote


class MarketDataProvider(Protocol):
    """
    Protocol for live price providers.

    Implementations fetch the last traded price for each requested symbol.
    """

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """
        Fetch quotes for multiple symbols.

        Returns dict mapping symbol -> Quote. Unknown symbols are omitted.
        Raises on network or authentication failure.
        """
        ...
