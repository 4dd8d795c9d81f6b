"""Market data service for live prices."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from trade_journal.core.exceptions import FetchError
from trade_journal.core.timezone import now_eastern
from trade_journal.domain.views import Quote
from trade_journal.providers.market_data_provider import MarketDataProvider

logger = logging.getLogger(__name__)


class MarketDataService:
    """
    Service for fetching live prices.

    Wraps provider with a TTL cache; falls back to cached quotes when the
    provider fails and the cache can still answer.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        cache_ttl_seconds: int = 60,
    ):
        self._provider = provider
        self._cache_ttl = cache_ttl_seconds
        self._quote_cache: dict[str, Quote] = {}
        self._cache_time: Optional[datetime] = None

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """
        Fetch quotes for symbols with caching.

        Returns dict mapping symbol -> Quote. Raises FetchError when the
        provider fails and some requested symbol is not cached.
        """
        if not symbols:
            return {}

        symbols = [s.upper() for s in symbols]

        if self._is_cache_valid():
            cached_result = {s: self._quote_cache[s] for s in symbols if s in self._quote_cache}
            missing = [s for s in symbols if s not in cached_result]
            if not missing:
                return cached_result
        else:
            missing = symbols
            cached_result = {}

        try:
            new_quotes = self._provider.get_quotes(missing)
        except Exception as exc:
            stale = {s: self._quote_cache[s] for s in symbols if s in self._quote_cache}
            if len(stale) == len(symbols):
                logger.warning("Price provider failed, serving cached quotes: %s", exc)
                return stale
            raise FetchError("Fetching market data failed", str(exc)) from exc

        self._quote_cache.update(new_quotes)
        self._cache_time = now_eastern()
        cached_result.update(new_quotes)
        return {s: cached_result[s] for s in symbols if s in cached_result}

    def get_last_prices(self, symbols: list[str]) -> dict[str, Decimal]:
        """Last traded price per symbol; symbols without a quote are omitted."""
        return {symbol: quote.last_price for symbol, quote in self.get_quotes(symbols).items()}

    def _is_cache_valid(self) -> bool:
        """Check if cache is within TTL."""
        if not self._cache_time:
            return False
        elapsed = (now_eastern() - self._cache_time).total_seconds()
        return elapsed < self._cache_ttl
