"""Dependency injection for FastAPI."""

from fastapi import Depends
from sqlalchemy.orm import Session

from trade_journal.config.settings import get_settings
from trade_journal.providers import (
    InMemoryTransactionProvider,
    MarketDataProvider,
    StubMarketDataProvider,
    TransactionProvider,
)
from trade_journal.repositories.sqlalchemy import SqlAlchemyLedgerRepository, get_db
from trade_journal.services import JournalService, MarketDataService

# Offline transaction source; replaced with a brokerage client when one is wired in
_transaction_provider = InMemoryTransactionProvider()


def get_ledger_repo(db: Session = Depends(get_db)) -> SqlAlchemyLedgerRepository:
    """Provide LedgerRepository instance."""
    return SqlAlchemyLedgerRepository(db)


def get_transaction_provider() -> TransactionProvider:
    """Provide TransactionProvider instance (in-memory for offline operation)."""
    return _transaction_provider


def get_market_provider() -> MarketDataProvider:
    """Provide MarketDataProvider instance (stub for offline operation)."""
    return StubMarketDataProvider()


def get_market_data_service(
    provider: MarketDataProvider = Depends(get_market_provider),
) -> MarketDataService:
    """Provide MarketDataService instance."""
    settings = get_settings()
    return MarketDataService(
        provider=provider,
        cache_ttl_seconds=settings.market_data_cache_ttl_seconds,
    )


def get_journal_service(
    ledger_repo: SqlAlchemyLedgerRepository = Depends(get_ledger_repo),
    transaction_provider: TransactionProvider = Depends(get_transaction_provider),
    market_data_service: MarketDataService = Depends(get_market_data_service),
) -> JournalService:
    """Provide JournalService instance."""
    settings = get_settings()
    return JournalService(
        ledger_repo=ledger_repo,
        transaction_provider=transaction_provider,
        market_data_service=market_data_service,
        page_size=settings.transaction_page_size,
        initial_fetch_from=settings.initial_fetch_from,
    )
