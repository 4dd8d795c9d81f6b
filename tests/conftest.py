"""
Pytest configuration and fixtures for trade journal tests.

This module provides:
- In-memory SQLite database fixtures
- Factory helpers for buy/sell transactions and brokerage records
- Deterministic market data and transaction providers
- Time helpers for Eastern timezone
- Service and repository fixtures
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from trade_journal.main import app
from trade_journal.api.deps import get_market_provider, get_transaction_provider
from trade_journal.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from trade_journal.repositories.sqlalchemy import orm_models  # noqa: F401
from trade_journal.repositories.sqlalchemy import SqlAlchemyLedgerRepository
from trade_journal.repositories.memory import InMemoryLedgerRepository
from trade_journal.providers import InMemoryTransactionProvider
from trade_journal.services import JournalService, MarketDataService
from trade_journal.domain.models import Instrument, Transaction, TransactionType
from trade_journal.domain.views import Quote
from trade_journal.core.timezone import EASTERN_TZ
from trade_journal.config.settings import Settings, reset_settings, set_settings


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return eastern_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def sqlite_ledger_repo(test_session) -> SqlAlchemyLedgerRepository:
    """Provide SQLite-backed LedgerRepository."""
    return SqlAlchemyLedgerRepository(test_session)


@pytest.fixture
def ledger_repo() -> InMemoryLedgerRepository:
    """Provide in-memory LedgerRepository."""
    return InMemoryLedgerRepository()


# =============================================================================
# PROVIDER FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Provides fixed quotes with no randomness; unknown symbols are omitted.
    """

    FIXED_PRICES = {
        "AAPL": Decimal("185.50"),
        "MSFT": Decimal("378.25"),
        "TSLA": Decimal("248.75"),
        "XYZ": Decimal("8"),
    }

    def __init__(self, as_of: Optional[datetime] = None):
        self._as_of = as_of or eastern_datetime(2024, 6, 15, 16, 0, 0)
        self.calls: list[list[str]] = []

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Return deterministic quotes for requested symbols."""
        self.calls.append(list(symbols))
        result = {}
        for symbol in symbols:
            upper_symbol = symbol.upper()
            if upper_symbol in self.FIXED_PRICES:
                result[upper_symbol] = Quote(
                    symbol=upper_symbol,
                    last_price=self.FIXED_PRICES[upper_symbol],
                    as_of=self._as_of,
                )
        return result


class FailingMarketProvider:
    """Market provider that always raises an exception."""

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        raise ConnectionError("Network unavailable")


class FailingTransactionProvider:
    """Transaction provider that fails on a given page offset."""

    def __init__(self, inner: InMemoryTransactionProvider, fail_at_offset: int = 0):
        self._inner = inner
        self._fail_at_offset = fail_at_offset

    def fetch_transactions(
        self,
        start: datetime,
        end: datetime,
        limit: int,
        offset: int,
    ) -> list[Transaction]:
        if offset >= self._fail_at_offset:
            raise ConnectionError("401 Unauthorized")
        return self._inner.fetch_transactions(start, end, limit, offset)


@pytest.fixture
def deterministic_provider(fixed_now) -> DeterministicMarketProvider:
    """Provide deterministic market data provider."""
    return DeterministicMarketProvider(as_of=fixed_now)


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    """Provide a market provider that always fails."""
    return FailingMarketProvider()


@pytest.fixture
def transaction_provider() -> InMemoryTransactionProvider:
    """Provide an empty in-memory transaction provider."""
    return InMemoryTransactionProvider()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def market_data_service(deterministic_provider) -> MarketDataService:
    """Provide test MarketDataService with deterministic provider."""
    return MarketDataService(
        provider=deterministic_provider,
        cache_ttl_seconds=60,
    )


@pytest.fixture
def journal_service(
    ledger_repo,
    transaction_provider,
    market_data_service,
) -> JournalService:
    """Provide test JournalService over in-memory storage."""
    return JournalService(
        ledger_repo=ledger_repo,
        transaction_provider=transaction_provider,
        market_data_service=market_data_service,
        page_size=2,
    )


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, transaction_provider, deterministic_provider) -> TestClient:
    """Provide FastAPI test client with test database and offline providers."""
    set_settings(Settings(
        database_url="sqlite:///:memory:",
        initial_fetch_from=eastern_datetime(2024, 1, 1, 0),
    ))
    reset_database()
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_transaction_provider] = lambda: transaction_provider
    app.dependency_overrides[get_market_provider] = lambda: deterministic_provider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def make_transaction(
    transaction_type: TransactionType,
    symbol: str,
    quantity: str,
    price: str,
    occurred_at: datetime,
    order_id: Optional[str] = None,
    account_balance: str = "10000",
) -> Transaction:
    """Helper to create a Transaction with a signed cash amount."""
    quantity_dec = Decimal(quantity)
    price_dec = Decimal(price)
    amount = quantity_dec * price_dec
    if transaction_type == TransactionType.BUY:
        amount = -amount
    return Transaction(
        order_id=order_id or f"{symbol}-{transaction_type.value}-{occurred_at.isoformat()}",
        fill_price=price_dec,
        fill_quantity=quantity_dec,
        transaction_type=transaction_type,
        instrument=Instrument(id=f"id-{symbol}", symbol=symbol, name=f"{symbol} Inc"),
        transaction_amount=amount,
        account_balance=Decimal(account_balance),
        occurred_at=occurred_at,
    )


def make_buy(
    symbol: str,
    quantity: str,
    price: str,
    occurred_at: datetime,
    order_id: Optional[str] = None,
    account_balance: str = "10000",
) -> Transaction:
    """Helper to create a BUY transaction."""
    return make_transaction(
        TransactionType.BUY, symbol, quantity, price, occurred_at, order_id, account_balance
    )


def make_sell(
    symbol: str,
    quantity: str,
    price: str,
    occurred_at: datetime,
    order_id: Optional[str] = None,
    account_balance: str = "10000",
) -> Transaction:
    """Helper to create a SELL transaction."""
    return make_transaction(
        TransactionType.SELL, symbol, quantity, price, occurred_at, order_id, account_balance
    )


def brokerage_record(
    order_id: str,
    code: str,
    symbol: str,
    quantity: str,
    price: str,
    when: str,
    tran_amount: str = "0",
    account_balance: str = "10000",
) -> dict[str, Any]:
    """Helper to create a brokerage history record as it arrives on the wire."""
    return {
        "orderID": order_id,
        "fillPx": price,
        "fillQty": quantity,
        "finTranTypeID": code,
        "instrument": {"id": f"id-{symbol}", "symbol": symbol, "name": f"{symbol} Inc"},
        "tranAmount": tran_amount,
        "accountBalance": account_balance,
        "tranWhen": when,
    }


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
