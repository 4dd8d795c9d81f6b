"""Journal ingestion pipeline and service."""

import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Iterator, Mapping, Optional

from trade_journal.core.exceptions import AppError, FetchError, IngestionInProgressError
from trade_journal.core.timezone import now_eastern, start_of_year_eastern
from trade_journal.domain.models import JournalState, Ledger, Transaction
from trade_journal.domain.views import AccountSummary, IngestionResult, JournalView
from trade_journal.providers.transaction_provider import TransactionProvider
from trade_journal.repositories.protocols import LedgerRepository
from trade_journal.services.account_summary import summarize_account
from trade_journal.services.classifier import classify_transactions
from trade_journal.services.lot_ledger import held_symbols, ingest_buys, ingest_sells
from trade_journal.services.market_data_service import MarketDataService
from trade_journal.services.period_aggregator import aggregate_periods
from trade_journal.services.profit_calculator import calculate_profits

logger = logging.getLogger(__name__)

# Accounts with an ingestion cycle currently running in this process
_in_flight: set[str] = set()
_in_flight_lock = threading.Lock()


@contextmanager
def ingestion_guard(account_id: str) -> Iterator[None]:
    """Allow one ingestion cycle per account at a time."""
    with _in_flight_lock:
        if account_id in _in_flight:
            raise IngestionInProgressError(account_id)
        _in_flight.add(account_id)
    try:
        yield
    finally:
        with _in_flight_lock:
            _in_flight.discard(account_id)


def recompute(
    ledger: Ledger,
    prices: Mapping[str, Decimal],
) -> tuple[Ledger, AccountSummary]:
    """Mark the ledger at the given prices and summarize it."""
    ledger = calculate_profits(ledger, prices)
    return ledger, summarize_account(ledger)


def ingest_transactions(
    state: JournalState,
    transactions: Iterable[Transaction],
    prices: Optional[Mapping[str, Decimal]] = None,
    epoch: Optional[date] = None,
) -> IngestionResult:
    """
    Merge a transaction batch into the journal state.

    classify -> ingest buys -> ingest sells -> recompute profits. Records
    already applied to the ledger (or repeated within the batch) are skipped,
    so feeding the same history twice leaves the ledger unchanged.
    """
    transactions = list(transactions)
    ledger = state.ledger or Ledger.starting(epoch or _default_epoch(transactions))

    seen = set(ledger.applied_fingerprints)
    fresh: list[Transaction] = []
    skipped_count = 0
    for transaction in transactions:
        fingerprint = transaction.fingerprint
        if fingerprint in seen:
            skipped_count += 1
            continue
        seen.add(fingerprint)
        fresh.append(transaction)

    classified = classify_transactions(fresh)
    ledger = ingest_buys(ledger, classified.buys)
    ledger, unmatched = ingest_sells(ledger, classified.sells)
    ledger = ledger.with_fingerprints(
        frozenset(t.fingerprint for t in classified.buys + classified.sells)
    )
    ledger, summary = recompute(ledger, prices or {})

    return IngestionResult(
        state=JournalState(ledger=ledger, last_fetched_at=state.last_fetched_at),
        summary=summary,
        ingested_count=len(classified.buys) + len(classified.sells),
        skipped_count=skipped_count,
        unmatched_sells=unmatched,
    )


def build_journal_view(state: JournalState) -> JournalView:
    """Project the persisted state into the month/week/day hierarchy."""
    if state.ledger is None:
        return JournalView(last_fetched_at=state.last_fetched_at)
    return JournalView(
        months=aggregate_periods(state.ledger),
        summary=summarize_account(state.ledger),
        held_symbols=held_symbols(state.ledger),
        last_fetched_at=state.last_fetched_at,
    )


def _default_epoch(transactions: list[Transaction]) -> date:
    earliest = min((t.occurred_at for t in transactions), default=now_eastern())
    return start_of_year_eastern(earliest).date()


class JournalService:
    """
    Service running ingestion cycles against persisted journal state.

    Each cycle reads the state, fetches what it needs, computes the new
    ledger in memory and saves it only once everything succeeded.
    """

    def __init__(
        self,
        ledger_repo: LedgerRepository,
        transaction_provider: TransactionProvider,
        market_data_service: MarketDataService,
        page_size: int = 100,
        initial_fetch_from: Optional[datetime] = None,
    ):
        self._ledger_repo = ledger_repo
        self._transactions = transaction_provider
        self._market = market_data_service
        self._page_size = page_size
        self._initial_fetch_from = initial_fetch_from

    def ingest(self, account_id: str, transactions: Iterable[Transaction]) -> IngestionResult:
        """Apply a caller-supplied transaction batch and persist the result."""
        with ingestion_guard(account_id):
            state = self._ledger_repo.load(account_id)
            result = ingest_transactions(state, transactions)
            return self._commit(account_id, result, result.state.last_fetched_at)

    def sync(self, account_id: str, now: Optional[datetime] = None) -> IngestionResult:
        """
        Fetch transactions since the last checkpoint and merge them.

        The first sync fetches from the start of the year (or the configured
        initial_fetch_from); the checkpoint only advances when the whole cycle
        succeeds.
        """
        with ingestion_guard(account_id):
            state = self._ledger_repo.load(account_id)
            fetch_to = now or now_eastern()
            fetch_from = (
                state.last_fetched_at
                or self._initial_fetch_from
                or start_of_year_eastern(fetch_to)
            )

            transactions = self._fetch_all(fetch_from, fetch_to)
            result = ingest_transactions(
                state,
                transactions,
                epoch=start_of_year_eastern(fetch_from).date(),
            )
            return self._commit(account_id, result, fetch_to)

    def refresh_prices(self, account_id: str) -> JournalView:
        """Re-mark the persisted ledger at live prices."""
        with ingestion_guard(account_id):
            state = self._ledger_repo.load(account_id)
            if state.ledger is None:
                return build_journal_view(state)

            ledger, _ = recompute(state.ledger, self._live_prices(state.ledger))
            state = JournalState(ledger=ledger, last_fetched_at=state.last_fetched_at)
            self._ledger_repo.save(account_id, state)
            return build_journal_view(state)

    def get_journal(self, account_id: str) -> JournalView:
        """Month/week/day hierarchy and account summary for an account."""
        return build_journal_view(self._ledger_repo.load(account_id))

    def _commit(
        self,
        account_id: str,
        result: IngestionResult,
        last_fetched_at: Optional[datetime],
    ) -> IngestionResult:
        ledger = result.state.ledger
        prices = self._live_prices(ledger)
        if prices:
            ledger, result.summary = recompute(ledger, prices)

        result.state = JournalState(ledger=ledger, last_fetched_at=last_fetched_at)
        self._ledger_repo.save(account_id, result.state)

        logger.info(
            "Journal %s: ingested %d transactions, skipped %d already applied",
            account_id,
            result.ingested_count,
            result.skipped_count,
        )
        if result.unmatched_count:
            logger.warning(
                "Journal %s: found %d unmatched sell transactions",
                account_id,
                result.unmatched_count,
            )
        return result

    def _fetch_all(self, start: datetime, end: datetime) -> list[Transaction]:
        """Page through the provider until a short page is returned."""
        transactions: list[Transaction] = []
        offset = 0
        while True:
            try:
                page = self._transactions.fetch_transactions(start, end, self._page_size, offset)
            except AppError:
                raise
            except Exception as exc:
                raise FetchError("Fetching trades failed", str(exc)) from exc

            transactions.extend(page)
            offset += self._page_size
            if len(page) < self._page_size:
                break

        logger.debug("Fetched %d transactions between %s and %s", len(transactions), start, end)
        return transactions

    def _live_prices(self, ledger: Optional[Ledger]) -> dict[str, Decimal]:
        if ledger is None:
            return {}
        symbols = held_symbols(ledger)
        if not symbols:
            return {}
        return self._market.get_last_prices(symbols)
