"""
Unit tests for the ingestion pipeline and JournalService.

Tests cover:
- Idempotent re-ingestion
- Unmatched sell reporting
- Paginated sync and checkpoint resume
- Fetch failures leaving persisted state untouched
- Single in-flight ingestion per account
- Live price refresh and journal projection
"""

import logging

import pytest
from datetime import date, datetime
from decimal import Decimal

from trade_journal.core.exceptions import FetchError, IngestionInProgressError
from trade_journal.domain.models import JournalState
from trade_journal.repositories.ledger_codec import encode_ledger
from trade_journal.services import JournalService, MarketDataService, ingest_transactions
from trade_journal.services.journal_service import ingestion_guard

from tests.conftest import (
    FailingMarketProvider,
    FailingTransactionProvider,
    eastern_datetime,
    make_buy,
    make_sell,
)


ACCOUNT = "acct-1"


@pytest.fixture
def batch():
    """Buys on two days and a sell consuming across them."""
    return [
        make_buy("XYZ", "10", "5", eastern_datetime(2024, 1, 2), account_balance="950"),
        make_buy("XYZ", "5", "6", eastern_datetime(2024, 1, 3)),
        make_sell("XYZ", "12", "7", eastern_datetime(2024, 1, 4)),
    ]


# =============================================================================
# PURE PIPELINE TESTS
# =============================================================================


class TestIngestTransactions:
    """Tests for the ingest_transactions pipeline."""

    def test_epoch_defaults_to_start_of_earliest_year(self, batch):
        result = ingest_transactions(JournalState(), batch)

        assert result.state.ledger.epoch == date(2024, 1, 1)

    def test_same_batch_twice_yields_same_ledger(self, batch):
        """
        GIVEN a batch ingested into a fresh state
        WHEN the same batch is ingested again
        THEN every record is skipped and the ledger is unchanged
        """
        once = ingest_transactions(JournalState(), batch)
        twice = ingest_transactions(once.state, batch)

        assert twice.ingested_count == 0
        assert twice.skipped_count == 3
        assert encode_ledger(twice.state.ledger) == encode_ledger(once.state.ledger)

    def test_repeated_fill_within_batch_counted_once(self):
        """
        GIVEN the same buy fill delivered twice in one batch
        WHEN the batch is ingested
        THEN open quantity reflects a single fill
        """
        buy = make_buy("XYZ", "10", "5", eastern_datetime(2024, 1, 2), order_id="ord-1")

        result = ingest_transactions(JournalState(), [buy, buy])

        entry = result.state.ledger.days[1].entry("XYZ")
        assert entry.open_quantity == Decimal("10")
        assert result.ingested_count == 1
        assert result.skipped_count == 1

    def test_unmatched_sell_does_not_abort(self):
        """
        GIVEN 10 units bought and 20 sold
        WHEN the batch is ingested
        THEN one unmatched sell is reported and the matched part is recorded
        """
        result = ingest_transactions(
            JournalState(),
            [
                make_buy("XYZ", "10", "5", eastern_datetime(2024, 1, 2)),
                make_sell("XYZ", "20", "7", eastern_datetime(2024, 1, 3)),
            ],
        )

        assert result.unmatched_count == 1
        assert result.state.ledger.days[1].entry("XYZ").sold_quantity == Decimal("10")

    def test_profits_computed_at_given_prices(self, batch):
        """
        GIVEN the FIFO batch leaving 3 units open from day 2 at $6
        WHEN ingested with XYZ at $8
        THEN the summary reflects realised and unrealised profit
        """
        result = ingest_transactions(JournalState(), batch, prices={"XYZ": Decimal("8")})

        # day 0: 10 @ 5 sold @ 7 -> +20; day 1: 2 @ 6 sold @ 7 -> +2, 3 held @ 8 -> +6
        assert result.summary.starting_balance == Decimal("1000")
        assert result.summary.realised_profit_raw == Decimal("22")
        assert result.summary.unrealised_profit_raw == Decimal("28")


# =============================================================================
# SERVICE INGEST TESTS
# =============================================================================


class TestJournalServiceIngest:
    """Tests for JournalService.ingest."""

    def test_ingest_persists_state(self, journal_service, ledger_repo, batch):
        journal_service.ingest(ACCOUNT, batch)

        state = ledger_repo.load(ACCOUNT)
        assert state.ledger is not None
        assert ledger_repo.save_count == 1

    def test_ingest_marks_open_holdings_at_live_price(self, journal_service, batch):
        """
        GIVEN the deterministic provider quoting XYZ at $8
        WHEN the batch is ingested through the service
        THEN unrealised profit uses the live price
        """
        result = journal_service.ingest(ACCOUNT, batch)

        assert result.summary.unrealised_profit_raw == Decimal("28")

    def test_reingest_is_idempotent(self, journal_service, ledger_repo, batch):
        journal_service.ingest(ACCOUNT, batch)
        first = encode_ledger(ledger_repo.load(ACCOUNT).ledger)

        result = journal_service.ingest(ACCOUNT, batch)

        assert result.ingested_count == 0
        assert encode_ledger(ledger_repo.load(ACCOUNT).ledger) == first

    def test_unmatched_sells_logged_once(self, journal_service, caplog):
        """
        GIVEN two sells with no holdings
        WHEN they are ingested
        THEN a single warning reports the count
        """
        sells = [
            make_sell("XYZ", "1", "7", eastern_datetime(2024, 1, 3, 10)),
            make_sell("XYZ", "1", "7", eastern_datetime(2024, 1, 3, 11)),
        ]

        with caplog.at_level(logging.WARNING):
            result = journal_service.ingest(ACCOUNT, sells)

        assert result.unmatched_count == 2
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "2 unmatched" in warnings[0].getMessage()

    def test_naive_buy_merges_into_reloaded_ledger(self, journal_service, ledger_repo):
        """
        GIVEN a saved journal holding a naive-timestamped buy
        WHEN another naive buy on the same day is ingested after reload
        THEN both lots land on that day and profits are computed
        """
        journal_service.ingest(
            ACCOUNT, [make_buy("XYZ", "10", "5", datetime(2024, 1, 2, 10, 0), order_id="A")]
        )

        result = journal_service.ingest(
            ACCOUNT, [make_buy("XYZ", "5", "6", datetime(2024, 1, 2, 11, 0), order_id="B")]
        )

        entry = ledger_repo.load(ACCOUNT).ledger.days[1].entry("XYZ")
        assert [lot.order_id for lot in entry.buys] == ["A", "B"]
        assert entry.open_quantity == Decimal("15")
        assert result.summary.unrealised_profit_raw == Decimal("40")

    def test_mixed_naive_and_aware_batch(self, journal_service):
        result = journal_service.ingest(
            ACCOUNT,
            [
                make_buy("XYZ", "1", "5", datetime(2024, 1, 3, 10, 0)),
                make_buy("XYZ", "1", "5", eastern_datetime(2024, 1, 2)),
            ],
        )

        assert result.ingested_count == 2
        assert result.state.ledger.epoch == date(2024, 1, 1)

    def test_price_failure_leaves_state_untouched(self, ledger_repo, transaction_provider, batch):
        """
        GIVEN a market data provider that fails
        WHEN a batch with open holdings is ingested
        THEN FetchError is raised and nothing is saved
        """
        service = JournalService(
            ledger_repo=ledger_repo,
            transaction_provider=transaction_provider,
            market_data_service=MarketDataService(FailingMarketProvider()),
        )

        with pytest.raises(FetchError):
            service.ingest(ACCOUNT, batch)

        assert ledger_repo.save_count == 0
        assert ledger_repo.load(ACCOUNT).ledger is None


# =============================================================================
# SYNC TESTS
# =============================================================================


class TestJournalServiceSync:
    """Tests for JournalService.sync."""

    def test_first_sync_pages_through_year(
        self, journal_service, transaction_provider, ledger_repo, batch, fixed_now
    ):
        """
        GIVEN three transactions this year and a page size of 2
        WHEN the first sync runs
        THEN all pages are fetched and the checkpoint is set to now
        """
        transaction_provider.add(*batch)

        result = journal_service.sync(ACCOUNT, now=fixed_now)

        assert result.ingested_count == 3
        state = ledger_repo.load(ACCOUNT)
        assert state.last_fetched_at == fixed_now
        assert state.ledger.epoch == date(2024, 1, 1)

    def test_sync_fetches_exactly_full_pages(self, journal_service, transaction_provider, fixed_now):
        """
        GIVEN four transactions and a page size of 2
        WHEN the sync runs
        THEN the trailing empty page ends paging and all four are ingested
        """
        transaction_provider.add(
            *[make_buy("XYZ", "1", "5", eastern_datetime(2024, 1, day)) for day in range(2, 6)]
        )

        result = journal_service.sync(ACCOUNT, now=fixed_now)

        assert result.ingested_count == 4

    def test_sync_resumes_from_checkpoint(
        self, journal_service, transaction_provider, batch, fixed_now
    ):
        """
        GIVEN a completed sync
        WHEN a new trade appears and sync runs again later
        THEN only the new trade is ingested
        """
        transaction_provider.add(*batch)
        journal_service.sync(ACCOUNT, now=fixed_now)

        transaction_provider.add(make_buy("AAPL", "1", "180", eastern_datetime(2024, 6, 16)))
        result = journal_service.sync(ACCOUNT, now=eastern_datetime(2024, 6, 17))

        assert result.ingested_count == 1
        assert result.skipped_count == 0
        assert result.state.last_fetched_at == eastern_datetime(2024, 6, 17)

    def test_fetch_failure_keeps_last_persisted_state(
        self, ledger_repo, transaction_provider, market_data_service, batch, fixed_now
    ):
        """
        GIVEN a persisted journal and a provider failing on the second page
        WHEN sync runs
        THEN FetchError is raised and the ledger and checkpoint are unchanged
        """
        transaction_provider.add(*batch)
        JournalService(
            ledger_repo, transaction_provider, market_data_service, page_size=2
        ).sync(ACCOUNT, now=fixed_now)
        before = ledger_repo.load(ACCOUNT)

        transaction_provider.add(
            *[make_buy("AAPL", "1", "180", eastern_datetime(2024, 6, 16, h)) for h in (10, 11, 12)]
        )
        failing = JournalService(
            ledger_repo,
            FailingTransactionProvider(transaction_provider, fail_at_offset=2),
            market_data_service,
            page_size=2,
        )

        with pytest.raises(FetchError) as exc_info:
            failing.sync(ACCOUNT, now=eastern_datetime(2024, 6, 17))

        assert exc_info.value.title == "Fetching trades failed"
        after = ledger_repo.load(ACCOUNT)
        assert after.last_fetched_at == before.last_fetched_at
        assert encode_ledger(after.ledger) == encode_ledger(before.ledger)

    def test_initial_fetch_from_overrides_start_of_year(
        self, ledger_repo, transaction_provider, market_data_service, fixed_now
    ):
        """
        GIVEN initial_fetch_from set to 2023-12-01
        WHEN the first sync runs
        THEN December trades are fetched and the epoch is 2023-01-01
        """
        transaction_provider.add(make_buy("XYZ", "1", "5", eastern_datetime(2023, 12, 15)))
        service = JournalService(
            ledger_repo,
            transaction_provider,
            market_data_service,
            initial_fetch_from=eastern_datetime(2023, 12, 1, 0),
        )

        result = service.sync(ACCOUNT, now=fixed_now)

        assert result.ingested_count == 1
        assert result.state.ledger.epoch == date(2023, 1, 1)


# =============================================================================
# GUARD TESTS
# =============================================================================


class TestIngestionGuard:
    """Tests for the single in-flight ingestion guard."""

    def test_concurrent_cycle_rejected(self, journal_service, batch):
        with ingestion_guard(ACCOUNT):
            with pytest.raises(IngestionInProgressError):
                journal_service.ingest(ACCOUNT, batch)

    def test_other_accounts_not_blocked(self, journal_service, batch):
        with ingestion_guard(ACCOUNT):
            result = journal_service.ingest("acct-2", batch)

        assert result.ingested_count == 3

    def test_guard_released_after_failure(self, ledger_repo, transaction_provider, batch):
        service = JournalService(
            ledger_repo, transaction_provider, MarketDataService(FailingMarketProvider())
        )
        with pytest.raises(FetchError):
            service.ingest(ACCOUNT, batch)

        with ingestion_guard(ACCOUNT):
            pass


# =============================================================================
# VIEW TESTS
# =============================================================================


class TestJournalViews:
    """Tests for refresh_prices and get_journal."""

    def test_get_journal_for_unknown_account_is_empty(self, journal_service):
        view = journal_service.get_journal("nobody")

        assert view.months == []
        assert view.held_symbols == []
        assert view.summary.starting_balance == Decimal("0")

    def test_get_journal_projects_hierarchy(self, journal_service, batch):
        journal_service.ingest(ACCOUNT, batch)

        view = journal_service.get_journal(ACCOUNT)

        assert [m.start for m in view.months] == [date(2024, 1, 1)]
        assert view.held_symbols == ["XYZ"]
        assert view.months[0].profit.realised_profit_raw == Decimal("22")

    def test_refresh_prices_remarks_ledger(self, journal_service, ledger_repo, batch):
        """
        GIVEN a ledger ingested without live prices
        WHEN prices are refreshed
        THEN unrealised profit reflects the live quote and is persisted
        """
        ledger_repo.save(ACCOUNT, ingest_transactions(JournalState(), batch).state)

        view = journal_service.refresh_prices(ACCOUNT)

        assert view.summary.unrealised_profit_raw == Decimal("28")
        stored = journal_service.get_journal(ACCOUNT)
        assert stored.summary.unrealised_profit_raw == Decimal("28")
