"""Trade journal endpoints."""

from fastapi import APIRouter, Depends

from trade_journal.api.deps import get_journal_service
from trade_journal.api.schemas import (
    AccountSummaryResponse,
    BrokerageTransactionRequest,
    DayResponse,
    ExecutionResponse,
    IngestionResponse,
    InstrumentEntryResponse,
    JournalResponse,
    MonthResponse,
    ProfitResponse,
    WeekResponse,
)
from trade_journal.domain.models import DayLedger, InstrumentDayEntry, ProfitFigures, Transaction
from trade_journal.domain.views import AccountSummary, IngestionResult, JournalView
from trade_journal.services import JournalService

router = APIRouter(prefix="/journal", tags=["journal"])


@router.get("/{account_id}", response_model=JournalResponse)
def get_journal(
    account_id: str,
    service: JournalService = Depends(get_journal_service),
) -> JournalResponse:
    """Get the month/week/day profit hierarchy and account summary."""
    return _journal_response(service.get_journal(account_id))


@router.post("/{account_id}/transactions", response_model=IngestionResponse)
def ingest_transactions(
    account_id: str,
    records: list[BrokerageTransactionRequest],
    service: JournalService = Depends(get_journal_service),
) -> IngestionResponse:
    """Merge a batch of brokerage transaction records into the journal."""
    transactions = [Transaction.from_brokerage_record(r.model_dump()) for r in records]
    return _ingestion_response(service.ingest(account_id, transactions))


@router.post("/{account_id}/sync", response_model=IngestionResponse)
def sync_journal(
    account_id: str,
    service: JournalService = Depends(get_journal_service),
) -> IngestionResponse:
    """Fetch transactions since the last checkpoint and merge them."""
    return _ingestion_response(service.sync(account_id))


@router.post("/{account_id}/prices", response_model=JournalResponse)
def refresh_prices(
    account_id: str,
    service: JournalService = Depends(get_journal_service),
) -> JournalResponse:
    """Re-mark open holdings at live prices."""
    return _journal_response(service.refresh_prices(account_id))


def _profit_response(profit: ProfitFigures) -> ProfitResponse:
    return ProfitResponse(
        realised_cost=profit.realised_cost,
        realised_gain=profit.realised_gain,
        unrealised_cost=profit.unrealised_cost,
        unrealised_gain=profit.unrealised_gain,
        realised_profit_raw=profit.realised_profit_raw,
        realised_profit_percent=profit.realised_profit_percent,
        unrealised_profit_raw=profit.unrealised_profit_raw,
        unrealised_profit_percent=profit.unrealised_profit_percent,
        combined_profit_raw=profit.combined_profit_raw,
        combined_profit_percent=profit.combined_profit_percent,
    )


def _summary_response(summary: AccountSummary) -> AccountSummaryResponse:
    return AccountSummaryResponse(
        starting_balance=summary.starting_balance,
        realised_balance=summary.realised_balance,
        unrealised_balance=summary.unrealised_balance,
        realised_profit_raw=summary.realised_profit_raw,
        realised_profit_percent=summary.realised_profit_percent,
        unrealised_profit_raw=summary.unrealised_profit_raw,
        unrealised_profit_percent=summary.unrealised_profit_percent,
    )


def _entry_response(entry: InstrumentDayEntry) -> InstrumentEntryResponse:
    return InstrumentEntryResponse(
        symbol=entry.symbol,
        name=entry.instrument.name,
        open_quantity=entry.open_quantity,
        buys=[ExecutionResponse(**vars(lot)) for lot in entry.buys],
        sells=[ExecutionResponse(**vars(fill)) for fill in entry.sells],
        profit=_profit_response(entry.profit),
    )


def _day_response(day: DayLedger) -> DayResponse:
    return DayResponse(
        date=day.date,
        starting_account_balance=day.starting_account_balance,
        has_holdings=day.has_holdings,
        has_sells=day.has_sells,
        profit=_profit_response(day.profit),
        entries=[_entry_response(entry) for entry in day.entries.values()],
    )


def _journal_response(view: JournalView) -> JournalResponse:
    return JournalResponse(
        months=[
            MonthResponse(
                start=month.start,
                has_holdings=month.has_holdings,
                has_sells=month.has_sells,
                profit=_profit_response(month.profit),
                weeks=[
                    WeekResponse(
                        start=week.start,
                        week_of_month=week.week_of_month,
                        has_holdings=week.has_holdings,
                        has_sells=week.has_sells,
                        profit=_profit_response(week.profit),
                        days=[_day_response(day) for day in week.days],
                    )
                    for week in month.weeks
                ],
            )
            for month in view.months
        ],
        summary=_summary_response(view.summary),
        held_symbols=view.held_symbols,
        last_fetched_at=view.last_fetched_at,
    )


def _ingestion_response(result: IngestionResult) -> IngestionResponse:
    return IngestionResponse(
        ingested_count=result.ingested_count,
        skipped_count=result.skipped_count,
        unmatched_count=result.unmatched_count,
        summary=_summary_response(result.summary),
        last_fetched_at=result.state.last_fetched_at,
    )
