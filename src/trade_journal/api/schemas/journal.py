"""Pydantic schemas for journal endpoints."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class InstrumentSchema(BaseModel):
    """Instrument as carried on brokerage records."""

    id: str = ""
    symbol: str
    name: str = ""


class BrokerageTransactionRequest(BaseModel):
    """One brokerage history record, in the brokerage's field names."""

    orderID: str
    fillPx: Decimal
    fillQty: Decimal = Field(ge=0)
    finTranTypeID: str
    instrument: InstrumentSchema
    tranAmount: Decimal = Decimal("0")
    accountAmount: Optional[Decimal] = None
    accountBalance: Decimal = Decimal("0")
    tranWhen: datetime


class ProfitResponse(BaseModel):
    """Cost, gain and profit figures at any aggregation level."""

    realised_cost: Decimal
    realised_gain: Decimal
    unrealised_cost: Decimal
    unrealised_gain: Decimal
    realised_profit_raw: Decimal
    realised_profit_percent: Decimal
    unrealised_profit_raw: Decimal
    unrealised_profit_percent: Decimal
    combined_profit_raw: Decimal
    combined_profit_percent: Decimal


class ExecutionResponse(BaseModel):
    """A lot (buy) or fill (matched sell)."""

    order_id: str
    unit_price: Decimal
    unit_quantity: Decimal
    total_cost: Decimal
    date: datetime


class InstrumentEntryResponse(BaseModel):
    """One instrument's activity within a day."""

    symbol: str
    name: str
    open_quantity: Decimal
    buys: list[ExecutionResponse]
    sells: list[ExecutionResponse]
    profit: ProfitResponse


class DayResponse(BaseModel):
    """Response schema for one day of the ledger."""

    date: date
    starting_account_balance: Optional[Decimal] = None
    has_holdings: bool
    has_sells: bool
    profit: ProfitResponse
    entries: list[InstrumentEntryResponse]


class WeekResponse(BaseModel):
    """Response schema for a week-of-month bucket."""

    start: date
    week_of_month: int
    has_holdings: bool
    has_sells: bool
    profit: ProfitResponse
    days: list[DayResponse]


class MonthResponse(BaseModel):
    """Response schema for a month bucket."""

    start: date
    has_holdings: bool
    has_sells: bool
    profit: ProfitResponse
    weeks: list[WeekResponse]


class AccountSummaryResponse(BaseModel):
    """Response schema for the whole-period balance summary."""

    starting_balance: Decimal
    realised_balance: Decimal
    unrealised_balance: Decimal
    realised_profit_raw: Decimal
    realised_profit_percent: Decimal
    unrealised_profit_raw: Decimal
    unrealised_profit_percent: Decimal


class JournalResponse(BaseModel):
    """Response schema for the full journal view."""

    months: list[MonthResponse]
    summary: AccountSummaryResponse
    held_symbols: list[str]
    last_fetched_at: Optional[datetime] = None


class IngestionResponse(BaseModel):
    """Response schema for an ingestion cycle."""

    ingested_count: int
    skipped_count: int
    unmatched_count: int
    summary: AccountSummaryResponse
    last_fetched_at: Optional[datetime] = None
