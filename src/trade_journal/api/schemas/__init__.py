"""Pydantic schemas for API request/response."""

from trade_journal.api.schemas.journal import (
    InstrumentSchema,
    BrokerageTransactionRequest,
    ProfitResponse,
    ExecutionResponse,
    InstrumentEntryResponse,
    DayResponse,
    WeekResponse,
    MonthResponse,
    AccountSummaryResponse,
    JournalResponse,
    IngestionResponse,
)

__all__ = [
    "InstrumentSchema",
    "BrokerageTransactionRequest",
    "ProfitResponse",
    "ExecutionResponse",
    "InstrumentEntryResponse",
    "DayResponse",
    "WeekResponse",
    "MonthResponse",
    "AccountSummaryResponse",
    "JournalResponse",
    "IngestionResponse",
]
