"""Domain layer - pure business models with no external dependencies."""

from trade_journal.domain.models import (
    TransactionType,
    Instrument,
    Transaction,
    ProfitFigures,
    Lot,
    Fill,
    InstrumentDayEntry,
    DayLedger,
    Ledger,
    JournalState,
)

__all__ = [
    "TransactionType",
    "Instrument",
    "Transaction",
    "ProfitFigures",
    "Lot",
    "Fill",
    "InstrumentDayEntry",
    "DayLedger",
    "Ledger",
    "JournalState",
]
