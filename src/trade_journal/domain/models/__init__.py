"""Domain models package."""

from trade_journal.domain.models.enums import TransactionType
from trade_journal.domain.models.transaction import Instrument, Transaction
from trade_journal.domain.models.profit import ProfitFigures, profit_percent
from trade_journal.domain.models.ledger import (
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
    "profit_percent",
    "Lot",
    "Fill",
    "InstrumentDayEntry",
    "DayLedger",
    "Ledger",
    "JournalState",
]
