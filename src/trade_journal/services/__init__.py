"""Service layer - journal engine and orchestration."""

from trade_journal.services.classifier import ClassifiedTransactions, classify_transactions
from trade_journal.services.lot_ledger import ingest_buys, ingest_sells, held_symbols
from trade_journal.services.profit_calculator import (
    calculate_entry_profit,
    calculate_day_profit,
    calculate_profits,
)
from trade_journal.services.period_aggregator import aggregate_periods
from trade_journal.services.account_summary import summarize_account
from trade_journal.services.market_data_service import MarketDataService
from trade_journal.services.journal_service import (
    JournalService,
    ingest_transactions,
    recompute,
    build_journal_view,
)

__all__ = [
    "ClassifiedTransactions",
    "classify_transactions",
    "ingest_buys",
    "ingest_sells",
    "held_symbols",
    "calculate_entry_profit",
    "calculate_day_profit",
    "calculate_profits",
    "aggregate_periods",
    "summarize_account",
    "MarketDataService",
    "JournalService",
    "ingest_transactions",
    "recompute",
    "build_journal_view",
]
