"""View models for service outputs."""

from trade_journal.domain.views.journal import (
    WeekBucket,
    MonthBucket,
    AccountSummary,
    UnmatchedSell,
    IngestionResult,
    JournalView,
)
from trade_journal.domain.views.market import Quote

__all__ = [
    "WeekBucket",
    "MonthBucket",
    "AccountSummary",
    "UnmatchedSell",
    "IngestionResult",
    "JournalView",
    "Quote",
]
