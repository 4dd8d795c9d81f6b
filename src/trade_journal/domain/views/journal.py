"""View models for journal outputs."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from trade_journal.domain.models import DayLedger, JournalState, ProfitFigures, Transaction
from trade_journal.domain.models.profit import ZERO, profit_percent


@dataclass
class WeekBucket:
    """Days of one week within a month, most recent first once materialized."""

    start: date
    week_of_month: int
    profit: ProfitFigures = field(default_factory=ProfitFigures)
    has_holdings: bool = False
    has_sells: bool = False
    days: list[DayLedger] = field(default_factory=list)


@dataclass
class MonthBucket:
    """Weeks of one calendar month, most recent first once materialized."""

    start: date
    profit: ProfitFigures = field(default_factory=ProfitFigures)
    has_holdings: bool = False
    has_sells: bool = False
    weeks: list[WeekBucket] = field(default_factory=list)


@dataclass(frozen=True)
class AccountSummary:
    """Balance movement across the whole ledger span."""

    starting_balance: Decimal = field(default=ZERO)
    realised_balance: Decimal = field(default=ZERO)
    unrealised_balance: Decimal = field(default=ZERO)

    @property
    def realised_profit_raw(self) -> Decimal:
        return self.realised_balance - self.starting_balance

    @property
    def realised_profit_percent(self) -> Decimal:
        return profit_percent(self.realised_profit_raw, self.starting_balance)

    @property
    def unrealised_profit_raw(self) -> Decimal:
        return self.unrealised_balance - self.starting_balance

    @property
    def unrealised_profit_percent(self) -> Decimal:
        return profit_percent(self.unrealised_profit_raw, self.starting_balance)


@dataclass(frozen=True)
class UnmatchedSell:
    """Sell quantity that found no open holdings anywhere in the ledger."""

    transaction: Transaction
    unmatched_quantity: Decimal


@dataclass
class IngestionResult:
    """Outcome of one ingestion cycle."""

    state: JournalState
    summary: AccountSummary
    ingested_count: int = 0
    skipped_count: int = 0
    unmatched_sells: list[UnmatchedSell] = field(default_factory=list)

    @property
    def unmatched_count(self) -> int:
        return len(self.unmatched_sells)


@dataclass
class JournalView:
    """Month/week/day hierarchy plus account summary for presentation."""

    months: list[MonthBucket] = field(default_factory=list)
    summary: AccountSummary = field(default_factory=AccountSummary)
    held_symbols: list[str] = field(default_factory=list)
    last_fetched_at: Optional[datetime] = None
