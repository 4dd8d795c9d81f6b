"""Ledger domain models: lots, fills, instrument-days, days and the ledger.

All values are immutable snapshots. Builder methods return new instances,
so a day touched by both the buy and the sell pass is never aliased.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Iterator, Optional

from trade_journal.domain.models.profit import ProfitFigures, ZERO
from trade_journal.domain.models.transaction import Instrument, Transaction


@dataclass(frozen=True)
class TradeExecution:
    """Quantity of an instrument traded at a unit price."""

    order_id: str
    unit_price: Decimal
    unit_quantity: Decimal
    total_cost: Decimal
    date: datetime


@dataclass(frozen=True)
class Lot(TradeExecution):
    """A buy order's fills on one day, merged by order ID."""

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "Lot":
        return cls(
            order_id=transaction.order_id,
            unit_price=transaction.fill_price,
            unit_quantity=transaction.fill_quantity,
            total_cost=transaction.fill_quantity * transaction.fill_price,
            date=transaction.occurred_at,
        )

    def merged_with(self, transaction: Transaction) -> "Lot":
        """Fold another partial fill of the same order into this lot."""
        quantity = self.unit_quantity + transaction.fill_quantity
        total_cost = self.total_cost + transaction.fill_quantity * transaction.fill_price
        unit_price = total_cost / quantity if quantity > ZERO else self.unit_price
        return replace(self, unit_price=unit_price, unit_quantity=quantity, total_cost=total_cost)


@dataclass(frozen=True)
class Fill(TradeExecution):
    """Portion of a sell matched against one day's open holdings."""

    @classmethod
    def from_sell(cls, transaction: Transaction, quantity: Decimal) -> "Fill":
        return cls(
            order_id=transaction.order_id,
            unit_price=transaction.fill_price,
            unit_quantity=quantity,
            total_cost=quantity * transaction.fill_price,
            date=transaction.occurred_at,
        )


@dataclass(frozen=True)
class InstrumentDayEntry:
    """One instrument's buys, matched sells and remaining holding for a day."""

    instrument: Instrument
    buys: tuple[Lot, ...] = ()
    sells: tuple[Fill, ...] = ()
    open_quantity: Decimal = field(default=ZERO)
    profit: ProfitFigures = field(default_factory=ProfitFigures)

    @property
    def symbol(self) -> str:
        return self.instrument.symbol

    @property
    def bought_quantity(self) -> Decimal:
        return sum((lot.unit_quantity for lot in self.buys), ZERO)

    @property
    def sold_quantity(self) -> Decimal:
        return sum((fill.unit_quantity for fill in self.sells), ZERO)

    def with_buy(self, transaction: Transaction) -> "InstrumentDayEntry":
        """Record a buy fill, merging partial fills that share an order ID."""
        buys = list(self.buys)
        for index, lot in enumerate(buys):
            if lot.order_id == transaction.order_id:
                buys[index] = lot.merged_with(transaction)
                break
        else:
            buys.append(Lot.from_transaction(transaction))
        return replace(
            self,
            buys=tuple(buys),
            open_quantity=self.open_quantity + transaction.fill_quantity,
        )

    def with_fill(self, fill: Fill) -> "InstrumentDayEntry":
        """Consume open quantity with a matched sell fill."""
        return replace(
            self,
            sells=self.sells + (fill,),
            open_quantity=self.open_quantity - fill.unit_quantity,
        )


@dataclass(frozen=True)
class DayLedger:
    """All instrument activity on one calendar day."""

    date: date
    entries: dict[str, InstrumentDayEntry] = field(default_factory=dict)
    starting_account_balance: Optional[Decimal] = None
    profit: ProfitFigures = field(default_factory=ProfitFigures)

    @property
    def has_holdings(self) -> bool:
        return any(entry.open_quantity > ZERO for entry in self.entries.values())

    @property
    def has_sells(self) -> bool:
        return any(entry.sells for entry in self.entries.values())

    def entry(self, symbol: str) -> Optional[InstrumentDayEntry]:
        return self.entries.get(symbol)

    def with_entry(self, entry: InstrumentDayEntry) -> "DayLedger":
        return replace(self, entries={**self.entries, entry.symbol: entry})


@dataclass(frozen=True)
class Ledger:
    """
    Day-indexed sequence of DayLedgers.

    Index i holds the day `epoch + i`; None marks a day without buys.
    applied_fingerprints records every transaction already folded in.
    """

    epoch: date
    days: tuple[Optional[DayLedger], ...] = ()
    applied_fingerprints: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def starting(cls, epoch: date) -> "Ledger":
        return cls(epoch=epoch)

    def day_index(self, day: date) -> int:
        """Whole days between the epoch and a calendar date."""
        return (day - self.epoch).days

    def day_at(self, index: int) -> Optional[DayLedger]:
        if 0 <= index < len(self.days):
            return self.days[index]
        return None

    def iter_days(self) -> Iterator[DayLedger]:
        """Recorded days in chronological order, skipping empty markers."""
        return (day for day in self.days if day is not None)

    def with_day(self, index: int, day: DayLedger) -> "Ledger":
        """Place a day at an index, padding with empty markers as needed."""
        if index < 0:
            raise IndexError(f"Day index {index} precedes ledger epoch {self.epoch}")
        days = list(self.days)
        if index >= len(days):
            days.extend([None] * (index - len(days) + 1))
        days[index] = day
        return replace(self, days=tuple(days))

    def with_days(self, days: tuple[Optional[DayLedger], ...]) -> "Ledger":
        return replace(self, days=days)

    def rebased_to(self, epoch: date) -> "Ledger":
        """Move the epoch back to an earlier date, shifting existing days."""
        shift = (self.epoch - epoch).days
        if shift <= 0:
            return self
        return replace(self, epoch=epoch, days=(None,) * shift + self.days)

    def with_fingerprints(self, fingerprints: frozenset[str]) -> "Ledger":
        return replace(self, applied_fingerprints=self.applied_fingerprints | fingerprints)


@dataclass(frozen=True)
class JournalState:
    """Persisted journal state: the ledger and the fetch checkpoint."""

    ledger: Optional[Ledger] = None
    last_fetched_at: Optional[datetime] = None
