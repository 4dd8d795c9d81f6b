"""Build the day-indexed lot ledger from buys and match sells against it."""

import logging
from typing import Iterable

from trade_journal.core.timezone import market_date
from trade_journal.domain.models import (
    DayLedger,
    Fill,
    InstrumentDayEntry,
    Ledger,
    Transaction,
)
from trade_journal.domain.models.profit import ZERO
from trade_journal.domain.views import UnmatchedSell

logger = logging.getLogger(__name__)


def ingest_buys(ledger: Ledger, buys: Iterable[Transaction]) -> Ledger:
    """
    Fold buy transactions (ascending by time) into the ledger.

    Each buy lands on the day of its execution. The day is created on first
    use with the pre-trade account balance of that first buy. Fills sharing
    an order ID on the same instrument-day merge into one lot.
    """
    for buy in buys:
        trade_day = market_date(buy.occurred_at)
        if trade_day < ledger.epoch:
            logger.info("Rebasing ledger epoch from %s to %s", ledger.epoch, trade_day)
            ledger = ledger.rebased_to(trade_day)

        index = ledger.day_index(trade_day)
        day = ledger.day_at(index)
        if day is None:
            day = DayLedger(date=trade_day, starting_account_balance=buy.balance_before)

        entry = day.entry(buy.symbol) or InstrumentDayEntry(instrument=buy.instrument)
        day = day.with_entry(entry.with_buy(buy))
        ledger = ledger.with_day(index, day)

    return ledger


def ingest_sells(
    ledger: Ledger,
    sells: Iterable[Transaction],
) -> tuple[Ledger, list[UnmatchedSell]]:
    """
    Match sell transactions (ascending by time) against open holdings.

    Holdings are consumed oldest day first: every sell scans the whole ledger
    from index 0, taking as much as each day's open quantity allows and
    recording a Fill on that day. Quantity left over once the ledger is
    exhausted is returned as an UnmatchedSell rather than applied.
    """
    days = list(ledger.days)
    unmatched: list[UnmatchedSell] = []

    for sell in sells:
        remaining = sell.fill_quantity

        for index, day in enumerate(days):
            if remaining <= ZERO:
                break
            if day is None:
                continue
            entry = day.entry(sell.symbol)
            if entry is None or entry.open_quantity <= ZERO:
                continue

            matched = min(entry.open_quantity, remaining)
            days[index] = day.with_entry(entry.with_fill(Fill.from_sell(sell, matched)))
            remaining -= matched

        if remaining > ZERO:
            logger.debug(
                "Sell %s of %s left %s unmatched",
                sell.order_id,
                sell.symbol,
                remaining,
            )
            unmatched.append(UnmatchedSell(transaction=sell, unmatched_quantity=remaining))

    return ledger.with_days(tuple(days)), unmatched


def held_symbols(ledger: Ledger) -> list[str]:
    """Symbols with open holdings on any day of the ledger."""
    symbols = {
        symbol
        for day in ledger.iter_days()
        for symbol, entry in day.entries.items()
        if entry.open_quantity > ZERO
    }
    return sorted(symbols)
