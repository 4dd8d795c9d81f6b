"""Realised and unrealised profit for each instrument-day, rolled up per day."""

from decimal import Decimal
from typing import Mapping, Optional

from trade_journal.domain.models import DayLedger, InstrumentDayEntry, Ledger, ProfitFigures
from trade_journal.domain.models.profit import ZERO


def calculate_entry_profit(
    entry: InstrumentDayEntry,
    live_price: Optional[Decimal] = None,
) -> InstrumentDayEntry:
    """
    Derive cost and gain figures for one instrument-day.

    Sold quantity is allocated to the day's lots in date order: the consumed
    part of each lot is realised cost, the rest is unrealised cost. The open
    quantity is marked at live_price; an unknown (None or zero) price leaves
    unrealised gain and unrealised profit at zero.
    """
    buys = sorted(entry.buys, key=lambda lot: lot.date)
    sells = sorted(entry.sells, key=lambda fill: fill.date)

    realised_gain = sum((fill.unit_quantity * fill.unit_price for fill in sells), ZERO)
    quantity_sold = sum((fill.unit_quantity for fill in sells), ZERO)

    realised_cost = ZERO
    unrealised_cost = ZERO
    for lot in buys:
        consumed = min(lot.unit_quantity, quantity_sold)
        quantity_sold -= consumed
        if consumed == lot.unit_quantity:
            realised_cost += lot.total_cost
        else:
            consumed_cost = consumed * lot.unit_price
            realised_cost += consumed_cost
            unrealised_cost += lot.total_cost - consumed_cost

    priced = bool(live_price) and entry.open_quantity > ZERO
    unrealised_gain = entry.open_quantity * live_price if priced else ZERO
    unrealised_profit_raw = unrealised_gain - unrealised_cost if priced else ZERO

    profit = ProfitFigures(
        realised_cost=realised_cost,
        realised_gain=realised_gain,
        unrealised_cost=unrealised_cost,
        unrealised_gain=unrealised_gain,
        realised_profit_raw=realised_gain - realised_cost,
        unrealised_profit_raw=unrealised_profit_raw,
    )
    return InstrumentDayEntry(
        instrument=entry.instrument,
        buys=tuple(buys),
        sells=tuple(sells),
        open_quantity=entry.open_quantity,
        profit=profit,
    )


def calculate_day_profit(day: DayLedger, prices: Mapping[str, Decimal]) -> DayLedger:
    """Recompute every entry of a day and sum their raw figures."""
    entries = {
        symbol: calculate_entry_profit(entry, prices.get(symbol))
        for symbol, entry in day.entries.items()
    }
    total = sum((entry.profit for entry in entries.values()), ProfitFigures())
    return DayLedger(
        date=day.date,
        entries=entries,
        starting_account_balance=day.starting_account_balance,
        profit=total,
    )


def calculate_profits(ledger: Ledger, prices: Mapping[str, Decimal]) -> Ledger:
    """Recompute profit figures for every recorded day of the ledger."""
    return ledger.with_days(
        tuple(
            calculate_day_profit(day, prices) if day is not None else None
            for day in ledger.days
        )
    )
