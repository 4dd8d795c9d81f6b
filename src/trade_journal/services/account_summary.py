"""Whole-ledger balance summary."""

from trade_journal.domain.models import Ledger
from trade_journal.domain.models.profit import ZERO
from trade_journal.domain.views import AccountSummary


def summarize_account(ledger: Ledger) -> AccountSummary:
    """
    Derive starting, realised and unrealised balances across the ledger.

    The earliest day carrying a starting balance anchors the period; the
    realised balance adds each day's realised profit and the unrealised
    balance adds each day's combined profit.
    """
    starting_balance = next(
        (
            day.starting_account_balance
            for day in ledger.iter_days()
            if day.starting_account_balance is not None
        ),
        ZERO,
    )

    realised_balance = starting_balance
    unrealised_balance = starting_balance
    for day in ledger.iter_days():
        realised_balance += day.profit.realised_profit_raw
        unrealised_balance += day.profit.combined_profit_raw

    return AccountSummary(
        starting_balance=starting_balance,
        realised_balance=realised_balance,
        unrealised_balance=unrealised_balance,
    )
