"""Split raw brokerage transactions into chronologically ordered buys and sells."""

from dataclasses import dataclass, field
from typing import Iterable

from trade_journal.domain.models import Transaction, TransactionType


@dataclass(frozen=True)
class ClassifiedTransactions:
    """Buys and sells, each ascending by execution time."""

    buys: list[Transaction] = field(default_factory=list)
    sells: list[Transaction] = field(default_factory=list)
    other_count: int = 0


def classify_transactions(transactions: Iterable[Transaction]) -> ClassifiedTransactions:
    """
    Partition transactions into buys and sells sorted by occurred_at.

    Sorting is stable, so records with equal timestamps keep their input
    order. Transactions of any other type are counted and dropped.
    """
    buys: list[Transaction] = []
    sells: list[Transaction] = []
    other_count = 0

    for transaction in transactions:
        if transaction.transaction_type == TransactionType.BUY:
            buys.append(transaction)
        elif transaction.transaction_type == TransactionType.SELL:
            sells.append(transaction)
        else:
            other_count += 1

    return ClassifiedTransactions(
        buys=sorted(buys, key=lambda t: t.occurred_at),
        sells=sorted(sells, key=lambda t: t.occurred_at),
        other_count=other_count,
    )
