"""Transaction and Instrument domain models."""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from trade_journal.core.exceptions import ValidationError
from trade_journal.core.timezone import parse_datetime_eastern, to_eastern
from trade_journal.domain.models.enums import TransactionType


def to_decimal(value: Any, field_name: str) -> Decimal:
    """Convert a wire value (str, int, float) to Decimal."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid number for {field_name}: {value!r}") from exc


@dataclass(frozen=True)
class Instrument:
    """Traded instrument as reported by the brokerage."""

    id: str
    symbol: str
    name: str = ""


@dataclass(frozen=True)
class Transaction:
    """
    A brokerage trade execution record (immutable).

    - fill_price/fill_quantity describe one fill; partial fills of one order
      share the same order_id
    - transaction_amount is the signed cash effect of the fill
    - account_balance is the balance after the transaction
    """

    order_id: str
    fill_price: Decimal
    fill_quantity: Decimal
    transaction_type: TransactionType
    instrument: Instrument
    transaction_amount: Decimal
    account_balance: Decimal
    occurred_at: datetime
    account_amount: Optional[Decimal] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.transaction_type, str):
            object.__setattr__(self, "transaction_type", TransactionType(self.transaction_type))
        # Naive timestamps are market time
        object.__setattr__(self, "occurred_at", to_eastern(self.occurred_at))
        if self.fill_quantity < 0:
            raise ValidationError(
                f"Fill quantity cannot be negative (order {self.order_id}): {self.fill_quantity}"
            )

    @property
    def symbol(self) -> str:
        return self.instrument.symbol

    @property
    def is_buy(self) -> bool:
        return self.transaction_type == TransactionType.BUY

    @property
    def is_sell(self) -> bool:
        return self.transaction_type == TransactionType.SELL

    @property
    def balance_before(self) -> Decimal:
        """Account balance immediately before this transaction."""
        change = self.account_amount if self.account_amount is not None else self.transaction_amount
        return self.account_balance - change

    @property
    def fingerprint(self) -> str:
        """
        Stable identity of this fill.

        Two records describing the same execution hash identically, which lets
        re-fetched history be merged without double counting.
        """
        parts = [
            self.order_id,
            to_eastern(self.occurred_at).isoformat(),
            self.transaction_type.value,
            self.symbol,
            str(self.fill_quantity.normalize()),
            str(self.fill_price.normalize()),
        ]
        return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()

    @classmethod
    def from_brokerage_record(cls, record: dict[str, Any]) -> "Transaction":
        """
        Build a Transaction from a brokerage history record.

        Expected keys: orderID, fillPx, fillQty, finTranTypeID, instrument
        {id, symbol, name}, tranAmount, accountAmount (optional),
        accountBalance, tranWhen (ISO8601).
        """
        try:
            instrument = record["instrument"] or {}
            symbol = instrument.get("symbol")
            order_id = record["orderID"]
            occurred_at = record["tranWhen"]
        except (KeyError, TypeError) as exc:
            raise ValidationError(f"Brokerage record missing field: {exc}") from exc
        if not symbol:
            raise ValidationError(f"Brokerage record {order_id} has no instrument symbol")
        if not order_id:
            raise ValidationError("Brokerage record has no order ID")

        account_amount = record.get("accountAmount")
        return cls(
            order_id=str(order_id),
            fill_price=to_decimal(record.get("fillPx", 0), "fillPx"),
            fill_quantity=to_decimal(record.get("fillQty", 0), "fillQty"),
            transaction_type=TransactionType.from_brokerage_code(record.get("finTranTypeID", "")),
            instrument=Instrument(
                id=str(instrument.get("id", "")),
                symbol=symbol.upper(),
                name=instrument.get("name", "") or "",
            ),
            transaction_amount=to_decimal(record.get("tranAmount", 0), "tranAmount"),
            account_balance=to_decimal(record.get("accountBalance", 0), "accountBalance"),
            occurred_at=(
                occurred_at if isinstance(occurred_at, datetime)
                else parse_datetime_eastern(occurred_at)
            ),
            account_amount=(
                to_decimal(account_amount, "accountAmount") if account_amount is not None else None
            ),
        )
