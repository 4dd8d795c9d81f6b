"""Market data view models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Quote:
    """Last traded price for a symbol."""

    symbol: str
    last_price: Decimal
    as_of: datetime
