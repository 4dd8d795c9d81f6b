"""Enumerations for domain models."""

from enum import Enum

# Brokerage transaction type codes
_BROKERAGE_CODES = {
    "SPUR": "BUY",  # stock purchase
    "SSAL": "SELL",  # stock sale
}


class TransactionType(str, Enum):
    """Types of brokerage transactions the journal distinguishes."""

    BUY = "BUY"
    SELL = "SELL"
    OTHER = "OTHER"  # dividends, fees, funding; ignored by the journal

    @classmethod
    def from_brokerage_code(cls, code: str) -> "TransactionType":
        """Map a brokerage type code (e.g. SPUR, SSAL) to a TransactionType."""
        return cls(_BROKERAGE_CODES.get((code or "").upper(), "OTHER"))
