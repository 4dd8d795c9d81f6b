"""Core utilities and shared functionality."""

from trade_journal.core.timezone import (
    now_eastern,
    to_eastern,
    parse_datetime_eastern,
    market_date,
    start_of_year_eastern,
    EASTERN_TZ,
)
from trade_journal.core.exceptions import (
    AppError,
    ValidationError,
    FetchError,
    IngestionInProgressError,
    LedgerFormatError,
)

__all__ = [
    "now_eastern",
    "to_eastern",
    "parse_datetime_eastern",
    "market_date",
    "start_of_year_eastern",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "FetchError",
    "IngestionInProgressError",
    "LedgerFormatError",
]
