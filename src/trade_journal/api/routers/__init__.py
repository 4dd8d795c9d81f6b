"""API routers package."""

from trade_journal.api.routers.journal import router as journal_router

__all__ = [
    "journal_router",
]
