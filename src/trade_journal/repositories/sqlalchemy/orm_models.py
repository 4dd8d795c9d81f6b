"""SQLAlchemy ORM model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from trade_journal.repositories.sqlalchemy.database import Base


class JournalStateORM(Base):
    """SQLAlchemy model for one account's persisted journal state."""

    __tablename__ = "journal_state"

    account_id = Column(String(64), primary_key=True)
    ledger_json = Column(Text, nullable=True)
    schema_version = Column(Integer, nullable=False, default=1)
    last_fetched_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
