"""SQLAlchemy implementation of LedgerRepository."""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from trade_journal.core.timezone import to_eastern
from trade_journal.domain.models import JournalState
from trade_journal.repositories.ledger_codec import SCHEMA_VERSION, decode_ledger, encode_ledger
from trade_journal.repositories.sqlalchemy.orm_models import JournalStateORM


class SqlAlchemyLedgerRepository:
    """SQLAlchemy-backed journal state, one row per account."""

    def __init__(self, db: Session):
        self._db = db

    def load(self, account_id: str) -> JournalState:
        """Return the stored state, or an empty JournalState when none exists."""
        orm_state = self._db.get(JournalStateORM, account_id)
        if orm_state is None:
            return JournalState()
        return self._to_domain(orm_state)

    def save(self, account_id: str, state: JournalState) -> None:
        """Insert or replace the stored state for an account."""
        ledger_json = encode_ledger(state.ledger) if state.ledger is not None else None
        last_fetched_at = to_eastern(state.last_fetched_at) if state.last_fetched_at else None

        orm_state = self._db.get(JournalStateORM, account_id)
        if orm_state:
            orm_state.ledger_json = ledger_json
            orm_state.schema_version = SCHEMA_VERSION
            orm_state.last_fetched_at = last_fetched_at
        else:
            orm_state = JournalStateORM(
                account_id=account_id,
                ledger_json=ledger_json,
                schema_version=SCHEMA_VERSION,
                last_fetched_at=last_fetched_at,
            )
            self._db.add(orm_state)

        self._db.commit()

    @staticmethod
    def _to_domain(orm: JournalStateORM) -> JournalState:
        """Convert ORM row to domain model."""
        return JournalState(
            ledger=decode_ledger(orm.ledger_json) if orm.ledger_json else None,
            last_fetched_at=_restore_tz(orm.last_fetched_at),
        )


def _restore_tz(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo; stored checkpoints are market time
    return to_eastern(value) if value is not None else None
