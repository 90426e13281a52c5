"""SQLAlchemy ledger store implementation."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tranxhistory.database.base import LedgerStore
from tranxhistory.database.mappers import amount_from_columns, tranx_to_domain, tranx_to_row
from tranxhistory.database.models import TranxRow, create_session_factory
from tranxhistory.database.query import CompiledPredicate
from tranxhistory.domain.entities import Extrema, Tranx
from tranxhistory.domain.errors import StoreError
from tranxhistory.domain.moment import FDtm


class SQLAlchemyLedgerStore(LedgerStore):
    """SQLAlchemy-based implementation of LedgerStore.

    The store is not thread-safe on its own; the history manager that owns
    it serializes every call.
    """

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy ledger store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db'
                or 'sqlite://' for an in-memory store)

        Raises:
            StoreError: If the engine cannot be created or the schema cannot
                be set up
        """
        self.database_url = database_url
        try:
            self.session_factory = create_session_factory(database_url)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not open ledger at {database_url}: {e}") from e
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def insert(self, tranx: Tranx) -> int:
        """Append one transaction. Returns the new, strictly increasing id."""
        row = tranx_to_row(tranx)
        session = self._get_session()
        try:
            session.add(row)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Failed to insert transaction '{tranx.tid}': {e}") from e
        return row.id

    def query_filtered(self, predicate: CompiledPredicate) -> list[Tranx]:
        """Return transactions matching ``predicate``, oldest moment first."""
        session = self._get_session()
        statement = (
            select(TranxRow)
            .where(predicate.clause)
            .order_by(TranxRow.epoch_milliseconds.asc(), TranxRow.id.asc())
        )
        try:
            rows = session.scalars(statement).all()
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Failed to query transactions: {e}") from e
        return [tranx_to_domain(row) for row in rows]

    def scan_extrema(self) -> Optional[Extrema]:
        """Full-table scan for minimum/maximum moment and amount.

        Each bound is read with its own indexed query. Ties resolve to the
        earliest inserted row. Returns None when the table is empty.
        """
        session = self._get_session()
        try:
            min_dtm = session.scalar(
                select(func.min(TranxRow.epoch_milliseconds))
            )
            if min_dtm is None:
                return None
            max_dtm = session.scalar(select(func.max(TranxRow.epoch_milliseconds)))
            min_row = session.scalars(
                select(TranxRow).order_by(TranxRow.amount.asc(), TranxRow.id.asc()).limit(1)
            ).first()
            max_row = session.scalars(
                select(TranxRow).order_by(TranxRow.amount.desc(), TranxRow.id.asc()).limit(1)
            ).first()
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Failed to scan extrema: {e}") from e

        if min_row is None or max_row is None:
            return None
        return Extrema(
            min_moment=FDtm.from_epoch_millis(min_dtm),
            max_moment=FDtm.from_epoch_millis(max_dtm),
            min_amount=amount_from_columns(
                min_row.amount, min_row.currency, min_row.currency_specifications
            ),
            max_amount=amount_from_columns(
                max_row.amount, max_row.currency, max_row.currency_specifications
            ),
        )

    def get(self, tranx_id: int) -> Optional[Tranx]:
        """Get transaction by ID."""
        session = self._get_session()
        try:
            row = session.get(TranxRow, tranx_id)
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Failed to load transaction {tranx_id}: {e}") from e
        if row is None:
            return None
        return tranx_to_domain(row)

    def count(self) -> int:
        """Number of persisted transactions."""
        session = self._get_session()
        try:
            return session.scalar(select(func.count()).select_from(TranxRow)) or 0
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"Failed to count transactions: {e}") from e
