"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from typing import Optional

from tranxhistory.database.query import CompiledPredicate
from tranxhistory.domain.entities import Extrema, Tranx


class LedgerStore(ABC):
    """Abstract persistence interface for the transaction ledger.

    Implementations raise :class:`~tranxhistory.domain.errors.StoreError`
    for every failure of the underlying medium.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create table and indexes)."""
        pass

    @abstractmethod
    def insert(self, tranx: Tranx) -> int:
        """Append one transaction. Returns the new, strictly increasing id."""
        pass

    @abstractmethod
    def query_filtered(self, predicate: CompiledPredicate) -> list[Tranx]:
        """Return transactions matching ``predicate``, oldest moment first."""
        pass

    @abstractmethod
    def scan_extrema(self) -> Optional[Extrema]:
        """Full-table scan for minimum/maximum moment and amount.

        Returns None when the table is empty.
        """
        pass

    @abstractmethod
    def get(self, tranx_id: int) -> Optional[Tranx]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of persisted transactions."""
        pass
