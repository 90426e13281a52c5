"""Transaction history: the cached, lock-protected façade over the ledger."""

import shutil
import tempfile
import threading
from pathlib import Path
from typing import Callable, Optional

from tranxhistory.database.base import LedgerStore
from tranxhistory.database.factories import create_sqlite_store
from tranxhistory.database.query import compile_filter
from tranxhistory.domain.amount import Amount
from tranxhistory.domain.entities import Direction, Extrema, Tranx, TranxPurpose
from tranxhistory.domain.errors import NotInitializedError, StoreError, not_initialized
from tranxhistory.domain.filters import TranxFilter
from tranxhistory.domain.moment import FDtm

StoreFactory = Callable[[], LedgerStore]
PathStoreFactory = Callable[[str], LedgerStore]


class TranxHistory:
    """Owns the ledger store, the active filter, cached results and extrema.

    Construct one instance at application start and share it. Every public
    operation runs under a single non-reentrant lock, so at most one of
    ``init``, ``set_filter``, ``new_transaction``, ``get_history`` and
    ``clear_history`` executes at a time.

    The cached result list reflects the active filter applied to the whole
    ledger exactly when :attr:`is_stale` is False. Writes and filter changes
    mark the cache stale; :meth:`get_history` refreshes it lazily.

    Extrema are seeded by one full scan in :meth:`init` and then maintained
    by comparing each new transaction against the current bounds.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._store: Optional[LedgerStore] = None
        self._is_stale = True
        self._filter = TranxFilter()
        self._history: tuple[Tranx, ...] = ()
        self._min_moment: Optional[FDtm] = None
        self._max_moment: Optional[FDtm] = None
        self._min_amount: Optional[Amount] = None
        self._max_amount: Optional[Amount] = None

    # Read-only state
    @property
    def is_initialized(self) -> bool:
        with self._lock:
            return self._store is not None

    @property
    def is_stale(self) -> bool:
        with self._lock:
            return self._is_stale

    @property
    def filter(self) -> TranxFilter:
        with self._lock:
            self._require_initialized("filter")
            return self._filter

    @property
    def extrema(self) -> Optional[Extrema]:
        """Current bounds, or None while the ledger is empty."""
        with self._lock:
            self._require_initialized("extrema")
            if self._min_moment is None:
                return None
            return Extrema(
                min_moment=self._min_moment,
                max_moment=self._max_moment,
                min_amount=self._min_amount,
                max_amount=self._max_amount,
            )

    @property
    def min_moment(self) -> Optional[FDtm]:
        with self._lock:
            self._require_initialized("min_moment")
            return self._min_moment

    @property
    def max_moment(self) -> Optional[FDtm]:
        with self._lock:
            self._require_initialized("max_moment")
            return self._max_moment

    @property
    def min_amount(self) -> Optional[Amount]:
        with self._lock:
            self._require_initialized("min_amount")
            return self._min_amount

    @property
    def max_amount(self) -> Optional[Amount]:
        with self._lock:
            self._require_initialized("max_amount")
            return self._max_amount

    def _require_initialized(self, operation: str) -> LedgerStore:
        if self._store is None:
            raise NotInitializedError(not_initialized(operation))
        return self._store

    # Lifecycle
    def init(self, store_factory: StoreFactory) -> None:
        """Open the ledger and seed the extrema with one full scan.

        Idempotent: once initialized, later calls return without opening a
        second store.

        Args:
            store_factory: Callable returning an unopened LedgerStore

        Raises:
            StoreError: If the store cannot be opened or scanned; the history
                stays uninitialized
        """
        with self._lock:
            if self._store is not None:
                return
            self._open(store_factory)

    def init_from_image(
        self,
        image_path: str | Path,
        store_factory: PathStoreFactory = create_sqlite_store,
        target_path: Optional[str | Path] = None,
    ) -> None:
        """Initialize from a copy of a pre-populated database file.

        The image is copied to ``target_path`` (a fresh temporary file when
        omitted) and the copy is opened, so the image itself is never
        modified. Afterwards the history behaves as if :meth:`init` had been
        called. Idempotent like :meth:`init`.

        A temporary directory created here is removed again if the copy
        cannot be made or opened; after a successful open it holds the live
        ledger and is left in place.

        Raises:
            StoreError: If the image cannot be copied or opened
        """
        with self._lock:
            if self._store is not None:
                return
            temp_dir: Optional[Path] = None
            if target_path is None:
                temp_dir = Path(tempfile.mkdtemp(prefix="tranxhistory-"))
                target_path = temp_dir / Path(image_path).name
            try:
                try:
                    shutil.copyfile(image_path, target_path)
                except OSError as e:
                    raise StoreError(f"Could not copy ledger image {image_path}: {e}") from e
                self._open(lambda: store_factory(str(target_path)))
            except StoreError:
                if temp_dir is not None:
                    shutil.rmtree(temp_dir, ignore_errors=True)
                raise

    def _open(self, store_factory: StoreFactory) -> None:
        store = store_factory()
        try:
            store.connect()
            store.initialize_schema()
            extrema = store.scan_extrema()
        except StoreError:
            store.disconnect()
            raise
        if extrema is not None:
            self._min_moment = extrema.min_moment
            self._max_moment = extrema.max_moment
            self._min_amount = extrema.min_amount
            self._max_amount = extrema.max_amount
        self._store = store
        self._is_stale = True

    # Operations
    def set_filter(self, new_filter: TranxFilter) -> None:
        """Replace the active filter; an equal filter keeps the cache."""
        with self._lock:
            self._require_initialized("set_filter")
            if new_filter == self._filter:
                return
            # Reject filters that cannot compile before touching state
            compile_filter(new_filter)
            self._filter = new_filter
            self._is_stale = True

    def new_transaction(
        self,
        tid: str,
        purpose: Optional[TranxPurpose],
        amount: Amount,
        direction: Direction,
        moment: FDtm,
    ) -> Tranx:
        """Persist a transaction and fold it into the extrema.

        Bounds are updated by direct comparison with the current extrema,
        using the amount's fixed-point scalar so that entries of different
        currencies can share one ordering. Bounds only change once the
        insert has succeeded.

        Returns:
            The persisted transaction, including its store-assigned id

        Raises:
            NotInitializedError: If called before init
            StoreError: If the insert fails
        """
        with self._lock:
            store = self._require_initialized("new_transaction")
            tranx = Tranx(
                tid=tid, moment=moment, purpose=purpose, amount=amount, direction=direction
            )
            tranx_id = store.insert(tranx)
            self._is_stale = True

            if self._min_amount is None or amount.scalar < self._min_amount.scalar:
                self._min_amount = amount
            if self._max_amount is None or amount.scalar > self._max_amount.scalar:
                self._max_amount = amount
            if self._min_moment is None or moment < self._min_moment:
                self._min_moment = moment
            if self._max_moment is None or moment > self._max_moment:
                self._max_moment = moment

            return Tranx(
                tid=tid,
                moment=moment,
                purpose=purpose,
                amount=amount,
                direction=direction,
                id=tranx_id,
            )

    def get_history(self) -> tuple[Tranx, ...]:
        """Return transactions matching the active filter, oldest first.

        Served from the cache unless it is stale, in which case the filter
        is compiled, the store queried and the cache replaced before
        returning.
        """
        with self._lock:
            store = self._require_initialized("get_history")
            if not self._is_stale:
                return self._history
            self._history = tuple(store.query_filtered(compile_filter(self._filter)))
            self._is_stale = False
            return self._history

    def clear_history(self) -> None:
        """Reset the filter to match everything. Extrema are left untouched."""
        with self._lock:
            self._require_initialized("clear_history")
            self._filter = TranxFilter()
            self._is_stale = True
