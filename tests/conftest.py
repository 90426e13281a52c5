"""Shared pytest fixtures for tranxhistory tests."""

import os
import tempfile

import pytest

from tranxhistory.database.factories import create_memory_store, create_sqlite_store
from tranxhistory.domain.amount import Amount
from tranxhistory.domain.entities import Direction, Tranx, TranxPurpose
from tranxhistory.domain.history import TranxHistory
from tranxhistory.domain.moment import FDtm


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield db_path

    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def temp_db(temp_db_path):
    """Create a temporary SQLite ledger store for testing."""
    store = create_sqlite_store(database_path=temp_db_path)
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()


@pytest.fixture
def memory_store():
    """Create an in-memory ledger store that tests can inspect directly."""
    return create_memory_store()


@pytest.fixture
def history(memory_store):
    """Create an initialized TranxHistory over an in-memory store."""
    tranx_history = TranxHistory()
    tranx_history.init(lambda: memory_store)
    yield tranx_history
    memory_store.disconnect()


@pytest.fixture
def make_tranx():
    """Return a builder for transactions with sensible defaults."""

    def _make(
        amount="EUR:1",
        epoch_millis=1000,
        direction=Direction.OUTGOING,
        purpose=TranxPurpose.EXPN_GRCR,
        tid=None,
    ):
        return Tranx(
            tid=tid or f"tid-{epoch_millis}-{amount}",
            moment=FDtm.from_epoch_millis(epoch_millis),
            purpose=purpose,
            amount=Amount.from_json_string(amount),
            direction=direction,
        )

    return _make


@pytest.fixture
def ledger_image(tmp_path, make_tranx):
    """Build a pre-populated ledger database file and return its path."""
    image_path = tmp_path / "image.db"
    store = create_sqlite_store(database_path=str(image_path))
    store.connect()
    store.initialize_schema()
    store.insert(make_tranx("EUR:20", 2000, Direction.INCOMING, TranxPurpose.TRNS_RECV))
    store.insert(make_tranx("EUR:5.25", 1000, Direction.OUTGOING, TranxPurpose.EXPN_GRCR))
    store.insert(make_tranx("EUR:12", 3000, Direction.OUTGOING, TranxPurpose.EXPN_RENT))
    store.disconnect()
    return image_path


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
