"""Store factory functions for creating ledger store instances."""

import os
from pathlib import Path
from typing import Optional

from tranxhistory.database import schema
from tranxhistory.database.sqlalchemy_db import SQLAlchemyLedgerStore

DB_PATH_ENV = "TRANXHISTORY_DB_PATH"


def default_database_path() -> Path:
    """Return ~/.tranxhistory/transaction_history.db, creating the directory."""
    db_dir = Path.home() / ".tranxhistory"
    db_dir.mkdir(exist_ok=True)
    return db_dir / schema.DATABASE_NAME


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyLedgerStore:
    """Create a SQLite-backed ledger store.

    Args:
        database_path: Path to SQLite database file. If None, checks
            TRANXHISTORY_DB_PATH environment variable, then defaults to
            ~/.tranxhistory/transaction_history.db

    Returns:
        SQLAlchemyLedgerStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        database_path = str(default_database_path())

    return SQLAlchemyLedgerStore(f"sqlite:///{database_path}")


def create_memory_store() -> SQLAlchemyLedgerStore:
    """Create an ephemeral in-memory ledger store."""
    return SQLAlchemyLedgerStore("sqlite://")
