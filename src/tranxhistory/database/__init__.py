"""Database layer for tranxhistory."""

from tranxhistory.database.base import LedgerStore
from tranxhistory.database.factories import create_memory_store, create_sqlite_store
from tranxhistory.database.query import CompiledPredicate, compile_filter

__all__ = [
    "LedgerStore",
    "CompiledPredicate",
    "compile_filter",
    "create_memory_store",
    "create_sqlite_store",
]
