"""tranxhistory - transaction ledger store and filter-query engine for a wallet."""

__version__ = "0.1.0"

from tranxhistory.domain.history import TranxHistory

__all__ = ["TranxHistory", "__version__"]
