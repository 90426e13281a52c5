"""Domain layer for tranxhistory."""

from tranxhistory.domain.amount import Amount, CurrencySpecification
from tranxhistory.domain.entities import Direction, Extrema, Tranx, TranxPurpose
from tranxhistory.domain.moment import FDtm

__all__ = [
    "Amount",
    "CurrencySpecification",
    "Direction",
    "Extrema",
    "FDtm",
    "Tranx",
    "TranxPurpose",
]
