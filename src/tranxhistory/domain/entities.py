"""Domain model entities for tranxhistory.

These are pure data classes representing ledger concepts, independent of
the database schema. The store maps them to and from rows.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tranxhistory.domain.amount import Amount
from tranxhistory.domain.errors import ValidationError
from tranxhistory.domain.moment import FDtm


class Direction(Enum):
    """Direction of a transaction relative to the wallet.

    OUTGOING orders before INCOMING.
    """

    OUTGOING = 0
    INCOMING = 1

    @property
    def is_incoming(self) -> bool:
        return self is Direction.INCOMING

    @classmethod
    def parse(cls, text: str) -> "Direction":
        """Parse 'incoming' or 'outgoing', case-insensitively."""
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise ValidationError(
                f"Invalid direction '{text}': must be 'outgoing' or 'incoming'"
            ) from None

    def __lt__(self, other: "Direction") -> bool:
        if not isinstance(other, Direction):
            return NotImplemented
        return self.value < other.value


class TranxPurpose(Enum):
    """Closed set of purpose tags a wallet user can attach to a transaction."""

    EDUC_CLTH = ("EDUC_CLTH", "school_uniforms")
    EDUC_SCHL = ("EDUC_SCHL", "tuition_fees")
    EDUC_SUPL = ("EDUC_SUPL", "school_supplies")
    EXPN_CELL = ("EXPN_CELL", "phone_bill")
    EXPN_DEBT = ("EXPN_DEBT", "debt")
    EXPN_FARM = ("EXPN_FARM", "farming")
    EXPN_GRCR = ("EXPN_GRCR", "groceries")
    EXP_MRKT = ("EXP_MRKT", "market_fees")
    EXPN_PTRL = ("EXPN_PTRL", "gas")
    EXPN_RENT = ("EXPN_RENT", "housing_expenses")
    EXPN_TOOL = ("EXPN_TOOL", "tools_and_equipment")
    EXPN_TRPT = ("EXPN_TRPT", "transportation")
    HLTH_DOCT = ("HLTH_DOCT", "doctors_appointment")
    HLTH_MEDS = ("HLTH_MEDS", "medicine")
    TRNS_RECV = ("TRNS_RECV", "receive_money")
    TRNS_SEND = ("TRNS_SEND", "send_money")
    UTIL_ELEC = ("UTIL_ELEC", "electricity_and_power")
    UTIL_WATR = ("UTIL_WATR", "water")

    def __init__(self, code: str, label: str):
        self.code = code
        self.label = label

    @classmethod
    def lookup(cls, code: Optional[str]) -> Optional["TranxPurpose"]:
        """Return the purpose stored under ``code``, or None if unknown."""
        if code is None:
            return None
        return cls.__members__.get(code)

    def __lt__(self, other: "TranxPurpose") -> bool:
        if not isinstance(other, TranxPurpose):
            return NotImplemented
        return self.code < other.code


@dataclass(frozen=True)
class Tranx:
    """One ledger entry.

    ``id`` is assigned by the store and is None until the entry has been
    persisted. Entries are never updated; corrections are new entries.
    """

    tid: str
    moment: FDtm
    purpose: Optional[TranxPurpose]
    amount: Amount
    direction: Direction
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.tid, str):
            raise ValidationError(f"Transaction identity must be a string, got {self.tid!r}")
        if not isinstance(self.moment, FDtm):
            raise ValidationError("Transaction moment is required")
        if not isinstance(self.amount, Amount):
            raise ValidationError("Transaction amount is required")
        if not isinstance(self.direction, Direction):
            raise ValidationError("Transaction direction is required")
        if self.purpose is not None and not isinstance(self.purpose, TranxPurpose):
            raise ValidationError(f"Unknown transaction purpose {self.purpose!r}")


@dataclass(frozen=True)
class Extrema:
    """Minimum and maximum moment and amount across the ledger."""

    min_moment: FDtm
    max_moment: FDtm
    min_amount: Amount
    max_amount: Amount
