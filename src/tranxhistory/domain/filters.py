"""Composable transaction filters.

A :class:`TranxFilter` combines up to four independent constraints
(direction, purpose, moment, amount). Every constraint is optional and an
unset constraint matches every transaction. Filters are immutable values:
two filters built from equal constraints are equal, which the history cache
relies on to skip redundant refreshes.

Example::

    TranxFilter(
        direction=DirectionExact(Direction.INCOMING),
        amount=AmountRange(Amount("EUR", 10), Amount("EUR", 50)),
    )
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from tranxhistory.domain.amount import Amount
from tranxhistory.domain.entities import Direction, TranxPurpose
from tranxhistory.domain.errors import InvalidFilterError, empty_choice, inverted_range
from tranxhistory.domain.moment import FDtm


class DirectionFilter:
    """Base class for direction constraints."""


@dataclass(frozen=True)
class DirectionExact(DirectionFilter):
    """Matches a single direction."""

    direction: Direction

    def __post_init__(self) -> None:
        if not isinstance(self.direction, Direction):
            raise InvalidFilterError(f"Not a direction: {self.direction!r}")


@dataclass(frozen=True)
class AnyDirection(DirectionFilter):
    """Matches incoming and outgoing transactions alike."""


class PurposeFilter:
    """Base class for purpose constraints."""


@dataclass(frozen=True)
class PurposeExact(PurposeFilter):
    purpose: TranxPurpose

    def __post_init__(self) -> None:
        if not isinstance(self.purpose, TranxPurpose):
            raise InvalidFilterError(f"Not a transaction purpose: {self.purpose!r}")


@dataclass(frozen=True)
class PurposeOneOf(PurposeFilter):
    """Matches any of the given purposes."""

    purposes: frozenset[TranxPurpose]

    def __init__(self, purposes: Iterable[TranxPurpose]):
        members = frozenset(purposes)
        if not members:
            raise InvalidFilterError(empty_choice("Purpose"))
        for purpose in members:
            if not isinstance(purpose, TranxPurpose):
                raise InvalidFilterError(f"Not a transaction purpose: {purpose!r}")
        object.__setattr__(self, "purposes", members)


class DatetimeFilter:
    """Base class for moment constraints."""


@dataclass(frozen=True)
class DatetimeExact(DatetimeFilter):
    """Matches transactions at exactly this millisecond."""

    moment: FDtm

    def __post_init__(self) -> None:
        if not isinstance(self.moment, FDtm):
            raise InvalidFilterError(f"Not a moment: {self.moment!r}")


@dataclass(frozen=True)
class DatetimeRange(DatetimeFilter):
    """Matches moments within ``[start, end]``, both inclusive."""

    start: FDtm
    end: FDtm

    def __post_init__(self) -> None:
        if not isinstance(self.start, FDtm) or not isinstance(self.end, FDtm):
            raise InvalidFilterError("Datetime range bounds must be moments")
        if self.start > self.end:
            raise InvalidFilterError(inverted_range("datetime", self.start, self.end))


class AmountFilter:
    """Base class for amount constraints.

    Amount constraints always apply to the amount's own currency.
    """


@dataclass(frozen=True)
class AmountExact(AmountFilter):
    amount: Amount

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Amount):
            raise InvalidFilterError(f"Not an amount: {self.amount!r}")


@dataclass(frozen=True)
class AmountRange(AmountFilter):
    """Matches amounts within ``[min, max]`` of one currency.

    Raises:
        CurrencyMismatchError: If the bounds are in different currencies
        InvalidFilterError: If ``min`` is greater than ``max``
    """

    min: Amount
    max: Amount

    def __post_init__(self) -> None:
        if not isinstance(self.min, Amount) or not isinstance(self.max, Amount):
            raise InvalidFilterError("Amount range bounds must be amounts")
        if self.min > self.max:
            raise InvalidFilterError(
                inverted_range("amount", self.min.to_json_string(), self.max.to_json_string())
            )


@dataclass(frozen=True)
class AmountOneOf(AmountFilter):
    """Matches any of the given amounts, each within its own currency."""

    amounts: frozenset[Amount]

    def __init__(self, amounts: Iterable[Amount]):
        members = frozenset(amounts)
        if not members:
            raise InvalidFilterError(empty_choice("Amount"))
        for amount in members:
            if not isinstance(amount, Amount):
                raise InvalidFilterError(f"Not an amount: {amount!r}")
        object.__setattr__(self, "amounts", members)


@dataclass(frozen=True)
class TranxFilter:
    """Composite transaction filter; None means no constraint."""

    direction: Optional[DirectionFilter] = None
    purpose: Optional[PurposeFilter] = None
    datetime: Optional[DatetimeFilter] = None
    amount: Optional[AmountFilter] = None

    def __post_init__(self) -> None:
        expected = (
            ("direction", DirectionFilter),
            ("purpose", PurposeFilter),
            ("datetime", DatetimeFilter),
            ("amount", AmountFilter),
        )
        for name, kind in expected:
            value = getattr(self, name)
            if value is not None and not isinstance(value, kind):
                raise InvalidFilterError(f"{name} must be a {kind.__name__}, got {value!r}")

    def is_empty(self) -> bool:
        """Return True if no constraint is active."""
        return (
            self.direction is None
            and self.purpose is None
            and self.datetime is None
            and self.amount is None
        )
