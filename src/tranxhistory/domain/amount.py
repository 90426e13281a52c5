"""Monetary amounts with an integer major part and a 1e-8 fractional part."""

import json
import re
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from tranxhistory.domain.errors import (
    AmountOverflowError,
    AmountParserError,
    CurrencyMismatchError,
    currency_mismatch,
)

# Fractions are counted in hundred-millionths of the major unit.
FRACTIONAL_BASE = 100_000_000
MAX_FRACTION_LENGTH = 8
MAX_FRACTION = FRACTIONAL_BASE - 1
MAX_VALUE = 2**52

# Number of fraction digits rendered when no currency specification is known.
DEFAULT_TRAILING_ZERO_DIGITS = 2

_CURRENCY_RE = re.compile(r"^[-_*A-Za-z0-9]{1,12}$")


@dataclass(frozen=True)
class CurrencySpecification:
    """Formatting metadata for a currency.

    The specification never takes part in amount comparisons; it only
    travels with the amount so that it can be rendered and persisted.
    """

    name: str
    num_fractional_input_digits: int
    num_fractional_normal_digits: int
    num_fractional_trailing_zero_digits: int
    alt_unit_names: Mapping[int, str] = field(default_factory=dict)

    @property
    def symbol(self) -> Optional[str]:
        """Symbol of the base unit, if the currency specification names one."""
        return self.alt_unit_names.get(0)

    def to_json(self) -> str:
        """Encode using the wallet's wire field names."""
        return json.dumps(
            {
                "name": self.name,
                "num_fractional_input_digits": self.num_fractional_input_digits,
                "num_fractional_normal_digits": self.num_fractional_normal_digits,
                "num_fractional_trailing_zero_digits": self.num_fractional_trailing_zero_digits,
                "alt_unit_names": {str(k): v for k, v in sorted(self.alt_unit_names.items())},
            },
            sort_keys=True,
        )

    @classmethod
    def from_json(cls, text: str) -> "CurrencySpecification":
        """Decode a specification produced by :meth:`to_json`.

        Raises:
            ValueError: If the JSON is malformed or misses a field
        """
        try:
            data: dict[str, Any] = json.loads(text)
            return cls(
                name=data["name"],
                num_fractional_input_digits=int(data["num_fractional_input_digits"]),
                num_fractional_normal_digits=int(data["num_fractional_normal_digits"]),
                num_fractional_trailing_zero_digits=int(
                    data["num_fractional_trailing_zero_digits"]
                ),
                alt_unit_names={
                    int(k): v for k, v in data.get("alt_unit_names", {}).items()
                },
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid currency specification: {e}") from e


def check_currency(currency: str) -> str:
    """Validate currency code syntax and return it unchanged."""
    if not isinstance(currency, str) or not _CURRENCY_RE.match(currency):
        raise AmountParserError(f"Invalid currency: {currency!r}")
    return currency


@dataclass(frozen=True)
class Amount:
    """An amount of a single currency.

    ``value`` holds whole units and ``fraction`` holds hundred-millionths of
    a unit, so a fraction of 50_000_000 is half a unit. Amounts of different
    currencies are never ordered or combined; doing so raises
    :class:`CurrencyMismatchError`.
    """

    currency: str
    value: int
    fraction: int = 0
    spec: Optional[CurrencySpecification] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        check_currency(self.currency)
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise AmountParserError(f"Value must be an integer, got {self.value!r}")
        if not isinstance(self.fraction, int) or isinstance(self.fraction, bool):
            raise AmountParserError(f"Fraction must be an integer, got {self.fraction!r}")
        if self.value < 0 or self.value > MAX_VALUE:
            raise AmountParserError(f"Value {self.value} outside 0..{MAX_VALUE}")
        if self.fraction < 0 or self.fraction > MAX_FRACTION:
            raise AmountParserError(f"Fraction {self.fraction} outside 0..{MAX_FRACTION}")

    # Construction helpers
    @classmethod
    def zero(cls, currency: str) -> "Amount":
        return cls(currency, 0, 0)

    @classmethod
    def min(cls, currency: str) -> "Amount":
        """Smallest non-zero amount of ``currency``."""
        return cls(currency, 0, 1)

    @classmethod
    def max(cls, currency: str) -> "Amount":
        """Largest representable amount of ``currency``."""
        return cls(currency, MAX_VALUE, MAX_FRACTION)

    @classmethod
    def from_scalar(
        cls, currency: str, scalar: int, spec: Optional[CurrencySpecification] = None
    ) -> "Amount":
        """Rebuild an amount from its ordering scalar (see :attr:`scalar`)."""
        if scalar < 0:
            raise AmountParserError(f"Scalar {scalar} is negative")
        value, fraction = divmod(scalar, FRACTIONAL_BASE)
        return cls(currency, value, fraction, spec)

    @classmethod
    def parse(cls, currency: str, text: str) -> "Amount":
        """Parse a decimal string such as ``"3.1415"`` for ``currency``.

        Raises:
            AmountParserError: If the string is not a non-negative decimal
                with at most eight fraction digits
        """
        try:
            number = Decimal(text.strip())
        except InvalidOperation:
            raise AmountParserError(f"Invalid amount: {text!r}") from None
        if not number.is_finite() or number < 0:
            raise AmountParserError(f"Invalid amount: {text!r}")

        scaled = number * FRACTIONAL_BASE
        if scaled != scaled.to_integral_value():
            raise AmountParserError(f"Fraction of {text.strip()} too long")
        value, fraction = divmod(int(scaled), FRACTIONAL_BASE)
        return cls(check_currency(currency), value, fraction)

    @classmethod
    def from_json_string(cls, text: str) -> "Amount":
        """Parse the ``CURRENCY:VALUE.FRACTION`` form, e.g. ``"EUR:3.50"``."""
        parts = text.split(":")
        if len(parts) != 2:
            raise AmountParserError(f"Invalid amount format: {text!r}")
        return cls.parse(parts[0], parts[1])

    @staticmethod
    def is_valid_amount_str(text: str) -> bool:
        """Return True if ``text`` parses as an amount value."""
        try:
            Amount.parse("XXX", text)
        except AmountParserError:
            return False
        return True

    # Derived values
    @property
    def scalar(self) -> int:
        """Fixed-point ordering key: ``value * 1e8 + fraction``."""
        return self.value * FRACTIONAL_BASE + self.fraction

    @property
    def amount_str(self) -> str:
        """Normalized decimal text, e.g. ``"3.5"`` or ``"2"``."""
        if self.fraction == 0:
            return str(self.value)
        digits = f"{self.fraction:0{MAX_FRACTION_LENGTH}d}".rstrip("0")
        return f"{self.value}.{digits}"

    def is_zero(self) -> bool:
        return self.value == 0 and self.fraction == 0

    def with_currency(self, currency: str) -> "Amount":
        return Amount(check_currency(currency), self.value, self.fraction)

    def with_spec(self, spec: Optional[CurrencySpecification]) -> "Amount":
        return replace(self, spec=spec)

    def to_json_string(self) -> str:
        return f"{self.currency}:{self.amount_str}"

    def format(self, show_symbol: bool = True) -> str:
        """Render for display, padding fraction digits per the currency specification."""
        min_digits = (
            self.spec.num_fractional_trailing_zero_digits
            if self.spec is not None
            else DEFAULT_TRAILING_ZERO_DIGITS
        )
        whole, _, frac = self.amount_str.partition(".")
        frac = frac.ljust(min_digits, "0")
        text = f"{whole}.{frac}" if frac else whole
        if not show_symbol:
            return text
        if self.spec is not None and self.spec.symbol:
            return f"{self.spec.symbol}{text}"
        return f"{text} {self.currency}"

    def __str__(self) -> str:
        return self.format()

    # Comparison and arithmetic within one currency
    def _require_same_currency(self, other: "Amount") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(currency_mismatch(self.currency, other.currency))

    def __lt__(self, other: "Amount") -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        self._require_same_currency(other)
        return self.scalar < other.scalar

    def __le__(self, other: "Amount") -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        self._require_same_currency(other)
        return self.scalar <= other.scalar

    def __gt__(self, other: "Amount") -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        self._require_same_currency(other)
        return self.scalar > other.scalar

    def __ge__(self, other: "Amount") -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        self._require_same_currency(other)
        return self.scalar >= other.scalar

    def __add__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        self._require_same_currency(other)
        value, fraction = divmod(self.scalar + other.scalar, FRACTIONAL_BASE)
        if value > MAX_VALUE:
            raise AmountOverflowError(f"Sum exceeds {MAX_VALUE} {self.currency}")
        return Amount(self.currency, value, fraction, self.spec)

    def __sub__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        self._require_same_currency(other)
        difference = self.scalar - other.scalar
        if difference < 0:
            raise AmountOverflowError(
                f"Cannot subtract {other.amount_str} from {self.amount_str} {self.currency}"
            )
        return Amount.from_scalar(self.currency, difference, self.spec)

    def __mul__(self, factor: int) -> "Amount":
        if not isinstance(factor, int) or isinstance(factor, bool):
            return NotImplemented
        if factor < 0:
            raise AmountOverflowError(f"Negative factor {factor}")
        value, fraction = divmod(self.scalar * factor, FRACTIONAL_BASE)
        if value > MAX_VALUE:
            raise AmountOverflowError(f"Product exceeds {MAX_VALUE} {self.currency}")
        return Amount(self.currency, value, fraction, self.spec)

    __rmul__ = __mul__
