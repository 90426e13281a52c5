"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class AmountParserError(ValidationError):
    """Amount text or components could not be turned into an Amount."""


class InvalidFilterError(ValidationError):
    """Filter constraints that cannot compile to a predicate."""


class CurrencyMismatchError(DomainError):
    """Amounts of different currencies were compared or combined."""


class AmountOverflowError(DomainError):
    """Amount arithmetic left the representable range."""


class NotInitializedError(RuntimeError):
    """An operation ran before the transaction history was initialized."""


class StoreError(RuntimeError):
    """The backing store failed to insert, query or scan."""


def currency_mismatch(left: str, right: str) -> str:
    """Return message for an operation across two currencies."""
    return f"Currency mismatch: '{left}' and '{right}'"


def not_initialized(operation: str) -> str:
    """Return message for an operation invoked before init."""
    return f"Transaction history is not initialized (called {operation})"


def inverted_range(kind: str, low: object, high: object) -> str:
    """Return message for a range whose lower bound exceeds its upper bound."""
    return f"Invalid {kind} range: {low} is greater than {high}"


def empty_choice(kind: str) -> str:
    """Return message for a one-or-more-of filter without members."""
    return f"{kind} filter must have at least one member"
