"""Mapper functions to convert between domain entities and SQLAlchemy rows.

This layer isolates the conversion logic: amount scaling, direction flags,
purpose codes and the JSON-encoded currency specification.
"""

from typing import Optional

from tranxhistory.database import schema
from tranxhistory.database.models import TranxRow
from tranxhistory.domain.amount import Amount, CurrencySpecification
from tranxhistory.domain.entities import Direction, Tranx, TranxPurpose
from tranxhistory.domain.errors import StoreError
from tranxhistory.domain.moment import FDtm


def stored_amount(amount: Amount) -> int:
    """Return the integer persisted in the amount column."""
    stored = amount.value * schema.CURRENCY_DIVISOR + amount.fraction
    if stored > schema.MAX_STORED_AMOUNT:
        raise StoreError(f"Amount {amount.to_json_string()} exceeds the storable range")
    return stored


def spec_to_column(spec: Optional[CurrencySpecification]) -> str:
    return spec.to_json() if spec is not None else ""


def spec_from_column(text: Optional[str]) -> Optional[CurrencySpecification]:
    if not text:
        return None
    try:
        return CurrencySpecification.from_json(text)
    except ValueError as e:
        raise StoreError(f"Corrupt currency specification in store: {e}") from e


def amount_from_columns(stored: int, currency: str, spec_text: Optional[str]) -> Amount:
    """Rebuild an amount from the amount, currency and specification columns."""
    return Amount.from_scalar(currency, stored, spec_from_column(spec_text))


def tranx_to_row(tranx: Tranx) -> TranxRow:
    """Convert a domain Tranx into a new, unsaved row. The id is left to the store."""
    return TranxRow(
        epoch_milliseconds=tranx.moment.epoch_millis,
        amount=stored_amount(tranx.amount),
        currency=tranx.amount.currency,
        currency_specifications=spec_to_column(tranx.amount.spec),
        tranx_purpose=tranx.purpose.code if tranx.purpose is not None else None,
        incoming=1 if tranx.direction.is_incoming else 0,
        transaction_identity=tranx.tid,
    )


def tranx_to_domain(row: TranxRow) -> Tranx:
    """Convert a SQLAlchemy row into a domain Tranx.

    Moments are returned in UTC; unknown purpose codes load as None.
    """
    return Tranx(
        id=row.id,
        tid=row.transaction_identity,
        moment=FDtm.from_epoch_millis(row.epoch_milliseconds),
        purpose=TranxPurpose.lookup(row.tranx_purpose),
        amount=amount_from_columns(row.amount, row.currency, row.currency_specifications),
        direction=Direction.INCOMING if row.incoming else Direction.OUTGOING,
    )
