"""Compile transaction filters into parameterized SQL predicates.

Compilation happens in two steps. :func:`build_predicate` turns a
:class:`TranxFilter` into a small tree of constraint nodes keyed by schema
column names. :func:`compile_filter` then renders that tree as a SQLAlchemy
clause. Every scalar (amount, epoch milliseconds, purpose code, direction
flag) ends up as a bound parameter; caller-supplied values never appear in
the SQL text.

Sets are emitted in sorted order so that equal filters always compile to the
same SQL and parameters.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from tranxhistory.database import schema
from tranxhistory.database.mappers import stored_amount
from tranxhistory.database.models import TranxRow
from tranxhistory.domain.amount import Amount
from tranxhistory.domain.errors import InvalidFilterError, StoreError
from tranxhistory.domain.filters import (
    AmountExact,
    AmountOneOf,
    AmountRange,
    AnyDirection,
    DatetimeExact,
    DatetimeRange,
    DirectionExact,
    PurposeExact,
    PurposeOneOf,
    TranxFilter,
)


@dataclass(frozen=True)
class Equals:
    column: str
    value: Any


@dataclass(frozen=True)
class Between:
    """Inclusive range on one column."""

    column: str
    low: Any
    high: Any


@dataclass(frozen=True)
class OneOf:
    column: str
    values: tuple


@dataclass(frozen=True)
class AllOf:
    nodes: tuple = ()


@dataclass(frozen=True)
class AnyOf:
    nodes: tuple = ()


Node = Union[Equals, Between, OneOf, AllOf, AnyOf]


@dataclass(frozen=True)
class CompiledPredicate:
    """A compiled filter: SQL text with placeholders plus its bound values.

    ``sql`` and ``params`` identify the predicate; ``clause`` is the
    SQLAlchemy expression the store executes.
    """

    sql: str
    params: tuple
    tree: AllOf
    clause: ColumnElement = field(compare=False, repr=False)


def _stored(amount: Amount) -> int:
    try:
        return stored_amount(amount)
    except StoreError as e:
        raise InvalidFilterError(str(e)) from e


def _amount_node(amount: Amount) -> AllOf:
    return AllOf(
        (
            Equals(schema.AMOUNT_COL, _stored(amount)),
            Equals(schema.CURRENCY_COL, amount.currency),
        )
    )


def build_predicate(tranx_filter: TranxFilter) -> AllOf:
    """Translate a filter into a constraint tree.

    Raises:
        InvalidFilterError: If a constraint has an unsupported type
    """
    if not isinstance(tranx_filter, TranxFilter):
        raise InvalidFilterError(f"Expected a TranxFilter, got {tranx_filter!r}")

    nodes: list[Node] = []

    moment = tranx_filter.datetime
    if isinstance(moment, DatetimeExact):
        nodes.append(Equals(schema.EPOCH_MILLI_COL, moment.moment.epoch_millis))
    elif isinstance(moment, DatetimeRange):
        nodes.append(
            Between(schema.EPOCH_MILLI_COL, moment.start.epoch_millis, moment.end.epoch_millis)
        )
    elif moment is not None:
        raise InvalidFilterError(f"Unsupported datetime filter {moment!r}")

    amount = tranx_filter.amount
    if isinstance(amount, AmountExact):
        nodes.append(_amount_node(amount.amount))
    elif isinstance(amount, AmountRange):
        nodes.append(
            AllOf(
                (
                    Between(
                        schema.AMOUNT_COL, _stored(amount.min), _stored(amount.max)
                    ),
                    Equals(schema.CURRENCY_COL, amount.min.currency),
                )
            )
        )
    elif isinstance(amount, AmountOneOf):
        ordered = sorted(amount.amounts, key=lambda a: (a.currency, a.scalar))
        nodes.append(AnyOf(tuple(_amount_node(a) for a in ordered)))
    elif amount is not None:
        raise InvalidFilterError(f"Unsupported amount filter {amount!r}")

    purpose = tranx_filter.purpose
    if isinstance(purpose, PurposeExact):
        nodes.append(Equals(schema.TRNX_PURPOSE_COL, purpose.purpose.code))
    elif isinstance(purpose, PurposeOneOf):
        codes = tuple(sorted(p.code for p in purpose.purposes))
        nodes.append(OneOf(schema.TRNX_PURPOSE_COL, codes))
    elif purpose is not None:
        raise InvalidFilterError(f"Unsupported purpose filter {purpose!r}")

    direction = tranx_filter.direction
    if isinstance(direction, DirectionExact):
        nodes.append(
            Equals(schema.TRNX_INCOMING_COL, 1 if direction.direction.is_incoming else 0)
        )
    elif direction is not None and not isinstance(direction, AnyDirection):
        raise InvalidFilterError(f"Unsupported direction filter {direction!r}")

    return AllOf(tuple(nodes))


def to_clause(node: Node) -> ColumnElement:
    """Render a constraint tree as a SQLAlchemy boolean expression."""
    columns = TranxRow.__table__.c
    if isinstance(node, Equals):
        return columns[node.column] == node.value
    if isinstance(node, Between):
        return columns[node.column].between(node.low, node.high)
    if isinstance(node, OneOf):
        return columns[node.column].in_(node.values)
    if isinstance(node, AllOf):
        if not node.nodes:
            return true()
        return and_(*(to_clause(child) for child in node.nodes))
    if isinstance(node, AnyOf):
        return or_(*(to_clause(child) for child in node.nodes))
    raise InvalidFilterError(f"Unknown predicate node {node!r}")


def _freeze(value: Any) -> Any:
    # Expanding IN parameters come back as lists
    if isinstance(value, list):
        return tuple(value)
    return value


def compile_filter(tranx_filter: TranxFilter) -> CompiledPredicate:
    """Compile a filter into a deterministic, parameterized predicate."""
    tree = build_predicate(tranx_filter)
    clause = to_clause(tree)
    compiled = clause.compile()
    params = tuple((name, _freeze(value)) for name, value in compiled.params.items())
    return CompiledPredicate(sql=str(compiled), params=params, tree=tree, clause=clause)
