"""Tests for transaction filters and their compilation."""

from datetime import datetime

import pytest

from tranxhistory.database import schema
from tranxhistory.database.query import (
    AllOf,
    AnyOf,
    Between,
    Equals,
    OneOf,
    build_predicate,
    compile_filter,
)
from tranxhistory.domain.amount import Amount
from tranxhistory.domain.entities import Direction, TranxPurpose
from tranxhistory.domain.errors import CurrencyMismatchError, InvalidFilterError
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
from tranxhistory.domain.moment import FDtm


def _values(predicate):
    return [value for _, value in predicate.params]


class TestFilterValidation:
    def test_empty_filter(self):
        assert TranxFilter().is_empty()
        assert TranxFilter() == TranxFilter()
        assert not TranxFilter(direction=AnyDirection()).is_empty()

    def test_inverted_datetime_range(self):
        with pytest.raises(InvalidFilterError):
            DatetimeRange(FDtm.from_epoch_millis(5000), FDtm.from_epoch_millis(1000))

    def test_inverted_amount_range(self):
        with pytest.raises(InvalidFilterError):
            AmountRange(Amount("EUR", 5), Amount("EUR", 1))

    def test_amount_range_needs_one_currency(self):
        with pytest.raises(CurrencyMismatchError):
            AmountRange(Amount("EUR", 1), Amount("KES", 5))

    def test_empty_choices(self):
        with pytest.raises(InvalidFilterError):
            PurposeOneOf([])
        with pytest.raises(InvalidFilterError):
            AmountOneOf([])

    def test_wrong_member_types(self):
        with pytest.raises(InvalidFilterError):
            PurposeOneOf(["EXPN_GRCR"])
        with pytest.raises(InvalidFilterError):
            DirectionExact("incoming")
        with pytest.raises(InvalidFilterError):
            TranxFilter(direction=PurposeExact(TranxPurpose.EXPN_GRCR))

    def test_choice_filters_compare_as_sets(self):
        a = PurposeOneOf([TranxPurpose.EXPN_GRCR, TranxPurpose.EXPN_RENT])
        b = PurposeOneOf([TranxPurpose.EXPN_RENT, TranxPurpose.EXPN_GRCR, TranxPurpose.EXPN_RENT])
        assert a == b
        assert hash(a) == hash(b)

    def test_single_moment_range_is_valid(self):
        moment = FDtm.from_epoch_millis(1000)
        assert DatetimeRange(moment, moment).start == moment


class TestBuildPredicate:
    def test_empty_filter_matches_everything(self):
        assert build_predicate(TranxFilter()) == AllOf(())

    def test_any_direction_adds_no_constraint(self):
        assert build_predicate(TranxFilter(direction=AnyDirection())) == AllOf(())

    def test_direction(self):
        tree = build_predicate(TranxFilter(direction=DirectionExact(Direction.INCOMING)))
        assert tree == AllOf((Equals(schema.TRNX_INCOMING_COL, 1),))

    def test_datetime(self):
        exact = build_predicate(TranxFilter(datetime=DatetimeExact(FDtm.from_epoch_millis(7))))
        assert exact == AllOf((Equals(schema.EPOCH_MILLI_COL, 7),))

        ranged = build_predicate(
            TranxFilter(
                datetime=DatetimeRange(FDtm.from_epoch_millis(1), FDtm.from_epoch_millis(9))
            )
        )
        assert ranged == AllOf((Between(schema.EPOCH_MILLI_COL, 1, 9),))

    def test_amount_is_scoped_by_currency(self):
        tree = build_predicate(TranxFilter(amount=AmountExact(Amount("EUR", 3, 50_000_000))))
        assert tree == AllOf(
            (
                AllOf(
                    (
                        Equals(schema.AMOUNT_COL, 350_000_000),
                        Equals(schema.CURRENCY_COL, "EUR"),
                    )
                ),
            )
        )

    def test_amount_one_of_sorted(self):
        tree = build_predicate(
            TranxFilter(amount=AmountOneOf([Amount("KES", 1), Amount("EUR", 2), Amount("EUR", 1)]))
        )
        (any_of,) = tree.nodes
        assert isinstance(any_of, AnyOf)
        currencies_and_amounts = [
            (node.nodes[1].value, node.nodes[0].value) for node in any_of.nodes
        ]
        assert currencies_and_amounts == [
            ("EUR", 100_000_000),
            ("EUR", 200_000_000),
            ("KES", 100_000_000),
        ]

    def test_purposes_sorted(self):
        tree = build_predicate(
            TranxFilter(purpose=PurposeOneOf([TranxPurpose.UTIL_WATR, TranxPurpose.EDUC_SCHL]))
        )
        assert tree == AllOf((OneOf(schema.TRNX_PURPOSE_COL, ("EDUC_SCHL", "UTIL_WATR")),))

    def test_rejects_non_filter(self):
        with pytest.raises(InvalidFilterError):
            build_predicate({"direction": "incoming"})


class TestCompileFilter:
    def test_empty_filter_has_no_parameters(self):
        assert compile_filter(TranxFilter()).params == ()

    def test_values_are_bound_not_inlined(self):
        """Test that caller values never appear in the SQL text."""
        predicate = compile_filter(
            TranxFilter(
                direction=DirectionExact(Direction.INCOMING),
                purpose=PurposeExact(TranxPurpose.EXPN_GRCR),
                datetime=DatetimeRange(
                    FDtm.from_epoch_millis(123_456), FDtm.from_epoch_millis(654_321)
                ),
                amount=AmountExact(Amount("ZZTOP", 77)),
            )
        )
        for literal in ("EXPN_GRCR", "123456", "654321", "ZZTOP", "7700000000"):
            assert literal not in predicate.sql
        values = _values(predicate)
        assert "EXPN_GRCR" in values
        assert 123_456 in values and 654_321 in values
        assert "ZZTOP" in values and 7_700_000_000 in values
        assert 1 in values

    def test_deterministic(self):
        """Test that equal filters compile to identical SQL and parameters."""
        first = compile_filter(
            TranxFilter(
                purpose=PurposeOneOf([TranxPurpose.EXPN_RENT, TranxPurpose.EXPN_GRCR]),
                amount=AmountOneOf([Amount("EUR", 2), Amount("EUR", 1)]),
            )
        )
        second = compile_filter(
            TranxFilter(
                purpose=PurposeOneOf([TranxPurpose.EXPN_GRCR, TranxPurpose.EXPN_RENT]),
                amount=AmountOneOf([Amount("EUR", 1), Amount("EUR", 2)]),
            )
        )
        assert first == second
        assert first.sql == second.sql
        assert first.params == second.params

    def test_purpose_list_bound_as_tuple(self):
        predicate = compile_filter(
            TranxFilter(purpose=PurposeOneOf([TranxPurpose.HLTH_MEDS, TranxPurpose.HLTH_DOCT]))
        )
        assert ("HLTH_DOCT", "HLTH_MEDS") in _values(predicate)

    def test_unstorable_amount_rejected(self):
        with pytest.raises(InvalidFilterError):
            compile_filter(TranxFilter(amount=AmountExact(Amount.max("EUR"))))

    def test_moment_zone_does_not_matter(self):
        from zoneinfo import ZoneInfo

        utc = FDtm(datetime(2024, 1, 1, 12, 0))
        nairobi = utc.with_zone(ZoneInfo("Africa/Nairobi"))
        assert compile_filter(TranxFilter(datetime=DatetimeExact(utc))) == compile_filter(
            TranxFilter(datetime=DatetimeExact(nairobi))
        )
