"""Tests for timezone-qualified moments."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from dateutil import tz

from tranxhistory.domain.moment import UTC, FDtm

BERLIN = ZoneInfo("Europe/Berlin")


def test_from_epoch_millis_is_utc():
    moment = FDtm.from_epoch_millis(1000)
    assert moment.epoch_millis == 1000
    assert moment.zone_id == "UTC"
    assert moment.local == datetime(1970, 1, 1, 0, 0, 1)


def test_isoformat_carries_zone_key():
    assert FDtm.from_epoch_millis(1000).isoformat() == "1970-01-01T00:00:01.000+00:00[UTC]"
    summer = FDtm(datetime(2024, 7, 1, 12, 0), BERLIN)
    assert str(summer) == "2024-07-01T12:00:00.000+02:00[Europe/Berlin]"


def test_parse_restores_zone_and_instant():
    original = FDtm(datetime(2024, 3, 31, 3, 30, 0, 123000), BERLIN)
    parsed = FDtm.parse(original.isoformat())
    assert parsed == original
    assert parsed.zone_id == "Europe/Berlin"
    assert parsed.local == original.local


def test_parse_plain_offset():
    moment = FDtm.parse("2024-01-15T10:00:00+02:00")
    assert moment.epoch_millis == FDtm(datetime(2024, 1, 15, 8, 0)).epoch_millis
    assert moment.zone.utcoffset(None) == timedelta(hours=2)


def test_parse_zero_offset_is_utc():
    assert FDtm.parse("2024-01-15T10:00:00Z").zone is UTC


@pytest.mark.parametrize(
    "text", ["2024-01-15T10:00:00", "not a moment", "2024-01-15T10:00:00+00:00[Mars/Base]"]
)
def test_parse_rejects_invalid(text):
    with pytest.raises(ValueError):
        FDtm.parse(text)


def test_equality_follows_instant():
    """Test that moments in different zones are equal at the same instant."""
    berlin = FDtm(datetime(2024, 7, 1, 12, 0), BERLIN)
    utc = FDtm(datetime(2024, 7, 1, 10, 0))
    assert berlin == utc
    assert hash(berlin) == hash(utc)
    assert berlin.with_zone(UTC).local == utc.local


def test_ordering():
    early = FDtm.from_epoch_millis(1000)
    late = FDtm(datetime(1970, 1, 1, 2, 0, 5), timezone(timedelta(hours=2)))
    assert early < late
    assert late >= early
    assert sorted([late, early]) == [early, late]


def test_aware_local_converted_into_zone():
    aware = datetime(2024, 7, 1, 10, 0, tzinfo=UTC)
    moment = FDtm(aware, BERLIN)
    assert moment.local == datetime(2024, 7, 1, 12, 0)
    assert moment.to_datetime() == aware


def test_from_datetime_requires_aware():
    with pytest.raises(ValueError):
        FDtm.from_datetime(datetime(2024, 1, 1))
    assert FDtm.from_datetime(datetime(2024, 1, 1, tzinfo=BERLIN)).zone_id == "Europe/Berlin"


def test_now_is_close_to_system_clock():
    before = int(datetime.now(timezone.utc).timestamp() * 1000)
    moment = FDtm.now()
    after = int(datetime.now(timezone.utc).timestamp() * 1000)
    assert before - 1 <= moment.epoch_millis <= after + 1


def test_immutable():
    moment = FDtm.from_epoch_millis(0)
    with pytest.raises(AttributeError):
        moment._epoch_millis = 5
    with pytest.raises(AttributeError):
        del moment._local


@pytest.mark.parametrize(
    "zone",
    [timezone.utc, tz.tzutc(), BERLIN, timezone(timedelta(hours=2)), tz.tzoffset(None, 3600)],
)
def test_text_round_trip_keeps_zone(zone):
    moment = FDtm(datetime(2024, 7, 1, 12, 0), zone)
    parsed = FDtm.parse(moment.isoformat())
    assert parsed.zone == moment.zone
    assert parsed.epoch_millis == moment.epoch_millis
    assert parsed.local == moment.local


def test_zero_offsets_become_utc():
    assert FDtm.now(timezone.utc).zone is UTC
    assert FDtm(datetime(2024, 1, 1, tzinfo=tz.tzutc())).zone is UTC
    assert FDtm.parse(FDtm.now(timezone.utc).isoformat()).zone is UTC


def test_rules_only_zones_rejected():
    """Test that zones without a restorable text form are refused."""
    with pytest.raises(ValueError):
        FDtm(datetime(2024, 1, 1), tz.tzlocal())
    with pytest.raises(ValueError):
        FDtm(datetime(2024, 1, 1, tzinfo=tz.tzlocal()))
