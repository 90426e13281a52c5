"""Timezone-qualified moments used as the ledger's time axis."""

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import total_ordering
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser
from dateutil import tz as date_tz

UTC = ZoneInfo("UTC")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)
_ZONE_SUFFIX_RE = re.compile(r"^(?P<stamp>[^\[]+)(?:\[(?P<zone>[^\]]+)\])?$")


def _normalize_zone(zone: tzinfo) -> tzinfo:
    """Return a zone that the text form restores exactly.

    Named zones must be ZoneInfo instances. Fixed offsets become
    ``datetime.timezone`` values, and a zero offset becomes :data:`UTC`.

    Raises:
        ValueError: For any other tzinfo, whose rules cannot be written out
    """
    if isinstance(zone, ZoneInfo):
        return zone
    if isinstance(zone, (timezone, date_tz.tzutc, date_tz.tzoffset)):
        offset = zone.utcoffset(None)
        return UTC if not offset else timezone(offset)
    raise ValueError(
        f"Unsupported time zone {zone!r}: use a ZoneInfo or a fixed UTC offset"
    )


@total_ordering
class FDtm:
    """A filterable date-time: local wall time, its zone and its epoch millis.

    The epoch millisecond value is derived once from the local time and the
    zone's offset and never changes afterwards; instances are immutable.
    Ordering and equality follow the instant, so two moments expressed in
    different zones compare equal when they denote the same millisecond.

    The text form is ISO-8601 with an explicit offset, suffixed with the IANA
    zone key in brackets when the zone has one::

        2024-03-31T03:30:00.000+02:00[Europe/Berlin]
        1970-01-01T00:00:01.000+00:00[UTC]
    """

    __slots__ = ("_local", "_zone", "_epoch_millis")

    def __init__(self, local: datetime, zone: Optional[tzinfo] = None):
        """Wrap ``local`` resolved in ``zone``.

        Args:
            local: Wall-clock date-time. If it is timezone-aware and ``zone``
                is None its own tzinfo is used; if both are given the instant
                is converted into ``zone``.
            zone: Time zone used to resolve ``local``. Defaults to UTC.

        Raises:
            ValueError: If the zone is neither a ZoneInfo nor a fixed offset
        """
        if zone is not None:
            zone = _normalize_zone(zone)
        if local.tzinfo is not None:
            if zone is None:
                zone = _normalize_zone(local.tzinfo)
            else:
                local = local.astimezone(zone)
            local = local.replace(tzinfo=None)
        if zone is None:
            zone = UTC
        object.__setattr__(self, "_local", local)
        object.__setattr__(self, "_zone", zone)
        object.__setattr__(
            self, "_epoch_millis", (local.replace(tzinfo=zone) - _EPOCH) // _MILLISECOND
        )

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_epoch_millis(cls, epoch_millis: int) -> "FDtm":
        """Build a UTC moment from raw epoch milliseconds."""
        instant = _EPOCH + timedelta(milliseconds=epoch_millis)
        return cls(instant.replace(tzinfo=None), UTC)

    @classmethod
    def from_datetime(cls, value: datetime) -> "FDtm":
        """Wrap a timezone-aware datetime, keeping its zone."""
        if value.tzinfo is None:
            raise ValueError("from_datetime requires a timezone-aware datetime")
        return cls(value)

    @classmethod
    def now(cls, zone: Optional[tzinfo] = None) -> "FDtm":
        return cls(datetime.now(zone or UTC))

    @classmethod
    def parse(cls, text: str) -> "FDtm":
        """Parse the output of :meth:`isoformat` or plain ISO-8601 with an offset.

        Raises:
            ValueError: If the text carries no offset or names an unknown zone
        """
        match = _ZONE_SUFFIX_RE.match(text.strip())
        if match is None:
            raise ValueError(f"Could not parse moment '{text}'")
        try:
            parsed = date_parser.isoparse(match.group("stamp"))
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Could not parse moment '{text}': {e}") from e
        if parsed.tzinfo is None:
            raise ValueError(f"Moment '{text}' has no UTC offset")

        zone_key = match.group("zone")
        if zone_key is not None:
            try:
                zone: tzinfo = ZoneInfo(zone_key)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown time zone '{zone_key}'") from e
        else:
            offset = parsed.utcoffset()
            zone = UTC if not offset else timezone(offset)
        return cls(parsed.astimezone(zone))

    @property
    def local(self) -> datetime:
        """The wrapped wall-clock date-time (naive)."""
        return self._local

    @property
    def zone(self) -> tzinfo:
        return self._zone

    @property
    def zone_id(self) -> str:
        """IANA key for named zones, otherwise the zone's fixed-offset name."""
        if isinstance(self._zone, ZoneInfo):
            return self._zone.key
        return self._zone.tzname(None) or str(self._zone)

    @property
    def epoch_millis(self) -> int:
        return self._epoch_millis

    def to_datetime(self) -> datetime:
        """Return the timezone-aware datetime."""
        return self._local.replace(tzinfo=self._zone)

    def with_zone(self, zone: tzinfo) -> "FDtm":
        """Same instant expressed in another zone."""
        return FDtm(self.to_datetime(), zone)

    def strftime(self, fmt: str) -> str:
        return self._local.strftime(fmt)

    def isoformat(self) -> str:
        text = self.to_datetime().isoformat(timespec="milliseconds")
        if isinstance(self._zone, ZoneInfo):
            text += f"[{self._zone.key}]"
        return text

    def __str__(self) -> str:
        return self.isoformat()

    def __repr__(self) -> str:
        return f"FDtm({self.isoformat()!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, FDtm):
            return NotImplemented
        return self._epoch_millis == other._epoch_millis

    def __lt__(self, other: "FDtm") -> bool:
        if not isinstance(other, FDtm):
            return NotImplemented
        return self._epoch_millis < other._epoch_millis

    def __hash__(self) -> int:
        return hash(self._epoch_millis)
