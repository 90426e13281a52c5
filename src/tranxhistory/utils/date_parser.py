"""Date parsing utilities for command-line input."""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from tranxhistory.domain.moment import UTC, FDtm

_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones ("today", "yesterday", "last month", "this week", "last friday").

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)
        elif period in _WEEKDAYS:
            days_ago = (today.weekday() - _WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_moment(text: str, zone: Optional[tzinfo] = None) -> FDtm:
    """Parse a moment for transaction input.

    "now" is the current instant. Text with a time or offset is parsed as
    a full timestamp; a bare date resolves to midnight. Naive input is
    interpreted in ``zone`` (UTC by default).
    """
    zone = zone or UTC
    stripped = text.strip()
    if stripped.lower() == "now":
        return FDtm.now(zone)
    try:
        return FDtm.parse(stripped)
    except ValueError:
        pass
    try:
        parsed = date_parser.parse(stripped)
    except (ValueError, OverflowError):
        # Relative dates such as "yesterday" or "last friday"
        return FDtm(datetime.combine(parse_date(stripped), time.min), zone)
    if parsed.tzinfo is not None:
        return FDtm(parsed.astimezone(zone), zone)
    return FDtm(parsed, zone)


def day_bounds(start: Optional[date], end: Optional[date], zone: Optional[tzinfo] = None):
    """Turn an inclusive date range into moments spanning whole days.

    Returns a (start, end) tuple of FDtm; either side is None if its date is.
    """
    zone = zone or UTC
    start_moment = FDtm(datetime.combine(start, time.min), zone) if start else None
    end_moment = (
        FDtm(datetime.combine(end, time.max).replace(microsecond=999000), zone) if end else None
    )
    return start_moment, end_moment
