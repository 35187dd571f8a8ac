"""
Date helpers for TDS.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.parser import isoparse, parse as parse_date

# Zone abbreviations seen in feed dates that dateutil does not know itself
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
}


def parse_date_time(value: str) -> datetime:
    """
    Parse an ISO 8601 date or date-time.

    Accepts RFC 3339 (``2019-01-01T00:00:00Z``), an hour without minutes
    (``2019-01-01T12``), a plain date (``2019-01-01``) and a month
    (``2019-01``). Values without an offset are read as UTC. Missing date
    parts default to 1 and missing time parts to 0.

    Args:
        value: The date string

    Returns:
        A naive datetime in UTC

    Raises:
        ValueError: If the string is not a date or is out of range
    """
    parsed = isoparse(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_feed_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a feed timestamp such as ``Sun, 22 Nov 2020 10:00:00 +0000``.

    Returns:
        An aware datetime (UTC if the value has no zone), or None if the
        value is missing or not a date
    """
    if not value:
        return None
    try:
        parsed = parse_date(value, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_calendar_date(value: Optional[str]) -> Optional[str]:
    """
    Reduce a date or date-time string to ``YYYY-MM-DD``.

    Strings that can't be parsed are returned unchanged.
    """
    if not value:
        return None
    try:
        return parse_date_time(value).date().isoformat()
    except ValueError:
        return value
