"""Tests for tds.utils.dates."""

from datetime import datetime, timezone

import pytest

from tds.utils.dates import parse_date_time, parse_feed_date, to_calendar_date


@pytest.mark.parametrize("value,expected", [
    ("2019-01-01T00:00:00Z", datetime(2019, 1, 1, 0, 0)),
    ("2019-01-01T12:30:15+02:00", datetime(2019, 1, 1, 10, 30, 15)),
    ("2019-01-01T12", datetime(2019, 1, 1, 12)),
    ("2019-01-01", datetime(2019, 1, 1)),
    ("2019-01", datetime(2019, 1, 1)),
    ("20190102", datetime(2019, 1, 2)),
])
def test_parse_date_time(value, expected) -> None:
    assert parse_date_time(value) == expected


@pytest.mark.parametrize("value", ["yesterday", "2019-13-01", "Published 2020/11/22"])
def test_parse_date_time_rejects(value) -> None:
    with pytest.raises(ValueError):
        parse_date_time(value)


@pytest.mark.parametrize("value,expected", [
    ("2020-11-22T23:30:00-05:00", "2020-11-23"),
    ("2020-11-22", "2020-11-22"),
    ("November 22nd", "November 22nd"),
    ("", None),
    (None, None),
])
def test_to_calendar_date(value, expected) -> None:
    assert to_calendar_date(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("Sun, 22 Nov 2020 10:00:00 +0000", datetime(2020, 11, 22, 10, 0, tzinfo=timezone.utc)),
    ("Mon, 23 Nov 2020 08:30:00 GMT", datetime(2020, 11, 23, 8, 30, tzinfo=timezone.utc)),
    ("Mon, 23 Nov 2020 08:30:00 EST", datetime(2020, 11, 23, 13, 30, tzinfo=timezone.utc)),
    ("2020-11-23 08:30", datetime(2020, 11, 23, 8, 30, tzinfo=timezone.utc)),
])
def test_parse_feed_date(value, expected) -> None:
    assert parse_feed_date(value) == expected


@pytest.mark.parametrize("value", [None, "", "not a date"])
def test_parse_feed_date_invalid(value) -> None:
    assert parse_feed_date(value) is None
