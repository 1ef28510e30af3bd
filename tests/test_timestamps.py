"""Tests for songmem/store/timestamps.py"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from songmem.store import format_timestamp, now_local, parse_timestamp


def test_format_drops_sub_seconds() -> None:
    dt = datetime(2024, 3, 1, 21, 15, 4, 987654, tzinfo=timezone(timedelta(hours=-5)))
    assert format_timestamp(dt) == "2024-03-01T21:15:04-05:00"


def test_format_utc_as_z() -> None:
    assert format_timestamp(datetime(2024, 3, 1, 21, 15, 4, tzinfo=UTC)) == "2024-03-01T21:15:04Z"


def test_format_rejects_naive() -> None:
    with pytest.raises(ValueError):
        format_timestamp(datetime(2024, 3, 1, 21, 15, 4))


def test_parse_keeps_offset() -> None:
    dt = parse_timestamp("2024-03-01T21:15:04+05:30")
    assert dt.utcoffset() == timedelta(hours=5, minutes=30)
    assert dt.hour == 21


def test_parse_z_suffix() -> None:
    assert parse_timestamp("2024-03-01T21:15:04Z") == datetime(2024, 3, 1, 21, 15, 4, tzinfo=UTC)


def test_parse_rejects_naive() -> None:
    with pytest.raises(ValueError):
        parse_timestamp("2024-03-01T21:15:04")


def test_now_local_is_aware() -> None:
    assert now_local().utcoffset() is not None
