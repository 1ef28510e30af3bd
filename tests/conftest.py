"""
Shared fixtures for the test suite.

The store runs against a temporary SQLite file and a controllable clock so
that decay scores are reproducible.
"""

from datetime import datetime, timedelta, timezone

import pytest

from songmem.store import SongHearing, SongStore

CET = timezone(timedelta(hours=1))
FROZEN_NOW = datetime(2024, 3, 1, 21, 0, 0, tzinfo=CET)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


def hearing(name: str, minutes_ago: float = 0.0, now: datetime = FROZEN_NOW) -> SongHearing:
    return SongHearing(name=name, heard_at=now - timedelta(minutes=minutes_ago))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(FROZEN_NOW)


@pytest.fixture
def store(tmp_path, clock):
    s = SongStore(tmp_path / "songmem.sql", clock=clock)
    s.create_schema_if_not_exists()
    yield s
    s.close()
