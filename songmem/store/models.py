from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Song:
    """A catalog entry. Only the name may change after creation."""

    id: int
    name: str
    added_at: datetime


@dataclass(frozen=True, slots=True)
class Hearing:
    """A single recorded listen of a song."""

    id: int
    song_id: int
    heard_at: datetime


@dataclass(frozen=True, slots=True)
class SongHearing:
    """Read-only (name, time) pair handed to the ranking functions."""

    name: str
    heard_at: datetime
