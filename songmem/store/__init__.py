from .database import DEFAULT_MAX_NAME_LENGTH, SongStore, validate_name
from .models import Hearing, Song, SongHearing
from .results import WriteResult, WriteStatus
from .timestamps import format_timestamp, now_local, parse_timestamp

__all__ = [
    "DEFAULT_MAX_NAME_LENGTH",
    "Hearing",
    "Song",
    "SongHearing",
    "SongStore",
    "WriteResult",
    "WriteStatus",
    "format_timestamp",
    "now_local",
    "parse_timestamp",
    "validate_name",
]
