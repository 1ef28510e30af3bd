from .frecency import DEFAULT_FRECENCY_HALF_LIFE_HOURS, frecency_scores, frecent_songs
from .listing import (
    favourite_songs,
    omit_recent,
    ratings_to_songs,
    songs_by_addition,
    songs_by_last_hearing,
)
from .suggestions import DEFAULT_SUGGESTION_HALF_LIFE_MINUTES, suggested_songs, suggestion_scores

__all__ = [
    "DEFAULT_FRECENCY_HALF_LIFE_HOURS",
    "DEFAULT_SUGGESTION_HALF_LIFE_MINUTES",
    "favourite_songs",
    "frecency_scores",
    "frecent_songs",
    "omit_recent",
    "ratings_to_songs",
    "songs_by_addition",
    "songs_by_last_hearing",
    "suggested_songs",
    "suggestion_scores",
]
