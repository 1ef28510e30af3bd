"""Commands offered to callers: store writes and ranked song listings.

Every function takes the open store first. Rankings are recomputed from the
full hearing log on each call.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from .ranking import (
    DEFAULT_FRECENCY_HALF_LIFE_HOURS,
    DEFAULT_SUGGESTION_HALF_LIFE_MINUTES,
    favourite_songs,
    frecent_songs,
    omit_recent,
    songs_by_addition,
    songs_by_last_hearing,
    suggested_songs,
)

if TYPE_CHECKING:
    from .store import Hearing, Song, SongHearing, SongStore

log = logging.getLogger(__name__)


def add_song(store: SongStore, song: str) -> Song:
    return store.add_song(song)


def add_hearing(store: SongStore, song: str) -> Hearing:
    return store.add_hearing(song)


def add_hearing_and_song_if_needed(store: SongStore, song: str) -> Hearing:
    return store.add_hearing_and_song_if_needed(song)


def _qualifying_hearings(store: SongStore, omit: timedelta | None) -> list[SongHearing]:
    hearings = store.song_hearings()
    kept = omit_recent(hearings, omit, store.now())
    if len(kept) != len(hearings):
        log.debug("Omitting %d hearing(s) younger than %s", len(hearings) - len(kept), omit)
    return kept


def list_songs_in_order_of_addition(store: SongStore) -> list[str]:
    """List all songs, newest addition first."""
    return songs_by_addition(store.songs())


def list_songs_in_order_of_last_hearing(store: SongStore) -> list[str]:
    """List all heard songs, the song heard last first."""
    return songs_by_last_hearing(store.song_hearings())


def list_favourite_songs(store: SongStore, omit: timedelta | None = None) -> list[str]:
    """List songs by number of hearings, most heard first."""
    return favourite_songs(_qualifying_hearings(store, omit))


def list_frecent_songs(
    store: SongStore,
    omit: timedelta | None = None,
    half_life_hours: float = DEFAULT_FRECENCY_HALF_LIFE_HOURS,
) -> list[str]:
    """List songs you lately heard a lot, most frecent first."""
    # TODO: cap the hearing log (e.g. to the last year) once histories grow large.
    hearings = _qualifying_hearings(store, omit)
    return frecent_songs(hearings, store.now(), half_life_hours)


def list_suggestions(
    store: SongStore,
    song: str,
    omit: timedelta | None = None,
    half_life_minutes: float = DEFAULT_SUGGESTION_HALF_LIFE_MINUTES,
) -> list[str]:
    """List songs often heard before or after ``song``, best suggestion first.

    ``song`` is matched ignoring case.

    Raises:
        NotFound: If the song does not exist or has no hearing outside the
            omit window
    """
    reference = store.get_song(song).name
    return suggested_songs(_qualifying_hearings(store, omit), reference, half_life_minutes)


def remove_last_hearing(store: SongStore, song: str | None = None) -> str:
    """Remove the latest hearing, or the latest hearing of ``song``.

    Returns:
        Name of the song whose hearing was removed
    """
    if song:
        return store.remove_last_hearing_of(song)
    return store.remove_last_hearing()


def remove_song(store: SongStore, song: str | None = None) -> str:
    """Remove ``song``, or the last added song when none is given.

    Returns:
        Name of the removed song
    """
    if song:
        return store.remove_song(song)
    return store.remove_last_added_song()


def rename_song(store: SongStore, song: str, new_name: str) -> Song:
    return store.rename_song(song, new_name)
