from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta

from ..store.models import Song, SongHearing


def ratings_to_songs(ratings: Mapping[str, float]) -> list[str]:
    """Order song names by rating, highest first.

    Equal ratings are ordered by case-folded name, then by name, so the result
    does not depend on dict iteration order.
    """
    ordered = sorted(ratings.items(), key=lambda item: (-item[1], item[0].casefold(), item[0]))
    return [name for name, _ in ordered]


def omit_recent(
    hearings: Iterable[SongHearing],
    omit: timedelta | None,
    now: datetime,
) -> list[SongHearing]:
    """Drop hearings younger than ``omit``.

    Used to keep a song that is playing right now from dominating its own
    rankings. ``None`` or a non-positive window keeps every hearing.
    """
    if omit is None or omit <= timedelta(0):
        return list(hearings)
    return [h for h in hearings if now - h.heard_at >= omit]


def favourite_songs(hearings: Iterable[SongHearing]) -> list[str]:
    """List songs by number of hearings, most heard first."""
    counts: dict[str, float] = {}
    for h in hearings:
        counts[h.name] = counts.get(h.name, 0) + 1
    return ratings_to_songs(counts)


def songs_by_last_hearing(hearings: Iterable[SongHearing]) -> list[str]:
    """List heard songs by their latest hearing, most recent first.

    ``hearings`` are expected in log order; hearings stamped with the same
    second are ordered by their position in the log, later first.
    """
    latest: dict[str, tuple[float, int]] = {}
    for position, h in enumerate(hearings):
        key = (h.heard_at.timestamp(), position)
        prev = latest.get(h.name)
        if prev is None or key > prev:
            latest[h.name] = key
    ordered = sorted(latest.items(), key=lambda item: (-item[1][0], -item[1][1]))
    return [name for name, _ in ordered]


def songs_by_addition(songs: Iterable[Song]) -> list[str]:
    """List songs newest addition first. Ids grow with every addition."""
    return [s.name for s in sorted(songs, key=lambda s: s.id, reverse=True)]
