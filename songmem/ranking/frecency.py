from collections.abc import Iterable
from datetime import datetime

from ..store.models import SongHearing
from .listing import ratings_to_songs

DEFAULT_FRECENCY_HALF_LIFE_HOURS = 30 * 24.0


def frecency_scores(
    hearings: Iterable[SongHearing],
    now: datetime,
    half_life_hours: float = DEFAULT_FRECENCY_HALF_LIFE_HOURS,
) -> dict[str, float]:
    """Sum an exponentially decaying weight over every hearing of each song.

    Each hearing weighs 0.5 ** (age_hours / half_life_hours), i.e.
    exp(-ln(2) / half_life_hours * age_hours): a hearing that is one half-life
    old counts half as much as one from right now. Hearings dated in the future
    have a negative age and weigh more than 1.
    See https://wiki.mozilla.org/User:Jesse/NewFrecency
    """
    scores: dict[str, float] = {}
    for h in hearings:
        age_hours = (now - h.heard_at).total_seconds() / 3600.0
        w = 0.5 ** (age_hours / float(half_life_hours)) if half_life_hours > 0 else 1.0
        scores[h.name] = scores.get(h.name, 0.0) + w
    return scores


def frecent_songs(
    hearings: Iterable[SongHearing],
    now: datetime,
    half_life_hours: float = DEFAULT_FRECENCY_HALF_LIFE_HOURS,
) -> list[str]:
    """List songs heard recently and often, most frecent first."""
    return ratings_to_songs(frecency_scores(hearings, now, half_life_hours))
