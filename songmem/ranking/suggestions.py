import bisect
from collections.abc import Sequence

from ..errors import NotFound
from ..store.models import SongHearing
from .listing import ratings_to_songs

DEFAULT_SUGGESTION_HALF_LIFE_MINUTES = 60.0


def _minutes_to_nearest(t: float, reference_times: Sequence[float]) -> float:
    """Distance in minutes from ``t`` to the closest of the sorted reference times."""
    i = bisect.bisect_left(reference_times, t)
    span = float("inf")
    if i < len(reference_times):
        span = reference_times[i] - t
    if i > 0:
        span = min(span, t - reference_times[i - 1])
    return span / 60.0


def suggestion_scores(
    hearings: Sequence[SongHearing],
    song: str,
    half_life_minutes: float = DEFAULT_SUGGESTION_HALF_LIFE_MINUTES,
) -> dict[str, float]:
    """Score every other song by how close its hearings lie to hearings of ``song``.

    Each hearing of another song contributes 0.5 ** (span / half_life_minutes),
    where span is the gap in minutes to the nearest hearing of ``song``, before
    or after. Songs habitually played in the same session therefore add up to
    high scores while distant co-occurrences contribute almost nothing.

    Raises:
        NotFound: If ``song`` has no hearing in ``hearings``
    """
    reference_times = sorted(h.heard_at.timestamp() for h in hearings if h.name == song)
    if not reference_times:
        raise NotFound(f"the song '{song}' was never heard")

    scores: dict[str, float] = {}
    for h in hearings:
        if h.name == song:
            continue
        span = _minutes_to_nearest(h.heard_at.timestamp(), reference_times)
        w = 0.5 ** (span / float(half_life_minutes)) if half_life_minutes > 0 else 1.0
        scores[h.name] = scores.get(h.name, 0.0) + w
    return scores


def suggested_songs(
    hearings: Sequence[SongHearing],
    song: str,
    half_life_minutes: float = DEFAULT_SUGGESTION_HALF_LIFE_MINUTES,
) -> list[str]:
    """List songs often heard before or after ``song``, best suggestion first."""
    return ratings_to_songs(suggestion_scores(hearings, song, half_life_minutes))
