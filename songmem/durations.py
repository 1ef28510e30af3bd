import re
from datetime import timedelta

RE_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(text: str) -> timedelta:
    """Parse a timespan such as ``30m``, ``2h`` or ``1h30m``.

    Accepts a sequence of decimal numbers, each with a unit suffix, and an
    optional leading sign. A bare ``0`` needs no unit.

    Raises:
        ValueError: If the text is not a valid timespan
    """
    s = text.strip()
    sign = 1.0
    if s[:1] in ("+", "-"):
        sign = -1.0 if s[0] == "-" else 1.0
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f'invalid duration "{text}"')

    seconds = 0.0
    pos = 0
    while pos < len(s):
        m = RE_COMPONENT.match(s, pos)
        if m is None:
            raise ValueError(f'invalid duration "{text}"')
        seconds += float(m.group(1)) * UNIT_SECONDS[m.group(2)]
        pos = m.end()
    try:
        return timedelta(seconds=sign * seconds)
    except OverflowError as e:
        raise ValueError(f'invalid duration "{text}": out of range') from e
