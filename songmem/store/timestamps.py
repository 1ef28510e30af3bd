from datetime import datetime, timedelta


def now_local() -> datetime:
    """Return the current time carrying the local zone offset."""
    return datetime.now().astimezone()


def format_timestamp(dt: datetime) -> str:
    """Format an aware datetime as RFC 3339 with second precision.

    The offset active at capture time is kept, so time-of-day comparisons stay
    meaningful after travelling. A zero offset is written as ``Z``.
    """
    if dt.tzinfo is None:
        raise ValueError("timestamp must carry a zone offset")
    text = dt.replace(microsecond=0).isoformat()
    if dt.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_timestamp(text: str) -> datetime:
    """Parse a stored RFC 3339 timestamp back into an aware datetime."""
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        raise ValueError(f"timestamp without zone offset: {text!r}")
    return dt
