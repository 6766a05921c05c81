"""
Identifier & Time Utilities
===========================

Request/correlation identifiers and human-readable durations.
"""

import uuid
from datetime import datetime, timedelta, timezone

# Durations below this many milliseconds are rendered as "<n>ms"
MILLISECOND_THRESHOLD = 10_000

_ONE_MS = timedelta(milliseconds=1)


def new_correlation_id() -> str:
    """Mint an identifier shared by every service handling one logical request."""
    return str(uuid.uuid4())


def new_request_id() -> str:
    """Mint an identifier pairing the request and response records of one request."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp(moment: datetime) -> str:
    """Render a wall-clock timestamp for a log record."""
    return moment.isoformat(timespec="milliseconds")


def humanize_number(value: int) -> str:
    """Group the digits of an integer in thousands, e.g. 1250 -> "1,250"."""
    return f"{value:,}"


def elapsed_ms(start: datetime, now: datetime) -> int:
    """Whole milliseconds between two moments, never negative."""
    delta = now - start
    return max(0, delta // _ONE_MS)


def humanize_duration(start: datetime, now: datetime | None = None) -> str:
    """
    Render the time elapsed since ``start``.

    Args:
        start: Moment the measured operation began
        now: End of the measured span (default: current UTC time)

    Returns:
        "<n>ms" below ten seconds, otherwise whole seconds rounded half up
        with thousands grouping ("10s", "1,250s")
    """
    delta = elapsed_ms(start, now or utcnow())
    if delta < MILLISECOND_THRESHOLD:
        return f"{delta}ms"
    return f"{humanize_number((delta + 500) // 1000)}s"
