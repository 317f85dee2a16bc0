"""
Millisecond timestamps and the plausible date window.

Rating events carry Unix timestamps in milliseconds. Values outside the
configured window (clock skew, the 0/negative sentinels of old exports)
are treated as implausible.
"""

import re
import time
from datetime import datetime, timezone
from typing import Any, Optional

from zeugnis.config.settings import Settings, get_settings

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def now_ms() -> int:
    """Current time as Unix milliseconds."""
    return time.time_ns() // 1_000_000


def plausible_window(settings: Optional[Settings] = None) -> tuple[int, int]:
    """Return the (min, max) plausible timestamps in milliseconds."""
    settings = settings or get_settings()
    return settings.min_timestamp_ms, settings.max_timestamp_ms


def is_integer_value(value: Any) -> bool:
    """True for real ints (bool excluded) and integral floats."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def is_valid_timestamp(value: Any, settings: Optional[Settings] = None) -> bool:
    """
    Check whether a value is a plausible millisecond timestamp.

    Args:
        value: Candidate timestamp
        settings: Settings holding the window (default: global settings)

    Returns:
        True if value is a non-negative integer inside the date window
    """
    if not is_integer_value(value) or value < 0:
        return False
    lower, upper = plausible_window(settings)
    return lower <= value <= upper


def clamp_timestamp(value: int, settings: Optional[Settings] = None) -> int:
    """Move a timestamp into the plausible window (e.g. "now" on a skewed clock)."""
    lower, upper = plausible_window(settings)
    return min(max(int(value), lower), upper)


def parse_leading_int(value: str) -> Optional[int]:
    """Read the integer prefix of a string (' 3.0' -> 3), None if there is none."""
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def parse_iso_timestamp(value: str) -> int | None:
    """
    Parse an ISO-8601 date string into milliseconds.

    Naive values are interpreted as UTC. Returns None if unparseable.
    """
    text = value.strip()
    if not text:
        return None
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def to_iso(timestamp_ms: int) -> str:
    """Format milliseconds as an ISO-8601 UTC string (JavaScript toISOString style)."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f"{moment.microsecond // 1000:03d}Z"
