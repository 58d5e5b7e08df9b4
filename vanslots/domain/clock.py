"""
Time-of-day helpers.

All engine arithmetic happens on minutes since midnight. Values saturate at
the day boundaries (00:00 and 23:59); nothing ever rolls over midnight.
"""

import re

from .exceptions import InvalidTimeError

DAY_START = 0
DAY_END = 23 * 60 + 59

OPEN_DEFAULT = "00:00"
CLOSE_DEFAULT = "23:59"

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


def to_minutes(value: str) -> int:
    """
    Convert an "HH:MM" string to minutes since midnight.

    Raises:
        InvalidTimeError: If the string is not a valid 24h time
    """
    match = _HHMM.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidTimeError(f"Invalid time '{value}', expected HH:MM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeError(f"Invalid time '{value}', expected HH:MM")

    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as zero-padded "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def clamp(minutes: int) -> int:
    """Saturate a minute value to the [00:00, 23:59] range."""
    return max(DAY_START, min(DAY_END, minutes))


def shift(value: str, minutes: int) -> str:
    """Shift an "HH:MM" value by a number of minutes, clamped to the day."""
    return format_minutes(clamp(to_minutes(value) + minutes))


def hours_to_minutes(hours: float) -> int:
    return int(round(hours * 60))


def minutes_between(start: str, end: str) -> int:
    """Signed number of minutes from ``start`` to ``end`` on the same day."""
    return to_minutes(end) - to_minutes(start)
