"""Time-of-day values for ``time`` fields.

Browsers submit ``<input type="time">`` as ``HH:MM`` or ``HH:MM:SS``.
Hours may be a single digit when typed by hand (``9:00``).
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class TimeOfDay:
    """A wall-clock time without a date. Ordered by (hours, minutes, seconds)."""

    hours: int
    minutes: int
    seconds: int = 0

    def __str__(self) -> str:
        if self.seconds:
            return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"
        return f"{self.hours:02d}:{self.minutes:02d}"


def parse_time(raw: str) -> TimeOfDay | None:
    """Parse ``H:MM`` / ``HH:MM:SS``; return None if *raw* is not a valid time."""
    parts = raw.strip().split(":")
    if len(parts) not in (2, 3):
        return None
    if not all(part.isascii() and part.isdigit() for part in parts):
        return None
    if any(len(part) != 2 for part in parts[1:]) or len(parts[0]) > 2:
        return None

    hours, minutes, *rest = (int(part) for part in parts)
    seconds = rest[0] if rest else 0
    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    return TimeOfDay(hours, minutes, seconds)
