"""
Fixed-interval time-of-day slots.
"""

from typing import List

from .clock import format_minutes, to_minutes

DEFAULT_INTERVAL_MINUTES = 15


class SlotGenerator:
    """
    Produces ascending "HH:MM" slots on a fixed grid.

    Pure function of its arguments: knows nothing about offices,
    reservations or pricing.
    """

    def __init__(self, interval_minutes: int = DEFAULT_INTERVAL_MINUTES):
        if interval_minutes <= 0:
            raise ValueError(f"Interval must be positive, got {interval_minutes}")
        self.interval_minutes = interval_minutes

    def generate(self, start: str, end: str, interval_minutes: int | None = None) -> List[str]:
        """
        Generate slots from ``start`` to ``end``, both inclusive.

        Example:
        09:00 - 10:00 every 15 min -> [09:00, 09:15, 09:30, 09:45, 10:00]

        An inverted range yields an empty list.
        """
        step = self.interval_minutes if interval_minutes is None else interval_minutes
        if step <= 0:
            raise ValueError(f"Interval must be positive, got {step}")

        current = to_minutes(start)
        last = to_minutes(end)

        slots: List[str] = []
        while current <= last:
            slots.append(format_minutes(current))
            current += step

        return slots
