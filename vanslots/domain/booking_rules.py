"""
Cross-field booking rules: same-day minimum duration and driver age.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from .clock import minutes_between, to_minutes
from .exceptions import (
    InvalidDateRangeError,
    InvalidDriverAgeError,
    InvalidSameDayDurationError,
)

DEFAULT_SAME_DAY_MIN_HOURS = 6


@dataclass(frozen=True)
class DriverAgePolicy:
    """Accepted driver age range, both ends inclusive."""
    minimum: int = 21
    maximum: int = 80

    def __post_init__(self):
        if self.minimum >= self.maximum:
            raise ValueError("Driver age minimum must be lower than maximum")

    def validate(self, age: int) -> int:
        if not self.minimum <= age <= self.maximum:
            raise InvalidDriverAgeError(
                f"Driver age must be between {self.minimum} and {self.maximum}, got {age}"
            )
        return age


class BookingRules:
    """
    Validation shared by every booking surface.
    """

    def __init__(
        self,
        same_day_min_hours: int = DEFAULT_SAME_DAY_MIN_HOURS,
        driver_age: Optional[DriverAgePolicy] = None,
    ):
        self.same_day_min_hours = same_day_min_hours
        self.driver_age = driver_age or DriverAgePolicy()

    @property
    def min_gap_minutes(self) -> int:
        return self.same_day_min_hours * 60

    def ensure_date_order(self, start_date: date, end_date: date) -> None:
        if end_date < start_date:
            raise InvalidDateRangeError(
                f"Return date {end_date.isoformat()} is before pickup date {start_date.isoformat()}"
            )

    def same_day_gap_ok(self, pickup_time: str, return_time: str) -> bool:
        """True if a same-day rental from pickup to return is long enough."""
        return minutes_between(pickup_time, return_time) >= self.min_gap_minutes

    def ensure_same_day_gap(
        self,
        start_date: date,
        pickup_time: str,
        end_date: date,
        return_time: str,
    ) -> None:
        """
        Enforce the minimum duration for rentals that start and end on one day.

        Multi-day rentals only need the dates in order.

        Raises:
            InvalidDateRangeError: If the return date is before the pickup date
            InvalidSameDayDurationError: If a same-day rental is too short
        """
        self.ensure_date_order(start_date, end_date)
        if start_date != end_date:
            return

        if not self.same_day_gap_ok(pickup_time, return_time):
            raise InvalidSameDayDurationError(pickup_time, return_time, self.same_day_min_hours)

    def prune_pickup_options(
        self,
        options: Sequence[str],
        return_time: Optional[str],
        same_day: bool,
    ) -> List[str]:
        """Drop pickup times that leave less than the minimum before return."""
        if not same_day or not return_time:
            return list(options)
        latest = to_minutes(return_time) - self.min_gap_minutes
        return [slot for slot in options if to_minutes(slot) <= latest]

    def prune_return_options(
        self,
        options: Sequence[str],
        pickup_time: Optional[str],
        same_day: bool,
    ) -> List[str]:
        """Drop return times that come less than the minimum after pickup."""
        if not same_day or not pickup_time:
            return list(options)
        earliest = to_minutes(pickup_time) + self.min_gap_minutes
        return [slot for slot in options if to_minutes(slot) >= earliest]

    def validate_driver_age(self, age: int) -> int:
        return self.driver_age.validate(age)
