"""
Domain-specific exception hierarchy for the van availability engine.
"""


class VanSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidTimeError(VanSlotsError, ValueError):
    """Raised when a time-of-day string is not a valid 24h "HH:MM" value."""


class InvalidSameDayDurationError(VanSlotsError):
    """Raised when a same-day booking is shorter than the minimum gap."""

    def __init__(self, pickup_time: str, return_time: str, min_hours: int):
        self.pickup_time = pickup_time
        self.return_time = return_time
        self.min_hours = min_hours
        super().__init__(
            f"Same-day rentals must last at least {min_hours} hours "
            f"(pickup {pickup_time}, return {return_time})."
        )


class InvalidDriverAgeError(VanSlotsError):
    """Raised when the driver age is outside the accepted range."""


class StaleLookupError(VanSlotsError):
    """Raised when a reservation lookup was superseded by a newer one."""


class ReservationLookupError(VanSlotsError):
    """Raised when office or reservation data cannot be fetched or parsed."""


class InvalidDateRangeError(VanSlotsError):
    """Raised when the return date is before the pickup date."""
