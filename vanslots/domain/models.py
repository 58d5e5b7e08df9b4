"""
Domain models for office schedules, reservations and time slots.

Every model is an immutable value object. The engine never creates offices or
reservations and never mutates them; it only derives windows and slots.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        """Weekday of a calendar date (works for pendulum dates too)."""
        return list(cls)[day.weekday()]


class SlotRole(str, Enum):
    """Which side of a booking a time list is computed for."""
    PICKUP = "pickup"
    RETURN = "return"

    @property
    def conflict_role(self) -> str:
        """Role name used by the reservation lookup ("start" or "end")."""
        return "start" if self is SlotRole.PICKUP else "end"


class WindowSource(str, Enum):
    SPECIAL = "special"
    WORKING = "working"
    CLOSED = "closed"


@dataclass(frozen=True)
class ExtensionConfig:
    """
    Extra hours around the normal open/close times, charged as a flat fee.
    """
    hours_before: float = 0
    hours_after: float = 0
    flat_price: float = 0

    def __post_init__(self):
        for name in ("hours_before", "hours_after", "flat_price"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")

    @property
    def is_zero(self) -> bool:
        return self.hours_before == 0 and self.hours_after == 0


@dataclass(frozen=True)
class WorkingDay:
    """Default weekly schedule for one weekday of an office."""
    day: Weekday
    is_open: bool
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    pickup_extension: Optional[ExtensionConfig] = None
    return_extension: Optional[ExtensionConfig] = None

    def extension_for(self, role: SlotRole) -> Optional[ExtensionConfig]:
        """Extension for pickup or return; closed days never extend."""
        if not self.is_open:
            return None
        if role is SlotRole.PICKUP:
            return self.pickup_extension
        return self.return_extension


@dataclass(frozen=True)
class SpecialDay:
    """
    Yearly recurring override keyed by month and day of month.
    """
    month: int
    day: int
    is_open: bool
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")
        if not 1 <= self.day <= 31:
            raise ValueError(f"Day must be between 1 and 31, got {self.day}")

    def matches(self, day: date) -> bool:
        return self.month == day.month and self.day == day.day


@dataclass(frozen=True)
class Office:
    """
    An office with its weekly schedule and special days.

    Reservations reference offices by id; the office does not own them.
    """
    id: str
    name: str = ""
    working_days: Tuple[WorkingDay, ...] = ()
    special_days: Tuple[SpecialDay, ...] = ()

    def working_day(self, weekday: Weekday) -> Optional[WorkingDay]:
        for working_day in self.working_days:
            if working_day.day is weekday:
                return working_day
        return None

    def special_day(self, day: date) -> Optional[SpecialDay]:
        for special in self.special_days:
            if special.matches(day):
                return special
        return None


@dataclass(frozen=True)
class ReservedSlot:
    """
    Time footprint of one existing reservation on a queried date.

    ``start_time``/``end_time`` bound the blocked range (inclusive).
    """
    start_time: str
    end_time: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_same_day: bool = True


@dataclass(frozen=True)
class ConfigurationGap:
    """A missing schedule entry that was replaced by the widest window."""
    weekday: Weekday
    reason: str


@dataclass(frozen=True)
class ResolvedWindow:
    """Effective open/close window of an office on one date."""
    source: WindowSource
    start: Optional[str] = None
    end: Optional[str] = None
    info: str = ""
    gaps: Tuple[ConfigurationGap, ...] = ()

    @property
    def is_closed(self) -> bool:
        return self.source is WindowSource.CLOSED


@dataclass(frozen=True)
class ExtendedWindow:
    """
    Visible slot range after applying an extension.

    ``normal_start``/``normal_end`` are the surcharge boundaries: a chosen
    time strictly outside them costs ``price``.
    """
    start: Optional[str]
    end: Optional[str]
    normal_start: Optional[str]
    normal_end: Optional[str]
    price: float = 0
    available: bool = True

    @classmethod
    def unavailable(cls, normal_start: Optional[str] = None, normal_end: Optional[str] = None) -> "ExtendedWindow":
        return cls(
            start=None,
            end=None,
            normal_start=normal_start,
            normal_end=normal_end,
            price=0,
            available=False,
        )

    @property
    def surcharge_boundaries(self) -> Tuple[Optional[str], Optional[str]]:
        return self.normal_start, self.normal_end


@dataclass(frozen=True)
class SlotStatus:
    """A selectable time of day with its flags."""
    slot: str
    reserved: bool = False
    surcharged: bool = False

    @property
    def available(self) -> bool:
        return not self.reserved


@dataclass(frozen=True)
class DayAvailability:
    """
    Result of the full pipeline for one office, date and role.
    """
    day: date
    role: SlotRole
    window: ResolvedWindow
    extended: Optional[ExtendedWindow]
    slots: Tuple[SlotStatus, ...] = ()
    message: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.slots

    @property
    def available_slots(self) -> List[str]:
        return [status.slot for status in self.slots if status.available]

    @property
    def price(self) -> float:
        return self.extended.price if self.extended else 0


@dataclass(frozen=True)
class PricingTier:
    """Per-day price for rentals lasting between ``min_days`` and ``max_days``."""
    min_days: int
    max_days: int
    price_per_day: float


@dataclass(frozen=True)
class PriceBreakdown:
    total_hours: int
    total_days: int
    extra_hours: int
    price_per_day: float
    extra_hours_rate: float
    total_price: float
    breakdown: str
    pickup_extension_price: float = 0
    return_extension_price: float = 0
    add_ons_price: float = 0


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    DELIVERED = "delivered"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Reservation:
    """
    An existing booking as returned by the reservation lookup.
    """
    id: str
    office_id: str
    start: datetime
    end: datetime
    status: ReservationStatus = ReservationStatus.PENDING

    @property
    def blocks_slots(self) -> bool:
        return self.status is not ReservationStatus.CANCELED
