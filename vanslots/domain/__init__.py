"""
Domain layer - Pure business logic without external dependencies.
"""

from .booking_draft import BookingDraft, BookingDraftReducer, BookingStage
from .booking_rules import BookingRules, DriverAgePolicy
from .conflict_filter import ReservationConflictFilter
from .engine import AvailabilityEngine
from .extension_calculator import ExtensionCalculator
from .models import (
    DayAvailability,
    ExtendedWindow,
    ExtensionConfig,
    Office,
    Reservation,
    ReservedSlot,
    ResolvedWindow,
    SlotRole,
    SlotStatus,
    SpecialDay,
    Weekday,
    WindowSource,
    WorkingDay,
)
from .pricing import PriceCalculator
from .schedule_resolver import ScheduleResolver
from .slot_generator import SlotGenerator

__all__ = [
    "AvailabilityEngine",
    "BookingDraft",
    "BookingDraftReducer",
    "BookingRules",
    "BookingStage",
    "DayAvailability",
    "DriverAgePolicy",
    "ExtendedWindow",
    "ExtensionCalculator",
    "ExtensionConfig",
    "Office",
    "PriceCalculator",
    "Reservation",
    "ReservationConflictFilter",
    "ReservedSlot",
    "ResolvedWindow",
    "ScheduleResolver",
    "SlotGenerator",
    "SlotRole",
    "SlotStatus",
    "SpecialDay",
    "Weekday",
    "WindowSource",
    "WorkingDay",
]
