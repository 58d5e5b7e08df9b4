"""
Availability engine - the single entry point every booking surface uses.

Pure business logic: no I/O, no shared mutable state. Safe to call
repeatedly and concurrently.
"""

from dataclasses import replace
from datetime import date
from typing import Iterable, List, Optional, Tuple

from .booking_rules import BookingRules
from .clock import to_minutes
from .conflict_filter import ReservationConflictFilter
from .extension_calculator import ExtensionCalculator
from .models import (
    DayAvailability,
    ExtendedWindow,
    Office,
    ReservedSlot,
    ResolvedWindow,
    SlotRole,
    Weekday,
    WindowSource,
)
from .schedule_resolver import ScheduleResolver
from .slot_generator import DEFAULT_INTERVAL_MINUTES, SlotGenerator


class AvailabilityEngine:
    """
    Runs the availability pipeline for one office, date and role.

    Pipeline:
    1. ScheduleResolver - effective window for the date
    2. ExtensionCalculator - extended range and surcharge boundaries
    3. SlotGenerator - fixed-interval slots over the extended range
    4. ReservationConflictFilter - flag slots held by existing reservations
    """

    def __init__(
        self,
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
        rules: Optional[BookingRules] = None,
    ):
        self.resolver = ScheduleResolver()
        self.extensions = ExtensionCalculator()
        self.generator = SlotGenerator(interval_minutes)
        self.conflicts = ReservationConflictFilter()
        self.rules = rules or BookingRules()

    def extended_window(
        self,
        office: Office,
        day: date,
        role: SlotRole,
        window: Optional[ResolvedWindow] = None,
    ) -> ExtendedWindow:
        """Extended range for ``role``; ``window`` skips resolving the day again."""
        if window is None:
            window = self.resolver.resolve(office, day)
        working_day = None
        if window.source is WindowSource.WORKING:
            working_day = office.working_day(Weekday.from_date(day))
        return self.extensions.for_working_day(window, working_day, role)

    def day_availability(
        self,
        office: Office,
        day: date,
        role: SlotRole,
        reserved: Iterable[ReservedSlot] = (),
    ) -> DayAvailability:
        """
        Compute the slot list for a pickup or return on ``day``.

        Returns:
            DayAvailability; an empty slot list means no time can be chosen
            and ``message`` explains why
        """
        window = self.resolver.resolve(office, day)

        if window.is_closed:
            return DayAvailability(
                day=day,
                role=role,
                window=window,
                extended=None,
                message=window.info or "Office is closed on this date",
            )

        extended = self.extended_window(office, day, role, window)
        if not extended.available:
            return DayAvailability(
                day=day,
                role=role,
                window=window,
                extended=extended,
                message=f"No {role.value} times are offered on this date",
            )

        slots = self.generator.generate(extended.start, extended.end)
        statuses = [
            replace(status, surcharged=self.extensions.is_surcharged(extended, status.slot))
            for status in self.conflicts.filter(slots, reserved, role.conflict_role)
        ]

        message = ""
        if statuses and not any(status.available for status in statuses):
            message = f"All {role.value} times on this date are reserved"

        return DayAvailability(
            day=day,
            role=role,
            window=window,
            extended=extended,
            slots=tuple(statuses),
            message=message,
        )

    def extension_price(self, office: Office, day: date, role: SlotRole, chosen: str) -> float:
        """Flat extension fee for a chosen time, or 0."""
        return self.extensions.surcharge_for(self.extended_window(office, day, role), chosen)

    def extension_prices(
        self,
        office: Office,
        start_date: date,
        pickup_time: str,
        end_date: date,
        return_time: str,
    ) -> Tuple[float, float]:
        """(pickup fee, return fee) for a complete booking."""
        return (
            self.extension_price(office, start_date, SlotRole.PICKUP, pickup_time),
            self.extension_price(office, end_date, SlotRole.RETURN, return_time),
        )

    def booking_options(
        self,
        office: Office,
        day: date,
        role: SlotRole,
        reserved: Iterable[ReservedSlot] = (),
        other_time: Optional[str] = None,
        same_day: bool = False,
        not_before: Optional[str] = None,
    ) -> List[str]:
        """
        Selectable times for one side of a booking.

        Args:
            other_time: Time already chosen for the opposite side
            same_day: Whether pickup and return fall on the same date
            not_before: Drop slots earlier than this (e.g. "now" on today)
        """
        options = self.day_availability(office, day, role, reserved).available_slots

        if not_before:
            floor = to_minutes(not_before)
            options = [slot for slot in options if to_minutes(slot) >= floor]

        if role is SlotRole.PICKUP:
            return self.rules.prune_pickup_options(options, other_time, same_day)
        return self.rules.prune_return_options(options, other_time, same_day)
