"""
Booking draft state machine.

A draft moves through NO_OFFICE -> OFFICE_SELECTED -> DATE_RANGE_CHOSEN ->
PICKUP_TIME_CHOSEN -> RETURN_TIME_CHOSEN -> VALID. The stage is derived from
the draft's fields; every event goes through ``BookingDraftReducer.reduce``,
which recomputes availability and clears selections that no longer hold.
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple, Union

from .clock import format_minutes, to_minutes
from .engine import AvailabilityEngine
from .exceptions import (
    InvalidDateRangeError,
    InvalidDriverAgeError,
    InvalidSameDayDurationError,
    InvalidTimeError,
)
from .models import Office, ReservedSlot, SlotRole


def _normalize_time(value: Optional[str]) -> Optional[str]:
    """Canonical "HH:MM" form, so "9:00" matches the "09:00" slot."""
    if value is None:
        return None
    return format_minutes(to_minutes(value))


class BookingStage(str, Enum):
    NO_OFFICE = "no_office"
    OFFICE_SELECTED = "office_selected"
    DATE_RANGE_CHOSEN = "date_range_chosen"
    PICKUP_TIME_CHOSEN = "pickup_time_chosen"
    RETURN_TIME_CHOSEN = "return_time_chosen"
    VALID = "valid"


@dataclass(frozen=True)
class BookingDraft:
    office: Optional[Office] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    pickup_time: Optional[str] = None
    return_time: Optional[str] = None
    driver_age: Optional[int] = None
    pickup_reserved: Tuple[ReservedSlot, ...] = ()
    return_reserved: Tuple[ReservedSlot, ...] = ()
    errors: Tuple[str, ...] = ()

    @property
    def same_day(self) -> bool:
        return self.start_date is not None and self.start_date == self.end_date

    @property
    def stage(self) -> BookingStage:
        if self.office is None:
            return BookingStage.NO_OFFICE
        if self.start_date is None or self.end_date is None:
            return BookingStage.OFFICE_SELECTED
        if self.pickup_time is None:
            return BookingStage.DATE_RANGE_CHOSEN
        if self.return_time is None:
            return BookingStage.PICKUP_TIME_CHOSEN
        if self.driver_age is None:
            return BookingStage.RETURN_TIME_CHOSEN
        return BookingStage.VALID

    @property
    def is_valid(self) -> bool:
        return self.stage is BookingStage.VALID


@dataclass(frozen=True)
class SelectOffice:
    office: Office


@dataclass(frozen=True)
class ChooseDates:
    start_date: date
    end_date: date


@dataclass(frozen=True)
class ChoosePickupTime:
    time: Optional[str]


@dataclass(frozen=True)
class ChooseReturnTime:
    time: Optional[str]


@dataclass(frozen=True)
class EnterDriverAge:
    age: int


@dataclass(frozen=True)
class ReservationsLoaded:
    """Reserved ranges for one side of the draft, as looked up for ``office_id`` on ``day``."""
    office_id: str
    role: SlotRole
    day: date
    reserved: Tuple[ReservedSlot, ...]


BookingEvent = Union[
    SelectOffice,
    ChooseDates,
    ChoosePickupTime,
    ChooseReturnTime,
    EnterDriverAge,
    ReservationsLoaded,
]


class BookingDraftReducer:
    """
    Pure reducer: ``reduce(draft, event)`` returns the next draft.
    """

    def __init__(self, engine: Optional[AvailabilityEngine] = None):
        self.engine = engine or AvailabilityEngine()

    @property
    def rules(self):
        return self.engine.rules

    def reduce(self, draft: BookingDraft, event: BookingEvent) -> BookingDraft:
        if isinstance(event, SelectOffice):
            if draft.office is not None and draft.office.id == event.office.id:
                return replace(draft, office=event.office, errors=())
            draft = replace(
                draft,
                office=event.office,
                pickup_reserved=(),
                return_reserved=(),
                errors=(),
            )
            return self._revalidate(draft, focus=None)

        if isinstance(event, ChooseDates):
            try:
                self.rules.ensure_date_order(event.start_date, event.end_date)
            except InvalidDateRangeError as exc:
                return replace(draft, errors=(str(exc),))

            if draft.office is None:
                return replace(draft, errors=("Select an office before choosing dates",))

            pickup_reserved = draft.pickup_reserved if event.start_date == draft.start_date else ()
            return_reserved = draft.return_reserved if event.end_date == draft.end_date else ()
            draft = replace(
                draft,
                start_date=event.start_date,
                end_date=event.end_date,
                pickup_reserved=pickup_reserved,
                return_reserved=return_reserved,
                errors=(),
            )
            return self._revalidate(draft, focus=None)

        if isinstance(event, ChoosePickupTime):
            if draft.start_date is None:
                return replace(draft, errors=("Choose dates before a pickup time",))
            try:
                pickup_time = _normalize_time(event.time)
            except InvalidTimeError as exc:
                return replace(draft, errors=(str(exc),))
            return self._revalidate(replace(draft, pickup_time=pickup_time, errors=()), focus=SlotRole.PICKUP)

        if isinstance(event, ChooseReturnTime):
            if draft.end_date is None:
                return replace(draft, errors=("Choose dates before a return time",))
            try:
                return_time = _normalize_time(event.time)
            except InvalidTimeError as exc:
                return replace(draft, errors=(str(exc),))
            return self._revalidate(replace(draft, return_time=return_time, errors=()), focus=SlotRole.RETURN)

        if isinstance(event, EnterDriverAge):
            try:
                age = self.rules.validate_driver_age(event.age)
            except InvalidDriverAgeError as exc:
                return replace(draft, driver_age=None, errors=(str(exc),))
            return replace(draft, driver_age=age, errors=())

        if isinstance(event, ReservationsLoaded):
            return self._apply_reservations(draft, event)

        raise TypeError(f"Unsupported booking event: {event!r}")

    def _apply_reservations(self, draft: BookingDraft, event: ReservationsLoaded) -> BookingDraft:
        # Results for an office or date the draft has since moved away from are ignored
        if draft.office is None or event.office_id != draft.office.id:
            return draft
        if event.role is SlotRole.PICKUP:
            if event.day != draft.start_date:
                return draft
            draft = replace(draft, pickup_reserved=tuple(event.reserved))
        else:
            if event.day != draft.end_date:
                return draft
            draft = replace(draft, return_reserved=tuple(event.reserved))
        return self._revalidate(replace(draft, errors=()), focus=None)

    def pickup_options(self, draft: BookingDraft) -> List[str]:
        if draft.office is None or draft.start_date is None:
            return []
        return self.engine.booking_options(
            draft.office,
            draft.start_date,
            SlotRole.PICKUP,
            draft.pickup_reserved,
            other_time=draft.return_time,
            same_day=draft.same_day,
        )

    def return_options(self, draft: BookingDraft) -> List[str]:
        if draft.office is None or draft.end_date is None:
            return []
        return self.engine.booking_options(
            draft.office,
            draft.end_date,
            SlotRole.RETURN,
            draft.return_reserved,
            other_time=draft.pickup_time,
            same_day=draft.same_day,
        )

    def _revalidate(self, draft: BookingDraft, focus: Optional[SlotRole]) -> BookingDraft:
        """
        Re-check the chosen times against freshly computed availability.

        ``focus`` is the side the user just changed; on a same-day conflict
        that selection is the one cleared.
        """
        errors: List[str] = list(draft.errors)

        if draft.office is None or draft.start_date is None or draft.end_date is None:
            return replace(draft, pickup_time=None, return_time=None, errors=tuple(errors))

        pickup_time = draft.pickup_time
        return_time = draft.return_time

        if pickup_time is not None:
            available = self.engine.day_availability(
                draft.office, draft.start_date, SlotRole.PICKUP, draft.pickup_reserved
            ).available_slots
            if pickup_time not in available:
                errors.append(f"Pickup time {pickup_time} is not available on {draft.start_date.isoformat()}")
                pickup_time = None

        if return_time is not None:
            available = self.engine.day_availability(
                draft.office, draft.end_date, SlotRole.RETURN, draft.return_reserved
            ).available_slots
            if return_time not in available:
                errors.append(f"Return time {return_time} is not available on {draft.end_date.isoformat()}")
                return_time = None

        if pickup_time is not None and return_time is not None:
            try:
                self.rules.ensure_same_day_gap(draft.start_date, pickup_time, draft.end_date, return_time)
            except InvalidSameDayDurationError as exc:
                errors.append(str(exc))
                if focus is SlotRole.PICKUP:
                    pickup_time = None
                else:
                    return_time = None

        return replace(draft, pickup_time=pickup_time, return_time=return_time, errors=tuple(errors))
