"""
Flag time slots blocked by existing reservations.

Reserved slots stay in the output so a picker can render them disabled.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from .clock import CLOSE_DEFAULT, OPEN_DEFAULT, to_minutes
from .models import Reservation, ReservedSlot, SlotStatus

CONFLICT_ROLES = ("start", "end")


class ReservationConflictFilter:
    """
    Marks slots that fall inside any reserved range.

    The caller passes ranges already narrowed to one office, date and role;
    dates are not checked again here.
    """

    def filter(
        self,
        slots: Sequence[str],
        reserved_ranges: Iterable[ReservedSlot],
        role: str,
    ) -> List[SlotStatus]:
        """
        Tag each slot as reserved or available.

        A slot is reserved when it lies in [start_time, end_time] of any
        range, both ends inclusive.
        """
        if role not in CONFLICT_ROLES:
            raise ValueError(f"Role must be one of {CONFLICT_ROLES}, got '{role}'")

        bounds = [
            (to_minutes(reserved.start_time), to_minutes(reserved.end_time))
            for reserved in reserved_ranges
        ]

        statuses: List[SlotStatus] = []
        for slot in slots:
            minute = to_minutes(slot)
            reserved = any(low <= minute <= high for low, high in bounds)
            statuses.append(SlotStatus(slot=slot, reserved=reserved))

        return statuses

    @staticmethod
    def footprint(reservation: Reservation, day: date, role: str) -> Optional[ReservedSlot]:
        """
        Time footprint of a reservation on ``day`` for ``role``.

        Same-day rentals block their pickup-to-return range. A multi-day
        rental blocks from pickup to the end of its pickup day ("start") and
        from the start of its return day to the return time ("end").
        """
        start_day = reservation.start.date()
        end_day = reservation.end.date()
        start_time = reservation.start.strftime("%H:%M")
        end_time = reservation.end.strftime("%H:%M")

        if start_day == end_day:
            if start_day != day:
                return None
            return ReservedSlot(
                start_time=start_time,
                end_time=end_time,
                start_date=start_day,
                end_date=end_day,
                is_same_day=True,
            )

        if role == "start" and start_day == day:
            return ReservedSlot(
                start_time=start_time,
                end_time=CLOSE_DEFAULT,
                start_date=start_day,
                end_date=end_day,
                is_same_day=False,
            )

        if role == "end" and end_day == day:
            return ReservedSlot(
                start_time=OPEN_DEFAULT,
                end_time=end_time,
                start_date=start_day,
                end_date=end_day,
                is_same_day=False,
            )

        return None

    def footprints(
        self,
        reservations: Iterable[Reservation],
        day: date,
        role: str,
    ) -> List[ReservedSlot]:
        """Footprints of all slot-blocking reservations touching ``day``."""
        result: List[ReservedSlot] = []

        for reservation in reservations:
            if not reservation.blocks_slots:
                continue
            slot = self.footprint(reservation, day, role)
            if slot is not None:
                result.append(slot)

        return result
