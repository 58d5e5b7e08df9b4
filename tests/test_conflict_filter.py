"""
Tests for reservation conflict filtering.
"""

import pendulum
import pytest

from vanslots.domain.conflict_filter import ReservationConflictFilter
from vanslots.domain.models import Reservation, ReservationStatus, ReservedSlot

from conftest import MONDAY, TUESDAY


def _reservation(start, end, status=ReservationStatus.CONFIRMED) -> Reservation:
    return Reservation(
        id="res-1",
        office_id="office-1",
        start=pendulum.parse(start, tz="Europe/London"),
        end=pendulum.parse(end, tz="Europe/London"),
        status=status,
    )


class TestFilter:
    """Tests for ReservationConflictFilter.filter."""

    def test_flags_slots_inside_reserved_range(self):
        """Both ends of a reserved range are blocked."""
        result = ReservationConflictFilter().filter(
            ["10:00", "10:15", "10:30"],
            [ReservedSlot(start_time="10:00", end_time="10:15")],
            "start",
        )

        assert [(s.slot, s.reserved) for s in result] == [
            ("10:00", True),
            ("10:15", True),
            ("10:30", False),
        ]

    def test_reserved_slots_stay_in_output(self):
        slots = ["09:00", "09:15", "09:30"]

        result = ReservationConflictFilter().filter(
            slots, [ReservedSlot(start_time="09:00", end_time="09:30")], "end"
        )

        assert [s.slot for s in result] == slots
        assert all(s.reserved for s in result)

    def test_multiple_ranges(self):
        result = ReservationConflictFilter().filter(
            ["09:00", "10:00", "11:00", "12:00"],
            [
                ReservedSlot(start_time="08:00", end_time="09:00"),
                ReservedSlot(start_time="11:00", end_time="11:30"),
            ],
            "start",
        )

        assert [s.slot for s in result if s.available] == ["10:00", "12:00"]

    def test_no_reservations(self):
        result = ReservationConflictFilter().filter(["09:00", "09:15"], [], "start")

        assert all(s.available for s in result)

    def test_invalid_role(self):
        with pytest.raises(ValueError, match="Role must be one of"):
            ReservationConflictFilter().filter(["09:00"], [], "pickup")


class TestFootprints:
    """Tests for deriving reserved ranges from reservations."""

    def test_same_day_reservation(self):
        reservation = _reservation("2024-11-25 10:00", "2024-11-25 16:30")

        slot = ReservationConflictFilter.footprint(reservation, MONDAY, "start")

        assert (slot.start_time, slot.end_time) == ("10:00", "16:30")
        assert slot.is_same_day

    def test_multi_day_reservation_on_pickup_date(self):
        """A multi-day rental blocks from pickup to the end of that day."""
        reservation = _reservation("2024-11-25 13:15", "2024-11-26 11:00")

        slot = ReservationConflictFilter.footprint(reservation, MONDAY, "start")

        assert (slot.start_time, slot.end_time) == ("13:15", "23:59")
        assert not slot.is_same_day

    def test_multi_day_reservation_on_return_date(self):
        reservation = _reservation("2024-11-25 13:15", "2024-11-26 11:00")

        slot = ReservationConflictFilter.footprint(reservation, TUESDAY, "end")

        assert (slot.start_time, slot.end_time) == ("00:00", "11:00")

    def test_reservation_not_touching_role_and_date(self):
        reservation = _reservation("2024-11-25 13:15", "2024-11-26 11:00")

        assert ReservationConflictFilter.footprint(reservation, TUESDAY, "start") is None
        assert ReservationConflictFilter.footprint(reservation, MONDAY, "end") is None

    def test_canceled_reservations_do_not_block(self):
        reservations = [
            _reservation("2024-11-25 09:00", "2024-11-25 17:00", ReservationStatus.CANCELED),
            _reservation("2024-11-25 10:00", "2024-11-25 12:00"),
        ]

        footprints = ReservationConflictFilter().footprints(reservations, MONDAY, "start")

        assert [(s.start_time, s.end_time) for s in footprints] == [("10:00", "12:00")]
