"""
Tests for domain models and time helpers.
"""

import pendulum
import pytest

from vanslots.domain.clock import clamp, format_minutes, minutes_between, shift, to_minutes
from vanslots.domain.exceptions import InvalidTimeError
from vanslots.domain.models import (
    DayAvailability,
    ExtensionConfig,
    ResolvedWindow,
    SlotRole,
    SlotStatus,
    SpecialDay,
    Weekday,
    WindowSource,
    WorkingDay,
)

from conftest import MONDAY, SUNDAY, build_office


class TestClock:
    """Tests for HH:MM helpers."""

    def test_to_minutes(self):
        """Test conversion to minutes since midnight."""
        assert to_minutes("00:00") == 0
        assert to_minutes("09:15") == 555
        assert to_minutes("23:59") == 1439
        assert to_minutes("7:05") == 425

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", "12-00"])
    def test_invalid_time_raises(self, value):
        """Test that malformed times raise InvalidTimeError."""
        with pytest.raises(InvalidTimeError):
            to_minutes(value)

    def test_invalid_time_is_value_error(self):
        """InvalidTimeError doubles as a ValueError."""
        with pytest.raises(ValueError):
            to_minutes("99:99")

    def test_format_minutes_zero_pads(self):
        assert format_minutes(0) == "00:00"
        assert format_minutes(545) == "09:05"

    def test_shift_saturates_at_day_bounds(self):
        """Test that shifting never rolls over midnight."""
        assert clamp(-30) == 0
        assert clamp(2000) == 1439
        assert shift("00:30", -120) == "00:00"
        assert shift("23:00", 180) == "23:59"
        assert shift("09:00", -60) == "08:00"

    def test_minutes_between(self):
        assert minutes_between("10:00", "16:00") == 360
        assert minutes_between("16:00", "10:00") == -360


class TestModels:
    """Tests for value objects."""

    def test_weekday_from_date(self):
        """Test weekday lookup for pendulum and stdlib dates."""
        assert Weekday.from_date(MONDAY) is Weekday.MONDAY
        assert Weekday.from_date(SUNDAY) is Weekday.SUNDAY
        assert Weekday.from_date(pendulum.datetime(2024, 11, 27, 12, 0)) is Weekday.WEDNESDAY

    def test_extension_rejects_negative_values(self):
        with pytest.raises(ValueError, match="hours_before"):
            ExtensionConfig(hours_before=-1)
        with pytest.raises(ValueError, match="flat_price"):
            ExtensionConfig(flat_price=-5)

    def test_extension_is_zero(self):
        assert ExtensionConfig(flat_price=10).is_zero
        assert not ExtensionConfig(hours_after=1).is_zero

    def test_closed_working_day_has_no_extension(self):
        """Extensions of a closed day are ignored entirely."""
        extension = ExtensionConfig(hours_before=1, flat_price=5)
        day = WorkingDay(day=Weekday.SUNDAY, is_open=False, pickup_extension=extension)

        assert day.extension_for(SlotRole.PICKUP) is None

    def test_working_day_extension_by_role(self):
        pickup = ExtensionConfig(hours_before=1, flat_price=5)
        ret = ExtensionConfig(hours_after=2, flat_price=8)
        day = WorkingDay(
            day=Weekday.MONDAY,
            is_open=True,
            start_time="09:00",
            end_time="17:00",
            pickup_extension=pickup,
            return_extension=ret,
        )

        assert day.extension_for(SlotRole.PICKUP) is pickup
        assert day.extension_for(SlotRole.RETURN) is ret

    def test_special_day_validation(self):
        with pytest.raises(ValueError, match="Month"):
            SpecialDay(month=13, day=1, is_open=False)
        with pytest.raises(ValueError, match="Day"):
            SpecialDay(month=1, day=0, is_open=False)

    def test_special_day_matches_every_year(self):
        """Special days recur annually."""
        christmas = SpecialDay(month=12, day=25, is_open=False)

        assert christmas.matches(pendulum.date(2024, 12, 25))
        assert christmas.matches(pendulum.date(2031, 12, 25))
        assert not christmas.matches(pendulum.date(2024, 12, 26))

    def test_office_lookups(self):
        christmas = SpecialDay(month=12, day=25, is_open=False)
        office = build_office(special_days=[christmas])

        assert office.working_day(Weekday.MONDAY).start_time == "09:00"
        assert office.special_day(pendulum.date(2025, 12, 25)) is christmas
        assert office.special_day(MONDAY) is None

    def test_slot_role_conflict_role(self):
        assert SlotRole.PICKUP.conflict_role == "start"
        assert SlotRole.RETURN.conflict_role == "end"

    def test_day_availability_available_slots(self):
        availability = DayAvailability(
            day=MONDAY,
            role=SlotRole.PICKUP,
            window=ResolvedWindow(source=WindowSource.WORKING, start="09:00", end="09:30"),
            extended=None,
            slots=(
                SlotStatus("09:00"),
                SlotStatus("09:15", reserved=True),
                SlotStatus("09:30"),
            ),
        )

        assert availability.available_slots == ["09:00", "09:30"]
        assert not availability.is_empty
        assert availability.price == 0
