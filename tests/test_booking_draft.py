"""
Tests for the booking draft state machine.
"""

import pytest

from vanslots.domain.booking_draft import (
    BookingDraft,
    BookingDraftReducer,
    BookingStage,
    ChooseDates,
    ChoosePickupTime,
    ChooseReturnTime,
    EnterDriverAge,
    ReservationsLoaded,
    SelectOffice,
)
from vanslots.domain.models import ReservedSlot, SlotRole

from conftest import MONDAY, SUNDAY, TUESDAY, build_office


def _run(reducer, *events, draft=None):
    draft = draft or BookingDraft()
    for event in events:
        draft = reducer.reduce(draft, event)
    return draft


class TestBookingDraftReducer:
    """Tests for BookingDraftReducer."""

    def test_happy_path_reaches_valid(self, office):
        """Each event advances the draft one stage."""
        reducer = BookingDraftReducer()
        draft = BookingDraft()
        assert draft.stage is BookingStage.NO_OFFICE

        draft = reducer.reduce(draft, SelectOffice(office))
        assert draft.stage is BookingStage.OFFICE_SELECTED

        draft = reducer.reduce(draft, ChooseDates(MONDAY, TUESDAY))
        assert draft.stage is BookingStage.DATE_RANGE_CHOSEN

        draft = reducer.reduce(draft, ChoosePickupTime("10:00"))
        assert draft.stage is BookingStage.PICKUP_TIME_CHOSEN

        draft = reducer.reduce(draft, ChooseReturnTime("09:00"))
        assert draft.stage is BookingStage.RETURN_TIME_CHOSEN

        draft = reducer.reduce(draft, EnterDriverAge(30))
        assert draft.stage is BookingStage.VALID
        assert draft.is_valid
        assert draft.errors == ()

    def test_same_day_short_return_is_cleared(self, office):
        """Choosing a return too soon after pickup clears the return time."""
        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, MONDAY),
            ChoosePickupTime("10:00"),
            ChooseReturnTime("15:00"),
        )

        assert draft.pickup_time == "10:00"
        assert draft.return_time is None
        assert any("at least 6 hours" in error for error in draft.errors)
        assert draft.stage is BookingStage.PICKUP_TIME_CHOSEN

    def test_same_day_six_hours_accepted(self, office):
        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, MONDAY),
            ChoosePickupTime("10:00"),
            ChooseReturnTime("16:00"),
            EnterDriverAge(40),
        )

        assert draft.is_valid

    def test_same_day_late_pickup_is_cleared(self, office):
        """When the pickup is the changed side, the pickup is cleared."""
        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, MONDAY),
            ChooseReturnTime("15:00"),
            ChoosePickupTime("10:00"),
        )

        assert draft.return_time == "15:00"
        assert draft.pickup_time is None
        assert draft.errors

    def test_pickup_options_pruned_by_return(self, office):
        reducer = BookingDraftReducer()
        draft = _run(
            reducer,
            SelectOffice(office),
            ChooseDates(MONDAY, MONDAY),
            ChooseReturnTime("15:00"),
        )

        assert reducer.pickup_options(draft) == ["09:00"]
        assert reducer.return_options(draft)[0] == "09:00"

    def test_changing_dates_to_closed_day_clears_times(self, office):
        """Upstream changes invalidate selections that no longer hold."""
        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, TUESDAY),
            ChoosePickupTime("10:00"),
            ChooseReturnTime("12:00"),
            ChooseDates(SUNDAY, SUNDAY),
        )

        assert draft.pickup_time is None
        assert draft.return_time is None
        assert len(draft.errors) == 2
        assert draft.stage is BookingStage.DATE_RANGE_CHOSEN

    def test_changing_office_rechecks_times(self, office):
        late_office = build_office(start="12:00", end="20:00", office_id="office-2")

        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, TUESDAY),
            ChoosePickupTime("10:00"),
            ChooseReturnTime("14:00"),
            SelectOffice(late_office),
        )

        assert draft.office.id == "office-2"
        assert draft.pickup_time is None
        assert draft.return_time == "14:00"

    def test_loaded_reservations_clear_taken_time(self, office):
        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, TUESDAY),
            ChoosePickupTime("10:00"),
            ReservationsLoaded(
                office_id="office-1",
                role=SlotRole.PICKUP,
                day=MONDAY,
                reserved=(ReservedSlot(start_time="09:45", end_time="10:30"),),
            ),
        )

        assert draft.pickup_time is None
        assert draft.pickup_reserved
        assert "Pickup time 10:00 is not available" in draft.errors[0]

    def test_reservations_for_abandoned_date_are_ignored(self, office):
        reducer = BookingDraftReducer()
        draft = _run(
            reducer,
            SelectOffice(office),
            ChooseDates(MONDAY, TUESDAY),
            ChoosePickupTime("10:00"),
        )

        after = reducer.reduce(
            draft,
            ReservationsLoaded(
                office_id="office-1",
                role=SlotRole.PICKUP,
                day=TUESDAY,
                reserved=(ReservedSlot(start_time="00:00", end_time="23:59"),),
            ),
        )

        assert after is draft

    def test_reservations_for_previous_office_are_ignored(self, office):
        """A lookup for the office the user switched away from never reaches the new one."""
        other_office = build_office(office_id="office-2")
        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, MONDAY),
            SelectOffice(other_office),
            ReservationsLoaded(
                office_id="office-1",
                role=SlotRole.PICKUP,
                day=MONDAY,
                reserved=(ReservedSlot(start_time="09:00", end_time="17:00"),),
            ),
        )

        assert draft.office.id == "office-2"
        assert draft.pickup_reserved == ()

    def test_times_are_normalized(self, office):
        """An unpadded hour selects the matching slot."""
        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, TUESDAY),
            ChoosePickupTime("9:00"),
            ChooseReturnTime("9:30"),
        )

        assert draft.pickup_time == "09:00"
        assert draft.return_time == "09:30"
        assert draft.errors == ()

    def test_malformed_time_is_rejected(self, office):
        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, TUESDAY),
            ChoosePickupTime("nine"),
        )

        assert draft.pickup_time is None
        assert draft.errors

    def test_invalid_driver_age(self, office):
        draft = _run(
            BookingDraftReducer(),
            SelectOffice(office),
            ChooseDates(MONDAY, TUESDAY),
            ChoosePickupTime("10:00"),
            ChooseReturnTime("10:00"),
            EnterDriverAge(19),
        )

        assert draft.driver_age is None
        assert draft.stage is BookingStage.RETURN_TIME_CHOSEN
        assert "between 21 and 80" in draft.errors[0]

    def test_reversed_dates_rejected(self, office):
        draft = _run(BookingDraftReducer(), SelectOffice(office), ChooseDates(TUESDAY, MONDAY))

        assert draft.start_date is None
        assert draft.errors

    def test_dates_require_office(self):
        draft = _run(BookingDraftReducer(), ChooseDates(MONDAY, TUESDAY))

        assert draft.stage is BookingStage.NO_OFFICE
        assert draft.errors == ("Select an office before choosing dates",)

    def test_unknown_event(self):
        with pytest.raises(TypeError):
            BookingDraftReducer().reduce(BookingDraft(), object())
