"""
Shared fixtures: offices built from weekly schedules.
"""

from typing import Dict, Iterable, Optional

import pendulum
import pytest

from vanslots.domain.models import (
    ExtensionConfig,
    Office,
    SpecialDay,
    Weekday,
    WorkingDay,
)

# 2024-11-25 is a Monday
MONDAY = pendulum.date(2024, 11, 25)
TUESDAY = pendulum.date(2024, 11, 26)
SATURDAY = pendulum.date(2024, 11, 30)
SUNDAY = pendulum.date(2024, 12, 1)


def build_office(
    start: str = "09:00",
    end: str = "17:00",
    closed: Iterable[Weekday] = (Weekday.SUNDAY,),
    pickup_extension: Optional[ExtensionConfig] = None,
    return_extension: Optional[ExtensionConfig] = None,
    overrides: Optional[Dict[Weekday, WorkingDay]] = None,
    special_days: Iterable[SpecialDay] = (),
    office_id: str = "office-1",
) -> Office:
    """Office with the same hours every open weekday."""
    closed = set(closed)
    overrides = overrides or {}
    days = []

    for weekday in Weekday:
        if weekday in overrides:
            days.append(overrides[weekday])
        elif weekday in closed:
            days.append(WorkingDay(day=weekday, is_open=False))
        else:
            days.append(
                WorkingDay(
                    day=weekday,
                    is_open=True,
                    start_time=start,
                    end_time=end,
                    pickup_extension=pickup_extension,
                    return_extension=return_extension,
                )
            )

    return Office(
        id=office_id,
        name="Test Office",
        working_days=tuple(days),
        special_days=tuple(special_days),
    )


@pytest.fixture
def office() -> Office:
    """Open 09:00-17:00 Monday to Saturday, closed Sunday, no extensions."""
    return build_office()
