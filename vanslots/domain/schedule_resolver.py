"""
Resolve the effective opening window of an office on a calendar date.

A matching special day always wins over the weekly schedule. A missing
weekday entry counts as closed, and an open weekday without times falls
back to the widest window (00:00 - 23:59). Both are recorded as a
ConfigurationGap.
"""

import logging
from datetime import date
from typing import List, Tuple

from .clock import CLOSE_DEFAULT, OPEN_DEFAULT, to_minutes
from .models import (
    ConfigurationGap,
    Office,
    ResolvedWindow,
    SpecialDay,
    Weekday,
    WindowSource,
    WorkingDay,
)

logger = logging.getLogger(__name__)


class ScheduleResolver:
    """
    Computes the open/close window for an office and date.

    Algorithm:
    1. Special day for (month, day)? Use it, open or closed. No merging.
    2. Otherwise the weekday's WorkingDay; absent or closed means closed.
    3. Missing start/end times default to 00:00/23:59.
    """

    def resolve(self, office: Office, day: date) -> ResolvedWindow:
        special = office.special_day(day)
        if special is not None:
            return self._resolve_special(special)

        weekday = Weekday.from_date(day)
        working_day = office.working_day(weekday)

        if working_day is None:
            gap = ConfigurationGap(weekday=weekday, reason="no working-time entry")
            logger.warning(
                "Office %s has no working-time entry for %s, treating it as closed",
                office.id, weekday.value,
            )
            return ResolvedWindow(
                source=WindowSource.CLOSED,
                info=f"Closed on {weekday.value.capitalize()}",
                gaps=(gap,),
            )

        if not working_day.is_open:
            return ResolvedWindow(
                source=WindowSource.CLOSED,
                info=f"Closed on {weekday.value.capitalize()}",
            )

        return self._resolve_working(office, working_day)

    def _resolve_special(self, special: SpecialDay) -> ResolvedWindow:
        suffix = f" ({special.reason})" if special.reason else ""

        if not special.is_open:
            reason = special.reason or "special day"
            return ResolvedWindow(source=WindowSource.CLOSED, info=f"Closed: {reason}")

        start = special.start_time or OPEN_DEFAULT
        end = special.end_time or CLOSE_DEFAULT
        return ResolvedWindow(
            source=WindowSource.SPECIAL,
            start=start,
            end=end,
            info=f"Special hours {start} - {end}{suffix}",
        )

    def _resolve_working(self, office: Office, working_day: WorkingDay) -> ResolvedWindow:
        gaps: List[ConfigurationGap] = []
        start = working_day.start_time
        end = working_day.end_time

        if not start:
            gaps.append(ConfigurationGap(weekday=working_day.day, reason="missing start time"))
            start = OPEN_DEFAULT
        if not end:
            gaps.append(ConfigurationGap(weekday=working_day.day, reason="missing end time"))
            end = CLOSE_DEFAULT

        for gap in gaps:
            logger.warning(
                "Office %s, %s: %s, defaulting to %s - %s",
                office.id, gap.weekday.value, gap.reason, OPEN_DEFAULT, CLOSE_DEFAULT,
            )

        if to_minutes(start) == to_minutes(end):
            info = f"Extended hours only around {start}"
        else:
            info = f"Open {start} - {end}"

        return ResolvedWindow(
            source=WindowSource.WORKING,
            start=start,
            end=end,
            info=info,
            gaps=tuple(gaps),
        )

    def weekly_summary(self, office: Office) -> List[Tuple[Weekday, str]]:
        """Human-readable hours for each weekday, in calendar order."""
        summary: List[Tuple[Weekday, str]] = []

        for weekday in Weekday:
            working_day = office.working_day(weekday)
            if working_day is None or not working_day.is_open:
                summary.append((weekday, "Closed"))
                continue

            start = working_day.start_time or OPEN_DEFAULT
            end = working_day.end_time or CLOSE_DEFAULT
            summary.append((weekday, f"{start} - {end}"))

        return summary
