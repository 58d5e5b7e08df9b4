"""
Extension windows around normal opening hours.

An extension lets customers pick up or return outside the normal window for
a flat surcharge. The surcharge is all-or-nothing and depends only on the
time finally chosen, so it is looked up separately from slot generation.
"""

import logging
from typing import Optional

from .clock import hours_to_minutes, shift, to_minutes
from .models import (
    ExtendedWindow,
    ExtensionConfig,
    ResolvedWindow,
    SlotRole,
    WindowSource,
    WorkingDay,
)

logger = logging.getLogger(__name__)


class ExtensionCalculator:
    """
    Widens a resolved window by the configured extension hours.
    """

    def apply_extension(
        self,
        window: ResolvedWindow,
        extension: Optional[ExtensionConfig],
        role: SlotRole,
    ) -> ExtendedWindow:
        """
        Compute the visible slot range and surcharge boundaries.

        Args:
            window: Window produced by the ScheduleResolver
            extension: Pickup or return extension of the weekday, if any
            role: Booking side the window is computed for

        Returns:
            ExtendedWindow; ``available`` is False when the day yields no slots
        """
        if window.is_closed or window.start is None or window.end is None:
            return ExtendedWindow.unavailable()

        start, end = window.start, window.end
        degenerate = to_minutes(start) == to_minutes(end)

        # Special days carry no extensions
        if window.source is not WindowSource.WORKING:
            extension = None

        if extension is None or extension.is_zero:
            if degenerate:
                logger.debug("No %s extension on an extension-only day, no slots", role.value)
                return ExtendedWindow.unavailable(normal_start=start, normal_end=end)
            return ExtendedWindow(
                start=start,
                end=end,
                normal_start=start,
                normal_end=end,
                price=0,
            )

        before = hours_to_minutes(extension.hours_before)
        after = hours_to_minutes(extension.hours_after)

        if degenerate:
            visible_start = shift(start, -before)
            visible_end = shift(start, after)
        else:
            visible_start = shift(start, -before)
            visible_end = shift(end, after)

        logger.debug(
            "%s window %s - %s extended to %s - %s (flat price %s)",
            role.value, start, end, visible_start, visible_end, extension.flat_price,
        )

        return ExtendedWindow(
            start=visible_start,
            end=visible_end,
            normal_start=start,
            normal_end=end,
            price=extension.flat_price,
        )

    def for_working_day(
        self,
        window: ResolvedWindow,
        working_day: Optional[WorkingDay],
        role: SlotRole,
    ) -> ExtendedWindow:
        """Apply the weekday's extension for ``role`` to ``window``."""
        extension = working_day.extension_for(role) if working_day else None
        return self.apply_extension(window, extension, role)

    @staticmethod
    def is_surcharged(extended: ExtendedWindow, chosen: Optional[str]) -> bool:
        """True if ``chosen`` lies strictly outside the normal window."""
        if not chosen or not extended.available:
            return False
        if extended.normal_start is None or extended.normal_end is None:
            return False

        minute = to_minutes(chosen)
        return minute < to_minutes(extended.normal_start) or minute > to_minutes(extended.normal_end)

    def surcharge_for(self, extended: ExtendedWindow, chosen: Optional[str]) -> float:
        """Flat extension price owed for ``chosen``, or 0."""
        return extended.price if self.is_surcharged(extended, chosen) else 0
