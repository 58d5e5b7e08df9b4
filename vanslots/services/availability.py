"""
Application services for office availability lookups.

The service coordinates fetching reservations via a lookup adapter and
delegates the slot computation to the domain-level ``AvailabilityEngine``.
Lookups are I/O-bound and may resolve out of order, so every query is
tagged and only the latest one per picker is applied.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from datetime import date
from typing import Dict, Hashable, List, Optional, Protocol

import pendulum

from ..domain.booking_draft import ReservationsLoaded
from ..domain.engine import AvailabilityEngine
from ..domain.exceptions import StaleLookupError
from ..domain.models import DayAvailability, Office, Reservation, ReservedSlot, SlotRole

logger = logging.getLogger(__name__)


class ReservationLookupProtocol(Protocol):
    """Protocol describing the lookup behaviour needed by the service."""

    async def get_office(self, office_id: str) -> Office:
        """Return the office document for ``office_id``."""

    async def get_reservations(self, office_id: str, day: date, role: str) -> List[Reservation]:
        """Return reservations starting ("start") or ending ("end") on ``day``."""


class LatestRequestGuard:
    """
    Sequence tagging so that only the most recent request per key counts.

    Superseded requests are not aborted; their results are discarded.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest: Dict[Hashable, int] = {}

    def begin(self, key: Hashable) -> int:
        token = next(self._counter)
        self._latest[key] = token
        return token

    def is_current(self, key: Hashable, token: int) -> bool:
        return self._latest.get(key) == token

    def ensure_current(self, key: Hashable, token: int) -> None:
        if not self.is_current(key, token):
            raise StaleLookupError(f"Request {token} for {key!r} was superseded")


class AvailabilityService:
    """
    Orchestrates reservation lookups and availability calculation.

    Dependency inversion toward a protocol makes it easy to plug in the
    REST client or the JSON-file client in tests.
    """

    def __init__(
        self,
        lookup: ReservationLookupProtocol,
        engine: Optional[AvailabilityEngine] = None,
        timezone: str = "Europe/London",
        debounce_seconds: float = 0.0,
    ) -> None:
        self._lookup = lookup
        self._engine = engine or AvailabilityEngine()
        self._guard = LatestRequestGuard()
        self.timezone = timezone
        self.debounce_seconds = debounce_seconds

    @property
    def engine(self) -> AvailabilityEngine:
        return self._engine

    async def get_office(self, office_id: str) -> Office:
        return await self._lookup.get_office(office_id)

    async def fetch_reserved_slots(
        self,
        *,
        office_id: str,
        day: date,
        role: SlotRole,
    ) -> List[ReservedSlot]:
        """Fetch reservations and reduce them to footprints on ``day``."""
        reservations = await self._lookup.get_reservations(office_id, day, role.conflict_role)
        return self._engine.conflicts.footprints(reservations, day, role.conflict_role)

    async def _latest_reserved_slots(
        self,
        *,
        office_id: str,
        day: date,
        role: SlotRole,
    ) -> Optional[List[ReservedSlot]]:
        """
        Reserved footprints, or None when a newer query for the same picker
        started before this one resolved.
        """
        key = role.value
        token = self._guard.begin(key)

        try:
            if self.debounce_seconds > 0:
                await asyncio.sleep(self.debounce_seconds)
                self._guard.ensure_current(key, token)

            reserved = await self.fetch_reserved_slots(office_id=office_id, day=day, role=role)
            self._guard.ensure_current(key, token)
        except StaleLookupError as e:
            logger.info("Discarding stale %s lookup for %s on %s: %s", role.value, office_id, day, e)
            return None

        return reserved

    async def day_availability(
        self,
        *,
        office: Office,
        day: date,
        role: SlotRole,
    ) -> Optional[DayAvailability]:
        """
        Look up reservations and compute the slot list for one picker.

        Returns None if the query was superseded before it resolved.
        """
        reserved = await self._latest_reserved_slots(office_id=office.id, day=day, role=role)
        if reserved is None:
            return None
        return self._engine.day_availability(office, day, role, reserved)

    async def find_slots(
        self,
        *,
        office_id: str,
        day: date,
        role: SlotRole,
    ) -> Optional[DayAvailability]:
        """Fetch the office, then compute its availability for ``day``."""
        office = await self.get_office(office_id)
        return await self.day_availability(office=office, day=day, role=role)

    async def reservations_event(
        self,
        *,
        office_id: str,
        day: date,
        role: SlotRole,
    ) -> Optional[ReservationsLoaded]:
        """Lookup result packaged for ``BookingDraftReducer``; None if stale."""
        reserved = await self._latest_reserved_slots(office_id=office_id, day=day, role=role)
        if reserved is None:
            return None
        return ReservationsLoaded(office_id=office_id, role=role, day=day, reserved=tuple(reserved))

    def not_before(self, day: date) -> Optional[str]:
        """Current office-local time when ``day`` is today, else None."""
        now = pendulum.now(self.timezone)
        if day == now.date():
            return now.format("HH:mm")
        return None
