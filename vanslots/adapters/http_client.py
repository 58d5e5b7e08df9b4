"""
REST client for the booking backend's office and reservation endpoints.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List

import requests

from ..domain.exceptions import ReservationLookupError
from ..domain.models import Office, Reservation
from .documents import parse_office, parse_reservations, unwrap_response

logger = logging.getLogger(__name__)


class HttpReservationClient:
    """
    Client for the backend REST API.

    Uses ``GET /api/offices/{id}`` and ``GET /api/reservations/by-office``.
    Blocking ``requests`` calls run in a worker thread so the lookup can
    be awaited.
    """

    def __init__(self, base_url: str, timezone: str = "Europe/London", timeout: float = 10):
        """
        Initialize the client.

        Args:
            base_url: Backend root, e.g. https://example.com
            timezone: Office timezone used to interpret reservation times
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timezone = timezone
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}

    def _get(self, path: str, params: Dict[str, str] | None = None) -> Any:
        url = f"{self.base_url}{path}"

        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise ReservationLookupError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise ReservationLookupError(f"Invalid JSON from {url}: {e}") from e

        return unwrap_response(payload)

    def fetch_office(self, office_id: str) -> Office:
        data = self._get(f"/api/offices/{office_id}")
        if not isinstance(data, dict):
            raise ReservationLookupError(f"Office not found: {office_id}")
        return parse_office(data)

    def fetch_reservations(self, office_id: str, day: date, role: str) -> List[Reservation]:
        """
        Reservations picked up ("start") or returned ("end") on ``day``.
        """
        date_param = "startDate" if role == "start" else "endDate"
        data = self._get(
            "/api/reservations/by-office",
            params={"office": office_id, date_param: day.isoformat()},
        )
        if not isinstance(data, list):
            raise ReservationLookupError("Reservation lookup did not return a list")

        logger.debug("Fetched %d reservations for %s on %s (%s)", len(data), office_id, day, role)
        return parse_reservations(data, self.timezone)

    async def get_office(self, office_id: str) -> Office:
        return await asyncio.to_thread(self.fetch_office, office_id)

    async def get_reservations(self, office_id: str, day: date, role: str) -> List[Reservation]:
        return await asyncio.to_thread(self.fetch_reservations, office_id, day, role)
