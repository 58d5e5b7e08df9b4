"""
JSON-file backed office and reservation lookup for offline use and tests.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.exceptions import ReservationLookupError
from ..domain.models import Office, Reservation
from .documents import parse_office, parse_reservations

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent
DEFAULT_OFFICES_FILE = DATA_DIR / "mock_offices.json"
DEFAULT_RESERVATIONS_FILE = DATA_DIR / "mock_reservations.json"


class MockReservationClient:
    """
    Serves office and reservation documents from local JSON files.

    Behaves like the REST backend's ``by-office`` lookup: role "start"
    returns reservations picked up on the date, role "end" those returned
    on it.
    """

    def __init__(
        self,
        offices_file: Optional[Path] = None,
        reservations_file: Optional[Path] = None,
        timezone: str = "Europe/London",
    ):
        self.offices_file = offices_file or DEFAULT_OFFICES_FILE
        self.reservations_file = reservations_file or DEFAULT_RESERVATIONS_FILE
        self.timezone = timezone
        self._offices = self._load(self.offices_file)
        self._reservations = parse_reservations(self._load(self.reservations_file), timezone)

    @staticmethod
    def _load(path: Path) -> List[Dict[str, Any]]:
        """Load a JSON list; a missing file is an empty list."""
        if not path.exists():
            logger.warning("Mock data file %s not found, using no data", path)
            return []

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ReservationLookupError(f"Could not read {path}: {e}") from e

        if not isinstance(data, list):
            raise ReservationLookupError(f"{path} must contain a JSON list")
        return data

    def list_offices(self) -> List[Office]:
        return [parse_office(item) for item in self._offices]

    async def get_office(self, office_id: str) -> Office:
        for item in self._offices:
            if str(item.get("_id") or item.get("id")) == office_id:
                return parse_office(item)
        raise ReservationLookupError(f"Office not found: {office_id}")

    async def get_reservations(self, office_id: str, day: date, role: str) -> List[Reservation]:
        result: List[Reservation] = []

        for reservation in self._reservations:
            if reservation.office_id != office_id:
                continue
            anchor = reservation.start if role == "start" else reservation.end
            if anchor.date() == day:
                result.append(reservation)

        return result
