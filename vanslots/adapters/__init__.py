"""
Adapters layer - External integrations (booking backend REST API, JSON files).
"""

from .http_client import HttpReservationClient
from .mock_reservation_client import MockReservationClient

__all__ = ["HttpReservationClient", "MockReservationClient"]
