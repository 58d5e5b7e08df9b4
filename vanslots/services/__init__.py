"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, LatestRequestGuard, ReservationLookupProtocol

__all__ = ["AvailabilityService", "LatestRequestGuard", "ReservationLookupProtocol"]
