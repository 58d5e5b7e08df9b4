"""
Parse office and reservation JSON documents into domain models.

Documents use the backend's camelCase field names, e.g.

{
    "_id": "office-1",
    "name": "Central",
    "workingTime": [
        {
            "day": "monday",
            "isOpen": true,
            "startTime": "09:00",
            "endTime": "17:00",
            "pickupExtension": {"hoursBefore": 1, "hoursAfter": 2, "flatPrice": 15}
        }
    ],
    "specialDays": [
        {"month": 12, "day": 25, "isOpen": false, "reason": "Christmas Day"}
    ]
}
"""

from typing import Any, Dict, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.clock import to_minutes
from ..domain.exceptions import InvalidTimeError, ReservationLookupError
from ..domain.models import (
    ExtensionConfig,
    Office,
    Reservation,
    ReservationStatus,
    SpecialDay,
    Weekday,
    WorkingDay,
)


def _optional_time(value: Any) -> Optional[str]:
    """Validate an optional "HH:MM" value; empty strings count as missing."""
    if value in (None, ""):
        return None
    to_minutes(value)
    return value


def _parse_extension(data: Optional[Dict[str, Any]]) -> Optional[ExtensionConfig]:
    if not data:
        return None
    return ExtensionConfig(
        hours_before=float(data.get("hoursBefore") or 0),
        hours_after=float(data.get("hoursAfter") or 0),
        flat_price=float(data.get("flatPrice") or 0),
    )


def parse_working_day(data: Dict[str, Any]) -> WorkingDay:
    return WorkingDay(
        day=Weekday(str(data["day"]).lower()),
        is_open=bool(data.get("isOpen", True)),
        start_time=_optional_time(data.get("startTime")),
        end_time=_optional_time(data.get("endTime")),
        pickup_extension=_parse_extension(data.get("pickupExtension")),
        return_extension=_parse_extension(data.get("returnExtension")),
    )


def parse_special_day(data: Dict[str, Any]) -> SpecialDay:
    return SpecialDay(
        month=int(data["month"]),
        day=int(data["day"]),
        is_open=bool(data.get("isOpen", False)),
        start_time=_optional_time(data.get("startTime")),
        end_time=_optional_time(data.get("endTime")),
        reason=data.get("reason") or None,
    )


def parse_office(data: Dict[str, Any]) -> Office:
    """
    Build an Office from its JSON document.

    Raises:
        ReservationLookupError: If the document is malformed
    """
    try:
        return Office(
            id=str(data.get("_id") or data["id"]),
            name=data.get("name", ""),
            working_days=tuple(parse_working_day(item) for item in data.get("workingTime", [])),
            special_days=tuple(parse_special_day(item) for item in data.get("specialDays", [])),
        )
    except (KeyError, TypeError, ValueError, InvalidTimeError) as e:
        raise ReservationLookupError(f"Invalid office document: {e}") from e


def parse_datetime(value: str, timezone: str) -> DateTime:
    """
    Parse an ISO 8601 string to a pendulum DateTime in the office timezone.
    """
    dt = pendulum.parse(value, tz=timezone)

    if isinstance(dt, DateTime):
        return dt.in_timezone(timezone)

    raise ValueError(f"Could not parse datetime: {value}")


def _reference_id(value: Any) -> str:
    """Reference fields hold either an id or a populated document."""
    if isinstance(value, dict):
        return str(value.get("_id") or value.get("id"))
    return str(value)


def parse_reservation(data: Dict[str, Any], timezone: str) -> Reservation:
    """
    Build a Reservation from its JSON document.

    Raises:
        ReservationLookupError: If the document is malformed
    """
    try:
        return Reservation(
            id=str(data.get("_id") or data.get("id", "")),
            office_id=_reference_id(data["office"]),
            start=parse_datetime(data["startDate"], timezone),
            end=parse_datetime(data["endDate"], timezone),
            status=ReservationStatus(data.get("status", ReservationStatus.PENDING.value)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ReservationLookupError(f"Invalid reservation document: {e}") from e


def parse_reservations(items: List[Dict[str, Any]], timezone: str) -> List[Reservation]:
    return [parse_reservation(item, timezone) for item in items]


def unwrap_response(payload: Any) -> Any:
    """
    Return the ``data`` member of a ``{"success": ..., "data": ...}`` response.

    Raises:
        ReservationLookupError: If the backend reported a failure
    """
    if isinstance(payload, dict) and "success" in payload:
        if not payload["success"]:
            raise ReservationLookupError(payload.get("error") or "Backend request failed")
        return payload.get("data")
    return payload
