from __future__ import annotations

import enum
from typing import Optional

from .models import CallingPoint, ServiceDetail
from .times import StatusToken, is_late, parse_time


class PointStatus(str, enum.Enum):
    """Where a stop sits relative to the train's progress."""

    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"
    CANCELLED = "cancelled"


def point_status(point: CallingPoint) -> PointStatus:
    if point.is_cancelled:
        return PointStatus.CANCELLED
    if point.actual:
        return PointStatus.PAST
    return PointStatus.FUTURE


def current_station_status(detail: ServiceDetail) -> PointStatus:
    if detail.atd:
        return PointStatus.PAST
    return PointStatus.CURRENT


def point_status_value(point: CallingPoint) -> str:
    """The raw value the feed reports for a stop: actual, else expected."""

    if point.is_cancelled:
        return "Cancelled"
    return point.actual or point.expected or ""


def point_is_late(point: CallingPoint) -> bool:
    return is_late(point.scheduled, point_status_value(point))


def point_status_text(point: CallingPoint) -> Optional[str]:
    """Subtitle for a calling point row, or None when nothing is worth saying."""

    if point.is_cancelled:
        return point.cancel_reason or "Cancelled"
    if point.actual:
        return _reported_text(point.actual, "Departed", show_on_time=False)
    return _expected_text(point.scheduled, point.expected)


def current_station_reading(detail: ServiceDetail) -> tuple[Optional[str], Optional[str]]:
    """The most relevant live value at the current station and the schedule it is measured against.

    Departure values are measured against ``std`` and arrival values against
    ``sta``, each falling back to the other when its own is missing.
    """

    departure_schedule = detail.std or detail.sta
    arrival_schedule = detail.sta or detail.std
    if detail.atd:
        return departure_schedule, detail.atd
    if detail.ata:
        return arrival_schedule, detail.ata
    if detail.eta:
        return arrival_schedule, detail.eta
    return departure_schedule, detail.etd


def current_station_status_text(detail: ServiceDetail) -> Optional[str]:
    scheduled, value = current_station_reading(detail)
    if detail.atd:
        return _reported_text(detail.atd, "Departed")
    if detail.ata:
        return _reported_text(detail.ata, "Arrived")
    return _expected_text(scheduled, value)


def current_station_is_late(detail: ServiceDetail) -> bool:
    scheduled, value = current_station_reading(detail)
    if not value or not scheduled:
        return False
    return is_late(scheduled, value)


def _reported_text(value: str, verb: str, *, show_on_time: bool = True) -> Optional[str]:
    parsed = parse_time(value)
    if isinstance(parsed, StatusToken):
        if parsed.is_on_time:
            return f"{verb} on time" if show_on_time else None
        if parsed.is_neutral:
            return None
        return parsed.text
    return f"{verb} at {parsed.text}"


def _expected_text(scheduled: Optional[str], expected: Optional[str]) -> Optional[str]:
    if not expected or expected == scheduled:
        return None
    parsed = parse_time(expected)
    if isinstance(parsed, StatusToken):
        if parsed.is_neutral:
            return None
        return parsed.text
    return f"Expected at {parsed.text}"
