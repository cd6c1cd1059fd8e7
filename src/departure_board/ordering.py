from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .models import BoardMode, Location, ServiceSummary
from .times import StatusToken, TimeOfDay, is_late, parse_time, sort_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardRow:
    """A board entry ready for display."""

    display_time: str
    destination_label: str
    platform: Optional[str]
    status_text: str
    is_cancelled: bool
    is_delayed: bool
    raw: ServiceSummary

    @property
    def is_bus(self) -> bool:
        return self.raw.is_bus


def order_board(
    items: Iterable[ServiceSummary],
    mode: BoardMode = BoardMode.DEPARTURES,
    limit: Optional[int] = None,
) -> list[BoardRow]:
    """Return board rows in display order, truncated to ``limit`` after sorting.

    Rows with a clock time are ordered by minutes of day, early-morning times
    counting as after midnight. Rows without one keep their original slot.
    """

    services = list(items)
    keys = [_sort_key(service, mode) for service in services]

    keyed_slots = [index for index, key in enumerate(keys) if key is not None]
    keyed_order = sorted(keyed_slots, key=lambda index: keys[index])

    ordered = list(services)
    for slot, source in zip(keyed_slots, keyed_order):
        ordered[slot] = services[source]

    rows = [build_row(service, mode) for service in ordered]
    if limit is not None:
        rows = rows[: max(limit, 0)]
    return rows


def build_row(service: ServiceSummary, mode: BoardMode = BoardMode.DEPARTURES) -> BoardRow:
    scheduled = scheduled_time(service, mode) or ""
    status = estimated_time(service, mode) or ""
    locations = service.origin if mode is BoardMode.ARRIVALS else service.destination
    return BoardRow(
        display_time=scheduled,
        destination_label=location_label(locations),
        platform=service.platform,
        status_text=status,
        is_cancelled=service.is_cancelled,
        is_delayed=is_delayed(service, mode),
        raw=service,
    )


def is_delayed(service: ServiceSummary, mode: BoardMode = BoardMode.DEPARTURES) -> bool:
    if service.is_cancelled:
        return False
    status = parse_time(estimated_time(service, mode))
    if isinstance(status, StatusToken):
        return status.is_delayed
    scheduled = parse_time(scheduled_time(service, mode))
    if not isinstance(scheduled, TimeOfDay):
        return False
    return is_late(scheduled, status)


def scheduled_time(service: ServiceSummary, mode: BoardMode) -> Optional[str]:
    if mode is BoardMode.ARRIVALS:
        return service.sta or service.std
    return service.std or service.sta


def estimated_time(service: ServiceSummary, mode: BoardMode) -> Optional[str]:
    if mode is BoardMode.ARRIVALS:
        return service.eta or service.etd
    return service.etd or service.eta


def location_label(locations: Sequence[Location]) -> str:
    return " & ".join(location.name for location in locations)


def _sort_key(service: ServiceSummary, mode: BoardMode) -> Optional[int]:
    key = sort_minutes(scheduled_time(service, mode))
    if key is None:
        logger.debug(f"No sort key for service {service.service_id}, keeping feed position")
    return key
