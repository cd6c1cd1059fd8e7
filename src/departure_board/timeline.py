from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Hashable, Mapping, Optional, Sequence

from .models import CallingPoint, ServiceDetail, Station
from .status import (
    PointStatus,
    current_station_is_late,
    current_station_status,
    current_station_status_text,
    point_is_late,
    point_status,
    point_status_text,
)

logger = logging.getLogger(__name__)


class TimelinePosition(str, enum.Enum):
    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"
    # A section holding a single node is both first and last.
    ONLY = "only"

    @property
    def is_first(self) -> bool:
        return self in (TimelinePosition.FIRST, TimelinePosition.ONLY)

    @property
    def is_last(self) -> bool:
        return self in (TimelinePosition.LAST, TimelinePosition.ONLY)


@dataclass(frozen=True)
class TimelineNode:
    crs: str
    name: str
    scheduled: str
    status: PointStatus
    position: TimelinePosition
    status_text: Optional[str] = None
    is_late: bool = False
    is_current: bool = False
    platform: Optional[str] = None
    delay_reason: Optional[str] = None


@dataclass(frozen=True)
class MapStop:
    code: str
    key: Hashable


@dataclass(frozen=True)
class RouteTimeline:
    """Calling points of one service laid out for a vertical timeline.

    ``prefix`` holds the stops up to and including the current station.
    ``branches`` holds what follows: one branch for an ordinary service,
    several when the train divides after the current station.
    """

    prefix: Sequence[TimelineNode]
    branches: Sequence[Sequence[TimelineNode]]
    map_stops: Sequence[MapStop]
    map_polylines: Sequence[Sequence[Hashable]]

    @property
    def is_split(self) -> bool:
        return len(self.branches) > 1

    @property
    def show_map(self) -> bool:
        return len(self.map_stops) >= 2

    @property
    def sections(self) -> list[tuple[TimelineNode, ...]]:
        """Nodes grouped the way they are drawn, one tuple per visual section."""

        if self.is_split:
            return [tuple(self.prefix), *(tuple(branch) for branch in self.branches)]
        suffix = tuple(self.branches[0]) if self.branches else ()
        return [tuple(self.prefix) + suffix]

    @property
    def nodes(self) -> list[TimelineNode]:
        return [node for section in self.sections for node in section]


def build_timeline(
    detail: ServiceDetail,
    stations: Optional[Mapping[str, Station]] = None,
) -> RouteTimeline:
    """Build the calling point timeline and map route for a service.

    ``stations`` maps CRS codes to known stations; when supplied, map data is
    keyed by coordinates and stops missing from it are left off the map.
    Without it every stop is keyed by its CRS code.
    """

    previous = list(detail.previous_calling_points)
    branches = [list(branch) for branch in detail.subsequent_calling_points if branch]
    split = len(branches) > 1

    prefix_positions = _positions(len(previous) + 1, open_end=bool(branches))
    prefix: list[TimelineNode] = [
        _point_node(point, position) for point, position in zip(previous, prefix_positions)
    ]
    prefix.append(_current_node(detail, prefix_positions[-1]))

    branch_nodes: list[tuple[TimelineNode, ...]] = []
    for branch in branches:
        if split:
            positions = _positions(len(branch))
        else:
            positions = [TimelinePosition.MIDDLE] * (len(branch) - 1) + [TimelinePosition.LAST]
        branch_nodes.append(
            tuple(_point_node(point, position) for point, position in zip(branch, positions))
        )

    map_stops, map_polylines = _map_route(detail, previous, branches, stations)

    return RouteTimeline(
        prefix=tuple(prefix),
        branches=tuple(branch_nodes),
        map_stops=map_stops,
        map_polylines=map_polylines,
    )


def _positions(count: int, *, open_end: bool = False) -> list[TimelinePosition]:
    if count <= 0:
        return []
    if count == 1:
        return [TimelinePosition.FIRST if open_end else TimelinePosition.ONLY]

    positions = [TimelinePosition.FIRST] + [TimelinePosition.MIDDLE] * (count - 1)
    if not open_end:
        positions[-1] = TimelinePosition.LAST
    return positions


def _point_node(point: CallingPoint, position: TimelinePosition) -> TimelineNode:
    return TimelineNode(
        crs=point.crs,
        name=point.name,
        scheduled=point.scheduled,
        status=point_status(point),
        position=position,
        status_text=point_status_text(point),
        is_late=point_is_late(point),
        platform=point.platform,
        delay_reason=point.delay_reason,
    )


def _current_node(detail: ServiceDetail, position: TimelinePosition) -> TimelineNode:
    return TimelineNode(
        crs=detail.crs,
        name=detail.location_name,
        scheduled=detail.scheduled or "",
        status=current_station_status(detail),
        position=position,
        status_text=current_station_status_text(detail),
        is_late=current_station_is_late(detail),
        is_current=True,
        platform=detail.platform,
        delay_reason=detail.delay_reason,
    )


def _map_route(
    detail: ServiceDetail,
    previous: Sequence[CallingPoint],
    branches: Sequence[Sequence[CallingPoint]],
    stations: Optional[Mapping[str, Station]],
) -> tuple[tuple[MapStop, ...], tuple[tuple[Hashable, ...], ...]]:
    shared_codes = [point.crs for point in previous] + [detail.crs]
    paths = [shared_codes + [point.crs for point in branch] for branch in branches]
    if not paths:
        paths = [shared_codes]

    stops: dict[str, MapStop] = {}
    polylines: list[tuple[Hashable, ...]] = []
    for path in paths:
        line: list[Hashable] = []
        for code in path:
            key = _lookup_key(code, stations)
            if key is None:
                continue
            line.append(key)
            if code not in stops:
                stops[code] = MapStop(code=code, key=key)
        polylines.append(tuple(line))

    return tuple(stops.values()), tuple(polylines)


def _lookup_key(code: str, stations: Optional[Mapping[str, Station]]) -> Optional[Hashable]:
    if stations is None:
        return code
    station = stations.get(code)
    if station is None:
        logger.debug(f"No coordinates for station {code}, leaving it off the map")
        return None
    return station.coordinates
