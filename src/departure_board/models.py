from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


class ServiceKind(str, enum.Enum):
    TRAIN = "train"
    BUS = "bus"

    @classmethod
    def from_feed(cls, value: Optional[str]) -> "ServiceKind":
        if value and value.lower() == "bus":
            return cls.BUS
        return cls.TRAIN


class BoardMode(str, enum.Enum):
    DEPARTURES = "departures"
    ARRIVALS = "arrivals"


@dataclass(frozen=True)
class Location:
    name: str
    crs: str
    via: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Location":
        return cls(
            name=data.get("locationName", ""),
            crs=data["crs"],
            via=data.get("via"),
        )


@dataclass(frozen=True)
class CallingPoint:
    """One stop on a service's route."""

    name: str
    crs: str
    scheduled: str
    actual: Optional[str] = None
    expected: Optional[str] = None
    is_cancelled: bool = False
    cancel_reason: Optional[str] = None
    delay_reason: Optional[str] = None
    platform: Optional[str] = None
    length: Optional[int] = None
    detach_front: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CallingPoint":
        return cls(
            name=data.get("locationName", ""),
            crs=data["crs"],
            scheduled=data.get("st") or "",
            actual=data.get("at"),
            expected=data.get("et"),
            is_cancelled=bool(data.get("isCancelled")),
            cancel_reason=data.get("cancelReason"),
            delay_reason=data.get("delayReason"),
            platform=data.get("platform"),
            length=data.get("length"),
            detach_front=bool(data.get("detachFront")),
        )


@dataclass(frozen=True)
class ServiceSummary:
    """One row of a departure or arrival board."""

    service_id: str
    operator: str
    operator_code: str
    kind: ServiceKind
    std: Optional[str]
    etd: Optional[str]
    sta: Optional[str]
    eta: Optional[str]
    platform: Optional[str]
    is_cancelled: bool
    origin: Sequence[Location]
    destination: Sequence[Location]
    cancel_reason: Optional[str] = None
    delay_reason: Optional[str] = None
    length: Optional[int] = None

    @property
    def is_bus(self) -> bool:
        return self.kind is ServiceKind.BUS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ServiceSummary":
        return cls(
            service_id=data.get("serviceID") or data.get("serviceId") or "",
            operator=data.get("operator", ""),
            operator_code=data.get("operatorCode", ""),
            kind=ServiceKind.from_feed(data.get("serviceType")),
            std=data.get("std"),
            etd=data.get("etd"),
            sta=data.get("sta"),
            eta=data.get("eta"),
            platform=data.get("platform"),
            is_cancelled=bool(data.get("isCancelled")),
            origin=_locations(data.get("origin")),
            destination=_locations(data.get("destination")),
            cancel_reason=data.get("cancelReason"),
            delay_reason=data.get("delayReason"),
            length=data.get("length"),
        )


@dataclass(frozen=True)
class ServiceDetail:
    """Expanded view of one service as seen from one station."""

    location_name: str
    crs: str
    operator: str
    operator_code: str
    kind: ServiceKind
    std: Optional[str] = None
    etd: Optional[str] = None
    sta: Optional[str] = None
    eta: Optional[str] = None
    ata: Optional[str] = None
    atd: Optional[str] = None
    platform: Optional[str] = None
    length: Optional[int] = None
    is_cancelled: bool = False
    cancel_reason: Optional[str] = None
    delay_reason: Optional[str] = None
    overdue_message: Optional[str] = None
    previous_calling_points: Sequence[CallingPoint] = ()
    subsequent_calling_points: Sequence[Sequence[CallingPoint]] = ()

    @property
    def scheduled(self) -> Optional[str]:
        return self.sta or self.std

    @property
    def expected(self) -> Optional[str]:
        return self.eta or self.etd

    @property
    def actual(self) -> Optional[str]:
        return self.atd or self.ata

    @property
    def is_split(self) -> bool:
        return len(self.subsequent_calling_points) > 1

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ServiceDetail":
        previous = calling_point_branches(data.get("previousCallingPoints"))
        return cls(
            location_name=data.get("locationName", ""),
            crs=data["crs"],
            operator=data.get("operator", ""),
            operator_code=data.get("operatorCode", ""),
            kind=ServiceKind.from_feed(data.get("serviceType")),
            std=data.get("std"),
            etd=data.get("etd"),
            sta=data.get("sta"),
            eta=data.get("eta"),
            ata=data.get("ata"),
            atd=data.get("atd"),
            platform=data.get("platform"),
            length=data.get("length"),
            is_cancelled=bool(data.get("isCancelled")),
            cancel_reason=data.get("cancelReason"),
            delay_reason=data.get("delayReason"),
            overdue_message=data.get("overdueMessage"),
            # Joined portions arrive as several lists; the path into this
            # station is read as one sequence.
            previous_calling_points=tuple(point for branch in previous for point in branch),
            subsequent_calling_points=calling_point_branches(data.get("subsequentCallingPoints")),
        )


@dataclass(frozen=True)
class DepartureBoard:
    generated_at: str
    location_name: str
    crs: str
    platform_available: bool = False
    filter_location_name: Optional[str] = None
    filter_crs: Optional[str] = None
    nrcc_messages: Sequence[str] = ()
    train_services: Sequence[ServiceSummary] = ()
    bus_services: Sequence[ServiceSummary] = ()

    @property
    def services(self) -> list[ServiceSummary]:
        return [*self.train_services, *self.bus_services]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DepartureBoard":
        return cls(
            generated_at=data.get("generatedAt", ""),
            location_name=data.get("locationName", ""),
            crs=data["crs"],
            platform_available=bool(data.get("platformAvailable")),
            filter_location_name=data.get("filterLocationName"),
            filter_crs=data.get("filtercrs") or data.get("filterCrs"),
            nrcc_messages=tuple(_messages(data.get("nrccMessages"))),
            train_services=tuple(
                ServiceSummary.from_dict(item) for item in _as_list(data.get("trainServices"))
            ),
            bus_services=tuple(
                ServiceSummary.from_dict(item) for item in _as_list(data.get("busServices"))
            ),
        )


@dataclass(frozen=True)
class Station:
    crs: str
    name: str
    latitude: float
    longitude: float
    operator: str = ""
    post_code: str = ""

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Station":
        return cls(
            crs=data["crsCode"],
            name=data["name"],
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            operator=data.get("operator", ""),
            post_code=data.get("postCode", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "crsCode": self.crs,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "operator": self.operator,
            "postCode": self.post_code,
        }


def calling_point_branches(value: Any) -> tuple[tuple[CallingPoint, ...], ...]:
    """Normalise the feed's calling point shapes into a tuple of branches.

    Accepts a list of lists, a single flat list, a single point, or the SOAP
    style ``{"callingPointList": [{"callingPoint": [...]}]}`` wrapper. Empty
    branches are dropped.
    """

    branches: list[tuple[CallingPoint, ...]] = []
    for raw_branch in _raw_branches(value):
        points = tuple(CallingPoint.from_dict(item) for item in raw_branch)
        if points:
            branches.append(points)
    return tuple(branches)


def _raw_branches(value: Any) -> Iterable[list[Mapping[str, Any]]]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        if "callingPointList" in value:
            return _raw_branches(value["callingPointList"])
        if "callingPoint" in value:
            return [_as_list(value["callingPoint"])]
        if "crs" in value:
            return [[value]]
        return []
    if not isinstance(value, list) or not value:
        return []
    if all(isinstance(item, Mapping) and "crs" in item for item in value):
        return [value]

    branches: list[list[Mapping[str, Any]]] = []
    for item in value:
        if isinstance(item, Mapping) and "callingPoint" in item:
            branches.append(_as_list(item["callingPoint"]))
        elif isinstance(item, list):
            branches.append([point for point in item if isinstance(point, Mapping)])
        else:
            logger.debug(f"Ignoring unexpected calling point entry: {item!r}")
    return branches


def _locations(value: Any) -> tuple[Location, ...]:
    if isinstance(value, Mapping) and "location" in value:
        value = value["location"]
    return tuple(Location.from_dict(item) for item in _as_list(value))


def _messages(value: Any) -> list[str]:
    messages: list[str] = []
    for item in _as_list(value):
        if isinstance(item, Mapping):
            text = item.get("value") or item.get("message")
            if text:
                messages.append(text)
        elif item:
            messages.append(str(item))
    return messages


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
