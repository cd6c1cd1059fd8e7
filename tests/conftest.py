"""Shared fixtures and record builders."""

from typing import Any

import pytest

from departure_board.models import CallingPoint, Location, ServiceDetail, ServiceKind, ServiceSummary, Station


def make_service(
    *,
    service_id: str = "svc",
    std: str | None = None,
    etd: str | None = None,
    sta: str | None = None,
    eta: str | None = None,
    is_cancelled: bool = False,
    destinations: tuple[str, ...] = ("London Waterloo",),
    origins: tuple[str, ...] = ("Southampton Central",),
    platform: str | None = None,
    kind: ServiceKind = ServiceKind.TRAIN,
) -> ServiceSummary:
    return ServiceSummary(
        service_id=service_id,
        operator="South Western Railway",
        operator_code="SW",
        kind=kind,
        std=std,
        etd=etd,
        sta=sta,
        eta=eta,
        platform=platform,
        is_cancelled=is_cancelled,
        origin=tuple(Location(name=name, crs=name[:3].upper()) for name in origins),
        destination=tuple(Location(name=name, crs=name[:3].upper()) for name in destinations),
    )


def make_point(crs: str, st: str, **feed_fields: Any) -> CallingPoint:
    """Build a calling point from feed-style keyword fields such as ``at`` and ``et``."""
    return CallingPoint.from_dict({"locationName": f"Station {crs}", "crs": crs, "st": st, **feed_fields})


def make_detail(
    *,
    previous: tuple[CallingPoint, ...] = (),
    branches: tuple[tuple[CallingPoint, ...], ...] = (),
    **kwargs: Any,
) -> ServiceDetail:
    fields: dict[str, Any] = {
        "location_name": "Current",
        "crs": "CUR",
        "operator": "Southern",
        "operator_code": "SN",
        "kind": ServiceKind.TRAIN,
    }
    fields.update(kwargs)
    return ServiceDetail(
        previous_calling_points=previous,
        subsequent_calling_points=branches,
        **fields,
    )


@pytest.fixture
def split_detail() -> ServiceDetail:
    """A train from A via B that divides at B, one portion to C/D and one to E/F."""
    return make_detail(
        location_name="Station B",
        crs="B",
        std="10:10",
        etd="On time",
        previous=(make_point("A", "10:00", at="10:01"),),
        branches=(
            (make_point("C", "10:20"), make_point("D", "10:30")),
            (make_point("E", "10:25"), make_point("F", "10:40")),
        ),
    )


@pytest.fixture
def stations() -> dict[str, Station]:
    return {
        code: Station(crs=code, name=f"Station {code}", latitude=50.0 + index, longitude=-1.0 - index)
        for index, code in enumerate(["A", "B", "C", "D", "E", "F"])
    }
