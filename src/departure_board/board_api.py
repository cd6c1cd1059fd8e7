from __future__ import annotations

import logging
from typing import Any, Optional, Sequence
from urllib.parse import quote

import httpx

from .config import BoardApiSettings
from .models import BoardMode, DepartureBoard, ServiceDetail, Station
from .station_cache import StationCache

logger = logging.getLogger(__name__)


class BoardApiError(RuntimeError):
    """Raised when the departure board API returns an error or unusable data."""


class BoardApiClient:
    """Async client for the departure board proxy API."""

    def __init__(
        self,
        settings: BoardApiSettings,
        *,
        station_cache: Optional[StationCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._station_cache = station_cache
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
            headers={"Accept": "application/json"},
            follow_redirects=True,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BoardApiClient":  # pragma: no cover - convenience
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - convenience
        await self.close()

    async def get_board(
        self,
        crs: str,
        mode: BoardMode = BoardMode.DEPARTURES,
        *,
        num_rows: Optional[int] = None,
        filter_crs: Optional[str] = None,
        filter_type: Optional[str] = None,
        time_offset: Optional[int] = None,
        time_window: Optional[int] = None,
    ) -> DepartureBoard:
        """Fetch the departures or arrivals board for a station."""

        params: dict[str, str] = {}
        if num_rows is not None:
            params["numRows"] = str(num_rows)
        if filter_crs:
            params["filterCrs"] = filter_crs.upper()
            params["filterType"] = filter_type or "to"
        if time_offset is not None:
            params["timeOffset"] = str(time_offset)
        if time_window is not None:
            params["timeWindow"] = str(time_window)

        path = f"/{mode.value}/{quote(crs.upper(), safe='')}"
        response = await self._client.get(path, params=params)
        payload = await self._json_or_error(response, f"requesting {mode.value}")
        return self._decode(DepartureBoard, payload, f"{mode.value} board for {crs.upper()}")

    async def get_service(self, service_id: str) -> ServiceDetail:
        """Fetch calling points and live times for a single service."""

        path = f"/service/{quote(service_id, safe='')}"
        response = await self._client.get(path)
        payload = await self._json_or_error(response, "requesting service details")
        return self._decode(ServiceDetail, payload, f"service {service_id}")

    async def get_stations(self) -> list[Station]:
        """Return the full station list, refreshing the local cache when stale."""

        if self._station_cache and not self._station_cache.is_expired():
            cached = self._station_cache.load()
            if cached:
                return cached

        response = await self._client.get("/stations")
        payload = await self._json_or_error(response, "requesting stations")
        if not isinstance(payload, list):
            raise BoardApiError("Departure board API returned an unexpected station list")

        stations: list[Station] = []
        for item in payload:
            try:
                stations.append(Station.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                logger.debug(f"Skipping station without usable data {item!r}: {exc}")

        if self._station_cache:
            self._station_cache.save(stations)
        return stations

    async def search_station(self, query: str, *, limit: int = 5) -> Sequence[Station]:
        """Return stations whose name or CRS code matches the query."""

        needle = query.strip().lower()
        if not needle:
            return []

        stations = await self.get_stations()
        exact = [station for station in stations if station.crs.lower() == needle]
        partial = [
            station
            for station in stations
            if station not in exact
            and (needle in station.name.lower() or needle in station.crs.lower())
        ]
        return (exact + partial)[:limit]

    async def _json_or_error(self, response: httpx.Response, action: str) -> Any:
        if response.status_code >= 400:
            raise BoardApiError(
                f"Departure board API error {response.status_code} while {action}: {response.text[:200]}"
            )
        try:
            return response.json()
        except ValueError as exc:
            snippet = response.text[:200] or "<empty body>"
            content_type = response.headers.get("content-type", "unknown")
            raise BoardApiError(
                "Departure board API returned a non-JSON response while "
                f"{action} (status {response.status_code}, content-type {content_type}): {snippet}"
            ) from exc

    @staticmethod
    def _decode(model, payload: Any, what: str):
        if not isinstance(payload, dict):
            raise BoardApiError(f"Departure board API returned an unexpected {what}")
        try:
            return model.from_dict(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise BoardApiError(f"Could not decode {what}: {exc!r}") from exc


def create_board_client(
    settings: BoardApiSettings, station_cache: Optional[StationCache] = None
) -> BoardApiClient:
    """Factory helper to create a departure board API client."""

    return BoardApiClient(settings, station_cache=station_cache)
