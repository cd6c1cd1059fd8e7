from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional, Sequence

from .models import Station

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 86400.0


class StationCache:
    """JSON file holding the station list and the time it was last refreshed."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def save(self, stations: Sequence[Station], *, now: Optional[float] = None) -> None:
        payload = {
            "refreshedAt": time.time() if now is None else now,
            "stations": [station.to_dict() for station in stations],
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            logger.warning(f"Could not write station cache {self._path}: {exc}")
            return
        logger.debug(f"Saved {len(stations)} stations to {self._path}")

    def load(self) -> Optional[list[Station]]:
        payload = self._read()
        if payload is None:
            return None
        stations: list[Station] = []
        for item in payload.get("stations", []):
            try:
                stations.append(Station.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(f"Skipping malformed cached station {item!r}: {exc}")
        return stations

    def is_expired(self, max_age: float = DEFAULT_MAX_AGE, *, now: Optional[float] = None) -> bool:
        payload = self._read()
        if payload is None:
            return True
        refreshed_at = payload.get("refreshedAt")
        if not isinstance(refreshed_at, (int, float)):
            return True
        current = time.time() if now is None else now
        return current - refreshed_at > max_age

    def lookup(self) -> dict[str, Station]:
        """Stations keyed by CRS code; empty when nothing is cached."""

        return {station.crs: station for station in self.load() or []}

    def _read(self) -> Optional[dict]:
        if not self._path.exists():
            return None
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable station cache {self._path}: {exc}")
            return None
        if not isinstance(payload, dict):
            logger.warning(f"Ignoring station cache {self._path} with unexpected layout")
            return None
        return payload
