from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Self


@dataclass(frozen=True)
class BoardApiSettings:
    """Location of the departure board proxy API."""

    base_url: str
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> Self:
        try:
            base_url = os.environ["DEPARTURE_BOARD_API_URL"]
        except KeyError as exc:
            missing = exc.args[0]
            raise RuntimeError(
                f"Missing departure board API setting in environment: {missing}"
            ) from None

        timeout = float(os.environ.get("DEPARTURE_BOARD_API_TIMEOUT", cls.timeout))
        return cls(base_url=base_url.rstrip("/"), timeout=timeout)


@dataclass(frozen=True)
class BotSettings:
    """Configuration options for the Telegram bot."""

    telegram_token: str
    api_settings: BoardApiSettings
    default_result_limit: int = 10
    station_cache_path: Path = Path("~/.cache/departure-board/stations.json")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        """Create settings object from environment variables."""

        try:
            telegram_token = os.environ["TELEGRAM_BOT_TOKEN"]
        except KeyError as exc:  # pragma: no cover - trivial
            missing = exc.args[0]
            raise RuntimeError(
                f"Missing Telegram credential in environment: {missing}"
            ) from None

        limit = int(os.environ.get("DEFAULT_RESULT_LIMIT", cls.default_result_limit))
        cache_path = Path(os.environ.get("STATION_CACHE_PATH", str(cls.station_cache_path)))
        return cls(
            telegram_token=telegram_token,
            api_settings=BoardApiSettings.from_env(),
            default_result_limit=limit,
            station_cache_path=cache_path.expanduser(),
            log_level=os.environ.get("LOG_LEVEL", cls.log_level).upper(),
        )
