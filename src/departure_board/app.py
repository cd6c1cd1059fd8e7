from __future__ import annotations

from telegram.ext import Application, ApplicationBuilder, CommandHandler

from .board_api import BoardApiClient
from .commands import arrivals, departures, help_command, service, start, stations
from .config import BotSettings
from .station_cache import StationCache


def build_application(settings: BotSettings) -> Application:
    """Configure the Telegram application with command handlers."""

    station_cache = StationCache(settings.station_cache_path)
    board_client = BoardApiClient(settings.api_settings, station_cache=station_cache)

    async def _close_client(application: Application) -> None:  # pragma: no cover - lifecycle
        await board_client.close()

    application = (
        ApplicationBuilder()
        .token(settings.telegram_token)
        .post_shutdown(_close_client)
        .build()
    )

    application.bot_data["settings"] = settings
    application.bot_data["board_client"] = board_client
    application.bot_data["station_cache"] = station_cache

    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("stations", stations))
    application.add_handler(CommandHandler("departures", departures))
    application.add_handler(CommandHandler("arrivals", arrivals))
    application.add_handler(CommandHandler("service", service))

    return application
