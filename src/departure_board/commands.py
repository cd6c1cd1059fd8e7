from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx
from telegram import Update
from telegram.ext import ContextTypes

from .board_api import BoardApiClient, BoardApiError
from .config import BotSettings
from .formatter import format_board, format_timeline
from .models import BoardMode, Station
from .ordering import order_board
from .station_cache import StationCache
from .timeline import build_timeline

logger = logging.getLogger(__name__)

_CRS_PATTERN = re.compile(r"^[A-Za-z]{3}$")


@dataclass(frozen=True)
class BoardRequest:
    station_query: str
    filter_query: Optional[str]
    filter_type: Optional[str]
    limit: Optional[int]


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Send greeting and usage basics."""

    message = (
        "👋 Hi! Send /departures followed by a station, e.g.\n"
        "/departures London Waterloo\n\n"
        "Need a station code? Try /stations <search term>."
    )
    await update.message.reply_text(message)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = (
        "Usage:\n"
        "  /departures <station> [to <station>] [rows N]\n"
        "  /arrivals <station> [from <station>] [rows N]\n"
        "  /service <service id>\n"
        "  /stations <search term>\n\n"
        "Examples:\n"
        "  /departures WAT\n"
        "  /departures Leeds to York rows 5\n"
        "  /departures Heathrow Terminal 5\n"
        "  /arrivals Manchester Piccadilly\n"
        "  /stations Paddington"
    )
    await update.message.reply_text(message)


async def stations(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Look up station codes matching a free text query."""

    query = " ".join(context.args) if context.args else ""
    if not query:
        await update.message.reply_text("Please supply a station name, e.g. /stations York")
        return

    try:
        results = await _client(context).search_station(query, limit=5)
    except (BoardApiError, httpx.HTTPError) as exc:
        logger.warning(f"Station search for {query!r} failed: {exc}")
        await update.message.reply_text(f"Station search failed: {exc}")
        return

    if not results:
        await update.message.reply_text("No stations found for that search term.")
        return

    lines = [f"{station.name} — {station.crs}" for station in results]
    await update.message.reply_text("Station matches:\n" + "\n".join(lines))


async def departures(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _board(update, context, BoardMode.DEPARTURES)


async def arrivals(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _board(update, context, BoardMode.ARRIVALS)


async def _board(update: Update, context: ContextTypes.DEFAULT_TYPE, mode: BoardMode) -> None:
    if not context.args:
        await update.message.reply_text(
            f"Please provide a station, e.g. /{mode.value} Bristol Temple Meads"
        )
        return

    try:
        request = parse_board_query(" ".join(context.args))
    except ValueError as exc:
        await update.message.reply_text(str(exc))
        return

    settings = _settings(context)
    client = _client(context)
    limit = request.limit or settings.default_result_limit

    try:
        station = await resolve_station(client, request.station_query)
        if station is None:
            await update.message.reply_text("Couldn't find a station matching that name.")
            return

        filter_station = None
        if request.filter_query:
            filter_station = await resolve_station(client, request.filter_query)
            if filter_station is None:
                await update.message.reply_text("Couldn't find a station matching the filter.")
                return

        board = await client.get_board(
            station.crs,
            mode,
            num_rows=limit,
            filter_crs=filter_station.crs if filter_station else None,
            filter_type=request.filter_type if filter_station else None,
        )
    except (BoardApiError, httpx.HTTPError) as exc:
        logger.warning(f"Fetching {mode.value} for {request.station_query!r} failed: {exc}")
        await update.message.reply_text(f"Failed to load board: {exc}")
        return

    rows = order_board(board.services, mode, limit)
    title = board.location_name or station.name
    if filter_station:
        preposition = "calling at" if request.filter_type == "to" else "from"
        title = f"{title} ({preposition} {filter_station.name})"

    await update.message.reply_text(
        format_board(title, rows, mode, messages=board.nrcc_messages)
    )


async def service(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Show the calling points of a single service."""

    service_id = " ".join(context.args).strip() if context.args else ""
    if not service_id:
        await update.message.reply_text("Please provide a service id, e.g. /service 1234567LDS")
        return

    try:
        detail = await _client(context).get_service(service_id)
    except (BoardApiError, httpx.HTTPError) as exc:
        logger.warning(f"Fetching service {service_id} failed: {exc}")
        await update.message.reply_text(f"Failed to load service details: {exc}")
        return

    timeline = build_timeline(detail, _station_lookup(context))
    await update.message.reply_text(format_timeline(detail, timeline))


def parse_board_query(text: str) -> BoardRequest:
    """Parse free text into a BoardRequest.

    A row count is only read from an explicit trailing ``rows N`` so that
    station names ending in a number stay intact.
    """

    limit: Optional[int] = None
    limit_match = re.search(r"\s+rows?\s*=?\s*(\d{1,2})$", text, flags=re.IGNORECASE)
    if limit_match:
        limit = int(limit_match.group(1))
        if limit < 1:
            raise ValueError("Number of rows must be at least 1.")
        text = text[: limit_match.start()]

    parts = re.split(r"\s+(to|from|->)\s+", text.strip(), maxsplit=1, flags=re.IGNORECASE)
    station_query = parts[0].strip()
    if not station_query:
        raise ValueError("A station is required.")

    if len(parts) == 1:
        return BoardRequest(station_query=station_query, filter_query=None, filter_type=None, limit=limit)

    filter_query = parts[2].strip()
    if not filter_query:
        raise ValueError("Couldn't parse the filter station.")
    filter_type = "from" if parts[1].lower() == "from" else "to"
    return BoardRequest(
        station_query=station_query,
        filter_query=filter_query,
        filter_type=filter_type,
        limit=limit,
    )


async def resolve_station(client: BoardApiClient, query: str) -> Optional[Station]:
    """Resolve a CRS code or station name to the best matching station."""

    matches = await client.search_station(query, limit=1)
    if matches:
        return matches[0]
    if _CRS_PATTERN.match(query):
        code = query.upper()
        return Station(crs=code, name=code, latitude=0.0, longitude=0.0)
    return None


def _settings(context: ContextTypes.DEFAULT_TYPE) -> BotSettings:
    return context.application.bot_data["settings"]


def _client(context: ContextTypes.DEFAULT_TYPE) -> BoardApiClient:
    return context.application.bot_data["board_client"]


def _station_lookup(context: ContextTypes.DEFAULT_TYPE) -> dict[str, Station]:
    """Known stations keyed by CRS code. Stations missing from it stay off the map."""

    cache: Optional[StationCache] = context.application.bot_data.get("station_cache")
    if cache is None:
        return {}
    return cache.lookup()
