from __future__ import annotations

from typing import Sequence

from .models import BoardMode, ServiceDetail
from .ordering import BoardRow
from .status import PointStatus
from .timeline import RouteTimeline, TimelineNode
from .times import is_time_format

_STATUS_MARKERS = {
    PointStatus.PAST: "✓",
    PointStatus.CURRENT: "●",
    PointStatus.FUTURE: "○",
    PointStatus.CANCELLED: "✗",
}


def format_board(
    station_name: str,
    rows: Sequence[BoardRow],
    mode: BoardMode = BoardMode.DEPARTURES,
    *,
    messages: Sequence[str] = (),
) -> str:
    """Render an ordered board as text for Telegram."""

    header = _format_board_header(station_name, mode)
    lines = [header]
    lines.extend(f"⚠ {message}" for message in messages)

    if not rows:
        lines.append("No services found.")
        return "\n".join(lines)

    for row in rows:
        lines.append(_format_row(row))
    return "\n".join(lines)


def _format_board_header(station_name: str, mode: BoardMode) -> str:
    if mode is BoardMode.ARRIVALS:
        return f"Arrivals at {station_name}"
    return f"Departures from {station_name}"


def _format_row(row: BoardRow) -> str:
    parts = [row.display_time or "--:--", row.destination_label or "Unknown"]
    if row.platform:
        parts.append(row.platform if row.platform.upper() == "BUS" else f"Plat {row.platform}")
    elif row.is_bus:
        parts.append("Bus")

    if row.is_cancelled:
        parts.append("✗ Cancelled")
    elif row.is_delayed:
        parts.append(f"⏱ {_status_label(row.status_text)}")
    elif row.status_text and row.status_text.lower() != "on time":
        parts.append(_status_label(row.status_text))

    line = "  ".join(parts)
    return f"{line}\n  id: {row.raw.service_id}" if row.raw.service_id else line


def _status_label(status: str) -> str:
    if is_time_format(status):
        return f"Expected at {status}"
    return status


def format_timeline(detail: ServiceDetail, timeline: RouteTimeline) -> str:
    """Render a service's calling points, one block per timeline section."""

    lines = [f"{detail.operator} service at {detail.location_name}"]
    if detail.is_cancelled:
        lines.append(f"✗ {detail.cancel_reason or 'Cancelled'}")
    elif detail.delay_reason:
        lines.append(detail.delay_reason)
    if detail.overdue_message:
        lines.append(detail.overdue_message)

    sections = timeline.sections
    if timeline.is_split:
        lines.append(f"This train divides at {detail.location_name}.")

    for index, section in enumerate(sections):
        lines.append("")
        if timeline.is_split and index > 0:
            destination = section[-1].name if section else "Unknown"
            lines.append(f"Portion to {destination}:")
        lines.extend(_format_node(node) for node in section)

    if timeline.show_map:
        lines.append("")
        lines.append(f"Route map: {len(timeline.map_stops)} stations")
    return "\n".join(lines)


def _format_node(node: TimelineNode) -> str:
    line = f"{_STATUS_MARKERS[node.status]} {node.scheduled or '--:--'}  {node.name}"
    if node.platform and node.is_current:
        line += f"  P{node.platform}"
    if node.status_text:
        suffix = " (late)" if node.is_late and node.status is not PointStatus.CANCELLED else ""
        line += f"\n    {node.status_text}{suffix}"
    if node.delay_reason and not node.is_current:
        line += f"\n    {node.delay_reason}"
    return line
