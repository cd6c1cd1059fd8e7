"""Tests for text rendering of boards and timelines."""

from departure_board.formatter import format_board, format_timeline
from departure_board.models import BoardMode, ServiceDetail, ServiceKind
from departure_board.ordering import order_board
from departure_board.timeline import build_timeline

from conftest import make_detail, make_point, make_service


def test_format_empty_board() -> None:
    """Given no rows, when formatting, then a no-services line follows the header."""
    text = format_board("Brighton", [], BoardMode.ARRIVALS)

    assert text == "Arrivals at Brighton\nNo services found."


def test_format_board_rows() -> None:
    """Given cancelled, delayed and bus rows, when formatting, then each carries its marker."""
    rows = order_board(
        [
            make_service(service_id="a", std="10:00", etd="Cancelled", is_cancelled=True, platform="1"),
            make_service(service_id="b", std="10:05", etd="10:12", platform="2"),
            make_service(service_id="c", std="10:10", etd="On time", platform="BUS", kind=ServiceKind.BUS),
        ]
    )

    text = format_board("Brighton", rows, messages=["Disruption at Hove"])
    lines = text.splitlines()

    assert lines[0] == "Departures from Brighton"
    assert lines[1] == "⚠ Disruption at Hove"
    assert "✗ Cancelled" in text
    assert "10:05  London Waterloo  Plat 2  ⏱ Expected at 10:12" in text
    assert "10:10  London Waterloo  BUS" in text


def test_format_linear_timeline() -> None:
    """Given a through service, when formatting, then every stop is listed with its state."""
    detail = make_detail(
        std="22:58",
        eta="23:05",
        previous=(make_point("A", "22:50", at="22:50"),),
        branches=((make_point("Z", "23:20"),),),
    )

    text = format_timeline(detail, build_timeline(detail))

    assert "✓ 22:50  Station A" in text
    assert "● 22:58  Current" in text
    assert "Expected at 23:05 (late)" in text
    assert "○ 23:20  Station Z" in text
    assert "divides" not in text


def test_format_split_timeline(split_detail: ServiceDetail) -> None:
    """Given a dividing train, when formatting, then each portion gets its own heading."""
    text = format_timeline(split_detail, build_timeline(split_detail))

    assert "This train divides at Station B." in text
    assert "Portion to Station D:" in text
    assert "Portion to Station F:" in text
    assert text.count("● 10:10  Station B") == 1
    assert "Route map: 6 stations" in text
