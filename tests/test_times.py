"""Tests for time-of-day parsing and lateness comparison."""

import pytest

from departure_board.times import (
    StatusToken,
    TimeOfDay,
    is_late,
    is_time_format,
    parse_time,
    sort_minutes,
)


def test_parse_time_strict_token_is_time() -> None:
    """Given an HH:MM string, when parsing, then a TimeOfDay with minutes of day is returned."""
    value = parse_time("22:58")

    assert isinstance(value, TimeOfDay)
    assert value.minutes == 22 * 60 + 58
    assert value.hour == 22
    assert value.minute == 58
    assert str(value) == "22:58"


@pytest.mark.parametrize("text", ["Delayed", "On time", "No report", "", "9:05", "09:5", "25:10", "12:60"])
def test_parse_time_non_times_are_status_tokens(text: str) -> None:
    """Given text that is not a valid clock time, when parsing, then a StatusToken is returned."""
    value = parse_time(text)

    assert isinstance(value, StatusToken)
    assert value.text == text


def test_parse_time_none_and_non_strings_do_not_raise() -> None:
    """Given None or a non-string, when parsing, then a StatusToken is returned instead of raising."""
    assert parse_time(None) == StatusToken("")
    assert parse_time(1234) == StatusToken("1234")


def test_time_equality_is_by_minutes_and_tokens_by_text() -> None:
    """Given parsed values, when comparing, then times compare by minute and tokens by text."""
    assert parse_time("07:15") == TimeOfDay(minutes=435, text="07:15")
    assert parse_time("Delayed") == StatusToken("Delayed")
    assert parse_time("Delayed") != StatusToken("delayed")


def test_is_time_format() -> None:
    """Given assorted strings, when checking the format, then only HH:MM matches."""
    assert is_time_format("00:00")
    assert not is_time_format("On time")
    assert not is_time_format(None)


def test_is_late_later_time() -> None:
    """Given a time later than scheduled, when checking lateness, then it is late."""
    assert is_late("22:58", "23:05") is True


def test_is_late_same_or_earlier_time() -> None:
    """Given a time equal to or earlier than scheduled, when checking lateness, then it is not late."""
    assert is_late("22:58", "22:58") is False
    assert is_late("22:58", "22:55") is False


@pytest.mark.parametrize("value", ["Cancelled", "cancelled", "Delayed", "DELAYED"])
def test_is_late_cancel_and_delay_tokens(value: str) -> None:
    """Given a cancellation or delay token, when checking lateness, then it is late."""
    assert is_late("10:00", value) is True


@pytest.mark.parametrize("value", ["", "On time", "on time", "No report", None, "Starts here"])
def test_is_late_neutral_tokens(value: str | None) -> None:
    """Given an empty or neutral token, when checking lateness, then it is not late."""
    assert is_late("10:00", value) is False


def test_is_late_does_not_correct_for_midnight() -> None:
    """Given an expected time just after midnight, when checking lateness, then the plain string comparison applies."""
    assert is_late("23:58", "00:03") is False


def test_sort_minutes_wraps_early_morning() -> None:
    """Given times either side of 06:00, when deriving a sort key, then only earlier ones move past midnight."""
    assert sort_minutes("00:10") == 10 + 1440
    assert sort_minutes("05:59") == 359 + 1440
    assert sort_minutes("06:00") == 360
    assert sort_minutes("23:50") == 1430


def test_sort_minutes_status_token_has_no_key() -> None:
    """Given a status token, when deriving a sort key, then there is none."""
    assert sort_minutes("Delayed") is None
    assert sort_minutes(None) is None
