from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Union

_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")

MINUTES_PER_DAY = 1440
# Services before this minute of day belong to the end of the previous night.
WRAPAROUND_CUTOFF = 360

_NOT_LATE_TOKENS = {"", "on time", "no report"}


@dataclass(frozen=True)
class TimeOfDay:
    """A clock time parsed from a strict ``HH:MM`` token."""

    minutes: int
    text: str = field(compare=False)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class StatusToken:
    """A non-temporal value from the feed such as ``Delayed`` or ``On time``."""

    text: str

    @property
    def is_cancelled(self) -> bool:
        return "cancel" in self.text.lower()

    @property
    def is_delayed(self) -> bool:
        return "delayed" in self.text.lower()

    @property
    def is_on_time(self) -> bool:
        return self.text.lower() == "on time"

    @property
    def is_neutral(self) -> bool:
        """True for values that carry no lateness information at all."""

        return self.text.strip().lower() in _NOT_LATE_TOKENS

    def __str__(self) -> str:
        return self.text


TimeValue = Union[TimeOfDay, StatusToken]


def is_time_format(text: Optional[str]) -> bool:
    return isinstance(text, str) and _TIME_PATTERN.match(text) is not None


def parse_time(text: Optional[str]) -> TimeValue:
    """Classify feed text as a clock time or an opaque status token.

    Anything that is not exactly two digits, a colon and two digits is a
    token, and so is an out-of-range value like ``25:10``. Never raises.
    """

    if text is None:
        return StatusToken("")
    if not isinstance(text, str):
        return StatusToken(str(text))
    if not _TIME_PATTERN.match(text):
        return StatusToken(text)

    hours, minutes = int(text[:2]), int(text[3:])
    if hours > 23 or minutes > 59:
        return StatusToken(text)
    return TimeOfDay(minutes=hours * 60 + minutes, text=text)


def is_late(scheduled: Union[str, TimeOfDay, None], value: Union[str, TimeValue, None]) -> bool:
    """Return True when ``value`` reports the stop as late or cancelled.

    Clock times are compared as same-day ``HH:MM`` strings; no overnight
    correction is applied here (board ordering has its own wraparound).
    """

    parsed = value if isinstance(value, (TimeOfDay, StatusToken)) else parse_time(value)
    if isinstance(parsed, StatusToken):
        if parsed.is_neutral:
            return False
        return parsed.is_cancelled or parsed.is_delayed

    scheduled_text = str(scheduled) if scheduled is not None else ""
    if not scheduled_text:
        return False
    return parsed.text > scheduled_text


def sort_minutes(value: Union[str, TimeValue, None]) -> Optional[int]:
    """Board sort key: minutes of day, with pre-06:00 times pushed past midnight."""

    parsed = value if isinstance(value, (TimeOfDay, StatusToken)) else parse_time(value)
    if not isinstance(parsed, TimeOfDay):
        return None
    if parsed.minutes < WRAPAROUND_CUTOFF:
        return parsed.minutes + MINUTES_PER_DAY
    return parsed.minutes
