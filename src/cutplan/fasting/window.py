"""Daily eating window arithmetic.

A window is a recurring daily interval given by two clock times. When the
end time is at or before the start time the window runs past midnight,
so ``20:00-04:00`` covers the late evening and the early hours of the next
day. A window whose start equals its end is the unrestricted (24 hour)
window used when no fasting schedule is followed.

All comparisons are done on integer minutes of the day. Floating point is
only used for the final progress fraction.

The current time is always passed in by the caller. Nothing in this module
reads the system clock, so a UI that refreshes once a minute simply calls
``evaluate`` again with the new time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum
from typing import Union

from cutplan.errors import ParseError

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


class Phase(Enum):
    """Which side of the window a moment falls on."""
    INSIDE = "inside"
    OUTSIDE = "outside"


def parse_clock_time(value: str) -> int:
    """Parse a 24-hour ``HH:MM`` string into minutes since midnight.

    Args:
        value: Clock time such as ``"12:00"`` or ``"8:30"``

    Returns:
        Minutes since midnight in ``[0, 1440)``

    Raises:
        ParseError: If the string is not a valid 24-hour clock time
    """
    if not isinstance(value, str):
        raise ParseError(f"Expected time as HH:MM string, got {value!r}")

    match = _CLOCK_RE.match(value.strip())
    if match is None:
        raise ParseError(f"Invalid time '{value}', expected HH:MM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ParseError(f"Time out of range: '{value}'")

    return hours * 60 + minutes


def format_clock_time(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_display_time(minutes: int) -> str:
    """Format minutes since midnight as a 12-hour time, e.g. ``8:05 PM``."""
    minutes %= MINUTES_PER_DAY
    hours, mins = divmod(minutes, 60)
    period = "PM" if hours >= 12 else "AM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{mins:02d} {period}"


def format_remaining(minutes: int) -> str:
    """Countdown text such as ``5h 0m``."""
    hours, mins = divmod(max(0, minutes), 60)
    return f"{hours}h {mins}m"


def _check_minutes(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an int, got {value!r}")
    if not 0 <= value < MINUTES_PER_DAY:
        raise ValueError(f"{name} must be in [0, {MINUTES_PER_DAY}), got {value}")


@dataclass(frozen=True)
class TimeWindow:
    """A recurring daily interval, start inclusive and end exclusive."""

    start_minutes: int
    end_minutes: int

    def __post_init__(self) -> None:
        _check_minutes("start_minutes", self.start_minutes)
        _check_minutes("end_minutes", self.end_minutes)

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeWindow":
        """Build a window from two ``HH:MM`` strings."""
        return cls(parse_clock_time(start), parse_clock_time(end))

    @classmethod
    def from_hours(cls, start: Union[str, int], eat_hours: float) -> "TimeWindow":
        """Build a window that opens at ``start`` and lasts ``eat_hours``.

        Args:
            start: ``HH:MM`` string or minutes since midnight
            eat_hours: Length of the window in hours, in ``(0, 24]``.
                       24 gives the unrestricted window.
        """
        start_minutes = parse_clock_time(start) if isinstance(start, str) else start
        if not 0 < eat_hours <= 24:
            raise ValueError(f"eat_hours must be in (0, 24], got {eat_hours}")
        eat_minutes = round(eat_hours * 60)
        # Whole minutes only; a window under 24h must not collapse to 0 or 24h
        if eat_minutes == 0 or (eat_minutes >= MINUTES_PER_DAY and eat_hours < 24):
            raise ValueError(f"eat_hours {eat_hours} does not round to a window of whole minutes")
        end_minutes = (start_minutes + eat_minutes) % MINUTES_PER_DAY
        return cls(start_minutes, end_minutes)

    @property
    def is_unrestricted(self) -> bool:
        """True for the 24 hour window (start equals end)."""
        return self.start_minutes == self.end_minutes

    @property
    def wraps_midnight(self) -> bool:
        return self.end_minutes < self.start_minutes

    @property
    def adjusted_end(self) -> int:
        """End on the same continuous timeline as the start."""
        if self.end_minutes <= self.start_minutes:
            return self.end_minutes + MINUTES_PER_DAY
        return self.end_minutes

    @property
    def duration_minutes(self) -> int:
        return self.adjusted_end - self.start_minutes

    @property
    def start(self) -> str:
        return format_clock_time(self.start_minutes)

    @property
    def end(self) -> str:
        return format_clock_time(self.end_minutes)

    def contains(self, now_minutes: int) -> bool:
        """Whether ``now_minutes`` falls inside the window."""
        return evaluate(self, now_minutes).inside_window

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class WindowProgress:
    """Where a moment sits relative to a window."""

    inside_window: bool
    fraction_elapsed: float     # 0-1 through the current phase
    minutes_remaining: int      # until the next boundary crossing
    phase: Phase

    @property
    def remaining_text(self) -> str:
        return format_remaining(self.minutes_remaining)

    def to_dict(self) -> dict:
        return {
            "inside_window": self.inside_window,
            "fraction_elapsed": self.fraction_elapsed,
            "minutes_remaining": self.minutes_remaining,
            "phase": self.phase.value,
        }


def evaluate(window: TimeWindow, now_minutes: int) -> WindowProgress:
    """Compute window progress for a moment of the day.

    Inside the window the fraction is how much of the window has elapsed
    and the remaining minutes count down to the window end. Outside, the
    fraction is how far through the gap between windows the moment is and
    the remaining minutes count down to the next window start, which may
    be tomorrow.

    Args:
        window: The daily window
        now_minutes: Current minutes since midnight, in ``[0, 1440)``

    Returns:
        WindowProgress for ``now_minutes``

    Example:
        >>> evaluate(TimeWindow.from_strings("12:00", "20:00"), 15 * 60)
        WindowProgress(inside_window=True, fraction_elapsed=0.375, minutes_remaining=300, phase=<Phase.INSIDE: 'inside'>)
    """
    _check_minutes("now_minutes", now_minutes)

    if window.is_unrestricted:
        return WindowProgress(
            inside_window=True,
            fraction_elapsed=0.0,
            minutes_remaining=0,
            phase=Phase.INSIDE,
        )

    start = window.start_minutes
    end = window.adjusted_end

    # Early-morning times belong to yesterday's wrapped window
    now = now_minutes
    if window.wraps_midnight and now < start:
        now += MINUTES_PER_DAY

    if start <= now < end:
        duration = end - start
        fraction = min(1.0, max(0.0, (now - start) / duration))
        return WindowProgress(
            inside_window=True,
            fraction_elapsed=fraction,
            minutes_remaining=end - now,
            phase=Phase.INSIDE,
        )

    remaining = (start - now_minutes) % MINUTES_PER_DAY
    gap = MINUTES_PER_DAY - window.duration_minutes
    fraction = min(1.0, max(0.0, (gap - remaining) / gap))
    return WindowProgress(
        inside_window=False,
        fraction_elapsed=fraction,
        minutes_remaining=remaining,
        phase=Phase.OUTSIDE,
    )


def minutes_of_day(moment: Union[datetime, time]) -> int:
    """Minutes since midnight for a datetime or time (seconds ignored)."""
    return moment.hour * 60 + moment.minute


def evaluate_at(window: TimeWindow, moment: Union[datetime, time]) -> WindowProgress:
    """Evaluate a window at a wall-clock moment supplied by the caller."""
    return evaluate(window, minutes_of_day(moment))
