"""Intermittent fasting presets and the persisted fasting schedule."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum
from typing import Optional, Union

from cutplan.fasting.window import (
    MINUTES_PER_DAY,
    TimeWindow,
    WindowProgress,
    evaluate,
    format_clock_time,
    minutes_of_day,
    parse_clock_time,
)


class FastingType(Enum):
    """Fasting protocol, named fast:eat hours."""
    SIXTEEN_EIGHT = "16:8"
    EIGHTEEN_SIX = "18:6"
    TWENTY_FOUR = "20:4"
    CUSTOM = "custom"
    NONE = "none"


# Eating hours per protocol (custom windows carry their own end time)
EATING_HOURS = {
    FastingType.SIXTEEN_EIGHT: 8,
    FastingType.EIGHTEEN_SIX: 6,
    FastingType.TWENTY_FOUR: 4,
    FastingType.NONE: 24,
}

PRESET_DESCRIPTIONS = {
    FastingType.SIXTEEN_EIGHT: "Most popular - Fast 16h, eat 8h",
    FastingType.EIGHTEEN_SIX: "Intermediate - Fast 18h, eat 6h",
    FastingType.TWENTY_FOUR: "Advanced - Fast 20h, eat 4h",
    FastingType.CUSTOM: "Choose your own eating window",
    FastingType.NONE: "No fasting schedule",
}


def parse_fasting_type(value: Union[str, FastingType]) -> FastingType:
    """Parse a fasting type string such as ``"16:8"`` or ``"none"``."""
    if isinstance(value, FastingType):
        return value
    try:
        return FastingType(value.strip().lower())
    except ValueError:
        valid = ", ".join(t.value for t in FastingType)
        raise ValueError(f"Unknown fasting type '{value}' (expected one of: {valid})")


def eating_end_time(start: str, fasting_type: Union[str, FastingType]) -> str:
    """Derive the eating window end for a preset.

    The end lands on the hour: ``(start_hour + eating_hours) % 24``. The
    ``none`` preset returns the start itself, which is the unrestricted
    window.

    Args:
        start: Eating window start as ``HH:MM``
        fasting_type: A preset other than ``custom``

    Returns:
        End time as ``HH:MM``
    """
    ftype = parse_fasting_type(fasting_type)
    start_minutes = parse_clock_time(start)

    if ftype == FastingType.CUSTOM:
        raise ValueError("Custom fasting windows need an explicit end time")
    if ftype == FastingType.NONE:
        return format_clock_time(start_minutes)

    end_hour = (start_minutes // 60 + EATING_HOURS[ftype]) % 24
    return format_clock_time(end_hour * 60)


@dataclass
class FastingSchedule:
    """Fasting settings as stored on a challenge.

    ``window`` is None when no eating times have been configured, which
    callers must treat as "no window" rather than as a window of any size.
    The ``none`` type is always unrestricted, with or without a start time.
    """

    fasting_type: Optional[FastingType] = None
    eating_start: Optional[str] = None
    eating_end: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.fasting_type, str):
            self.fasting_type = parse_fasting_type(self.fasting_type)
        # Validate eagerly so a bad stored value surfaces as ParseError here
        if self.eating_start is not None:
            parse_clock_time(self.eating_start)
        if self.eating_end is not None:
            parse_clock_time(self.eating_end)

    @classmethod
    def from_preset(
        cls,
        fasting_type: Union[str, FastingType],
        eating_start: str,
        eating_end: Optional[str] = None,
    ) -> "FastingSchedule":
        """Build a schedule, deriving the end time for non-custom presets."""
        ftype = parse_fasting_type(fasting_type)
        if ftype == FastingType.CUSTOM:
            if eating_end is None:
                raise ValueError("Custom fasting windows need an explicit end time")
            end = eating_end
        else:
            end = eating_end_time(eating_start, ftype)
        return cls(fasting_type=ftype, eating_start=eating_start, eating_end=end)

    @property
    def window(self) -> Optional[TimeWindow]:
        if self.fasting_type == FastingType.NONE:
            start = parse_clock_time(self.eating_start) if self.eating_start else 0
            return TimeWindow(start, start)
        if not self.eating_start or not self.eating_end:
            return None
        return TimeWindow.from_strings(self.eating_start, self.eating_end)

    @property
    def fasting_hours(self) -> Optional[float]:
        window = self.window
        if window is None:
            return None
        if window.is_unrestricted:
            return 0.0
        return (MINUTES_PER_DAY - window.duration_minutes) / 60

    def progress(self, now: Union[int, datetime, time]) -> Optional[WindowProgress]:
        """Evaluate the schedule at ``now`` (minutes of day, datetime or time).

        Returns:
            None when no window is configured
        """
        window = self.window
        if window is None:
            return None
        now_minutes = now if isinstance(now, int) else minutes_of_day(now)
        return evaluate(window, now_minutes)
