"""Eating window and fasting progress calculations."""

from cutplan.fasting.presets import (
    EATING_HOURS,
    FastingSchedule,
    FastingType,
    eating_end_time,
    parse_fasting_type,
)
from cutplan.fasting.window import (
    MINUTES_PER_DAY,
    Phase,
    TimeWindow,
    WindowProgress,
    evaluate,
    evaluate_at,
    format_clock_time,
    format_remaining,
    parse_clock_time,
)

__all__ = [
    "EATING_HOURS",
    "MINUTES_PER_DAY",
    "FastingSchedule",
    "FastingType",
    "Phase",
    "TimeWindow",
    "WindowProgress",
    "eating_end_time",
    "evaluate",
    "evaluate_at",
    "format_clock_time",
    "format_remaining",
    "parse_clock_time",
    "parse_fasting_type",
]
