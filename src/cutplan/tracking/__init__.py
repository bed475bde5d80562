"""Challenge calendar, logs and progress tracking.

Key components:
- Week numbering relative to the challenge start Monday
- Challenge, day, workout, habit and check-in records with sqlite queries
- Food entries with per-meal daily totals, and weekly reflections
- Weight pace and compliance summaries
"""

from __future__ import annotations

from cutplan.tracking.weeks import (
    CHALLENGE_WEEKS,
    ChallengeStatus,
    challenge_status,
    current_week_number,
    monday_date_for_week,
    week_number,
)
from cutplan.tracking.models import (
    Challenge,
    DayLog,
    FoodEntry,
    HabitLog,
    WeeklyCheckIn,
    WeeklyReflection,
    WorkoutLog,
)

__all__ = [
    "CHALLENGE_WEEKS",
    "Challenge",
    "ChallengeStatus",
    "DayLog",
    "FoodEntry",
    "HabitLog",
    "WeeklyCheckIn",
    "WeeklyReflection",
    "WorkoutLog",
    "challenge_status",
    "current_week_number",
    "monday_date_for_week",
    "week_number",
]
