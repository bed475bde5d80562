"""Progress summaries over a challenge's logs."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional, Sequence

from cutplan.tracking.models import Challenge, DayLog, HabitLog, WeeklyCheckIn, WorkoutLog
from cutplan.tracking.weeks import CHALLENGE_WEEKS, current_week_number, week_dates


@dataclass
class WeightProgress:
    """Weight change against the pace needed to reach the goal."""

    start_weight: float
    current_weight: float
    change: float                       # negative = lost
    goal_weight: Optional[float]
    current_week: int
    expected_weekly_loss: Optional[float]
    expected_current_weight: Optional[float]
    on_pace: bool
    percent_to_goal: Optional[float]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ComplianceSummary:
    days_logged: int
    workouts_completed: int
    check_ins: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class WeekSummary:
    """Totals for one challenge week."""

    week_number: int
    start: date
    end: date
    days_logged: int
    average_calories: Optional[float]
    days_on_target: Optional[int]
    workouts_completed: int
    water_days: int
    step_days: int
    sleep_days: int

    def to_dict(self) -> dict:
        data = asdict(self)
        data["start"] = self.start.isoformat()
        data["end"] = self.end.isoformat()
        return data


def latest_weight(check_ins: Sequence[WeeklyCheckIn]) -> Optional[float]:
    """Weight from the most recent check-in that recorded one."""
    weighed = [c for c in check_ins if c.weight is not None]
    if not weighed:
        return None
    return max(weighed, key=lambda c: c.week_number).weight


def weight_progress(
    challenge: Challenge,
    check_ins: Sequence[WeeklyCheckIn],
    today: date,
) -> WeightProgress:
    """Compare the latest weigh-in with a straight-line path to the goal.

    The expected weight falls linearly from the start weight to the goal
    weight over the challenge. Without a goal the user is always on pace.

    Args:
        challenge: The challenge (start weight, goal weight, start date)
        check_ins: Weekly check-ins, in any order
        today: Today's date

    Returns:
        WeightProgress
    """
    start = challenge.start_weight
    current = latest_weight(check_ins) or start
    week = min(current_week_number(challenge.start_date, today), CHALLENGE_WEEKS)

    expected_loss = challenge.expected_weekly_loss
    expected_current = None
    percent = None
    if challenge.goal_weight is not None and expected_loss is not None:
        expected_current = round(start - expected_loss * week, 1)
        if start != challenge.goal_weight:
            percent = round((start - current) / (start - challenge.goal_weight) * 100, 1)

    on_pace = True if expected_current is None else current <= expected_current

    return WeightProgress(
        start_weight=start,
        current_weight=current,
        change=round(current - start, 1),
        goal_weight=challenge.goal_weight,
        current_week=week,
        expected_weekly_loss=round(expected_loss, 2) if expected_loss is not None else None,
        expected_current_weight=expected_current,
        on_pace=on_pace,
        percent_to_goal=percent,
    )


def compliance_summary(
    day_logs: Sequence[DayLog],
    workouts: Sequence[WorkoutLog],
    check_ins: Sequence[WeeklyCheckIn],
) -> ComplianceSummary:
    """Count logged days, completed workouts and check-ins."""
    return ComplianceSummary(
        days_logged=sum(1 for log in day_logs if not log.skipped),
        workouts_completed=sum(1 for w in workouts if not w.is_rest),
        check_ins=len(check_ins),
    )


def week_summary(
    challenge: Challenge,
    week: int,
    day_logs: Sequence[DayLog],
    workouts: Sequence[WorkoutLog],
    habits: Sequence[HabitLog],
) -> WeekSummary:
    """Summarise nutrition, training and habits for a challenge week.

    Logs outside the week are ignored, so callers can pass the full history.
    """
    days = week_dates(challenge.start_date, week)
    in_week = set(days)

    eaten = [
        log.calories
        for log in day_logs
        if log.date in in_week and not log.skipped and log.calories is not None
    ]
    average = round(sum(eaten) / len(eaten), 1) if eaten else None

    on_target = None
    if challenge.target_calories is not None:
        on_target = sum(1 for cal in eaten if cal <= challenge.target_calories)

    week_habits = [h for h in habits if h.date in in_week]

    return WeekSummary(
        week_number=week,
        start=days[0],
        end=days[-1],
        days_logged=sum(1 for log in day_logs if log.date in in_week and not log.skipped),
        average_calories=average,
        days_on_target=on_target,
        workouts_completed=sum(1 for w in workouts if w.date in in_week and not w.is_rest),
        water_days=sum(1 for h in week_habits if h.water_done),
        step_days=sum(1 for h in week_habits if h.steps_done),
        sleep_days=sum(1 for h in week_habits if h.sleep_done),
    )
