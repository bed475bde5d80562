"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from cutplan.config import get_settings
from cutplan.db import get_db
from cutplan.tracking.models import Challenge
from cutplan.tracking.queries import ChallengeQueries
from cutplan.tracking.weeks import parse_date

app = typer.Typer(
    help="17-week fat loss challenge tracker",
    no_args_is_help=True,
)
console = Console()

# Subcommand groups
challenge_app = typer.Typer(help="Create and manage the challenge plan")
fasting_app = typer.Typer(help="Intermittent fasting window")
tdee_app = typer.Typer(help="BMR, TDEE and calorie targets")
week_app = typer.Typer(help="Challenge week numbers and dates")
log_app = typer.Typer(help="Log nutrition, workouts and habits")
checkin_app = typer.Typer(help="Weekly weigh-ins and measurements")
reflect_app = typer.Typer(help="End-of-week reflections")

app.add_typer(challenge_app, name="challenge")
app.add_typer(fasting_app, name="fasting")
app.add_typer(tdee_app, name="tdee")
app.add_typer(week_app, name="week")
app.add_typer(log_app, name="log")
app.add_typer(checkin_app, name="checkin")
app.add_typer(reflect_app, name="reflect")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2, default=str)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(command: str, message: str, json_output: bool, suggestion: Optional[str] = None) -> NoReturn:
    """Report an error in the requested format and exit with status 1."""
    if json_output:
        response: dict = {"success": False, "command": command, "errors": [message]}
        if suggestion:
            response["suggestions"] = [suggestion]
        output_json(response)
    else:
        console.print(f"[red]{message}[/red]")
        if suggestion:
            console.print(suggestion)
    raise typer.Exit(1)


def ensure_tables() -> None:
    """Ensure tables exist (idempotent)."""
    get_db().initialize_schema()


def today() -> date:
    return date.today()


def resolve_date(command: str, date_str: Optional[str], json_output: bool) -> date:
    """Parse a --date option, defaulting to today."""
    if not date_str:
        return today()
    try:
        return parse_date(date_str)
    except ValueError as e:
        fail(command, str(e), json_output)


def load_challenge(conn, command: str, challenge_id: Optional[int], json_output: bool) -> Challenge:
    """Fetch the requested (or current) challenge or exit."""
    if challenge_id:
        challenge = ChallengeQueries.get(conn, challenge_id)
    else:
        challenge = ChallengeQueries.get_default(conn)

    if challenge is None:
        fail(
            command,
            "No challenge found",
            json_output,
            "Create one with: cutplan challenge create --weight 200 --goal 180",
        )
    return challenge


def challenge_to_dict(challenge: Challenge) -> dict:
    return {
        "challenge_id": challenge.challenge_id,
        "start_date": challenge.start_date.isoformat(),
        "start_weight": challenge.start_weight,
        "goal_weight": challenge.goal_weight,
        "unit": challenge.unit,
        "step_goal": challenge.step_goal,
        "sleep_goal": challenge.sleep_goal,
        "activity_level": challenge.activity_level,
        "tdee_estimate": challenge.tdee_estimate,
        "target_calories": challenge.target_calories,
        "deficit_level": challenge.deficit_level,
        "workouts_per_week": challenge.workouts_per_week,
        "fasting_type": challenge.fasting_type,
        "eating_start_time": challenge.eating_start_time,
        "eating_end_time": challenge.eating_end_time,
        "target_protein_grams": challenge.target_protein_grams,
        "target_carbs_grams": challenge.target_carbs_grams,
        "target_fat_grams": challenge.target_fat_grams,
    }


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """17-week fat loss challenge tracker."""
    configure_logging(verbose)


# Callbacks for database-backed sub-apps to auto-create tables on first use
@challenge_app.callback()
def challenge_callback() -> None:
    """Ensure tables exist before any challenge command."""
    ensure_tables()


@fasting_app.callback()
def fasting_callback() -> None:
    """Ensure tables exist before any fasting command."""
    ensure_tables()


@log_app.callback()
def log_callback() -> None:
    """Ensure tables exist before any log command."""
    ensure_tables()


@checkin_app.callback()
def checkin_callback() -> None:
    """Ensure tables exist before any check-in command."""
    ensure_tables()


@reflect_app.callback()
def reflect_callback() -> None:
    """Ensure tables exist before any reflection command."""
    ensure_tables()


# ============================================================================
# Challenge Commands
# ============================================================================


@challenge_app.command("create")
def challenge_create(
    weight: float = typer.Option(..., "--weight", help="Starting weight"),
    goal: Optional[float] = typer.Option(None, "--goal", help="Goal weight"),
    start: Optional[str] = typer.Option(
        None, "--start", help="Start date (YYYY-MM-DD, default: today if Monday, else next Monday)"
    ),
    unit: Optional[str] = typer.Option(None, "--unit", help="Weight unit (lbs/kg)"),
    steps: Optional[int] = typer.Option(None, "--steps", help="Daily step goal"),
    sleep: Optional[float] = typer.Option(None, "--sleep", help="Nightly sleep goal (hours)"),
    activity: Optional[str] = typer.Option(None, "--activity", help="Activity level"),
    fasting: Optional[str] = typer.Option(
        None, "--fasting", help="Fasting type (16:8/18:6/20:4/custom/none)"
    ),
    eating_start: Optional[str] = typer.Option(None, "--eating-start", help="Eating window start (HH:MM)"),
    eating_end: Optional[str] = typer.Option(
        None, "--eating-end", help="Eating window end (HH:MM, custom fasting only)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create a new 17-week challenge."""
    from cutplan.fasting.presets import FastingSchedule
    from cutplan.tracking.weeks import start_date_for_new_challenge

    defaults = get_settings().challenge
    command = "challenge create"

    try:
        start_date = parse_date(start) if start else start_date_for_new_challenge(today())
        schedule = FastingSchedule.from_preset(
            fasting or defaults.fasting_type,
            eating_start or defaults.eating_start,
            eating_end,
        )
        challenge = Challenge(
            challenge_id=None,
            start_date=start_date,
            start_weight=weight,
            goal_weight=goal,
            unit=unit or defaults.unit,
            step_goal=steps if steps is not None else defaults.step_goal,
            sleep_goal=sleep if sleep is not None else defaults.sleep_goal,
            activity_level=activity or defaults.activity_level,
            workouts_per_week=defaults.workouts_per_week,
            fasting_type=schedule.fasting_type.value if schedule.fasting_type else None,
            eating_start_time=schedule.eating_start,
            eating_end_time=schedule.eating_end,
        )
    except ValueError as e:
        fail(command, str(e), json_output)

    with get_db().get_connection() as conn:
        challenge.challenge_id = ChallengeQueries.create(conn, challenge)

    summary = f"Created challenge {challenge.challenge_id} starting {challenge.start_date.isoformat()}"
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": challenge_to_dict(challenge),
            "human_summary": summary,
        })
    else:
        console.print(f"[green]{summary}[/green]")


@challenge_app.command("show")
def challenge_show(
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the challenge plan, status and targets."""
    from cutplan.tracking.weeks import challenge_status, current_week_number, day_of_challenge

    command = "challenge show"
    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)

    now = today()
    status = challenge_status(challenge.start_date, now)
    week = current_week_number(challenge.start_date, now)
    day = day_of_challenge(challenge.start_date, now)
    window = challenge.fasting.window

    if json_output:
        data = challenge_to_dict(challenge)
        data.update({"status": status.value, "current_week": week, "day": day})
        output_json({
            "success": True,
            "command": command,
            "data": data,
            "human_summary": f"Challenge {challenge.challenge_id}: {status.value}, week {week}",
        })
        return

    unit = challenge.unit
    lines = [
        f"Start: {challenge.start_date.isoformat()}  Status: {status.value}",
        f"Week {week}, day {day}",
        f"Start weight: {challenge.start_weight} {unit}",
    ]
    if challenge.goal_weight is not None:
        lines.append(f"Goal weight: {challenge.goal_weight} {unit}")
    if challenge.target_calories:
        lines.append(f"Calorie target: {challenge.target_calories} kcal/day")
    if challenge.target_protein_grams:
        lines.append(
            f"Macros: P {challenge.target_protein_grams}g / "
            f"C {challenge.target_carbs_grams}g / F {challenge.target_fat_grams}g"
        )
    lines.append(f"Steps: {challenge.step_goal}/day  Sleep: {challenge.sleep_goal}h")
    if window is not None:
        lines.append(f"Fasting: {challenge.fasting_type} (eat {window})")
    console.print(Panel("\n".join(lines), title=f"Challenge {challenge.challenge_id}"))


@challenge_app.command("update")
def challenge_update(
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    goal: Optional[float] = typer.Option(None, "--goal", help="Goal weight"),
    steps: Optional[int] = typer.Option(None, "--steps", help="Daily step goal"),
    sleep: Optional[float] = typer.Option(None, "--sleep", help="Nightly sleep goal (hours)"),
    activity: Optional[str] = typer.Option(None, "--activity", help="Activity level"),
    calories: Optional[int] = typer.Option(None, "--calories", help="Daily calorie target"),
    workouts: Optional[int] = typer.Option(None, "--workouts", help="Workouts per week"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Update challenge settings."""
    command = "challenge update"
    changes = {
        "goal_weight": goal,
        "step_goal": steps,
        "sleep_goal": sleep,
        "activity_level": activity,
        "target_calories": calories,
        "workouts_per_week": workouts,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        fail(command, "Nothing to update", json_output)

    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        try:
            updated = ChallengeQueries.update(conn, challenge.challenge_id, **changes)  # type: ignore[arg-type]
        except ValueError as e:
            fail(command, str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": challenge_to_dict(updated),
            "human_summary": f"Updated {', '.join(sorted(changes))}",
        })
    else:
        console.print(f"[green]Updated {', '.join(sorted(changes))}[/green]")


# ============================================================================
# Fasting Commands
# ============================================================================


@fasting_app.command("set")
def fasting_set(
    fasting_type: str = typer.Argument(..., help="Fasting type (16:8/18:6/20:4/custom/none)"),
    start: str = typer.Option("12:00", "--start", help="Eating window start (HH:MM)"),
    end: Optional[str] = typer.Option(None, "--end", help="Eating window end (custom only)"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Set the fasting protocol and eating window."""
    from cutplan.fasting.presets import PRESET_DESCRIPTIONS, FastingSchedule

    command = "fasting set"
    try:
        schedule = FastingSchedule.from_preset(fasting_type, start, end)
    except ValueError as e:
        fail(command, str(e), json_output)

    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        ChallengeQueries.update(
            conn,
            challenge.challenge_id,  # type: ignore[arg-type]
            fasting_type=schedule.fasting_type.value,  # type: ignore[union-attr]
            eating_start_time=schedule.eating_start,
            eating_end_time=schedule.eating_end,
        )

    window = schedule.window
    summary = f"Fasting {schedule.fasting_type.value}: eating window {window}"  # type: ignore[union-attr]
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {
                "fasting_type": schedule.fasting_type.value,  # type: ignore[union-attr]
                "eating_start_time": schedule.eating_start,
                "eating_end_time": schedule.eating_end,
                "fasting_hours": schedule.fasting_hours,
            },
            "human_summary": summary,
        })
    else:
        console.print(f"[green]{summary}[/green]")
        console.print(PRESET_DESCRIPTIONS[schedule.fasting_type])  # type: ignore[index]


@fasting_app.command("status")
def fasting_status(
    at: Optional[str] = typer.Option(None, "--at", help="Time to evaluate (HH:MM, default: now)"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show whether you are in the eating window and how long remains."""
    from cutplan.fasting.window import format_display_time, minutes_of_day, parse_clock_time

    command = "fasting status"
    try:
        now_minutes = parse_clock_time(at) if at else minutes_of_day(datetime.now())
    except ValueError as e:
        fail(command, str(e), json_output)

    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)

    schedule = challenge.fasting
    progress = schedule.progress(now_minutes)
    if progress is None:
        fail(
            command,
            "No eating window configured",
            json_output,
            "Set one with: cutplan fasting set 16:8 --start 12:00",
        )

    window = schedule.window
    if window.is_unrestricted:  # type: ignore[union-attr]
        summary = "No fasting schedule: eating window is open all day"
    elif progress.inside_window:
        summary = (
            f"Eating window open, closes at {format_display_time(window.end_minutes)} "  # type: ignore[union-attr]
            f"({progress.remaining_text} left)"
        )
    else:
        summary = (
            f"Fasting, eating window opens at {format_display_time(window.start_minutes)} "  # type: ignore[union-attr]
            f"({progress.remaining_text} left)"
        )

    if json_output:
        data = progress.to_dict()
        data.update({
            "window": str(window),
            "fasting_type": challenge.fasting_type,
            "remaining_text": progress.remaining_text,
        })
        output_json({"success": True, "command": command, "data": data, "human_summary": summary})
    else:
        color = "green" if progress.inside_window else "cyan"
        console.print(f"[{color}]{summary}[/{color}]")
        console.print(f"Progress: {progress.fraction_elapsed:.0%}")


# ============================================================================
# TDEE Commands
# ============================================================================


@tdee_app.command("calc")
def tdee_calc(
    sex: Optional[str] = typer.Option(None, "--sex", help="Sex (male/female)"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    weight: Optional[float] = typer.Option(None, "--weight", help="Weight (lbs, or kg with --metric)"),
    height: Optional[float] = typer.Option(None, "--height", help="Height (inches, or cm with --metric)"),
    metric: bool = typer.Option(False, "--metric", help="Weight in kg and height in cm"),
    activity: str = typer.Option(
        "moderate", "--activity", help="Activity level (sedentary/light/moderate/active/very_active)"
    ),
    deficit: str = typer.Option("moderate", "--deficit", help="Deficit level (mild/moderate/aggressive)"),
    save: bool = typer.Option(False, "--save", help="Save targets to the current challenge"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate BMR, TDEE and deficit calorie targets."""
    from cutplan.profiles.body_calc import (
        calculate_macro_targets,
        calculate_targets,
        calculate_targets_imperial,
        is_below_safe_minimum,
        kg_to_lbs,
        target_for_deficit,
    )

    command = "tdee calc"
    try:
        if metric:
            targets = calculate_targets(sex, weight, height, age, activity)
        else:
            targets = calculate_targets_imperial(sex, weight, height, age, activity)
        chosen = target_for_deficit(targets, deficit)
    except ValueError as e:
        fail(command, str(e), json_output)

    if targets is None or chosen is None:
        fail(command, "Enter sex (male or female), age, height and weight to calculate targets", json_output)

    weight_lbs = kg_to_lbs(weight) if metric else weight  # type: ignore[arg-type]
    macros = calculate_macro_targets(chosen, weight_lbs)  # type: ignore[arg-type]

    if save:
        ensure_tables()
        with get_db().get_connection() as conn:
            challenge = load_challenge(conn, command, None, json_output)
            ChallengeQueries.update(
                conn,
                challenge.challenge_id,  # type: ignore[arg-type]
                activity_level=activity,
                tdee_estimate=targets.tdee,
                target_calories=chosen,
                deficit_level=deficit,
                target_protein_grams=macros.protein_grams,
                target_carbs_grams=macros.carbs_grams,
                target_fat_grams=macros.fat_grams,
            )

    warning = is_below_safe_minimum(chosen)
    if json_output:
        data = targets.to_dict()
        data.update({
            "deficit_level": deficit,
            "target_calories": chosen,
            "protein_grams": macros.protein_grams,
            "carbs_grams": macros.carbs_grams,
            "fat_grams": macros.fat_grams,
            "below_safe_minimum": warning,
            "saved": save,
        })
        output_json({
            "success": True,
            "command": command,
            "data": data,
            "human_summary": f"TDEE {targets.tdee} kcal/day, target {chosen} kcal/day",
        })
        return

    table = Table(title="Calorie Targets")
    table.add_column("Level")
    table.add_column("kcal/day", justify="right")
    table.add_row("BMR", str(targets.bmr))
    table.add_row("TDEE (maintenance)", str(targets.tdee))
    table.add_row("Mild (-250)", str(targets.mild_deficit))
    table.add_row("Moderate (-500)", str(targets.moderate_deficit))
    table.add_row("Aggressive (-750)", str(targets.aggressive_deficit))
    console.print(table)
    console.print(
        f"Target ({deficit}): [bold]{chosen}[/bold] kcal/day  "
        f"P {macros.protein_grams}g / C {macros.carbs_grams}g / F {macros.fat_grams}g"
    )
    if warning:
        console.print("[yellow]Warning: target is below 1200 kcal/day[/yellow]")
    if save:
        console.print("[green]Saved to challenge[/green]")


# ============================================================================
# Week Commands
# ============================================================================


@week_app.command("show")
def week_show(
    start: str = typer.Option(..., "--start", help="Challenge start date (YYYY-MM-DD)"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the challenge week, day and status for a date."""
    from cutplan.tracking.weeks import (
        challenge_status,
        current_week_number,
        day_of_challenge,
        monday_date_for_week,
    )

    command = "week show"
    target = resolve_date(command, date_str, json_output)
    try:
        start_date = parse_date(start)
    except ValueError as e:
        fail(command, str(e), json_output)

    week = current_week_number(start_date, target)
    status = challenge_status(start_date, target)
    week_start = monday_date_for_week(start_date, week) if week else None

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {
                "date": target.isoformat(),
                "week": week,
                "day": day_of_challenge(start_date, target),
                "week_start": week_start.isoformat() if week_start else None,
                "status": status.value,
            },
            "human_summary": f"{target.isoformat()} is week {week} ({status.value})",
        })
    else:
        console.print(f"{target.isoformat()}: week [bold]{week}[/bold] ({status.value})")
        if week_start:
            console.print(f"Week starts {week_start.isoformat()}")


@week_app.command("monday")
def week_monday(
    week: int = typer.Argument(..., help="Week number (1-based)"),
    start: str = typer.Option(..., "--start", help="Challenge start date (YYYY-MM-DD)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the first day of a challenge week."""
    from cutplan.tracking.weeks import monday_date_for_week

    command = "week monday"
    try:
        monday = monday_date_for_week(start, week)
    except ValueError as e:
        fail(command, str(e), json_output)

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {"week": week, "monday": monday.isoformat()},
            "human_summary": f"Week {week} starts {monday.isoformat()}",
        })
    else:
        console.print(f"Week {week} starts {monday.isoformat()}")


# ============================================================================
# Log Commands
# ============================================================================


@log_app.command("day")
def log_day(
    calories: Optional[int] = typer.Option(None, "--calories", "-c", help="Calories eaten"),
    protein: Optional[int] = typer.Option(None, "--protein", help="Protein (g)"),
    carbs: Optional[int] = typer.Option(None, "--carbs", help="Carbohydrate (g)"),
    fat: Optional[int] = typer.Option(None, "--fat", help="Fat (g)"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Optional notes"),
    skip: Optional[str] = typer.Option(None, "--skip", help="Mark the day skipped with a reason"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log daily nutrition totals (replaces an existing entry)."""
    from cutplan.tracking.models import DayLog
    from cutplan.tracking.queries import DayLogQueries

    command = "log day"
    log_date = resolve_date(command, date_str, json_output)

    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        try:
            entry = DayLogQueries.save(conn, DayLog(
                log_id=None,
                challenge_id=challenge.challenge_id,  # type: ignore[arg-type]
                date=log_date,
                calories=calories,
                protein=protein,
                carbs=carbs,
                fat=fat,
                notes=notes,
                skipped=skip is not None,
                skipped_reason=skip,
            ))
        except ValueError as e:
            fail(command, str(e), json_output)

    if entry.skipped:
        summary = f"Skipped {log_date.isoformat()}: {entry.skipped_reason}"
    else:
        summary = f"Logged {entry.calories or 0} kcal for {log_date.isoformat()}"
        if challenge.target_calories and entry.calories is not None:
            left = challenge.target_calories - entry.calories
            summary += f" ({left:+d} vs target)"

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {
                "date": entry.date.isoformat(),
                "calories": entry.calories,
                "protein": entry.protein,
                "carbs": entry.carbs,
                "fat": entry.fat,
                "skipped": entry.skipped,
            },
            "human_summary": summary,
        })
    else:
        console.print(f"[green]{summary}[/green]")


@log_app.command("workout")
def log_workout(
    workout_type: str = typer.Argument(..., help="Push, Pull, Legs, Plyo-Abs, Run or Rest"),
    duration: Optional[int] = typer.Option(None, "--duration", help="Duration in minutes"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Optional notes"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log a workout or rest day."""
    from cutplan.tracking.models import WorkoutLog
    from cutplan.tracking.queries import WorkoutQueries

    command = "log workout"
    log_date = resolve_date(command, date_str, json_output)

    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        try:
            entry = WorkoutQueries.save(conn, WorkoutLog(
                log_id=None,
                challenge_id=challenge.challenge_id,  # type: ignore[arg-type]
                date=log_date,
                workout_type=workout_type,
                duration_min=duration,
                notes=notes,
            ))
        except ValueError as e:
            fail(command, str(e), json_output)

    summary = f"Logged {entry.workout_type} on {log_date.isoformat()}"
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {
                "date": entry.date.isoformat(),
                "workout_type": entry.workout_type,
                "duration_min": entry.duration_min,
            },
            "human_summary": summary,
        })
    else:
        console.print(f"[green]{summary}[/green]")


@log_app.command("habits")
def log_habits(
    water: bool = typer.Option(False, "--water", help="Hit the water goal"),
    steps: Optional[int] = typer.Option(None, "--steps", help="Steps walked"),
    sleep: Optional[float] = typer.Option(None, "--sleep", help="Hours slept"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log water, steps and sleep; goals come from the challenge."""
    from cutplan.tracking.models import HabitLog
    from cutplan.tracking.queries import HabitQueries

    command = "log habits"
    log_date = resolve_date(command, date_str, json_output)

    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        try:
            habit = HabitLog(
                log_id=None,
                challenge_id=challenge.challenge_id,  # type: ignore[arg-type]
                date=log_date,
                water_done=water,
                steps=steps,
                sleep_hours=sleep,
            )
        except ValueError as e:
            fail(command, str(e), json_output)
        habit.apply_goals(challenge.step_goal, challenge.sleep_goal)
        entry = HabitQueries.save(conn, habit)

    summary = f"Logged habits for {log_date.isoformat()}: {entry.habits_done}/3 done"
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {
                "date": entry.date.isoformat(),
                "water_done": entry.water_done,
                "steps": entry.steps,
                "steps_done": entry.steps_done,
                "sleep_hours": entry.sleep_hours,
                "sleep_done": entry.sleep_done,
            },
            "human_summary": summary,
        })
    else:
        console.print(f"[green]{summary}[/green]")


def food_entry_to_dict(entry) -> dict:
    from cutplan.profiles.body_calc import round_half_up

    return {
        "entry_id": entry.entry_id,
        "date": entry.date.isoformat(),
        "time": entry.time,
        "meal_type": entry.meal_type,
        "food_name": entry.food_name,
        "brand": entry.brand,
        "serving_label": entry.serving_label,
        "servings_count": entry.servings_count,
        "calories_per_serving": entry.calories_per_serving,
        "calories": round_half_up(entry.calories),
        "protein": round_half_up(entry.total("protein")),
        "carbs": round_half_up(entry.total("carbs")),
        "fat": round_half_up(entry.total("fat")),
    }


@log_app.command("food")
def log_food(
    food_name: str = typer.Argument(..., help="What was eaten"),
    calories: int = typer.Option(..., "--calories", "-c", help="Calories per serving"),
    protein: float = typer.Option(0.0, "--protein", help="Protein per serving (g)"),
    carbs: float = typer.Option(0.0, "--carbs", help="Carbohydrate per serving (g)"),
    fat: float = typer.Option(0.0, "--fat", help="Fat per serving (g)"),
    fiber: float = typer.Option(0.0, "--fiber", help="Fiber per serving (g)"),
    sugar: float = typer.Option(0.0, "--sugar", help="Sugar per serving (g)"),
    sodium: float = typer.Option(0.0, "--sodium", help="Sodium per serving (mg)"),
    cholesterol: float = typer.Option(0.0, "--cholesterol", help="Cholesterol per serving (mg)"),
    servings: float = typer.Option(1.0, "--servings", "-s", help="Number of servings eaten"),
    serving_label: Optional[str] = typer.Option(None, "--serving", help="Serving description, e.g. '1 cup'"),
    meal: str = typer.Option("Snacks", "--meal", "-m", help="Breakfast, Lunch, Dinner or Snacks"),
    brand: Optional[str] = typer.Option(None, "--brand", help="Brand name"),
    time_str: Optional[str] = typer.Option(None, "--time", "-t", help="Time eaten (HH:MM)"),
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Log a single food; nutrition is entered per serving."""
    from cutplan.tracking.food import summarize_day
    from cutplan.tracking.models import FoodEntry
    from cutplan.tracking.queries import FoodEntryQueries

    command = "log food"
    log_date = resolve_date(command, date_str, json_output)

    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        try:
            entry = FoodEntryQueries.create(conn, FoodEntry(
                entry_id=None,
                challenge_id=challenge.challenge_id,  # type: ignore[arg-type]
                date=log_date,
                meal_type=meal,
                food_name=food_name,
                calories_per_serving=calories,
                protein_per_serving=protein,
                carbs_per_serving=carbs,
                fat_per_serving=fat,
                fiber_per_serving=fiber,
                sugar_per_serving=sugar,
                sodium_per_serving=sodium,
                cholesterol_per_serving=cholesterol,
                servings_count=servings,
                serving_label=serving_label,
                brand=brand,
                time=time_str,
            ))
        except ValueError as e:
            fail(command, str(e), json_output)
        day = summarize_day(
            log_date,
            FoodEntryQueries.list_by_date(conn, challenge.challenge_id, log_date),  # type: ignore[arg-type]
        )

    data = food_entry_to_dict(entry)
    day_calories = day.total.rounded()["calories"]
    summary = (
        f"Logged {entry.food_name} ({data['calories']} kcal) for {entry.meal_type}; "
        f"{day_calories} kcal on {log_date.isoformat()}"
    )
    if json_output:
        data["day_calories"] = day_calories
        output_json({"success": True, "command": command, "data": data, "human_summary": summary})
    else:
        console.print(f"[green]{summary}[/green]")


@log_app.command("meals")
def log_meals(
    date_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    sync: bool = typer.Option(False, "--sync", help="Store the food totals as the day's nutrition log"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show foods logged on a date with per-meal and daily totals."""
    from cutplan.tracking.food import summarize_day
    from cutplan.tracking.queries import DayLogQueries, FoodEntryQueries

    command = "log meals"
    log_date = resolve_date(command, date_str, json_output)

    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        entries = FoodEntryQueries.list_by_date(conn, challenge.challenge_id, log_date)  # type: ignore[arg-type]
        day = summarize_day(log_date, entries)
        if sync:
            if not entries:
                fail(command, f"No food logged on {log_date.isoformat()}", json_output)
            existing = DayLogQueries.get_by_date(conn, challenge.challenge_id, log_date)  # type: ignore[arg-type]
            DayLogQueries.save(conn, day.to_day_log(
                challenge.challenge_id,  # type: ignore[arg-type]
                notes=existing.notes if existing else None,
            ))

    totals = day.total.rounded()
    summary = f"{len(entries)} foods, {totals['calories']} kcal on {log_date.isoformat()}"
    if sync:
        summary += " (saved to day log)"

    if json_output:
        data = day.to_dict()
        data["foods"] = [food_entry_to_dict(e) for e in entries]
        data["synced"] = sync
        output_json({"success": True, "command": command, "data": data, "human_summary": summary})
        return

    if not entries:
        console.print(f"[yellow]No food logged on {log_date.isoformat()}[/yellow]")
        return

    table = Table(title=f"Food Log {log_date.isoformat()}")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Meal")
    table.add_column("Food")
    table.add_column("Servings", justify="right")
    table.add_column("kcal", justify="right")
    table.add_column("P", justify="right")
    table.add_column("C", justify="right")
    table.add_column("F", justify="right")
    for entry in entries:
        row = food_entry_to_dict(entry)
        table.add_row(
            str(entry.entry_id),
            entry.meal_type,
            entry.food_name,
            f"{entry.servings_count:g}",
            str(row["calories"]),
            str(row["protein"]),
            str(row["carbs"]),
            str(row["fat"]),
        )
    table.add_section()
    table.add_row(
        "", "", "[bold]Total[/bold]", "",
        str(totals["calories"]), str(totals["protein"]), str(totals["carbs"]), str(totals["fat"]),
    )
    console.print(table)

    if challenge.target_calories:
        left = challenge.target_calories - totals["calories"]
        console.print(f"Target {challenge.target_calories} kcal, {left:+d} remaining")
    if sync:
        console.print("[green]Saved totals to the day log[/green]")


@log_app.command("remove-food")
def log_remove_food(
    entry_id: int = typer.Argument(..., help="Food entry ID (see: cutplan log meals)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Delete a food entry."""
    from cutplan.tracking.queries import FoodEntryQueries

    command = "log remove-food"
    with get_db().get_connection() as conn:
        deleted = FoodEntryQueries.delete(conn, entry_id)

    if not deleted:
        fail(command, f"Food entry {entry_id} not found", json_output)

    summary = f"Removed food entry {entry_id}"
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {"entry_id": entry_id},
            "human_summary": summary,
        })
    else:
        console.print(f"[green]{summary}[/green]")


# ============================================================================
# Check-in Commands
# ============================================================================


@checkin_app.command("add")
def checkin_add(
    weight: float = typer.Argument(..., help="Weigh-in weight"),
    week: Optional[int] = typer.Option(None, "--week", "-w", help="Week number (default: current week)"),
    waist: Optional[float] = typer.Option(None, "--waist", help="Waist measurement"),
    hips: Optional[float] = typer.Option(None, "--hips", help="Hips measurement"),
    chest: Optional[float] = typer.Option(None, "--chest", help="Chest measurement"),
    body_fat: Optional[float] = typer.Option(None, "--body-fat", help="Body fat percentage"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Optional notes"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Record the weekly weigh-in (replaces an existing one for the week)."""
    from cutplan.tracking.models import WeeklyCheckIn
    from cutplan.tracking.queries import CheckInQueries
    from cutplan.tracking.weeks import current_week_number

    command = "checkin add"
    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        week_number = week if week is not None else current_week_number(challenge.start_date, today())
        try:
            entry = CheckInQueries.save(conn, WeeklyCheckIn(
                check_in_id=None,
                challenge_id=challenge.challenge_id,  # type: ignore[arg-type]
                week_number=week_number,
                weight=weight,
                waist=waist,
                hips=hips,
                chest=chest,
                body_fat=body_fat,
                notes=notes,
            ))
        except ValueError as e:
            fail(command, str(e), json_output)

    change = entry.weight - challenge.start_weight  # type: ignore[operator]
    summary = f"Week {entry.week_number}: {entry.weight} {challenge.unit} ({change:+.1f} since start)"
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {
                "week_number": entry.week_number,
                "weight": entry.weight,
                "change_since_start": round(change, 1),
            },
            "human_summary": summary,
        })
    else:
        console.print(f"[green]{summary}[/green]")


@checkin_app.command("list")
def checkin_list(
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List weekly check-ins."""
    from cutplan.tracking.queries import CheckInQueries

    command = "checkin list"
    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        check_ins = CheckInQueries.list_all(conn, challenge.challenge_id)  # type: ignore[arg-type]

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {
                "check_ins": [
                    {
                        "week_number": c.week_number,
                        "weight": c.weight,
                        "waist": c.waist,
                        "hips": c.hips,
                        "chest": c.chest,
                        "body_fat": c.body_fat,
                    }
                    for c in check_ins
                ],
            },
            "human_summary": f"{len(check_ins)} check-ins",
        })
        return

    if not check_ins:
        console.print("[yellow]No check-ins yet[/yellow]")
        return

    table = Table(title="Weekly Check-ins")
    table.add_column("Week", justify="right")
    table.add_column(f"Weight ({challenge.unit})", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Waist", justify="right")
    table.add_column("Body fat", justify="right")
    for c in check_ins:
        change = f"{c.weight - challenge.start_weight:+.1f}" if c.weight is not None else "-"
        table.add_row(
            str(c.week_number),
            f"{c.weight:.1f}" if c.weight is not None else "-",
            change,
            f"{c.waist:.1f}" if c.waist is not None else "-",
            f"{c.body_fat:.1f}%" if c.body_fat is not None else "-",
        )
    console.print(table)


# ============================================================================
# Reflection Commands
# ============================================================================


REFLECTION_PROMPTS = (
    ("went_well", "What went well"),
    ("was_hard", "What was hard"),
    ("improve_next_week", "Improve next week"),
    ("learned", "What I learned"),
    ("next_week_focus", "Next week's focus"),
)


def reflection_to_dict(reflection) -> dict:
    data = {"week_number": reflection.week_number}
    for name, _ in REFLECTION_PROMPTS:
        data[name] = getattr(reflection, name)
    data["mood_rating"] = reflection.mood_rating
    data["energy_rating"] = reflection.energy_rating
    data["overall_rating"] = reflection.overall_rating
    return data


@reflect_app.command("add")
def reflect_add(
    week: Optional[int] = typer.Option(None, "--week", "-w", help="Week number (default: current week)"),
    went_well: Optional[str] = typer.Option(None, "--went-well", help="What went well this week"),
    was_hard: Optional[str] = typer.Option(None, "--was-hard", help="What was hard"),
    improve: Optional[str] = typer.Option(None, "--improve", help="What to improve next week"),
    learned: Optional[str] = typer.Option(None, "--learned", help="What you learned"),
    focus: Optional[str] = typer.Option(None, "--focus", help="Focus for next week"),
    mood: Optional[int] = typer.Option(None, "--mood", help="Mood rating 1-5"),
    energy: Optional[int] = typer.Option(None, "--energy", help="Energy rating 1-5"),
    overall: Optional[int] = typer.Option(None, "--overall", help="Overall rating 1-5"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Record the end-of-week reflection (replaces an existing one for the week)."""
    from cutplan.tracking.models import WeeklyReflection
    from cutplan.tracking.queries import ReflectionQueries
    from cutplan.tracking.weeks import current_week_number

    command = "reflect add"
    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        week_number = week if week is not None else current_week_number(challenge.start_date, today())
        try:
            reflection = ReflectionQueries.save(conn, WeeklyReflection(
                reflection_id=None,
                challenge_id=challenge.challenge_id,  # type: ignore[arg-type]
                week_number=week_number,
                went_well=went_well,
                was_hard=was_hard,
                improve_next_week=improve,
                learned=learned,
                next_week_focus=focus,
                mood_rating=mood,
                energy_rating=energy,
                overall_rating=overall,
            ))
        except ValueError as e:
            fail(command, str(e), json_output)

    summary = f"Saved reflection for week {reflection.week_number}"
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": reflection_to_dict(reflection),
            "human_summary": summary,
        })
    else:
        console.print(f"[green]{summary}[/green]")


@reflect_app.command("show")
def reflect_show(
    week: Optional[int] = typer.Option(None, "--week", "-w", help="Week number (default: all weeks)"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show weekly reflections."""
    from cutplan.tracking.queries import ReflectionQueries

    command = "reflect show"
    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        cid = challenge.challenge_id
        if week is not None:
            found = ReflectionQueries.get_for_week(conn, cid, week)  # type: ignore[arg-type]
            if found is None:
                fail(command, f"No reflection for week {week}", json_output)
            reflections = [found]
        else:
            reflections = ReflectionQueries.list_all(conn, cid)  # type: ignore[arg-type]

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {"reflections": [reflection_to_dict(r) for r in reflections]},
            "human_summary": f"{len(reflections)} reflections",
        })
        return

    if not reflections:
        console.print("[yellow]No reflections yet[/yellow]")
        return

    for reflection in reflections:
        lines = [
            f"[bold]{label}:[/bold] {getattr(reflection, name)}"
            for name, label in REFLECTION_PROMPTS
            if getattr(reflection, name)
        ]
        ratings = [
            f"{label} {value}/5"
            for label, value in (
                ("Mood", reflection.mood_rating),
                ("Energy", reflection.energy_rating),
                ("Overall", reflection.overall_rating),
            )
            if value is not None
        ]
        if ratings:
            lines.append(", ".join(ratings))
        console.print(Panel("\n".join(lines) or "(empty)", title=f"Week {reflection.week_number}"))


# ============================================================================
# Progress and Export
# ============================================================================


def _build_report(command: str, challenge_id: Optional[int], json_output: bool):
    from cutplan.export.formatters import build_report
    from cutplan.tracking.queries import (
        CheckInQueries,
        DayLogQueries,
        HabitQueries,
        WorkoutQueries,
    )

    ensure_tables()
    with get_db().get_connection() as conn:
        challenge = load_challenge(conn, command, challenge_id, json_output)
        cid = challenge.challenge_id
        return build_report(
            challenge,
            today(),
            day_logs=DayLogQueries.list_all(conn, cid),  # type: ignore[arg-type]
            workouts=WorkoutQueries.list_all(conn, cid),  # type: ignore[arg-type]
            habits=HabitQueries.list_all(conn, cid),  # type: ignore[arg-type]
            check_ins=CheckInQueries.list_all(conn, cid),  # type: ignore[arg-type]
        )


@app.command()
def progress(
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show weight pace, compliance and weekly summaries."""
    from cutplan.export.formatters import TableFormatter

    command = "progress"
    report = _build_report(command, challenge_id, json_output)

    if json_output:
        w = report.weight
        output_json({
            "success": True,
            "command": command,
            "data": report.to_dict(),
            "human_summary": f"Week {w.current_week}: {w.change:+.1f} {report.challenge.unit}, "
                             f"{'on pace' if w.on_pace else 'behind pace'}",
        })
    else:
        TableFormatter(console).format(report)


@app.command()
def export(
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format (markdown/json)"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file"),
    challenge_id: Optional[int] = typer.Option(None, "--id", help="Challenge ID (default: current)"),
) -> None:
    """Export a progress report as Markdown or JSON."""
    from cutplan.export.formatters import format_progress

    command = "export"
    fmt = output_format or get_settings().defaults.output_format
    if fmt == "table":
        fmt = "markdown"

    report = _build_report(command, challenge_id, False)
    try:
        text = format_progress(report, fmt)
    except ValueError as e:
        fail(command, str(e), False)

    if output:
        output.write_text(text)
        console.print(f"[green]Exported {fmt} report to {output}[/green]")
    else:
        print(text, end="")


if __name__ == "__main__":
    app()
