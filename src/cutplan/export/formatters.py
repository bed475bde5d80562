"""Output formatters for challenge progress reports."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cutplan.tracking.models import Challenge, DayLog, HabitLog, WeeklyCheckIn, WorkoutLog
from cutplan.tracking.progress import (
    ComplianceSummary,
    WeekSummary,
    WeightProgress,
    compliance_summary,
    week_summary,
    weight_progress,
)
from cutplan.tracking.weeks import CHALLENGE_WEEKS, challenge_status, current_week_number


@dataclass
class ProgressReport:
    """Everything shown on the progress screen, for one point in time."""

    challenge: Challenge
    generated_on: date
    status: str
    weight: WeightProgress
    compliance: ComplianceSummary
    weeks: list[WeekSummary] = field(default_factory=list)
    check_ins: list[WeeklyCheckIn] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "challenge_id": self.challenge.challenge_id,
            "generated_on": self.generated_on.isoformat(),
            "status": self.status,
            "start_date": self.challenge.start_date.isoformat(),
            "unit": self.challenge.unit,
            "target_calories": self.challenge.target_calories,
            "weight": self.weight.to_dict(),
            "compliance": self.compliance.to_dict(),
            "weeks": [w.to_dict() for w in self.weeks],
            "check_ins": [
                {"week": c.week_number, "weight": c.weight, "waist": c.waist, "body_fat": c.body_fat}
                for c in self.check_ins
            ],
        }


def build_report(
    challenge: Challenge,
    today: date,
    day_logs: Sequence[DayLog] = (),
    workouts: Sequence[WorkoutLog] = (),
    habits: Sequence[HabitLog] = (),
    check_ins: Sequence[WeeklyCheckIn] = (),
) -> ProgressReport:
    """Assemble a progress report covering every week started so far."""
    week_count = current_week_number(challenge.start_date, today)

    weeks = [
        week_summary(challenge, week, day_logs, workouts, habits)
        for week in range(1, min(week_count, CHALLENGE_WEEKS) + 1)
    ]
    return ProgressReport(
        challenge=challenge,
        generated_on=today,
        status=challenge_status(challenge.start_date, today).value,
        weight=weight_progress(challenge, check_ins, today),
        compliance=compliance_summary(day_logs, workouts, check_ins),
        weeks=weeks,
        check_ins=sorted(check_ins, key=lambda c: c.week_number),
    )


class TableFormatter:
    """Format reports as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format(self, report: ProgressReport) -> None:
        """Print formatted tables to console."""
        w = report.weight
        unit = report.challenge.unit
        pace_color = "green" if w.on_pace else "yellow"

        header_lines = [
            f"[bold]CHALLENGE PROGRESS[/bold] - {report.generated_on.isoformat()}",
            f"Status: {report.status}  Week {w.current_week}",
            f"Weight: {w.current_weight:.1f} {unit} ({w.change:+.1f} {unit})",
        ]
        if w.goal_weight is not None:
            pace = "On pace" if w.on_pace else "Behind pace"
            header_lines.append(
                f"Goal: {w.goal_weight:.1f} {unit}  [{pace_color}]{pace}[/{pace_color}]"
            )
        self.console.print(Panel("\n".join(header_lines), title="Progress"))

        c = report.compliance
        self.console.print(
            f"Days logged: {c.days_logged}  Workouts: {c.workouts_completed}  "
            f"Check-ins: {c.check_ins}"
        )

        if report.weeks:
            table = Table(title="Weekly Summary")
            table.add_column("Week", justify="right")
            table.add_column("Dates")
            table.add_column("Avg kcal", justify="right")
            table.add_column("On target", justify="right")
            table.add_column("Workouts", justify="right")
            table.add_column("Water/Steps/Sleep", justify="right")
            for week in report.weeks:
                table.add_row(
                    str(week.week_number),
                    f"{week.start.strftime('%b %d')} - {week.end.strftime('%b %d')}",
                    f"{week.average_calories:.0f}" if week.average_calories is not None else "-",
                    str(week.days_on_target) if week.days_on_target is not None else "-",
                    str(week.workouts_completed),
                    f"{week.water_days}/{week.step_days}/{week.sleep_days}",
                )
            self.console.print(table)


class JSONFormatter:
    """Format reports as JSON."""

    def format(self, report: ProgressReport) -> str:
        return json.dumps(report.to_dict(), indent=2)


class MarkdownFormatter:
    """Format reports as Markdown."""

    def format(self, report: ProgressReport) -> str:
        w = report.weight
        unit = report.challenge.unit
        lines = [
            "# Challenge Progress",
            "",
            f"**Generated:** {report.generated_on.isoformat()}  ",
            f"**Status:** {report.status}  ",
            f"**Start date:** {report.challenge.start_date.isoformat()}  ",
            f"**Current week:** {w.current_week}",
            "",
            "## Weight",
            "",
            f"- Start: {w.start_weight:.1f} {unit}",
            f"- Current: {w.current_weight:.1f} {unit} ({w.change:+.1f} {unit})",
        ]
        if w.goal_weight is not None:
            lines.append(f"- Goal: {w.goal_weight:.1f} {unit}")
            lines.append(f"- Expected now: {w.expected_current_weight:.1f} {unit}")
            lines.append(f"- Pace: {'on pace' if w.on_pace else 'behind pace'}")
        if w.percent_to_goal is not None:
            lines.append(f"- Progress to goal: {w.percent_to_goal:.1f}%")

        c = report.compliance
        lines.extend([
            "",
            "## Compliance",
            "",
            f"- Days logged: {c.days_logged}",
            f"- Workouts completed: {c.workouts_completed}",
            f"- Weekly check-ins: {c.check_ins}",
        ])

        if report.weeks:
            lines.extend([
                "",
                "## Weekly Summary",
                "",
                "| Week | Dates | Avg kcal | On target | Workouts | Water | Steps | Sleep |",
                "|-----:|-------|---------:|----------:|---------:|------:|------:|------:|",
            ])
            for week in report.weeks:
                avg = f"{week.average_calories:.0f}" if week.average_calories is not None else "-"
                target = str(week.days_on_target) if week.days_on_target is not None else "-"
                lines.append(
                    f"| {week.week_number} | {week.start.isoformat()} to {week.end.isoformat()} "
                    f"| {avg} | {target} | {week.workouts_completed} "
                    f"| {week.water_days} | {week.step_days} | {week.sleep_days} |"
                )

        if report.check_ins:
            lines.extend([
                "",
                "## Check-ins",
                "",
                "| Week | Weight | Waist | Body fat |",
                "|-----:|-------:|------:|---------:|",
            ])
            for check_in in report.check_ins:
                lines.append(
                    f"| {check_in.week_number} | {_fmt(check_in.weight)} "
                    f"| {_fmt(check_in.waist)} | {_fmt(check_in.body_fat)} |"
                )

        return "\n".join(lines) + "\n"


def _fmt(value: Optional[float]) -> str:
    return f"{value:.1f}" if value is not None else "-"


def format_progress(report: ProgressReport, output_format: str = "markdown") -> str:
    """Render a report as a string.

    Args:
        report: Progress report
        output_format: "json" or "markdown"

    Returns:
        Formatted string
    """
    if output_format == "json":
        return JSONFormatter().format(report)
    elif output_format == "markdown":
        return MarkdownFormatter().format(report)
    else:
        raise ValueError(f"Unknown output format: {output_format}")
