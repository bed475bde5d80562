"""Tests for progress report formatting."""

from __future__ import annotations

import json
from datetime import date
from io import StringIO

import pytest
from rich.console import Console

from cutplan.export.formatters import (
    MarkdownFormatter,
    TableFormatter,
    build_report,
    format_progress,
)
from cutplan.tracking.models import Challenge, DayLog, WeeklyCheckIn, WorkoutLog


@pytest.fixture
def report():
    challenge = Challenge(
        challenge_id=7,
        start_date=date(2024, 1, 1),
        start_weight=200.0,
        goal_weight=183.0,
        target_calories=2000,
    )
    return build_report(
        challenge,
        date(2024, 1, 10),
        day_logs=[
            DayLog(None, 7, date(2024, 1, 1), calories=1950),
            DayLog(None, 7, date(2024, 1, 8), calories=2200),
        ],
        workouts=[WorkoutLog(None, 7, date(2024, 1, 2), "Legs")],
        check_ins=[WeeklyCheckIn(None, 7, 1, weight=198.4, waist=37.5)],
    )


class TestBuildReport:
    def test_weeks_so_far(self, report) -> None:
        assert [w.week_number for w in report.weeks] == [1, 2]
        assert report.status == "ACTIVE"
        assert report.weight.current_weight == pytest.approx(198.4)

    def test_before_start_has_no_weeks(self) -> None:
        challenge = Challenge(None, date(2024, 1, 8), 200.0)
        report = build_report(challenge, date(2024, 1, 3))
        assert report.weeks == []
        assert report.status == "PRE_CHALLENGE"


class TestFormatProgress:
    """Tests for format_progress."""

    def test_json(self, report) -> None:
        data = json.loads(format_progress(report, "json"))
        assert data["challenge_id"] == 7
        assert data["weight"]["current_weight"] == pytest.approx(198.4)
        assert data["weeks"][0]["start"] == "2024-01-01"
        assert data["check_ins"][0]["waist"] == pytest.approx(37.5)

    def test_markdown(self, report) -> None:
        text = format_progress(report, "markdown")
        assert text.startswith("# Challenge Progress")
        assert "## Weight" in text
        assert "## Weekly Summary" in text
        assert "| 1 | 2024-01-01 to 2024-01-07 | 1950 | 1 | 1 |" in text
        assert "## Check-ins" in text
        assert text == MarkdownFormatter().format(report)

    def test_unknown_format(self, report) -> None:
        with pytest.raises(ValueError, match="Unknown output format"):
            format_progress(report, "pdf")


class TestTableFormatter:
    def test_prints_summary(self, report) -> None:
        buffer = StringIO()
        TableFormatter(Console(file=buffer, width=120)).format(report)
        output = buffer.getvalue()
        assert "CHALLENGE PROGRESS" in output
        assert "Weekly Summary" in output
        assert "198.4" in output
