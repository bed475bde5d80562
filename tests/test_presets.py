"""Tests for fasting presets and schedules."""

from __future__ import annotations

from datetime import datetime

import pytest

from cutplan.errors import ParseError
from cutplan.fasting.presets import (
    FastingSchedule,
    FastingType,
    eating_end_time,
    parse_fasting_type,
)


class TestParseFastingType:
    def test_known_types(self) -> None:
        assert parse_fasting_type("16:8") == FastingType.SIXTEEN_EIGHT
        assert parse_fasting_type("NONE") == FastingType.NONE
        assert parse_fasting_type(FastingType.CUSTOM) == FastingType.CUSTOM

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown fasting type"):
            parse_fasting_type("12:12")


class TestEatingEndTime:
    """Tests for deriving the window end from a preset."""

    def test_sixteen_eight(self) -> None:
        assert eating_end_time("12:00", "16:8") == "20:00"

    def test_wraps_past_midnight(self) -> None:
        assert eating_end_time("20:00", "16:8") == "04:00"

    def test_twenty_four(self) -> None:
        assert eating_end_time("14:00", "20:4") == "18:00"

    def test_end_lands_on_the_hour(self) -> None:
        """Minutes of the start are dropped when deriving the end."""
        assert eating_end_time("12:30", "18:6") == "18:00"

    def test_none_returns_start(self) -> None:
        assert eating_end_time("12:00", "none") == "12:00"

    def test_custom_needs_explicit_end(self) -> None:
        with pytest.raises(ValueError):
            eating_end_time("12:00", "custom")

    def test_bad_start(self) -> None:
        with pytest.raises(ParseError):
            eating_end_time("25:00", "16:8")


class TestFastingSchedule:
    """Tests for FastingSchedule."""

    def test_from_preset(self) -> None:
        schedule = FastingSchedule.from_preset("16:8", "12:00")
        assert schedule.fasting_type == FastingType.SIXTEEN_EIGHT
        assert schedule.eating_end == "20:00"
        assert schedule.fasting_hours == pytest.approx(16.0)

    def test_custom_window(self) -> None:
        schedule = FastingSchedule.from_preset("custom", "10:00", "18:30")
        assert schedule.window.duration_minutes == 510
        assert schedule.fasting_hours == pytest.approx(15.5)

    def test_custom_without_end(self) -> None:
        with pytest.raises(ValueError):
            FastingSchedule.from_preset("custom", "10:00")

    def test_none_is_unrestricted(self) -> None:
        schedule = FastingSchedule.from_preset("none", "12:00")
        assert schedule.window.is_unrestricted
        assert schedule.fasting_hours == 0.0
        progress = schedule.progress(15 * 60)
        assert progress.inside_window
        assert progress.minutes_remaining == 0

    def test_none_without_start_is_unrestricted(self) -> None:
        schedule = FastingSchedule(fasting_type="none")
        assert schedule.window.is_unrestricted
        assert schedule.fasting_hours == 0.0
        progress = schedule.progress(10 * 60)
        assert progress.inside_window
        assert progress.minutes_remaining == 0

    def test_no_times_configured(self) -> None:
        """No stored times means no window, not a default one."""
        schedule = FastingSchedule()
        assert schedule.window is None
        assert schedule.fasting_hours is None
        assert schedule.progress(720) is None

    def test_string_type_is_parsed(self) -> None:
        schedule = FastingSchedule(fasting_type="18:6", eating_start="12:00", eating_end="18:00")
        assert schedule.fasting_type == FastingType.EIGHTEEN_SIX

    def test_invalid_stored_time(self) -> None:
        with pytest.raises(ParseError):
            FastingSchedule(fasting_type="16:8", eating_start="noon", eating_end="20:00")

    def test_progress_from_datetime(self) -> None:
        schedule = FastingSchedule.from_preset("16:8", "12:00")
        progress = schedule.progress(datetime(2024, 1, 1, 15, 0))
        assert progress.inside_window
        assert progress.minutes_remaining == 300
