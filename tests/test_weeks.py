"""Tests for the challenge calendar."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from cutplan.errors import DateError
from cutplan.tracking.weeks import (
    CHALLENGE_WEEKS,
    ChallengeStatus,
    challenge_end_date,
    challenge_status,
    current_week_number,
    day_of_challenge,
    monday_date_for_week,
    monday_of_week,
    next_monday,
    parse_date,
    start_date_for_new_challenge,
    week_dates,
    week_number,
)

START = date(2024, 1, 1)  # a Monday


class TestParseDate:
    def test_string(self) -> None:
        assert parse_date("2024-01-08") == date(2024, 1, 8)

    def test_date_passes_through(self) -> None:
        assert parse_date(START) is START

    def test_datetime_truncated(self) -> None:
        assert parse_date(datetime(2024, 1, 8, 23, 59)) == date(2024, 1, 8)

    @pytest.mark.parametrize("value", ["2024-02-30", "01/08/2024", "2024-1-8", "", "tomorrow"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(DateError):
            parse_date(value)


class TestWeekNumber:
    """Tests for week_number."""

    def test_first_day(self) -> None:
        assert week_number(START, START) == 1

    def test_last_day_of_week_one(self) -> None:
        assert week_number("2024-01-01", "2024-01-07") == 1

    def test_second_week(self) -> None:
        assert week_number("2024-01-01", "2024-01-08") == 2

    def test_final_week(self) -> None:
        assert week_number(START, date(2024, 4, 28)) == CHALLENGE_WEEKS

    def test_not_clamped_after_end(self) -> None:
        assert week_number(START, date(2024, 4, 29)) == CHALLENGE_WEEKS + 1

    def test_before_start_raises(self) -> None:
        with pytest.raises(DateError):
            week_number(START, date(2023, 12, 31))

    def test_bad_string(self) -> None:
        with pytest.raises(DateError):
            week_number("not-a-date", START)


class TestMondayDateForWeek:
    def test_week_three(self) -> None:
        assert monday_date_for_week("2024-01-01", 3) == date(2024, 1, 15)

    def test_week_one_is_start(self) -> None:
        assert monday_date_for_week(START, 1) == START

    def test_inverse_of_week_number(self) -> None:
        for week in range(1, CHALLENGE_WEEKS + 1):
            assert week_number(START, monday_date_for_week(START, week)) == week

    def test_rejects_week_zero(self) -> None:
        with pytest.raises(DateError):
            monday_date_for_week(START, 0)

    def test_week_dates(self) -> None:
        days = week_dates(START, 2)
        assert len(days) == 7
        assert days[0] == date(2024, 1, 8)
        assert days[-1] == date(2024, 1, 14)


class TestChallengeProgress:
    """Tests for current week, day and status."""

    def test_current_week_before_start(self) -> None:
        assert current_week_number(START, date(2023, 12, 25)) == 0

    def test_current_week(self) -> None:
        assert current_week_number(START, date(2024, 1, 10)) == 2

    def test_day_of_challenge(self) -> None:
        assert day_of_challenge(START, START) == 1
        assert day_of_challenge(START, date(2024, 1, 10)) == 10
        assert day_of_challenge(START, date(2023, 12, 25)) == 0

    def test_end_date(self) -> None:
        assert challenge_end_date(START) == date(2024, 4, 29)

    def test_status(self) -> None:
        assert challenge_status(START, date(2023, 12, 31)) == ChallengeStatus.PRE_CHALLENGE
        assert challenge_status(START, START) == ChallengeStatus.ACTIVE
        assert challenge_status(START, date(2024, 4, 28)) == ChallengeStatus.ACTIVE
        assert challenge_status(START, date(2024, 4, 29)) == ChallengeStatus.COMPLETE


class TestMondays:
    def test_monday_of_week(self) -> None:
        assert monday_of_week(date(2024, 1, 3)) == START
        assert monday_of_week(START) == START

    def test_next_monday_is_strictly_after(self) -> None:
        assert next_monday(START) == date(2024, 1, 8)
        assert next_monday(date(2024, 1, 7)) == date(2024, 1, 8)

    def test_new_challenge_starts_today_on_monday(self) -> None:
        assert start_date_for_new_challenge(START) == START

    def test_new_challenge_starts_next_monday(self) -> None:
        assert start_date_for_new_challenge(date(2024, 1, 3)) == date(2024, 1, 8)
