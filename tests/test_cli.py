"""Tests for CLI commands."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from cutplan.cli import app

runner = CliRunner()


def invoke_json(args: list[str]) -> dict:
    result = runner.invoke(app, [*args, "--json"])
    return json.loads(result.stdout)


@pytest.fixture
def challenge(cli_db):
    """A 16:8 challenge created through the CLI."""
    result = runner.invoke(
        app,
        ["challenge", "create", "--weight", "200", "--goal", "183", "--start", "2024-01-01", "--json"],
    )
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)["data"]


class TestMainCommands:
    """Tests for main CLI commands."""

    def test_help(self):
        """Test that --help works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "challenge" in result.output.lower()

    def test_subcommand_help(self):
        for group in ("challenge", "fasting", "tdee", "week", "log", "checkin", "reflect"):
            result = runner.invoke(app, [group, "--help"])
            assert result.exit_code == 0, group


class TestChallengeCommands:
    """Tests for challenge subcommands."""

    def test_create_uses_settings_defaults(self, challenge):
        assert challenge["start_date"] == "2024-01-01"
        assert challenge["fasting_type"] == "16:8"
        assert challenge["eating_start_time"] == "12:00"
        assert challenge["eating_end_time"] == "20:00"
        assert challenge["step_goal"] == 10000

    def test_create_requires_weight(self, cli_db):
        result = runner.invoke(app, ["challenge", "create"])
        assert result.exit_code != 0

    def test_create_rejects_bad_date(self, cli_db):
        result = runner.invoke(app, ["challenge", "create", "--weight", "200", "--start", "Jan 1", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["success"] is False

    def test_show_without_challenge(self, cli_db):
        result = runner.invoke(app, ["challenge", "show", "--json"])
        assert result.exit_code == 1
        assert "No challenge found" in json.loads(result.stdout)["errors"][0]

    def test_show(self, challenge):
        data = invoke_json(["challenge", "show"])["data"]
        assert data["challenge_id"] == challenge["challenge_id"]
        assert data["goal_weight"] == 183.0

    def test_update(self, challenge):
        response = invoke_json(["challenge", "update", "--goal", "180", "--steps", "12000"])
        assert response["success"]
        assert response["data"]["goal_weight"] == 180.0
        assert response["data"]["step_goal"] == 12000

    def test_update_nothing(self, challenge):
        result = runner.invoke(app, ["challenge", "update"])
        assert result.exit_code == 1


class TestFastingCommands:
    """Tests for fasting subcommands."""

    def test_status_inside_window(self, challenge):
        data = invoke_json(["fasting", "status", "--at", "15:00"])["data"]
        assert data["inside_window"] is True
        assert data["minutes_remaining"] == 300
        assert data["remaining_text"] == "5h 0m"
        assert data["window"] == "12:00-20:00"

    def test_status_outside_window(self, challenge):
        data = invoke_json(["fasting", "status", "--at", "21:00"])["data"]
        assert data["inside_window"] is False
        assert data["minutes_remaining"] == 900

    def test_status_bad_time(self, challenge):
        result = runner.invoke(app, ["fasting", "status", "--at", "25:00"])
        assert result.exit_code == 1

    def test_set_wrapping_preset(self, challenge):
        data = invoke_json(["fasting", "set", "18:6", "--start", "20:00"])["data"]
        assert data["eating_end_time"] == "02:00"
        status = invoke_json(["fasting", "status", "--at", "01:00"])["data"]
        assert status["inside_window"] is True
        assert status["minutes_remaining"] == 60

    def test_set_none_is_always_open(self, challenge):
        invoke_json(["fasting", "set", "none"])
        status = invoke_json(["fasting", "status", "--at", "03:00"])["data"]
        assert status["inside_window"] is True
        assert status["minutes_remaining"] == 0

    def test_set_shows_preset_description(self, challenge):
        result = runner.invoke(app, ["fasting", "set", "20:4", "--start", "14:00"])
        assert result.exit_code == 0, result.output
        assert "Fast 20h, eat 4h" in result.output

    def test_set_custom_requires_end(self, challenge):
        result = runner.invoke(app, ["fasting", "set", "custom", "--start", "10:00"])
        assert result.exit_code == 1


class TestTdeeCommands:
    """Tests for tdee calc."""

    def test_calc_metric(self, isolated_settings):
        data = invoke_json([
            "tdee", "calc", "--sex", "male", "--age", "30",
            "--weight", "81.6", "--height", "178", "--metric",
        ])["data"]
        assert data["bmr"] == 1865
        assert data["tdee"] == 2891
        assert data["target_calories"] == 2391
        assert data["protein_grams"] == 180
        assert data["fat_grams"] == 66
        assert data["below_safe_minimum"] is False

    def test_calc_missing_inputs(self, isolated_settings):
        result = runner.invoke(app, ["tdee", "calc", "--sex", "male", "--json"])
        assert result.exit_code == 1

    def test_calc_unknown_sex(self, isolated_settings):
        result = runner.invoke(app, [
            "tdee", "calc", "--sex", "other", "--age", "30",
            "--weight", "180", "--height", "70", "--json",
        ])
        assert result.exit_code == 1
        assert "male or female" in json.loads(result.stdout)["errors"][0]

    def test_calc_save(self, challenge):
        invoke_json([
            "tdee", "calc", "--sex", "male", "--age", "30",
            "--weight", "81.6", "--height", "178", "--metric",
            "--deficit", "aggressive", "--save",
        ])
        data = invoke_json(["challenge", "show"])["data"]
        assert data["tdee_estimate"] == 2891
        assert data["target_calories"] == 2141
        assert data["deficit_level"] == "aggressive"


class TestWeekCommands:
    def test_show(self):
        data = invoke_json(["week", "show", "--start", "2024-01-01", "--date", "2024-01-08"])["data"]
        assert data["week"] == 2
        assert data["week_start"] == "2024-01-08"
        assert data["status"] == "ACTIVE"

    def test_show_before_start(self):
        data = invoke_json(["week", "show", "--start", "2024-01-08", "--date", "2024-01-01"])["data"]
        assert data["week"] == 0
        assert data["status"] == "PRE_CHALLENGE"

    def test_monday(self):
        data = invoke_json(["week", "monday", "3", "--start", "2024-01-01"])["data"]
        assert data["monday"] == "2024-01-15"

    def test_monday_rejects_week_zero(self):
        result = runner.invoke(app, ["week", "monday", "0", "--start", "2024-01-01"])
        assert result.exit_code == 1


class TestLogCommands:
    """Tests for log and check-in subcommands."""

    def test_log_day(self, challenge):
        data = invoke_json(["log", "day", "--calories", "1800", "--protein", "160", "--date", "2024-01-02"])["data"]
        assert data["calories"] == 1800
        assert data["protein"] == 160

    def test_log_day_bad_date(self, challenge):
        result = runner.invoke(app, ["log", "day", "--calories", "1800", "--date", "2024-13-01"])
        assert result.exit_code == 1

    def test_log_workout(self, challenge):
        data = invoke_json(["log", "workout", "Push", "--duration", "45", "--date", "2024-01-02"])["data"]
        assert data["workout_type"] == "Push"

    def test_log_workout_unknown_type(self, challenge):
        result = runner.invoke(app, ["log", "workout", "Yoga"])
        assert result.exit_code == 1

    def test_log_habits_applies_goals(self, challenge):
        data = invoke_json([
            "log", "habits", "--water", "--steps", "12000", "--sleep", "7", "--date", "2024-01-02",
        ])["data"]
        assert data["water_done"] is True
        assert data["steps_done"] is True
        assert data["sleep_done"] is False

    def test_checkin_add_and_list(self, challenge):
        added = invoke_json(["checkin", "add", "198.5", "--week", "1", "--waist", "38"])["data"]
        assert added["change_since_start"] == pytest.approx(-1.5)
        listed = invoke_json(["checkin", "list"])["data"]["check_ins"]
        assert len(listed) == 1
        assert listed[0]["waist"] == pytest.approx(38.0)

    def test_checkin_week_out_of_range(self, challenge):
        result = runner.invoke(app, ["checkin", "add", "190", "--week", "18"])
        assert result.exit_code == 1


class TestFoodCommands:
    """Tests for food entries and daily meal totals."""

    def test_log_food(self, challenge):
        data = invoke_json([
            "log", "food", "Oats", "--calories", "150", "--protein", "5",
            "--servings", "2", "--meal", "breakfast", "--date", "2024-01-02",
        ])["data"]
        assert data["meal_type"] == "Breakfast"
        assert data["calories"] == 300
        assert data["protein"] == 10
        assert data["day_calories"] == 300
        assert data["entry_id"] is not None

    def test_log_food_rejects_unknown_meal(self, challenge):
        result = runner.invoke(app, ["log", "food", "Oats", "--calories", "150", "--meal", "Brunch"])
        assert result.exit_code == 1

    def test_log_food_requires_calories(self, challenge):
        result = runner.invoke(app, ["log", "food", "Oats"])
        assert result.exit_code != 0

    def test_meals_totals(self, challenge):
        invoke_json(["log", "food", "Eggs", "-c", "140", "--protein", "12", "-m", "Breakfast", "-d", "2024-01-02"])
        invoke_json(["log", "food", "Salad", "-c", "220", "-m", "Lunch", "-d", "2024-01-02"])
        invoke_json(["log", "food", "Steak", "-c", "600", "-m", "Dinner", "-d", "2024-01-03"])
        data = invoke_json(["log", "meals", "--date", "2024-01-02"])["data"]
        assert data["entries"] == 2
        assert data["total"]["calories"] == 360
        assert data["meals"]["Lunch"]["calories"] == 220
        assert data["meals"]["Dinner"]["calories"] == 0
        assert [f["food_name"] for f in data["foods"]] == ["Eggs", "Salad"]
        assert data["synced"] is False

    def test_meals_sync_writes_day_log(self, challenge):
        invoke_json(["log", "food", "Eggs", "-c", "140", "--protein", "12", "-d", "2024-01-02"])
        invoke_json(["log", "food", "Toast", "-c", "80", "--servings", "2", "-d", "2024-01-02"])
        response = invoke_json(["log", "meals", "--date", "2024-01-02", "--sync"])
        assert response["data"]["synced"] is True
        progress = invoke_json(["progress"])["data"]
        assert progress["compliance"]["days_logged"] == 1

    def test_meals_sync_without_food(self, challenge):
        result = runner.invoke(app, ["log", "meals", "--date", "2024-01-02", "--sync"])
        assert result.exit_code == 1

    def test_meals_table_output(self, challenge):
        invoke_json(["log", "food", "Apple", "-c", "95", "-d", "2024-01-02"])
        result = runner.invoke(app, ["log", "meals", "--date", "2024-01-02"])
        assert result.exit_code == 0, result.output
        assert "Apple" in result.output
        assert "Total" in result.output

    def test_remove_food(self, challenge):
        entry_id = invoke_json(["log", "food", "Cookie", "-c", "200", "-d", "2024-01-02"])["data"]["entry_id"]
        removed = invoke_json(["log", "remove-food", str(entry_id)])
        assert removed["success"]
        data = invoke_json(["log", "meals", "--date", "2024-01-02"])["data"]
        assert data["entries"] == 0
        result = runner.invoke(app, ["log", "remove-food", str(entry_id)])
        assert result.exit_code == 1


class TestReflectCommands:
    """Tests for weekly reflections."""

    def test_add_and_show(self, challenge):
        added = invoke_json([
            "reflect", "add", "--week", "1", "--went-well", "Hit my steps",
            "--was-hard", "Late snacks", "--mood", "4", "--energy", "3", "--overall", "4",
        ])["data"]
        assert added["week_number"] == 1
        assert added["went_well"] == "Hit my steps"
        assert added["mood_rating"] == 4
        shown = invoke_json(["reflect", "show", "--week", "1"])["data"]["reflections"]
        assert shown[0]["was_hard"] == "Late snacks"

    def test_add_replaces_week(self, challenge):
        invoke_json(["reflect", "add", "--week", "2", "--learned", "Meal prep helps"])
        invoke_json(["reflect", "add", "--week", "2", "--focus", "Sleep by 11"])
        reflections = invoke_json(["reflect", "show"])["data"]["reflections"]
        assert len(reflections) == 1
        assert reflections[0]["learned"] is None
        assert reflections[0]["next_week_focus"] == "Sleep by 11"

    def test_rating_out_of_range(self, challenge):
        result = runner.invoke(app, ["reflect", "add", "--week", "1", "--mood", "6", "--json"])
        assert result.exit_code == 1
        assert "mood_rating" in json.loads(result.stdout)["errors"][0]

    def test_show_missing_week(self, challenge):
        result = runner.invoke(app, ["reflect", "show", "--week", "5"])
        assert result.exit_code == 1

    def test_show_panels(self, challenge):
        invoke_json(["reflect", "add", "--week", "1", "--went-well", "Consistent workouts", "--overall", "5"])
        result = runner.invoke(app, ["reflect", "show"])
        assert result.exit_code == 0, result.output
        assert "Consistent workouts" in result.output
        assert "Overall 5/5" in result.output


class TestProgressAndExport:
    def test_progress_json(self, challenge):
        invoke_json(["checkin", "add", "196", "--week", "2"])
        response = invoke_json(["progress"])
        assert response["success"]
        assert response["data"]["weight"]["current_weight"] == pytest.approx(196.0)
        assert len(response["data"]["weeks"]) == 17

    def test_progress_without_challenge(self, cli_db):
        result = runner.invoke(app, ["progress"])
        assert result.exit_code == 1

    def test_export_markdown(self, challenge, tmp_path):
        out = tmp_path / "report.md"
        result = runner.invoke(app, ["export", "--format", "markdown", "--output", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text().startswith("# Challenge Progress")

    def test_export_json_stdout(self, challenge):
        result = runner.invoke(app, ["export", "--format", "json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["challenge_id"] == challenge["challenge_id"]

    def test_export_unknown_format(self, challenge):
        result = runner.invoke(app, ["export", "--format", "pdf"])
        assert result.exit_code == 1
