"""Database queries for the challenge and its logs."""

from __future__ import annotations

import dataclasses
import logging
import sqlite3
from datetime import date, datetime
from typing import Any, Optional, TypeVar

from cutplan.errors import StorageError
from cutplan.tracking.models import (
    CHALLENGE_UPDATABLE_FIELDS,
    FOOD_ENTRY_UPDATABLE_FIELDS,
    Challenge,
    DayLog,
    FoodEntry,
    HabitLog,
    WeeklyCheckIn,
    WeeklyReflection,
    WorkoutLog,
)
from cutplan.tracking.weeks import parse_date

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CHALLENGE_COLUMNS = (
    "challenge_id, start_date, start_weight, goal_weight, unit, step_goal, "
    "sleep_goal, activity_level, tdee_estimate, target_calories, "
    "target_weekly_loss, deficit_level, workouts_per_week, fasting_type, "
    "eating_start_time, eating_end_time, target_protein_grams, "
    "target_carbs_grams, target_fat_grams, created_at"
)


def _row_to_challenge(row: sqlite3.Row) -> Challenge:
    return Challenge(
        challenge_id=row["challenge_id"],
        start_date=date.fromisoformat(row["start_date"]),
        start_weight=row["start_weight"],
        goal_weight=row["goal_weight"],
        unit=row["unit"],
        step_goal=row["step_goal"],
        sleep_goal=row["sleep_goal"],
        activity_level=row["activity_level"],
        tdee_estimate=row["tdee_estimate"],
        target_calories=row["target_calories"],
        target_weekly_loss=row["target_weekly_loss"],
        deficit_level=row["deficit_level"],
        workouts_per_week=row["workouts_per_week"],
        fasting_type=row["fasting_type"],
        eating_start_time=row["eating_start_time"],
        eating_end_time=row["eating_end_time"],
        target_protein_grams=row["target_protein_grams"],
        target_carbs_grams=row["target_carbs_grams"],
        target_fat_grams=row["target_fat_grams"],
        created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
    )


def _challenge_values(challenge: Challenge) -> tuple:
    return (
        challenge.start_date.isoformat(),
        challenge.start_weight,
        challenge.goal_weight,
        challenge.unit,
        challenge.step_goal,
        challenge.sleep_goal,
        challenge.activity_level,
        challenge.tdee_estimate,
        challenge.target_calories,
        challenge.target_weekly_loss,
        challenge.deficit_level,
        challenge.workouts_per_week,
        challenge.fasting_type,
        challenge.eating_start_time,
        challenge.eating_end_time,
        challenge.target_protein_grams,
        challenge.target_carbs_grams,
        challenge.target_fat_grams,
    )


class ChallengeQueries:
    """Database queries for challenges."""

    @staticmethod
    def create(conn: sqlite3.Connection, challenge: Challenge) -> int:
        """Insert a challenge and return its challenge_id."""
        cursor = conn.execute(
            """
            INSERT INTO challenges (start_date, start_weight, goal_weight, unit,
                                    step_goal, sleep_goal, activity_level,
                                    tdee_estimate, target_calories,
                                    target_weekly_loss, deficit_level,
                                    workouts_per_week, fasting_type,
                                    eating_start_time, eating_end_time,
                                    target_protein_grams, target_carbs_grams,
                                    target_fat_grams)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            _challenge_values(challenge),
        )
        conn.commit()
        challenge_id = cursor.lastrowid or 0
        logger.info("Created challenge %d starting %s", challenge_id, challenge.start_date)
        return challenge_id

    @staticmethod
    def get(conn: sqlite3.Connection, challenge_id: int) -> Optional[Challenge]:
        """Get a challenge by ID."""
        row = conn.execute(
            f"SELECT {_CHALLENGE_COLUMNS} FROM challenges WHERE challenge_id = ?",
            (challenge_id,),
        ).fetchone()
        return _row_to_challenge(row) if row else None

    @staticmethod
    def get_default(conn: sqlite3.Connection) -> Optional[Challenge]:
        """Get the current challenge (the most recently created one)."""
        row = conn.execute(
            f"SELECT {_CHALLENGE_COLUMNS} FROM challenges "
            "ORDER BY challenge_id DESC LIMIT 1"
        ).fetchone()
        return _row_to_challenge(row) if row else None

    @staticmethod
    def update(conn: sqlite3.Connection, challenge_id: int, **fields: Any) -> Challenge:
        """Patch named fields of a challenge and return the updated record.

        Raises:
            ValueError: Unknown challenge, unknown field, or a value that
                        fails model validation
        """
        unknown = set(fields) - set(CHALLENGE_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update challenge fields: {', '.join(sorted(unknown))}")

        existing = ChallengeQueries.get(conn, challenge_id)
        if existing is None:
            raise ValueError(f"Challenge {challenge_id} not found")

        if "start_date" in fields:
            fields["start_date"] = parse_date(fields["start_date"])
        updated = dataclasses.replace(existing, **fields)

        conn.execute(
            """
            UPDATE challenges
            SET start_date = ?, start_weight = ?, goal_weight = ?, unit = ?,
                step_goal = ?, sleep_goal = ?, activity_level = ?,
                tdee_estimate = ?, target_calories = ?, target_weekly_loss = ?,
                deficit_level = ?, workouts_per_week = ?, fasting_type = ?,
                eating_start_time = ?, eating_end_time = ?,
                target_protein_grams = ?, target_carbs_grams = ?,
                target_fat_grams = ?
            WHERE challenge_id = ?
            """,
            _challenge_values(updated) + (challenge_id,),
        )
        conn.commit()
        logger.debug("Updated challenge %d: %s", challenge_id, sorted(fields))
        return updated


def _saved(record: Optional[T], table: str) -> T:
    """Return a row read back after a write, or raise if it is missing."""
    if record is None:
        raise StorageError(f"Saved row could not be read back from {table}")
    return record


def _date_range_clause(start: Optional[date], end: Optional[date]) -> tuple[str, list]:
    clauses = []
    params: list = []
    if start is not None:
        clauses.append("date >= ?")
        params.append(start.isoformat())
    if end is not None:
        clauses.append("date <= ?")
        params.append(end.isoformat())
    sql = "".join(f" AND {c}" for c in clauses)
    return sql, params


class DayLogQueries:
    """Database queries for daily nutrition logs."""

    @staticmethod
    def save(conn: sqlite3.Connection, log: DayLog) -> DayLog:
        """
        Save a day log. An existing log for the same date is replaced.
        """
        conn.execute(
            """
            INSERT INTO day_logs (challenge_id, date, calories, protein, carbs,
                                  fat, notes, skipped, skipped_reason)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (challenge_id, date) DO UPDATE SET
                calories = excluded.calories,
                protein = excluded.protein,
                carbs = excluded.carbs,
                fat = excluded.fat,
                notes = excluded.notes,
                skipped = excluded.skipped,
                skipped_reason = excluded.skipped_reason,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                log.challenge_id,
                log.date.isoformat(),
                log.calories,
                log.protein,
                log.carbs,
                log.fat,
                log.notes,
                log.skipped,
                log.skipped_reason,
            ),
        )
        conn.commit()
        return _saved(DayLogQueries.get_by_date(conn, log.challenge_id, log.date), "day_logs")

    @staticmethod
    def _from_row(row: sqlite3.Row) -> DayLog:
        return DayLog(
            log_id=row["log_id"],
            challenge_id=row["challenge_id"],
            date=date.fromisoformat(row["date"]),
            calories=row["calories"],
            protein=row["protein"],
            carbs=row["carbs"],
            fat=row["fat"],
            notes=row["notes"],
            skipped=bool(row["skipped"]),
            skipped_reason=row["skipped_reason"],
        )

    @staticmethod
    def get_by_date(conn: sqlite3.Connection, challenge_id: int, day: date) -> Optional[DayLog]:
        row = conn.execute(
            "SELECT * FROM day_logs WHERE challenge_id = ? AND date = ?",
            (challenge_id, day.isoformat()),
        ).fetchone()
        return DayLogQueries._from_row(row) if row else None

    @staticmethod
    def list_all(
        conn: sqlite3.Connection,
        challenge_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[DayLog]:
        """Day logs in date order, optionally limited to a date range."""
        range_sql, params = _date_range_clause(start, end)
        rows = conn.execute(
            f"SELECT * FROM day_logs WHERE challenge_id = ?{range_sql} ORDER BY date",
            [challenge_id, *params],
        ).fetchall()
        return [DayLogQueries._from_row(row) for row in rows]


class WorkoutQueries:
    """Database queries for workout logs."""

    @staticmethod
    def save(conn: sqlite3.Connection, log: WorkoutLog) -> WorkoutLog:
        """Save a workout; an existing entry for the same date is replaced."""
        conn.execute(
            """
            INSERT INTO workout_logs (challenge_id, date, workout_type,
                                      duration_min, notes)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT (challenge_id, date) DO UPDATE SET
                workout_type = excluded.workout_type,
                duration_min = excluded.duration_min,
                notes = excluded.notes,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                log.challenge_id,
                log.date.isoformat(),
                log.workout_type,
                log.duration_min,
                log.notes,
            ),
        )
        conn.commit()
        return _saved(WorkoutQueries.get_by_date(conn, log.challenge_id, log.date), "workout_logs")

    @staticmethod
    def _from_row(row: sqlite3.Row) -> WorkoutLog:
        return WorkoutLog(
            log_id=row["log_id"],
            challenge_id=row["challenge_id"],
            date=date.fromisoformat(row["date"]),
            workout_type=row["workout_type"],
            duration_min=row["duration_min"],
            notes=row["notes"],
        )

    @staticmethod
    def get_by_date(conn: sqlite3.Connection, challenge_id: int, day: date) -> Optional[WorkoutLog]:
        row = conn.execute(
            "SELECT * FROM workout_logs WHERE challenge_id = ? AND date = ?",
            (challenge_id, day.isoformat()),
        ).fetchone()
        return WorkoutQueries._from_row(row) if row else None

    @staticmethod
    def list_all(
        conn: sqlite3.Connection,
        challenge_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[WorkoutLog]:
        range_sql, params = _date_range_clause(start, end)
        rows = conn.execute(
            f"SELECT * FROM workout_logs WHERE challenge_id = ?{range_sql} ORDER BY date",
            [challenge_id, *params],
        ).fetchall()
        return [WorkoutQueries._from_row(row) for row in rows]


class HabitQueries:
    """Database queries for daily habit logs."""

    @staticmethod
    def save(conn: sqlite3.Connection, log: HabitLog) -> HabitLog:
        """Save a habit log; an existing entry for the same date is replaced."""
        conn.execute(
            """
            INSERT INTO habit_logs (challenge_id, date, water_done, steps,
                                    steps_done, sleep_hours, sleep_done)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (challenge_id, date) DO UPDATE SET
                water_done = excluded.water_done,
                steps = excluded.steps,
                steps_done = excluded.steps_done,
                sleep_hours = excluded.sleep_hours,
                sleep_done = excluded.sleep_done,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                log.challenge_id,
                log.date.isoformat(),
                log.water_done,
                log.steps,
                log.steps_done,
                log.sleep_hours,
                log.sleep_done,
            ),
        )
        conn.commit()
        return _saved(HabitQueries.get_by_date(conn, log.challenge_id, log.date), "habit_logs")

    @staticmethod
    def _from_row(row: sqlite3.Row) -> HabitLog:
        return HabitLog(
            log_id=row["log_id"],
            challenge_id=row["challenge_id"],
            date=date.fromisoformat(row["date"]),
            water_done=bool(row["water_done"]),
            steps=row["steps"],
            steps_done=bool(row["steps_done"]),
            sleep_hours=row["sleep_hours"],
            sleep_done=bool(row["sleep_done"]),
        )

    @staticmethod
    def get_by_date(conn: sqlite3.Connection, challenge_id: int, day: date) -> Optional[HabitLog]:
        row = conn.execute(
            "SELECT * FROM habit_logs WHERE challenge_id = ? AND date = ?",
            (challenge_id, day.isoformat()),
        ).fetchone()
        return HabitQueries._from_row(row) if row else None

    @staticmethod
    def list_all(
        conn: sqlite3.Connection,
        challenge_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[HabitLog]:
        range_sql, params = _date_range_clause(start, end)
        rows = conn.execute(
            f"SELECT * FROM habit_logs WHERE challenge_id = ?{range_sql} ORDER BY date",
            [challenge_id, *params],
        ).fetchall()
        return [HabitQueries._from_row(row) for row in rows]


class CheckInQueries:
    """Database queries for weekly check-ins."""

    @staticmethod
    def save(conn: sqlite3.Connection, check_in: WeeklyCheckIn) -> WeeklyCheckIn:
        """Save a check-in; an existing one for the same week is replaced."""
        conn.execute(
            """
            INSERT INTO weekly_check_ins (challenge_id, week_number, weight,
                                          waist, hips, chest, body_fat, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (challenge_id, week_number) DO UPDATE SET
                weight = excluded.weight,
                waist = excluded.waist,
                hips = excluded.hips,
                chest = excluded.chest,
                body_fat = excluded.body_fat,
                notes = excluded.notes,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                check_in.challenge_id,
                check_in.week_number,
                check_in.weight,
                check_in.waist,
                check_in.hips,
                check_in.chest,
                check_in.body_fat,
                check_in.notes,
            ),
        )
        conn.commit()
        saved = CheckInQueries.get_for_week(conn, check_in.challenge_id, check_in.week_number)
        return _saved(saved, "weekly_check_ins")

    @staticmethod
    def _from_row(row: sqlite3.Row) -> WeeklyCheckIn:
        return WeeklyCheckIn(
            check_in_id=row["check_in_id"],
            challenge_id=row["challenge_id"],
            week_number=row["week_number"],
            weight=row["weight"],
            waist=row["waist"],
            hips=row["hips"],
            chest=row["chest"],
            body_fat=row["body_fat"],
            notes=row["notes"],
        )

    @staticmethod
    def get_for_week(
        conn: sqlite3.Connection, challenge_id: int, week_number: int
    ) -> Optional[WeeklyCheckIn]:
        row = conn.execute(
            "SELECT * FROM weekly_check_ins WHERE challenge_id = ? AND week_number = ?",
            (challenge_id, week_number),
        ).fetchone()
        return CheckInQueries._from_row(row) if row else None

    @staticmethod
    def list_all(conn: sqlite3.Connection, challenge_id: int) -> list[WeeklyCheckIn]:
        """All check-ins for a challenge in week order."""
        rows = conn.execute(
            "SELECT * FROM weekly_check_ins WHERE challenge_id = ? ORDER BY week_number",
            (challenge_id,),
        ).fetchall()
        return [CheckInQueries._from_row(row) for row in rows]


_FOOD_COLUMNS = (
    "challenge_id", "date", "time", "meal_type", "food_name", "brand", "barcode",
    "calories_per_serving", "protein_per_serving", "carbs_per_serving",
    "fat_per_serving", "fiber_per_serving", "sugar_per_serving",
    "sodium_per_serving", "cholesterol_per_serving", "serving_label",
    "serving_grams", "servings_count", "source",
)


def _food_values(entry: FoodEntry) -> tuple:
    return tuple(
        entry.date.isoformat() if column == "date" else getattr(entry, column)
        for column in _FOOD_COLUMNS
    )


class FoodEntryQueries:
    """Database queries for individual food entries."""

    @staticmethod
    def create(conn: sqlite3.Connection, entry: FoodEntry) -> FoodEntry:
        """Insert a food entry and return it with its entry_id."""
        placeholders = ", ".join("?" for _ in _FOOD_COLUMNS)
        cursor = conn.execute(
            f"INSERT INTO food_entries ({', '.join(_FOOD_COLUMNS)}) VALUES ({placeholders})",
            _food_values(entry),
        )
        conn.commit()
        logger.debug("Logged %s (%s) on %s", entry.food_name, entry.meal_type, entry.date)
        return _saved(FoodEntryQueries.get(conn, cursor.lastrowid or 0), "food_entries")

    @staticmethod
    def _from_row(row: sqlite3.Row) -> FoodEntry:
        return FoodEntry(
            entry_id=row["entry_id"],
            challenge_id=row["challenge_id"],
            date=date.fromisoformat(row["date"]),
            time=row["time"],
            meal_type=row["meal_type"],
            food_name=row["food_name"],
            brand=row["brand"],
            barcode=row["barcode"],
            calories_per_serving=row["calories_per_serving"],
            protein_per_serving=row["protein_per_serving"],
            carbs_per_serving=row["carbs_per_serving"],
            fat_per_serving=row["fat_per_serving"],
            fiber_per_serving=row["fiber_per_serving"],
            sugar_per_serving=row["sugar_per_serving"],
            sodium_per_serving=row["sodium_per_serving"],
            cholesterol_per_serving=row["cholesterol_per_serving"],
            serving_label=row["serving_label"],
            serving_grams=row["serving_grams"],
            servings_count=row["servings_count"],
            source=row["source"],
            created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
        )

    @staticmethod
    def get(conn: sqlite3.Connection, entry_id: int) -> Optional[FoodEntry]:
        row = conn.execute(
            "SELECT * FROM food_entries WHERE entry_id = ?", (entry_id,)
        ).fetchone()
        return FoodEntryQueries._from_row(row) if row else None

    @staticmethod
    def list_all(
        conn: sqlite3.Connection,
        challenge_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[FoodEntry]:
        """Food entries in date order (then entry order), optionally in a range."""
        range_sql, params = _date_range_clause(start, end)
        rows = conn.execute(
            f"SELECT * FROM food_entries WHERE challenge_id = ?{range_sql} "
            "ORDER BY date, entry_id",
            [challenge_id, *params],
        ).fetchall()
        return [FoodEntryQueries._from_row(row) for row in rows]

    @staticmethod
    def list_by_date(conn: sqlite3.Connection, challenge_id: int, day: date) -> list[FoodEntry]:
        return FoodEntryQueries.list_all(conn, challenge_id, start=day, end=day)

    @staticmethod
    def update(conn: sqlite3.Connection, entry_id: int, **fields: Any) -> FoodEntry:
        """Patch named fields of a food entry and return the updated record.

        Raises:
            ValueError: Unknown entry, unknown field, or a value that fails
                        model validation
        """
        unknown = set(fields) - set(FOOD_ENTRY_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update food entry fields: {', '.join(sorted(unknown))}")

        existing = FoodEntryQueries.get(conn, entry_id)
        if existing is None:
            raise ValueError(f"Food entry {entry_id} not found")

        if "date" in fields:
            fields["date"] = parse_date(fields["date"])
        updated = dataclasses.replace(existing, **fields)

        assignments = ", ".join(f"{column} = ?" for column in _FOOD_COLUMNS)
        conn.execute(
            f"UPDATE food_entries SET {assignments} WHERE entry_id = ?",
            _food_values(updated) + (entry_id,),
        )
        conn.commit()
        return updated

    @staticmethod
    def delete(conn: sqlite3.Connection, entry_id: int) -> bool:
        """Delete a food entry. Returns False if it did not exist."""
        cursor = conn.execute("DELETE FROM food_entries WHERE entry_id = ?", (entry_id,))
        conn.commit()
        return cursor.rowcount > 0


class ReflectionQueries:
    """Database queries for weekly reflections."""

    @staticmethod
    def save(conn: sqlite3.Connection, reflection: WeeklyReflection) -> WeeklyReflection:
        """Save a reflection; an existing one for the same week is replaced."""
        conn.execute(
            """
            INSERT INTO weekly_reflections (challenge_id, week_number, went_well,
                                            was_hard, improve_next_week, learned,
                                            next_week_focus, mood_rating,
                                            energy_rating, overall_rating)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (challenge_id, week_number) DO UPDATE SET
                went_well = excluded.went_well,
                was_hard = excluded.was_hard,
                improve_next_week = excluded.improve_next_week,
                learned = excluded.learned,
                next_week_focus = excluded.next_week_focus,
                mood_rating = excluded.mood_rating,
                energy_rating = excluded.energy_rating,
                overall_rating = excluded.overall_rating,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                reflection.challenge_id,
                reflection.week_number,
                reflection.went_well,
                reflection.was_hard,
                reflection.improve_next_week,
                reflection.learned,
                reflection.next_week_focus,
                reflection.mood_rating,
                reflection.energy_rating,
                reflection.overall_rating,
            ),
        )
        conn.commit()
        saved = ReflectionQueries.get_for_week(conn, reflection.challenge_id, reflection.week_number)
        return _saved(saved, "weekly_reflections")

    @staticmethod
    def _from_row(row: sqlite3.Row) -> WeeklyReflection:
        return WeeklyReflection(
            reflection_id=row["reflection_id"],
            challenge_id=row["challenge_id"],
            week_number=row["week_number"],
            went_well=row["went_well"],
            was_hard=row["was_hard"],
            improve_next_week=row["improve_next_week"],
            learned=row["learned"],
            next_week_focus=row["next_week_focus"],
            mood_rating=row["mood_rating"],
            energy_rating=row["energy_rating"],
            overall_rating=row["overall_rating"],
        )

    @staticmethod
    def get_for_week(
        conn: sqlite3.Connection, challenge_id: int, week_number: int
    ) -> Optional[WeeklyReflection]:
        row = conn.execute(
            "SELECT * FROM weekly_reflections WHERE challenge_id = ? AND week_number = ?",
            (challenge_id, week_number),
        ).fetchone()
        return ReflectionQueries._from_row(row) if row else None

    @staticmethod
    def list_all(conn: sqlite3.Connection, challenge_id: int) -> list[WeeklyReflection]:
        rows = conn.execute(
            "SELECT * FROM weekly_reflections WHERE challenge_id = ? ORDER BY week_number",
            (challenge_id,),
        ).fetchall()
        return [ReflectionQueries._from_row(row) for row in rows]
