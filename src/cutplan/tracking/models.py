"""Data models for the challenge and its daily and weekly logs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from cutplan.fasting.presets import FastingSchedule, parse_fasting_type
from cutplan.fasting.window import parse_clock_time
from cutplan.profiles.body_calc import DeficitLevel, parse_activity_level
from cutplan.tracking.weeks import CHALLENGE_WEEKS

VALID_UNITS = ("lbs", "kg")
WORKOUT_TYPES = ("Push", "Pull", "Legs", "Plyo-Abs", "Run", "Rest")
MEAL_TYPES = ("Breakfast", "Lunch", "Dinner", "Snacks")
FOOD_SOURCES = ("manual", "barcode", "custom")
RATING_MIN, RATING_MAX = 1, 5

# Per-serving nutrients on a food entry, in display order
FOOD_NUTRIENTS = ("calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium", "cholesterol")

# Fields that may be changed after creation (challenge PATCH)
CHALLENGE_UPDATABLE_FIELDS = (
    "start_date",
    "start_weight",
    "goal_weight",
    "unit",
    "step_goal",
    "sleep_goal",
    "activity_level",
    "tdee_estimate",
    "target_calories",
    "target_weekly_loss",
    "deficit_level",
    "workouts_per_week",
    "fasting_type",
    "eating_start_time",
    "eating_end_time",
    "target_protein_grams",
    "target_carbs_grams",
    "target_fat_grams",
)


@dataclass
class Challenge:
    """A 17-week challenge plan and its derived targets."""

    challenge_id: Optional[int]
    start_date: date
    start_weight: float
    goal_weight: Optional[float] = None
    unit: str = "lbs"
    step_goal: int = 10000
    sleep_goal: float = 8.0
    activity_level: Optional[str] = None
    tdee_estimate: Optional[int] = None
    target_calories: Optional[int] = None
    target_weekly_loss: Optional[float] = None
    deficit_level: Optional[str] = None
    workouts_per_week: int = 4
    fasting_type: Optional[str] = None
    eating_start_time: Optional[str] = None
    eating_end_time: Optional[str] = None
    target_protein_grams: Optional[int] = None
    target_carbs_grams: Optional[int] = None
    target_fat_grams: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.start_weight <= 0:
            raise ValueError(f"start_weight must be positive, got {self.start_weight}")
        if self.goal_weight is not None and self.goal_weight <= 0:
            raise ValueError(f"goal_weight must be positive, got {self.goal_weight}")
        if self.unit not in VALID_UNITS:
            raise ValueError(f"unit must be one of {VALID_UNITS}, got '{self.unit}'")
        if self.activity_level is not None:
            self.activity_level = parse_activity_level(self.activity_level).value
        if self.deficit_level is not None:
            self.deficit_level = DeficitLevel(self.deficit_level.lower()).value
        if self.fasting_type is not None:
            self.fasting_type = parse_fasting_type(self.fasting_type).value
        for name in ("eating_start_time", "eating_end_time"):
            value = getattr(self, name)
            if value is not None:
                parse_clock_time(value)

    @property
    def fasting(self) -> FastingSchedule:
        return FastingSchedule(
            fasting_type=self.fasting_type,  # type: ignore[arg-type]
            eating_start=self.eating_start_time,
            eating_end=self.eating_end_time,
        )

    @property
    def expected_weekly_loss(self) -> Optional[float]:
        """Loss per week needed to hit the goal by the final week."""
        if self.goal_weight is None:
            return None
        return (self.start_weight - self.goal_weight) / CHALLENGE_WEEKS


@dataclass
class DayLog:
    """Daily nutrition totals."""

    log_id: Optional[int]
    challenge_id: int
    date: date
    calories: Optional[int] = None
    protein: Optional[int] = None
    carbs: Optional[int] = None
    fat: Optional[int] = None
    notes: Optional[str] = None
    skipped: bool = False
    skipped_reason: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("calories", "protein", "carbs", "fat"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} cannot be negative, got {value}")


@dataclass
class WorkoutLog:
    """A workout (or rest day) on a date."""

    log_id: Optional[int]
    challenge_id: int
    date: date
    workout_type: str
    duration_min: Optional[int] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if self.workout_type not in WORKOUT_TYPES:
            raise ValueError(
                f"workout_type must be one of {WORKOUT_TYPES}, got '{self.workout_type}'"
            )
        if self.duration_min is not None and self.duration_min < 0:
            raise ValueError(f"duration_min cannot be negative, got {self.duration_min}")

    @property
    def is_rest(self) -> bool:
        return self.workout_type == "Rest"


@dataclass
class HabitLog:
    """Daily habits: water, steps and sleep."""

    log_id: Optional[int]
    challenge_id: int
    date: date
    water_done: bool = False
    steps: Optional[int] = None
    steps_done: bool = False
    sleep_hours: Optional[float] = None
    sleep_done: bool = False

    def __post_init__(self) -> None:
        if self.steps is not None and self.steps < 0:
            raise ValueError(f"steps cannot be negative, got {self.steps}")
        if self.sleep_hours is not None and not 0 <= self.sleep_hours <= 24:
            raise ValueError(f"sleep_hours must be between 0 and 24, got {self.sleep_hours}")

    def apply_goals(self, step_goal: int, sleep_goal: float) -> None:
        """Mark steps and sleep done when the logged values meet the goals."""
        if self.steps is not None:
            self.steps_done = self.steps >= step_goal
        if self.sleep_hours is not None:
            self.sleep_done = self.sleep_hours >= sleep_goal

    @property
    def habits_done(self) -> int:
        return sum((self.water_done, self.steps_done, self.sleep_done))


@dataclass
class WeeklyCheckIn:
    """Weekly weigh-in and body measurements."""

    check_in_id: Optional[int]
    challenge_id: int
    week_number: int
    weight: Optional[float] = None
    waist: Optional[float] = None
    hips: Optional[float] = None
    chest: Optional[float] = None
    body_fat: Optional[float] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not 1 <= self.week_number <= CHALLENGE_WEEKS:
            raise ValueError(
                f"week_number must be between 1 and {CHALLENGE_WEEKS}, got {self.week_number}"
            )
        if self.weight is not None and self.weight <= 0:
            raise ValueError(f"weight must be positive, got {self.weight}")
        if self.body_fat is not None and not 0 < self.body_fat < 100:
            raise ValueError(f"body_fat must be a percentage, got {self.body_fat}")


def parse_meal_type(value: str) -> str:
    """Match a meal name case-insensitively ("snacks" -> "Snacks")."""
    for meal in MEAL_TYPES:
        if value.strip().lower() == meal.lower():
            return meal
    raise ValueError(f"meal_type must be one of {MEAL_TYPES}, got '{value}'")


@dataclass
class FoodEntry:
    """A single food eaten on a date, stored per serving.

    Totals for the entry are the per-serving values multiplied by
    ``servings_count``.
    """

    entry_id: Optional[int]
    challenge_id: int
    date: date
    meal_type: str
    food_name: str
    calories_per_serving: int
    protein_per_serving: float = 0.0
    carbs_per_serving: float = 0.0
    fat_per_serving: float = 0.0
    fiber_per_serving: float = 0.0
    sugar_per_serving: float = 0.0
    sodium_per_serving: float = 0.0
    cholesterol_per_serving: float = 0.0
    servings_count: float = 1.0
    serving_label: Optional[str] = None
    serving_grams: Optional[float] = None
    time: Optional[str] = None
    brand: Optional[str] = None
    barcode: Optional[str] = None
    source: str = "manual"
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.meal_type = parse_meal_type(self.meal_type)
        if not self.food_name or not self.food_name.strip():
            raise ValueError("food_name cannot be empty")
        for nutrient in FOOD_NUTRIENTS:
            value = self.per_serving(nutrient)
            if value < 0:
                raise ValueError(f"{nutrient}_per_serving cannot be negative, got {value}")
        if self.servings_count <= 0:
            raise ValueError(f"servings_count must be positive, got {self.servings_count}")
        if self.serving_grams is not None and self.serving_grams <= 0:
            raise ValueError(f"serving_grams must be positive, got {self.serving_grams}")
        if self.source not in FOOD_SOURCES:
            raise ValueError(f"source must be one of {FOOD_SOURCES}, got '{self.source}'")
        if self.time is not None:
            parse_clock_time(self.time)

    def per_serving(self, nutrient: str) -> float:
        return getattr(self, f"{nutrient}_per_serving")

    def total(self, nutrient: str) -> float:
        """Amount of a nutrient across all servings eaten."""
        return self.per_serving(nutrient) * self.servings_count

    @property
    def calories(self) -> float:
        return self.total("calories")


# Fields that may be changed on an existing food entry
FOOD_ENTRY_UPDATABLE_FIELDS = tuple(
    f"{nutrient}_per_serving" for nutrient in FOOD_NUTRIENTS
) + (
    "date",
    "meal_type",
    "food_name",
    "servings_count",
    "serving_label",
    "serving_grams",
    "time",
    "brand",
    "barcode",
    "source",
)


@dataclass
class WeeklyReflection:
    """End-of-week journal: prompts plus 1-5 mood, energy and overall ratings."""

    reflection_id: Optional[int]
    challenge_id: int
    week_number: int
    went_well: Optional[str] = None
    was_hard: Optional[str] = None
    improve_next_week: Optional[str] = None
    learned: Optional[str] = None
    next_week_focus: Optional[str] = None
    mood_rating: Optional[int] = None
    energy_rating: Optional[int] = None
    overall_rating: Optional[int] = None

    def __post_init__(self) -> None:
        if not 1 <= self.week_number <= CHALLENGE_WEEKS:
            raise ValueError(
                f"week_number must be between 1 and {CHALLENGE_WEEKS}, got {self.week_number}"
            )
        for name in ("mood_rating", "energy_rating", "overall_rating"):
            value = getattr(self, name)
            if value is not None and not RATING_MIN <= value <= RATING_MAX:
                raise ValueError(
                    f"{name} must be between {RATING_MIN} and {RATING_MAX}, got {value}"
                )
