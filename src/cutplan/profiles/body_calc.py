"""Body metrics calculator for calorie and macro targets.

Calculates BMR (Basal Metabolic Rate), TDEE (Total Daily Energy
Expenditure) and deficit-based calorie targets from body metrics and an
activity level.

BMR uses the revised Harris-Benedict equation (Roza & Shizgal, 1984).
This is the only BMR formula in the package; every target is derived
from it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Sex(Enum):
    """Biological sex for BMR calculation."""
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(Enum):
    """Activity level multipliers for TDEE calculation."""
    SEDENTARY = "sedentary"          # Little or no exercise
    LIGHT = "light"                  # Exercise 1-3 days/week
    MODERATE = "moderate"            # Exercise 3-5 days/week
    ACTIVE = "active"                # Exercise 6-7 days/week
    VERY_ACTIVE = "very_active"      # Intense daily exercise


class DeficitLevel(Enum):
    """How far below TDEE to eat."""
    MILD = "mild"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

# Older challenge records store "extreme" for the top level
_ACTIVITY_ALIASES = {"extreme": ActivityLevel.VERY_ACTIVE}

DEFICITS = {
    DeficitLevel.MILD: 250,
    DeficitLevel.MODERATE: 500,
    DeficitLevel.AGGRESSIVE: 750,
}

# Below this the onboarding flow warns; calculations never clamp to it
MIN_SAFE_CALORIES = 1200

CALORIES_PER_LB_FAT = 3500

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARB = 4
KCAL_PER_G_FAT = 9

PROTEIN_G_PER_LB = 1.0
FAT_FRACTION = 0.25

LBS_PER_KG = 2.20462
KG_PER_LB = 0.453592
CM_PER_INCH = 2.54


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def lbs_to_kg(weight_lbs: float) -> float:
    return weight_lbs * KG_PER_LB


def kg_to_lbs(weight_kg: float) -> float:
    return weight_kg * LBS_PER_KG


def inches_to_cm(height_inches: float) -> float:
    return height_inches * CM_PER_INCH


def feet_inches_to_inches(feet: float, inches: float = 0) -> float:
    return feet * 12 + inches


def parse_sex(value: Union[str, Sex]) -> Sex:
    if isinstance(value, Sex):
        return value
    try:
        return Sex(value.strip().lower())
    except ValueError:
        raise ValueError(f"sex must be 'male' or 'female', got '{value}'")


def parse_activity_level(value: Union[str, ActivityLevel]) -> ActivityLevel:
    if isinstance(value, ActivityLevel):
        return value
    key = value.strip().lower()
    if key in _ACTIVITY_ALIASES:
        return _ACTIVITY_ALIASES[key]
    try:
        return ActivityLevel(key)
    except ValueError:
        valid = ", ".join(level.value for level in ActivityLevel)
        raise ValueError(f"activity level must be one of: {valid}, got '{value}'")


@dataclass(frozen=True)
class BodyMetrics:
    """Body measurements for a single TDEE calculation."""

    sex: Sex
    weight_kg: float
    height_cm: float
    age_years: int

    def __post_init__(self) -> None:
        if self.weight_kg <= 0:
            raise ValueError(f"weight_kg must be positive, got {self.weight_kg}")
        if self.height_cm <= 0:
            raise ValueError(f"height_cm must be positive, got {self.height_cm}")
        if self.age_years <= 0:
            raise ValueError(f"age_years must be positive, got {self.age_years}")

    @classmethod
    def from_imperial(
        cls,
        sex: Union[str, Sex],
        weight_lbs: float,
        height_inches: float,
        age_years: int,
    ) -> "BodyMetrics":
        """Build metrics from pounds and inches."""
        return cls(
            sex=parse_sex(sex),
            weight_kg=lbs_to_kg(weight_lbs),
            height_cm=inches_to_cm(height_inches),
            age_years=age_years,
        )


@dataclass(frozen=True)
class CalorieTargets:
    """BMR, TDEE and deficit targets, all in whole kcal/day."""

    bmr: int
    tdee: int
    mild_deficit: int
    moderate_deficit: int
    aggressive_deficit: int

    def for_level(self, level: Union[str, DeficitLevel]) -> int:
        """Calorie target for a deficit level."""
        if isinstance(level, str):
            level = DeficitLevel(level.strip().lower())
        return {
            DeficitLevel.MILD: self.mild_deficit,
            DeficitLevel.MODERATE: self.moderate_deficit,
            DeficitLevel.AGGRESSIVE: self.aggressive_deficit,
        }[level]

    def to_dict(self) -> dict:
        return {
            "bmr": self.bmr,
            "tdee": self.tdee,
            "mild_deficit": self.mild_deficit,
            "moderate_deficit": self.moderate_deficit,
            "aggressive_deficit": self.aggressive_deficit,
        }

    def summary(self) -> str:
        """Human-readable summary of targets."""
        lines = [
            f"BMR: {self.bmr} kcal/day",
            f"TDEE: {self.tdee} kcal/day",
            f"Mild deficit (-250): {self.mild_deficit} kcal/day",
            f"Moderate deficit (-500): {self.moderate_deficit} kcal/day",
            f"Aggressive deficit (-750): {self.aggressive_deficit} kcal/day",
        ]
        if is_below_safe_minimum(self.aggressive_deficit):
            lines.append(
                f"Warning: aggressive target is below {MIN_SAFE_CALORIES} kcal/day"
            )
        return "\n".join(lines)


@dataclass(frozen=True)
class MacroTargets:
    """Daily macronutrient targets in grams."""

    calories: int
    protein_grams: int
    carbs_grams: int
    fat_grams: int


def calculate_bmr(metrics: BodyMetrics) -> float:
    """Calculate Basal Metabolic Rate using the revised Harris-Benedict equation.

    Args:
        metrics: Sex, weight (kg), height (cm) and age (years)

    Returns:
        BMR in calories per day (unrounded)
    """
    w, h, a = metrics.weight_kg, metrics.height_cm, metrics.age_years
    if metrics.sex == Sex.MALE:
        return 88.362 + (13.397 * w) + (4.799 * h) - (5.677 * a)
    return 447.593 + (9.247 * w) + (3.098 * h) - (4.330 * a)


def calculate_tdee(
    bmr: float,
    activity_level: Union[str, ActivityLevel],
) -> int:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate (unrounded)
        activity_level: Activity level

    Returns:
        TDEE in whole calories per day
    """
    multiplier = ACTIVITY_MULTIPLIERS[parse_activity_level(activity_level)]
    return round_half_up(bmr * multiplier)


def _present(value: Optional[float]) -> bool:
    return value is not None and value > 0


def calculate_targets(
    sex: Optional[Union[str, Sex]],
    weight_kg: Optional[float],
    height_cm: Optional[float],
    age_years: Optional[int],
    activity_level: Union[str, ActivityLevel] = "moderate",
) -> Optional[CalorieTargets]:
    """Calculate BMR, TDEE and deficit targets.

    Any missing, non-positive or unrecognised body input gives no result
    rather than a number computed from garbage.

    Args:
        sex: "male" or "female"
        weight_kg: Weight in kilograms
        height_cm: Height in centimetres
        age_years: Age in years
        activity_level: "sedentary", "light", "moderate", "active", "very_active"

    Returns:
        CalorieTargets, or None if an input is missing
    """
    if not sex or not (_present(weight_kg) and _present(height_cm) and _present(age_years)):
        return None
    try:
        parsed_sex = parse_sex(sex)
    except ValueError:
        return None

    metrics = BodyMetrics(
        sex=parsed_sex,
        weight_kg=float(weight_kg),  # type: ignore[arg-type]
        height_cm=float(height_cm),  # type: ignore[arg-type]
        age_years=int(age_years),  # type: ignore[arg-type]
    )
    bmr = calculate_bmr(metrics)
    tdee = calculate_tdee(bmr, activity_level)

    return CalorieTargets(
        bmr=round_half_up(bmr),
        tdee=tdee,
        mild_deficit=tdee - DEFICITS[DeficitLevel.MILD],
        moderate_deficit=tdee - DEFICITS[DeficitLevel.MODERATE],
        aggressive_deficit=tdee - DEFICITS[DeficitLevel.AGGRESSIVE],
    )


def calculate_targets_imperial(
    sex: Optional[Union[str, Sex]],
    weight_lbs: Optional[float],
    height_inches: Optional[float],
    age_years: Optional[int],
    activity_level: Union[str, ActivityLevel] = "moderate",
) -> Optional[CalorieTargets]:
    """Same as calculate_targets, from pounds and inches."""
    return calculate_targets(
        sex,
        lbs_to_kg(weight_lbs) if weight_lbs else None,
        inches_to_cm(height_inches) if height_inches else None,
        age_years,
        activity_level,
    )


def target_for_deficit(
    targets: Optional[CalorieTargets],
    level: Union[str, DeficitLevel],
) -> Optional[int]:
    """Calorie target for a deficit level, or None without targets."""
    if targets is None:
        return None
    return targets.for_level(level)


def is_below_safe_minimum(calories: int) -> bool:
    """Whether a calorie target is below the level the app warns about."""
    return calories < MIN_SAFE_CALORIES


def calorie_target_for_weekly_loss(tdee: int, weekly_loss_lbs: float) -> int:
    """Daily calorie target for a weekly loss rate, floored at 1200 kcal.

    Uses the standard approximation: 3500 calories = 1 lb of body weight.
    """
    daily_deficit = (weekly_loss_lbs * CALORIES_PER_LB_FAT) / 7
    return max(MIN_SAFE_CALORIES, round_half_up(tdee - daily_deficit))


def weeks_to_goal(current_weight: float, goal_weight: float, weekly_loss: float) -> int:
    """Whole weeks needed to reach a goal weight at a steady loss rate."""
    total_to_lose = current_weight - goal_weight
    if total_to_lose <= 0 or weekly_loss <= 0:
        return 0
    return math.ceil(total_to_lose / weekly_loss)


def calculate_macro_targets(calories: int, weight_lbs: float) -> MacroTargets:
    """Split a calorie target into protein, fat and carbohydrate grams.

    Protein is set from body weight, fat takes a fixed share of calories
    and carbohydrate fills what is left.
    """
    protein = round_half_up(weight_lbs * PROTEIN_G_PER_LB)
    fat = round_half_up(calories * FAT_FRACTION / KCAL_PER_G_FAT)
    remaining = calories - protein * KCAL_PER_G_PROTEIN - fat * KCAL_PER_G_FAT
    carbs = max(0, round_half_up(remaining / KCAL_PER_G_CARB))

    return MacroTargets(
        calories=calories,
        protein_grams=protein,
        carbs_grams=carbs,
        fat_grams=fat,
    )
