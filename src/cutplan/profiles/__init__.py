"""Body metrics and calorie target calculations."""

from cutplan.profiles.body_calc import (
    ACTIVITY_MULTIPLIERS,
    ActivityLevel,
    BodyMetrics,
    CalorieTargets,
    DeficitLevel,
    MacroTargets,
    Sex,
    calculate_bmr,
    calculate_macro_targets,
    calculate_targets,
    calculate_targets_imperial,
    calculate_tdee,
    target_for_deficit,
)

__all__ = [
    "ACTIVITY_MULTIPLIERS",
    "ActivityLevel",
    "BodyMetrics",
    "CalorieTargets",
    "DeficitLevel",
    "MacroTargets",
    "Sex",
    "calculate_bmr",
    "calculate_macro_targets",
    "calculate_targets",
    "calculate_targets_imperial",
    "calculate_tdee",
    "target_for_deficit",
]
