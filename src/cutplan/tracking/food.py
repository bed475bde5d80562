"""Daily nutrition totals built from individual food entries."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Iterable, Optional

from cutplan.profiles.body_calc import round_half_up
from cutplan.tracking.models import FOOD_NUTRIENTS, MEAL_TYPES, DayLog, FoodEntry


@dataclass
class NutritionTotals:
    """Summed nutrients over a set of food entries (servings applied)."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    cholesterol: float = 0.0
    entries: int = 0

    def add(self, entry: FoodEntry) -> None:
        for nutrient in FOOD_NUTRIENTS:
            setattr(self, nutrient, getattr(self, nutrient) + entry.total(nutrient))
        self.entries += 1

    @classmethod
    def from_entries(cls, entries: Iterable[FoodEntry]) -> "NutritionTotals":
        totals = cls()
        for entry in entries:
            totals.add(entry)
        return totals

    def rounded(self) -> dict[str, int]:
        """Whole-number totals, rounding halves up."""
        return {nutrient: round_half_up(getattr(self, nutrient)) for nutrient in FOOD_NUTRIENTS}

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DayFoodSummary:
    """Food eaten on one date, in total and per meal."""

    date: date
    total: NutritionTotals
    meals: dict[str, NutritionTotals] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total": self.total.rounded(),
            "entries": self.total.entries,
            "meals": {meal: totals.rounded() for meal, totals in self.meals.items()},
        }

    def to_day_log(self, challenge_id: int, notes: Optional[str] = None) -> DayLog:
        """Day log carrying these totals, for storing as the day's nutrition."""
        totals = self.total.rounded()
        return DayLog(
            log_id=None,
            challenge_id=challenge_id,
            date=self.date,
            calories=totals["calories"],
            protein=totals["protein"],
            carbs=totals["carbs"],
            fat=totals["fat"],
            notes=notes,
        )


def summarize_day(day: date, entries: Iterable[FoodEntry]) -> DayFoodSummary:
    """Total the entries logged on ``day``, grouped by meal.

    Entries on other dates are ignored. Every meal type appears in
    ``meals``, with zero totals when nothing was logged for it.
    """
    meals = {meal: NutritionTotals() for meal in MEAL_TYPES}
    total = NutritionTotals()
    for entry in entries:
        if entry.date != day:
            continue
        meals[entry.meal_type].add(entry)
        total.add(entry)
    return DayFoodSummary(date=day, total=total, meals=meals)
