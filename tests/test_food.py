"""Tests for daily food totals."""

from __future__ import annotations

from datetime import date

import pytest

from cutplan.tracking.food import NutritionTotals, summarize_day
from cutplan.tracking.models import FoodEntry

DAY = date(2024, 1, 2)


@pytest.fixture
def entries() -> list[FoodEntry]:
    return [
        FoodEntry(None, 1, DAY, "Breakfast", "Oats", 150, protein_per_serving=5, carbs_per_serving=27,
                  fat_per_serving=2.5, servings_count=2),
        FoodEntry(None, 1, DAY, "Lunch", "Chicken breast", 165, protein_per_serving=31,
                  fat_per_serving=3.6, sodium_per_serving=74),
        FoodEntry(None, 1, DAY, "Lunch", "Rice", 205, protein_per_serving=4.3, carbs_per_serving=44.5,
                  servings_count=0.5),
        FoodEntry(None, 1, date(2024, 1, 3), "Dinner", "Pizza", 285, servings_count=3),
    ]


class TestNutritionTotals:
    def test_from_entries(self, entries) -> None:
        totals = NutritionTotals.from_entries(entries[:2])
        assert totals.entries == 2
        assert totals.calories == pytest.approx(465)
        assert totals.protein == pytest.approx(41)
        assert totals.sodium == pytest.approx(74)

    def test_empty(self) -> None:
        totals = NutritionTotals.from_entries([])
        assert totals.entries == 0
        assert totals.rounded()["calories"] == 0

    def test_rounded_halves_up(self) -> None:
        totals = NutritionTotals(calories=102.5, fat=3.6)
        rounded = totals.rounded()
        assert rounded["calories"] == 103
        assert rounded["fat"] == 4


class TestSummarizeDay:
    """Tests for summarize_day."""

    def test_totals_and_meals(self, entries) -> None:
        summary = summarize_day(DAY, entries)
        assert summary.total.entries == 3
        assert summary.total.calories == pytest.approx(300 + 165 + 102.5)
        assert summary.meals["Lunch"].entries == 2
        assert summary.meals["Lunch"].carbs == pytest.approx(22.25)
        assert summary.meals["Breakfast"].protein == pytest.approx(10)

    def test_other_dates_ignored(self, entries) -> None:
        summary = summarize_day(date(2024, 1, 3), entries)
        assert summary.total.entries == 1
        assert summary.total.calories == pytest.approx(855)

    def test_every_meal_present(self) -> None:
        summary = summarize_day(DAY, [])
        assert list(summary.meals) == ["Breakfast", "Lunch", "Dinner", "Snacks"]
        assert all(meal.entries == 0 for meal in summary.meals.values())

    def test_to_dict(self, entries) -> None:
        data = summarize_day(DAY, entries).to_dict()
        assert data["date"] == "2024-01-02"
        assert data["entries"] == 3
        assert data["total"]["calories"] == 568
        assert data["meals"]["Dinner"]["calories"] == 0

    def test_to_day_log(self, entries) -> None:
        """Rounded totals become the day's nutrition log."""
        log = summarize_day(DAY, entries).to_day_log(challenge_id=1, notes="from food log")
        assert log.date == DAY
        assert log.calories == 568
        assert log.protein == 43
        assert log.carbs == 76
        assert log.fat == 9
        assert log.notes == "from food log"
        assert not log.skipped
