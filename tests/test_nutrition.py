from __future__ import annotations

import datetime as dt
import types

import pytest

from fittrack import nutrition as n
from fittrack.units import round_half_up


def food(**kw):
    base = dict(calories=0, protein_g=0, carbs_g=0, fiber_g=None, sugar_g=None, fat_g=0, sodium_mg=None)
    base.update(kw)
    return types.SimpleNamespace(**base)


def test_meal_totals_sum_and_treat_missing_as_zero() -> None:
    t = n.meal_totals([food(calories=200, protein_g=10, carbs_g=20, fat_g=5), food(calories=150.5, fiber_g=3)])
    assert t.calories == 350.5
    assert t.protein == 10
    assert t.fiber == 3
    assert t.sodium == 0


def test_macro_ratio() -> None:
    t = n.MealTotals(calories=400, protein=25, carbohydrates=50, fat=100 / 9)
    r = n.macro_ratio(t)
    assert (r.protein, r.carbohydrates, r.fat) == (25, 50, 25)


def test_macro_ratio_zero_calories() -> None:
    r = n.macro_ratio(n.MealTotals(protein=10))
    assert (r.protein, r.carbohydrates, r.fat) == (0, 0, 0)


def test_bmr_formulas() -> None:
    assert n.bmr("male", 30, 180, 80) == pytest.approx(1853.632)
    assert n.bmr("female", 30, 165, 60) == pytest.approx(447.593 + 554.82 + 511.17 - 129.9)


def test_loss_has_deficit() -> None:
    rec = n.recommend_targets(
        sex="male", age=28, height_cm=190, weight_kg=118, activity="moderate", fitness_goals=["weight-loss"]
    )
    assert rec.tdee - rec.calories == 500
    assert (rec.ratios.protein, rec.ratios.carbohydrates, rec.ratios.fat) == (25, 45, 30)


def test_maintain_no_deficit() -> None:
    rec = n.recommend_targets(sex="male", age=28, height_cm=190, weight_kg=118, activity="moderate")
    assert rec.calories == rec.tdee
    assert rec.protein == round_half_up(rec.calories * 0.20 / 4)
    assert rec.water == 3700


def test_gain_surplus() -> None:
    rec = n.recommend_targets(
        sex="female", age=28, height_cm=170, weight_kg=60, activity="active", fitness_goals=["muscle-gain"]
    )
    assert rec.calories - rec.tdee == 300
    assert rec.water == 2700


def test_calorie_floor_applies_to_reported_calories_only() -> None:
    rec = n.recommend_targets(
        sex="female", age=70, height_cm=150, weight_kg=45, activity="sedentary", fitness_goals=["weight-loss"]
    )
    # goal before the floor is 730 kcal
    assert rec.calories == n.MIN_CALORIE_GOAL
    assert rec.protein == 46
    assert rec.carbohydrates == 82
    assert rec.fat == 24
    assert rec.fiber == 17


def test_incomplete_profile_has_no_bmr() -> None:
    rec = n.recommend_targets(sex=None, age=None, height_cm=None, weight_kg=70, activity=None)
    assert rec.bmr == 0
    assert rec.tdee == 0
    assert rec.calories == n.MIN_CALORIE_GOAL


def test_daily_goal_progress() -> None:
    meals = [n.MealTotals(calories=500, protein=30), n.MealTotals(calories=499, protein=21)]
    goals = n.NutrientGoals(calories=2000, protein=100, carbohydrates=0)
    p = n.daily_goal_progress(meals, goals, water_ml=1250, water_goal_ml=2500)
    assert p.calories == 50
    assert p.protein == 51
    assert p.carbohydrates == 0
    assert p.fat == 0
    assert p.water == 50


def test_age_on() -> None:
    dob = dt.date(1990, 6, 15)
    assert n.age_on(dob, dt.date(2025, 6, 14)) == 34
    assert n.age_on(dob, dt.date(2025, 6, 15)) == 35


def test_within_calorie_band() -> None:
    assert n.within_calorie_band(480, 500)
    assert n.within_calorie_band(600, 500)
    assert not n.within_calorie_band(601, 500)
