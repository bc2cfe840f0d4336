from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from fittrack.units import round_half_up


Sex = Literal["male", "female"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very-active"]

MIN_CALORIE_GOAL = 1200
WEIGHT_LOSS_DEFICIT_KCAL = 500
MUSCLE_GAIN_SURPLUS_KCAL = 300

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


@dataclass(frozen=True)
class MealTotals:
    calories: float = 0.0
    protein: float = 0.0
    carbohydrates: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    fat: float = 0.0
    sodium: float = 0.0


@dataclass(frozen=True)
class MacroRatio:
    protein: int
    carbohydrates: int
    fat: int


@dataclass(frozen=True)
class NutrientGoals:
    calories: float | None = None
    protein: float | None = None
    carbohydrates: float | None = None
    fat: float | None = None
    fiber: float | None = None


@dataclass(frozen=True)
class GoalProgress:
    calories: int
    protein: int
    carbohydrates: int
    fat: int
    fiber: int
    water: int


@dataclass(frozen=True)
class Recommendation:
    calories: int
    protein: int
    carbohydrates: int
    fat: int
    fiber: int
    water: int
    ratios: MacroRatio
    bmr: int
    tdee: int


def meal_totals(foods: Iterable[Any]) -> MealTotals:
    """Sum nutrient fields over food items; absent values count as 0."""
    cal = p = c = fib = sug = fat = na = 0.0
    for f in foods:
        cal += f.calories or 0
        p += f.protein_g or 0
        c += f.carbs_g or 0
        fib += f.fiber_g or 0
        sug += f.sugar_g or 0
        fat += f.fat_g or 0
        na += f.sodium_mg or 0
    return MealTotals(calories=cal, protein=p, carbohydrates=c, fiber=fib, sugar=sug, fat=fat, sodium=na)


def sum_totals(items: Iterable[MealTotals]) -> MealTotals:
    acc = MealTotals()
    for t in items:
        acc = MealTotals(
            calories=acc.calories + t.calories,
            protein=acc.protein + t.protein,
            carbohydrates=acc.carbohydrates + t.carbohydrates,
            fiber=acc.fiber + t.fiber,
            sugar=acc.sugar + t.sugar,
            fat=acc.fat + t.fat,
            sodium=acc.sodium + t.sodium,
        )
    return acc


def macro_ratio(totals: MealTotals) -> MacroRatio:
    if totals.calories == 0:
        return MacroRatio(protein=0, carbohydrates=0, fat=0)
    return MacroRatio(
        protein=round_half_up(totals.protein * KCAL_PER_G_PROTEIN / totals.calories * 100),
        carbohydrates=round_half_up(totals.carbohydrates * KCAL_PER_G_CARBS / totals.calories * 100),
        fat=round_half_up(totals.fat * KCAL_PER_G_FAT / totals.calories * 100),
    )


def _pct(value: float, goal: float | None) -> int:
    if not goal:
        return 0
    return round_half_up(value / goal * 100)


def daily_goal_progress(
    meals: Sequence[MealTotals],
    goals: NutrientGoals,
    *,
    water_ml: float = 0.0,
    water_goal_ml: float | None = None,
) -> GoalProgress:
    day = sum_totals(meals)
    return GoalProgress(
        calories=_pct(day.calories, goals.calories),
        protein=_pct(day.protein, goals.protein),
        carbohydrates=_pct(day.carbohydrates, goals.carbohydrates),
        fat=_pct(day.fat, goals.fat),
        fiber=_pct(day.fiber, goals.fiber),
        water=_pct(water_ml, water_goal_ml),
    )


def _activity_multiplier(level: ActivityLevel) -> float:
    return {
        "sedentary": 1.2,
        "light": 1.375,
        "moderate": 1.55,
        "active": 1.725,
        "very-active": 1.9,
    }[level]


def bmr(sex: Sex, age: int, height_cm: float, weight_kg: float) -> float:
    # revised Harris-Benedict coefficients
    if sex == "male":
        return 88.362 + 13.397 * weight_kg + 4.799 * height_cm - 5.677 * age
    return 447.593 + 9.247 * weight_kg + 3.098 * height_cm - 4.330 * age


def tdee(bmr_kcal: float, activity: ActivityLevel) -> float:
    return bmr_kcal * _activity_multiplier(activity)


def age_on(date_of_birth: dt.date, today: dt.date) -> int:
    years = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return max(years, 0)


def macro_split(fitness_goals: Iterable[str]) -> tuple[float, float, float]:
    """(protein, carbs, fat) share of calories for the user's stated goals."""
    goals = set(fitness_goals)
    if "weight-loss" in goals:
        return 0.25, 0.45, 0.30
    if "muscle-gain" in goals:
        return 0.30, 0.40, 0.30
    return 0.20, 0.50, 0.30


def calorie_goal_from_tdee(tdee_kcal: float, fitness_goals: Iterable[str]) -> int:
    """Unfloored calorie goal; the 1200 kcal floor applies to the reported figure only."""
    goals = set(fitness_goals)
    if "weight-loss" in goals:
        return round_half_up(tdee_kcal - WEIGHT_LOSS_DEFICIT_KCAL)
    if "muscle-gain" in goals:
        return round_half_up(tdee_kcal + MUSCLE_GAIN_SURPLUS_KCAL)
    return round_half_up(tdee_kcal)


def recommend_targets(
    *,
    sex: Sex | None,
    age: int | None,
    height_cm: float | None,
    weight_kg: float,
    activity: ActivityLevel | None,
    fitness_goals: Iterable[str] = (),
) -> Recommendation:
    goals = list(fitness_goals)
    b = 0.0
    if sex and age is not None and height_cm:
        b = bmr(sex=sex, age=age, height_cm=height_cm, weight_kg=weight_kg)
    td = tdee(b, activity or "moderate")

    cal = calorie_goal_from_tdee(td, goals)
    p_ratio, c_ratio, f_ratio = macro_split(goals)

    return Recommendation(
        calories=max(cal, MIN_CALORIE_GOAL),
        protein=round_half_up(cal * p_ratio / KCAL_PER_G_PROTEIN),
        carbohydrates=round_half_up(cal * c_ratio / KCAL_PER_G_CARBS),
        fat=round_half_up(cal * f_ratio / KCAL_PER_G_FAT),
        fiber=round_half_up(cal / 100) + 10,
        water=3700 if sex == "male" else 2700,
        ratios=MacroRatio(
            protein=round_half_up(p_ratio * 100),
            carbohydrates=round_half_up(c_ratio * 100),
            fat=round_half_up(f_ratio * 100),
        ),
        bmr=round_half_up(b),
        tdee=round_half_up(td),
    )


def within_calorie_band(total_calories: float, target: float, tolerance: float = 0.2) -> bool:
    return target * (1 - tolerance) <= total_calories <= target * (1 + tolerance)
