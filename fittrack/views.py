"""ORM rows to response models, with derived fields filled in per request."""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Sequence
from typing import Any

from fittrack import body_metrics, goal_progress, nutrition, workout_metrics
from fittrack.models import DailyNutrition, Goal, Meal, User, WeightEntry, Workout
from fittrack.schemas import (
    DailyNutritionOut,
    GoalOut,
    GoalProgressOut,
    MacroRatioOut,
    MealOut,
    MealTotalsOut,
    MilestoneOut,
    NutrientGoalsIn,
    Pagination,
    ProfileOut,
    ProgressMetricsOut,
    ProgressUpdateOut,
    Quantity,
    WeightEntryOut,
    WorkoutOut,
)
from fittrack.units import height_to_m, round_half_up

_PROFILE_FIELDS = ("name", "height_value", "weight_kg", "sex", "date_of_birth", "activity_level", "fitness_goals")


def pagination(total: int, page: int, limit: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


def user_height_m(user: User) -> float | None:
    if not user.height_value:
        return None
    return height_to_m(user.height_value, user.height_unit or "cm")


def profile_completion(user: User) -> int:
    filled = sum(1 for f in _PROFILE_FIELDS if getattr(user, f))
    return round_half_up(filled / len(_PROFILE_FIELDS) * 100)


def profile_out(user: User) -> ProfileOut:
    out = ProfileOut.model_validate(user)
    return out.model_copy(update={"profile_completion": profile_completion(user)})


def weight_entry_out(entry: WeightEntry, user: User) -> WeightEntryOut:
    out = WeightEntryOut.model_validate(entry)
    bmi = body_metrics.bmi(entry.weight_kg, user_height_m(user))
    lean = body_metrics.lean_mass(entry.weight_kg, entry.body_fat_pct)
    fat = body_metrics.fat_mass(entry.weight_kg, entry.body_fat_pct)
    unit = user.preferred_weight_unit or "kg"
    return out.model_copy(
        update={
            "bmi": bmi,
            "bmi_category": body_metrics.bmi_category(bmi),
            "lean_body_mass": Quantity(value=lean, unit="kg") if lean is not None else None,
            "body_fat_mass": Quantity(value=fat, unit="kg") if fat is not None else None,
            "weight_in_preferred_unit": Quantity(value=body_metrics.weight_in_unit(entry.weight_kg, unit), unit=unit),
        }
    )


def progress_out(current: WeightEntry, previous: WeightEntry) -> ProgressMetricsOut:
    return ProgressMetricsOut.model_validate(body_metrics.progress_metrics(current, previous))


def workout_out(workout: Workout) -> WorkoutOut:
    out = WorkoutOut.model_validate(workout)
    exercises = workout.exercises
    return out.model_copy(
        update={
            "total_duration": workout_metrics.total_duration(
                workout.start_time, workout.end_time, workout.actual_duration_min
            ),
            "total_exercises": len(exercises),
            "total_sets": workout_metrics.total_sets(exercises),
            "total_volume": workout_metrics.workout_volume(exercises),
            "primary_muscle_groups": workout_metrics.primary_muscle_groups(exercises),
        }
    )


def meal_totals(meal: Meal) -> nutrition.MealTotals:
    return nutrition.MealTotals(
        calories=meal.total_calories or 0.0,
        protein=meal.total_protein or 0.0,
        carbohydrates=meal.total_carbohydrates or 0.0,
        fiber=meal.total_fiber or 0.0,
        sugar=meal.total_sugar or 0.0,
        fat=meal.total_fat or 0.0,
        sodium=meal.total_sodium or 0.0,
    )


def meal_out(meal: Meal) -> MealOut:
    out = MealOut.model_validate(meal)
    ratio = nutrition.macro_ratio(meal_totals(meal))
    return out.model_copy(update={"macro_ratio": MacroRatioOut.model_validate(ratio)})


def daily_goals(day: DailyNutrition) -> nutrition.NutrientGoals:
    return nutrition.NutrientGoals(
        calories=day.calories_goal,
        protein=day.protein_goal,
        carbohydrates=day.carbs_goal,
        fat=day.fat_goal,
        fiber=day.fiber_goal,
    )


def daily_out(day: DailyNutrition, meals: Sequence[Meal]) -> DailyNutritionOut:
    per_meal = [meal_totals(m) for m in meals]
    goals = daily_goals(day)
    progress = nutrition.daily_goal_progress(
        per_meal, goals, water_ml=day.water_total_ml or 0.0, water_goal_ml=day.water_goal_ml
    )
    return DailyNutritionOut(
        date=day.date,
        meals=[meal_out(m) for m in meals],
        water_total_ml=day.water_total_ml or 0.0,
        water_goal_ml=day.water_goal_ml,
        goals=NutrientGoalsIn(
            calories=goals.calories,
            protein=goals.protein,
            carbohydrates=goals.carbohydrates,
            fat=goals.fat,
            fiber=goals.fiber,
        ),
        supplements=day.supplements,
        body_weight_value=day.body_weight_value,
        body_weight_unit=day.body_weight_unit or "kg",
        symptoms=day.symptoms,
        notes=day.notes,
        totals=MealTotalsOut.model_validate(nutrition.sum_totals(per_meal)),
        goal_progress=GoalProgressOut.model_validate(progress),
    )


def goal_out(goal: Goal, now: dt.datetime) -> GoalOut:
    out = GoalOut.model_validate(goal)
    pct = goal_progress.goal_percentage(goal)
    time_pct = goal_progress.time_progress_percentage(goal.start_date, goal.target_date, now)
    nxt = goal_progress.next_milestone(goal.milestones)
    update: dict[str, Any] = {
        "milestones": [MilestoneOut.model_validate(m) for m in goal_progress.sort_milestones(goal.milestones)],
        "progress_percentage": pct,
        "days_remaining": goal_progress.days_remaining(goal.target_date, now),
        "days_since_start": goal_progress.days_since_start(goal.start_date, now),
        "total_duration": goal_progress.total_duration_days(goal.start_date, goal.target_date),
        "time_progress_percentage": time_pct,
        "health_status": goal_progress.health_status(goal.status, time_pct, pct),
        "next_milestone": MilestoneOut.model_validate(nxt) if nxt is not None else None,
        "recent_progress": [
            ProgressUpdateOut.model_validate(u) for u in goal_progress.recent_updates(goal.progress_updates)
        ],
    }
    return out.model_copy(update=update)
