"""Write-path normalization.

Each ``normalize_*`` function recomputes the stored derived fields of one
aggregate and must run before the aggregate is flushed. Services call these
explicitly on every create/update.
"""

from __future__ import annotations

import datetime as dt

from fittrack import goal_progress, nutrition, workout_metrics
from fittrack.models import Goal, Meal, WeightEntry, Workout
from fittrack.units import to_kg


def normalize_weight_entry(entry: WeightEntry) -> WeightEntry:
    entry.weight_kg = to_kg(entry.weight_value, entry.weight_unit)
    if entry.muscle_mass_value is not None:
        entry.muscle_mass_kg = to_kg(entry.muscle_mass_value, entry.muscle_mass_unit)
    else:
        entry.muscle_mass_kg = None
    return entry


def _estimate_minutes(workout: Workout) -> int:
    # start and end stamped in the same request give a zero span; fall back to the recorded duration
    span = workout_metrics.minutes_between(workout.start_time, workout.end_time)
    if span:
        return span
    return workout.actual_duration_min or 0


def normalize_workout(workout: Workout, *, now: dt.datetime, user_weight_kg: float) -> Workout:
    for i, ex in enumerate(workout.exercises):
        ex.position = i
        for j, s in enumerate(ex.sets):
            s.position = j
        ex.total_volume = workout_metrics.exercise_volume(ex.sets)

    if workout.completion_status == "completed":
        if workout.end_time is None:
            workout.end_time = now

    # an explicit actual duration, including 0, wins over the timestamps
    if workout.end_time is not None and workout.start_time is not None and workout.actual_duration_min is None:
        workout.actual_duration_min = workout_metrics.minutes_between(workout.start_time, workout.end_time)

    if workout.calories_burned is None:
        minutes = _estimate_minutes(workout)
        # a planned session with no known length keeps its estimate open until completion
        if minutes or workout.completion_status == "completed":
            workout.calories_burned = workout_metrics.calories_burned(workout.type, minutes, user_weight_kg)
    return workout


def normalize_meal(meal: Meal) -> Meal:
    for i, f in enumerate(meal.foods):
        f.position = i
    t = nutrition.meal_totals(meal.foods)
    meal.total_calories = t.calories
    meal.total_protein = t.protein
    meal.total_carbohydrates = t.carbohydrates
    meal.total_fiber = t.fiber
    meal.total_sugar = t.sugar
    meal.total_fat = t.fat
    meal.total_sodium = t.sodium
    return meal


def normalize_goal(goal: Goal, *, now: dt.datetime) -> Goal:
    goal.milestones.sort(key=lambda m: m.target_value)
    if goal.current_value is None:
        goal.current_value = 0.0
    goal_progress.apply_status_rules(goal, now)
    return goal
