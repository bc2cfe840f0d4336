from __future__ import annotations

import datetime as dt

from fittrack.models import Exercise, FoodItem, Goal, Meal, Milestone, WeightEntry, Workout, WorkoutSet
from fittrack.normalize import normalize_goal, normalize_meal, normalize_weight_entry, normalize_workout

T0 = dt.datetime(2025, 5, 1, 7, 0)


def test_weight_entry_is_stored_in_kg() -> None:
    e = WeightEntry(weight_value=176.37, weight_unit="lbs", muscle_mass_value=80, muscle_mass_unit="lbs")
    normalize_weight_entry(e)
    assert round(e.weight_kg, 1) == 80.0
    assert round(e.muscle_mass_kg, 2) == 36.29


def test_completed_workout_gets_end_time_duration_and_calories() -> None:
    w = Workout(
        type="cardio",
        completion_status="completed",
        start_time=T0,
        exercises=[
            Exercise(name="Bench", sets=[WorkoutSet(set_number=1, weight_value=100, reps=5)]),
            Exercise(name="Dips", sets=[WorkoutSet(set_number=1, reps=12), WorkoutSet(set_number=2, weight_value=20, reps=8)]),
        ],
    )
    normalize_workout(w, now=T0 + dt.timedelta(minutes=45), user_weight_kg=80)

    assert w.end_time == T0 + dt.timedelta(minutes=45)
    assert w.actual_duration_min == 45
    assert w.calories_burned == 411
    assert [e.total_volume for e in w.exercises] == [500, 160]
    assert [e.position for e in w.exercises] == [0, 1]
    assert [s.position for s in w.exercises[1].sets] == [0, 1]


def test_end_time_is_not_overwritten() -> None:
    end = T0 + dt.timedelta(minutes=30)
    w = Workout(type="yoga", completion_status="completed", start_time=T0, end_time=end, calories_burned=99)
    normalize_workout(w, now=T0 + dt.timedelta(hours=5), user_weight_kg=70)
    assert w.end_time == end
    assert w.calories_burned == 99


def test_planned_workout_has_no_calorie_estimate() -> None:
    w = Workout(type="hiit", completion_status="planned", start_time=T0)
    normalize_workout(w, now=T0, user_weight_kg=70)
    assert w.calories_burned is None
    assert w.end_time is None


def test_meal_totals_are_recomputed() -> None:
    m = Meal(
        type="lunch",
        foods=[
            FoodItem(name="Rice", calories=200, protein_g=4, carbs_g=44, fat_g=0.5, fiber_g=1, sugar_g=0, sodium_mg=5),
            FoodItem(name="Chicken", calories=165, protein_g=31, carbs_g=0, fat_g=3.6, fiber_g=0, sugar_g=0, sodium_mg=74),
        ],
    )
    normalize_meal(m)
    assert m.total_calories == 365
    assert m.total_protein == 35
    assert m.total_sodium == 79
    assert [f.position for f in m.foods] == [0, 1]


def test_goal_milestones_sorted_and_status_applied() -> None:
    g = Goal(
        type="target",
        status="active",
        current_value=10,
        target_value=10,
        start_date=T0,
        target_date=T0 + dt.timedelta(days=30),
        milestones=[Milestone(title="b", target_value=8, unit="kg"), Milestone(title="a", target_value=2, unit="kg")],
    )
    normalize_goal(g, now=T0 + dt.timedelta(days=3))
    assert [m.target_value for m in g.milestones] == [2, 8]
    assert g.status == "completed"
    assert g.completed_at == T0 + dt.timedelta(days=3)


def test_zero_span_falls_back_to_actual_duration() -> None:
    w = Workout(type="cardio", completion_status="completed", start_time=T0, actual_duration_min=45)
    normalize_workout(w, now=T0, user_weight_kg=80)
    assert w.end_time == T0
    assert w.actual_duration_min == 45
    assert w.calories_burned == 411


def test_planned_workout_with_known_duration_is_estimated() -> None:
    w = Workout(type="cardio", completion_status="planned", start_time=T0, actual_duration_min=45)
    normalize_workout(w, now=T0, user_weight_kg=80)
    assert w.end_time is None
    assert w.calories_burned == 411


def test_explicit_zero_duration_is_kept() -> None:
    w = Workout(
        type="yoga",
        completion_status="completed",
        start_time=T0,
        end_time=T0 + dt.timedelta(minutes=20),
        actual_duration_min=0,
    )
    normalize_workout(w, now=T0 + dt.timedelta(hours=1), user_weight_kg=70)
    assert w.actual_duration_min == 0
    assert w.calories_burned == 60
