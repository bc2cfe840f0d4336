from __future__ import annotations

import datetime as dt
import types

import pytest

from fittrack import workout_metrics as wm


def s(weight: float | None, reps: int | None):
    return types.SimpleNamespace(weight_value=weight, reps=reps)


def test_calorie_estimate_scales_with_body_weight() -> None:
    assert wm.calories_burned("cardio", 45, 80) == 411
    assert wm.calories_burned("cardio", 45) == 360
    assert wm.calories_burned("underwater-basket-weaving", 10) == 50
    assert wm.calories_burned("yoga", 0) == 0


def test_volume_skips_incomplete_sets() -> None:
    sets = [s(100, 5), s(None, 10), s(50, None)]
    assert wm.exercise_volume(sets) == 500
    exercises = [types.SimpleNamespace(sets=sets), types.SimpleNamespace(sets=[s(20, 10)])]
    assert wm.workout_volume(exercises) == 700
    assert wm.total_sets(exercises) == 4


def test_duration_prefers_timestamps() -> None:
    start = dt.datetime(2025, 1, 1, 10, 0)
    end = start + dt.timedelta(minutes=45, seconds=20)
    assert wm.minutes_between(start, end) == 45
    assert wm.total_duration(start, end, 90) == 45
    assert wm.total_duration(start, None, 30) == 30
    assert wm.total_duration(None, None, None) == 0


@pytest.mark.parametrize(
    "current,new,ok",
    [
        ("planned", "in-progress", True),
        ("planned", "completed", True),
        ("planned", "skipped", True),
        ("in-progress", "completed", True),
        ("in-progress", "planned", False),
        ("completed", "in-progress", False),
        ("skipped", "planned", False),
    ],
)
def test_status_transitions(current: str, new: str, ok: bool) -> None:
    assert wm.can_transition(current, new) is ok


def test_primary_muscle_groups_keep_first_seen_order() -> None:
    exercises = [
        types.SimpleNamespace(muscle_groups=["chest", "triceps"]),
        types.SimpleNamespace(muscle_groups=["triceps", "shoulders"]),
        types.SimpleNamespace(muscle_groups=None),
    ]
    assert wm.primary_muscle_groups(exercises) == ["chest", "triceps", "shoulders"]


def test_average_intensity() -> None:
    assert wm.average_intensity(["low", "high"]) == 2.0
    assert wm.average_intensity(["extreme", None]) == 3.0
    assert wm.average_intensity([]) == 0


def test_best_set() -> None:
    assert wm.best_set(iter([s(100, 5), s(120, 3), s(None, 12)])) == (120, 12)
    assert wm.best_set([]) == (None, None)
