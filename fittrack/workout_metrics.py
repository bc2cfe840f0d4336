from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from typing import Any, Literal

from fittrack.units import round_half_up


WorkoutType = Literal[
    "strength", "cardio", "hiit", "yoga", "pilates", "crossfit", "powerlifting",
    "bodybuilding", "endurance", "flexibility", "sports", "functional", "circuit", "other",
]
Intensity = Literal["low", "moderate", "high", "extreme"]
CompletionStatus = Literal["planned", "in-progress", "completed", "skipped"]

REFERENCE_WEIGHT_KG = 70.0

# kcal per minute at the reference body weight
CALORIE_RATES: dict[str, int] = {
    "strength": 6,
    "cardio": 8,
    "hiit": 10,
    "yoga": 3,
    "pilates": 4,
    "crossfit": 9,
    "powerlifting": 5,
    "bodybuilding": 6,
    "endurance": 7,
    "flexibility": 2,
    "sports": 8,
    "functional": 7,
    "circuit": 9,
    "other": 5,
}
DEFAULT_CALORIE_RATE = 5

INTENSITY_SCORES: dict[str, int] = {"low": 1, "moderate": 2, "high": 3, "extreme": 4}

_TRANSITIONS: dict[str, frozenset[str]] = {
    "planned": frozenset({"in-progress", "completed", "skipped"}),
    "in-progress": frozenset({"completed", "skipped"}),
    "completed": frozenset(),
    "skipped": frozenset(),
}


def set_volume(weight: float | None, reps: int | None) -> float:
    return (weight or 0) * (reps or 0)


def exercise_volume(sets: Iterable[Any]) -> float:
    return sum(set_volume(s.weight_value, s.reps) for s in sets)


def workout_volume(exercises: Iterable[Any]) -> float:
    return sum(exercise_volume(e.sets) for e in exercises)


def minutes_between(start: dt.datetime | None, end: dt.datetime | None) -> int | None:
    if start is None or end is None:
        return None
    return round_half_up((end - start).total_seconds() / 60)


def total_duration(start: dt.datetime | None, end: dt.datetime | None, actual_minutes: int | None) -> int:
    """Session length: timestamps win over the recorded actual duration."""
    span = minutes_between(start, end)
    if span is not None:
        return span
    return actual_minutes or 0


def calories_burned(workout_type: str, duration_minutes: float, user_weight_kg: float = REFERENCE_WEIGHT_KG) -> int:
    rate = CALORIE_RATES.get(workout_type, DEFAULT_CALORIE_RATE)
    return round_half_up(rate * (duration_minutes or 0) * (user_weight_kg / REFERENCE_WEIGHT_KG))


def total_sets(exercises: Iterable[Any]) -> int:
    return sum(len(e.sets) for e in exercises)


def primary_muscle_groups(exercises: Iterable[Any]) -> list[str]:
    seen: dict[str, None] = {}
    for e in exercises:
        for g in e.muscle_groups or []:
            seen.setdefault(g, None)
    return list(seen)


def can_transition(current: str, new: str) -> bool:
    return new in _TRANSITIONS.get(current, frozenset())


def average_intensity(intensities: Iterable[str | None]) -> float:
    scores = [INTENSITY_SCORES.get(x or "", 2) for x in intensities]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def best_set(sets: Iterable[Any]) -> tuple[float | None, int | None]:
    """(max weight, max reps) across an exercise's sets."""
    sets = list(sets)
    weights = [s.weight_value for s in sets if s.weight_value is not None]
    reps = [s.reps for s in sets if s.reps is not None]
    return (max(weights) if weights else None, max(reps) if reps else None)
