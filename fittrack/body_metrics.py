"""Body-composition metrics derived from weight entries.

Every function takes plain values (or duck-typed entries exposing
``weight_kg``, ``body_fat_pct``, ``muscle_mass_kg``, ``water_pct`` and
``measured_at``) so callers pass the user's height explicitly instead of
reaching into a profile. Missing inputs yield ``None``, never an exception.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from fittrack.units import from_kg, round1, round_half_up

BmiCategory = Literal["underweight", "normal", "overweight", "obese"]
Trend = Literal["increased", "decreased", "stable"]

WEIGHT_DEAD_ZONE_KG = 0.1
MUSCLE_DEAD_ZONE_KG = 0.1
BODY_FAT_DEAD_ZONE_PCT = 0.5

_DAY_S = 24 * 60 * 60


@dataclass(frozen=True)
class Measurement:
    weight_kg: float
    measured_at: dt.datetime
    body_fat_pct: float | None = None
    muscle_mass_kg: float | None = None
    water_pct: float | None = None


@dataclass(frozen=True)
class ProgressMetrics:
    weight_change: float
    body_fat_change: float
    muscle_mass_change: float
    weekly_weight_change: float
    days_between: int
    weight_trend: Trend
    body_fat_trend: Trend
    muscle_mass_trend: Trend


@dataclass(frozen=True)
class DailyTrend:
    day: dt.date
    avg_weight: float
    min_weight: float
    max_weight: float
    avg_body_fat: float | None
    avg_muscle_mass: float | None
    count: int
    first_measured_at: dt.datetime


@dataclass(frozen=True)
class TrendStatistics:
    total_change: float
    avg_change_per_week: float
    time_span_days: float
    current_weight: float
    starting_weight: float


@dataclass(frozen=True)
class WeightStats:
    total_entries: int
    avg_weight: float
    min_weight: float
    max_weight: float
    avg_body_fat: float
    avg_muscle_mass: float
    avg_water_percentage: float
    first_entry: dt.datetime | None
    last_entry: dt.datetime | None


@dataclass(frozen=True)
class Consistency:
    this_week: float
    this_month: float
    overall: float


def bmi(weight_kg: float | None, height_m: float | None) -> float | None:
    if not weight_kg or not height_m or height_m <= 0:
        return None
    return round1(weight_kg / (height_m * height_m))


def bmi_category(value: float | None) -> BmiCategory | None:
    if value is None:
        return None
    if value < 18.5:
        return "underweight"
    if value < 25:
        return "normal"
    if value < 30:
        return "overweight"
    return "obese"


def lean_mass(weight_kg: float, body_fat_pct: float | None) -> float | None:
    if not body_fat_pct:
        return None
    return round1(weight_kg * (1 - body_fat_pct / 100))


def fat_mass(weight_kg: float, body_fat_pct: float | None) -> float | None:
    if not body_fat_pct:
        return None
    return round1(weight_kg * body_fat_pct / 100)


def weight_in_unit(weight_kg: float, unit: str) -> float:
    return round1(from_kg(weight_kg, unit))


def _trend(change: float, dead_zone: float) -> Trend:
    if abs(change) <= dead_zone:
        return "stable"
    return "increased" if change > 0 else "decreased"


def progress_metrics(current: Any, previous: Any) -> ProgressMetrics:
    """Change from ``previous`` to ``current``; both already expressed in kg."""
    weight_change = current.weight_kg - previous.weight_kg
    body_fat_change = (current.body_fat_pct or 0) - (previous.body_fat_pct or 0)
    muscle_change = (current.muscle_mass_kg or 0) - (previous.muscle_mass_kg or 0)

    days = (current.measured_at - previous.measured_at).total_seconds() / _DAY_S
    weekly = weight_change / days * 7 if days > 0 else 0.0

    return ProgressMetrics(
        weight_change=weight_change,
        body_fat_change=body_fat_change,
        muscle_mass_change=muscle_change,
        weekly_weight_change=weekly,
        days_between=round_half_up(days),
        weight_trend=_trend(weight_change, WEIGHT_DEAD_ZONE_KG),
        body_fat_trend=_trend(body_fat_change, BODY_FAT_DEAD_ZONE_PCT),
        muscle_mass_trend=_trend(muscle_change, MUSCLE_DEAD_ZONE_KG),
    )


def _avg(xs: Sequence[float]) -> float | None:
    if not xs:
        return None
    return sum(xs) / len(xs)


def daily_trends(entries: Iterable[Any]) -> list[DailyTrend]:
    buckets: dict[dt.date, list[Any]] = {}
    for e in sorted(entries, key=lambda x: x.measured_at):
        buckets.setdefault(e.measured_at.date(), []).append(e)

    out: list[DailyTrend] = []
    for day, items in sorted(buckets.items()):
        weights = [x.weight_kg for x in items]
        out.append(
            DailyTrend(
                day=day,
                avg_weight=sum(weights) / len(weights),
                min_weight=min(weights),
                max_weight=max(weights),
                avg_body_fat=_avg([x.body_fat_pct for x in items if x.body_fat_pct is not None]),
                avg_muscle_mass=_avg([x.muscle_mass_kg for x in items if x.muscle_mass_kg is not None]),
                count=len(items),
                first_measured_at=items[0].measured_at,
            )
        )
    return out


def trend_statistics(trends: Sequence[DailyTrend]) -> TrendStatistics | None:
    if len(trends) < 2:
        return None
    first, last = trends[0], trends[-1]
    total_change = last.avg_weight - first.avg_weight
    span = (last.first_measured_at - first.first_measured_at).total_seconds() / _DAY_S
    per_week = total_change / span * 7 if span > 0 else 0.0
    return TrendStatistics(
        total_change=total_change,
        avg_change_per_week=per_week,
        time_span_days=span,
        current_weight=last.avg_weight,
        starting_weight=first.avg_weight,
    )


def weight_stats(entries: Sequence[Any]) -> WeightStats:
    if not entries:
        return WeightStats(0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, None, None)
    weights = [e.weight_kg for e in entries]
    stamps = [e.measured_at for e in entries]
    return WeightStats(
        total_entries=len(entries),
        avg_weight=sum(weights) / len(weights),
        min_weight=min(weights),
        max_weight=max(weights),
        avg_body_fat=_avg([e.body_fat_pct for e in entries if e.body_fat_pct is not None]) or 0.0,
        avg_muscle_mass=_avg([e.muscle_mass_kg for e in entries if e.muscle_mass_kg is not None]) or 0.0,
        avg_water_percentage=_avg([e.water_pct for e in entries if e.water_pct is not None]) or 0.0,
        first_entry=min(stamps),
        last_entry=max(stamps),
    )


def logging_consistency(week_count: int, month_count: int, total: int) -> Consistency:
    # at most one entry per day counts towards a full score
    return Consistency(
        this_week=min(week_count / 7 * 100, 100.0),
        this_month=min(month_count / 30 * 100, 100.0),
        overall=float(min(total * 10, 100)) if total > 0 else 0.0,
    )
