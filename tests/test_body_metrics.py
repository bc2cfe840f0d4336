from __future__ import annotations

import datetime as dt
import types

import pytest

from fittrack import body_metrics as bm

T0 = dt.datetime(2025, 3, 1, 8, 0)


def entry(kg: float, days: float = 0, bf: float | None = None, muscle: float | None = None, water: float | None = None):
    return types.SimpleNamespace(
        weight_kg=kg,
        body_fat_pct=bf,
        muscle_mass_kg=muscle,
        water_pct=water,
        measured_at=T0 + dt.timedelta(days=days),
    )


def test_bmi_example() -> None:
    value = bm.bmi(90, 1.8)
    assert value == 27.8
    assert bm.bmi_category(value) == "overweight"


def test_bmi_unavailable_without_height() -> None:
    assert bm.bmi(70, None) is None
    assert bm.bmi(70, 0) is None
    assert bm.bmi_category(None) is None


@pytest.mark.parametrize(
    "value,expected",
    [(18.4, "underweight"), (18.5, "normal"), (24.9, "normal"), (25.0, "overweight"), (30.0, "obese")],
)
def test_bmi_category_boundaries(value: float, expected: str) -> None:
    assert bm.bmi_category(value) == expected


def test_bmi_grows_with_weight() -> None:
    values = [bm.bmi(w, 1.75) for w in (60, 70, 80, 90)]
    assert values == sorted(values)


def test_lean_and_fat_mass() -> None:
    assert bm.lean_mass(80, 20) == 64.0
    assert bm.fat_mass(80, 20) == 16.0
    assert bm.lean_mass(80, None) is None
    assert bm.fat_mass(80, None) is None


def test_progress_metrics() -> None:
    cur = entry(80, days=14, bf=20, muscle=35.05)
    prev = entry(82, days=0, bf=21, muscle=35.0)
    m = bm.progress_metrics(cur, prev)
    assert m.weight_change == pytest.approx(-2)
    assert m.weekly_weight_change == pytest.approx(-1.0)
    assert m.days_between == 14
    assert m.weight_trend == "decreased"
    assert m.body_fat_trend == "decreased"
    assert m.muscle_mass_trend == "stable"


def test_progress_dead_zone_is_inclusive() -> None:
    m = bm.progress_metrics(entry(80, days=1, bf=20.5), entry(80, bf=20.0))
    assert m.body_fat_trend == "stable"
    assert m.weight_trend == "stable"


def test_progress_same_timestamp_has_zero_weekly_rate() -> None:
    m = bm.progress_metrics(entry(81), entry(80))
    assert m.weekly_weight_change == 0
    assert m.weight_trend == "increased"


def test_daily_trends_groups_by_day() -> None:
    trends = bm.daily_trends([entry(81, days=1), entry(80, days=0), entry(80.4, days=0.25)])
    assert [t.count for t in trends] == [2, 1]
    assert trends[0].avg_weight == pytest.approx(80.2)
    assert trends[0].min_weight == 80
    assert trends[0].max_weight == 80.4
    assert trends[0].avg_body_fat is None


def test_trend_statistics() -> None:
    assert bm.trend_statistics(bm.daily_trends([entry(80)])) is None
    stats = bm.trend_statistics(bm.daily_trends([entry(80), entry(79, days=7)]))
    assert stats is not None
    assert stats.total_change == pytest.approx(-1)
    assert stats.avg_change_per_week == pytest.approx(-1)
    assert stats.time_span_days == pytest.approx(7)


def test_weight_stats() -> None:
    empty = bm.weight_stats([])
    assert empty.total_entries == 0
    assert empty.avg_weight == 0
    assert empty.first_entry is None

    s = bm.weight_stats([entry(80, bf=20, water=55), entry(82, days=2)])
    assert s.total_entries == 2
    assert s.avg_weight == 81
    assert s.avg_body_fat == 20
    assert s.avg_muscle_mass == 0
    assert s.last_entry == T0 + dt.timedelta(days=2)


def test_logging_consistency() -> None:
    c = bm.logging_consistency(7, 15, 3)
    assert c.this_week == 100
    assert c.this_month == 50
    assert c.overall == 30
    assert bm.logging_consistency(0, 0, 0).overall == 0
    assert bm.logging_consistency(10, 40, 50).this_month == 100
