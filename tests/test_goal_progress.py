from __future__ import annotations

import datetime as dt
import math
import types

import pytest

from fittrack import goal_progress as gp

DAY0 = dt.datetime(2025, 1, 1)


def goal(**kw):
    base = dict(
        type="target",
        status="active",
        current_value=0.0,
        target_value=100.0,
        start_date=DAY0,
        target_date=DAY0 + dt.timedelta(days=100),
        completed_at=None,
    )
    base.update(kw)
    return types.SimpleNamespace(**base)


def milestone(target: float, achieved: bool = False):
    return types.SimpleNamespace(target_value=target, is_achieved=achieved, achieved_at=None)


def test_progress_percentage() -> None:
    assert gp.progress_percentage("reduction", -4, -10) == 40
    assert gp.progress_percentage("target", 12, 10) == 100
    assert gp.progress_percentage("target", 5, 0) == 0
    assert gp.progress_percentage("target", -5, 10) == 0
    assert gp.progress_percentage("habit", None, 10) == 0


def test_on_track_scenario() -> None:
    now = DAY0 + dt.timedelta(days=60)
    t = gp.time_progress_percentage(DAY0, DAY0 + dt.timedelta(days=100), now)
    assert t == 60
    assert gp.health_status("active", t, 50) == "on-track"


@pytest.mark.parametrize(
    "time_pct,progress,expected",
    [
        (70, 50, "on-track"),
        (71, 50, "behind"),
        (50, 70, "on-track"),
        (50, 70.5, "ahead"),
    ],
)
def test_health_band_edges(time_pct: float, progress: float, expected: str) -> None:
    assert gp.health_status("active", time_pct, progress) == expected


def test_health_terminal_states_and_caution() -> None:
    assert gp.health_status("completed", 100, 0) == "completed"
    assert gp.health_status("abandoned", 0, 0) == "failed"
    assert gp.health_status("expired", 0, 0) == "failed"
    assert gp.health_status("active", math.nan, 50) == "caution"


def test_day_counters() -> None:
    now = DAY0 + dt.timedelta(days=10, hours=12)
    assert gp.days_remaining(DAY0 + dt.timedelta(days=12), now) == 2
    assert gp.days_remaining(DAY0 + dt.timedelta(days=5), now) == -5
    assert gp.days_remaining(None, now) is None
    assert gp.days_since_start(DAY0, now) == 11
    assert gp.days_since_start(DAY0 + dt.timedelta(days=30), now) == 0
    assert gp.time_progress_percentage(DAY0, DAY0, now) == 0


def test_completion_is_idempotent() -> None:
    g = goal(current_value=100)
    first = DAY0 + dt.timedelta(days=5)
    assert gp.complete_if_reached(g, first) is True
    assert g.status == "completed"
    assert g.completed_at == first

    assert gp.complete_if_reached(g, first + dt.timedelta(days=1)) is False
    assert g.completed_at == first


def test_completion_keeps_existing_timestamp() -> None:
    stamp = DAY0 + dt.timedelta(days=2)
    g = goal(current_value=120, completed_at=stamp)
    gp.apply_status_rules(g, DAY0 + dt.timedelta(days=9))
    assert g.status == "completed"
    assert g.completed_at == stamp


def test_overdue_goal_expires() -> None:
    g = goal(current_value=40, target_date=DAY0 + dt.timedelta(days=10))
    gp.apply_status_rules(g, DAY0 + dt.timedelta(days=11))
    assert g.status == "expired"


def test_overdue_but_reached_goal_completes() -> None:
    g = goal(current_value=100, target_date=DAY0 + dt.timedelta(days=10))
    gp.apply_status_rules(g, DAY0 + dt.timedelta(days=11))
    assert g.status == "completed"


def test_paused_goal_is_left_alone() -> None:
    g = goal(status="paused", current_value=100, target_date=DAY0)
    gp.apply_status_rules(g, DAY0 + dt.timedelta(days=1))
    assert g.status == "paused"


def test_milestones() -> None:
    ms = [milestone(50), milestone(10), milestone(30, achieved=True)]
    assert [m.target_value for m in gp.sort_milestones(ms)] == [10, 30, 50]
    assert gp.next_milestone(ms).target_value == 10

    hit = gp.achieve_milestones(ms, 40, DAY0)
    assert [m.target_value for m in hit] == [10]
    assert ms[1].achieved_at == DAY0
    assert gp.next_milestone(ms).target_value == 50


def test_transitions() -> None:
    assert gp.can_transition("draft", "active")
    assert not gp.can_transition("draft", "completed")
    assert gp.can_transition("completed", "active")
    assert not gp.can_transition("abandoned", "active")
    assert gp.can_transition("paused", "paused")


def test_set_status_stamps_and_clears_completion() -> None:
    g = goal()
    gp.set_status(g, "completed", DAY0)
    assert g.completed_at == DAY0
    gp.set_status(g, "active", DAY0 + dt.timedelta(days=1))
    assert g.completed_at is None


def test_recommendations() -> None:
    now = DAY0 + dt.timedelta(days=60)
    behind = gp.recommendations(progress=20, time_progress=60, days_left=40, last_update_at=None, now=now)
    assert [a.type for a in behind] == ["warning"]

    ahead = gp.recommendations(progress=80, time_progress=40, days_left=40, last_update_at=now, now=now)
    assert [a.type for a in ahead] == ["success"]

    stale = gp.recommendations(
        progress=50, time_progress=50, days_left=10, last_update_at=now - dt.timedelta(days=20), now=now
    )
    assert [a.type for a in stale] == ["reminder"]
    assert "20 days" in stale[0].message


def test_expected_progress() -> None:
    e = gp.expected_progress(100, 40, 50)
    assert e.expected == 50
    assert e.difference == -10
    assert e.is_ahead is False
    assert e.percentage_difference == -10
    assert gp.expected_progress(0, 5, 50).percentage_difference == 0


def test_aggregates() -> None:
    assert gp.completion_rate(1, 4) == 25
    assert gp.completion_rate(0, 0) == 0
    goals = [goal(current_value=50), goal(current_value=150), goal(target_value=0)]
    assert gp.average_progress(goals) == 100
    updates = [types.SimpleNamespace(v=i, recorded_at=DAY0 + dt.timedelta(days=i)) for i in range(7)]
    assert [u.v for u in gp.recent_updates(updates)] == [6, 5, 4, 3, 2]
