"""Goal progress engine.

Percentages are floats in [0, 100]. ``reduction`` goals store target and current
values as deltas (e.g. -10 for "lose 10 kg"), so their progress is a ratio of
magnitudes. The status rules mutate a duck-typed goal exposing ``type``,
``status``, ``current_value``, ``target_value``, ``start_date``, ``target_date``
and ``completed_at``.
"""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from fittrack.units import round_half_up

GoalType = Literal["target", "habit", "reduction", "maintenance", "challenge"]
GoalStatus = Literal["draft", "active", "paused", "completed", "abandoned", "expired"]
HealthStatus = Literal["completed", "failed", "behind", "ahead", "on-track", "caution"]

HEALTH_BAND_PTS = 20.0
STALE_UPDATE_DAYS = 14

_DAY_S = 24 * 60 * 60

_TRANSITIONS: dict[str, frozenset[str]] = {
    "draft": frozenset({"active", "abandoned"}),
    "active": frozenset({"paused", "completed", "abandoned", "expired"}),
    "paused": frozenset({"active", "abandoned"}),
    "completed": frozenset({"active"}),
    "expired": frozenset({"active"}),
    "abandoned": frozenset(),
}


@dataclass(frozen=True)
class Advice:
    type: Literal["warning", "success", "reminder"]
    title: str
    message: str
    action: str


@dataclass(frozen=True)
class ExpectedProgress:
    expected: float
    actual: float
    difference: float
    is_ahead: bool
    percentage_difference: float


def _clamp(x: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return min(max(x, lo), hi)


def _days(delta: dt.timedelta) -> float:
    return delta.total_seconds() / _DAY_S


def progress_percentage(goal_type: str, current: float | None, target: float | None) -> float:
    if not target:
        return 0.0
    cur = current or 0.0
    if goal_type == "reduction":
        return _clamp(abs(cur) / abs(target) * 100)
    return _clamp(cur / target * 100)


def days_remaining(target_date: dt.datetime | None, now: dt.datetime) -> int | None:
    if target_date is None:
        return None
    return math.ceil(_days(target_date - now))


def days_since_start(start_date: dt.datetime, now: dt.datetime) -> int:
    return max(math.ceil(_days(now - start_date)), 0)


def total_duration_days(start_date: dt.datetime, target_date: dt.datetime) -> int:
    return math.ceil(_days(target_date - start_date))


def time_progress_percentage(start_date: dt.datetime, target_date: dt.datetime, now: dt.datetime) -> float:
    total = total_duration_days(start_date, target_date)
    if total <= 0:
        return 0.0
    return _clamp(days_since_start(start_date, now) / total * 100)


def health_status(status: str, time_progress: float, goal_progress: float) -> HealthStatus:
    """Classify schedule health; the first matching branch wins.

    A gap of exactly ``HEALTH_BAND_PTS`` is on-track: behind/ahead need a strictly
    larger gap. ``caution`` is reached only when the gap is undefined (NaN).
    """
    if status == "completed":
        return "completed"
    if status in ("abandoned", "expired"):
        return "failed"
    if time_progress > goal_progress + HEALTH_BAND_PTS:
        return "behind"
    if goal_progress > time_progress + HEALTH_BAND_PTS:
        return "ahead"
    if abs(time_progress - goal_progress) <= HEALTH_BAND_PTS:
        return "on-track"
    return "caution"


def sort_milestones(milestones: Iterable[Any]) -> list[Any]:
    return sorted(milestones, key=lambda m: m.target_value)


def next_milestone(milestones: Iterable[Any]) -> Any | None:
    pending = sort_milestones(m for m in milestones if not m.is_achieved)
    return pending[0] if pending else None


def achieve_milestones(milestones: Iterable[Any], value: float, now: dt.datetime) -> list[Any]:
    """Mark every pending milestone at or below ``value``; returns the newly achieved ones."""
    hit: list[Any] = []
    for m in milestones:
        if not m.is_achieved and value >= m.target_value:
            m.is_achieved = True
            m.achieved_at = now
            hit.append(m)
    return hit


def recent_updates(updates: Iterable[Any], limit: int = 5) -> list[Any]:
    return sorted(updates, key=lambda u: u.recorded_at, reverse=True)[:limit]


def goal_percentage(goal: Any) -> float:
    return progress_percentage(goal.type, goal.current_value, goal.target_value)


def complete_if_reached(goal: Any, now: dt.datetime) -> bool:
    """Flip an active goal to completed once progress hits 100%.

    Safe to call repeatedly: an existing ``completed_at`` is never overwritten.
    """
    if goal.status != "active" or goal_percentage(goal) < 100:
        return False
    goal.status = "completed"
    if goal.completed_at is None:
        goal.completed_at = now
    return True


def expire_if_overdue(goal: Any, now: dt.datetime) -> bool:
    if goal.status != "active" or goal.target_date is None:
        return False
    if goal.target_date < now and goal_percentage(goal) < 100:
        goal.status = "expired"
        return True
    return False


def apply_status_rules(goal: Any, now: dt.datetime) -> None:
    """Status rules evaluated on every write: expiry first, then completion."""
    if not expire_if_overdue(goal, now):
        complete_if_reached(goal, now)


def can_transition(current: str, new: str) -> bool:
    return current == new or new in _TRANSITIONS.get(current, frozenset())


def set_status(goal: Any, new_status: str, now: dt.datetime) -> None:
    """Administrative status change; caller checks :func:`can_transition` first."""
    old = goal.status
    goal.status = new_status
    if new_status == "completed" and old != "completed":
        goal.completed_at = now
    if new_status != "completed" and old == "completed":
        goal.completed_at = None


def recommendations(
    *,
    progress: float,
    time_progress: float,
    days_left: int | None,
    last_update_at: dt.datetime | None,
    now: dt.datetime,
) -> list[Advice]:
    out: list[Advice] = []
    if progress < 25 and time_progress > 50:
        out.append(
            Advice(
                type="warning",
                title="You're falling behind!",
                message="Consider breaking down your goal into smaller, more manageable steps.",
                action="Add milestones",
            )
        )
    if progress > 75 and days_left is not None and days_left > 30:
        out.append(
            Advice(
                type="success",
                title="Great progress!",
                message="You're ahead of schedule. Consider setting a more challenging target.",
                action="Adjust target",
            )
        )
    if last_update_at is not None:
        since = _days(now - last_update_at)
        if since > STALE_UPDATE_DAYS:
            out.append(
                Advice(
                    type="reminder",
                    title="Time for an update",
                    message=f"It's been {round_half_up(since)} days since your last progress update.",
                    action="Log progress",
                )
            )
    return out


def expected_progress(target: float, current: float, time_progress: float) -> ExpectedProgress:
    expected = target * (time_progress / 100)
    diff = current - expected
    return ExpectedProgress(
        expected=expected,
        actual=current,
        difference=diff,
        is_ahead=diff > 0,
        percentage_difference=diff / target * 100 if target > 0 else 0.0,
    )


def completion_rate(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return completed / total * 100


def average_progress(goals: Sequence[Any]) -> float:
    # ratio of raw values (not clamped); goals with a zero target are skipped
    ratios = [g.current_value / g.target_value * 100 for g in goals if g.target_value]
    if not ratios:
        return 0.0
    return sum(ratios) / len(ratios)
