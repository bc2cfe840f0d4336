from __future__ import annotations

import datetime as dt

import pytest

from fittrack.errors import NotFoundError, TransitionError
from fittrack.schemas import (
    ExerciseIn,
    FoodItemIn,
    GoalIn,
    MealIn,
    MilestoneIn,
    ProgressIn,
    SetIn,
    StatusIn,
    WaterIn,
    WeightEntryIn,
    WorkoutIn,
)
from fittrack.services import GoalService, NutritionService, WeightService, WorkoutService

NOW = dt.datetime(2025, 6, 1, 12, 0)


def days_ago(n: float) -> dt.datetime:
    return NOW - dt.timedelta(days=n)


@pytest.mark.asyncio
async def test_weight_latest_compares_with_previous(db, user) -> None:
    svc = WeightService(db)
    await svc.create(user, WeightEntryIn(weight_value=82, measured_at=days_ago(14), body_fat_pct=21), NOW)
    await svc.create(user, WeightEntryIn(weight_value=176.4, weight_unit="lbs", measured_at=NOW, body_fat_pct=20), NOW)

    out = await svc.latest(user)
    assert out.entry.weight_unit == "lbs"
    assert out.entry.weight_kg == pytest.approx(80.01, abs=0.01)
    assert out.entry.bmi == 24.7
    assert out.entry.bmi_category == "normal"
    assert out.comparison is not None
    assert out.comparison.weight_trend == "decreased"
    assert out.comparison.days_between == 14


@pytest.mark.asyncio
async def test_weight_summary_and_trends(db, user) -> None:
    svc = WeightService(db)
    await svc.bulk_import(
        user,
        [WeightEntryIn(weight_value=w, measured_at=days_ago(d)) for w, d in ((84, 40), (83, 20), (82, 6), (81, 0))],
        NOW,
    )
    summary = await svc.summary(user, NOW)
    assert summary.total_entries == 4
    assert summary.weight_change_30_days == -3
    assert summary.last_logged_days == 0
    assert summary.consistency.this_week == pytest.approx(2 / 7 * 100)

    trends = await svc.trends(user, "month", NOW)
    assert len(trends.trends) == 3
    assert trends.statistics is not None
    assert trends.statistics.total_change == -2

    stats = await svc.stats(user, None, None, NOW)
    assert stats.total_entries == 3
    assert stats.weight_change_last_week == -2


@pytest.mark.asyncio
async def test_weight_missing_entry(db, user) -> None:
    with pytest.raises(NotFoundError):
        await WeightService(db).get(user, 12345)


def cardio(**kw) -> WorkoutIn:
    base = dict(name="Evening run", type="cardio", start_time=NOW - dt.timedelta(minutes=45))
    base.update(kw)
    return WorkoutIn(**base)


@pytest.mark.asyncio
async def test_workout_lifecycle(db, user) -> None:
    await WeightService(db).create(user, WeightEntryIn(weight_value=80, measured_at=days_ago(1)), NOW)
    svc = WorkoutService(db)
    w = await svc.create(user, cardio(), NOW)
    assert w.completion_status == "planned"
    assert w.calories_burned is None

    w = await svc.complete(user, w.id, NOW, mood_after=8)
    assert w.end_time == NOW
    assert w.actual_duration_min == 45
    assert w.calories_burned == 411

    with pytest.raises(TransitionError):
        await svc.start(user, w.id, NOW)


@pytest.mark.asyncio
async def test_workout_exercises_and_template(db, user) -> None:
    svc = WorkoutService(db)
    template = await svc.create(
        user,
        WorkoutIn(
            name="Push day",
            type="strength",
            is_template=True,
            exercises=[
                ExerciseIn(
                    name="Bench",
                    muscle_groups=["chest", "triceps"],
                    sets=[SetIn(set_number=1, weight_value=100, reps=5), SetIn(set_number=2, weight_value=100, reps=5)],
                )
            ],
        ),
        NOW,
    )
    assert template.exercises[0].total_volume == 1000

    template = await svc.add_exercise(
        user, template.id, ExerciseIn(name="Dips", sets=[SetIn(set_number=1, reps=12)]), NOW
    )
    assert [e.name for e in template.exercises] == ["Bench", "Dips"]

    copy = await svc.from_template(user, template.id, NOW)
    assert copy.id != template.id
    assert copy.is_template is False
    assert copy.completion_status == "planned"
    assert [e.name for e in copy.exercises] == ["Bench", "Dips"]

    assert [t.id for t in await svc.templates(user)] == [template.id]


@pytest.mark.asyncio
async def test_meal_feeds_daily_view(db, user) -> None:
    svc = NutritionService(db)
    meal = await svc.create_meal(
        user,
        MealIn(
            type="lunch",
            meal_time=NOW,
            foods=[
                FoodItemIn(name="Rice", quantity_value=150, quantity_unit="g", calories=200, protein_g=4, carbs_g=44, fat_g=1),
                FoodItemIn(name="Tuna", quantity_value=1, quantity_unit="piece", calories=100, protein_g=21, carbs_g=0, fat_g=1),
            ],
        ),
        NOW,
    )
    assert meal.total_calories == 300
    assert meal.daily_id is not None

    await svc.add_water(user, NOW.date(), WaterIn(amount=1, unit="l"))
    water = await svc.add_water(user, NOW.date(), WaterIn(amount=2, unit="cup"))
    assert water.total_water == pytest.approx(1473.176)

    day = await svc.daily(user, NOW.date())
    assert [m.id for m in day.meals] == [meal.id]
    assert day.totals.protein == 25

    empty = await svc.daily(user, NOW.date() - dt.timedelta(days=3))
    assert empty.meals == []
    assert empty.goal_progress.calories == 0


@pytest.mark.asyncio
async def test_recommendations_use_profile(db, user) -> None:
    await WeightService(db).create(user, WeightEntryIn(weight_value=80, measured_at=NOW), NOW)
    rec = await NutritionService(db).recommendations(user, NOW)
    # male, 35 years, 180 cm, 80 kg, moderate
    assert rec.bmr == 1825
    assert rec.tdee == 2829
    assert rec.calories == 2829


def goal_in(**kw) -> GoalIn:
    base = dict(
        title="Squat 100",
        description="Work up to a 100 kg squat",
        category="strength",
        status="active",
        target_value=100,
        current_value=60,
        unit="kg",
        start_date=days_ago(30),
        target_date=NOW + dt.timedelta(days=60),
        milestones=[MilestoneIn(title="90", target_value=90, unit="kg"), MilestoneIn(title="80", target_value=80, unit="kg")],
    )
    base.update(kw)
    return GoalIn(**base)


@pytest.mark.asyncio
async def test_goal_progress_hits_milestones_and_completes(db, user) -> None:
    svc = GoalService(db)
    g = await svc.create(user, goal_in(), NOW)
    assert [m.target_value for m in g.milestones] == [80, 90]

    g = await svc.update_progress(user, g.id, ProgressIn(current_value=85, notes="felt strong"), NOW)
    assert g.status == "active"
    assert [m.is_achieved for m in g.milestones] == [True, False]
    assert g.last_progress_at == NOW
    assert len(g.progress_updates) == 1

    later = NOW + dt.timedelta(days=1)
    g = await svc.update_progress(user, g.id, ProgressIn(current_value=100), later)
    assert g.status == "completed"
    assert g.completed_at == later


@pytest.mark.asyncio
async def test_goal_status_rules(db, user) -> None:
    svc = GoalService(db)
    g = await svc.create(user, goal_in(status="draft"), NOW)
    with pytest.raises(TransitionError):
        await svc.change_status(user, g.id, StatusIn(status="completed"), NOW)

    g = await svc.change_status(user, g.id, StatusIn(status="active", reason="ready"), NOW)
    assert g.status == "active"
    assert "ready" in g.notes

    g = await svc.change_status(user, g.id, StatusIn(status="abandoned"), NOW)
    with pytest.raises(TransitionError):
        await svc.change_status(user, g.id, StatusIn(status="active"), NOW)


@pytest.mark.asyncio
async def test_weight_loss_goal_sync(db, user) -> None:
    await WeightService(db).create(user, WeightEntryIn(weight_value=86, measured_at=NOW), NOW)
    svc = GoalService(db)
    g = await svc.create(
        user,
        goal_in(
            title="Lose 10",
            category="weight-loss",
            target_value=10,
            current_value=0,
            starting_value=90,
            milestones=[MilestoneIn(title="first 3", target_value=3, unit="kg")],
        ),
        NOW,
    )
    out = await svc.sync(user, g.id, NOW)
    assert out.updated_fields == ["current_value", "last_progress_at"]
    assert out.goal.current_value == 4
    assert out.goal.progress_percentage == 40
    assert out.goal.milestones[0].is_achieved
    assert out.goal.recent_progress[0].source == "weight"


@pytest.mark.asyncio
async def test_goal_dashboard(db, user) -> None:
    svc = GoalService(db)
    await svc.create(user, goal_in(), NOW)
    await svc.create(user, goal_in(title="Old", start_date=days_ago(60), target_date=NOW + dt.timedelta(days=1)), NOW)
    dash = await svc.dashboard(user, NOW)
    assert dash.stats.total == 2
    assert dash.stats.active == 2
    assert dash.stats.overall_progress == 60
    assert len(dash.needs_update_goals) == 2
    assert dash.active_goals[0].title == "Old"


@pytest.mark.asyncio
async def test_workout_created_completed_uses_actual_duration(db, user) -> None:
    await WeightService(db).create(user, WeightEntryIn(weight_value=80, measured_at=days_ago(1)), NOW)
    svc = WorkoutService(db)

    done = await svc.create(
        user, WorkoutIn(name="Run", type="cardio", actual_duration_min=45, completion_status="completed"), NOW
    )
    assert done.start_time == NOW
    assert done.end_time == NOW
    assert done.calories_burned == 411

    planned = await svc.create(user, WorkoutIn(name="Run", type="cardio", actual_duration_min=45), NOW)
    assert planned.completion_status == "planned"
    assert planned.calories_burned == 411


@pytest.mark.asyncio
async def test_workout_update_keeps_omitted_fields(db, user) -> None:
    svc = WorkoutService(db)
    w = await svc.create(
        user,
        WorkoutIn(
            name="Legs",
            type="strength",
            intensity="high",
            notes="heavy day",
            exercises=[ExerciseIn(name="Squat", sets=[SetIn(set_number=1, weight_value=100, reps=5)])],
        ),
        NOW,
    )
    await svc.start(user, w.id, NOW)

    w = await svc.update(user, w.id, WorkoutIn(name="Leg day"), NOW)
    assert w.name == "Leg day"
    assert w.completion_status == "in-progress"
    assert w.intensity == "high"
    assert w.notes == "heavy day"
    assert [e.name for e in w.exercises] == ["Squat"]

    with pytest.raises(TransitionError):
        await svc.update(user, w.id, WorkoutIn(name="Leg day", completion_status="planned"), NOW)


@pytest.mark.asyncio
async def test_activating_overdue_goal_expires_it(db, user) -> None:
    svc = GoalService(db)
    g = await svc.create(user, goal_in(status="draft", target_date=days_ago(1), milestones=[]), NOW)
    assert g.status == "draft"

    g = await svc.change_status(user, g.id, StatusIn(status="active"), NOW)
    assert g.status == "expired"


@pytest.mark.asyncio
async def test_activating_reached_goal_completes_it(db, user) -> None:
    svc = GoalService(db)
    g = await svc.create(user, goal_in(status="draft", current_value=100, milestones=[]), NOW)
    assert g.status == "draft"

    g = await svc.change_status(user, g.id, StatusIn(status="active"), NOW)
    assert g.status == "completed"
    assert g.completed_at == NOW


@pytest.mark.asyncio
async def test_goal_update_without_status_keeps_it(db, user) -> None:
    svc = GoalService(db)
    g = await svc.create(user, goal_in(priority="high", notes="front squat too"), NOW)

    edit = GoalIn(
        title="Squat 105",
        description="Work up to a 105 kg squat",
        category="strength",
        target_value=105,
        unit="kg",
        target_date=NOW + dt.timedelta(days=60),
    )
    g = await svc.update(user, g.id, edit, NOW)
    assert g.title == "Squat 105"
    assert g.status == "active"
    assert g.priority == "high"
    assert g.notes == "front squat too"
    assert g.current_value == 60
    assert len(g.milestones) == 2
