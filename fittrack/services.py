from __future__ import annotations

import datetime as dt
import logging
from collections import Counter
from dataclasses import asdict
from collections.abc import Sequence
from typing import Any, Literal

from sqlalchemy.ext.asyncio import AsyncSession

from fittrack import body_metrics, goal_progress, nutrition, workout_metrics
from fittrack.config import settings
from fittrack.errors import NotFoundError, TransitionError
from fittrack.models import (
    DailyNutrition,
    Exercise,
    FoodItem,
    Goal,
    Meal,
    Milestone,
    ProgressUpdate,
    User,
    WeightEntry,
    Workout,
    WorkoutSet,
)
from fittrack.normalize import normalize_goal, normalize_meal, normalize_weight_entry, normalize_workout
from fittrack.repositories import (
    DailyNutritionRepo,
    GoalRepo,
    MealRepo,
    UserRepo,
    WeightEntryRepo,
    WorkoutRepo,
)
from fittrack.schemas import (
    AdviceOut,
    BmiPoint,
    CategoryStatsOut,
    ConsistencyOut,
    DailyAveragesOut,
    DailyNutritionIn,
    DailyNutritionOut,
    DailyTrendOut,
    ExerciseIn,
    ExpectedProgressOut,
    FavoriteFoodOut,
    FoodItemIn,
    GoalAnalyticsOut,
    GoalDashboardOut,
    GoalDashboardStatsOut,
    GoalIn,
    GoalInsightsOut,
    GoalStatsOut,
    GoalSyncOut,
    LatestWeightOut,
    MealIn,
    MilestoneIn,
    MonthCountOut,
    NutritionStatsOut,
    PersonalRecordOut,
    ProfileIn,
    ProgressIn,
    Quantity,
    RecentWorkoutOut,
    RecommendationOut,
    StatusIn,
    TrendStatisticsOut,
    TypeSuccessOut,
    UserStatsOut,
    WaterIn,
    WaterOut,
    WeightComparisonOut,
    WeightEntryIn,
    WeightStatsOut,
    WeightSummaryOut,
    WeightTrendsOut,
    WorkoutIn,
    WorkoutStatsOut,
)
from fittrack.units import from_kg, height_to_cm, round1, round_half_up, volume_to_ml
from fittrack.views import (
    daily_out,
    goal_out,
    meal_out,
    meal_totals,
    profile_completion,
    progress_out,
    user_height_m,
    weight_entry_out,
)

logger = logging.getLogger(__name__)

Period = Literal["week", "month", "quarter", "year"]

PERIOD_DAYS: dict[str, int] = {"week": 7, "month": 30, "quarter": 90, "year": 365}
DEFAULT_STATS_DAYS = 30


def _range(start: dt.datetime | None, end: dt.datetime | None, now: dt.datetime) -> tuple[dt.datetime, dt.datetime]:
    end = end or now
    start = start or end - dt.timedelta(days=DEFAULT_STATS_DAYS)
    return start, end


def _avg(xs: Sequence[float]) -> float:
    return sum(xs) / len(xs) if xs else 0.0


async def _current_weight_kg(db: AsyncSession, user: User) -> float:
    latest = await WeightEntryRepo(db).latest(user.id)
    if latest:
        return latest[0].weight_kg
    return user.weight_kg or settings.reference_weight_kg


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepo(db)

    async def update_profile(self, user: User, data: ProfileIn) -> User:
        for field, value in data.model_dump(exclude={"fitness_goals"}).items():
            setattr(user, field, value)
        user.fitness_goals = data.fitness_goals
        await self.db.flush()
        logger.info("Profile updated: user_id=%s", user.id)
        return user

    async def stats(self, user: User) -> UserStatsOut:
        counts = await self.users.counts(user.id)
        return UserStatsOut(profile_completion=profile_completion(user), member_since=user.created_at, **counts)


class WeightService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.entries = WeightEntryRepo(db)

    def _build(self, user: User, data: WeightEntryIn, now: dt.datetime) -> WeightEntry:
        entry = WeightEntry(user_id=user.id)
        self._apply(entry, data, now)
        return entry

    def _apply(self, entry: WeightEntry, data: WeightEntryIn, now: dt.datetime) -> None:
        for field, value in data.model_dump(exclude={"measurements", "tags", "measured_at"}).items():
            setattr(entry, field, value)
        entry.measurements = data.measurements
        entry.tags = data.tags
        entry.measured_at = data.measured_at or entry.measured_at or now
        normalize_weight_entry(entry)

    async def get(self, user: User, entry_id: int) -> WeightEntry:
        entry = await self.entries.get(user.id, entry_id)
        if entry is None:
            raise NotFoundError("Weight entry")
        return entry

    async def create(self, user: User, data: WeightEntryIn, now: dt.datetime) -> WeightEntry:
        entry = await self.entries.add(self._build(user, data, now))
        logger.info("Weight entry created: user_id=%s entry_id=%s kg=%.1f", user.id, entry.id, entry.weight_kg)
        return entry

    async def update(self, user: User, entry_id: int, data: WeightEntryIn, now: dt.datetime) -> WeightEntry:
        entry = await self.get(user, entry_id)
        self._apply(entry, data, now)
        await self.db.flush()
        return entry

    async def delete(self, user: User, entry_id: int) -> None:
        entry = await self.get(user, entry_id)
        await self.entries.delete(entry)
        logger.info("Weight entry deleted: user_id=%s entry_id=%s", user.id, entry_id)

    async def bulk_import(self, user: User, items: Sequence[WeightEntryIn], now: dt.datetime) -> list[WeightEntry]:
        entries = await self.entries.add_all([self._build(user, x, now) for x in items])
        logger.info("Weight bulk import: user_id=%s count=%s", user.id, len(entries))
        return entries

    async def latest(self, user: User) -> LatestWeightOut:
        rows = await self.entries.latest(user.id, limit=2)
        if not rows:
            raise NotFoundError("Weight entry")
        comparison = progress_out(rows[0], rows[1]) if len(rows) > 1 else None
        return LatestWeightOut(entry=weight_entry_out(rows[0], user), comparison=comparison)

    async def compare(self, user: User, first_id: int, second_id: int) -> WeightComparisonOut:
        first = await self.get(user, first_id)
        second = await self.get(user, second_id)
        return WeightComparisonOut(
            entry1=weight_entry_out(first, user),
            entry2=weight_entry_out(second, user),
            comparison=progress_out(first, second),
        )

    async def trends(self, user: User, period: Period, now: dt.datetime) -> WeightTrendsOut:
        start = now - dt.timedelta(days=PERIOD_DAYS[period])
        trends = body_metrics.daily_trends(await self.entries.between(user.id, start, now))
        stats = body_metrics.trend_statistics(trends)
        return WeightTrendsOut(
            trends=[DailyTrendOut.model_validate(t) for t in trends],
            statistics=TrendStatisticsOut.model_validate(stats) if stats else None,
        )

    async def _change_since(self, latest: WeightEntry, user: User, since: dt.datetime) -> float | None:
        older = await self.entries.latest(user.id, before=since)
        if not older:
            return None
        return round1(latest.weight_kg - older[0].weight_kg)

    async def stats(
        self, user: User, start: dt.datetime | None, end: dt.datetime | None, now: dt.datetime
    ) -> WeightStatsOut:
        start, end = _range(start, end, now)
        entries = await self.entries.between(user.id, start, end)
        base = body_metrics.weight_stats(entries)
        out = WeightStatsOut(**asdict(base), start=start, end=end)

        latest = await self.entries.latest(user.id)
        if not latest:
            return out
        cur = latest[0]
        unit = user.preferred_weight_unit or "kg"
        height_m = user_height_m(user)
        bmi_points = []
        for e in entries[-10:]:
            b = body_metrics.bmi(e.weight_kg, height_m)
            bmi_points.append(BmiPoint(date=e.measured_at, bmi=b, category=body_metrics.bmi_category(b)))
        return out.model_copy(
            update={
                "current_weight": Quantity(value=body_metrics.weight_in_unit(cur.weight_kg, unit), unit=unit),
                "weight_change_last_week": await self._change_since(cur, user, now - dt.timedelta(days=7)),
                "weight_change_last_month": await self._change_since(cur, user, now - dt.timedelta(days=30)),
                "bmi_trend": bmi_points,
            }
        )

    async def summary(self, user: User, now: dt.datetime) -> WeightSummaryOut:
        total = await self.entries.count(user.id)
        week = await self.entries.count(user.id, since=now - dt.timedelta(days=7))
        month = await self.entries.count(user.id, since=now - dt.timedelta(days=30))
        consistency = ConsistencyOut.model_validate(body_metrics.logging_consistency(week, month, total))

        latest = await self.entries.latest(user.id)
        if not latest:
            return WeightSummaryOut(
                total_entries=0,
                latest_weight=None,
                weight_change_30_days=None,
                current_bmi=None,
                bmi_category=None,
                last_logged_days=None,
                consistency=consistency,
            )
        cur = latest[0]
        unit = user.preferred_weight_unit or "kg"
        bmi = body_metrics.bmi(cur.weight_kg, user_height_m(user))
        return WeightSummaryOut(
            total_entries=total,
            latest_weight=Quantity(value=body_metrics.weight_in_unit(cur.weight_kg, unit), unit=unit),
            weight_change_30_days=await self._change_since(cur, user, now - dt.timedelta(days=30)),
            current_bmi=bmi,
            bmi_category=body_metrics.bmi_category(bmi),
            last_logged_days=(now - cur.measured_at).days,
            consistency=consistency,
        )


class WorkoutService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.workouts = WorkoutRepo(db)

    @staticmethod
    def _build_exercise(data: ExerciseIn) -> Exercise:
        ex = Exercise(
            name=data.name,
            category=data.category,
            personal_record=data.personal_record,
            difficulty=data.difficulty,
            notes=data.notes,
            total_volume=0.0,
        )
        ex.muscle_groups = list(data.muscle_groups)
        ex.sets = [WorkoutSet(**s.model_dump()) for s in data.sets]
        return ex

    def _apply(self, workout: Workout, data: WorkoutIn, *, partial: bool = False) -> None:
        # updates touch only the keys present in the request body
        sent = data.model_fields_set if partial else set(WorkoutIn.model_fields)
        fields = data.model_dump(include=sent, exclude={"exercises", "equipment", "tags", "start_time"})
        for field, value in fields.items():
            setattr(workout, field, value)
        if data.start_time is not None:
            workout.start_time = data.start_time
        if "equipment" in sent:
            workout.equipment = data.equipment
        if "tags" in sent:
            workout.tags = data.tags
        if "exercises" in sent:
            workout.exercises = [self._build_exercise(x) for x in data.exercises]

    async def _normalize(self, user: User, workout: Workout, now: dt.datetime) -> Workout:
        if workout.start_time is None:
            workout.start_time = now
        normalize_workout(workout, now=now, user_weight_kg=await _current_weight_kg(self.db, user))
        await self.db.flush()
        return workout

    async def get(self, user: User, workout_id: int) -> Workout:
        w = await self.workouts.get(user.id, workout_id)
        if w is None:
            raise NotFoundError("Workout")
        return w

    async def create(self, user: User, data: WorkoutIn, now: dt.datetime) -> Workout:
        w = Workout(user_id=user.id)
        self._apply(w, data)
        await self._normalize(user, w, now)
        await self.workouts.add(w)
        logger.info("Workout created: user_id=%s workout_id=%s type=%s", user.id, w.id, w.type)
        return w

    async def update(self, user: User, workout_id: int, data: WorkoutIn, now: dt.datetime) -> Workout:
        w = await self.get(user, workout_id)
        if "completion_status" in data.model_fields_set and data.completion_status != w.completion_status:
            if not workout_metrics.can_transition(w.completion_status, data.completion_status):
                raise TransitionError("Workout", w.completion_status, data.completion_status)
        self._apply(w, data, partial=True)
        return await self._normalize(user, w, now)

    async def delete(self, user: User, workout_id: int) -> None:
        w = await self.get(user, workout_id)
        await self.workouts.delete(w)
        logger.info("Workout deleted: user_id=%s workout_id=%s", user.id, workout_id)

    async def add_exercise(self, user: User, workout_id: int, data: ExerciseIn, now: dt.datetime) -> Workout:
        w = await self.get(user, workout_id)
        w.exercises.append(self._build_exercise(data))
        return await self._normalize(user, w, now)

    def _exercise(self, workout: Workout, exercise_id: int) -> Exercise:
        for ex in workout.exercises:
            if ex.id == exercise_id:
                return ex
        raise NotFoundError("Exercise")

    async def update_exercise(
        self, user: User, workout_id: int, exercise_id: int, data: ExerciseIn, now: dt.datetime
    ) -> Workout:
        w = await self.get(user, workout_id)
        ex = self._exercise(w, exercise_id)
        fresh = self._build_exercise(data)
        ex.name = fresh.name
        ex.category = fresh.category
        ex.muscle_groups = fresh.muscle_groups
        ex.personal_record = fresh.personal_record
        ex.difficulty = fresh.difficulty
        ex.notes = fresh.notes
        ex.sets = [WorkoutSet(**s.model_dump()) for s in data.sets]
        return await self._normalize(user, w, now)

    async def delete_exercise(self, user: User, workout_id: int, exercise_id: int, now: dt.datetime) -> Workout:
        w = await self.get(user, workout_id)
        w.exercises.remove(self._exercise(w, exercise_id))
        return await self._normalize(user, w, now)

    async def _transition(self, user: User, workout_id: int, new_status: str) -> Workout:
        w = await self.get(user, workout_id)
        if not workout_metrics.can_transition(w.completion_status, new_status):
            raise TransitionError("Workout", w.completion_status, new_status)
        w.completion_status = new_status
        return w

    async def start(self, user: User, workout_id: int, now: dt.datetime) -> Workout:
        w = await self._transition(user, workout_id, "in-progress")
        w.start_time = now
        logger.info("Workout started: user_id=%s workout_id=%s", user.id, workout_id)
        return await self._normalize(user, w, now)

    async def complete(
        self,
        user: User,
        workout_id: int,
        now: dt.datetime,
        *,
        mood_after: int | None = None,
        energy_after: int | None = None,
        notes: str | None = None,
    ) -> Workout:
        w = await self._transition(user, workout_id, "completed")
        if mood_after is not None:
            w.mood_after = mood_after
        if energy_after is not None:
            w.energy_after = energy_after
        if notes:
            w.notes = notes
        await self._normalize(user, w, now)
        logger.info("Workout completed: user_id=%s workout_id=%s kcal=%s", user.id, workout_id, w.calories_burned)
        return w

    async def stats(
        self, user: User, start: dt.datetime | None, end: dt.datetime | None, now: dt.datetime
    ) -> WorkoutStatsOut:
        start, end = _range(start, end, now)
        done = await self.workouts.completed_between(user.id, start, end)
        recent = await self.workouts.recent_completed(user.id)

        records = []
        for w, ex in await self.workouts.personal_records(user.id):
            max_weight, max_reps = workout_metrics.best_set(ex.sets)
            records.append(
                PersonalRecordOut(
                    workout_id=w.id,
                    exercise_name=ex.name,
                    max_weight=max_weight,
                    max_reps=max_reps,
                    total_volume=ex.total_volume,
                    date=w.created_at,
                )
            )

        return WorkoutStatsOut(
            total_workouts=len(done),
            total_duration=sum(w.actual_duration_min or 0 for w in done),
            total_calories=sum(w.calories_burned or 0 for w in done),
            average_intensity=workout_metrics.average_intensity(w.intensity for w in done),
            workout_types=sorted({w.type for w in done}),
            recent_workouts=[RecentWorkoutOut.model_validate(w) for w in recent],
            personal_records=records,
            start=start,
            end=end,
        )

    async def templates(self, user: User) -> list[Workout]:
        return await self.workouts.templates(user.id)

    async def from_template(self, user: User, template_id: int, now: dt.datetime) -> Workout:
        t = await self.workouts.get_template(user.id, template_id)
        if t is None:
            raise NotFoundError("Template")
        w = Workout(
            user_id=user.id,
            name=t.name,
            description=t.description,
            type=t.type,
            intensity=t.intensity,
            planned_duration_min=t.planned_duration_min,
            start_time=now,
            location=t.location,
            body_weight_unit=t.body_weight_unit,
            is_template=False,
            completion_status="planned",
        )
        w.equipment = t.equipment
        w.tags = t.tags
        for src in t.exercises:
            ex = Exercise(
                name=src.name,
                category=src.category,
                personal_record=False,
                difficulty=src.difficulty,
                notes=src.notes,
                total_volume=0.0,
            )
            ex.muscle_groups = src.muscle_groups
            ex.sets = [
                WorkoutSet(
                    set_number=s.set_number,
                    reps=s.reps,
                    weight_value=s.weight_value,
                    weight_unit=s.weight_unit,
                    duration_value=s.duration_value,
                    duration_unit=s.duration_unit,
                    distance_value=s.distance_value,
                    distance_unit=s.distance_unit,
                    rest_seconds=s.rest_seconds,
                    completed=False,
                )
                for s in src.sets
            ]
            w.exercises.append(ex)
        await self._normalize(user, w, now)
        await self.workouts.add(w)
        logger.info("Workout created from template: user_id=%s template_id=%s workout_id=%s", user.id, t.id, w.id)
        return w


class NutritionService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.meals = MealRepo(db)
        self.days = DailyNutritionRepo(db)

    @staticmethod
    def _build_food(data: FoodItemIn) -> FoodItem:
        f = FoodItem(**data.model_dump(exclude={"vitamins", "minerals"}))
        f.vitamins = [v.model_dump() for v in data.vitamins]
        f.minerals = [m.model_dump() for m in data.minerals]
        return f

    def _apply(self, meal: Meal, data: MealIn, now: dt.datetime) -> None:
        for field, value in data.model_dump(exclude={"foods", "tags", "meal_time"}).items():
            setattr(meal, field, value)
        meal.meal_time = data.meal_time or meal.meal_time or now
        meal.tags = data.tags
        meal.foods = [self._build_food(f) for f in data.foods]
        normalize_meal(meal)

    async def _link_day(self, user: User, meal: Meal) -> None:
        day = await self.days.get_or_create(user.id, meal.meal_time.date())
        meal.daily_id = day.id

    async def get_meal(self, user: User, meal_id: int) -> Meal:
        m = await self.meals.get(user.id, meal_id)
        if m is None:
            raise NotFoundError("Meal")
        return m

    async def create_meal(self, user: User, data: MealIn, now: dt.datetime) -> Meal:
        meal = Meal(user_id=user.id)
        self._apply(meal, data, now)
        await self._link_day(user, meal)
        await self.meals.add(meal)
        logger.info("Meal created: user_id=%s meal_id=%s kcal=%.0f", user.id, meal.id, meal.total_calories)
        return meal

    async def update_meal(self, user: User, meal_id: int, data: MealIn, now: dt.datetime) -> Meal:
        meal = await self.get_meal(user, meal_id)
        self._apply(meal, data, now)
        await self._link_day(user, meal)
        await self.db.flush()
        return meal

    async def delete_meal(self, user: User, meal_id: int) -> None:
        meal = await self.get_meal(user, meal_id)
        await self.meals.delete(meal)
        logger.info("Meal deleted: user_id=%s meal_id=%s", user.id, meal_id)

    async def daily(self, user: User, date: dt.date) -> DailyNutritionOut:
        day = await self.days.get(user.id, date)
        if day is None:
            # empty view, nothing persisted until goals or water are logged
            day = DailyNutrition(user_id=user.id, date=date, water_total_ml=0.0, body_weight_unit="kg")
            return daily_out(day, [])
        return daily_out(day, await self.meals.for_days([day.id]))

    async def set_goals(self, user: User, date: dt.date, data: DailyNutritionIn) -> DailyNutritionOut:
        day = await self.days.get_or_create(user.id, date)
        day.calories_goal = data.goals.calories
        day.protein_goal = data.goals.protein
        day.carbs_goal = data.goals.carbohydrates
        day.fat_goal = data.goals.fat
        day.fiber_goal = data.goals.fiber
        day.water_goal_ml = data.water_goal_ml
        day.supplements = [s.model_dump() for s in data.supplements]
        day.body_weight_value = data.body_weight_value
        day.body_weight_unit = data.body_weight_unit
        day.symptoms = data.symptoms
        day.notes = data.notes
        await self.db.flush()
        return daily_out(day, await self.meals.for_days([day.id]))

    async def add_water(self, user: User, date: dt.date, data: WaterIn) -> WaterOut:
        day = await self.days.get_or_create(user.id, date)
        day.water_total_ml = (day.water_total_ml or 0.0) + volume_to_ml(data.amount, data.unit)
        await self.db.flush()
        return WaterOut(total_water=day.water_total_ml)

    async def stats(
        self, user: User, start: dt.datetime | None, end: dt.datetime | None, now: dt.datetime
    ) -> NutritionStatsOut:
        start, end = _range(start, end, now)
        meals = await self.meals.between(user.id, start, end)

        foods: dict[str, list[FoodItem]] = {}
        for m in meals:
            for f in m.foods:
                foods.setdefault(f.name, []).append(f)
        ranked = sorted(foods.items(), key=lambda kv: len(kv[1]), reverse=True)[:10]
        favorites = [
            FavoriteFoodOut(
                name=name,
                count=len(items),
                avg_calories=_avg([f.calories for f in items]),
                category=items[0].category,
            )
            for name, items in ranked
        ]

        days = await self.days.between(user.id, start.date(), end.date())
        by_day: dict[int, list[Meal]] = {}
        for m in await self.meals.for_days([d.id for d in days]):
            by_day.setdefault(m.daily_id, []).append(m)
        day_totals = [nutrition.sum_totals(meal_totals(m) for m in by_day.get(d.id, [])) for d in days]
        daily = DailyAveragesOut(
            avg_calories=_avg([t.calories for t in day_totals]),
            avg_protein=_avg([t.protein for t in day_totals]),
            avg_carbs=_avg([t.carbohydrates for t in day_totals]),
            avg_fat=_avg([t.fat for t in day_totals]),
            avg_water=_avg([d.water_total_ml or 0.0 for d in days]),
        )

        return NutritionStatsOut(
            total_meals=len(meals),
            average_calories=_avg([m.total_calories for m in meals]),
            average_protein=_avg([m.total_protein for m in meals]),
            average_carbs=_avg([m.total_carbohydrates for m in meals]),
            average_fat=_avg([m.total_fat for m in meals]),
            meal_types=sorted({m.type for m in meals}),
            recent_meals=[meal_out(m) for m in meals[:5]],
            favorite_foods=favorites,
            daily_averages=daily,
            start=start,
            end=end,
        )

    async def suggestions(self, user: User, meal_type: str | None, calories: float | None) -> list[Meal]:
        lo = hi = None
        if calories is not None:
            lo, hi = calories * 0.8, calories * 1.2
        return await self.meals.suggestions(user.id, meal_type=meal_type, min_calories=lo, max_calories=hi)

    async def recommendations(self, user: User, now: dt.datetime) -> RecommendationOut:
        age = nutrition.age_on(user.date_of_birth, now.date()) if user.date_of_birth else None
        height_cm = height_to_cm(user.height_value, user.height_unit or "cm") if user.height_value else None
        rec = nutrition.recommend_targets(
            sex=user.sex,  # type: ignore[arg-type]
            age=age,
            height_cm=height_cm,
            weight_kg=await _current_weight_kg(self.db, user),
            activity=user.activity_level,  # type: ignore[arg-type]
            fitness_goals=user.fitness_goals,
        )
        return RecommendationOut.model_validate(rec)


class GoalService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.goals = GoalRepo(db)

    @staticmethod
    def _build_milestone(data: MilestoneIn) -> Milestone:
        return Milestone(**data.model_dump(), current_value=0.0, is_achieved=False)

    async def get(self, user: User, goal_id: int) -> Goal:
        g = await self.goals.get(user.id, goal_id)
        if g is None:
            raise NotFoundError("Goal")
        return g

    async def create(self, user: User, data: GoalIn, now: dt.datetime) -> Goal:
        g = Goal(user_id=user.id, **data.model_dump(exclude={"milestones", "tags", "start_date"}))
        g.start_date = data.start_date or now
        g.tags = data.tags
        g.milestones = [self._build_milestone(m) for m in data.milestones]
        g.progress_updates = []
        goal_progress.achieve_milestones(g.milestones, g.current_value, now)
        normalize_goal(g, now=now)
        if g.status == "completed" and g.completed_at is None:
            g.completed_at = now
        await self.goals.add(g)
        logger.info("Goal created: user_id=%s goal_id=%s category=%s", user.id, g.id, g.category)
        return g

    async def update(self, user: User, goal_id: int, data: GoalIn, now: dt.datetime) -> Goal:
        g = await self.get(user, goal_id)
        sent = data.model_fields_set
        new_status = data.status if "status" in sent else g.status
        if not goal_progress.can_transition(g.status, new_status):
            raise TransitionError("Goal", g.status, new_status)
        # only the keys present in the request body are assigned
        fields = data.model_dump(include=sent, exclude={"milestones", "tags", "start_date", "status"})
        for field, value in fields.items():
            setattr(g, field, value)
        if data.start_date is not None:
            g.start_date = data.start_date
        if "tags" in sent:
            g.tags = data.tags
        if "milestones" in sent:
            g.milestones = [self._build_milestone(m) for m in data.milestones]
        goal_progress.set_status(g, new_status, now)
        goal_progress.achieve_milestones(g.milestones, g.current_value, now)
        normalize_goal(g, now=now)
        await self.db.flush()
        return g

    async def delete(self, user: User, goal_id: int) -> None:
        g = await self.get(user, goal_id)
        await self.goals.delete(g)
        logger.info("Goal deleted: user_id=%s goal_id=%s", user.id, goal_id)

    def _record(self, goal: Goal, value: float, now: dt.datetime, **kw: Any) -> ProgressUpdate:
        upd = ProgressUpdate(value=value, unit=goal.unit, recorded_at=now, **kw)
        goal.progress_updates.append(upd)
        goal.last_progress_at = now
        return upd

    async def update_progress(self, user: User, goal_id: int, data: ProgressIn, now: dt.datetime) -> Goal:
        g = await self.get(user, goal_id)
        if data.current_value is not None:
            g.current_value = data.current_value
            self._record(
                g, data.current_value, now, notes=data.notes, mood=data.mood, confidence=data.confidence, source="manual"
            )
        hit = goal_progress.achieve_milestones(g.milestones, g.current_value, now)
        if data.completed_at is not None and g.status != "completed":
            if not goal_progress.can_transition(g.status, "completed"):
                raise TransitionError("Goal", g.status, "completed")
            goal_progress.set_status(g, "completed", data.completed_at)
        normalize_goal(g, now=now)
        await self.db.flush()
        logger.info(
            "Goal progress: user_id=%s goal_id=%s value=%s status=%s milestones_hit=%s",
            user.id, g.id, g.current_value, g.status, len(hit),
        )
        return g

    async def change_status(self, user: User, goal_id: int, data: StatusIn, now: dt.datetime) -> Goal:
        g = await self.get(user, goal_id)
        if not goal_progress.can_transition(g.status, data.status):
            raise TransitionError("Goal", g.status, data.status)
        old = g.status
        goal_progress.set_status(g, data.status, now)
        normalize_goal(g, now=now)
        if data.reason:
            line = f"Status changed to {data.status}: {data.reason}"
            g.notes = f"{g.notes}\n{line}" if g.notes else line
        await self.db.flush()
        logger.info("Goal status: user_id=%s goal_id=%s %s -> %s", user.id, g.id, old, g.status)
        return g

    async def add_milestone(self, user: User, goal_id: int, data: MilestoneIn, now: dt.datetime) -> Goal:
        g = await self.get(user, goal_id)
        g.milestones.append(self._build_milestone(data))
        goal_progress.achieve_milestones(g.milestones, g.current_value, now)
        normalize_goal(g, now=now)
        await self.db.flush()
        return g

    async def insights(self, user: User, goal_id: int, now: dt.datetime) -> GoalInsightsOut:
        g = await self.get(user, goal_id)
        pct = goal_progress.goal_percentage(g)
        time_pct = goal_progress.time_progress_percentage(g.start_date, g.target_date, now)
        days_left = goal_progress.days_remaining(g.target_date, now)
        advice = goal_progress.recommendations(
            progress=pct, time_progress=time_pct, days_left=days_left, last_update_at=g.last_progress_at, now=now
        )
        expected = goal_progress.expected_progress(g.target_value, g.current_value, time_pct)
        return GoalInsightsOut(
            goal_id=g.id,
            progress_percentage=pct,
            time_progress_percentage=time_pct,
            health_status=goal_progress.health_status(g.status, time_pct, pct),
            days_remaining=days_left,
            recommendations=[AdviceOut.model_validate(a) for a in advice],
            expected_progress=ExpectedProgressOut.model_validate(expected),
        )

    async def sync(self, user: User, goal_id: int, now: dt.datetime) -> GoalSyncOut:
        g = await self.get(user, goal_id)
        updated: list[str] = []

        if g.category in ("weight-loss", "weight-gain"):
            latest = await WeightEntryRepo(self.db).latest(user.id)
            if latest:
                entry = latest[0]
                weight = from_kg(entry.weight_kg, g.unit) if g.unit in ("kg", "lbs") else entry.weight_kg
                if g.starting_value is None:
                    g.starting_value = weight
                    updated.append("starting_value")
                if g.category == "weight-loss":
                    value = max(0.0, g.starting_value - weight)
                else:
                    value = max(0.0, weight - g.starting_value)
                g.current_value = value
                self._record(g, value, now, source="weight", related_id=entry.id)
                updated += ["current_value", "last_progress_at"]

        elif g.category in ("strength", "endurance"):
            recent = await WorkoutRepo(self.db).exists_since(user.id, now - dt.timedelta(days=30))
            if recent is not None:
                self._record(g, g.current_value, now, source="workout", related_id=recent.id)
                updated.append("last_progress_at")

        if updated:
            goal_progress.achieve_milestones(g.milestones, g.current_value, now)
            normalize_goal(g, now=now)
            await self.db.flush()
        logger.info("Goal sync: user_id=%s goal_id=%s updated=%s", user.id, g.id, updated)
        return GoalSyncOut(goal=goal_out(g, now), updated_fields=updated)

    async def analytics(self, user: User, now: dt.datetime) -> GoalAnalyticsOut:
        goals = await self.goals.all_for_user(user.id)
        completed = [g for g in goals if g.status == "completed" and g.completed_at is not None]

        horizon = now - dt.timedelta(days=180)
        months = Counter((g.completed_at.year, g.completed_at.month) for g in completed if g.completed_at >= horizon)
        trend = [MonthCountOut(year=y, month=m, completed=n) for (y, m), n in sorted(months.items())]

        soon = now + dt.timedelta(days=30)
        upcoming = sorted(
            (g for g in goals if g.status == "active" and now <= g.target_date <= soon), key=lambda g: g.target_date
        )[:5]

        durations = [(g.completed_at - g.start_date).total_seconds() / 86400 for g in completed]

        by_type: dict[str, list[Goal]] = {}
        for g in goals:
            by_type.setdefault(g.type, []).append(g)
        success = []
        for t, items in sorted(by_type.items()):
            done = sum(1 for g in items if g.status == "completed")
            success.append(
                TypeSuccessOut(
                    type=t, total=len(items), completed=done, success_rate=goal_progress.completion_rate(done, len(items))
                )
            )

        return GoalAnalyticsOut(
            status_counts=dict(Counter(g.status for g in goals)),
            type_counts=dict(Counter(g.type for g in goals)),
            completion_trend=trend,
            upcoming_deadlines=[goal_out(g, now) for g in upcoming],
            average_completion_days=round_half_up(_avg(durations)),
            success_rate_by_type=success,
            total_goals=len(goals),
        )

    async def stats(self, user: User, period: Period, now: dt.datetime) -> GoalStatsOut:
        goals = await self.goals.all_for_user(user.id, created_from=now - dt.timedelta(days=PERIOD_DAYS[period]))
        completed = sum(1 for g in goals if g.status == "completed")
        return GoalStatsOut(
            total_goals=len(goals),
            active_goals=sum(1 for g in goals if g.status == "active"),
            completed_goals=completed,
            abandoned_goals=sum(1 for g in goals if g.status == "abandoned"),
            avg_progress_percentage=goal_progress.average_progress(goals),
            completion_rate=goal_progress.completion_rate(completed, len(goals)),
            categories=sorted({g.category for g in goals}),
        )

    async def categories(self, user: User) -> list[CategoryStatsOut]:
        by_cat: dict[str, list[Goal]] = {}
        for g in await self.goals.all_for_user(user.id):
            by_cat.setdefault(g.category, []).append(g)
        out = [
            CategoryStatsOut(
                category=cat,
                count=len(items),
                completed=sum(1 for g in items if g.status == "completed"),
                active=sum(1 for g in items if g.status == "active"),
                avg_progress=_avg([goal_progress.goal_percentage(g) for g in items]),
            )
            for cat, items in by_cat.items()
        ]
        return sorted(out, key=lambda c: c.count, reverse=True)

    async def dashboard(self, user: User, now: dt.datetime) -> GoalDashboardOut:
        goals = await self.goals.all_for_user(user.id)
        active = [g for g in goals if g.status == "active"]
        recent_cut = now - dt.timedelta(days=30)
        stale_cut = now - dt.timedelta(days=7)

        recently_completed = sorted(
            (g for g in goals if g.status == "completed" and g.completed_at and g.completed_at >= recent_cut),
            key=lambda g: g.completed_at,
            reverse=True,
        )[:5]
        overdue = [g for g in active if g.target_date < now]
        needs_update = [g for g in active if g.last_progress_at is None or g.last_progress_at < stale_cut]

        stats = GoalDashboardStatsOut(
            total=len(goals),
            active=len(active),
            completed=sum(1 for g in goals if g.status == "completed"),
            overdue=len(overdue),
            overall_progress=round_half_up(_avg([goal_progress.goal_percentage(g) for g in active])),
        )
        return GoalDashboardOut(
            active_goals=[goal_out(g, now) for g in sorted(active, key=lambda g: g.target_date)[:5]],
            recently_completed=[goal_out(g, now) for g in recently_completed],
            overdue_goals=[goal_out(g, now) for g in overdue],
            needs_update_goals=[goal_out(g, now) for g in needs_update[:5]],
            stats=stats,
        )
