from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import Select, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.models import DailyNutrition, Exercise, FoodItem, Goal, Meal, User, WeightEntry, Workout

T = TypeVar("T")

_PRIORITY_RANK = case({"critical": 4, "high": 3, "medium": 2, "low": 1}, value=Goal.priority, else_=0)


async def _page(db: AsyncSession, q: Select[tuple[T]], *, offset: int, limit: int) -> tuple[list[T], int]:
    total_q = select(func.count()).select_from(q.order_by(None).subquery())
    total = (await db.execute(total_q)).scalar_one()
    res = await db.execute(q.offset(offset).limit(limit))
    return list(res.scalars().all()), int(total)


def _between(q: Select[Any], col: Any, start: dt.datetime | None, end: dt.datetime | None) -> Select[Any]:
    if start is not None:
        q = q.where(col >= start)
    if end is not None:
        q = q.where(col <= end)
    return q


class UserRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_or_create(self, external_id: str) -> User:
        q: Select[tuple[User]] = select(User).where(User.external_id == external_id)
        res = await self.db.execute(q)
        u = res.scalar_one_or_none()
        if u:
            return u
        u = User(external_id=external_id, height_unit="cm", preferred_weight_unit="kg")
        self.db.add(u)
        await self.db.flush()
        return u

    async def counts(self, user_id: int) -> dict[str, int]:
        out: dict[str, int] = {}
        for key, model in (("weight_entries", WeightEntry), ("workouts", Workout), ("meals", Meal), ("goals", Goal)):
            q = select(func.count()).select_from(model).where(model.user_id == user_id)
            out[key] = int((await self.db.execute(q)).scalar_one())
        return out


class WeightEntryRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, entry: WeightEntry) -> WeightEntry:
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def add_all(self, entries: Sequence[WeightEntry]) -> list[WeightEntry]:
        self.db.add_all(entries)
        await self.db.flush()
        return list(entries)

    async def get(self, user_id: int, entry_id: int) -> WeightEntry | None:
        q: Select[tuple[WeightEntry]] = (
            select(WeightEntry).where(WeightEntry.user_id == user_id).where(WeightEntry.id == entry_id)
        )
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def delete(self, entry: WeightEntry) -> None:
        await self.db.delete(entry)
        await self.db.flush()

    async def page(
        self,
        user_id: int,
        *,
        start: dt.datetime | None,
        end: dt.datetime | None,
        ascending: bool,
        offset: int,
        limit: int,
    ) -> tuple[list[WeightEntry], int]:
        q = _between(select(WeightEntry).where(WeightEntry.user_id == user_id), WeightEntry.measured_at, start, end)
        order = WeightEntry.measured_at.asc() if ascending else WeightEntry.measured_at.desc()
        return await _page(self.db, q.order_by(order, WeightEntry.id), offset=offset, limit=limit)

    async def between(self, user_id: int, start: dt.datetime | None, end: dt.datetime | None) -> list[WeightEntry]:
        q = _between(select(WeightEntry).where(WeightEntry.user_id == user_id), WeightEntry.measured_at, start, end)
        res = await self.db.execute(q.order_by(WeightEntry.measured_at.asc()))
        return list(res.scalars().all())

    async def latest(self, user_id: int, limit: int = 1, *, before: dt.datetime | None = None) -> list[WeightEntry]:
        q = select(WeightEntry).where(WeightEntry.user_id == user_id)
        if before is not None:
            q = q.where(WeightEntry.measured_at <= before)
        q = q.order_by(WeightEntry.measured_at.desc(), WeightEntry.id.desc()).limit(limit)
        res = await self.db.execute(q)
        return list(res.scalars().all())

    async def count(self, user_id: int, since: dt.datetime | None = None) -> int:
        q = select(func.count()).select_from(WeightEntry).where(WeightEntry.user_id == user_id)
        if since is not None:
            q = q.where(WeightEntry.measured_at >= since)
        return int((await self.db.execute(q)).scalar_one())


class WorkoutRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, workout: Workout) -> Workout:
        self.db.add(workout)
        await self.db.flush()
        return workout

    async def get(self, user_id: int, workout_id: int) -> Workout | None:
        q: Select[tuple[Workout]] = select(Workout).where(Workout.user_id == user_id).where(Workout.id == workout_id)
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def get_template(self, user_id: int, workout_id: int) -> Workout | None:
        q: Select[tuple[Workout]] = (
            select(Workout)
            .where(Workout.user_id == user_id)
            .where(Workout.id == workout_id)
            .where(Workout.is_template == True)  # noqa: E712
        )
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def delete(self, workout: Workout) -> None:
        await self.db.delete(workout)
        await self.db.flush()

    async def page(
        self,
        user_id: int,
        *,
        workout_type: str | None,
        status: str | None,
        start: dt.datetime | None,
        end: dt.datetime | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Workout], int]:
        q = select(Workout).where(Workout.user_id == user_id)
        if workout_type:
            q = q.where(Workout.type == workout_type)
        if status:
            q = q.where(Workout.completion_status == status)
        q = _between(q, Workout.created_at, start, end)
        return await _page(self.db, q.order_by(Workout.created_at.desc(), Workout.id.desc()), offset=offset, limit=limit)

    async def completed_between(self, user_id: int, start: dt.datetime, end: dt.datetime) -> list[Workout]:
        q = (
            select(Workout)
            .where(Workout.user_id == user_id)
            .where(Workout.completion_status == "completed")
            .where(Workout.created_at >= start)
            .where(Workout.created_at <= end)
            .order_by(Workout.created_at.desc())
        )
        res = await self.db.execute(q)
        return list(res.scalars().all())

    async def recent_completed(self, user_id: int, limit: int = 5) -> list[Workout]:
        q = (
            select(Workout)
            .where(Workout.user_id == user_id)
            .where(Workout.completion_status == "completed")
            .order_by(Workout.created_at.desc())
            .limit(limit)
        )
        res = await self.db.execute(q)
        return list(res.scalars().all())

    async def personal_records(self, user_id: int, limit: int = 10) -> list[tuple[Workout, Exercise]]:
        q = (
            select(Workout, Exercise)
            .join(Exercise, Exercise.workout_id == Workout.id)
            .where(Workout.user_id == user_id)
            .where(Exercise.personal_record == True)  # noqa: E712
            .order_by(Workout.created_at.desc())
            .limit(limit)
        )
        res = await self.db.execute(q)
        return [(w, e) for w, e in res.all()]

    async def templates(self, user_id: int) -> list[Workout]:
        q = (
            select(Workout)
            .where(Workout.user_id == user_id)
            .where(Workout.is_template == True)  # noqa: E712
            .order_by(Workout.created_at.desc())
        )
        res = await self.db.execute(q)
        return list(res.scalars().all())

    async def exists_since(self, user_id: int, since: dt.datetime) -> Workout | None:
        q = (
            select(Workout)
            .where(Workout.user_id == user_id)
            .where(Workout.created_at >= since)
            .order_by(Workout.created_at.desc())
            .limit(1)
        )
        res = await self.db.execute(q)
        return res.scalar_one_or_none()


class MealRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, meal: Meal) -> Meal:
        self.db.add(meal)
        await self.db.flush()
        return meal

    async def get(self, user_id: int, meal_id: int) -> Meal | None:
        q: Select[tuple[Meal]] = select(Meal).where(Meal.user_id == user_id).where(Meal.id == meal_id)
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def delete(self, meal: Meal) -> None:
        await self.db.delete(meal)
        await self.db.flush()

    async def page(
        self,
        user_id: int,
        *,
        meal_type: str | None,
        start: dt.datetime | None,
        end: dt.datetime | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Meal], int]:
        q = select(Meal).where(Meal.user_id == user_id)
        if meal_type:
            q = q.where(Meal.type == meal_type)
        q = _between(q, Meal.meal_time, start, end)
        if search:
            pattern = f"%{search}%"
            food_hit = select(FoodItem.meal_id).where(FoodItem.name.ilike(pattern))
            q = q.where(or_(Meal.name.ilike(pattern), Meal.notes.ilike(pattern), Meal.id.in_(food_hit)))
        return await _page(self.db, q.order_by(Meal.meal_time.desc(), Meal.id.desc()), offset=offset, limit=limit)

    async def between(self, user_id: int, start: dt.datetime, end: dt.datetime) -> list[Meal]:
        q = (
            select(Meal)
            .where(Meal.user_id == user_id)
            .where(Meal.meal_time >= start)
            .where(Meal.meal_time <= end)
            .order_by(Meal.meal_time.desc())
        )
        res = await self.db.execute(q)
        return list(res.scalars().all())

    async def for_days(self, daily_ids: Sequence[int]) -> list[Meal]:
        if not daily_ids:
            return []
        q = select(Meal).where(Meal.daily_id.in_(daily_ids)).order_by(Meal.meal_time.asc(), Meal.id.asc())
        res = await self.db.execute(q)
        return list(res.scalars().all())

    async def suggestions(
        self,
        user_id: int,
        *,
        meal_type: str | None,
        min_calories: float | None,
        max_calories: float | None,
        limit: int = 10,
    ) -> list[Meal]:
        q = select(Meal).where(Meal.user_id == user_id)
        if meal_type:
            q = q.where(Meal.type == meal_type)
        if min_calories is not None:
            q = q.where(Meal.total_calories >= min_calories)
        if max_calories is not None:
            q = q.where(Meal.total_calories <= max_calories)
        res = await self.db.execute(q.order_by(Meal.created_at.desc(), Meal.id.desc()).limit(limit))
        return list(res.scalars().all())


class DailyNutritionRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: int, date: dt.date) -> DailyNutrition | None:
        q: Select[tuple[DailyNutrition]] = (
            select(DailyNutrition).where(DailyNutrition.user_id == user_id).where(DailyNutrition.date == date)
        )
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def get_or_create(self, user_id: int, date: dt.date) -> DailyNutrition:
        d = await self.get(user_id, date)
        if d:
            return d
        d = DailyNutrition(user_id=user_id, date=date, water_total_ml=0.0, body_weight_unit="kg")
        self.db.add(d)
        await self.db.flush()
        return d

    async def between(self, user_id: int, start: dt.date, end: dt.date) -> list[DailyNutrition]:
        q = (
            select(DailyNutrition)
            .where(DailyNutrition.user_id == user_id)
            .where(DailyNutrition.date >= start)
            .where(DailyNutrition.date <= end)
            .order_by(DailyNutrition.date.asc())
        )
        res = await self.db.execute(q)
        return list(res.scalars().all())


class GoalRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, goal: Goal) -> Goal:
        self.db.add(goal)
        await self.db.flush()
        return goal

    async def get(self, user_id: int, goal_id: int) -> Goal | None:
        q: Select[tuple[Goal]] = select(Goal).where(Goal.user_id == user_id).where(Goal.id == goal_id)
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def delete(self, goal: Goal) -> None:
        await self.db.delete(goal)
        await self.db.flush()

    async def page(
        self,
        user_id: int,
        *,
        status: str | None,
        category: str | None,
        goal_type: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Goal], int]:
        q = select(Goal).where(Goal.user_id == user_id)
        if status:
            q = q.where(Goal.status == status)
        if category:
            q = q.where(Goal.category == category)
        if goal_type:
            q = q.where(Goal.type == goal_type)
        q = q.order_by(_PRIORITY_RANK.desc(), Goal.target_date.asc(), Goal.id.asc())
        return await _page(self.db, q, offset=offset, limit=limit)

    async def all_for_user(self, user_id: int, *, created_from: dt.datetime | None = None) -> list[Goal]:
        q = select(Goal).where(Goal.user_id == user_id)
        if created_from is not None:
            q = q.where(Goal.created_at >= created_from)
        res = await self.db.execute(q.order_by(Goal.created_at.asc()))
        return list(res.scalars().all())
