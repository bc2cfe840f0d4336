from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import Paging, current_user, now, paging
from fittrack.db import get_session
from fittrack.models import User
from fittrack.repositories import WorkoutRepo
from fittrack.schemas import (
    CompleteWorkoutIn,
    CompletionStatus,
    ExerciseIn,
    Message,
    Page,
    UtcDatetime,
    WorkoutIn,
    WorkoutOut,
    WorkoutStatsOut,
    WorkoutType,
)
from fittrack.services import WorkoutService
from fittrack.views import pagination, workout_out

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("/", response_model=Page[WorkoutOut])
async def list_workouts(
    p: Paging = Depends(paging),
    type: WorkoutType | None = None,
    status: CompletionStatus | None = None,
    start_date: UtcDatetime | None = None,
    end_date: UtcDatetime | None = None,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
):
    items, total = await WorkoutRepo(db).page(
        user.id,
        workout_type=type,
        status=status,
        start=start_date,
        end=end_date,
        offset=p.offset,
        limit=p.limit,
    )
    return Page[WorkoutOut](items=[workout_out(w) for w in items], pagination=pagination(total, p.page, p.limit))


@router.post("/", response_model=WorkoutOut, status_code=201)
async def create_workout(
    data: WorkoutIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return workout_out(await WorkoutService(db).create(user, data, ts))


@router.get("/stats/summary", response_model=WorkoutStatsOut)
async def stats(
    start_date: UtcDatetime | None = None,
    end_date: UtcDatetime | None = None,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await WorkoutService(db).stats(user, start_date, end_date, ts)


@router.get("/templates/list", response_model=list[WorkoutOut])
async def list_templates(user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    return [workout_out(w) for w in await WorkoutService(db).templates(user)]


@router.post("/templates/{template_id}/create", response_model=WorkoutOut, status_code=201)
async def create_from_template(
    template_id: int,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return workout_out(await WorkoutService(db).from_template(user, template_id, ts))


@router.get("/{workout_id}", response_model=WorkoutOut)
async def get_workout(workout_id: int, user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    return workout_out(await WorkoutService(db).get(user, workout_id))


@router.put("/{workout_id}", response_model=WorkoutOut)
async def update_workout(
    workout_id: int,
    data: WorkoutIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return workout_out(await WorkoutService(db).update(user, workout_id, data, ts))


@router.delete("/{workout_id}", response_model=Message)
async def delete_workout(workout_id: int, user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    await WorkoutService(db).delete(user, workout_id)
    return Message(message="Workout deleted")


@router.post("/{workout_id}/exercises", response_model=WorkoutOut, status_code=201)
async def add_exercise(
    workout_id: int,
    data: ExerciseIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return workout_out(await WorkoutService(db).add_exercise(user, workout_id, data, ts))


@router.put("/{workout_id}/exercises/{exercise_id}", response_model=WorkoutOut)
async def update_exercise(
    workout_id: int,
    exercise_id: int,
    data: ExerciseIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return workout_out(await WorkoutService(db).update_exercise(user, workout_id, exercise_id, data, ts))


@router.delete("/{workout_id}/exercises/{exercise_id}", response_model=WorkoutOut)
async def delete_exercise(
    workout_id: int,
    exercise_id: int,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return workout_out(await WorkoutService(db).delete_exercise(user, workout_id, exercise_id, ts))


@router.patch("/{workout_id}/start", response_model=WorkoutOut)
async def start_workout(
    workout_id: int,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return workout_out(await WorkoutService(db).start(user, workout_id, ts))


@router.patch("/{workout_id}/complete", response_model=WorkoutOut)
async def complete_workout(
    workout_id: int,
    data: CompleteWorkoutIn | None = None,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    data = data or CompleteWorkoutIn()
    w = await WorkoutService(db).complete(
        user, workout_id, ts, mood_after=data.mood_after, energy_after=data.energy_after, notes=data.notes
    )
    return workout_out(w)
