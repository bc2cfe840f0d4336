from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import Paging, current_user, now, paging
from fittrack.db import get_session
from fittrack.models import User
from fittrack.repositories import MealRepo
from fittrack.schemas import (
    DailyNutritionIn,
    DailyNutritionOut,
    MealIn,
    MealOut,
    MealType,
    Message,
    NutritionStatsOut,
    Page,
    RecommendationOut,
    UtcDatetime,
    WaterIn,
    WaterOut,
)
from fittrack.services import NutritionService
from fittrack.views import meal_out, pagination

router = APIRouter(prefix="/nutrition", tags=["nutrition"])


@router.get("/meals", response_model=Page[MealOut])
async def list_meals(
    p: Paging = Depends(paging),
    meal_type: MealType | None = None,
    start_date: UtcDatetime | None = None,
    end_date: UtcDatetime | None = None,
    search: str | None = Query(default=None, max_length=100),
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
):
    items, total = await MealRepo(db).page(
        user.id,
        meal_type=meal_type,
        start=start_date,
        end=end_date,
        search=search,
        offset=p.offset,
        limit=p.limit,
    )
    return Page[MealOut](items=[meal_out(m) for m in items], pagination=pagination(total, p.page, p.limit))


@router.post("/meals", response_model=MealOut, status_code=201)
async def create_meal(
    data: MealIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return meal_out(await NutritionService(db).create_meal(user, data, ts))


@router.get("/meals/{meal_id}", response_model=MealOut)
async def get_meal(meal_id: int, user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    return meal_out(await NutritionService(db).get_meal(user, meal_id))


@router.put("/meals/{meal_id}", response_model=MealOut)
async def update_meal(
    meal_id: int,
    data: MealIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return meal_out(await NutritionService(db).update_meal(user, meal_id, data, ts))


@router.delete("/meals/{meal_id}", response_model=Message)
async def delete_meal(meal_id: int, user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    await NutritionService(db).delete_meal(user, meal_id)
    return Message(message="Meal deleted")


@router.get("/daily/{date}", response_model=DailyNutritionOut)
async def get_daily(date: dt.date, user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    return await NutritionService(db).daily(user, date)


@router.put("/daily/{date}/goals", response_model=DailyNutritionOut)
async def set_daily_goals(
    date: dt.date,
    data: DailyNutritionIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
):
    return await NutritionService(db).set_goals(user, date, data)


@router.post("/daily/{date}/water", response_model=WaterOut)
async def add_water(
    date: dt.date,
    data: WaterIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
):
    return await NutritionService(db).add_water(user, date, data)


@router.get("/stats/summary", response_model=NutritionStatsOut)
async def stats(
    start_date: UtcDatetime | None = None,
    end_date: UtcDatetime | None = None,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await NutritionService(db).stats(user, start_date, end_date, ts)


@router.get("/suggestions", response_model=list[MealOut])
async def suggestions(
    meal_type: MealType | None = None,
    calories: float | None = Query(default=None, ge=0),
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
):
    return [meal_out(m) for m in await NutritionService(db).suggestions(user, meal_type, calories)]


@router.get("/goals/recommendations", response_model=RecommendationOut)
async def recommendations(
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await NutritionService(db).recommendations(user, ts)
