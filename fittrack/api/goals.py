from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import Paging, current_user, now, paging
from fittrack.db import get_session
from fittrack.models import User
from fittrack.repositories import GoalRepo
from fittrack.schemas import (
    CategoryStatsOut,
    GoalAnalyticsOut,
    GoalCategory,
    GoalDashboardOut,
    GoalIn,
    GoalInsightsOut,
    GoalOut,
    GoalStatsOut,
    GoalStatusLit,
    GoalSyncOut,
    GoalTypeLit,
    Message,
    MilestoneIn,
    Page,
    ProgressIn,
    StatusIn,
)
from fittrack.services import GoalService, Period
from fittrack.views import goal_out, pagination

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("/", response_model=Page[GoalOut])
async def list_goals(
    p: Paging = Depends(paging),
    status: GoalStatusLit | None = None,
    category: GoalCategory | None = None,
    type: GoalTypeLit | None = None,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    items, total = await GoalRepo(db).page(
        user.id, status=status, category=category, goal_type=type, offset=p.offset, limit=p.limit
    )
    return Page[GoalOut](items=[goal_out(g, ts) for g in items], pagination=pagination(total, p.page, p.limit))


@router.post("/", response_model=GoalOut, status_code=201)
async def create_goal(
    data: GoalIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return goal_out(await GoalService(db).create(user, data, ts), ts)


@router.get("/analytics/overview", response_model=GoalAnalyticsOut)
async def analytics_overview(
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await GoalService(db).analytics(user, ts)


@router.get("/analytics/stats", response_model=GoalStatsOut)
async def analytics_stats(
    period: Period = "month",
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await GoalService(db).stats(user, period, ts)


@router.get("/analytics/categories", response_model=list[CategoryStatsOut])
async def analytics_categories(user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    return await GoalService(db).categories(user)


@router.get("/dashboard/summary", response_model=GoalDashboardOut)
async def dashboard(
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await GoalService(db).dashboard(user, ts)


@router.get("/{goal_id}", response_model=GoalOut)
async def get_goal(
    goal_id: int,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return goal_out(await GoalService(db).get(user, goal_id), ts)


@router.put("/{goal_id}", response_model=GoalOut)
async def update_goal(
    goal_id: int,
    data: GoalIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return goal_out(await GoalService(db).update(user, goal_id, data, ts), ts)


@router.delete("/{goal_id}", response_model=Message)
async def delete_goal(goal_id: int, user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    await GoalService(db).delete(user, goal_id)
    return Message(message="Goal deleted")


@router.patch("/{goal_id}/progress", response_model=GoalOut)
async def update_progress(
    goal_id: int,
    data: ProgressIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return goal_out(await GoalService(db).update_progress(user, goal_id, data, ts), ts)


@router.patch("/{goal_id}/status", response_model=GoalOut)
async def change_status(
    goal_id: int,
    data: StatusIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return goal_out(await GoalService(db).change_status(user, goal_id, data, ts), ts)


@router.post("/{goal_id}/milestones", response_model=GoalOut, status_code=201)
async def add_milestone(
    goal_id: int,
    data: MilestoneIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return goal_out(await GoalService(db).add_milestone(user, goal_id, data, ts), ts)


@router.get("/{goal_id}/insights", response_model=GoalInsightsOut)
async def insights(
    goal_id: int,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await GoalService(db).insights(user, goal_id, ts)


@router.post("/{goal_id}/sync", response_model=GoalSyncOut)
async def sync(
    goal_id: int,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await GoalService(db).sync(user, goal_id, ts)
