from __future__ import annotations

import datetime as dt
from typing import Literal

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import Paging, current_user, now, paging
from fittrack.db import get_session
from fittrack.models import User
from fittrack.repositories import WeightEntryRepo
from fittrack.schemas import (
    BulkImportIn,
    LatestWeightOut,
    Message,
    Page,
    UtcDatetime,
    WeightComparisonOut,
    WeightEntryIn,
    WeightEntryOut,
    WeightStatsOut,
    WeightSummaryOut,
    WeightTrendsOut,
)
from fittrack.services import Period, WeightService
from fittrack.views import pagination, weight_entry_out

router = APIRouter(prefix="/weight", tags=["weight"])


@router.get("/", response_model=Page[WeightEntryOut])
async def list_entries(
    p: Paging = Depends(paging),
    start_date: UtcDatetime | None = None,
    end_date: UtcDatetime | None = None,
    sort: Literal["asc", "desc"] = "desc",
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
):
    items, total = await WeightEntryRepo(db).page(
        user.id, start=start_date, end=end_date, ascending=sort == "asc", offset=p.offset, limit=p.limit
    )
    return Page[WeightEntryOut](
        items=[weight_entry_out(e, user) for e in items], pagination=pagination(total, p.page, p.limit)
    )


@router.post("/", response_model=WeightEntryOut, status_code=201)
async def create_entry(
    data: WeightEntryIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return weight_entry_out(await WeightService(db).create(user, data, ts), user)


@router.get("/analytics/trends", response_model=WeightTrendsOut)
async def trends(
    period: Period = "month",
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await WeightService(db).trends(user, period, ts)


@router.get("/analytics/stats", response_model=WeightStatsOut)
async def stats(
    start_date: UtcDatetime | None = None,
    end_date: UtcDatetime | None = None,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await WeightService(db).stats(user, start_date, end_date, ts)


@router.get("/compare/{entry_id1}/{entry_id2}", response_model=WeightComparisonOut)
async def compare(
    entry_id1: int,
    entry_id2: int,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
):
    return await WeightService(db).compare(user, entry_id1, entry_id2)


@router.get("/entry/latest", response_model=LatestWeightOut)
async def latest(user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    return await WeightService(db).latest(user)


@router.post("/bulk-import", response_model=list[WeightEntryOut], status_code=201)
async def bulk_import(
    data: BulkImportIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    entries = await WeightService(db).bulk_import(user, data.entries, ts)
    return [weight_entry_out(e, user) for e in entries]


@router.get("/dashboard/summary", response_model=WeightSummaryOut)
async def summary(
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return await WeightService(db).summary(user, ts)


@router.get("/{entry_id}", response_model=WeightEntryOut)
async def get_entry(entry_id: int, user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    return weight_entry_out(await WeightService(db).get(user, entry_id), user)


@router.put("/{entry_id}", response_model=WeightEntryOut)
async def update_entry(
    entry_id: int,
    data: WeightEntryIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
    ts: dt.datetime = Depends(now),
):
    return weight_entry_out(await WeightService(db).update(user, entry_id, data, ts), user)


@router.delete("/{entry_id}", response_model=Message)
async def delete_entry(entry_id: int, user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    await WeightService(db).delete(user, entry_id)
    return Message(message="Weight entry deleted")
