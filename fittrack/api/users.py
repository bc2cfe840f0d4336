from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.api.deps import current_user
from fittrack.db import get_session
from fittrack.models import User
from fittrack.schemas import ProfileIn, ProfileOut, UserStatsOut
from fittrack.services import UserService
from fittrack.views import profile_out

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileOut)
async def get_profile(user: User = Depends(current_user)):
    return profile_out(user)


@router.put("/me", response_model=ProfileOut)
async def update_profile(
    data: ProfileIn,
    user: User = Depends(current_user),
    db: AsyncSession = Depends(get_session),
):
    return profile_out(await UserService(db).update_profile(user, data))


@router.get("/me/stats", response_model=UserStatsOut)
async def profile_stats(user: User = Depends(current_user), db: AsyncSession = Depends(get_session)):
    return await UserService(db).stats(user)
