from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.clock import utcnow
from fittrack.config import settings
from fittrack.db import get_session
from fittrack.errors import AuthError
from fittrack.models import User
from fittrack.repositories import UserRepo


@dataclass(frozen=True)
class Paging:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


async def current_user(
    x_user_id: str | None = Header(default=None),
    db: AsyncSession = Depends(get_session),
) -> User:
    # identity is resolved upstream; we only map the header onto a local profile row
    if not x_user_id or not x_user_id.strip():
        raise AuthError("Missing X-User-Id header")
    return await UserRepo(db).get_or_create(x_user_id.strip())


def paging(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.max_page_limit),
) -> Paging:
    return Paging(page=page, limit=limit)


def now() -> dt.datetime:
    return utcnow()
