from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fittrack.api import goals, nutrition, users, weight, workouts
from fittrack.config import settings
from fittrack.errors import FitTrackError
from fittrack.init_db import init_db

logger = logging.getLogger(__name__)


def _field_name(loc: tuple[object, ...]) -> str:
    # drop the "body"/"query"/"path" prefix FastAPI puts in front
    parts = [str(x) for x in loc[1:]] if len(loc) > 1 else [str(x) for x in loc]
    return ".".join(parts)


async def _domain_error(request: Request, exc: FitTrackError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed: %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{"field": _field_name(tuple(e.get("loc", ()))), "message": e.get("msg", "")} for e in exc.errors()]
    logger.info("Validation failed: %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation errors", "errors": errors},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await init_db()
    logger.info("Database ready")
    yield


def create_app(*, with_lifespan: bool = True) -> FastAPI:
    app = FastAPI(title=settings.app_name, lifespan=lifespan if with_lifespan else None)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(FitTrackError, _domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error)  # type: ignore[arg-type]

    for module in (users, weight, workouts, nutrition, goals):
        app.include_router(module.router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
