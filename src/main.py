"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.pl_challenge.api.router import router as challenge_router
from src.pl_common.database import engine
from src.pl_common.errors import AppError
from src.pl_common.redis_client import close_redis, get_redis
from src.pl_common.response import error_response
from src.pl_gateway.middleware.request_log import RequestLogMiddleware
from src.pl_ladder.api.router import router as ladder_router
from src.pl_membership.api.router import router as membership_router
from src.pl_pot.api.router import router as pot_router
from src.pl_settlement.api.router import router as settlement_router
from src.pl_venue.api.router import router as venue_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    redis = await get_redis()
    await redis.ping()
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(membership_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")
app.include_router(ladder_router, prefix="/api/v1")
app.include_router(challenge_router, prefix="/api/v1")
app.include_router(venue_router, prefix="/api/v1")
app.include_router(pot_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
