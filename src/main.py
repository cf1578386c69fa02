"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.cf_balance.api.router import router as balance_router
from src.cf_balance.domain.cache import BalanceCache, run_purge_loop
from src.cf_common.database import engine
from src.cf_common.errors import AppError
from src.cf_common.redis_client import close_redis, get_redis
from src.cf_common.response import error_response
from src.cf_gateway.middleware.request_log import RequestLogMiddleware
from src.cf_ledger.api.router import router as ledger_router
from src.container import build_container


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB (+ Redis when it backs the cache), start the cache sweep.
    Shutdown: stop the sweep, dispose pools."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    if settings.BALANCE_CACHE_BACKEND == "redis":
        redis = await get_redis()
        await redis.ping()

    purge_task: asyncio.Task[None] | None = None
    cache = app.state.services.cache
    if isinstance(cache, BalanceCache):
        purge_task = asyncio.create_task(
            run_purge_loop(cache, settings.BALANCE_CACHE_PURGE_INTERVAL_SECONDS)
        )
    yield
    if purge_task is not None:
        purge_task.cancel()
        with suppress(asyncio.CancelledError):
            await purge_task
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.state.services = build_container(settings)

app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(balance_router, prefix="/api/v1")
app.include_router(ledger_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
