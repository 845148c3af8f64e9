"""FastAPI application entrypoint — lifespan, routers, middleware, health checks."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from redis.exceptions import RedisError

from agroclimate.config import get_settings
from agroclimate.middleware.logging import RequestLoggingMiddleware, configure_structured_logging
from agroclimate.routes import forecast, insights, locations, patterns, ws

logger = logging.getLogger("agroclimate")

SERVICE_NAME = "agroclimate"
SERVICE_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup / shutdown lifecycle.

    Startup:
      1. Initialize structured logging
      2. Connect to Redis when enabled (observation cache + alert pub/sub)

    Shutdown:
      1. Close Redis connection pool
    """
    configure_structured_logging()
    settings = get_settings()
    logger.info(
        "AgroClimate starting",
        extra={
            "log_level": settings.log_level,
            "redis_enabled": settings.redis_enabled,
        },
    )

    redis: Redis | None = None
    app.state.redis = None
    if settings.redis_enabled:
        try:
            redis = Redis.from_url(settings.redis_url, decode_responses=True)
            await redis.ping()
        except RedisError as exc:
            logger.exception("startup failure", extra={"error": str(exc)})
            raise
        app.state.redis = redis

    yield

    logger.info("AgroClimate shutting down")
    if redis is not None:
        await redis.aclose()


async def _run_readiness_checks(app: FastAPI) -> dict[str, dict[str, Any]]:
    settings = get_settings()
    redis_client = getattr(app.state, "redis", None)
    if not settings.redis_enabled:
        return {"redis": {"ok": True, "message": "disabled"}}
    if redis_client is None:
        return {"redis": {"ok": False, "message": "not connected"}}
    try:
        await redis_client.ping()
    except RedisError as exc:
        return {"redis": {"ok": False, "message": str(exc)}}
    return {"redis": {"ok": True, "message": "ok"}}


app = FastAPI(
    title="AgroClimate API",
    description=(
        "Agro-climatic prediction API for Zimbabwe — seasonal forecasts with "
        "ENSO adjustment, historical pattern analysis, drought risk, crop "
        "suitability and irrigation advice, and live weather alerts."
    ),
    version=SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


# ── Health checks ───────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Basic health check — verifies the API process is alive."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@app.get("/health/ready", tags=["system"])
async def readiness_check() -> JSONResponse:
    checks = await _run_readiness_checks(app)
    healthy = all(check["ok"] for check in checks.values())
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "ok" if healthy else "degraded", "checks": checks},
    )


# ── Router registration ────────────────────────────────────────────────────
app.include_router(locations.router, prefix="/api/v1")
app.include_router(patterns.router, prefix="/api/v1")
app.include_router(forecast.router, prefix="/api/v1")
app.include_router(insights.router, prefix="/api/v1")
app.include_router(ws.router)
