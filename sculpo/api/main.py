"""Sculpo scheduling API: entry point.

Start with:
    uvicorn sculpo.api.main:app --reload --host 0.0.0.0 --port 8000

Configuration comes from the environment (DATABASE_URL, SCHEDULING_TIMEZONE,
LOG_LEVEL, ...). See sculpo.config and sculpo.core.logger.
"""
from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from sculpo.api.errors import install_error_handlers
from sculpo.config import load_scheduling_config
from sculpo.core.exceptions import ConfigurationError
from sculpo.core.logger import configure, get_logger
from sculpo.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    init_db,
)

logger = get_logger(__name__)


def _load_scheduling_config():
    try:
        return load_scheduling_config()
    except ValueError as exc:
        raise ConfigurationError(str(exc), cause=exc) from exc


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────────
    configure()
    app.state.scheduling_config = _load_scheduling_config()
    logger.info("API: scheduling timezone %s", app.state.scheduling_config.timezone)

    engine = build_engine()
    app.state.session_factory = build_session_factory(engine)
    if os.environ.get("DB_AUTO_CREATE", "1").strip().lower() in ("1", "true", "yes"):
        await init_db(engine)
    logger.info("API: database ready")

    yield

    # ── Shutdown ─────────────────────────────────────────────────────
    await close_engine()
    logger.info("API: engine disposed")


app = FastAPI(
    title="Sculpo Scheduling API",
    version="1.0.0",
    description="Trainer availability, slot search and booking lifecycle.",
    lifespan=lifespan,
)

# Rate limiter; limit configurable via API_RATE_LIMIT env var (default 120/minute)
_rate_limit = os.environ.get("API_RATE_LIMIT", "120/minute")
limiter = Limiter(key_func=get_remote_address, default_limits=[_rate_limit])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
install_error_handlers(app)

_allowed_origins = os.environ.get(
    "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Optional API key authentication ──────────────────────────────
# With ADMIN_API_KEY set, every /api/v1/* request must carry X-Api-Key.
_ADMIN_API_KEY = os.environ.get("ADMIN_API_KEY", "").strip() or None


@app.middleware("http")
async def api_key_middleware(request: Request, call_next):
    if _ADMIN_API_KEY and request.url.path.startswith("/api/v1"):
        if request.headers.get("X-Api-Key") != _ADMIN_API_KEY:
            return JSONResponse(
                status_code=401,
                content={"detail": "Unauthorized: set X-Api-Key header"},
            )
    return await call_next(request)


# ── Routers ───────────────────────────────────────────────────────
from sculpo.api.routers import availability, bookings  # noqa: E402

app.include_router(availability.router, prefix="/api/v1")
app.include_router(bookings.router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
