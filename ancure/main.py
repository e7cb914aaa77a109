"""Ancure API — FastAPI application entry point.

Run locally:
    uvicorn ancure.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ancure.config import get_settings
from ancure.cycle.config_loader import get_predictor_config
from ancure.middleware.clerk_auth import ClerkAuthMiddleware
from ancure.middleware.security import SecurityHeadersMiddleware
from ancure.routers import cycle_data, device, health, insights, logs
from ancure.services.supabase import close_pool, init_pool

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("ancure")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info("Starting Ancure API v%s [%s]", settings.app_version, settings.environment)
    get_predictor_config()
    if settings.cloud_storage_enabled:
        await init_pool(settings)
    else:
        logger.warning("ANCURE_SUPABASE_DB_URL not set — account storage disabled")
    yield
    await close_pool()
    logger.info("Ancure API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Ancure API",
        description=(
            "Cycle tracking: period and fertile window predictions, reminders, "
            "device or account storage of cycle data, and period and symptom logs."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ---------- Middleware (last added runs first) ----------

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ClerkAuthMiddleware, settings=settings)

    # CORS must wrap auth so preflight and 401s carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)

    v1_prefix = "/api/v1"
    app.include_router(insights.router, prefix=v1_prefix)
    app.include_router(device.router, prefix=v1_prefix)
    app.include_router(cycle_data.router, prefix=v1_prefix)
    app.include_router(logs.router, prefix=v1_prefix)

    return app


app = create_app()
