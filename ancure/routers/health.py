"""Health check endpoint — public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from ancure.config import get_settings
from ancure.cycle.config_loader import get_predictor_config
from ancure.services import supabase

router = APIRouter(tags=["system"])
logger = logging.getLogger("ancure.health")


@router.get("/health")
async def health_check() -> dict:
    """Liveness probe.  Returns 200 whenever the process is up.

    Reports ``degraded`` when cloud storage is unreachable or not
    configured; predictions and device storage still work then.
    """
    settings = get_settings()
    if not settings.cloud_storage_enabled:
        database = "disabled"
    else:
        database = "unreachable"
        try:
            if await supabase.ping():
                database = "connected"
        except Exception as exc:
            logger.warning("Health check DB probe failed: %s", exc)

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "database": database,
        "predictor_config": get_predictor_config().version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
