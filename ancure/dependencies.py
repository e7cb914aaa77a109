"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request

from ancure.config import Settings, get_settings
from ancure.cycle.predictor import CyclePredictor
from ancure.storage import (
    CloudCycleLogStore,
    CloudCycleStore,
    CycleConfigurationStore,
    CycleLogStore,
    LocalCycleStore,
    StorageError,
)
from ancure.storage.errors import is_session_error


@dataclass(frozen=True)
class AuthContext:
    """Authenticated user context extracted from a Clerk JWT."""

    user_id: str  # Clerk user ID (e.g. "user_2x...")
    email: str | None = None
    session_id: str | None = None


async def get_current_user(request: Request) -> AuthContext:
    """Return the user the auth middleware attached to ``request.state.auth``."""
    auth: AuthContext | None = getattr(request.state, "auth", None)
    if auth is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return auth


def get_predictor() -> CyclePredictor:
    # Built per request so a reloaded cycle_config.yaml takes effect immediately
    return CyclePredictor()


def get_device_store(settings: Annotated[Settings, Depends(get_settings)]) -> CycleConfigurationStore:
    return LocalCycleStore(settings.device_store_dir)


def get_cloud_store() -> CycleConfigurationStore:
    return CloudCycleStore()


def get_log_store() -> CycleLogStore:
    return CloudCycleLogStore()


async def get_device_id(
    x_device_id: Annotated[str, Header(min_length=8, max_length=128)],
) -> str:
    """Client-generated id identifying a browser/device for guest storage."""
    return x_device_id


# Annotated shortcuts for route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Predictor = Annotated[CyclePredictor, Depends(get_predictor)]
DeviceStore = Annotated[CycleConfigurationStore, Depends(get_device_store)]
CloudStore = Annotated[CycleConfigurationStore, Depends(get_cloud_store)]
LogStore = Annotated[CycleLogStore, Depends(get_log_store)]
DeviceId = Annotated[str, Depends(get_device_id)]


def storage_http_error(exc: StorageError) -> HTTPException:
    """Map an account-store failure to a response the client can show.

    A rejected session means signing in again (401); anything else is a
    temporary outage (503).
    """
    status = 401 if is_session_error(exc.__cause__) else 503
    return HTTPException(status_code=status, detail=exc.user_message)
