"""Clerk JWT verification middleware.

Guests can use the prediction and device-storage endpoints without a token.
Everything else requires a Clerk-issued Bearer token; its claims are put
on ``request.state.auth`` for ``get_current_user``.
"""

from __future__ import annotations

import logging
from typing import Any

import jwt as pyjwt
from fastapi import Request, Response
from jwt import PyJWKClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from ancure.config import Settings, get_settings
from ancure.dependencies import AuthContext

logger = logging.getLogger("ancure.auth")

PUBLIC_PATHS: set[str] = {
    "/health",
    "/openapi.json",
}

PUBLIC_PREFIXES: tuple[str, ...] = (
    "/docs",
    "/redoc",
    "/api/v1/insights",
    "/api/v1/device",
)


def is_public(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


def _unauthorized(detail: str) -> Response:
    return Response(
        content=f'{{"detail":"{detail}"}}',
        status_code=401,
        media_type="application/json",
    )


class ClerkAuthMiddleware(BaseHTTPMiddleware):
    """Verify Clerk-issued JWTs and populate request.state.auth."""

    def __init__(self, app: Any, settings: Settings | None = None) -> None:
        super().__init__(app)
        self._settings = settings or get_settings()
        self._jwks_client = PyJWKClient(
            self._settings.clerk_jwks_url,
            cache_keys=True,
            lifespan=3600,
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # OPTIONS passes through for CORS preflight
        if request.method == "OPTIONS" or is_public(request.url.path):
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return _unauthorized("Missing or invalid Authorization header")

        token = auth_header.removeprefix("Bearer ").strip()

        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
            payload = pyjwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                options={"verify_aud": False},  # Clerk tokens carry azp, not aud
            )
        except pyjwt.ExpiredSignatureError:
            return _unauthorized("Your session has expired. Please sign in again.")
        except (pyjwt.InvalidTokenError, pyjwt.PyJWKClientError) as exc:
            logger.warning("JWT validation failed: %s", exc)
            return _unauthorized("Your session is invalid. Please sign in again.")

        request.state.auth = AuthContext(
            user_id=payload.get("sub", ""),
            email=payload.get("email"),
            session_id=payload.get("sid"),
        )
        return await call_next(request)
