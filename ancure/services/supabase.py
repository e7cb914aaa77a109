"""Direct Postgres access to the Supabase database.

Each unit of work runs in a transaction where the caller's user id is
exposed as the ``request.jwt.claim.sub`` setting, which is what Supabase's
``auth.uid()`` reads.  Row-level security on ``cycle_data`` and the log
tables therefore sees the same identity as it would for a PostgREST call.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import asyncpg

from ancure.config import Settings, get_settings

logger = logging.getLogger("ancure.db")

# Module-level connection pool, opened by the app lifespan when configured
_pool: asyncpg.Pool | None = None


async def init_pool(settings: Settings | None = None) -> asyncpg.Pool:
    """Create the asyncpg connection pool.  Call once at app startup."""
    global _pool
    s = settings or get_settings()
    _pool = await asyncpg.create_pool(
        s.supabase_db_url,
        min_size=s.db_pool_min_size,
        max_size=s.db_pool_max_size,
        command_timeout=10,
    )
    logger.info(
        "Database pool initialized (min=%d, max=%d)",
        s.db_pool_min_size,
        s.db_pool_max_size,
    )
    return _pool


async def close_pool() -> None:
    """Drain the pool.  Call at app shutdown."""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Database pool not initialized — cloud storage is not configured")
    return _pool


@asynccontextmanager
async def get_connection(user_id: str | None = None) -> AsyncGenerator[asyncpg.Connection, None]:
    """Acquire a connection inside a transaction scoped to ``user_id``.

    Usage::

        async with get_connection(user_id=user.user_id) as conn:
            row = await conn.fetchrow("SELECT * FROM cycle_data WHERE user_id = $1", uid)

    ``set_config(..., true)`` is transaction-local, so the identity is
    cleared when the connection goes back to the pool.
    """
    pool = get_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            if user_id:
                await conn.execute(
                    "SELECT set_config('request.jwt.claim.sub', $1, true)", user_id
                )
            yield conn


async def execute(query: str, *args: Any, user_id: str | None = None) -> str:
    """Execute a single statement as ``user_id`` and return its status."""
    async with get_connection(user_id=user_id) as conn:
        return await conn.execute(query, *args)


async def fetch(query: str, *args: Any, user_id: str | None = None) -> list[asyncpg.Record]:
    """Fetch all rows as ``user_id``."""
    async with get_connection(user_id=user_id) as conn:
        return await conn.fetch(query, *args)


async def fetchrow(query: str, *args: Any, user_id: str | None = None) -> asyncpg.Record | None:
    """Fetch a single row as ``user_id``."""
    async with get_connection(user_id=user_id) as conn:
        return await conn.fetchrow(query, *args)


async def ping() -> bool:
    """Return True if the database answers a trivial query."""
    async with get_pool().acquire() as conn:
        return await conn.fetchval("SELECT 1") == 1
