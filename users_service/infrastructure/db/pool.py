"""
Name: PostgreSQL Connection Pool

Responsibilities:
  - Manage async connection pool lifecycle (init, get, close)
  - Configure connections with statement_timeout
  - Provide singleton pool instance

Collaborators:
  - psycopg_pool: Async connection pooling
  - config: Pool settings

Constraints:
  - Singleton pattern (one pool per process)
  - Must init before use, close on shutdown

Notes:
  - Uses psycopg_pool.AsyncConnectionPool
  - Configure callback runs once per new connection
"""

import asyncio
from typing import Optional

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from ...logger import logger


# R: Singleton pool instance
_pool: Optional[AsyncConnectionPool] = None
_pool_lock = asyncio.Lock()


async def _configure_connection(conn: AsyncConnection) -> None:
    """
    R: Configure a new pooled connection.

    Sets statement_timeout when configured.
    """
    from ...config import get_settings

    timeout_ms = get_settings().db_statement_timeout_ms
    if timeout_ms > 0:
        await conn.execute(f"SET statement_timeout = {int(timeout_ms)}")
        await conn.commit()


async def init_pool(
    database_url: str, min_size: int, max_size: int
) -> AsyncConnectionPool:
    """
    R: Initialize and open the connection pool.

    Raises:
        RuntimeError: If pool already initialized
    """
    global _pool

    async with _pool_lock:
        if _pool is not None:
            raise RuntimeError("Connection pool already initialized")

        logger.info(
            "Initializing connection pool",
            extra={"min_size": min_size, "max_size": max_size},
        )

        pool = AsyncConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_configure_connection,
            open=False,
        )
        await pool.open()
        _pool = pool

        logger.info(
            "Connection pool initialized",
            extra={"min_size": min_size, "max_size": max_size},
        )

        return _pool


def get_pool() -> AsyncConnectionPool:
    """
    R: Get the connection pool singleton.

    Raises:
        RuntimeError: If pool not initialized
    """
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    return _pool


async def close_pool() -> None:
    """R: Close the connection pool. Safe to call when not initialized."""
    global _pool

    async with _pool_lock:
        if _pool is not None:
            logger.info("Closing connection pool")
            await _pool.close()
            _pool = None
            logger.info("Connection pool closed")


def reset_pool() -> None:
    """R: Forget the pool singleton (tests)."""
    global _pool
    _pool = None
