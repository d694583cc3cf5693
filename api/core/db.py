"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Stored procedures are invoked with `CALL name($1, ...)` through `execute`.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg

from .config import Settings

_pool: asyncpg.Pool | None = None

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url(settings: Settings) -> str:
    """
    DSN from `DATABASE_URL`, or assembled from the DB_* variables.
    """
    if settings.database_url:
        return _sanitize_database_url(settings.database_url)
    if not settings.db_name:
        raise RuntimeError("DB_NAME (or DATABASE_URL) is not set.")

    credentials = quote(settings.db_user, safe="")
    if settings.db_password:
        credentials = f"{credentials}:{quote(settings.db_password, safe='')}"
    netloc = f"{settings.db_host}:{settings.db_port}"
    if credentials:
        netloc = f"{credentials}@{netloc}"
    return f"postgresql://{netloc}/{quote(settings.db_name, safe='')}"


async def init_pool(settings: Settings) -> None:
    global _pool
    if _pool is not None:
        return None
    # Waiters beyond max_size queue inside asyncpg with no length limit.
    _pool = await asyncpg.create_pool(
        dsn=database_url(settings),
        min_size=1,
        max_size=settings.db_pool_max_size,
        command_timeout=settings.db_command_timeout,
    )
    logger.info("db_pool_ready host=%s max_size=%s", settings.db_host, settings.db_pool_max_size)


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await pool().fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool().fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(sql: str, *args: Any) -> None:
    """
    Run a statement (INSERT/UPDATE/CALL). No result returned.
    """
    await pool().execute(sql, *args)
