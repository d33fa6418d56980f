"""Postgres connection helpers.

Record timestamps (`created_at`) are reported in UTC; every DB session, pooled or not, therefore has
its timezone locked to UTC.
"""

from __future__ import annotations

import os

import psycopg
from psycopg import AsyncConnection

_SET_UTC = "SET TIME ZONE 'UTC'"


def require_database_url() -> str:
    """Read `DATABASE_URL` from the environment or raise a clear error."""

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL is required (set it in .env or environment)")
    return database_url


def connect_utc(database_url: str) -> psycopg.Connection:
    """Open a blocking connection (CLIs, tests) with the session timezone set to UTC."""

    conn = psycopg.connect(database_url)
    conn.execute(_SET_UTC, prepare=False)
    return conn


async def ensure_utc(conn: AsyncConnection) -> None:
    """Set the session timezone of a pooled async connection to UTC."""

    async with conn.cursor() as cur:
        await cur.execute(_SET_UTC, prepare=False)
    # `SET` opens a transaction when autocommit is off; commit so the pool doesn't see INTRANS.
    await conn.commit()
