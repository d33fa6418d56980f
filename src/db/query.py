"""Safe DB query helpers.

These helpers never interpolate user values into SQL; all values are passed via `params`. DB errors
are not swallowed (caller decides how to handle them).
"""

from __future__ import annotations

from typing import Any, LiteralString, cast

from psycopg import AsyncConnection


async def fetch_rows(
        conn: AsyncConnection, sql: str, params: tuple[Any, ...] = ()
) -> list[tuple[Any, ...]]:
    """Execute a query and return every row."""

    async with conn.cursor() as cur:
        await cur.execute(cast(LiteralString, sql), params)
        return await cur.fetchall()


async def fetch_row(
        conn: AsyncConnection, sql: str, params: tuple[Any, ...] = ()
) -> tuple[Any, ...] | None:
    """Execute a query and return the first row, or `None` if it yields no rows."""

    async with conn.cursor() as cur:
        await cur.execute(cast(LiteralString, sql), params)
        return await cur.fetchone()


async def execute_rowcount(conn: AsyncConnection, sql: str, params: tuple[Any, ...] = ()) -> int:
    """Execute a statement and return the number of affected rows."""

    async with conn.cursor() as cur:
        await cur.execute(cast(LiteralString, sql), params)
        return max(cur.rowcount, 0)
