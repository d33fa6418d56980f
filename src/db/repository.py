"""PostgreSQL-backed string record repository.

Uniqueness is enforced on `sha256_hash` (the primary key), never on the raw text, so encoding edge
cases cannot produce two records for the same content.
"""

from __future__ import annotations

from psycopg_pool import AsyncConnectionPool

from src.analysis.properties import PropertyRecord
from src.db.pool import get_conn
from src.db.query import execute_rowcount, fetch_row, fetch_rows
from src.db.record_rows import record_row, stored_string_from_row
from src.filters.schema import PredicateSet
from src.service.schema import StoredString
from src.sql.builder import build_delete_by_hash, build_insert, build_select, build_select_by_hash


class PostgresStringRepository:
    """Storage collaborator for `StringService` backed by an async connection pool."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def insert(self, value: str, properties: PropertyRecord) -> StoredString | None:
        """Insert a record; return `None` if the content hash is already stored."""

        query = build_insert(record_row(value, properties))
        async with get_conn(self._pool) as conn:
            row = await fetch_row(conn, query.sql, query.params)
            await conn.commit()

        if row is None:
            return None
        return stored_string_from_row(row)

    async def get_by_hash(self, sha256_hash: str) -> StoredString | None:
        query = build_select_by_hash(sha256_hash)
        async with get_conn(self._pool) as conn:
            row = await fetch_row(conn, query.sql, query.params)
            await conn.commit()

        if row is None:
            return None
        return stored_string_from_row(row)

    async def find(self, predicate_set: PredicateSet) -> list[StoredString]:
        query = build_select(predicate_set)
        async with get_conn(self._pool) as conn:
            rows = await fetch_rows(conn, query.sql, query.params)
            await conn.commit()

        return [stored_string_from_row(row) for row in rows]

    async def delete_by_hash(self, sha256_hash: str) -> bool:
        """Delete a record; return whether one existed."""

        query = build_delete_by_hash(sha256_hash)
        async with get_conn(self._pool) as conn:
            deleted = await execute_rowcount(conn, query.sql, query.params)
            await conn.commit()

        return deleted > 0
