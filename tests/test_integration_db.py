"""Integration tests against a real Postgres database.

These tests exercise the end-to-end pipeline:
service -> filter builder / NL parser -> SQL builder -> psycopg async pool -> records.

They are skipped if `DATABASE_URL` is not configured or the DB is unreachable.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from typing import LiteralString, NoReturn, cast

import psycopg
import pytest
from dotenv import load_dotenv
from psycopg import sql
from psycopg.conninfo import make_conninfo
from psycopg_pool import AsyncConnectionPool

from src.db.connection import connect_utc
from src.db.load_values import load_values
from src.db.migrate import list_migration_files, migrate
from src.db.pool import create_pool
from src.db.record_rows import iter_record_rows
from src.db.repository import PostgresStringRepository
from src.service.strings import StringAlreadyExistsError, StringNotFoundError, StringService
from src.sql.builder import build_insert

_FIXTURE_VALUES = ("level", "kayak", "hello world", "A man a plan a canal Panama", "zigzag")


def _skip(reason: str) -> NoReturn:
    pytest.skip(reason)


def _require_database_url() -> str:
    load_dotenv(".env")
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        _skip("DATABASE_URL is not set; skipping integration tests")
    return database_url


@pytest.fixture(scope="session")
def prepared_schema() -> Iterator[str]:
    """Create an isolated schema, run migrations, and load a few fixture values."""

    database_url = _require_database_url()
    schema = f"it_{uuid.uuid4().hex}"

    try:
        conn_ctx = connect_utc(database_url)
    except psycopg.OperationalError as exc:
        _skip(f"Postgres is unreachable ({exc}); skipping integration tests")

    with conn_ctx as conn:
        with conn.transaction():
            conn.execute(
                sql.SQL("CREATE SCHEMA {}").format(sql.Identifier(schema)),
                prepare=False,
            )
            conn.execute(
                sql.SQL("SET search_path TO {}").format(sql.Identifier(schema)),
                prepare=False,
            )

            for migration in list_migration_files():
                sql_text = migration.read_text(encoding="utf-8")
                conn.execute(cast(LiteralString, sql_text), prepare=False)

            rows = list(iter_record_rows(_FIXTURE_VALUES))
            with conn.cursor() as cur:
                cur.executemany(build_insert(rows[0]).sql, rows)

    yield schema

    # noinspection PyBroadException
    try:
        with psycopg.connect(database_url) as conn:
            with conn.transaction():
                conn.execute(
                    sql.SQL("DROP SCHEMA IF EXISTS {} CASCADE").format(sql.Identifier(schema)),
                    prepare=False,
                )
    except Exception:
        # Cleanup best-effort: do not fail test run on teardown.
        pass


@pytest.fixture
async def pool(prepared_schema: str) -> AsyncIterator[AsyncConnectionPool]:
    """Create an async pool whose sessions use the isolated schema."""

    database_url = _require_database_url()
    conninfo = make_conninfo(database_url, options=f"-c search_path={prepared_schema}")
    db_pool = create_pool(conninfo, max_size=2)
    try:
        await db_pool.open(wait=True)
    except Exception as exc:
        _skip(f"Postgres is unreachable ({exc}); skipping integration tests")
    yield db_pool
    await db_pool.close()


@pytest.fixture
def db_service(pool: AsyncConnectionPool) -> StringService:
    return StringService(PostgresStringRepository(pool))


@pytest.mark.asyncio
async def test_pool_enforces_utc_timezone(pool: AsyncConnectionPool) -> None:
    async with pool.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SHOW TimeZone", prepare=False)
            row = await cur.fetchone()
    assert row is not None
    assert row[0] == "UTC"


@pytest.mark.asyncio
async def test_structured_filters_end_to_end(db_service: StringService) -> None:
    cases = [
        ({}, len(_FIXTURE_VALUES)),
        ({"is_palindrome": "true"}, 3),
        ({"is_palindrome": "true", "word_count": "1"}, 2),
        ({"min_length": "6", "max_length": "11"}, 2),
        ({"contains_character": "z"}, 1),
        ({"contains_character": "P"}, 1),
    ]

    for filters, expected in cases:
        result = await db_service.list_strings(filters)
        assert result.count == expected, filters


@pytest.mark.asyncio
async def test_natural_language_end_to_end(db_service: StringService) -> None:
    result = await db_service.list_strings_by_query("all single word palindromic strings")
    assert {r.value for r in result.data} == {"level", "kayak"}

    result = await db_service.list_strings_by_query("strings longer than 10 characters")
    assert {r.value for r in result.data} == {"hello world", "A man a plan a canal Panama"}


@pytest.mark.asyncio
async def test_create_get_delete_round_trip(db_service: StringService) -> None:
    value = f"integration {uuid.uuid4().hex}"

    created = await db_service.create_string(value)
    assert created.created_at.tzinfo is not None
    assert await db_service.get_string(value) == created

    with pytest.raises(StringAlreadyExistsError):
        await db_service.create_string(value)

    await db_service.delete_string(value)
    with pytest.raises(StringNotFoundError):
        await db_service.get_string(value)


@pytest.fixture
def fresh_schema_url(monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Point `DATABASE_URL` at a new, empty schema for the CLI entry points."""

    database_url = _require_database_url()
    schema = f"it_cli_{uuid.uuid4().hex}"

    try:
        conn_ctx = connect_utc(database_url)
    except psycopg.OperationalError as exc:
        _skip(f"Postgres is unreachable ({exc}); skipping integration tests")

    with conn_ctx as conn:
        with conn.transaction():
            conn.execute(
                sql.SQL("CREATE SCHEMA {}").format(sql.Identifier(schema)),
                prepare=False,
            )

    schema_url = make_conninfo(database_url, options=f"-c search_path={schema}")
    monkeypatch.setenv("DATABASE_URL", schema_url)
    yield schema_url

    with psycopg.connect(database_url) as conn:
        with conn.transaction():
            conn.execute(
                sql.SQL("DROP SCHEMA IF EXISTS {} CASCADE").format(sql.Identifier(schema)),
                prepare=False,
            )


def _count_records(database_url: str) -> int:
    with connect_utc(database_url) as conn:
        row = conn.execute("SELECT COUNT(*) FROM string_records", prepare=False).fetchone()
    assert row is not None
    return row[0]


def test_migrate_and_load_values(fresh_schema_url: str, tmp_path: Path) -> None:
    expected = [p.name for p in list_migration_files()]
    assert migrate(recreate=False) == expected
    assert migrate(recreate=False) == []

    path = tmp_path / "values.txt"
    path.write_text("level\nkayak\n\n   \nlevel\nnoon\n", encoding="utf-8")

    submitted = load_values(path=str(path), input_format="lines", batch_size=2)

    assert submitted == 4
    assert _count_records(fresh_schema_url) == 3

    # Reloading the same file only hits already-stored hashes.
    load_values(path=str(path), input_format="lines", batch_size=10)
    assert _count_records(fresh_schema_url) == 3
