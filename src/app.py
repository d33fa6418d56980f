"""Application composition root.

This module wires configuration, the DB pool, the repository and the string service together for
the bot runtime. The repository is injected into the service; nothing is held in module globals.
"""

from __future__ import annotations

from dataclasses import dataclass

from psycopg_pool import AsyncConnectionPool

from src.config.settings import Settings
from src.db.pool import create_pool
from src.db.repository import PostgresStringRepository
from src.service.strings import StringService


@dataclass(frozen=True)
class App:
    """Shared application dependencies for handlers."""

    settings: Settings
    pool: AsyncConnectionPool
    service: StringService


def create_app(settings: Settings) -> App:
    """Create the application container.

    Note:
        The returned DB pool is not opened. Call `await app.pool.open()` at startup.
    """

    pool = create_pool(settings.database_url, max_size=settings.db_pool_max_size)
    service = StringService(PostgresStringRepository(pool))
    return App(settings=settings, pool=pool, service=service)
