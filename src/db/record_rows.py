"""Record-to-row conversion helpers.

The repository, the bulk loader and the integration tests all convert between `PropertyRecord`
values and rows of the `string_records` table. Keeping this conversion in one place prevents
drift between them.

Row layout follows `src.sql.columns.RECORD_COLUMNS`.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from psycopg.types.json import Jsonb

from src.analysis.analyzer import analyze
from src.analysis.properties import PropertyRecord
from src.service.schema import StoredString


def record_row(value: str, properties: PropertyRecord) -> tuple[Any, ...]:
    """Return the insert row (every column but `created_at`) for an analyzed value."""

    return (
        properties.content_hash,
        value,
        properties.length,
        properties.is_palindrome,
        properties.unique_characters,
        properties.word_count,
        Jsonb(properties.character_frequency_map),
    )


def iter_record_rows(values: Iterable[str]) -> Iterable[tuple[Any, ...]]:
    """Analyze each value and yield its insert row."""

    for value in values:
        yield record_row(value, analyze(value))


def stored_string_from_row(row: tuple[Any, ...]) -> StoredString:
    """Build a `StoredString` from a full record row (including `created_at`)."""

    (
        sha256_hash,
        value,
        length,
        is_palindrome,
        unique_characters,
        word_count,
        character_frequency_map,
        created_at,
    ) = row

    properties = PropertyRecord(
        length=length,
        is_palindrome=is_palindrome,
        unique_characters=unique_characters,
        word_count=word_count,
        content_hash=sha256_hash,
        character_frequency_map=character_frequency_map,
    )
    return StoredString(id=sha256_hash, value=value, properties=properties, created_at=created_at)
