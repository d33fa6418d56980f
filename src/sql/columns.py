"""Allowlisted SQL identifiers.

All column names referenced in generated SQL must come from these mappings; no user-provided
identifier should ever be interpolated into SQL.
"""

from __future__ import annotations

from src.analysis.properties import PropertyName

RECORDS_TABLE = "string_records"

PROPERTY_COLUMNS: dict[PropertyName, str] = {
    PropertyName.length: "length",
    PropertyName.is_palindrome: "is_palindrome",
    PropertyName.unique_characters: "unique_characters",
    PropertyName.word_count: "word_count",
    PropertyName.content_hash: "sha256_hash",
    PropertyName.character_frequency_map: "character_frequency_map",
}

# Column order of every row returned by record queries (see `src.db.record_rows`).
RECORD_COLUMNS: tuple[str, ...] = (
    "sha256_hash",
    "value",
    "length",
    "is_palindrome",
    "unique_characters",
    "word_count",
    "character_frequency_map",
    "created_at",
)
