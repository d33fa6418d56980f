"""String record operations.

`StringService` orchestrates the analyzer, the filter builder and the natural-language parser
around an injected storage collaborator. It holds no other state.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

from src.analysis.analyzer import analyze, content_hash
from src.analysis.properties import PropertyRecord
from src.filters.builder import build_predicates
from src.filters.schema import PredicateSet
from src.intent.rules_parser import parse_filters
from src.service.schema import (
    InterpretedQuery,
    NaturalLanguageStringList,
    StoredString,
    StringList,
)

logger = logging.getLogger(__name__)


class StringValidationError(ValueError):
    """Raised when an input value is missing, not a string, or blank."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"invalid {field}: {reason}")
        self.field = field
        self.reason = reason


class StringAlreadyExistsError(ValueError):
    """Raised when a record with the same content hash is already stored.

    `existing` carries the stored record when it could be read back.
    """

    def __init__(self, message: str, existing: StoredString | None = None) -> None:
        super().__init__(message)
        self.existing = existing


class StringNotFoundError(ValueError):
    """Raised when no record matches an exact value."""


class StringRepository(Protocol):
    """Storage collaborator contract."""

    async def insert(self, value: str, properties: PropertyRecord) -> StoredString | None: ...

    async def get_by_hash(self, sha256_hash: str) -> StoredString | None: ...

    async def find(self, predicate_set: PredicateSet) -> list[StoredString]: ...

    async def delete_by_hash(self, sha256_hash: str) -> bool: ...


def _require_text(field: str, value: object) -> str:
    if value is None:
        raise StringValidationError(field, "is required")
    if not isinstance(value, str):
        raise StringValidationError(field, "must be a string")
    if not value.strip():
        raise StringValidationError(field, "must not be empty")
    return value


class StringService:
    """The five record operations exposed to the transport layer."""

    def __init__(self, repository: StringRepository) -> None:
        self._repository = repository

    async def create_string(self, value: object) -> StoredString:
        """Analyze and store a value.

        Raises:
            StringValidationError: If `value` is missing, not a string, or blank.
            StringAlreadyExistsError: If the value is already stored.
        """

        text = _require_text("value", value)
        properties = analyze(text)

        stored = await self._repository.insert(text, properties)
        if stored is None:
            existing = await self._repository.get_by_hash(properties.content_hash)
            raise StringAlreadyExistsError("String already exists in the system", existing)

        logger.info("stored id=%s length=%d", stored.id, properties.length)
        return stored

    async def get_string(self, value: str) -> StoredString:
        """Look up the record of an exact value.

        Raises:
            StringNotFoundError: If the value is not stored.
        """

        stored = await self._repository.get_by_hash(content_hash(value))
        if stored is None:
            raise StringNotFoundError("String does not exist in the system")
        return stored

    async def list_strings(self, filters: Mapping[str, object]) -> StringList:
        """List records matching structured filters (unknown keys are ignored)."""

        predicate_set = build_predicates(filters)
        records = await self._repository.find(predicate_set)
        return StringList(data=records, count=len(records), filters_applied=predicate_set.applied)

    async def list_strings_by_query(self, query: object) -> NaturalLanguageStringList:
        """List records matching a natural-language query.

        Raises:
            StringValidationError: If `query` is missing or blank.
            QueryParseError: If no phrase in the query is recognized.
            FilterConflictError: If the interpreted filters contradict each other.
        """

        text = _require_text("query", query)
        parsed = parse_filters(text)
        predicate_set = build_predicates(parsed)

        records = await self._repository.find(predicate_set)
        return NaturalLanguageStringList(
            data=records,
            count=len(records),
            interpreted_query=InterpretedQuery(original=text, parsed_filters=parsed),
        )

    async def delete_string(self, value: str) -> None:
        """Delete the record of an exact value.

        Raises:
            StringNotFoundError: If the value is not stored.
        """

        sha256_hash = content_hash(value)
        deleted = await self._repository.delete_by_hash(sha256_hash)
        if not deleted:
            raise StringNotFoundError("String does not exist in the system")
        logger.info("deleted id=%s", sha256_hash)
