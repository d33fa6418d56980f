"""Pytest configuration and shared fakes.

The repository uses a flat `src/` layout. This conftest ensures tests can import from the `src.*`
namespace when running `pytest` without installing the package, and provides an in-memory stand-in
for the Postgres repository.
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.analysis.properties import PropertyName, PropertyRecord  # noqa: E402
from src.filters.schema import Operator, Predicate, PredicateSet  # noqa: E402
from src.service.schema import StoredString  # noqa: E402
from src.service.strings import StringService  # noqa: E402

_EPOCH = datetime(2025, 1, 1, tzinfo=UTC)


def _matches(properties: PropertyRecord, predicate: Predicate) -> bool:
    if predicate.op == Operator.has_char:
        return properties.character_frequency_map.get(predicate.value.value, 0) > 0

    actual = getattr(properties, PropertyName(predicate.field).value)
    expected = predicate.value.value
    if predicate.op == Operator.eq:
        return actual == expected
    if predicate.op == Operator.gte:
        return actual >= expected
    return actual <= expected


class FakeStringRepository:
    """In-memory repository keyed on the content hash, newest records first."""

    def __init__(self) -> None:
        self.records: dict[str, StoredString] = {}
        self.find_calls: list[PredicateSet] = []

    async def insert(self, value: str, properties: PropertyRecord) -> StoredString | None:
        if properties.content_hash in self.records:
            return None
        stored = StoredString(
            id=properties.content_hash,
            value=value,
            properties=properties,
            created_at=_EPOCH + timedelta(seconds=len(self.records)),
        )
        self.records[stored.id] = stored
        return stored

    async def get_by_hash(self, sha256_hash: str) -> StoredString | None:
        return self.records.get(sha256_hash)

    async def find(self, predicate_set: PredicateSet) -> list[StoredString]:
        self.find_calls.append(predicate_set)
        matched = [
            r
            for r in self.records.values()
            if all(_matches(r.properties, p) for p in predicate_set.predicates)
        ]
        return sorted(matched, key=lambda r: r.created_at, reverse=True)

    async def delete_by_hash(self, sha256_hash: str) -> bool:
        return self.records.pop(sha256_hash, None) is not None


@pytest.fixture
def repository() -> FakeStringRepository:
    return FakeStringRepository()


@pytest.fixture
def service(repository: FakeStringRepository) -> StringService:
    return StringService(repository)
