"""Stored record and response schemas (Pydantic models)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.analysis.properties import PropertyRecord
from src.filters.schema import AppliedValue


class StoredString(BaseModel):
    """A persisted text value with its computed properties."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    value: str
    properties: PropertyRecord
    created_at: datetime


class StringList(BaseModel):
    """Records matching a structured filter request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data: list[StoredString]
    count: int
    filters_applied: dict[str, AppliedValue] = Field(default_factory=dict)


class InterpretedQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    original: str
    parsed_filters: dict[str, str]


class NaturalLanguageStringList(BaseModel):
    """Records matching a natural-language filter request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data: list[StoredString]
    count: int
    interpreted_query: InterpretedQuery
