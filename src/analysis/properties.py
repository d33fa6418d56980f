"""Property record schema (Pydantic models).

This schema is the contract between the analyzer, the storage layer and the filter vocabulary.
Filter keys and SQL columns are defined in terms of `PropertyName`.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, model_validator


class PropertyName(StrEnum):
    """Names of the computed properties."""

    length = "length"
    is_palindrome = "is_palindrome"
    unique_characters = "unique_characters"
    word_count = "word_count"
    content_hash = "content_hash"
    character_frequency_map = "character_frequency_map"


class PropertyRecord(BaseModel):
    """Computed properties of a single text value.

    Records are immutable; a value is re-analyzed only by deleting and recreating its record.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    length: NonNegativeInt
    is_palindrome: bool
    unique_characters: NonNegativeInt
    word_count: NonNegativeInt
    content_hash: str = Field(pattern=r"^[0-9a-f]{64}$")
    character_frequency_map: dict[str, PositiveInt]

    @model_validator(mode="after")
    def validate_frequency_map(self) -> PropertyRecord:
        """Validate that the frequency map agrees with `length` and `unique_characters`."""

        if sum(self.character_frequency_map.values()) != self.length:
            raise ValueError("character frequencies must sum to length")
        if len(self.character_frequency_map) != self.unique_characters:
            raise ValueError("character_frequency_map must have unique_characters keys")
        if self.length == 0 and self.word_count != 0:
            raise ValueError("empty text cannot contain words")
        return self
