"""Predicate schema (Pydantic models).

This schema is the contract between the filter builder and the SQL builder. Raw filter values are
strings; each one is converted exactly once into a tagged value (`boolean`, `integer` or
`character`) so nothing downstream has to re-parse it.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, model_validator

from src.analysis.properties import PropertyName


class FilterKey(StrEnum):
    """Recognized filter keys, in canonical predicate order."""

    is_palindrome = "is_palindrome"
    min_length = "min_length"
    max_length = "max_length"
    word_count = "word_count"
    contains_character = "contains_character"


class Operator(StrEnum):
    """Predicate operators understood by the SQL builder."""

    eq = "eq"
    gte = "gte"
    lte = "lte"
    has_char = "has_char"


class BooleanValue(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["boolean"] = "boolean"
    value: StrictBool


class IntegerValue(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["integer"] = "integer"
    value: StrictInt


class CharacterValue(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["character"] = "character"
    value: str = Field(min_length=1, max_length=1)


FilterValue = Annotated[BooleanValue | IntegerValue | CharacterValue, Field(discriminator="kind")]

AppliedValue = StrictBool | StrictInt | str

_OPERATOR_KINDS: dict[Operator, frozenset[str]] = {
    Operator.eq: frozenset({"boolean", "integer"}),
    Operator.gte: frozenset({"integer"}),
    Operator.lte: frozenset({"integer"}),
    Operator.has_char: frozenset({"character"}),
}


class Predicate(BaseModel):
    """A single constraint on one property; predicates are combined with AND."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: FilterKey
    field: PropertyName
    op: Operator
    value: FilterValue

    @model_validator(mode="after")
    def validate_operator_kind(self) -> Predicate:
        """Validate that the operator accepts the value kind."""

        if self.value.kind not in _OPERATOR_KINDS[self.op]:
            raise ValueError(f"operator {self.op} does not accept {self.value.kind} values")
        return self


class PredicateSet(BaseModel):
    """Validated predicates plus an echo of the parsed filter values.

    An empty predicate set is valid and matches every record.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    predicates: tuple[Predicate, ...] = ()
    applied: dict[str, AppliedValue] = Field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.predicates
