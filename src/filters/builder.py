"""Deterministic filter builder.

The builder converts a raw filter map into a `PredicateSet`:
    - each recognized key is validated and parsed exactly once,
    - unrecognized keys are ignored so clients can send forward-compatible parameters,
    - cross-field conflicts are rejected here, whatever the origin of the filter map.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from src.analysis.properties import PropertyName
from src.filters.errors import FilterConflictError, FilterValidationError
from src.filters.schema import (
    AppliedValue,
    BooleanValue,
    CharacterValue,
    FilterKey,
    FilterValue,
    IntegerValue,
    Operator,
    Predicate,
    PredicateSet,
)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# Property columns are BIGINT-compatible; reject anything the storage layer cannot compare.
_INT_MIN = -(2 ** 63)
_INT_MAX = 2 ** 63 - 1
_MAX_DIGITS = len(str(_INT_MAX))


def _parse_boolean(key: FilterKey, raw: str) -> FilterValue:
    if raw == "true":
        return BooleanValue(value=True)
    if raw == "false":
        return BooleanValue(value=False)
    raise FilterValidationError(key, 'expected "true" or "false"')


def _parse_integer(key: FilterKey, raw: str) -> FilterValue:
    if not _INTEGER_RE.fullmatch(raw):
        raise FilterValidationError(key, "expected a base-10 integer")
    # Bound the digit count before `int()`, which refuses very long digit strings.
    if len(raw.lstrip("+-").lstrip("0")) > _MAX_DIGITS:
        raise FilterValidationError(key, "integer is out of supported range")
    value = int(raw)
    if value < _INT_MIN or value > _INT_MAX:
        raise FilterValidationError(key, "integer is out of supported range")
    return IntegerValue(value=value)


def _parse_character(key: FilterKey, raw: str) -> FilterValue:
    if len(raw) != 1:
        raise FilterValidationError(key, "expected exactly one character")
    return CharacterValue(value=raw)


@dataclass(frozen=True)
class _FilterSpec:
    """How one filter key maps onto a property predicate."""

    field: PropertyName
    op: Operator
    parse: Callable[[FilterKey, str], FilterValue]


_FILTER_SPECS: dict[FilterKey, _FilterSpec] = {
    FilterKey.is_palindrome: _FilterSpec(PropertyName.is_palindrome, Operator.eq, _parse_boolean),
    FilterKey.min_length: _FilterSpec(PropertyName.length, Operator.gte, _parse_integer),
    FilterKey.max_length: _FilterSpec(PropertyName.length, Operator.lte, _parse_integer),
    FilterKey.word_count: _FilterSpec(PropertyName.word_count, Operator.eq, _parse_integer),
    FilterKey.contains_character: _FilterSpec(
        PropertyName.character_frequency_map, Operator.has_char, _parse_character
    ),
}


def _check_length_bounds(applied: Mapping[str, AppliedValue]) -> None:
    min_length = applied.get(FilterKey.min_length)
    max_length = applied.get(FilterKey.max_length)
    if min_length is None or max_length is None:
        return
    if min_length > max_length:
        raise FilterConflictError(
            f"Conflicting filters: min_length ({min_length}) cannot be greater than "
            f"max_length ({max_length})"
        )


def build_predicates(filters: Mapping[str, object]) -> PredicateSet:
    """Validate a raw filter map and build the predicate set.

    Raises:
        FilterValidationError: If a recognized key carries a malformed or non-string value.
        FilterConflictError: If `min_length` is greater than `max_length`.
    """

    predicates: list[Predicate] = []
    applied: dict[str, AppliedValue] = {}

    # Iterate in canonical key order so the output does not depend on the caller's ordering.
    for key, spec in _FILTER_SPECS.items():
        if key not in filters:
            continue

        raw = filters[key]
        if not isinstance(raw, str):
            raise FilterValidationError(key, "expected a single string value")

        value = spec.parse(key, raw)
        predicates.append(Predicate(key=key, field=spec.field, op=spec.op, value=value))
        applied[key.value] = value.value

    _check_length_bounds(applied)

    return PredicateSet(predicates=tuple(predicates), applied=applied)
