"""Rules-based natural-language filter parser.

This parser is intentionally strict and deterministic:
    - it only recognizes the phrases in `src.intent.rules.RULES`,
    - it rejects queries that assert a boolean filter both ways,
    - it produces the same raw filter map the structured entry point receives, so both paths share
      the validation in `src.filters.builder`.
"""

from __future__ import annotations

import logging

from src.filters.errors import FilterConflictError
from src.filters.schema import FilterKey
from src.intent.normalize import normalize_text
from src.intent.rules import BOOLEAN_KEYS, RULES

logger = logging.getLogger(__name__)


class QueryParseError(ValueError):
    """Raised when no rule recognizes the query."""


def parse_filters(text: str) -> dict[str, str]:
    """Parse a natural-language query into a raw filter map.

    Raises:
        QueryParseError: If the query is empty or no rule matches.
        FilterConflictError: If the query asserts a boolean filter and its negation.
    """

    normalized = normalize_text(text)
    if not normalized:
        raise QueryParseError("Unable to parse natural language query: empty input")

    filters: dict[FilterKey, str] = {}
    asserted: dict[FilterKey, set[str]] = {}
    matched_rules: list[str] = []

    for rule in RULES:
        assignments = rule.apply(normalized)
        if assignments is None:
            continue

        matched_rules.append(rule.name)
        for key, value in assignments.items():
            if key in BOOLEAN_KEYS:
                asserted.setdefault(key, set()).add(value)
            filters[key] = value

    if not matched_rules:
        raise QueryParseError("Unable to parse natural language query")

    for key, values in asserted.items():
        if len(values) > 1:
            raise FilterConflictError(
                f"Conflicting filters: query asserts both {key}=true and {key}=false"
            )

    logger.debug("parsed query rules=%s filters=%s", matched_rules, filters)
    return {key.value: value for key, value in filters.items()}
