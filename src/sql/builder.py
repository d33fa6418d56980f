"""Deterministic SQL builder.

The builder converts a validated `PredicateSet` into a parameterized SQL query. Identifiers
(columns, tables, operators) are strictly allowlisted; only values become bound parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.filters.schema import Operator, Predicate, PredicateSet
from src.sql.columns import PROPERTY_COLUMNS, RECORD_COLUMNS, RECORDS_TABLE


class SQLBuilderError(ValueError):
    """Raised when a predicate cannot be converted into deterministic SQL."""


_COMPARISON_OPERATORS: dict[Operator, str] = {
    Operator.eq: "=",
    Operator.gte: ">=",
    Operator.lte: "<=",
}

_SELECT_COLUMNS = ", ".join(f"r.{c}" for c in RECORD_COLUMNS)
_RETURNING_COLUMNS = ", ".join(RECORD_COLUMNS)


@dataclass(frozen=True)
class BuiltQuery:
    """A parameterized SQL query ready for execution."""

    sql: str
    params: tuple[Any, ...]


def _where_and(clauses: list[str]) -> str:
    if not clauses:
        return ""
    return "WHERE " + " AND ".join(clauses)


def _build_predicate_clause(predicate: Predicate) -> tuple[str, list[Any]]:
    try:
        column = PROPERTY_COLUMNS[predicate.field]
    except KeyError as exc:
        raise SQLBuilderError(f"Unsupported property: {predicate.field}") from exc

    if predicate.op == Operator.has_char:
        # Character present with a positive count in the JSONB frequency map.
        return f"COALESCE((r.{column} ->> %s)::integer, 0) > 0", [predicate.value.value]

    operator = _COMPARISON_OPERATORS.get(predicate.op)
    if operator is None:
        raise SQLBuilderError(f"Unsupported operator: {predicate.op}")
    return f"r.{column} {operator} %s", [predicate.value.value]


def build_select(predicate_set: PredicateSet) -> BuiltQuery:
    """Build a record SELECT (newest first) matching every predicate."""

    clauses: list[str] = []
    params: list[Any] = []

    for predicate in predicate_set.predicates:
        clause, p = _build_predicate_clause(predicate)
        clauses.append(clause)
        params.extend(p)

    sql = (
        f"SELECT {_SELECT_COLUMNS} FROM {RECORDS_TABLE} r {_where_and(clauses)} "
        "ORDER BY r.created_at DESC, r.sha256_hash"
    )
    return BuiltQuery(sql=" ".join(sql.split()), params=tuple(params))


def build_select_by_hash(sha256_hash: str) -> BuiltQuery:
    """Build a single-record lookup by content hash."""

    sql = f"SELECT {_SELECT_COLUMNS} FROM {RECORDS_TABLE} r WHERE r.sha256_hash = %s"
    return BuiltQuery(sql=sql, params=(sha256_hash,))


def build_insert(row: tuple[Any, ...]) -> BuiltQuery:
    """Build an INSERT that silently skips duplicates and returns the inserted row.

    `row` must follow `src.db.record_rows.record_row` ordering. No row is returned when a record
    with the same content hash already exists.
    """

    columns = RECORD_COLUMNS[:-1]
    if len(row) != len(columns):
        raise SQLBuilderError(f"Expected {len(columns)} values, got {len(row)}")

    placeholders = ", ".join("%s" for _ in columns)
    sql = (
        f"INSERT INTO {RECORDS_TABLE} ({', '.join(columns)}) VALUES ({placeholders}) "
        f"ON CONFLICT (sha256_hash) DO NOTHING RETURNING {_RETURNING_COLUMNS}"
    )
    return BuiltQuery(sql=sql, params=tuple(row))


def build_delete_by_hash(sha256_hash: str) -> BuiltQuery:
    """Build a DELETE of the record with the given content hash."""

    sql = f"DELETE FROM {RECORDS_TABLE} WHERE sha256_hash = %s"
    return BuiltQuery(sql=sql, params=(sha256_hash,))
