"""Reply rendering.

Every reply is a JSON document with a `status` field mirroring the HTTP status the operation
would have on a web transport, so each error kind stays distinguishable for clients.
"""

from __future__ import annotations

import json
from typing import Any

from src.filters.errors import FilterConflictError, FilterValidationError
from src.intent.rules_parser import QueryParseError
from src.service.schema import NaturalLanguageStringList, StoredString, StringList
from src.service.strings import (
    StringAlreadyExistsError,
    StringNotFoundError,
    StringValidationError,
)

TELEGRAM_MESSAGE_LIMIT = 4096
_ELLIPSIS = "…"

DOMAIN_ERRORS: tuple[type[Exception], ...] = (
    StringValidationError,
    FilterValidationError,
    StringAlreadyExistsError,
    StringNotFoundError,
    QueryParseError,
    FilterConflictError,
)

# Checked in order; the first matching class wins.
_ERROR_STATUS: tuple[tuple[type[Exception], int, str], ...] = (
    (StringValidationError, 400, "validation_error"),
    (FilterValidationError, 400, "validation_error"),
    (QueryParseError, 400, "unparseable_query"),
    (StringNotFoundError, 404, "not_found"),
    (StringAlreadyExistsError, 409, "conflict"),
    (FilterConflictError, 422, "conflicting_filters"),
)

USAGE = (
    "/analyze <text> - analyze and store a string\n"
    "/get <text> - show a stored string\n"
    "/list key=value ... - filter by is_palindrome, min_length, max_length, word_count, "
    "contains_character\n"
    "/query <text> - filter in plain English, e.g. \"single word palindromic strings\"\n"
    "/delete <text> - delete a stored string\n"
    "Any other text is treated as a /query."
)


def render_record(record: StoredString, *, status: int = 200) -> dict[str, Any]:
    return {"status": status, **record.model_dump(mode="json")}


def render_list(
        result: StringList | NaturalLanguageStringList, *, max_records: int
) -> dict[str, Any]:
    """Render a list result, keeping at most `max_records` entries (`count` stays the total)."""

    body = result.model_dump(mode="json")
    shown = body["data"][:max_records]
    body["data"] = shown
    if len(shown) < result.count:
        body["truncated"] = True
    return {"status": 200, **body}


def render_deleted() -> dict[str, Any]:
    return {"status": 204}


def render_usage(*, status: int = 200) -> dict[str, Any]:
    return {"status": status, "usage": USAGE}


def render_error(exc: Exception) -> dict[str, Any]:
    """Map a domain error to its status payload; anything else is an internal error."""

    for error_type, status, kind in _ERROR_STATUS:
        if isinstance(exc, error_type):
            payload: dict[str, Any] = {"status": status, "error": kind, "message": str(exc)}
            if isinstance(exc, FilterValidationError):
                payload["field"] = str(exc.key)
            elif isinstance(exc, StringValidationError):
                payload["field"] = exc.field
            elif isinstance(exc, StringAlreadyExistsError) and exc.existing is not None:
                payload["data"] = exc.existing.model_dump(mode="json")
            return payload

    return {"status": 500, "error": "internal_error", "message": "Internal server error"}


def to_reply_text(payload: dict[str, Any], *, limit: int = TELEGRAM_MESSAGE_LIMIT) -> str:
    """Serialize a payload to reply text that fits a single message."""

    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if len(text) <= limit:
        return text

    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    if len(text) <= limit:
        return text

    return text[: limit - len(_ELLIPSIS)] + _ELLIPSIS
