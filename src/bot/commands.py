"""Command argument parsing for the bot."""

from __future__ import annotations

import re
from urllib.parse import unquote

_PAIR_SEPARATOR_RE = re.compile(r"[\s&]+")


def parse_filter_args(args: str | None) -> dict[str, str | list[str]]:
    """Parse `/list` arguments into a raw filter map.

    Pairs look like `key=value` and are separated by whitespace or `&`; values are percent-decoded
    so that e.g. a space can be passed as `%20`. A key given more than once maps to the list of its
    values (the filter builder rejects those). A token without `=` maps to an empty value.
    """

    filters: dict[str, str | list[str]] = {}
    for token in _PAIR_SEPARATOR_RE.split((args or "").strip()):
        if not token:
            continue

        key, _, raw_value = token.partition("=")
        value = unquote(raw_value)

        existing = filters.get(key)
        if existing is None:
            filters[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            filters[key] = [existing, value]
    return filters
