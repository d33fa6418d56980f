"""Text normalization for deterministic query parsing."""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^0-9a-z\-\s]+")
_MULTISPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Normalize user text for rules-based parsing.

    Normalization is intentionally conservative:
        - Lowercase.
        - Normalize unicode dashes to ASCII hyphen (keeps "non-palindromic" intact).
        - Replace every other character outside `[0-9a-z]` with a space.
        - Collapse whitespace.

    The goal is deterministic tokenization, not linguistic lemmatization.
    """

    value = (text or "").strip().lower()
    value = value.replace("—", "-").replace("–", "-")
    value = _NON_WORD_RE.sub(" ", value)
    value = _MULTISPACE_RE.sub(" ", value).strip()
    return value
