"""Deterministic string analyzer.

`analyze` never fails for a `str` input and has no side effects, so it is safe to call from any
number of tasks concurrently.
"""

from __future__ import annotations

import hashlib
import re
from collections import Counter

from src.analysis.properties import PropertyRecord

# Palindrome check keeps ASCII letters and digits only; non-ASCII letters are dropped, not folded.
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

_ASCII_WHITESPACE = " \t\n\r\x0b\x0c"
_ASCII_WHITESPACE_RE = re.compile(r"[ \t\n\r\x0b\x0c]+")


def content_hash(text: str) -> str:
    """Return the SHA-256 hex digest of the UTF-8 encoded text.

    Lone surrogates are encoded with `surrogatepass` so that every Python `str` has a digest.
    """

    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()


def is_palindrome(text: str) -> bool:
    """Whether the lower-cased ASCII alphanumerics of `text` read the same backwards.

    Text without any ASCII alphanumeric character is not a palindrome.
    """

    normalized = _NON_ALNUM_RE.sub("", text.lower())
    if not normalized:
        return False
    return normalized == normalized[::-1]


def count_words(text: str) -> int:
    """Count runs of non-whitespace separated by ASCII whitespace."""

    trimmed = text.strip(_ASCII_WHITESPACE)
    if not trimmed:
        return 0
    return len(_ASCII_WHITESPACE_RE.split(trimmed))


def analyze(text: str) -> PropertyRecord:
    """Compute the full property record for `text`."""

    frequencies = Counter(text)
    return PropertyRecord(
        length=len(text),
        is_palindrome=is_palindrome(text),
        unique_characters=len(frequencies),
        word_count=count_words(text),
        content_hash=content_hash(text),
        character_frequency_map=dict(frequencies),
    )
