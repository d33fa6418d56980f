"""Phrase rules for the natural-language filter parser.

Each rule maps a trigger pattern (matched against normalized text) to filter assignments. The table
is small and closed; rules are evaluated in table order and later rules overwrite earlier ones for
the same key.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from src.filters.schema import FilterKey

Assignments = dict[FilterKey, str]


@dataclass(frozen=True)
class FilterRule:
    """A named trigger -> effect rule.

    `exclude` (optional) is removed from the text before `pattern` is searched, which lets a rule
    ignore phrases claimed by another rule (e.g. "not palindromic").
    """

    name: str
    pattern: re.Pattern[str]
    effect: Callable[[re.Match[str]], Assignments]
    exclude: re.Pattern[str] | None = None

    def apply(self, text: str) -> Assignments | None:
        """Return the rule's assignments if it triggers on `text`, otherwise `None`."""

        if self.exclude is not None:
            text = self.exclude.sub(" ", text)
        match = self.pattern.search(text)
        if match is None:
            return None
        return self.effect(match)


_PALINDROME_WORD = r"palindrom(?:e|es|ic)"

NEGATED_PALINDROME_RE = re.compile(rf"\b(?:not|non)(?:\s+|-)(?:a\s+)?{_PALINDROME_WORD}")

# At most 18 digits, so N+1 and N-1 stay within the BIGINT range of the length column.
_COUNT = r"(?P<n>[0-9]{1,18})"


def _strictly_longer(match: re.Match[str]) -> Assignments:
    # "longer than N" is exclusive; the stored filter is an inclusive minimum.
    return {FilterKey.min_length: str(int(match.group("n")) + 1)}


def _strictly_shorter(match: re.Match[str]) -> Assignments:
    return {FilterKey.max_length: str(int(match.group("n")) - 1)}


RULES: tuple[FilterRule, ...] = (
    FilterRule(
        name="single_word",
        pattern=re.compile(r"\b(?:single|one)[\s-]words?"),
        effect=lambda _m: {FilterKey.word_count: "1"},
    ),
    FilterRule(
        name="palindrome",
        pattern=re.compile(rf"\b{_PALINDROME_WORD}"),
        effect=lambda _m: {FilterKey.is_palindrome: "true"},
        exclude=NEGATED_PALINDROME_RE,
    ),
    FilterRule(
        name="not_palindrome",
        pattern=NEGATED_PALINDROME_RE,
        effect=lambda _m: {FilterKey.is_palindrome: "false"},
    ),
    FilterRule(
        name="longer_than",
        pattern=re.compile(rf"\b(?:longer|greater) than {_COUNT} characters?\b"),
        effect=_strictly_longer,
    ),
    FilterRule(
        name="shorter_than",
        pattern=re.compile(rf"\b(?:shorter|less) than {_COUNT} characters?\b"),
        effect=_strictly_shorter,
    ),
    # Heuristic: "the first vowel" is read as the letter "a" in palindromes, not vowel detection.
    FilterRule(
        name="first_vowel",
        pattern=re.compile(r"\bfirst vowel\b"),
        effect=lambda _m: {FilterKey.is_palindrome: "true", FilterKey.contains_character: "a"},
    ),
    FilterRule(
        name="contains_letter",
        pattern=re.compile(r"\bcontain(?:s|ing)? (?:the )?letter (?P<letter>[a-z])\b"),
        effect=lambda m: {FilterKey.contains_character: m.group("letter")},
    ),
)

# Keys whose values are boolean literals; contradictory assertions on these are conflicts.
BOOLEAN_KEYS: frozenset[FilterKey] = frozenset({FilterKey.is_palindrome})
