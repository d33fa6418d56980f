"""Tests for the deterministic natural-language filter parser."""

from __future__ import annotations

import pytest

from src.filters.builder import build_predicates
from src.filters.errors import FilterConflictError
from src.intent.normalize import normalize_text
from src.intent.rules_parser import QueryParseError, parse_filters


def test_single_word_palindromic() -> None:
    assert parse_filters("all single word palindromic strings") == {
        "word_count": "1",
        "is_palindrome": "true",
    }


def test_one_word_palindromes() -> None:
    assert parse_filters("One-word palindromes, please") == {
        "word_count": "1",
        "is_palindrome": "true",
    }


def test_longer_than_is_exclusive() -> None:
    assert parse_filters("strings longer than 10 characters") == {"min_length": "11"}
    assert parse_filters("greater than 0 character") == {"min_length": "1"}


def test_shorter_than_is_exclusive() -> None:
    assert parse_filters("strings shorter than 5 characters") == {"max_length": "4"}


def test_containing_the_letter() -> None:
    assert parse_filters("strings containing the letter z") == {"contains_character": "z"}
    assert parse_filters("Strings containing the letter Z!") == {"contains_character": "z"}
    assert parse_filters("words that contain letter q") == {"contains_character": "q"}


def test_containing_the_letter_requires_single_letter_word() -> None:
    with pytest.raises(QueryParseError):
        parse_filters("strings containing the letter zebra")


def test_first_vowel_heuristic() -> None:
    assert parse_filters("palindromic strings that contain the first vowel") == {
        "is_palindrome": "true",
        "contains_character": "a",
    }


def test_later_rule_overwrites_earlier_rule_for_same_key() -> None:
    filters = parse_filters("strings with the first vowel containing the letter e")
    assert filters == {"is_palindrome": "true", "contains_character": "e"}


def test_negated_palindrome_only() -> None:
    assert parse_filters("strings that are not palindromes") == {"is_palindrome": "false"}
    assert parse_filters("non-palindromic strings") == {"is_palindrome": "false"}
    assert parse_filters("not a palindrome") == {"is_palindrome": "false"}


def test_positive_and_negated_palindrome_conflict() -> None:
    with pytest.raises(FilterConflictError):
        parse_filters("palindromic strings that are not palindromic")


def test_first_vowel_and_negated_palindrome_conflict() -> None:
    with pytest.raises(FilterConflictError):
        parse_filters("non-palindromic strings with the first vowel")


def test_contradictory_lengths_are_rejected_by_builder() -> None:
    filters = parse_filters("longer than 10 characters and shorter than 5 characters")
    assert filters == {"min_length": "11", "max_length": "4"}

    with pytest.raises(FilterConflictError):
        build_predicates(filters)


def test_combined_query() -> None:
    filters = parse_filters(
        "single word palindromes longer than 3 characters containing the letter r"
    )
    assert filters == {
        "word_count": "1",
        "is_palindrome": "true",
        "min_length": "4",
        "contains_character": "r",
    }
    assert build_predicates(filters).applied == {
        "is_palindrome": True,
        "min_length": 4,
        "word_count": 1,
        "contains_character": "r",
    }


@pytest.mark.parametrize("text", ["xyz", "", "   ", "?!"])
def test_unrecognized_query(text: str) -> None:
    with pytest.raises(QueryParseError):
        parse_filters(text)


def test_parse_is_idempotent() -> None:
    text = "all single word palindromic strings"
    assert parse_filters(text) == parse_filters(text)


def test_normalize_text() -> None:
    assert normalize_text("  Strings, LONGER than 10 characters!! ") == (
        "strings longer than 10 characters"
    )
    assert normalize_text("non—palindromic") == "non-palindromic"
    assert normalize_text(None) == ""  # type: ignore[arg-type]


def test_triggers_match_inside_longer_words() -> None:
    assert parse_filters("palindromically speaking") == {"is_palindrome": "true"}
    assert parse_filters("single wordy strings") == {"word_count": "1"}
    assert parse_filters("not palindromically arranged") == {"is_palindrome": "false"}


def test_oversized_number_is_not_a_length_phrase() -> None:
    with pytest.raises(QueryParseError):
        parse_filters("strings longer than " + "9" * 5000 + " characters")

    assert parse_filters("shorter than 999999999999999999 characters") == {
        "max_length": "999999999999999998"
    }
