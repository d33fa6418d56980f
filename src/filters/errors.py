"""Errors raised while validating filters."""

from __future__ import annotations


class FilterValidationError(ValueError):
    """Raised when a recognized filter key carries a malformed value."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"invalid value for {key}: {reason}")
        self.key = key
        self.reason = reason


class FilterConflictError(ValueError):
    """Raised when filters contradict each other (e.g. `min_length > max_length`)."""
