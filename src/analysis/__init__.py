"""String analysis.

The analysis layer derives a fixed, deterministic property record from any text value. The record
is what gets persisted and what every filter predicate is evaluated against.
"""
