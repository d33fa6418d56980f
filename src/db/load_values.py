"""Bulk-load text values into Postgres.

The input is either a text file with one value per line (`--format lines`) or a JSON array of
strings (`--format json`). Every value is analyzed and inserted; values whose content hash is
already stored are skipped, blank values are rejected the same way the service rejects them.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

from src.config.logging import configure_logging
from src.db.connection import connect_utc, require_database_url
from src.db.record_rows import iter_record_rows
from src.sql.builder import build_insert

logger = logging.getLogger(__name__)

InputFormat = Literal["lines", "json"]


def read_values(path: str, *, input_format: InputFormat) -> list[str]:
    """Read raw values from `path`.

    Raises:
        ValueError: If a JSON input is not an array of strings.
    """

    text = Path(path).read_text(encoding="utf-8")
    if input_format == "lines":
        return text.splitlines()

    payload = json.loads(text)
    if not isinstance(payload, list) or not all(isinstance(v, str) for v in payload):
        raise ValueError("Unexpected input format: expected a JSON array of strings")
    return payload


def _chunks(iterable: Iterable[tuple], size: int) -> Iterable[list[tuple]]:
    chunk: list[tuple] = []
    for item in iterable:
        chunk.append(item)
        if len(chunk) >= size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


def load_values(*, path: str, input_format: InputFormat, batch_size: int) -> int:
    """Analyze and insert every non-blank value; return how many values were submitted."""

    if batch_size <= 0:
        raise ValueError("--batch-size must be a positive integer")

    load_dotenv(".env")
    database_url = require_database_url()

    raw_values = read_values(path, input_format=input_format)
    values = [v for v in raw_values if v.strip()]
    skipped = len(raw_values) - len(values)
    if skipped:
        logger.warning("skipping %d blank values", skipped)

    with connect_utc(database_url) as conn:
        with conn.transaction():
            with conn.cursor() as cur:
                for batch in _chunks(iter_record_rows(values), batch_size):
                    cur.executemany(build_insert(batch[0]).sql, batch)

    logger.info("submitted %d values from %s", len(values), path)
    return len(values)


def main() -> None:
    """CLI entry point for loading values into Postgres."""

    parser = argparse.ArgumentParser(description="Analyze and load text values into Postgres.")
    parser.add_argument("--path", required=True, help="Path to the input file.")
    parser.add_argument(
        "--format",
        dest="input_format",
        choices=("lines", "json"),
        default="lines",
        help="Input format: one value per line, or a JSON array of strings.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=1_000,
        help="Number of rows per insert batch.",
    )
    args = parser.parse_args()

    configure_logging()
    load_values(path=args.path, input_format=args.input_format, batch_size=args.batch_size)


if __name__ == "__main__":
    main()
