"""Shared helpers for the export parsers."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterator

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_PATTERN = r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}"

# Leading decimal number, the way broker exports write prices and units.
_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


def parse_timestamp(text: str, fmt: str = TIMESTAMP_FORMAT) -> datetime:
    """Parse an export timestamp as UTC."""
    return datetime.strptime(text.strip(), fmt).replace(tzinfo=timezone.utc)


def parse_number(text: str | None) -> float | None:
    """Parse the leading number of ``text``; ``None`` if there is none.

    ``"1.19018"`` -> 1.19018, ``"12 units"`` -> 12.0, ``"n/a"`` -> None.
    """
    if text is None:
        return None
    match = _NUMBER_RE.match(text)
    if match is None:
        return None
    return float(match.group(1))


def data_lines(content: str) -> Iterator[str]:
    """Yield non-empty, stripped lines after the header line."""
    lines = content.strip().split("\n")
    for line in lines[1:]:
        line = line.strip()
        if line:
            yield line
