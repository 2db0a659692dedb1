"""Record parsing for tab-separated facet streams.

A line is split on tabs. The first field is the observation and every later
field is a facet value; facet columns are 1-indexed (column 1 is the first
field after the observation). A first field that does not parse as a float
makes the whole line a category record instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Union

FIELD_SEP = "\t"


@dataclass(frozen=True)
class Observation:
    """A numeric record: one value plus its facet values in column order."""
    value: float
    facets: tuple[str, ...]

    def columns(self):
        """Yield (column, facet_value) pairs with 1-indexed columns."""
        for i, facet in enumerate(self.facets):
            yield i + 1, facet


@dataclass(frozen=True)
class Category:
    """A record whose first field is not a number; only its label is kept."""
    label: str


ParsedRecord = Union[Observation, Category]


def split_fields(line: str) -> list[str]:
    """Trim a raw line and split it into fields. Empty lines give []."""
    line = line.strip()
    if not line:
        return []
    return line.split(FIELD_SEP)


def parse_value(text: str) -> Optional[float]:
    """Parse the observation field, or None if it is not a finite number.

    'nan' and 'inf' spellings count as text: they cannot be placed on a
    histogram range.
    """
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_fields(fields: list[str]) -> ParsedRecord:
    """Classify already split, non-empty fields."""
    value = parse_value(fields[0])
    if value is None:
        return Category(label=fields[0])
    return Observation(value=value, facets=tuple(fields[1:]))


def parse_line(line: str) -> Optional[ParsedRecord]:
    """Parse one raw line.

    Args:
        line: Raw input line (trailing newline allowed).

    Returns:
        None for an empty line, a Category when the first field is not
        numeric, otherwise an Observation.
    """
    fields = split_fields(line)
    if not fields:
        return None
    return parse_fields(fields)
