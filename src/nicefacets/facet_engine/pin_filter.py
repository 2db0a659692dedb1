"""Pin conventions and the record filter predicate.

A pin is a facet value bound to the column it was captured under. A record
passes the filter when, for every pin whose column exists in the record, the
record's field at that column equals the pinned value. Pins on columns the
record does not have do not veto it.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence


class PinSet:
    """Pinned facet values and the column each one was captured under.

    Keyed by value: a value is pinned at most once, and its column binding
    never changes while it stays pinned.
    """

    def __init__(self) -> None:
        self._columns: dict[str, int] = {}

    def __contains__(self, value: object) -> bool:
        return value in self._columns

    def __len__(self) -> int:
        return len(self._columns)

    def __bool__(self) -> bool:
        return bool(self._columns)

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(self.items())

    def add(self, value: str, column: int) -> None:
        if column < 1:
            raise ValueError(f"pin column must be >= 1, got {column}")
        self._columns.setdefault(value, column)

    def remove(self, value: str) -> None:
        self._columns.pop(value, None)

    def clear(self) -> None:
        self._columns = {}

    def column_of(self, value: str) -> Optional[int]:
        return self._columns.get(value)

    def items(self) -> list[tuple[str, int]]:
        """(value, column) pairs sorted by column, then value."""
        return sorted(self._columns.items(), key=lambda kv: (kv[1], kv[0]))


def matches_pins(fields: Sequence[str], pins: PinSet) -> bool:
    """True if a record's fields satisfy every applicable pin.

    Args:
        fields: All fields of the record, observation first (index 0), so a
            pin on facet column N is compared against ``fields[N]``.
        pins: Active pins.
    """
    for value, column in pins.items():
        if column < len(fields) and fields[column] != value:
            return False
    return True


def format_pins_display(pins: Iterable[tuple[str, int]]) -> str:
    """Short label for the header: ``col:value`` pairs, or '' with no pins.

    Accepts a PinSet or its sorted (value, column) pairs.
    """
    return ", ".join(f"{column}:{value}" for value, column in pins)
