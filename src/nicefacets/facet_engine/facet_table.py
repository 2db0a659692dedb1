"""Facet aggregation tables.

FacetTable maps facet column (1-indexed) -> facet value -> samples in arrival
order. The state object keeps two of them: ``full`` (every record) and
``filtered`` (only records passing the active pins).
"""

from __future__ import annotations

from typing import Iterator, Optional

from nicefacets.facet_engine.record_parser import Observation, ParsedRecord


class FacetTable:
    """Column -> facet value -> samples.

    Plain dicts underneath; nothing here depends on dict ordering. Callers
    that present data use ``columns()`` (sorted) and ``ranking.ranked_keys``.
    """

    def __init__(self) -> None:
        self._data: dict[int, dict[str, list[float]]] = {}

    def apply(self, record: Optional[ParsedRecord]) -> None:
        """Append an observation's value under each of its (column, value) pairs.

        Category records and None are ignored.
        """
        if not isinstance(record, Observation):
            return
        for column, facet in record.columns():
            self._data.setdefault(column, {}).setdefault(facet, []).append(record.value)

    def clear(self) -> None:
        self._data = {}

    def is_empty(self) -> bool:
        return not self._data

    def columns(self) -> list[int]:
        """Facet column indices in ascending order."""
        return sorted(self._data)

    def max_column(self) -> int:
        """Highest facet column index, or 0 when empty."""
        return max(self._data, default=0)

    def facet_map(self, column: int) -> dict[str, list[float]]:
        """Facet value -> samples for one column ({} if the column is absent)."""
        return self._data.get(column, {})

    def column_of(self, value: str) -> Optional[int]:
        """Lowest column index that contains ``value``, or None."""
        for column in self.columns():
            if value in self._data[column]:
                return column
        return None

    def iter_samples(self) -> Iterator[float]:
        """Every sample of every facet, column by column."""
        for column in self.columns():
            for samples in self._data[column].values():
                yield from samples

    def snapshot(self) -> dict[int, dict[str, list[float]]]:
        """Deep copy as plain dicts (for comparison and export)."""
        return {
            column: {facet: list(samples) for facet, samples in facets.items()}
            for column, facets in self._data.items()
        }

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, column: object) -> bool:
        return column in self._data

    def __repr__(self) -> str:
        n_values = sum(len(f) for f in self._data.values())
        return f"FacetTable(columns={self.columns()}, values={n_values})"
