"""Deterministic ordering of facet values.

Grouping dicts have no user-visible order, so everything shown or addressed
goes through ``ranked_keys``: descending mean of the samples, ties broken by
ascending key. Rankings are recomputed on every call since new samples can
move a group's mean at any time.
"""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np

from nicefacets.facet_engine.facet_table import FacetTable


def sample_mean(samples: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if len(samples) == 0:
        return 0.0
    return float(np.mean(samples))


def ranked_keys(facet_map: Mapping[str, Sequence[float]]) -> list[str]:
    """Facet values sorted by descending mean, then ascending key."""
    means = {key: sample_mean(samples) for key, samples in facet_map.items()}
    return sorted(means, key=lambda k: (-means[k], k))


def aggregate_rows(table: FacetTable) -> list[tuple[int, str]]:
    """(column, value) per row of the aggregate view, in display order.

    A value present in several columns appears once per column.
    """
    rows: list[tuple[int, str]] = []
    for column in table.columns():
        rows.extend((column, key) for key in ranked_keys(table.facet_map(column)))
    return rows


def aggregate_keys(table: FacetTable) -> list[str]:
    """All columns' ranked keys concatenated in ascending column order."""
    return [key for _, key in aggregate_rows(table)]


def ranked_string_counts(counts: Mapping[str, int]) -> list[tuple[str, int]]:
    """(value, count) pairs by descending count, then ascending value."""
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
