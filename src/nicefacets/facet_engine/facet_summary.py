"""Tabular summaries of facet tables.

Builds pandas DataFrames (one row per facet value) for the copy-to-clipboard
report and for inspection in notebooks. Rows follow the same deterministic
ordering as the panels: column ascending, then ranked order.
"""

from __future__ import annotations

from typing import Mapping, Optional

import pandas as pd

from nicefacets.facet_engine.facet_table import FacetTable
from nicefacets.facet_engine.histogram import summary
from nicefacets.facet_engine.ranking import ranked_keys, ranked_string_counts

SUMMARY_COLUMNS = ["column", "value", "mean", "std", "count", "min", "max"]


def summary_frame(table: FacetTable, column: Optional[int] = None) -> pd.DataFrame:
    """Per-facet-value statistics.

    Args:
        table: Facet table to summarize.
        column: Only this facet column; None for every column.

    Returns:
        DataFrame with SUMMARY_COLUMNS. std is the population std.
    """
    columns = table.columns() if column is None else [column]
    rows = []
    for col in columns:
        facet_map = table.facet_map(col)
        for value in ranked_keys(facet_map):
            samples = facet_map[value]
            s = summary(samples)
            rows.append({
                "column": col,
                "value": value,
                "mean": s.mean,
                "std": s.std,
                "count": s.count,
                "min": min(samples),
                "max": max(samples),
            })
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def string_counts_frame(counts: Mapping[str, int]) -> pd.DataFrame:
    """Non-numeric first fields by descending count, then value."""
    return pd.DataFrame(ranked_string_counts(counts), columns=["value", "count"])


def frame_to_tsv(df: pd.DataFrame, float_format: str = "%.4f") -> str:
    """Tab-separated text with a header row and no index."""
    return df.to_csv(path_or_buf=None, sep="\t", index=False, float_format=float_format).rstrip("\n")
