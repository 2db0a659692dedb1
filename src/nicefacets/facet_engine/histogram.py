"""Histogram and summary statistics over facet samples.

All facets of a view are bucketed against one global range so their
histograms line up. When the range collapses (min == max) there is no
distribution to draw and ``bucketize`` returns a degenerate result that the
renderer shows as a fixed-height indicator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np

from nicefacets.facet_engine.facet_table import FacetTable


@dataclass(frozen=True)
class SampleSummary:
    """Mean, population standard deviation and count of a sample set."""
    mean: float
    std: float
    count: int

    def label(self) -> str:
        return f"μ={self.mean:.2f} σ={self.std:.2f} n={self.count}"


@dataclass(frozen=True)
class Buckets:
    """Binned counts over [vmin, vmax].

    Attributes:
        counts: One count per bucket (length = bucket count).
        vmin: Lower edge of the first bucket.
        vmax: Upper edge of the last bucket.
        is_degenerate: True when vmin == vmax; all mass sits in bucket 0 and
            the histogram should be drawn as a single fixed-height bar.
    """
    counts: tuple[int, ...]
    vmin: float
    vmax: float
    is_degenerate: bool = False

    @property
    def total(self) -> int:
        return int(sum(self.counts))

    @property
    def max_count(self) -> int:
        return max(self.counts, default=0)


def global_range(table: FacetTable) -> Optional[tuple[float, float]]:
    """(min, max) over every sample in the table, or None when it holds none."""
    values = np.fromiter(table.iter_samples(), dtype=float)
    if values.size == 0:
        return None
    return float(values.min()), float(values.max())


def bucket_indices(samples: Sequence[float], vmin: float, vmax: float, bucket_count: int) -> np.ndarray:
    """Bucket index of each sample; the max lands in the last bucket.

    Samples outside [vmin, vmax] are clamped into the first or last bucket.
    """
    if bucket_count < 1:
        raise ValueError(f"bucket_count must be >= 1, got {bucket_count}")
    values = np.asarray(samples, dtype=float)
    if vmax == vmin:
        return np.zeros(values.shape, dtype=int)
    width = (vmax - vmin) / bucket_count
    idx = np.floor((values - vmin) / width).astype(int)
    return np.clip(idx, 0, bucket_count - 1)


def bucketize(samples: Sequence[float], vmin: float, vmax: float, bucket_count: int) -> Buckets:
    """Count samples into ``bucket_count`` equal-width buckets over [vmin, vmax].

    Args:
        samples: Observations of one facet value.
        vmin: Global minimum of the displayed table.
        vmax: Global maximum of the displayed table.
        bucket_count: Number of buckets (>= 1).

    Returns:
        Buckets whose counts sum to ``len(samples)``.
    """
    idx = bucket_indices(samples, vmin, vmax, bucket_count)
    counts = np.bincount(idx, minlength=bucket_count) if idx.size else np.zeros(bucket_count, dtype=int)
    return Buckets(
        counts=tuple(int(c) for c in counts),
        vmin=float(vmin),
        vmax=float(vmax),
        is_degenerate=vmin == vmax,
    )


def bucket_edges(vmin: float, vmax: float, bucket_count: int) -> list[float]:
    """Lower edge of every bucket plus the upper edge of the last one."""
    return [float(e) for e in np.linspace(vmin, vmax, bucket_count + 1)]


def bucket_midpoints(vmin: float, vmax: float, bucket_count: int) -> list[float]:
    width = (vmax - vmin) / bucket_count
    return [vmin + (i + 0.5) * width for i in range(bucket_count)]


def scaled_heights(counts: Sequence[int], bar_height: int) -> list[int]:
    """Scale counts to bar heights in [0, bar_height]; non-zero counts get at least 1."""
    max_count = max(counts, default=0)
    if max_count == 0:
        return [0] * len(counts)
    return [max(1, int(c / max_count * bar_height)) if c > 0 else 0 for c in counts]


def log_intensity(count: int, max_count: int) -> float:
    """log1p-scaled intensity in [0, 1] for heat cells; 0 for empty buckets."""
    if count <= 0 or max_count <= 0:
        return 0.0
    return float(np.log1p(count) / np.log1p(max_count))


def column_max_bucket(facet_buckets: Iterable[Buckets]) -> int:
    """Largest single bucket count across one column's facets."""
    return max((b.max_count for b in facet_buckets), default=0)


def summary(samples: Sequence[float]) -> SampleSummary:
    """Mean, population std (divide by N) and count.

    Raises:
        ValueError: If ``samples`` is empty; callers guard against it.
    """
    if len(samples) == 0:
        raise ValueError("summary() needs at least one sample")
    values = np.asarray(samples, dtype=float)
    return SampleSummary(
        mean=float(np.mean(values)),
        std=float(np.std(values, ddof=0)),
        count=int(values.size),
    )
