"""Plotly figure generation for facet panels.

This module provides the FigureGenerator class for creating Plotly figure
dictionaries from facet samples, separating figure generation from the
NiceGUI controller. Bucketing always goes through ``histogram`` so the
figures show exactly what the engine computed.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

import plotly.graph_objects as go

from nicefacets.facet_engine.histogram import (
    bucket_edges,
    bucket_midpoints,
    bucketize,
    column_max_bucket,
    log_intensity,
    scaled_heights,
    summary,
)
from nicefacets.utils.logging import get_logger

logger = get_logger(__name__)

PIN_MARKER = "📌"

# Low -> high intensity, the blue/green/yellow/red ramp of the heat rows.
HEAT_COLORSCALE = [
    [0.0, "rgba(0, 0, 0, 0)"],
    [1e-9, "rgb(0, 95, 255)"],
    [0.25, "rgb(0, 215, 0)"],
    [0.5, "rgb(255, 215, 0)"],
    [0.75, "rgb(255, 135, 0)"],
    [1.0, "rgb(255, 0, 0)"],
]

ACTIVE_ROW_COLOR = "rgba(0, 200, 255, 0.9)"
BAR_COLOR = "rgba(99, 110, 250, 0.85)"


def facet_label(value: str, pinned: bool) -> str:
    return f"{PIN_MARKER} {value}" if pinned else value


class FigureGenerator:
    """Generates Plotly figure dictionaries for the facet views.

    Attributes:
        aggregate_bucket_count: Buckets per heat row in the all-facets view.
        panel_bucket_count: Buckets per panel in the single-column view.
        panel_bar_height: Height the tallest panel bar is scaled to.
    """

    def __init__(
        self,
        *,
        aggregate_bucket_count: int = 20,
        panel_bucket_count: int = 10,
        panel_bar_height: int = 10,
    ) -> None:
        self.aggregate_bucket_count = aggregate_bucket_count
        self.panel_bucket_count = panel_bucket_count
        self.panel_bar_height = panel_bar_height

    def make_aggregate_figure(
        self,
        facet_map: Mapping[str, Sequence[float]],
        keys: Sequence[str],
        value_range: tuple[float, float],
        *,
        active: str = "",
        pinned: frozenset[str] = frozenset(),
    ) -> dict:
        """Heat rows for one facet column of the all-facets view.

        Args:
            facet_map: Facet value -> samples for the whole column (used for
                the color normalization so scrolling does not change colors).
            keys: Ranked keys to draw, top to bottom.
            value_range: Global (min, max) of the displayed table.
            active: Active facet value, outlined when present.
            pinned: Pinned values, labelled with a pin marker.
        """
        vmin, vmax = value_range
        n = self.aggregate_bucket_count
        all_buckets = {k: bucketize(v, vmin, vmax, n) for k, v in facet_map.items()}
        max_count = column_max_bucket(all_buckets.values())

        z = []
        text = []
        labels = []
        for key in keys:
            buckets = all_buckets[key]
            z.append([log_intensity(c, max_count) for c in buckets.counts])
            text.append([str(c) for c in buckets.counts])
            s = summary(facet_map[key])
            labels.append(f"{facet_label(key, key in pinned)}  {s.label()}")

        edges = bucket_edges(vmin, vmax, n)
        fig = go.Figure(go.Heatmap(
            z=z,
            x=edges[:-1],
            y=labels,
            text=text,
            hovertemplate="%{y}<br>from %{x:.2f}: %{text}<extra></extra>",
            colorscale=HEAT_COLORSCALE,
            zmin=0.0,
            zmax=1.0,
            showscale=False,
            xgap=2,
            ygap=2,
        ))

        if active in keys:
            row = list(keys).index(active)
            fig.add_shape(
                type="rect",
                xref="paper", x0=0, x1=1,
                y0=row - 0.5, y1=row + 0.5,
                line=dict(color=ACTIVE_ROW_COLOR, width=3),
            )

        fig.update_layout(
            margin=dict(l=10, r=10, t=10, b=30),
            height=40 + 26 * max(1, len(keys)),
            yaxis=dict(autorange="reversed", automargin=True),
            xaxis=dict(tickvals=edges[::5] + [vmax], tickformat=".1f"),
            uirevision="keep",
        )
        return fig.to_dict()

    def make_panel_figure(
        self,
        samples: Sequence[float],
        value_range: tuple[float, float],
    ) -> dict:
        """Vertical histogram for one panel of the single-column view.

        A degenerate range (min == max) draws one full-height bar instead of
        a distribution.
        """
        vmin, vmax = value_range
        n = self.panel_bucket_count
        buckets = bucketize(samples, vmin, vmax, n)

        if buckets.is_degenerate:
            x = [f"{vmin:.2f}"]
            heights = [self.panel_bar_height]
            counts = [buckets.total]
        else:
            x = [f"{m:.1f}" for m in bucket_midpoints(vmin, vmax, n)]
            heights = scaled_heights(buckets.counts, self.panel_bar_height)
            counts = list(buckets.counts)

        fig = go.Figure(go.Bar(
            x=x,
            y=heights,
            customdata=counts,
            hovertemplate="%{x}: %{customdata}<extra></extra>",
            marker_color=BAR_COLOR,
        ))
        fig.update_layout(
            margin=dict(l=10, r=10, t=10, b=30),
            height=200,
            yaxis=dict(visible=False, range=[0, self.panel_bar_height]),
            xaxis=dict(type="category"),
            bargap=0.1,
            uirevision="keep",
        )
        return fig.to_dict()

    def make_string_figure(self, string_counts: Sequence[tuple[str, int]]) -> Optional[dict]:
        """Horizontal bars of non-numeric first-field counts, most frequent on top."""
        if not string_counts:
            logger.debug("no string values to plot")
            return None
        values = [v for v, _ in string_counts]
        counts = [c for _, c in string_counts]
        fig = go.Figure(go.Bar(
            x=counts,
            y=values,
            orientation="h",
            text=counts,
            textposition="auto",
            marker_color=BAR_COLOR,
        ))
        fig.update_layout(
            margin=dict(l=10, r=10, t=10, b=30),
            height=60 + 24 * len(values),
            yaxis=dict(autorange="reversed", automargin=True),
            xaxis_title="Count",
            uirevision="keep",
        )
        return fig.to_dict()
