"""Application state for a facet stream session.

FacetState is created once at startup and handed to the view controller. It
owns the raw history, both facet tables, the string counts, the pins and the
navigation state, and exposes the user commands as plain methods. Only the
event-loop consumer calls into it, so there is no locking.
"""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from nicefacets.facet_engine.facet_table import FacetTable
from nicefacets.facet_engine.histogram import global_range
from nicefacets.facet_engine.navigation import NavigationState
from nicefacets.facet_engine.pin_filter import PinSet, format_pins_display, matches_pins
from nicefacets.facet_engine.ranking import ranked_string_counts
from nicefacets.facet_engine.record_parser import (
    Category,
    Observation,
    ParsedRecord,
    parse_fields,
    split_fields,
)
from nicefacets.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything the renderer needs for one pass.

    Attributes:
        table: Displayed source (``filtered`` while pins are active, else ``full``).
        nav: Navigation state (shared, not copied).
        string_counts: Non-numeric first fields by descending count. When
            non-empty the whole view is in string-frequency mode.
        value_range: Global (min, max) of ``table``, None when there is no data.
        total_records: Accepted (non-empty) lines so far.
        elapsed_s: Seconds since the session started.
        rate: Records per second.
        pins: (value, column) pairs, sorted.
        is_filtered: True while at least one pin is active.
        stats_mode: Panels show mean/std/count instead of histograms.
    """
    table: FacetTable
    nav: NavigationState
    string_counts: list[tuple[str, int]]
    value_range: Optional[tuple[float, float]]
    total_records: int
    elapsed_s: float
    rate: float
    pins: list[tuple[str, int]]
    is_filtered: bool
    stats_mode: bool

    @property
    def string_mode(self) -> bool:
        return bool(self.string_counts)

    def header_text(self) -> str:
        """One-line status: rate, total, pins and the active facet."""
        text = f"Rate: {self.rate:.2f} records/sec | Total: {self.total_records}"
        if self.is_filtered and self.pins:
            text += " | Pins: " + format_pins_display(self.pins)
        if self.nav.active:
            text += f" | Active: {self.nav.active}"
        return text


class FacetState:
    """Aggregates, pins and navigation for one streaming session.

    Args:
        facet: Initial view (0 = all facets, N = facet column N).
        stats_mode: Start with summary panels instead of histograms.
        clock: Monotonic clock used for elapsed time (injectable for tests).
    """

    def __init__(
        self,
        *,
        facet: int = 0,
        stats_mode: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.full = FacetTable()
        self.filtered = FacetTable()
        self.history: list[str] = []
        self.pins = PinSet()
        self.string_counts: Counter[str] = Counter()
        self.total_records = 0
        self.nav = NavigationState(facet=max(0, facet))
        self.stats_mode = stats_mode
        self._clock = clock
        self.start_time = clock()

    # ------------------------------------------------------------------
    # Data source
    # ------------------------------------------------------------------
    @property
    def is_filtered(self) -> bool:
        return bool(self.pins)

    @property
    def source(self) -> FacetTable:
        """Table currently displayed and navigated."""
        return self.filtered if self.is_filtered else self.full

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------
    def ingest_line(self, line: str) -> Optional[ParsedRecord]:
        """Store, classify and aggregate one raw line.

        Empty lines are ignored. Every other line is appended to the history
        first and counted exactly once, whether numeric or not.
        """
        fields = split_fields(line)
        if not fields:
            return None
        self.history.append(line)
        self.total_records += 1

        record = parse_fields(fields)
        if isinstance(record, Category):
            self.string_counts[record.label] += 1
            return record

        self.full.apply(record)
        if self.pins and matches_pins(fields, self.pins):
            self.filtered.apply(record)
        return record

    def ingest_lines(self, lines: Iterable[str]) -> int:
        """ingest_line() for each line; returns how many were accepted."""
        accepted = 0
        for line in lines:
            if self.ingest_line(line) is not None:
                accepted += 1
        return accepted

    # ------------------------------------------------------------------
    # Pins
    # ------------------------------------------------------------------
    def rebuild_filtered(self) -> None:
        """Recompute ``filtered`` from the whole history under the current pins."""
        t0 = time.perf_counter()
        self.filtered.clear()
        if not self.pins:
            return
        kept = 0
        for line in self.history:
            fields = split_fields(line)
            if not fields or not matches_pins(fields, self.pins):
                continue
            record = parse_fields(fields)
            if isinstance(record, Observation):
                self.filtered.apply(record)
                kept += 1
        logger.info(
            "rebuilt filtered table: pins=[%s] kept=%s/%s in %.3fs",
            format_pins_display(self.pins),
            kept,
            len(self.history),
            time.perf_counter() - t0,
        )

    def pin_column_for(self, value: str) -> Optional[int]:
        """Column a new pin on ``value`` binds to.

        The single-column view's index when one is shown. In the aggregate
        view, the column of the selected row when ``value`` is the selection,
        else the lowest column of ``full`` that contains the value.
        """
        if self.nav.facet > 0:
            return self.nav.facet
        if value == self.nav.active:
            column = self.nav.active_column(self.source)
            if column is not None:
                return column
        return self.full.column_of(value)

    def toggle_pin(self, value: str) -> bool:
        """Pin or unpin a facet value, then rebuild the filtered view.

        Returns:
            True if the pin set changed.
        """
        if not value:
            return False
        if value in self.pins:
            self.pins.remove(value)
            logger.info("unpinned %r", value)
        else:
            column = self.pin_column_for(value)
            if column is None:
                logger.debug("cannot pin %r: not present in any facet column", value)
                return False
            self.pins.add(value, column)
            logger.info("pinned %r under column %s", value, column)

        if self.pins:
            self.rebuild_filtered()
        else:
            self.filtered.clear()
        # A pinned selection stays put even if the rebuilt view lost it.
        self.nav.reset_active(self.source, keep=self.pins)
        return True

    def is_pinned(self, value: str) -> bool:
        return value in self.pins

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def switch_facet_column(self, delta: int) -> None:
        """Step the shown column by ``delta``, clamped to [0, max column]."""
        max_column = self.source.max_column()
        target = min(max(self.nav.facet + delta, 0), max_column)
        if target == self.nav.facet:
            return
        self.nav.set_facet(target, self.source)
        logger.debug("facet column -> %s", target)

    def reset_to_all_facets(self) -> None:
        self.nav.set_facet(0, self.source)

    def move_selection(self, dx: int, dy: int) -> bool:
        return self.nav.move(self.source, dx, dy)

    def toggle_active_pin(self) -> bool:
        return self.toggle_pin(self.nav.active)

    def scroll_content(self, delta: int) -> None:
        self.nav.scroll(delta)

    def toggle_stats_mode(self) -> None:
        self.stats_mode = not self.stats_mode

    def set_grid_columns(self, columns: int) -> None:
        self.nav.grid_columns = max(1, int(columns))

    # ------------------------------------------------------------------
    # Rendering boundary
    # ------------------------------------------------------------------
    @property
    def elapsed_s(self) -> float:
        return max(0.0, self._clock() - self.start_time)

    @property
    def rate(self) -> float:
        elapsed = self.elapsed_s
        return self.total_records / elapsed if elapsed > 0 else 0.0

    def render_snapshot(self) -> RenderSnapshot:
        """Refresh the navigation memo and collect what the renderer shows."""
        table = self.source
        self.nav.record_positions(table)
        elapsed = self.elapsed_s
        return RenderSnapshot(
            table=table,
            nav=self.nav,
            string_counts=ranked_string_counts(self.string_counts),
            value_range=global_range(table),
            total_records=self.total_records,
            elapsed_s=elapsed,
            rate=self.total_records / elapsed if elapsed > 0 else 0.0,
            pins=self.pins.items(),
            is_filtered=self.is_filtered,
            stats_mode=self.stats_mode,
        )
