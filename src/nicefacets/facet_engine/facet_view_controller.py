"""NiceGUI controller for the live facet view.

Provides FacetViewController, which wires a FacetState and a LineIngestor
into a NiceGUI page: a periodic ui.timer drains the ingestor and feeds the
state, ui.keyboard maps keys onto the abstract commands, and the content
area is rebuilt from a RenderSnapshot with Plotly figures.

Everything runs on NiceGUI's event loop, so the state is only ever touched
from one thread.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from nicegui import ui

from nicefacets.facet_engine.facet_config import FacetViewConfigData
from nicefacets.facet_engine.facet_state import FacetState, RenderSnapshot
from nicefacets.facet_engine.facet_summary import frame_to_tsv, string_counts_frame, summary_frame
from nicefacets.facet_engine.figure_generator import FigureGenerator, facet_label
from nicefacets.facet_engine.histogram import summary
from nicefacets.facet_engine.line_ingestor import LineIngestor
from nicefacets.facet_engine.navigation import grid_columns_for_width
from nicefacets.facet_engine.ranking import ranked_keys
from nicefacets.utils.clipboard import copy_to_clipboard
from nicefacets.utils.logging import get_logger

logger = get_logger(__name__)

# NiceGUI key name -> action
KEY_ACTIONS: dict[str, str] = {
    "a": "facet_prev",
    "d": "facet_next",
    "0": "all_facets",
    "ArrowLeft": "left",
    "ArrowRight": "right",
    "ArrowUp": "up",
    "ArrowDown": "down",
    "Enter": "pin",
    "j": "scroll_down",
    "k": "scroll_up",
    "s": "stats",
    "q": "quit",
}

INSTRUCTIONS = (
    "a/d: Change Facet | ←→↑↓: Navigate | Enter: Pin | 0: All Facets | "
    "j/k: Scroll | s: Stats | q: Quit"
)

_MOVES = {
    "left": (-1, 0),
    "right": (1, 0),
    "up": (0, -1),
    "down": (0, 1),
}

PANEL_CLASSES = "p-2 border-2 border-gray-300"
ACTIVE_PANEL_CLASSES = "p-2 border-4 border-cyan-500 bg-slate-800 text-white"
PINNED_PANEL_CLASSES = "p-2 border-4 border-double border-pink-500"
ACTIVE_PINNED_PANEL_CLASSES = "p-2 border-4 border-pink-500 bg-slate-800 text-white"


def action_for_key(key_name: Optional[str]) -> Optional[str]:
    """Action bound to a key name, or None."""
    if not key_name:
        return None
    return KEY_ACTIONS.get(key_name)


def dispatch_action(state: FacetState, action: str, *, visible_rows: int = 12) -> bool:
    """Apply a non-quit action to the state.

    Returns:
        True if the view needs to be rebuilt.
    """
    if action == "facet_prev":
        state.switch_facet_column(-1)
    elif action == "facet_next":
        state.switch_facet_column(1)
    elif action == "all_facets":
        state.reset_to_all_facets()
    elif action in _MOVES:
        dx, dy = _MOVES[action]
        if not state.move_selection(dx, dy):
            return False
        state.nav.ensure_active_visible(visible_rows)
    elif action == "pin":
        if not state.toggle_active_pin():
            return False
    elif action == "scroll_down":
        state.scroll_content(1)
    elif action == "scroll_up":
        state.scroll_content(-1)
    elif action == "stats":
        state.toggle_stats_mode()
    else:
        logger.warning("unknown action %r", action)
        return False
    return True


def panel_classes(active: bool, pinned: bool) -> str:
    """Tailwind classes for a single-column panel."""
    if active and pinned:
        return ACTIVE_PINNED_PANEL_CLASSES
    if active:
        return ACTIVE_PANEL_CLASSES
    if pinned:
        return PINNED_PANEL_CLASSES
    return PANEL_CLASSES


class FacetViewController:
    """Controller for the live facet view with NiceGUI.

    **Public API:**

    - **__init__(state, ingestor, ...)**: Configure with the session state, the started ingestor and view config.
    - **build(container=None)**: Build the page (header, instructions, content) and start the drain timer.
    - **handle_action(action)**: Run one abstract command (also used by the keyboard binding).
    - **refresh()**: Rebuild the content area from a fresh RenderSnapshot.
    """

    def __init__(
        self,
        state: FacetState,
        ingestor: Optional[LineIngestor],
        *,
        config: Optional[FacetViewConfigData] = None,
        on_quit: Optional[Callable[[], Any]] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            state: Session state to render and mutate.
            ingestor: Started LineIngestor to drain, or None for a static state.
            config: View config; defaults are used when None.
            on_quit: Called for the quit action (e.g. ``app.shutdown``).
        """
        self.state = state
        self.ingestor = ingestor
        self.config = config or FacetViewConfigData()
        self._on_quit = on_quit

        self.figure_generator = FigureGenerator(
            aggregate_bucket_count=self.config.aggregate_bucket_count,
            panel_bucket_count=self.config.panel_bucket_count,
            panel_bar_height=self.config.panel_bar_height,
        )

        # UI handles
        self._header_label: Optional[ui.label] = None
        self._status_label: Optional[ui.label] = None
        self._content: Optional[ui.column] = None
        self._drain_timer: Optional[ui.timer] = None
        self._dirty = True

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------
    def build(self, container: Optional[ui.element] = None) -> None:
        """Build the page into ``container`` (or the current slot)."""

        def _build_content() -> None:
            with ui.row().classes("w-full items-center gap-3 flex-wrap bg-blue-800 text-white p-2"):
                self._header_label = ui.label("").classes("font-bold")
                ui.space()
                ui.button("Copy summary", on_click=self._copy_summary).props("flat color=white")
            ui.label(INSTRUCTIONS).classes("text-gray-500")
            self._status_label = ui.label("").classes("text-gray-500")
            self._content = ui.column().classes("w-full gap-2")

        if container is None:
            _build_content()
        else:
            with container:
                _build_content()

        ui.keyboard(on_key=self._on_keyboard_key)
        self._drain_timer = ui.timer(self.config.drain_interval_s, self._on_tick)
        ui.timer(2.0, self._refresh_viewport)
        self.refresh()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def _on_tick(self) -> None:
        """Drain queued lines into the state, then update the view."""
        if self.ingestor is not None:
            lines = self.ingestor.drain()
            if lines:
                self.state.ingest_lines(lines)
                self._dirty = True
        if self._dirty:
            self.refresh()
        else:
            self._update_header(self.state.render_snapshot())

    def _on_keyboard_key(self, e) -> None:
        action_obj = getattr(e, "action", None)
        if action_obj is not None and not getattr(action_obj, "keydown", False):
            return
        key_name = getattr(getattr(e, "key", None), "name", None) if e else None
        action = action_for_key(key_name)
        if action is not None:
            self.handle_action(action)

    def handle_action(self, action: str) -> None:
        """Run one command and rebuild the view if it changed anything."""
        if action == "quit":
            logger.info("quit requested")
            if self._on_quit is not None:
                self._on_quit()
            return
        try:
            changed = dispatch_action(self.state, action, visible_rows=self.config.visible_rows)
        except Exception as e:
            logger.exception("action %r failed", action)
            ui.notify(f"{action} failed: {e}", type="negative")
            return
        if changed:
            self.refresh()

    async def _refresh_viewport(self) -> None:
        """Re-derive the panel grid width from the browser window width."""
        try:
            width = await ui.run_javascript("window.innerWidth", timeout=1.0)
        except TimeoutError:
            logger.debug("viewport width request timed out")
            return
        columns = grid_columns_for_width(int(width or 0), self.config.panel_width_px)
        if columns != self.state.nav.grid_columns:
            logger.debug("grid columns %s -> %s (width=%s)", self.state.nav.grid_columns, columns, width)
            self.state.set_grid_columns(columns)
            self.refresh()

    def _copy_summary(self) -> None:
        snap = self.state.render_snapshot()
        if snap.string_mode:
            df = string_counts_frame(self.state.string_counts)
        else:
            column = snap.nav.facet if snap.nav.facet > 0 else None
            df = summary_frame(snap.table, column)
        if df.empty:
            ui.notify("Nothing to copy yet", type="warning")
            return
        try:
            copy_to_clipboard(frame_to_tsv(df))
        except RuntimeError as e:
            logger.exception("copy to clipboard failed")
            ui.notify(f"Copy failed: {e}", type="negative")
            return
        ui.notify(f"Copied {len(df)} rows", type="positive")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def refresh(self) -> None:
        """Rebuild header and content from a fresh snapshot."""
        self._dirty = False
        snap = self.state.render_snapshot()
        self._update_header(snap)
        if self._content is None:
            return
        self._content.clear()
        with self._content:
            if snap.string_mode:
                self._render_strings(snap)
            elif snap.value_range is None:
                ui.label("No data yet.")
            elif snap.nav.facet != 0:
                self._render_single_facet(snap)
            else:
                self._render_all_facets(snap)

    def _update_header(self, snap: RenderSnapshot) -> None:
        if self._header_label is not None:
            self._header_label.text = snap.header_text()
        if self._status_label is not None:
            done = self.ingestor is not None and self.ingestor.closed
            mode = "stats" if snap.stats_mode else "histogram"
            self._status_label.text = f"View: {mode}" + (" | input finished" if done else "")

    def _render_strings(self, snap: RenderSnapshot) -> None:
        fig = self.figure_generator.make_string_figure(snap.string_counts)
        if fig is None:
            ui.label("No string values found.")
            return
        ui.plotly(fig).classes("w-full")

    def _render_all_facets(self, snap: RenderSnapshot) -> None:
        """Heat rows for every column, limited to the visible row window."""
        nav = snap.nav
        table = snap.table
        keys_by_column = [(col, ranked_keys(table.facet_map(col))) for col in table.columns()]
        total_rows = sum(len(keys) for _, keys in keys_by_column)
        nav.clamp_scroll(total_rows, self.config.visible_rows)
        start = nav.scroll_offset
        stop = start + self.config.visible_rows

        pinned = frozenset(value for value, _ in snap.pins)
        row = 0
        for column, keys in keys_by_column:
            first, last = max(start - row, 0), min(stop - row, len(keys))
            row += len(keys)
            if first >= last:
                continue
            ui.label(f"Facet {column}:").classes("font-bold")
            fig = self.figure_generator.make_aggregate_figure(
                table.facet_map(column),
                keys[first:last],
                snap.value_range,
                active=nav.active,
                pinned=pinned,
            )
            ui.plotly(fig).classes("w-full")

    def _render_single_facet(self, snap: RenderSnapshot) -> None:
        """Grid of panels for the selected column."""
        nav = snap.nav
        facet_map = snap.table.facet_map(nav.facet)
        if not facet_map:
            ui.label("Facet not available yet.")
            return
        keys = nav.view_keys(snap.table)
        columns = max(1, nav.grid_columns)
        nav.clamp_scroll(nav.row_count(len(keys)), self.config.visible_rows)
        start = nav.scroll_offset * columns
        stop = (nav.scroll_offset + self.config.visible_rows) * columns

        visible = keys[start:stop]
        for offset in range(0, len(visible), columns):
            with ui.row().classes("w-full gap-2 no-wrap"):
                for key in visible[offset:offset + columns]:
                    self._render_panel(snap, key, facet_map[key])

    def _render_panel(self, snap: RenderSnapshot, key: str, samples: list[float]) -> None:
        pinned = self.state.is_pinned(key)
        active = key == snap.nav.active
        with ui.card().classes(panel_classes(active, pinned)).style(f"width: {self.config.panel_width_px}px"):
            ui.label(facet_label(key, pinned)).classes("font-bold break-all")
            if snap.stats_mode:
                s = summary(samples)
                ui.label(f"Mean: {s.mean:.2f}")
                ui.label(f"Std Dev: {s.std:.2f}")
                ui.label(f"Count: {s.count}")
            else:
                fig = self.figure_generator.make_panel_figure(samples, snap.value_range)
                ui.plotly(fig).classes("w-full")

