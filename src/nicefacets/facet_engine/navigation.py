"""Navigation addressing over ranked facet values.

Two view modes share one selection:

- aggregate view (``facet == 0``): every column's ranked keys concatenated
  into a vertical list; up/down move by one and clamp at the ends,
  left/right do nothing.
- single-column view (``facet > 0``): the column's ranked keys laid out
  row-major in a grid of ``grid_columns`` columns; a move that would leave
  the grid rectangle is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Container, Optional, Sequence

from nicefacets.facet_engine.facet_table import FacetTable
from nicefacets.facet_engine.ranking import aggregate_keys, aggregate_rows, ranked_keys
from nicefacets.utils.logging import get_logger

logger = get_logger(__name__)

GridPos = tuple[int, int]  # (row, col)


def grid_columns_for_width(display_width: int, panel_width: int) -> int:
    """How many panels fit side by side (at least 1)."""
    if panel_width <= 0:
        raise ValueError(f"panel_width must be positive, got {panel_width}")
    return max(1, int(display_width) // int(panel_width))


def move_in_list(keys: Sequence[str], index: int, dy: int) -> int:
    """Vertical move in a list, clamped to [0, len(keys) - 1]."""
    if dy > 0:
        return min(index + 1, len(keys) - 1)
    if dy < 0:
        return max(index - 1, 0)
    return index


def move_in_grid(n_keys: int, index: int, dx: int, dy: int, columns: int) -> Optional[int]:
    """Row-major grid move; None when the target leaves the grid.

    Args:
        n_keys: Number of cells that hold a key.
        index: Current linear index.
        dx: Column delta.
        dy: Row delta.
        columns: Grid width (>= 1).
    """
    columns = max(1, columns)
    row, col = divmod(index, columns)
    target_row = row + dy
    target_col = col + dx
    if target_row < 0 or target_col < 0:
        return None
    # A column past the right edge is rejected rather than wrapped.
    if target_col >= columns:
        return None
    target = target_row * columns + target_col
    if 0 <= target < n_keys:
        return target
    return None


@dataclass
class NavigationState:
    """Current view mode, active facet value and its address.

    Attributes:
        facet: 0 for the aggregate view, else the 1-indexed facet column shown.
        active: Selected facet value ('' when nothing is selected).
        active_pos: Last known (row, col) of ``active``.
        positions: value -> (row, col) memo from the most recent render pass.
        grid_columns: Panels per row in the single-column view.
        scroll_offset: First visible row.
    """
    facet: int = 0
    active: str = ""
    active_pos: GridPos = (0, 0)
    positions: dict[str, GridPos] = field(default_factory=dict)
    grid_columns: int = 1
    scroll_offset: int = 0

    # ------------------------------------------------------------------
    # Keys of the current view
    # ------------------------------------------------------------------
    def view_keys(self, table: FacetTable) -> list[str]:
        """Ranked keys addressed by the current view mode."""
        if self.facet == 0:
            return aggregate_keys(table)
        return ranked_keys(table.facet_map(self.facet))

    def resolves(self, table: FacetTable) -> bool:
        """True if ``active`` is a key of the current view."""
        return bool(self.active) and self.active in self.view_keys(table)

    # ------------------------------------------------------------------
    # Structural changes
    # ------------------------------------------------------------------
    def reset_active(self, table: FacetTable, keep: Container[str] = ()) -> None:
        """Keep ``active`` if it still resolves, else select the first ranked key.

        Args:
            table: Source of the current view.
            keep: Values that stay selected even when they no longer resolve
                (pinned values, so the pin can still be toggled off).
        """
        keys = self.view_keys(table)
        if self.active and self.active in keys:
            self.active_pos = self.address_of(self._index_in(keys))
            return
        if self.active and self.active in keep:
            logger.debug("keeping unresolved active %r", self.active)
            return
        if keys:
            self._set_active(keys[0], keys)
        else:
            self.active = ""
            self.active_pos = (0, 0)
        logger.debug("active reset to %r (facet=%s)", self.active, self.facet)

    def set_facet(self, facet: int, table: FacetTable) -> None:
        """Switch view mode and re-resolve the selection."""
        self.facet = facet
        self.scroll_offset = 0
        self.reset_active(table)

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------
    def move(self, table: FacetTable, dx: int, dy: int) -> bool:
        """Move the selection; returns True when ``active`` changed.

        An unknown or empty ``active`` selects the first key instead of moving.
        Out-of-bounds moves leave the state unchanged.
        """
        keys = self.view_keys(table)
        if not keys:
            return False
        if self.active not in keys:
            self._set_active(keys[0], keys)
            return True

        index = self._index_in(keys)
        if self.facet == 0:
            if dx != 0 or dy == 0:
                return False
            target = move_in_list(keys, index, dy)
        else:
            target = move_in_grid(len(keys), index, dx, dy, self.grid_columns)
            if target is None:
                return False

        if target == index:
            return False
        self.active = keys[target]
        self.active_pos = self.address_of(target)
        return True

    # ------------------------------------------------------------------
    # Render pass
    # ------------------------------------------------------------------
    def record_positions(self, table: FacetTable) -> list[str]:
        """Recompute the address memo for the current view.

        Also selects the first key when nothing is selected yet, so a fresh
        stream starts with a highlighted facet. Returns the view's keys.
        """
        keys = self.view_keys(table)
        self.positions = {}
        for i, key in enumerate(keys):
            # setdefault: a value in several columns keeps its first address.
            self.positions.setdefault(key, self.address_of(i))
        if not self.active and keys:
            self.active = keys[0]
        if self.active in self.positions:
            self.active_pos = self.address_of(self._index_in(keys))
        return keys

    def address_of(self, index: int) -> GridPos:
        """(row, col) of a linear index in the current view."""
        if self.facet == 0:
            return (index, 0)
        return divmod(index, max(1, self.grid_columns))

    def active_column(self, table: FacetTable) -> Optional[int]:
        """Facet column of the selected row, or None if ``active`` is not on one."""
        if not self.active:
            return None
        if self.facet > 0:
            return self.facet
        rows = aggregate_rows(table)
        row = self.active_pos[0]
        if 0 <= row < len(rows) and rows[row][1] == self.active:
            return rows[row][0]
        return None

    def row_count(self, n_keys: int) -> int:
        """Rows needed to show ``n_keys`` in the current view."""
        if self.facet == 0:
            return n_keys
        columns = max(1, self.grid_columns)
        return (n_keys + columns - 1) // columns

    # ------------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------------
    def scroll(self, delta: int) -> None:
        self.scroll_offset = max(0, self.scroll_offset + delta)

    def clamp_scroll(self, total_rows: int, visible_rows: int) -> None:
        """Keep the scroll offset inside the content."""
        max_scroll = max(0, total_rows - max(1, visible_rows))
        self.scroll_offset = min(max(0, self.scroll_offset), max_scroll)

    def ensure_active_visible(self, visible_rows: int) -> None:
        """Scroll so the active row lies inside the visible window."""
        if not self.active:
            return
        visible_rows = max(1, visible_rows)
        row = self.active_pos[0]
        if row < self.scroll_offset:
            self.scroll_offset = row
        elif row >= self.scroll_offset + visible_rows:
            self.scroll_offset = row - visible_rows + 1

    def _index_in(self, keys: list[str]) -> int:
        """Linear index of ``active`` in ``keys``.

        In the aggregate view a value can occur once per column; the
        occurrence at the current row wins over the first one.
        """
        row, col = self.active_pos
        index = row * max(1, self.grid_columns) + col if self.facet else row
        if 0 <= index < len(keys) and keys[index] == self.active:
            return index
        return keys.index(self.active)

    def _set_active(self, key: str, keys: list[str]) -> None:
        self.active = key
        self.active_pos = self.address_of(keys.index(key))
