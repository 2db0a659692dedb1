"""Tests for key bindings, action dispatch and a mocked-UI controller smoke run."""

from __future__ import annotations

import io
from unittest.mock import MagicMock

import pytest

import nicefacets.facet_engine.facet_view_controller as fvc_mod
from nicefacets.facet_engine.facet_state import FacetState
from nicefacets.facet_engine.facet_view_controller import (
    ACTIVE_PANEL_CLASSES,
    ACTIVE_PINNED_PANEL_CLASSES,
    PANEL_CLASSES,
    PINNED_PANEL_CLASSES,
    FacetViewController,
    action_for_key,
    dispatch_action,
    panel_classes,
)
from nicefacets.facet_engine.line_ingestor import LineIngestor


@pytest.fixture
def state(sample_lines) -> FacetState:
    state = FacetState()
    state.ingest_lines(sample_lines)
    state.render_snapshot()
    return state


def test_action_for_key():
    assert action_for_key("a") == "facet_prev"
    assert action_for_key("ArrowDown") == "down"
    assert action_for_key("Enter") == "pin"
    assert action_for_key("q") == "quit"
    assert action_for_key("x") is None
    assert action_for_key(None) is None


def test_panel_classes():
    assert panel_classes(False, False) == PANEL_CLASSES
    assert panel_classes(True, False) == ACTIVE_PANEL_CLASSES
    assert panel_classes(False, True) == PINNED_PANEL_CLASSES
    assert panel_classes(True, True) == ACTIVE_PINNED_PANEL_CLASSES


def test_dispatch_facet_actions(state):
    assert dispatch_action(state, "facet_next") is True
    assert state.nav.facet == 1
    assert dispatch_action(state, "all_facets") is True
    assert state.nav.facet == 0


def test_dispatch_moves_scroll_active_into_view(state):
    # aggregate keys: red, blue, san jose, seattle, portland
    for _ in range(3):
        assert dispatch_action(state, "down", visible_rows=2) is True
    assert state.nav.active == "seattle"
    assert state.nav.scroll_offset == 2


def test_dispatch_blocked_move_reports_no_change(state):
    assert dispatch_action(state, "up") is False
    assert dispatch_action(state, "left") is False


def test_dispatch_pin_and_stats(state):
    assert dispatch_action(state, "pin") is True
    assert state.is_pinned("red")
    assert dispatch_action(state, "stats") is True
    assert state.stats_mode is True


def test_dispatch_pin_without_selection():
    assert dispatch_action(FacetState(), "pin") is False


def test_dispatch_scroll(state):
    dispatch_action(state, "scroll_down")
    dispatch_action(state, "scroll_down")
    dispatch_action(state, "scroll_up")
    assert state.nav.scroll_offset == 1


def test_dispatch_unknown_action(state):
    assert dispatch_action(state, "teleport") is False


@pytest.fixture
def fake_ui(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    fake = MagicMock()
    monkeypatch.setattr(fvc_mod, "ui", fake, raising=True)
    return fake


@pytest.mark.requires_nicegui
def test_controller_drains_and_renders(sample_lines, fake_ui):
    ingestor = LineIngestor(io.StringIO("\n".join(sample_lines) + "\n"))
    ingestor.start()
    ingestor.join(timeout=5.0)
    state = FacetState()
    ctrl = FacetViewController(state, ingestor)
    ctrl.build()
    assert fake_ui.keyboard.called
    assert fake_ui.timer.called

    ctrl._on_tick()
    assert state.total_records == 4
    assert ingestor.closed
    assert fake_ui.plotly.called
    assert ctrl._header_label.text.startswith("Rate: ")


@pytest.mark.requires_nicegui
def test_controller_views_and_quit(state, fake_ui):
    quit_cb = MagicMock()
    ctrl = FacetViewController(state, None, on_quit=quit_cb)
    ctrl.build()

    ctrl.handle_action("facet_next")
    assert state.nav.facet == 1
    ctrl.handle_action("stats")
    ctrl.handle_action("pin")
    assert state.is_pinned("red")
    ctrl.handle_action("quit")
    quit_cb.assert_called_once()


@pytest.mark.requires_nicegui
def test_controller_key_events(state, fake_ui):
    ctrl = FacetViewController(state, None)
    ctrl.build()
    keyup = MagicMock()
    keyup.key.name = "d"
    keyup.action.keydown = False
    ctrl._on_keyboard_key(keyup)
    assert state.nav.facet == 0
    keydown = MagicMock()
    keydown.key.name = "d"
    keydown.action.keydown = True
    ctrl._on_keyboard_key(keydown)
    assert state.nav.facet == 1


@pytest.mark.requires_nicegui
def test_copy_summary(state, fake_ui, monkeypatch: pytest.MonkeyPatch):
    copied: list[str] = []
    monkeypatch.setattr(fvc_mod, "copy_to_clipboard", copied.append, raising=True)
    ctrl = FacetViewController(state, None)
    ctrl._copy_summary()
    assert len(copied) == 1
    assert copied[0].startswith("column\tvalue\tmean")
    assert "\tred\t" in copied[0]


@pytest.mark.requires_nicegui
def test_copy_summary_nothing_yet(fake_ui, monkeypatch: pytest.MonkeyPatch):
    copied: list[str] = []
    monkeypatch.setattr(fvc_mod, "copy_to_clipboard", copied.append, raising=True)
    FacetViewController(FacetState(), None)._copy_summary()
    assert copied == []
    fake_ui.notify.assert_called_once()
