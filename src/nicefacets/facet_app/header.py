"""Header component for the facet app.

Provides build_facet_header() with title, theme toggle and a quit button.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from nicegui import app, ui

THEME_STORAGE_KEY = "nicefacets_dark_mode"


def build_facet_header(
    *,
    title: str = "Facets",
    on_quit: Optional[Callable[[], Any]] = None,
) -> ui.dark_mode:
    """Build header with title, theme toggle and quit button.

    Args:
        title: Label shown on the left.
        on_quit: Quit callback; the button is omitted when None.

    Returns:
        Dark mode controller for the page.
    """
    dark_mode = ui.dark_mode()
    dark_mode.value = app.storage.user.get(THEME_STORAGE_KEY, True)

    def _update_theme_icon() -> None:
        icon = "light_mode" if dark_mode.value else "dark_mode"
        theme_btn.props(f"icon={icon}")

    def _toggle_theme() -> None:
        dark_mode.value = not dark_mode.value
        app.storage.user[THEME_STORAGE_KEY] = dark_mode.value
        _update_theme_icon()

    with ui.header().classes("items-center justify-between").props("dense").style(
        "min-height: 36px; height: 36px; padding: 0 8px;"
    ):
        with ui.row().classes("items-center gap-2"):
            ui.label(title).classes("!text-lg font-bold italic text-white")

        with ui.row().classes("items-center gap-2"):
            theme_btn = ui.button(
                icon="light_mode" if dark_mode.value else "dark_mode",
                on_click=_toggle_theme,
            ).props("flat round dense text-color=white").tooltip("Toggle dark / light mode")
            _update_theme_icon()
            if on_quit is not None:
                ui.button(icon="power_settings_new", on_click=on_quit).props(
                    "flat round dense text-color=white"
                ).tooltip("Quit")

    return dark_mode
