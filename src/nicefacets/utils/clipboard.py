"""Clipboard utility for the facet app.

Copy text to system clipboard. Supports native (pywebview) and browser modes.
"""

from __future__ import annotations

import json

import pyperclip
from nicegui import app, ui

from nicefacets.utils.logging import get_logger

logger = get_logger(__name__)


def is_native_window() -> bool:
    """True when running as a native (pywebview) window."""
    native_cfg = getattr(app, "native", None)
    return getattr(native_cfg, "main_window", None) is not None


def copy_to_clipboard(text: str) -> None:
    """
    Copy text to system clipboard.

    Behavior:
    - native=True (pywebview desktop window): pyperclip writes the OS clipboard.
    - browser (native=False): navigator.clipboard via JavaScript.

    Raises:
        RuntimeError: If pyperclip finds no clipboard mechanism in native mode.
    """
    if is_native_window():
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise RuntimeError(f"no clipboard available: {e}") from e
        logger.debug("copied %s chars via pyperclip (native)", len(text))
    else:
        # json.dumps gives a safely quoted JS string literal.
        ui.run_javascript(f"navigator.clipboard.writeText({json.dumps(text)});")
        logger.debug("copied %s chars via browser navigator.clipboard", len(text))
