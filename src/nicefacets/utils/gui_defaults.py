"""Set up default classes and props for NiceGUI widgets used by the facet app.

This module configures default styling for the elements the facet view
builds: labels, buttons, cards and rows.
"""

from __future__ import annotations

from nicegui import ui

from nicefacets.utils.logging import get_logger

logger = get_logger(__name__)

# tailwind -> quasar size
QUASAR_SIZES = {
    "text-xs": "xs",
    "text-sm": "sm",
    "text-base": "md",
    "text-lg": "lg",
}


def setUpGuiDefaults(text_size: str = 'text-sm'):
    """Set up default classes and props for all ui elements.

    Args:
        text_size: Tailwind CSS text size class (e.g., 'text-xs', 'text-sm',
                   'text-base', 'text-lg'). Defaults to 'text-sm'.
    """
    text_size_quasar = QUASAR_SIZES[text_size]

    logger.debug(f'using classes text_size:"{text_size}" text_size_quasar:{text_size_quasar}')

    ui.label.default_classes(f"{text_size} select-text")  #  select-text allows double-click selection
    #
    ui.button.default_classes(text_size)
    ui.button.default_props(f"dense size={text_size_quasar}")
    #
    ui.card.default_classes(text_size)
    ui.card.default_props("flat bordered")
    #
    ui.row.default_classes(text_size)
