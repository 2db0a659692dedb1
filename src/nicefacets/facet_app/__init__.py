"""Standalone NiceGUI app serving the live facet view."""
