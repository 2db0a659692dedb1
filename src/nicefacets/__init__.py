"""
nicefacets: live faceted histograms for tab-separated streams, rendered with NiceGUI.

This package provides:
- facet_engine: streaming facet aggregation, pin filtering, ranking,
  navigation addressing and histogram bucketization
- facet_app: the NiceGUI application that reads stdin and renders the panels
- Logging utilities for library and application use

For logging configuration in scripts:
    ```python
    from nicefacets.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from nicefacets.utils.logging import configure_logging, get_logger

# Ensure nicefacets logger has NullHandler so logs don't propagate to root
# when no application has configured logging. The facet app calls
# configure_logging() to replace this with a real handler.
_logger = logging.getLogger("nicefacets")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
