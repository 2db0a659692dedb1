"""Streaming facet aggregation engine.

Import-light: nothing here pulls in NiceGUI. The view controller and figure
generator live in their own modules and are imported explicitly.
"""

from nicefacets.facet_engine.facet_state import FacetState, RenderSnapshot
from nicefacets.facet_engine.facet_table import FacetTable
from nicefacets.facet_engine.histogram import Buckets, SampleSummary, bucketize, global_range, summary
from nicefacets.facet_engine.line_ingestor import LineIngestor
from nicefacets.facet_engine.navigation import NavigationState
from nicefacets.facet_engine.pin_filter import PinSet, matches_pins
from nicefacets.facet_engine.ranking import ranked_keys
from nicefacets.facet_engine.record_parser import Category, Observation, parse_line

__all__ = [
    "Buckets",
    "Category",
    "FacetState",
    "FacetTable",
    "LineIngestor",
    "NavigationState",
    "Observation",
    "PinSet",
    "RenderSnapshot",
    "SampleSummary",
    "bucketize",
    "global_range",
    "matches_pins",
    "parse_line",
    "ranked_keys",
    "summary",
]
