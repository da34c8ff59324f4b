"""Functional Core - Pure functions with no side effects.

This module contains all pipeline logic as pure functions:
- Event payload parsing
- Severity classification
- Filtering by location and magnitude band
- Render plan construction
- Alert and source-selection bookkeeping

All functions here are deterministic and have no I/O.
"""

from quakemap.core.event import EventRecord, EventCollection, parse_event_collection
from quakemap.core.severity import MagnitudeBand, SeverityTier, classify_magnitude
from quakemap.core.filters import FilterCriteria, apply_filter, make_criteria
from quakemap.core.render_plan import MarkerDescriptor, RenderPlan, build_render_plan
from quakemap.core.source import DataSourceMode, DataSourceSelector, Session

__all__ = [
    # Events
    "EventRecord",
    "EventCollection",
    "parse_event_collection",
    # Severity
    "MagnitudeBand",
    "SeverityTier",
    "classify_magnitude",
    # Filters
    "FilterCriteria",
    "apply_filter",
    "make_criteria",
    # Render plan
    "MarkerDescriptor",
    "RenderPlan",
    "build_render_plan",
    # Source selection
    "DataSourceMode",
    "DataSourceSelector",
    "Session",
]
