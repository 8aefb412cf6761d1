"""Data models used across pyquerystate."""

from pyquerystate.models.location import HistoryEntry, Location
from pyquerystate.models.value import QueryValue, ValueShape, shape_of

__all__ = [
    "HistoryEntry",
    "Location",
    "QueryValue",
    "ValueShape",
    "shape_of",
]
