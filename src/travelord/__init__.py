#!/usr/bin/env python3
"""
Travelord - rank points of interest along the way between two locations.

This package filters candidate points to those lying roughly in the direction
of travel and orders them by a weighted blend of distance from the start and
deviation from the travel bearing.
"""
import importlib.metadata

__version__ = importlib.metadata.version("travelord")

# Import main classes for public API
from .config import TravelordConfig
from .geometry import Position
from .geometry_utils import (
    bearings_aligned,
    calculate_bearing,
    calculate_bearing_diff,
    deg2rad,
    haversine_distance,
    rad2deg,
)
from .ranking import (
    MinMaxValues,
    ScoredPosition,
    calculate_min_max_values,
    filter_points,
    normalize,
    rank_points_along_bearing,
    score_points,
    sort_points,
)

__all__ = [
    "TravelordConfig",
    "Position",
    "MinMaxValues",
    "ScoredPosition",
    "deg2rad",
    "rad2deg",
    "haversine_distance",
    "calculate_bearing",
    "calculate_bearing_diff",
    "bearings_aligned",
    "normalize",
    "calculate_min_max_values",
    "filter_points",
    "score_points",
    "sort_points",
    "rank_points_along_bearing",
]
