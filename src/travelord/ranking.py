#!/usr/bin/env python3
"""
Ranking of candidate positions along a travel bearing.

Candidates are first filtered to those lying roughly in the direction of
travel, then ordered by a weighted blend of their normalized distance from
the start and their normalized deviation from the travel bearing. Lower
scores rank first.
"""

from typing import Callable, List, NamedTuple, Sequence
import logging
import math

from .config import BEARING_DIFF_THRESHOLD, BEARING_WEIGHT, DISTANCE_WEIGHT
from .geometry import Position
from .geometry_utils import (
    bearings_aligned,
    calculate_bearing,
    calculate_bearing_diff,
    haversine_distance,
)

logger = logging.getLogger(__name__)


class MinMaxValues(NamedTuple):
    """Observed ranges of distance and bearing difference over a candidate set."""

    min_distance: float  # km
    max_distance: float  # km
    min_bearing_diff: float  # degrees
    max_bearing_diff: float  # degrees


class ScoredPosition(NamedTuple):
    """A candidate position together with the quantities used to rank it."""

    position: Position
    distance: float  # km from start
    bearing_diff: float  # degrees off the travel bearing
    score: float


def normalize(min_value: float, max_value: float) -> Callable[[float], float]:
    """
    Build a linear min-max normalizer for the given range.

    The result is not clamped: values outside [min_value, max_value] map
    outside [0, 1]. A zero-width range maps every value to 0.

    Args:
        min_value: Value that maps to 0
        max_value: Value that maps to 1

    Returns:
        Function mapping a value to its normalized value
    """
    span = max_value - min_value
    if span == 0:
        return lambda value: 0.0
    return lambda value: (value - min_value) / span


def calculate_min_max_values(
    start: Position, end: Position, points: Sequence[Position]
) -> MinMaxValues:
    """
    Calculate the range of distance from start and bearing difference from the
    travel bearing across a set of points.

    Args:
        start: Start position
        end: End position
        points: Candidate positions

    Returns:
        MinMaxValues for the points. An empty sequence yields infinite
        sentinels (inf, -inf, inf, -inf).
    """
    min_distance = math.inf
    max_distance = -math.inf
    min_bearing_diff = math.inf
    max_bearing_diff = -math.inf

    travel_bearing = calculate_bearing(start, end)

    for point in points:
        bearing_diff = calculate_bearing_diff(
            calculate_bearing(start, point), travel_bearing
        )
        distance_from_start = haversine_distance(start, point)
        min_distance = min(min_distance, distance_from_start)
        max_distance = max(max_distance, distance_from_start)
        min_bearing_diff = min(min_bearing_diff, bearing_diff)
        max_bearing_diff = max(max_bearing_diff, bearing_diff)

    return MinMaxValues(min_distance, max_distance, min_bearing_diff, max_bearing_diff)


def filter_points(
    start: Position,
    end: Position,
    points: Sequence[Position],
    threshold: float = BEARING_DIFF_THRESHOLD,
    exclude_overshoot: bool = False,
) -> List[Position]:
    """
    Keep the points whose bearing from start lies within threshold degrees of
    the travel bearing.

    Args:
        start: Start position
        end: End position
        points: Candidate positions (not modified)
        threshold: Maximum allowed bearing difference in degrees (default: 45)
        exclude_overshoot: Also drop points farther from start than end is

    Returns:
        New list of the surviving points in their original order
    """
    travel_bearing = calculate_bearing(start, end)
    travel_distance = haversine_distance(start, end)

    filtered = []
    for point in points:
        if not bearings_aligned(
            calculate_bearing(start, point), travel_bearing, threshold
        ):
            continue
        if exclude_overshoot and haversine_distance(start, point) > travel_distance:
            continue
        filtered.append(point)

    logger.debug(
        f"Kept {len(filtered)}/{len(points)} points within {threshold}° of travel bearing {travel_bearing:.2f}°"
        + (f" and {travel_distance:.2f} km of start" if exclude_overshoot else "")
    )
    return filtered


def score_points(
    start: Position,
    end: Position,
    points: Sequence[Position],
    distance_weight: float = DISTANCE_WEIGHT,
    bearing_weight: float = BEARING_WEIGHT,
) -> List[ScoredPosition]:
    """
    Score points by weighted normalized distance and bearing difference and
    return them best first.

    Normalization uses the ranges observed over these same points. The sort
    is stable, so equal scores keep their input order.

    Args:
        start: Start position
        end: End position
        points: Candidate positions (not modified)
        distance_weight: Weight for distance from start (default: 0.6)
        bearing_weight: Weight for bearing difference (default: 0.4)

    Returns:
        List of ScoredPosition in ascending score order
    """
    if not points:
        return []

    min_max = calculate_min_max_values(start, end, points)
    logger.debug(f"Normalization ranges: {min_max}")

    travel_bearing = calculate_bearing(start, end)
    norm_distance = normalize(min_max.min_distance, min_max.max_distance)
    norm_bearing = normalize(min_max.min_bearing_diff, min_max.max_bearing_diff)

    scored = []
    for point in points:
        distance = haversine_distance(start, point)
        bearing_diff = calculate_bearing_diff(
            calculate_bearing(start, point), travel_bearing
        )
        score = distance_weight * norm_distance(
            distance
        ) + bearing_weight * norm_bearing(bearing_diff)
        scored.append(ScoredPosition(point, distance, bearing_diff, score))

    return sorted(scored, key=lambda s: s.score)


def sort_points(
    start: Position,
    end: Position,
    points: Sequence[Position],
    distance_weight: float = DISTANCE_WEIGHT,
    bearing_weight: float = BEARING_WEIGHT,
) -> List[Position]:
    """
    Sort points by their distance from start and bearing difference from the
    line formed by start and end.

    Args:
        start: Start position
        end: End position
        points: Candidate positions (not modified)
        distance_weight: Weight for distance from start (default: 0.6)
        bearing_weight: Weight for bearing difference (default: 0.4)

    Returns:
        New list of the points, best first
    """
    return [
        s.position
        for s in score_points(start, end, points, distance_weight, bearing_weight)
    ]


def rank_points_along_bearing(
    start: Position,
    end: Position,
    points: Sequence[Position],
    distance_weight: float = DISTANCE_WEIGHT,
    bearing_weight: float = BEARING_WEIGHT,
    threshold: float = BEARING_DIFF_THRESHOLD,
    exclude_overshoot: bool = False,
) -> List[Position]:
    """
    Filter points to those heading the way of travel, then sort them.

    Args:
        start: Start position
        end: End position
        points: Candidate positions (not modified)
        distance_weight: Weight for distance from start (default: 0.6)
        bearing_weight: Weight for bearing difference (default: 0.4)
        threshold: Maximum allowed bearing difference in degrees (default: 45)
        exclude_overshoot: Also drop points farther from start than end is

    Returns:
        New list of the surviving points, best first
    """
    return sort_points(
        start,
        end,
        filter_points(start, end, points, threshold, exclude_overshoot),
        distance_weight,
        bearing_weight,
    )
