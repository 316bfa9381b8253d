#!/usr/bin/env python3
"""
Spherical distance and bearing calculations.
"""

import math
import logging

from .geometry import Position

logger = logging.getLogger(__name__)

# Mean Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def deg2rad(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * (math.pi / 180)


def rad2deg(radians: float) -> float:
    """Convert radians to degrees."""
    return radians * (180 / math.pi)


def haversine_distance(pos1: Position, pos2: Position) -> float:
    """
    Calculate the great-circle distance between two positions.

    Args:
        pos1: First position
        pos2: Second position

    Returns:
        Distance in kilometers
    """
    dlat = deg2rad(pos2.latitude - pos1.latitude)
    dlon = deg2rad(pos2.longitude - pos1.longitude)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(deg2rad(pos1.latitude))
        * math.cos(deg2rad(pos2.latitude))
        * math.sin(dlon / 2) ** 2
    )
    # Rounding can push a just past 1 for near-antipodal points
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def calculate_bearing(pos1: Position, pos2: Position) -> float:
    """
    Calculate the initial bearing from pos1 to pos2.

    Args:
        pos1: Starting position
        pos2: Ending position

    Returns:
        Bearing in degrees (0-360), clockwise from north. Identical
        positions give 0.
    """
    lat1 = deg2rad(pos1.latitude)
    lat2 = deg2rad(pos2.latitude)
    dlon = deg2rad(pos2.longitude - pos1.longitude)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(
        dlon
    )

    bearing = rad2deg(math.atan2(y, x))
    return (bearing + 360) % 360


def calculate_bearing_diff(bearing1: float, bearing2: float) -> float:
    """
    Calculate the smallest angular difference between two bearings.

    Args:
        bearing1: First bearing in degrees
        bearing2: Second bearing in degrees

    Returns:
        Difference in degrees, in the range [0, 180]. Bearings outside
        [0, 360) are compared modulo 360.
    """
    diff = abs(bearing1 - bearing2) % 360
    return 360 - diff if diff > 180 else diff


def bearings_aligned(bearing1: float, bearing2: float, tolerance: float) -> bool:
    """
    Check if two bearings point the same way within a tolerance.

    Args:
        bearing1: First bearing in degrees
        bearing2: Second bearing in degrees
        tolerance: Allowed deviation in degrees

    Returns:
        True if the bearings differ by at most tolerance degrees
    """
    return calculate_bearing_diff(bearing1, bearing2) <= tolerance
