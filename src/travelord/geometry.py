"""
Position value type and bounding-box helpers.

This module provides the immutable geographic position used throughout the
ranking pipeline, and a helper for computing (optionally buffered) bounding
boxes around a set of positions for map display.
"""

from typing import Iterable, NamedTuple, Tuple
from math import cos, radians
import logging

logger = logging.getLogger(__name__)


class Position(NamedTuple):
    """Represents a geographic position with latitude and longitude."""

    latitude: float
    longitude: float


def calculate_bbox(
    positions: Iterable[Position], buffer: float = 0.0
) -> Tuple[float, float, float, float]:
    """
    Calculate the bounding box of a set of positions, optionally with a buffer.

    Args:
        positions: Positions to enclose
        buffer: Buffer distance in meters (default: 0.0)

    Returns:
        Tuple of (south, west, north, east) in decimal degrees

    Raises:
        ValueError: If positions is empty
    """
    positions = list(positions)
    if not positions:
        raise ValueError("Cannot calculate bounding box of no positions")

    latitudes = [pos.latitude for pos in positions]
    longitudes = [pos.longitude for pos in positions]

    min_lat, max_lat = min(latitudes), max(latitudes)
    min_lon, max_lon = min(longitudes), max(longitudes)

    if buffer == 0.0:
        return (min_lat, min_lon, max_lat, max_lon)

    # Convert buffer from m to approximate degrees
    # 1 degree latitude ≈ 111 km = 111000m
    # longitude varies by latitude, use average of the base bbox
    avg_lat = (min_lat + max_lat) / 2
    lat_buffer = buffer / 111000.0
    lon_scale = abs(cos(radians(avg_lat)))
    lon_buffer = buffer / (111000.0 * lon_scale) if lon_scale > 1e-9 else 180.0

    # Apply buffer (ensure we don't exceed valid coordinate ranges)
    south = max(-90.0, min_lat - lat_buffer)
    north = min(90.0, max_lat + lat_buffer)
    west = max(-180.0, min_lon - lon_buffer)
    east = min(180.0, max_lon + lon_buffer)

    logger.debug(
        f"Buffered bounding box: ({south:.4f}, {west:.4f}, {north:.4f}, {east:.4f}) with {buffer}m buffer"
    )
    return (south, west, north, east)
