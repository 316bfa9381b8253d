#!/usr/bin/env python3
"""
Reading and writing point files, parsing coordinates, and generating output
filenames.
"""

from collections import defaultdict, deque
from typing import Any, Deque, Dict, List, Sequence, TextIO, Tuple
import json
import logging
import math
import os

import gpxpy
import gpxpy.gpx

from .geometry import Position

logger = logging.getLogger(__name__)

PointRecord = Dict[str, Any]

# Input extensions dropped when deriving an output name from an input name
INPUT_EXTENSIONS = (".json", ".gpx")


def validate_position(latitude: float, longitude: float) -> Position:
    """
    Build a Position after checking its coordinates are finite and in range.

    Args:
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees

    Returns:
        Position for the coordinates

    Raises:
        ValueError: If either coordinate is not finite or out of range
    """
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValueError(f"Coordinates must be finite: {latitude},{longitude}")
    if not -90.0 <= latitude <= 90.0:
        raise ValueError(f"Latitude must be between -90 and 90: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise ValueError(f"Longitude must be between -180 and 180: {longitude}")
    return Position(latitude=latitude, longitude=longitude)


def parse_coordinate(text: str) -> Position:
    """
    Parse a "lat,lng" string into a Position.

    Raises:
        ValueError: If the string is not two comma-separated numbers in range
    """
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"Expected coordinate in the format lat,lng: {text!r}")
    try:
        latitude, longitude = (float(part.strip()) for part in parts)
    except ValueError:
        raise ValueError(f"Expected coordinate in the format lat,lng: {text!r}")
    return validate_position(latitude, longitude)


def record_to_position(record: Any, index: int) -> Position:
    """
    Convert a {"lat": .., "lng": ..} record into a Position.

    Args:
        record: Decoded JSON value
        index: Position of the record in the input, for error messages

    Raises:
        ValueError: If the record is not a mapping with numeric lat and lng
    """
    if not isinstance(record, dict):
        raise ValueError(f"Point {index} is not an object: {record!r}")
    try:
        latitude = record["lat"]
        longitude = record["lng"]
    except KeyError as e:
        raise ValueError(f"Point {index} is missing field {e}")
    for value in (latitude, longitude):
        # bool is an int subclass but never a coordinate
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Point {index} has non-numeric coordinate: {value!r}")
    try:
        return validate_position(float(latitude), float(longitude))
    except OverflowError:
        raise ValueError(f"Point {index} has a coordinate too large for a float")
    except ValueError as e:
        raise ValueError(f"Point {index}: {e}")


def points_from_json(file_input: TextIO) -> List[PointRecord]:
    """
    Parse JSON point data.

    Accepts either a list of {"lat", "lng"} records or an object whose
    "points" field holds such a list.

    Args:
        file_input: File-like object containing JSON data

    Returns:
        List of point records, each validated to carry lat and lng

    Raises:
        json.JSONDecodeError: If the data is not valid JSON
        ValueError: If the data does not have the expected shape
    """
    data = json.load(file_input)

    if isinstance(data, dict):
        if "points" not in data:
            raise ValueError('JSON object must contain a "points" field')
        data = data["points"]

    if not isinstance(data, list):
        raise ValueError("Points must be a JSON array")

    for i, record in enumerate(data):
        record_to_position(record, i)

    logger.debug(f"Parsed {len(data)} points from JSON")
    return data


def points_from_gpx(file_input: TextIO) -> List[PointRecord]:
    """
    Parse the waypoints of a GPX file into point records.

    Waypoint names, descriptions and elevations are kept as extra record
    fields.

    Args:
        file_input: File-like object containing GPX data

    Returns:
        List of point records

    Raises:
        gpxpy.gpx.GPXException: If GPX file is malformed.
        ValueError: If a waypoint has out-of-range coordinates
    """
    gpx_data = gpxpy.parse(file_input)

    records = []
    for i, waypoint in enumerate(gpx_data.waypoints):
        record: PointRecord = {"lat": waypoint.latitude, "lng": waypoint.longitude}
        if waypoint.name:
            record["name"] = waypoint.name
        if waypoint.description:
            record["description"] = waypoint.description
        if waypoint.elevation is not None:
            record["elevation"] = waypoint.elevation
        record_to_position(record, i)
        records.append(record)

    logger.debug(f"Parsed {len(records)} waypoints from GPX file")
    return records


def load_points(filename: str) -> Tuple[List[PointRecord], List[Position]]:
    """
    Load candidate points from a JSON or GPX file.

    Files ending in .gpx (case-insensitive) are read as GPX waypoints;
    anything else is read as JSON.

    Args:
        filename: Path to the input file

    Returns:
        Tuple of (records, positions) with one entry per point, in file order

    Raises:
        FileNotFoundError: If file doesn't exist.
        PermissionError: If file can't be read.
        json.JSONDecodeError: If a JSON file is malformed.
        gpxpy.gpx.GPXException: If a GPX file is malformed.
        ValueError: If the points are not in the expected shape
    """
    logger.debug(f"Reading points file: {filename}")
    with open(filename, "r", encoding="utf-8") as f:
        if filename.lower().endswith(".gpx"):
            records = points_from_gpx(f)
        else:
            records = points_from_json(f)

    positions = [record_to_position(record, i) for i, record in enumerate(records)]
    return records, positions


def restore_records(
    ranked: Sequence[Position],
    records: Sequence[PointRecord],
    positions: Sequence[Position],
) -> List[PointRecord]:
    """
    Map ranked positions back to the input records they came from.

    Records sharing identical coordinates are handed out in input order, so
    duplicates keep their relative order.

    Args:
        ranked: Ranked subset of positions
        records: Input records
        positions: Positions parsed from records, index-aligned with them

    Returns:
        Records in ranked order
    """
    by_position: Dict[Position, Deque[PointRecord]] = defaultdict(deque)
    for record, position in zip(records, positions):
        by_position[position].append(record)

    return [by_position[position].popleft() for position in ranked]


def dump_points_json(records: Sequence[PointRecord], wrap: bool, indent=None) -> str:
    """
    Serialize point records as JSON.

    Args:
        records: Records to serialize
        wrap: Wrap the list as {"points": [...]}
        indent: Indentation passed through to json.dumps

    Returns:
        JSON text
    """
    data: Any = list(records)
    if wrap:
        data = {"points": data}
    return json.dumps(data, indent=indent)


def points_to_gpx(records: Sequence[PointRecord]) -> str:
    """
    Serialize point records as GPX waypoints in the given order.

    Args:
        records: Records to serialize

    Returns:
        GPX XML text
    """
    gpx_data = gpxpy.gpx.GPX()
    for rank, record in enumerate(records, start=1):
        waypoint = gpxpy.gpx.GPXWaypoint(
            latitude=record["lat"],
            longitude=record["lng"],
            elevation=record.get("elevation"),
            name=record.get("name", f"#{rank}"),
            description=record.get("description"),
        )
        gpx_data.waypoints.append(waypoint)
    return gpx_data.to_xml()


def write_points(filename: str, records: Sequence[PointRecord], wrap: bool) -> None:
    """
    Write ranked point records to a file.

    Files ending in .gpx (case-insensitive) are written as GPX waypoints;
    anything else as indented JSON.

    Args:
        filename: Output path
        records: Records in ranked order
        wrap: Wrap JSON output as {"points": [...]}; ignored for GPX

    Raises:
        PermissionError: If the file can't be written.
        OSError: For other failures creating the file.
    """
    if filename.lower().endswith(".gpx"):
        content = points_to_gpx(records)
    else:
        content = dump_points_json(records, wrap, indent=2)

    with open(filename, "w", encoding="utf-8") as f:
        f.write(content)
    logger.debug(f"Wrote {len(records)} points to {filename}")


def generate_output_filename(input_filename: str) -> str:
    """
    Generates an output HTML map filename and reserves it by creating an empty file.

    Strategy:
    1. If input ends with .json or .gpx (case-insensitive), drop it
    2. Append " map.html"
    3. If file exists, try " (1).html", " (2).html", etc. (by attempting to create exclusively)
    4. Stop at 180 attempts
    5. Use exclusive open (`open(path, 'x')`) to avoid race conditions and reserve the name.

    Args:
        input_filename: Path to the input points file

    Returns:
        Safe output filename that has been created as an empty file to reserve its name

    Raises:
        RuntimeError: If no available filename found after 180 attempts
        ValueError: If a filename cannot be created (e.g., due to permissions or an invalid name detected by the OS)
    """
    input_dir = os.path.dirname(input_filename)
    input_base = os.path.basename(input_filename)

    base_name = input_base
    for extension in INPUT_EXTENSIONS:
        if input_base.lower().endswith(extension):
            base_name = input_base[: -len(extension)]
            break

    base_output = base_name + " map"

    candidates = [os.path.join(input_dir, base_output + ".html")] + [
        os.path.join(input_dir, f"{base_output} ({i}).html") for i in range(1, 181)
    ]

    for candidate in candidates:
        try:
            with open(candidate, "x"):
                pass  # File created successfully and is kept
            return candidate
        except FileExistsError:
            continue
        except OSError as e:
            logger.error(f"Cannot create file {candidate}: {e}")
            raise ValueError(f"Cannot create file: {e}")

    logger.error(
        f"Could not find an available filename after 180 attempts. "
        f"Please clean up your output directory or specify --map-output explicitly."
    )
    raise RuntimeError("No available filename found after 180 attempts")
