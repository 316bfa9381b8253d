#!/usr/bin/env python3
"""
Travel-order ranking tool
This script reads a file of candidate points and ranks the ones lying along
the way from a start to an end coordinate, best first.

Requirements:
    pip install gpxpy folium

"""

from typing import List, Optional
import webbrowser
import argparse
import json
import logging
import math
import sys
import os
from gpxpy import gpx

from . import __version__
from . import visualization
from .config import (
    BEARING_DIFF_THRESHOLD,
    DEFAULT_PROFILE,
    WEIGHT_PROFILES,
    TravelordConfig,
)
from .file_utils import (
    dump_points_json,
    generate_output_filename,
    load_points,
    parse_coordinate,
    restore_records,
    write_points,
)
from .geometry import Position
from .metrics import collect_metrics, log_metrics
from .ranking import ScoredPosition, filter_points, score_points

# Configure logging
logger = logging.getLogger("travelord")


def non_negative_float(value: str) -> float:
    """argparse type for the bearing threshold."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if not number >= 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {value!r}")
    return number


def weight(value: str) -> float:
    """argparse type for distance and bearing weights."""
    number = non_negative_float(value)
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"must be finite: {value!r}")
    return number


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="travelord",
        description="CLI tool to rank points along a bearing line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-i",
        "--input",
        type=str,
        required=True,
        help="Input JSON or GPX file containing points data",
    )
    parser.add_argument(
        "-s",
        "--start",
        type=str,
        required=True,
        help="Start coordinate in the format lat,lng (use --start=LAT,LNG for a negative latitude)",
    )
    parser.add_argument(
        "-e",
        "--end",
        type=str,
        required=True,
        help="End coordinate in the format lat,lng (use --end=LAT,LNG for a negative latitude)",
    )
    parser.add_argument(
        "-dw",
        "--distance-weight",
        type=weight,
        default=None,
        help="Weight for distance calculation (default: from --profile)",
    )
    parser.add_argument(
        "-bw",
        "--bearing-weight",
        type=weight,
        default=None,
        help="Weight for bearing difference calculation (default: from --profile)",
    )
    parser.add_argument(
        "-t",
        "--threshold",
        type=non_negative_float,
        default=BEARING_DIFF_THRESHOLD,
        help=f"Bearing difference threshold in degrees (default: {BEARING_DIFF_THRESHOLD:g})",
    )
    parser.add_argument(
        "--profile",
        type=str,
        default=DEFAULT_PROFILE,
        choices=sorted(WEIGHT_PROFILES),
        help=", ".join(
            f"{name}: distance {dw:g} / bearing {bw:g}"
            for name, (dw, bw) in sorted(WEIGHT_PROFILES.items())
        )
        + f" (default: {DEFAULT_PROFILE})",
    )
    parser.add_argument(
        "--exclude-overshoot",
        action="store_true",
        help="Also exclude points farther from the start than the end is",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file to store the sorted data (.gpx for GPX, otherwise JSON)",
    )
    parser.add_argument(
        "--wrap-points",
        action="store_true",
        help='Wrap JSON output in an object with a "points" field',
    )
    parser.add_argument(
        "--map",
        action="store_true",
        help="Create an interactive HTML map of the ranking",
    )
    parser.add_argument(
        "--map-output",
        type=str,
        default=None,
        help="HTML map file (default: auto-generated based on input filename)",
    )
    parser.add_argument(
        "--no-open",
        action="store_true",
        help="Don't automatically open the HTML map in browser",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Output structured metrics after processing",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"travelord {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> TravelordConfig:
    """
    Resolve parsed arguments into a configuration.

    Explicit weights override the ones from the selected profile.
    """
    profile_distance_weight, profile_bearing_weight = WEIGHT_PROFILES[args.profile]
    return TravelordConfig(
        distance_weight=(
            profile_distance_weight
            if args.distance_weight is None
            else args.distance_weight
        ),
        bearing_weight=(
            profile_bearing_weight
            if args.bearing_weight is None
            else args.bearing_weight
        ),
        threshold=args.threshold,
        exclude_overshoot=args.exclude_overshoot,
        wrap_points=args.wrap_points,
        log_level=args.log_level,
        metrics=args.metrics,
    )


def determine_map_filename(input_filename: str, map_output: Optional[str]) -> str:
    """
    Determine the map filename to use.

    Args:
        input_filename: Path to the input points file
        map_output: Value from --map-output argument (None if not specified)

    Returns:
        Map filename to use

    Raises:
        RuntimeError: If auto-generation fails
        ValueError: If constructed filename would be illegal
    """
    if map_output is not None:
        return map_output

    try:
        return generate_output_filename(input_filename)
    except (RuntimeError, ValueError) as e:
        logger.error(f"Failed to generate map filename: {e}")
        raise


def open_file_in_browser(filename: str) -> None:
    """
    Open the specified file in the default browser.

    Args:
        filename: Path to the file to open
    """
    abs_path = os.path.abspath(filename)
    try:
        webbrowser.open(f"file://{abs_path}")
        logger.debug(f"Opening {abs_path} in your default browser...")
    except webbrowser.Error as e:
        logger.warning(f"Could not automatically open browser: {e}")
        logger.warning(f"Please manually open {abs_path}")


def setup_logging(args: argparse.Namespace) -> None:
    """Setup logging configuration."""
    level = getattr(logging, args.log_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    # Console handler writes to stderr, leaving stdout for ranked output
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)


def rank(
    start: Position,
    end: Position,
    positions: List[Position],
    config: TravelordConfig,
) -> List[ScoredPosition]:
    """
    Run the filter and scoring stages with the configured parameters.

    Args:
        start: Start position
        end: End position
        positions: Candidate positions
        config: Ranking configuration

    Returns:
        Ranked points, best first
    """
    filtered = filter_points(
        start, end, positions, config.threshold, config.exclude_overshoot
    )
    return score_points(
        start, end, filtered, config.distance_weight, config.bearing_weight
    )


def main(argv: Optional[List[str]] = None):
    """
    Parses command-line arguments, loads the candidate points, ranks them
    along the start-end bearing and writes the result.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(args)
    config = config_from_args(args)

    try:
        start = parse_coordinate(args.start)
        end = parse_coordinate(args.end)
    except ValueError as e:
        logger.error(f"Invalid coordinate: {e}")
        sys.exit(1)

    try:
        records, positions = load_points(args.input)
    except FileNotFoundError:
        logger.error(f"Input file not found: {args.input}")
        sys.exit(1)
    except PermissionError:
        logger.error(f"Cannot read input file (permission denied): {args.input}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON file: {e}")
        sys.exit(1)
    except gpx.GPXException as e:
        logger.error(f"Invalid GPX file: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid points data: {e}")
        sys.exit(1)
    logger.info(f"Loaded {len(positions)} points from {args.input}")

    logger.info(
        f"Ranking with distance weight {config.distance_weight}, "
        f"bearing weight {config.bearing_weight}, threshold {config.threshold}°"
    )
    scored = rank(start, end, positions, config)
    ranked_records = restore_records(
        [s.position for s in scored], records, positions
    )
    logger.info(f"Ranked {len(scored)} of {len(positions)} points")

    if args.output:
        output_file = os.path.abspath(args.output)
        try:
            write_points(output_file, ranked_records, config.wrap_points)
        except OSError as e:
            logger.error(f"Cannot write output file {output_file}: {e}")
            sys.exit(1)
        print(f"data written to {output_file}")
        print(f"length was {len(positions)}, now is {len(ranked_records)}")
    else:
        print(dump_points_json(ranked_records, config.wrap_points))

    metrics = collect_metrics(len(positions), scored)

    if args.map:
        try:
            map_filename = determine_map_filename(args.input, args.map_output)
            visualization.create_ranking_map(
                start, end, scored, map_filename, metrics, config, ranked_records
            )
        except (RuntimeError, ValueError, OSError) as e:
            logger.error(f"Failed to create map: {e}")
            sys.exit(1)
        logger.info(f"Map written to {map_filename}")
        if not args.no_open:
            open_file_in_browser(map_filename)

    log_metrics(metrics, config)


if __name__ == "__main__":
    main()
