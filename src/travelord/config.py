from dataclasses import dataclass
from typing import Dict, Tuple

DISTANCE_WEIGHT = 0.6  # Weight for distance from start
BEARING_WEIGHT = 0.4  # Weight for bearing difference
BEARING_DIFF_THRESHOLD = 45.0  # Degrees

# Named (distance_weight, bearing_weight) pairs selectable from the CLI
WEIGHT_PROFILES: Dict[str, Tuple[float, float]] = {
    "balanced": (DISTANCE_WEIGHT, BEARING_WEIGHT),
    "proximity": (0.8, 0.2),
}
DEFAULT_PROFILE = "balanced"


@dataclass
class TravelordConfig:
    """Configuration for the travelord CLI."""

    distance_weight: float = DISTANCE_WEIGHT
    bearing_weight: float = BEARING_WEIGHT
    threshold: float = BEARING_DIFF_THRESHOLD
    exclude_overshoot: bool = False
    wrap_points: bool = False
    log_level: str = "WARNING"
    metrics: bool = False
    map_buffer: float = 1000.0
