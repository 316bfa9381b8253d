"""
Module for collecting and logging metrics related to a ranking run.
"""

import logging
from typing import NamedTuple, Optional, Sequence

from .config import TravelordConfig
from .ranking import MinMaxValues, ScoredPosition

logger = logging.getLogger(__name__)


class RankingMetrics(NamedTuple):
    """Container for ranking metrics data."""

    total_points: int
    ranked_points: int
    filtered_points: int
    min_max: Optional[MinMaxValues]
    best_score: Optional[float]
    worst_score: Optional[float]


def collect_metrics(
    total_points: int, scored: Sequence[ScoredPosition]
) -> RankingMetrics:
    """
    Collect metrics from a finished ranking.

    Args:
        total_points: Number of candidate points before filtering
        scored: Ranked points, best first

    Returns:
        RankingMetrics describing the run
    """
    if not scored:
        return RankingMetrics(
            total_points=total_points,
            ranked_points=0,
            filtered_points=total_points,
            min_max=None,
            best_score=None,
            worst_score=None,
        )

    distances = [s.distance for s in scored]
    bearing_diffs = [s.bearing_diff for s in scored]

    return RankingMetrics(
        total_points=total_points,
        ranked_points=len(scored),
        filtered_points=total_points - len(scored),
        min_max=MinMaxValues(
            min_distance=min(distances),
            max_distance=max(distances),
            min_bearing_diff=min(bearing_diffs),
            max_bearing_diff=max(bearing_diffs),
        ),
        best_score=scored[0].score,
        worst_score=scored[-1].score,
    )


def log_metrics(metrics: RankingMetrics, config: TravelordConfig) -> None:
    """
    Log detailed metrics after ranking.

    Args:
        metrics: RankingMetrics containing collected metrics
        config: Configuration object containing settings like the metrics flag
    """
    if not config.metrics:
        return

    logger.debug("=== TRAVELORD_METRICS ===")
    logger.debug(f"total_points={metrics.total_points}")
    logger.debug(f"ranked_points={metrics.ranked_points}")
    logger.debug(f"filtered_points={metrics.filtered_points}")
    logger.debug(f"distance_weight={config.distance_weight}")
    logger.debug(f"bearing_weight={config.bearing_weight}")
    logger.debug(f"threshold={config.threshold}")
    logger.debug(f"exclude_overshoot={config.exclude_overshoot}")

    if metrics.min_max is not None:
        for key, value in metrics.min_max._asdict().items():
            logger.debug(f"{key}={value:.6f}")
        logger.debug(f"best_score={metrics.best_score:.6f}")
        logger.debug(f"worst_score={metrics.worst_score:.6f}")

    logger.debug("=== END_TRAVELORD_METRICS ===")
