"""
Utility functions for the position estimation system.
"""

from typing import List, Tuple
import numpy as np

DEFAULT_MAX_CONDITION = 1e3


def calculate_distance(point1: Tuple[float, float], point2: Tuple[float, float]) -> float:
    """
    Calculate Euclidean distance between two points.

    Args:
        point1: First point coordinates (x, y)
        point2: Second point coordinates (x, y)

    Returns:
        Distance between points in meters
    """
    return float(np.sqrt((point1[0] - point2[0])**2 + (point1[1] - point2[1])**2))


def calculate_mean_error(estimated_positions: List[Tuple[float, float]],
                         ground_truth: List[Tuple[float, float]]) -> float:
    """
    Calculate mean positioning error.

    Args:
        estimated_positions: List of estimated (x, y) positions
        ground_truth: List of ground truth (x, y) positions

    Returns:
        Mean error in meters
    """
    errors = [calculate_distance(est, true)
              for est, true in zip(estimated_positions, ground_truth)]
    return float(np.mean(errors))


def geometry_condition(anchors: np.ndarray) -> float:
    """
    Condition number of the anchor layout.

    Ratio of the largest to the smallest singular value of the centered anchor
    coordinates. Collinear or coincident layouts give ``inf``.
    """
    anchors = np.asarray(anchors, dtype=float)
    if len(anchors) < 3:
        return float('inf')
    centered = anchors - anchors.mean(axis=0)
    singular_values = np.linalg.svd(centered, compute_uv=False)
    if singular_values[-1] == 0:
        return float('inf')
    return float(singular_values[0] / singular_values[-1])


def is_degenerate_geometry(anchors: np.ndarray, max_condition: float = DEFAULT_MAX_CONDITION) -> bool:
    """
    Check whether an anchor layout makes the position ill-conditioned.

    Fewer than three anchors, coincident anchors and (near-)collinear anchors
    are all degenerate.
    """
    return geometry_condition(anchors) > max_condition
