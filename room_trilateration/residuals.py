"""
Range residual model for multilateration.
"""

import numpy as np


def calculate_residuals(point: np.ndarray, anchors: np.ndarray, distances: np.ndarray) -> np.ndarray:
    """
    Difference between the predicted and measured distance to each anchor.

    Args:
        point: Candidate position (x, y)
        anchors: (N, 2) array of anchor coordinates
        distances: Measured distances to each anchor

    Returns:
        Array of N residuals
    """
    estimated_distances = np.sqrt(np.sum((anchors - point) ** 2, axis=1))
    return estimated_distances - distances


def calculate_cost(point: np.ndarray, anchors: np.ndarray, distances: np.ndarray) -> float:
    """Sum of squared range residuals."""
    residuals = calculate_residuals(point, anchors, distances)
    return float(np.sum(residuals ** 2))


def calculate_gradient(point: np.ndarray, anchors: np.ndarray, distances: np.ndarray) -> np.ndarray:
    """
    Gradient of :func:`calculate_cost` with respect to the candidate position.

    The distance term is not differentiable where the candidate coincides with
    an anchor; that anchor contributes zero there.
    """
    offsets = point - anchors
    estimated_distances = np.sqrt(np.sum(offsets ** 2, axis=1))
    residuals = estimated_distances - distances

    safe = estimated_distances > 0
    scale = np.zeros_like(estimated_distances)
    scale[safe] = 2 * residuals[safe] / estimated_distances[safe]
    return np.sum(offsets * scale[:, None], axis=0)
