"""
Distance measurement simulation for known device positions.
"""

from typing import Dict, Mapping, Optional, Tuple

import numpy as np


def simulate_distances(anchors: Mapping[str, Tuple[float, float]],
                       device_pos: Tuple[float, float],
                       noise_std_dev: float = 0.0,
                       rng: Optional[np.random.Generator] = None) -> Dict[str, float]:
    """
    Simulate the distance from a given device position to each anchor.

    Args:
        anchors: Mapping of anchor id to (x, y)
        device_pos: True (x, y) position of the device
        noise_std_dev: Standard deviation of Gaussian ranging noise in meters
        rng: Random generator; a fresh default generator is used if omitted

    Returns:
        A dict: {anchor_id: distance}, distances clipped at zero
    """
    if noise_std_dev < 0:
        raise ValueError("noise_std_dev must not be negative")
    if noise_std_dev > 0 and rng is None:
        rng = np.random.default_rng()

    simulated = {}
    for anchor_id, anchor_pos in anchors.items():
        distance = float(np.linalg.norm(np.array(device_pos, dtype=float) - np.array(anchor_pos, dtype=float)))
        if noise_std_dev > 0:
            distance += rng.normal(0, noise_std_dev)
        simulated[anchor_id] = max(distance, 0.0)

    return simulated
