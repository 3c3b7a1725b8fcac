"""
Standard error of a multilateration fit.
"""

import math
from typing import Optional

from .errors import InsufficientDegreesOfFreedom


def standard_error(cost: float, measurement_count: int, device_id: Optional[str] = None) -> float:
    """
    Calculate the standard error from the residual sum of squares.

    Args:
        cost: Residual sum of squares at the solution
        measurement_count: Number of measurements used in the fit
        device_id: Device the fit belongs to, for error reporting

    Returns:
        sqrt(cost / (measurement_count - 1))

    Raises:
        InsufficientDegreesOfFreedom: If fewer than two measurements were used
    """
    degrees_of_freedom = measurement_count - 1
    if degrees_of_freedom < 1:
        raise InsufficientDegreesOfFreedom(
            f"Standard error needs at least 2 measurements, got {measurement_count}",
            device_id=device_id,
        )
    # Rounding can leave a cost of -0.0 or a few ulps below zero
    return math.sqrt(max(cost, 0.0) / degrees_of_freedom)
