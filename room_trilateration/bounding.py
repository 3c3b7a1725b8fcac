"""
Bounding box correction for solved positions.
"""

import math
from dataclasses import dataclass
from typing import Mapping, Tuple

from .errors import ConfigurationError


@dataclass(frozen=True)
class BoundingBox:
    """Rectangle centered at the origin of the anchor coordinate frame."""

    half_width: float
    half_height: float

    def __post_init__(self):
        for name in ("half_width", "half_height"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise ConfigurationError(f"Bounding box {name} must be positive, got {value!r}")

    @classmethod
    def from_dimensions(cls, width: float, height: float) -> "BoundingBox":
        """Create a box from the full width and height of the house."""
        return cls(float(width) / 2, float(height) / 2)

    @classmethod
    def from_mapping(cls, dimensions: Mapping) -> "BoundingBox":
        """Create a box from the ``home_dimensions`` option."""
        try:
            return cls.from_dimensions(dimensions["width"], dimensions["height"])
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid home dimensions: {dimensions!r}") from e

    def clamp(self, x: float, y: float) -> Tuple[float, float]:
        """
        Clamp a point into the box, each axis independently.

        The correction is purely geometric; it is not fed back into the
        minimizer, so any error estimate still describes the unclamped fit.
        """
        x = max(-self.half_width, min(self.half_width, x))
        y = max(-self.half_height, min(self.half_height, y))
        return x, y

    def contains(self, x: float, y: float) -> bool:
        return abs(x) <= self.half_width and abs(y) <= self.half_height
