"""
Multilateration of tracked devices from distances to fixed anchors.
"""

from .anchors import AnchorTable
from .bounding import BoundingBox
from .errors import (
    ConfigurationError,
    EstimationError,
    InsufficientDegreesOfFreedom,
    InsufficientMeasurements,
    ServiceError,
    TrilaterationError,
)
from .minimizer import InitialGuess, MinimizerResult, minimize_cost
from .trilateration import BatchResult, MeasurementSet, PositionEstimate, TrilaterationEngine
from .uncertainty import standard_error

__all__ = [
    "AnchorTable",
    "BoundingBox",
    "InitialGuess",
    "MinimizerResult",
    "minimize_cost",
    "standard_error",
    "MeasurementSet",
    "PositionEstimate",
    "BatchResult",
    "TrilaterationEngine",
    "TrilaterationError",
    "ConfigurationError",
    "EstimationError",
    "InsufficientMeasurements",
    "InsufficientDegreesOfFreedom",
    "ServiceError",
]
