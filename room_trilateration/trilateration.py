"""
Position estimation module using trilateration.
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Dict, Mapping, Optional, Tuple, Union

import numpy as np

from .anchors import AnchorTable, Coordinates
from .bounding import BoundingBox
from .errors import EstimationError, InsufficientDegreesOfFreedom, InsufficientMeasurements
from .minimizer import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, InitialGuess, minimize_cost
from .uncertainty import standard_error
from .utils import DEFAULT_MAX_CONDITION, is_degenerate_geometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeasurementSet:
    """Usable measurements for one device, ordered by anchor id."""

    anchor_ids: Tuple[str, ...]
    anchors: np.ndarray
    distances: np.ndarray

    def __len__(self) -> int:
        return len(self.anchor_ids)


@dataclass(frozen=True)
class PositionEstimate:
    """Result of a single estimation call."""

    x: float
    y: float
    standard_error: float
    converged: bool
    degenerate: bool
    raw_x: float
    raw_y: float
    cost: float
    iterations: int
    measurement_count: int

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def clamped(self) -> bool:
        """Whether the bounding box moved the solved position."""
        return (self.x, self.y) != (self.raw_x, self.raw_y)

    def to_dict(self) -> dict:
        return dict(asdict(self), clamped=self.clamped)


@dataclass
class BatchResult:
    """Estimates and per-device failures of a batch."""

    estimates: Dict[str, PositionEstimate] = field(default_factory=dict)
    failures: Dict[str, EstimationError] = field(default_factory=dict)


class TrilaterationEngine:
    """Implements trilateration-based position estimation.

    The engine holds only immutable configuration, so a single instance can be
    shared between threads. Reloading configuration means building a new
    engine with :meth:`with_config`.
    """

    def __init__(self,
                 anchors: Union[AnchorTable, Mapping[str, Coordinates]],
                 bounds: BoundingBox,
                 initial_guess: Union[InitialGuess, str] = InitialGuess.ORIGIN,
                 gtol: float = DEFAULT_TOLERANCE,
                 max_iterations: int = DEFAULT_MAX_ITERATIONS,
                 max_condition: float = DEFAULT_MAX_CONDITION):
        """
        Initialize the trilateration engine.

        Args:
            anchors: Anchor table, or a mapping of anchor id to (x, y)
            bounds: Box the reported positions are clamped into
            initial_guess: Starting point strategy for the minimizer
            gtol: Gradient norm tolerance of the minimizer
            max_iterations: Iteration budget of the minimizer
            max_condition: Anchor layout condition number above which an
                estimate is flagged as degenerate
        """
        if not isinstance(anchors, AnchorTable):
            anchors = AnchorTable(anchors)
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.anchors = anchors
        self.bounds = bounds
        self.initial_guess = InitialGuess(initial_guess)
        self.gtol = gtol
        self.max_iterations = max_iterations
        self.max_condition = max_condition

    def with_config(self,
                    anchors: Optional[Union[AnchorTable, Mapping[str, Coordinates]]] = None,
                    bounds: Optional[BoundingBox] = None) -> "TrilaterationEngine":
        """Return a new engine with replaced configuration and the same solver settings."""
        return TrilaterationEngine(
            anchors if anchors is not None else self.anchors,
            bounds if bounds is not None else self.bounds,
            initial_guess=self.initial_guess,
            gtol=self.gtol,
            max_iterations=self.max_iterations,
            max_condition=self.max_condition,
        )

    def measurement_set(self, distances: Mapping[str, float], device_id: Optional[str] = None) -> MeasurementSet:
        """
        Filter a raw distance map down to the measurements usable for a solve.

        Anchors missing from the table are dropped silently. Distances that are
        negative or not finite are dropped with a warning.

        Args:
            distances: Mapping of anchor id to measured distance
            device_id: Device the distances belong to, for logging

        Returns:
            The measurements ordered by anchor id
        """
        usable: Dict[str, float] = {}
        for anchor_id, distance in distances.items():
            if anchor_id not in self.anchors:
                logger.debug("Ignoring unknown anchor %s for device %s", anchor_id, device_id)
                continue
            try:
                distance = float(distance)
            except (TypeError, ValueError):
                logger.warning("Dropping non-numeric distance %r to %s for device %s", distance, anchor_id, device_id)
                continue
            if not math.isfinite(distance) or distance < 0:
                logger.warning("Dropping invalid distance %r to %s for device %s", distance, anchor_id, device_id)
                continue
            usable[anchor_id] = distance

        anchor_ids = tuple(sorted(usable))
        return MeasurementSet(
            anchor_ids=anchor_ids,
            anchors=np.array([self.anchors[a] for a in anchor_ids], dtype=float).reshape(-1, 2),
            distances=np.array([usable[a] for a in anchor_ids], dtype=float),
        )

    def estimate_position(self, distances: Mapping[str, float], device_id: Optional[str] = None) -> PositionEstimate:
        """
        Estimate position using trilateration with least squares optimization.

        Args:
            distances: Mapping of anchor id to measured distance
            device_id: Device the distances belong to, for logging and errors

        Returns:
            The clamped position with its standard error and diagnostics

        Raises:
            InsufficientMeasurements: If no distance refers to a known anchor
            InsufficientDegreesOfFreedom: If only one measurement is usable
        """
        measurements = self.measurement_set(distances, device_id)
        n = len(measurements)
        if n == 0:
            raise InsufficientMeasurements("No distances to known anchors", device_id=device_id)
        if n < 2:
            raise InsufficientDegreesOfFreedom(
                f"Need at least 2 measurements, got {n} ({measurements.anchor_ids[0]})",
                device_id=device_id,
            )

        result = minimize_cost(
            measurements.anchors,
            measurements.distances,
            initial_guess=self.initial_guess,
            gtol=self.gtol,
            max_iterations=self.max_iterations,
        )
        if not result.converged:
            logger.warning("Minimizer did not converge for device %s after %d iterations (gradient norm %.3g)",
                           device_id, result.iterations, result.gradient_norm)

        error = standard_error(result.cost, n, device_id=device_id)
        x, y = self.bounds.clamp(*result.position)
        degenerate = is_degenerate_geometry(measurements.anchors, self.max_condition)
        if degenerate:
            logger.debug("Degenerate anchor geometry for device %s: %s", device_id, measurements.anchor_ids)

        return PositionEstimate(
            x=x,
            y=y,
            standard_error=error,
            converged=result.converged,
            degenerate=degenerate,
            raw_x=result.position[0],
            raw_y=result.position[1],
            cost=result.cost,
            iterations=result.iterations,
            measurement_count=n,
        )

    def estimate_many(self, devices: Mapping[str, Mapping[str, float]]) -> BatchResult:
        """
        Estimate positions for several devices independently.

        A failure for one device never aborts the others; it is collected in
        ``failures`` under the device id.

        Args:
            devices: Mapping of device id to its raw distance map

        Returns:
            Estimates and failures keyed by device id
        """
        batch = BatchResult()
        for device_id, distances in devices.items():
            try:
                batch.estimates[device_id] = self.estimate_position(distances, device_id=device_id)
            except EstimationError as e:
                logger.warning("Skipping device %s: %s", device_id, e)
                batch.failures[device_id] = e
            except Exception as e:
                logger.exception("Unexpected error during trilateration for device %s", device_id)
                error = EstimationError(f"Unexpected error: {e}", device_id=device_id)
                error.__cause__ = e
                batch.failures[device_id] = error
        return batch
