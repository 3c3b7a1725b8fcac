"""
Unconstrained minimization of the range residual cost.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

import numpy as np
from scipy.optimize import minimize

from .residuals import calculate_cost, calculate_gradient

DEFAULT_TOLERANCE = 1e-8
DEFAULT_MAX_ITERATIONS = 1000

# scipy BFGS stop statuses that mean the search did not finish
STATUS_MAXITER = 1
STATUS_NAN = 3

# Offset applied to a start point lying exactly on an anchor
ANCHOR_NUDGE = 1e-6 * np.array([np.cos(1.0), np.sin(1.0)])


class InitialGuess(str, Enum):
    """Where the minimizer starts its search."""

    ORIGIN = "origin"
    CENTROID = "centroid"

    def point(self, anchors: np.ndarray) -> np.ndarray:
        if self is InitialGuess.CENTROID:
            return np.mean(anchors, axis=0)
        return np.zeros(2)


@dataclass(frozen=True)
class MinimizerResult:
    position: Tuple[float, float]
    cost: float
    converged: bool
    iterations: int
    gradient_norm: float


def minimize_cost(anchors: np.ndarray,
                  distances: np.ndarray,
                  initial_guess: Union[InitialGuess, np.ndarray] = InitialGuess.ORIGIN,
                  gtol: float = DEFAULT_TOLERANCE,
                  max_iterations: int = DEFAULT_MAX_ITERATIONS) -> MinimizerResult:
    """
    Find the position minimizing the sum of squared range residuals.

    Uses BFGS with the analytic gradient. The cost is not globally convex, so
    the result is the local minimum reached from ``initial_guess``.

    Args:
        anchors: (N, 2) array of anchor coordinates
        distances: Measured distances to each anchor
        initial_guess: Starting strategy or explicit (x, y) starting point
        gtol: Gradient norm below which the search is considered converged
        max_iterations: Iteration budget

    Returns:
        The best iterate found. Running out of iterations is reported through
        ``converged`` rather than raised.
    """
    anchors = np.asarray(anchors, dtype=float)
    distances = np.asarray(distances, dtype=float)
    if isinstance(initial_guess, InitialGuess):
        x0 = initial_guess.point(anchors)
    else:
        x0 = np.asarray(initial_guess, dtype=float)
    if len(anchors) and np.any(np.all(anchors == x0, axis=1)):
        # the gradient has no direction there, so BFGS would stop immediately
        x0 = x0 + ANCHOR_NUDGE

    result = minimize(
        calculate_cost,
        x0,
        args=(anchors, distances),
        method='BFGS',
        jac=calculate_gradient,
        options={'gtol': gtol, 'maxiter': max_iterations, 'norm': 2},
    )

    position = np.asarray(result.x, dtype=float)
    gradient_norm = float(np.linalg.norm(calculate_gradient(position, anchors, distances)))
    # A precision-loss stop within budget is the best double precision allows
    converged = result.status not in (STATUS_MAXITER, STATUS_NAN)

    return MinimizerResult(
        position=(float(position[0]), float(position[1])),
        cost=calculate_cost(position, anchors, distances),
        converged=converged,
        iterations=int(result.nit),
        gradient_norm=gradient_norm,
    )
