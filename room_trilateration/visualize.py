"""
Visualization module for position estimation results.
"""

from typing import Mapping, Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Rectangle
import numpy as np

from .anchors import AnchorTable
from .bounding import BoundingBox
from .trilateration import PositionEstimate
from .utils import calculate_mean_error


class PositionVisualizer:
    """Handles visualization of estimates, anchors and the house outline."""

    def __init__(self, anchors: AnchorTable, bounds: Optional[BoundingBox] = None):
        """
        Initialize the visualizer.

        Args:
            anchors: Anchor table to draw
            bounds: Optional house outline to draw
        """
        self.anchors = anchors
        self.bounds = bounds

    def plot_estimates(self,
                       estimates: Mapping[str, PositionEstimate],
                       ground_truth: Optional[Mapping[str, Tuple[float, float]]] = None,
                       title: str = "Trilateration Results",
                       show: bool = True) -> Figure:
        """
        Plot estimated positions with their standard error.

        Args:
            estimates: Estimates keyed by device id
            ground_truth: Optional true (x, y) positions keyed by device id
            title: Plot title
            show: Whether to display the figure

        Returns:
            The created figure
        """
        fig, ax = plt.subplots(figsize=(10, 8))

        if self.bounds is not None:
            ax.add_patch(Rectangle((-self.bounds.half_width, -self.bounds.half_height),
                                   2 * self.bounds.half_width, 2 * self.bounds.half_height,
                                   fill=False, edgecolor='gray', linestyle='--', label='House'))

        anchor_pos = self.anchors.as_array()
        ax.scatter(anchor_pos[:, 0], anchor_pos[:, 1], c='red', marker='^', s=100, label='Anchors')
        for anchor_id, (x, y) in self.anchors.items():
            ax.annotate(anchor_id, (x, y), xytext=(5, 5), textcoords='offset points')

        if estimates:
            xs = [e.x for e in estimates.values()]
            ys = [e.y for e in estimates.values()]
            ax.scatter(xs, ys, c='blue', marker='o', label='Estimated Positions')
            for device_id, estimate in estimates.items():
                ax.add_patch(Circle(estimate.position, estimate.standard_error,
                                    color='blue', alpha=0.15))
                ax.annotate(device_id, estimate.position, xytext=(5, -10), textcoords='offset points')

        if ground_truth:
            truth = np.array(list(ground_truth.values()), dtype=float)
            ax.scatter(truth[:, 0], truth[:, 1], c='green', marker='x', label='Ground Truth')

            matched = [d for d in ground_truth if d in estimates]
            if matched:
                mean_error = calculate_mean_error([estimates[d].position for d in matched],
                                                  [ground_truth[d] for d in matched])
                title = f"{title}\nMean Error: {mean_error:.2f}m"

        ax.set_title(title)
        ax.set_xlabel('X Position (m)')
        ax.set_ylabel('Y Position (m)')
        ax.grid(True)
        ax.legend()
        ax.axis('equal')

        if show:
            plt.show()
        return fig

    def plot_error_histogram(self,
                             estimates: Mapping[str, PositionEstimate],
                             title: str = "Standard Error Distribution",
                             show: bool = True) -> Figure:
        """
        Plot histogram of standard errors.

        Args:
            estimates: Estimates keyed by device id
            title: Plot title
            show: Whether to display the figure
        """
        errors = [e.standard_error for e in estimates.values()]

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.hist(errors, bins=20, edgecolor='black')
        ax.set_title(f"{title}\nMean: {np.mean(errors):.2f}m" if errors else title)
        ax.set_xlabel('Standard Error (m)')
        ax.set_ylabel('Frequency')
        ax.grid(True)

        if show:
            plt.show()
        return fig
