"""
Unit tests for the BFGS minimizer.
"""

import numpy as np
import pytest

from room_trilateration.minimizer import InitialGuess, minimize_cost


class TestMinimizer:
    """Test the unconstrained minimizer."""

    def test_recovers_true_position(self):
        """Test exact recovery from noise-free distances."""
        anchors = np.array([[-4, -3], [4, -3], [4, 3], [-4, 3]], dtype=float)
        true_pos = np.array([1.2, -0.7])
        distances = np.linalg.norm(anchors - true_pos, axis=1)

        result = minimize_cost(anchors, distances)

        assert result.converged
        np.testing.assert_allclose(result.position, true_pos, atol=1e-4)
        assert result.cost == pytest.approx(0.0, abs=1e-12)

    def test_centroid_start_far_from_origin(self):
        """Test the centroid strategy on anchors far from the origin."""
        anchors = np.array([[45, 45], [55, 45], [55, 55], [45, 55]], dtype=float)
        true_pos = np.array([52.0, 48.0])
        distances = np.linalg.norm(anchors - true_pos, axis=1)

        result = minimize_cost(anchors, distances, initial_guess=InitialGuess.CENTROID)

        assert result.converged
        np.testing.assert_allclose(result.position, true_pos, atol=1e-4)

    def test_explicit_start_point(self):
        """Test that an explicit starting point is accepted."""
        anchors = np.array([[-4, -3], [4, -3], [0, 5]], dtype=float)
        true_pos = np.array([-1.0, 2.0])
        distances = np.linalg.norm(anchors - true_pos, axis=1)

        result = minimize_cost(anchors, distances, initial_guess=np.array([-0.5, 1.5]))

        np.testing.assert_allclose(result.position, true_pos, atol=1e-4)

    def test_iteration_budget_exhausted(self):
        """Test that running out of iterations returns the best iterate instead of failing."""
        anchors = np.array([[45, 45], [55, 45], [55, 55], [45, 55]], dtype=float)
        distances = np.linalg.norm(anchors - np.array([52.0, 48.0]), axis=1)

        result = minimize_cost(anchors, distances, max_iterations=1)

        assert not result.converged
        assert result.iterations <= 1
        assert np.all(np.isfinite(result.position))
        assert np.isfinite(result.cost)

    def test_initial_guess_points(self):
        """Test the starting point of each strategy."""
        anchors = np.array([[0, 0], [4, 0], [2, 6]], dtype=float)

        np.testing.assert_allclose(InitialGuess.ORIGIN.point(anchors), [0, 0])
        np.testing.assert_allclose(InitialGuess.CENTROID.point(anchors), [2, 2])
        assert InitialGuess("centroid") is InitialGuess.CENTROID

    def test_noisy_fit_converges_within_budget(self):
        """Test that noisy but well-posed fits stopping early count as converged."""
        rng = np.random.default_rng(0)
        anchors = np.array([[-0.92, 0.99], [-4.63, -3.475], [2.03, 0.58]])

        for _ in range(100):
            true_pos = rng.uniform([-5.33, -3.875], [5.33, 3.875])
            distances = np.clip(np.linalg.norm(anchors - true_pos, axis=1) + rng.normal(0, 0.5, size=3), 0, None)

            result = minimize_cost(anchors, distances)

            assert result.iterations < 1000
            assert result.converged, f"stopped after {result.iterations} iterations at {result.position}"

    def test_start_on_anchor_is_moved_off(self):
        """Test that starting exactly on an anchor still reaches the minimum."""
        anchors = np.array([[0.0, 0.0], [4.0, 0.0]])
        distances = np.array([2.0, 4.0])

        result = minimize_cost(anchors, distances)

        assert result.converged
        assert result.iterations > 0
        assert result.cost == pytest.approx(0.0, abs=1e-12)
        assert result.position[0] == pytest.approx(0.5, abs=1e-4)
        assert abs(result.position[1]) == pytest.approx(np.sqrt(3.75), abs=1e-4)
