"""
Unit tests for the curvature memory (two-loop recursion).
"""

import pytest
import numpy as np
from pyqnmin.optimization import CurvatureMemory

from conftest import random_spd_matrix


def bfgs_inverse_hessian(pairs, n):
    """Dense inverse Hessian built by the explicit BFGS update formula."""
    s_last, y_last = pairs[-1]
    gamma = (s_last @ y_last) / (y_last @ y_last)
    H = gamma * np.eye(n)
    for s, y in pairs:
        rho = 1.0 / (y @ s)
        V = np.eye(n) - rho * np.outer(y, s)
        H = V.T @ H @ V + rho * np.outer(s, s)
    return H


def make_pairs(count, matrix, rng):
    """Curvature pairs of a quadratic with Hessian ``matrix``."""
    pairs = []
    for _ in range(count):
        s = rng.normal(size=matrix.shape[0])
        pairs.append((s, matrix @ s))
    return pairs


class TestCurvatureMemoryStorage:
    """Tests for pair storage and eviction."""

    def test_empty_memory(self):
        """Test that a new memory holds no pairs."""
        memory = CurvatureMemory(capacity=5, dimension=3)
        assert len(memory) == 0
        assert list(memory.pairs()) == []

    def test_never_exceeds_capacity(self, rng):
        """Test that the oldest pairs are evicted when full."""
        A = random_spd_matrix(3, rng)
        pairs = make_pairs(12, A, rng)
        memory = CurvatureMemory(capacity=5, dimension=3)

        for k, (s, y) in enumerate(pairs):
            assert memory.update(s, y)
            assert len(memory) == min(k + 1, 5)

        stored = list(memory.pairs())
        assert len(stored) == 5
        for (s, y), (s_exp, y_exp) in zip(stored, pairs[-5:]):
            np.testing.assert_array_equal(s, s_exp)
            np.testing.assert_array_equal(y, y_exp)

    def test_non_positive_curvature_skipped(self, rng):
        """Test that pairs with y.s <= 0 leave the stored set unchanged."""
        A = random_spd_matrix(3, rng)
        memory = CurvatureMemory(capacity=4, dimension=3)
        for s, y in make_pairs(2, A, rng):
            memory.update(s, y)
        before = list(memory.pairs())

        s = np.array([1.0, 0.0, 0.0])
        assert not memory.update(s, -s)                          # y.s < 0
        assert not memory.update(s, np.array([0.0, 1.0, 0.0]))   # y.s == 0

        after = list(memory.pairs())
        assert len(after) == len(before) == 2
        for (s0, y0), (s1, y1) in zip(before, after):
            np.testing.assert_array_equal(s0, s1)
            np.testing.assert_array_equal(y0, y1)

    def test_zero_capacity(self):
        """Test that a zero-capacity memory stores nothing."""
        memory = CurvatureMemory(capacity=0, dimension=2)
        assert not memory.update(np.array([1.0, 0.0]), np.array([1.0, 0.0]))
        assert len(memory) == 0

    def test_reset(self, rng):
        """Test that reset discards every pair."""
        A = random_spd_matrix(2, rng)
        memory = CurvatureMemory(capacity=3, dimension=2)
        for s, y in make_pairs(3, A, rng):
            memory.update(s, y)
        memory.reset()
        assert len(memory) == 0
        g = np.array([0.3, -0.7])
        np.testing.assert_array_equal(memory.compute_direction(g), -g)

    def test_shape_mismatch_error(self):
        """Test that pairs of the wrong length are rejected."""
        memory = CurvatureMemory(capacity=3, dimension=2)
        with pytest.raises(ValueError, match="shape"):
            memory.update(np.ones(3), np.ones(3))

    def test_invalid_arguments(self):
        """Test constructor validation."""
        with pytest.raises(ValueError):
            CurvatureMemory(capacity=-1, dimension=2)
        with pytest.raises(ValueError):
            CurvatureMemory(capacity=3, dimension=0)


class TestCurvatureMemoryDirection:
    """Tests for compute_direction."""

    def test_steepest_descent_without_pairs(self):
        """Test that an empty memory returns exactly the negated gradient."""
        memory = CurvatureMemory(capacity=5, dimension=3)
        g = np.array([0.1, -2.5, 3.0])
        np.testing.assert_array_equal(memory.compute_direction(g), -g)

    def test_matches_dense_bfgs(self, rng):
        """Test the two-loop recursion against the explicit BFGS matrix."""
        n = 5
        A = random_spd_matrix(n, rng)
        pairs = make_pairs(4, A, rng)
        memory = CurvatureMemory(capacity=10, dimension=n)
        for s, y in pairs:
            memory.update(s, y)

        g = rng.normal(size=n)
        H = bfgs_inverse_hessian(pairs, n)
        np.testing.assert_allclose(memory.compute_direction(g), -H @ g, rtol=1e-8, atol=1e-12)

    def test_matches_dense_bfgs_after_eviction(self, rng):
        """Test that only the newest pairs enter the recursion."""
        n = 4
        A = random_spd_matrix(n, rng)
        pairs = make_pairs(7, A, rng)
        memory = CurvatureMemory(capacity=3, dimension=n)
        for s, y in pairs:
            memory.update(s, y)

        g = rng.normal(size=n)
        H = bfgs_inverse_hessian(pairs[-3:], n)
        np.testing.assert_allclose(memory.compute_direction(g), -H @ g, rtol=1e-8, atol=1e-12)

    def test_secant_condition(self, rng):
        """Test H y = s for the newest pair."""
        n = 6
        A = random_spd_matrix(n, rng)
        pairs = make_pairs(5, A, rng)
        memory = CurvatureMemory(capacity=5, dimension=n)
        for s, y in pairs:
            memory.update(s, y)

        s_last, y_last = pairs[-1]
        np.testing.assert_allclose(memory.compute_direction(y_last), -s_last, rtol=1e-8, atol=1e-10)

    def test_gamma_scaling_single_pair(self):
        """Test the initial scaling gamma = s.y / y.y with one pair."""
        memory = CurvatureMemory(capacity=2, dimension=2)
        s = np.array([1.0, 0.0])
        memory.update(s, 4.0 * s)
        # Along s the update is exact (H y = s); across s only gamma applies
        np.testing.assert_allclose(memory.compute_direction(np.array([4.0, 0.0])), [-1.0, 0.0])
        np.testing.assert_allclose(memory.compute_direction(np.array([0.0, 4.0])), [0.0, -1.0])

    def test_descent_direction(self, rng):
        """Test that the direction is a descent direction."""
        n = 8
        A = random_spd_matrix(n, rng)
        memory = CurvatureMemory(capacity=4, dimension=n)
        for s, y in make_pairs(6, A, rng):
            memory.update(s, y)

        for _ in range(10):
            g = rng.normal(size=n)
            assert memory.compute_direction(g) @ g < 0
