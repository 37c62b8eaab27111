"""
Shared test objectives.
"""

import pytest
import numpy as np
from pyqnmin.core import Objective


class QuadraticFunction(Objective):
    """f(x, y) = (x - 1)^2 + (y - 5)^2 + 10"""

    def dimension(self):
        return 2

    def value_at(self, x):
        return (x[0] - 1) ** 2 + (x[1] - 5) ** 2 + 10

    def gradient_at(self, x):
        return np.array([2 * (x[0] - 1), 2 * (x[1] - 5)])


class Rosenbrock(Objective):
    """
    f(x, y) = (1 - x)^2 + 100 (y - x^2)^2

    Non-convex, global minimum f(1, 1) = 0.
    """

    def dimension(self):
        return 2

    def value_at(self, x):
        return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2

    def gradient_at(self, x):
        return np.array([
            -2 * (1 - x[0]) - 400 * (x[1] - x[0] ** 2) * x[0],
            200 * (x[1] - x[0] ** 2),
        ])


class ConvexQuadratic(Objective):
    """f(x) = 1/2 (x - x*)^T A (x - x*) with A symmetric positive definite."""

    def __init__(self, matrix, minimizer):
        self.matrix = np.asarray(matrix, dtype=float)
        self.minimizer = np.asarray(minimizer, dtype=float)

    def dimension(self):
        return self.matrix.shape[0]

    def value_at(self, x):
        d = x - self.minimizer
        return 0.5 * float(d @ self.matrix @ d)

    def gradient_at(self, x):
        return self.matrix @ (x - self.minimizer)


def random_spd_matrix(n, rng, low=1.0, high=10.0):
    """Symmetric positive definite matrix with eigenvalues in [low, high]."""
    q, _ = np.linalg.qr(rng.normal(size=(n, n)))
    return q @ np.diag(np.linspace(low, high, n)) @ q.T


@pytest.fixture
def quadratic():
    return QuadraticFunction()


@pytest.fixture
def rosenbrock():
    return Rosenbrock()


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
