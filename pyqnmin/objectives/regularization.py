"""
Regularized objectives for PyQNMin.
"""

import numpy as np

from ..core.objective import Objective
from ..utils.validation import validate_positive


class L2Regularized(Objective):
    """
    Objective plus a quadratic (Gaussian prior) penalty.

        F(x) = f(x) + l2_cost / 2 * ||x||^2
        grad F(x) = grad f(x) + l2_cost * x

    Parameters
    ----------
    objective : Objective
        Unregularized objective, e.g. a negative log-likelihood
    l2_cost : float
        Penalty weight (> 0)

    Examples
    --------
    >>> from pyqnmin.core import FunctionObjective
    >>> base = FunctionObjective(lambda x: 0.0, lambda x: np.zeros(2), 2)
    >>> L2Regularized(base, 2.0).value_at(np.array([1.0, 1.0]))
    2.0

    Notes
    -----
    The penalty makes any convex objective strictly convex, so the
    regularized problem has a unique minimizer.
    """

    def __init__(self, objective: Objective, l2_cost: float):
        """Initialize L2Regularized."""
        if not isinstance(objective, Objective):
            raise TypeError(f"objective must be an Objective, got {type(objective)}")
        validate_positive(l2_cost, "l2_cost")

        self.objective = objective
        self.l2_cost = float(l2_cost)

    def dimension(self) -> int:
        return self.objective.dimension()

    def initial_point(self) -> np.ndarray:
        return self.objective.initial_point()

    def value_at(self, point: np.ndarray) -> float:
        point = np.asarray(point, dtype=float)
        return float(self.objective.value_at(point)) + 0.5 * self.l2_cost * float(point @ point)

    def gradient_at(self, point: np.ndarray) -> np.ndarray:
        point = np.asarray(point, dtype=float)
        return np.asarray(self.objective.gradient_at(point), dtype=float) + self.l2_cost * point

    def __repr__(self) -> str:
        return f"L2Regularized({self.objective!r}, l2_cost={self.l2_cost})"
