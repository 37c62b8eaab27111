"""
Objective function interface for PyQNMin.

The minimizer only talks to the function being minimized through the
:class:`Objective` interface: a fixed dimension, a value and a gradient at
any point. Model trainers implement it (or wrap plain callables with
:class:`FunctionObjective`) and consume the resulting parameter vector.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Callable, Optional


class EvaluationError(ArithmeticError):
    """
    Raised when an objective returns a NaN or infinite value or gradient.

    Attributes
    ----------
    point : ndarray
        Point at which the evaluation failed
    """

    def __init__(self, message: str, point: Optional[np.ndarray] = None):
        super().__init__(message)
        self.point = point


class Objective(ABC):
    """
    Smooth, differentiable function to be minimized.

    Implementations must be deterministic and side-effect free, and must
    report the same dimension on every call.

    Examples
    --------
    >>> class Quadratic(Objective):
    ...     def dimension(self):
    ...         return 2
    ...     def value_at(self, x):
    ...         return (x[0] - 1) ** 2 + (x[1] - 5) ** 2 + 10
    ...     def gradient_at(self, x):
    ...         return np.array([2 * (x[0] - 1), 2 * (x[1] - 5)])
    """

    @abstractmethod
    def dimension(self) -> int:
        """Number of parameters n."""

    @abstractmethod
    def value_at(self, point: np.ndarray) -> float:
        """Objective value at ``point``."""

    @abstractmethod
    def gradient_at(self, point: np.ndarray) -> np.ndarray:
        """Gradient of the objective at ``point`` (length n)."""

    def initial_point(self) -> np.ndarray:
        """Starting point of a minimization run (all zeros by default)."""
        return np.zeros(self.dimension())


class FunctionObjective(Objective):
    """
    Objective built from plain value and gradient callables.

    Parameters
    ----------
    fun : callable
        Maps a point (1D ndarray) to a scalar value
    grad : callable
        Maps a point (1D ndarray) to the gradient (1D array_like)
    dimension : int
        Number of parameters
    x0 : array_like, optional
        Starting point (default: zeros)

    Examples
    --------
    >>> objective = FunctionObjective(
    ...     lambda x: float(np.sum((x - 3.0) ** 2)),
    ...     lambda x: 2.0 * (x - 3.0),
    ...     dimension=4,
    ... )
    >>> objective.value_at(np.zeros(4))
    36.0
    """

    def __init__(
        self,
        fun: Callable[[np.ndarray], float],
        grad: Callable[[np.ndarray], np.ndarray],
        dimension: int,
        x0: Optional[np.ndarray] = None
    ):
        """Initialize FunctionObjective."""
        if not callable(fun) or not callable(grad):
            raise TypeError("fun and grad must be callable")

        self._fun = fun
        self._grad = grad
        self._dimension = int(dimension)
        self._x0 = None if x0 is None else np.array(x0, dtype=float)

    def dimension(self) -> int:
        return self._dimension

    def value_at(self, point: np.ndarray) -> float:
        return float(self._fun(point))

    def gradient_at(self, point: np.ndarray) -> np.ndarray:
        return np.asarray(self._grad(point), dtype=float)

    def initial_point(self) -> np.ndarray:
        if self._x0 is None:
            return super().initial_point()
        return self._x0.copy()

    def __repr__(self) -> str:
        return f"FunctionObjective(dimension={self._dimension})"
