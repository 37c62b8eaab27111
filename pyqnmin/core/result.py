"""
Result types for PyQNMin.

A minimization run never raises for abnormal termination; it returns a
:class:`MinimizeResult` carrying the best point found and an
:class:`Outcome` flag. :class:`IterationReport` snapshots are handed to the
optional per-iteration callback.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np


class Outcome(Enum):
    """Why a minimization run ended."""

    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max-iterations-reached"
    LINE_SEARCH_EXHAUSTED = "line-search-exhausted"
    EVALUATION_FAILED = "evaluation-failed"
    MAX_EVALUATIONS_REACHED = "max-evaluations-reached"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class MinimizeResult:
    """
    Final state of a minimization run.

    Attributes
    ----------
    point : ndarray
        Best point found (read-only)
    value : float
        Objective value at ``point``
    gradient : ndarray or None
        Gradient at ``point``; None when the initial evaluation failed
    outcome : Outcome
        Termination reason
    iterations : int
        Number of accepted iterations
    evaluations : int
        Number of objective evaluations (value and gradient pairs)
    """

    point: np.ndarray
    value: float
    gradient: np.ndarray
    outcome: Outcome
    iterations: int
    evaluations: int

    @property
    def converged(self) -> bool:
        """True when a tolerance-based stopping condition was met."""
        return self.outcome is Outcome.CONVERGED

    @property
    def message(self) -> str:
        return (
            f"{self.outcome} after {self.iterations} iterations "
            f"({self.evaluations} evaluations), value={self.value:.6g}"
        )


@dataclass(frozen=True, eq=False)
class IterationReport:
    """
    Snapshot of one accepted iteration, passed to minimizer callbacks.

    Attributes
    ----------
    iteration : int
        1-based iteration index
    point : ndarray
        New current point
    value : float
        Objective value at ``point``
    gradient : ndarray
        Gradient at ``point``
    direction : ndarray
        Search direction used to reach ``point``
    step_length : float
        Step length accepted by the line search
    evaluations : int
        Objective evaluations so far in the run
    """

    iteration: int
    point: np.ndarray
    value: float
    gradient: np.ndarray
    direction: np.ndarray
    step_length: float
    evaluations: int
