"""
Minimizer configuration for PyQNMin.

All thresholds of a minimization run live in one validated, immutable
:class:`MinimizerConfig`. The configuration is consumed by the minimizer and
never persisted.
"""

import dataclasses
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..utils.validation import (
    validate_positive,
    validate_non_negative_int,
    validate_wolfe_constants,
)


@dataclass(frozen=True, eq=False)
class MinimizerConfig:
    """
    Settings of the limited-memory quasi-Newton minimizer.

    Parameters
    ----------
    memory_size : int, optional
        Number of curvature pairs kept (default: 15). 0 gives steepest descent.
    c1 : float, optional
        Sufficient-decrease constant of the line search (default: 1e-4)
    c2 : float, optional
        Curvature constant of the line search (default: 0.9)
    gradient_tolerance : float, optional
        Stop when the infinity norm of the gradient is at most this value
        (default: 1e-6)
    function_tolerance : float, optional
        Relative decrease |f_prev - f| / max(|f_prev|, 1) regarded as a stall
        (default: 1e-12)
    stall_iterations : int, optional
        Consecutive stalled iterations that stop the run (default: 3)
    max_iterations : int, optional
        Iteration bound (default: 500)
    max_line_search_trials : int, optional
        Objective evaluations allowed per line search (default: 20)
    max_evaluations : int, optional
        Objective evaluations allowed per run (default: 30000)
    initial_point : array_like, optional
        Starting point overriding the objective's own (default: None)

    Examples
    --------
    >>> config = MinimizerConfig(memory_size=5, max_iterations=200)
    >>> config.replace(c2=0.5).c2
    0.5

    Notes
    -----
    Validation happens at construction, so an invalid configuration never
    reaches a minimization run.
    """

    memory_size: int = 15
    c1: float = 1e-4
    c2: float = 0.9
    gradient_tolerance: float = 1e-6
    function_tolerance: float = 1e-12
    stall_iterations: int = 3
    max_iterations: int = 500
    max_line_search_trials: int = 20
    max_evaluations: int = 30000
    initial_point: Optional[np.ndarray] = None

    def __post_init__(self):
        validate_non_negative_int(self.memory_size, "memory_size")
        validate_wolfe_constants(self.c1, self.c2)
        validate_positive(self.gradient_tolerance, "gradient_tolerance")
        validate_positive(self.function_tolerance, "function_tolerance")
        validate_non_negative_int(self.stall_iterations, "stall_iterations", minimum=1)
        validate_non_negative_int(self.max_iterations, "max_iterations", minimum=1)
        validate_non_negative_int(
            self.max_line_search_trials, "max_line_search_trials", minimum=1
        )
        validate_non_negative_int(self.max_evaluations, "max_evaluations", minimum=1)

        if self.initial_point is not None:
            point = np.array(self.initial_point, dtype=float)
            if point.ndim != 1:
                raise ValueError(
                    f"initial_point must be 1D, got shape {point.shape}"
                )
            point.setflags(write=False)
            object.__setattr__(self, "initial_point", point)

    def replace(self, **changes) -> "MinimizerConfig":
        """Return a validated copy with some fields changed."""
        return dataclasses.replace(self, **changes)
