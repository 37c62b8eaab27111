"""
Convergence monitoring for PyQNMin.

The monitor decides after every iteration whether a minimization run should
stop: on a small gradient, on a stalled objective value, or on the
iteration bound.
"""

import numpy as np
from typing import Optional

from ..core.result import Outcome
from ..utils.math_utils import inf_norm
from ..utils.validation import validate_positive, validate_non_negative_int


class ConvergenceMonitor:
    """
    Stopping rules of the minimizer.

    A run stops when any of the following holds (checked in this order):

    1. ||g||_inf <= gradient_tolerance                      -> CONVERGED
    2. |f_prev - f| / max(|f_prev|, 1) <= function_tolerance
       for ``stall_iterations`` consecutive iterations       -> CONVERGED
    3. iteration >= max_iterations                          -> MAX_ITERATIONS_REACHED

    Parameters
    ----------
    gradient_tolerance : float, optional
        Absolute tolerance on the gradient infinity norm (default: 1e-6)
    function_tolerance : float, optional
        Relative decrease tolerance (default: 1e-12)
    stall_iterations : int, optional
        Consecutive stalled iterations required (default: 3)
    max_iterations : int, optional
        Iteration bound (default: 500)

    Attributes
    ----------
    outcome : Outcome or None
        Reason of the last stop, None while the run continues

    Examples
    --------
    >>> monitor = ConvergenceMonitor(max_iterations=10)
    >>> monitor.should_stop(1, 5.0, 4.0, np.array([0.5, -0.1]))
    False
    >>> monitor.should_stop(2, 4.0, 3.9, np.array([1e-8, 0.0]))
    True
    >>> monitor.outcome
    <Outcome.CONVERGED: 'converged'>

    Notes
    -----
    The stall count resets whenever an iteration decreases the value by more
    than ``function_tolerance``. Reaching ``max_iterations`` is reported as a
    non-converged outcome.
    """

    def __init__(
        self,
        gradient_tolerance: float = 1e-6,
        function_tolerance: float = 1e-12,
        stall_iterations: int = 3,
        max_iterations: int = 500
    ):
        """Initialize ConvergenceMonitor."""
        validate_positive(gradient_tolerance, "gradient_tolerance")
        validate_positive(function_tolerance, "function_tolerance")
        validate_non_negative_int(stall_iterations, "stall_iterations", minimum=1)
        validate_non_negative_int(max_iterations, "max_iterations", minimum=1)

        self.gradient_tolerance = float(gradient_tolerance)
        self.function_tolerance = float(function_tolerance)
        self.stall_iterations = int(stall_iterations)
        self.max_iterations = int(max_iterations)

        self.outcome: Optional[Outcome] = None
        self._stalled = 0

    @classmethod
    def from_config(cls, config) -> "ConvergenceMonitor":
        """Build a monitor from a :class:`~pyqnmin.core.MinimizerConfig`."""
        return cls(
            gradient_tolerance=config.gradient_tolerance,
            function_tolerance=config.function_tolerance,
            stall_iterations=config.stall_iterations,
            max_iterations=config.max_iterations,
        )

    def reset(self) -> None:
        """Forget the stall count and the last outcome."""
        self.outcome = None
        self._stalled = 0

    def gradient_converged(self, gradient: np.ndarray) -> bool:
        """True when the gradient infinity norm is within tolerance."""
        return inf_norm(gradient) <= self.gradient_tolerance

    def relative_decrease(self, previous_value: float, current_value: float) -> float:
        """|f_prev - f| / max(|f_prev|, 1)."""
        return abs(previous_value - current_value) / max(abs(previous_value), 1.0)

    def should_stop(
        self,
        iteration: int,
        previous_value: float,
        current_value: float,
        current_gradient: np.ndarray
    ) -> bool:
        """
        Check the stopping rules after an iteration.

        Parameters
        ----------
        iteration : int
            Number of completed iterations (1-based)
        previous_value : float
            Objective value before the iteration
        current_value : float
            Objective value after the iteration
        current_gradient : ndarray
            Gradient after the iteration

        Returns
        -------
        bool
            True if the run should stop; ``self.outcome`` then holds the
            reason
        """
        if self.gradient_converged(current_gradient):
            self.outcome = Outcome.CONVERGED
            return True

        if self.relative_decrease(previous_value, current_value) <= self.function_tolerance:
            self._stalled += 1
        else:
            self._stalled = 0

        if self._stalled >= self.stall_iterations:
            self.outcome = Outcome.CONVERGED
            return True

        if iteration >= self.max_iterations:
            self.outcome = Outcome.MAX_ITERATIONS_REACHED
            return True

        return False
