"""
Strong Wolfe line search for PyQNMin.

Given a point, a descent direction and the value/gradient there, the line
search looks for a step length alpha > 0 satisfying

    sufficient decrease:  f(x + alpha d) <= f(x) + c1 alpha d.g(x)
    curvature:            |d.g(x + alpha d)| <= c2 |d.g(x)|

It first brackets an acceptable step by expanding the trial step, then zooms
into the bracket with safeguarded cubic interpolation. Every trial costs one
objective evaluation (value and gradient), and the total number of trials is
bounded; when the budget runs out the search reports failure instead of
returning an unacceptable step.

References
----------
Nocedal, J. and Wright, S. J. (2006). "Numerical Optimization", 2nd ed.,
Algorithms 3.5 and 3.6.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.objective import Objective, EvaluationError
from ..utils.math_utils import all_finite
from ..utils.validation import (
    validate_positive,
    validate_non_negative_int,
    validate_wolfe_constants,
)

# Growth factor of the trial step during bracketing
EXPANSION_FACTOR = 2.0
# Interpolated steps are kept this fraction of the bracket width away from
# both ends
SAFEGUARD = 0.1
# Largest trial step ever evaluated
MAX_STEP = 1e10


@dataclass(frozen=True, eq=False)
class LineSearchResult:
    """
    Accepted step of a line search.

    Attributes
    ----------
    step_length : float
        Accepted step length (> 0)
    point : ndarray
        New point x + step_length * d
    value : float
        Objective value at ``point``
    gradient : ndarray
        Gradient at ``point``
    evaluations : int
        Objective evaluations spent by the search
    """

    step_length: float
    point: np.ndarray
    value: float
    gradient: np.ndarray
    evaluations: int


def evaluate(
    objective: Objective,
    point: np.ndarray
) -> Tuple[float, np.ndarray]:
    """
    Evaluate value and gradient of an objective at a point.

    Parameters
    ----------
    objective : Objective
        Function being minimized
    point : ndarray
        Evaluation point of length n

    Returns
    -------
    value : float
        Objective value
    gradient : ndarray
        Gradient as a float array of length n

    Raises
    ------
    EvaluationError
        If the value or the gradient contains NaN or infinite entries
    ValueError
        If the gradient does not have the shape of ``point``
    """
    value = float(objective.value_at(point))
    gradient = np.asarray(objective.gradient_at(point), dtype=float)

    if gradient.shape != point.shape:
        raise ValueError(
            f"Objective returned gradient of shape {gradient.shape}, "
            f"expected {point.shape}"
        )

    if not all_finite(value, gradient):
        raise EvaluationError(
            "Objective returned a NaN or infinite value or gradient",
            point=point,
        )

    return value, gradient


def cubic_minimizer(
    a: float, fa: float, da: float,
    b: float, fb: float, db: float
) -> Optional[float]:
    """
    Minimizer of the cubic matching values and slopes at two steps.

    Parameters
    ----------
    a, b : float
        Step lengths (a != b)
    fa, fb : float
        Values phi(a), phi(b)
    da, db : float
        Directional derivatives phi'(a), phi'(b)

    Returns
    -------
    float or None
        Location of the cubic's local minimizer, or None if the cubic has no
        real local minimizer or the computation is ill-conditioned

    Examples
    --------
    >>> # phi(t) = (t - 1)^2 is reproduced exactly
    >>> cubic_minimizer(0.0, 1.0, -2.0, 3.0, 4.0, 4.0)
    1.0
    """
    d1 = da + db - 3.0 * (fa - fb) / (a - b)
    radicand = d1 * d1 - da * db
    if not radicand >= 0:
        return None

    d2 = np.copysign(np.sqrt(radicand), b - a)
    denom = db - da + 2.0 * d2
    if denom == 0:
        return None

    t = b - (b - a) * (db + d2 - d1) / denom
    if not np.isfinite(t):
        return None
    return float(t)


class LineSearch:
    """
    Bracketing-and-zoom line search enforcing the strong Wolfe conditions.

    Parameters
    ----------
    c1 : float, optional
        Sufficient-decrease constant (default: 1e-4)
    c2 : float, optional
        Curvature constant (default: 0.9)
    max_trials : int, optional
        Maximum number of objective evaluations per search (default: 20)

    Examples
    --------
    >>> from pyqnmin.core import FunctionObjective
    >>> objective = FunctionObjective(lambda x: float(x @ x), lambda x: 2 * x, 2)
    >>> x = np.array([1.0, 1.0])
    >>> g = 2 * x
    >>> result = LineSearch().search(objective, x, -g, float(x @ x), g)
    >>> result.step_length > 0
    True
    """

    def __init__(self, c1: float = 1e-4, c2: float = 0.9, max_trials: int = 20):
        """Initialize LineSearch."""
        validate_wolfe_constants(c1, c2)
        validate_non_negative_int(max_trials, "max_trials", minimum=1)

        self.c1 = float(c1)
        self.c2 = float(c2)
        self.max_trials = int(max_trials)
        # Evaluations spent by the most recent search, successful or not
        self.evaluations = 0

    def __repr__(self) -> str:
        return (
            f"LineSearch(c1={self.c1}, c2={self.c2}, "
            f"max_trials={self.max_trials})"
        )

    def search(
        self,
        objective: Objective,
        point: np.ndarray,
        direction: np.ndarray,
        value: float,
        gradient: np.ndarray,
        initial_step: float = 1.0,
        max_trials: Optional[int] = None
    ) -> Optional[LineSearchResult]:
        """
        Find a step length along ``direction`` satisfying strong Wolfe.

        Parameters
        ----------
        objective : Objective
            Function being minimized
        point : ndarray
            Current point x
        direction : ndarray
            Descent direction d (d.g < 0)
        value : float
            f(x)
        gradient : ndarray
            Gradient at x
        initial_step : float, optional
            First trial step length (default: 1.0)
        max_trials : int, optional
            Tighter evaluation budget for this search only; never exceeds
            the budget given at construction

        Returns
        -------
        LineSearchResult or None
            Accepted step, or None when no acceptable step was found within
            the evaluation budget. The number of evaluations spent is kept in
            ``self.evaluations`` either way.

        Raises
        ------
        ValueError
            If ``direction`` is not a descent direction or ``initial_step``
            is not positive
        EvaluationError
            If the objective returns NaN/Inf at a trial point
        """
        validate_positive(initial_step, "initial_step")
        budget = self.max_trials
        if max_trials is not None:
            validate_non_negative_int(max_trials, "max_trials", minimum=1)
            budget = min(budget, int(max_trials))

        slope0 = float(np.dot(direction, gradient))
        if not slope0 < 0:
            raise ValueError(
                f"direction is not a descent direction (d.g = {slope0})"
            )

        self.evaluations = 0
        trials = 0

        def phi(step: float):
            nonlocal trials
            trials += 1
            self.evaluations = trials
            new_point = point + step * direction
            new_value, new_gradient = evaluate(objective, new_point)
            return new_point, new_value, new_gradient, float(np.dot(direction, new_gradient))

        def accept(step, new_point, new_value, new_gradient):
            return LineSearchResult(
                step_length=float(step),
                point=new_point,
                value=new_value,
                gradient=new_gradient,
                evaluations=trials,
            )

        def sufficient_decrease(step, new_value):
            return new_value <= value + self.c1 * step * slope0

        def curvature(new_slope):
            return abs(new_slope) <= -self.c2 * slope0

        # Bracketing phase
        step_prev, value_prev, slope_prev = 0.0, value, slope0
        step = min(float(initial_step), MAX_STEP)
        bracket = None

        while trials < budget:
            new_point, new_value, new_gradient, new_slope = phi(step)

            if not sufficient_decrease(step, new_value) or (
                trials > 1 and new_value >= value_prev
            ):
                bracket = (step_prev, value_prev, slope_prev,
                           step, new_value, new_slope)
                break

            if curvature(new_slope):
                return accept(step, new_point, new_value, new_gradient)

            if new_slope >= 0:
                bracket = (step, new_value, new_slope,
                           step_prev, value_prev, slope_prev)
                break

            if step >= MAX_STEP:
                return None

            step_prev, value_prev, slope_prev = step, new_value, new_slope
            step = min(step * EXPANSION_FACTOR, MAX_STEP)

        if bracket is None:
            return None

        # Zoom phase: lo always satisfies sufficient decrease and has the
        # lowest value seen inside the bracket
        lo, f_lo, d_lo, hi, f_hi, d_hi = bracket

        while trials < budget:
            width = hi - lo
            if abs(width) <= np.finfo(float).eps * max(abs(lo), abs(hi)):
                return None

            step = self._interpolate(lo, f_lo, d_lo, hi, f_hi, d_hi)
            new_point, new_value, new_gradient, new_slope = phi(step)

            if not sufficient_decrease(step, new_value) or new_value >= f_lo:
                hi, f_hi, d_hi = step, new_value, new_slope
                continue

            if curvature(new_slope):
                return accept(step, new_point, new_value, new_gradient)

            if new_slope * (hi - lo) >= 0:
                hi, f_hi, d_hi = lo, f_lo, d_lo
            lo, f_lo, d_lo = step, new_value, new_slope

        return None

    @staticmethod
    def _interpolate(lo, f_lo, d_lo, hi, f_hi, d_hi) -> float:
        """Cubic trial step inside the bracket, bisection as fallback."""
        left, right = min(lo, hi), max(lo, hi)
        margin = SAFEGUARD * (right - left)

        step = cubic_minimizer(lo, f_lo, d_lo, hi, f_hi, d_hi)
        if step is None or not left + margin <= step <= right - margin:
            step = 0.5 * (lo + hi)
        return step
