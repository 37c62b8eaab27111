"""
Limited-memory quasi-Newton (L-BFGS) minimizer for PyQNMin.

The driver owns the current iterate of a run and wires together the
curvature memory (search directions), the strong Wolfe line search (step
lengths) and the convergence monitor (stopping rules).

Abnormal terminations never raise: line-search exhaustion, evaluation
failures and iteration/evaluation bounds all produce a usable result plus an
:class:`~pyqnmin.core.Outcome` flag. Only invalid input raises, before the
first evaluation.
"""

import numpy as np
from typing import Callable, Optional

from ..core.config import MinimizerConfig
from ..core.objective import Objective, EvaluationError
from ..core.result import Outcome, MinimizeResult, IterationReport
from ..utils.validation import validate_point
from .convergence import ConvergenceMonitor
from .line_search import LineSearch, evaluate
from .memory import CurvatureMemory


class QNMinimizer:
    """
    Unconstrained L-BFGS minimizer.

    Parameters
    ----------
    config : MinimizerConfig, optional
        Minimizer settings (default: MinimizerConfig())
    **overrides
        Individual MinimizerConfig fields overriding ``config``

    Attributes
    ----------
    config : MinimizerConfig
        Settings used by every run

    Examples
    --------
    >>> from pyqnmin.core import FunctionObjective
    >>> objective = FunctionObjective(
    ...     lambda x: (x[0] - 1) ** 2 + (x[1] - 5) ** 2 + 10,
    ...     lambda x: np.array([2 * (x[0] - 1), 2 * (x[1] - 5)]),
    ...     dimension=2,
    ... )
    >>> result = QNMinimizer().minimize(objective)
    >>> result.converged
    True
    >>> np.round(result.point, 6)
    array([1., 5.])

    Notes
    -----
    Each call to :meth:`minimize` builds its own curvature memory, line
    search and monitor, so one QNMinimizer can serve independent runs (for
    example one per cross-validation fold) as long as each run has its own
    objective.

    Per iteration:

    1. direction from the curvature memory (steepest descent when empty)
    2. strong Wolfe line search along it
    3. move to the new point and record the curvature pair
    4. check the stopping rules

    When the line search fails, the memory is cleared and the search is
    retried once along the steepest-descent direction; a second failure ends
    the run with ``Outcome.LINE_SEARCH_EXHAUSTED``.
    """

    def __init__(self, config: Optional[MinimizerConfig] = None, **overrides):
        """Initialize QNMinimizer."""
        if config is None:
            config = MinimizerConfig(**overrides)
        elif overrides:
            config = config.replace(**overrides)

        if not isinstance(config, MinimizerConfig):
            raise TypeError(f"config must be MinimizerConfig, got {type(config)}")

        self.config = config

    def __repr__(self) -> str:
        return f"QNMinimizer({self.config})"

    def minimize(
        self,
        objective: Objective,
        initial_point: Optional[np.ndarray] = None,
        callback: Optional[Callable[[IterationReport], None]] = None
    ) -> MinimizeResult:
        """
        Minimize an objective function.

        Parameters
        ----------
        objective : Objective
            Function to minimize
        initial_point : array_like, optional
            Starting point. Defaults to ``config.initial_point`` and then to
            ``objective.initial_point()``.
        callback : callable, optional
            Called with an :class:`IterationReport` after every accepted
            iteration. Its return value is ignored.

        Returns
        -------
        MinimizeResult
            Best point found with its value, gradient and outcome flag

        Raises
        ------
        ValueError
            If the objective dimension is smaller than 1 or the initial point
            has the wrong length or non-finite entries
        """
        config = self.config

        n = objective.dimension()
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
            raise ValueError(f"Objective dimension must be a positive integer, got {n}")
        n = int(n)

        if initial_point is None:
            initial_point = config.initial_point
        if initial_point is None:
            initial_point = objective.initial_point()
        x = validate_point(initial_point, n, "initial_point")

        memory = CurvatureMemory(config.memory_size, n)
        line_search = LineSearch(config.c1, config.c2, config.max_line_search_trials)
        monitor = ConvergenceMonitor.from_config(config)

        try:
            f, g = evaluate(objective, x)
        except EvaluationError:
            return _result(x, float("nan"), None, Outcome.EVALUATION_FAILED, 0, 1)
        evaluations = 1

        if monitor.gradient_converged(g):
            return _result(x, f, g, Outcome.CONVERGED, 0, evaluations)

        iteration = 0
        while True:
            direction = memory.compute_direction(g)
            if not np.dot(direction, g) < 0:
                # Rounding broke the positive definiteness of the update
                memory.reset()
                direction = -g

            step = None
            for attempt in range(2):
                if attempt == 1:
                    if len(memory) == 0:
                        # The first attempt already was steepest descent
                        break
                    memory.reset()
                    direction = -g

                remaining = config.max_evaluations - evaluations
                if remaining <= 0:
                    break

                if len(memory) == 0:
                    initial_step = 1.0 / np.linalg.norm(direction)
                else:
                    initial_step = 1.0

                try:
                    step = line_search.search(
                        objective, x, direction, f, g,
                        initial_step=initial_step,
                        max_trials=remaining,
                    )
                except EvaluationError:
                    evaluations += line_search.evaluations
                    return _result(
                        x, f, g, Outcome.EVALUATION_FAILED, iteration, evaluations
                    )
                evaluations += line_search.evaluations

                if step is not None:
                    break

            if step is None:
                if evaluations >= config.max_evaluations:
                    outcome = Outcome.MAX_EVALUATIONS_REACHED
                else:
                    outcome = Outcome.LINE_SEARCH_EXHAUSTED
                return _result(x, f, g, outcome, iteration, evaluations)

            iteration += 1
            memory.update(step.point - x, step.gradient - g)

            previous_value = f
            x, f, g = step.point, step.value, step.gradient

            if callback is not None:
                callback(IterationReport(
                    iteration=iteration,
                    point=x.copy(),
                    value=f,
                    gradient=g.copy(),
                    direction=direction.copy(),
                    step_length=step.step_length,
                    evaluations=evaluations,
                ))

            if monitor.should_stop(iteration, previous_value, f, g):
                return _result(x, f, g, monitor.outcome, iteration, evaluations)

            if evaluations >= config.max_evaluations:
                return _result(
                    x, f, g, Outcome.MAX_EVALUATIONS_REACHED, iteration, evaluations
                )


def _result(point, value, gradient, outcome, iterations, evaluations) -> MinimizeResult:
    point = np.array(point, dtype=float)
    point.setflags(write=False)
    if gradient is not None:
        gradient = np.array(gradient, dtype=float)
        gradient.setflags(write=False)
    return MinimizeResult(
        point=point,
        value=float(value),
        gradient=gradient,
        outcome=outcome,
        iterations=iterations,
        evaluations=evaluations,
    )


def minimize(
    objective: Objective,
    config: Optional[MinimizerConfig] = None,
    callback: Optional[Callable[[IterationReport], None]] = None,
    **overrides
) -> MinimizeResult:
    """
    Minimize an objective with a one-off :class:`QNMinimizer`.

    Parameters
    ----------
    objective : Objective
        Function to minimize
    config : MinimizerConfig, optional
        Minimizer settings
    callback : callable, optional
        Per-iteration callback receiving an :class:`IterationReport`
    **overrides
        Individual MinimizerConfig fields, e.g. ``memory_size=5``

    Returns
    -------
    MinimizeResult
        Final point and outcome

    Examples
    --------
    >>> result = minimize(objective, max_iterations=50)  # doctest: +SKIP
    >>> result.outcome  # doctest: +SKIP
    <Outcome.CONVERGED: 'converged'>
    """
    return QNMinimizer(config, **overrides).minimize(objective, callback=callback)
