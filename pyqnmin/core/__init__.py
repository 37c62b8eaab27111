"""
Core data structures for PyQNMin.

This module contains the fundamental types shared by the minimizer and its
callers:
- The objective function interface
- Minimizer configuration
- Run results and per-iteration reports

Classes:
    Objective: Abstract objective (dimension, value, gradient)
    FunctionObjective: Objective built from plain callables
    EvaluationError: NaN/Inf returned by an objective
    MinimizerConfig: Validated minimizer settings
    Outcome: Termination reason of a run
    MinimizeResult: Final point plus outcome flag
    IterationReport: Per-iteration callback payload
"""

from .objective import Objective, FunctionObjective, EvaluationError
from .config import MinimizerConfig
from .result import Outcome, MinimizeResult, IterationReport

__all__ = [
    "Objective",
    "FunctionObjective",
    "EvaluationError",
    "MinimizerConfig",
    "Outcome",
    "MinimizeResult",
    "IterationReport",
]
