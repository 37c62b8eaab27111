"""
Optimization algorithms for PyQNMin.

This module provides the limited-memory quasi-Newton minimizer and its
building blocks.

Components:
    Curvature memory with the L-BFGS two-loop recursion
    Strong Wolfe line search (bracketing and cubic zoom)
    Convergence monitor
    Minimizer driver

Functions:
    minimize: Minimize an objective with default or given settings
"""

from .memory import CurvatureMemory
from .line_search import LineSearch, LineSearchResult, cubic_minimizer, evaluate
from .convergence import ConvergenceMonitor
from .minimizer import QNMinimizer, minimize

__all__ = [
    "CurvatureMemory",
    "LineSearch",
    "LineSearchResult",
    "cubic_minimizer",
    "evaluate",
    "ConvergenceMonitor",
    "QNMinimizer",
    "minimize",
]
