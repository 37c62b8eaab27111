"""
PyQNMin: limited-memory quasi-Newton minimization for model training

An unconstrained L-BFGS minimizer for smooth, differentiable objective
functions, used to fit the parameters of exponential-family models such as
maximum-entropy and logistic regression classifiers.

The toolkit provides:
- Objective interface (dimension, value, gradient)
- Curvature memory with the L-BFGS two-loop recursion
- Strong Wolfe line search
- Convergence monitoring with structured outcomes
- L2-regularized logistic regression objective and trainer

Reference: Nocedal, J. and Wright, S. J. (2006). "Numerical Optimization",
2nd ed., Chapters 3 and 7.
"""

__version__ = "1.0.0"
__author__ = "PyQNMin Contributors"
__license__ = "MIT"

# Import core classes
from .core import (
    Objective,
    FunctionObjective,
    EvaluationError,
    MinimizerConfig,
    Outcome,
    MinimizeResult,
    IterationReport,
)

# Import the minimizer and its components
from .optimization import (
    QNMinimizer,
    minimize,
    CurvatureMemory,
    LineSearch,
    ConvergenceMonitor,
)

# Import objectives
from .objectives import (
    L2Regularized,
    LogisticLoss,
    train_logistic_regression,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Core classes
    "Objective",
    "FunctionObjective",
    "EvaluationError",
    "MinimizerConfig",
    "Outcome",
    "MinimizeResult",
    "IterationReport",
    # Minimizer
    "QNMinimizer",
    "minimize",
    "CurvatureMemory",
    "LineSearch",
    "ConvergenceMonitor",
    # Objectives
    "L2Regularized",
    "LogisticLoss",
    "train_logistic_regression",
]
