"""
Objective functions for PyQNMin.

Ready-made objectives that model trainers plug into the minimizer.

Objectives:
    L2Regularized: Adds an L2 penalty to any objective
    LogisticLoss: Binary logistic regression negative log-likelihood

Functions:
    train_logistic_regression: Fit an L2-regularized logistic regression
"""

from .regularization import L2Regularized
from .logistic import LogisticLoss, train_logistic_regression

__all__ = [
    "L2Regularized",
    "LogisticLoss",
    "train_logistic_regression",
]
