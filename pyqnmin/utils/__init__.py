"""
Utility functions for PyQNMin.

This module provides helper functions used across the package.

Categories:
    Mathematical utilities (logit, sigmoid, norms)
    Validation functions

Functions:
    logit: Compute log-odds
    sigmoid: Compute inverse logit
    neg_log_sigmoid: Stable logistic loss
    inf_norm: Largest absolute vector component
    all_finite: NaN/Inf check over several values
"""

from .math_utils import (
    logit,
    sigmoid,
    neg_log_sigmoid,
    inf_norm,
    all_finite,
)
from .validation import (
    validate_positive,
    validate_non_negative_int,
    validate_wolfe_constants,
    validate_point,
    validate_labels,
)

__all__ = [
    # Math utilities
    "logit",
    "sigmoid",
    "neg_log_sigmoid",
    "inf_norm",
    "all_finite",
    # Validation functions
    "validate_positive",
    "validate_non_negative_int",
    "validate_wolfe_constants",
    "validate_point",
    "validate_labels",
]
