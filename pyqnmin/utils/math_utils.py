"""
Mathematical utility functions for PyQNMin.

This module provides the small vector and probability helpers shared by the
minimizer and the bundled objectives, in particular the numerically stable
log-odds transformations used by logistic-regression losses.
"""

import numpy as np
from typing import Union

# Type alias for array-like inputs
ArrayLike = Union[float, np.ndarray]


def logit(p: ArrayLike) -> ArrayLike:
    """
    Compute log-odds (logit) transformation.

    Maps probabilities from [0, 1] to log-odds in (-∞, ∞):
        logit(p) = log(p / (1 - p))

    Parameters
    ----------
    p : float or array_like
        Probability value(s) in [0, 1]

    Returns
    -------
    float or ndarray
        Log-odds value(s)

    Examples
    --------
    >>> logit(0.5)
    0.0
    >>> logit(0.9)
    2.197...

    Notes
    -----
    - logit(0) = -∞
    - logit(1) = ∞
    - logit(0.5) = 0
    """
    p = np.asarray(p)
    with np.errstate(divide='ignore'):
        return np.log(p / (1 - p))


def sigmoid(x: ArrayLike) -> ArrayLike:
    """
    Compute logistic sigmoid (inverse logit) transformation.

    Maps log-odds from (-∞, ∞) to probabilities in [0, 1]:
        sigmoid(x) = 1 / (1 + exp(-x))

    Parameters
    ----------
    x : float or array_like
        Log-odds value(s)

    Returns
    -------
    float or ndarray
        Probability value(s) in [0, 1]

    Examples
    --------
    >>> sigmoid(0.0)
    0.5
    >>> sigmoid(np.array([-2.197, 0.0, 2.197]))
    array([0.1..., 0.5, 0.9...])

    Notes
    -----
    Only the exponential of a non-positive number is ever evaluated, so the
    result is finite for any finite input.
    """
    x = np.asarray(x, dtype=float)
    # exp(-|x|) never overflows
    z = np.exp(-np.abs(x))
    return np.where(x >= 0, 1 / (1 + z), z / (1 + z))


def neg_log_sigmoid(x: ArrayLike) -> ArrayLike:
    """
    Compute -log(sigmoid(x)) in a numerically stable way.

    This is equivalent to log(1 + exp(-x)) and is the per-sample loss of
    binary logistic regression.

    Parameters
    ----------
    x : float or array_like
        Input value(s)

    Returns
    -------
    float or ndarray
        -log(sigmoid(x))

    Examples
    --------
    >>> neg_log_sigmoid(0.0)
    0.693...
    >>> neg_log_sigmoid(10.0)
    4.5...e-05

    Notes
    -----
    For x >= 0: log(1 + exp(-x))
    For x < 0: -x + log(1 + exp(x))
    """
    x = np.asarray(x, dtype=float)
    return np.maximum(-x, 0) + np.log1p(np.exp(-np.abs(x)))


def inf_norm(v: np.ndarray) -> float:
    """
    Infinity norm (largest absolute component) of a vector.

    Parameters
    ----------
    v : ndarray
        Input vector

    Returns
    -------
    float
        max_i |v_i|, or 0.0 for an empty vector

    Examples
    --------
    >>> inf_norm(np.array([1.0, -3.0, 2.0]))
    3.0
    """
    v = np.asarray(v, dtype=float)
    if v.size == 0:
        return 0.0
    return float(np.max(np.abs(v)))


def all_finite(*values: ArrayLike) -> bool:
    """Return True when every scalar or array argument is free of NaN/Inf."""
    return all(bool(np.all(np.isfinite(v))) for v in values)
