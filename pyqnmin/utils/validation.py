"""
Validation functions for PyQNMin.

This module provides functions for validating minimizer parameters, points
and training data before any objective evaluation takes place.
"""

import numpy as np
from typing import Optional, List


def validate_positive(
    value: float,
    param_name: str = "value"
) -> None:
    """
    Validate that a value is positive.

    Parameters
    ----------
    value : float
        Value to validate
    param_name : str, optional
        Name of parameter for error messages

    Raises
    ------
    TypeError
        If value is not a number
    ValueError
        If value is not positive

    Examples
    --------
    >>> validate_positive(1e-6, "gradient_tolerance")  # No error
    >>> validate_positive(-1.0, "gradient_tolerance")  # Raises ValueError
    """
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise TypeError(f"{param_name} must be a number, got {type(value)}")

    if not value > 0:
        raise ValueError(f"{param_name} must be positive, got {value}")


def validate_non_negative_int(
    value: int,
    param_name: str = "value",
    minimum: int = 0
) -> None:
    """
    Validate that a value is an integer no smaller than ``minimum``.

    Parameters
    ----------
    value : int
        Value to validate
    param_name : str, optional
        Name of parameter for error messages
    minimum : int, optional
        Smallest accepted value (default: 0)

    Raises
    ------
    TypeError
        If value is not an integer (booleans are rejected)
    ValueError
        If value is smaller than ``minimum``

    Examples
    --------
    >>> validate_non_negative_int(10, "memory_size")  # No error
    >>> validate_non_negative_int(0, "max_iterations", minimum=1)  # Raises ValueError
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{param_name} must be an integer, got {type(value)}")

    if value < minimum:
        raise ValueError(f"{param_name} must be >= {minimum}, got {value}")


def validate_wolfe_constants(c1: float, c2: float) -> None:
    """
    Validate the line-search constants.

    The strong Wolfe conditions need 0 < c1 < c2 < 1.

    Parameters
    ----------
    c1 : float
        Sufficient-decrease constant
    c2 : float
        Curvature constant

    Raises
    ------
    ValueError
        If the constants are out of order or outside (0, 1)

    Examples
    --------
    >>> validate_wolfe_constants(1e-4, 0.9)  # No error
    >>> validate_wolfe_constants(0.9, 1e-4)  # Raises ValueError
    """
    validate_positive(c1, "c1")
    validate_positive(c2, "c2")
    if not c1 < c2 < 1:
        raise ValueError(
            f"Wolfe constants must satisfy 0 < c1 < c2 < 1, got c1={c1}, c2={c2}"
        )


def validate_point(
    point,
    dimension: int,
    param_name: str = "point"
) -> np.ndarray:
    """
    Validate a point and return it as a fresh 1D float array.

    Parameters
    ----------
    point : array_like
        Candidate point
    dimension : int
        Expected length
    param_name : str, optional
        Name of parameter for error messages

    Returns
    -------
    ndarray
        Copy of ``point`` with dtype float64

    Raises
    ------
    ValueError
        If the point is not 1D, has the wrong length or holds NaN/Inf values

    Examples
    --------
    >>> validate_point([0.0, 1.0], 2)
    array([0., 1.])
    >>> validate_point([0.0], 2)  # Raises ValueError
    """
    arr = np.array(point, dtype=float)

    if arr.ndim != 1:
        raise ValueError(f"{param_name} must be 1D, got shape {arr.shape}")

    if arr.shape[0] != dimension:
        raise ValueError(
            f"{param_name} has length {arr.shape[0]}, expected {dimension}"
        )

    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{param_name} contains NaN or infinite values")

    return arr


def validate_labels(
    labels: np.ndarray,
    allow_values: Optional[List] = None
) -> None:
    """
    Validate label array.

    Parameters
    ----------
    labels : ndarray
        Array of labels to validate
    allow_values : list, optional
        List of allowed label values (default: None, allows any)

    Raises
    ------
    TypeError
        If labels is not a numpy array
    ValueError
        If labels contain invalid values

    Examples
    --------
    >>> labels = np.array([0, 1, 1, 0])
    >>> validate_labels(labels, allow_values=[0, 1])  # No error

    >>> labels = np.array([0, 1, 2])
    >>> validate_labels(labels, allow_values=[0, 1])  # Raises ValueError
    """
    if not isinstance(labels, np.ndarray):
        raise TypeError(f"Labels must be numpy array, got {type(labels)}")

    if allow_values is not None:
        unique_values = np.unique(labels)
        invalid = set(unique_values.tolist()) - set(allow_values)
        if invalid:
            raise ValueError(f"Labels contain invalid values: {invalid}")
