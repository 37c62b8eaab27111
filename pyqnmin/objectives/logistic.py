"""
Logistic regression objective for PyQNMin.

Binary logistic regression is the simplest maximum-entropy model: it learns
weights w and an offset b such that sigmoid(x.w + b) estimates the
probability of the positive class, by minimizing the negative
log-likelihood (cross-entropy) of the training labels.
"""

import numpy as np
from typing import Tuple, Callable, Optional
import warnings

from ..core import Objective, MinimizerConfig, MinimizeResult
from ..optimization import QNMinimizer
from ..utils import logit, sigmoid, neg_log_sigmoid, validate_labels
from .regularization import L2Regularized


class LogisticLoss(Objective):
    """
    Mean negative log-likelihood of a binary logistic regression model.

    Parameters
    ----------
    features : ndarray
        Feature matrix of shape (n_samples, n_features)
    labels : ndarray
        Binary labels (0 or 1) of shape (n_samples,)
    fit_intercept : bool, optional
        Whether the last parameter is an offset (default: True)

    Attributes
    ----------
    n_samples : int
        Number of training samples
    n_features : int
        Number of features (excluding the offset)

    Examples
    --------
    >>> X = np.array([[2.0], [3.0], [-1.0], [-2.0]])
    >>> y = np.array([1, 1, 0, 0])
    >>> loss = LogisticLoss(X, y)
    >>> loss.dimension()
    2
    >>> loss.value_at(np.zeros(2))
    0.693...

    Notes
    -----
    With z = X w + b and s = 2y - 1, the loss is

        L(w, b) = mean(-log(sigmoid(s * z)))

    and its gradient is X^T (sigmoid(z) - y) / n_samples (with a column of
    ones for the offset). Both are computed with the numerically stable
    helpers in :mod:`pyqnmin.utils.math_utils`.
    """

    def __init__(
        self,
        features: np.ndarray,
        labels: np.ndarray,
        fit_intercept: bool = True
    ):
        """Initialize LogisticLoss."""
        features = np.asarray(features, dtype=float)
        labels = np.asarray(labels)

        if features.ndim != 2:
            raise ValueError(
                f"features must be 2D (n_samples × n_features), got shape {features.shape}"
            )
        if labels.ndim != 1:
            raise ValueError(f"labels must be 1D, got shape {labels.shape}")
        if features.shape[0] != labels.shape[0]:
            raise ValueError(
                f"features has {features.shape[0]} samples, "
                f"but labels has {labels.shape[0]}"
            )
        if features.shape[0] == 0:
            raise ValueError("features must not be empty")
        if not np.all(np.isfinite(features)):
            raise ValueError("features contain NaN or infinite values")

        validate_labels(labels, allow_values=[0, 1])
        labels = labels.astype(float)

        if not 0 < labels.sum() < len(labels):
            raise ValueError("labels must contain both classes (0 and 1)")

        if fit_intercept:
            features = np.hstack([features, np.ones((features.shape[0], 1))])

        self.fit_intercept = fit_intercept
        self.n_samples = features.shape[0]
        self.n_features = features.shape[1] - int(fit_intercept)
        self._design = features
        self._labels = labels
        self._signs = 2.0 * labels - 1.0

    def dimension(self) -> int:
        return self._design.shape[1]

    def initial_point(self) -> np.ndarray:
        """Zero weights; the offset starts at the log-odds of the class prior."""
        w0 = np.zeros(self.dimension())
        if self.fit_intercept:
            w0[-1] = logit(np.mean(self._labels))
        return w0

    def value_at(self, point: np.ndarray) -> float:
        z = self._design @ point
        return float(np.sum(neg_log_sigmoid(self._signs * z)) / self.n_samples)

    def gradient_at(self, point: np.ndarray) -> np.ndarray:
        z = self._design @ point
        residual = sigmoid(z) - self._labels
        return self._design.T @ residual / self.n_samples

    def __repr__(self) -> str:
        return (
            f"LogisticLoss(n_samples={self.n_samples}, "
            f"n_features={self.n_features}, fit_intercept={self.fit_intercept})"
        )


def train_logistic_regression(
    features: np.ndarray,
    labels: np.ndarray,
    l2_cost: Optional[float] = 1.0,
    fit_intercept: bool = True,
    config: Optional[MinimizerConfig] = None
) -> Tuple[Callable[[np.ndarray], np.ndarray], np.ndarray, MinimizeResult]:
    """
    Train an L2-regularized binary logistic regression model.

    Parameters
    ----------
    features : ndarray
        Training features, shape (n_samples, n_features)
    labels : ndarray
        Binary labels (0 or 1), shape (n_samples,)
    l2_cost : float or None, optional
        Weight of the L2 penalty l2_cost / 2 * ||w||^2 (default: 1.0).
        None trains without regularization.
    fit_intercept : bool, optional
        Whether to learn an offset (default: True)
    config : MinimizerConfig, optional
        Minimizer settings (default: MinimizerConfig())

    Returns
    -------
    predict_func : callable
        Maps a feature matrix (n_trials, n_features) to log-odds (n_trials,)
    weights : ndarray
        Learned parameters; the offset is the last element when
        ``fit_intercept`` is True
    result : MinimizeResult
        Full minimizer result, including the outcome flag

    Examples
    --------
    >>> X = np.array([[2.0], [3.0], [0.5], [-1.0], [-2.0], [0.0]])
    >>> y = np.array([1, 1, 0, 0, 0, 1])
    >>> predict, weights, result = train_logistic_regression(X, y)
    >>> log_odds = predict(np.array([[4.0], [-4.0]]))
    >>> bool(log_odds[0] > log_odds[1])
    True

    Notes
    -----
    A warning is issued when the minimizer stops without converging; the
    returned weights are still the best parameters found.
    """
    objective = LogisticLoss(features, labels, fit_intercept=fit_intercept)
    if l2_cost is not None:
        objective = L2Regularized(objective, l2_cost)

    result = QNMinimizer(config).minimize(objective)

    if not result.converged:
        warnings.warn(
            f"Logistic regression training did not converge: {result.message}"
        )

    weights = np.array(result.point)
    n_features = weights.shape[0] - int(fit_intercept)

    def predict_func(new_features: np.ndarray) -> np.ndarray:
        """Log-odds of the positive class for each row of features."""
        new_features = np.asarray(new_features, dtype=float)
        if new_features.ndim != 2 or new_features.shape[1] != n_features:
            raise ValueError(
                f"features must have shape (n_trials, {n_features}), "
                f"got {new_features.shape}"
            )
        log_odds = new_features @ weights[:n_features]
        if fit_intercept:
            log_odds = log_odds + weights[-1]
        return log_odds

    return predict_func, weights, result
