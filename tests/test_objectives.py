"""
Unit tests for the ready-made objectives and the logistic regression trainer.
"""

import pytest
import numpy as np
from scipy.optimize import minimize as scipy_minimize
from pyqnmin.core import FunctionObjective, MinimizerConfig
from pyqnmin.objectives import (
    L2Regularized,
    LogisticLoss,
    train_logistic_regression,
)
from pyqnmin.utils import logit, sigmoid


def make_logistic_data(rng, n_samples=200, weights=(1.5, -2.0, 0.5), offset=0.3):
    X = rng.normal(size=(n_samples, len(weights)))
    p = sigmoid(X @ np.asarray(weights) + offset)
    y = (rng.uniform(size=n_samples) < p).astype(int)
    return X, y


def numerical_gradient(objective, x, h=1e-6):
    grad = np.zeros_like(x)
    for i in range(len(x)):
        e = np.zeros_like(x)
        e[i] = h
        grad[i] = (objective.value_at(x + e) - objective.value_at(x - e)) / (2 * h)
    return grad


class TestL2Regularized:
    """Tests for the L2 penalty wrapper."""

    def test_value_and_gradient(self):
        """Test f(x) + l2/2 ||x||^2 and its gradient."""
        base = FunctionObjective(lambda x: float(x @ x), lambda x: 2 * x, dimension=2)
        objective = L2Regularized(base, l2_cost=2.0)
        x = np.array([1.0, 2.0])

        assert objective.value_at(x) == 10.0
        np.testing.assert_array_equal(objective.gradient_at(x), [4.0, 8.0])
        assert objective.dimension() == 2

    def test_delegates_initial_point(self):
        """Test that the wrapped starting point is used."""
        base = FunctionObjective(
            lambda x: 0.0, lambda x: np.zeros(2), dimension=2, x0=[1.0, -1.0]
        )
        np.testing.assert_array_equal(
            L2Regularized(base, 1.0).initial_point(), [1.0, -1.0]
        )

    def test_invalid_arguments(self):
        """Test argument validation."""
        base = FunctionObjective(lambda x: 0.0, lambda x: np.zeros(1), dimension=1)
        with pytest.raises(TypeError):
            L2Regularized(lambda x: 0.0, 1.0)
        with pytest.raises(ValueError):
            L2Regularized(base, 0.0)


class TestLogisticLoss:
    """Tests for the logistic regression negative log-likelihood."""

    def test_value_at_zero(self):
        """Test that zero weights give log(2) per sample."""
        X = np.array([[1.0, 2.0], [-1.0, 0.5], [0.0, -3.0]])
        y = np.array([1, 0, 1])
        loss = LogisticLoss(X, y)
        assert loss.dimension() == 3
        assert np.isclose(loss.value_at(np.zeros(3)), np.log(2))

    def test_gradient_matches_finite_differences(self, rng):
        """Test the analytic gradient."""
        X, y = make_logistic_data(rng, n_samples=50)
        loss = LogisticLoss(X, y)
        for _ in range(3):
            w = rng.normal(size=loss.dimension())
            np.testing.assert_allclose(
                loss.gradient_at(w), numerical_gradient(loss, w),
                rtol=1e-5, atol=1e-7
            )

    def test_initial_offset_is_prior_log_odds(self):
        """Test that the offset starts at logit of the positive rate."""
        X = np.arange(8.0).reshape(4, 2)
        y = np.array([1, 0, 0, 0])
        w0 = LogisticLoss(X, y).initial_point()
        np.testing.assert_array_equal(w0[:2], [0.0, 0.0])
        assert np.isclose(w0[2], logit(0.25))

    def test_without_intercept(self):
        """Test the model without an offset parameter."""
        X = np.array([[1.0], [-1.0]])
        loss = LogisticLoss(X, np.array([1, 0]), fit_intercept=False)
        assert loss.dimension() == 1
        np.testing.assert_array_equal(loss.initial_point(), [0.0])

    def test_invalid_inputs(self):
        """Test input validation."""
        X = np.ones((4, 2))
        with pytest.raises(ValueError, match="both classes"):
            LogisticLoss(X, np.array([1, 1, 1, 1]))
        with pytest.raises(ValueError, match="invalid values"):
            LogisticLoss(X, np.array([0, 1, 2, 1]))
        with pytest.raises(ValueError, match="2D"):
            LogisticLoss(np.ones(4), np.array([0, 1, 0, 1]))
        with pytest.raises(ValueError, match="samples"):
            LogisticLoss(X, np.array([0, 1, 0]))
        with pytest.raises(ValueError, match="NaN"):
            LogisticLoss(np.full((2, 1), np.nan), np.array([0, 1]))


class TestTrainLogisticRegression:
    """Tests for train_logistic_regression."""

    def test_matches_scipy(self, rng):
        """Test the trained weights against scipy's L-BFGS-B."""
        X, y = make_logistic_data(rng)
        l2_cost = 0.1

        predict, weights, result = train_logistic_regression(X, y, l2_cost=l2_cost)
        assert result.converged

        objective = L2Regularized(LogisticLoss(X, y), l2_cost)
        reference = scipy_minimize(
            lambda w: (objective.value_at(w), objective.gradient_at(w)),
            np.zeros(4),
            jac=True,
            method="L-BFGS-B",
            options={"gtol": 1e-10, "ftol": 1e-15, "maxiter": 1000},
        )
        np.testing.assert_allclose(weights, reference.x, atol=1e-4)

    def test_predict(self, rng):
        """Test that predicted log-odds use the learned weights."""
        X, y = make_logistic_data(rng)
        predict, weights, _ = train_logistic_regression(X, y)

        X_new = rng.normal(size=(5, 3))
        np.testing.assert_allclose(predict(X_new), X_new @ weights[:3] + weights[3])

        with pytest.raises(ValueError):
            predict(np.ones((5, 2)))
        with pytest.raises(ValueError):
            predict(np.ones(3))

    def test_separable_with_regularization(self):
        """Test that regularization keeps separable data finite."""
        X = np.array([[2.0], [3.0], [-1.0], [-2.0]])
        y = np.array([1, 1, 0, 0])
        predict, weights, result = train_logistic_regression(X, y, l2_cost=0.01)

        assert result.converged
        assert np.all(np.isfinite(weights))
        log_odds = predict(X)
        assert np.all(log_odds[:2] > 0)
        assert np.all(log_odds[2:] < 0)

    def test_without_intercept(self, rng):
        """Test training without an offset."""
        X, y = make_logistic_data(rng, offset=0.0)
        predict, weights, result = train_logistic_regression(
            X, y, fit_intercept=False
        )
        assert result.converged
        assert weights.shape == (3,)
        np.testing.assert_allclose(predict(X), X @ weights)

    def test_warns_when_not_converged(self, rng):
        """Test the warning on an iteration-limited run."""
        X, y = make_logistic_data(rng)
        with pytest.warns(UserWarning, match="did not converge"):
            _, weights, result = train_logistic_regression(
                X, y, config=MinimizerConfig(max_iterations=1)
            )
        assert not result.converged
        assert np.all(np.isfinite(weights))
