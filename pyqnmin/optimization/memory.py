"""
Limited-history curvature memory for PyQNMin.

The memory keeps the most recent position/gradient difference pairs
(s, y) of a minimization run and turns them into a quasi-Newton search
direction with the L-BFGS two-loop recursion, approximating the action of
the inverse Hessian without forming any matrix.

Storage is a fixed-capacity ring buffer of shape (m, n), so memory use is
O(m * n) for the whole run regardless of the iteration count.
"""

import numpy as np
from typing import Iterator, Tuple

from ..utils.validation import validate_non_negative_int


class CurvatureMemory:
    """
    Bounded FIFO of curvature pairs with the two-loop recursion.

    Parameters
    ----------
    capacity : int
        Maximum number of pairs kept (m). 0 disables the memory, which turns
        every direction into steepest descent.
    dimension : int
        Length n of every stored vector

    Attributes
    ----------
    capacity : int
        Maximum number of pairs kept

    Examples
    --------
    >>> memory = CurvatureMemory(capacity=5, dimension=2)
    >>> memory.compute_direction(np.array([1.0, -2.0]))
    array([-1.,  2.])
    >>> memory.update(np.array([0.1, 0.0]), np.array([0.2, 0.0]))
    True
    >>> len(memory)
    1

    Notes
    -----
    Pairs with y.s <= 0 would make the inverse Hessian approximation
    indefinite; :meth:`update` skips them and leaves the stored set
    unchanged.
    """

    def __init__(self, capacity: int, dimension: int):
        """Initialize CurvatureMemory."""
        validate_non_negative_int(capacity, "capacity")
        validate_non_negative_int(dimension, "dimension", minimum=1)

        self.capacity = int(capacity)
        self.dimension = int(dimension)

        self._s = np.zeros((self.capacity, self.dimension))
        self._y = np.zeros((self.capacity, self.dimension))
        self._rho = np.zeros(self.capacity)
        # slot of the next insertion; the oldest pair when the buffer is full
        self._head = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return (
            f"CurvatureMemory(capacity={self.capacity}, "
            f"dimension={self.dimension}, n_pairs={self._count})"
        )

    def _slots(self) -> Iterator[int]:
        """Buffer indices from the oldest to the newest pair."""
        start = (self._head - self._count) % self.capacity if self.capacity else 0
        for k in range(self._count):
            yield (start + k) % self.capacity

    def pairs(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """
        Iterate over stored (s, y) pairs from the oldest to the newest.

        Yields
        ------
        s : ndarray
            Copy of the position difference
        y : ndarray
            Copy of the gradient difference
        """
        for i in self._slots():
            yield self._s[i].copy(), self._y[i].copy()

    def update(self, s: np.ndarray, y: np.ndarray) -> bool:
        """
        Record a curvature pair, evicting the oldest one when full.

        Parameters
        ----------
        s : ndarray
            Position difference x_k - x_{k-1}
        y : ndarray
            Gradient difference g_k - g_{k-1}

        Returns
        -------
        bool
            True if the pair was stored; False if it was skipped because the
            memory has no capacity or y.s is not positive
        """
        s = np.asarray(s, dtype=float)
        y = np.asarray(y, dtype=float)
        if s.shape != (self.dimension,) or y.shape != (self.dimension,):
            raise ValueError(
                f"Curvature pair must have shape ({self.dimension},), "
                f"got {s.shape} and {y.shape}"
            )

        ys = float(np.dot(y, s))
        if self.capacity == 0 or not ys > 0:
            return False

        self._s[self._head] = s
        self._y[self._head] = y
        self._rho[self._head] = 1.0 / ys
        self._head = (self._head + 1) % self.capacity
        self._count = min(self._count + 1, self.capacity)
        return True

    def reset(self) -> None:
        """Discard every stored pair."""
        self._head = 0
        self._count = 0

    def compute_direction(self, gradient: np.ndarray) -> np.ndarray:
        """
        Compute the quasi-Newton search direction -H g.

        Parameters
        ----------
        gradient : ndarray
            Gradient at the current point

        Returns
        -------
        ndarray
            Search direction. Without stored pairs this is exactly
            -gradient.

        Notes
        -----
        Two-loop recursion: a backward pass over the pairs (newest to
        oldest) computes alpha_i = rho_i s_i.q and q -= alpha_i y_i; q is
        then scaled by gamma = s.y / y.y of the newest pair; a forward pass
        (oldest to newest) applies q += (alpha_i - rho_i y_i.q) s_i.
        """
        g = np.asarray(gradient, dtype=float)
        if self._count == 0:
            return -g

        slots = list(self._slots())
        alpha = np.zeros(len(slots))
        q = g.copy()

        for k in reversed(range(len(slots))):
            i = slots[k]
            alpha[k] = self._rho[i] * np.dot(self._s[i], q)
            q -= alpha[k] * self._y[i]

        newest = slots[-1]
        yy = float(np.dot(self._y[newest], self._y[newest]))
        if yy > np.finfo(float).tiny:
            gamma = 1.0 / (self._rho[newest] * yy)
        else:
            gamma = 1.0
        q *= gamma

        for k, i in enumerate(slots):
            beta = self._rho[i] * np.dot(self._y[i], q)
            q += (alpha[k] - beta) * self._s[i]

        return -q
