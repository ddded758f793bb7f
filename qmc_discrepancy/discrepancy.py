"""
Discrepancy Base Class
======================

A discrepancy measures how far the empirical distribution of a point set
P_n = {u_0, ..., u_{n-1}} in [0,1)^s deviates from the uniform distribution.
All the discrepancies in this package are L2-type discrepancies with a
closed-form expression of the structure

    D^2 = constant + (1/n) sum_i f(u_i) + (1/n^2) sum_i sum_j K(u_i, u_j)

where the kernel K is the reproducing kernel of a weighted Hilbert space.
The weights gamma_r, r = 0, ..., s-1, give the relative importance of each
coordinate; the default weights are all 1.

The double sum is symmetric in (i, j): implementations iterate over i < j
only, double the result, and account for the diagonal i = j through the
constant K(u, u) term.

Loss of precision
-----------------
For large n the closed-form expressions are differences of nearly equal
quantities. When the computed D^2 is negative, precision has been lost and
the result is meaningless. The kernels then return the sentinel
``PRECISION_LOST`` (-1.0) instead of a square root, except for the L2-star
discrepancy which returns 0.0.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, Tuple, Union

from .utils import PointSetLike, PointsLike, to_array

PRECISION_LOST = -1.0

GammaLike = Optional[Union[Sequence[float], np.ndarray]]


def is_precision_lost(value: float) -> bool:
    """Return True if ``value`` is a loss-of-precision sentinel."""
    return value < 0.0


def finish(disc2: float, sentinel: float = PRECISION_LOST) -> float:
    """Return sqrt(disc2), or ``sentinel`` when disc2 is negative."""
    if disc2 < 0.0:
        return sentinel
    return float(np.sqrt(disc2))


def pairwise_product_sum(
    points: np.ndarray,
    factor: Callable[[np.ndarray, np.ndarray], np.ndarray]
) -> float:
    """
    Compute sum_{i<j} prod_k factor(points[i], points[j])_k.

    Parameters
    ----------
    points : np.ndarray
        Point set of shape (n, s).
    factor : callable
        ``factor(x, Y)`` receives one point x of shape (s,) and the block Y
        of shape (m, s) of all later points, and returns the per-coordinate
        kernel factors of shape (m, s).

    Returns
    -------
    float
        The pairwise sum over i < j.

    Notes
    -----
    Time complexity: O(n^2 * s), memory O(n * s).
    """
    n = points.shape[0]
    total = 0.0
    for i in range(n - 1):
        total += np.prod(factor(points[i], points[i + 1:]), axis=1).sum()
    return float(total)


def pairwise_sum(
    T: np.ndarray,
    term: Callable[[float, np.ndarray], np.ndarray]
) -> float:
    """Compute sum_{i<j} term(T[i], T[j]) for a 1-D array T."""
    n = T.shape[0]
    total = 0.0
    for i in range(n - 1):
        total += term(T[i], T[i + 1:]).sum()
    return float(total)


class Discrepancy(ABC):
    """
    Base class of the discrepancy kernels.

    A discrepancy object holds n points in s dimensions and the weights
    gamma. The points may be bound at construction (or with
    ``set_points``) or supplied on each call to ``compute``.

    Parameters
    ----------
    points : array_like or point set, optional
        Point set of shape (n, s), or an object exposing ``points`` such as
        a ``Rank1Lattice``. If None, the points must be given to ``compute``.
    n : int, optional
        Number of points. Defaults to the number of rows of ``points``.
    s : int, optional
        Dimension. Defaults to the number of columns of ``points``.
    gamma : array_like, optional
        Weights, one per dimension (default: all ones).

    Attributes
    ----------
    points : np.ndarray or None
        The bound points.
    n : int or None
        Number of points.
    s : int or None
        Dimension.
    gamma : np.ndarray or None
        The bound weights.
    """

    def __init__(
        self,
        points: PointSetLike = None,
        n: Optional[int] = None,
        s: Optional[int] = None,
        gamma: GammaLike = None
    ):
        self.points = None
        self.n = n
        self.s = s
        self.gamma = None
        if points is not None:
            self.set_points(points, n, s)
        if gamma is not None:
            self.set_gamma(gamma)
        elif self.s is not None:
            self.gamma = self._default_gamma(self.s)

    def set_points(self, points: PointSetLike, n: Optional[int] = None, s: Optional[int] = None) -> None:
        """Bind a point set (array or point set object) to this discrepancy."""
        P = to_array(points)
        self.n = P.shape[0] if n is None else n
        self.s = P.shape[1] if s is None else s
        if self.n > P.shape[0] or self.s > P.shape[1]:
            raise ValueError(
                f"Point array of shape {P.shape} is too small for n={self.n}, s={self.s}"
            )
        self.points = P
        default = self._default_gamma(self.s)
        if self.gamma is None or len(self.gamma) < len(default):
            self.gamma = default

    def set_gamma(self, gamma: GammaLike) -> None:
        """Set the weights gamma."""
        self.gamma = np.asarray(gamma, dtype=np.float64)

    def get_gamma(self) -> Optional[np.ndarray]:
        return self.gamma

    def get_num_points(self) -> Optional[int]:
        return self.n

    def get_dimension(self) -> Optional[int]:
        return self.s

    def get_name(self) -> str:
        return type(self).__name__

    def _resolve(
        self,
        points: PointSetLike,
        n: Optional[int],
        s: Optional[int],
        gamma: GammaLike
    ) -> Tuple[np.ndarray, int, int, np.ndarray]:
        if points is None:
            if self.points is None:
                raise ValueError(f"{self.get_name()}: no points bound and none given")
            P = self.points
            if n is None:
                n = self.n
            if s is None:
                s = self.s
        else:
            P = to_array(points)
            if n is None:
                n = P.shape[0]
            if s is None:
                s = P.shape[1]

        if n < 1:
            raise ValueError(f"Number of points must be >= 1, got n={n}")
        if s < 1:
            raise ValueError(f"Dimension must be >= 1, got s={s}")
        if n > P.shape[0] or s > P.shape[1]:
            raise ValueError(
                f"Point array of shape {P.shape} is too small for n={n}, s={s}"
            )
        return P[:n, :s], n, s, self._resolve_gamma(gamma, s)

    def _default_gamma(self, s: int) -> np.ndarray:
        return np.ones(s)

    def _resolve_gamma(self, gamma: GammaLike, s: int) -> np.ndarray:
        if gamma is None:
            gamma = self.gamma
        if gamma is None:
            return self._default_gamma(s)
        gamma = np.asarray(gamma, dtype=np.float64)
        if len(gamma) < s:
            raise ValueError(f"gamma has length {len(gamma)}, need at least s={s}")
        return gamma[:s]

    def compute(
        self,
        points: PointSetLike = None,
        n: Optional[int] = None,
        s: Optional[int] = None,
        gamma: GammaLike = None
    ) -> float:
        """
        Compute the discrepancy of n points in s dimensions.

        Parameters
        ----------
        points : array_like or point set, optional
            Points of shape (n, s). Defaults to the bound points.
        n : int, optional
            Number of points (the first n rows are used).
        s : int, optional
            Dimension (the first s coordinates are used).
        gamma : array_like, optional
            Weights (default: the bound weights, else all ones).

        Returns
        -------
        float
            The discrepancy, or a loss-of-precision sentinel.
        """
        P, n, s, g = self._resolve(points, n, s, gamma)
        return self._compute(P, n, s, g)

    def compute_1d(
        self,
        T: PointsLike,
        n: Optional[int] = None,
        gamma: Optional[float] = None
    ) -> float:
        """
        Compute the discrepancy of n points in one dimension.

        Gives the same result as ``compute`` on the points reshaped to
        (n, 1), but is implemented directly for each variant.

        Parameters
        ----------
        T : array_like
            The n coordinates.
        n : int, optional
            Number of points (default: ``len(T)``).
        gamma : float, optional
            Weight of the single dimension (default: the first bound
            weight, else 1).
        """
        T = np.asarray(T, dtype=np.float64).ravel()
        if n is None:
            n = T.shape[0]
        if n < 1 or n > T.shape[0]:
            raise ValueError(f"Invalid number of points n={n} for array of length {T.shape[0]}")
        if gamma is None:
            gamma = 1.0 if self.gamma is None else float(self.gamma[0])
        return self._compute_1d(T[:n], n, float(gamma))

    def compute_point_set(self, point_set: PointSetLike, gamma: GammaLike = None) -> float:
        """
        Compute the discrepancy of a point set object.

        Point sets of dimension 1 go through the dedicated 1-D formula.
        Weights default to all ones.
        """
        P = to_array(point_set)
        n, s = P.shape
        g = self._default_gamma(s) if gamma is None else self._resolve_gamma(gamma, s)
        if s > 1:
            return self._compute(P, n, s, g)
        return self._compute_1d(P[:, 0], n, float(g[0]))

    @abstractmethod
    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        """Evaluate the formula on a resolved (n, s) array."""

    @abstractmethod
    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        """Evaluate the formula on a resolved 1-D array."""

    @staticmethod
    def sort(T: PointsLike, n: Optional[int] = None) -> np.ndarray:
        """Return the first n values of T sorted in increasing order."""
        T = np.asarray(T, dtype=np.float64).ravel()
        if n is None:
            n = T.shape[0]
        return np.sort(T[:n])

    def _format_gamma(self, count: Optional[int]) -> str:
        if self.gamma is None or count is None:
            return ""
        return "".join(f"  {g}" for g in self.gamma[:count])

    def format_points(self) -> str:
        lines = ["Points = ["]
        if self.points is not None:
            for row in self.points:
                lines.append(" [ " + ", ".join(str(x) for x in row) + " ]")
        lines.append(" ]")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return (f"{self.get_name()}:\n"
                f"n = {self.n},   dim = {self.s}\n"
                f"gamma = [{self._format_gamma(self.s)} ]\n")

