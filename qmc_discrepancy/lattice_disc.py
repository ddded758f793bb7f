"""
Discrepancies of Rank-1 Lattices
================================

For a rank-1 lattice P_n = { {i a / n} : i = 0, ..., n-1 }, the set of
differences {u_i - u_j} modulo 1, for j fixed, is the lattice itself. The
double sum over all pairs in the shift-invariant discrepancies therefore
collapses to a single sum over the points:

    D^2 = -1 + (1/n) sum_i prod_r K_r(u_ir)

which costs O(n s) instead of O(n^2 s). The classes in this module compute
the discrepancies of ``shift`` with this simplification. They give correct
results only when the points form a full rank-1 lattice.

The P_alpha figure of merit of a lattice has the same structure:

    P_alpha = beta_0 { -1 + (1/n) sum_i prod_j [1 - (-1)^{alpha/2}
                       (2 pi beta_j)^alpha / alpha! B_alpha(u_ij)] }

References
----------
[1] Sloan, I.H. and Joe, S. (1994). Lattice Methods for Multiple Integration.
[2] Hickernell, F.J. (1998). Lattice rules: how well do they measure up?
"""

import numpy as np
from math import factorial, pi
from typing import Optional, Sequence

from .discrepancy import Discrepancy, GammaLike, finish
from .shift import DiscShift1, DiscShift2, DiscShiftBaker1
from .utils import ArrayLike, PointSetLike, PointsLike, bernoulli2, bernoulli4, bernoulli_poly

TRENTEUN24 = 31.0 / 24.0
SEPT24 = 7.0 / 24.0


def lattice_points(n: int, a: Sequence[int], s: Optional[int] = None) -> np.ndarray:
    """
    Return the points {i * a / n}, i = 0, ..., n-1, as an (n, s) array.

    The products i * a_r are reduced modulo n in integer arithmetic.
    """
    if s is None:
        s = len(a)
    if len(a) < s:
        raise ValueError(f"Generating vector has length {len(a)}, need at least s={s}")
    a = np.array([int(x) % n for x in a[:s]], dtype=np.int64)
    i = np.arange(n, dtype=np.int64)[:, np.newaxis]
    return ((i * a) % n) / n


class LatticeMixin:
    """Evaluate a lattice discrepancy directly from its generating vector."""

    def compute_generator(
        self,
        a: Sequence[int],
        s: Optional[int] = None,
        n: Optional[int] = None,
        gamma: GammaLike = None
    ) -> float:
        """
        Compute the discrepancy of the rank-1 lattice with generating
        vector ``a``.

        Parameters
        ----------
        a : sequence of int
            Generating vector (a_0 = 1 by convention).
        s : int, optional
            Dimension (default: ``len(a)``).
        n : int, optional
            Number of points (default: the bound number of points).
        gamma : array_like, optional
            Weights (default: the bound weights, else all ones).
        """
        if n is None:
            n = self.n
        if n is None:
            raise ValueError(f"{self.get_name()}: number of points not set")
        return self.compute(lattice_points(n, a, s), gamma=gamma)


class DiscShift1Lattice(LatticeMixin, DiscShift1):
    """
    Shift-invariant discrepancy of order 1 for the points of a rank-1
    lattice.
    """

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        C1 = self.set_c(gamma)
        disc = np.prod(1.0 + C1 * bernoulli2(P), axis=1).sum() / n - 1.0
        return finish(disc)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        C1 = float(self.set_c(gamma))
        disc = C1 * bernoulli2(T).sum() / n
        return finish(disc)


class DiscShift2Lattice(LatticeMixin, DiscShift2):
    """
    Shift-invariant discrepancy of order 2 for the points of a rank-1
    lattice.

    The 1-D form returns 0.0 when the computed value is not positive.
    """

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        C1, C2 = self.set_c(gamma)
        factors = 1.0 + C1 * bernoulli2(P) - C2 * bernoulli4(P)
        disc = np.prod(factors, axis=1).sum() / n - 1.0
        return finish(disc)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        C1, C2 = (float(c) for c in self.set_c(gamma))
        disc = (C1 * bernoulli2(T) - C2 * bernoulli4(T)).sum() / n
        if disc <= 0.0:
            return 0.0
        return float(np.sqrt(disc))


class DiscShiftBaker1Lattice(LatticeMixin, DiscShiftBaker1):
    """
    Discrepancy of a randomly shifted rank-1 lattice folded by the baker
    transformation.

    The Bernoulli polynomial combination of ``DiscShiftBaker1`` is expanded
    on each half of [0, 1) (``compute_factor``).
    """

    @staticmethod
    def compute_factor(x: ArrayLike, C1: ArrayLike, C2: ArrayLike, C3: ArrayLike) -> ArrayLike:
        """
        Return C1 (B4(x) - B4(v)) + C2 (7 B4(x) - 2 B4(v)) + C3 (B6(x) - B6(v))
        with v = {x - 1/2}, for x in [0, 1).

        Parameters
        ----------
        x : float or np.ndarray
            Coordinates in [0, 1).
        C1, C2, C3 : float or np.ndarray
            Weight coefficients (broadcast against x).

        Returns
        -------
        float or np.ndarray
            The factor for each coordinate.
        """
        x = np.asarray(x, dtype=np.float64)
        upper = x >= 0.5

        # v = x - 0.5
        pol1_up = -0.5625 + x * (3.0 - x * (4.5 - 2.0 * x))
        pol2_up = -TRENTEUN24 + x * (6.0 - x * (4.0 + x * (6.0 - 5.0 * x)))
        temp = 1.0 + x * (-6.0 + 4.0 * x)
        pol3_up = 0.046875 * temp * temp * (4.0 * x - 3.0)

        # v = x + 0.5
        pol1_lo = -0.0625 + x * x * (1.5 - 2.0 * x)
        pol2_lo = -SEPT24 + x * x * (8.0 - x * (14.0 - 5.0 * x))
        temp = 1.0 + x * (2.0 - 4.0 * x)
        pol3_lo = -0.046875 * temp * temp * (4.0 * x - 1.0)

        pol1 = np.where(upper, pol1_up, pol1_lo)
        pol2 = np.where(upper, pol2_up, pol2_lo)
        pol3 = np.where(upper, pol3_up, pol3_lo)
        return C1 * pol1 + C2 * pol2 + C3 * pol3

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        C1, C2, C3 = self.set_c(gamma)
        factors = 1.0 - self.compute_factor(P, C1, C2, C3)
        disc = np.prod(factors, axis=1).sum() / n - 1.0
        # Negative: all precision lost
        return finish(disc)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        C1, C2, C3 = (float(c) for c in self.set_c(gamma))
        disc = -self.folded_term(T, C1, C2, C3).sum() / n
        return finish(disc)


class Palpha(LatticeMixin, Discrepancy):
    """
    P_alpha figure of merit of a lattice, for even alpha in {2, 4, 6, 8}.

    The weights ``beta`` have s + 1 components: ``beta[0]`` multiplies the
    whole sum and ``beta[j]`` weights coordinate j - 1. The value returned
    is P_alpha itself (not a square root).

    Parameters
    ----------
    alpha : int
        Smoothness parameter, one of {2, 4, 6, 8}.
    points : array_like or point set, optional
        Lattice points of shape (n, s).
    n, s : int, optional
        Number of points and dimension.
    beta : array_like, optional
        Weights beta_0, ..., beta_s (default: all ones).

    Examples
    --------
    >>> from qmc_discrepancy.lattice import Rank1Lattice
    >>> p2 = Palpha(2, Rank1Lattice(101, [1, 40]))
    >>> p2.compute() > 0.0
    True
    """

    VALID_ALPHAS = (2, 4, 6, 8)

    def __init__(
        self,
        alpha: int,
        points: PointSetLike = None,
        n: Optional[int] = None,
        s: Optional[int] = None,
        beta: GammaLike = None
    ):
        self.set_alpha(alpha)
        super().__init__(points, n, s, beta)

    def set_alpha(self, alpha: int) -> None:
        if alpha not in self.VALID_ALPHAS:
            raise ValueError(
                f"alpha must be one of {self.VALID_ALPHAS}, got {alpha}"
            )
        self.alpha = alpha

    def set_beta(self, beta: GammaLike) -> None:
        """Set the weights beta_0, ..., beta_s."""
        self.set_gamma(beta)

    def _default_gamma(self, s: int) -> np.ndarray:
        return np.ones(s + 1)

    def _resolve_gamma(self, gamma: GammaLike, s: int) -> np.ndarray:
        if gamma is None:
            gamma = self.gamma
        if gamma is None:
            return self._default_gamma(s)
        gamma = np.asarray(gamma, dtype=np.float64)
        if len(gamma) < s + 1:
            raise ValueError(f"beta has length {len(gamma)}, need at least s+1={s + 1}")
        return gamma[:s + 1]

    def _factors(self, beta: np.ndarray) -> np.ndarray:
        # (-1)^{alpha/2} (2 pi beta_j)^alpha / alpha!
        sign = -1.0 if (self.alpha // 2) % 2 == 1 else 1.0
        return sign * (2.0 * pi * beta) ** self.alpha / factorial(self.alpha)

    def _compute(self, P: np.ndarray, n: int, s: int, beta: np.ndarray) -> float:
        C = self._factors(beta[1:s + 1])
        total = np.prod(1.0 - C * bernoulli_poly(self.alpha, P), axis=1).sum()
        return float(beta[0] * (total / n - 1.0))

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        beta0 = self._resolve_gamma(None, 1)[0]
        C = self._factors(np.array([gamma]))[0]
        return float(-beta0 * C * bernoulli_poly(self.alpha, T).sum() / n)

    def compute_1d(self, T: PointsLike, n: Optional[int] = None, gamma: Optional[float] = None) -> float:
        """
        Compute P_alpha of n points in one dimension.

        ``gamma`` is beta_1 (default: the bound beta_1, else 1); beta_0 is
        taken from the bound weights, else 1.
        """
        T = np.asarray(T, dtype=np.float64).ravel()
        if n is None:
            n = T.shape[0]
        if n < 1 or n > T.shape[0]:
            raise ValueError(f"Invalid number of points n={n} for array of length {T.shape[0]}")
        if gamma is None:
            gamma = self._resolve_gamma(None, 1)[1]
        return self._compute_1d(T[:n], n, float(gamma))

    def compute_point_set(self, point_set: PointSetLike, gamma: GammaLike = None) -> float:
        return self.compute(point_set, gamma=gamma)

    def __str__(self) -> str:
        return (f"{self.get_name()}:\n"
                f"n = {self.n},   dim = {self.s}\n"
                f"gamma = [{self._format_gamma(None if self.s is None else self.s + 1)} ]\n"
                f"alpha = {self.alpha}\n")
