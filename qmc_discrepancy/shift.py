"""
Shift-Invariant Discrepancies
=============================

Weighted discrepancies associated with randomly shifted point sets,
expressed with Bernoulli polynomials B_k evaluated at the differences
{u_i - u_j} modulo 1. For a point set P_n in [0,1)^s they all have the form

    D^2 = -1 + (1/n^2) sum_i sum_j prod_r K_r({u_ir - u_jr})

with the one-dimensional kernels

    Shift1:      K_r(x) = 1 + gamma_r^2 B_2(x)
    Shift2:      K_r(x) = 1 + (gamma_r^2 / 2) B_2(x) - (gamma_r^4 / 12) B_4(x)
    ShiftBaker1: K_r(x) = 1 - [C1 (B_4(x) - B_4(y)) + C2 (7 B_4(x) - 2 B_4(y))
                               + C3 (B_6(x) - B_6(y))],   y = {x - 1/2}

where C1 = 4 gamma_r^2 / 3, C2 = gamma_r^4 / 9, C3 = 16 gamma_r^4 / 45.
ShiftBaker1 is the discrepancy of a randomly shifted point set folded by
the baker transformation x -> 1 - |2x - 1|.

Each pair (i, j) is evaluated once for i < j; the diagonal contributes
prod_r K_r(0) / n.

These formulas cost O(n^2 s). For rank-1 lattices, see ``lattice_disc``.

References
----------
[1] Hickernell, F.J. (1998). Lattice rules: how well do they measure up?
[2] Hickernell, F.J. (2002). Obtaining O(N^{-2+e}) convergence for lattice
    quadrature rules.
"""

import numpy as np
from typing import Tuple

from .discrepancy import Discrepancy, GammaLike, finish, pairwise_product_sum, pairwise_sum
from .utils import UNSIX, ArrayLike, bernoulli2, bernoulli4, bernoulli6, frac

# Bernoulli polynomial values at 0 and 1/2
B4_0 = -1.0 / 30.0
B4_HALF = 7.0 / 240.0
B6_0 = 1.0 / 42.0
B6_HALF = -31.0 / 1344.0


class DiscShift1(Discrepancy):
    """
    Shift-invariant discrepancy of order 1 (Bernoulli polynomial of degree 2).

    Parameters
    ----------
    points : array_like or point set, optional
        Point set of shape (n, s).
    n, s : int, optional
        Number of points and dimension.
    gamma : array_like, optional
        Weights gamma_r (default: all ones).
    """

    @staticmethod
    def set_c(gamma: GammaLike) -> np.ndarray:
        """Return C1 = gamma^2."""
        gamma = np.asarray(gamma, dtype=np.float64)
        return gamma * gamma

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        C1 = self.set_c(gamma)
        disc = np.prod(1.0 + C1 * UNSIX) / n
        total = pairwise_product_sum(P, lambda x, Y: 1.0 + C1 * bernoulli2(frac(x - Y)))
        disc += 2.0 * total / (n * n) - 1.0
        return finish(disc)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        C1 = float(self.set_c(gamma))
        disc = C1 * UNSIX / n
        total = pairwise_sum(T, lambda x, Y: C1 * bernoulli2(frac(x - Y)))
        disc += 2.0 * total / (n * n)
        return finish(disc)


class DiscShift2(Discrepancy):
    """
    Shift-invariant discrepancy of order 2 (Bernoulli polynomials of
    degrees 2 and 4).
    """

    @staticmethod
    def set_c(gamma: GammaLike) -> Tuple[np.ndarray, np.ndarray]:
        """Return C1 = gamma^2 / 2 and C2 = gamma^4 / 12."""
        gamma = np.asarray(gamma, dtype=np.float64)
        v = gamma * gamma
        return 0.5 * v, v * v / 12.0

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        C1, C2 = self.set_c(gamma)
        disc = np.prod(1.0 + C1 * UNSIX - C2 * B4_0) / n

        def factor(x, Y):
            u = frac(x - Y)
            return 1.0 + C1 * bernoulli2(u) - C2 * bernoulli4(u)

        disc += 2.0 * pairwise_product_sum(P, factor) / (n * n) - 1.0
        return finish(disc)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        C1, C2 = (float(c) for c in self.set_c(gamma))
        disc = (C1 * UNSIX - C2 * B4_0) / n

        def term(x, Y):
            u = frac(x - Y)
            return C1 * bernoulli2(u) - C2 * bernoulli4(u)

        disc += 2.0 * pairwise_sum(T, term) / (n * n)
        return finish(disc)


class DiscShiftBaker1(Discrepancy):
    """
    Discrepancy of a randomly shifted point set folded by the baker
    transformation (Bernoulli polynomials of degrees 4 and 6).
    """

    @staticmethod
    def set_c(gamma: GammaLike) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return C1 = 4 gamma^2 / 3, C2 = gamma^4 / 9 and C3 = 16 gamma^4 / 45."""
        gamma = np.asarray(gamma, dtype=np.float64)
        v = gamma * gamma
        C1 = v * 4.0 / 3.0
        v = v * v
        return C1, v / 9.0, v * 16.0 / 45.0

    @staticmethod
    def folded_term(u: ArrayLike, C1: ArrayLike, C2: ArrayLike, C3: ArrayLike) -> ArrayLike:
        """
        Return C1 (B4(u) - B4(v)) + C2 (7 B4(u) - 2 B4(v)) + C3 (B6(u) - B6(v))
        with v = {u - 1/2}.
        """
        v = frac(u - 0.5)
        pol1 = bernoulli4(u)
        pol2 = bernoulli4(v)
        return (C1 * (pol1 - pol2) + C2 * (7.0 * pol1 - 2.0 * pol2)
                + C3 * (bernoulli6(u) - bernoulli6(v)))

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        C1, C2, C3 = self.set_c(gamma)
        temp = (C1 * (B4_0 - B4_HALF) + C2 * (7.0 * B4_0 - 2.0 * B4_HALF)
                + C3 * (B6_0 - B6_HALF))
        disc = np.prod(1.0 - temp) / n
        total = pairwise_product_sum(
            P, lambda x, Y: 1.0 - self.folded_term(frac(x - Y), C1, C2, C3)
        )
        disc += 2.0 * total / (n * n) - 1.0
        return finish(disc)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        C1, C2, C3 = (float(c) for c in self.set_c(gamma))
        temp = (C1 * (B4_0 - B4_HALF) + C2 * (7.0 * B4_0 - 2.0 * B4_HALF)
                + C3 * (B6_0 - B6_HALF))
        disc = -temp / n
        total = -pairwise_sum(
            T, lambda x, Y: self.folded_term(frac(x - Y), C1, C2, C3)
        )
        disc += 2.0 * total / (n * n)
        return finish(disc)

