"""
L2 Discrepancies
================

Unweighted L2 discrepancies of a point set P_n = {u_0, ..., u_{n-1}} in
[0,1)^s, with u_ik the k-th coordinate of point i.

L2-star discrepancy (Warnock's formula):

    D^2 = (1/3)^s - (2/n) sum_i prod_k (1 - u_ik^2)/2
          + (1/n^2) sum_i sum_j prod_k (1 - max(u_ik, u_jk))

In one dimension this is the Cramér–von Mises statistic.

L2-symmetric discrepancy:

    D^2 = (4/3)^s - (2/n) sum_i prod_k (1 + 2u_ik - 2u_ik^2)
          + (2^s/n^2) sum_i sum_j prod_k (1 - |u_ik - u_jk|)

Modified L2 (Hickernell) discrepancy:

    D^2 = (4/3)^s - (2^{1-s}/n) sum_i prod_k (3 - u_ik^2)
          + (1/n^2) sum_i sum_j prod_k (2 - max(u_ik, u_jk))

Unanchored L2 discrepancy:

    D^2 = (1/12)^s + (1/n)(1/n - 2^{1-s}) sum_i prod_k u_ik (1 - u_ik)
          + (2/n^2) sum_{i<j} prod_k (min(u_ik, u_jk) - u_ik u_jk)

The weights gamma are ignored by these discrepancies.

References
----------
[1] Warnock, T.T. (1972). Computational investigations of low-discrepancy
    point sets.
[2] Hickernell, F.J. (1998). A generalized discrepancy and quadrature error
    bound. Math. Comp. 67, 299-322.
"""

import numpy as np

from .discrepancy import Discrepancy, finish, pairwise_product_sum, pairwise_sum

RAC3 = 1.73205080756887729352  # sqrt(3)


class DiscL2Star(Discrepancy):
    """
    L2-star discrepancy.

    When precision is lost (negative D^2), this discrepancy returns 0.0
    rather than the -1.0 sentinel used by the other variants.

    Examples
    --------
    >>> round(DiscL2Star().compute_1d([0.5]), 6)  # sqrt(1/12)
    0.288675
    """

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        disc = -0.5 ** (s - 1) * np.prod((1.0 - P) * (1.0 + P), axis=1).sum() / n
        total = np.prod(1.0 - P, axis=1).sum()
        sum2 = pairwise_product_sum(P, lambda x, Y: 1.0 - np.maximum(x, Y))
        disc += (total + 2.0 * sum2) / (n * n)
        disc += (1.0 / 3.0) ** s
        return finish(disc, sentinel=0.0)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        # Cramér–von Mises statistic on the sorted sample
        v = np.sort(T) - (np.arange(n) + 0.5) / n
        W2 = np.dot(v, v) + 1.0 / (12.0 * n)
        return float(np.sqrt(W2 / n))


class DiscL2Symmetric(Discrepancy):
    """
    L2-symmetric discrepancy.

    The general form returns -1.0 on loss of precision; the 1-D form
    returns 0.0.
    """

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        u = 0.5 - P
        disc = -2.0 * np.prod(1.5 - 2.0 * u * u, axis=1).sum() / n
        sum2 = pairwise_product_sum(P, lambda x, Y: 1.0 - np.abs(x - Y))
        disc += (n + 2.0 * sum2) * 2.0 ** s / (n * n)
        disc += (4.0 / 3.0) ** s
        return finish(disc)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        disc = -4.0 * np.dot(T, 1.0 - T) / n
        disc -= 4.0 * pairwise_sum(T, lambda x, Y: np.abs(x - Y)) / (n * n)
        disc += 4.0 / 3.0
        return finish(disc, sentinel=0.0)


class DiscL2Hickernell(Discrepancy):
    """
    Modified L2 discrepancy of Hickernell.

    In one dimension it coincides with the L2-star discrepancy.
    """

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        disc = -0.5 ** (s - 1) * np.prod((RAC3 - P) * (RAC3 + P), axis=1).sum() / n
        total = np.prod(2.0 - P, axis=1).sum()
        sum2 = pairwise_product_sum(P, lambda x, Y: 2.0 - np.maximum(x, Y))
        disc += (total + 2.0 * sum2) / (n * n)
        disc += (4.0 / 3.0) ** s
        return finish(disc)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        disc = np.dot(T, T) / n
        sum2 = pairwise_sum(T, np.maximum)
        disc -= (T.sum() + 2.0 * sum2) / (n * n)
        disc += 1.0 / 3.0
        return finish(disc)


class DiscL2Unanchored(Discrepancy):
    """Unanchored L2 discrepancy."""

    def _compute(self, P: np.ndarray, n: int, s: int, gamma: np.ndarray) -> float:
        total = np.prod(P * (1.0 - P), axis=1).sum()
        disc = total / n * (1.0 / n - 0.5 ** (s - 1))
        sum2 = pairwise_product_sum(P, lambda x, Y: np.minimum(x, Y) - x * Y)
        disc += 2.0 * sum2 / (n * n)
        disc += (1.0 / 12.0) ** s
        return finish(disc)

    def _compute_1d(self, T: np.ndarray, n: int, gamma: float) -> float:
        disc = -(1.0 - 1.0 / n) * np.dot(T, 1.0 - T) / n
        sum2 = pairwise_sum(T, lambda x, Y: np.minimum(x, Y) - x * Y)
        disc += 2.0 * sum2 / (n * n)
        disc += 1.0 / 12.0
        return finish(disc)
