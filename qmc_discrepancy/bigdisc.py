"""
Multi-Precision Discrepancies
=============================

For large n, the closed-form discrepancies are computed as the difference
of two nearly equal quantities of order 1, and double precision may lose
all significant digits (the computed D^2 becomes negative). The classes in
this module evaluate the same formulas with ``decimal.Decimal`` arithmetic
at a chosen working precision (34 significant digits by default, as in
IEEE 754 decimal128), and convert to float only at the very end.

Only the baker-folded shift discrepancy of rank-1 lattices is available
(``BigDiscShiftBaker1Lattice``). Its factors depend only on i/n and on the
weights, so they are tabulated once for all i = 0, ..., n-1; evaluating a
lattice then costs n*s multi-precision multiplications. This makes the
class usable as the objective of a lattice search.
"""

import numpy as np
from decimal import Context, Decimal, localcontext
from typing import List, Optional, Sequence

from .discrepancy import GammaLike, PRECISION_LOST
from .utils import PointSetLike

DECIMAL128_DIGITS = 34


class BigDiscrepancy:
    """
    Base class of the multi-precision discrepancies.

    Holds the per-dimension coefficients ``C1Big``, ``C2Big``, ``C3Big``,
    the table ``UBig[i] = i/n`` and the factor table ``FactorBig[i][r]``.

    Parameters
    ----------
    n : int
        Number of points.
    s : int
        Dimension.
    gamma : array_like, optional
        Weights, one per dimension (default: all ones).
    precision : int, optional
        Number of significant decimal digits (default: 34).
    """

    def __init__(
        self,
        n: int,
        s: int,
        gamma: GammaLike = None,
        precision: int = DECIMAL128_DIGITS
    ):
        if n < 1:
            raise ValueError(f"Number of points must be >= 1, got n={n}")
        if s < 1:
            raise ValueError(f"Dimension must be >= 1, got s={s}")
        if precision < 1:
            raise ValueError(f"precision must be >= 1, got {precision}")
        self.n = n
        self.s = s
        self.precision = precision
        self.context = Context(prec=precision)
        self.gamma = self._check_gamma(np.ones(s) if gamma is None else gamma)
        self.C1Big: List[Decimal] = []
        self.C2Big: List[Decimal] = []
        self.C3Big: List[Decimal] = []
        self.UBig: List[Decimal] = []
        self.FactorBig: List[List[Decimal]] = []

    def _check_gamma(self, gamma: GammaLike) -> np.ndarray:
        gamma = np.asarray(gamma, dtype=np.float64)
        if len(gamma) < self.s:
            raise ValueError(f"gamma has length {len(gamma)}, need at least s={self.s}")
        return gamma

    def set_u_big(self, n: int) -> None:
        """Precompute U[i] = i/n, i = 0, ..., n-1."""
        with localcontext(self.context):
            N = Decimal(n)
            self.UBig = [Decimal(i) / N for i in range(n)]

    def reserve_c_big(self, s: int) -> None:
        zero = Decimal(0)
        self.C1Big = [zero] * s
        self.C2Big = [zero] * s
        self.C3Big = [zero] * s

    def reserve_factor_big(self, n: int, s: int) -> None:
        zero = Decimal(0)
        self.FactorBig = [[zero] * s for _ in range(n)]

    def get_num_points(self) -> int:
        return self.n

    def get_dimension(self) -> int:
        return self.s

    def get_gamma(self) -> np.ndarray:
        return self.gamma

    def get_name(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        gam = "".join(f"  {g}" for g in self.gamma[:self.s])
        return (f"{self.get_name()}:\n"
                f"n = {self.n},   dim = {self.s}\n"
                f"gamma = [{gam} ]\n"
                f"precision = {self.precision} digits\n")


class BigDiscShiftBaker1(BigDiscrepancy):
    """
    Multi-precision discrepancy of a randomly shifted, baker-folded point
    set.

    Only the coefficients are provided here: C1 = 4 gamma^2 / 3,
    C2 = gamma^4 / 9, C3 = 16 gamma^4 / 45. The general O(n^2) formula is
    not available in multi-precision.
    """

    def set_c_big(self, gamma: np.ndarray, s: int) -> None:
        with localcontext(self.context):
            four_thirds = Decimal(4) / Decimal(3)
            one_ninth = Decimal(1) / Decimal(9)
            sixteen_45 = Decimal(16) / Decimal(45)
            for r in range(s):
                v = Decimal(float(gamma[r]))
                v = v * v
                self.C1Big[r] = v * four_thirds
                v = v * v
                self.C2Big[r] = v * one_ninth
                self.C3Big[r] = v * sixteen_45

    def compute(self, points: PointSetLike = None, n: Optional[int] = None, s: Optional[int] = None,
                gamma: GammaLike = None) -> float:
        raise NotImplementedError(
            f"{self.get_name()}: the general multi-precision formula is not "
            f"implemented; use BigDiscShiftBaker1Lattice.compute_generator"
        )


class BigDiscShiftBaker1Lattice(BigDiscShiftBaker1):
    """
    Multi-precision baker-folded shift discrepancy of rank-1 lattices.

    The factor table is computed at construction and recomputed by
    ``set_gamma``.

    Parameters
    ----------
    n : int
        Number of points of the lattices.
    s : int
        Maximal dimension.
    gamma : array_like, optional
        Weights (default: all ones).
    precision : int, optional
        Number of significant decimal digits (default: 34).

    Examples
    --------
    >>> big = BigDiscShiftBaker1Lattice(101, 2)
    >>> big.compute_generator([1, 40]) > 0.0
    True
    """

    def __init__(
        self,
        n: int,
        s: int,
        gamma: GammaLike = None,
        precision: int = DECIMAL128_DIGITS
    ):
        super().__init__(n, s, gamma, precision)
        self.set_u_big(n)
        self.reserve_c_big(s)
        self.set_c_big(self.gamma, s)
        self.reserve_factor_big(n, s)
        self.set_factor_big(n, s)

    def set_gamma(self, gamma: GammaLike) -> None:
        """Set the weights and recompute the coefficient and factor tables."""
        self.gamma = self._check_gamma(gamma)
        self.set_c_big(self.gamma, self.s)
        self.set_factor_big(self.n, self.s)

    def set_factor_big(self, n: int, s: int) -> None:
        """Precompute the factor for each i/n and each dimension."""
        for i in range(n):
            row = self.FactorBig[i]
            for r in range(s):
                row[r] = self.compute_factor(
                    self.UBig[i], self.C1Big[r], self.C2Big[r], self.C3Big[r]
                )

    def compute_factor(self, x: Decimal, C1: Decimal, C2: Decimal, C3: Decimal) -> Decimal:
        """
        Multi-precision version of ``DiscShiftBaker1Lattice.compute_factor``.
        """
        with localcontext(self.context):
            if x >= Decimal("0.5"):
                # v = x - 0.5
                pol1 = ((2 * x - Decimal("4.5")) * x + 3) * x - Decimal("0.5625")
                pol2 = (((-5 * x + 6) * x + 4) * -x + 6) * x - Decimal(31) / Decimal(24)
                temp = (4 * x - 6) * x + 1
                pol3 = Decimal("0.046875") * temp * temp * (4 * x - 3)
            else:
                # v = x + 0.5
                pol1 = (Decimal("1.5") - 2 * x) * x * x - Decimal("0.0625")
                pol2 = ((5 * x - 14) * x + 8) * x * x - Decimal(7) / Decimal(24)
                temp = (2 - 4 * x) * x + 1
                pol3 = -Decimal("0.046875") * temp * temp * (4 * x - 1)
            return C1 * pol1 + C2 * pol2 + C3 * pol3

    def compute_generator(self, a: Sequence[int], s: Optional[int] = None) -> float:
        """
        Compute the discrepancy of the rank-1 lattice with n points and
        generating vector ``a``.

        Parameters
        ----------
        a : sequence of int
            Generating vector.
        s : int, optional
            Dimension, at most the dimension given at construction
            (default: ``len(a)``).

        Returns
        -------
        float
            The discrepancy, or -1.0 if precision was lost even at the
            working precision.
        """
        if s is None:
            s = len(a)
        if s < 1 or s > self.s:
            raise ValueError(f"Dimension must be in [1, {self.s}], got s={s}")
        if len(a) < s:
            raise ValueError(f"Generating vector has length {len(a)}, need at least s={s}")
        n = self.n
        a = [int(x) % n for x in a[:s]]
        with localcontext(self.context):
            one = Decimal(1)
            total = Decimal(0)
            for i in range(n):
                prod = one
                for j in range(s):
                    prod *= one - self.FactorBig[(i * a[j]) % n][j]
                total += prod
            total = total / n - one
        disc = float(total)
        if disc < 0.0:
            # Lost all precision
            return PRECISION_LOST
        return float(np.sqrt(disc))
