"""
Rank-1 and Korobov Lattice Point Sets
=====================================

A rank-1 lattice with n points in s dimensions is defined by an integer
generating vector a = (a_0, a_1, ..., a_{s-1}):

    P_n = { ({i*a_0/n}, {i*a_1/n}, ..., {i*a_{s-1}/n}) : i = 0, 1, ..., n-1 }

where {x} denotes the fractional part. By convention a_0 = 1, so the first
coordinate of point i is simply i/n.

A Korobov lattice is the special case

    a = (1, a, a^2, ..., a^{s-1}) mod n

determined by the single integer generator a.

These classes are the point sets consumed by the discrepancy kernels and
built repeatedly by the lattice searchers.

References
----------
[1] Korobov, N.M. (1959). The approximate computation of multiple integrals.
[2] Sloan, I.H. and Joe, S. (1994). Lattice Methods for Multiple Integration.
"""

import numpy as np
from typing import Iterator, Optional, Sequence


class Rank1Lattice:
    """
    Rank-1 lattice point set.

    Parameters
    ----------
    n : int
        Number of points.
    a : sequence of int
        Generating vector. Components are reduced modulo n; negative
        components are mapped into [0, n).
    s : int, optional
        Dimension. Only the first s components of ``a`` are used.
        Defaults to ``len(a)``.

    Attributes
    ----------
    n : int
        Number of points.
    s : int
        Dimension.
    generating_vector : np.ndarray
        The generating vector reduced modulo n, shape (s,).
    points : np.ndarray
        Point set of shape (n, s) in [0, 1)^s.

    Examples
    --------
    >>> lat = Rank1Lattice(8, [1, 3])
    >>> lat.points[1]
    array([0.125, 0.375])
    """

    def __init__(self, n: int, a: Sequence[int], s: Optional[int] = None):
        if n < 1:
            raise ValueError(f"Number of points must be >= 1, got n={n}")
        if s is None:
            s = len(a)
        if s < 1:
            raise ValueError(f"Dimension must be >= 1, got s={s}")
        if len(a) < s:
            raise ValueError(
                f"Generating vector has length {len(a)}, need at least s={s}"
            )

        self.n = int(n)
        self.s = int(s)
        self.generating_vector = np.array(
            [int(a[j]) % self.n for j in range(self.s)], dtype=np.int64
        )
        self._points = None

    def get_num_points(self) -> int:
        return self.n

    def get_dimension(self) -> int:
        return self.s

    def get_as(self) -> np.ndarray:
        """Return the generating vector (reduced modulo n)."""
        return self.generating_vector

    @property
    def points(self) -> np.ndarray:
        """
        Generate the lattice point set.

        Coordinates are computed from the integer products i*a_r mod n, so
        every coordinate is an exact multiple of 1/n.

        Returns
        -------
        np.ndarray
            Point set of shape (n, s) in [0, 1)^s.
        """
        if self._points is None:
            i = np.arange(self.n, dtype=np.int64)[:, np.newaxis]
            self._points = ((i * self.generating_vector) % self.n) / self.n
        return self._points

    def get_coordinate(self, i: int, j: int) -> float:
        """Return coordinate j of point i."""
        if not (0 <= i < self.n and 0 <= j < self.s):
            raise IndexError(f"Point ({i}, {j}) outside lattice of shape ({self.n}, {self.s})")
        return (i * int(self.generating_vector[j]) % self.n) / self.n

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.points)

    def __len__(self) -> int:
        return self.n

    def info(self) -> dict:
        """Return a dictionary with lattice information."""
        return {
            "type": "Rank1",
            "dimension": self.s,
            "num_points": self.n,
            "generating_vector": self.generating_vector.tolist(),
        }

    def __repr__(self) -> str:
        return (f"Rank1Lattice(n={self.n}, s={self.s}, "
                f"a={self.generating_vector.tolist()})")


class KorobovLattice(Rank1Lattice):
    """
    Korobov lattice with generating vector (1, a, a^2, ..., a^{s-1}) mod n.

    Parameters
    ----------
    n : int
        Number of points (should be prime for best results).
    a : int
        The generator.
    s : int
        Dimension.

    Attributes
    ----------
    generator : int
        The generator a.

    Examples
    --------
    >>> lat = KorobovLattice(17, 5, 3)
    >>> lat.generating_vector.tolist()
    [1, 5, 8]
    """

    def __init__(self, n: int, a: int, s: int):
        self.generator = int(a)
        super().__init__(n, self._compute_generating_vector(n, a, s), s)

    @staticmethod
    def _compute_generating_vector(n: int, a: int, s: int) -> np.ndarray:
        """
        Compute the generating vector (1, a, a^2, ..., a^{s-1}) mod n.

        Note: z_0 = 1, so gcd(n, z_0) = 1 always holds.

        Parameters
        ----------
        n : int
            Number of points.
        a : int
            The generator.
        s : int
            Dimension.

        Returns
        -------
        np.ndarray
            Generating vector of shape (s,).
        """
        z = np.zeros(s, dtype=np.int64)
        power = 1 % n
        for j in range(s):
            z[j] = power
            power = (power * a) % n
        return z

    def info(self) -> dict:
        """Return a dictionary with lattice information."""
        info = super().info()
        info["type"] = "Korobov"
        info["generator"] = self.generator
        return info

    def __repr__(self) -> str:
        return f"KorobovLattice(n={self.n}, s={self.s}, generator={self.generator})"
