"""
Utility functions for discrepancy computations and lattice searches.
"""

import numpy as np
from math import gcd
from typing import TYPE_CHECKING, List, Sequence, Union

if TYPE_CHECKING:
    from .lattice import Rank1Lattice

ArrayLike = Union[float, np.ndarray]
PointsLike = Union[np.ndarray, Sequence[float], Sequence[Sequence[float]]]
PointSetLike = Union[PointsLike, "Rank1Lattice"]

# Bernoulli polynomial constants
UNSIX = 1.0 / 6.0
UNTRENTE = 1.0 / 30.0
QUARAN = 1.0 / 42.0
DTIERS = 2.0 / 3.0
STIERS = 7.0 / 3.0
QTIERS = 14.0 / 3.0


def is_prime(n: int) -> bool:
    """Return True if n is prime (trial division)."""
    if n < 2:
        return False
    if n % 2 == 0:
        return n == 2
    i = 3
    while i * i <= n:
        if n % i == 0:
            return False
        i += 2
    return True


def is_power_of_two(n: int) -> bool:
    """Return True if n is a positive power of 2."""
    return n > 0 and (n & (n - 1)) == 0


def coprime_residues(n: int, start: int = 1) -> List[int]:
    """
    List the integers in [start, n-1] relatively prime to n.

    When n is a power of 2 the odd integers are returned directly.
    """
    if is_power_of_two(n):
        first = start | 1
        return list(range(first, n, 2))
    return [a for a in range(start, n) if gcd(n, a) == 1]


# Bernoulli polynomials, Horner form. Valid for scalars and numpy arrays.

def bernoulli2(x: ArrayLike) -> ArrayLike:
    """B_2(x) = x^2 - x + 1/6."""
    return x * (x - 1.0) + UNSIX


def bernoulli4(x: ArrayLike) -> ArrayLike:
    """B_4(x) = x^4 - 2x^3 + x^2 - 1/30."""
    return ((x - 2.0) * x + 1.0) * x * x - UNTRENTE


def bernoulli6(x: ArrayLike) -> ArrayLike:
    """B_6(x) = x^6 - 3x^5 + 5x^4/2 - x^2/2 + 1/42."""
    return (((x - 3.0) * x + 2.5) * x * x - 0.5) * x * x + QUARAN


def bernoulli8(x: ArrayLike) -> ArrayLike:
    """B_8(x) = x^8 - 4x^7 + 14x^6/3 - 7x^4/3 + 2x^2/3 - 1/30."""
    return ((((x - 4.0) * x + QTIERS) * x * x - STIERS) * x * x + DTIERS) * x * x - UNTRENTE


_BERNOULLI = {2: bernoulli2, 4: bernoulli4, 6: bernoulli6, 8: bernoulli8}


def bernoulli_poly(k: int, x: ArrayLike) -> ArrayLike:
    """
    Evaluate the Bernoulli polynomial B_k at x.

    Parameters
    ----------
    k : int
        Degree, one of {2, 4, 6, 8}.
    x : float or np.ndarray
        Evaluation point(s).

    Returns
    -------
    float or np.ndarray
        B_k(x).
    """
    try:
        return _BERNOULLI[k](x)
    except KeyError:
        raise ValueError(f"Bernoulli degree must be one of {sorted(_BERNOULLI)}, got {k}") from None


def frac(x: ArrayLike) -> ArrayLike:
    """Fractional part of a difference in (-1, 1), mapped to [0, 1)."""
    return np.where(x < 0.0, x + 1.0, x)


def as_points(points: PointsLike) -> np.ndarray:
    """
    Coerce a point array to a 2-D float64 array of shape (n, s).

    A 1-D array of length n is treated as n points in one dimension.
    """
    P = np.asarray(points, dtype=np.float64)
    if P.ndim == 1:
        P = P.reshape(-1, 1)
    if P.ndim != 2:
        raise ValueError(f"points must be a 1-D or 2-D array, got shape {P.shape}")
    return P


def to_array(point_set: PointSetLike) -> np.ndarray:
    """
    Extract the (n, s) array of points from a point set.

    Parameters
    ----------
    point_set : object or array_like
        Either an object exposing a ``points`` attribute (such as
        ``Rank1Lattice``) or an array of points.

    Returns
    -------
    np.ndarray
        Point set of shape (n, s).
    """
    if hasattr(point_set, "points"):
        return as_points(point_set.points)
    return as_points(point_set)
