"""
Searches for Good Rank-1 Lattices
=================================

The searchers look for the generating vector a = (1, a_1, ..., a_{s-1}),
1 <= a_j < n, of a rank-1 lattice with n points that minimizes a given
discrepancy. The discrepancy is treated as an expensive objective
function: each candidate vector gives one lattice and one evaluation.

- ``Searcher``: all (n-1)^{s-1} vectors (exhaustive search), or k vectors
  drawn at random.
- ``SearcherCBC``: component-by-component construction. a_j is chosen
  for j = 1, ..., s-1 in turn, keeping a_1, ..., a_{j-1} fixed, which costs
  O(s n) evaluations instead of O(n^{s-1}).
- ``SearcherKorobov``: Korobov lattices a = (1, a, a^2, ..., a^{s-1}) mod n,
  so only the single integer a in [2, n-1] is searched.

The ``*_prime`` variants consider only components relatively prime to n.
When n is prime this restriction is empty; when n is a power of 2 it keeps
the odd components.

Candidates are compared with a strict ``<``, so the first candidate found
wins ties. A loss-of-precision sentinel (-1.0) returned by the discrepancy
takes part in the comparison like any other value.

Each searcher owns its random stream (a ``numpy.random.Generator``), so
searches run in parallel threads do not share state.
"""

import numpy as np
from itertools import product
from math import gcd
from typing import Iterator, Optional, Sequence, Tuple, Union

from .bigdisc import BigDiscShiftBaker1Lattice
from .discrepancy import Discrepancy
from .lattice import KorobovLattice, Rank1Lattice
from .utils import coprime_residues, is_power_of_two, is_prime

DEFAULT_SEED = 7654321

DiscLike = Union[Discrepancy, BigDiscShiftBaker1Lattice]


def odometer(n: int, s: int, values: Optional[Sequence[int]] = None) -> Iterator[Tuple[int, ...]]:
    """
    Enumerate the generating vectors (1, a_1, ..., a_{s-1}).

    Parameters
    ----------
    n : int
        Number of points.
    s : int
        Dimension.
    values : sequence of int, optional
        Values taken by each a_j (default: 1, ..., n-1).

    Yields
    ------
    tuple of int
        Generating vectors in lexicographic order, the last component
        varying fastest.

    Examples
    --------
    >>> list(odometer(3, 3))
    [(1, 1, 1), (1, 1, 2), (1, 2, 1), (1, 2, 2)]
    """
    if values is None:
        values = range(1, n)
    for tail in product(values, repeat=s - 1):
        yield (1,) + tail


def coprime_odometer(n: int, s: int) -> Iterator[Tuple[int, ...]]:
    """Enumerate the generating vectors whose components are relatively prime to n."""
    return odometer(n, s, coprime_residues(n))


class Searcher:
    """
    Exhaustive and random searches of rank-1 lattices.

    Parameters
    ----------
    disc : Discrepancy or BigDiscShiftBaker1Lattice
        The discrepancy to minimize. It fixes the number of points n, the
        maximal dimension and the weights. Kernels with a
        ``compute_generator`` method are evaluated directly from the
        generating vector; the others are given a ``Rank1Lattice``.
    prime_n : bool, optional
        True if n is prime (default: tested with ``is_prime(n)``).
    rng : numpy.random.Generator, optional
        Random stream for the random searches (default: a generator seeded
        with 7654321).
    verbose : bool, optional
        If True, print progress information (default: False).

    Attributes
    ----------
    best_val : float
        Smallest discrepancy found by the last search.
    best_as : np.ndarray
        Generating vector of the best lattice, with best_as[0] = 1.
    prime_n : bool
        True if n is prime.
    power2 : bool
        True if n is a power of 2.

    Examples
    --------
    >>> from qmc_discrepancy import DiscShift1Lattice
    >>> searcher = Searcher(DiscShift1Lattice(n=17, s=2), prime_n=True)
    >>> val = searcher.exhaust(2)
    >>> int(searcher.get_best_as()[0])
    1
    """

    def __init__(
        self,
        disc: DiscLike,
        prime_n: Optional[bool] = None,
        rng: Optional[np.random.Generator] = None,
        verbose: bool = False
    ):
        n = disc.get_num_points()
        s = disc.get_dimension()
        if n is None or s is None:
            raise ValueError(
                f"{disc.get_name()}: number of points and dimension must be set before searching"
            )
        self.disc = disc
        self.prime_n = is_prime(n) if prime_n is None else prime_n
        self.power2 = is_power_of_two(n)
        self.rng = np.random.default_rng(DEFAULT_SEED) if rng is None else rng
        self.verbose = verbose
        self.gamma = None
        self.best_val = np.inf
        self.best_as = np.zeros(s, dtype=np.int64)
        self.best_as[0] = 1

    def init_gen(self, seed: int) -> None:
        """
        Reseed the random stream of this searcher.

        Seeds 0 and 1 are replaced by 7654321.
        """
        if seed == 0 or seed == 1:
            seed = DEFAULT_SEED
        self.rng = np.random.default_rng(seed)

    def _next_int(self, low: int, high: int) -> int:
        """Uniform integer in [low, high]."""
        return int(self.rng.integers(low, high, endpoint=True))

    def _random_component(self, n: int, low: int, rel_prime: bool) -> int:
        if self.power2:
            y = self._next_int(low, n - 1)
            if rel_prime:
                y |= 1
            return y
        while True:
            y = self._next_int(low, n - 1)
            if not rel_prime or gcd(n, y) == 1:
                return y

    def _check_dimension(self, s: int) -> None:
        dim = self.disc.get_dimension()
        if s < 1 or s > dim:
            raise ValueError(f"Search dimension must be in [1, {dim}], got s={s}")

    def _start(self, s: int) -> int:
        self._check_dimension(s)
        self.gamma = self.disc.get_gamma()
        if len(self.best_as) < s:
            self.best_as = np.zeros(s, dtype=np.int64)
        self.best_as[0] = 1
        return self.disc.get_num_points()

    def _evaluate(self, a: Sequence[int], s: int) -> float:
        """Discrepancy of the rank-1 lattice with generating vector a."""
        if hasattr(self.disc, "compute_generator"):
            return self.disc.compute_generator(a, s)
        lat = Rank1Lattice(self.disc.get_num_points(), a, s)
        return self.disc.compute_point_set(lat, self.gamma)

    def _report(self, count: int, total: Optional[int], best: float) -> None:
        if self.verbose and count % 100 == 0:
            of = "" if total is None else f"/{total}"
            print(f"  Processed {count}{of} candidates, best = {best:.6e}")

    def _exhaust(self, s: int, rel_prime: bool) -> float:
        n = self._start(s)
        candidates = coprime_odometer(n, s) if rel_prime else odometer(n, s)
        self.best_val = np.inf

        if self.verbose:
            print(f"Exhaustive search: n = {n}, s = {s}, "
                  f"relatively prime components only: {rel_prime}")

        for count, y in enumerate(candidates, start=1):
            err = self._evaluate(y, s)
            if err < self.best_val:
                self.best_val = err
                self.best_as[1:s] = y[1:]
            self._report(count, None, self.best_val)

        if self.verbose:
            print(f"Best generating vector: a = {self.best_as[:s].tolist()}, "
                  f"discrepancy = {self.best_val:.6e}")
        return self.best_val

    def _random(self, s: int, k: int, rel_prime: bool) -> float:
        if k < 1:
            raise ValueError(f"Number of random candidates must be >= 1, got k={k}")
        n = self._start(s)
        self.best_val = np.inf
        y = np.ones(s, dtype=np.int64)

        if self.verbose:
            print(f"Random search: n = {n}, s = {s}, k = {k}, "
                  f"relatively prime components only: {rel_prime}")

        for count in range(1, k + 1):
            for j in range(1, s):
                y[j] = self._random_component(n, 1, rel_prime)
            err = self._evaluate(y, s)
            if err < self.best_val:
                self.best_val = err
                self.best_as[1:s] = y[1:]
            self._report(count, k, self.best_val)

        if self.verbose:
            print(f"Best generating vector: a = {self.best_as[:s].tolist()}, "
                  f"discrepancy = {self.best_val:.6e}")
        return self.best_val

    def exhaust(self, s: int) -> float:
        """
        Examine all (n-1)^{s-1} generating vectors in dimension s.

        Returns
        -------
        float
            The smallest discrepancy found.
        """
        return self._exhaust(s, False)

    def exhaust_prime(self, s: int) -> float:
        """Examine all generating vectors with components relatively prime to n."""
        if self.prime_n:
            # every a_j is relatively prime to n
            return self._exhaust(s, False)
        return self._exhaust(s, True)

    def random(self, s: int, k: int) -> float:
        """Examine k generating vectors drawn at random (with replacement)."""
        return self._random(s, k, False)

    def random_prime(self, s: int, k: int) -> float:
        """Examine k random generating vectors with components relatively prime to n."""
        if self.prime_n:
            return self._random(s, k, False)
        return self._random(s, k, True)

    def get_best_val(self) -> float:
        return self.best_val

    def get_best_as(self) -> np.ndarray:
        return self.best_as


class SearcherCBC(Searcher):
    """
    Component-by-component searches of rank-1 lattices.

    For j = 1, ..., s-1, the component a_j minimizing the discrepancy of
    the lattice in dimension j+1 is chosen, the previous components being
    kept fixed. The result is not guaranteed to be the best lattice in
    dimension s.

    Attributes
    ----------
    best_vals : np.ndarray
        best_vals[j] is the discrepancy of the constructed lattice in
        dimension j+1. best_vals[0] is the discrepancy of the one-dimensional
        lattice {i/n}.
    """

    def __init__(
        self,
        disc: DiscLike,
        prime_n: Optional[bool] = None,
        rng: Optional[np.random.Generator] = None,
        verbose: bool = False
    ):
        super().__init__(disc, prime_n, rng, verbose)
        self.best_vals = np.zeros(disc.get_dimension())

    def _start(self, s: int) -> int:
        n = super()._start(s)
        if len(self.best_vals) < s:
            self.best_vals = np.zeros(s)
        self.best_vals[0] = self._evaluate(self.best_as[:1], 1)
        return n

    def _choose(self, j: int, best: float, pos: int) -> None:
        self.best_as[j] = pos
        self.best_vals[j] = best
        if self.verbose:
            print(f"  a_{j} = {pos}, discrepancy = {best:.6e}")

    def _exhaust(self, s: int, rel_prime: bool) -> float:
        n = self._start(s)
        values = coprime_residues(n) if rel_prime else range(1, n)

        if self.verbose:
            print(f"CBC exhaustive search: n = {n}, s = {s}, "
                  f"relatively prime components only: {rel_prime}")

        for j in range(1, s):
            best = np.inf
            pos = -1
            for i in values:
                self.best_as[j] = i
                err = self._evaluate(self.best_as[:j + 1], j + 1)
                if err < best:
                    best = err
                    pos = i
            self._choose(j, best, pos)

        self.best_val = self.best_vals[s - 1]
        return self.best_val

    def _random(self, s: int, k: int, rel_prime: bool) -> float:
        n = self.disc.get_num_points()
        if k >= n:
            return self._exhaust(s, rel_prime)
        if k < 1:
            raise ValueError(f"Number of random candidates must be >= 1, got k={k}")
        n = self._start(s)

        if self.verbose:
            print(f"CBC random search: n = {n}, s = {s}, k = {k}, "
                  f"relatively prime components only: {rel_prime}")

        for j in range(1, s):
            best = np.inf
            pos = -1
            for _ in range(k):
                self.best_as[j] = self._random_component(n, 1, rel_prime)
                err = self._evaluate(self.best_as[:j + 1], j + 1)
                if err < best:
                    best = err
                    pos = int(self.best_as[j])
            self._choose(j, best, pos)

        self.best_val = self.best_vals[s - 1]
        return self.best_val

    def get_best_vals(self) -> np.ndarray:
        return self.best_vals


class SearcherKorobov(Searcher):
    """
    Exhaustive and random searches of Korobov lattices.

    The generating vector is (1, a, a^2, ..., a^{s-1}) mod n, and the
    generator a is searched in [2, n-1].

    Attributes
    ----------
    best_a : int
        Best generator a found, or -1 if no candidate was examined.
    """

    def __init__(
        self,
        disc: DiscLike,
        prime_n: Optional[bool] = None,
        rng: Optional[np.random.Generator] = None,
        verbose: bool = False
    ):
        super().__init__(disc, prime_n, rng, verbose)
        self.best_a = -1

    def calc_as(self, n: int, s: int, a: int) -> None:
        """Set best_as to (1, a, a^2, ..., a^{s-1}) mod n."""
        self.best_as[0] = 1
        for j in range(1, s):
            self.best_as[j] = (a * int(self.best_as[j - 1])) % n

    def _evaluate_korobov(self, n: int, a: int, s: int) -> float:
        lat = KorobovLattice(n, a, s)
        if hasattr(self.disc, "compute_generator"):
            return self.disc.compute_generator(lat.generating_vector, s)
        return self.disc.compute_point_set(lat, self.gamma)

    def _finish(self, n: int, s: int) -> float:
        if self.best_a > 0:
            self.calc_as(n, s, self.best_a)
        if self.verbose:
            print(f"Best generator: a = {self.best_a}, "
                  f"discrepancy = {self.best_val:.6e}")
        return self.best_val

    def _exhaust(self, s: int, rel_prime: bool) -> float:
        n = self._start(s)
        self.best_val = np.inf
        self.best_a = -1
        candidates = coprime_residues(n, 2) if rel_prime else range(2, n)

        if self.verbose:
            print(f"Searching {len(candidates)} candidate generators (n = {n}, s = {s})...")

        for count, a in enumerate(candidates, start=1):
            err = self._evaluate_korobov(n, a, s)
            if err < self.best_val:
                self.best_val = err
                self.best_a = a
            self._report(count, len(candidates), self.best_val)

        return self._finish(n, s)

    def _random(self, s: int, k: int, rel_prime: bool) -> float:
        n = self.disc.get_num_points()
        if k >= n or n < 3:
            return self._exhaust(s, rel_prime)
        if k < 1:
            raise ValueError(f"Number of random candidates must be >= 1, got k={k}")
        n = self._start(s)
        self.best_val = np.inf
        self.best_a = -1

        if self.verbose:
            print(f"Drawing {k} random generators (n = {n}, s = {s})...")

        for count in range(1, k + 1):
            a = self._random_component(n, 2, rel_prime)
            err = self._evaluate_korobov(n, a, s)
            if err < self.best_val:
                self.best_val = err
                self.best_a = a
            self._report(count, k, self.best_val)

        return self._finish(n, s)

    def get_best_a(self) -> int:
        return self.best_a
