"""
Discrepancies and Lattice Searches for Quasi-Monte Carlo Point Sets
===================================================================

This package computes closed-form L2 discrepancies of point sets in
[0,1)^s and uses them to search for good rank-1 lattices.

Main classes:
- DiscL2Star, DiscL2Symmetric, DiscL2Hickernell, DiscL2Unanchored:
  L2 discrepancies of arbitrary point sets
- DiscShift1, DiscShift2, DiscShiftBaker1: shift-invariant discrepancies
  (Bernoulli polynomial kernels), O(n^2) in general
- DiscShift1Lattice, DiscShift2Lattice, DiscShiftBaker1Lattice, Palpha:
  the same criteria for rank-1 lattices, in O(n)
- BigDiscShiftBaker1Lattice: multi-precision version for large n
- Searcher, SearcherCBC, SearcherKorobov: exhaustive, random and
  component-by-component lattice searches
- Rank1Lattice, KorobovLattice: lattice point sets
- DiscrepancyContainer: tables of discrepancy values

Reference:
    Hickernell, F.J. (1998). A generalized discrepancy and quadrature
    error bound.

License: MIT
"""

from .discrepancy import Discrepancy, PRECISION_LOST, is_precision_lost
from .l2 import DiscL2Star, DiscL2Symmetric, DiscL2Hickernell, DiscL2Unanchored
from .shift import DiscShift1, DiscShift2, DiscShiftBaker1
from .lattice_disc import (
    DiscShift1Lattice,
    DiscShift2Lattice,
    DiscShiftBaker1Lattice,
    Palpha,
    lattice_points,
)
from .bigdisc import BigDiscrepancy, BigDiscShiftBaker1, BigDiscShiftBaker1Lattice
from .lattice import Rank1Lattice, KorobovLattice
from .searcher import Searcher, SearcherCBC, SearcherKorobov, odometer, coprime_odometer
from .container import DiscrepancyContainer
from .utils import (
    is_prime,
    is_power_of_two,
    bernoulli_poly,
)

__version__ = "1.0.0"
__all__ = [
    "Discrepancy",
    "PRECISION_LOST",
    "is_precision_lost",
    "DiscL2Star",
    "DiscL2Symmetric",
    "DiscL2Hickernell",
    "DiscL2Unanchored",
    "DiscShift1",
    "DiscShift2",
    "DiscShiftBaker1",
    "DiscShift1Lattice",
    "DiscShift2Lattice",
    "DiscShiftBaker1Lattice",
    "Palpha",
    "lattice_points",
    "BigDiscrepancy",
    "BigDiscShiftBaker1",
    "BigDiscShiftBaker1Lattice",
    "Rank1Lattice",
    "KorobovLattice",
    "Searcher",
    "SearcherCBC",
    "SearcherKorobov",
    "odometer",
    "coprime_odometer",
    "DiscrepancyContainer",
    "is_prime",
    "is_power_of_two",
    "bernoulli_poly",
]
