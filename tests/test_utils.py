"""Tests for number-theory helpers and Bernoulli polynomials."""

import numpy as np
import pytest

from qmc_discrepancy.utils import (
    as_points,
    bernoulli2,
    bernoulli4,
    bernoulli6,
    bernoulli8,
    bernoulli_poly,
    coprime_residues,
    frac,
    is_power_of_two,
    is_prime,
    to_array,
)
from qmc_discrepancy.lattice import Rank1Lattice


class TestNumberTheory:
    """Tests for primality and coprime residues."""

    def test_is_prime(self):
        """Test primality on small integers."""
        primes = {2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47}
        for n in range(50):
            assert is_prime(n) == (n in primes)
        assert is_prime(4093)
        assert not is_prime(4095)

    def test_is_power_of_two(self):
        """Test detection of powers of 2."""
        assert [n for n in range(1, 70) if is_power_of_two(n)] == [1, 2, 4, 8, 16, 32, 64]
        assert not is_power_of_two(0)

    def test_coprime_residues_power_of_two(self):
        """Test that only odd residues are kept when n is a power of 2."""
        assert coprime_residues(16) == [1, 3, 5, 7, 9, 11, 13, 15]
        assert coprime_residues(16, 2) == [3, 5, 7, 9, 11, 13, 15]

    def test_coprime_residues_composite(self):
        """Test residues relatively prime to a composite n."""
        assert coprime_residues(15) == [1, 2, 4, 7, 8, 11, 13, 14]

    def test_coprime_residues_prime(self):
        """Test that all non-zero residues are kept when n is prime."""
        assert coprime_residues(13) == list(range(1, 13))


class TestBernoulli:
    """Tests for Bernoulli polynomials."""

    def test_values_at_zero_and_half(self):
        """Test known values of B_k at 0 and 1/2."""
        assert bernoulli2(0.0) == pytest.approx(1.0 / 6.0)
        assert bernoulli2(0.5) == pytest.approx(-1.0 / 12.0)
        assert bernoulli4(0.0) == pytest.approx(-1.0 / 30.0)
        assert bernoulli4(0.5) == pytest.approx(7.0 / 240.0)
        assert bernoulli6(0.0) == pytest.approx(1.0 / 42.0)
        assert bernoulli6(0.5) == pytest.approx(-31.0 / 1344.0)
        assert bernoulli8(0.0) == pytest.approx(-1.0 / 30.0)

    def test_symmetry(self):
        """Test B_k(1 - x) = B_k(x) for even k."""
        x = np.linspace(0.0, 1.0, 11)
        for k in (2, 4, 6, 8):
            np.testing.assert_allclose(bernoulli_poly(k, 1.0 - x), bernoulli_poly(k, x), atol=1e-14)

    def test_zero_mean(self):
        """Test that B_k integrates to zero over [0, 1]."""
        x = (np.arange(20000) + 0.5) / 20000
        for k in (2, 4, 6, 8):
            assert np.mean(bernoulli_poly(k, x)) == pytest.approx(0.0, abs=1e-8)

    def test_invalid_degree(self):
        """Test that odd or large degrees are rejected."""
        with pytest.raises(ValueError):
            bernoulli_poly(3, 0.5)


class TestArrays:
    """Tests for point array helpers."""

    def test_frac(self):
        """Test that negative differences are moved into [0, 1)."""
        np.testing.assert_allclose(frac(np.array([-0.25, 0.0, 0.75])), [0.75, 0.0, 0.75])

    def test_as_points_1d(self):
        """Test that a 1-D array becomes a column."""
        assert as_points([0.1, 0.2, 0.3]).shape == (3, 1)

    def test_as_points_rejects_3d(self):
        """Test that 3-D arrays are rejected."""
        with pytest.raises(ValueError):
            as_points(np.zeros((2, 2, 2)))

    def test_to_array_point_set(self):
        """Test extraction of the points of a lattice."""
        lat = Rank1Lattice(5, [1, 2])
        np.testing.assert_array_equal(to_array(lat), lat.points)
