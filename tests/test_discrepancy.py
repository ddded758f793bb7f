"""Tests for the discrepancy base class and the L2 discrepancies."""

import numpy as np
import pytest

from qmc_discrepancy import (
    PRECISION_LOST,
    DiscL2Hickernell,
    DiscL2Star,
    DiscL2Symmetric,
    DiscL2Unanchored,
    DiscShift1,
    Rank1Lattice,
    is_precision_lost,
)
from qmc_discrepancy.discrepancy import finish, pairwise_product_sum, pairwise_sum

L2_CLASSES = [DiscL2Star, DiscL2Symmetric, DiscL2Hickernell, DiscL2Unanchored]


@pytest.fixture
def points_1d():
    rng = np.random.default_rng(42)
    return rng.random(20)


@pytest.fixture
def points_3d():
    rng = np.random.default_rng(7)
    return rng.random((30, 3))


class TestHelpers:
    """Tests for the shared helpers."""

    def test_finish(self):
        """Test the square root and the sentinels."""
        assert finish(0.25) == pytest.approx(0.5)
        assert finish(-1e-3) == PRECISION_LOST
        assert finish(-1e-3, sentinel=0.0) == 0.0
        assert is_precision_lost(PRECISION_LOST)
        assert not is_precision_lost(0.0)

    def test_pairwise_sums(self):
        """Test the i < j sums against explicit double loops."""
        rng = np.random.default_rng(3)
        P = rng.random((6, 2))
        expected = sum(
            np.prod(np.abs(P[i] - P[j]))
            for i in range(6) for j in range(i + 1, 6)
        )
        assert pairwise_product_sum(P, lambda x, Y: np.abs(x - Y)) == pytest.approx(expected)

        T = P[:, 0]
        expected = sum(max(T[i], T[j]) for i in range(6) for j in range(i + 1, 6))
        assert pairwise_sum(T, np.maximum) == pytest.approx(expected)


class TestL2Star:
    """Tests for the L2-star discrepancy."""

    def test_single_point(self):
        """Test that the point 1/2 has discrepancy sqrt(1/12)."""
        disc = DiscL2Star()
        assert disc.compute_1d([0.5]) == pytest.approx(np.sqrt(1.0 / 12.0))
        assert disc.compute([[0.5]]) == pytest.approx(np.sqrt(1.0 / 12.0))

    def test_equidistributed_beats_clustered(self):
        """Test that {i/8} has smaller discrepancy than clustered points."""
        disc = DiscL2Star()
        even = np.arange(8) / 8.0
        clustered = np.arange(8) * 0.01
        assert disc.compute_1d(even) < disc.compute_1d(clustered)
        assert disc.compute(even.reshape(-1, 1)) < disc.compute(clustered.reshape(-1, 1))

    def test_regular_grid_value(self):
        """Test the closed form 1/(n sqrt(3)) for the points i/n."""
        n = 16
        assert DiscL2Star().compute_1d(np.arange(n) / n) == pytest.approx(1.0 / (n * np.sqrt(3.0)))

    def test_one_dimensional_is_order_free(self, points_1d):
        """Test that the 1-D form does not depend on the order of the points."""
        disc = DiscL2Star()
        assert disc.compute_1d(points_1d[::-1]) == pytest.approx(disc.compute_1d(points_1d))

    def test_weights_ignored(self, points_3d):
        """Test that the weights have no effect."""
        disc = DiscL2Star()
        assert disc.compute(points_3d, gamma=[0.1, 0.2, 0.3]) == disc.compute(points_3d)


class TestL2Family:
    """Properties shared by the L2 discrepancies."""

    @pytest.mark.parametrize("cls", L2_CLASSES)
    def test_one_dimensional_agrees_with_general(self, cls, points_1d):
        """Test that compute_1d equals compute on an (n, 1) array."""
        disc = cls()
        general = disc.compute(points_1d.reshape(-1, 1), len(points_1d), 1)
        assert disc.compute_1d(points_1d, len(points_1d)) == pytest.approx(general, rel=1e-10)

    @pytest.mark.parametrize("cls", L2_CLASSES)
    def test_non_negative(self, cls, points_3d):
        """Test that the discrepancy of random points is non-negative."""
        assert cls().compute(points_3d) >= 0.0

    @pytest.mark.parametrize("cls", L2_CLASSES)
    def test_prefix_dimension(self, cls, points_3d):
        """Test that s selects the first coordinates."""
        disc = cls(points_3d)
        assert disc.compute(s=2) == pytest.approx(cls().compute(points_3d[:, :2]))

    @pytest.mark.parametrize("cls", L2_CLASSES)
    def test_prefix_points(self, cls, points_3d):
        """Test that n selects the first points."""
        disc = cls(points_3d)
        assert disc.compute(n=10) == pytest.approx(cls().compute(points_3d[:10]))

    def test_hickernell_equals_star_in_one_dimension(self, points_1d):
        """Test that the two discrepancies coincide in dimension 1."""
        assert DiscL2Hickernell().compute_1d(points_1d) == pytest.approx(
            DiscL2Star().compute_1d(points_1d), rel=1e-10
        )

    def test_symmetric_invariant_under_reflection(self, points_3d):
        """Test invariance of the symmetric discrepancy under u -> 1 - u."""
        disc = DiscL2Symmetric()
        assert disc.compute(1.0 - points_3d) == pytest.approx(disc.compute(points_3d), rel=1e-10)


class TestDiscrepancyState:
    """Tests for bound state and argument validation."""

    def test_bound_points(self, points_3d):
        """Test that bound points are used by default."""
        disc = DiscShift1(points_3d, gamma=[1.0, 0.5, 0.25])
        assert disc.get_num_points() == 30
        assert disc.get_dimension() == 3
        assert disc.compute() == pytest.approx(
            DiscShift1().compute(points_3d, gamma=[1.0, 0.5, 0.25])
        )

    def test_default_gamma(self, points_3d):
        """Test that the default weights are all ones."""
        disc = DiscShift1(points_3d)
        np.testing.assert_array_equal(disc.get_gamma(), np.ones(3))

    def test_point_set_object(self):
        """Test binding a lattice point set."""
        lat = Rank1Lattice(13, [1, 5])
        disc = DiscShift1(lat)
        assert disc.compute() == pytest.approx(DiscShift1().compute(lat.points))
        assert disc.compute_point_set(lat) == pytest.approx(disc.compute())

    def test_point_set_one_dimension(self):
        """Test that one-dimensional point sets use the 1-D form."""
        lat = Rank1Lattice(8, [1])
        disc = DiscL2Star()
        assert disc.compute_point_set(lat) == pytest.approx(disc.compute_1d(np.arange(8) / 8.0))

    def test_no_points(self):
        """Test that computing without points fails."""
        with pytest.raises(ValueError):
            DiscL2Star().compute()

    def test_gamma_too_short(self, points_3d):
        """Test that weights shorter than the dimension are rejected."""
        with pytest.raises(ValueError):
            DiscShift1().compute(points_3d, gamma=[1.0, 1.0])

    def test_dimension_too_large(self, points_3d):
        """Test that s larger than the point dimension is rejected."""
        with pytest.raises(ValueError):
            DiscShift1(points_3d).compute(s=4)

    def test_set_points_and_gamma(self, points_3d):
        """Test the setters."""
        disc = DiscShift1()
        disc.set_points(points_3d)
        disc.set_gamma([0.5, 0.5, 0.5])
        assert disc.compute() == pytest.approx(DiscShift1().compute(points_3d, gamma=[0.5] * 3))

    def test_sort(self):
        """Test sorting of the first n values."""
        np.testing.assert_array_equal(DiscL2Star.sort([0.3, 0.1, 0.2, 0.0], 3), [0.1, 0.2, 0.3])

    def test_str(self, points_3d):
        """Test the string representation."""
        text = str(DiscShift1(points_3d))
        assert text.startswith("DiscShift1:")
        assert "n = 30,   dim = 3" in text
        assert "Points = [" in DiscShift1(points_3d).format_points()
