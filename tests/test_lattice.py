"""Tests for rank-1 and Korobov lattice point sets."""

import numpy as np
import pytest

from qmc_discrepancy import KorobovLattice, Rank1Lattice, lattice_points


class TestRank1Lattice:
    """Tests for Rank1Lattice."""

    def test_points(self):
        """Test coordinates i*a/n mod 1."""
        lat = Rank1Lattice(8, [1, 3])
        assert lat.points.shape == (8, 2)
        np.testing.assert_allclose(lat.points[1], [0.125, 0.375])
        np.testing.assert_allclose(lat.points[3], [0.375, 0.125])
        np.testing.assert_allclose(lat.points[0], [0.0, 0.0])

    def test_points_in_unit_cube(self):
        """Test that all coordinates lie in [0, 1)."""
        lat = Rank1Lattice(101, [1, 40, 85])
        assert (lat.points >= 0.0).all()
        assert (lat.points < 1.0).all()

    def test_negative_components_reduced(self):
        """Test that negative components are reduced modulo n."""
        lat = Rank1Lattice(8, [1, -3])
        assert lat.get_as().tolist() == [1, 5]

    def test_dimension_prefix(self):
        """Test that s selects the first components."""
        lat = Rank1Lattice(7, [1, 2, 3], s=2)
        assert lat.get_dimension() == 2
        assert lat.get_num_points() == 7
        assert lat.get_as().tolist() == [1, 2]

    def test_get_coordinate(self):
        """Test that get_coordinate agrees with the point array."""
        lat = Rank1Lattice(13, [1, 5, 8])
        for i in range(13):
            for j in range(3):
                assert lat.get_coordinate(i, j) == lat.points[i, j]
        with pytest.raises(IndexError):
            lat.get_coordinate(13, 0)

    def test_iteration(self):
        """Test iteration over the points."""
        lat = Rank1Lattice(5, [1, 2])
        rows = list(lat)
        assert len(rows) == len(lat) == 5
        np.testing.assert_allclose(rows[2], [0.4, 0.8])

    def test_invalid_arguments(self):
        """Test argument validation."""
        with pytest.raises(ValueError):
            Rank1Lattice(0, [1])
        with pytest.raises(ValueError):
            Rank1Lattice(5, [1], s=2)

    def test_lattice_points_function(self):
        """Test that lattice_points matches Rank1Lattice.points."""
        np.testing.assert_array_equal(
            lattice_points(31, [1, 12, 7]), Rank1Lattice(31, [1, 12, 7]).points
        )

    def test_info(self):
        """Test the info dictionary."""
        info = Rank1Lattice(8, [1, 3]).info()
        assert info["type"] == "Rank1"
        assert info["generating_vector"] == [1, 3]


class TestKorobovLattice:
    """Tests for KorobovLattice."""

    def test_generating_vector(self):
        """Test (1, a, a^2, ...) mod n."""
        lat = KorobovLattice(17, 5, 4)
        assert lat.generating_vector.tolist() == [1, 5, 8, 6]
        assert lat.generator == 5

    def test_is_rank1_lattice(self):
        """Test that the points equal those of the equivalent rank-1 lattice."""
        kor = KorobovLattice(31, 3, 3)
        rank1 = Rank1Lattice(31, [1, 3, 9])
        np.testing.assert_array_equal(kor.points, rank1.points)

    def test_info(self):
        """Test the info dictionary."""
        info = KorobovLattice(17, 5, 2).info()
        assert info["type"] == "Korobov"
        assert info["generator"] == 5
