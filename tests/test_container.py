"""Tests for the table of discrepancy values."""

import numpy as np
import pytest

from qmc_discrepancy import DiscL2Star, DiscrepancyContainer, DiscShift1


@pytest.fixture
def container():
    cont = DiscrepancyContainer([DiscL2Star(), DiscShift1()])
    cont.init(4, title="Regular grid", x_label="log2(n)")
    for i, n in enumerate((4, 8, 16, 32)):
        cont.set_param(i, np.log2(n))
        cont.compute(i, np.arange(n) / n)
    return cont


class TestDiscrepancyContainer:
    """Tests for DiscrepancyContainer."""

    def test_values(self, container):
        """Test that stored values match direct computation."""
        values = container.get_values()
        assert values.shape == (3, 4)
        assert values[0].tolist() == [2.0, 3.0, 4.0, 5.0]
        assert values[1, 1] == pytest.approx(DiscL2Star().compute_1d(np.arange(8) / 8))
        assert values[2, 1] == pytest.approx(DiscShift1().compute_1d(np.arange(8) / 8))

    def test_regression_slopes(self, container):
        """Test that the discrepancies of i/n decrease like 1/n."""
        container.log2()
        np.testing.assert_allclose(container.regression_slopes(), [-1.0, -1.0], atol=1e-8)

    def test_two_dimensional_points(self):
        """Test that 2-D arrays go through the general formula."""
        P = np.random.default_rng(1).random((10, 2))
        cont = DiscrepancyContainer([DiscShift1()])
        cont.init(1)
        cont.compute(0, P)
        assert cont.get_values()[1, 0] == pytest.approx(DiscShift1().compute(P))

    def test_add_and_scale(self):
        """Test accumulation of a mean over replications."""
        cont = DiscrepancyContainer([DiscL2Star()])
        cont.init(1)
        rng = np.random.default_rng(2)
        samples = [rng.random(8) for _ in range(3)]
        for T in samples:
            cont.add(0, T)
        cont.scale(1.0 / 3.0)
        expected = np.mean([DiscL2Star().compute_1d(T) for T in samples])
        assert cont.get_values()[1, 0] == pytest.approx(expected)

    def test_add_square(self):
        """Test accumulation of squared values."""
        cont = DiscrepancyContainer([DiscL2Star()])
        cont.init(1)
        cont.add_square(0, [0.5])
        assert cont.get_values()[1, 0] == pytest.approx(1.0 / 12.0)
        cont.square()
        assert cont.get_values()[1, 0] == pytest.approx(1.0 / 144.0)

    def test_reset(self, container):
        """Test clearing one column and then all of them."""
        container.reset(0)
        assert container.get_values()[1:, 0].tolist() == [0.0, 0.0]
        assert container.get_values()[0, 0] == 2.0
        container.reset()
        assert not container.get_values()[1:].any()

    def test_infinite_values_fitted_as_zero(self, container):
        """Test that log2(0) does not break the regression."""
        container.reset(0)
        container.log2()
        slopes = container.regression_slopes()
        assert np.isfinite(slopes).all()
        expected = np.polyfit([2.0, 3.0, 4.0, 5.0], np.r_[0.0, container.get_values()[1, 1:]], 1)[0]
        assert slopes[0] == pytest.approx(expected)

    def test_regression_leaves_table_unchanged(self, container):
        """Test that fitting does not overwrite the stored values."""
        container.reset(0)
        container.log2()
        before = container.get_values().copy()
        container.regression_slopes()
        container.regression_to_string()
        assert container.get_values()[1, 0] == -np.inf
        np.testing.assert_array_equal(container.get_values(), before)

    def test_strings(self, container):
        """Test the text outputs."""
        text = str(container)
        assert "log2(n)" in text
        assert "DiscL2Star" in text
        assert "Linear regression slope" in container.regression_to_string()

    def test_invalid_arguments(self):
        """Test argument validation."""
        with pytest.raises(ValueError):
            DiscrepancyContainer([])
        with pytest.raises(ValueError):
            DiscrepancyContainer([DiscL2Star()]).init(0)
