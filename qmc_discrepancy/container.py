"""
Container of discrepancy values computed for several discrepancies over
a range of a parameter (for example the number of points).

Row 0 of the table holds the parameter values; row j+1 holds the values of
discrepancy j.
"""

import numpy as np
from typing import List, Optional, Sequence

from .discrepancy import Discrepancy
from .utils import PointsLike


class DiscrepancyContainer:
    """
    Table of discrepancy values.

    Parameters
    ----------
    discrepancies : sequence of Discrepancy
        The discrepancies to compute.

    Examples
    --------
    >>> from qmc_discrepancy import DiscL2Star, DiscShift1
    >>> cont = DiscrepancyContainer([DiscL2Star(), DiscShift1()])
    >>> cont.init(3)
    >>> for i, n in enumerate((4, 8, 16)):
    ...     cont.set_param(i, np.log2(n))
    ...     cont.compute(i, np.arange(n) / n)
    >>> cont.log2()
    >>> slopes = cont.regression_slopes()
    """

    def __init__(self, discrepancies: Sequence[Discrepancy]):
        if len(discrepancies) == 0:
            raise ValueError("At least one discrepancy is required")
        self.discrepancies = list(discrepancies)
        self.nb_disc = len(self.discrepancies)
        self.n = 0
        self.title = ""
        self.x_label = "Parameter"
        self.y_label = "Discrepancy"
        self.disc = np.zeros((self.nb_disc + 1, 0))

    def init(
        self,
        n: int,
        title: str = "",
        x_label: str = "Parameter",
        y_label: str = "Discrepancy"
    ) -> None:
        """Allocate a table for n parameter values."""
        if n < 1:
            raise ValueError(f"Number of parameter values must be >= 1, got n={n}")
        self.n = n
        self.title = title
        self.x_label = x_label
        self.y_label = y_label
        self.disc = np.zeros((self.nb_disc + 1, n))

    def reset(self, i: Optional[int] = None) -> None:
        """Set the discrepancy values of column i (default: all columns) to 0."""
        if i is None:
            self.disc[1:, :] = 0.0
        else:
            self.disc[1:, i] = 0.0

    def _values(self, points: PointsLike, n: Optional[int], s: Optional[int]) -> List[float]:
        P = np.asarray(points, dtype=np.float64)
        if P.ndim == 1:
            return [d.compute_1d(P, n) for d in self.discrepancies]
        return [d.compute(P, n, s) for d in self.discrepancies]

    def compute(self, i: int, points: PointsLike, n: Optional[int] = None, s: Optional[int] = None) -> None:
        """
        Compute all discrepancies of ``points`` and store them in column i.

        A 1-D array is evaluated with the 1-D formulas.
        """
        self.disc[1:, i] = self._values(points, n, s)

    def add(self, i: int, points: PointsLike, n: Optional[int] = None, s: Optional[int] = None) -> None:
        """Add the discrepancies of ``points`` to column i."""
        self.disc[1:, i] += self._values(points, n, s)

    def add_square(self, i: int, points: PointsLike, n: Optional[int] = None, s: Optional[int] = None) -> None:
        """Add the squared discrepancies of ``points`` to column i."""
        values = np.asarray(self._values(points, n, s))
        self.disc[1:, i] += values * values

    def scale(self, scale: float, i: Optional[int] = None) -> None:
        """Multiply the values of column i (default: all columns) by ``scale``."""
        if i is None:
            self.disc[1:, :] *= scale
        else:
            self.disc[1:, i] *= scale

    def log2(self, i: Optional[int] = None) -> None:
        """Replace the values of column i (default: all columns) by their base-2 logarithm."""
        with np.errstate(divide="ignore", invalid="ignore"):
            if i is None:
                self.disc[1:, :] = np.log2(self.disc[1:, :])
            else:
                self.disc[1:, i] = np.log2(self.disc[1:, i])

    def square(self, i: Optional[int] = None) -> None:
        """Square the values of column i (default: all columns)."""
        if i is None:
            self.disc[1:, :] *= self.disc[1:, :]
        else:
            self.disc[1:, i] *= self.disc[1:, i]

    def set_param(self, i: int, param_value: float) -> None:
        self.disc[0, i] = param_value

    def get_values(self) -> np.ndarray:
        """Return the table, row 0 being the parameter values."""
        return self.disc

    def _finite_values(self) -> np.ndarray:
        # log2(0) after loss of precision
        values = self.disc[1:, :].copy()
        values[values == -np.inf] = 0.0
        return values

    def regression_slopes(self) -> np.ndarray:
        """
        Slope of the least-squares line through (parameter, value) for each
        discrepancy.

        Values equal to -inf are fitted as 0; the table is left unchanged.
        """
        values = self._finite_values()
        return np.array([
            np.polyfit(self.disc[0], values[j], 1)[0]
            for j in range(self.nb_disc)
        ])

    def regression_to_string(self) -> str:
        slopes = self.regression_slopes()
        lines = ["*" * 63, "Linear regression slope"]
        for d, slope in zip(self.discrepancies, slopes):
            lines.append(f"{d.get_name():>15}{slope:15.6g}")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        lines = [""]
        lines.append(f"{self.x_label:>35}" + "".join(f"{x:15.6g}" for x in self.disc[0]))
        for j, d in enumerate(self.discrepancies):
            lines.append(f"{self.y_label:>15}{d.get_name():>20}"
                         + "".join(f"{x:15.6g}" for x in self.disc[j + 1]))
        return "\n".join(lines) + "\n"
