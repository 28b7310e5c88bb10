"""Quartic and quintic polynomials fixed by boundary conditions in time."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np


def _solve(matrix: Sequence[Sequence[float]], rhs: Sequence[float]) -> list[float]:
    # Least squares keeps degenerate horizons (time == 0) from raising.
    solution, *_ = np.linalg.lstsq(np.asarray(matrix, float), np.asarray(rhs, float), rcond=None)
    return [float(v) for v in solution]


def _evaluate(coefficients: Sequence[float], t: float, order: int) -> float:
    """Derivative of the given order of the polynomial with these coefficients."""
    return sum(
        math.perm(power, order) * coef * t ** (power - order)
        for power, coef in enumerate(coefficients)
        if power >= order
    )


class QuarticPolynomial:
    """Quartic with given start position, speed and acceleration, and end speed and acceleration."""

    __slots__ = ("coefficients",)

    def __init__(
        self, xs: float, vxs: float, axs: float, vxe: float, axe: float, time: float
    ) -> None:
        a0, a1, a2 = xs, vxs, axs / 2.0
        a3, a4 = _solve(
            [[3 * time**2, 4 * time**3], [6 * time, 12 * time**2]],
            [vxe - a1 - 2 * a2 * time, axe - 2 * a2],
        )
        self.coefficients = (float(a0), float(a1), float(a2), a3, a4)

    def calc_point(self, t: float) -> float:
        """Value at ``t``."""
        return _evaluate(self.coefficients, t, 0)

    def calc_first_derivative(self, t: float) -> float:
        """First derivative at ``t``."""
        return _evaluate(self.coefficients, t, 1)

    def calc_second_derivative(self, t: float) -> float:
        """Second derivative at ``t``."""
        return _evaluate(self.coefficients, t, 2)

    def calc_third_derivative(self, t: float) -> float:
        """Third derivative at ``t``."""
        return _evaluate(self.coefficients, t, 3)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(coefficients={self.coefficients})"


class QuinticPolynomial:
    """Quintic with given start and end position, speed and acceleration."""

    __slots__ = ("coefficients",)

    def __init__(
        self,
        xs: float,
        vxs: float,
        axs: float,
        xe: float,
        vxe: float,
        axe: float,
        time: float,
    ) -> None:
        a0, a1, a2 = xs, vxs, axs / 2.0
        a3, a4, a5 = _solve(
            [
                [time**3, time**4, time**5],
                [3 * time**2, 4 * time**3, 5 * time**4],
                [6 * time, 12 * time**2, 20 * time**3],
            ],
            [xe - a0 - a1 * time - a2 * time**2, vxe - a1 - 2 * a2 * time, axe - 2 * a2],
        )
        self.coefficients = (float(a0), float(a1), float(a2), a3, a4, a5)

    def calc_point(self, t: float) -> float:
        """Value at ``t``."""
        return _evaluate(self.coefficients, t, 0)

    def calc_first_derivative(self, t: float) -> float:
        """First derivative at ``t``."""
        return _evaluate(self.coefficients, t, 1)

    def calc_second_derivative(self, t: float) -> float:
        """Second derivative at ``t``."""
        return _evaluate(self.coefficients, t, 2)

    def calc_third_derivative(self, t: float) -> float:
        """Third derivative at ``t``."""
        return _evaluate(self.coefficients, t, 3)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(coefficients={self.coefficients})"