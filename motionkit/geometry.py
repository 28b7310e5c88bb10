"""Small numeric helpers shared by the planners, controllers and estimators."""

from __future__ import annotations

import bisect
import itertools
import math
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import numpy as np


def sign(num: float) -> int:
    """Return -1 for negative numbers and 1 otherwise (zero counts as positive)."""
    if num < 0:
        return -1
    return 1


def transformation_matrix2d(x: float, y: float, theta: float) -> np.ndarray:
    """Homogeneous 3x3 transform: rotation by ``theta`` then translation by (x, y)."""
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, -s, x], [s, c, y], [0.0, 0.0, 1.0]])


def rotation_matrix2d(theta: float) -> np.ndarray:
    """Counter-clockwise 2x2 rotation matrix."""
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, -s], [s, c]])


def pi_2_pi(theta: float) -> float:
    """Wrap an angle into the interval [-pi, pi]."""
    while theta > math.pi:
        theta -= 2.0 * math.pi
    while theta < -math.pi:
        theta += 2.0 * math.pi
    return theta


def diff(values: Sequence[float]) -> list[float]:
    """Differences between consecutive elements."""
    return [b - a for a, b in itertools.pairwise(values)]


def cumsum(values: Sequence[float]) -> list[float]:
    """Running totals of ``values``."""
    return list(itertools.accumulate(values))


def search_index(nums: Sequence[float], target: float) -> int:
    """Index of ``target`` in the ascending sequence ``nums``, or -1 if absent."""
    idx = bisect.bisect_left(nums, target)
    if idx < len(nums) and nums[idx] == target:
        return idx
    return -1


def variance(data: Sequence[float]) -> float:
    """Population variance; 0.0 for an empty sequence."""
    if not data:
        return 0.0
    mean = sum(data) / len(data)
    return sum((value - mean) ** 2 for value in data) / len(data)


@dataclass
class TicToc:
    """Stopwatch reporting elapsed time in milliseconds."""

    clock: Callable[[], float] = time.perf_counter
    _start: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.tic()

    def tic(self) -> None:
        """Restart the stopwatch."""
        self._start = self.clock()

    def toc(self) -> float:
        """Milliseconds elapsed since the last :meth:`tic`."""
        return (self.clock() - self._start) * 1000.0