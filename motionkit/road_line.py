"""Hand-designed road centre lines and boundaries for local-planning scenes."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterator

Polyline = list[list[float]]


def _frange(start: float, stop: float, step: float) -> Iterator[float]:
    """Values from ``start`` moving by ``step`` while strictly short of ``stop``."""
    value = start
    if step > 0:
        while value < stop:
            yield value
            value += step
    else:
        while value > stop:
            yield value
            value += step


class RoadLine(ABC):
    """A road described by a reference line and its left and right boundaries.

    Every design method returns ``[xs, ys]``.
    """

    def __init__(self, road_width: float = 8.0) -> None:
        self.road_width = road_width
        self.ref_line: Polyline = [[], []]
        self.bound_in: Polyline = [[], []]
        self.bound_out: Polyline = [[], []]

    @abstractmethod
    def design_reference_line(self) -> Polyline:
        """Centre line of the road."""

    @abstractmethod
    def design_boundary_left(self) -> Polyline:
        """Left edge of the road."""

    @abstractmethod
    def design_boundary_right(self) -> Polyline:
        """Right edge of the road."""


class CruiseRoadLine(RoadLine):
    """A closed circuit of arcs and straights for cruising scenes."""

    def __init__(self, max_c: float = 0.15, road_width: float = 8.0) -> None:
        super().__init__(road_width)
        self.max_c = max_c

    def _design(self, side: int, step_curve: float, step_line: float, close: bool) -> Polyline:
        # side: 0 for the centre line, +1 for the left edge, -1 for the right edge.
        w = side * self.road_width
        xs: list[float] = []
        ys: list[float] = []

        def arc(cx: float, cy: float, radius: float, start: float, stop: float, step: float):
            r = float(int(radius))
            for theta in _frange(start, stop, step):
                xs.append(cx + r * math.cos(theta))
                ys.append(cy + r * math.sin(theta))

        arc(30.0, 30.0, 20 - w, math.pi, 1.5 * math.pi, step_curve)
        for ix in _frange(30.0, 80.0, step_line):
            xs.append(ix)
            ys.append(10 + w)

        arc(80.0, 25.0, 15 - w, -math.pi / 2, math.pi / 2, step_curve)
        for ix in _frange(80.0, 60.0, -step_line):
            xs.append(ix)
            ys.append(40 - w)

        arc(60.0, 60.0, 20 + w, -math.pi / 2, -math.pi, -step_curve)
        arc(25.0, 60.0, 15 - w, 0.0, math.pi, step_curve)
        for iy in _frange(60.0, 30.0, -step_line):
            xs.append(10 + w)
            ys.append(iy)

        if close:
            xs.append(xs[0])
            ys.append(ys[0])
        return [xs, ys]

    def design_reference_line(self) -> Polyline:
        return self._design(0, math.pi * 0.1, 4.0, close=False)

    def design_boundary_left(self) -> Polyline:
        return self._design(1, math.pi * 0.1, 2.0, close=True)

    def design_boundary_right(self) -> Polyline:
        return self._design(-1, math.pi * 0.05, 2.0, close=True)


class StopRoadLine(RoadLine):
    """A straight road along the x axis for stopping scenes."""

    def _straight(self, y: float) -> Polyline:
        xs = list(_frange(0.0, 60.0, 1.0))
        return [xs, [y] * len(xs)]

    def design_reference_line(self) -> Polyline:
        return self._straight(0.0)

    def design_boundary_left(self) -> Polyline:
        return self._straight(self.road_width)

    def design_boundary_right(self) -> Polyline:
        return self._straight(-self.road_width)