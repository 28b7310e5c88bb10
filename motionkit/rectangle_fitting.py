"""L-shape rectangle fitting of lidar points."""

from __future__ import annotations

import argparse
import enum
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from motionkit.geometry import rotation_matrix2d, variance
from motionkit.simulator import LidarSimulator, VehicleSimulator

DT = 0.2
SIM_TIME = 30.0


class Criteria(enum.Enum):
    """Cost used to choose the rectangle orientation."""

    AREA = enum.auto()
    CLOSENESS = enum.auto()
    VARIANCE = enum.auto()


def calc_cross_point(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> tuple[float, float]:
    """Intersection of the lines ``a[i] * x + b[i] * y = c[i]`` for i = 0, 1."""
    det = a[0] * b[1] - a[1] * b[0]
    if det == 0:
        raise ZeroDivisionError("lines are parallel")
    x = (b[0] * -c[1] - b[1] * -c[0]) / det
    y = (a[1] * -c[0] - a[0] * -c[1]) / det
    return x, y


@dataclass
class RectangleData:
    """Four edge lines ``a * x + b * y = c`` and the closed corner contour."""

    a: list[float] = field(default_factory=lambda: [0.0] * 4)
    b: list[float] = field(default_factory=lambda: [0.0] * 4)
    c: list[float] = field(default_factory=lambda: [0.0] * 4)
    rect_c_x: list[float] = field(default_factory=lambda: [0.0] * 5)
    rect_c_y: list[float] = field(default_factory=lambda: [0.0] * 5)

    def calc_rect_contour(self) -> None:
        """Corners at the crossings of neighbouring edges; the last repeats the first."""
        for i in range(4):
            j = (i + 1) % 4
            self.rect_c_x[i], self.rect_c_y[i] = calc_cross_point(
                (self.a[i], self.a[j]), (self.b[i], self.b[j]), (self.c[i], self.c[j])
            )
        self.rect_c_x[4] = self.rect_c_x[0]
        self.rect_c_y[4] = self.rect_c_y[0]

    def plot(self, ax=None) -> None:
        """Draw the rectangle on ``ax`` (the current axes when None)."""
        if ax is None:
            import matplotlib.pyplot as plt

            ax = plt.gca()
        self.calc_rect_contour()
        ax.plot(self.rect_c_x, self.rect_c_y, "-r")


def _edge_distances(c1: Sequence[float], c2: Sequence[float]):
    c1_max, c1_min = max(c1), min(c1)
    c2_max, c2_min = max(c2), min(c2)
    for p1, p2 in zip(c1, c2):
        yield min(c1_max - p1, p1 - c1_min), min(c2_max - p2, p2 - c2_min)


class LShapeFitting:
    """Segments points into clusters and fits a rectangle to each."""

    def __init__(
        self,
        criteria: Criteria = Criteria.VARIANCE,
        min_dist_of_closeness_criteria: float = 0.01,
        d_theta_deg_for_search: float = 1.0,
        r0: float = 3.0,
        rd: float = 0.001,
    ) -> None:
        self.criteria = criteria
        self.min_dist_of_closeness_criteria = min_dist_of_closeness_criteria
        self.d_theta_deg_for_search = d_theta_deg_for_search
        self.r0 = r0
        self.rd = rd

    def _segmentation(self, oxy: Sequence[Sequence[float]]) -> list[list[int]]:
        points = list(zip(oxy[0], oxy[1]))
        segments: list[set[int]] = []
        for xi, yi in points:
            r = self.r0 + self.rd * math.hypot(xi, yi)
            segments.append(
                {j for j, (xj, yj) in enumerate(points) if math.hypot(xi - xj, yi - yj) <= r}
            )

        for i in range(len(segments) - 1):
            for j in range(i + 1, len(segments)):
                if segments[i] & segments[j]:
                    segments[i] = segments[i] | segments[j]
                    segments[j] = set()

        return [sorted(seg) for seg in segments if seg]

    def _area(self, c1: Sequence[float], c2: Sequence[float]) -> float:
        return -((max(c1) - min(c1)) ** 2)

    def _closeness(self, c1: Sequence[float], c2: Sequence[float]) -> float:
        beta = 0.0
        for d1, d2 in _edge_distances(c1, c2):
            d = min(d1, d2, self.min_dist_of_closeness_criteria)
            beta += math.inf if d == 0 else 1.0 / d
        return beta

    def _variance(self, c1: Sequence[float], c2: Sequence[float]) -> float:
        e1: list[float] = []
        e2: list[float] = []
        for d1, d2 in _edge_distances(c1, c2):
            if d1 < d2:
                e1.append(d1)
            else:
                e2.append(d2)
        return -variance(e1) - variance(e2)

    def _rectangle_search(self, cxy: Sequence[Sequence[float]]) -> RectangleData:
        cost_fn = {
            Criteria.AREA: self._area,
            Criteria.CLOSENESS: self._closeness,
            Criteria.VARIANCE: self._variance,
        }[self.criteria]
        points = np.column_stack([cxy[0], cxy[1]]).astype(float)
        d_theta = math.radians(self.d_theta_deg_for_search)

        best_cost, best_theta = -1e6, 0.0
        theta = 0.0
        while theta < math.pi / 2 - d_theta:
            rotated = points @ rotation_matrix2d(theta)
            cost = cost_fn(rotated[:, 0].tolist(), rotated[:, 1].tolist())
            if best_cost < cost:
                best_cost, best_theta = cost, theta
            theta += d_theta

        sin_s, cos_s = math.sin(best_theta), math.cos(best_theta)
        c1_s = [x * cos_s + y * sin_s for x, y in points]
        c2_s = [-x * sin_s + y * cos_s for x, y in points]
        return RectangleData(
            a=[cos_s, -sin_s, cos_s, -sin_s],
            b=[sin_s, cos_s, sin_s, cos_s],
            c=[min(c1_s), min(c2_s), max(c1_s), max(c2_s)],
        )

    def fitting(
        self, oxy: Sequence[Sequence[float]]
    ) -> tuple[list[RectangleData], list[list[int]]]:
        """Rectangles fitted to the clusters of ``oxy`` = ``[xs, ys]``, and the clusters' indices."""
        if len(oxy[0]) != len(oxy[1]):
            raise ValueError("x and y must have the same length")
        id_sets = self._segmentation(oxy)
        rects = [
            self._rectangle_search([[oxy[0][i] for i in ids], [oxy[1][i] for i in ids]])
            for ids in id_sets
        ]
        return rects, id_sets


def main(argv: Sequence[str] | None = None) -> int:
    """Fit rectangles to two simulated vehicles seen by a lidar."""
    parser = argparse.ArgumentParser(description="L-shape rectangle fitting simulation.")
    parser.add_argument("--no-plot", action="store_true", help="do not show a plot")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--sim-time", type=float, default=SIM_TIME, help="simulated seconds")
    args = parser.parse_args(argv)

    angle_resolution = math.radians(3.0)
    v1 = VehicleSimulator(-10.0, 0.0, math.pi / 2, 0.0, 50.0 / 3.6, 3.0, 5.0)
    v2 = VehicleSimulator(20.0, 10.0, math.pi, 0.0, 50.0 / 3.6, 4.0, 10.0)
    fitter = LShapeFitting()
    lidar = LidarSimulator(rng=np.random.default_rng(args.seed))

    plt = None
    if not args.no_plot:
        import matplotlib.pyplot as plt

    time = 0.0
    while time <= args.sim_time:
        time += DT
        v1.update(DT, 0.1, 0.0)
        v2.update(DT, 0.1, -0.05)
        oxy = lidar.get_observation_points([v1, v2], angle_resolution)
        rects, id_sets = fitter.fitting(oxy)

        if plt is not None:
            plt.cla()
            ax = plt.gca()
            ax.axis("equal")
            ax.plot([0.0], [0.0], "*r")
            v1.plot(ax)
            v2.plot(ax)
            for ids in id_sets:
                xs = [oxy[0][i] for i in ids]
                ys = [oxy[1][i] for i in ids]
                for x, y in zip(xs, ys):
                    ax.plot([0.0, x], [0.0, y], "-og")
                ax.plot(xs, ys, "o")
            for rect in rects:
                rect.plot(ax)
            ax.set_title("Rectangle Fitting")
            ax.legend(loc="upper right")
            plt.pause(0.1)
    return 0