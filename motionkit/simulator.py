"""Simulated vehicles seen by a noisy 2D lidar."""

from __future__ import annotations

import itertools
import math
import sys
from collections.abc import Sequence

import numpy as np

from motionkit.geometry import rotation_matrix2d

Point = tuple[float, float]


def interpolate(points: Sequence[Sequence[float]]) -> list[Point]:
    """Points along each segment of a polyline, 0.05 of a segment apart."""
    d_theta = 0.05
    result: list[Point] = []
    for (x0, y0), (x1, y1) in itertools.pairwise([(p[0], p[1]) for p in points]):
        theta = 0.0
        while theta <= 1.0:
            result.append(((1.0 - theta) * x0 + theta * x1, (1.0 - theta) * y0 + theta * y1))
            theta += d_theta
    return result


class VehicleSimulator:
    """A box-shaped vehicle with unicycle motion and a capped speed."""

    _ids = itertools.count()

    def __init__(
        self,
        x: float,
        y: float,
        yaw: float,
        v: float,
        max_v: float,
        width: float,
        length: float,
    ) -> None:
        self.x = x
        self.y = y
        self.yaw = yaw
        self.v = v
        self.max_v = max_v
        self.width = width
        self.length = length
        half_l, half_w = length / 2.0, width / 2.0
        self.contour = interpolate(
            [
                (half_l, half_w),
                (half_l, -half_w),
                (-half_l, -half_w),
                (-half_l, half_w),
                (half_l, half_w),
            ]
        )
        self.id = next(VehicleSimulator._ids)

    def update(self, dt: float, a: float, omega: float) -> None:
        """Advance by ``dt`` with acceleration ``a`` and yaw rate ``omega``."""
        self.x += self.v * math.cos(self.yaw) * dt
        self.y += self.v * math.sin(self.yaw) * dt
        self.yaw += omega * dt
        self.v += a * dt
        if self.v >= self.max_v:
            self.v = self.max_v

    def calc_global_contour(self) -> list[list[float]]:
        """Outline of the vehicle in the world frame as ``[xs, ys]``."""
        rot = rotation_matrix2d(self.yaw)
        xs: list[float] = []
        ys: list[float] = []
        for point in self.contour:
            gx, gy = np.asarray(point) @ rot
            xs.append(float(gx) + self.x)
            ys.append(float(gy) + self.y)
        return [xs, ys]

    def plot(self, ax=None) -> None:
        """Draw the vehicle centre and outline on ``ax`` (the current axes when None)."""
        if ax is None:
            import matplotlib.pyplot as plt

            ax = plt.gca()
        ax.plot([self.x], [self.y], ".b")
        xs, ys = self.calc_global_contour()
        if self.id < 1:
            ax.plot(xs, ys, "--b", label="vehicle")
        else:
            ax.plot(xs, ys, "--b")


class LidarSimulator:
    """A lidar at the origin that returns the nearest hit per angular bin."""

    def __init__(self, range_noise: float = 0.01, rng: np.random.Generator | None = None) -> None:
        self.range_noise = range_noise
        self.rng = np.random.default_rng() if rng is None else rng

    def get_observation_points(
        self, vehicles: Sequence[VehicleSimulator], angle_resolution: float
    ) -> list[list[float]]:
        """Observed points ``[xs, ys]`` of the vehicles' outlines."""
        angles: list[float] = []
        ranges: list[float] = []
        for vehicle in vehicles:
            xs, ys = vehicle.calc_global_contour()
            for gx, gy in zip(xs, ys):
                noise = self.rng.normal(0.0, self.range_noise) if self.range_noise > 0 else 0.0
                angles.append(math.atan2(gy, gx))
                ranges.append(math.hypot(gx, gy) * (1.0 + noise))
        return self.ray_casting_filter(angles, ranges, angle_resolution)

    def ray_casting_filter(
        self,
        theta_l: Sequence[float],
        range_l: Sequence[float],
        angle_resolution: float,
    ) -> list[list[float]]:
        """Keep the shortest range in each angular bin and return the points ``[xs, ys]``."""
        if len(theta_l) != len(range_l):
            raise ValueError("angles and ranges must have the same length")
        if angle_resolution <= 0:
            raise ValueError("angle resolution must be positive")
        empty = sys.float_info.max
        range_db = [empty] * (int(math.floor(2 * math.pi / angle_resolution)) + 1)
        for theta, rng in zip(theta_l, range_l):
            ratio = (theta % (2 * math.pi)) / angle_resolution
            angle_id = int(math.floor(ratio + 0.5)) % len(range_db)
            if range_db[angle_id] > rng:
                range_db[angle_id] = rng

        xs: list[float] = []
        ys: list[float] = []
        for idx, rng in enumerate(range_db):
            if rng < empty:
                t = idx * angle_resolution
                xs.append(rng * math.cos(t))
                ys.append(rng * math.sin(t))
        return [xs, ys]