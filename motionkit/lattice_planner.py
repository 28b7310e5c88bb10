"""Lattice local planner sampling lateral and longitudinal polynomials in the Frenet frame."""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from motionkit.polynomials import QuarticPolynomial, QuinticPolynomial
from motionkit.vehicle import VehicleConfig

ROAD_WIDTH = 8.0
ROAD_SAMPLE_STEP = 1.0
TARGET_SPEED = 30.0 / 3.6
SPEED_SAMPLE_STEP = 5.0 / 3.6

T_STEP = 0.15
K_JERK = 0.1
K_TIME = 1.0
K_V_DIFF = 1.0
K_OFFSET = 1.5
K_COLLISION = 500.0

MAX_SPEED = 50.0 / 3.6
MAX_ACCEL = 8.0
MAX_CURVATURE = 6.0

STOP_POSITION = 55.0
STOP_END_SPEEDS = (-2.0, -1.0, 0.0, 1.0, 2.0)


class ReferencePath(Protocol):
    """A parametrised reference line: arc lengths ``s`` and pose lookup along them."""

    s: Sequence[float]

    def calc_position(self, s: float) -> Sequence[float]: ...

    def calc_yaw(self, s: float) -> float: ...


def _frange(start: float, stop: float, step: float, inclusive: bool = False) -> Iterator[float]:
    """Values from ``start`` growing by ``step`` while below (or up to) ``stop``."""
    value = start
    while value < stop or (inclusive and value == stop):
        yield value
        value += step


def _ratio(num: float, den: float) -> float:
    if den != 0.0:
        return num / den
    if num == 0.0 or math.isnan(num):
        return math.nan
    return math.copysign(math.inf, num)


@dataclass
class LatticePath:
    """A sampled trajectory: Frenet profiles over time and its Cartesian shape."""

    t: list[float] = field(default_factory=list)
    cost: float = 0.0

    l: list[float] = field(default_factory=list)
    l_v: list[float] = field(default_factory=list)
    l_a: list[float] = field(default_factory=list)
    l_jerk: list[float] = field(default_factory=list)

    s: list[float] = field(default_factory=list)
    s_v: list[float] = field(default_factory=list)
    s_a: list[float] = field(default_factory=list)
    s_jerk: list[float] = field(default_factory=list)

    x: list[float] = field(default_factory=list)
    y: list[float] = field(default_factory=list)
    yaw: list[float] = field(default_factory=list)
    ds: list[float] = field(default_factory=list)
    curv: list[float] = field(default_factory=list)

    def copy(self) -> LatticePath:
        """Independent copy of the path and all its profiles."""
        return LatticePath(
            t=list(self.t),
            cost=self.cost,
            l=list(self.l),
            l_v=list(self.l_v),
            l_a=list(self.l_a),
            l_jerk=list(self.l_jerk),
            s=list(self.s),
            s_v=list(self.s_v),
            s_a=list(self.s_a),
            s_jerk=list(self.s_jerk),
            x=list(self.x),
            y=list(self.y),
            yaw=list(self.yaw),
            ds=list(self.ds),
            curv=list(self.curv),
        )

    def calc_xy(self, ref_path: ReferencePath) -> None:
        """Convert (s, l) to (x, y), stopping where s runs past the reference end."""
        self.x = []
        self.y = []
        s_end = ref_path.s[-1]
        for s, l in zip(self.s, self.l):
            if s > s_end:
                break
            ref_xy = ref_path.calc_position(s)
            normal = ref_path.calc_yaw(s) + math.pi / 2
            self.x.append(ref_xy[0] + l * math.cos(normal))
            self.y.append(ref_xy[1] + l * math.sin(normal))

    def calc_yaw_curv(self) -> None:
        """Heading, segment length and curvature from the Cartesian points."""
        self.yaw = []
        self.ds = []
        self.curv = []
        points = list(zip(self.x, self.y))
        for (x0, y0), (x1, y1) in zip(points, points[1:]):
            dx, dy = x1 - x0, y1 - y0
            self.ds.append(math.hypot(dx, dy))
            self.yaw.append(math.atan2(dy, dx))

        if not self.yaw:
            return
        self.yaw.append(self.yaw[-1])
        self.ds.append(self.ds[-1])
        self.curv = [
            _ratio(yaw1 - yaw0, ds)
            for yaw0, yaw1, ds in zip(self.yaw, self.yaw[1:], self.ds)
        ]


def verify_path(path: LatticePath) -> bool:
    """Whether speed, acceleration and curvature all stay within limits."""
    for i, (v, a) in enumerate(zip(path.s_v, path.s_a)):
        if v > MAX_SPEED or abs(a) > MAX_ACCEL:
            return False
        if i < len(path.curv) and abs(path.curv[i]) > MAX_CURVATURE:
            return False
    return True


def is_path_collision(
    path: LatticePath, vc: VehicleConfig, obs: Sequence[Sequence[float]]
) -> float:
    """1.0 if the vehicle box along every third path point hits an obstacle, else 0.0.

    ``obs`` is ``[xs, ys]``.
    """
    margin = 1.8
    dl = (vc.rf - vc.rb) / 2.0
    r = math.hypot((vc.rf + vc.rb) / 2.0, vc.w / 2.0) + margin
    half_width = vc.w / 2 + margin

    for x, y, yaw in zip(path.x[::3], path.y[::3], path.yaw[::3]):
        c, s = math.cos(yaw), math.sin(yaw)
        cx = x + dl * c
        cy = y + dl * s
        for ox, oy in zip(obs[0], obs[1]):
            xo, yo = ox - cx, oy - cy
            dx = xo * c + yo * s
            dy = -xo * s + yo * c
            if abs(dx) < r and abs(dy) < half_width:
                return 1.0
    return 0.0


def _longitudinal_profile(lon, t1: float) -> LatticePath:
    path = LatticePath()
    for t in _frange(0.0, t1, T_STEP):
        path.t.append(t)
        path.s.append(lon.calc_point(t))
        path.s_v.append(lon.calc_first_derivative(t))
        path.s_a.append(lon.calc_second_derivative(t))
        path.s_jerk.append(lon.calc_third_derivative(t))
    return path


def _with_lateral(
    base: LatticePath, lat: QuinticPolynomial, ref_path: ReferencePath
) -> LatticePath:
    path = base.copy()
    for t in base.t:
        path.l.append(lat.calc_point(t))
        path.l_v.append(lat.calc_first_derivative(t))
        path.l_a.append(lat.calc_second_derivative(t))
        path.l_jerk.append(lat.calc_third_derivative(t))
    path.calc_xy(ref_path)
    path.calc_yaw_curv()
    return path


def _jerk_sum(path: LatticePath) -> float:
    return sum(abs(j) for j in path.l_jerk) + sum(abs(j) for j in path.s_jerk)


def sampling_paths(
    l0: float,
    l0_v: float,
    l0_a: float,
    s0: float,
    s0_v: float,
    s0_a: float,
    ref_path: ReferencePath,
    vc: VehicleConfig,
    obs: Sequence[Sequence[float]],
) -> list[LatticePath]:
    """Candidate cruising paths over end speeds, horizons and lateral offsets, with costs."""
    paths: list[LatticePath] = []
    for s1_v in _frange(TARGET_SPEED * 0.6, TARGET_SPEED * 1.4, TARGET_SPEED * 0.2):
        for t1 in _frange(4.5, 5.5, 0.2):
            base = _longitudinal_profile(QuarticPolynomial(s0, s0_v, s0_a, s1_v, 0.0, t1), t1)
            for l1 in _frange(-ROAD_WIDTH, ROAD_WIDTH, ROAD_SAMPLE_STEP):
                lat = QuinticPolynomial(l0, l0_v, l0_a, l1, 0.0, 0.0, t1)
                path = _with_lateral(base, lat, ref_path)
                if not path.yaw:
                    continue
                path.cost = (
                    K_JERK * _jerk_sum(path)
                    + K_V_DIFF * abs(TARGET_SPEED - path.s_v[-1])
                    + K_TIME * t1 * 2
                    + K_OFFSET * abs(path.l[-1])
                    + K_COLLISION * is_path_collision(path, vc, obs)
                )
                paths.append(path)
    return paths


def sampling_paths_for_stopping(
    l0: float,
    l0_v: float,
    l0_a: float,
    s0: float,
    s0_v: float,
    s0_a: float,
    ref_path: ReferencePath,
) -> list[LatticePath]:
    """Candidate paths that come to rest near the stop position, with costs."""
    paths: list[LatticePath] = []
    for s1_v in STOP_END_SPEEDS:
        for t1 in _frange(0.0, 16.0, 1.0):
            lon = QuinticPolynomial(s0, s0_v, s0_a, STOP_POSITION, s1_v, 0.0, t1)
            base = _longitudinal_profile(lon, t1)
            for l1 in _frange(0.0, 0.1, ROAD_SAMPLE_STEP, inclusive=True):
                lat = QuinticPolynomial(l0, l0_v, l0_a, l1, 0.0, 0.0, t1)
                path = _with_lateral(base, lat, ref_path)
                if not path.yaw:
                    continue
                path.cost = (
                    K_JERK * _jerk_sum(path)
                    + K_V_DIFF * path.s_v[-1] ** 2
                    + K_TIME * t1 * 2
                    + K_OFFSET * abs(path.l[-1])
                    + 5.0 * sum(abs(v) for v in path.s_v)
                )
                paths.append(path)
    return paths


def extract_optimal_path(paths: list[LatticePath]) -> LatticePath:
    """Cheapest feasible path; sorts ``paths`` by cost in place.

    Returns an empty path when none is feasible.
    """
    paths.sort(key=lambda p: p.cost)
    for path in paths:
        if verify_path(path):
            return path
    return LatticePath()


def lattice_planner(
    l0: float,
    l0_v: float,
    l0_a: float,
    s0: float,
    s0_v: float,
    s0_a: float,
    ref_path: ReferencePath,
    vc: VehicleConfig,
    obs: Sequence[Sequence[float]],
) -> LatticePath:
    """Best cruising path from the given Frenet state."""
    paths = sampling_paths(l0, l0_v, l0_a, s0, s0_v, s0_a, ref_path, vc, obs)
    return extract_optimal_path(paths)


def lattice_planner_for_stopping(
    l0: float,
    l0_v: float,
    l0_a: float,
    s0: float,
    s0_v: float,
    s0_a: float,
    ref_path: ReferencePath,
) -> LatticePath:
    """Best stopping path from the given Frenet state."""
    paths = sampling_paths_for_stopping(l0, l0_v, l0_a, s0, s0_v, s0_a, ref_path)
    return extract_optimal_path(paths)