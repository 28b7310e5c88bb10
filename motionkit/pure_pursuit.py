"""Pure pursuit path tracking."""

from __future__ import annotations

import argparse
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from motionkit.geometry import TicToc
from motionkit.vehicle import VehicleConfig, VehicleState

DT = 0.1
K = 0.1  # look-ahead gain
LFC = 2.0  # look-ahead distance [m]
KP = 1.0  # speed proportional gain


class TargetCourse:
    """A course of waypoints and the index of the waypoint last found nearest."""

    def __init__(self, cx: Sequence[float], cy: Sequence[float]) -> None:
        if not cx or len(cx) != len(cy):
            raise ValueError("course needs equally many, and at least one, x and y values")
        self.cx = list(cx)
        self.cy = list(cy)
        self.old_nearest_point_index: int | None = None

    def search_target_index(self, state: VehicleState) -> tuple[int, float]:
        """Look-ahead waypoint index and the look-ahead distance for ``state``."""
        cx, cy = self.cx, self.cy
        if self.old_nearest_point_index is None:
            # The first search measures both offsets against the x coordinates.
            ind = min(
                range(len(cx)),
                key=lambda i: math.hypot(state.x - cx[i], state.y - cx[i]),
            )
        else:
            ind = self.old_nearest_point_index
            distance_this = state.calc_distance(cx[ind], cy[ind])
            while ind + 1 < len(cx):
                distance_next = state.calc_distance(cx[ind + 1], cy[ind + 1])
                if distance_this < distance_next:
                    break
                ind += 1
                distance_this = distance_next
        self.old_nearest_point_index = ind

        lf = K * state.v + LFC
        while lf > state.calc_distance(cx[ind], cy[ind]) and ind + 1 < len(cx):
            ind += 1
        return ind, lf


def proportional_control(target: float, current: float) -> float:
    """Acceleration from a proportional speed controller."""
    return KP * (target - current)


def pure_pursuit_steer_control(
    state: VehicleState, trajectory: TargetCourse, pind: int
) -> tuple[int, float]:
    """Target index and steering angle; the index never goes back before ``pind``."""
    ind, lf = trajectory.search_target_index(state)
    ind = max(ind, pind)

    if ind < len(trajectory.cx):
        tx, ty = trajectory.cx[ind], trajectory.cy[ind]
    else:
        tx, ty = trajectory.cx[-1], trajectory.cy[-1]
        ind = len(trajectory.cx) - 1

    alpha = math.atan2(ty - state.y, tx - state.x) - state.yaw
    delta = math.atan2(2.0 * state.config.wb * math.sin(alpha) / lf, 1.0)
    return ind, delta


@dataclass
class TrackingResult:
    """History of a tracking run."""

    x: list[float] = field(default_factory=list)
    y: list[float] = field(default_factory=list)
    yaw: list[float] = field(default_factory=list)
    v: list[float] = field(default_factory=list)
    t: list[float] = field(default_factory=list)
    target_index: int = 0

    def record(self, state: VehicleState, time: float) -> None:
        self.x.append(state.x)
        self.y.append(state.y)
        self.yaw.append(state.yaw)
        self.v.append(state.v)
        self.t.append(time)


def simulate(
    cx: Sequence[float],
    cy: Sequence[float],
    state: VehicleState,
    target_speed: float = 20.0 / 3.6,
    max_time: float = 100.0,
) -> TrackingResult:
    """Track the course from ``state`` (which is advanced in place) until its end or timeout."""
    course = TargetCourse(cx, cy)
    last_index = len(course.cx) - 1
    target_id, _ = course.search_target_index(state)
    result = TrackingResult(target_index=target_id)
    result.record(state, 0.0)

    time = 0.0
    while max_time >= time and last_index > target_id:
        ai = proportional_control(target_speed, state.v)
        target_id, di = pure_pursuit_steer_control(state, course, target_id)
        state.update(ai, di, DT)
        time += DT
        result.record(state, time)

    result.target_index = target_id
    return result


def _default_course() -> tuple[list[float], list[float]]:
    cx: list[float] = []
    cy: list[float] = []
    idx = 0.0
    while idx <= 50:
        cx.append(idx)
        cy.append(math.sin(idx / 5.0) * idx / 3)
        idx += 0.5
    return cx, cy


def main(argv: Sequence[str] | None = None) -> int:
    """Track a sinusoidal course and plot the result."""
    parser = argparse.ArgumentParser(description="Pure pursuit path tracking.")
    parser.add_argument("--no-plot", action="store_true", help="do not show a plot")
    args = parser.parse_args(argv)

    cx, cy = _default_course()
    config = VehicleConfig.scaled(0.8)
    state = VehicleState(config, x=-0.0, y=-3.0, yaw=0.0, v=0.0)

    timer = TicToc()
    result = simulate(cx, cy, state, 20.0 / 3.6, 100.0)
    print(f"pure_pursuit run costtime: {timer.toc() / 1000:.3f} s")

    if not args.no_plot:
        import matplotlib.pyplot as plt

        from motionkit.drawing import draw_vehicle

        ax = plt.gca()
        ax.plot(cx, cy, ".r", label="course")
        ax.plot(result.x, result.y, "-b", label="trajectory")
        draw_vehicle(ax, (state.x, state.y, state.yaw), 0.0, config)
        ax.legend()
        ax.set_xlabel("x[m]")
        ax.set_ylabel("y[m]")
        ax.axis("equal")
        ax.grid(True)
        plt.show()
    return 0