"""Stanley front-axle path tracking controller."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from motionkit.geometry import pi_2_pi
from motionkit.vehicle import VehicleState

DT = 0.1
K = 0.5  # control gain
KP = 1.0  # speed proportional gain


def calc_target_index(
    state: VehicleState, cx: Sequence[float], cy: Sequence[float]
) -> tuple[int, float]:
    """Waypoint nearest the vehicle front and the cross-track error at the front axle."""
    if not cx or len(cx) != len(cy):
        raise ValueError("course needs equally many, and at least one, x and y values")
    front = state.config.rf
    fx = state.x + front * math.cos(state.yaw)
    fy = state.y + front * math.sin(state.yaw)

    target_idx = 0
    min_d = math.inf
    error = (0.0, 0.0)
    for idx, (px, py) in enumerate(zip(cx, cy)):
        dx, dy = fx - px, fy - py
        d = math.hypot(dx, dy)
        if d <= min_d:
            min_d = d
            target_idx = idx
            error = (dx, dy)

    axle_x = -math.cos(state.yaw + math.pi / 2)
    axle_y = -math.sin(state.yaw + math.pi / 2)
    return target_idx, error[0] * axle_x + error[1] * axle_y


def stanley_control(
    state: VehicleState,
    cx: Sequence[float],
    cy: Sequence[float],
    cyaw: Sequence[float],
    last_target_idx: int,
) -> tuple[int, float]:
    """Target index (never before ``last_target_idx``) and steering angle."""
    current, error_front_axle = calc_target_index(state, cx, cy)
    current = max(current, last_target_idx)

    theta_e = pi_2_pi(cyaw[current] - state.yaw) * 0.8
    theta_d = math.atan2(K * error_front_axle, state.v)
    return current, theta_e + theta_d


@dataclass
class StanleyResult:
    """History of a Stanley tracking run."""

    x: list[float] = field(default_factory=list)
    y: list[float] = field(default_factory=list)
    yaw: list[float] = field(default_factory=list)
    v: list[float] = field(default_factory=list)
    t: list[float] = field(default_factory=list)
    target_index: int = 0
    reached: bool = False


def simulate(
    cx: Sequence[float],
    cy: Sequence[float],
    cyaw: Sequence[float],
    state: VehicleState,
    target_speed: float = 20.0 / 3.6,
    max_time: float = 100.0,
) -> StanleyResult:
    """Track the course from ``state`` (advanced in place) until its end or timeout."""
    last_idx = len(cx) - 1
    target_idx, _ = calc_target_index(state, cx, cy)
    result = StanleyResult(
        x=[state.x], y=[state.y], yaw=[state.yaw], v=[state.v], t=[0.0]
    )

    time = 0.0
    while max_time >= time and last_idx > target_idx:
        ai = KP * (target_speed - state.v)
        target_idx, di = stanley_control(state, cx, cy, cyaw, target_idx)
        state.update(ai, di, DT)
        time += DT
        result.x.append(state.x)
        result.y.append(state.y)
        result.yaw.append(state.yaw)
        result.v.append(state.v)
        result.t.append(time)

    result.target_index = target_idx
    result.reached = last_idx <= target_idx
    return result