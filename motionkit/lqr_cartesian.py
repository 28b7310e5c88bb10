"""LQR path tracking with the error state expressed in the Cartesian frame."""

from __future__ import annotations

import itertools
import math
from collections.abc import Sequence

import numpy as np

from motionkit.geometry import pi_2_pi
from motionkit.vehicle import VehicleState

DT = 0.1
MIN_END_SPEED = 1.0 / 3.6
SLOWDOWN_POINTS = 30


def solve_dare(a, b, q, r, tolerance: float = 0.01, max_iter: int = 150) -> np.ndarray:
    """Iterate the discrete-time algebraic Riccati equation and return its solution P.

    Iteration stops once no element changes by ``tolerance`` or more, or after
    ``max_iter`` steps.
    """
    a, b, q, r = (np.atleast_2d(np.asarray(m, dtype=float)) for m in (a, b, q, r))
    p = q.copy()
    p_next = q.copy()
    for _ in range(max_iter):
        gain_term = a.T @ p @ b @ np.linalg.inv(r + b.T @ p @ b) @ b.T @ p @ a
        p_next = a.T @ p @ a - gain_term + q
        if np.max(np.abs(p_next - p)) < tolerance:
            break
        p = p_next
    return p_next


def _lqr_gain(a: np.ndarray, b: np.ndarray, r: np.ndarray, p: np.ndarray) -> np.ndarray:
    return np.linalg.inv(b.T @ p @ b + r) @ (b.T @ p @ a)


def _default_model(dt: float) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    a = np.zeros((5, 5))
    a[0, 0] = 1.0
    a[0, 1] = dt
    a[2, 2] = 1.0
    a[2, 3] = dt
    a[4, 4] = 1.0
    b = np.zeros((5, 2))
    b[4, 1] = dt
    return a, b, np.eye(5), np.eye(2)


class LQRController:
    """Combined lateral and speed LQR controller.

    The error state is ``[e, de, th_e, dth_e, v - v_target]`` and the inputs are
    ``[steer, accel]``. Entries of A and B that depend on the speed are refreshed
    on every call. Missing matrices default to the standard five-state model.
    """

    def __init__(self, a=None, b=None, q=None, r=None, dt: float = DT) -> None:
        da, db, dq, dr = _default_model(dt)
        self.a = np.array(da if a is None else a, dtype=float)
        self.b = np.array(db if b is None else b, dtype=float)
        self.q = np.array(dq if q is None else q, dtype=float)
        self.r = np.array(dr if r is None else r, dtype=float)
        self.dt = dt
        self._prev_e = 0.0
        self._prev_th_e = 0.0

    def compute_input(
        self, state: VehicleState, target: Sequence[float], target_speed: float
    ) -> tuple[float, float]:
        """Acceleration and steering angle towards ``target`` = (x, y, yaw, curvature)."""
        tx, ty, tyaw, tk = target[0], target[1], target[2], target[3]
        dxl = tx - state.x
        dyl = ty - state.y
        e = math.hypot(dxl, dyl)
        if pi_2_pi(tyaw - math.atan2(dyl, dxl)) < 0:
            e = -e

        v = state.v
        th_e = pi_2_pi(state.yaw - tyaw)
        wb = state.config.wb
        self.a[1, 2] = v
        self.b[3, 0] = v / wb
        p = solve_dare(self.a, self.b, self.q, self.r)
        k = _lqr_gain(self.a, self.b, self.r, p)

        x = np.array(
            [
                e,
                (e - self._prev_e) / self.dt,
                th_e,
                (th_e - self._prev_th_e) / self.dt,
                v - target_speed,
            ]
        )
        ustar = -k @ x
        feedforward = math.atan2(wb * tk, 1.0)
        feedback = pi_2_pi(float(ustar[0]))
        delta = feedforward + feedback
        accel = float(ustar[1])

        self._prev_e = e
        self._prev_th_e = th_e
        return accel, delta


def calc_speed_profile(cyaw: Sequence[float], target_speed: float) -> list[float]:
    """Signed speed per course point, flipping direction at sharp yaw changes.

    The last thirty points slow down towards the goal, never below 1 km/h.
    """
    if len(cyaw) < SLOWDOWN_POINTS:
        raise ValueError(f"course needs at least {SLOWDOWN_POINTS} points")
    profile = [target_speed] * len(cyaw)
    direction = 1
    for idx, (yaw0, yaw1) in enumerate(itertools.pairwise(cyaw)):
        dyaw = abs(yaw1 - yaw0)
        switch = math.pi / 4 <= dyaw < math.pi / 2
        if switch:
            direction = -direction
        profile[idx] = -target_speed if direction < 0 else target_speed
        if switch:
            profile[idx] = 0.0

    for idx in range(SLOWDOWN_POINTS):
        pos = len(cyaw) - 1 - idx
        profile[pos] = max(target_speed / (SLOWDOWN_POINTS - idx), MIN_END_SPEED)
    return profile


def calc_nearest_index(state: VehicleState, cx: Sequence[float], cy: Sequence[float]) -> int:
    """Index of the course point nearest the vehicle; ties go to the later point."""
    if not cx or len(cx) != len(cy):
        raise ValueError("course needs equally many, and at least one, x and y values")
    nearest = 0
    min_d = math.inf
    for idx, (px, py) in enumerate(zip(cx, cy)):
        d = math.hypot(state.x - px, state.y - py)
        if d <= min_d:
            nearest = idx
            min_d = d
    return nearest