"""LQR lateral control in the path frame with a proportional speed controller."""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence

import numpy as np

from motionkit.geometry import pi_2_pi
from motionkit.lqr_cartesian import _lqr_gain, solve_dare
from motionkit.vehicle import VehicleState

DT = 0.1


class TrajectoryAnalyzer:
    """Reference trajectory that projects vehicle states onto itself.

    The search for the nearest point only moves forward along the trajectory.
    """

    def __init__(
        self,
        x: Sequence[float],
        y: Sequence[float],
        yaw: Sequence[float],
        k: Sequence[float],
    ) -> None:
        if not x or not len(x) == len(y) == len(yaw) == len(k):
            raise ValueError("trajectory needs equally many, and at least one, values")
        self.x = list(x)
        self.y = list(y)
        self.yaw = list(yaw)
        self.k = list(k)
        self._ind_old = 0
        self._ind_end = len(self.x) - 1

    def to_trajectory_frame(self, state: VehicleState) -> tuple[float, float, float, float]:
        """Heading error, signed lateral error, reference yaw and reference curvature."""
        min_dx, min_dy, min_dist = 0.0, 0.0, sys.float_info.max
        min_idx = self._ind_old
        for idx in range(self._ind_old + 1, self._ind_end + 1):
            dx = state.x - self.x[idx]
            dy = state.y - self.y[idx]
            dist = math.hypot(dx, dy)
            if dist < min_dist:
                min_dx, min_dy, min_dist = dx, dy, dist
                min_idx = idx
        self._ind_old = min_idx

        normal_x = math.cos(state.yaw + math.pi / 2)
        normal_y = math.sin(state.yaw + math.pi / 2)
        if normal_x * min_dx + normal_y * min_dy > 0:
            e_cg = min_dist
        else:
            e_cg = -min_dist

        yaw_ref = self.yaw[min_idx]
        theta_e = pi_2_pi(state.yaw - yaw_ref)
        return theta_e, e_cg, yaw_ref, self.k[min_idx]


class LatController:
    """Lateral LQR controller on the state ``[e, de, th_e, dth_e]``."""

    def __init__(self, dt: float = DT) -> None:
        self.dt = dt
        self._e_cg_old = 0.0
        self._theta_e_old = 0.0
        self.a = np.zeros((4, 4))
        self.a[0, 0] = 1.0
        self.a[0, 1] = dt
        self.a[2, 2] = 1.0
        self.a[2, 3] = dt
        self.b = np.zeros((4, 1))
        self.q = np.diag([0.1, 1.0, 0.1, 1.0])
        self.r = np.eye(1)

    def compute_input(self, state: VehicleState, ref_trajectory: TrajectoryAnalyzer) -> float:
        """Steering angle that brings ``state`` onto the reference trajectory."""
        theta_e, e_cg, _yaw_ref, k_ref = ref_trajectory.to_trajectory_frame(state)
        wb = state.config.wb
        self.a[1, 2] = state.v
        self.b[3, 0] = state.v / wb
        k = self.solve_lqr()

        x = np.array(
            [
                e_cg,
                (e_cg - self._e_cg_old) / self.dt,
                theta_e,
                (theta_e - self._theta_e_old) / self.dt,
            ]
        )
        ustar = -k @ x
        feedback = pi_2_pi(float(ustar[0]))
        feedforward = math.atan2(wb * k_ref, 1.0)

        self._e_cg_old = e_cg
        self._theta_e_old = theta_e
        return feedback + feedforward

    def solve_lqr(self, tolerance: float = 0.01, max_iter: int = 150) -> np.ndarray:
        """LQR gain (1x4) for the current model."""
        p = solve_dare(self.a, self.b, self.q, self.r, tolerance, max_iter)
        return _lqr_gain(self.a, self.b, self.r, p)


class LonController:
    """Proportional speed controller that brakes close to the goal."""

    def __init__(self, kp: float = 0.3) -> None:
        self.kp = kp

    def compute_input(self, target_speed: float, state: VehicleState, dist: float) -> float:
        """Acceleration for the remaining distance ``dist`` to the goal."""
        accel = self.kp * (target_speed - state.v)
        if dist < 10.0:
            if state.v > 2.0:
                accel = -3.0
            elif state.v < -2.0:
                accel = -1.0
        return accel