"""Extended Kalman filter localisation with noisy GPS and odometry."""

from __future__ import annotations

import argparse
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from motionkit.geometry import rotation_matrix2d

DT = 0.1
SIM_TIME = 50.0

# Motion model covariance used by the filter.
Q = np.diag([0.1**2, 0.1**2, math.radians(1.0) ** 2, 0.1**2])
# Observation model covariance used by the filter.
R = np.eye(2)
# Simulated input and GPS noise.
INPUT_NOISE = np.diag([1.0, math.radians(30.0) ** 2])
GPS_NOISE = np.diag([0.5**2, 0.5**2])


def calc_input() -> np.ndarray:
    """Control input: speed [m/s] and yaw rate [rad/s]."""
    return np.array([1.0, 0.1])


def motion_model(x, u, dt: float = DT) -> np.ndarray:
    """Predict the state ``[x, y, yaw, v]`` after ``dt`` with input ``[v, yaw_rate]``."""
    x = np.asarray(x, dtype=float)
    u = np.asarray(u, dtype=float)
    yaw = x[2]
    b = np.array(
        [
            [dt * math.cos(yaw), 0.0],
            [dt * math.sin(yaw), 0.0],
            [0.0, dt],
            [1.0, 0.0],
        ]
    )
    return x + b @ u


def observation_model(x) -> np.ndarray:
    """Position part of the state."""
    return jacob_h() @ np.asarray(x, dtype=float)


def jacob_f(x, u, dt: float = DT) -> np.ndarray:
    """Jacobian of the motion model with respect to the state."""
    yaw = float(x[2])
    v = float(u[0])
    jf = np.eye(4)
    jf[0, 2] = -dt * v * math.sin(yaw)
    jf[0, 3] = dt * math.cos(yaw)
    jf[1, 2] = dt * v * math.cos(yaw)
    jf[1, 3] = dt * math.sin(yaw)
    return jf


def jacob_h() -> np.ndarray:
    """Jacobian of the observation model."""
    return np.array([[1.0, 0.0, 0.0, 0.0], [0.0, 1.0, 0.0, 0.0]])


def ekf_estimation(x_est, p_est, z, u, q, r) -> tuple[np.ndarray, np.ndarray]:
    """One predict and update step; returns the new estimate and covariance."""
    x_pred = motion_model(x_est, u)
    jf = jacob_f(x_pred, u)
    p_pred = jf @ np.asarray(p_est, dtype=float) @ jf.T + np.asarray(q, dtype=float)

    jh = jacob_h()
    y = np.asarray(z, dtype=float) - observation_model(x_pred)
    s = jh @ p_pred @ jh.T + np.asarray(r, dtype=float)
    k = p_pred @ jh.T @ np.linalg.inv(s)

    return x_pred + k @ y, (np.eye(4) - k @ jh) @ p_pred


def covariance_ellipse(x: float, y: float, cov, chi2: float = 3.0) -> tuple[list[float], list[float]]:
    """Outline points of the ellipse drawn for a 2x2 covariance centred at (x, y)."""
    _, e_vector = np.linalg.eig(np.asarray(cov, dtype=float))
    e_vector = np.real(e_vector)
    angle = math.atan2(e_vector[0, 1], e_vector[0, 0])
    rot = rotation_matrix2d(angle)
    a, b = e_vector[0, 1], e_vector[0, 0]
    if a < b:
        a, b = b, a

    px: list[float] = []
    py: list[float] = []
    t = 0.0
    while t < 2 * math.pi + 0.2:
        point = np.array([2.0 * a * math.cos(t), 2.0 * b * math.sin(t)]) @ rot
        px.append(float(point[0]) + x)
        py.append(float(point[1]) + y)
        t += 0.2
    return px, py


@dataclass
class EKFHistory:
    """States recorded over a localisation run."""

    true: list[np.ndarray] = field(default_factory=list)
    dead_reckoning: list[np.ndarray] = field(default_factory=list)
    estimate: list[np.ndarray] = field(default_factory=list)
    observation: list[np.ndarray] = field(default_factory=list)
    covariance: np.ndarray = field(default_factory=lambda: np.eye(4))


def simulate(sim_time: float = SIM_TIME, rng: np.random.Generator | None = None) -> EKFHistory:
    """Run the filter against a simulated vehicle for ``sim_time`` seconds."""
    rng = np.random.default_rng() if rng is None else rng
    u = calc_input()
    x_est = np.zeros(4)
    x_true = np.zeros(4)
    x_dr = np.zeros(4)
    p_est = np.eye(4)
    history = EKFHistory(
        true=[x_true], dead_reckoning=[x_true], estimate=[x_est], observation=[np.zeros(2)]
    )

    time = 0.0
    while sim_time >= time:
        time += DT
        ud = np.array(
            [
                u[0] + rng.standard_normal() * INPUT_NOISE[0, 0],
                u[1] + rng.standard_normal() * INPUT_NOISE[1, 1],
            ]
        )
        x_true = motion_model(x_true, u)
        x_dr = motion_model(x_dr, ud)
        z = np.array(
            [
                x_true[0] + rng.standard_normal() * GPS_NOISE[0, 0],
                x_true[1] + rng.standard_normal() * GPS_NOISE[1, 1],
            ]
        )
        x_est, p_est = ekf_estimation(x_est, p_est, z, ud, Q, R)

        history.true.append(x_true)
        history.dead_reckoning.append(x_dr)
        history.estimate.append(x_est)
        history.observation.append(z)
    history.covariance = p_est
    return history


def main(argv: Sequence[str] | None = None) -> int:
    """Run the localisation simulation and plot the trajectories."""
    parser = argparse.ArgumentParser(description="EKF localisation simulation.")
    parser.add_argument("--no-plot", action="store_true", help="do not show a plot")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    args = parser.parse_args(argv)

    history = simulate(SIM_TIME, np.random.default_rng(args.seed))

    if not args.no_plot:
        import matplotlib.pyplot as plt

        def xy(points):
            arr = np.asarray(points)
            return arr[:, 0], arr[:, 1]

        ax = plt.gca()
        ax.plot(*xy(history.observation), ".g", label="GPS")
        ax.plot(*xy(history.true), "-b", label="Ground-truth")
        ax.plot(*xy(history.dead_reckoning), "-k", label="Dead-reckoning")
        ax.plot(*xy(history.estimate), "-r", label="Estimation")
        last = history.estimate[-1]
        ax.plot(*covariance_ellipse(last[0], last[1], history.covariance[:2, :2]), "-r")
        ax.set_title("EKF Localization")
        ax.axis("equal")
        ax.grid(True)
        ax.legend(loc="upper right")
        plt.show()
    return 0