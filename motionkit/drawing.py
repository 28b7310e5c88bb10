"""Vehicle, trailer and arrow outlines, and their drawing on matplotlib axes."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from motionkit.geometry import rotation_matrix2d
from motionkit.vehicle import VehicleConfig


def _box(back: float, front: float, half_width: float) -> np.ndarray:
    """Closed rectangle as a 2x5 array of x (row 0) and y (row 1) points."""
    return np.array(
        [
            [back, back, front, front, back],
            [half_width, -half_width, -half_width, half_width, half_width],
        ]
    )


def _column(x: float, y: float) -> np.ndarray:
    return np.array([[x], [y]])


def arrow_lines(x: float, y: float, theta: float, length: float) -> list[np.ndarray]:
    """Shaft and two head segments of an arrow, each a 2x2 array of x and y."""
    angle = math.pi / 6
    head = 0.3 * length
    x_end = x + length * math.cos(theta)
    y_end = y + length * math.sin(theta)
    segments = [np.array([[x, x_end], [y, y_end]])]
    for tip in (theta + math.pi - angle, theta + math.pi + angle):
        segments.append(
            np.array(
                [
                    [x_end, x_end + head * math.cos(tip)],
                    [y_end, y_end + head * math.sin(tip)],
                ]
            )
        )
    return segments


def vehicle_outlines(
    state: Sequence[float],
    steer: float,
    config: VehicleConfig,
    show_wheel: bool = True,
) -> list[np.ndarray]:
    """Body outline followed, if asked, by front-right, front-left, rear-right, rear-left wheels.

    ``state`` is (x, y, yaw). The steering angle is capped at ``config.max_steer``.
    """
    x, y, yaw = state[0], state[1], state[2]
    steer = min(steer, config.max_steer)
    rot_body = rotation_matrix2d(yaw)
    offset = _column(x, y)

    outlines = [rot_body @ _box(-config.rb, config.rf, config.w / 2) + offset]
    if show_wheel:
        wheel = _box(-config.tr, config.tr, config.tw / 4)
        front = rotation_matrix2d(steer) @ wheel
        half_track = config.wd / 2
        wheels = (
            front + _column(config.wb, -half_track),
            front + _column(config.wb, half_track),
            wheel + _column(0.0, -half_track),
            wheel + _column(0.0, half_track),
        )
        outlines.extend(rot_body @ w + offset for w in wheels)
    return outlines


def trailer_outlines(
    state: Sequence[float],
    steer: float,
    config: VehicleConfig,
    show_wheel: bool = True,
) -> list[np.ndarray]:
    """Tractor outlines followed by the trailer body and, if asked, its left and right wheels.

    ``state`` is (x, y, yaw, trailer_yaw).
    """
    outlines = vehicle_outlines(state[:3], steer, config, show_wheel)
    rot_trailer = rotation_matrix2d(state[3])
    offset = _column(state[0], state[1])

    outlines.append(rot_trailer @ _box(-config.rtb, config.rtf, config.w / 2) + offset)
    if show_wheel:
        wheel = _box(-config.tr, config.tr, config.tw / 4)
        for side in (config.wd / 2, -config.wd / 2):
            outlines.append(rot_trailer @ (wheel + _column(-config.rtr, side)) + offset)
    return outlines


def _axes(ax):
    if ax is None:
        import matplotlib.pyplot as plt

        return plt.gca()
    return ax


def _plot_all(ax, shapes: Sequence[np.ndarray], color: str) -> None:
    for shape in shapes:
        ax.plot(shape[0], shape[1], color)


def draw_arrow(ax, x: float, y: float, theta: float, length: float, color: str = "-k") -> None:
    """Draw an arrow on ``ax`` (the current axes when None)."""
    _plot_all(_axes(ax), arrow_lines(x, y, theta, length), color)


def draw_vehicle(
    ax,
    state: Sequence[float],
    steer: float,
    config: VehicleConfig,
    color: str = "-k",
    show_wheel: bool = True,
    show_arrow: bool = True,
) -> None:
    """Draw a vehicle at (x, y, yaw) on ``ax`` (the current axes when None)."""
    ax = _axes(ax)
    _plot_all(ax, vehicle_outlines(state, steer, config, show_wheel), color)
    if show_arrow:
        draw_arrow(ax, state[0], state[1], state[2], config.wb * 0.8, color)


def draw_trailer(
    ax,
    state: Sequence[float],
    steer: float,
    config: VehicleConfig,
    color: str = "-k",
    show_wheel: bool = True,
    show_arrow: bool = True,
) -> None:
    """Draw a vehicle with trailer at (x, y, yaw, trailer_yaw)."""
    ax = _axes(ax)
    draw_vehicle(ax, state[:3], steer, config, color, show_wheel, show_arrow)
    tractor_count = len(vehicle_outlines(state[:3], steer, config, show_wheel))
    trailer_parts = trailer_outlines(state, steer, config, show_wheel)[tractor_count:]
    _plot_all(ax, trailer_parts, color)