"""Dynamic window approach for local obstacle avoidance."""

from __future__ import annotations

import argparse
import enum
import math
import sys
from collections.abc import Sequence
from dataclasses import dataclass

FLOAT_MAX = sys.float_info.max

# x [m], y [m], yaw [rad], v [m/s], omega [rad/s]
RobotState = tuple[float, float, float, float, float]

DEFAULT_OBSTACLES: list[tuple[float, float]] = [
    (-1.0, -1.0), (0.0, 2.0), (4.0, 2.0), (5.0, 0.0), (5.0, 4.0), (5.0, 5.0),
    (5.0, 6.0), (5.0, 8.0), (5.0, 9.0), (8.0, 9.0), (7.0, 9.0), (8.0, 10.0),
    (9.0, 11.0), (12.0, 13.0), (12.0, 12.0), (15.0, 15.0), (13.0, 13.0),
]


class RobotType(enum.Enum):
    """Shape used for collision checking."""

    CIRCLE = enum.auto()
    RECTANGLE = enum.auto()


@dataclass
class Config:
    """Robot limits, sampling resolutions and cost weights."""

    max_speed: float = 1.5
    min_speed: float = -1.0
    max_yaw_rate: float = 40.0 * math.pi / 180.0
    max_accel: float = 0.3
    max_delta_yaw_rate: float = 40.0 * math.pi / 180.0
    v_resolution: float = 0.05
    yaw_rate_resolution: float = 0.5 * math.pi / 180.0
    dt: float = 0.1
    predict_time: float = 3.0
    to_goal_cost_gain: float = 0.15
    speed_cost_gain: float = 1.0
    obstacle_cost_gain: float = 1.0
    robot_stuck_flag_cons: float = 0.001
    robot_type: RobotType = RobotType.RECTANGLE
    robot_radius: float = 1.0
    robot_width: float = 1.2
    robot_length: float = 2.0


def calc_dynamic_window(x: Sequence[float], config: Config) -> tuple[float, float, float, float]:
    """Search window ``(v_min, v_max, w_min, w_max)``.

    The window spans the configured speed and yaw-rate limits; the current
    state does not narrow it.
    """
    return (config.min_speed, config.max_speed, -config.max_yaw_rate, config.max_yaw_rate)


def motion(x: Sequence[float], v: float, w: float, dt: float) -> RobotState:
    """State after ``dt`` at speed ``v`` and yaw rate ``w``; position uses the old heading."""
    yaw = x[2]
    return (
        x[0] + v * math.cos(yaw) * dt,
        x[1] + v * math.sin(yaw) * dt,
        yaw + w * dt,
        v,
        w,
    )


def predict_trajectory(
    x_init: Sequence[float], v: float, w: float, config: Config
) -> list[RobotState]:
    """States from ``x_init`` over the prediction horizon at constant ``v`` and ``w``."""
    x: RobotState = tuple(x_init)  # type: ignore[assignment]
    trajectory = [x]
    time = 0.0
    while time <= config.predict_time:
        x = motion(x, v, w, config.dt)
        trajectory.append(x)
        time += config.dt
    return trajectory


def calc_to_goal_cost(trajectory: Sequence[Sequence[float]], goal: Sequence[float]) -> float:
    """Absolute angle between the final heading and the direction to the goal."""
    last = trajectory[-1]
    error_angle = math.atan2(goal[1] - last[1], goal[0] - last[0])
    cost_angle = error_angle - last[2]
    return abs(math.atan2(math.sin(cost_angle), math.cos(cost_angle)))


def calc_obstacle_cost(
    trajectory: Sequence[Sequence[float]],
    ob: Sequence[Sequence[float]],
    config: Config,
) -> float:
    """Inverse of the closest obstacle distance; half the largest float on collision.

    The rectangle check rotates the obstacle's own coordinates by each
    trajectory heading.
    """
    minr = FLOAT_MAX
    half_length = config.robot_length / 2
    half_width = config.robot_width / 2
    for ox, oy in ((o[0], o[1]) for o in ob):
        for state in trajectory:
            yaw = state[2]
            r = math.hypot(state[0] - ox, state[1] - oy)
            if config.robot_type is RobotType.RECTANGLE:
                obsx = ox * math.cos(yaw) - oy * math.sin(yaw)
                obsy = ox * math.sin(yaw) + oy * math.cos(yaw)
                if -half_length <= obsy <= half_length and -half_width <= obsx <= half_width:
                    return FLOAT_MAX / 2.0
            elif r <= config.robot_radius:
                return FLOAT_MAX / 2.0
            minr = min(minr, r)
    return 1.0 / minr


def _steps(start: float, stop: float, step: float):
    value = start
    while value <= stop:
        yield value
        value += step


def calc_control_and_trajectory(
    x: Sequence[float],
    dw: Sequence[float],
    config: Config,
    goal: Sequence[float],
    ob: Sequence[Sequence[float]],
) -> tuple[tuple[float, float], list[RobotState]]:
    """Cheapest control ``(v, w)`` in the window and the trajectory it predicts."""
    x_init: RobotState = tuple(x)  # type: ignore[assignment]
    min_cost = FLOAT_MAX
    best_u = (0.0, 0.0)
    best_trajectory = [x_init]

    for v in _steps(dw[0], dw[1], config.v_resolution):
        for w in _steps(dw[2], dw[3], config.yaw_rate_resolution):
            trajectory = predict_trajectory(x_init, v, w, config)
            final_cost = (
                config.to_goal_cost_gain * calc_to_goal_cost(trajectory, goal)
                + config.speed_cost_gain * (config.max_speed - trajectory[-1][3])
                + config.obstacle_cost_gain * calc_obstacle_cost(trajectory, ob, config)
            )
            if min_cost >= final_cost:
                min_cost = final_cost
                best_u = (v, w)
                best_trajectory = trajectory
                if (
                    v < config.robot_stuck_flag_cons
                    and abs(x_init[3]) < config.robot_stuck_flag_cons
                ):
                    # Turn on the spot so the robot does not stay stuck.
                    best_u = (v, -config.max_delta_yaw_rate)
    return best_u, best_trajectory


def dwa_control(
    x: Sequence[float],
    config: Config,
    goal: Sequence[float],
    ob: Sequence[Sequence[float]],
) -> tuple[tuple[float, float], list[RobotState]]:
    """Control ``(v, w)`` and predicted trajectory for state ``x``."""
    dw = calc_dynamic_window(x, config)
    return calc_control_and_trajectory(x, dw, config, goal, ob)


def main(argv: Sequence[str] | None = None) -> int:
    """Drive a robot to a goal through an obstacle field."""
    parser = argparse.ArgumentParser(description="Dynamic window approach simulation.")
    parser.add_argument("--no-plot", action="store_true", help="do not show a plot")
    parser.add_argument("--max-steps", type=int, default=None, help="stop after this many steps")
    args = parser.parse_args(argv)

    config = Config()
    x: RobotState = (0.0, 0.0, 0.0, math.pi / 8, 0.0)
    goal = (10.0, 10.0)
    obs = DEFAULT_OBSTACLES
    history = [x]

    plt = None
    if not args.no_plot:
        import matplotlib.pyplot as plt

        from motionkit.drawing import draw_vehicle
        from motionkit.vehicle import VehicleConfig

        vc = VehicleConfig.scaled(0.5)

    step = 0
    while args.max_steps is None or step < args.max_steps:
        step += 1
        u, predicted = dwa_control(x, config, goal, obs)
        x = motion(x, u[0], u[1], config.dt)

        if plt is not None:
            plt.cla()
            ax = plt.gca()
            ax.plot([s[0] for s in predicted], [s[1] for s in predicted], "-r",
                    label="Planning trajectory")
            ax.plot([goal[0]], [goal[1]], "xg", label="Goal")
            ax.plot([o[0] for o in obs], [o[1] for o in obs], "ok")
            draw_vehicle(ax, (x[0], x[1], x[2]), u[1], vc)
            ax.axis("equal")
            ax.grid(True)
            ax.set_title("Dynamic Window Approach")
            ax.legend()
            plt.pause(0.0001)

        if math.hypot(x[0] - goal[0], x[1] - goal[1]) <= config.robot_radius:
            break
        history.append(x)

    if plt is not None:
        plt.gca().plot([s[0] for s in history], [s[1] for s in history], "-b")
        plt.show()
    return 0