"""Grid-based potential field path planning."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from collections import deque
from collections.abc import MutableSequence, Sequence

import numpy as np

from motionkit.geometry import TicToc

KP = 5.0  # attractive potential gain
ETA = 100.0  # repulsive potential gain
AREA_WIDTH = 30.0  # margin around the start, goal and obstacles [m]
OSCILLATIONS_DETECTION_LENGTH = 3

_log = logging.getLogger(__name__)
_UNREACHABLE = sys.float_info.max


def _round(value: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def calc_attractive_potential(xy: Sequence[float], goal: Sequence[float]) -> float:
    """Potential pulling towards the goal, proportional to the distance."""
    return 0.5 * KP * math.hypot(xy[0] - goal[0], xy[1] - goal[1])


def calc_repulsive_potential(
    xy: Sequence[float], obs: Sequence[Sequence[float]], rr: float
) -> float:
    """Potential pushing away from the nearest obstacle within radius ``rr``.

    ``obs`` is ``[xs, ys]``. Distances below 0.1 count as 0.1.
    """
    if not obs[0]:
        return 0.0
    dq = math.inf
    for ox, oy in zip(obs[0], obs[1]):
        dq = min(dq, math.hypot(xy[0] - ox, xy[1] - oy))
    if dq <= rr:
        dq = max(dq, 0.1)
        return 0.5 * ETA * (1.0 / dq - 1.0 / rr) ** 2
    return 0.0


def calc_potential_field(
    start: Sequence[float],
    goal: Sequence[float],
    obs: Sequence[Sequence[float]],
    reso: float,
    rr: float,
) -> tuple[np.ndarray, tuple[float, float]]:
    """Potential over a grid indexed ``[ix, iy]`` and the world position of cell (0, 0)."""
    if not obs[0] or len(obs[0]) != len(obs[1]):
        raise ValueError("obstacles need equally many, and at least one, x and y values")
    if reso <= 0:
        raise ValueError("grid resolution must be positive")
    half = AREA_WIDTH / 2.0
    minx = min(min(obs[0]), start[0], goal[0]) - half
    miny = min(min(obs[1]), start[1], goal[1]) - half
    maxx = max(max(obs[0]), start[0], goal[0]) + half
    maxy = max(max(obs[1]), start[1], goal[1]) + half
    xw = _round((maxx - minx) / reso)
    yw = _round((maxy - miny) / reso)

    pmap = np.zeros((xw, yw))
    for ix in range(xw):
        x = ix * reso + minx
        for iy in range(yw):
            y = iy * reso + miny
            pmap[ix, iy] = calc_attractive_potential((x, y), goal) + calc_repulsive_potential(
                (x, y), obs, rr
            )
    return pmap, (minx, miny)


def get_motion_model() -> list[tuple[int, int]]:
    """The eight grid moves, straight ones first."""
    return [(1, 0), (0, 1), (-1, 0), (0, -1), (-1, -1), (-1, 1), (1, -1), (1, 1)]


def oscillations_detection(
    previous_ids: MutableSequence[tuple[int, int]], ixy: Sequence[int]
) -> bool:
    """Record ``ixy`` in the recent history and report whether a cell repeats in it.

    The history is kept to the last few cells.
    """
    previous_ids.append((ixy[0], ixy[1]))
    while len(previous_ids) > OSCILLATIONS_DETECTION_LENGTH:
        del previous_ids[0]
    return len(set(previous_ids)) < len(previous_ids)


def potential_field_planning(
    start: Sequence[float],
    goal: Sequence[float],
    obs: Sequence[Sequence[float]],
    reso: float,
    rr: float,
) -> list[list[float]]:
    """Path ``[xs, ys]`` descending the potential from start towards goal.

    Stops within ``reso`` of the goal or when the path starts to oscillate.
    """
    pmap, (minx, miny) = calc_potential_field(start, goal, obs, reso, rr)
    nx, ny = pmap.shape
    d = math.hypot(start[0] - goal[0], start[1] - goal[1])
    ix = _round((start[0] - minx) / reso)
    iy = _round((start[1] - miny) / reso)

    xs = [float(start[0])]
    ys = [float(start[1])]
    history: deque[tuple[int, int]] = deque()
    motions = get_motion_model()

    while d >= reso:
        minp = _UNREACHABLE
        minix = miniy = -1
        for mx, my in motions:
            inx, iny = ix + mx, iy + my
            p = _UNREACHABLE
            if 0 <= inx < nx and 0 <= iny < ny:
                p = float(pmap[inx, iny])
            if minp > p:
                minp = p
                minix, miniy = inx, iny
        ix, iy = minix, miniy
        xp = ix * reso + minx
        yp = iy * reso + miny
        d = math.hypot(goal[0] - xp, goal[1] - yp)
        xs.append(xp)
        ys.append(yp)

        if oscillations_detection(history, (ix, iy)):
            _log.info("Oscillation detected at (%d,%d)", ix, iy)
            break
    return [xs, ys]


def main(argv: Sequence[str] | None = None) -> int:
    """Plan through a small obstacle field and plot the potential and the path."""
    parser = argparse.ArgumentParser(description="Potential field path planning.")
    parser.add_argument("--no-plot", action="store_true", help="do not show a plot")
    args = parser.parse_args(argv)

    start = (0.0, 10.0)
    goal = (30.0, 30.0)
    grid_size = 0.5
    robot_radius = 5.0
    obstacles = [[15.0, 5.0, 20.0, 25.0], [25.0, 15.0, 26.0, 25.0]]

    timer = TicToc()
    path = potential_field_planning(start, goal, obstacles, grid_size, robot_radius)
    print(f"potential_field_planning costtime: {timer.toc() / 1000:.3f} s")

    if not args.no_plot:
        import matplotlib.pyplot as plt

        pmap, (minx, miny) = calc_potential_field(start, goal, obstacles, grid_size, robot_radius)
        ax = plt.gca()
        ax.imshow(pmap.T, vmax=100, cmap="Blues", origin="lower")
        to_ix = [(x - minx) / grid_size for x in path[0]]
        to_iy = [(y - miny) / grid_size for y in path[1]]
        ax.plot(to_ix[:1], to_iy[:1], "*k")
        ax.plot([(goal[0] - minx) / grid_size], [(goal[1] - miny) / grid_size], "*m")
        ax.plot(to_ix, to_iy, ".r")
        ax.grid(True)
        ax.axis("equal")
        ax.set_title("Potential Field Planning")
        plt.show()
    return 0