import math

import pytest

from motionkit.lattice_planner import (
    MAX_ACCEL,
    MAX_CURVATURE,
    MAX_SPEED,
    STOP_POSITION,
    LatticePath,
    extract_optimal_path,
    is_path_collision,
    lattice_planner,
    lattice_planner_for_stopping,
    sampling_paths,
    sampling_paths_for_stopping,
    verify_path,
)
from motionkit.vehicle import VehicleConfig


class StraightRoad:
    """Reference line along the x axis."""

    def __init__(self, length=200.0):
        self.s = [0.0, length]

    def calc_position(self, s):
        return (s, 0.0)

    def calc_yaw(self, s):
        return 0.0


def straight_path(n=10, speed=5.0, accel=0.0):
    path = LatticePath(
        s=[float(i) for i in range(n)],
        l=[0.0] * n,
        s_v=[speed] * n,
        s_a=[accel] * n,
    )
    path.calc_xy(StraightRoad())
    path.calc_yaw_curv()
    return path


def test_calc_xy_offsets_laterally():
    path = LatticePath(s=[0.0, 1.0, 2.0], l=[0.5, 1.0, -1.0])
    path.calc_xy(StraightRoad())
    assert path.x == pytest.approx([0.0, 1.0, 2.0])
    assert path.y == pytest.approx([0.5, 1.0, -1.0])


def test_calc_xy_stops_past_reference_end():
    path = LatticePath(s=[0.0, 5.0, 15.0, 3.0], l=[0.0] * 4)
    path.calc_xy(StraightRoad(length=10.0))
    assert path.x == pytest.approx([0.0, 5.0])


def test_calc_yaw_curv_straight_line():
    path = straight_path(6)
    assert len(path.yaw) == len(path.x)
    assert len(path.ds) == len(path.x)
    assert len(path.curv) == len(path.x) - 1
    assert path.yaw == pytest.approx([0.0] * 6)
    assert path.ds == pytest.approx([1.0] * 6)
    assert path.curv == pytest.approx([0.0] * 5)


def test_calc_yaw_curv_single_point_leaves_empty():
    path = LatticePath(x=[1.0], y=[2.0])
    path.calc_yaw_curv()
    assert path.yaw == []
    assert path.curv == []


def test_verify_path_accepts_gentle_path():
    assert verify_path(straight_path()) is True


def test_verify_path_rejects_speed():
    assert verify_path(straight_path(speed=MAX_SPEED + 1.0)) is False


def test_verify_path_rejects_acceleration():
    assert verify_path(straight_path(accel=-(MAX_ACCEL + 0.5))) is False


def test_verify_path_rejects_curvature():
    path = straight_path()
    path.curv[2] = MAX_CURVATURE * 2
    assert verify_path(path) is False


def test_collision_detected_on_path():
    path = straight_path(20)
    assert is_path_collision(path, VehicleConfig(), [[6.0], [0.0]]) == 1.0


def test_no_collision_far_away():
    path = straight_path(20)
    assert is_path_collision(path, VehicleConfig(), [[6.0], [30.0]]) == 0.0


def test_extract_optimal_path_empty():
    best = extract_optimal_path([])
    assert best.x == []


def test_extract_optimal_path_skips_infeasible_and_sorts():
    bad = straight_path(speed=MAX_SPEED + 5.0)
    bad.cost = 0.5
    good = straight_path()
    good.cost = 2.0
    worse = straight_path()
    worse.cost = 3.0
    paths = [worse, good, bad]
    best = extract_optimal_path(paths)
    assert best is good
    assert [p.cost for p in paths] == sorted(p.cost for p in paths)


def test_extract_optimal_path_none_feasible():
    bad = straight_path(speed=MAX_SPEED + 5.0)
    assert extract_optimal_path([bad]).s == []


def test_sampling_paths_start_at_initial_state():
    road = StraightRoad()
    paths = sampling_paths(0.0, 0.0, 0.0, 2.0, 30.0 / 3.6, 0.0, road, VehicleConfig(), [[], []])
    assert paths
    for path in paths:
        assert path.s[0] == pytest.approx(2.0)
        assert path.l[0] == pytest.approx(0.0)
        assert path.cost > 0
        assert len(path.l) == len(path.t) == len(path.s)


def test_lattice_planner_keeps_lane_without_obstacles():
    road = StraightRoad()
    best = lattice_planner(0.0, 0.0, 0.0, 0.0, 30.0 / 3.6, 0.0, road, VehicleConfig(), [[], []])
    assert best.x
    assert verify_path(best)
    assert best.l == pytest.approx([0.0] * len(best.l), abs=1e-6)


def test_lattice_planner_avoids_obstacle():
    road = StraightRoad()
    vc = VehicleConfig()
    obs = [[40.0], [0.0]]
    best = lattice_planner(0.0, 0.0, 0.0, 0.0, 30.0 / 3.6, 0.0, road, vc, obs)
    assert best.x
    assert is_path_collision(best, vc, obs) == 0.0
    assert abs(best.l[-1]) > 1.0


def test_sampling_paths_for_stopping_count_and_horizon():
    road = StraightRoad()
    paths = sampling_paths_for_stopping(0.0, 0.0, 0.0, 0.0, 30.0 / 3.6, 0.0, road)
    # Five end speeds by horizons 1..15; the zero horizon yields no points.
    assert len(paths) == 75
    assert all(p.t[-1] < 16.0 for p in paths)


def test_lattice_planner_for_stopping_heads_to_stop():
    road = StraightRoad()
    best = lattice_planner_for_stopping(0.0, 0.0, 0.0, 0.0, 30.0 / 3.6, 0.0, road)
    assert best.s
    assert best.s[0] == pytest.approx(0.0)
    assert best.l == pytest.approx([0.0] * len(best.l), abs=1e-9)
    assert best.s[-1] <= STOP_POSITION + 5.0
    assert not math.isnan(best.cost)
    assert verify_path(best)