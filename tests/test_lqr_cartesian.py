import math

import numpy as np
import pytest

from motionkit.lqr_cartesian import (
    LQRController,
    calc_nearest_index,
    calc_speed_profile,
    solve_dare,
)
from motionkit.vehicle import VehicleConfig, VehicleState


def test_solve_dare_scalar_converges_to_golden_ratio():
    p = solve_dare([[1.0]], [[1.0]], [[1.0]], [[1.0]], tolerance=1e-12, max_iter=1000)
    assert p[0, 0] == pytest.approx((1 + math.sqrt(5)) / 2)


def test_solve_dare_single_iteration():
    p = solve_dare([[1.0]], [[1.0]], [[1.0]], [[1.0]], max_iter=1)
    assert p[0, 0] == pytest.approx(1.5)


def test_solve_dare_satisfies_riccati_equation():
    a = np.array([[1.0, 0.1], [0.0, 1.0]])
    b = np.array([[0.0], [0.1]])
    q = np.eye(2)
    r = np.array([[1.0]])
    p = solve_dare(a, b, q, r, tolerance=1e-12, max_iter=10000)
    rhs = a.T @ p @ a - a.T @ p @ b @ np.linalg.inv(r + b.T @ p @ b) @ b.T @ p @ a + q
    assert np.allclose(p, rhs, atol=1e-8)
    assert np.allclose(p, p.T)


def test_compute_input_on_path_gives_feedforward_only():
    cfg = VehicleConfig.scaled(0.5)
    state = VehicleState(cfg, x=1.0, y=2.0, yaw=0.3, v=2.0)
    controller = LQRController()
    accel, delta = controller.compute_input(state, (1.0, 2.0, 0.3, 0.2), 2.0)
    assert accel == pytest.approx(0.0)
    assert delta == pytest.approx(math.atan(cfg.wb * 0.2))


def test_compute_input_is_antisymmetric_in_lateral_offset():
    cfg = VehicleConfig.scaled(0.5)
    left = VehicleState(cfg, x=0.0, y=1.0, yaw=0.0, v=2.0)
    right = VehicleState(cfg, x=0.0, y=-1.0, yaw=0.0, v=2.0)
    acc_l, delta_l = LQRController().compute_input(left, (0.0, 0.0, 0.0, 0.0), 2.0)
    acc_r, delta_r = LQRController().compute_input(right, (0.0, 0.0, 0.0, 0.0), 2.0)
    assert delta_l == pytest.approx(-delta_r)
    assert acc_l == pytest.approx(-acc_r)
    assert abs(delta_l) > 0


def test_speed_profile_slows_down_at_end():
    target = 10.0 / 3.6
    profile = calc_speed_profile([0.0] * 40, target)
    assert len(profile) == 40
    assert profile[:10] == [target] * 10
    assert profile[-1] == pytest.approx(target)
    assert profile[10] == pytest.approx(1.0 / 3.6)
    assert all(s >= 1.0 / 3.6 for s in profile)


def test_speed_profile_switches_direction():
    target = 10.0 / 3.6
    yaws = [0.0, 0.0, 0.0] + [math.pi / 3] * 37
    profile = calc_speed_profile(yaws, target)
    assert profile[2] == 0.0
    assert profile[3:10] == [-target] * 7
    assert profile[:2] == [target, target]


def test_speed_profile_too_short_raises():
    with pytest.raises(ValueError):
        calc_speed_profile([0.0] * 10, 1.0)


def test_nearest_index_prefers_later_on_tie():
    state = VehicleState(VehicleConfig(), x=1.0, y=0.0)
    assert calc_nearest_index(state, [0.0, 2.0], [0.0, 0.0]) == 1
    assert calc_nearest_index(state, [0.0, 1.1, 5.0], [0.0, 0.0, 0.0]) == 1


def test_nearest_index_empty_course_raises():
    with pytest.raises(ValueError):
        calc_nearest_index(VehicleState(), [], [])