import math

import numpy as np
import pytest

from motionkit.simulator import LidarSimulator, VehicleSimulator, interpolate


def test_interpolate_starts_at_first_point_and_stays_on_segment():
    pts = interpolate([(0.0, 0.0), (2.0, 0.0)])
    assert pts[0] == (0.0, 0.0)
    assert all(y == 0.0 and 0.0 <= x <= 2.0 for x, y in pts)
    xs = [p[0] for p in pts]
    assert xs == sorted(xs)


def test_interpolate_single_point_is_empty():
    assert interpolate([(1.0, 1.0)]) == []


def test_interpolate_segments_contribute_equally():
    one = interpolate([(0.0, 0.0), (1.0, 0.0)])
    two = interpolate([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)])
    assert len(two) == 2 * len(one)


def test_vehicle_ids_increase():
    a = VehicleSimulator(0, 0, 0, 0, 10, 2, 4)
    b = VehicleSimulator(0, 0, 0, 0, 10, 2, 4)
    assert b.id == a.id + 1


def test_update_moves_and_caps_speed():
    v = VehicleSimulator(0.0, 0.0, 0.0, 2.0, 3.0, 2.0, 4.0)
    v.update(0.5, 10.0, 0.2)
    assert v.x == pytest.approx(1.0)
    assert v.y == pytest.approx(0.0)
    assert v.yaw == pytest.approx(0.1)
    assert v.v == 3.0


def test_global_contour_without_yaw_is_translation():
    v = VehicleSimulator(5.0, -2.0, 0.0, 0.0, 1.0, 2.0, 4.0)
    xs, ys = v.calc_global_contour()
    for (lx, ly), gx, gy in zip(v.contour, xs, ys):
        assert gx == pytest.approx(lx + 5.0)
        assert gy == pytest.approx(ly - 2.0)


def test_global_contour_preserves_distances_from_centre():
    v = VehicleSimulator(1.0, 1.0, 0.7, 0.0, 1.0, 2.0, 4.0)
    xs, ys = v.calc_global_contour()
    for (lx, ly), gx, gy in zip(v.contour, xs, ys):
        assert math.hypot(gx - 1.0, gy - 1.0) == pytest.approx(math.hypot(lx, ly))


def test_ray_casting_keeps_nearest_in_bin():
    lidar = LidarSimulator(range_noise=0.0)
    xs, ys = lidar.ray_casting_filter([0.0, 0.0], [5.0, 3.0], 0.1)
    assert xs == [pytest.approx(3.0)]
    assert ys == [pytest.approx(0.0)]


def test_ray_casting_preserves_range():
    lidar = LidarSimulator(range_noise=0.0)
    xs, ys = lidar.ray_casting_filter([math.pi / 2, -1.0], [4.0, 7.0], 0.05)
    radii = sorted(math.hypot(x, y) for x, y in zip(xs, ys))
    assert radii == [pytest.approx(4.0), pytest.approx(7.0)]


def test_ray_casting_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        LidarSimulator().ray_casting_filter([0.0], [1.0, 2.0], 0.1)


def test_observation_points_lie_on_contour_without_noise():
    lidar = LidarSimulator(range_noise=0.0, rng=np.random.default_rng(0))
    vehicle = VehicleSimulator(10.0, 0.0, 0.0, 0.0, 1.0, 2.0, 4.0)
    xs, ys = lidar.get_observation_points([vehicle], math.radians(3))
    cx, cy = vehicle.calc_global_contour()
    contour_ranges = [math.hypot(x, y) for x, y in zip(cx, cy)]
    assert xs
    for x, y in zip(xs, ys):
        r = math.hypot(x, y)
        assert any(abs(r - c) < 1e-9 for c in contour_ranges)