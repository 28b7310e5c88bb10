import math

import numpy as np
import pytest

from motionkit.ekf_localization import (
    Q,
    R,
    calc_input,
    covariance_ellipse,
    ekf_estimation,
    jacob_f,
    jacob_h,
    main,
    motion_model,
    observation_model,
    simulate,
)


def test_calc_input_values():
    assert list(calc_input()) == [1.0, 0.1]


def test_observation_model_takes_position():
    assert list(observation_model([3.0, 4.0, 0.5, 2.0])) == [3.0, 4.0]
    assert jacob_h().shape == (2, 4)


def test_motion_model_keeps_heading_direction():
    x = np.array([1.0, 2.0, math.pi / 2, 0.0])
    nxt = motion_model(x, [1.0, 0.0])
    assert nxt[0] == pytest.approx(1.0)
    assert nxt[1] > 2.0
    assert nxt[2] == pytest.approx(math.pi / 2)


def test_jacobian_yaw_column_matches_finite_difference():
    x = np.array([1.0, -1.0, 0.7, 0.0])
    u = np.array([1.5, 0.2])
    eps = 1e-6
    dx = x.copy()
    dx[2] += eps
    numeric = (motion_model(dx, u) - motion_model(x, u)) / eps
    assert np.allclose(jacob_f(x, u)[:, 2], numeric, atol=1e-5)


def test_ekf_trusts_precise_measurement():
    z = np.array([2.0, -1.0])
    x_est, p_est = ekf_estimation(np.zeros(4), np.eye(4), z, calc_input(), Q, np.eye(2) * 1e-9)
    assert x_est[:2] == pytest.approx(z, abs=1e-6)
    assert np.allclose(p_est, p_est.T, atol=1e-9)


def test_ekf_covariance_stays_positive_definite():
    x_est, p_est = np.zeros(4), np.eye(4)
    for step in range(20):
        x_est, p_est = ekf_estimation(x_est, p_est, [0.1 * step, 0.0], calc_input(), Q, R)
    eigenvalues = np.linalg.eigvalsh((p_est + p_est.T) / 2)
    assert float(eigenvalues.min()) > 0.0
    assert p_est.shape == (4, 4)


def test_covariance_ellipse_identity_is_flat_horizontal():
    px, py = covariance_ellipse(1.0, 2.0, np.eye(2))
    assert len(px) == len(py)
    assert all(v == pytest.approx(2.0) for v in py)
    assert max(px) <= 3.0 + 1e-9
    assert min(px) >= -1.0 - 1e-9


def test_simulate_is_reproducible_and_consistent():
    a = simulate(5.0, np.random.default_rng(3))
    b = simulate(5.0, np.random.default_rng(3))
    assert len(a.true) == len(a.estimate) == len(a.observation) == len(a.dead_reckoning)
    assert all(np.array_equal(p, q) for p, q in zip(a.estimate, b.estimate))


def test_true_trajectory_is_independent_of_noise():
    a = simulate(5.0, np.random.default_rng(1))
    b = simulate(5.0, np.random.default_rng(2))
    assert all(np.allclose(p, q) for p, q in zip(a.true, b.true))


def test_estimate_beats_dead_reckoning():
    h = simulate(rng=np.random.default_rng(0))
    true = np.asarray(h.true)[:, :2]
    est_err = np.linalg.norm(np.asarray(h.estimate)[:, :2] - true, axis=1).mean()
    dr_err = np.linalg.norm(np.asarray(h.dead_reckoning)[:, :2] - true, axis=1).mean()
    assert est_err < dr_err


def test_main_without_plot():
    assert main(["--no-plot", "--seed", "1"]) == 0