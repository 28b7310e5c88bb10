import pytest

from motionkit.polynomials import QuarticPolynomial, QuinticPolynomial


def test_quintic_meets_boundary_conditions():
    xs, vxs, axs, xe, vxe, axe, time = 1.0, 2.0, 0.5, 30.0, 4.0, -1.0, 5.0
    poly = QuinticPolynomial(xs, vxs, axs, xe, vxe, axe, time)
    assert poly.calc_point(0.0) == pytest.approx(xs)
    assert poly.calc_first_derivative(0.0) == pytest.approx(vxs)
    assert poly.calc_second_derivative(0.0) == pytest.approx(axs)
    assert poly.calc_point(time) == pytest.approx(xe)
    assert poly.calc_first_derivative(time) == pytest.approx(vxe)
    assert poly.calc_second_derivative(time) == pytest.approx(axe)


def test_quartic_meets_boundary_conditions():
    xs, vxs, axs, vxe, axe, time = 3.0, 8.0, 0.0, 6.0, 0.0, 4.5
    poly = QuarticPolynomial(xs, vxs, axs, vxe, axe, time)
    assert poly.calc_point(0.0) == pytest.approx(xs)
    assert poly.calc_first_derivative(0.0) == pytest.approx(vxs)
    assert poly.calc_second_derivative(0.0) == pytest.approx(axs)
    assert poly.calc_first_derivative(time) == pytest.approx(vxe)
    assert poly.calc_second_derivative(time) == pytest.approx(axe)


@pytest.mark.parametrize(
    "poly",
    [
        QuinticPolynomial(0.0, 1.0, 0.2, 10.0, 0.0, 0.0, 3.0),
        QuarticPolynomial(0.0, 5.0, 1.0, 2.0, -0.5, 2.5),
    ],
)
def test_derivatives_agree_with_finite_differences(poly):
    h = 1e-5
    for t in (0.3, 1.1, 2.0):
        assert poly.calc_first_derivative(t) == pytest.approx(
            (poly.calc_point(t + h) - poly.calc_point(t - h)) / (2 * h), rel=1e-6
        )
        assert poly.calc_second_derivative(t) == pytest.approx(
            (poly.calc_first_derivative(t + h) - poly.calc_first_derivative(t - h)) / (2 * h),
            rel=1e-6,
        )
        assert poly.calc_third_derivative(t) == pytest.approx(
            (poly.calc_second_derivative(t + h) - poly.calc_second_derivative(t - h)) / (2 * h),
            rel=1e-5,
        )


def test_quintic_rest_to_rest_is_symmetric():
    poly = QuinticPolynomial(0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 1.0)
    assert poly.calc_point(0.5) == pytest.approx(0.5)
    assert poly.calc_point(0.25) + poly.calc_point(0.75) == pytest.approx(1.0)


def test_zero_horizon_does_not_raise():
    quintic = QuinticPolynomial(1.0, 2.0, 4.0, 55.0, 0.0, 0.0, 0.0)
    assert quintic.calc_point(0.0) == pytest.approx(1.0)
    assert quintic.calc_first_derivative(0.0) == pytest.approx(2.0)
    assert quintic.calc_second_derivative(0.0) == pytest.approx(4.0)
    quartic = QuarticPolynomial(1.0, 2.0, 4.0, 0.0, 0.0, 0.0)
    assert quartic.calc_third_derivative(0.0) == pytest.approx(0.0)