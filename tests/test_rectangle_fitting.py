import math

import pytest

from motionkit.rectangle_fitting import (
    Criteria,
    LShapeFitting,
    RectangleData,
    calc_cross_point,
    main,
)


def _l_shape(x0=0.0, y0=0.0):
    xs = [x0 + 0.5 * i for i in range(9)] + [x0] * 6
    ys = [y0] * 9 + [y0 + 0.5 * i for i in range(1, 7)]
    return xs, ys


def test_cross_point_of_axis_lines():
    assert calc_cross_point((1.0, 0.0), (0.0, 1.0), (1.0, 2.0)) == pytest.approx((1.0, 2.0))


def test_cross_point_parallel_raises():
    with pytest.raises(ZeroDivisionError):
        calc_cross_point((1.0, 1.0), (0.0, 0.0), (1.0, 2.0))


def test_contour_is_closed_box():
    rect = RectangleData(a=[1, 0, 1, 0], b=[0, 1, 0, 1], c=[-1.0, -2.0, 3.0, 4.0])
    rect.calc_rect_contour()
    assert rect.rect_c_x == pytest.approx([-1.0, 3.0, 3.0, -1.0, -1.0])
    assert rect.rect_c_y == pytest.approx([-2.0, -2.0, 4.0, 4.0, -2.0])


def test_l_shape_fits_bounding_box():
    xs, ys = _l_shape(2.0, 1.0)
    rects, id_sets = LShapeFitting().fitting([xs, ys])
    assert id_sets == [list(range(len(xs)))]
    rect = rects[0]
    rect.calc_rect_contour()
    corners = set(zip((round(x, 9) for x in rect.rect_c_x), (round(y, 9) for y in rect.rect_c_y)))
    assert corners == {
        (min(xs), min(ys)),
        (max(xs), min(ys)),
        (max(xs), max(ys)),
        (min(xs), max(ys)),
    }


def test_separate_clusters_are_segmented():
    ax, ay = _l_shape(0.0, 0.0)
    bx, by = _l_shape(30.0, 30.0)
    rects, id_sets = LShapeFitting().fitting([ax + bx, ay + by])
    assert len(rects) == 2
    assert id_sets == [list(range(len(ax))), list(range(len(ax), len(ax) + len(bx)))]


def test_empty_input():
    assert LShapeFitting().fitting([[], []]) == ([], [])


def test_mismatched_input_raises():
    with pytest.raises(ValueError):
        LShapeFitting().fitting([[0.0, 1.0], [0.0]])


@pytest.mark.parametrize("criteria", list(Criteria))
def test_points_lie_inside_fitted_rectangle(criteria):
    xs = [math.cos(0.4) * t for t in range(6)] + [-math.sin(0.4) * t for t in range(1, 4)]
    ys = [math.sin(0.4) * t for t in range(6)] + [math.cos(0.4) * t for t in range(1, 4)]
    rects, _ = LShapeFitting(criteria=criteria).fitting([xs, ys])
    rect = rects[0]
    for x, y in zip(xs, ys):
        c1 = rect.a[0] * x + rect.b[0] * y
        c2 = rect.a[1] * x + rect.b[1] * y
        assert rect.c[0] - 1e-9 <= c1 <= rect.c[2] + 1e-9
        assert rect.c[1] - 1e-9 <= c2 <= rect.c[3] + 1e-9


def test_main_runs_short_simulation():
    assert main(["--no-plot", "--seed", "1", "--sim-time", "0.4"]) == 0