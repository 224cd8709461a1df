import math

import pytest

from dcsim.voigt import faddeeva, pseudo_voigt, true_voigt


def test_faddeeva_at_origin():
    re, im = faddeeva(0.0, 0.0)
    assert re == pytest.approx(1.0, abs=1e-12)
    assert im == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("x", [0.3, 1.0, 2.0])
def test_faddeeva_real_axis_real_part_is_gaussian(x):
    re, _ = faddeeva(x, 0.0)
    assert re == pytest.approx(math.exp(-x * x), rel=1e-8)


@pytest.mark.parametrize("y, rel", [(0.2, 1e-8), (1.0, 1e-6), (2.0, 1e-6), (5.0, 1e-3)])
def test_faddeeva_imaginary_axis_matches_erfc(y, rel):
    re, im = faddeeva(0.0, y)
    assert re == pytest.approx(math.exp(y * y) * math.erfc(y), rel=rel)
    assert im == pytest.approx(0.0, abs=1e-8)


@pytest.mark.parametrize("x, y", [(0.7, 0.3), (1.5, 1.2), (4.0, 0.5), (0.5, 4.5)])
def test_faddeeva_mirror_symmetry(x, y):
    re_pos, im_pos = faddeeva(x, y)
    re_neg, im_neg = faddeeva(-x, y)
    assert re_neg == pytest.approx(re_pos, rel=1e-9)
    assert im_neg == pytest.approx(-im_pos, rel=1e-9)


def test_faddeeva_continuous_across_region_boundary():
    inside = faddeeva(2.99, 1.0)
    outside = faddeeva(3.01, 1.0)
    assert inside[0] == pytest.approx(outside[0], abs=1e-2)
    assert inside[1] == pytest.approx(outside[1], abs=1e-2)


PARAMS = [1.0, 10.0, 0.5, 0.2, 3.0]


def test_true_voigt_peak_height_is_amplitude():
    y, _ = true_voigt(PARAMS[3], PARAMS)
    assert y == pytest.approx(PARAMS[1] + PARAMS[4], rel=1e-9)


def test_true_voigt_symmetric_about_centre():
    left, _ = true_voigt(PARAMS[3] - 0.4, PARAMS)
    right, _ = true_voigt(PARAMS[3] + 0.4, PARAMS)
    assert left == pytest.approx(right, rel=1e-10)
    assert left < PARAMS[1] + PARAMS[4]


def test_true_voigt_two_peaks_add():
    two = [1.0, 10.0, 0.5, 0.2, 5.0, 0.5, 0.9, 3.0]
    single_a = [1.0, 10.0, 0.5, 0.2, 3.0]
    single_b = [1.0, 5.0, 0.5, 0.9, 0.0]
    x = 0.55
    total, dyda = true_voigt(x, two)
    first, _ = true_voigt(x, single_a)
    second, _ = true_voigt(x, single_b)
    assert total == pytest.approx(first + second, rel=1e-10)
    assert len(dyda) == len(two)


def test_true_voigt_derivatives_match_finite_differences():
    x = 0.7
    _, dyda = true_voigt(x, PARAMS)
    h = 1e-6
    for i in range(len(PARAMS)):
        up = list(PARAMS)
        down = list(PARAMS)
        up[i] += h
        down[i] -= h
        numeric = (true_voigt(x, up)[0] - true_voigt(x, down)[0]) / (2 * h)
        assert dyda[i] == pytest.approx(numeric, rel=1e-5, abs=1e-6)


def test_true_voigt_rejects_bad_parameter_count():
    with pytest.raises(ValueError):
        true_voigt(0.0, [1.0, 2.0, 3.0, 4.0])


PV = [0.5, 4.0, 0.3, 0.1, 1.0]


def test_pseudo_voigt_symmetric_about_centre():
    left, _ = pseudo_voigt(PV[3] - 0.25, PV)
    right, _ = pseudo_voigt(PV[3] + 0.25, PV)
    assert left == pytest.approx(right, rel=1e-12)


def test_pseudo_voigt_amplitude_derivative_is_shape():
    y, dyda = pseudo_voigt(0.4, PV)
    assert dyda[1] * PV[1] == pytest.approx(y - PV[4], rel=1e-12)
    assert dyda[4] == pytest.approx(1.0)


def test_pseudo_voigt_gaussian_area_is_amplitude():
    params = [0.5, 4.0, 0.0, 0.1, 1.0]
    step = params[0] / 200
    start = params[3] - 10 * params[0]
    points = [start + i * step for i in range(4001)]
    values = [pseudo_voigt(p, params)[0] - params[4] for p in points]
    area = step * (sum(values) - (values[0] + values[-1]) / 2)
    assert area == pytest.approx(params[1], rel=1e-6)


def test_pseudo_voigt_derivatives_match_finite_differences():
    x = 0.3
    _, dyda = pseudo_voigt(x, PV)
    h = 1e-6
    for i in range(1, 5):
        up = list(PV)
        down = list(PV)
        up[i] += h
        down[i] -= h
        numeric = (pseudo_voigt(x, up)[0] - pseudo_voigt(x, down)[0]) / (2 * h)
        assert dyda[i] == pytest.approx(numeric, rel=1e-6, abs=1e-8)


def test_pseudo_voigt_rejects_bad_parameter_count():
    with pytest.raises(ValueError):
        pseudo_voigt(0.0, [1.0, 2.0, 3.0])