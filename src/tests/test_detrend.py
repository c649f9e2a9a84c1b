import numpy as np

from dfluc.estimators.boxes import partition
from dfluc.estimators.detrend import log_fluctuation, pooled_residuals, residuals_squared
from dfluc.preprocessing.core import normalize_samples, select_range


def test_too_few_points_are_skipped():
    x = np.array([1.0, 2.0, 3.0])
    assert residuals_squared(x, x**2, 2) is None
    assert residuals_squared(x, x**2, 1) is not None


def test_constant_and_linear_fits():
    x = np.array([0.0, 1.0, 2.0, 3.0])
    np.testing.assert_allclose(
        residuals_squared(x, np.array([1.0, 2.0, 3.0, 4.0]), 0),
        [2.25, 0.25, 0.25, 2.25],
    )
    np.testing.assert_allclose(
        residuals_squared(x[:3], np.array([0.0, 1.0, 0.0]), 1),
        [1 / 9, 4 / 9, 1 / 9],
    )


def test_exact_polynomial_gives_zero_residuals():
    x = np.linspace(-3.0, 7.0, 15)
    sq = residuals_squared(x, 2.0 * x**2 - x + 5.0, 2)
    assert np.all(sq == 0.0)


def test_large_coordinates_are_well_conditioned():
    rng = np.random.default_rng(0)
    # quarter-unit grid so that shifting by 1.7e9 is exact
    t = np.sort(rng.choice(2400, size=40, replace=False)) / 4.0
    y = 1e-3 * t**3 + rng.standard_normal(t.size)
    near = residuals_squared(t, y, 3)
    far = residuals_squared(t + 1.7e9, y, 3)
    np.testing.assert_allclose(far, near, rtol=1e-5, atol=1e-9)


def test_residuals_pooled_per_sample():
    rng = np.random.default_rng(1)
    sel = select_range(normalize_samples(np.cumsum(rng.standard_normal(20))), 1)
    boxes = partition(sel, 6.0)
    manual = np.concatenate([residuals_squared(sel.x[b], sel.y[b], 1) for b in boxes])
    np.testing.assert_array_equal(pooled_residuals(sel, 6.0), manual)
    assert log_fluctuation(sel, 6.0) == np.log10(np.mean(manual)) / 2


def test_undefined_when_no_box_can_be_fitted():
    sel = select_range(normalize_samples(np.arange(20.0) ** 1.5), 2)
    assert np.isnan(log_fluctuation(sel, 2.0))
    assert np.isnan(log_fluctuation(sel, 30.0))


def test_exact_fit_gives_negative_infinity():
    sel = select_range(normalize_samples(np.arange(1.0, 11.0)), 1)
    assert log_fluctuation(sel, 10 ** 0.5) == -np.inf
