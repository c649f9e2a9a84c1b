import numpy as np
import pandas as pd
import pytest

from dfluc.errors import (
    InsufficientDataError,
    LengthMismatchError,
    NonNumericInputError,
)
from dfluc.preprocessing.core import (
    normalize_samples,
    resolve_detrend_order,
    select_range,
)


def test_normalize_sorts_and_drops_missing_values():
    s = normalize_samples([3.0, np.nan, 1.0, 2.0], [30.0, 5.0, 10.0, 20.0])
    np.testing.assert_array_equal(s.x, [10.0, 20.0, 30.0])
    np.testing.assert_array_equal(s.y, [1.0, 2.0, 3.0])
    assert s.dx == 10.0
    assert len(s) == 3


def test_normalize_default_coordinates():
    s = normalize_samples(np.array([5.0, np.inf, 7.0]))
    np.testing.assert_array_equal(s.x, [1.0, 3.0])
    assert s.dx == 2.0


def test_normalize_keeps_duplicate_coordinates():
    s = normalize_samples([1.0, 2.0, 3.0, 4.0], [4.0, 1.0, 1.0, 2.0])
    np.testing.assert_array_equal(s.x, [1.0, 1.0, 2.0, 4.0])
    np.testing.assert_array_equal(s.y, [2.0, 3.0, 4.0, 1.0])
    assert s.dx == 1.0


def test_normalize_single_coordinate_has_no_spacing():
    s = normalize_samples([1.0, 2.0], [3.0, 3.0])
    assert np.isnan(s.dx)


def test_normalized_arrays_are_read_only():
    s = normalize_samples([1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        s.y[0] = 10.0


def test_normalize_rejects_bad_input():
    with pytest.raises(LengthMismatchError):
        normalize_samples([1.0, 2.0, 3.0], [1.0, 2.0])
    with pytest.raises(NonNumericInputError):
        normalize_samples(["a", "b"])
    with pytest.raises(NonNumericInputError):
        normalize_samples(None)
    with pytest.raises(NonNumericInputError):
        normalize_samples([1 + 2j, 3.0])


def test_normalize_datetime_coordinates():
    idx = pd.date_range("2024-01-01", periods=4, freq="1min", tz="Europe/Rome")
    s = normalize_samples([1.0, 2.0, 3.0, 4.0], idx)
    assert s.dx == 60.0
    assert s.x[0] == pd.Timestamp("2023-12-31 23:00").timestamp()


def test_resolve_detrend_order():
    assert resolve_detrend_order(None) == (2, [])
    assert resolve_detrend_order(1) == (1, [])
    assert resolve_detrend_order([3, 3]) == (3, [])

    order, notes = resolve_detrend_order([1, 3, np.nan])
    assert order == 3
    assert notes[0].kind == "AmbiguousDetrendOrder"
    assert "3" in notes[0].message

    order, notes = resolve_detrend_order([np.nan])
    assert order == 2
    assert len(notes) == 1

    for bad in (1.5, -1, np.inf):
        with pytest.raises(NonNumericInputError):
            resolve_detrend_order(bad)


def test_select_range_default_spans_all_samples():
    sel = select_range(normalize_samples(np.arange(20.0)))
    assert (sel.xbeg, sel.xend) == (0.0, 20.0)
    assert sel.total_span == 20.0
    assert sel.n_samples == 20
    assert sel.detrend_order == 2
    assert sel.diagnostics == ()


def test_select_range_keeps_sample_on_requested_start():
    series = normalize_samples(np.arange(20.0))
    on_sample = select_range(series, 1, [5, 15])
    assert on_sample.xbeg == 4.0
    np.testing.assert_array_equal(on_sample.x, np.arange(5.0, 16.0))

    between = select_range(series, 1, [5.5, 15])
    assert between.xbeg == 5.5
    np.testing.assert_array_equal(between.x, np.arange(6.0, 16.0))


def test_select_range_does_not_touch_input():
    series = normalize_samples(np.arange(30.0))
    select_range(series, 1, [10, 20])
    assert len(series) == 30


def test_select_range_ambiguous_bounds():
    sel = select_range(normalize_samples(np.arange(20.0)), 1, [2, 18, 10])
    assert (sel.xbeg, sel.xend) == (1.0, 18.0)
    assert [d.kind for d in sel.diagnostics] == ["AmbiguousRange"]


def test_select_range_insufficient_data():
    series = normalize_samples(np.arange(11.0))
    with pytest.raises(InsufficientDataError, match="at least 12"):
        select_range(series, 2)
    with pytest.raises(InsufficientDataError, match=r"range \[1 5\]"):
        select_range(normalize_samples(np.arange(100.0)), 0, [1, 5])


def test_select_range_rejects_infinite_bounds():
    with pytest.raises(NonNumericInputError):
        select_range(normalize_samples(np.arange(20.0)), 1, [0, np.inf])


def test_normalize_is_permutation_invariant_with_ties():
    rng = np.random.default_rng(0)
    x = np.repeat(np.arange(1.0, 201.0), 2)
    y = rng.standard_normal(x.size)
    perm = rng.permutation(x.size)
    a = normalize_samples(y, x)
    b = normalize_samples(y[perm], x[perm])
    np.testing.assert_array_equal(a.x, b.x)
    np.testing.assert_array_equal(a.y, b.y)
