"""Input normalisation and analysis-range selection.

Both stages are pure: :func:`normalize_samples` builds a sorted, finite
:class:`SampleSeries` once, and :func:`select_range` masks it into a new
:class:`Selection` without touching the original arrays.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd

from ..errors import (
    AMBIGUOUS_DETREND_ORDER,
    AMBIGUOUS_RANGE,
    Diagnostic,
    InsufficientDataError,
    LengthMismatchError,
    NonNumericInputError,
)

__all__ = [
    "DEFAULT_DETREND_ORDER",
    "SampleSeries",
    "Selection",
    "min_samples",
    "normalize_samples",
    "resolve_detrend_order",
    "select_range",
]

DEFAULT_DETREND_ORDER = 2
EPS = np.finfo(float).eps


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def _spacing(x: np.ndarray) -> float:
    """Smallest gap between consecutive sorted coordinates above machine eps."""
    gaps = np.diff(x)
    gaps = gaps[gaps > EPS]
    return float(gaps.min()) if gaps.size else float("nan")


@dataclass(slots=True, frozen=True)
class SampleSeries:
    """Finite samples sorted ascending by coordinate."""

    x: np.ndarray
    y: np.ndarray
    dx: float

    def __len__(self) -> int:
        return int(self.x.size)

    @classmethod
    def from_sorted(cls, x: np.ndarray, y: np.ndarray) -> "SampleSeries":
        x = np.array(x, dtype=float)
        y = np.array(y, dtype=float)
        return cls(_readonly(x), _readonly(y), _spacing(x))


@dataclass(slots=True, frozen=True)
class Selection:
    """Samples inside the half-open analysis range ``(xbeg, xend]``."""

    series: SampleSeries
    xbeg: float
    xend: float
    detrend_order: int
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def x(self) -> np.ndarray:
        return self.series.x

    @property
    def y(self) -> np.ndarray:
        return self.series.y

    @property
    def n_samples(self) -> int:
        return len(self.series)

    @property
    def total_span(self) -> float:
        return self.xend - self.xbeg


# ──────────────────────────────────────────────────────────────────────────────
# input normalisation
# ──────────────────────────────────────────────────────────────────────────────


def _epoch_seconds(data) -> np.ndarray:
    idx = pd.DatetimeIndex(data)
    if idx.tz is not None:
        idx = idx.tz_convert("UTC").tz_localize(None)
    # NaT becomes NaN, i.e. a sample without a valid coordinate
    return ((idx - pd.Timestamp(0)) / pd.Timedelta(seconds=1)).to_numpy(dtype=float)


def _as_float_array(data, name: str) -> np.ndarray:
    """Coerce *data* to a flat float array or raise ``NonNumericInputError``.

    Datetime-like inputs (``DatetimeIndex``, datetime ``Series`` or
    ``datetime64`` arrays) become seconds since the epoch so that irregular
    timestamps can be used directly as sample coordinates.
    """
    if data is None:
        raise NonNumericInputError(f"{name} must be a numeric array, got None")
    if isinstance(data, (pd.Series, pd.Index)):
        if pd.api.types.is_datetime64_any_dtype(data.dtype):
            return _epoch_seconds(data)
        data = data.to_numpy()
    arr = np.asarray(data)
    if np.issubdtype(arr.dtype, np.datetime64):
        return _epoch_seconds(arr.ravel())
    if arr.dtype.kind not in "biufO":
        raise NonNumericInputError(
            f"{name} must be real-valued, got dtype {arr.dtype}"
        )
    try:
        return arr.astype(float).ravel()
    except (TypeError, ValueError) as exc:
        raise NonNumericInputError(f"{name} must be numeric: {exc}") from exc


def normalize_samples(values, coordinates=None) -> SampleSeries:
    """Return the finite samples of ``(coordinates, values)`` sorted by coordinate.

    Parameters
    ----------
    values : array-like
        Observed values.  Non-finite entries are treated as missing
        observations and dropped together with their coordinate.
    coordinates : array-like, optional
        Sample points of *values*.  When omitted the series is assumed to be
        regularly sampled at ``1..N``.

    Raises
    ------
    NonNumericInputError
        If either input cannot be read as real numbers.
    LengthMismatchError
        If *coordinates* and *values* differ in length.
    """
    y = _as_float_array(values, "values")
    if coordinates is None:
        x = np.arange(1, y.size + 1, dtype=float)
    else:
        x = _as_float_array(coordinates, "coordinates")
        if x.size != y.size:
            raise LengthMismatchError(
                f"Sample points do not match data length ({x.size} != {y.size})."
            )
        # ties in x are broken by value so any permutation sorts identically
        order = np.lexsort((y, x))
        x, y = x[order], y[order]

    keep = np.isfinite(x) & np.isfinite(y)
    return SampleSeries.from_sorted(x[keep], y[keep])


# ──────────────────────────────────────────────────────────────────────────────
# range selection
# ──────────────────────────────────────────────────────────────────────────────


def min_samples(detrend_order: int) -> int:
    """Smallest number of samples accepted for *detrend_order*."""
    return 3 * (detrend_order + 2)


def resolve_detrend_order(detrend_order=None) -> tuple[int, list[Diagnostic]]:
    """Resolve a scalar or multi-valued order specification to one integer.

    ``None`` or an empty sequence give the default order.  NaN entries are
    ignored; if nothing remains, or several distinct values remain, the
    default respectively the maximum is used and an ``AmbiguousDetrendOrder``
    diagnostic is returned alongside.
    """
    if detrend_order is None:
        return DEFAULT_DETREND_ORDER, []
    orders = _as_float_array(detrend_order, "detrend_order")
    if orders.size == 0:
        return DEFAULT_DETREND_ORDER, []

    notes: list[Diagnostic] = []
    distinct = np.unique(orders[~np.isnan(orders)])
    if distinct.size == 1:
        resolved = distinct[0]
    else:
        resolved = distinct.max() if distinct.size else DEFAULT_DETREND_ORDER
        notes.append(
            Diagnostic(
                AMBIGUOUS_DETREND_ORDER,
                "Ambiguous detrending order specification. "
                f"Detrending order {resolved:g} will be used.",
            )
        )

    if not np.isfinite(resolved) or resolved < 0 or resolved != np.floor(resolved):
        raise NonNumericInputError(
            f"Detrending order must be a non-negative integer, got {resolved:g}."
        )
    return int(resolved), notes


def _resolve_range(
    series: SampleSeries, xrange: Sequence[float] | None
) -> tuple[float, float, list[Diagnostic]]:
    if xrange is None or np.size(xrange) == 0:
        return float(series.x.max()), float(series.x.min()) - series.dx, []

    bounds = _as_float_array(xrange, "xrange")
    bounds = bounds[~np.isnan(bounds)]
    if bounds.size == 0 or not np.all(np.isfinite(bounds)):
        raise NonNumericInputError("Data range bounds must be finite numbers.")
    xstart, xend = float(bounds.min()), float(bounds.max())
    notes = []
    if np.unique(bounds).size > 2:
        notes.append(
            Diagnostic(
                AMBIGUOUS_RANGE,
                "Ambiguous data range specification. "
                f"Range [{xstart:g} {xend:g}] will be used.",
            )
        )
    return xend, xstart, notes


def select_range(
    series: SampleSeries,
    detrend_order=DEFAULT_DETREND_ORDER,
    xrange: Sequence[float] | None = None,
) -> Selection:
    """Restrict *series* to the analysis range and resolve the detrending order.

    The returned selection covers ``(xbeg, xend]``.  ``xbeg`` equals the
    requested start unless a sample sits exactly on it, in which case the
    start is moved one spacing unit down so that the sample is kept.  Without
    *xrange* the whole series is used.

    Raises
    ------
    InsufficientDataError
        If fewer than ``3 * (detrend_order + 2)`` samples fall in the range.
    """
    order, notes = resolve_detrend_order(detrend_order)
    required = min_samples(order)
    if len(series) == 0:
        raise InsufficientDataError(
            f"Too few data points. Detrending order {order} requires at least "
            f"{required} data points."
        )

    xend, xstart, range_notes = _resolve_range(series, xrange)
    notes.extend(range_notes)

    x = series.x
    if np.all(np.abs(x - xstart) > EPS):
        xbeg = xstart
    else:
        xbeg = xstart - series.dx
    mask = (x > xbeg) & (x <= xend)

    count = int(mask.sum())
    if count < required:
        where = (
            "Too few data points."
            if xrange is None or np.size(xrange) == 0
            else f"The range [{xstart:g} {xend:g}] contains too few data points ({count})."
        )
        raise InsufficientDataError(
            f"{where} Detrending order {order} requires at least "
            f"{required} data points."
        )

    return Selection(
        SampleSeries.from_sorted(x[mask], series.y[mask]),
        xbeg=float(xbeg),
        xend=float(xend),
        detrend_order=order,
        diagnostics=tuple(notes),
    )
