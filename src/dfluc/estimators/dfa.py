"""Detrended‑Fluctuation Analysis on irregularly sampled data.

The input is taken as the *profile* (an integrated, random‑walk‑like
process) observed at arbitrary sample points, possibly with missing values.
No cumulative summation is performed here: pass ``np.cumsum(x - x.mean())``
when the data are noise‑like increments.

For every box size the coordinate span is tiled with centred boxes, each
box is detrended with a local polynomial on the samples it actually holds,
and the squared residuals are pooled into one RMS fluctuation.  The slope of
``log10(F)`` against ``log10(box size)`` is the Hurst exponent ``H``.

* Boxes with too few samples for the polynomial are skipped.
* Box sizes without any usable box give a non‑finite point and are ignored
  by the regression, which needs at least two finite points.
* Every recoverable failure yields ``H = nan`` plus a diagnostic; nothing
  is raised to the caller.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from ..errors import DegenerateScalingError, DFAError, Diagnostic
from ..preprocessing.core import (
    DEFAULT_DETREND_ORDER,
    Selection,
    normalize_samples,
    select_range,
)
from ._base import BaseEstimator
from .boxes import resolve_box_sizes
from .detrend import log_fluctuation

__all__ = [
    "DFA",
    "DFAResult",
    "FluctuationCurve",
    "RegressionResult",
    "estimate_hurst_exponent",
    "fit_scaling",
    "fluctuation_function",
]


@dataclass(slots=True, frozen=True)
class RegressionResult:
    slope: float
    intercept: float

    @property
    def H(self) -> float:
        return self.slope


@dataclass(slots=True, frozen=True)
class FluctuationCurve:
    """Everything needed to draw the log–log diagnostic plot."""

    box_sizes: np.ndarray
    log_box_sizes: np.ndarray
    log_fluctuation: np.ndarray
    regression: RegressionResult

    @property
    def finite(self) -> np.ndarray:
        return np.isfinite(self.log_fluctuation)


@dataclass(slots=True)
class DFAResult:
    H: float = float("nan")
    intercept: float = float("nan")
    detrend_order: int | None = None
    xbeg: float = float("nan")
    xend: float = float("nan")
    n_samples: int = 0
    curve: FluctuationCurve | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(np.isfinite(self.H))

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.fatal]

    def __float__(self) -> float:
        return float(self.H)


# ---------------------------------------------------------------------- #
def fluctuation_function(
    selection: Selection,
    box_sizes: np.ndarray,
    n_workers: int | None = None,
) -> np.ndarray:
    """``log10`` RMS fluctuation for each entry of *box_sizes*, in order.

    Box sizes are independent, so with ``n_workers > 1`` they are evaluated
    on a thread pool.  Each result lands at its box-size position and pooling
    inside one size always follows box order, so the output does not depend
    on the worker count.
    """
    logfluc = np.full(box_sizes.size, np.nan)
    if n_workers is None or n_workers <= 1:
        for k, size in enumerate(box_sizes):
            logfluc[k] = log_fluctuation(selection, size)
        return logfluc

    with ThreadPoolExecutor(max_workers=int(n_workers)) as ex:
        for k, value in enumerate(
            ex.map(lambda s: log_fluctuation(selection, s), box_sizes)
        ):
            logfluc[k] = value
    return logfluc


def fit_scaling(log_box_sizes: np.ndarray, log_fluct: np.ndarray) -> RegressionResult:
    """Least-squares line through the finite ``(log s, log F)`` points."""
    fin = np.isfinite(log_fluct)
    if fin.sum() < 2:
        raise DegenerateScalingError(
            "Fluctuation function cannot be estimated. Box sizes are probably "
            f"unfit for the data range ({int(fin.sum())} finite point(s))."
        )
    slope, intercept = np.polyfit(log_box_sizes[fin], log_fluct[fin], 1)
    return RegressionResult(float(slope), float(intercept))


# ---------------------------------------------------------------------- #
class DFA(BaseEstimator):
    def __init__(
        self,
        values,
        coordinates=None,
        *,
        detrend_order: int | Sequence[int] | None = DEFAULT_DETREND_ORDER,
        xrange: Sequence[float] | None = None,
        box_sizes: Sequence[float] | None = None,
        n_workers: int | None = None,
    ):
        super().__init__(values, coordinates)
        self.detrend_order = detrend_order
        self.xrange = xrange
        self.box_sizes = box_sizes
        self.n_workers = n_workers

    # ------------------------------------------------------------------ #
    def fit(self, *, keep_curve: bool = True) -> "DFA":
        """Estimate ``H`` and store a :class:`DFAResult` on ``result_``.

        Validation runs in pipeline order and stops at the first failing
        check; its diagnostic is appended to ``result_.diagnostics`` and
        ``result_.H`` stays NaN.  With ``keep_curve=False`` the fluctuation
        curve is dropped from the result.
        """
        result = DFAResult()
        self.result_ = result
        try:
            # 1. Clean, sorted samples
            series = normalize_samples(self.values, self.coordinates)

            # 2. Analysis range and detrending order
            selection = select_range(series, self.detrend_order, self.xrange)
            result.diagnostics.extend(selection.diagnostics)
            result.detrend_order = selection.detrend_order
            result.xbeg, result.xend = selection.xbeg, selection.xend
            result.n_samples = selection.n_samples

            # 3. Box sizes
            sizes = resolve_box_sizes(selection, self.box_sizes)

            # 4. Fluctuation function
            log_sizes = np.log10(sizes)
            logfluc = fluctuation_function(selection, sizes, self.n_workers)

            # 5. Scaling regression
            reg = fit_scaling(log_sizes, logfluc)
        except DFAError as exc:
            result.diagnostics.append(exc.to_diagnostic())
            return self

        result.H = reg.slope
        result.intercept = reg.intercept
        if keep_curve:
            result.curve = FluctuationCurve(sizes, log_sizes, logfluc, reg)
        return self


def estimate_hurst_exponent(
    values,
    coordinates=None,
    detrend_order: int | Sequence[int] | None = DEFAULT_DETREND_ORDER,
    xrange: Sequence[float] | None = None,
    box_sizes: Sequence[float] | None = None,
    plotting: bool = False,
    *,
    n_workers: int | None = None,
) -> DFAResult:
    """Estimate the Hurst exponent of *values* sampled at *coordinates*.

    Parameters
    ----------
    values : array-like
        Observations of the profile; NaN / inf mark missing samples.
    coordinates : array-like, optional
        Sample points, same length as *values*; ``1..N`` when omitted.
        Datetime-like coordinates are read as seconds since the epoch.
    detrend_order : int or sequence of int, default 2
        Degree of the local polynomial.  A multi-valued specification
        resolves to its maximum with an ``AmbiguousDetrendOrder`` diagnostic.
    xrange : sequence of float, optional
        ``[xstart, xend]`` in coordinate units; the whole series by default.
    box_sizes : sequence of float, optional
        Box widths in coordinate units; up to 50 log-spaced sizes by default.
    plotting : bool, default False
        Attach the :class:`FluctuationCurve` to the result for
        :func:`dfluc.plotting.plot_fluctuation`.
    n_workers : int, optional
        Evaluate box sizes on this many threads.

    Returns
    -------
    DFAResult
        ``result.H`` is the estimate, or NaN with the reason in
        ``result.diagnostics``.  ``float(result)`` gives ``H``.
    """
    est = DFA(
        values,
        coordinates,
        detrend_order=detrend_order,
        xrange=xrange,
        box_sizes=box_sizes,
        n_workers=n_workers,
    ).fit(keep_curve=bool(plotting))
    return est.result_
