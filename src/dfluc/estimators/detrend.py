"""Local polynomial detrending and fluctuation pooling.

Each box is detrended in place on its own samples; nothing is interpolated
across gaps.  Squared residuals of all usable boxes of one size are pooled
at the sample level before the root-mean-square is taken.
"""

from __future__ import annotations

import numpy as np

from ..preprocessing.core import Selection
from .boxes import partition

__all__ = ["log_fluctuation", "pooled_residuals", "residuals_squared"]

EPS = np.finfo(float).eps
# Residuals within this many ulps (per sample) of the box values are exact fits.
_ROUNDING_ULPS = 16


def residuals_squared(x: np.ndarray, y: np.ndarray, order: int) -> np.ndarray | None:
    """Squared residuals of a degree-*order* least-squares fit of ``y(x)``.

    The coordinates are centred and scaled (mean / sample standard deviation)
    before building the design matrix, so large absolute coordinates such as
    epoch timestamps stay well conditioned.  Returns ``None`` when the box
    holds too few samples to be fitted (``len(x) <= order + 1``).
    """
    n = x.size
    if n <= order + 1:
        return None

    scale = np.std(x, ddof=1)
    if not scale > 0:
        scale = 1.0
    t = (x - x.mean()) / scale

    # the constant column absorbs the mean; fitting deviations keeps a large
    # offset in y out of the rounding
    dev = y - y.mean()
    design = np.vander(t, order + 1)
    coef, *_ = np.linalg.lstsq(design, dev, rcond=None)
    resid = dev - design @ coef

    tol = _ROUNDING_ULPS * EPS * np.sqrt(n) * np.max(np.abs(dev))
    resid[np.abs(resid) <= tol] = 0.0
    return resid**2


def pooled_residuals(selection: Selection, box_size: float) -> np.ndarray:
    """Concatenate the squared residuals of every usable box, in box order."""
    x, y = selection.x, selection.y
    order = selection.detrend_order
    parts = []
    for box in partition(selection, box_size):
        sq = residuals_squared(x[box], y[box], order)
        if sq is not None:
            parts.append(sq)
    if not parts:
        return np.empty(0)
    return np.concatenate(parts)


def log_fluctuation(selection: Selection, box_size: float) -> float:
    """``log10`` of the pooled RMS fluctuation at *box_size*.

    NaN when no box of this size could be detrended; ``-inf`` when every
    box was fitted exactly.
    """
    pooled = pooled_residuals(selection, box_size)
    if pooled.size == 0:
        return float("nan")
    with np.errstate(divide="ignore"):
        return float(np.log10(np.mean(pooled)) / 2)
