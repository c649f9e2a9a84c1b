"""Box-size generation and box partitioning over irregular sample points."""

from __future__ import annotations

import numpy as np

from ..errors import InvalidBoxSizesError, NonNumericInputError
from ..preprocessing.core import Selection

__all__ = [
    "MAX_DEFAULT_BOXES",
    "box_grid",
    "clean_box_sizes",
    "default_box_sizes",
    "partition",
    "resolve_box_sizes",
]

# Default grid: log-spaced from one decade (plus 0.001) below the coordinate
# IQR up to half a decade below the analysed span.  Changing these changes
# published estimates.
MAX_DEFAULT_BOXES = 50
LOWER_DECADE_OFFSET = 1.001
UPPER_DECADE_OFFSET = 0.5


def _iqr(x: np.ndarray) -> float:
    q25, q75 = np.percentile(x, [25.0, 75.0], method="hazen")
    return float(q75 - q25)


def default_box_sizes(selection: Selection) -> np.ndarray:
    """Return up to 50 log-spaced box sizes suited to *selection*."""
    iqr = _iqr(selection.x)
    if not np.isfinite(iqr) or iqr <= 0:
        raise InvalidBoxSizesError(
            "Cannot derive default box sizes: the sample coordinates have a zero "
            "interquartile range."
        )
    lower = np.log10(iqr) - LOWER_DECADE_OFFSET
    upper = np.log10(selection.total_span) - UPPER_DECADE_OFFSET
    num = min(MAX_DEFAULT_BOXES, selection.n_samples)
    return np.logspace(lower, upper, num)


def clean_box_sizes(box_sizes) -> np.ndarray:
    """Drop non-finite and non-positive sizes and deduplicate the rest."""
    try:
        sizes = np.asarray(box_sizes, dtype=float).ravel()
    except (TypeError, ValueError) as exc:
        raise NonNumericInputError(f"Box sizes must be numeric: {exc}") from exc
    sizes = np.unique(sizes[np.isfinite(sizes) & (sizes > 0)])
    if sizes.size < 2:
        raise InvalidBoxSizesError("At least 2 valid distinct box sizes are needed.")
    return sizes


def resolve_box_sizes(selection: Selection, box_sizes=None) -> np.ndarray:
    if box_sizes is None or np.size(box_sizes) == 0:
        return default_box_sizes(selection)
    return clean_box_sizes(box_sizes)


def box_grid(selection: Selection, box_size: float) -> tuple[float, int]:
    """First box edge and number of boxes of width *box_size*.

    Box ``k`` is ``(edge + box_size * k, edge + box_size * (k + 1)]``.  The
    slack left after fitting ``nbox`` whole boxes is split evenly between
    both ends of the range; ``nbox`` is 0 when not even one box fits.
    """
    span = selection.total_span
    nbox = int(np.floor(span / box_size))
    if nbox < 1:
        return selection.xbeg, 0
    offset = (span - box_size * nbox) / 2
    return selection.xbeg + offset, nbox


def partition(selection: Selection, box_size: float) -> list[slice]:
    """Index ranges of the non-empty boxes ``(lower, upper]`` for *box_size*.

    Each sample gets its box index from its coordinate in one pass over the
    sorted samples; runs of equal index become slices.  Cost depends on the
    number of samples only, never on the number of boxes.
    """
    edge, nbox = box_grid(selection, box_size)
    if nbox < 1:
        return []
    x = selection.x
    last = edge + box_size * nbox
    lo = int(np.searchsorted(x, edge, side="right"))
    hi = int(np.searchsorted(x, last, side="right"))
    if lo >= hi:
        return []

    xs = x[lo:hi]
    k = np.clip(np.ceil((xs - edge) / box_size) - 1, 0, nbox - 1)
    # settle rounding at shared edges: a sample on an edge belongs to the lower box
    k = np.where(xs <= edge + box_size * k, k - 1, k)
    k = np.where(xs > edge + box_size * (k + 1), k + 1, k)
    k = np.clip(k, 0, nbox - 1)

    cuts = np.flatnonzero(np.diff(k)) + 1
    starts = np.concatenate(([0], cuts)) + lo
    stops = np.concatenate((cuts, [xs.size])) + lo
    return [slice(int(b), int(e)) for b, e in zip(starts, stops)]
