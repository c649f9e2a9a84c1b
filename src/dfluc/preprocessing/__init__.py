from .core import (
    SampleSeries,
    Selection,
    normalize_samples,
    resolve_detrend_order,
    select_range,
)

__all__ = [
    "SampleSeries",
    "Selection",
    "normalize_samples",
    "resolve_detrend_order",
    "select_range",
]
