from .boxes import box_grid, default_box_sizes, partition, resolve_box_sizes
from .detrend import log_fluctuation, residuals_squared
from .dfa import (
    DFA,
    DFAResult,
    FluctuationCurve,
    RegressionResult,
    estimate_hurst_exponent,
    fit_scaling,
    fluctuation_function,
)

__all__ = [
    "DFA",
    "DFAResult",
    "FluctuationCurve",
    "RegressionResult",
    "box_grid",
    "default_box_sizes",
    "estimate_hurst_exponent",
    "fit_scaling",
    "fluctuation_function",
    "log_fluctuation",
    "partition",
    "residuals_squared",
    "resolve_box_sizes",
]
