from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dfluc")
except PackageNotFoundError:
    __version__ = "0.0.0"

from .errors import DFAError, Diagnostic  # noqa
from .estimators import DFA, DFAResult, estimate_hurst_exponent  # noqa
from .preprocessing import normalize_samples, select_range  # noqa

__all__ = [
    "DFA",
    "DFAError",
    "DFAResult",
    "Diagnostic",
    "estimate_hurst_exponent",
    "normalize_samples",
    "select_range",
]
