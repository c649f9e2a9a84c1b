"""
Common base class for fluctuation-scaling estimators
====================================================
* Accepts a pandas Series **or** a NumPy / list 1‑D input, with optional
  sample coordinates of the same length.
* Normalisation is deferred to :meth:`fit` so construction never fails.
* Provides `.result_` for fit outputs.
"""

from __future__ import annotations

import abc
from typing import Any


class BaseEstimator(abc.ABC):
    """Minimal parent class; concrete estimators implement `.fit()`.

    ``values`` and ``coordinates`` are stored untouched; validating them is
    part of the estimation so that bad input surfaces as a diagnostic on
    ``result_`` instead of an exception at construction time.
    """

    def __init__(self, values, coordinates=None):
        self.values = values
        self.coordinates = coordinates
        self.result_: Any | None = None

    # ------------------------------------------------------------------
    @abc.abstractmethod
    def fit(self, **kwargs) -> "BaseEstimator":
        """Run the estimator and populate `self.result_`."""
        ...
