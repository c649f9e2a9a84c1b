"""Failure taxonomy and diagnostics for the DFA pipeline.

Pipeline stages raise a :class:`DFAError` subclass on the first failed
check.  The top-level estimator catches these at its boundary and converts
them into a NaN result carrying a fatal :class:`Diagnostic`; auto-resolved
conditions (ambiguous detrending order or range) are recorded as non-fatal
diagnostics next to a valid estimate.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "AMBIGUOUS_DETREND_ORDER",
    "AMBIGUOUS_RANGE",
    "DFAError",
    "DegenerateScalingError",
    "Diagnostic",
    "InsufficientDataError",
    "InvalidBoxSizesError",
    "LengthMismatchError",
    "NonNumericInputError",
]

AMBIGUOUS_DETREND_ORDER = "AmbiguousDetrendOrder"
AMBIGUOUS_RANGE = "AmbiguousRange"


@dataclass(slots=True, frozen=True)
class Diagnostic:
    kind: str
    message: str
    fatal: bool = False

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class DFAError(ValueError):
    """Base class of every recoverable pipeline failure."""

    kind = "DFAError"

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(self.kind, str(self), fatal=True)


class NonNumericInputError(DFAError):
    kind = "NonNumericInput"


class LengthMismatchError(DFAError):
    kind = "LengthMismatch"


class InsufficientDataError(DFAError):
    kind = "InsufficientData"


class InvalidBoxSizesError(DFAError):
    kind = "InvalidBoxSizes"


class DegenerateScalingError(DFAError):
    kind = "DegenerateScaling"
