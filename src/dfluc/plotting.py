"""Diagnostic plot of the DFA fluctuation function.

The plotting functions default to saving output under an ``analysis_outputs``
folder in the working directory. If the caller specifies a custom path the
required parent directories are created automatically.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from dfluc.estimators.dfa import DFAResult, FluctuationCurve

__all__ = ["plot_fluctuation", "DEFAULT_OUTPUT_DIR"]

DEFAULT_OUTPUT_DIR = Path("analysis_outputs")


def _prepare_path(path: Union[str, Path]) -> Path:
    """Create parent directories for *path* and return it as a :class:`Path`."""

    save_path = Path(path).expanduser()
    if save_path.parent == Path('.'):
        DEFAULT_OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        save_path = DEFAULT_OUTPUT_DIR / save_path.name
    else:
        save_path.parent.mkdir(parents=True, exist_ok=True)
    return save_path


def plot_fluctuation(
    result: DFAResult | FluctuationCurve,
    path: Union[str, Path] = DEFAULT_OUTPUT_DIR / "dfa.png",
    *,
    title: str | None = None,
) -> str:
    """Plot log10(RMS fluctuation) against log10(box size) with the fitted line.

    *result* must carry a fluctuation curve, i.e. come from
    ``estimate_hurst_exponent(..., plotting=True)``.
    """

    curve = result.curve if isinstance(result, DFAResult) else result
    if curve is None:
        raise ValueError(
            "result has no fluctuation curve; estimate with plotting=True"
        )

    log_s = curve.log_box_sizes
    reg = curve.regression
    fin = curve.finite
    lo, hi = float(log_s[fin].min()), float(log_s[fin].max())
    mid = (lo + hi) / 2

    fig, ax = plt.subplots(figsize=(5, 5))
    ax.plot(log_s[fin], curve.log_fluctuation[fin], "*", ms=6)
    ax.plot([lo, hi], [reg.slope * lo + reg.intercept, reg.slope * hi + reg.intercept], "-")
    ax.text(
        mid,
        reg.slope * mid + reg.intercept,
        f"H={reg.slope:.4f}",
        ha="center",
        rotation=float(np.degrees(np.arctan(reg.slope))),
        rotation_mode="anchor",
        backgroundcolor="w",
    )
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_xlabel(r"$\log_{10}$(Box Size)")
    ax.set_ylabel(r"$\log_{10}$(RMS Fluctuation)")
    if title:
        ax.set_title(title)
    fig.tight_layout()
    save_path = _prepare_path(path)
    fig.savefig(save_path)
    plt.close(fig)
    return str(save_path)
