"""
dfluc.cli
=========
Typer‑based command‑line interface.

Examples
--------
    python -m dfluc.cli --help
    python -m dfluc.cli simulate walk.csv --n 10000 --seed 1 --missing 0.1
    python -m dfluc.cli estimate walk.csv --coordinate-column x --order 1
    python -m dfluc.cli estimate eeg.csv --config run.yaml --set n_workers=4
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import List, Optional

import numpy as np
import typer

from .config import load_config
from .estimators import estimate_hurst_exponent
from .io import load_csv, save_csv

# ──────────────────────────────────────────────────────────────────────────────
# create Typer app; disable Rich markup so help text prints safely in the
# Windows CP‑1252 console
# ──────────────────────────────────────────────────────────────────────────────
app = typer.Typer(add_completion=False, rich_markup_mode=None)


def _finite_or_none(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return float(value)


# ──────────────────────────────────────────────────────────────────────────────
# commands
# ──────────────────────────────────────────────────────────────────────────────
@app.command(help="Estimate the Hurst exponent of a CSV column with DFA.")
def estimate(
    path: Path = typer.Argument(..., help="CSV file with a header row."),
    value_column: Optional[str] = typer.Option(
        None, help="Column with the observed values (default: first non-coordinate column)."
    ),
    coordinate_column: Optional[str] = typer.Option(
        None, help="Column with the sample points (default: 'timestamp' if present, else 1..N)."
    ),
    order: Optional[List[int]] = typer.Option(
        None, "--order", help="Detrending order; repeat to pass several (the maximum is used)."
    ),
    xstart: Optional[float] = typer.Option(None, help="Start of the analysis range."),
    xend: Optional[float] = typer.Option(None, help="End of the analysis range."),
    box_size: Optional[List[float]] = typer.Option(
        None, "--box-size", help="Box size in coordinate units; repeat for several."
    ),
    workers: Optional[int] = typer.Option(None, help="Evaluate box sizes on N threads."),
    plot: Optional[Path] = typer.Option(None, help="Save the log-log fluctuation plot to this PNG."),
    config: Optional[Path] = typer.Option(None, help="YAML run configuration."),
    overrides: Optional[List[str]] = typer.Option(
        None, "--set", help="Configuration override, e.g. --set detrend_order=1."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
) -> None:
    """Run DFA on PATH and print the estimate; exit code 1 when H is NaN."""
    if (xstart is None) != (xend is None):
        raise typer.BadParameter("--xstart and --xend must be given together")

    cfg = load_config(config, overrides or None)
    if value_column is not None:
        cfg.value_column = value_column
    if coordinate_column is not None:
        cfg.coordinate_column = coordinate_column
    if order:
        cfg.detrend_order = list(order)
    if xstart is not None:
        cfg.xrange = [xstart, xend]
    if box_size:
        cfg.box_sizes = list(box_size)
    if workers is not None:
        cfg.n_workers = workers
    if plot is not None:
        cfg.plot_path = str(plot)

    try:
        values, coords = load_csv(path, cfg.value_column, cfg.coordinate_column)
    except (KeyError, ValueError) as exc:
        # unparseable dates surface from pandas as ValueError subclasses
        raise typer.BadParameter(exc.args[0] if exc.args else str(exc)) from exc
    result = estimate_hurst_exponent(
        values,
        coords,
        plotting=cfg.plot_path is not None,
        **cfg.estimator_kwargs(),
    )

    for diag in result.diagnostics:
        level = "error" if diag.fatal else "warning"
        typer.echo(f"{level}: {diag}", err=True)

    if result.ok and cfg.plot_path is not None:
        from . import plotting

        typer.echo(f"Plot written to {plotting.plot_fluctuation(result, cfg.plot_path)}", err=True)

    if as_json:
        summary = {
            "H": _finite_or_none(result.H),
            "intercept": _finite_or_none(result.intercept),
            "detrend_order": result.detrend_order,
            "xbeg": _finite_or_none(result.xbeg),
            "xend": _finite_or_none(result.xend),
            "n_samples": result.n_samples,
            "diagnostics": [
                {"kind": d.kind, "message": d.message, "fatal": d.fatal}
                for d in result.diagnostics
            ],
        }
        typer.echo(json.dumps(summary, indent=2))
    else:
        typer.echo(f"{result.H:.6f}" if result.ok else "nan")

    if not result.ok:
        raise typer.Exit(code=1)


@app.command(help="Write an integrated white-noise test series to CSV.")
def simulate(
    path: Path = typer.Argument(..., help="Output CSV file."),
    n: int = typer.Option(10_000, help="Number of samples."),
    seed: Optional[int] = typer.Option(None, help="RNG seed."),
    missing: float = typer.Option(
        0.0, min=0.0, max=1.0, help="Fraction of values replaced by NaN (missing)."
    ),
) -> None:
    """Cumulative sum of standard normal draws sampled at 1..N (H = 0.5)."""
    rng = np.random.default_rng(seed)
    walk = np.cumsum(rng.standard_normal(n))
    if missing > 0:
        walk[rng.random(n) < missing] = np.nan
    out = save_csv(walk, path, coordinates=np.arange(1, n + 1))
    typer.echo(str(out))


# ──────────────────────────────────────────────────────────────────────────────
# module entry‑point
# ──────────────────────────────────────────────────────────────────────────────
def _entry_point() -> None:  # invoked by `python -m dfluc.cli`
    app()


if __name__ == "__main__":
    _entry_point()
