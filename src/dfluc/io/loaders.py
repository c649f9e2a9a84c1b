from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

__all__ = ["load_csv", "save_csv"]


def load_csv(
    path: str | Path,
    value_column: str | None = None,
    coordinate_column: str | None = None,
) -> tuple[pd.Series, pd.Series | None]:
    """Read observations (and optionally their sample points) from a CSV file.

    Parameters
    ----------
    path : str or Path
        CSV file with a header row.
    value_column : str, optional
        Column holding the observed values.  Defaults to the first column
        that is not the coordinate column.
    coordinate_column : str, optional
        Column holding the sample points.  When omitted a ``timestamp``
        column is used if present, otherwise the data are treated as
        regularly sampled and ``None`` is returned for the coordinates.
        Non-numeric coordinate columns are parsed as UTC datetimes.

    Returns
    -------
    (pd.Series, pd.Series or None)
        Values (empty cells become ``NaN``, i.e. missing observations) and
        coordinates.

    Raises
    ------
    KeyError
        If a requested column is missing.
    ValueError
        If the file has no value column.
    """
    df = pd.read_csv(path)
    if coordinate_column is None and "timestamp" in df.columns:
        coordinate_column = "timestamp"
    if coordinate_column is not None and coordinate_column not in df.columns:
        raise KeyError(f"column {coordinate_column!r} not found in {path}")

    if value_column is None:
        candidates = [c for c in df.columns if c != coordinate_column]
        if not candidates:
            raise ValueError(f"{path} has no value column")
        value_column = candidates[0]
    elif value_column not in df.columns:
        raise KeyError(f"column {value_column!r} not found in {path}")

    values = df[value_column]
    if coordinate_column is None:
        return values, None
    coords = df[coordinate_column]
    if not pd.api.types.is_numeric_dtype(coords):
        coords = pd.to_datetime(coords, utc=True)
    return values, coords


def save_csv(
    values,
    path: str | Path,
    coordinates=None,
    value_column: str = "value",
    coordinate_column: str = "x",
) -> Path:
    """Write *values* (and *coordinates* when given) to *path*; returns the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {value_column: np.asarray(values, dtype=float)}
    if coordinates is not None:
        data = {coordinate_column: np.asarray(coordinates, dtype=float), **data}
    pd.DataFrame(data).to_csv(path, index=False)
    return path
