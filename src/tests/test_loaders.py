import numpy as np
import pandas as pd
import pytest

from dfluc.io import load_csv, save_csv


def test_load_csv_with_timestamps(tmp_path):
    path = tmp_path / "series.csv"
    path.write_text(
        "timestamp,close\n"
        "2024-01-01 00:00:00,1.0\n"
        "2024-01-01 00:01:00,\n"
        "2024-01-01 00:03:00,2.5\n"
    )
    values, coords = load_csv(path)
    assert np.isnan(values.iloc[1])
    assert pd.api.types.is_datetime64_any_dtype(coords)
    assert coords.iloc[2] == pd.Timestamp("2024-01-01 00:03", tz="UTC")


def test_load_csv_named_columns(tmp_path):
    path = tmp_path / "series.csv"
    path.write_text("a,t,b\n1.0,0.5,9.0\n2.0,1.5,8.0\n")
    values, coords = load_csv(path, value_column="b", coordinate_column="t")
    assert values.tolist() == [9.0, 8.0]
    assert coords.tolist() == [0.5, 1.5]

    values, coords = load_csv(path)
    assert values.tolist() == [1.0, 2.0]
    assert coords is None

    with pytest.raises(KeyError):
        load_csv(path, coordinate_column="missing")


def test_save_csv(tmp_path):
    path = save_csv([1.0, np.nan, 3.0], tmp_path / "out" / "walk.csv", coordinates=[1, 2, 4])
    values, coords = load_csv(path, coordinate_column="x")
    assert coords.tolist() == [1.0, 2.0, 4.0]
    assert np.isnan(values.iloc[1])
