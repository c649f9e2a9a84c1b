from dfluc.config import DFAConfig, load_config


def test_defaults():
    cfg = load_config()
    assert isinstance(cfg, DFAConfig)
    assert cfg.detrend_order == 2
    assert cfg.xrange is None
    assert cfg.estimator_kwargs() == {
        "detrend_order": 2,
        "xrange": None,
        "box_sizes": None,
        "n_workers": None,
    }


def test_yaml_and_overrides(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(
        "detrend_order: 1\n"
        "xrange: [0.0, 3600.0]\n"
        "box_sizes: [10, 20, 40]\n"
        "value_column: eeg\n"
    )
    cfg = load_config(path, ["n_workers=4", "detrend_order=[1,3]"])
    assert cfg.detrend_order == [1, 3]
    assert cfg.xrange == [0.0, 3600.0]
    assert cfg.box_sizes == [10.0, 20.0, 40.0]
    assert cfg.n_workers == 4
    assert cfg.value_column == "eeg"
    assert cfg.plot_path is None
