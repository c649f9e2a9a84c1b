"""
dfluc.config
============
Run configuration for the command-line interface.

Defaults live in :class:`DFAConfig`; a YAML file and ``key=value`` override
strings are merged on top with OmegaConf, e.g.::

    detrend_order: 1
    xrange: [0.0, 3600.0]
    box_sizes: [10, 20, 40, 80, 160]
    n_workers: 4
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from omegaconf import OmegaConf

from .preprocessing.core import DEFAULT_DETREND_ORDER

__all__ = ["DFAConfig", "load_config"]


@dataclass
class DFAConfig:
    # estimator options
    detrend_order: Any = DEFAULT_DETREND_ORDER
    xrange: Optional[List[float]] = None
    box_sizes: Optional[List[float]] = None
    n_workers: Optional[int] = None
    # input / output
    value_column: Optional[str] = None
    coordinate_column: Optional[str] = None
    plot_path: Optional[str] = None

    def estimator_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for :func:`dfluc.estimate_hurst_exponent`."""
        opts = asdict(self)
        return {
            key: opts[key]
            for key in ("detrend_order", "xrange", "box_sizes", "n_workers")
        }


def load_config(
    path: Union[str, Path, None] = None,
    overrides: Optional[Sequence[str]] = None,
) -> DFAConfig:
    """Merge *path* (YAML) and dotlist *overrides* onto the defaults."""
    cfg = OmegaConf.structured(DFAConfig)
    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(Path(path)))
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))
    return OmegaConf.to_object(cfg)
