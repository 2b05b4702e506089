from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd

from . import __version__
from .config import TrainConfig
from .core.io import ensure_dir, save_json
from .core.manifest import write_manifest
from .data.arrayset import Arrayset
from .data.xml_io import read_dataset
from .errors import ConfigError, DatasetFormatError
from .trainer.svd_pca import svd_pca

log = logging.getLogger(__name__)


def load_samples(path: Path | str) -> Arrayset:
    """
    Read a sample store from disk. Supported: .npz (Arrayset.save), .npy
    (first axis = samples), .csv (one row per sample, numeric columns) and
    .xml (first arrayset of the dataset).
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".npz":
        return Arrayset.load(p)
    if suffix == ".npy":
        return Arrayset.from_array(np.load(p))
    if suffix == ".csv":
        df = pd.read_csv(p).select_dtypes(include="number")
        return Arrayset.from_array(df.to_numpy(dtype=np.float64))
    if suffix == ".xml":
        sets = read_dataset(p)
        if not sets:
            raise DatasetFormatError(f"{p}: dataset holds no arrayset")
        return sets[min(sets)]
    raise ConfigError(f"unsupported sample file: {p} (expected .npz, .npy, .csv or .xml)")


def run_training(cfg: TrainConfig, config_path: str | None = None) -> Dict[str, Any]:
    if not cfg.samples:
        raise ConfigError("no sample file given")
    samples = load_samples(cfg.samples)
    log.info(f"Loaded {len(samples)} samples of shape {samples.shape} from {cfg.samples}")

    res = svd_pca(samples, normalize_by_variance=cfg.normalize_by_variance)
    ratio = res.explained_variance_ratio

    out_dir = ensure_dir(cfg.out_dir)
    machine_path = res.machine.save(out_dir / "machine.npz")
    eig_path = out_dir / "eigenvalues.json"
    save_json(
        eig_path,
        {"eigenvalues": res.eigenvalues, "explained_variance_ratio": ratio},
    )
    write_manifest(
        out_dir,
        "trainer/svd_pca",
        __version__,
        config_path,
        [str(cfg.samples)],
        {"machine": str(machine_path), "eigenvalues": str(eig_path)},
        {"normalize_by_variance": cfg.normalize_by_variance},
    )
    summary = {
        "n_samples": len(samples),
        "input_dim": res.machine.input_dim,
        "output_dim": res.machine.output_dim,
        "top_ratio": float(ratio[0]) if ratio.size else 0.0,
        "out_dir": str(out_dir),
    }
    log.info(
        f"Fitted PCA: f={summary['input_dim']} k={summary['output_dim']} "
        f"top component explains {summary['top_ratio']:.3f} of the variance"
    )
    return summary
