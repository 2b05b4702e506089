#!/usr/bin/env python
from __future__ import annotations

from typing import Optional

import typer

from svdpca.config import TrainConfig
from svdpca.core.logs import init_logger
from svdpca.errors import SvdPcaError
from svdpca.pipeline import run_training

app = typer.Typer(add_completion=False)


@app.command()
def main(
    samples: Optional[str] = typer.Option(None, help="Samples file (.npz, .npy, .csv, .xml)"),
    out: Optional[str] = typer.Option(None, help="Output directory"),
    config: Optional[str] = typer.Option(None, help="YAML config; CLI options override it"),
    normalize: Optional[bool] = typer.Option(None, "--normalize/--no-normalize", help="z-score the components"),
    log_level: Optional[str] = typer.Option(None, help="DEBUG, INFO, WARNING, ..."),
):
    cfg = TrainConfig.from_yaml(config) if config else TrainConfig()
    cfg = cfg.override(samples=samples, out_dir=out, normalize_by_variance=normalize, log_level=log_level)
    init_logger(cfg.log_level, cfg.log_file)
    try:
        summary = run_training(cfg, config_path=config)
    except (SvdPcaError, OSError) as e:
        typer.echo(f"[trainer/svd_pca] error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(
        f"PCA: n={summary['n_samples']}  f={summary['input_dim']}  k={summary['output_dim']}  "
        f"top_ratio={summary['top_ratio']:.3f}  -> {summary['out_dir']}"
    )


if __name__ == "__main__":
    app()
