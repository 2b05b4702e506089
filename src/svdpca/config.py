from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .core.io import load_yaml
from .errors import ConfigError


@dataclass
class TrainConfig:
    samples: Optional[str] = None  # .npz / .npy / .csv / .xml
    out_dir: str = "outputs/svd_pca"
    normalize_by_variance: bool = False
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "TrainConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ConfigError(f"unknown config key(s): {', '.join(unknown)}")
        return cls(**payload)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "TrainConfig":
        payload = load_yaml(path) or {}
        if not isinstance(payload, dict):
            raise ConfigError(f"{path}: expected a mapping at the top level")
        return cls.from_dict(payload)

    def override(self, **kwargs) -> "TrainConfig":
        """Copy with every non-None keyword applied (CLI options win over the file)."""
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})
