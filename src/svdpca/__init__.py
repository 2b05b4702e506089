"""SVD-based principal component analysis trainer."""

__version__ = "0.1.0"

from .data.arrayset import Arrayset as Arrayset
from .errors import (
    FactorizationFailure as FactorizationFailure,
    InsufficientSamples as InsufficientSamples,
    ShapeMismatch as ShapeMismatch,
    SvdPcaError as SvdPcaError,
    TypeMismatch as TypeMismatch,
)
from .machine.linear import LinearMachine as LinearMachine
from .trainer.svd_pca import PCAResult as PCAResult, SVDPCATrainer as SVDPCATrainer, svd_pca as svd_pca

__all__ = [
    "__version__",
    "Arrayset",
    "LinearMachine",
    "SVDPCATrainer",
    "PCAResult",
    "svd_pca",
    "SvdPcaError",
    "TypeMismatch",
    "ShapeMismatch",
    "InsufficientSamples",
    "FactorizationFailure",
]
