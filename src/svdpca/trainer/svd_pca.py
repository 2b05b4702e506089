from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..core.timers import timed
from ..errors import FactorizationFailure, InsufficientSamples, ShapeMismatch, TypeMismatch
from ..machine.linear import LinearMachine

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PCAResult:
    machine: LinearMachine
    eigenvalues: np.ndarray  # (k,), descending

    @property
    def explained_variance_ratio(self) -> np.ndarray:
        total = float(self.eigenvalues.sum())
        return self.eigenvalues / (total + 1e-12)


def _check_samples(samples) -> None:
    # one metadata check for the whole store; per-sample lengths are trusted
    if samples.element_type is None:
        raise InsufficientSamples(len(samples), 2)
    dt = samples.element_type
    # any byte order, as long as it is a 64-bit float
    if dt.kind != "f" or dt.itemsize != 8:
        raise TypeMismatch(samples.element_type, np.float64)
    if samples.shape is None and len(samples) < 2:
        raise InsufficientSamples(len(samples), 2)
    if samples.ndim != 1:
        raise ShapeMismatch(samples.ndim, 1)
    if len(samples) < 2:
        raise InsufficientSamples(len(samples), 2)


def _stage(samples) -> np.ndarray:
    """Column-major (F, N) copy of the store, one sample per column."""
    n = len(samples)
    f = samples.shape[0]
    data = np.empty((f, n), dtype=np.float64, order="F")
    for i in range(n):
        data[:, i] = samples.get(i)
    return data


@dataclass(frozen=True)
class SVDPCATrainer:
    """
    PCA through the economy SVD of the centered data matrix.

    With ``normalize_by_variance`` the fitted machine divides every component by
    its standard deviation (sqrt of the eigenvalue), so outputs are z-scores.
    """

    normalize_by_variance: bool = False

    def train(self, machine: LinearMachine, samples) -> np.ndarray:
        """
        Fit ``machine`` on ``samples`` (a float64, rank-1 Arrayset) and return
        the eigenvalues sigma**2 / (n - 1), in descending order.
        """
        _check_samples(samples)

        data = _stage(samples)
        f, n = data.shape
        k = min(f, n)
        log.debug(f"svd-pca: n={n} f={f} k={k} normalize={self.normalize_by_variance}")

        with timed("svd-pca", log):
            mean = data.mean(axis=1)
            data -= mean[:, None]

            # LAPACK returns sigma in descending order, no sorting needed
            try:
                U, sigma, _ = np.linalg.svd(data, full_matrices=False)
            except np.linalg.LinAlgError as e:
                raise FactorizationFailure(f"SVD did not converge on a {f}x{n} matrix") from e

            machine.resize(f, k)
            machine.set_input_subtraction(mean)
            machine.set_input_division(1.0)
            machine.set_biases(0.0)
            machine.set_weights(U.T)

            eigenvalues = sigma**2 / (n - 1)
            if self.normalize_by_variance:
                machine.set_input_division(np.sqrt(eigenvalues))

        return eigenvalues

    fit = train

    def train_machine(self, machine: LinearMachine, samples) -> LinearMachine:
        """Same as ``train`` for callers that only need the machine."""
        self.train(machine, samples)
        return machine


def svd_pca(samples, normalize_by_variance: bool = False) -> PCAResult:
    machine = LinearMachine()
    eigenvalues = SVDPCATrainer(normalize_by_variance).train(machine, samples)
    return PCAResult(machine=machine, eigenvalues=eigenvalues)
