from __future__ import annotations

from pathlib import Path

import numpy as np

from ..core.io import ensure_dir
from ..errors import ShapeMismatch


def _vector_or_scalar(value, n: int, name: str) -> np.ndarray:
    v = np.asarray(value, dtype=np.float64)
    if v.ndim == 0:
        return np.full(n, float(v))
    if v.shape != (n,):
        raise ShapeMismatch(v.shape, (n,), what=f"{name} shape")
    return v.copy()


class LinearMachine:
    """
    Affine projection y = W @ (x - input_subtraction) / division + biases.

    weights: (output_dim, input_dim), one row per output direction
    input_subtraction: (input_dim,)
    division: (output_dim,), one divisor per output component
    biases: (output_dim,)
    """

    def __init__(self, input_dim: int = 0, output_dim: int = 0):
        self.resize(input_dim, output_dim)

    @property
    def input_dim(self) -> int:
        return self.weights.shape[1]

    @property
    def output_dim(self) -> int:
        return self.weights.shape[0]

    @property
    def shape(self) -> tuple[int, int]:
        return self.input_dim, self.output_dim

    def resize(self, input_dim: int, output_dim: int) -> None:
        """Zero weights, no-op subtraction and division, zero biases."""
        input_dim, output_dim = int(input_dim), int(output_dim)
        self.weights = np.zeros((output_dim, input_dim), dtype=np.float64)
        self.input_subtraction = np.zeros(input_dim, dtype=np.float64)
        self.division = np.ones(output_dim, dtype=np.float64)
        self.biases = np.zeros(output_dim, dtype=np.float64)

    def set_input_subtraction(self, value) -> None:
        self.input_subtraction = _vector_or_scalar(value, self.input_dim, "input_subtraction")

    def set_input_division(self, value) -> None:
        self.division = _vector_or_scalar(value, self.output_dim, "division")

    def set_biases(self, value) -> None:
        self.biases = _vector_or_scalar(value, self.output_dim, "biases")

    def set_weights(self, weights) -> None:
        w = np.asarray(weights, dtype=np.float64)
        if w.shape != self.weights.shape:
            raise ShapeMismatch(w.shape, self.weights.shape, what="weights shape")
        self.weights = np.array(w, copy=True, order="C")

    def forward(self, x) -> np.ndarray:
        """Project one sample (input_dim,) or a batch (n, input_dim)."""
        x = np.asarray(x, dtype=np.float64)
        if x.shape[-1] != self.input_dim:
            raise ShapeMismatch(x.shape[-1], self.input_dim, what="input size")
        return (x - self.input_subtraction) @ self.weights.T / self.division + self.biases

    __call__ = forward

    def is_similar_to(self, other: "LinearMachine", rtol: float = 1e-8, atol: float = 1e-8) -> bool:
        if self.shape != other.shape:
            return False
        return all(
            np.allclose(a, b, rtol=rtol, atol=atol)
            for a, b in [
                (self.weights, other.weights),
                (self.input_subtraction, other.input_subtraction),
                (self.division, other.division),
                (self.biases, other.biases),
            ]
        )

    def save(self, path: Path | str) -> Path:
        p = Path(path)
        ensure_dir(p.parent)
        np.savez(
            p,
            weights=self.weights,
            input_subtraction=self.input_subtraction,
            division=self.division,
            biases=self.biases,
        )
        return p if p.suffix == ".npz" else p.with_name(p.name + ".npz")

    @classmethod
    def load(cls, path: Path | str) -> "LinearMachine":
        with np.load(Path(path)) as data:
            w = data["weights"]
            m = cls(input_dim=w.shape[1], output_dim=w.shape[0])
            m.set_weights(w)
            m.set_input_subtraction(data["input_subtraction"])
            m.set_input_division(data["division"])
            m.set_biases(data["biases"])
        return m

    def __repr__(self) -> str:
        return f"LinearMachine(input_dim={self.input_dim}, output_dim={self.output_dim})"
