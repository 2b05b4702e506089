from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from ..core.io import ensure_dir
from ..errors import ShapeMismatch, TypeMismatch


class Arrayset:
    """
    Ordered collection of same-typed, same-shaped samples.

    The element type and per-sample shape are fixed by the constructor or by the
    first appended sample. Every later sample must agree with both, so a store
    answers ``element_type``/``ndim``/``shape`` without re-scanning its contents.
    """

    def __init__(self, element_type=None, shape: Optional[Tuple[int, ...]] = None):
        self._dtype: Optional[np.dtype] = None if element_type is None else np.dtype(element_type)
        self._shape: Optional[Tuple[int, ...]] = None if shape is None else tuple(int(s) for s in shape)
        self._samples: List[np.ndarray] = []

    # ---- metadata ----
    @property
    def element_type(self) -> Optional[np.dtype]:
        return self._dtype

    @property
    def shape(self) -> Optional[Tuple[int, ...]]:
        return self._shape

    @property
    def ndim(self) -> int:
        return 0 if self._shape is None else len(self._shape)

    def __len__(self) -> int:
        return len(self._samples)

    # ---- access ----
    def get(self, index: int) -> np.ndarray:
        return self._samples[index]

    def __getitem__(self, index: int) -> np.ndarray:
        return self.get(index)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._samples)

    def append(self, sample) -> int:
        """Add a copy of ``sample`` and return its index."""
        a = np.array(sample, copy=True)
        if self._dtype is None:
            self._dtype = a.dtype
        elif a.dtype != self._dtype:
            raise TypeMismatch(a.dtype, self._dtype)
        if self._shape is None:
            self._shape = a.shape
        elif a.shape != self._shape:
            if a.ndim != len(self._shape):
                raise ShapeMismatch(a.ndim, len(self._shape))
            raise ShapeMismatch(a.shape, self._shape, what="shape")
        self._samples.append(a)
        return len(self._samples) - 1

    def extend(self, samples: Iterable) -> None:
        for s in samples:
            self.append(s)

    # ---- conversion ----
    @classmethod
    def from_array(cls, x) -> "Arrayset":
        """Build a store from an array whose first axis indexes samples."""
        x = np.asarray(x)
        if x.ndim < 1:
            raise ShapeMismatch(x.ndim, 1)
        out = cls(element_type=x.dtype, shape=x.shape[1:])
        out.extend(x)
        return out

    def to_array(self) -> np.ndarray:
        """Stacked copy of shape (N, *shape)."""
        if not self._samples:
            return np.empty((0,) + (self._shape or ()), dtype=self._dtype or np.float64)
        return np.stack(self._samples, axis=0)

    def save(self, path: Path | str) -> Path:
        p = Path(path)
        ensure_dir(p.parent)
        np.savez(p, samples=self.to_array())
        # np.savez appends .npz when missing
        return p if p.suffix == ".npz" else p.with_name(p.name + ".npz")

    @classmethod
    def load(cls, path: Path | str) -> "Arrayset":
        with np.load(Path(path)) as data:
            return cls.from_array(data["samples"])

    def __repr__(self) -> str:
        return f"Arrayset(n={len(self)}, element_type={self._dtype}, shape={self._shape})"
