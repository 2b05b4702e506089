from __future__ import annotations

from typing import Any

import numpy as np

# Readable names for the element types a sample store can report.
_KIND_NAMES = {
    "b": "boolean",
    "i": "integer",
    "u": "unsigned integer",
    "c": "complex",
    "U": "string",
    "S": "bytes",
    "O": "object",
}


def type_name(dt: Any) -> str:
    """Human name for a numpy dtype, e.g. ``float64 -> '64-bit float'``."""
    dt = np.dtype(dt)
    if dt.kind == "f":
        return f"{dt.itemsize * 8}-bit float"
    return _KIND_NAMES.get(dt.kind, str(dt))


class SvdPcaError(Exception):
    """Base class for every error raised by svdpca."""


class TypeMismatch(SvdPcaError, ValueError):
    def __init__(self, found: Any, expected: Any):
        self.found = np.dtype(found)
        self.expected = np.dtype(expected)
        super().__init__(f"found {type_name(self.found)}, expected {type_name(self.expected)}")


class ShapeMismatch(SvdPcaError, ValueError):
    """
    Rank or extent mismatch. With integers the message talks about ranks; with
    tuples it reports the extents.
    """

    def __init__(self, found: int | tuple, expected: int | tuple, what: str = "rank"):
        self.found = found
        self.expected = expected
        super().__init__(f"found {what} {found}, expected {what} {expected}")


class InsufficientSamples(SvdPcaError, ValueError):
    def __init__(self, found: int, expected: int = 2):
        self.found = found
        self.expected = expected
        super().__init__(f"found {found} sample(s), expected at least {expected}")


class FactorizationFailure(SvdPcaError, RuntimeError):
    """The SVD routine did not converge or hit an invalid numeric state."""


class DatasetFormatError(SvdPcaError, ValueError):
    pass


class ConfigError(SvdPcaError, ValueError):
    pass
