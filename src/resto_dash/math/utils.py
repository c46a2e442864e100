"""Common helper functions for numeric routines."""

from collections.abc import Iterable
from typing import TypeAlias, cast

import numpy as np
import numpy.typing as npt

FloatArray: TypeAlias = npt.NDArray[np.float64]
NumericInput: TypeAlias = npt.ArrayLike | Iterable[float]


def to_numpy(values: NumericInput) -> FloatArray:
    """Coerce the input sequence into a NumPy float array."""
    if isinstance(values, np.ndarray):
        return cast(FloatArray, values.astype(float, copy=False))
    return cast(FloatArray, np.asarray(list(values), dtype=float))


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return float(numerator / denominator)


__all__ = ["FloatArray", "NumericInput", "safe_ratio", "to_numpy"]
