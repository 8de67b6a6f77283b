"""JIT-compiled bulk sample kernels using Numba.

Per-point access goes through :class:`~pixelflow.core.types.Type` directly,
but whole-buffer conversions (``Image.convert_to``, materializing pipeline
segments, adapter handoff) walk every sample.  These kernels keep those loops
in native code.
"""

from __future__ import annotations

import numpy as np
from numba import jit


@jit(nopython=True, cache=True)
def _normalize_kernel(samples: np.ndarray, out: np.ndarray, minimum: float, maximum: float) -> None:
    """Scale raw integer *samples* into ``[0, 1]`` writing into *out*."""
    span = maximum - minimum
    for i in range(samples.shape[0]):
        out[i] = (float(samples[i]) - minimum) / span


@jit(nopython=True, cache=True)
def _denormalize_int_kernel(values: np.ndarray, out: np.ndarray, minimum: float, maximum: float) -> None:
    """Map normalized *values* onto an integer range with rounding and saturation."""
    span = maximum - minimum
    for i in range(values.shape[0]):
        raw = np.rint(values[i] * span + minimum)
        if raw < minimum:
            raw = minimum
        elif raw > maximum:
            raw = maximum
        out[i] = raw


def normalize_samples(samples: np.ndarray, minimum: float, maximum: float, is_float: bool) -> np.ndarray:
    """Return a float64 copy of *samples* in normalized space.

    The result has the same shape as *samples*.  Floating point storage is
    already normalized and only needs widening.
    """

    if is_float:
        return np.asarray(samples, dtype=np.float64).copy()
    flat = np.ascontiguousarray(samples).reshape(-1)
    out = np.empty(flat.shape[0], dtype=np.float64)
    if flat.shape[0]:
        _normalize_kernel(flat, out, float(minimum), float(maximum))
    return out.reshape(np.shape(samples))


def denormalize_into(
    values: np.ndarray,
    out: np.ndarray,
    minimum: float,
    maximum: float,
    is_float: bool,
) -> None:
    """Write normalized *values* into the raw buffer *out* in place.

    *out* must be contiguous and hold exactly as many samples as *values*.
    Integer storage saturates; floating point storage keeps out-of-range
    values untouched.
    """

    flat_values = np.ascontiguousarray(values, dtype=np.float64).reshape(-1)
    flat_out = out.reshape(-1)
    if flat_out.shape[0] != flat_values.shape[0]:
        raise ValueError("sample buffers differ in length")
    if not flat_values.shape[0]:
        return
    if is_float:
        flat_out[:] = (flat_values * (maximum - minimum) + minimum).astype(out.dtype)
        return
    _denormalize_int_kernel(flat_values, flat_out, float(minimum), float(maximum))


__all__ = ["denormalize_into", "normalize_samples"]
