"""Storage representations for image samples.

A :class:`Type` maps raw samples of one numpy dtype onto the normalized
``[0, 1]`` range used by every filter, and back.  Integer types cover their
full numeric range; floating point types are already normalized and store
``0.0`` to ``1.0`` directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np

from ..errors import InvalidTypeError
from . import kernels


@dataclass(frozen=True, eq=False)
class Type:
    """Numeric kind backing an :class:`~pixelflow.core.image.Image`."""

    name: str
    dtype: np.dtype = field(repr=False)
    MIN: float = field(repr=False)
    MAX: float = field(repr=False)

    @property
    def is_float(self) -> bool:
        """Return ``True`` for half, single and double precision storage."""

        return self.dtype.kind == "f"

    @property
    def bits(self) -> int:
        return self.dtype.itemsize * 8

    # ------------------------------------------------------------------
    def to_normalized(self, value: Any) -> Any:
        """Return *value* (scalar or array) scaled into ``[0, 1]``."""

        if isinstance(value, np.ndarray):
            return kernels.normalize_samples(value, self.MIN, self.MAX, self.is_float)
        return (float(value) - self.MIN) / (self.MAX - self.MIN)

    def from_normalized(self, value: Any) -> Any:
        """Return the raw sample for normalized *value*.

        Integer types round to the nearest representable value and saturate at
        ``MIN``/``MAX``.  Arrays are converted in bulk and keep their shape.
        """

        if isinstance(value, np.ndarray):
            out = np.empty(value.shape, dtype=self.dtype)
            kernels.denormalize_into(value, out, self.MIN, self.MAX, self.is_float)
            return out
        raw = float(value) * (self.MAX - self.MIN) + self.MIN
        if self.is_float:
            return self.dtype.type(raw)
        return self.dtype.type(min(max(float(np.rint(raw)), self.MIN), self.MAX))

    def convert(self, value: Any, other: "Type") -> Any:
        """Convert *value* stored as this type into *other* through normalized space."""

        return other.from_normalized(self.to_normalized(value))

    def clamp(self, value: Any) -> Any:
        """Clip a raw value (or array) to ``[MIN, MAX]``."""

        return np.clip(value, self.MIN, self.MAX)

    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Type):
            return NotImplemented
        return self.dtype == other.dtype

    def __hash__(self) -> int:
        return hash(self.dtype.str)

    @classmethod
    def of(cls, value: Union["Type", str, np.dtype, type]) -> "Type":
        """Return the registered :class:`Type` for a name, dtype or Type."""

        if isinstance(value, Type):
            return value
        if isinstance(value, str) and value.lower() in _BY_NAME:
            return _BY_NAME[value.lower()]
        try:
            dtype = np.dtype(value)
        except TypeError as exc:
            raise InvalidTypeError(f"Unsupported sample type: {value!r}") from exc
        try:
            return _BY_DTYPE[dtype.str]
        except KeyError:
            raise InvalidTypeError(f"Unsupported sample type: {dtype}") from None


def _integer(name: str, dtype: Any) -> Type:
    info = np.iinfo(dtype)
    return Type(name, np.dtype(dtype), float(info.min), float(info.max))


def _floating(name: str, dtype: Any) -> Type:
    return Type(name, np.dtype(dtype), 0.0, 1.0)


U8 = _integer("u8", np.uint8)
I8 = _integer("i8", np.int8)
U16 = _integer("u16", np.uint16)
I16 = _integer("i16", np.int16)
U32 = _integer("u32", np.uint32)
I32 = _integer("i32", np.int32)
F16 = _floating("f16", np.float16)
F32 = _floating("f32", np.float32)
F64 = _floating("f64", np.float64)

TYPES = (U8, I8, U16, I16, U32, I32, F16, F32, F64)

_BY_NAME = {t.name: t for t in TYPES}
_BY_DTYPE = {t.dtype.str: t for t in TYPES}

__all__ = ["F16", "F32", "F64", "I16", "I32", "I8", "TYPES", "Type", "U16", "U32", "U8"]
