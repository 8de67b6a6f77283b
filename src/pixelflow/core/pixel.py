"""Normalized channel vectors tagged with a color layout."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, Optional, Union

import numpy as np

from ..errors import InvalidColorError
from .color import Layout, convert_values

Operand = Union["Pixel", float, int]


class Pixel:
    """A small vector of normalized channel values.

    Pixels are created per computation and never shared between points, so
    the arithmetic helpers return new instances while the ``i``-prefixed
    operators update in place.
    """

    __slots__ = ("layout", "values")

    def __init__(self, layout: Layout, values: Optional[Iterable[float]] = None) -> None:
        self.layout = layout
        if values is None:
            self.values = np.zeros(layout.channels, dtype=np.float64)
        else:
            data = np.array(values, dtype=np.float64).reshape(-1)
            if data.shape[0] != layout.channels:
                raise InvalidColorError(
                    f"{layout.name} pixels have {layout.channels} channels, got {data.shape[0]}"
                )
            self.values = data

    @classmethod
    def filled(cls, layout: Layout, value: float) -> "Pixel":
        return cls(layout, np.full(layout.channels, float(value)))

    # ------------------------------------------------------------------
    @property
    def channels(self) -> int:
        return self.layout.channels

    def is_alpha(self, channel: int) -> bool:
        return self.layout.is_alpha(channel)

    def __len__(self) -> int:
        return self.layout.channels

    def __getitem__(self, channel: int) -> float:
        return float(self.values[channel])

    def __setitem__(self, channel: int, value: float) -> None:
        self.values[channel] = value

    def __iter__(self) -> Iterator[float]:
        return (float(v) for v in self.values)

    def __repr__(self) -> str:
        channels = ", ".join(f"{v:.6g}" for v in self.values)
        return f"Pixel({self.layout.name}: [{channels}])"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pixel):
            return NotImplemented
        return self.layout == other.layout and bool(np.array_equal(self.values, other.values))

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------
    def copy(self) -> "Pixel":
        return Pixel(self.layout, self.values.copy())

    def map(self, fn: Callable[[float], float]) -> "Pixel":
        """Apply *fn* to every channel in place and return ``self``."""

        for i in range(self.layout.channels):
            self.values[i] = fn(float(self.values[i]))
        return self

    def clamped(self) -> "Pixel":
        """Return a copy with every channel saturated to ``[0, 1]``."""

        return Pixel(self.layout, np.clip(self.values, 0.0, 1.0))

    def convert(self, layout: Layout) -> "Pixel":
        """Return this pixel expressed in *layout*."""

        if layout == self.layout:
            return self.copy()
        return Pixel(layout, convert_values(self.values, self.layout, layout))

    def is_close(self, other: "Pixel", tolerance: float = 1e-9) -> bool:
        return self.layout == other.layout and bool(
            np.allclose(self.values, other.values, atol=tolerance, rtol=0.0)
        )

    # ------------------------------------------------------------------
    def _operand(self, other: Operand) -> Union[np.ndarray, float]:
        if isinstance(other, Pixel):
            if other.layout != self.layout:
                raise InvalidColorError(
                    f"Cannot combine {self.layout.name} and {other.layout.name} pixels"
                )
            return other.values
        return float(other)

    def __add__(self, other: Operand) -> "Pixel":
        return Pixel(self.layout, self.values + self._operand(other))

    def __sub__(self, other: Operand) -> "Pixel":
        return Pixel(self.layout, self.values - self._operand(other))

    def __mul__(self, other: Operand) -> "Pixel":
        return Pixel(self.layout, self.values * self._operand(other))

    def __truediv__(self, other: Operand) -> "Pixel":
        return Pixel(self.layout, self.values / self._operand(other))

    __radd__ = __add__
    __rmul__ = __mul__

    def __iadd__(self, other: Operand) -> "Pixel":
        self.values += self._operand(other)
        return self

    def __isub__(self, other: Operand) -> "Pixel":
        self.values -= self._operand(other)
        return self

    def __imul__(self, other: Operand) -> "Pixel":
        self.values *= self._operand(other)
        return self

    def __itruediv__(self, other: Operand) -> "Pixel":
        self.values /= self._operand(other)
        return self

    def __neg__(self) -> "Pixel":
        return Pixel(self.layout, -self.values)


__all__ = ["Pixel"]
