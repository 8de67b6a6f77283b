"""Convolution kernels."""

from __future__ import annotations

import math
import operator
from typing import Callable, Sequence, Union

import numpy as np

from ..core.geom import Point
from ..core.image import PixelSlot
from ..core.pixel import Pixel
from ..errors import InvalidDimensionsError
from .base import Filter, Schedule
from .input import Input

Weights = Union[np.ndarray, Sequence[Sequence[float]]]


def _weights(rows: Weights) -> np.ndarray:
    data = np.array(rows, dtype=np.float64)
    if data.ndim != 2 or data.shape[0] % 2 == 0 or data.shape[1] % 2 == 0:
        raise InvalidDimensionsError(f"Kernels need odd width and height, got shape {data.shape}")
    return data


class Kernel(Filter):
    """Weighted sum of the neighbourhood around every point.

    Taps falling outside the input read as zero.  The kernel reads input
    image ``0`` only, which inside a pipeline is always a materialized
    buffer distinct from the destination, so points are independent.
    """

    parallel_safe = True

    def __init__(self, rows: Weights) -> None:
        self.data = _weights(rows)

    @classmethod
    def create(cls, rows: int, cols: int, fn: Callable[[int, int], float]) -> "Kernel":
        """Build a kernel from ``fn(x, y)`` evaluated at every tap."""

        return cls([[fn(i, j) for i in range(cols)] for j in range(rows)])

    @property
    def rows(self) -> int:
        return int(self.data.shape[0])

    @property
    def cols(self) -> int:
        return int(self.data.shape[1])

    def schedule(self) -> Schedule:
        return Schedule.IMAGE

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        r2, c2 = self.rows // 2, self.cols // 2
        acc = np.zeros(input.channels, dtype=np.float64)
        for ky in range(-r2, r2 + 1):
            for kx in range(-c2, c2 + 1):
                weight = self.data[ky + r2, kx + c2]
                if weight:
                    acc += input.get_pixel(Point(pt.x + kx, pt.y + ky), 0).values * weight
        dest.set(Pixel(input.layout, acc))

    def _pair(self, other: "Kernel", op: Callable[[np.ndarray, np.ndarray], np.ndarray], name: str) -> "KernelOp":
        if not isinstance(other, Kernel):
            return NotImplemented  # type: ignore[return-value]
        if other.data.shape != self.data.shape:
            raise InvalidDimensionsError(
                f"Cannot combine {self.rows}x{self.cols} and {other.rows}x{other.cols} kernels"
            )
        return KernelOp(self, other, op, name)

    def __add__(self, other: "Kernel") -> "KernelOp":
        return self._pair(other, operator.add, "+")

    def __sub__(self, other: "Kernel") -> "KernelOp":
        return self._pair(other, operator.sub, "-")

    def __mul__(self, other: "Kernel") -> "KernelOp":
        return self._pair(other, operator.mul, "*")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Kernel):
            return NotImplemented
        return bool(np.array_equal(self.data, other.data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Kernel({self.data.tolist()!r})"


class KernelOp(Filter):
    """Two equally sized kernels applied to the same taps and merged per tap.

    Every tap contributes ``op(x * a, x * b)`` where ``x`` is the sample and
    ``a``/``b`` the weights of the two kernels at that tap.
    """

    parallel_safe = True

    def __init__(
        self,
        a: Kernel,
        b: Kernel,
        op: Callable[[np.ndarray, np.ndarray], np.ndarray],
        symbol: str = "?",
    ) -> None:
        self.a = a
        self.b = b
        self.op = op
        self.symbol = symbol

    def schedule(self) -> Schedule:
        return Schedule.IMAGE

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        r2, c2 = self.a.rows // 2, self.a.cols // 2
        acc = np.zeros(input.channels, dtype=np.float64)
        for ky in range(-r2, r2 + 1):
            for kx in range(-c2, c2 + 1):
                sample = input.get_pixel(Point(pt.x + kx, pt.y + ky), 0).values
                acc += self.op(sample * self.a.data[ky + r2, kx + c2], sample * self.b.data[ky + r2, kx + c2])
        dest.set(Pixel(input.layout, acc))

    def __repr__(self) -> str:
        return f"({self.a!r} {self.symbol} {self.b!r})"


def sobel_x() -> Kernel:
    return Kernel([[1.0, 0.0, -1.0], [2.0, 0.0, -2.0], [1.0, 0.0, -1.0]])


def sobel_y() -> Kernel:
    return Kernel([[1.0, 2.0, 1.0], [0.0, 0.0, 0.0], [-1.0, -2.0, -1.0]])


def sobel() -> KernelOp:
    """Sum of the horizontal and vertical Sobel responses."""

    return sobel_x() + sobel_y()


def box(size: int = 3) -> Kernel:
    """Uniform average over a ``size x size`` neighbourhood."""

    weight = 1.0 / (size * size)
    return Kernel.create(size, size, lambda x, y: weight)


def gaussian(size: int = 3, sigma: float = 1.0) -> Kernel:
    """Normalized Gaussian blur kernel."""

    half = size // 2
    kernel = Kernel.create(
        size,
        size,
        lambda x, y: math.exp(-((x - half) ** 2 + (y - half) ** 2) / (2.0 * sigma * sigma)),
    )
    kernel.data /= kernel.data.sum()
    return kernel


__all__ = ["Kernel", "KernelOp", "box", "gaussian", "sobel", "sobel_x", "sobel_y"]
