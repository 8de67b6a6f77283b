"""Affine geometric transforms.

A :class:`Transform` holds the matrix that maps *destination* coordinates
into *source* coordinates, so every output pixel is computed independently
by looking backwards into the input.  Sampling is a coarse two-tap filter:
the mean of the source pixels at the floor and the ceiling of the mapped
position.
"""

from __future__ import annotations

import math
from typing import Optional, Union

import numpy as np

from ..core.geom import Point, PointLike, Size, SizeLike
from ..core.image import Image, PixelSlot
from .base import Filter, Schedule
from .input import Input

# Mapped coordinates this close to an integer are treated as exact.
_SNAP_EPSILON = 1e-9


def _snap(value: float) -> float:
    nearest = round(value)
    if abs(value - nearest) < _SNAP_EPSILON:
        return float(nearest)
    return value


def _translation(dx: float, dy: float) -> np.ndarray:
    return np.array([[1.0, 0.0, dx], [0.0, 1.0, dy], [0.0, 0.0, 1.0]])


class Transform(Filter):
    """Image level filter sampling the input through a 3x3 affine matrix."""

    parallel_safe = True

    def __init__(self, matrix: np.ndarray, output_size: Optional[SizeLike] = None) -> None:
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape == (2, 3):
            matrix = np.vstack([matrix, [0.0, 0.0, 1.0]])
        if matrix.shape != (3, 3):
            raise ValueError(f"Expected a 2x3 or 3x3 affine matrix, got shape {matrix.shape}")
        self.matrix = matrix
        self.size = Size.of(output_size) if output_size is not None else None

    @classmethod
    def identity(cls) -> "Transform":
        return cls(np.eye(3))

    @classmethod
    def scaling(cls, sx: float, sy: float, output_size: Optional[SizeLike] = None) -> "Transform":
        """Return the transform that reads source ``(x * sx, y * sy)``."""

        return cls(np.diag([float(sx), float(sy), 1.0]), output_size)

    @classmethod
    def rotation(
        cls,
        degrees: float,
        center: Union[PointLike, tuple[float, float]] = (0.0, 0.0),
        output_size: Optional[SizeLike] = None,
    ) -> "Transform":
        """Return the transform reading the source rotated by *degrees* around *center*."""

        if isinstance(center, Point):
            center = center.to_tuple()
        cx, cy = float(center[0]), float(center[1])
        theta = math.radians(-degrees)
        cos, sin = math.cos(theta), math.sin(theta)
        rotate = np.array([[cos, -sin, 0.0], [sin, cos, 0.0], [0.0, 0.0, 1.0]])
        return cls(_translation(cx, cy) @ rotate @ _translation(-cx, -cy), output_size)

    def compose(self, other: "Transform") -> "Transform":
        """Return a transform applying *other*'s mapping to this one's source point."""

        return Transform(other.matrix @ self.matrix, other.size or self.size)

    # ------------------------------------------------------------------
    def schedule(self) -> Schedule:
        return Schedule.IMAGE

    def output_size(self, input: Input, dest: Image) -> Size:
        return self.size if self.size is not None else dest.size

    def source_point(self, pt: PointLike) -> tuple[float, float]:
        """Return the source coordinate sampled for destination *pt*."""

        pt = Point.of(pt)
        m = self.matrix
        x = m[0, 0] * pt.x + m[0, 1] * pt.y + m[0, 2]
        y = m[1, 0] * pt.x + m[1, 1] * pt.y + m[1, 2]
        return _snap(float(x)), _snap(float(y))

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        x, y = self.source_point(pt)
        low = input.get_pixel(Point(math.floor(x), math.floor(y)), 0)
        high = input.get_pixel(Point(math.ceil(x), math.ceil(y)), 0)
        dest.set((low + high) / 2.0)

    def __repr__(self) -> str:
        rows = "; ".join(" ".join(f"{v:.6g}" for v in row) for row in self.matrix[:2])
        return f"Transform([{rows}])"


def rotate(degrees: float, center: Union[PointLike, tuple[float, float]]) -> Transform:
    """Rotate by *degrees* clockwise around *center*, keeping the image size."""

    return Transform.rotation(degrees, center)


def scale(x: float, y: float) -> Transform:
    """Enlarge by *x* horizontally and *y* vertically."""

    return Transform.scaling(1.0 / x, 1.0 / y)


def resize(source: SizeLike, target: SizeLike) -> Transform:
    """Stretch an image of size *source* to *target*."""

    source, target = Size.of(source), Size.of(target)
    return Transform.scaling(
        source.width / target.width,
        source.height / target.height,
        output_size=target,
    )


def rotate90(source: SizeLike, target: SizeLike) -> Transform:
    """Quarter turn clockwise; *target* is *source* with width and height swapped."""

    source, target = Size.of(source), Size.of(target)
    center = ((target.width - 1) / 2.0, (source.height - 1) / 2.0)
    return Transform.rotation(90.0, center, output_size=target)


def rotate180(source: SizeLike) -> Transform:
    source = Size.of(source)
    center = ((source.width - 1) / 2.0, (source.height - 1) / 2.0)
    return Transform.rotation(180.0, center, output_size=source)


def rotate270(source: SizeLike, target: SizeLike) -> Transform:
    """Quarter turn counter-clockwise; *target* is *source* transposed."""

    source, target = Size.of(source), Size.of(target)
    center = ((target.height - 1) / 2.0, (source.width - 1) / 2.0)
    return Transform.rotation(270.0, center, output_size=target)


__all__ = ["Transform", "resize", "rotate", "rotate180", "rotate270", "rotate90", "scale"]
