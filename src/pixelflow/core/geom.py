"""Plain value types for addressing image pixels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple, Union

PointLike = Union["Point", Tuple[int, int]]
SizeLike = Union["Size", Tuple[int, int]]


@dataclass(frozen=True, order=True)
class Point:
    """Integer pixel coordinate."""

    x: int
    y: int

    @classmethod
    def of(cls, value: PointLike) -> "Point":
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(int(x), int(y))

    def offset(self, dx: int, dy: int) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def to_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)


@dataclass(frozen=True, order=True)
class Size:
    """Width and height of an image or region."""

    width: int
    height: int

    @classmethod
    def of(cls, value: SizeLike) -> "Size":
        if isinstance(value, Size):
            return value
        width, height = value
        return cls(int(width), int(height))

    @property
    def area(self) -> int:
        return self.width * self.height

    def in_bounds(self, pt: PointLike) -> bool:
        """Return ``True`` when *pt* addresses a pixel inside this size."""

        pt = Point.of(pt)
        return 0 <= pt.x < self.width and 0 <= pt.y < self.height

    def points(self) -> Iterator[Point]:
        """Yield every point row-major."""

        for y in range(self.height):
            for x in range(self.width):
                yield Point(x, y)

    def __mul__(self, factor: int) -> "Size":
        return Size(self.width * factor, self.height * factor)

    def __floordiv__(self, factor: int) -> "Size":
        return Size(self.width // factor, self.height // factor)

    def to_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class Region:
    """Rectangle described by its top-left *origin* and *size*."""

    origin: Point
    size: Size

    def __init__(self, origin: PointLike, size: SizeLike) -> None:
        object.__setattr__(self, "origin", Point.of(origin))
        object.__setattr__(self, "size", Size.of(size))

    @classmethod
    def of(cls, value: Union["Region", tuple[PointLike, SizeLike]]) -> "Region":
        if isinstance(value, Region):
            return value
        origin, size = value
        return cls(origin, size)

    @classmethod
    def full(cls, size: SizeLike) -> "Region":
        """Return the region covering a whole image of *size*."""

        return cls(Point(0, 0), size)

    @property
    def x(self) -> int:
        return self.origin.x

    @property
    def y(self) -> int:
        return self.origin.y

    @property
    def width(self) -> int:
        return self.size.width

    @property
    def height(self) -> int:
        return self.size.height

    def in_bounds(self, pt: PointLike) -> bool:
        pt = Point.of(pt)
        return (
            self.origin.x <= pt.x < self.origin.x + self.size.width
            and self.origin.y <= pt.y < self.origin.y + self.size.height
        )

    def points(self) -> tuple[Point, Point]:
        """Return the top-left and the exclusive bottom-right corner."""

        return (
            self.origin,
            Point(self.origin.x + self.size.width, self.origin.y + self.size.height),
        )

    def clip(self, size: SizeLike) -> "Region":
        """Return the part of this region that lies inside an image of *size*."""

        size = Size.of(size)
        x0 = min(max(self.origin.x, 0), size.width)
        y0 = min(max(self.origin.y, 0), size.height)
        x1 = min(max(self.origin.x + self.size.width, 0), size.width)
        y1 = min(max(self.origin.y + self.size.height, 0), size.height)
        return Region(Point(x0, y0), Size(max(0, x1 - x0), max(0, y1 - y0)))


__all__ = ["Point", "PointLike", "Region", "Size", "SizeLike"]
