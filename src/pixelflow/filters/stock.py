"""Stock point and region filters.

Every filter here works in normalized space: values are read through the
:class:`~pixelflow.filters.input.Input` layout, transformed, and written to
the destination slot, which converts them into the destination layout and
storage type.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Union

from .. import config
from ..core.color import HSV, Layout
from ..core.geom import Point, Region, Size
from ..core.image import Image, PixelSlot
from .base import Filter, Schedule
from .input import Input

Predicate = Callable[[Point, Input], bool]


@dataclass(frozen=True)
class Invert(Filter):
    """``1 - x`` on every channel."""

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        dest.set(input.get_pixel(pt).map(lambda x: 1.0 - x))


@dataclass(frozen=True)
class Blend(Filter):
    """Arithmetic mean of input images ``0`` and ``1``."""

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        a = input.get_pixel(pt)
        b = input.get_pixel(pt, 1)
        dest.set((a + b) / 2.0)


@dataclass(frozen=True)
class Brightness(Filter):
    amount: float

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        px = input.get_pixel(pt)
        px *= self.amount
        dest.set(px)


@dataclass(frozen=True)
class Contrast(Filter):
    """Scale the distance of every channel from mid gray by *amount*."""

    amount: float

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        amount = self.amount
        dest.set(input.get_pixel(pt).map(lambda x: amount * (x - 0.5) + 0.5))


@dataclass(frozen=True)
class Saturation(Filter):
    """Multiply the HSV saturation channel by *amount*."""

    amount: float

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        hsv = input.get_pixel(pt).convert(HSV)
        hsv[1] = hsv[1] * self.amount
        dest.set(hsv)


@dataclass(frozen=True)
class Exposure(Filter):
    """Scale by ``2 ** stops``; positive stops brighten."""

    stops: float

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        px = input.get_pixel(pt)
        px *= math.pow(2.0, self.stops)
        dest.set(px)


@dataclass(frozen=True)
class GammaLog(Filter):
    """Encode linear values: ``x ** (1 / gamma)``.

    Negative values have no real root and are treated as ``0``.
    """

    gamma: float = config.DEFAULT_GAMMA

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        exponent = 1.0 / self.gamma
        dest.set(input.get_pixel(pt).map(lambda x: math.pow(max(x, 0.0), exponent)))


@dataclass(frozen=True)
class GammaLin(Filter):
    """Decode gamma encoded values: ``x ** gamma``."""

    gamma: float = config.DEFAULT_GAMMA

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        gamma = self.gamma
        dest.set(input.get_pixel(pt).map(lambda x: math.pow(max(x, 0.0), gamma)))


@dataclass(frozen=True)
class Crop(Filter):
    """Copy *region* of the input into a destination of the region's size.

    Destination points beyond the region size are left untouched.
    """

    region: Region
    parallel_safe = True

    def __init__(self, region: Union[Region, tuple]) -> None:
        object.__setattr__(self, "region", Region.of(region))

    def schedule(self) -> Schedule:
        return Schedule.IMAGE

    def output_size(self, input: Input, dest: Image) -> Size:
        return self.region.size

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        if pt.x >= self.region.width or pt.y >= self.region.height:
            return
        dest.set(input.get_pixel(pt.offset(self.region.x, self.region.y)))


@dataclass(frozen=True)
class Normalize(Filter):
    """Affine remap of ``[min, max]`` onto ``[new_min, new_max]``."""

    min: float
    max: float
    new_min: float
    new_max: float

    def __post_init__(self) -> None:
        if self.max == self.min:
            raise ValueError(f"Normalize needs a non-empty source range, got [{self.min}, {self.max}]")

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        factor = (self.new_max - self.new_min) / (self.max - self.min)
        low, new_low = self.min, self.new_min
        dest.set(input.get_pixel(pt).map(lambda x: (x - low) * factor + new_low))


@dataclass(frozen=True)
class Clamp(Filter):
    """Saturate every channel to ``[0, 1]``."""

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        dest.set(input.get_pixel(pt).clamped())


@dataclass(frozen=True)
class Noop(Filter):
    """Copy the input pixel unchanged."""

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        dest.set(input.get_pixel(pt))


@dataclass(frozen=True)
class Convert(Filter):
    """Write the input pixel into the destination layout.

    With *layout* set the pixel is first expressed in that layout; the
    destination slot then converts it into its own layout.
    """

    layout: Union[Layout, str, None] = None

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        px = input.get_pixel(pt)
        if self.layout is not None:
            px = px.convert(Layout.of(self.layout))
        dest.set(px)


class If(Filter):
    """Pick *then* or *otherwise* per point depending on *predicate*."""

    def __init__(self, predicate: Predicate, then: Filter, otherwise: Filter) -> None:
        self.predicate = predicate
        self.if_true = then
        self.if_false = otherwise

    def schedule(self) -> Schedule:
        if self.if_true.schedule() is Schedule.IMAGE or self.if_false.schedule() is Schedule.IMAGE:
            return Schedule.IMAGE
        return Schedule.PIXEL

    @property
    def parallel_safe(self) -> bool:  # type: ignore[override]
        return self.if_true.is_parallel_safe() and self.if_false.is_parallel_safe()

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        if self.predicate(pt, input):
            self.if_true.compute_at(pt, input, dest)
        else:
            self.if_false.compute_at(pt, input, dest)

    def __repr__(self) -> str:
        return f"If({self.if_true!r}, {self.if_false!r})"


__all__ = [
    "Blend",
    "Brightness",
    "Clamp",
    "Contrast",
    "Convert",
    "Crop",
    "Exposure",
    "GammaLin",
    "GammaLog",
    "If",
    "Invert",
    "Noop",
    "Normalize",
    "Predicate",
    "Saturation",
]
