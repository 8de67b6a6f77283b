"""Owned, typed pixel buffers.

An :class:`Image` stores ``height x width x channels`` raw samples in a
contiguous, row-major, channel-interleaved numpy array.  Filters never touch
the raw samples directly; they read and write normalized values through
:meth:`Image.get_pixel` and :class:`PixelSlot`.  Codecs and display code use
:attr:`Image.data` / :attr:`Image.array` for bulk handoff instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional, Sequence, Union

import numpy as np

from .. import config
from ..errors import InvalidDimensionsError
from .color import Layout, convert_values
from .geom import Point, PointLike, Region, Size, SizeLike
from .pixel import Pixel
from .types import Type

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..filters.base import Filter


class Image:
    """A 2-D buffer of raw samples tagged with a :class:`Type` and :class:`Layout`."""

    __slots__ = ("_array", "type", "layout")

    def __init__(
        self,
        size: SizeLike,
        type: Union[Type, str, None] = None,
        layout: Union[Layout, str, None] = None,
    ) -> None:
        size = Size.of(size)
        if size.width < 0 or size.height < 0:
            raise InvalidDimensionsError(f"Image size must not be negative: {size}")
        self.type = Type.of(type if type is not None else config.DEFAULT_TYPE_NAME)
        self.layout = Layout.of(layout if layout is not None else config.DEFAULT_LAYOUT_NAME)
        self._array = np.zeros((size.height, size.width, self.layout.channels), dtype=self.type.dtype)

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        layout: Union[Layout, str],
        type: Union[Type, str, None] = None,
    ) -> "Image":
        """Wrap raw samples in an :class:`Image`.

        *array* may be ``(height, width, channels)`` or, for single channel
        layouts, ``(height, width)``.  The samples are copied into a
        contiguous buffer of the requested *type* (default: the array dtype)
        without rescaling.
        """

        layout = Layout.of(layout)
        data = np.asarray(array)
        if data.ndim == 2 and layout.channels == 1:
            data = data[:, :, None]
        if data.ndim != 3 or data.shape[2] != layout.channels:
            raise InvalidDimensionsError(
                f"Expected (height, width, {layout.channels}) samples for {layout.name}, got {data.shape}"
            )
        sample_type = Type.of(type if type is not None else data.dtype)
        image = cls(Size(data.shape[1], data.shape[0]), sample_type, layout)
        image._array[...] = data.astype(sample_type.dtype, copy=False)
        return image

    @classmethod
    def from_normalized(
        cls,
        values: np.ndarray,
        layout: Union[Layout, str],
        type: Union[Type, str, None] = None,
    ) -> "Image":
        """Build an image from normalized float samples, converting to *type*."""

        layout = Layout.of(layout)
        values = np.asarray(values, dtype=np.float64)
        if values.ndim == 2 and layout.channels == 1:
            values = values[:, :, None]
        if values.ndim != 3 or values.shape[2] != layout.channels:
            raise InvalidDimensionsError(
                f"Expected (height, width, {layout.channels}) values for {layout.name}, got {values.shape}"
            )
        image = cls(Size(values.shape[1], values.shape[0]), type, layout)
        image._array[...] = image.type.from_normalized(values)
        return image

    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return int(self._array.shape[1])

    @property
    def height(self) -> int:
        return int(self._array.shape[0])

    @property
    def channels(self) -> int:
        return self.layout.channels

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def shape(self) -> tuple[int, int, int]:
        """Return ``(width, height, channels)``."""

        return (self.width, self.height, self.channels)

    @property
    def array(self) -> np.ndarray:
        """The ``(height, width, channels)`` sample array (a live view)."""

        return self._array

    @property
    def data(self) -> np.ndarray:
        """Flat view over every raw sample, ``width * height * channels`` long."""

        return self._array.reshape(-1)

    def index(self, pt: PointLike) -> int:
        """Return the offset of the first sample of *pt* inside :attr:`data`."""

        pt = Point.of(pt)
        return (pt.y * self.width + pt.x) * self.channels

    def in_bounds(self, pt: PointLike) -> bool:
        return self.size.in_bounds(pt)

    # ------------------------------------------------------------------
    # normalized point access

    def get_f(self, pt: PointLike, channel: int) -> float:
        """Return channel *channel* at *pt* in normalized space.

        Out-of-bounds points and channels read as ``0.0``.
        """

        pt = Point.of(pt)
        if not self.in_bounds(pt) or not 0 <= channel < self.channels:
            return 0.0
        return self.type.to_normalized(self._array[pt.y, pt.x, channel])

    def set_f(self, pt: PointLike, channel: int, value: float) -> None:
        """Store normalized *value*; writes outside the image are dropped."""

        pt = Point.of(pt)
        if not self.in_bounds(pt) or not 0 <= channel < self.channels:
            return
        self._array[pt.y, pt.x, channel] = self.type.from_normalized(value)

    def get_pixel(self, pt: PointLike) -> Pixel:
        """Return the pixel at *pt*; out-of-bounds points yield a zero pixel."""

        pt = Point.of(pt)
        if not self.in_bounds(pt):
            return Pixel(self.layout)
        raw = self._array[pt.y, pt.x]
        if self.type.is_float:
            values = raw.astype(np.float64)
        else:
            values = (raw.astype(np.float64) - self.type.MIN) / (self.type.MAX - self.type.MIN)
        return Pixel(self.layout, values)

    def set_pixel(self, pt: PointLike, pixel: Pixel) -> None:
        """Store *pixel* at *pt*, converting it to this image's layout."""

        pt = Point.of(pt)
        if not self.in_bounds(pt):
            return
        if pixel.layout != self.layout:
            pixel = pixel.convert(self.layout)
        self._array[pt.y, pt.x] = self.type.from_normalized(pixel.values)

    def slot(self, pt: PointLike) -> "PixelSlot":
        """Return the writable destination handle for one pixel."""

        return PixelSlot(self, Point.of(pt))

    # ------------------------------------------------------------------
    # iteration

    def points(self) -> Iterator[Point]:
        """Yield every point row-major."""

        return self.size.points()

    def points_in(self, region: Union[Region, tuple]) -> Iterator[Point]:
        """Yield the points of *region* that fall inside the image, row-major."""

        clipped = Region.of(region).clip(self.size)
        for y in range(clipped.y, clipped.y + clipped.height):
            for x in range(clipped.x, clipped.x + clipped.width):
                yield Point(x, y)

    def row(self, y: int) -> Iterator[Point]:
        """Yield the points of row *y*, left to right."""

        for x in range(self.width):
            yield Point(x, y)

    # ------------------------------------------------------------------
    # whole-image helpers

    def new_like(
        self,
        type: Union[Type, str, None] = None,
        layout: Union[Layout, str, None] = None,
        size: Optional[SizeLike] = None,
    ) -> "Image":
        """Return a zeroed image sharing this image's attributes unless overridden."""

        return Image(
            size if size is not None else self.size,
            type if type is not None else self.type,
            layout if layout is not None else self.layout,
        )

    def copy(self) -> "Image":
        image = self.new_like()
        image._array[...] = self._array
        return image

    def normalized(self) -> np.ndarray:
        """Return a float64 ``(height, width, channels)`` copy in normalized space."""

        return self.type.to_normalized(self._array)

    def convert_to(self, dest: "Image") -> None:
        """Write this image into *dest*, converting type and layout.

        Both images must have the same size.
        """

        if dest.size != self.size:
            raise InvalidDimensionsError(
                f"Cannot convert a {self.size} image into a {dest.size} image"
            )
        if dest.type == self.type and dest.layout == self.layout:
            np.copyto(dest._array, self._array)
            return
        values = self.normalized()
        if dest.layout != self.layout:
            values = convert_values(values, self.layout, dest.layout)
        dest._array[...] = dest.type.from_normalized(values)

    def converted(
        self,
        type: Union[Type, str, None] = None,
        layout: Union[Layout, str, None] = None,
    ) -> "Image":
        """Return a new image holding this one in another type and/or layout."""

        dest = self.new_like(type, layout)
        self.convert_to(dest)
        return dest

    def fill(self, pixel: Pixel) -> None:
        """Set every pixel to *pixel*."""

        if pixel.layout != self.layout:
            pixel = pixel.convert(self.layout)
        self._array[...] = self.type.from_normalized(pixel.values)

    def apply(self, filter: "Filter", inputs: Optional[Sequence["Image"]] = None) -> "Image":
        """Evaluate *filter* into this image and return ``self``.

        Without *inputs* the image is used as its own input.
        """

        if inputs is None:
            filter.eval_in_place(self)
        else:
            filter.eval(inputs, self)
        return self

    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return (
            self.type == other.type
            and self.layout == other.layout
            and self._array.shape == other._array.shape
            and bool(np.array_equal(self._array, other._array))
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Image({self.width}x{self.height}, {self.type.name}, {self.layout.name})"


class PixelSlot:
    """Destination of a single ``compute_at`` call.

    The slot is bound to one point of one image.  Writes convert the pixel
    into the image layout and type; slots pointing outside the image read a
    zero pixel and drop writes.
    """

    __slots__ = ("image", "point")

    def __init__(self, image: Image, point: Point) -> None:
        self.image = image
        self.point = point

    @property
    def layout(self) -> Layout:
        return self.image.layout

    @property
    def channels(self) -> int:
        return self.image.channels

    def get(self) -> Pixel:
        """Return the value currently stored at this slot."""

        return self.image.get_pixel(self.point)

    def set(self, pixel: Pixel) -> None:
        self.image.set_pixel(self.point, pixel)

    def __getitem__(self, channel: int) -> float:
        return self.image.get_f(self.point, channel)

    def __setitem__(self, channel: int, value: float) -> None:
        self.image.set_f(self.point, channel, value)

    def __repr__(self) -> str:
        return f"PixelSlot({self.point.x}, {self.point.y} of {self.image!r})"


__all__ = ["Image", "PixelSlot"]
