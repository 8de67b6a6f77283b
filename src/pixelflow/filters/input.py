"""Read-only view over the images handed to a filter."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

from ..core.color import Layout
from ..core.geom import Point, PointLike
from ..core.image import Image
from ..core.pixel import Pixel
from ..errors import InvalidColorError

Carried = Tuple[Point, Pixel]


class Input:
    """Source images plus an optional carried pixel.

    The carried pixel is the value an earlier filter of a fused run already
    produced for one point.  Reading that point without an explicit image
    index returns the carried value instead of the stored sample, which is
    how consecutive point filters chain without a buffer round-trip.

    Inputs are never mutated; :meth:`with_pixel` and :meth:`without_pixel`
    return new views sharing the same images.
    """

    __slots__ = ("_images", "_layout", "_pixel")

    def __init__(
        self,
        images: Union[Image, Iterable[Image]] = (),
        layout: Union[Layout, str, None] = None,
        pixel: Optional[Carried] = None,
    ) -> None:
        if isinstance(images, Image):
            images = (images,)
        self._images: Tuple[Image, ...] = tuple(images)
        if layout is not None:
            self._layout = Layout.of(layout)
        elif self._images:
            self._layout = self._images[0].layout
        else:
            raise InvalidColorError("An input without images needs an explicit layout")
        self._pixel = pixel

    @classmethod
    def of(cls, value: Union["Input", Image, Sequence[Image]]) -> "Input":
        if isinstance(value, Input):
            return value
        return cls(value)

    # ------------------------------------------------------------------
    @property
    def images(self) -> Tuple[Image, ...]:
        return self._images

    @property
    def layout(self) -> Layout:
        """Layout every pixel read through this view is converted into."""

        return self._layout

    @property
    def channels(self) -> int:
        return self._layout.channels

    @property
    def pixel(self) -> Optional[Carried]:
        return self._pixel

    def __len__(self) -> int:
        return len(self._images)

    def __iter__(self) -> Iterator[Image]:
        return iter(self._images)

    def __getitem__(self, index: int) -> Image:
        return self._images[index]

    def __repr__(self) -> str:
        carried = "" if self._pixel is None else f", carried at {self._pixel[0].to_tuple()}"
        return f"Input({len(self._images)} image(s), {self._layout.name}{carried})"

    # ------------------------------------------------------------------
    def with_pixel(self, pt: PointLike, pixel: Pixel) -> "Input":
        """Return a view carrying *pixel* for *pt*."""

        return Input(self._images, self._layout, (Point.of(pt), pixel))

    def without_pixel(self) -> "Input":
        if self._pixel is None:
            return self
        return Input(self._images, self._layout)

    def with_images(self, images: Iterable[Image]) -> "Input":
        return Input(tuple(images), self._layout)

    def new_pixel(self) -> Pixel:
        """Return a zeroed pixel in this view's layout."""

        return Pixel(self._layout)

    # ------------------------------------------------------------------
    def get_pixel(self, pt: PointLike, index: Optional[int] = None) -> Pixel:
        """Return the pixel at *pt* in this view's layout.

        With ``index=None`` the carried pixel wins when it was recorded for
        the same point; otherwise image ``index`` (default ``0``) is read.
        Points outside the image and missing images read as zero.
        """

        pt = Point.of(pt)
        if index is None:
            if self._pixel is not None and self._pixel[0] == pt:
                carried = self._pixel[1]
                if carried.layout != self._layout:
                    return carried.convert(self._layout)
                return carried.copy()
            index = 0
        if not 0 <= index < len(self._images):
            return Pixel(self._layout)
        pixel = self._images[index].get_pixel(pt)
        if pixel.layout != self._layout:
            return pixel.convert(self._layout)
        return pixel

    def get_f(self, pt: PointLike, channel: int, index: Optional[int] = None) -> float:
        if not 0 <= channel < self._layout.channels:
            return 0.0
        return self.get_pixel(pt, index)[channel]


__all__ = ["Carried", "Input"]
