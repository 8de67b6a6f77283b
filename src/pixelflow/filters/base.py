"""Filter interface and evaluation entry points.

A filter computes one destination pixel at a time.  :meth:`Filter.compute_at`
is the only method subclasses must provide; everything else (whole image,
region restricted and in-place evaluation, chaining into pipelines) is built
on top of it here.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional, Sequence, Union

from ..core.geom import Point, Region, Size
from ..core.image import Image, PixelSlot
from ..core.pixel import Pixel
from ..errors import InvalidDimensionsError, UnsupportedScheduleError
from .input import Input

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .cooperative import AsyncFilter, AsyncMode
    from .pipeline import Pipeline

Inputs = Union[Input, Image, Sequence[Image]]


class Schedule(enum.Enum):
    """How much of the input a filter needs before it can run."""

    #: Reads only the current point; may be fused with its neighbours.
    PIXEL = "pixel"
    #: Reads arbitrary points of a fully materialized input.
    IMAGE = "image"


class Filter(ABC):
    """Base class for every pixel transformation.

    Subclasses implement :meth:`compute_at` and, for filters that read other
    points than the one being written or change the image size, override
    :meth:`schedule` to return :attr:`Schedule.IMAGE`.
    """

    #: ``True`` when different points may be computed concurrently.  Pixel
    #: level filters are always treated as point independent.
    parallel_safe: bool = False

    def schedule(self) -> Schedule:
        return Schedule.PIXEL

    def is_parallel_safe(self) -> bool:
        return self.parallel_safe or self.schedule() is Schedule.PIXEL

    def output_size(self, input: Input, dest: Image) -> Size:
        """Return the size this filter produces for *input*.

        The default keeps the destination size.
        """

        return dest.size

    @abstractmethod
    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        """Write the destination pixel for *pt*."""

    # ------------------------------------------------------------------
    # evaluation

    def eval(self, inputs: Inputs, output: Image) -> None:
        """Compute every point of *output* from *inputs*."""

        input = Input.of(inputs)
        expected = self.output_size(input, output)
        if expected != output.size:
            raise InvalidDimensionsError(
                f"{type(self).__name__} produces {expected.width}x{expected.height}, "
                f"output is {output.width}x{output.height}"
            )
        for pt in output.points():
            self.compute_at(pt, input, output.slot(pt))

    def eval_partial(self, region: Union[Region, tuple], inputs: Inputs, output: Image) -> None:
        """Compute only the points of *output* inside *region*."""

        input = Input.of(inputs)
        for pt in output.points_in(region):
            self.compute_at(pt, input, output.slot(pt))

    def eval_in_place(self, image: Image) -> None:
        """Use *image* as both the sole input and the output.

        Pixel level filters read the sample they are about to overwrite, which
        is safe because nothing else reads that point.  Image level filters
        read neighbouring points and so work from a snapshot copy.
        """

        self.eval(Input(self._in_place_source(image)), image)

    def eval_partial_in_place(self, region: Union[Region, tuple], image: Image) -> None:
        self.eval_partial(region, Input(self._in_place_source(image)), image)

    def _in_place_source(self, image: Image) -> Image:
        if self.schedule() is Schedule.IMAGE:
            return image.copy()
        return image

    # ------------------------------------------------------------------
    # composition

    def then(self, other: "Filter") -> "Pipeline":
        """Return a pipeline running this filter followed by *other*."""

        from .pipeline import Pipeline

        return Pipeline([self, other])

    def combine(self, other: "Filter", fn: Callable[[Point, Pixel, Pixel], Pixel]) -> "Combine":
        return Combine(self, other, fn)

    def to_async(
        self,
        inputs: Inputs,
        output: Image,
        mode: Optional["AsyncMode"] = None,
    ) -> "AsyncFilter":
        """Return a resumable evaluation of this filter."""

        from .cooperative import AsyncFilter

        return AsyncFilter(self, inputs, output, mode)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Combine(Filter):
    """Merge the results of two pixel level filters at every point.

    Both parts write into the destination in turn; *fn* receives the two
    values read back from it and returns the final pixel.
    """

    def __init__(self, a: Filter, b: Filter, fn: Callable[[Point, Pixel, Pixel], Pixel]) -> None:
        for part in (a, b):
            if part.schedule() is not Schedule.PIXEL:
                raise UnsupportedScheduleError(
                    f"Combine needs pixel level filters, {type(part).__name__} is image level"
                )
        self.a = a
        self.b = b
        self.fn = fn

    def compute_at(self, pt: Point, input: Input, dest: PixelSlot) -> None:
        self.a.compute_at(pt, input, dest)
        first = dest.get()
        self.b.compute_at(pt, input, dest)
        second = dest.get()
        dest.set(self.fn(pt, first, second))

    def __repr__(self) -> str:
        return f"Combine({self.a!r}, {self.b!r})"


__all__ = ["Combine", "Filter", "Inputs", "Schedule"]
