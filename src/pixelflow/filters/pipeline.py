"""Fused execution of filter sequences.

A :class:`Pipeline` splits its filters into *segments*.  Every image level
filter opens a new segment, and the pixel level filters that follow it are
fused into the same traversal: at each destination point the filters run one
after another, each reading the value its predecessor just wrote through the
carried pixel of :class:`~pixelflow.filters.input.Input`.  A pipeline of
point filters therefore touches every pixel exactly once.

Between segments the partial result is converted into a single scratch
image that becomes input image ``0`` for the next segment.  The scratch is
reallocated only when the next segment needs a different size.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple

from .. import config
from ..core.geom import Point, Size
from ..core.image import Image
from ..errors import EmptyPipelineError, InvalidDimensionsError
from .base import Filter, Inputs, Schedule
from .input import Input

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .cooperative import AsyncMode, AsyncPipeline

_LOGGER = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    """Counters describing the work done by the most recent run."""

    #: Full traversals of a segment's destination.
    traversals: int = 0
    #: Segment results converted into the scratch image.
    materializations: int = 0
    #: Times the scratch image had to be (re)allocated.
    scratch_allocations: int = 0

    def reset(self) -> None:
        self.traversals = 0
        self.materializations = 0
        self.scratch_allocations = 0


@dataclass(frozen=True)
class Segment:
    """A run of filters executed as one traversal."""

    start: int
    filters: Tuple[Filter, ...]

    @property
    def stop(self) -> int:
        return self.start + len(self.filters)

    @property
    def leader(self) -> Filter:
        return self.filters[0]

    @property
    def image_level(self) -> bool:
        return self.leader.schedule() is Schedule.IMAGE

    @property
    def parallel_safe(self) -> bool:
        return all(f.is_parallel_safe() for f in self.filters)


class Pipeline:
    """Ordered sequence of filters sharing one scratch buffer per run."""

    def __init__(self, filters: Iterable[Filter] = (), workers: Optional[int] = None) -> None:
        self._filters: List[Filter] = list(filters)
        self.workers = config.DEFAULT_WORKERS if workers is None else max(1, int(workers))
        self.stats = PipelineStats()

    # ------------------------------------------------------------------
    def push(self, filter: Filter) -> None:
        self._filters.append(filter)

    def then(self, filter: Filter) -> "Pipeline":
        """Append *filter* and return ``self`` for chaining."""

        self._filters.append(filter)
        return self

    @property
    def filters(self) -> Tuple[Filter, ...]:
        return tuple(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[Filter]:
        return iter(self._filters)

    def __repr__(self) -> str:
        return f"Pipeline({self._filters!r})"

    def segments(self) -> List[Segment]:
        """Partition the filters into fused segments.

        Raises :class:`EmptyPipelineError` when there is nothing to run.
        """

        if not self._filters:
            raise EmptyPipelineError("A pipeline needs at least one filter")
        starts = [0] + [
            i for i, f in enumerate(self._filters) if i > 0 and f.schedule() is Schedule.IMAGE
        ]
        stops = starts[1:] + [len(self._filters)]
        return [Segment(start, tuple(self._filters[start:stop])) for start, stop in zip(starts, stops)]

    # ------------------------------------------------------------------
    def execute(self, inputs: Inputs, output: Image) -> None:
        """Run every filter, reading *inputs* and writing *output*."""

        run = _PipelineRun(self, Input.of(inputs), output)
        if self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                run.run(pool)
        else:
            run.run()

    def execute_in_place(self, image: Image) -> None:
        """Run the pipeline with *image* as the sole input and the output."""

        self.execute(Input(image), image)

    def to_async(
        self,
        inputs: Inputs,
        output: Image,
        mode: Optional["AsyncMode"] = None,
    ) -> "AsyncPipeline":
        from .cooperative import AsyncPipeline

        return AsyncPipeline(self, inputs, output, mode)


class _PipelineRun:
    """State of one pipeline execution.

    The synchronous and cooperative drivers share this object: both call
    :meth:`begin_segment`, then :meth:`process` or :meth:`process_row` for
    every point of :attr:`size`, then :meth:`finish_segment`.
    """

    def __init__(self, pipeline: Pipeline, input: Input, output: Image) -> None:
        self.segments = pipeline.segments()
        self.stats = pipeline.stats
        self.output = output
        self.index = 0
        self.size: Optional[Size] = None
        self._base = input.without_pixel()
        self._scratch: Optional[Image] = None
        self._input: Optional[Input] = None
        self._target: Optional[Image] = None
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug(
                "Pipeline plan: %s",
                ", ".join(f"[{s.start}:{s.stop}]{'*' if s.image_level else ''}" for s in self.segments),
            )

    @property
    def done(self) -> bool:
        return self.index >= len(self.segments)

    @property
    def started(self) -> bool:
        return self.size is not None

    @property
    def segment(self) -> Segment:
        return self.segments[self.index]

    @property
    def is_final(self) -> bool:
        return self.index == len(self.segments) - 1

    # ------------------------------------------------------------------
    def _ensure_scratch(self, size: Size) -> Image:
        scratch = self._scratch
        if scratch is None or scratch.size != size:
            images = self._base.images
            sample_type = images[0].type if images else self.output.type
            scratch = Image(size, sample_type, self._base.layout)
            self._scratch = scratch
            self.stats.scratch_allocations += 1
            _LOGGER.debug("Allocated %dx%d scratch image", size.width, size.height)
        return scratch

    def _detach_output(self, base: Input) -> Input:
        """Replace inputs that are also the output with snapshots.

        Image level leaders read neighbours of the point being written, so
        every aliased input is copied.  Otherwise only extra inputs read by
        later segments need a copy; image ``0`` is then replaced by the
        scratch image anyway.
        """

        images = list(base.images)
        if not any(img is self.output for img in images):
            return base
        image_level = self.segment.image_level
        if image_level and images[0] is self.output:
            scratch = self._ensure_scratch(images[0].size)
            images[0].convert_to(scratch)
            images[0] = scratch
        if image_level or len(self.segments) > 1:
            for i in range(1, len(images)):
                if images[i] is self.output:
                    images[i] = images[i].copy()
        return base.with_images(tuple(images))

    def _segment_input(self) -> Input:
        if self.index == 0:
            self._base = self._detach_output(self._base)
            return self._base
        return self._base.with_images((self._scratch,) + self._base.images[1:])

    def begin_segment(self) -> None:
        if self.index == 0:
            self.stats.reset()
        segment = self.segment
        input = self._segment_input()
        if segment.image_level:
            size = segment.leader.output_size(input, self.output)
        elif self.is_final or not input.images:
            size = self.output.size
        else:
            size = input.images[0].size

        if self.is_final:
            if size != self.output.size:
                raise InvalidDimensionsError(
                    f"Pipeline produces {size.width}x{size.height}, "
                    f"output is {self.output.width}x{self.output.height}"
                )
            target = self.output
        elif size == self.output.size:
            target = self.output
        else:
            _LOGGER.debug("Segment %d writes a %dx%d temporary", self.index, size.width, size.height)
            target = Image(size, self.output.type, self.output.layout)

        self._input = input
        self._target = target
        self.size = size

    def process(self, pt: Point) -> None:
        """Apply every filter of the current segment at *pt*."""

        input = self._input
        slot = self._target.slot(pt)
        filters = self.segment.filters
        filters[0].compute_at(pt, input, slot)
        for f in filters[1:]:
            f.compute_at(pt, input.with_pixel(pt, slot.get()), slot)

    def process_row(self, y: int) -> None:
        for pt in self._target.row(y):
            self.process(pt)

    def traverse(self, pool: Optional[ThreadPoolExecutor] = None) -> None:
        """Process every point of the current segment."""

        rows = range(self.size.height)
        if pool is not None and self.segment.parallel_safe and self.size.height > 1:
            for _ in pool.map(self.process_row, rows):
                pass
        else:
            for y in rows:
                self.process_row(y)

    def finish_segment(self) -> None:
        self.stats.traversals += 1
        if not self.is_final:
            scratch = self._ensure_scratch(self.size)
            self._target.convert_to(scratch)
            self.stats.materializations += 1
        self.index += 1
        self.size = None
        self._input = None
        self._target = None

    def run(self, pool: Optional[ThreadPoolExecutor] = None) -> None:
        while not self.done:
            self.begin_segment()
            self.traverse(pool)
            self.finish_segment()


__all__ = ["Pipeline", "PipelineStats", "Segment"]
