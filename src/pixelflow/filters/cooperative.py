"""Resumable pipeline execution.

:class:`AsyncPipeline` performs the same work as
:meth:`Pipeline.execute <pixelflow.filters.pipeline.Pipeline.execute>` but
one unit at a time: every :meth:`~AsyncPipeline.step` computes a single pixel
or a single row and returns.  Callers interleave steps with other work and
cancel by simply no longer stepping; points past the cursor keep whatever the
output held before.

:meth:`AsyncPipeline.execute` wraps the stepping loop in a coroutine that
yields to the ``asyncio`` event loop between units.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Optional, Tuple, Union

from .. import config
from ..core.geom import Point
from ..core.image import Image
from .base import Filter, Inputs
from .input import Input
from .pipeline import Pipeline, _PipelineRun


class AsyncMode(enum.Enum):
    """Amount of work done by one step."""

    PIXEL = "pixel"
    ROW = "row"

    @classmethod
    def of(cls, value: Union["AsyncMode", str, None]) -> "AsyncMode":
        if value is None:
            value = config.DEFAULT_ASYNC_MODE
        if isinstance(value, AsyncMode):
            return value
        return cls(str(value).lower())


class AsyncPipeline:
    """Step-wise driver for a :class:`Pipeline`."""

    def __init__(
        self,
        pipeline: Pipeline,
        inputs: Inputs,
        output: Image,
        mode: Union[AsyncMode, str, None] = None,
    ) -> None:
        self.pipeline = pipeline
        self.mode = AsyncMode.of(mode)
        self.output = output
        self._run = _PipelineRun(pipeline, Input.of(inputs), output)
        self._x = 0
        self._y = 0

    @property
    def done(self) -> bool:
        return self._run.done

    @property
    def cursor(self) -> Tuple[int, Point]:
        """Return ``(segment index, next point)``."""

        return self._run.index, Point(self._x, self._y)

    def step(self) -> bool:
        """Advance by one pixel or one row.

        Returns ``True`` once the final segment has been fully written.
        """

        run = self._run
        if run.done:
            return True
        if not run.started:
            run.begin_segment()
        size = run.size
        if size.area:
            if self.mode is AsyncMode.ROW:
                run.process_row(self._y)
                self._y += 1
            else:
                run.process(Point(self._x, self._y))
                self._x += 1
                if self._x >= size.width:
                    self._x = 0
                    self._y += 1
        if not size.area or self._y >= size.height:
            run.finish_segment()
            self._x = 0
            self._y = 0
        return run.done

    def run(self) -> int:
        """Step until done and return the number of steps taken."""

        steps = 0
        while not self.done:
            self.step()
            steps += 1
        return steps

    async def execute(self) -> None:
        """Step to completion, yielding to the event loop after every unit."""

        while not self.step():
            await asyncio.sleep(0)

    def __repr__(self) -> str:
        index, pt = self.cursor
        return f"{type(self).__name__}(mode={self.mode.value}, segment={index}, at={pt.to_tuple()})"


class AsyncFilter(AsyncPipeline):
    """Step-wise evaluation of a single filter."""

    def __init__(
        self,
        filter: Filter,
        inputs: Inputs,
        output: Image,
        mode: Union[AsyncMode, str, None] = None,
    ) -> None:
        self.filter = filter
        super().__init__(Pipeline([filter], workers=1), inputs, output, mode)


async def eval_async(
    filter: Filter,
    inputs: Inputs,
    output: Image,
    mode: Optional[Union[AsyncMode, str]] = None,
) -> None:
    """Evaluate *filter* cooperatively inside a running event loop."""

    await AsyncFilter(filter, inputs, output, mode).execute()


__all__ = ["AsyncFilter", "AsyncMode", "AsyncPipeline", "eval_async"]
