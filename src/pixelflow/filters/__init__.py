"""Composable pixel filters.

- base: the filter interface, schedules and evaluation entry points
- input: the read-only view filters compute from
- stock: point filters, crop and conditional selection
- transform: affine geometric transforms
- kernel: convolution kernels
- pipeline: fused execution of filter sequences
- cooperative: step-wise and ``asyncio`` execution
"""

from __future__ import annotations

from .base import Combine, Filter, Schedule
from .cooperative import AsyncFilter, AsyncMode, AsyncPipeline, eval_async
from .input import Input
from .kernel import Kernel, KernelOp, box, gaussian, sobel, sobel_x, sobel_y
from .pipeline import Pipeline, PipelineStats, Segment
from .stock import (
    Blend,
    Brightness,
    Clamp,
    Contrast,
    Convert,
    Crop,
    Exposure,
    GammaLin,
    GammaLog,
    If,
    Invert,
    Noop,
    Normalize,
    Saturation,
)
from .transform import Transform, resize, rotate, rotate90, rotate180, rotate270, scale

__all__ = [
    "AsyncFilter",
    "AsyncMode",
    "AsyncPipeline",
    "Blend",
    "Brightness",
    "Clamp",
    "Combine",
    "Contrast",
    "Convert",
    "Crop",
    "Exposure",
    "Filter",
    "GammaLin",
    "GammaLog",
    "If",
    "Input",
    "Invert",
    "Kernel",
    "KernelOp",
    "Noop",
    "Normalize",
    "Pipeline",
    "PipelineStats",
    "Saturation",
    "Schedule",
    "Segment",
    "Transform",
    "box",
    "eval_async",
    "gaussian",
    "resize",
    "rotate",
    "rotate180",
    "rotate270",
    "rotate90",
    "scale",
    "sobel",
    "sobel_x",
    "sobel_y",
]
