"""Composable pixel transformations with fused pipelines."""

from __future__ import annotations

from .core import (
    CMYK,
    F16,
    F32,
    F64,
    GRAY,
    HSV,
    I8,
    I16,
    I32,
    RGB,
    RGBA,
    U8,
    U16,
    U32,
    XYZ,
    YUV,
    Image,
    Layout,
    Pixel,
    PixelSlot,
    Point,
    Region,
    Size,
    Type,
)
from .errors import (
    EmptyPipelineError,
    InvalidColorError,
    InvalidDimensionsError,
    InvalidTypeError,
    PixelflowError,
    UnsupportedScheduleError,
)
from .filters import (
    AsyncFilter,
    AsyncMode,
    AsyncPipeline,
    Filter,
    Input,
    Pipeline,
    PipelineStats,
    Schedule,
)
from .utils.logging import get_logger

__version__ = "0.1.0"

__all__ = [
    "AsyncFilter",
    "AsyncMode",
    "AsyncPipeline",
    "CMYK",
    "EmptyPipelineError",
    "F16",
    "F32",
    "F64",
    "Filter",
    "GRAY",
    "HSV",
    "I16",
    "I32",
    "I8",
    "Image",
    "Input",
    "InvalidColorError",
    "InvalidDimensionsError",
    "InvalidTypeError",
    "Layout",
    "Pipeline",
    "PipelineStats",
    "Pixel",
    "PixelSlot",
    "PixelflowError",
    "Point",
    "RGB",
    "RGBA",
    "Region",
    "Schedule",
    "Size",
    "Type",
    "U16",
    "U32",
    "U8",
    "UnsupportedScheduleError",
    "XYZ",
    "YUV",
    "get_logger",
]
