"""Data model shared by every filter.

- types: numeric storage representations and normalization
- color: channel layouts and the conversion rule between them
- geom: point, size and region value types
- pixel: normalized channel vectors
- image: owned sample buffers and per-point destination slots
"""

from __future__ import annotations

from .color import CMYK, GRAY, HSV, LAYOUTS, RGB, RGBA, XYZ, YUV, Layout, convert_values
from .geom import Point, Region, Size
from .image import Image, PixelSlot
from .pixel import Pixel
from .types import F16, F32, F64, I8, I16, I32, TYPES, U8, U16, U32, Type

__all__ = [
    "CMYK",
    "F16",
    "F32",
    "F64",
    "GRAY",
    "HSV",
    "I16",
    "I32",
    "I8",
    "Image",
    "LAYOUTS",
    "Layout",
    "Pixel",
    "PixelSlot",
    "Point",
    "RGB",
    "RGBA",
    "Region",
    "Size",
    "TYPES",
    "Type",
    "U16",
    "U32",
    "U8",
    "XYZ",
    "YUV",
    "convert_values",
]
