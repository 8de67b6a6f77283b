"""Exception hierarchy shared across pixelflow."""

from __future__ import annotations


class PixelflowError(Exception):
    """Base class for all errors raised by pixelflow."""


class InvalidDimensionsError(PixelflowError, ValueError):
    """Raised when image shapes do not match what an operation requires."""


class InvalidTypeError(PixelflowError, TypeError):
    """Raised for storage types an operation does not support."""


class InvalidColorError(PixelflowError, TypeError):
    """Raised for color layouts an operation does not support."""


class UnsupportedScheduleError(PixelflowError):
    """Raised when an image-level filter is placed where only pixel-level filters fit."""


class EmptyPipelineError(PixelflowError, ValueError):
    """Raised when a pipeline without filters is executed."""


__all__ = [
    "EmptyPipelineError",
    "InvalidColorError",
    "InvalidDimensionsError",
    "InvalidTypeError",
    "PixelflowError",
    "UnsupportedScheduleError",
]
