"""Hand images to and from ``QImage``.

QImage rows may be padded to ``bytesPerLine``, so samples are copied row by
row through a byte view of the Qt buffer rather than in a single block.
"""

from __future__ import annotations

import logging
from typing import Union

import numpy as np
from PySide6.QtGui import QImage

from ..core.color import GRAY, RGB, RGBA, Layout
from ..core.image import Image
from ..core.types import U8, U16, Type
from ..errors import InvalidColorError, InvalidTypeError

_LOGGER = logging.getLogger(__name__)

_FORMATS = {
    (U8, GRAY): QImage.Format.Format_Grayscale8,
    (U16, GRAY): QImage.Format.Format_Grayscale16,
    (U8, RGB): QImage.Format.Format_RGB888,
    (U8, RGBA): QImage.Format.Format_RGBA8888,
}

_FROM_FORMATS = {fmt: key for key, fmt in _FORMATS.items()}


def _resolve_pixel_buffer(image: QImage) -> tuple[memoryview, object]:
    """Return a writable 1-D byte :class:`memoryview` over *image*'s pixels.

    The second element is the object Qt handed out for the buffer; keep it
    referenced for as long as the view is used.
    """

    bytes_per_line = image.bytesPerLine()
    height = image.height()
    buffer = image.bits()
    expected_size = bytes_per_line * height
    guard: object = buffer

    view = buffer if isinstance(buffer, memoryview) else memoryview(buffer)
    try:
        view = view.cast("B")
    except TypeError:
        # Multi-dimensional views need an explicit shape to recast.
        view = view.cast("B", (view.nbytes,))

    if len(view) > expected_size:
        view = view[:expected_size]
    return view, guard


def _rows(image: QImage, itemsize: int, channels: int) -> tuple[np.ndarray, object]:
    view, guard = _resolve_pixel_buffer(image)
    raw = np.frombuffer(view, dtype=np.uint8).reshape(image.height(), image.bytesPerLine())
    return raw[:, : image.width() * channels * itemsize], guard


def to_qimage(image: Image) -> QImage:
    """Return a ``QImage`` holding a copy of *image*.

    Supported combinations are 8-bit gray, RGB and RGBA plus 16-bit gray.
    """

    fmt = _FORMATS.get((image.type, image.layout))
    if fmt is None:
        if image.layout not in (GRAY, RGB, RGBA):
            raise InvalidColorError(f"QImage has no format for {image.layout.name} images")
        raise InvalidTypeError(
            f"QImage cannot store {image.layout.name} images as {image.type.name} samples"
        )
    qimage = QImage(image.width, image.height, fmt)
    if not image.size.area:
        return qimage
    rows, guard = _rows(qimage, image.type.dtype.itemsize, image.channels)
    rows[...] = np.ascontiguousarray(image.array).view(np.uint8).reshape(image.height, -1)
    del guard
    return qimage


def from_qimage(
    qimage: QImage,
    type: Union[Type, str, None] = None,
    layout: Union[Layout, str, None] = None,
) -> Image:
    """Copy a ``QImage`` into a new :class:`Image`.

    Formats without a direct counterpart are converted to RGBA8888 by Qt
    first.  When *type* or *layout* is given the result is converted into
    them.
    """

    key = _FROM_FORMATS.get(qimage.format())
    if key is None:
        _LOGGER.debug("Converting QImage format %s to RGBA8888", qimage.format())
        qimage = qimage.convertToFormat(QImage.Format.Format_RGBA8888)
        key = (U8, RGBA)
    sample_type, sample_layout = key
    width, height = qimage.width(), qimage.height()
    image = Image((width, height), sample_type, sample_layout)
    if width and height:
        rows, guard = _rows(qimage, sample_type.dtype.itemsize, sample_layout.channels)
        samples = np.ascontiguousarray(rows).view(sample_type.dtype)
        image.array[...] = samples.reshape(height, width, sample_layout.channels)
        del guard
    if type is None and layout is None:
        return image
    return image.converted(type, layout)


__all__ = ["from_qimage", "to_qimage"]
