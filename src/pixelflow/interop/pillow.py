"""Hand images to and from Pillow.

Only in-memory sample handoff lives here; opening and saving files stays
with Pillow itself.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np
from PIL import Image as PILImage

from ..core.color import CMYK, GRAY, RGB, RGBA, Layout
from ..core.image import Image
from ..core.types import F32, I32, U8, U16, Type
from ..errors import InvalidColorError, InvalidTypeError

_LOGGER = logging.getLogger(__name__)

# Pillow mode for every (type, layout) pair that maps onto one directly.
_MODES = {
    (U8, GRAY): "L",
    (U8, RGB): "RGB",
    (U8, RGBA): "RGBA",
    (U8, CMYK): "CMYK",
    (U16, GRAY): "I;16",
    (I32, GRAY): "I",
    (F32, GRAY): "F",
}

_FROM_MODES = {mode: key for key, mode in _MODES.items()}


def to_pil(image: Image) -> PILImage.Image:
    """Return a Pillow copy of *image*.

    Raises :class:`InvalidTypeError` or :class:`InvalidColorError` when the
    combination has no Pillow mode; convert the image first in that case.
    """

    mode = _MODES.get((image.type, image.layout))
    if mode is None:
        if not any(layout == image.layout for _, layout in _MODES):
            raise InvalidColorError(f"Pillow has no mode for {image.layout.name} images")
        raise InvalidTypeError(
            f"Pillow cannot store {image.layout.name} images as {image.type.name} samples"
        )
    samples = np.ascontiguousarray(image.array)
    if image.channels == 1:
        samples = samples[:, :, 0]
    return PILImage.frombytes(mode, (image.width, image.height), samples.tobytes())


def from_pil(
    pil_image: PILImage.Image,
    type: Union[Type, str, None] = None,
    layout: Union[Layout, str, None] = None,
) -> Image:
    """Copy a Pillow image into a new :class:`Image`.

    Modes without a direct counterpart (palette, bilevel, ``LA`` ...) are
    converted by Pillow to ``RGB`` or ``RGBA`` first.  When *type* or
    *layout* is given the result is converted into them.
    """

    mode = pil_image.mode
    if mode not in _FROM_MODES:
        has_alpha = "A" in pil_image.getbands() or "transparency" in pil_image.info
        target_mode = "RGBA" if has_alpha else "RGB"
        _LOGGER.debug("Converting Pillow %s image to %s", mode, target_mode)
        pil_image = pil_image.convert(target_mode)
        mode = target_mode

    sample_type, sample_layout = _FROM_MODES[mode]
    samples = np.asarray(pil_image, dtype=sample_type.dtype)
    image = Image.from_array(samples, sample_layout, sample_type)
    if type is None and layout is None:
        return image
    return image.converted(type, layout)


def pil_mode(image: Image) -> Optional[str]:
    """Return the Pillow mode *image* maps onto, or ``None``."""

    return _MODES.get((image.type, image.layout))


__all__ = ["from_pil", "pil_mode", "to_pil"]
