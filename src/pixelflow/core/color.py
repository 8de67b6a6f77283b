"""Color layouts and the pixel conversion rule.

Every layout knows how to move its channels to and from RGB.  The helpers
operate on arrays whose last axis is the channel axis, so the same code
converts a single :class:`~pixelflow.core.pixel.Pixel` or an entire image.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Union

import numpy as np

from ..errors import InvalidColorError

ChannelFn = Callable[[np.ndarray], np.ndarray]

# Rec. 709-like weights used for rgb -> gray.
LUMA_WEIGHTS = (0.21, 0.72, 0.07)


@dataclass(frozen=True)
class Layout:
    """Fixed channel count plus optional alpha index for a pixel."""

    name: str
    channels: int
    alpha: Optional[int] = None
    to_rgb_fn: ChannelFn = field(default=None, compare=False, repr=False)  # type: ignore[assignment]
    from_rgb_fn: ChannelFn = field(default=None, compare=False, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.channels < 1:
            raise InvalidColorError(f"Layout {self.name!r} must have at least one channel")
        if self.alpha is not None and not 0 <= self.alpha < self.channels:
            raise InvalidColorError(f"Alpha index {self.alpha} outside layout {self.name!r}")
        if self.to_rgb_fn is None or self.from_rgb_fn is None:
            raise InvalidColorError(f"Layout {self.name!r} needs both RGB conversion functions")

    @property
    def has_alpha(self) -> bool:
        return self.alpha is not None

    def is_alpha(self, channel: int) -> bool:
        """Return ``True`` when *channel* is this layout's alpha channel."""

        return self.alpha is not None and channel == self.alpha

    def to_rgb(self, values: np.ndarray) -> np.ndarray:
        """Return *values* (``[..., channels]``) expressed as ``[..., 3]`` RGB."""

        return np.asarray(self.to_rgb_fn(np.asarray(values, dtype=np.float64)), dtype=np.float64)

    def from_rgb(self, rgb: np.ndarray) -> np.ndarray:
        """Return ``[..., 3]`` RGB values expressed in this layout."""

        return np.asarray(self.from_rgb_fn(np.asarray(rgb, dtype=np.float64)), dtype=np.float64)

    @classmethod
    def of(cls, value: Union["Layout", str]) -> "Layout":
        """Return the registered layout named *value*."""

        if isinstance(value, Layout):
            return value
        try:
            return _BY_NAME[str(value).lower()]
        except KeyError:
            raise InvalidColorError(f"Unknown color layout: {value!r}") from None


def convert_values(values: np.ndarray, src: Layout, dst: Layout) -> np.ndarray:
    """Convert normalized channel *values* from layout *src* into *dst*.

    Identical layouts are copied.  Everything else is routed through RGB.  The
    destination alpha channel keeps the source alpha when there is one and is
    fully opaque otherwise.
    """

    values = np.asarray(values, dtype=np.float64)
    if src == dst:
        return values.copy()
    out = dst.from_rgb(src.to_rgb(values))
    if dst.alpha is not None:
        if src.alpha is not None:
            out[..., dst.alpha] = values[..., src.alpha]
        else:
            out[..., dst.alpha] = 1.0
    return out


# ----------------------------------------------------------------------
# gray / rgb / rgba


def _gray_to_rgb(values: np.ndarray) -> np.ndarray:
    return np.repeat(values[..., :1], 3, axis=-1)


def _gray_from_rgb(rgb: np.ndarray) -> np.ndarray:
    wr, wg, wb = LUMA_WEIGHTS
    return np.asarray(rgb[..., 0] * wr + rgb[..., 1] * wg + rgb[..., 2] * wb)[..., None]


def _rgb_identity(values: np.ndarray) -> np.ndarray:
    return values[..., :3].copy()


def _rgba_to_rgb(values: np.ndarray) -> np.ndarray:
    # Flattened onto black: colour channels are premultiplied by alpha.
    return values[..., :3] * values[..., 3:4]


def _rgba_from_rgb(rgb: np.ndarray) -> np.ndarray:
    alpha = np.ones(rgb.shape[:-1] + (1,), dtype=np.float64)
    return np.concatenate([rgb[..., :3], alpha], axis=-1)


# ----------------------------------------------------------------------
# xyz (sRGB primaries, D65)

_RGB_TO_XYZ = np.array(
    [
        [0.4124, 0.3576, 0.1805],
        [0.2126, 0.7152, 0.0722],
        [0.0193, 0.1192, 0.9505],
    ]
)

_XYZ_TO_RGB = np.array(
    [
        [3.2406, -1.5372, -0.4986],
        [-0.9689, 1.8758, 0.0415],
        [0.0557, -0.2040, 1.0570],
    ]
)


def _xyz_from_rgb(rgb: np.ndarray) -> np.ndarray:
    rgb = rgb[..., :3]
    curve = np.power((np.maximum(rgb, 0.04045) + 0.055) / 1.055, 2.4)
    linear = np.where(rgb > 0.04045, curve, rgb / 12.92)
    return linear @ _RGB_TO_XYZ.T


def _xyz_to_rgb(values: np.ndarray) -> np.ndarray:
    linear = values[..., :3] @ _XYZ_TO_RGB.T
    curve = 1.055 * np.power(np.maximum(linear, 0.0031308), 1.0 / 2.4) - 0.055
    return np.where(linear > 0.0031308, curve, 12.92 * linear)


# ----------------------------------------------------------------------
# hsv


def _hsv_from_rgb(rgb: np.ndarray) -> np.ndarray:
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    cmax = np.maximum(np.maximum(r, g), b)
    cmin = np.minimum(np.minimum(r, g), b)
    delta = cmax - cmin
    safe_delta = np.where(delta == 0.0, 1.0, delta)

    del_r = (((cmax - r) / 6.0) + (delta / 2.0)) / safe_delta
    del_g = (((cmax - g) / 6.0) + (delta / 2.0)) / safe_delta
    del_b = (((cmax - b) / 6.0) + (delta / 2.0)) / safe_delta

    hue = np.where(
        cmax == r,
        del_b - del_g,
        np.where(cmax == g, (1.0 / 3.0) + del_r - del_b, (2.0 / 3.0) + del_g - del_r),
    )
    hue = np.where(delta == 0.0, 0.0, hue)
    hue = np.where(hue < 0.0, hue + 1.0, np.where(hue > 1.0, hue - 1.0, hue))

    safe_max = np.where(cmax == 0.0, 1.0, cmax)
    sat = np.where(cmax == 0.0, 0.0, delta / safe_max)
    return np.stack([hue, sat, cmax], axis=-1)


def _hsv_to_rgb(values: np.ndarray) -> np.ndarray:
    h, s, v = values[..., 0], values[..., 1], values[..., 2]
    var_h = h * 6.0
    var_h = np.where(var_h == 6.0, 0.0, var_h)
    var_i = np.floor(var_h)
    var_1 = v * (1.0 - s)
    var_2 = v * (1.0 - s * (var_h - var_i))
    var_3 = v * (1.0 - s * (1.0 - (var_h - var_i)))

    sectors = [var_i == 0.0, var_i == 1.0, var_i == 2.0, var_i == 3.0, var_i == 4.0]
    r = np.select(sectors, [v, var_2, var_1, var_1, var_3], default=v)
    g = np.select(sectors, [var_3, v, v, var_2, var_1], default=var_1)
    b = np.select(sectors, [var_1, var_1, var_3, v, v], default=var_2)

    grey = s == 0.0
    rgb = np.stack([np.where(grey, v, r), np.where(grey, v, g), np.where(grey, v, b)], axis=-1)
    return rgb


# ----------------------------------------------------------------------
# yuv (BT.601 analogue)


def _yuv_from_rgb(rgb: np.ndarray) -> np.ndarray:
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    y = 0.299 * r + 0.587 * g + 0.114 * b
    u = -0.147 * r - 0.289 * g + 0.436 * b
    v = 0.615 * r - 0.515 * g - 0.100 * b
    return np.stack([y, u, v], axis=-1)


def _yuv_to_rgb(values: np.ndarray) -> np.ndarray:
    y, u, v = values[..., 0], values[..., 1], values[..., 2]
    return np.stack([y + 1.14 * v, y - 0.395 * u - 0.581 * v, y + 2.032 * u], axis=-1)


# ----------------------------------------------------------------------
# cmyk


def _cmyk_from_rgb(rgb: np.ndarray) -> np.ndarray:
    c = 1.0 - rgb[..., 0]
    m = 1.0 - rgb[..., 1]
    y = 1.0 - rgb[..., 2]
    k = np.minimum(np.minimum(np.minimum(c, m), y), 1.0)
    black = k == 1.0
    denom = np.where(black, 1.0, 1.0 - k)
    cmy = [np.where(black, 0.0, (channel - k) / denom) for channel in (c, m, y)]
    return np.stack(cmy + [k], axis=-1)


def _cmyk_to_rgb(values: np.ndarray) -> np.ndarray:
    k = values[..., 3]
    channels = [1.0 - (values[..., i] * (1.0 - k) + k) for i in range(3)]
    return np.stack(channels, axis=-1)


GRAY = Layout("gray", 1, None, _gray_to_rgb, _gray_from_rgb)
RGB = Layout("rgb", 3, None, _rgb_identity, _rgb_identity)
RGBA = Layout("rgba", 4, 3, _rgba_to_rgb, _rgba_from_rgb)
XYZ = Layout("xyz", 3, None, _xyz_to_rgb, _xyz_from_rgb)
HSV = Layout("hsv", 3, None, _hsv_to_rgb, _hsv_from_rgb)
YUV = Layout("yuv", 3, None, _yuv_to_rgb, _yuv_from_rgb)
CMYK = Layout("cmyk", 4, None, _cmyk_to_rgb, _cmyk_from_rgb)

LAYOUTS = (GRAY, RGB, RGBA, XYZ, HSV, YUV, CMYK)

_BY_NAME = {layout.name: layout for layout in LAYOUTS}

__all__ = [
    "CMYK",
    "GRAY",
    "HSV",
    "LAYOUTS",
    "LUMA_WEIGHTS",
    "Layout",
    "RGB",
    "RGBA",
    "XYZ",
    "YUV",
    "convert_values",
]
