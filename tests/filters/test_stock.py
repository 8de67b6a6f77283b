"""Tests for the stock filters."""

import numpy as np
import pytest

from pixelflow.core.color import GRAY, HSV, RGB, RGBA
from pixelflow.core.geom import Region, Size
from pixelflow.core.image import Image
from pixelflow.core.pixel import Pixel
from pixelflow.core.types import F32, F64, U8
from pixelflow.filters import (
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
    Schedule,
    Transform,
)


def _apply(filter, image):
    output = image.new_like()
    filter.eval([image], output)
    return output


def _single(value, layout=GRAY, type=F64):
    image = Image((1, 1), type, layout)
    image.fill(Pixel.filled(layout, value) if isinstance(value, float) else Pixel(layout, value))
    return image


@pytest.mark.parametrize(
    "filter, value, expected",
    [
        (Invert(), 0.2, 0.8),
        (Brightness(1.5), 0.4, 0.6),
        (Contrast(2.0), 0.75, 1.0),
        (Contrast(0.5), 0.1, 0.3),
        (Exposure(1.0), 0.2, 0.4),
        (Exposure(-2.0), 0.8, 0.2),
        (GammaLog(2.0), 0.25, 0.5),
        (GammaLin(2.0), 0.5, 0.25),
        (Normalize(0.0, 1.0, 0.5, 1.0), 0.5, 0.75),
        (Clamp(), 1.7, 1.0),
        (Clamp(), -0.3, 0.0),
        (Noop(), 0.33, 0.33),
    ],
)
def test_point_filters_match_their_formula(filter, value, expected):
    assert _apply(filter, _single(value)).get_f((0, 0), 0) == pytest.approx(expected)


def test_normalize_rejects_an_empty_source_range():
    """A zero-width range has no affine remap and fails before any point runs."""

    with pytest.raises(ValueError):
        Normalize(0.5, 0.5, 0.0, 1.0)


def test_gamma_defaults_to_2_2():
    assert GammaLog().gamma == pytest.approx(2.2)
    out = _apply(GammaLin(), _single(0.5)).get_f((0, 0), 0)
    assert out == pytest.approx(0.5 ** 2.2)


def test_invert_is_self_inverse(gradient):
    for type in ("u8", "u16"):
        image = gradient(5, 4, type, "rgb")
        assert _apply(Invert(), _apply(Invert(), image)) == image

    image = gradient(5, 4, "f32", "rgba")
    twice = _apply(Invert(), _apply(Invert(), image))
    assert np.allclose(twice.normalized(), image.normalized(), atol=1e-6)


def test_blend_with_itself_is_identity(gradient):
    image = gradient(4, 3, "u8", "rgba")
    output = image.new_like()
    Blend().eval([image, image], output)
    assert output == image


def test_blend_averages_two_images():
    a = _single(0.2)
    b = _single(0.6)
    output = a.new_like()
    Blend().eval([a, b], output)
    assert output.get_f((0, 0), 0) == pytest.approx(0.4)


def test_saturation_scales_hsv_saturation():
    image = _single([0.8, 0.4, 0.4], RGB)
    output = _apply(Saturation(0.5), image)
    hsv = output.get_pixel((0, 0)).convert(HSV)
    assert hsv[1] == pytest.approx(0.25)
    assert hsv[2] == pytest.approx(0.8)
    gray = _apply(Saturation(0.0), image).get_pixel((0, 0))
    assert list(gray) == pytest.approx([0.8, 0.8, 0.8])


def test_crop_reads_offset_region():
    source = Image((8, 8), F32, GRAY)
    source.fill(Pixel.filled(GRAY, 1.0))
    crop = Crop(Region((2, 2), (4, 4)))
    output = Image((4, 4), F32, GRAY)
    crop.eval(source, output)
    assert crop.schedule() is Schedule.IMAGE
    assert crop.output_size(None, output) == Size(4, 4)
    assert np.all(output.normalized() == 1.0)


def test_crop_leaves_points_past_the_region_untouched():
    source = Image((4, 4), F32, GRAY)
    source.fill(Pixel.filled(GRAY, 1.0))
    output = Image((3, 3), F32, GRAY)
    Crop(((0, 0), (2, 2))).eval_partial(((0, 0), (3, 3)), source, output)
    values = output.normalized()[:, :, 0]
    assert values[:2, :2].tolist() == [[1.0, 1.0], [1.0, 1.0]]
    assert values[2, :].tolist() == [0.0, 0.0, 0.0]
    assert values[:, 2].tolist() == [0.0, 0.0, 0.0]


def test_convert_writes_destination_layout():
    image = _single(0.5)
    output = Image((1, 1), U8, RGBA)
    Convert().eval(image, output)
    assert output.array[0, 0].tolist() == [128, 128, 128, 255]

    hsv = Image((1, 1), F64, HSV)
    Convert(RGB).eval(_single([0.0, 0.0, 1.0], RGB), hsv)
    assert hsv.get_f((0, 0), 0) == pytest.approx(2.0 / 3.0)


def test_if_picks_a_branch_per_point():
    image = Image((4, 1), F64, GRAY)
    image.fill(Pixel.filled(GRAY, 0.25))
    left_half = If(lambda pt, input: pt.x < 2, Invert(), Noop())
    output = _apply(left_half, image)
    assert [output.get_f((x, 0), 0) for x in range(4)] == pytest.approx([0.75, 0.75, 0.25, 0.25])
    assert left_half.schedule() is Schedule.PIXEL
    assert left_half.is_parallel_safe()


def test_if_is_image_level_when_a_branch_is():
    mixed = If(lambda pt, input: True, Invert(), Transform.identity())
    assert mixed.schedule() is Schedule.IMAGE
