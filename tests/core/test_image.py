"""Tests for image buffers and destination slots."""

import numpy as np
import pytest

from pixelflow.core.color import GRAY, RGB, RGBA
from pixelflow.core.geom import Point, Region, Size
from pixelflow.core.image import Image
from pixelflow.core.pixel import Pixel
from pixelflow.core.types import F32, U8, U16
from pixelflow.errors import InvalidDimensionsError


def test_new_image_is_zeroed_and_interleaved():
    image = Image((4, 3), U8, RGBA)
    assert image.size == Size(4, 3)
    assert image.shape == (4, 3, 4)
    assert image.array.shape == (3, 4, 4)
    assert len(image.data) == 4 * 3 * 4
    assert not image.data.any()
    assert image.index((1, 2)) == (2 * 4 + 1) * 4


def test_defaults_are_float_rgb():
    image = Image((2, 2))
    assert image.type == F32
    assert image.layout == RGB


def test_data_is_a_live_view():
    image = Image((2, 2), U8, GRAY)
    image.data[image.index((1, 1))] = 255
    assert image.get_f((1, 1), 0) == pytest.approx(1.0)


def test_set_and_get_in_normalized_space():
    image = Image((2, 2), U16, RGB)
    image.set_pixel((0, 1), Pixel(RGB, [1.0, 0.5, 0.0]))
    assert image.array[1, 0].tolist() == [65535, 32768, 0]
    assert list(image.get_pixel((0, 1))) == pytest.approx([1.0, 32768 / 65535, 0.0])
    image.set_f((1, 1), 2, 0.25)
    assert image.get_f(Point(1, 1), 2) == pytest.approx(16384 / 65535)


def test_out_of_bounds_reads_zero_and_writes_are_dropped():
    image = Image((2, 2), F32, RGB)
    image.fill(Pixel.filled(RGB, 0.5))
    assert image.get_pixel((5, 5)) == Pixel(RGB)
    assert image.get_f((-1, 0), 0) == 0.0
    assert image.get_f((0, 0), 7) == 0.0
    before = image.copy()
    image.set_pixel((2, 0), Pixel.filled(RGB, 1.0))
    image.set_f((0, -1), 0, 1.0)
    assert image == before


def test_set_pixel_converts_layout():
    image = Image((1, 1), F32, RGBA)
    image.set_pixel((0, 0), Pixel(GRAY, [0.5]))
    assert list(image.get_pixel((0, 0))) == pytest.approx([0.5, 0.5, 0.5, 1.0])


def test_slot_reads_and_writes_one_point():
    image = Image((3, 1), F32, RGB)
    slot = image.slot((2, 0))
    slot.set(Pixel(RGB, [0.1, 0.2, 0.3]))
    slot[0] = 0.9
    assert slot[0] == pytest.approx(0.9)
    assert list(slot.get()) == pytest.approx([0.9, 0.2, 0.3])
    assert image.get_pixel((0, 0)) == Pixel(RGB)

    outside = image.slot((3, 0))
    outside.set(Pixel.filled(RGB, 1.0))
    assert outside.get() == Pixel(RGB)


def test_points_in_region_are_clipped():
    image = Image((4, 4))
    points = [p.to_tuple() for p in image.points_in(Region((3, 2), (3, 3)))]
    assert points == [(3, 2), (3, 3)]
    assert [p.to_tuple() for p in image.row(1)] == [(0, 1), (1, 1), (2, 1), (3, 1)]


def test_from_array_checks_shape():
    samples = np.arange(6, dtype=np.uint8).reshape(2, 3)
    image = Image.from_array(samples, GRAY)
    assert image.type == U8
    assert image.size == Size(3, 2)
    assert image.array[1, 2, 0] == 5
    with pytest.raises(InvalidDimensionsError):
        Image.from_array(np.zeros((2, 3, 2), dtype=np.uint8), RGB)


def test_convert_to_changes_type_and_layout():
    source = Image.from_normalized(np.full((2, 2, 1), 0.2), GRAY, F32)
    dest = Image((2, 2), U8, RGBA)
    source.convert_to(dest)
    assert dest.array[0, 0].tolist() == [51, 51, 51, 255]

    converted = source.converted(U8, RGB)
    assert converted.layout == RGB
    assert converted.array[1, 1].tolist() == [51, 51, 51]


def test_convert_to_requires_equal_sizes():
    with pytest.raises(InvalidDimensionsError):
        Image((2, 2)).convert_to(Image((3, 2)))


def test_equality_includes_type_and_layout():
    a = Image((2, 2), U8, RGB)
    assert a == a.copy()
    assert a != Image((2, 2), U16, RGB)
    assert a != Image((2, 2), U8, RGBA)
    b = a.copy()
    b.set_f((0, 0), 0, 1.0)
    assert a != b
