"""Tests for fused pipeline execution."""

import numpy as np
import pytest

from pixelflow.core.color import GRAY, RGB
from pixelflow.core.geom import Region, Size
from pixelflow.core.image import Image
from pixelflow.core.pixel import Pixel
from pixelflow.core.types import F32, F64, U8
from pixelflow.errors import EmptyPipelineError, InvalidDimensionsError
from pixelflow.filters import (
    Blend,
    Brightness,
    Contrast,
    Crop,
    Exposure,
    Filter,
    Invert,
    Noop,
    Normalize,
    Pipeline,
    Schedule,
    Transform,
    box,
    rotate180,
)


class Counting(Filter):
    """Pixel filter that copies its input and counts invocations."""

    def __init__(self):
        self.calls = 0

    def compute_at(self, pt, input, dest):
        self.calls += 1
        dest.set(input.get_pixel(pt))


def _flat(size, value, type=F32, layout=GRAY):
    image = Image(size, type, layout)
    image.fill(Pixel.filled(layout, value))
    return image


def _shift_left():
    return Transform(np.array([[1.0, 0.0, 1.0], [0.0, 1.0, 0.0]]))


def test_pixel_filters_fuse_into_one_traversal(gradient):
    image = gradient(7, 5, "f32", "rgb")
    counters = [Counting(), Counting()]
    pipeline = Pipeline([Brightness(0.5), counters[0], Contrast(1.5), counters[1], Exposure(1.0)])
    output = image.new_like()
    pipeline.execute([image], output)

    assert len(pipeline.segments()) == 1
    assert pipeline.stats.traversals == 1
    assert pipeline.stats.materializations == 0
    assert pipeline.stats.scratch_allocations == 0
    assert [c.calls for c in counters] == [35, 35]

    expected = image.copy()
    for f in (Brightness(0.5), Contrast(1.5), Exposure(1.0)):
        f.eval_in_place(expected)
    assert np.allclose(output.normalized(), expected.normalized(), atol=1e-6)


def test_image_level_filters_open_segments():
    pipeline = Pipeline().then(Invert()).then(Crop(((0, 0), (2, 2)))).then(Invert()).then(Brightness(1.0))
    pipeline.push(_shift_left())
    pipeline.push(Noop())
    segments = pipeline.segments()
    assert [(s.start, s.stop) for s in segments] == [(0, 1), (1, 4), (4, 6)]
    assert [s.image_level for s in segments] == [False, True, True]


def test_leading_image_filter_starts_the_first_segment():
    pipeline = Pipeline([Crop(((0, 0), (1, 1))), Invert()])
    assert [(s.start, s.stop) for s in pipeline.segments()] == [(0, 2)]


def test_crop_in_a_pipeline():
    source = _flat((8, 8), 1.0)
    output = Image((4, 4), F32, GRAY)
    Pipeline([Crop(Region((2, 2), (4, 4)))]).execute([source], output)
    assert output.size == Size(4, 4)
    assert np.all(output.normalized() == 1.0)


def test_normalize_pair_is_identity(gradient):
    image = gradient(6, 6, "f32", "rgb")
    output = image.new_like()
    Pipeline([Normalize(0.0, 1.0, 0.0, 2.0), Normalize(0.0, 2.0, 0.0, 1.0)]).execute([image], output)
    assert np.allclose(output.normalized(), image.normalized(), atol=1e-6)


def test_blend_with_itself(gradient):
    image = gradient(5, 3, "u8", "rgb")
    output = image.new_like()
    Pipeline([Blend()]).execute([image, image], output)
    assert output == image


def test_carried_pixel_is_converted_into_the_input_layout():
    source = _flat((2, 2), 0.2, F64, GRAY)
    output = Image((2, 2), F64, RGB)
    Pipeline([Invert(), Brightness(0.5)]).execute(source, output)
    assert list(output.get_pixel((1, 1))) == pytest.approx([0.4, 0.4, 0.4])


def test_scratch_is_reused_between_equal_sizes():
    source = _flat((8, 8), 0.25)
    full = Region.full(source.size)
    pipeline = Pipeline([Invert(), Crop(full), Invert(), Crop(full), Invert()])
    output = source.new_like()
    pipeline.execute(source, output)
    assert pipeline.stats.traversals == 3
    assert pipeline.stats.materializations == 2
    assert pipeline.stats.scratch_allocations == 1
    assert np.allclose(output.normalized(), 0.75)


def test_scratch_is_reallocated_when_the_size_changes(gradient):
    source = gradient(8, 8, "f64", "gray")
    pipeline = Pipeline([Crop(((1, 1), (6, 6))), Crop(((1, 1), (5, 5))), Crop(((0, 0), (4, 4)))])
    output = Image((4, 4), F64, GRAY)
    pipeline.execute(source, output)
    assert pipeline.stats.scratch_allocations == 2
    assert np.array_equal(output.normalized(), source.normalized()[2:6, 2:6])


def test_later_segments_keep_extra_inputs():
    a = _flat((3, 3), 0.2, F64)
    b = _flat((3, 3), 0.6, F64)
    output = a.new_like()
    Pipeline([Invert(), Transform.identity(), Blend()]).execute([a, b], output)
    assert np.allclose(output.normalized(), 0.7)


def test_final_size_must_match_output():
    with pytest.raises(InvalidDimensionsError):
        Pipeline([Crop(((0, 0), (4, 4)))]).execute(_flat((8, 8), 0.5), _flat((8, 8), 0.0))


def test_empty_pipeline_is_rejected():
    pipeline = Pipeline()
    image = _flat((2, 2), 0.5)
    with pytest.raises(EmptyPipelineError):
        pipeline.execute(image, image.new_like())
    with pytest.raises(EmptyPipelineError):
        pipeline.execute_in_place(image)
    with pytest.raises(EmptyPipelineError):
        pipeline.to_async(image, image.new_like())


def test_execute_in_place_point_filters_alias_without_copy(gradient):
    image = gradient(4, 4, "u8", "rgb")
    expected = image.copy()
    Invert().eval_in_place(expected)
    pipeline = Pipeline([Invert()])
    pipeline.execute_in_place(image)
    assert image == expected
    assert pipeline.stats.scratch_allocations == 0


def test_execute_in_place_snapshots_for_image_filters(gradient):
    image = gradient(5, 3, "f64", "gray")
    expected = image.new_like()
    Pipeline([_shift_left(), Invert()]).execute(image, expected)

    pipeline = Pipeline([_shift_left(), Invert()])
    pipeline.execute_in_place(image)
    assert image == expected
    assert pipeline.stats.scratch_allocations == 1


def test_intermediate_results_use_the_input_type(gradient):
    source = gradient(4, 4, "u8", "rgb")
    output = Image((4, 4), F32, RGB)
    pipeline = Pipeline([Brightness(0.5), rotate180(source.size), Brightness(2.0)])
    pipeline.execute(source, output)

    # The first segment is materialized as u8 before the rotation reads it.
    stage = output.new_like()
    Brightness(0.5).eval(source, stage)
    scratch = stage.converted(source.type, source.layout)
    expected = output.new_like()
    Pipeline([rotate180(source.size), Brightness(2.0)]).execute(scratch, expected)
    assert output == expected
    assert pipeline.stats.materializations == 1


def test_parallel_execution_matches_serial(gradient):
    image = gradient(16, 9, "f32", "rgba")
    filters = [Brightness(0.8), _shift_left(), Contrast(1.2), box(3), Invert()]
    serial = image.new_like()
    parallel = image.new_like()
    Pipeline(filters, workers=1).execute(image, serial)
    Pipeline(filters, workers=4).execute(image, parallel)
    assert parallel == serial


def test_u8_destinations_carry_saturated_values():
    source = _flat((1, 1), 0.8, U8)
    output = source.new_like()
    Pipeline([Brightness(2.0), Brightness(0.5)]).execute(source, output)
    assert output.get_f((0, 0), 0) == pytest.approx(0.5, abs=1 / 255)


class ShiftSecondRight(Filter):
    """Image level filter copying input 1 moved one point to the right."""

    def schedule(self):
        return Schedule.IMAGE

    def compute_at(self, pt, input, dest):
        dest.set(input.get_pixel(pt.offset(-1, 0), 1))


def test_output_passed_as_a_later_input_is_read_before_writes(gradient):
    base = gradient(5, 3, "f64", "gray")
    second = gradient(5, 3, "f64", "gray")
    Invert().eval_in_place(second)

    expected = second.new_like()
    Pipeline([ShiftSecondRight()]).execute([base, second.copy()], expected)

    Pipeline([ShiftSecondRight()]).execute([base, second], second)
    assert second == expected
    assert second.get_f((0, 1), 0) == 0.0


def test_extra_inputs_aliasing_the_output_survive_later_segments():
    a = _flat((3, 3), 0.2, F64)
    b = _flat((3, 3), 0.6, F64)
    Pipeline([Invert(), Transform.identity(), Blend()]).execute([a, b], b)
    assert np.allclose(b.normalized(), 0.7)


def test_stats_are_kept_until_the_next_run_starts():
    source = _flat((4, 4), 0.25)
    pipeline = Pipeline([Invert(), Crop(Region.full(source.size)), Invert()])
    output = source.new_like()
    pipeline.execute(source, output)
    before = (pipeline.stats.traversals, pipeline.stats.materializations)
    assert before == (2, 1)

    stepper = pipeline.to_async(source, output)
    assert (pipeline.stats.traversals, pipeline.stats.materializations) == before

    stepper.step()
    assert (pipeline.stats.traversals, pipeline.stats.materializations) == (0, 0)
