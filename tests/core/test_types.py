"""Tests for sample type normalization."""

import numpy as np
import pytest

from pixelflow.core.types import F16, F32, F64, I8, I16, I32, TYPES, U8, U16, U32, Type
from pixelflow.errors import InvalidTypeError


@pytest.mark.parametrize("sample_type", [U8, I8, U16, I16])
def test_integer_round_trip_is_identity(sample_type):
    """Every representable integer survives normalize/denormalize."""
    info = np.iinfo(sample_type.dtype)
    raw = np.arange(int(info.min), int(info.max) + 1).astype(sample_type.dtype)
    restored = sample_type.from_normalized(sample_type.to_normalized(raw))
    assert restored.dtype == sample_type.dtype
    assert np.array_equal(restored, raw)


@pytest.mark.parametrize("sample_type", [U32, I32])
def test_wide_integer_round_trip_extremes(sample_type):
    info = np.iinfo(sample_type.dtype)
    raw = np.array([info.min, info.min + 1, 0, 12345, info.max - 1, info.max], dtype=sample_type.dtype)
    assert np.array_equal(sample_type.from_normalized(sample_type.to_normalized(raw)), raw)


@pytest.mark.parametrize("sample_type", [F16, F32, F64])
def test_float_round_trip_keeps_values(sample_type):
    raw = np.array([0.0, 0.25, 0.5, 1.0, 1.5, -0.5], dtype=sample_type.dtype)
    assert np.array_equal(sample_type.from_normalized(sample_type.to_normalized(raw)), raw)


def test_integer_bounds_and_flags():
    assert U8.MIN == 0 and U8.MAX == 255
    assert I16.MIN == -32768 and I16.MAX == 32767
    assert F32.MIN == 0.0 and F32.MAX == 1.0
    assert not U8.is_float
    assert F16.is_float
    assert U16.bits == 16
    assert F64.bits == 64


def test_from_normalized_saturates_integers():
    out = U8.from_normalized(np.array([1.5, -0.2, 0.25]))
    assert out.tolist() == [255, 0, 64]
    assert U8.from_normalized(2.0) == 255
    assert U8.from_normalized(-1.0) == 0


def test_floating_types_do_not_saturate():
    assert float(F32.from_normalized(1.5)) == pytest.approx(1.5)


def test_cross_type_conversion_goes_through_normalized_space():
    assert U8.convert(255, U16) == 65535
    assert U16.convert(65535, U8) == 255
    assert U16.convert(0, U8) == 0
    assert float(U8.convert(51, F32)) == pytest.approx(0.2)
    assert I8.convert(-128, U8) == 0


def test_clamp_clips_raw_values():
    assert U8.clamp(300) == 255
    assert np.array_equal(I8.clamp(np.array([-200, 5, 200])), [-128, 5, 127])


def test_lookup_by_name_and_dtype():
    assert Type.of("u8") is U8
    assert Type.of("F32") is F32
    assert Type.of(np.uint16) is U16
    assert Type.of(np.dtype("int32")) is I32
    assert Type.of(U32) is U32
    assert len({t.name for t in TYPES}) == len(TYPES)


@pytest.mark.parametrize("value", [np.int64, "complex64", "nonsense"])
def test_unsupported_types_raise(value):
    with pytest.raises(InvalidTypeError):
        Type.of(value)
