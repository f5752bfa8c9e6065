"""Tests for the numpy view of frame payloads."""

import numpy as np
import pytest

from ser_io.color import Bayer, Endianness
from ser_io.errors import FrameSizeMismatch, InvalidGeometry
from ser_io.header import Header
from ser_io.pixels import frame_to_array, sample_dtype

LE = Endianness.LITTLE_ENDIAN
BE = Endianness.BIG_ENDIAN


def test_8bit_mono_shape_and_dtype():
    hdr = Header(image_width=4, image_height=2, pixel_depth=8)
    arr = frame_to_array(bytes(range(8)), hdr, LE)
    assert arr.dtype == np.uint8
    assert arr.shape == (2, 4)
    assert arr[1, 0] == 4


def test_rgb_has_channel_axis():
    hdr = Header(image_width=2, image_height=1, pixel_depth=8, color=Bayer.BGR)
    arr = frame_to_array(bytes([1, 2, 3, 4, 5, 6]), hdr, LE)
    assert arr.shape == (1, 2, 3)
    assert arr[0, 1].tolist() == [4, 5, 6]


def test_32bit_samples():
    hdr = Header(image_width=1, image_height=1, pixel_depth=32)
    arr = frame_to_array(b"\x00\x00\x00\x01", hdr, BE)
    assert arr.dtype == np.dtype(">u4")
    assert int(arr[0, 0]) == 1


def test_byte_order_comes_from_argument_not_header_flag():
    hdr = Header(image_width=1, image_height=1, pixel_depth=16, little_endian_flag=0)
    assert frame_to_array(b"\x01\x00", hdr, LE)[0, 0] == 1
    assert frame_to_array(b"\x01\x00", hdr, BE)[0, 0] == 256


def test_endianness_is_required():
    hdr = Header(image_width=1, image_height=1, pixel_depth=16)
    with pytest.raises(TypeError):
        frame_to_array(b"\x01\x00", hdr)
    with pytest.raises(TypeError):
        sample_dtype(hdr)


def test_array_is_read_only():
    hdr = Header(image_width=1, image_height=1, pixel_depth=8)
    arr = frame_to_array(b"\x05", hdr, LE)
    with pytest.raises(ValueError):
        arr[0, 0] = 1


def test_three_byte_samples_have_no_dtype():
    hdr = Header(image_width=1, image_height=1, pixel_depth=24)
    with pytest.raises(InvalidGeometry):
        sample_dtype(hdr, LE)


def test_wrong_payload_length():
    hdr = Header(image_width=2, image_height=2, pixel_depth=16)
    with pytest.raises(FrameSizeMismatch):
        frame_to_array(b"\x00" * 7, hdr, LE)
