"""Tests for frame addressing."""

import pytest

from ser_io.color import Bayer
from ser_io.errors import FrameIndexOutOfRange
from ser_io.frame_index import FrameSpan, check_frame_index, frame_offset, iter_frame_spans
from ser_io.header import HEADER_SIZE, Header


@pytest.fixture
def header():
    return Header(
        image_width=6, image_height=4, pixel_depth=16, frame_count=5, color=Bayer.BGGR
    )


def test_offsets_follow_formula_and_increase(header):
    size = header.image_frame_size
    spans = [frame_offset(header, i) for i in range(header.frame_count)]
    for i, span in enumerate(spans):
        assert span == FrameSpan(i, HEADER_SIZE + i * size, size)
    offsets = [s.offset for s in spans]
    assert all(a < b for a, b in zip(offsets, offsets[1:]))


def test_span_end(header):
    span = frame_offset(header, 1)
    assert span.end == frame_offset(header, 2).offset


@pytest.mark.parametrize("index", [-1, 5, 6, 1000])
def test_out_of_range(header, index):
    with pytest.raises(FrameIndexOutOfRange) as exc:
        frame_offset(header, index)
    assert exc.value.index == index
    assert exc.value.frame_count == 5
    assert "0..4" in str(exc.value)
    assert isinstance(exc.value, IndexError)


def test_no_frames_means_every_index_out_of_range():
    empty = Header(image_width=2, image_height=2, pixel_depth=8)
    with pytest.raises(FrameIndexOutOfRange) as exc:
        check_frame_index(empty, 0)
    assert "no frames" in str(exc.value)


def test_iter_frame_spans_clamps(header):
    assert [s.index for s in iter_frame_spans(header)] == [0, 1, 2, 3, 4]
    assert [s.index for s in iter_frame_spans(header, 3, 99)] == [3, 4]
    assert [s.index for s in iter_frame_spans(header, -2, 2)] == [0, 1]
    assert list(iter_frame_spans(header, 4, 2)) == []


def test_offset_ignores_actual_file_size():
    # Huge geometry, no file involved at all
    hdr = Header(
        image_width=4144, image_height=2822, pixel_depth=16, frame_count=100
    )
    span = frame_offset(hdr, 99)
    assert span.offset == 178 + 99 * 23_388_736
    assert span.length == 23_388_736
