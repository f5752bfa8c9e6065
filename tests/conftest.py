"""Shared builders for SER byte streams used across the test modules."""

import io
import struct

import pytest


def build_raw_header(
    file_id=b"LUCAM-RECORDER",
    lu_id=0,
    color_id=0,
    little_endian=0,
    width=4,
    height=3,
    depth=8,
    frame_count=0,
    observer=b"",
    instrument=b"",
    telescope=b"",
    date_time=0,
    date_time_utc=0,
):
    """Lay out a 178-byte header field by field at the documented offsets."""
    buf = bytearray(178)
    buf[0:14] = file_id.ljust(14, b"\x00")[:14]
    struct.pack_into("<i", buf, 14, lu_id)
    struct.pack_into("<i", buf, 18, color_id)
    struct.pack_into("<i", buf, 22, little_endian)
    struct.pack_into("<I", buf, 26, width)
    struct.pack_into("<I", buf, 30, height)
    struct.pack_into("<I", buf, 34, depth)
    struct.pack_into("<I", buf, 38, frame_count)
    buf[42:82] = observer.ljust(40, b"\x00")
    buf[82:122] = instrument.ljust(40, b"\x00")
    buf[122:162] = telescope.ljust(40, b"\x00")
    struct.pack_into("<q", buf, 162, date_time)
    struct.pack_into("<q", buf, 170, date_time_utc)
    return bytes(buf)


def make_frame(size, seed=0):
    return bytes((seed + i) % 256 for i in range(size))


def build_ser(frames, timestamps=None, **header_fields):
    """Header + frames (+ optional trailer) with frame_count = len(frames)."""
    header_fields.setdefault("frame_count", len(frames))
    out = build_raw_header(**header_fields) + b"".join(frames)
    if timestamps is not None:
        out += b"".join(struct.pack("<q", t) for t in timestamps)
    return out


@pytest.fixture
def raw_header():
    return build_raw_header


@pytest.fixture
def frame_bytes():
    return make_frame


@pytest.fixture
def ser_source():
    """Factory returning an in-memory SER byte source."""

    def _make(frames, timestamps=None, **header_fields):
        return io.BytesIO(build_ser(frames, timestamps, **header_fields))

    return _make
