from __future__ import annotations

import numpy as np

from .color import Endianness
from .errors import FrameSizeMismatch, InvalidGeometry
from .header import Header

# numpy has no 3-byte integer type, so 17-24 bit samples stay raw bytes
_SAMPLE_KIND = {1: "u1", 2: "u2", 4: "u4"}


def sample_dtype(header: Header, endianness: Endianness) -> np.dtype:
    """numpy dtype of one sample in the given payload byte order."""
    kind = _SAMPLE_KIND.get(header.bytes_per_pixel)
    if kind is None:
        raise InvalidGeometry(
            f"No numpy sample type for {header.bytes_per_pixel}-byte samples "
            f"(pixel depth {header.pixel_depth})"
        )
    return np.dtype(endianness.numpy_prefix + kind)


def frame_to_array(data: bytes, header: Header, endianness: Endianness) -> np.ndarray:
    """
    View a raw frame payload as a read-only array.

    Shape is (height, width) for mono/Bayer data and (height, width, 3) for
    RGB/BGR. Samples keep the file's byte order; no demosaicing is done.
    ``endianness`` is the resolved payload order, normally
    ``SerFile.endianness``, which applies the configured flag polarity.
    """
    if len(data) != header.image_frame_size:
        raise FrameSizeMismatch(header.image_frame_size, len(data))

    arr = np.frombuffer(data, dtype=sample_dtype(header, endianness))
    shape = (header.image_height, header.image_width)
    if header.channel_count > 1:
        shape = shape + (header.channel_count,)
    return arr.reshape(shape)
