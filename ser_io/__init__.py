"""
SER video container codec.

This package provides:
- Header parsing and serialization for the 178-byte SER header
- Color/Bayer and pixel byte-order semantics
- Frame addressing (frame index to byte range)
- Optional per-frame timestamp trailer access
- A file handle for reading frames and appending new ones
"""

from .color import Bayer, Endianness, channel_count, decode_color, resolve_endianness
from .config import CodecConfig, default_config, load_config
from .errors import (
    FrameIndexOutOfRange,
    FrameSizeMismatch,
    HeaderError,
    InvalidGeometry,
    InvalidHeaderField,
    InvalidSignature,
    IoFailure,
    SerError,
    TruncatedFile,
    UnknownColorId,
)
from .frame_index import FrameSpan, frame_offset
from .header import HEADER_SIZE, Header, parse_header, serialize_header
from .ser_file import SerFile, copy_ser, create_ser, open_ser
from .trailer import datetime_to_ticks, ticks_to_datetime

__version__ = "0.1.0"

__all__ = [
    "Bayer",
    "CodecConfig",
    "Endianness",
    "FrameIndexOutOfRange",
    "FrameSizeMismatch",
    "FrameSpan",
    "HEADER_SIZE",
    "Header",
    "HeaderError",
    "InvalidGeometry",
    "InvalidHeaderField",
    "InvalidSignature",
    "IoFailure",
    "SerError",
    "SerFile",
    "TruncatedFile",
    "UnknownColorId",
    "channel_count",
    "copy_ser",
    "create_ser",
    "datetime_to_ticks",
    "decode_color",
    "default_config",
    "frame_offset",
    "load_config",
    "open_ser",
    "parse_header",
    "resolve_endianness",
    "serialize_header",
    "ticks_to_datetime",
]
