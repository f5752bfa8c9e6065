"""
Optional per-frame timestamp trailer.

The trailer is frame_count little-endian int64 tick values stored right after
the last frame payload. Ticks are 100 ns units since 0001-01-01T00:00:00, the
.NET DateTime epoch. A missing trailer is a valid outcome, reported as None.
"""

from __future__ import annotations

import logging
import struct
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from .frame_index import check_frame_index
from .header import HEADER_SIZE, Header
from .source import ByteSource, read_at, source_length

logger = logging.getLogger(__name__)

TIMESTAMP_SIZE = 8
TICKS_PER_SECOND = 10_000_000

_TICK_FORMAT = struct.Struct("<q")
_TICK_EPOCH = datetime(1, 1, 1)


def trailer_offset(header: Header) -> int:
    """Byte offset where the trailer starts (end of the last frame)."""
    return HEADER_SIZE + header.image_data_size


def timestamp_offset(header: Header, index: int) -> int:
    return trailer_offset(header) + index * TIMESTAMP_SIZE


def read_timestamp(source: ByteSource, header: Header, index: int) -> Optional[int]:
    """
    Read the capture timestamp of one frame.

    Returns:
        Optional[int]: Tick count, or None when the source is too short to
        hold this frame's trailer entry

    Raises:
        FrameIndexOutOfRange: If index is outside [0, frame_count)
        IoFailure: If the underlying read fails
    """
    check_frame_index(header, index)
    offset = timestamp_offset(header, index)
    if source_length(source) < offset + TIMESTAMP_SIZE:
        logger.debug("No trailer entry for frame %d", index)
        return None
    raw = read_at(source, offset, TIMESTAMP_SIZE, "read_timestamp")
    if len(raw) < TIMESTAMP_SIZE:
        return None
    return _TICK_FORMAT.unpack(raw)[0]


def read_timestamps(source: ByteSource, header: Header) -> Optional[List[int]]:
    """Read every trailer entry, or None if the trailer is incomplete."""
    count = header.frame_count
    start = trailer_offset(header)
    size = count * TIMESTAMP_SIZE
    if count == 0 or source_length(source) < start + size:
        return None
    raw = read_at(source, start, size, "read_timestamps")
    if len(raw) < size:
        return None
    return [t for (t,) in _TICK_FORMAT.iter_unpack(raw)]


def encode_timestamps(ticks: Iterable[int]) -> bytes:
    return b"".join(_TICK_FORMAT.pack(t) for t in ticks)


def ticks_to_datetime(ticks: int, utc: bool = False) -> datetime:
    """Convert a tick count to a datetime; ``utc`` attaches timezone.utc."""
    dt = _TICK_EPOCH + timedelta(microseconds=ticks // 10)
    return dt.replace(tzinfo=timezone.utc) if utc else dt


def datetime_to_ticks(dt: datetime) -> int:
    # Aware datetimes are normalised to UTC first
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    delta = dt - _TICK_EPOCH
    return (
        delta.days * 86_400 + delta.seconds
    ) * TICKS_PER_SECOND + delta.microseconds * 10
