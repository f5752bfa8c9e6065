"""
Frame addressing for SER files.

Pure arithmetic, no I/O: a frame index maps to a byte range inside the file
body purely from header geometry. Whether the source actually holds those
bytes is checked by the file handle, so an invalid index and a truncated file
are reported as different errors.
"""

from typing import Iterator, NamedTuple, Optional

from .errors import FrameIndexOutOfRange
from .header import HEADER_SIZE, Header


class FrameSpan(NamedTuple):
    """Byte range of one frame payload."""

    index: int
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


def check_frame_index(header: Header, index: int) -> None:
    """Raise FrameIndexOutOfRange unless 0 <= index < header.frame_count."""
    if not (0 <= index < header.frame_count):
        raise FrameIndexOutOfRange(index, header.frame_count)


def frame_offset(header: Header, index: int) -> FrameSpan:
    """
    Compute the byte range of a frame.

    Args:
        header: Parsed SER header
        index: Zero-based frame number

    Returns:
        FrameSpan: offset = HEADER_SIZE + index * image_frame_size,
        length = image_frame_size

    Raises:
        FrameIndexOutOfRange: If index is outside [0, frame_count)
    """
    check_frame_index(header, index)
    size = header.image_frame_size
    return FrameSpan(index, HEADER_SIZE + index * size, size)


def iter_frame_spans(
    header: Header, start: int = 0, stop: Optional[int] = None
) -> Iterator[FrameSpan]:
    """Yield spans for frames in [start, stop), clamped to the frame count."""
    if stop is None or stop > header.frame_count:
        stop = header.frame_count
    for index in range(max(0, start), stop):
        yield frame_offset(header, index)
