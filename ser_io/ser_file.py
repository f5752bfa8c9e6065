"""
SER File Handle

This module provides the SerFile class, the single entry point that ties the
header model, frame addressing and trailer together over one open byte source.

Layout handled here:
    [0, 178)                       header
    [178, 178 + n * FS)            n frame payloads of FS bytes each
    [178 + n * FS, ... + n * 8)    optional trailer of n int64 tick timestamps
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional

import numpy as np

from .color import Endianness, resolve_endianness
from .config import CodecConfig, default_config
from .errors import FrameIndexOutOfRange, FrameSizeMismatch, IoFailure, TruncatedFile
from .frame_index import FrameSpan, frame_offset, iter_frame_spans
from .header import (
    FRAME_COUNT_OFFSET,
    HEADER_SIZE,
    Header,
    pack_frame_count,
    parse_header,
    serialize_header,
)
from .pixels import frame_to_array
from .source import (
    ByteSource,
    WritableByteSource,
    flush,
    read_at,
    source_length,
    truncate_at,
    write_at,
)
from .trailer import (
    TIMESTAMP_SIZE,
    encode_timestamps,
    read_timestamp,
    read_timestamps,
    trailer_offset,
)

logger = logging.getLogger(__name__)


class SerFile:
    """
    An open SER file.

    The header is parsed once and never mutated in place; frame spans and
    timestamps are computed per call. The handle shares one seek cursor with
    its source, so it is not thread-safe: use one handle per thread or
    serialize access externally. Appends need exclusive access.
    """

    def __init__(
        self,
        source: ByteSource,
        header: Header,
        *,
        writable: bool = False,
        config: Optional[CodecConfig] = None,
        owns_source: bool = False,
    ):
        self.config = config or default_config()
        self._source = source
        self._header = header
        self._writable = writable
        self._owns_source = owns_source
        self.endianness: Endianness = resolve_endianness(
            header.little_endian_flag, self.config.zero_flag_endianness
        )

    @classmethod
    def open(
        cls,
        source: ByteSource,
        *,
        writable: bool = False,
        config: Optional[CodecConfig] = None,
        owns_source: bool = False,
    ) -> SerFile:
        """
        Read and validate the header of an existing SER byte source.

        Raises:
            InvalidSignature: If the file id is missing or not accepted
            InvalidGeometry: If dimensions or pixel depth are invalid
            UnknownColorId: If the color id is not in the SER table
            TruncatedFile: If a SER signature is followed by a short header
            IoFailure: If the source cannot be read
        """
        cfg = config or default_config()
        header = parse_header(read_at(source, 0, HEADER_SIZE, "read header"), cfg)
        handle = cls(
            source, header, writable=writable, config=cfg, owns_source=owns_source
        )
        logger.info(
            "Opened SER: %dx%d, %d-bit %s (%s), %d frames, frame size %d bytes",
            header.image_width,
            header.image_height,
            header.pixel_depth,
            header.color,
            handle.endianness,
            header.frame_count,
            header.image_frame_size,
        )
        return handle

    @classmethod
    def create(
        cls,
        sink: WritableByteSource,
        header: Header,
        *,
        config: Optional[CodecConfig] = None,
        owns_source: bool = False,
    ) -> SerFile:
        """
        Start a new SER file with no frames and return a writable handle.

        The header's frame_count is reset to 0; it tracks appended frames.
        """
        cfg = config or default_config()
        raw = serialize_header(header.with_frame_count(0), cfg)
        write_at(sink, 0, raw, "write header")
        truncate_at(sink, HEADER_SIZE, "write header")
        flush(sink, "write header")

        # Re-read from the encoded bytes so truncated text matches the file
        written = parse_header(raw, cfg)
        logger.info(
            "Created SER: %dx%d, %d-bit %s, frame size %d bytes",
            written.image_width,
            written.image_height,
            written.pixel_depth,
            written.color,
            written.image_frame_size,
        )
        return cls(sink, written, writable=True, config=cfg, owns_source=owns_source)

    @property
    def header(self) -> Header:
        return self._header

    @property
    def frame_count(self) -> int:
        return self._header.frame_count

    @property
    def writable(self) -> bool:
        return self._writable

    def __len__(self) -> int:
        return self._header.frame_count

    @property
    def available_frames(self) -> int:
        """Number of declared frames whose payload is fully present."""
        size = self._header.image_frame_size
        stored = max(0, source_length(self._source) - HEADER_SIZE) // size
        return min(self._header.frame_count, stored)

    def frame_span(self, index: int) -> FrameSpan:
        return frame_offset(self._header, index)

    def read_frame(self, index: int) -> bytes:
        """
        Read the raw payload of one frame.

        Raises:
            FrameIndexOutOfRange: If index is outside [0, frame_count)
            TruncatedFile: If the source ends inside the frame
            IoFailure: If the source cannot be read
        """
        span = frame_offset(self._header, index)
        data = read_at(self._source, span.offset, span.length, "read_frame")
        if len(data) < span.length:
            raise TruncatedFile(span.end, span.offset + len(data), f"frame {index}")
        logger.debug("Read frame %d (%d bytes at %d)", index, span.length, span.offset)
        return data

    def read_frame_array(self, index: int) -> np.ndarray:
        """Read one frame as a numpy array in the resolved byte order."""
        return frame_to_array(self.read_frame(index), self._header, self.endianness)

    def iter_frames(self, start: int = 0, stop: Optional[int] = None) -> Iterator[bytes]:
        for span in iter_frame_spans(self._header, start, stop):
            yield self.read_frame(span.index)

    def read_timestamp(self, index: int) -> Optional[int]:
        """Trailer tick count for a frame, or None if no trailer entry exists."""
        return read_timestamp(self._source, self._header, index)

    def read_timestamps(self) -> Optional[List[int]]:
        return read_timestamps(self._source, self._header)

    def _require_writable(self, operation: str) -> None:
        if not self._writable:
            raise IoFailure(operation, None, "handle was opened read-only")

    def append_frame(self, data: bytes) -> None:
        """
        Append one frame payload and bump the header frame count.

        The frame goes right after the last existing frame. Bytes already
        stored past that point (a trailer) are moved to follow the new frame.
        Trailer entries for new frames are the caller's job; see
        append_timestamp.

        Moved bytes are written before the frame, and the header count is
        patched last. If a write fails, the old count and the moved bytes are
        put back and the source is cut back to its old length, so the file
        still reads as it did before the call.

        Raises:
            FrameSizeMismatch: If len(data) != image_frame_size
            InvalidHeaderField: If the new frame count does not fit in a uint32
            TruncatedFile: If the source does not hold all declared frames
            IoFailure: If the handle is read-only or a write fails
        """
        self._require_writable("append_frame")
        header = self._header
        expected = header.image_frame_size
        if len(data) != expected:
            raise FrameSizeMismatch(expected, len(data))

        new_count = header.frame_count + 1
        packed_count = pack_frame_count(new_count)

        end = HEADER_SIZE + header.image_data_size
        length = source_length(self._source)
        if length < end:
            raise TruncatedFile(end, length, "existing frames")

        tail = b""
        if length > end:
            tail = read_at(self._source, end, length - end, "append_frame")
            logger.debug("Moving %d trailing bytes past new frame", len(tail))

        try:
            if tail:
                write_at(self._source, end + expected, tail, "append_frame")
            write_at(self._source, end, bytes(data), "append_frame")
            write_at(self._source, FRAME_COUNT_OFFSET, packed_count, "append_frame")
            flush(self._source, "append_frame")
        except IoFailure:
            self._rollback_append(header, end, tail, length)
            raise

        self._header = header.with_frame_count(new_count)
        logger.debug("Appended frame %d at offset %d", new_count - 1, end)

    def _rollback_append(self, header: Header, end: int, tail: bytes, length: int) -> None:
        try:
            write_at(
                self._source,
                FRAME_COUNT_OFFSET,
                pack_frame_count(header.frame_count),
                "append_frame rollback",
            )
            if tail:
                write_at(self._source, end, tail, "append_frame rollback")
            truncate_at(self._source, length, "append_frame rollback")
            flush(self._source, "append_frame rollback")
        except IoFailure as e:
            logger.error("Could not restore file after failed append: %s", e)

    def append_timestamp(self, ticks: int) -> None:
        """
        Append the next trailer entry.

        Entries fill the trailer in frame order; at most frame_count entries
        can be stored.

        Raises:
            FrameIndexOutOfRange: If the trailer already holds frame_count entries
            TruncatedFile: If the source does not hold all declared frames
            IoFailure: If the handle is read-only or the write fails
        """
        self._require_writable("append_timestamp")
        header = self._header
        start = trailer_offset(header)
        length = source_length(self._source)
        if length < start:
            raise TruncatedFile(start, length, "frame data")

        present = (length - start) // TIMESTAMP_SIZE
        if present >= header.frame_count:
            raise FrameIndexOutOfRange(present, header.frame_count)

        offset = start + present * TIMESTAMP_SIZE
        write_at(self._source, offset, encode_timestamps([ticks]), "append_timestamp")
        flush(self._source, "append_timestamp")
        logger.debug("Appended timestamp for frame %d", present)

    def close(self) -> None:
        """Close the source if this handle opened it."""
        if self._owns_source:
            close_fn = getattr(self._source, "close", None)
            if close_fn is not None:
                close_fn()
            self._owns_source = False

    def __enter__(self) -> SerFile:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def open_ser(
    path: str | Path, *, writable: bool = False, config: Optional[CodecConfig] = None
) -> SerFile:
    """Open a SER file by path; the returned handle closes the file."""
    p = Path(path)
    try:
        f = p.open("r+b" if writable else "rb")
    except OSError as e:
        raise IoFailure(f"open {p}", None, str(e)) from e
    try:
        return SerFile.open(f, writable=writable, config=config, owns_source=True)
    except BaseException:
        f.close()
        raise


def create_ser(
    path: str | Path, header: Header, *, config: Optional[CodecConfig] = None
) -> SerFile:
    """Create (or overwrite) a SER file by path and return a writable handle."""
    p = Path(path)
    try:
        f = p.open("w+b")
    except OSError as e:
        raise IoFailure(f"create {p}", None, str(e)) from e
    try:
        return SerFile.create(f, header, config=config, owns_source=True)
    except BaseException:
        f.close()
        raise


def copy_ser(
    src: SerFile, sink: WritableByteSource, *, config: Optional[CodecConfig] = None
) -> SerFile:
    """
    Copy every frame of ``src`` into a new SER file written to ``sink``.

    Trailer timestamps are copied when ``src`` has a complete trailer.
    """
    dst = SerFile.create(sink, src.header, config=config or src.config)
    for frame in src.iter_frames():
        dst.append_frame(frame)

    timestamps = src.read_timestamps()
    if timestamps is not None:
        for ticks in timestamps:
            dst.append_timestamp(ticks)

    logger.info(
        "Copied %d frames (%s timestamps)",
        dst.frame_count,
        "with" if timestamps is not None else "without",
    )
    return dst
