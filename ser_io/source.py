"""
Byte Source I/O Boundary

All reads, seeks and writes against the caller's byte source go through the
helpers here, so every OSError surfaces as IoFailure naming the operation and
offset. The codec never opens files by itself at this level: a byte source is
any binary file-like object (io.BytesIO, a file opened "rb", "r+b" or "w+b").
"""

import io
from typing import Protocol

from .errors import IoFailure


class ByteSource(Protocol):
    """Seekable binary stream consumed by SerFile."""

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int: ...

    def tell(self) -> int: ...

    def read(self, size: int = -1) -> bytes: ...


class WritableByteSource(ByteSource, Protocol):
    def write(self, data: bytes) -> int: ...


def source_length(source: ByteSource) -> int:
    """Total length of the source in bytes."""
    try:
        return source.seek(0, io.SEEK_END)
    except (OSError, ValueError) as e:
        raise IoFailure("length query", None, str(e)) from e


def read_at(source: ByteSource, offset: int, length: int, operation: str) -> bytes:
    """
    Read up to ``length`` bytes starting at ``offset``.

    Short reads are returned as-is; deciding whether that means truncation is
    the caller's job.

    Raises:
        IoFailure: If the seek or read fails
    """
    try:
        source.seek(offset)
        chunks = []
        remaining = length
        while remaining > 0:
            chunk = source.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)
    except (OSError, ValueError) as e:
        raise IoFailure(operation, offset, str(e)) from e


def write_at(source: WritableByteSource, offset: int, data: bytes, operation: str) -> None:
    """
    Write all of ``data`` at ``offset``.

    Raises:
        IoFailure: If the seek or write fails
    """
    try:
        source.seek(offset)
        view = memoryview(data)
        while view:
            written = source.write(view)
            if written is None:
                # Raw non-blocking streams may write nothing.
                raise OSError("write would block")
            view = view[written:]
    except (OSError, ValueError) as e:
        raise IoFailure(operation, offset, str(e)) from e


def truncate_at(source: WritableByteSource, size: int, operation: str) -> None:
    truncate_fn = getattr(source, "truncate", None)
    if truncate_fn is None:
        return
    try:
        truncate_fn(size)
    except (OSError, ValueError) as e:
        raise IoFailure(operation, size, str(e)) from e


def flush(source: ByteSource, operation: str) -> None:
    flush_fn = getattr(source, "flush", None)
    if flush_fn is None:
        return
    try:
        flush_fn()
    except (OSError, ValueError) as e:
        raise IoFailure(operation, None, str(e)) from e
