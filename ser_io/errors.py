"""
Exception hierarchy for the SER codec.

Header problems derive from ValueError, index problems from IndexError, so
callers that only care about the broad category can catch the builtin.
Everything derives from SerError.
"""

from typing import Optional


class SerError(Exception):
    """Base exception for all SER codec errors."""

    pass


class HeaderError(SerError, ValueError):
    """Base exception for malformed header content."""

    pass


class InvalidSignature(HeaderError):
    """Raised when the file id is not an accepted SER signature."""

    def __init__(self, file_id: bytes):
        super().__init__(f"Not a SER file: unexpected signature {file_id!r}")
        self.file_id = file_id


class InvalidGeometry(HeaderError):
    """Raised for non-positive dimensions or an unsupported pixel depth."""

    pass


class UnknownColorId(HeaderError):
    """Raised when a color id has no Bayer/color mapping."""

    def __init__(self, color_id: int):
        super().__init__(f"Unknown SER color id {color_id}")
        self.color_id = color_id


class InvalidHeaderField(HeaderError):
    """Raised when a text field does not fit its fixed slot."""

    pass


class FrameIndexOutOfRange(SerError, IndexError):
    """Raised when a frame index lies outside [0, frame_count)."""

    def __init__(self, index: int, frame_count: int):
        if frame_count > 0:
            valid = f"valid range is 0..{frame_count - 1}"
        else:
            valid = "file has no frames"
        super().__init__(f"Frame index {index} out of range ({valid})")
        self.index = index
        self.frame_count = frame_count


class TruncatedFile(SerError):
    """Raised when the byte source is shorter than the header requires."""

    def __init__(self, expected: int, actual: int, what: str = "data"):
        super().__init__(
            f"Truncated SER file: {what} needs {expected} bytes, source has {actual}"
        )
        self.expected = expected
        self.actual = actual


class FrameSizeMismatch(SerError):
    """Raised when a frame payload does not match the header frame size."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Cannot write frame with {actual} bytes when header specifies "
            f"frame size as {expected} bytes"
        )
        self.expected = expected
        self.actual = actual


class IoFailure(SerError):
    """Raised when the underlying byte source fails a read, seek or write."""

    def __init__(self, operation: str, offset: Optional[int], reason: str):
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"{operation} failed{where}: {reason}")
        self.operation = operation
        self.offset = offset
