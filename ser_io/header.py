from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, replace
from typing import Optional

from .color import Bayer, Endianness, channel_count, decode_color, resolve_endianness
from .config import SIGNATURE, SIGNATURE_SIZE, CodecConfig, default_config
from .errors import InvalidGeometry, InvalidHeaderField, InvalidSignature, TruncatedFile

logger = logging.getLogger(__name__)


HEADER_SIZE = 178
TEXT_FIELD_SIZE = 40
FRAME_COUNT_OFFSET = 38
MAX_PIXEL_DEPTH = 32

# < little-endian; 14s FileID, i LuID, i ColorID, i LittleEndian,
# I Width, I Height, I PixelDepthPerPlane, I FrameCount,
# 40s Observer, 40s Instrument, 40s Telescope, q DateTime, q DateTimeUTC
_HEADER_FORMAT = struct.Struct("<14siiiIIII40s40s40sqq")
_FRAME_COUNT_FORMAT = struct.Struct("<I")


@dataclass(frozen=True)
class Header:
    image_width: int
    image_height: int
    pixel_depth: int
    frame_count: int = 0
    color: Bayer = Bayer.MONO
    little_endian_flag: int = 0
    lu_id: int = 0
    observer: str = ""
    instrument: str = ""
    telescope: str = ""
    date_time: int = 0
    date_time_utc: int = 0
    file_id: str = SIGNATURE

    def __post_init__(self) -> None:
        if self.image_width <= 0 or self.image_height <= 0:
            raise InvalidGeometry(
                f"Image size must be positive, got {self.image_width}x{self.image_height}"
            )
        if not (1 <= self.pixel_depth <= MAX_PIXEL_DEPTH):
            raise InvalidGeometry(
                f"Pixel depth must be 1-{MAX_PIXEL_DEPTH} bits, got {self.pixel_depth}"
            )
        if self.frame_count < 0:
            raise InvalidGeometry(f"Frame count must be >= 0, got {self.frame_count}")

    @property
    def color_id(self) -> int:
        return self.color.value

    @property
    def bytes_per_pixel(self) -> int:
        """Bytes per sample: ceil(pixel_depth / 8)."""
        return max(1, (self.pixel_depth + 7) // 8)

    @property
    def channel_count(self) -> int:
        return channel_count(self.color)

    @property
    def image_frame_size(self) -> int:
        """Number of bytes in one frame payload."""
        return (
            self.image_width
            * self.image_height
            * self.bytes_per_pixel
            * self.channel_count
        )

    @property
    def image_data_size(self) -> int:
        """Total number of payload bytes for all declared frames."""
        return self.frame_count * self.image_frame_size

    @property
    def endianness(self) -> Endianness:
        """Payload byte order under the default flag polarity only.

        A header does not know the codec config; SerFile.endianness applies
        CodecConfig.zero_flag_endianness and is the value to decode with.
        """
        return resolve_endianness(self.little_endian_flag)

    def with_frame_count(self, frame_count: int) -> Header:
        return replace(self, frame_count=frame_count)


def _decode_text(raw: bytes, encoding: str) -> str:
    return raw.split(b"\x00", 1)[0].rstrip(b" ").decode(encoding, errors="replace")


def _encode_text(name: str, value: str, cfg: CodecConfig) -> bytes:
    try:
        raw = value.encode(cfg.text_encoding)
    except UnicodeEncodeError as e:
        raise InvalidHeaderField(
            f"Header field '{name}' is not representable in {cfg.text_encoding}"
        ) from e

    if len(raw) > TEXT_FIELD_SIZE:
        if cfg.text_overflow == "error":
            raise InvalidHeaderField(
                f"Header field '{name}' is {len(raw)} bytes, limit is {TEXT_FIELD_SIZE}"
            )
        logger.warning(
            "Truncating header field '%s' from %d to %d bytes",
            name,
            len(raw),
            TEXT_FIELD_SIZE,
        )
        raw = raw[:TEXT_FIELD_SIZE]
    return raw.ljust(TEXT_FIELD_SIZE, b"\x00")


def parse_header(data: bytes, config: Optional[CodecConfig] = None) -> Header:
    """Parse the fixed 178-byte SER header at the start of ``data``.

    The signature is checked before anything else, including the length, so a
    short non-SER input is reported as such. Integer fields are always
    little-endian; the LittleEndian flag only describes pixel payloads.

    Raises:
        InvalidSignature: If the file id is missing or not accepted
        TruncatedFile: If a valid signature is followed by too few bytes
        UnknownColorId: If the color id is not in the SER table
        InvalidGeometry: If dimensions or pixel depth are invalid
    """
    cfg = config or default_config()
    file_id = bytes(data[:SIGNATURE_SIZE])
    if len(file_id) < SIGNATURE_SIZE or not cfg.accepts_signature(file_id):
        raise InvalidSignature(file_id)

    if len(data) < HEADER_SIZE:
        raise TruncatedFile(HEADER_SIZE, len(data), "header")

    (
        _,
        lu_id,
        color_id,
        little_endian_flag,
        width,
        height,
        pixel_depth,
        frame_count,
        observer,
        instrument,
        telescope,
        date_time,
        date_time_utc,
    ) = _HEADER_FORMAT.unpack(bytes(data[:HEADER_SIZE]))

    return Header(
        image_width=width,
        image_height=height,
        pixel_depth=pixel_depth,
        frame_count=frame_count,
        color=decode_color(color_id),
        little_endian_flag=little_endian_flag,
        lu_id=lu_id,
        observer=_decode_text(observer, cfg.text_encoding),
        instrument=_decode_text(instrument, cfg.text_encoding),
        telescope=_decode_text(telescope, cfg.text_encoding),
        date_time=date_time,
        date_time_utc=date_time_utc,
        file_id=file_id.rstrip(b"\x00 ").decode("ascii"),
    )


def serialize_header(header: Header, config: Optional[CodecConfig] = None) -> bytes:
    """Encode a Header into exactly HEADER_SIZE bytes.

    Text fields are NUL-padded to 40 bytes. Over-long text is truncated or
    rejected according to ``config.text_overflow``.
    """
    cfg = config or default_config()
    file_id = header.file_id.encode("ascii")
    if len(file_id) > SIGNATURE_SIZE:
        raise InvalidHeaderField(
            f"File id '{header.file_id}' exceeds {SIGNATURE_SIZE} bytes"
        )

    try:
        buf = _HEADER_FORMAT.pack(
            file_id.ljust(SIGNATURE_SIZE, b"\x00"),
            header.lu_id,
            header.color_id,
            header.little_endian_flag,
            header.image_width,
            header.image_height,
            header.pixel_depth,
            header.frame_count,
            _encode_text("observer", header.observer, cfg),
            _encode_text("instrument", header.instrument, cfg),
            _encode_text("telescope", header.telescope, cfg),
            header.date_time,
            header.date_time_utc,
        )
    except struct.error as e:
        raise InvalidHeaderField(f"Header value out of range: {e}") from e
    return buf


def pack_frame_count(frame_count: int) -> bytes:
    """Encode the FrameCount field for an in-place patch at FRAME_COUNT_OFFSET.

    Raises:
        InvalidHeaderField: If frame_count does not fit in a uint32
    """
    try:
        return _FRAME_COUNT_FORMAT.pack(frame_count)
    except struct.error as e:
        raise InvalidHeaderField(f"Frame count {frame_count} out of range: {e}") from e
