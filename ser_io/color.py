"""
SER color and byte-order semantics.

Color ids follow the published SER v3 table. The LittleEndian header flag is
historically inverted: the reference reader and the common capture programs
write 0 for little-endian 16-bit payloads, so 0 resolves to LITTLE_ENDIAN and
any nonzero value to BIG_ENDIAN. Writers that follow the literal meaning of
the flag can be handled by passing the opposite polarity.
"""

from enum import Enum

from .errors import UnknownColorId


class Bayer(Enum):
    """Color filter layout of the sensor, or full-color pixel order."""

    MONO = 0
    RGGB = 8
    GRBG = 9
    GBRG = 10
    BGGR = 11
    CYYM = 16
    YCMY = 17
    YMCY = 18
    MYYC = 19
    MYCY = 19  # alias used by some writers' documentation
    RGB = 100
    BGR = 101

    def __str__(self) -> str:
        return self.name

    @property
    def is_bayer(self) -> bool:
        return self not in (Bayer.MONO, Bayer.RGB, Bayer.BGR)

    @property
    def is_full_color(self) -> bool:
        return self in (Bayer.RGB, Bayer.BGR)


class Endianness(Enum):
    """Byte order of multi-byte samples in a frame payload."""

    LITTLE_ENDIAN = "little"
    BIG_ENDIAN = "big"

    def __str__(self) -> str:
        return self.value

    @property
    def numpy_prefix(self) -> str:
        return "<" if self is Endianness.LITTLE_ENDIAN else ">"


# Effective byte order for a raw flag of 0. Pinned by the reference header test.
ZERO_FLAG_ENDIANNESS = Endianness.LITTLE_ENDIAN

_COLOR_BY_CODE = {member.value: member for member in Bayer}


def decode_color(code: int) -> Bayer:
    """Map a raw color id to its Bayer member.

    Raises:
        UnknownColorId: If the code is not in the SER color table
    """
    try:
        return _COLOR_BY_CODE[code]
    except KeyError:
        raise UnknownColorId(code) from None


def encode_color(color: Bayer) -> int:
    return color.value


def channel_count(color: Bayer) -> int:
    """Number of samples stored per pixel: 3 for RGB/BGR, 1 otherwise."""
    return 3 if color.is_full_color else 1


def resolve_endianness(
    flag: int, zero_flag_means: Endianness = ZERO_FLAG_ENDIANNESS
) -> Endianness:
    """Resolve the raw LittleEndian header flag to an effective byte order.

    Args:
        flag: Raw flag value as stored in the header
        zero_flag_means: Byte order a flag of 0 stands for

    Returns:
        Endianness: The byte order of multi-byte payload samples
    """
    if flag == 0:
        return zero_flag_means
    if zero_flag_means is Endianness.LITTLE_ENDIAN:
        return Endianness.BIG_ENDIAN
    return Endianness.LITTLE_ENDIAN


def flag_for_endianness(
    endianness: Endianness, zero_flag_means: Endianness = ZERO_FLAG_ENDIANNESS
) -> int:
    """Raw header flag that resolves to the given byte order."""
    return 0 if endianness is zero_flag_means else 1
