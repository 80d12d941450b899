"""Bounds-checked integer and slice reads over byte buffers.

Tag containers mix big-endian, little-endian and syncsafe integers in
the same file. Each helper here names its encoding explicitly and
raises TruncatedDataError rather than returning a short read.
"""

from .exceptions import TruncatedDataError


def read_bytes(data: bytes, offset: int, length: int) -> bytes:
    """Return exactly length bytes starting at offset.

    Args:
        data: Buffer to read from.
        offset: Start position.
        length: Number of bytes wanted.

    Returns:
        The requested slice.

    Raises:
        TruncatedDataError: If the slice would extend past the buffer.
    """
    if offset < 0 or length < 0 or offset + length > len(data):
        raise TruncatedDataError(
            f"Need {length} bytes at offset {offset}, buffer has {len(data)}"
        )
    return data[offset : offset + length]


def read_u8(data: bytes, offset: int) -> int:
    return read_bytes(data, offset, 1)[0]


def read_u24_be(data: bytes, offset: int) -> int:
    """Read a 24-bit big-endian unsigned integer (FLAC block length, ID3v2.2 frame size)."""
    b = read_bytes(data, offset, 3)
    return (b[0] << 16) | (b[1] << 8) | b[2]


def read_u32_be(data: bytes, offset: int) -> int:
    """Read a 32-bit big-endian unsigned integer (ID3v2.3 frame size)."""
    return int.from_bytes(read_bytes(data, offset, 4), "big")


def read_u32_le(data: bytes, offset: int) -> int:
    """Read a 32-bit little-endian unsigned integer (Vorbis comment lengths)."""
    return int.from_bytes(read_bytes(data, offset, 4), "little")


def read_syncsafe32(data: bytes, offset: int) -> int:
    """Read a 28-bit syncsafe integer stored in 4 bytes.

    Only the low 7 bits of each byte carry value, so the high bit of
    every byte is ignored.

    Examples:
        >>> read_syncsafe32(bytes([0x00, 0x00, 0x02, 0x01]), 0)
        257
    """
    b = read_bytes(data, offset, 4)
    return (
        ((b[0] & 0x7F) << 21)
        | ((b[1] & 0x7F) << 14)
        | ((b[2] & 0x7F) << 7)
        | (b[3] & 0x7F)
    )
