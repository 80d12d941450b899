"""FLAC Vorbis comment reader for tapedeck.

A FLAC stream starts with the ASCII signature ``fLaC`` followed by a
chain of metadata blocks. Each block has a 4-byte header:

    byte 0     bit 7 = last-block flag, bits 0-6 = block type
    bytes 1-3  payload length, 24-bit big-endian

Block type 4 holds Vorbis comments, whose own integers are little-endian:

    u32 vendor length, vendor string
    u32 comment count
    count x (u32 length, UTF-8 "KEY=VALUE")

Every other block (STREAMINFO, PADDING, SEEKTABLE, PICTURE, ...) is
skipped as an opaque span of its declared length.
"""

import logging

from .binary import read_bytes, read_u8, read_u24_be, read_u32_le
from .exceptions import TruncatedDataError
from .models import ParseStatus, TagBundle, TagReadResult

logger = logging.getLogger(__name__)

FLAC_SIGNATURE = b"fLaC"
BLOCK_HEADER_SIZE = 4
BLOCK_TYPE_VORBIS_COMMENT = 4
LAST_BLOCK_FLAG = 0x80
BLOCK_TYPE_MASK = 0x7F

# Keys checked in order for the lyrics field.
LYRICS_KEYS = ("LYRICS", "UNSYNCED LYRICS")


def parse_flac_tags(data: bytes) -> TagBundle:
    """Extract lyrics, artist and album from a FLAC buffer.

    Never raises on malformed input: a missing signature gives an empty
    bundle, a truncated stream gives whatever was read before the
    truncation.

    Args:
        data: Full or truncated contents of a .flac file.

    Returns:
        TagBundle with the fields that were found.

    Examples:
        >>> parse_flac_tags(b"ID3...")
        TagBundle(lyrics=None, artist=None, album=None)
    """
    return read_flac_comments(data).tags


def read_flac_comments(data: bytes) -> TagReadResult:
    """Walk the FLAC metadata blocks and collect Vorbis comments.

    Args:
        data: Full or truncated contents of a .flac file.

    Returns:
        TagReadResult with the collected comments and a status telling
        how the walk ended.
    """
    if data[: len(FLAC_SIGNATURE)] != FLAC_SIGNATURE:
        return TagReadResult(status=ParseStatus.NOT_FOUND)

    comments: dict[str, str] = {}
    status = ParseStatus.OK
    offset = len(FLAC_SIGNATURE)
    is_last = False

    while not is_last and offset < len(data):
        try:
            header = read_u8(data, offset)
            length = read_u24_be(data, offset + 1)
        except TruncatedDataError:
            logger.debug("FLAC block header truncated at offset %d", offset)
            status = ParseStatus.TRUNCATED
            break

        is_last = bool(header & LAST_BLOCK_FLAG)
        block_type = header & BLOCK_TYPE_MASK
        offset += BLOCK_HEADER_SIZE
        block_end = offset + length
        truncated = block_end > len(data)

        if block_type == BLOCK_TYPE_VORBIS_COMMENT:
            try:
                _read_vorbis_comments(data[offset:block_end], comments)
            except TruncatedDataError as e:
                logger.debug("Vorbis comment block cut short: %s", e)
                if not truncated:
                    status = ParseStatus.MALFORMED

        if truncated:
            logger.debug(
                "FLAC block type %d declares %d bytes, only %d remain",
                block_type,
                length,
                len(data) - offset,
            )
            status = ParseStatus.TRUNCATED
            break

        offset = block_end

    return TagReadResult(status=status, tags=_comments_to_tags(comments), comments=comments)


def _read_vorbis_comments(payload: bytes, comments: dict[str, str]) -> None:
    """Parse a Vorbis comment block payload into comments.

    Entries are added as they are read, so a payload that runs out
    part-way still leaves the earlier entries in place.

    Args:
        payload: The block payload (possibly shorter than declared).
        comments: Mapping to update; later duplicate keys overwrite.

    Raises:
        TruncatedDataError: If a length field points past the payload.
    """
    vendor_length = read_u32_le(payload, 0)
    pos = 4 + vendor_length

    count = read_u32_le(payload, pos)
    pos += 4

    for _ in range(count):
        entry_length = read_u32_le(payload, pos)
        pos += 4
        raw = read_bytes(payload, pos, entry_length)
        pos += entry_length

        try:
            entry = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping Vorbis comment that is not valid UTF-8")
            continue

        key, sep, value = entry.partition("=")
        if not sep:
            continue
        comments[key.upper()] = value


def _comments_to_tags(comments: dict[str, str]) -> TagBundle:
    lyrics = None
    for key in LYRICS_KEYS:
        lyrics = lyrics or comments.get(key)
    return TagBundle(
        lyrics=lyrics,
        artist=comments.get("ARTIST"),
        album=comments.get("ALBUM"),
    )
