"""ID3v2 unsynchronised-lyrics reader for tapedeck.

Only the lyrics frame is extracted: ``USLT`` in ID3v2.3/2.4 and ``ULT``
in ID3v2.2. All other frames are skipped by their declared size.

Header layout (10 bytes):

    bytes 0-2  "ID3"
    byte 3     major version (2, 3 or 4)
    byte 4     revision
    byte 5     flags
    bytes 6-9  tag size, 28-bit syncsafe, excluding this header

Frame headers differ per version:

    v2.2   3-byte id, 24-bit big-endian size            (6 bytes)
    v2.3   4-byte id, 32-bit big-endian size, 2 flags   (10 bytes)
    v2.4   4-byte id, 28-bit syncsafe size, 2 flags     (10 bytes)

Reading is limited to a prefix of the file (300,000 bytes by default).
Lyrics frames stored past that prefix are not found; this is an accepted
approximation for large embedded artwork preceding the lyrics.
"""

import logging

from .binary import read_bytes, read_syncsafe32, read_u8, read_u24_be, read_u32_be
from .exceptions import TruncatedDataError
from .models import ParseStatus, TagBundle, TagReadResult

logger = logging.getLogger(__name__)

ID3_SIGNATURE = b"ID3"
ID3_HEADER_SIZE = 10
DEFAULT_SIZE_LIMIT = 300_000
SUPPORTED_VERSIONS = (2, 3, 4)
LYRICS_FRAME_IDS = frozenset({"USLT", "ULT"})
LATIN1_FALLBACK = "latin-1"

# Text encoding byte -> (codec, code unit size)
# Encoding 0 is nominally ISO-8859-1, but many taggers store UTF-8 under it.
TEXT_ENCODINGS = {
    0: ("utf-8", 1),
    1: ("utf-16", 2),
    2: ("utf-16-be", 2),
    3: ("utf-8", 1),
}

# Encoding byte plus 3-byte language code
_LYRICS_PREFIX_SIZE = 4


def parse_id3_tags(data: bytes, size_limit: int = DEFAULT_SIZE_LIMIT) -> TagBundle:
    """Extract unsynchronised lyrics from an ID3v2-tagged buffer.

    Never raises on malformed input.

    Args:
        data: Contents (or a prefix) of an .mp3 file.
        size_limit: Number of leading bytes to examine.

    Returns:
        TagBundle with only the lyrics field possibly set.
    """
    return read_id3_lyrics(data, size_limit).tags


def read_id3_lyrics(data: bytes, size_limit: int = DEFAULT_SIZE_LIMIT) -> TagReadResult:
    """Walk ID3v2 frames and return the last lyrics frame found.

    Args:
        data: Contents (or a prefix) of an .mp3 file.
        size_limit: Number of leading bytes to examine.

    Returns:
        TagReadResult with the lyrics and a status telling how the walk ended.
    """
    data = data[:size_limit]
    if data[: len(ID3_SIGNATURE)] != ID3_SIGNATURE:
        return TagReadResult(status=ParseStatus.NOT_FOUND)

    try:
        version = read_u8(data, 3)
        tag_size = read_syncsafe32(data, 6)
    except TruncatedDataError:
        logger.debug("ID3 header truncated (%d bytes)", len(data))
        return TagReadResult(status=ParseStatus.TRUNCATED)

    if version not in SUPPORTED_VERSIONS:
        logger.debug("Unsupported ID3v2 major version %d", version)
        return TagReadResult(status=ParseStatus.MALFORMED)

    header_size = 6 if version == 2 else 10
    end = min(ID3_HEADER_SIZE + tag_size, len(data))
    offset = ID3_HEADER_SIZE
    status = ParseStatus.OK
    lyrics: str | None = None

    while offset + header_size <= end:
        frame_id, frame_size = _read_frame_header(data, offset, version)
        if not frame_id.strip("\x00"):
            # Padding: no more frames
            break

        offset += header_size
        frame_end = offset + frame_size
        if frame_end > end:
            logger.debug(
                "ID3 frame %r declares %d bytes, only %d remain in tag",
                frame_id,
                frame_size,
                end - offset,
            )
            status = ParseStatus.TRUNCATED
            break

        if frame_id in LYRICS_FRAME_IDS:
            text = decode_lyrics_frame(data[offset:frame_end])
            if text is not None:
                lyrics = text

        offset = frame_end

    return TagReadResult(status=status, tags=TagBundle(lyrics=lyrics))


def _read_frame_header(data: bytes, offset: int, version: int) -> tuple[str, int]:
    """Read a frame id and size.

    The two 4-byte-id versions encode the size differently: ID3v2.3
    uses a plain big-endian integer, ID3v2.4 a syncsafe one.
    """
    if version == 2:
        frame_id = read_bytes(data, offset, 3).decode("latin-1")
        return frame_id, read_u24_be(data, offset + 3)

    frame_id = read_bytes(data, offset, 4).decode("latin-1")
    if version == 4:
        return frame_id, read_syncsafe32(data, offset + 4)
    return frame_id, read_u32_be(data, offset + 4)


def decode_lyrics_frame(payload: bytes) -> str | None:
    """Decode the text of a USLT/ULT frame payload.

    Payload layout: encoding byte, 3-byte language code, content
    descriptor terminated by a NUL in the frame's encoding, lyric text.

    Args:
        payload: The frame body.

    Returns:
        The lyric text with trailing NULs removed, or None if the frame
        is too short, uses an unknown encoding, or fails to decode.

    Examples:
        >>> decode_lyrics_frame(b"\\x03engdesc\\x00Hello")
        'Hello'
    """
    if len(payload) < _LYRICS_PREFIX_SIZE:
        return None

    encoding = payload[0]
    if encoding not in TEXT_ENCODINGS:
        logger.debug("Unknown ID3 text encoding %d", encoding)
        return None
    codec, unit = TEXT_ENCODINGS[encoding]

    body = payload[_LYRICS_PREFIX_SIZE:]
    terminator = _find_terminator(body, unit)
    if terminator < 0:
        logger.debug("Lyrics frame descriptor has no terminator")
        return None

    raw = body[terminator + unit :]
    try:
        text = raw.decode(codec)
    except UnicodeDecodeError:
        if encoding != 0:
            logger.debug("Lyrics frame is not valid %s", codec)
            return None
        text = raw.decode(LATIN1_FALLBACK)

    return text.rstrip("\x00")


def _find_terminator(body: bytes, unit: int) -> int:
    """Return the offset of the first NUL code unit, or -1.

    For two-byte encodings the terminator is a pair of zero bytes
    starting on an even offset; a zero high byte inside a character
    does not count.
    """
    if unit == 1:
        return body.find(b"\x00")

    for i in range(0, len(body) - 1, 2):
        if body[i] == 0 and body[i + 1] == 0:
            return i
    return -1
