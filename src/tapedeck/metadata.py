"""Metadata facade for tapedeck.

Chooses the tag reader for a file by its extension and guarantees that
extraction never fails: any error inside a reader is logged and turned
into an empty TagBundle, so a damaged file can still join the library.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import PurePath

from .config import TapedeckConfig
from .exceptions import UnsupportedFormatError
from .flac import parse_flac_tags
from .id3 import parse_id3_tags
from .models import TagBundle

logger = logging.getLogger(__name__)

TagReader = Callable[[bytes, TapedeckConfig], TagBundle]


def _read_flac(data: bytes, config: TapedeckConfig) -> TagBundle:
    return parse_flac_tags(data)


def _read_id3(data: bytes, config: TapedeckConfig) -> TagBundle:
    return parse_id3_tags(data, size_limit=config.id3_read_limit)


READERS: dict[str, TagReader] = {
    ".flac": _read_flac,
    ".mp3": _read_id3,
}


def reader_for(filename: str) -> TagReader:
    """Return the tag reader for a filename.

    Args:
        filename: File name or path; only the extension is inspected.

    Returns:
        The reader callable.

    Raises:
        UnsupportedFormatError: If no reader handles the extension.
    """
    suffix = PurePath(filename).suffix.lower()
    try:
        return READERS[suffix]
    except KeyError:
        raise UnsupportedFormatError(f"No tag reader for {filename!r}") from None


def extract_tags(
    filename: str,
    data: bytes,
    config: TapedeckConfig | None = None,
) -> TagBundle:
    """Extract tags from the bytes of one audio file.

    Args:
        filename: Name of the file, used to pick the reader.
        data: File contents. For MP3 files only the first
            config.id3_read_limit bytes are examined.
        config: Ingestion settings (defaults if None).

    Returns:
        TagBundle with the fields found. Empty for unsupported
        extensions or when the reader fails.
    """
    if config is None:
        config = TapedeckConfig()

    try:
        reader = reader_for(filename)
    except UnsupportedFormatError:
        logger.debug("Skipping metadata for %s", filename)
        return TagBundle()

    try:
        return reader(data, config)
    except Exception as e:
        logger.warning("Metadata parse failed for %s: %s", filename, e)
        return TagBundle()
