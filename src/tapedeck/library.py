"""Library ingestion for tapedeck.

Turns files selected by the user (or found in a folder) into Track
records. This is the only layer that touches the filesystem: it reads
each file's bytes once, hands them to the metadata facade, and applies
display defaults such as the placeholder artist.
"""

from __future__ import annotations

import logging
import mimetypes
import uuid
from collections.abc import Iterable
from pathlib import Path

from tqdm import tqdm

from .config import TapedeckConfig
from .metadata import READERS, extract_tags
from .models import TagBundle, Track

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = frozenset({".mp3", ".wav", ".flac", ".m4a"})

QUALITY_LABELS = {
    "FLAC": "LOSSLESS",
    "WAV": "LOSSLESS",
    "AIFF": "LOSSLESS",
    "M4A": "HIGH QUALITY",
    "AAC": "HIGH QUALITY",
    "MP3": "STEREO",
}
DEFAULT_QUALITY_LABEL = "NORMAL BIAS"


def _guessed_type(path: Path) -> str:
    mime, _ = mimetypes.guess_type(path.name)
    return mime or ""


def is_audio_file(path: Path) -> bool:
    return path.suffix.lower() in AUDIO_EXTENSIONS or _guessed_type(path).startswith("audio/")


def is_image_file(path: Path) -> bool:
    return _guessed_type(path).startswith("image/")


def quality_label(ext: str) -> str:
    """Return the deck label for a format.

    Examples:
        >>> quality_label("FLAC")
        'LOSSLESS'
        >>> quality_label("ogg")
        'NORMAL BIAS'
    """
    return QUALITY_LABELS.get(ext.upper(), DEFAULT_QUALITY_LABEL)


def find_cover(paths: Iterable[Path], keywords: Iterable[str]) -> Path | None:
    """Pick the cover image among the given files.

    Args:
        paths: Candidate files; non-images are ignored.
        keywords: Name fragments that mark a cover (e.g. "front", "folder").

    Returns:
        The first image whose lowercased name contains a keyword, else the
        first image, else None.
    """
    images = [p for p in paths if is_image_file(p)]
    keywords = [k.lower() for k in keywords]
    for image in images:
        name = image.name.lower()
        if any(k in name for k in keywords):
            return image
    return images[0] if images else None


def read_audio_bytes(path: Path, config: TapedeckConfig) -> bytes:
    """Read the bytes the tag reader for path needs.

    MP3 files are read only up to config.id3_read_limit bytes; FLAC files
    are read whole because Vorbis comments may follow large picture blocks.

    Raises:
        OSError: If the file cannot be read.
    """
    with path.open("rb") as f:
        if path.suffix.lower() == ".mp3":
            return f.read(config.id3_read_limit)
        return f.read()


def read_sidecar_lyrics(path: Path) -> str | None:
    """Return the contents of the .lrc file next to an audio file, if any."""
    sidecar = path.with_suffix(".lrc")
    if not sidecar.is_file():
        return None
    try:
        return sidecar.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read lyrics file %s: %s", sidecar, e)
        return None


def load_tags(path: Path, config: TapedeckConfig) -> TagBundle:
    """Read a file and extract its tags, never raising.

    Files with no tag reader are not opened at all.
    """
    if path.suffix.lower() not in READERS:
        return TagBundle()
    try:
        data = read_audio_bytes(path, config)
    except OSError as e:
        logger.warning("Failed to read %s: %s", path, e)
        return TagBundle()
    return extract_tags(path.name, data, config)


def load_track(
    path: Path,
    config: TapedeckConfig | None = None,
    cover_path: Path | None = None,
) -> Track:
    """Build a Track record for one audio file.

    Args:
        path: Audio file on disk.
        config: Ingestion settings (defaults if None).
        cover_path: Cover image shared by the folder.

    Returns:
        The Track. Missing tags fall back to config.default_artist and,
        when enabled, to lyrics from a .lrc sidecar.
    """
    if config is None:
        config = TapedeckConfig()

    tags = load_tags(path, config)
    lyrics = tags.lyrics
    if not lyrics and config.use_lrc_sidecars:
        lyrics = read_sidecar_lyrics(path) or lyrics

    ext = path.suffix[1:].upper() or "AUDIO"

    return Track(
        id=str(uuid.uuid4()),
        name=path.stem,
        path=path,
        format=ext,
        quality_label=quality_label(ext),
        artist=tags.artist or config.default_artist,
        album=tags.album,
        lyrics=lyrics,
        cover_path=cover_path,
    )


def collect_files(paths: Iterable[Path]) -> list[Path]:
    """Expand directories (recursively) into the files they contain."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file()))
        elif path.is_file():
            files.append(path)
        else:
            logger.warning("Skipping missing path %s", path)
    return files


def scan_library(
    paths: Iterable[Path],
    config: TapedeckConfig | None = None,
    show_progress: bool = False,
) -> list[Track]:
    """Build tracks for every audio file among paths.

    Each file is handled independently: a file whose tags cannot be read
    is still added, with default fields.

    Args:
        paths: Files and/or directories.
        config: Ingestion settings (defaults if None).
        show_progress: Show a tqdm progress bar.

    Returns:
        Tracks sorted by name, case-insensitively.
    """
    if config is None:
        config = TapedeckConfig()

    files = collect_files(paths)
    cover = find_cover(files, config.cover_keywords)
    audio_files = [f for f in files if is_audio_file(f)]
    logger.info("Found %d audio files", len(audio_files))

    tracks = [
        load_track(path, config, cover)
        for path in tqdm(
            audio_files, desc="Reading tags", unit="file", disable=not show_progress
        )
    ]
    return sorted(tracks, key=lambda t: t.name.casefold())
