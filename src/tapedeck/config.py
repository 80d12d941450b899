"""Configuration file management for tapedeck.

This module provides loading and saving of .tapedeck.json files that
tune how a music folder is ingested. The config file is a JSON file
stored inside the library directory.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .id3 import DEFAULT_SIZE_LIMIT

logger = logging.getLogger(__name__)

# Current config file version
CONFIG_VERSION = 1

CONFIG_FILENAME = ".tapedeck.json"

DEFAULT_ARTIST = "Unknown Artist"

DEFAULT_COVER_KEYWORDS = ["front", "cover", "folder"]


@dataclass
class TapedeckConfig:
    """Configuration stored in a .tapedeck.json file.

    Attributes:
        version: Config file format version.
        id3_read_limit: Number of leading bytes of an MP3 file handed to
            the ID3 reader.
        default_artist: Artist shown for tracks whose tags carry none.
        cover_keywords: Substrings that mark an image as the folder's cover.
        use_lrc_sidecars: Read lyrics from a same-named .lrc file when the
            audio tags carry none.
    """

    version: int = CONFIG_VERSION
    id3_read_limit: int = DEFAULT_SIZE_LIMIT
    default_artist: str = DEFAULT_ARTIST
    cover_keywords: list[str] = field(default_factory=lambda: list(DEFAULT_COVER_KEYWORDS))
    use_lrc_sidecars: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "id3_read_limit": self.id3_read_limit,
            "default_artist": self.default_artist,
            "cover_keywords": self.cover_keywords,
            "use_lrc_sidecars": self.use_lrc_sidecars,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TapedeckConfig:
        """Create from dictionary (parsed JSON).

        Args:
            data: Dictionary from parsed JSON.

        Returns:
            TapedeckConfig instance.

        Raises:
            TypeError: If data is not a dictionary.
            ValueError: If a field holds a value of the wrong shape.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected dict, got {type(data).__name__}")

        version = data.get("version", CONFIG_VERSION)
        if not _is_positive_int(version):
            raise ValueError(f"Invalid version: {version!r}")

        id3_read_limit = data.get("id3_read_limit", DEFAULT_SIZE_LIMIT)
        if not _is_positive_int(id3_read_limit):
            raise ValueError(f"Invalid id3_read_limit: {id3_read_limit!r}")

        default_artist = data.get("default_artist", DEFAULT_ARTIST)
        if not isinstance(default_artist, str):
            raise ValueError(f"Invalid default_artist: {default_artist!r}")

        # A bare string would be iterated character by character
        cover_keywords = data.get("cover_keywords", list(DEFAULT_COVER_KEYWORDS))
        if not isinstance(cover_keywords, list) or not all(
            isinstance(k, str) for k in cover_keywords
        ):
            raise ValueError(f"Invalid cover_keywords: {cover_keywords!r}")

        use_lrc_sidecars = data.get("use_lrc_sidecars", True)
        if not isinstance(use_lrc_sidecars, bool):
            raise ValueError(f"Invalid use_lrc_sidecars: {use_lrc_sidecars!r}")

        return cls(
            version=version,
            id3_read_limit=id3_read_limit,
            default_artist=default_artist,
            cover_keywords=list(cover_keywords),
            use_lrc_sidecars=use_lrc_sidecars,
        )


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def get_config_path(library_dir: Path) -> Path:
    """Get the config file path for a library directory.

    Args:
        library_dir: Directory holding the audio files.

    Returns:
        Path to the .tapedeck.json file inside it.
    """
    return library_dir / CONFIG_FILENAME


def load_config(library_dir: Path) -> TapedeckConfig | None:
    """Load the library settings of a folder.

    A broken file never stops a scan: the problem is logged and the
    caller falls back to defaults.

    Args:
        library_dir: Directory holding the audio files.

    Returns:
        TapedeckConfig if the folder has a valid .tapedeck.json, None otherwise.
    """
    config_path = get_config_path(library_dir)
    if not config_path.is_file():
        logger.debug("No library config in %s", library_dir)
        return None

    try:
        # Hand-edited files often carry a UTF-8 BOM
        data = json.loads(config_path.read_text(encoding="utf-8-sig"))
        config = TapedeckConfig.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        # JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.warning("Ignoring library config %s, using defaults: %s", config_path, e)
        return None

    if config.version > CONFIG_VERSION:
        logger.warning(
            "Library config %s has version %d, newer than supported %d",
            config_path,
            config.version,
            CONFIG_VERSION,
        )
    logger.info("Using library config %s", config_path)
    return config


def save_config(library_dir: Path, config: TapedeckConfig) -> bool:
    """Write the library settings of a folder.

    The JSON is written to a temporary file beside the target and moved
    into place, so an interrupted write never leaves a truncated
    .tapedeck.json behind.

    Args:
        library_dir: Directory holding the audio files.
        config: Configuration to save.

    Returns:
        True if saved successfully, False otherwise.
    """
    config_path = get_config_path(library_dir)
    tmp_path = config_path.with_name(config_path.name + ".tmp")

    try:
        tmp_path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
        tmp_path.replace(config_path)
    except OSError as e:
        logger.warning("Could not write library config %s: %s", config_path, e)
        tmp_path.unlink(missing_ok=True)
        return False

    logger.info("Wrote library config %s", config_path)
    return True
