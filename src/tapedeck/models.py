"""Domain models for tapedeck.

Immutable data classes representing parsed tags, timed lyric lines
and the track records built from them.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# Time value of a lyric line that carries no timestamp.
UNSYNCED_TIME = -1.0


class ParseStatus(Enum):
    """Outcome of a low-level tag read.

    The public parsers collapse every status to "fields present or not",
    but the readers keep them apart so that tests and diagnostics can
    tell an untagged file from a damaged one.

    Values:
        OK: The container was walked to its end.
        NOT_FOUND: The signature was missing; nothing was read.
        TRUNCATED: A declared length ran past the available data.
        MALFORMED: The structure was present but invalid.
    """

    OK = "ok"
    NOT_FOUND = "not_found"
    TRUNCATED = "truncated"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class TagBundle:
    """Tags extracted from one audio file.

    A field is None unless a concrete byte sequence for it was located.
    Placeholder values ("Unknown Artist") belong to the display layer,
    never to this record.
    """

    lyrics: str | None = None
    artist: str | None = None
    album: str | None = None

    def as_dict(self) -> dict[str, str]:
        """Return only the fields that were found."""
        result: dict[str, str] = {}
        if self.lyrics is not None:
            result["lyrics"] = self.lyrics
        if self.artist is not None:
            result["artist"] = self.artist
        if self.album is not None:
            result["album"] = self.album
        return result

    @property
    def is_empty(self) -> bool:
        return not self.as_dict()


@dataclass(frozen=True)
class TagReadResult:
    """Result of walking a tag container.

    Attributes:
        status: How the walk ended.
        tags: The fields surfaced to callers.
        comments: Every KEY=VALUE pair collected (FLAC only), keys upper-cased.
    """

    status: ParseStatus
    tags: TagBundle = field(default_factory=TagBundle)
    comments: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LrcLine:
    """A single lyric line.

    Attributes:
        time: Seconds from the start of the track, or UNSYNCED_TIME when
            the source line had no timestamp.
        text: The display text with the timestamp tag removed.
    """

    time: float
    text: str

    @property
    def is_synced(self) -> bool:
        return self.time != UNSYNCED_TIME


@dataclass(frozen=True)
class LyricsView:
    """Lyrics prepared for display.

    When is_synced is False the line times are synthetic indices used
    for ordering only and must not drive position-based highlighting.
    """

    is_synced: bool
    lines: tuple[LrcLine, ...]


@dataclass(frozen=True)
class Track:
    """A playable track in the library.

    Built by the ingestion layer from a file on disk and the tags
    the metadata facade found in it.
    """

    id: str
    name: str
    path: Path
    format: str
    quality_label: str
    artist: str
    album: str | None = None
    lyrics: str | None = None
    cover_path: Path | None = None
    duration: float = 0.0
