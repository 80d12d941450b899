"""Output formatting for tapedeck.

Pure functions for converting tags and tracks to text.
These functions have no side effects and are easily testable.
"""

import math

from .models import TagBundle, Track

# Lyrics longer than this are shortened in tables.
LYRICS_PREVIEW_LENGTH = 40


def format_time(seconds: float) -> str:
    """Format seconds as M:SS.

    Examples:
        >>> format_time(65.9)
        '1:05'
        >>> format_time(float("nan"))
        '0:00'
    """
    if math.isnan(seconds):
        return "0:00"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def _preview(text: str | None) -> str:
    if not text:
        return ""
    first = text.strip().split("\n", 1)[0].strip()
    if len(first) > LYRICS_PREVIEW_LENGTH:
        first = first[: LYRICS_PREVIEW_LENGTH - 3] + "..."
    return first.replace("|", "\\|")


def format_tag_bundle(filename: str, tags: TagBundle) -> str:
    """Format the tags of one file as indented key/value lines.

    Example:
        >>> print(format_tag_bundle("a.flac", TagBundle(artist="X")))
        a.flac
          artist: X
    """
    lines = [filename]
    if tags.is_empty:
        lines.append("  (no tags found)")
    for key, value in tags.as_dict().items():
        lines.append(f"  {key}: {_preview(value) if key == 'lyrics' else value}")
    return "\n".join(lines)


def format_track_table(tracks: list[Track]) -> str:
    """Format tracks as a markdown table.

    Example:
        >>> from pathlib import Path
        >>> t = Track(id="1", name="Song", path=Path("Song.mp3"), format="MP3",
        ...           quality_label="STEREO", artist="Unknown Artist")
        >>> print(format_track_table([t]))
        | # | Name | Artist | Format | Label | Lyrics |
        |---|------|--------|--------|-------|--------|
        | 1 | Song | Unknown Artist | MP3 | STEREO | |
    """
    lines = [
        "| # | Name | Artist | Format | Label | Lyrics |",
        "|---|------|--------|--------|-------|--------|",
    ]

    for i, track in enumerate(tracks, start=1):
        lyrics = _preview(track.lyrics)
        lyrics_cell = f" {lyrics} " if lyrics else " "
        lines.append(
            f"| {i} | {track.name} | {track.artist} | {track.format} "
            f"| {track.quality_label} |{lyrics_cell}|"
        )

    return "\n".join(lines)
