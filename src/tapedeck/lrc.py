"""LRC lyric parsing and display helpers for tapedeck.

LRC is a plain-text lyric format where each line may carry a
``[mm:ss]``, ``[mm:ss.xx]`` or ``[mm:ss.xxx]`` time tag:

    [ar:Artist]
    [00:12.34]First line
    [00:15.500]Second line

Two-digit fractions are centiseconds, three-digit fractions are
milliseconds. Lines without a time tag are kept as unsynced lines so
that plain lyrics embedded in tags still display.

Key Functions:
    - parse_lrc: Parse text into LrcLine objects in source order.
    - build_lyrics_view: Decide synced vs. unsynced display.
    - active_line_index: Find the line to highlight for a playback position.
"""

import math
import re
from collections.abc import Sequence

from .models import UNSYNCED_TIME, LrcLine, LyricsView

# Time tag: [mm:ss], [mm:ss.xx] or [mm:ss.xxx]
# Matches: [00:12], [00:12.34], [01:23.456]
LRC_TIME_TAG_PATTERN = re.compile(r"\[(\d{2}):(\d{2})(?:\.(\d{2,3}))?\]")

# ID tag: [tag:value]
# Matches: [ar:Artist], [ti:Title], [offset:+250]
LRC_METADATA_PATTERN = re.compile(r"^\[([a-z]{2,}):(.*)\]$", re.IGNORECASE)


def _time_from_match(match: re.Match[str]) -> float:
    minutes = int(match.group(1))
    seconds = int(match.group(2))
    fraction = match.group(3)
    if not fraction:
        return minutes * 60.0 + seconds
    divisor = 1000.0 if len(fraction) == 3 else 100.0
    return minutes * 60.0 + seconds + int(fraction) / divisor


def parse_lrc(text: str | None) -> list[LrcLine]:
    """Parse LRC text into lyric lines.

    The first time tag on each line sets its time and is removed from
    the text; any further bracketed text stays in the display text.
    Tagged lines whose remaining text is blank are dropped. Untagged
    non-blank lines get UNSYNCED_TIME.

    Args:
        text: LRC or plain lyric text, or None.

    Returns:
        Lines in order of appearance. Empty for empty or None input.

    Examples:
        >>> parse_lrc("[00:01.50]Hello")
        [LrcLine(time=1.5, text='Hello')]
        >>> parse_lrc("Hello")
        [LrcLine(time=-1.0, text='Hello')]
    """
    if not text:
        return []

    result: list[LrcLine] = []

    for line in text.split("\n"):
        match = LRC_TIME_TAG_PATTERN.search(line)
        if match:
            content = (line[: match.start()] + line[match.end() :]).strip()
            if content:
                result.append(LrcLine(time=_time_from_match(match), text=content))
        elif line.strip():
            result.append(LrcLine(time=UNSYNCED_TIME, text=line.strip()))

    return result


def is_synced(lines: Sequence[LrcLine]) -> bool:
    """Return True if at least one line carries a real timestamp."""
    return any(line.is_synced for line in lines)


def build_lyrics_view(raw: str | None) -> LyricsView:
    """Prepare raw lyric text for display.

    Synced lyrics keep the parsed lines. Unsynced lyrics become one line
    per non-blank source line, numbered with a synthetic index that only
    fixes their order.

    Args:
        raw: Lyric text from a tag or a sidecar file.

    Returns:
        LyricsView describing what to render.
    """
    if not raw:
        return LyricsView(is_synced=False, lines=())

    parsed = parse_lrc(raw)
    if is_synced(parsed):
        return LyricsView(is_synced=True, lines=tuple(parsed))

    plain = [line.strip() for line in raw.split("\n") if line.strip()]
    return LyricsView(
        is_synced=False,
        lines=tuple(LrcLine(time=float(i), text=text) for i, text in enumerate(plain)),
    )


def active_line_index(view: LyricsView, position: float) -> int:
    """Find the line to highlight at a playback position.

    Args:
        view: Prepared lyrics.
        position: Playback position in seconds.

    Returns:
        Index of the last timed line whose time is at or before position,
        or -1 for unsynced views and positions before the first timed line.
        Untimed lines inside a synced view are never highlighted.
    """
    if not view.is_synced:
        return -1

    for i in range(len(view.lines) - 1, -1, -1):
        line = view.lines[i]
        if line.is_synced and position >= line.time:
            return i
    return -1


def parse_lrc_metadata(text: str | None) -> dict[str, str]:
    """Extract LRC ID tags such as [ar:...], [ti:...] and [offset:...].

    Args:
        text: LRC text.

    Returns:
        Mapping of lowercased tag names to stripped values. A repeated
        tag keeps its last value.

    Examples:
        >>> parse_lrc_metadata("[ar:Someone]\\n[ti:A Song]\\n[00:01.00]Hi")
        {'ar': 'Someone', 'ti': 'A Song'}
    """
    if not text:
        return {}

    metadata: dict[str, str] = {}
    for line in text.split("\n"):
        match = LRC_METADATA_PATTERN.match(line.strip())
        if match:
            metadata[match.group(1).lower()] = match.group(2).strip()
    return metadata


def _format_timestamp_lrc(seconds: float) -> str:
    """Format seconds as LRC timestamp [mm:ss.xx]."""
    centis = int(round(seconds * 100))
    minutes, centis = divmod(centis, 6000)
    return f"[{minutes:02d}:{centis // 100:02d}.{centis % 100:02d}]"


def format_lrc(lines: Sequence[LrcLine]) -> str:
    """Format lyric lines as LRC text.

    Unsynced lines are written without a time tag, so the output parses
    back to the same lines at centisecond precision.

    Example:
        >>> print(format_lrc([LrcLine(time=1.5, text="Hello world")]))
        [00:01.50]Hello world
    """
    out: list[str] = []
    for line in lines:
        if line.is_synced and not math.isnan(line.time):
            out.append(f"{_format_timestamp_lrc(line.time)}{line.text}")
        else:
            out.append(line.text)
    return "\n".join(out)
