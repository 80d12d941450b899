"""Terminal lyrics display for tapedeck.

Renders a LyricsView with Rich, highlighting the line that is active at
a given playback position and dimming the rest, the way the deck's
lyrics window does.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.text import Text

from .formatter import format_time
from .lrc import active_line_index
from .models import LyricsView

ACTIVE_STYLE = "bold yellow"
INACTIVE_STYLE = "dim"


def build_lyrics_text(view: LyricsView, position: float | None = None) -> Text:
    """Build styled text for a lyrics view.

    Synced lines are prefixed with their M:SS time. When position is
    given and the view is synced, the active line is highlighted and
    marked with an arrow.

    Args:
        view: Prepared lyrics.
        position: Playback position in seconds, or None for no highlight.

    Returns:
        Rich Text, one lyric line per row.
    """
    active = active_line_index(view, position) if position is not None else -1
    text = Text()

    for i, line in enumerate(view.lines):
        if i:
            text.append("\n")
        marker = "> " if i == active else "  "
        if view.is_synced and line.is_synced:
            prefix = f"{marker}{format_time(line.time):>6}  "
        else:
            prefix = f"{marker}{'':>6}  "
        style = ACTIVE_STYLE if i == active else (INACTIVE_STYLE if active >= 0 else "")
        text.append(prefix + line.text, style=style)

    return text


def print_lyrics(
    view: LyricsView,
    position: float | None = None,
    console: Console | None = None,
) -> None:
    """Print a lyrics view to a console.

    Args:
        view: Prepared lyrics.
        position: Playback position in seconds, or None.
        console: Optional Rich Console for output (uses default if None).
    """
    if console is None:
        console = Console()

    if not view.lines:
        console.print("[dim]No lyrics[/dim]")
        return

    header = "Synced lyrics" if view.is_synced else "Lyrics (unsynced)"
    console.print(f"[bold]{header}[/bold]")
    console.print(build_lyrics_text(view, position))


def render_lyrics(view: LyricsView, position: float | None = None, width: int = 80) -> str:
    """Render a lyrics view to a plain string (no ANSI codes)."""
    output = StringIO()
    capture_console = Console(file=output, width=width, no_color=True, highlight=False)
    print_lyrics(view, position, capture_console)
    return output.getvalue()
