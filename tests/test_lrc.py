"""Tests for LRC parsing and lyrics display helpers."""

import pytest

from tapedeck.lrc import (
    active_line_index,
    build_lyrics_view,
    format_lrc,
    is_synced,
    parse_lrc,
    parse_lrc_metadata,
)
from tapedeck.models import UNSYNCED_TIME, LrcLine, LyricsView


class TestParseLrc:
    """Tests for parse_lrc function."""

    def test_centiseconds(self) -> None:
        """Two fractional digits are hundredths of a second."""
        lines = parse_lrc("[00:01.50]Hello")

        assert len(lines) == 1
        assert lines[0].time == pytest.approx(1.5)
        assert lines[0].text == "Hello"

    def test_milliseconds(self) -> None:
        """Three fractional digits are thousandths of a second."""
        lines = parse_lrc("[00:01.500]Hello")

        assert lines[0].time == pytest.approx(1.5)

    def test_milliseconds_not_confused_with_centiseconds(self) -> None:
        assert parse_lrc("[00:00.050]a")[0].time == pytest.approx(0.05)
        assert parse_lrc("[00:00.05]a")[0].time == pytest.approx(0.05)
        assert parse_lrc("[00:00.50]a")[0].time == pytest.approx(0.5)

    def test_no_fraction(self) -> None:
        lines = parse_lrc("[02:03]Line")

        assert lines[0].time == pytest.approx(123.0)

    def test_minutes_are_converted(self) -> None:
        assert parse_lrc("[01:23.45]x")[0].time == pytest.approx(83.45)

    def test_unsynced_lines(self) -> None:
        """Lines without time tags get the unsynced sentinel."""
        lines = parse_lrc("Hello\nWorld")

        assert lines == [
            LrcLine(time=UNSYNCED_TIME, text="Hello"),
            LrcLine(time=UNSYNCED_TIME, text="World"),
        ]
        assert all(line.time == -1 for line in lines)

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_input(self, text: str | None) -> None:
        assert parse_lrc(text) == []

    def test_blank_lines_skipped(self) -> None:
        lines = parse_lrc("[00:01.00]One\n\n   \n[00:02.00]Two")

        assert [line.text for line in lines] == ["One", "Two"]

    def test_timestamp_only_line_dropped(self) -> None:
        """A tag with no text (instrumental gap) emits nothing."""
        lines = parse_lrc("[00:01.00]One\n[00:05.00]\n[00:09.00]Two")

        assert [line.text for line in lines] == ["One", "Two"]

    def test_text_is_trimmed(self) -> None:
        assert parse_lrc("[00:01.00]   spaced out   ")[0].text == "spaced out"

    def test_windows_line_endings(self) -> None:
        lines = parse_lrc("[00:01.00]One\r\n[00:02.00]Two\r\n")

        assert [line.text for line in lines] == ["One", "Two"]

    def test_order_of_appearance_preserved(self) -> None:
        """Lines are not sorted by time."""
        lines = parse_lrc("[00:05.00]Later\n[00:01.00]Earlier")

        assert [line.text for line in lines] == ["Later", "Earlier"]

    def test_stacked_tags_only_first_consumed(self) -> None:
        lines = parse_lrc("[00:01.00][00:02.00]Chorus")

        assert lines == [LrcLine(time=1.0, text="[00:02.00]Chorus")]

    def test_metadata_tags_are_unsynced_lines(self) -> None:
        lines = parse_lrc("[ar:Someone]\n[00:01.00]Hi")

        assert lines[0] == LrcLine(time=UNSYNCED_TIME, text="[ar:Someone]")
        assert lines[1].time == pytest.approx(1.0)

    def test_single_digit_fraction_not_a_tag(self) -> None:
        lines = parse_lrc("[00:01.5]Odd")

        assert lines == [LrcLine(time=UNSYNCED_TIME, text="[00:01.5]Odd")]

    def test_is_deterministic(self) -> None:
        text = "[00:01.00]a\nb\n[00:03.123]c"

        assert parse_lrc(text) == parse_lrc(text)


class TestIsSynced:
    """Tests for is_synced function."""

    def test_any_timed_line(self) -> None:
        assert is_synced(parse_lrc("plain\n[00:01.00]timed"))

    def test_all_unsynced(self) -> None:
        assert not is_synced(parse_lrc("plain\nmore"))

    def test_empty(self) -> None:
        assert not is_synced([])


class TestBuildLyricsView:
    """Tests for build_lyrics_view function."""

    def test_synced(self) -> None:
        view = build_lyrics_view("[00:01.00]One\n[00:02.00]Two")

        assert view.is_synced
        assert [line.time for line in view.lines] == [1.0, 2.0]

    def test_unsynced_uses_index_as_time(self) -> None:
        view = build_lyrics_view("First\n\nSecond\n  Third  ")

        assert not view.is_synced
        assert view.lines == (
            LrcLine(time=0.0, text="First"),
            LrcLine(time=1.0, text="Second"),
            LrcLine(time=2.0, text="Third"),
        )

    @pytest.mark.parametrize("raw", ["", None])
    def test_empty(self, raw: str | None) -> None:
        assert build_lyrics_view(raw) == LyricsView(is_synced=False, lines=())


class TestActiveLineIndex:
    """Tests for active_line_index function."""

    @pytest.fixture
    def view(self) -> LyricsView:
        return build_lyrics_view("[00:01.00]One\n[00:05.00]Two\n[00:10.00]Three")

    def test_before_first_line(self, view: LyricsView) -> None:
        assert active_line_index(view, 0.5) == -1

    def test_exact_start(self, view: LyricsView) -> None:
        assert active_line_index(view, 5.0) == 1

    def test_between_lines(self, view: LyricsView) -> None:
        assert active_line_index(view, 7.2) == 1

    def test_after_last_line(self, view: LyricsView) -> None:
        assert active_line_index(view, 300.0) == 2

    def test_unsynced_never_highlights(self) -> None:
        view = build_lyrics_view("One\nTwo\nThree")

        assert active_line_index(view, 1.5) == -1

    def test_untimed_line_in_synced_view_skipped(self) -> None:
        view = build_lyrics_view("[00:10.00]A\nplain\n[00:20.00]B")

        assert active_line_index(view, 15.0) == 0
        assert active_line_index(view, 25.0) == 2

    def test_untimed_line_before_first_timed_line(self) -> None:
        view = build_lyrics_view("[ar:Someone]\n[00:10.00]A")

        assert active_line_index(view, 5.0) == -1


class TestParseLrcMetadata:
    """Tests for parse_lrc_metadata function."""

    def test_extracts_tags(self) -> None:
        text = "[ar:Someone]\n[TI:A Song]\n[offset:+250]\n[00:01.00]Hi"

        assert parse_lrc_metadata(text) == {"ar": "Someone", "ti": "A Song", "offset": "+250"}

    def test_time_tags_ignored(self) -> None:
        assert parse_lrc_metadata("[00:01.00]Hi") == {}

    def test_empty(self) -> None:
        assert parse_lrc_metadata(None) == {}


class TestFormatLrc:
    """Tests for format_lrc function."""

    def test_synced_lines(self) -> None:
        lines = [LrcLine(time=1.5, text="Hello"), LrcLine(time=83.456, text="World")]

        assert format_lrc(lines) == "[00:01.50]Hello\n[01:23.46]World"

    def test_unsynced_lines_untagged(self) -> None:
        assert format_lrc([LrcLine(time=UNSYNCED_TIME, text="Plain")]) == "Plain"

    def test_parses_back(self) -> None:
        lines = [LrcLine(time=12.34, text="a"), LrcLine(time=UNSYNCED_TIME, text="b")]

        reparsed = parse_lrc(format_lrc(lines))

        assert [line.text for line in reparsed] == ["a", "b"]
        assert reparsed[0].time == pytest.approx(12.34)
        assert reparsed[1].time == UNSYNCED_TIME
