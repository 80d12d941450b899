"""Tests for the command-line interface."""

import json
import struct
from pathlib import Path

from click.testing import CliRunner

from tapedeck.cli import main


def make_flac(comments: list[str]) -> bytes:
    """Build a FLAC stream with a single Vorbis comment block."""
    vendor = b"test"
    payload = struct.pack("<I", len(vendor)) + vendor + struct.pack("<I", len(comments))
    for comment in comments:
        raw = comment.encode("utf-8")
        payload += struct.pack("<I", len(raw)) + raw
    return b"fLaC" + bytes([0x84]) + len(payload).to_bytes(3, "big") + payload


class TestTagsCommand:
    """Tests for the tags command."""

    def test_prints_tags(self, tmp_path: Path) -> None:
        path = tmp_path / "song.flac"
        path.write_bytes(make_flac(["ARTIST=Band", "ALBUM=Tape"]))

        result = CliRunner().invoke(main, ["tags", str(path)])

        assert result.exit_code == 0
        assert "artist: Band" in result.output
        assert "album: Tape" in result.output

    def test_untagged(self, tmp_path: Path) -> None:
        path = tmp_path / "song.wav"
        path.write_bytes(b"RIFF")

        result = CliRunner().invoke(main, ["tags", str(path)])

        assert result.exit_code == 0
        assert "(no tags found)" in result.output


class TestLyricsCommand:
    """Tests for the lyrics command."""

    def test_from_tags(self, tmp_path: Path) -> None:
        path = tmp_path / "song.flac"
        path.write_bytes(make_flac(["LYRICS=[00:01.00]One\n[00:04.00]Two"]))

        result = CliRunner().invoke(main, ["lyrics", str(path), "--at", "5"])

        assert result.exit_code == 0
        assert "Synced lyrics" in result.output
        assert "> " in result.output

    def test_from_lrc_file_with_metadata(self, tmp_path: Path) -> None:
        path = tmp_path / "song.lrc"
        path.write_text("[ar:Someone]\n[00:01.00]Hello", encoding="utf-8")

        result = CliRunner().invoke(main, ["lyrics", str(path)])

        assert result.exit_code == 0
        assert "ar: Someone" in result.output
        assert "Hello" in result.output

    def test_sidecar_fallback(self, tmp_path: Path) -> None:
        path = tmp_path / "song.flac"
        path.write_bytes(make_flac([]))
        (tmp_path / "song.lrc").write_text("Plain words", encoding="utf-8")

        result = CliRunner().invoke(main, ["lyrics", str(path)])

        assert result.exit_code == 0
        assert "Plain words" in result.output

    def test_no_lyrics(self, tmp_path: Path) -> None:
        path = tmp_path / "song.flac"
        path.write_bytes(make_flac([]))

        result = CliRunner().invoke(main, ["lyrics", str(path)])

        assert result.exit_code == 1
        assert "No lyrics found" in result.output

    def test_lrc_file_with_byte_order_mark(self, tmp_path: Path) -> None:
        path = tmp_path / "song.lrc"
        path.write_bytes(b"\xef\xbb\xbf[ar:Someone]\n[00:01.00]Hello")

        result = CliRunner().invoke(main, ["lyrics", str(path)])

        assert result.exit_code == 0
        assert "ar: Someone" in result.output

    def test_undecodable_lrc_file(self, tmp_path: Path) -> None:
        path = tmp_path / "song.lrc"
        path.write_bytes(b"[00:01.00]caf\xe9")

        result = CliRunner().invoke(main, ["lyrics", str(path)])

        assert result.exit_code == 1
        assert "Cannot read song.lrc" in result.output
        assert "Traceback" not in result.output


class TestScanCommand:
    """Tests for the scan command."""

    def test_table(self, tmp_path: Path) -> None:
        (tmp_path / "b.flac").write_bytes(make_flac(["ARTIST=Bee"]))
        (tmp_path / "a.mp3").write_bytes(b"\xff\xfb\x90\x00")

        result = CliRunner().invoke(main, ["scan", "--no-progress", str(tmp_path)])

        assert result.exit_code == 0
        assert "| 1 | a | Unknown Artist | MP3 | STEREO | |" in result.output
        assert "| 2 | b | Bee | FLAC | LOSSLESS | |" in result.output

    def test_config_default_artist(self, tmp_path: Path) -> None:
        (tmp_path / "a.mp3").write_bytes(b"\xff\xfb\x90\x00")
        (tmp_path / ".tapedeck.json").write_text(json.dumps({"default_artist": "Anon"}))

        result = CliRunner().invoke(main, ["scan", "--no-progress", str(tmp_path)])

        assert "| Anon |" in result.output

    def test_empty_folder(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["scan", "--no-progress", str(tmp_path)])

        assert result.exit_code == 0
        assert "No audio files found." in result.output


class TestConfigCommand:
    """Tests for the config command."""

    def test_init_and_show(self, tmp_path: Path) -> None:
        runner = CliRunner()

        init = runner.invoke(main, ["config", str(tmp_path), "--init"])
        shown = runner.invoke(main, ["config", str(tmp_path)])

        assert init.exit_code == 0
        assert (tmp_path / ".tapedeck.json").exists()
        assert json.loads(shown.output)["id3_read_limit"] == 300_000
