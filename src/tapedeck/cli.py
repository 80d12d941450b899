"""Command-line interface for tapedeck."""

import json
import logging
from pathlib import Path

import click

from .config import TapedeckConfig, get_config_path, load_config, save_config
from .display import print_lyrics
from .formatter import format_tag_bundle, format_track_table
from .library import load_tags, read_sidecar_lyrics, scan_library
from .lrc import build_lyrics_view, parse_lrc_metadata


def _config_for(path: Path) -> TapedeckConfig:
    directory = path if path.is_dir() else path.parent
    return load_config(directory) or TapedeckConfig()


@click.group()
@click.version_option(package_name="tapedeck")
@click.option("-v", "--verbose", is_flag=True, help="Log parser diagnostics.")
def main(verbose):
    """tapedeck - Read lyrics and tags for the cassette deck player."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def tags(files):
    """Show the lyrics, artist and album found in audio files."""
    for name in files:
        path = Path(name)
        bundle = load_tags(path, _config_for(path))
        click.echo(format_tag_bundle(path.name, bundle))


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--at",
    "position",
    type=float,
    default=None,
    help="Playback position in seconds; highlights the active line.",
)
def lyrics(file, position):
    """Show the lyrics of an audio file or an .lrc file."""
    path = Path(file)
    if path.suffix.lower() == ".lrc":
        try:
            raw = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise click.ClickException(f"Cannot read {path.name}: {e}") from e
    else:
        config = _config_for(path)
        raw = load_tags(path, config).lyrics
        if not raw and config.use_lrc_sidecars:
            raw = read_sidecar_lyrics(path)

    if not raw:
        raise click.ClickException(f"No lyrics found in {path.name}")

    for key, value in parse_lrc_metadata(raw).items():
        click.echo(f"{key}: {value}")
    print_lyrics(build_lyrics_view(raw), position)


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--no-progress", is_flag=True, help="Hide the progress bar.")
def scan(paths, no_progress):
    """List the tracks found in files and folders."""
    path_list = [Path(p) for p in paths]
    config = _config_for(path_list[0])
    tracks = scan_library(path_list, config, show_progress=not no_progress)
    if not tracks:
        click.echo("No audio files found.", err=True)
        return
    click.echo(format_track_table(tracks))


@main.command("config")
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--init", is_flag=True, help="Write a config file with default settings.")
def config_command(directory, init):
    """Show or create the .tapedeck.json of a library folder."""
    library_dir = Path(directory)
    if init:
        if not save_config(library_dir, TapedeckConfig()):
            raise click.ClickException(f"Could not write {get_config_path(library_dir)}")
        click.echo(f"Wrote {get_config_path(library_dir)}")
        return

    config = load_config(library_dir) or TapedeckConfig()
    click.echo(json.dumps(config.to_dict(), indent=2))


if __name__ == "__main__":
    main()
