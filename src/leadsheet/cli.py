import logging
import re
import sys
from pathlib import Path

import click

from .exceptions import UnsupportedFormatError
from .fit import PAGE_CONTENT_HEIGHT_PX, PAGE_CONTENT_WIDTH_PX, fit_page
from .models import PresentationTree
from .parser import parse_metadata
from .registry import format_names, get_formatter
from .render import render_document
from .transpose import calculate_transposition_between_keys, strip_chords, transpose, transpose_display
from .view import LeadSheetView, Trigger


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_filename(title: str | None, source: Path, extension: str) -> str:
    stem = _slugify(title) if title else ""
    return f"{stem or source.stem}{extension}"


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        click.echo(f"Error: {path} is not UTF-8 text ({exc.reason})", err=True)
        sys.exit(1)


def _parse_viewport(value: str | None) -> tuple[int, int] | None:
    if value is None:
        return None
    m = re.fullmatch(r"(\d+)[xX](\d+)", value.strip())
    if not m:
        raise click.BadParameter("expected WIDTHxHEIGHT, e.g. 1280x800", param_hint="--screen")
    return int(m.group(1)), int(m.group(2))


_song_file = click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
_transpose_option = click.option(
    "-t", "--transpose", "semitones", default=0, show_default=True,
    help="Semitones to transpose by (clamped to ±11).",
)
_key_option = click.option("--key", "song_key", default=None, metavar="KEY",
                           help="Song key, used when the chart has no {key:} directive.")


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log sizing decisions to stderr.")
def main(verbose: bool) -> None:
    """Render, transpose and size ChordPro lead sheets."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@_song_file
@_transpose_option
@_key_option
@click.option("-f", "--format", "format_name", default="text", show_default=True,
              help=f"Output format ({', '.join(format_names())}).")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <title>.<ext>)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
@click.option("--lyrics-only", is_flag=True, default=False, help="Drop chords, keep lyrics.")
@click.option("--locale", type=click.Choice(["en", "he"]), default=None,
              help="Language for section names (default: the chart's own).")
@click.option("--font-size", default=16, show_default=True, help="Font size in px.")
@click.option("--fit", "fit_to_page", is_flag=True, default=False,
              help="Pick font size and columns to fit an A4 page.")
def render(
    path: Path,
    semitones: int,
    song_key: str | None,
    format_name: str,
    output_path: str | None,
    stdout: bool,
    lyrics_only: bool,
    locale: str | None,
    font_size: int,
    fit_to_page: bool,
) -> None:
    """Render a ChordPro file as text, HTML or ChordPro."""
    # --- Resolve formatter ---
    try:
        formatter = get_formatter(format_name)
    except UnsupportedFormatError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo(f"Supported formats: {', '.join(format_names())}", err=True)
        sys.exit(1)

    # --- Render ---
    content = _read(path)
    if fit_to_page:
        layout = fit_page(content, semitones, song_key, lyrics_only=lyrics_only, target_locale=locale)
        trees: list[PresentationTree] = layout.columns
    else:
        trees = [
            render_document(
                content, semitones, song_key,
                font_size_px=font_size, lyrics_only=lyrics_only, target_locale=locale,
            )
        ]
    text = formatter.render_columns(trees)

    # --- Output ---
    if stdout:
        click.echo(text, nl=False)
        return

    dest = Path(output_path) if output_path else Path(
        _default_filename(trees[0].title, path, formatter.extension)
    )
    dest.write_text(text, encoding="utf-8")
    click.echo(f"Written to {dest}")


@main.command("transpose")
@_song_file
@_transpose_option
@click.option("--to-key", default=None, metavar="KEY", help="Transpose to this key instead of by -t.")
@_key_option
def transpose_command(path: Path, semitones: int, to_key: str | None, song_key: str | None) -> None:
    """Print the chart transposed, chords and {key:} alike."""
    content = _read(path)
    if to_key:
        from_key = parse_metadata(content).key or song_key
        if not from_key:
            click.echo("Error: --to-key needs a {key:} directive in the chart or --key", err=True)
            sys.exit(1)
        semitones = calculate_transposition_between_keys(from_key, to_key)
    click.echo(f"Transposing {transpose_display(semitones)}", err=True)
    click.echo(transpose(content, semitones), nl=False)


@main.command()
@_song_file
def strip(path: Path) -> None:
    """Print the chart with every [chord] removed."""
    click.echo(strip_chords(_read(path)), nl=False)


@main.command()
@_song_file
@_transpose_option
@_key_option
@click.option("--height", default=PAGE_CONTENT_HEIGHT_PX, show_default=True, help="Page content height in px.")
@click.option("--width", default=PAGE_CONTENT_WIDTH_PX, show_default=True, help="Page content width in px.")
@click.option("--screen", default=None, metavar="WxH",
              help="Decide screen columns for this viewport instead of fitting a page.")
@click.option("--font-size", default=16, show_default=True, help="Font size in px (screen mode).")
def fit(
    path: Path,
    semitones: int,
    song_key: str | None,
    height: int,
    width: int,
    screen: str | None,
    font_size: int,
) -> None:
    """Print the font size and column count chosen for a page or screen."""
    content = _read(path)
    viewport = _parse_viewport(screen)

    if viewport is not None:
        view = LeadSheetView(content, semitones, song_key, font_size_px=font_size, viewport=viewport)
        state = view.recompute(Trigger.CONTENT_CHANGED)
    else:
        state = fit_page(content, semitones, song_key, max_height_px=height, width_px=width).sizing

    click.echo(f"font-size: {state.font_size_px}px")
    if state.column_count == 2 and state.column_font_sizes:
        sizes = " / ".join(f"{size}px" for size in state.column_font_sizes)
        click.echo(f"columns: 2 ({sizes})")
    else:
        click.echo(f"columns: {state.column_count}")
