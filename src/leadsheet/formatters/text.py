"""Plain-text formatter: chords on a row above the lyric, column-aligned.

Monospaced output has exact widths, so instead of the proportional-font
hyphen estimate the formatter pads the lyric itself: when a chord would run
into the next one, the lyric is stretched with ``-`` inside a word and with
spaces between words::

    G       C          G
    Amazing grace, how sweet the sound

    Am7 D
    Hal-lelujah

Right-to-left charts get mirrored chord rows: read right to left, each chord
starts over the first character of its syllable.
"""

from ..models import LineKind, PresentationTree, RenderedLine, RenderedSection, Segment, TextDirection
from ..segments import WORD_JOINER
from .base import Formatter


class TextFormatter(Formatter):
    name = "text"
    extension = ".txt"

    def render(self, tree: PresentationTree) -> str:
        return self.render_columns([tree])

    def render_columns(self, columns: list[PresentationTree]) -> str:
        """Header once, then the columns one below the other."""
        out = _header(columns[0]) if columns else []
        for i, column in enumerate(columns):
            if i and out and out[-1]:
                out.append("")
            out.extend(_body(column))

        while out and not out[-1]:
            out.pop()
        return "\n".join(out) + "\n"


def _header(tree: PresentationTree) -> list[str]:
    out: list[str] = []
    if tree.title:
        out.append(tree.title)
    if tree.key:
        out.append(f"Key: {tree.key}")
    if out:
        out.append("")
    return out


def _body(tree: PresentationTree) -> list[str]:
    rtl = tree.direction is TextDirection.RTL
    out: list[str] = []
    for item in tree.items:
        if isinstance(item, RenderedSection):
            out.append(f"{item.name}:")
            for line in item.lines:
                out.extend(_render_line(line, rtl))
            out.append("")
        else:
            out.extend(_render_line(item, rtl))
    return out


def _render_line(line: RenderedLine, rtl: bool) -> list[str]:
    if line.kind is LineKind.EMPTY:
        return [""]
    if line.kind is LineKind.SECTION_LABEL:
        return [f"({line.text})"]
    if line.kind is not LineKind.CHORD_LINE:
        return [line.text]

    out: list[str] = []
    for placements, lyric in chord_rows(line.segments):
        chord_row = _mirror(placements, len(lyric)) if rtl else _place(placements)
        if chord_row.strip():
            out.append(chord_row.rstrip())
        if lyric.strip():
            out.append(lyric.rstrip())
    return out


def chord_rows(segments: list[Segment]) -> list[tuple[list[tuple[int, str]], str]]:
    """Lay segments out as ``(chord placements, lyric)`` rows.

    Placements are ``(column, chord)`` pairs in logical (reading) order.  A
    segment marked ``break_before`` starts a new row.
    """
    rows: list[tuple[list[tuple[int, str]], str]] = []
    placements: list[tuple[int, str]] = []
    lyric = ""
    chord_end = 0  # first free column on the chord row
    joined = False  # previous segment continues into this one

    for segment in segments:
        if segment.break_before and (placements or lyric):
            rows.append((placements, lyric))
            placements, lyric, chord_end, joined = [], "", 0, False

        if segment.chord is not None:
            column = max(len(lyric), chord_end)
            if column > len(lyric):
                lyric += ("-" if joined else " ") * (column - len(lyric))
            placements.append((column, segment.chord))
            chord_end = column + len(segment.chord) + 1

        lyric += segment.text
        joined = segment.connector == WORD_JOINER

    if placements or lyric:
        rows.append((placements, lyric))
    return rows


def _place(placements: list[tuple[int, str]]) -> str:
    row = ""
    for column, chord in placements:
        row = row.ljust(column) + chord
    return row


def _mirror(placements: list[tuple[int, str]], width: int) -> str:
    """Chord row for a right-aligned lyric of *width* columns."""
    cells = [" "] * max(width, 1)
    for column, chord in placements:
        start = max(0, width - column - len(chord))
        end = start + len(chord)
        if end > len(cells):
            cells.extend(" " * (end - len(cells)))
        cells[start:end] = chord
    return "".join(cells)
