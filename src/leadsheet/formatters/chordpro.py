"""ChordPro formatter.

Writes a :class:`~leadsheet.models.PresentationTree` back out as ChordPro
(``.cho``) text, which is how a transposed or translated chart is saved.

Section name → directive pair
-----------------------------

+--------------------------------------+------------------------------------+
| Name (case-insensitive first word)   | Directive pair                     |
+======================================+====================================+
| ``Verse``, ``Verse N``               | ``{start_of_verse: Verse N}`` /    |
|                                      | ``{end_of_verse}``                 |
+--------------------------------------+------------------------------------+
| ``Bridge``                           | ``{start_of_bridge: Bridge}`` /    |
|                                      | ``{end_of_bridge}``                |
+--------------------------------------+------------------------------------+
| anything else (``Chorus``, ``Intro``,| ``{soc: <name>}`` / ``{eoc}``      |
| Hebrew names, …)                     |                                    |
+--------------------------------------+------------------------------------+

One-off labels become ``{comment: <label>}``.  A two-column page is written
as one document with ``{column_break}`` between the columns.

Chord lines get their chords re-inserted inline from the segments, so parse →
render → format round-trips the lyric text exactly.
"""

from ..models import LineKind, PresentationTree, RenderedLine, RenderedSection
from .base import Formatter

# Section names whose directives ChordPro has standardised (other than chorus,
# which is the generic fallback below).
_STRUCTURED = {
    "verse": ("start_of_verse", "end_of_verse"),
    "bridge": ("start_of_bridge", "end_of_bridge"),
}

COLUMN_BREAK = "{column_break}"


class ChordProFormatter(Formatter):
    """Render a presentation tree to ChordPro text."""

    name = "chordpro"
    extension = ".cho"

    def render(self, tree: PresentationTree) -> str:
        """Return ChordPro text for *tree*.

        The returned string ends with a single newline and uses Unix line
        endings (``\\n``) throughout.
        """
        parts = _metadata(tree) + _body(tree)
        return "\n".join(parts) + "\n"

    def render_columns(self, columns: list[PresentationTree]) -> str:
        """Metadata once, then the columns separated by ``{column_break}``."""
        if not columns:
            return "\n"
        parts = _metadata(columns[0])
        for i, column in enumerate(columns):
            if i:
                parts.append(COLUMN_BREAK)
            parts.extend(_body(column))
        return "\n".join(parts) + "\n"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _metadata(tree: PresentationTree) -> list[str]:
    parts: list[str] = []
    if tree.title:
        parts.append(f"{{title: {tree.title}}}")
    if tree.key:
        parts.append(f"{{key: {tree.key}}}")
    return parts


def _body(tree: PresentationTree) -> list[str]:
    parts: list[str] = []
    for item in tree.items:
        if isinstance(item, RenderedSection):
            parts.extend(_render_section(item))
        else:
            parts.append(render_line(item))
    return parts


def _render_section(section: RenderedSection) -> list[str]:
    """Return the lines for one section, directives included."""
    words = section.name.lower().split()
    first_word = words[0] if words else ""
    start_dir, end_dir = _STRUCTURED.get(first_word, ("soc", "eoc"))
    lines = [render_line(line) for line in section.lines]
    return [f"{{{start_dir}: {section.name}}}", *lines, f"{{{end_dir}}}"]


def render_line(line: RenderedLine) -> str:
    """One rendered line back as markup."""
    if line.kind is LineKind.SECTION_LABEL:
        return f"{{comment: {line.text}}}"
    if line.kind is LineKind.CHORD_LINE:
        return "".join(
            (f"[{segment.chord}]" if segment.chord is not None else "") + segment.text
            for segment in line.segments
        )
    if line.kind is LineKind.EMPTY:
        return ""
    return line.text
