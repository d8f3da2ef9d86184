"""ChordPro line parser.

Turns raw markup into an ordered list of typed :class:`~leadsheet.models.Line`
records in a single forward pass.  Recognition order per line (first match
wins):

  1. ``{c: ...}`` / ``{comment: ...}``      → SECTION_LABEL
  2. any other ``{...}`` that is not a section marker → dropped
  3. ``{soc}`` / ``{soc: Name}`` and friends → SECTION_START
  4. ``{eoc}`` and friends                  → SECTION_END
  5. whitespace only                        → EMPTY
  6. contains ``[``                          → CHORD_LINE
  7. anything else                          → LYRICS

Parsing is total: any ``str`` produces a list of lines and nothing raises,
including stray brackets, unterminated sections and empty input.
"""

import re

from .models import ChordPosition, Line, LineKind, SongMetadata
from .transpose import CHORD_TOKEN_RE

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# A directive occupying the start of a line: {name}, {name: value}, {name value}
DIRECTIVE_RE = re.compile(r"^\s*\{([^}]*)\}")

# Name and value inside the braces
_DIRECTIVE_BODY_RE = re.compile(r"^\s*([A-Za-z_]+)\s*:?\s*(.*?)\s*$", re.DOTALL)

# Uppercase M written for minor: AM7 → Am7, but CMaj7 stays major.
_MINOR_M_RE = re.compile(r"^([A-G][#b]?)M(?!aj)")

COMMENT_DIRECTIVES = {"c", "comment", "ci", "comment_italic"}

# Directive name → default section name
SECTION_START_DIRECTIVES = {
    "soc": "Chorus",
    "start_of_chorus": "Chorus",
    "sov": "Verse",
    "start_of_verse": "Verse",
    "sob": "Bridge",
    "start_of_bridge": "Bridge",
}

SECTION_END_DIRECTIVES = {
    "eoc",
    "end_of_chorus",
    "eov",
    "end_of_verse",
    "eob",
    "end_of_bridge",
}

# Directive aliases understood by parse_metadata()
_METADATA_ALIASES = {
    "t": "title",
    "title": "title",
    "artist": "artist",
    "key": "key",
    "capo": "capo",
    "tempo": "tempo",
}


# ---------------------------------------------------------------------------
# Line parsing
# ---------------------------------------------------------------------------


def _directive(line: str) -> tuple[str, str] | None:
    """Return ``(name, value)`` if *line* starts with a ``{...}`` directive."""
    m = DIRECTIVE_RE.match(line)
    if not m:
        return None
    body = _DIRECTIVE_BODY_RE.match(m.group(1))
    if not body:
        # "{}" or "{ 42 }": still a directive, just one nobody understands
        return "", m.group(1).strip()
    return body.group(1).lower(), body.group(2)


def normalize_chord(chord: str) -> str:
    """Rewrite an uppercase ``M`` minor marker to ``m`` (``AM7`` → ``Am7``)."""
    return _MINOR_M_RE.sub(r"\1m", chord)


def parse_chord_line(line: str) -> Line:
    """Split an inline chord line into chords and the lyric left behind.

    Each chord's position is its index in the *stripped* lyric: the index in
    the original line minus the length of every ``[token]`` removed before it.

    Example::

        parse_chord_line("[C]Hello [G]world")
        # chords: [("C", 0), ("G", 6)], lyrics: "Hello world"
    """
    chords: list[ChordPosition] = []
    removed = 0  # characters of [token] text stripped so far
    for m in CHORD_TOKEN_RE.finditer(line):
        chords.append(ChordPosition(chord=normalize_chord(m.group(1)), position=m.start() - removed))
        removed += len(m.group(1)) + 2
    lyrics = CHORD_TOKEN_RE.sub("", line)
    return Line(kind=LineKind.CHORD_LINE, content=lyrics, chords=chords)


def parse_line(line: str) -> Line | None:
    """Classify one line of markup.  Returns None for dropped directives."""
    directive = _directive(line)
    if directive is not None:
        name, value = directive
        if name in COMMENT_DIRECTIVES:
            return Line(kind=LineKind.SECTION_LABEL, content=value)
        if name in SECTION_START_DIRECTIVES:
            return Line(kind=LineKind.SECTION_START, content=value or SECTION_START_DIRECTIVES[name])
        if name in SECTION_END_DIRECTIVES:
            return Line(kind=LineKind.SECTION_END)
        return None

    if not line.strip():
        return Line(kind=LineKind.EMPTY)

    if "[" in line:
        return parse_chord_line(line)

    return Line(kind=LineKind.LYRICS, content=line)


def parse(markup: str) -> list[Line]:
    """Parse ChordPro *markup* into an ordered list of lines."""
    if not markup:
        return []
    lines: list[Line] = []
    for raw in markup.splitlines():
        parsed = parse_line(raw)
        if parsed is not None:
            lines.append(parsed)
    return lines


class ChordParser:
    """Object wrapper around :func:`parse` for callers that inject a parser."""

    def parse(self, markup: str) -> list[Line]:
        return parse(markup)

    def parse_metadata(self, markup: str) -> SongMetadata:
        return parse_metadata(markup)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def parse_metadata(markup: str) -> SongMetadata:
    """Collect ``{name: value}`` directives into a :class:`SongMetadata`.

    Comments and section markers are ignored.  When a directive repeats, the
    first value wins.  A capo that is not a number is left unset.
    """
    meta = SongMetadata()
    if not markup:
        return meta
    for raw in markup.splitlines():
        directive = _directive(raw)
        if directive is None:
            continue
        name, value = directive
        if (
            not name
            or not value
            or name in COMMENT_DIRECTIVES
            or name in SECTION_START_DIRECTIVES
            or name in SECTION_END_DIRECTIVES
        ):
            continue

        field_name = _METADATA_ALIASES.get(name)
        if field_name is None:
            meta.extra.setdefault(name, value)
        elif field_name == "capo":
            if meta.capo is None and value.isdigit():
                meta.capo = int(value)
        elif getattr(meta, field_name) is None:
            setattr(meta, field_name, value)
    return meta
