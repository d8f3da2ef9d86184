"""Document renderer: markup in, presentation tree out.

Pipeline for one render call::

    content ──transpose──▶ markup ──parse──▶ [Line] ──group──▶ PresentationTree

Grouping rules
--------------
* Lines between a section start and its end form one :class:`RenderedSection`.
* Lines outside any section stay at the top level, in original order.
* A section left open at end of input is closed and kept.
* A second start before an end closes the first section and opens a new one.
* An end with no open section is ignored.

Section names and ``{c:}`` labels go through the section translator so that a
Hebrew chart shows Hebrew headers and an English chart English ones (or the
locale the caller asks for).
"""

from .models import (
    Line,
    LineKind,
    PresentationTree,
    RenderedLine,
    RenderedSection,
    SongMetadata,
    TextDirection,
)
from .parser import parse, parse_metadata
from .sections import SectionTranslator, detect_direction
from .segments import REFERENCE_FONT_PX, SegmentBuilder
from .transpose import ChordTranspositionEngine


class DocumentRenderer:
    """Walks parsed lines and builds the presentation tree."""

    def __init__(
        self,
        engine: ChordTranspositionEngine | None = None,
        translator: SectionTranslator | None = None,
    ):
        self.engine = engine or ChordTranspositionEngine()
        self.translator = translator or SectionTranslator()

    def prepare(self, content: str, transpose_semitones: int = 0) -> str:
        """Return *content* transposed by *transpose_semitones*."""
        return self.engine.transpose(content or "", transpose_semitones)

    def render(
        self,
        content: str,
        transpose_semitones: int = 0,
        song_key: str | None = None,
        *,
        font_size_px: int = REFERENCE_FONT_PX,
        lyrics_only: bool = False,
        target_locale: str | None = None,
    ) -> PresentationTree:
        content = content or ""
        direction = detect_direction(content)
        markup = self.prepare(content, transpose_semitones)
        meta = parse_metadata(markup)
        tree = self.render_lines(
            parse(markup),
            direction,
            font_size_px=font_size_px,
            lyrics_only=lyrics_only,
            target_locale=target_locale,
        )
        tree.title = meta.title
        tree.key = self.display_key(meta, song_key, transpose_semitones)
        return tree

    def display_key(self, meta: SongMetadata, song_key: str | None, transpose_semitones: int) -> str | None:
        """Key to show in a header, spelled for display.

        ``{key:}`` in the content has already been transposed; a separately
        supplied *song_key* is transposed here.
        """
        if meta.key:
            key = meta.key
        elif song_key:
            key = self.engine.transpose_chord(song_key.strip(), transpose_semitones)
        else:
            return None
        return self.engine.to_preferred_enharmonic_spelling(key)

    def render_lines(
        self,
        lines: list[Line],
        direction: TextDirection = TextDirection.LTR,
        *,
        font_size_px: int = REFERENCE_FONT_PX,
        lyrics_only: bool = False,
        target_locale: str | None = None,
    ) -> PresentationTree:
        """Group already-parsed *lines* into a tree (used per column too)."""
        if target_locale is None:
            target_is_hebrew = direction is TextDirection.RTL
        else:
            target_is_hebrew = target_locale.lower().startswith("he")
        builder = SegmentBuilder(font_size_px, direction)

        tree = PresentationTree(direction=direction, font_size_px=font_size_px, lyrics_only=lyrics_only)
        section: RenderedSection | None = None

        for line in lines:
            if line.kind is LineKind.SECTION_START:
                if section is not None:
                    tree.items.append(section)
                section = RenderedSection(name=self.translator.translate(line.content, target_is_hebrew))
                continue

            if line.kind is LineKind.SECTION_END:
                if section is not None:
                    tree.items.append(section)
                    section = None
                continue

            rendered = self._render_line(line, builder, lyrics_only, target_is_hebrew)
            if section is not None:
                section.lines.append(rendered)
            else:
                tree.items.append(rendered)

        if section is not None:
            tree.items.append(section)
        return tree

    def _render_line(
        self,
        line: Line,
        builder: SegmentBuilder,
        lyrics_only: bool,
        target_is_hebrew: bool,
    ) -> RenderedLine:
        if line.kind is LineKind.CHORD_LINE:
            if lyrics_only:
                return RenderedLine(kind=LineKind.LYRICS, text=line.content)
            return RenderedLine(
                kind=LineKind.CHORD_LINE,
                text=line.content,
                segments=builder.build(line.chords, line.content),
            )
        if line.kind is LineKind.SECTION_LABEL:
            return RenderedLine(kind=LineKind.SECTION_LABEL, text=self.translator.translate(line.content, target_is_hebrew))
        return RenderedLine(kind=line.kind, text=line.content)


_default_renderer = DocumentRenderer()


def render_document(
    content: str,
    transpose_semitones: int = 0,
    song_key: str | None = None,
    *,
    font_size_px: int = REFERENCE_FONT_PX,
    lyrics_only: bool = False,
    target_locale: str | None = None,
) -> PresentationTree:
    """Render ChordPro *content* to a presentation tree.

    Empty content gives an empty tree.  Malformed chords and unknown section
    names pass through as written; nothing in the musical input raises.
    """
    return _default_renderer.render(
        content,
        transpose_semitones,
        song_key,
        font_size_px=font_size_px,
        lyrics_only=lyrics_only,
        target_locale=target_locale,
    )
