"""Chord-to-lyric segment builder.

Turns one parsed chord line into inline segments that survive text reflow:
every chord travels with the lyric fragment it sits on, so when a narrow
column wraps the line the chord stays above its syllable.

Word safety
-----------
When a chord lands inside a word (``Hal[G]le[C]lujah``) the fragments either
side of it must not be separated by a line break, and the chord above a short
fragment must not collide with the next chord.  For each such boundary the
builder:

* sets ``connector`` to a zero-width WORD JOINER (U+2060) so the renderer
  never breaks there;
* estimates the chord glyph width (bold Latin, calibrated in
  :mod:`leadsheet.metrics`, scaled with the font size) against the *visual*
  width of the fragment (Hebrew points U+0591–U+05C7 take no width) and,
  if the chord is wider, pads the fragment with 2–8 hyphens.

A chord with no real lyric under it (empty, or only spaces and punctuation)
gets ``wide`` spacing instead of hyphens.  When a line ends with two or more
such chords in a row, a forced break is placed before the run so the trailing
chords start on their own row.

Concatenating the ``text`` of all segments always gives back the lyric.
"""

import math
import unicodedata

from .metrics import DEFAULT_METRICS, FontMetrics
from .models import ChordPosition, Segment, SegmentKind, TextDirection

WORD_JOINER = "\u2060"

REFERENCE_FONT_PX = 16

MIN_HYPHENS = 2
MAX_HYPHENS = 8


def is_combining_mark(ch: str) -> bool:
    """Hebrew cantillation marks and points (U+0591–U+05C7) add no width."""
    return "\u0591" <= ch <= "\u05c7"


def visual_length(text: str) -> int:
    """Number of characters in *text* that take horizontal space."""
    return sum(1 for ch in text if not is_combining_mark(ch))


def is_blank_or_punctuation(text: str) -> bool:
    """True for text with no letters or digits worth hanging a chord on."""
    return all(ch.isspace() or unicodedata.category(ch).startswith("P") for ch in text)


def chord_width_px(chord: str, font_size_px: float, metrics: FontMetrics = DEFAULT_METRICS) -> float:
    return len(chord) * metrics.chord_em * font_size_px


def text_width_px(
    text: str,
    font_size_px: float,
    direction: TextDirection = TextDirection.LTR,
    metrics: FontMetrics = DEFAULT_METRICS,
) -> float:
    return visual_length(text) * metrics.glyph_em(direction) * font_size_px


def hyphen_padding(
    chord: str,
    text: str,
    font_size_px: float,
    direction: TextDirection = TextDirection.LTR,
    metrics: FontMetrics = DEFAULT_METRICS,
) -> str:
    """Hyphens to draw after *text* so *chord* fits above it, or ``""``."""
    gap = chord_width_px(chord, font_size_px, metrics) - text_width_px(text, font_size_px, direction, metrics)
    if gap <= 0:
        return ""
    count = math.ceil(gap / (metrics.hyphen_em * font_size_px))
    return "-" * max(MIN_HYPHENS, min(MAX_HYPHENS, count))


def _splits_word(left: str, right: str) -> bool:
    """True when *left* and *right* are two halves of one word."""
    return bool(left) and bool(right) and not left[-1].isspace() and not right[0].isspace()


class SegmentBuilder:
    """Builds reflow-safe segments for chord lines at a given font size."""

    def __init__(
        self,
        font_size_px: float = REFERENCE_FONT_PX,
        direction: TextDirection = TextDirection.LTR,
        metrics: FontMetrics = DEFAULT_METRICS,
    ):
        self.font_size_px = font_size_px
        self.direction = direction
        self.metrics = metrics

    def build(self, chords: list[ChordPosition], lyrics: str) -> list[Segment]:
        segments = _split(chords, lyrics)
        self._join_words(segments)
        _mark_trailing_chord_run(segments)
        return segments

    def _join_words(self, segments: list[Segment]) -> None:
        for i, segment in enumerate(segments):
            if segment.kind is SegmentKind.CHORD_TEXT and is_blank_or_punctuation(segment.text):
                segment.wide = True
                continue
            if i + 1 >= len(segments):
                continue
            following = segments[i + 1]
            if not _splits_word(segment.text, following.text):
                continue
            segment.connector = WORD_JOINER
            if segment.kind is SegmentKind.CHORD_TEXT:
                segment.hyphens = hyphen_padding(
                    segment.chord, segment.text, self.font_size_px, self.direction, self.metrics
                )


def _split(chords: list[ChordPosition], lyrics: str) -> list[Segment]:
    """Cut *lyrics* at each chord position (no word-safety yet)."""
    if not chords:
        return [Segment(kind=SegmentKind.TEXT, text=lyrics)] if lyrics else []

    length = len(lyrics)
    ordered = sorted(
        (ChordPosition(cp.chord, max(0, min(cp.position, length))) for cp in chords),
        key=lambda cp: cp.position,
    )

    segments: list[Segment] = []
    if ordered[0].position > 0:
        segments.append(Segment(kind=SegmentKind.TEXT, text=lyrics[: ordered[0].position]))
    for i, cp in enumerate(ordered):
        end = ordered[i + 1].position if i + 1 < len(ordered) else length
        segments.append(Segment(kind=SegmentKind.CHORD_TEXT, text=lyrics[cp.position:end], chord=cp.chord))
    return segments


def _mark_trailing_chord_run(segments: list[Segment]) -> None:
    """Force a break before a trailing run of two or more lyric-less chords."""
    start = len(segments)
    while (
        start > 0
        and segments[start - 1].kind is SegmentKind.CHORD_TEXT
        and is_blank_or_punctuation(segments[start - 1].text)
    ):
        start -= 1
    # A line with no lyric before the run has nothing to break away from.
    has_lyric = any(not is_blank_or_punctuation(segment.text) for segment in segments[:start])
    if len(segments) - start >= 2 and has_lyric:
        segments[start].break_before = True


def build_segments(
    chords: list[ChordPosition],
    lyrics: str,
    font_size_px: float = REFERENCE_FONT_PX,
    direction: TextDirection = TextDirection.LTR,
    metrics: FontMetrics = DEFAULT_METRICS,
) -> list[Segment]:
    return SegmentBuilder(font_size_px, direction, metrics).build(chords, lyrics)


def segments_text(segments: list[Segment]) -> str:
    """The lyric the segments were cut from (chords, connectors, hyphens dropped)."""
    return "".join(segment.text for segment in segments)
