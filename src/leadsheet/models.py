from dataclasses import dataclass, field
from enum import Enum, auto


class TextDirection(Enum):
    """Writing direction of a song, sniffed once from its raw content."""

    LTR = "ltr"
    RTL = "rtl"


class LineKind(Enum):
    SECTION_START = auto()  # {soc: Verse 1}
    SECTION_END = auto()  # {eoc}
    SECTION_LABEL = auto()  # {c: Intro}, a one-off inline label
    CHORD_LINE = auto()  # lyric line with [chords] embedded
    LYRICS = auto()  # plain lyric line
    EMPTY = auto()  # whitespace only


@dataclass(frozen=True)
class ChordPosition:
    """A chord and the index in the *stripped* lyric it sits on."""

    chord: str
    position: int


@dataclass
class Line:
    """A single parsed line of ChordPro markup.

    ``content`` holds the section name for ``SECTION_START``/``SECTION_LABEL``
    and the lyric text for ``CHORD_LINE``/``LYRICS``.  It is empty otherwise.

    Example: ``"[C]Hello [G]world"`` parses to
    ``Line(LineKind.CHORD_LINE, "Hello world", [ChordPosition("C", 0), ChordPosition("G", 6)])``.
    """

    kind: LineKind
    content: str = ""
    chords: list[ChordPosition] = field(default_factory=list)


class SegmentKind(Enum):
    TEXT = auto()
    CHORD_TEXT = auto()


@dataclass
class Segment:
    """The atomic, reflow-safe unit a chord line is rendered from.

    ``connector`` is a zero-width word joiner when the segment continues a word
    into the next one; ``hyphens`` is a padding run drawn after the text when
    the chord glyph is wider than it; ``wide`` asks for extra spacing instead
    (chord with no real lyric under it); ``break_before`` forces a line break.
    """

    kind: SegmentKind
    text: str
    chord: str | None = None
    connector: str = ""
    hyphens: str = ""
    wide: bool = False
    break_before: bool = False


@dataclass
class SongMetadata:
    """Values collected from ``{name: value}`` directives."""

    title: str | None = None
    artist: str | None = None
    key: str | None = None
    capo: int | None = None
    tempo: str | None = None
    extra: dict[str, str] = field(default_factory=dict)


@dataclass
class RenderedLine:
    kind: LineKind
    text: str = ""
    segments: list[Segment] = field(default_factory=list)


@dataclass
class RenderedSection:
    """A named, delimited span of a song (Verse, Chorus, …)."""

    name: str
    lines: list[RenderedLine] = field(default_factory=list)


@dataclass
class PresentationTree:
    """Sections → lines → inline segments, ready for a formatter."""

    direction: TextDirection = TextDirection.LTR
    items: list[RenderedSection | RenderedLine] = field(default_factory=list)
    key: str | None = None
    title: str | None = None
    font_size_px: int = 16
    column_count: int = 1
    lyrics_only: bool = False

    def is_empty(self) -> bool:
        return not self.items

    def lines(self) -> list[RenderedLine]:
        """All rendered lines in document order, sections flattened."""
        result: list[RenderedLine] = []
        for item in self.items:
            if isinstance(item, RenderedSection):
                result.extend(item.lines)
            else:
                result.append(item)
        return result


@dataclass
class SizingState:
    """Font size and column count chosen for one render target."""

    font_size_px: int
    column_count: int = 1
    column_font_sizes: tuple[int, ...] = ()


@dataclass(frozen=True)
class KeyOption:
    """One entry of a key picker, e.g. ``KeyOption("C#", "C# / Db")``."""

    value: str
    label: str
