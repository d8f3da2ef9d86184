import pytest

from leadsheet.models import ChordPosition, LineKind
from leadsheet.parser import ChordParser, normalize_chord, parse, parse_chord_line, parse_metadata


def _kinds(markup: str) -> list[LineKind]:
    return [line.kind for line in parse(markup)]


# ---------------------------------------------------------------------------
# Recognition order
# ---------------------------------------------------------------------------


def test_comment_becomes_section_label():
    lines = parse("{c: Intro}\n{comment:Bridge x2}")
    assert [(l.kind, l.content) for l in lines] == [
        (LineKind.SECTION_LABEL, "Intro"),
        (LineKind.SECTION_LABEL, "Bridge x2"),
    ]


def test_other_directives_dropped():
    assert parse("{title: Amazing Grace}\n{key: G}\n{capo: 2}\n{}") == []


def test_section_start_with_name():
    (line,) = parse("{soc: Verse 1}")
    assert line.kind is LineKind.SECTION_START
    assert line.content == "Verse 1"


def test_section_start_defaults_to_chorus():
    (line,) = parse("{soc}")
    assert line.content == "Chorus"


def test_section_start_space_separated_name():
    (line,) = parse("{soc Pre-Chorus}")
    assert line.content == "Pre-Chorus"


def test_long_form_and_verse_markers():
    lines = parse("{start_of_chorus}\n{end_of_chorus}\n{start_of_verse}\n{eov}\n{sob: Bridge 2}\n{eob}")
    assert [l.kind for l in lines] == [
        LineKind.SECTION_START,
        LineKind.SECTION_END,
        LineKind.SECTION_START,
        LineKind.SECTION_END,
        LineKind.SECTION_START,
        LineKind.SECTION_END,
    ]
    assert [l.content for l in lines if l.kind is LineKind.SECTION_START] == ["Chorus", "Verse", "Bridge 2"]


def test_directives_case_insensitive():
    assert _kinds("{SOC}\n{EOC}\n{C: x}") == [
        LineKind.SECTION_START,
        LineKind.SECTION_END,
        LineKind.SECTION_LABEL,
    ]


def test_blank_lines_are_empty():
    assert _kinds("\n   \n\t") == [LineKind.EMPTY, LineKind.EMPTY, LineKind.EMPTY]


def test_plain_lyrics():
    (line,) = parse("Amazing grace how sweet the sound")
    assert line.kind is LineKind.LYRICS
    assert line.content == "Amazing grace how sweet the sound"


# ---------------------------------------------------------------------------
# Chord lines
# ---------------------------------------------------------------------------


def test_chord_offsets_relative_to_stripped_lyrics():
    line = parse_chord_line("[C]Hello [G]world")
    assert line.kind is LineKind.CHORD_LINE
    assert line.content == "Hello world"
    assert line.chords == [ChordPosition("C", 0), ChordPosition("G", 6)]


def test_offsets_subtract_every_removed_token():
    # In the raw line [F] starts at 14 and [Am7/E] at 21.
    line = parse_chord_line("Hal[G]le[Em]lu[F]jah [Am7/E]yes")
    assert line.content == "Hallelujah yes"
    assert line.chords == [
        ChordPosition("G", 3),
        ChordPosition("Em", 5),
        ChordPosition("F", 7),
        ChordPosition("Am7/E", 11),
    ]


def test_offsets_are_valid_indices():
    line = parse_chord_line("[A][B]ab[C][D]")
    assert line.content == "ab"
    for cp in line.chords:
        assert 0 <= cp.position <= len(line.content)
    assert [cp.position for cp in line.chords] == [0, 0, 2, 2]


def test_chord_at_end_of_line():
    line = parse_chord_line("end[G]")
    assert line.chords == [ChordPosition("G", 3)]
    assert line.content == "end"


def test_hebrew_chord_line():
    line = parse_chord_line("[Am]שלום [G]עולם")
    assert line.content == "שלום עולם"
    assert line.chords == [ChordPosition("Am", 0), ChordPosition("G", 5)]


def test_stray_bracket_is_chord_line_without_chords():
    (line,) = parse("a [ lonely bracket")
    assert line.kind is LineKind.CHORD_LINE
    assert line.chords == []
    assert line.content == "a [ lonely bracket"


# ---------------------------------------------------------------------------
# Chord normalisation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("AM", "Am"),
        ("AM7", "Am7"),
        ("C#M", "C#m"),
        ("BbM7", "Bbm7"),
        ("CMaj7", "CMaj7"),
        ("Cmaj7", "Cmaj7"),
        ("G", "G"),
    ],
)
def test_normalize_chord(raw, expected):
    assert normalize_chord(raw) == expected


def test_normalisation_applied_in_chord_lines():
    line = parse_chord_line("[EM]la [FMaj7]la")
    assert [cp.chord for cp in line.chords] == ["Em", "FMaj7"]


# ---------------------------------------------------------------------------
# Totality
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "markup",
    ["", "\n", "{soc", "[", "]", "[]", "{soc}\nno end", "{eoc}", "{{}}", "[[C]]", "{c:}", "\r\n\r\n", "{ 42 }"],
)
def test_parse_never_raises(markup):
    assert isinstance(parse(markup), list)


def test_empty_input():
    assert parse("") == []


def test_parser_object_delegates():
    assert ChordParser().parse("{soc}\nx\n{eoc}") == parse("{soc}\nx\n{eoc}")


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def test_metadata_fields():
    meta = parse_metadata("{title: Amazing Grace}\n{artist: Newton}\n{key: G}\n{capo: 2}\n{tempo: 80}")
    assert meta.title == "Amazing Grace"
    assert meta.artist == "Newton"
    assert meta.key == "G"
    assert meta.capo == 2
    assert meta.tempo == "80"


def test_metadata_short_title_and_extra():
    meta = parse_metadata("{t: Song}\n{time: 3/4}")
    assert meta.title == "Song"
    assert meta.extra == {"time": "3/4"}


def test_metadata_ignores_comments_and_sections():
    meta = parse_metadata("{c: Intro}\n{soc: Verse 1}\n{eoc}")
    assert meta.extra == {}
    assert meta.title is None


def test_metadata_first_value_wins():
    assert parse_metadata("{key: G}\n{key: A}").key == "G"


def test_metadata_bad_capo_left_unset():
    assert parse_metadata("{capo: two}").capo is None
