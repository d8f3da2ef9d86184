import pytest

from leadsheet.models import LineKind, RenderedLine, RenderedSection, SegmentKind, TextDirection
from leadsheet.parser import parse
from leadsheet.render import DocumentRenderer, render_document

# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------


def test_single_section():
    tree = render_document("{soc: Verse 1}\n[C]Hello [G]world\n{eoc}")
    assert tree.direction is TextDirection.LTR
    (section,) = tree.items
    assert isinstance(section, RenderedSection)
    assert section.name == "Verse 1"
    (line,) = section.lines
    assert line.kind is LineKind.CHORD_LINE
    assert line.text == "Hello world"
    assert [(s.chord, s.text) for s in line.segments] == [("C", "Hello "), ("G", "world")]


def test_lines_outside_sections_stay_top_level():
    tree = render_document("intro words\n{soc}\nchorus\n{eoc}\noutro words")
    kinds = [type(item) for item in tree.items]
    assert kinds == [RenderedLine, RenderedSection, RenderedLine]
    assert tree.items[0].text == "intro words"
    assert tree.items[2].text == "outro words"


def test_unterminated_section_is_kept():
    tree = render_document("{soc}\nla la")
    (section,) = tree.items
    assert section.name == "Chorus"
    assert [line.text for line in section.lines] == ["la la"]


def test_second_start_closes_first_section():
    tree = render_document("{soc: A}\nx\n{soc: B}\ny\n{eoc}")
    assert [(s.name, [l.text for l in s.lines]) for s in tree.items] == [("A", ["x"]), ("B", ["y"])]


def test_stray_end_ignored():
    tree = render_document("{eoc}\nwords")
    (line,) = tree.items
    assert line.kind is LineKind.LYRICS


def test_empty_section_kept():
    tree = render_document("{soc: Intro}\n{eoc}")
    (section,) = tree.items
    assert section.lines == []


@pytest.mark.parametrize("content", ["", None, "{title: Only Metadata}"])
def test_empty_content_gives_empty_tree(content):
    assert render_document(content).is_empty()


def test_labels_and_empty_lines_rendered():
    tree = render_document("{c: Intro}\n\n[G]x")
    assert [line.kind for line in tree.lines()] == [LineKind.SECTION_LABEL, LineKind.EMPTY, LineKind.CHORD_LINE]


def test_font_size_recorded_on_tree():
    assert render_document("[C]x", font_size_px=12).font_size_px == 12


# ---------------------------------------------------------------------------
# Transposition and key
# ---------------------------------------------------------------------------


def test_chords_transposed():
    tree = render_document("[C]Hello [G]world", 2)
    assert [s.chord for s in tree.lines()[0].segments] == ["D", "A"]


def test_lyrics_independent_of_transposition():
    content = "{soc: Verse 1}\n[Am]Hal[F]le[C]lu[G]jah\n{eoc}"
    texts = {tuple(l.text for l in render_document(content, n).lines()) for n in range(-11, 12)}
    assert len(texts) == 1


def test_title_and_key_from_directives():
    tree = render_document("{title: Amazing Grace}\n{key: G}\n[G]x", 2)
    assert tree.title == "Amazing Grace"
    assert tree.key == "A"


def test_key_spelled_for_display():
    assert render_document("{key: C}\n[C]x", 1).key == "Db"


def test_song_key_used_without_key_directive():
    assert render_document("[C]x", 3, "C").key == "Eb"


def test_key_directive_wins_over_song_key():
    assert render_document("{key: G}\n[G]x", 0, "C").key == "G"


def test_no_key_at_all():
    assert render_document("[C]x").key is None


# ---------------------------------------------------------------------------
# Lyrics-only
# ---------------------------------------------------------------------------


def test_lyrics_only_drops_chords():
    tree = render_document("{soc}\n[C]Hello [G]world\n{eoc}", lyrics_only=True)
    (line,) = tree.lines()
    assert line.kind is LineKind.LYRICS
    assert line.text == "Hello world"
    assert line.segments == []
    assert tree.lyrics_only


# ---------------------------------------------------------------------------
# Section names and direction
# ---------------------------------------------------------------------------


def test_hebrew_chart_gets_hebrew_section_names():
    tree = render_document("{soc: Verse 1}\n[Am]שלום [G]עולם\n{eoc}")
    assert tree.direction is TextDirection.RTL
    assert tree.items[0].name == "בית 1"


def test_locale_overrides_direction():
    tree = render_document("{soc: Verse 1}\n[Am]שלום\n{eoc}", target_locale="en")
    assert tree.direction is TextDirection.RTL
    assert tree.items[0].name == "Verse 1"


def test_english_chart_with_hebrew_locale():
    tree = render_document("{c: Intro}\n{soc: Chorus}\nla\n{eoc}", target_locale="he")
    assert tree.direction is TextDirection.LTR
    assert tree.items[0].text == "פתיחה"
    assert tree.items[1].name == "פזמון"


def test_unknown_section_name_passes_through():
    tree = render_document("{soc: Breakdown}\nx\n{eoc}", target_locale="he")
    assert tree.items[0].name == "Breakdown"


# ---------------------------------------------------------------------------
# DocumentRenderer
# ---------------------------------------------------------------------------


def test_render_lines_for_a_column():
    renderer = DocumentRenderer()
    tree = renderer.render_lines(parse("[C]la\n{eoc}\nx"), TextDirection.LTR, font_size_px=10)
    assert tree.font_size_px == 10
    assert [line.kind for line in tree.lines()] == [LineKind.CHORD_LINE, LineKind.LYRICS]


def test_prepare_transposes_markup():
    assert DocumentRenderer().prepare("{key: C}\n[C]x", 2) == "{key: D}\n[D]x"


def test_malformed_chords_pass_through():
    tree = render_document("[N.C.]silence [H7]odd", 4)
    segments = tree.lines()[0].segments
    assert [s.chord for s in segments] == ["N.C.", "H7"]
    assert all(s.kind is SegmentKind.CHORD_TEXT for s in segments)
