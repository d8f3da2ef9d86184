from leadsheet.fit import fit_page
from leadsheet.formatters.text import TextFormatter, chord_rows
from leadsheet.models import PresentationTree
from leadsheet.render import render_document


def _render(content: str, transpose_semitones: int = 0, **kwargs) -> str:
    return TextFormatter().render(render_document(content, transpose_semitones, **kwargs))


# ---------------------------------------------------------------------------
# Chord rows
# ---------------------------------------------------------------------------


def test_chords_above_their_syllables():
    assert _render("[C]Hello [G]world") == "C     G\nHello world\n"


def test_leading_lyric_before_first_chord():
    out = _render("Amazing [G]grace")
    assert out == "        G\nAmazing grace\n"


def test_crowded_chords_stretch_word_with_hyphens():
    assert _render("[Am7]Hal[D]lelujah") == "Am7 D\nHal-lelujah\n"


def test_crowded_chords_between_words_use_spaces():
    assert _render("[Cmaj7]a [G]b") == "Cmaj7 G\na     b\n"


def test_trailing_chord_run_on_own_row():
    assert _render("Hello [C][G]") == "Hello\nC G\n"


def test_chord_only_line():
    assert _render("[C][G][Am]") == "C G Am\n"


def test_chord_rows_placements():
    tree = render_document("[C]Hello [G]world")
    rows = chord_rows(tree.lines()[0].segments)
    assert rows == [([(0, "C"), (6, "G")], "Hello world")]


def test_rtl_chord_row_mirrored():
    out = _render("[Am]שלום [G]עולם")
    chord_row, lyric = out.splitlines()
    assert lyric == "שלום עולם"
    # nine columns: Am over the rightmost two, G over column 3
    assert chord_row == "   G   Am"


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def test_header_and_sections():
    out = _render("{title: Amazing Grace}\n{key: G}\n{soc: Verse 1}\n[G]Amazing [C]grace\n{eoc}\n{soc}\nla\n{eoc}")
    assert out == (
        "Amazing Grace\n"
        "Key: G\n"
        "\n"
        "Verse 1:\n"
        "G       C\n"
        "Amazing grace\n"
        "\n"
        "Chorus:\n"
        "la\n"
    )


def test_label_in_parentheses():
    assert _render("{c: Intro}") == "(Intro)\n"


def test_lyrics_only_has_no_chord_rows():
    assert _render("[C]Hello [G]world", lyrics_only=True) == "Hello world\n"


def test_transposed_chords():
    assert _render("[C]Hello [G]world", 2).splitlines()[0] == "D     A"


def test_hebrew_locale_section_header():
    assert _render("{soc: Chorus}\nla\n{eoc}", target_locale="he").splitlines()[0] == "פזמון:"


def test_empty_tree():
    assert TextFormatter().render(PresentationTree()) == "\n"


def test_page_columns_share_one_header():
    layout = fit_page("{title: Long One}\n{key: C}\n" + "\n".join(f"line {i}" for i in range(60)), max_height_px=600)
    out = TextFormatter().render_columns(layout.columns).splitlines()
    assert out[:3] == ["Long One", "Key: C", ""]
    assert out.count("Long One") == 1
    assert out[3] == "line 0"
    assert out[-1] == "line 59"
    assert out[out.index("line 29") + 1] == ""
    assert out[out.index("line 29") + 2] == "line 30"
