"""HTML formatter.

Builds an HTML fragment with BeautifulSoup.  Chord lines are a flow of inline
``chord-segment`` spans, each holding its chord above its lyric fragment, so
the browser can wrap a long line without tearing a chord off its syllable:

.. code-block:: html

    <div class="chordpro-display" dir="ltr" style="font-size: 16px; column-count: 1">
      <div class="section-container">
        <div class="section-header">Verse 1</div>
        <div class="chord-lyric-pair">
          <span class="chord-segment"><span class="chord">C</span><span class="lyric">Hello </span></span>
          ...
        </div>
      </div>
    </div>

The word joiner between two halves of a word is emitted as a text node
between their spans, hyphen padding as ``<span class="hyphens">``.

A page fitted into two columns is one ``chordpro-page`` holding the song
header and a flex row of single-column ``chordpro-display`` blocks, each at
its own font size.
"""

from bs4 import BeautifulSoup, Tag

from ..models import LineKind, PresentationTree, RenderedLine, RenderedSection, Segment, SegmentKind
from .base import Formatter

NBSP = "\u00a0"
COLUMN_GAP_PX = 40


class HtmlFormatter(Formatter):
    name = "html"
    extension = ".html"

    def render(self, tree: PresentationTree) -> str:
        soup = BeautifulSoup("", "html.parser")
        root = _display(soup, tree)
        header = _song_header(soup, tree)
        if header is not None:
            root.insert(0, header)
        soup.append(root)
        return str(soup)

    def render_columns(self, columns: list[PresentationTree]) -> str:
        """One page: the song header, then the columns side by side."""
        if len(columns) == 1:
            return self.render(columns[0])

        soup = BeautifulSoup("", "html.parser")
        direction = columns[0].direction.value if columns else "ltr"
        page = soup.new_tag("div", attrs={"class": "chordpro-page", "dir": direction})
        soup.append(page)
        header = _song_header(soup, columns[0]) if columns else None
        if header is not None:
            page.append(header)

        row = soup.new_tag(
            "div",
            attrs={"class": "page-columns", "style": f"display: flex; column-gap: {COLUMN_GAP_PX}px"},
        )
        page.append(row)
        for column in columns:
            row.append(_display(soup, column, "flex: 1 1 0"))
        return str(soup)


def _display(soup: BeautifulSoup, tree: PresentationTree, extra_style: str = "") -> Tag:
    style = _style(tree)
    if extra_style:
        style += f"; {extra_style}"
    root = soup.new_tag(
        "div",
        attrs={
            "class": "chordpro-display",
            "dir": tree.direction.value,
            "style": style,
        },
    )
    for item in tree.items:
        if isinstance(item, RenderedSection):
            root.append(_section(soup, item))
        else:
            root.append(_line(soup, item))
    return root


def _song_header(soup: BeautifulSoup, tree: PresentationTree) -> Tag | None:
    if not (tree.title or tree.key):
        return None
    header = soup.new_tag("div", attrs={"class": "song-header"})
    if tree.title:
        title = soup.new_tag("span", attrs={"class": "song-title"})
        title.string = tree.title
        header.append(title)
    if tree.key:
        key = soup.new_tag("span", attrs={"class": "song-key"})
        key.string = tree.key
        header.append(key)
    return header


def _style(tree: PresentationTree) -> str:
    style = f"font-size: {tree.font_size_px}px; column-count: {tree.column_count}"
    if tree.column_count > 1:
        style += f"; column-gap: {COLUMN_GAP_PX}px; column-rule: 2px solid #dee2e6"
    return style


def _section(soup: BeautifulSoup, section: RenderedSection) -> Tag:
    container = soup.new_tag("div", attrs={"class": "section-container"})
    header = soup.new_tag("div", attrs={"class": "section-header"})
    header.string = section.name
    container.append(header)
    for line in section.lines:
        container.append(_line(soup, line))
    return container


def _line(soup: BeautifulSoup, line: RenderedLine) -> Tag:
    if line.kind is LineKind.EMPTY:
        return soup.new_tag("div", attrs={"class": "empty-line"})
    if line.kind is LineKind.SECTION_LABEL:
        label = soup.new_tag("div", attrs={"class": "section-label"})
        label.string = line.text
        return label
    if line.kind is not LineKind.CHORD_LINE:
        lyric = soup.new_tag("div", attrs={"class": "lyric-line"})
        lyric.string = line.text or NBSP
        return lyric

    pair = soup.new_tag("div", attrs={"class": "chord-lyric-pair"})
    for segment in line.segments:
        if segment.break_before:
            pair.append(soup.new_tag("br", attrs={"class": "forced-break"}))
        pair.append(_segment(soup, segment))
        if segment.connector:
            pair.append(segment.connector)
    return pair


def _segment(soup: BeautifulSoup, segment: Segment) -> Tag:
    if segment.kind is SegmentKind.TEXT:
        text = soup.new_tag("span", attrs={"class": "lyric"})
        text.string = segment.text
        return text

    classes = ["chord-segment"]
    if segment.wide:
        classes.append("wide")
    span = soup.new_tag("span", attrs={"class": " ".join(classes)})

    chord = soup.new_tag("span", attrs={"class": "chord"})
    chord.string = segment.chord or ""
    span.append(chord)

    lyric = soup.new_tag("span", attrs={"class": "lyric"})
    lyric.string = segment.text or NBSP
    span.append(lyric)

    if segment.hyphens:
        hyphens = soup.new_tag("span", attrs={"class": "hyphens"})
        hyphens.string = segment.hyphens
        span.append(hyphens)
    return span
