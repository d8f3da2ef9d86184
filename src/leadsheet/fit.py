"""Auto-fit: choose the font size and column count that keep a song in a box.

The search never touches a real layout engine.  It calls a *measure*
strategy, ``measure(font_size_px) -> height_px``, that the host supplies: a
browser-backed one in a UI, or :class:`TextMetricsEstimator`, an offline
estimate from average glyph widths, everywhere else.

Two call paths:

Page (``fit_page``)
    Fit the whole song in one column.  If the best size is below the usable
    threshold (15px), split the lines in half and fit each column on its own,
    so the two columns can end up at different sizes.

Screen (``decide_screen_columns``)
    Keep the caller's font size and go to two columns when one column would
    need scrolling (taller than the viewport minus 150px of header and
    controls).  Phones always get one column.

A measurement that fails never breaks a render: the page path falls back to
the minimum size, the screen path to one column.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable

from .columns import split
from .exceptions import MeasurementError
from .models import (
    LineKind,
    PresentationTree,
    RenderedLine,
    RenderedSection,
    SegmentKind,
    SizingState,
)
from .metrics import DEFAULT_METRICS, FontMetrics
from .parser import parse
from .render import DocumentRenderer
from .segments import chord_width_px, visual_length

logger = logging.getLogger(__name__)

# font size in px -> rendered height in px.  A strategy that cannot measure
# must raise MeasurementError; any other exception propagates out of fit().
Measure = Callable[[int], float]

# A4 at 96 dpi
A4_WIDTH_PX = 794
A4_HEIGHT_PX = 1123
PAGE_MARGIN_PX = 20
PAGE_HEADER_PX = 80

PAGE_CONTENT_WIDTH_PX = A4_WIDTH_PX - 2 * PAGE_MARGIN_PX
PAGE_CONTENT_HEIGHT_PX = A4_HEIGHT_PX - 2 * PAGE_MARGIN_PX - PAGE_HEADER_PX


@dataclass(frozen=True)
class FitConfig:
    min_px: int = 8
    max_px: int = 18
    iterations: int = 15
    # Below this, a single page column is considered unreadable.
    usable_px: int = 15
    # Header and controls above a screen render.
    reserved_screen_px: int = 150
    # Viewports this narrow never get two columns.
    mobile_width_px: int = 768
    column_gap_px: int = 40


# ---------------------------------------------------------------------------
# Binary search
# ---------------------------------------------------------------------------


def fit(
    measure: Measure,
    max_height_px: float,
    min_px: int = 8,
    max_px: int = 18,
    iterations: int = 15,
) -> int:
    """Largest integer font size in [*min_px*, *max_px*] whose height fits.

    Runs at most *iterations* bisection steps, one measurement each, and
    returns *min_px* if nothing fits or if *measure* raises
    :class:`~leadsheet.exceptions.MeasurementError`.  Any other exception
    propagates.
    """
    low, high = min_px, max_px
    best = min_px
    try:
        for _ in range(iterations):
            if low > high:
                break
            mid = (low + high) // 2
            if measure(mid) <= max_height_px:
                best = mid
                low = mid + 1
            else:
                high = mid - 1
    except MeasurementError as exc:
        logger.warning("Falling back to %dpx: %s", min_px, exc)
        return min_px
    logger.debug("Fit %dpx within %.0fpx", best, max_height_px)
    return best


# ---------------------------------------------------------------------------
# Offline measurement
# ---------------------------------------------------------------------------


@dataclass
class TextMetricsEstimator:
    """Estimate rendered height from glyph widths and line counts.

    Heights are in multiples of the font size: a lyric row is
    ``line_height`` em, a chord row above it ``chord_row_height`` em, a
    section header ``header_height`` em plus ``section_gap`` em of space.
    Lines wider than the column wrap onto extra rows.
    """

    tree: PresentationTree
    width_px: float
    column_count: int = 1
    column_gap_px: float = 40
    line_height: float = 1.5
    chord_row_height: float = 1.2
    header_height: float = 1.6
    section_gap: float = 0.8
    empty_height: float = 1.0
    metrics: FontMetrics = DEFAULT_METRICS

    def column_width(self) -> float:
        return (self.width_px - self.column_gap_px * (self.column_count - 1)) / self.column_count

    def measure(self, font_size_px: int) -> float:
        if font_size_px <= 0:
            raise MeasurementError(font_size_px, "font size must be positive")
        column_width = self.column_width()
        if column_width <= 0:
            raise MeasurementError(font_size_px, f"no room for text in {self.width_px}px")

        ems = 0.0
        for item in self.tree.items:
            if isinstance(item, RenderedSection):
                ems += self.header_height + self.section_gap
                for line in item.lines:
                    ems += self._line_ems(line, font_size_px, column_width)
            else:
                ems += self._line_ems(item, font_size_px, column_width)

        height = ems * font_size_px
        if self.column_count > 1:
            height = math.ceil(height / self.column_count)
        return height

    def _line_ems(self, line: RenderedLine, font_size_px: int, column_width: float) -> float:
        if line.kind is LineKind.EMPTY:
            return self.empty_height
        if line.kind is LineKind.SECTION_LABEL:
            return self.header_height

        width = self._line_width(line, font_size_px)
        rows = max(1, math.ceil(width / column_width))
        if line.kind is not LineKind.CHORD_LINE:
            return rows * self.line_height

        forced = sum(1 for segment in line.segments if segment.break_before)
        rows += forced
        if not line.text.strip():
            # Chord-only line: no lyric row under the chords
            return rows * self.chord_row_height
        return rows * (self.chord_row_height + self.line_height)

    def _line_width(self, line: RenderedLine, font_size_px: int) -> float:
        em = self.metrics.glyph_em(self.tree.direction)
        if not line.segments:
            return visual_length(line.text) * em * font_size_px

        width = 0.0
        for segment in line.segments:
            text = visual_length(segment.text + segment.hyphens) * em * font_size_px
            if segment.kind is SegmentKind.CHORD_TEXT:
                chord = chord_width_px(segment.chord or "", font_size_px, self.metrics)
                if segment.wide:
                    chord += font_size_px * 0.5
                width += max(text, chord)
            else:
                width += text
        return width


def fit_font_size(
    rendered: PresentationTree,
    max_height_px: float,
    measure: Measure | None = None,
    *,
    width_px: float = PAGE_CONTENT_WIDTH_PX,
    config: FitConfig = FitConfig(),
) -> int:
    """Largest font size at which *rendered* fits in *max_height_px*.

    Without a *measure* strategy the offline :class:`TextMetricsEstimator`
    is used at *width_px*.
    """
    if measure is None:
        measure = TextMetricsEstimator(
            rendered,
            width_px,
            column_count=rendered.column_count,
            column_gap_px=config.column_gap_px,
        ).measure
    return fit(measure, max_height_px, config.min_px, config.max_px, config.iterations)


# ---------------------------------------------------------------------------
# Page export
# ---------------------------------------------------------------------------


@dataclass
class PageLayout:
    """Result of fitting a song onto a page: sizes plus one tree per column.

    Each column tree is a single column at its own font size; the page's
    column count lives in ``sizing``.  Formatters lay the trees out side by
    side with :meth:`~leadsheet.formatters.base.Formatter.render_columns`.
    """

    sizing: SizingState
    columns: list[PresentationTree]


def fit_page(
    content: str,
    transpose_semitones: int = 0,
    song_key: str | None = None,
    *,
    max_height_px: float = PAGE_CONTENT_HEIGHT_PX,
    width_px: float = PAGE_CONTENT_WIDTH_PX,
    lyrics_only: bool = False,
    target_locale: str | None = None,
    renderer: DocumentRenderer | None = None,
    config: FitConfig = FitConfig(),
) -> PageLayout:
    """Fit *content* on a fixed page, escalating to two columns if needed."""
    renderer = renderer or DocumentRenderer()
    options = dict(lyrics_only=lyrics_only, target_locale=target_locale)

    tree = renderer.render(content, transpose_semitones, song_key, **options)
    size = fit_font_size(tree, max_height_px, width_px=width_px, config=config)
    if size >= config.usable_px:
        tree = renderer.render(content, transpose_semitones, song_key, font_size_px=size, **options)
        return PageLayout(sizing=SizingState(font_size_px=size, column_count=1, column_font_sizes=(size,)), columns=[tree])

    logger.debug("%dpx is below %dpx, splitting into two columns", size, config.usable_px)
    column_width = (width_px - config.column_gap_px) / 2
    halves = split(parse(renderer.prepare(content, transpose_semitones)))

    columns: list[PresentationTree] = []
    sizes: list[int] = []
    for half in halves:
        column = renderer.render_lines(half, tree.direction, **options)
        column_size = fit_font_size(column, max_height_px, width_px=column_width, config=config)
        column = renderer.render_lines(half, tree.direction, font_size_px=column_size, **options)
        column.title, column.key = tree.title, tree.key
        columns.append(column)
        sizes.append(column_size)

    return PageLayout(
        sizing=SizingState(font_size_px=min(sizes), column_count=2, column_font_sizes=tuple(sizes)),
        columns=columns,
    )


# ---------------------------------------------------------------------------
# Screen display
# ---------------------------------------------------------------------------


def decide_screen_columns(
    measure: Measure,
    viewport_height_px: float,
    viewport_width_px: float,
    font_size_px: int,
    config: FitConfig = FitConfig(),
) -> int:
    """1 or 2: two columns when one column would scroll past the viewport."""
    if viewport_width_px <= config.mobile_width_px:
        return 1
    try:
        height = measure(font_size_px)
    except MeasurementError as exc:
        logger.warning("Keeping one column: %s", exc)
        return 1
    return 2 if height > viewport_height_px - config.reserved_screen_px else 1
