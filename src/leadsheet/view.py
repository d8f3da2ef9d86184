"""Stateful screen view: re-render and re-size on explicit triggers.

Nothing here observes anything on its own.  The host owns the event sources
(edits, the transposition and font-size controls, window resizes), debounces
them, and then calls :meth:`LeadSheetView.recompute` with the reason.  A resize
listener is registered on :meth:`~LeadSheetView.attach` and removed again on
:meth:`~LeadSheetView.detach`.

Usage::

    view = LeadSheetView(content, viewport=(1280, 800))
    view.attach(window)                       # window.add_resize_listener(...)
    view.set_transposition(2)
    state = view.recompute(Trigger.TRANSPOSITION_CHANGED)
    state.column_count                        # 1 or 2
"""

from enum import Enum, auto
from typing import Callable, Protocol

from .fit import FitConfig, TextMetricsEstimator, decide_screen_columns
from .models import PresentationTree, SizingState
from .render import DocumentRenderer
from .segments import REFERENCE_FONT_PX


class Trigger(Enum):
    CONTENT_CHANGED = auto()
    TRANSPOSITION_CHANGED = auto()
    FONT_SIZE_CHANGED = auto()
    VIEWPORT_RESIZED = auto()


ResizeListener = Callable[[int, int], None]


class Surface(Protocol):
    """Whatever the view is drawn on; it reports resizes as ``(width, height)``."""

    def add_resize_listener(self, listener: ResizeListener) -> None: ...

    def remove_resize_listener(self, listener: ResizeListener) -> None: ...


class LeadSheetView:
    """Owns one render target's inputs, presentation tree and :class:`SizingState`."""

    def __init__(
        self,
        content: str = "",
        transpose_semitones: int = 0,
        song_key: str | None = None,
        *,
        font_size_px: int = REFERENCE_FONT_PX,
        viewport: tuple[int, int] = (1024, 768),
        lyrics_only: bool = False,
        target_locale: str | None = None,
        schedule: Callable[[Trigger], None] | None = None,
        renderer: DocumentRenderer | None = None,
        config: FitConfig = FitConfig(),
    ):
        self.content = content
        self.transpose_semitones = transpose_semitones
        self.song_key = song_key
        self.font_size_px = font_size_px
        self.viewport = viewport
        self.lyrics_only = lyrics_only
        self.target_locale = target_locale
        self.renderer = renderer or DocumentRenderer()
        self.config = config
        # Called with the trigger when a resize arrives; the host debounces and
        # eventually calls recompute().  Without one, resizes recompute at once.
        self._schedule = schedule or self.recompute

        self.tree: PresentationTree | None = None
        self.sizing = SizingState(font_size_px=font_size_px)
        self._surface: Surface | None = None

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_content(self, content: str) -> None:
        self.content = content

    def set_transposition(self, semitones: int, song_key: str | None = None) -> None:
        self.transpose_semitones = semitones
        if song_key is not None:
            self.song_key = song_key

    def set_font_size(self, font_size_px: int) -> None:
        self.font_size_px = font_size_px

    # ------------------------------------------------------------------
    # Surface lifecycle
    # ------------------------------------------------------------------

    def attach(self, surface: Surface) -> None:
        if self._surface is surface:
            return
        self.detach()
        surface.add_resize_listener(self.on_resize)
        self._surface = surface

    def detach(self) -> None:
        if self._surface is None:
            return
        self._surface.remove_resize_listener(self.on_resize)
        self._surface = None

    def on_resize(self, width: int, height: int) -> None:
        self.viewport = (width, height)
        self._schedule(Trigger.VIEWPORT_RESIZED)

    # ------------------------------------------------------------------
    # Recompute
    # ------------------------------------------------------------------

    def recompute(self, trigger: Trigger = Trigger.CONTENT_CHANGED) -> SizingState:
        """Bring the tree and sizing up to date after *trigger*.

        Every trigger but a resize re-renders the tree at the current font
        size.  A resize only re-decides the column count against the existing
        tree.
        """
        if self.tree is None or trigger is not Trigger.VIEWPORT_RESIZED:
            self.tree = self.renderer.render(
                self.content,
                self.transpose_semitones,
                self.song_key,
                font_size_px=self.font_size_px,
                lyrics_only=self.lyrics_only,
                target_locale=self.target_locale,
            )

        width, height = self.viewport
        estimator = TextMetricsEstimator(self.tree, width, column_gap_px=self.config.column_gap_px)
        columns = decide_screen_columns(estimator.measure, height, width, self.font_size_px, self.config)

        self.tree.column_count = columns
        self.sizing = SizingState(font_size_px=self.font_size_px, column_count=columns)
        return self.sizing
