from unittest.mock import MagicMock

from leadsheet.models import SizingState
from leadsheet.view import LeadSheetView, Trigger

SHORT_SONG = "{soc: Verse 1}\n[C]Hello [G]world\n{eoc}"
LONG_SONG = "\n".join(f"[C]line [G]{i}" for i in range(200))


# ---------------------------------------------------------------------------
# Recompute
# ---------------------------------------------------------------------------


def test_short_song_one_column():
    view = LeadSheetView(SHORT_SONG, viewport=(1280, 800))
    state = view.recompute()
    assert state == SizingState(font_size_px=16, column_count=1)
    assert view.tree.column_count == 1
    assert view.tree.items[0].name == "Verse 1"


def test_long_song_two_columns():
    view = LeadSheetView(LONG_SONG, viewport=(1280, 800))
    assert view.recompute().column_count == 2
    assert view.tree.column_count == 2


def test_long_song_on_phone_one_column():
    view = LeadSheetView(LONG_SONG, viewport=(375, 800))
    assert view.recompute().column_count == 1


def test_font_size_kept_on_screen():
    view = LeadSheetView(LONG_SONG, font_size_px=20, viewport=(1280, 800))
    assert view.recompute().font_size_px == 20
    assert view.tree.font_size_px == 20


def test_transposition_change_rerenders():
    view = LeadSheetView(SHORT_SONG)
    view.recompute()
    view.set_transposition(2, song_key="C")
    view.recompute(Trigger.TRANSPOSITION_CHANGED)
    assert [s.chord for s in view.tree.lines()[0].segments] == ["D", "A"]
    assert view.tree.key == "D"


def test_content_change_rerenders():
    view = LeadSheetView(SHORT_SONG)
    view.recompute()
    view.set_content("{soc}\nnew words\n{eoc}")
    view.recompute(Trigger.CONTENT_CHANGED)
    assert view.tree.items[0].name == "Chorus"


def test_font_size_change_rerenders_and_redecides_columns():
    # 20 chord lines are 54em: 648px at 12px, 1080px at 20px, against 850px
    content = "\n".join(f"[C]line [G]{i}" for i in range(20))
    view = LeadSheetView(content, font_size_px=12, viewport=(1280, 1000))
    assert view.recompute().column_count == 1
    tree = view.tree

    view.set_font_size(20)
    state = view.recompute(Trigger.FONT_SIZE_CHANGED)
    assert state == SizingState(font_size_px=20, column_count=2)
    assert view.tree is not tree
    assert view.tree.font_size_px == 20


def test_resize_keeps_tree():
    view = LeadSheetView(SHORT_SONG)
    view.recompute()
    tree = view.tree
    view.recompute(Trigger.VIEWPORT_RESIZED)
    assert view.tree is tree


def test_resize_before_first_render_still_renders():
    view = LeadSheetView(SHORT_SONG)
    view.recompute(Trigger.VIEWPORT_RESIZED)
    assert view.tree is not None


# ---------------------------------------------------------------------------
# Resize listener lifecycle
# ---------------------------------------------------------------------------


def test_attach_registers_listener():
    surface = MagicMock()
    view = LeadSheetView(SHORT_SONG)
    view.attach(surface)
    surface.add_resize_listener.assert_called_once_with(view.on_resize)


def test_attach_same_surface_twice_registers_once():
    surface = MagicMock()
    view = LeadSheetView(SHORT_SONG)
    view.attach(surface)
    view.attach(surface)
    surface.add_resize_listener.assert_called_once()


def test_detach_removes_listener():
    surface = MagicMock()
    view = LeadSheetView(SHORT_SONG)
    view.attach(surface)
    view.detach()
    surface.remove_resize_listener.assert_called_once_with(view.on_resize)


def test_detach_without_attach_is_noop():
    LeadSheetView(SHORT_SONG).detach()


def test_attach_new_surface_detaches_old():
    old, new = MagicMock(), MagicMock()
    view = LeadSheetView(SHORT_SONG)
    view.attach(old)
    view.attach(new)
    old.remove_resize_listener.assert_called_once_with(view.on_resize)
    new.add_resize_listener.assert_called_once_with(view.on_resize)


def test_resize_goes_through_scheduler():
    schedule = MagicMock()
    view = LeadSheetView(LONG_SONG, schedule=schedule)
    view.on_resize(1280, 800)
    assert view.viewport == (1280, 800)
    schedule.assert_called_once_with(Trigger.VIEWPORT_RESIZED)
    assert view.tree is None


def test_resize_without_scheduler_recomputes():
    view = LeadSheetView(LONG_SONG, viewport=(375, 800))
    view.recompute()
    assert view.sizing.column_count == 1
    view.on_resize(1280, 800)
    assert view.sizing.column_count == 2
