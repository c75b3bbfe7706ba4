# tests/test_core/test_search.py
"""Unit tests for `kilo.core.Search.IncrementalSearch`.

The search is driven directly through its keystroke callback against a
lightweight editor namespace, so no prompt or terminal is involved.
"""

from types import SimpleNamespace

from kilo.core.Document import Document
from kilo.core.Search import IncrementalSearch
from kilo.core.Viewport import Viewport
from kilo.ui.KeyBinder import Key


def _editor(lines: list[bytes], cx: int = 0, cy: int = 0) -> SimpleNamespace:
    return SimpleNamespace(document=Document(lines), cx=cx, cy=cy, viewport=Viewport(0, 0))


def test_forward_search_continues_in_row_then_wraps() -> None:
    ed = _editor([b"hello world", b"goodbye"])
    search = IncrementalSearch(ed)

    search(b"o", ord("o"))
    assert (ed.cy, ed.cx) == (0, 4)

    search(b"o", Key.ARROW_DOWN)
    assert (ed.cy, ed.cx) == (0, 7)

    search(b"o", Key.ARROW_DOWN)
    assert (ed.cy, ed.cx) == (1, 1)


def test_backward_search_takes_last_occurrence_and_wraps() -> None:
    ed = _editor([b"abc abc", b"x"])
    search = IncrementalSearch(ed)

    search(b"abc", ord("c"))
    assert (ed.cy, ed.cx) == (0, 0)
    search(b"abc", Key.ARROW_RIGHT)
    assert (ed.cy, ed.cx) == (0, 4)
    search(b"abc", Key.ARROW_UP)
    assert (ed.cy, ed.cx) == (0, 0)
    search(b"abc", Key.ARROW_LEFT)
    assert (ed.cy, ed.cx) == (0, 4)


def test_no_match_leaves_cursor_and_viewport_untouched() -> None:
    ed = _editor([b"abc", b"def"], cx=2, cy=1)
    ed.viewport = Viewport(1, 0)
    search = IncrementalSearch(ed)

    search(b"zz", ord("z"))
    search(b"zz", Key.ARROW_DOWN)

    assert (ed.cy, ed.cx) == (1, 2)
    assert ed.viewport == Viewport(1, 0)
    assert search.last_match == -1


def test_match_maps_render_column_back_through_tabs() -> None:
    ed = _editor([b"\tfoo"])
    search = IncrementalSearch(ed)
    search(b"foo", ord("o"))
    assert search.last_match_rx == 8
    assert (ed.cy, ed.cx) == (0, 1)


def test_hit_invalidates_row_offset() -> None:
    ed = _editor([b"a", b"b", b"target"])
    IncrementalSearch(ed)(b"target", ord("t"))
    assert ed.cy == 2
    assert ed.viewport.row_offset == ed.document.numrows


def test_empty_query_performs_no_scan() -> None:
    ed = _editor([b"abc"], cx=1)
    search = IncrementalSearch(ed)
    search(b"", Key.BACKSPACE)
    assert (ed.cy, ed.cx) == (0, 1)
    assert search.last_match == -1


def test_typing_a_new_character_restarts_from_the_top() -> None:
    ed = _editor([b"ab", b"ab"])
    search = IncrementalSearch(ed)
    search(b"a", ord("a"))
    search(b"a", Key.ARROW_DOWN)
    assert ed.cy == 1
    search(b"ab", ord("b"))
    assert (ed.cy, ed.cx) == (0, 0)


def test_enter_and_escape_reset_state() -> None:
    ed = _editor([b"abc"])
    search = IncrementalSearch(ed)
    search(b"b", ord("b"))
    assert search.last_match == 0
    search(b"b", Key.ENTER)
    assert (search.last_match, search.direction) == (-1, 1)
    search(b"b", Key.ESC)
    assert search.last_match == -1


def test_restore_returns_to_snapshot() -> None:
    ed = _editor([b"one", b"two"], cx=2, cy=0)
    search = IncrementalSearch(ed)
    search(b"tw", ord("w"))
    assert ed.cy == 1
    search.restore()
    assert (ed.cy, ed.cx) == (0, 2)
    assert ed.viewport == Viewport(0, 0)
