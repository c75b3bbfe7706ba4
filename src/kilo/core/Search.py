# kilo/core/Search.py
"""kilo.core.Search
====================

Incremental, direction-aware search. `IncrementalSearch` is the per-keystroke
callback that `Kilo.prompt()` invokes while the user types a query: every key
either moves to the next/previous match or restarts the search from the top
with the updated query.

Matching is a plain substring search over each row's render form, so match
positions are render columns; they are mapped back to buffer columns with
`Row.rx_to_cx` before the cursor moves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol

from kilo.core.Viewport import Viewport
from kilo.ui.KeyBinder import Key

if TYPE_CHECKING:
    from kilo.core.Kilo import Kilo


class PromptCallback(Protocol):
    """Anything `Kilo.prompt()` can call after each keystroke."""

    def __call__(self, query: bytes, key: int) -> None: ...


@dataclass(frozen=True)
class SearchSnapshot:
    cx: int
    cy: int
    viewport: Viewport


class IncrementalSearch:
    """Search state plus the keystroke handler driving it.

    Attributes:
        editor (Kilo): Editor whose cursor and viewport the search moves.
        last_match (int): Row of the current match, -1 when there is none.
        last_match_rx (int): Render column of the current match.
        direction (int): +1 to search forward, -1 to search backward.
        snapshot (SearchSnapshot): Cursor and viewport before the search began.
    """

    def __init__(self, editor: "Kilo") -> None:
        self.editor = editor
        self.snapshot = SearchSnapshot(editor.cx, editor.cy, editor.viewport)
        self.reset()

    def reset(self) -> None:
        self.last_match = -1
        self.last_match_rx = -1
        self.direction = 1

    def restore(self) -> None:
        """Puts the cursor and viewport back where they were before searching."""
        self.editor.cx = self.snapshot.cx
        self.editor.cy = self.snapshot.cy
        self.editor.viewport = self.snapshot.viewport

    def __call__(self, query: bytes, key: int) -> None:
        if key in (Key.ENTER, Key.ESC):
            self.reset()
            return
        if key in (Key.ARROW_RIGHT, Key.ARROW_DOWN):
            self.direction = 1
        elif key in (Key.ARROW_LEFT, Key.ARROW_UP):
            self.direction = -1
        else:
            self.reset()

        if self.last_match == -1:
            self.direction = 1
        if not query:
            return

        match = self.find_next(bytes(query))
        if match is None:
            logging.debug("search: no match for %r", query)
            return

        row_index, rx = match
        row = self.editor.document[row_index]
        self.last_match = row_index
        self.last_match_rx = rx
        self.editor.cy = row_index
        self.editor.cx = row.rx_to_cx(rx)
        # Offset past the end forces the next scroll to bring the match to the top.
        self.editor.viewport = Viewport(
            self.editor.document.numrows, self.editor.viewport.col_offset
        )

    def find_next(self, query: bytes) -> Optional[tuple[int, int]]:
        """Returns (row, render column) of the next match, or None.

        The row of the previous match is checked first for a further
        occurrence in the search direction; after that rows are stepped with
        wraparound, scanning at most ``numrows`` rows.
        """
        document = self.editor.document
        numrows = document.numrows
        if numrows == 0:
            return None

        if self.last_match != -1 and self.last_match < numrows:
            render = document[self.last_match].render
            if self.direction == 1:
                pos = render.find(query, self.last_match_rx + 1)
            else:
                pos = render.rfind(query, 0, self.last_match_rx + len(query) - 1)
            if pos != -1:
                return self.last_match, pos

        current = self.last_match
        for _ in range(numrows):
            current += self.direction
            if current == -1:
                current = numrows - 1
            elif current >= numrows:
                current = 0
            render = document[current].render
            pos = render.find(query) if self.direction == 1 else render.rfind(query)
            if pos != -1:
                return current, pos
        return None
