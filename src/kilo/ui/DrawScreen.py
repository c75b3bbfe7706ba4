# kilo/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders one complete frame of the editor with VT100 sequences.

It is responsible for:
- re-deriving the render column and the viewport before each frame,
- drawing the visible slice of every row, with `~` past the end of the file,
- the welcome banner on an empty document,
- the inverted status bar and the timed message bar,
- placing the cursor.

Every fragment goes into one `AppendBuffer` and reaches the terminal in a
single write, with the cursor hidden while the frame is drawn.
"""

import logging
import os
import time
from typing import TYPE_CHECKING

from kilo.ui.AppendBuffer import (
    CLEAR_SCREEN,
    CRLF,
    CURSOR_HOME,
    ERASE_LINE_RIGHT,
    HIDE_CURSOR,
    INVERT_OFF,
    INVERT_ON,
    SHOW_CURSOR,
    AppendBuffer,
    cursor_position,
)
from kilo.utils.utils import KILO_VERSION

if TYPE_CHECKING:
    from kilo.core.Kilo import Kilo


## ================= class DrawScreen ==============================
class DrawScreen:
    """Frame renderer for a `Kilo` editor.

    Attributes:
        editor (Kilo): Editor whose state is drawn.
        FILENAME_WIDTH (int): Bytes of the filename shown in the status bar.
    """

    FILENAME_WIDTH = 20

    def __init__(self, editor: "Kilo") -> None:
        self.editor = editor

    def draw(self) -> None:
        """Scrolls, composes the frame and writes it with one terminal write."""
        self._scroll()

        buf = AppendBuffer()
        buf.append(HIDE_CURSOR)
        buf.append(CURSOR_HOME)
        self._draw_rows(buf)
        self._draw_status_bar(buf)
        self._draw_message_bar(buf)
        self._position_cursor(buf)
        buf.append(SHOW_CURSOR)

        self.editor.terminal.write(buf.getvalue())

    def clear(self) -> None:
        """Wipes the screen and homes the cursor."""
        self.editor.terminal.write(CLEAR_SCREEN + CURSOR_HOME)

    # --- frame pieces ---
    def _scroll(self) -> None:
        editor = self.editor
        editor.rx = 0
        if editor.cy < editor.document.numrows:
            editor.rx = editor.document[editor.cy].cx_to_rx(editor.cx)
        editor.viewport = editor.viewport.follow(
            editor.cy, editor.rx, editor.screen_rows, editor.screen_cols
        )

    def _draw_rows(self, buf: AppendBuffer) -> None:
        editor = self.editor
        document = editor.document
        cols = editor.screen_cols
        row_offset = editor.viewport.row_offset
        col_offset = editor.viewport.col_offset

        for y in range(editor.screen_rows):
            filerow = y + row_offset
            if filerow < document.numrows:
                buf.append(document[filerow].render[col_offset:col_offset + cols])
            elif document.numrows == 0 and y == editor.screen_rows // 2:
                buf.append(self._welcome_line(cols))
            else:
                buf.append(b"~")
            buf.append(ERASE_LINE_RIGHT)
            buf.append(CRLF)

    @staticmethod
    def _welcome_line(cols: int) -> bytes:
        welcome = f"Kilo editor -- version {KILO_VERSION}".encode()[:cols]
        padding = (cols - len(welcome)) // 2
        line = b""
        if padding:
            line = b"~"
            padding -= 1
        return line + b" " * padding + welcome

    def _draw_status_bar(self, buf: AppendBuffer) -> None:
        editor = self.editor
        document = editor.document
        cols = editor.screen_cols

        name = os.fsencode(document.filename) if document.filename else b"[No Name]"
        status = b"%s - %d lines %s" % (
            name[:self.FILENAME_WIDTH],
            document.numrows,
            b"(modified)" if document.dirty else b"",
        )
        rstatus = b"%d/%d" % (editor.cy + 1, document.numrows)

        status = status[:cols]
        gap = cols - len(status)
        if gap >= len(rstatus):
            line = status + b" " * (gap - len(rstatus)) + rstatus
        else:
            line = status + b" " * gap

        buf.append(INVERT_ON)
        buf.append(line)
        buf.append(INVERT_OFF)
        buf.append(CRLF)

    def _draw_message_bar(self, buf: AppendBuffer) -> None:
        editor = self.editor
        buf.append(ERASE_LINE_RIGHT)
        if not editor.status_message:
            return
        if time.time() - editor.status_message_time < editor.message_timeout:
            message = editor.status_message.encode("utf-8", errors="replace")
            buf.append(message[:editor.screen_cols])
        else:
            logging.debug("Status message expired: %r", editor.status_message)

    def _position_cursor(self, buf: AppendBuffer) -> None:
        editor = self.editor
        buf.append(
            cursor_position(
                editor.cy - editor.viewport.row_offset,
                editor.rx - editor.viewport.col_offset,
            )
        )
