# kilo/ui/AppendBuffer.py
"""AppendBuffer.py
==================
Output batching and the VT100 sequences the renderer emits.

Every fragment of a frame is appended to one `AppendBuffer` and handed to the
terminal in a single write, so the screen never shows a half-drawn frame.
"""

from __future__ import annotations

# --- VT100 / ANSI output sequences ---
CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
ERASE_LINE_RIGHT = b"\x1b[K"
INVERT_ON = b"\x1b[7m"
INVERT_OFF = b"\x1b[m"
CURSOR_FAR_CORNER = b"\x1b[999C\x1b[999B"
REQUEST_CURSOR_POSITION = b"\x1b[6n"
CRLF = b"\r\n"


def cursor_position(row: int, col: int) -> bytes:
    """Sequence moving the cursor to the 0-based screen cell (row, col)."""
    return b"\x1b[%d;%dH" % (row + 1, col + 1)


class AppendBuffer:
    """Accumulates output fragments for a single terminal write."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def append(self, data: bytes) -> None:
        self._buf += data

    def __len__(self) -> int:
        return len(self._buf)

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def clear(self) -> None:
        self._buf.clear()
