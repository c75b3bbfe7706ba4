# kilo/core/Row.py
"""kilo.core.Row
=================

One line of the document. A Row owns the literal bytes the user typed
(`chars`, tabs included) and a derived display form (`render`) in which every
tab is expanded to spaces up to the next tab stop.

`render` is written only by `Row.update()`; every mutator below calls it
after touching `chars`. It is used for drawing and searching, never edited.
"""

from __future__ import annotations

TAB = 0x09
SPACE = 0x20
DEFAULT_TAB_STOP = 8


class Row:
    """A single editable line plus its tab-expanded render form.

    Attributes:
        chars (bytearray): Literal content of the line.
        render (bytes): `chars` with tabs expanded to `tab_stop` columns.
        tab_stop (int): Width of a tab stop in render columns.
    """

    __slots__ = ("chars", "render", "tab_stop")

    def __init__(self, chars: bytes = b"", tab_stop: int = DEFAULT_TAB_STOP) -> None:
        self.chars = bytearray(chars)
        self.tab_stop = tab_stop
        self.render = b""
        self.update()

    def __len__(self) -> int:
        return len(self.chars)

    def __repr__(self) -> str:
        return f"Row({bytes(self.chars)!r})"

    # --- render derivation ---
    def update(self) -> None:
        """Recomputes `render` from `chars`."""
        out = bytearray()
        for byte in self.chars:
            if byte == TAB:
                out.append(SPACE)
                while len(out) % self.tab_stop != 0:
                    out.append(SPACE)
            else:
                out.append(byte)
        self.render = bytes(out)

    # --- coordinate mapping ---
    def cx_to_rx(self, cx: int) -> int:
        """Converts a buffer column to the render column it is drawn at."""
        rx = 0
        for byte in self.chars[:cx]:
            if byte == TAB:
                rx += (self.tab_stop - 1) - (rx % self.tab_stop)
            rx += 1
        return rx

    def rx_to_cx(self, rx: int) -> int:
        """Converts a render column back to a buffer column.

        A render column that falls inside an expanded tab maps to that tab.
        Columns past the end of the row map to ``len(chars)``.
        """
        cur_rx = 0
        for cx, byte in enumerate(self.chars):
            if byte == TAB:
                cur_rx += (self.tab_stop - 1) - (cur_rx % self.tab_stop)
            cur_rx += 1
            if cur_rx > rx:
                return cx
        return len(self.chars)

    # --- mutation ---
    def insert_char(self, at: int, ch: int) -> None:
        if at < 0 or at > len(self.chars):
            at = len(self.chars)
        self.chars.insert(at, ch)
        self.update()

    def delete_char(self, at: int) -> bool:
        """Removes the byte at `at`. Returns False when `at` is out of range."""
        if at < 0 or at >= len(self.chars):
            return False
        del self.chars[at]
        self.update()
        return True

    def append(self, data: bytes) -> None:
        self.chars.extend(data)
        self.update()

    def truncate(self, at: int) -> bytes:
        """Cuts the row at `at` and returns the removed tail."""
        tail = bytes(self.chars[at:])
        del self.chars[at:]
        self.update()
        return tail
