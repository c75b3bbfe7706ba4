# kilo/ui/TerminalAppMode.py
from __future__ import annotations

import logging
import os
import re
import sys
import termios
from typing import Optional

from kilo.ui.AppendBuffer import CURSOR_FAR_CORNER, REQUEST_CURSOR_POSITION

_CURSOR_REPORT_RE = re.compile(rb"^\x1b\[(\d+);(\d+)$")


class TerminalError(OSError):
    """Unrecoverable terminal I/O failure (raw mode, size query, reads)."""


class TerminalAppMode:
    """
    Put the terminal into the raw state the editor needs and talk to it in
    bytes:

    - raw input: no echo, no canonical line buffering, no signal keys
      (Ctrl-C/Ctrl-Z), no flow control (Ctrl-S/Ctrl-Q), no CR→NL mapping.
    - raw output: no NL→CRNL post-processing; the renderer writes CRLF itself.
    - bounded reads: VMIN=0 / VTIME so `read_byte()` returns None after
      roughly `read_timeout_ms` with nothing typed.

    Always pair `enter()` with `exit()` (try/finally), or use the instance as
    a context manager.
    """

    def __init__(
        self,
        fd_in: Optional[int] = None,
        fd_out: Optional[int] = None,
        read_timeout_ms: int = 100,
    ) -> None:
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        # VTIME is in tenths of a second; 0 would turn reads into busy polls.
        self.vtime = max(1, min(255, round(read_timeout_ms / 100)))
        self._original_attrs: Optional[list] = None

    def __enter__(self) -> "TerminalAppMode":
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.exit()

    @property
    def entered(self) -> bool:
        return self._original_attrs is not None

    def enter(self) -> None:
        if self.entered:
            return
        try:
            self._original_attrs = termios.tcgetattr(self.fd_in)
        except termios.error as e:
            raise TerminalError(f"tcgetattr: {e}") from e

        raw = termios.tcgetattr(self.fd_in)
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = self.vtime
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, raw)
        except termios.error as e:
            self._original_attrs = None
            raise TerminalError(f"tcsetattr: {e}") from e
        logging.debug("TerminalAppMode: entered raw mode (VTIME=%d).", self.vtime)

    def exit(self) -> None:
        if not self.entered:
            return
        attrs, self._original_attrs = self._original_attrs, None
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, attrs)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e
        logging.debug("TerminalAppMode: exited (restored terminal modes).")

    # ── I/O ───────────────────────────────────────────────────────────────────

    def read_byte(self) -> Optional[int]:
        """Returns one input byte, or None when the read timed out empty."""
        try:
            data = os.read(self.fd_in, 1)
        except BlockingIOError:
            return None
        except OSError as e:
            raise TerminalError(f"read: {e}") from e
        return data[0] if data else None

    def write(self, data: bytes) -> None:
        view = memoryview(data)
        try:
            while view:
                written = os.write(self.fd_out, view)
                view = view[written:]
        except OSError as e:
            raise TerminalError(f"write: {e}") from e

    # ── size query ────────────────────────────────────────────────────────────

    def get_window_size(self) -> tuple[int, int]:
        """Returns (rows, cols) of the terminal.

        Falls back to pushing the cursor to the bottom-right corner and asking
        the terminal where it ended up when the OS cannot tell us.
        """
        try:
            size = os.get_terminal_size(self.fd_out)
            if size.columns > 0 and size.lines > 0:
                return size.lines, size.columns
        except OSError as e:
            logging.debug("get_terminal_size failed (%s); probing cursor position.", e)
        self.write(CURSOR_FAR_CORNER)
        return self.get_cursor_position()

    def get_cursor_position(self) -> tuple[int, int]:
        self.write(REQUEST_CURSOR_POSITION)
        reply = bytearray()
        while len(reply) < 31:
            byte = self.read_byte()
            if byte is None or byte == ord("R"):
                break
            reply.append(byte)
        match = _CURSOR_REPORT_RE.match(bytes(reply))
        if not match:
            raise TerminalError(f"getCursorPosition: unexpected reply {bytes(reply)!r}")
        return int(match.group(1)), int(match.group(2))
