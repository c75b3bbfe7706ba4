# kilo/core/Kilo.py
"""kilo.core.Kilo.py
============================
Kilo: the editor controller.

This module defines the `Kilo` class, which owns the editing session:

- the `Document` being edited and the cursor inside it,
- the viewport and terminal geometry,
- the timed status message shown under the status bar,
- character, newline and delete editing at the cursor,
- cursor movement, including paging and wrap at line ends,
- the one-line prompt used for "Save as" and incremental search,
- saving, and the quit guard for unsaved changes,
- the render -> read key -> dispatch main loop.

Drawing is delegated to `DrawScreen`, key decoding and dispatch to
`KeyBinder`, and terminal I/O to the `TerminalAppMode` it is given.
"""

import logging
import os
import time
from typing import Any, Optional

from kilo.core.Document import Document
from kilo.core.Search import IncrementalSearch, PromptCallback
from kilo.core.Viewport import Viewport
from kilo.ui.DrawScreen import DrawScreen
from kilo.ui.KeyBinder import Key, KeyBinder, ctrl_key
from kilo.ui.TerminalAppMode import TerminalAppMode
from kilo.utils.utils import DEFAULT_CONFIG, deep_merge, get_int_setting

logger = logging.getLogger("kilo")

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"
SEARCH_PROMPT = "Search: {} (Use ESC/Arrows/Enter)"
SAVE_AS_PROMPT = "Save as: {} (ESC to cancel)"


class Kilo:
    """Editor state and the operations the key bindings call.

    Cursor invariants: ``0 <= cy <= numrows``; when ``cy < numrows`` the
    column satisfies ``0 <= cx <= len(row)``, and on the virtual row past the
    end of the file ``cx == 0``.

    Attributes:
        terminal (TerminalAppMode): Raw-mode terminal used for all I/O.
        config (dict): Merged application configuration.
        document (Document): The rows being edited.
        cx, cy (int): Cursor position in buffer coordinates.
        rx (int): Render column of the cursor, derived before each frame.
        viewport (Viewport): First visible row and render column.
        screen_rows, screen_cols (int): Size of the text area.
        status_message (str): Text of the message bar.
        status_message_time (float): When the message was set.
        quit_remaining (int): Further Ctrl-Q presses needed to discard changes.
        running (bool): Main loop flag; cleared by `exit_editor`.
        resize_pending (bool): Set from the SIGWINCH handler.
    """

    def __init__(
        self, terminal: TerminalAppMode, config: Optional[dict[str, Any]] = None
    ) -> None:
        self.terminal = terminal
        self.config: dict[str, Any] = config if config is not None else deep_merge({}, DEFAULT_CONFIG)

        self.tab_stop = get_int_setting(self.config, "editor", "tab_stop", minimum=1)
        self.quit_times = get_int_setting(self.config, "editor", "quit_times")
        self.message_timeout = get_int_setting(self.config, "editor", "message_timeout")

        self.document = Document(tab_stop=self.tab_stop)
        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.viewport = Viewport()
        self.screen_rows = 0
        self.screen_cols = 0
        self.status_message = ""
        self.status_message_time = 0.0
        self.quit_remaining = self.quit_times
        self.running = False
        self.resize_pending = False

        self.drawer = DrawScreen(self)
        self.keybinder = KeyBinder(self)
        self.handle_resize()
        logger.info("Kilo initialized (%dx%d text area).", self.screen_cols, self.screen_rows)

    # --- status message ---
    def _set_status_message(self, message: str) -> None:
        self.status_message = message
        self.status_message_time = time.time()
        logging.debug("Status message set to: %r", message)

    # --- geometry ---
    def handle_resize(self) -> bool:
        """Re-queries the terminal size; two lines are kept for the bars."""
        rows, cols = self.terminal.get_window_size()
        self.screen_rows = max(1, rows - 2)
        self.screen_cols = max(1, cols)
        self.resize_pending = False
        logging.debug("Window size %dx%d -> text area %dx%d", cols, rows, self.screen_cols, self.screen_rows)
        return True

    def poll_resize(self) -> None:
        """Redraws for a resize signalled while waiting for a key."""
        if self.resize_pending:
            self.refresh_screen()

    def refresh_screen(self) -> None:
        if self.resize_pending:
            self.handle_resize()
        self.drawer.draw()

    def redraw(self) -> bool:
        return True

    # --- file operations ---
    def open_file(self, filename: str) -> bool:
        """Loads `filename`; a path that does not exist yet gives an empty document."""
        document = Document(tab_stop=self.tab_stop)
        document.load(filename)
        self.document = document
        self.cx = self.cy = self.rx = 0
        self.viewport = Viewport()
        return True

    def save_file(self) -> bool:
        if not self.document.filename:
            name = self.prompt(SAVE_AS_PROMPT)
            if name is None:
                self._set_status_message("Save aborted")
                return True
            self.document.filename = os.fsdecode(name)

        try:
            written = self.document.save()
        except OSError as e:
            logger.error("Failed to save '%s': %s", self.document.filename, e, exc_info=True)
            self._set_status_message(f"Can't save! I/O error: {e.strerror or e}")
            return True
        self._set_status_message(f"{written} bytes written to disk")
        return True

    def exit_editor(self) -> bool:
        """Quits, unless there are unsaved changes and the guard is still armed."""
        if self.document.dirty and self.quit_remaining > 0:
            self._set_status_message(
                "WARNING!!! File has unsaved changes. "
                f"Press Ctrl-Q {self.quit_remaining} more times to quit."
            )
            self.quit_remaining -= 1
            return True

        self.drawer.clear()
        self.running = False
        logger.info("Main loop stop signaled.")
        return False

    # --- editing ---
    def insert_char(self, ch: int) -> bool:
        if self.cy == self.document.numrows:
            self.document.insert_row(self.document.numrows, b"")
        self.document.row_insert_char(self.document[self.cy], self.cx, ch)
        self.cx += 1
        return True

    def insert_newline(self) -> bool:
        """Splits the row at the cursor; the cursor lands on the new row."""
        if self.cx == 0:
            self.document.insert_row(self.cy, b"")
        else:
            tail = self.document.row_truncate(self.document[self.cy], self.cx)
            self.document.insert_row(self.cy + 1, tail)
        self.cy += 1
        self.cx = 0
        return True

    def delete_char(self) -> bool:
        """Deletes the byte before the cursor, joining rows at column 0."""
        if self.cy == self.document.numrows:
            return False
        if self.cx == 0 and self.cy == 0:
            return False

        row = self.document[self.cy]
        if self.cx > 0:
            self.document.row_delete_char(row, self.cx - 1)
            self.cx -= 1
        else:
            previous = self.document[self.cy - 1]
            self.cx = len(previous)
            self.document.row_append_string(previous, bytes(row.chars))
            self.document.delete_row(self.cy)
            self.cy -= 1
        return True

    def handle_enter(self) -> bool:
        return self.insert_newline()

    def handle_backspace(self) -> bool:
        return self.delete_char()

    def handle_delete(self) -> bool:
        self.move_cursor(Key.ARROW_RIGHT)
        return self.delete_char()

    # --- movement ---
    def move_cursor(self, key: int) -> None:
        document = self.document
        row = document[self.cy] if self.cy < document.numrows else None

        if key == Key.ARROW_LEFT:
            if self.cx != 0:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = len(document[self.cy])
        elif key == Key.ARROW_RIGHT:
            if row is not None and self.cx < len(row):
                self.cx += 1
            elif row is not None and self.cx == len(row):
                self.cy += 1
                self.cx = 0
        elif key == Key.ARROW_UP:
            if self.cy != 0:
                self.cy -= 1
        elif key == Key.ARROW_DOWN:
            if self.cy < document.numrows:
                self.cy += 1

        # Snap to the end of a shorter destination row.
        row_len = len(document[self.cy]) if self.cy < document.numrows else 0
        if self.cx > row_len:
            self.cx = row_len

    def handle_up(self) -> bool:
        self.move_cursor(Key.ARROW_UP)
        return True

    def handle_down(self) -> bool:
        self.move_cursor(Key.ARROW_DOWN)
        return True

    def handle_left(self) -> bool:
        self.move_cursor(Key.ARROW_LEFT)
        return True

    def handle_right(self) -> bool:
        self.move_cursor(Key.ARROW_RIGHT)
        return True

    def handle_home(self) -> bool:
        self.cx = 0
        return True

    def handle_end(self) -> bool:
        if self.cy < self.document.numrows:
            self.cx = len(self.document[self.cy])
        return True

    def handle_page_up(self) -> bool:
        self.cy = self.viewport.row_offset
        for _ in range(self.screen_rows):
            self.move_cursor(Key.ARROW_UP)
        return True

    def handle_page_down(self) -> bool:
        self.cy = min(self.viewport.row_offset + self.screen_rows - 1, self.document.numrows)
        for _ in range(self.screen_rows):
            self.move_cursor(Key.ARROW_DOWN)
        return True

    # --- prompt and search ---
    def prompt(
        self, template: str, callback: Optional[PromptCallback] = None
    ) -> Optional[bytes]:
        """Reads a line of input in the message bar.

        `template` is shown with ``{}`` replaced by the text typed so far and
        the screen is redrawn after every key. `callback`, when given, is
        called with the current input and the key after each keystroke.

        Returns:
            The typed bytes on Enter, or None when the prompt was cancelled
            with Escape. Enter on an empty line is ignored.
        """
        buf = bytearray()
        while True:
            self._set_status_message(template.format(buf.decode("ascii")))
            self.refresh_screen()

            key = self.keybinder.get_key_input()
            if key in (Key.DEL, Key.BACKSPACE, ctrl_key("h")):
                if buf:
                    del buf[-1]
            elif key == Key.ESC:
                self._set_status_message("")
                if callback is not None:
                    callback(bytes(buf), key)
                return None
            elif key == Key.ENTER:
                if buf:
                    self._set_status_message("")
                    if callback is not None:
                        callback(bytes(buf), key)
                    return bytes(buf)
            elif 32 <= key < 127:
                buf.append(key)

            if callback is not None:
                callback(bytes(buf), key)

    def find(self) -> bool:
        """Incremental search; Escape puts the cursor back where it was."""
        search = IncrementalSearch(self)
        query = self.prompt(SEARCH_PROMPT, search)
        if query is None:
            search.restore()
        return True

    # --- main loop ---
    def process_keypress(self) -> bool:
        key = self.keybinder.get_key_input()
        changed = self.keybinder.handle_input(key)
        if self.keybinder.action_name(key) != "quit":
            self.quit_remaining = self.quit_times
        return changed

    def run(self) -> None:
        """Render -> read key -> dispatch until `exit_editor` stops the loop."""
        logger.info("Editor main loop started.")
        self.running = True
        self._set_status_message(HELP_MESSAGE)
        while self.running:
            self.refresh_screen()
            self.process_keypress()
        logger.info("Editor main loop finished.")
