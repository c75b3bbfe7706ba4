# kilo/ui/KeyDebugger.py
"""Raw key inspector behind ``kilo --debug-keys``.

Prints every decoded key as its integer value, symbolic name and, when
printable, the character itself. Ctrl-Q leaves.
"""

import logging

from kilo.ui.AppendBuffer import CRLF
from kilo.ui.KeyBinder import ctrl_key, key_name, read_key
from kilo.ui.TerminalAppMode import TerminalAppMode

QUIT_KEY = ctrl_key("q")


def describe_key(key: int) -> bytes:
    """One output line for a decoded key, e.g. ``b"97 'a' char: a"``."""
    line = f"{key} {key_name(key)}"
    if 32 <= key < 127:
        line += f" char: {chr(key)}"
    return line.encode("ascii") + CRLF


def run_key_debugger(terminal: TerminalAppMode) -> int:
    """Echoes keys until Ctrl-Q. Returns the number of keys shown."""
    logging.info("Entering key debug mode.")
    terminal.write(b"Press keys to see their codes. Ctrl-Q to quit." + CRLF)
    count = 0
    while True:
        key = read_key(terminal)
        if key == QUIT_KEY:
            break
        terminal.write(describe_key(key))
        count += 1
    logging.info("Key debug mode ended after %d keys.", count)
    return count
