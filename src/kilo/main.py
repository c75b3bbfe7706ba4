# kilo/main.py
"""
Kilo Main Entry Point
=====================

Launches the editor. In order it:
1) Environment Loading: reads ~/.config/kilo/.env so KILO_KEYTRACE and
   KILO_LOG_LEVEL can be set there.
2) Configuration & Logging: loads config.toml and initializes logging.
3) Raw Mode: puts the terminal into raw mode, restoring it on every exit path.
4) Application Run: opens the file named on the command line (if any) and
   runs the editor loop, or the key inspector with ``--debug-keys``.

Usage:
    kilo [FILE]
    kilo --debug-keys
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

from dotenv import load_dotenv

from kilo.core.Kilo import Kilo
from kilo.ui.AppendBuffer import CLEAR_SCREEN, CURSOR_HOME
from kilo.ui.KeyDebugger import run_key_debugger
from kilo.ui.TerminalAppMode import TerminalAppMode, TerminalError
from kilo.utils.logging_config import setup_logging
from kilo.utils.utils import get_config_dir, get_int_setting, load_config

logger = logging.getLogger("kilo")

USAGE = "usage: kilo [FILE] | kilo --debug-keys"


def parse_args(argv: list[str]) -> tuple[Optional[str], bool]:
    """Returns (filename, debug_keys) from the arguments after the program name.

    Raises:
        ValueError: On unknown options or more than one file.
    """
    filename: Optional[str] = None
    debug_keys = False
    for arg in argv:
        if arg == "--debug-keys":
            debug_keys = True
        elif arg.startswith("-") and arg != "-":
            raise ValueError(f"unknown option '{arg}'")
        elif filename is None:
            filename = arg
        else:
            raise ValueError("only one file can be edited at a time")
    if debug_keys and filename is not None:
        raise ValueError("--debug-keys takes no file")
    return filename, debug_keys


def run(config: dict[str, Any], filename: Optional[str], debug_keys: bool = False) -> int:
    """Runs the editor (or key inspector) in raw mode. Returns the exit status."""
    terminal = TerminalAppMode(
        read_timeout_ms=get_int_setting(config, "terminal", "read_timeout_ms", minimum=1)
    )
    previous_winch = None
    try:
        terminal.enter()
        if debug_keys:
            run_key_debugger(terminal)
            return 0

        editor = Kilo(terminal, config)

        def _on_winch(signum, frame):
            editor.resize_pending = True

        previous_winch = signal.signal(signal.SIGWINCH, _on_winch)

        if filename:
            editor.open_file(filename)
        editor.run()
        logger.info("Kilo shut down gracefully.")
        return 0
    except OSError as e:
        _fail(terminal, e)
        return 1
    except Exception as e:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        _fail(terminal, e)
        return 1
    finally:
        if previous_winch is not None:
            signal.signal(signal.SIGWINCH, previous_winch)
        terminal.exit()


def _fail(terminal: TerminalAppMode, error: BaseException) -> None:
    """Restores the terminal, clears the screen and reports a fatal error."""
    try:
        terminal.exit()
        terminal.write(CLEAR_SCREEN + CURSOR_HOME)
    except TerminalError as e_restore:
        logger.error("Could not reset the terminal: %s", e_restore)
    logger.critical("Fatal error: %s", error)
    print(f"kilo: {error}", file=sys.stderr)


def start(argv: Optional[list[str]] = None) -> None:
    """Console-script entry point."""
    load_dotenv(dotenv_path=get_config_dir() / ".env")

    config = load_config()
    setup_logging(config)
    logger.info("Kilo editor starting up...")

    try:
        filename, debug_keys = parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        print(f"kilo: {e}\n{USAGE}", file=sys.stderr)
        sys.exit(2)

    sys.exit(run(config, filename, debug_keys))


if __name__ == "__main__":
    start()
