# tests/ui/test_terminal_app_mode.py
"""Tests for `kilo.ui.TerminalAppMode`.

termios calls are replaced with recorders so raw-mode flag handling can be
checked without a TTY; reads, writes and the cursor-position probe run over
real OS pipes.
"""

import os
import termios
from typing import Iterator

import pytest

from kilo.ui.TerminalAppMode import TerminalAppMode, TerminalError

COOKED_IFLAG = termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
COOKED_LFLAG = termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG


class TermiosRecorder:
    def __init__(self) -> None:
        self.set_calls: list[tuple[int, int, list]] = []

    def tcgetattr(self, fd: int) -> list:
        return [COOKED_IFLAG, termios.OPOST, 0, COOKED_LFLAG, 38400, 38400, [0] * 32]

    def tcsetattr(self, fd: int, when: int, attrs: list) -> None:
        self.set_calls.append((fd, when, attrs))


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> TermiosRecorder:
    rec = TermiosRecorder()
    monkeypatch.setattr(termios, "tcgetattr", rec.tcgetattr)
    monkeypatch.setattr(termios, "tcsetattr", rec.tcsetattr)
    return rec


@pytest.fixture
def pipes() -> Iterator[tuple[int, int, int, int]]:
    """(in_read, in_write, out_read, out_write) file descriptors."""
    in_r, in_w = os.pipe()
    out_r, out_w = os.pipe()
    yield in_r, in_w, out_r, out_w
    for fd in (in_r, in_w, out_r, out_w):
        try:
            os.close(fd)
        except OSError:
            pass


# --- raw mode ---
def test_enter_sets_raw_flags(recorder: TermiosRecorder) -> None:
    term = TerminalAppMode(fd_in=5, fd_out=6, read_timeout_ms=100)
    term.enter()
    fd, when, raw = recorder.set_calls[-1]
    assert fd == 5
    assert when == termios.TCSAFLUSH
    assert raw[0] & COOKED_IFLAG == 0
    assert raw[1] & termios.OPOST == 0
    assert raw[2] & termios.CS8 == termios.CS8
    assert raw[3] & COOKED_LFLAG == 0
    assert raw[6][termios.VMIN] == 0
    assert raw[6][termios.VTIME] == 1
    assert term.entered


def test_exit_restores_original_and_is_idempotent(recorder: TermiosRecorder) -> None:
    term = TerminalAppMode(fd_in=5, fd_out=6)
    term.exit()
    assert recorder.set_calls == []

    term.enter()
    term.enter()
    term.exit()
    term.exit()
    assert len(recorder.set_calls) == 2
    restored = recorder.set_calls[-1][2]
    assert restored[0] == COOKED_IFLAG
    assert restored[3] == COOKED_LFLAG
    assert not term.entered


def test_context_manager(recorder: TermiosRecorder) -> None:
    with TerminalAppMode(fd_in=5, fd_out=6) as term:
        assert term.entered
    assert not term.entered
    assert len(recorder.set_calls) == 2


@pytest.mark.parametrize("timeout_ms, vtime", [(10, 1), (100, 1), (300, 3), (100000, 255)])
def test_read_timeout_becomes_vtime(timeout_ms: int, vtime: int) -> None:
    assert TerminalAppMode(fd_in=0, fd_out=1, read_timeout_ms=timeout_ms).vtime == vtime


def test_tcgetattr_failure_raises_terminal_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(fd: int) -> list:
        raise termios.error(25, "Inappropriate ioctl for device")

    monkeypatch.setattr(termios, "tcgetattr", broken)
    with pytest.raises(TerminalError):
        TerminalAppMode(fd_in=5, fd_out=6).enter()


# --- I/O ---
def test_read_byte_returns_bytes_then_none_at_eof(pipes: tuple[int, int, int, int]) -> None:
    in_r, in_w, _, out_w = pipes
    os.write(in_w, b"ab")
    os.close(in_w)
    term = TerminalAppMode(fd_in=in_r, fd_out=out_w)
    assert term.read_byte() == ord("a")
    assert term.read_byte() == ord("b")
    assert term.read_byte() is None


def test_read_byte_would_block_is_none(pipes: tuple[int, int, int, int]) -> None:
    in_r, _, _, out_w = pipes
    os.set_blocking(in_r, False)
    assert TerminalAppMode(fd_in=in_r, fd_out=out_w).read_byte() is None


def test_read_byte_other_errors_are_terminal_errors(pipes: tuple[int, int, int, int]) -> None:
    in_r, _, _, out_w = pipes
    os.close(in_r)
    with pytest.raises(TerminalError) as info:
        TerminalAppMode(fd_in=in_r, fd_out=out_w).read_byte()
    assert isinstance(info.value, OSError)


def test_write_sends_all_bytes(pipes: tuple[int, int, int, int]) -> None:
    in_r, _, out_r, out_w = pipes
    TerminalAppMode(fd_in=in_r, fd_out=out_w).write(b"\x1b[2Jhello")
    assert os.read(out_r, 100) == b"\x1b[2Jhello"


# --- size query ---
def test_window_size_from_os(monkeypatch: pytest.MonkeyPatch, pipes: tuple[int, int, int, int]) -> None:
    in_r, _, out_r, out_w = pipes
    monkeypatch.setattr(os, "get_terminal_size", lambda fd: os.terminal_size((100, 40)))
    assert TerminalAppMode(fd_in=in_r, fd_out=out_w).get_window_size() == (40, 100)


def test_window_size_falls_back_to_cursor_probe(
    monkeypatch: pytest.MonkeyPatch, pipes: tuple[int, int, int, int]
) -> None:
    in_r, in_w, out_r, out_w = pipes

    def no_size(fd: int) -> os.terminal_size:
        raise OSError(25, "Inappropriate ioctl for device")

    monkeypatch.setattr(os, "get_terminal_size", no_size)
    os.write(in_w, b"\x1b[24;80R")
    term = TerminalAppMode(fd_in=in_r, fd_out=out_w)
    assert term.get_window_size() == (24, 80)
    assert os.read(out_r, 100) == b"\x1b[999C\x1b[999B\x1b[6n"


def test_zero_sized_window_uses_probe(
    monkeypatch: pytest.MonkeyPatch, pipes: tuple[int, int, int, int]
) -> None:
    in_r, in_w, _, out_w = pipes
    monkeypatch.setattr(os, "get_terminal_size", lambda fd: os.terminal_size((0, 0)))
    os.write(in_w, b"\x1b[50;132R")
    assert TerminalAppMode(fd_in=in_r, fd_out=out_w).get_window_size() == (50, 132)


def test_malformed_cursor_reply_raises(pipes: tuple[int, int, int, int]) -> None:
    in_r, in_w, _, out_w = pipes
    os.write(in_w, b"\x1b[24xR")
    with pytest.raises(TerminalError):
        TerminalAppMode(fd_in=in_r, fd_out=out_w).get_cursor_position()
