# tests/conftest.py
"""Pytest configuration with shared fixtures for the kilo editor tests.

Fixtures build editors on top of `FakeTerminal` (see `tests/stubs.py`), so
no test needs a real TTY or raw mode.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from kilo.core.Document import Document
from kilo.core.Kilo import Kilo
from kilo.utils.utils import DEFAULT_CONFIG, deep_merge
from tests.stubs import FakeTerminal


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point `Path.home()` at a temp dir so no test touches ~/.config/kilo."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.delenv("KILO_KEYTRACE", raising=False)
    monkeypatch.delenv("KILO_LOG_LEVEL", raising=False)
    return home


@pytest.fixture
def config() -> dict[str, Any]:
    """A private copy of the built-in configuration."""
    return deep_merge({}, DEFAULT_CONFIG)


@pytest.fixture
def terminal() -> FakeTerminal:
    """An 80x26 scripted terminal (24 text rows once the bars are reserved)."""
    return FakeTerminal()


@pytest.fixture
def editor(terminal: FakeTerminal, config: dict[str, Any]) -> Kilo:
    """A real `Kilo` on an empty, unnamed document."""
    return Kilo(terminal, config)


@pytest.fixture
def make_editor(
    terminal: FakeTerminal, config: dict[str, Any]
) -> Callable[..., Kilo]:
    """Factory: `make_editor([b"line", ...], keys=b"...")`.

    The document is installed with a clean dirty counter and the given keys
    are queued on the editor's terminal.
    """

    def _make(
        lines: Optional[list[bytes]] = None,
        keys: bytes = b"",
        filename: Optional[str] = None,
    ) -> Kilo:
        ed = Kilo(terminal, config)
        ed.document = Document(lines, filename=filename, tab_stop=ed.tab_stop)
        terminal.feed(keys)
        return ed

    return _make
