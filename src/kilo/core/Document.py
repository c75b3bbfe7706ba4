# kilo/core/Document.py
"""kilo.core.Document
======================

The row store: an ordered list of `Row` objects, a modification counter and
the optional filename the document is bound to.

All structural and content changes go through the methods below so that every
change bumps `dirty` and keeps each row's render form current. Positions that
are out of range are ignored rather than raising, which keeps a stray caller
from corrupting the store.

Loading and saving convert between rows and a line-oriented byte stream: line
terminators are stripped on load and a single ``\\n`` is written after every
row on save.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

from kilo.core.Row import DEFAULT_TAB_STOP, Row

logger = logging.getLogger("kilo")


class Document:
    """Ordered collection of rows with a dirty counter.

    Attributes:
        rows (list[Row]): The document lines, in order.
        dirty (int): Number of changes since the last load or save.
        filename (Optional[str]): Path the document loads from and saves to.
        tab_stop (int): Tab stop handed to every row this document creates.
    """

    def __init__(
        self,
        lines: Optional[Iterable[bytes]] = None,
        filename: Optional[str] = None,
        tab_stop: int = DEFAULT_TAB_STOP,
    ) -> None:
        self.tab_stop = tab_stop
        self.filename = filename
        self.rows: list[Row] = [Row(line, tab_stop) for line in (lines or [])]
        self.dirty = 0

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def lines(self) -> list[bytes]:
        """Returns a copy of every row's literal content."""
        return [bytes(row.chars) for row in self.rows]

    # --- row operations ---
    def insert_row(self, at: int, text: bytes) -> None:
        if at < 0 or at > len(self.rows):
            logger.debug("insert_row: position %d outside [0, %d]; ignored.", at, len(self.rows))
            return
        self.rows.insert(at, Row(text, self.tab_stop))
        self.dirty += 1

    def delete_row(self, at: int) -> None:
        if at < 0 or at >= len(self.rows):
            logger.debug("delete_row: position %d outside [0, %d); ignored.", at, len(self.rows))
            return
        del self.rows[at]
        self.dirty += 1

    # --- content operations ---
    def row_insert_char(self, row: Row, at: int, ch: int) -> None:
        row.insert_char(at, ch)
        self.dirty += 1

    def row_delete_char(self, row: Row, at: int) -> None:
        if row.delete_char(at):
            self.dirty += 1

    def row_append_string(self, row: Row, data: bytes) -> None:
        row.append(data)
        self.dirty += 1

    def row_truncate(self, row: Row, at: int) -> bytes:
        tail = row.truncate(at)
        self.dirty += 1
        return tail

    # --- serialization ---
    def to_bytes(self) -> bytes:
        """Joins all rows, writing ``\\n`` after every row including the last."""
        return b"".join(bytes(row.chars) + b"\n" for row in self.rows)

    def load(self, filename: str) -> None:
        """Replaces the rows with the lines of `filename`.

        A missing file leaves an empty document bound to `filename`; any other
        ``OSError`` propagates to the caller.
        """
        self.filename = filename
        self.rows = []
        try:
            with open(filename, "rb") as f:
                for line in f:
                    self.rows.append(Row(line.rstrip(b"\r\n"), self.tab_stop))
        except FileNotFoundError:
            logger.info("'%s' does not exist yet; starting an empty document.", filename)
        self.dirty = 0
        logger.info("Loaded '%s' (%d rows).", filename, len(self.rows))

    def save(self, filename: Optional[str] = None) -> int:
        """Writes the document to `filename` (or the bound filename).

        The target is truncated and overwritten in place; there is no backup
        or temp-file rename.

        Returns:
            int: Number of bytes written.

        Raises:
            OSError: When the file cannot be opened or written.
            ValueError: When no filename is known.
        """
        target = filename or self.filename
        if not target:
            raise ValueError("Document has no filename.")
        data = self.to_bytes()
        fd = os.open(target, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            os.ftruncate(fd, len(data))
            written = 0
            while written < len(data):
                written += os.write(fd, data[written:])
        finally:
            os.close(fd)
        self.filename = target
        self.dirty = 0
        logger.info("Wrote %d bytes to '%s'.", len(data), target)
        return len(data)
