# kilo/core/Viewport.py
"""Viewport offsets and the scroll rule that keeps the cursor on screen."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Viewport:
    """First visible document row and render column."""

    row_offset: int = 0
    col_offset: int = 0

    def follow(self, cy: int, rx: int, screen_rows: int, screen_cols: int) -> "Viewport":
        """Returns the offsets that put (cy, rx) inside the visible window.

        Each axis is handled independently: a cursor above/left of the window
        snaps the offset to the cursor; a cursor at or beyond the far edge
        snaps the offset so the cursor sits on the last visible line/column.
        """
        row_offset = self.row_offset
        col_offset = self.col_offset

        if cy < row_offset:
            row_offset = cy
        if cy >= row_offset + screen_rows:
            row_offset = cy - screen_rows + 1

        if rx < col_offset:
            col_offset = rx
        if rx >= col_offset + screen_cols:
            col_offset = rx - screen_cols + 1

        return Viewport(row_offset, col_offset)
