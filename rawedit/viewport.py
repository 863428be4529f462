"""Cursor and scroll state for the visible window of a TextBuffer."""

import logging
from dataclasses import dataclass

from .buffer import CursorPosition, TextBuffer

logger = logging.getLogger(__name__)

# Rows reserved below the text area
STATUS_BAR_HEIGHT = 1


@dataclass
class Viewport:
    """Top-left visible buffer cell plus the size of the text area."""
    row_offset: int = 0
    col_offset: int = 0
    width: int = 80
    height: int = 23

    def recompute(self, cursor: CursorPosition):
        """Scroll the minimum amount needed to keep ``cursor`` visible."""
        if cursor.row < self.row_offset:
            self.row_offset = cursor.row
        if cursor.row >= self.row_offset + self.height:
            self.row_offset = cursor.row - self.height + 1
        if cursor.column < self.col_offset:
            self.col_offset = cursor.column
        if cursor.column >= self.col_offset + self.width:
            self.col_offset = cursor.column - self.width + 1

    def contains(self, cursor: CursorPosition) -> bool:
        return (self.row_offset <= cursor.row < self.row_offset + self.height
                and self.col_offset <= cursor.column < self.col_offset + self.width)


class ViewportCursor:
    """Owns the cursor and keeps the viewport aligned with it.

    Movement only ever touches the cursor; the viewport is derived from it
    by ``recompute`` after every change, so the two cannot drift apart.
    """

    def __init__(self, buffer: TextBuffer, terminal_width: int = 80, terminal_height: int = 24):
        self.buffer = buffer
        self.cursor = CursorPosition()
        self.viewport = Viewport()
        self.resize(terminal_width, terminal_height)

    @property
    def text_width(self) -> int:
        return self.viewport.width

    @property
    def text_height(self) -> int:
        return self.viewport.height

    def resize(self, terminal_width: int, terminal_height: int):
        """Adopt a new terminal size and realign immediately."""
        self.viewport.width = max(1, terminal_width)
        self.viewport.height = max(1, terminal_height - STATUS_BAR_HEIGHT)
        logger.debug("Viewport resized to %dx%d", self.viewport.width, self.viewport.height)
        self.recompute()

    def recompute(self):
        self.viewport.recompute(self.cursor)

    def _clamp_column(self):
        self.cursor.column = max(0, min(self.cursor.column, self.buffer.line_length(self.cursor.row)))

    def set_cursor(self, position: CursorPosition):
        """Adopt a position returned by a buffer operation."""
        row = max(0, min(position.row, self.buffer.row_count() - 1))
        self.cursor = CursorPosition(position.column, row)
        self._clamp_column()
        self.recompute()

    def reset(self):
        """Back to the top-left corner, e.g. after loading a new document."""
        self.cursor = CursorPosition()
        self.viewport.row_offset = 0
        self.viewport.col_offset = 0
        self.recompute()

    def move_up(self):
        if self.cursor.row > 0:
            self.cursor.row -= 1
            self._clamp_column()
        self.recompute()

    def move_down(self):
        if self.cursor.row < self.buffer.row_count() - 1:
            self.cursor.row += 1
            self._clamp_column()
        self.recompute()

    def move_left(self):
        if self.cursor.column > 0:
            self.cursor.column -= 1
        self.recompute()

    def move_right(self):
        if self.cursor.column < self.buffer.line_length(self.cursor.row):
            self.cursor.column += 1
        self.recompute()

    def screen_position(self) -> tuple[int, int]:
        """Cursor as a 0-indexed (y, x) screen cell."""
        return (self.cursor.row - self.viewport.row_offset,
                self.cursor.column - self.viewport.col_offset)
