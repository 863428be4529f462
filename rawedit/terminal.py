"""Terminal interface using Blessed for display and raw input mode."""

import sys
from contextlib import contextmanager
from typing import Optional

import blessed


class TerminalInterface:
    """Handles terminal setup, size queries and frame output using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        self.write(self.term.enter_fullscreen + self.term.clear)
        self.is_fullscreen = True

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            self.write(self.term.exit_fullscreen + self.term.normal_cursor)
            self.is_fullscreen = False

    @contextmanager
    def raw_mode(self):
        """Non-canonical, non-echoing input for the duration of the block.

        Raw mode also turns off XON/XOFF flow control and signal keys, so
        Ctrl-S, Ctrl-Q and Ctrl-C reach the editor as ordinary bytes.
        """
        with self.term.raw():
            yield

    def write(self, data: str):
        """Write a frame (or any control sequence) and flush."""
        stream = self.term.stream or sys.stdout
        stream.write(data)
        stream.flush()

    @property
    def input_fd(self) -> int:
        return sys.stdin.fileno()

    def size(self) -> tuple[int, int]:
        """Current terminal (width, height), queried fresh each call."""
        return self.term.width, self.term.height

