from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass
class CursorPosition:
    """A position in buffer coordinates (0-indexed)."""
    column: int = 0
    row: int = 0


class TextBuffer:
    """An ordered list of text rows.

    The buffer always holds at least one row, rows never contain a newline
    and columns count characters, not bytes. Operations that take a row
    index raise IndexError for a row that does not exist; the caller is
    responsible for keeping its cursor valid.
    """

    rows: list[str]

    def __init__(self, lines: Optional[Iterable[str]] = None):
        self.rows = [""]
        if lines is not None:
            self.replace_lines(lines)

    def _check_row(self, row: int):
        if not 0 <= row < len(self.rows):
            raise IndexError(f"row {row} out of range (0..{len(self.rows) - 1})")

    @staticmethod
    def _check_char(ch: str):
        if len(ch) != 1 or ch in "\r\n":
            raise ValueError(f"expected a single non-newline character, got {ch!r}")

    def row_count(self) -> int:
        return len(self.rows)

    def line_length(self, row: int) -> int:
        self._check_row(row)
        return len(self.rows[row])

    def line(self, row: int) -> str:
        self._check_row(row)
        return self.rows[row]

    def lines(self) -> list[str]:
        return list(self.rows)

    def is_initial(self) -> bool:
        """True for an empty document (a single empty row)."""
        return len(self.rows) == 1 and self.rows[0] == ""

    def replace_lines(self, lines: Iterable[str]):
        """Replace the whole document, e.g. after loading a file."""
        new_rows = list(lines)
        for text in new_rows:
            if "\n" in text:
                raise ValueError("buffer rows cannot contain newlines")
        self.rows = new_rows or [""]

    def to_text(self) -> str:
        return "\n".join(self.rows)

    def insert_char(self, row: int, col: int, ch: str) -> CursorPosition:
        """Insert ``ch`` at ``col`` of ``row``.

        ``col`` is clamped to the row. Missing rows past the end are created
        empty. Returns the position just after the inserted character.
        """
        self._check_char(ch)
        if row < 0:
            raise IndexError(f"row {row} out of range")
        while row >= len(self.rows):
            self.rows.append("")

        text = self.rows[row]
        col = max(0, min(col, len(text)))
        self.rows[row] = text[:col] + ch + text[col:]
        return CursorPosition(col + 1, row)

    def delete_char_before(self, row: int, col: int) -> CursorPosition:
        """Backspace at (col, row).

        Removes the character before ``col``, or joins the row onto the
        previous one when ``col`` is 0. Returns the cursor position to adopt.
        """
        self._check_row(row)
        text = self.rows[row]
        col = max(0, min(col, len(text)))

        if col > 0:
            self.rows[row] = text[:col - 1] + text[col:]
            return CursorPosition(col - 1, row)
        if row == 0:
            return CursorPosition(0, 0)

        previous = self.rows[row - 1]
        self.rows[row - 1] = previous + text
        del self.rows[row]
        return CursorPosition(len(previous), row - 1)

    def split_line(self, row: int, col: int) -> CursorPosition:
        """Break ``row`` at ``col``; the tail moves to a new row below.

        Splitting at column 0 inserts a blank row above the current one.
        """
        self._check_row(row)
        text = self.rows[row]
        col = max(0, min(col, len(text)))

        if col == 0:
            self.rows.insert(row, "")
        else:
            self.rows[row] = text[:col]
            self.rows.insert(row + 1, text[col:])
        return CursorPosition(0, row + 1)
